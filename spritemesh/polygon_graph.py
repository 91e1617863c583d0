import logging
import math
from typing import NamedTuple

import numpy as np

from .errors import InvalidInputError
from .geometry import point_distance, point_segment_distance

logger = logging.getLogger(__name__)


class Vertex:
    __slots__ = ('position', 'deleted')

    def __init__(self, position):
        self.position = position
        self.deleted = False


class Segment:
    __slots__ = ('first', 'second', 'deleted')

    def __init__(self, first, second):
        self.first = first
        self.second = second
        self.deleted = False


class IndexedGraph(NamedTuple):
    """Contiguous numbering of the live graph, valid until the next edit."""
    index_of: dict
    vertices: np.ndarray  # (N, 2)
    segments: np.ndarray  # (S, 2) indices into vertices
    holes: np.ndarray  # (H, 2)


def _pair_key(a, b):
    return (a, b) if a < b else (b, a)


def _as_point(position, operation="add_vertex"):
    x, y = float(position[0]), float(position[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidInputError(operation, f"non-finite position ({x}, {y})")
    return x, y


class PolygonGraph:
    """
    Editable vertex/segment/hole graph that is fed to the triangulator.

    Vertices and segments live in arenas and are addressed by integer
    handles that stay valid forever. Deleting flips the tombstone in the
    arena slot and drops the handle from the live sequence; anything still
    holding the handle must check ``is_vertex_deleted``/``is_segment_deleted``
    before use. A segment whose endpoint was deleted reports itself deleted
    without being touched.
    """

    def __init__(self):
        self._vertices = []
        self._segments = []
        self._live_vertices = []
        self._live_segments = []
        self._pairs = {}
        self.holes = []
        self.dirty = False

    def __len__(self):
        return len(self._live_vertices)

    def __repr__(self):
        return (f"PolygonGraph(vertices={len(self._live_vertices)}, "
                f"segments={len(self.live_segments())}, holes={len(self.holes)})")

    def reset(self):
        """Drops every vertex, segment and hole. Old handles become deleted."""
        for vertex in self._vertices:
            vertex.deleted = True
        for segment in self._segments:
            segment.deleted = True
        self._live_vertices.clear()
        self._live_segments.clear()
        self._pairs.clear()
        self.holes.clear()
        self.dirty = True

    # vertices
    def add_vertex(self, position) -> int:
        self._vertices.append(Vertex(_as_point(position)))
        ref = len(self._vertices) - 1
        self._live_vertices.append(ref)
        self.dirty = True
        return ref

    def remove_vertex(self, ref):
        if self.is_vertex_deleted(ref):
            return
        self._vertices[ref].deleted = True
        self._live_vertices.remove(ref)
        self.dirty = True

    def move_vertex(self, ref, position):
        if self.is_vertex_deleted(ref):
            return
        self._vertices[ref].position = _as_point(position, "move_vertex")
        self.dirty = True

    def is_vertex_deleted(self, ref):
        if ref is None or not 0 <= ref < len(self._vertices):
            return True
        return self._vertices[ref].deleted

    def position(self, ref):
        return self._vertices[ref].position

    def live_vertices(self):
        return list(self._live_vertices)

    def positions(self):
        return np.array([self._vertices[v].position for v in self._live_vertices], dtype=float).reshape(-1, 2)

    # segments
    def add_segment(self, a, b):
        """
        Adds the undirected segment ``{a, b}``.

        Returns the handle of the live segment joining the pair, which is the
        existing one if ``{a, b}`` or ``{b, a}`` was already added, or ``None``
        when either endpoint is deleted.
        """
        if a == b:
            raise InvalidInputError('add_segment', f"segment endpoints must differ (vertex {a})")
        if self.is_vertex_deleted(a) or self.is_vertex_deleted(b):
            return None
        key = _pair_key(a, b)
        existing = self._pairs.get(key)
        if existing is not None and not self.is_segment_deleted(existing):
            return existing
        self._segments.append(Segment(a, b))
        ref = len(self._segments) - 1
        self._live_segments.append(ref)
        self._pairs[key] = ref
        self.dirty = True
        return ref

    def remove_segment(self, ref):
        if ref is None or not 0 <= ref < len(self._segments) or self._segments[ref].deleted:
            return
        segment = self._segments[ref]
        segment.deleted = True
        self._live_segments.remove(ref)
        key = _pair_key(segment.first, segment.second)
        if self._pairs.get(key) == ref:
            del self._pairs[key]
        self.dirty = True

    def is_segment_deleted(self, ref):
        if ref is None or not 0 <= ref < len(self._segments):
            return True
        segment = self._segments[ref]
        return (segment.deleted
                or self._vertices[segment.first].deleted
                or self._vertices[segment.second].deleted)

    def endpoints(self, ref):
        segment = self._segments[ref]
        return segment.first, segment.second

    def segment_between(self, a, b):
        if a == b:
            return None
        ref = self._pairs.get(_pair_key(a, b))
        if ref is None or self.is_segment_deleted(ref):
            return None
        return ref

    def live_segments(self):
        return [s for s in self._live_segments if not self.is_segment_deleted(s)]

    # holes
    def add_or_toggle_hole(self, point, tolerance):
        """Removes the first hole within ``tolerance`` of ``point``, or adds one there.

        Returns True when a hole was added.
        """
        for i, hole in enumerate(self.holes):
            if point_distance(hole, point) <= tolerance:
                del self.holes[i]
                self.dirty = True
                return False
        self.holes.append(_as_point(point, "add_or_toggle_hole"))
        self.dirty = True
        return True

    # picking
    def nearest_vertex(self, point, tolerance):
        best, best_dist = None, math.inf
        for ref in self._live_vertices:
            dist = point_distance(self._vertices[ref].position, point)
            if dist < best_dist:
                best, best_dist = ref, dist
        return best if best_dist <= tolerance else None

    def nearest_segment(self, point, tolerance):
        best, best_dist = None, math.inf
        for ref in self.live_segments():
            segment = self._segments[ref]
            dist = point_segment_distance(
                point,
                self._vertices[segment.first].position,
                self._vertices[segment.second].position,
            )
            if dist < best_dist:
                best, best_dist = ref, dist
        return best if best_dist <= tolerance else None

    def reindex(self) -> IndexedGraph:
        """
        Numbers the live vertices 0..N-1 in live order.

        Must run right before triangulating; any edit afterwards invalidates
        the numbering.
        """
        index_of = {ref: i for i, ref in enumerate(self._live_vertices)}
        segments = [
            (index_of[self._segments[s].first], index_of[self._segments[s].second])
            for s in self.live_segments()
        ]
        logger.debug(f"Reindexed {len(index_of)} vertices, {len(segments)} segments, {len(self.holes)} holes")
        return IndexedGraph(
            index_of=index_of,
            vertices=self.positions(),
            segments=np.array(segments, dtype=np.int32).reshape(-1, 2),
            holes=np.array(self.holes, dtype=float).reshape(-1, 2),
        )

    @classmethod
    def from_loop(cls, points):
        """Builds a single closed loop: one vertex per point, one segment per consecutive pair."""
        graph = cls()
        refs = [graph.add_vertex(p) for p in points]
        for i, ref in enumerate(refs):
            nxt = refs[(i + 1) % len(refs)]
            if nxt != ref:
                graph.add_segment(ref, nxt)
        return graph
