import logging

import numpy as np
import shapely
import triangle as tr

from .errors import InvalidConfigurationError, InvalidInputError, TriangulationTopologyError
from .mesh_utils import RawMesh, orient_ccw
from .utils import POSITION_EPSILON, TRIANGLE_FLAGS, timed

logger = logging.getLogger(__name__)


def find_duplicate_positions(vertices, epsilon=POSITION_EPSILON):
    """Returns index pairs of vertices that share a position."""
    if len(vertices) < 2:
        return []
    tree = shapely.STRtree(shapely.points(vertices))
    left, right = tree.query(shapely.points(vertices), predicate='dwithin', distance=epsilon)
    return [(int(a), int(b)) for a, b in zip(left, right) if a < b]


def find_crossing_segments(vertices, segments):
    """
    Returns index pairs of segments that cross each other or partly overlap
    along a stretch. Segments that only touch at an endpoint are fine, and so
    is a collinear segment lying wholly inside another: triangle splits the
    longer one at the inner endpoints.
    """
    if len(segments) < 2:
        return []
    lines = shapely.linestrings(vertices[np.asarray(segments)])
    tree = shapely.STRtree(lines)
    pairs = set()
    for predicate in ('crosses', 'overlaps'):
        left, right = tree.query(lines, predicate=predicate)
        pairs.update((int(min(a, b)), int(max(a, b))) for a, b in zip(left, right) if a != b)
    return sorted(pairs)


def _triangle_flags(has_segments, min_angle=None, max_area=None, conforming=False, flags=TRIANGLE_FLAGS):
    opts = flags
    if not has_segments and 'c' not in opts:
        opts += 'c'
    if conforming:
        opts += 'D'
    if min_angle is not None:
        opts += f'q{min_angle:g}'
    if max_area is not None:
        opts += f'a{max_area:g}'
    return opts + 'Q'


def find_uncovered_segments(vertices, triangles, segments, epsilon=POSITION_EPSILON):
    """
    Returns indices of segments that are missing from a triangulation.

    A segment is covered when it is a triangle edge itself or when the used
    vertices lying on it, taken in order, are joined by triangle edges.
    """
    vertices = np.asarray(vertices, dtype=float).reshape(-1, 2)
    mesh = RawMesh(vertices, triangles)
    edges = {tuple(e) for e in np.sort(mesh.edges(), axis=1).tolist()}
    used = np.unique(mesh.triangles)

    missing = []
    for i, (a, b) in enumerate(np.asarray(segments, dtype=np.int64).reshape(-1, 2).tolist()):
        if (min(a, b), max(a, b)) in edges:
            continue
        if a not in used or b not in used:
            missing.append(i)
            continue
        start = vertices[a]
        direction = vertices[b] - start
        length = float(np.hypot(*direction))
        tol = epsilon * max(1.0, length)
        rel = vertices[used] - start
        along = rel @ direction / length
        off = np.abs(direction[0] * rel[:, 1] - direction[1] * rel[:, 0]) / length
        on_segment = (off <= tol) & (along >= -tol) & (along <= length + tol)
        chain = used[on_segment][np.argsort(along[on_segment])].tolist()
        if any((min(p, q), max(p, q)) not in edges for p, q in zip(chain, chain[1:])):
            missing.append(i)
    return missing


def _run_triangle(data, opts):
    try:
        result = tr.triangulate(data, opts)
    except Exception as e:
        raise TriangulationTopologyError(
            'triangulate',
            f"triangle library rejected the graph ({e}); most likely some edges intersect",
        ) from e
    world = np.asarray(result.get('vertices', data['vertices']), dtype=float).reshape(-1, 2)
    triangles = np.asarray(result.get('triangles', np.zeros((0, 3))), dtype=np.int64).reshape(-1, 3)
    return world, triangles


def validate_topology(indexed):
    """Rejects input the constrained triangulation cannot honour."""
    duplicates = find_duplicate_positions(indexed.vertices)
    if duplicates:
        a, b = duplicates[0]
        logger.warning(f"{len(duplicates)} duplicate vertex positions, first at {tuple(indexed.vertices[a].tolist())}")
        raise TriangulationTopologyError(
            'triangulate',
            f"vertices {a} and {b} share position {tuple(indexed.vertices[a].tolist())}; merge or move one of them",
        )
    crossings = find_crossing_segments(indexed.vertices, indexed.segments)
    if crossings:
        s, t = crossings[0]
        logger.warning(f"{len(crossings)} intersecting segment pairs")
        raise TriangulationTopologyError(
            'triangulate',
            f"segments {tuple(indexed.segments[s].tolist())} and {tuple(indexed.segments[t].tolist())} intersect; "
            f"remove crossing edges or lower the simplify tolerance",
        )


@timed
def triangulate(graph, affine, min_angle=None, max_area=None, conforming=False, flags=TRIANGLE_FLAGS):
    """
    Constrained Delaunay triangulation of a polygon graph.

    The graph is reindexed first. Every live segment ends up as a mesh edge
    (or a chain of collinear edges when Steiner points are allowed through
    ``min_angle``, ``max_area`` or ``conforming``), and the region around
    every hole seed is carved out. The returned vertices are in mesh-local
    space and every triangle winds counter-clockwise there.
    """
    if affine is None:
        raise InvalidConfigurationError('triangulate', "no affine mapping to mesh space was provided")

    indexed = graph.reindex()
    if len(indexed.vertices) == 0:
        return RawMesh()
    if len(indexed.vertices) < 3:
        raise InvalidInputError('triangulate', f"need at least 3 vertices, got {len(indexed.vertices)}")

    validate_topology(indexed)

    data = {'vertices': indexed.vertices}
    if len(indexed.segments):
        data['segments'] = indexed.segments
    if len(indexed.holes):
        data['holes'] = indexed.holes
    opts = _triangle_flags(len(indexed.segments) > 0, min_angle, max_area, conforming, flags)

    world, triangles = _run_triangle(data, opts)

    uncovered = find_uncovered_segments(world, triangles, indexed.segments)
    if uncovered and len(indexed.holes):
        # segments bordering a carved hole region may vanish with it
        unholed = {k: v for k, v in data.items() if k != 'holes'}
        uncovered = find_uncovered_segments(*_run_triangle(unholed, opts), indexed.segments)
    if uncovered:
        first = tuple(indexed.segments[uncovered[0]].tolist())
        logger.warning(f"{len(uncovered)} segments left out of the triangulation")
        raise TriangulationTopologyError(
            'triangulate',
            f"{len(uncovered)} segments (first {first}) do not enclose a region and were dropped; "
            f"close them into a loop or remove them",
        )

    local = affine.to_mesh_space(world).reshape(-1, 2)
    triangles = orient_ccw(local, triangles)

    steiner = len(world) - len(indexed.vertices)
    logger.debug(f"Triangulated {len(indexed.vertices)} vertices, {len(indexed.segments)} segments, "
                 f"{len(indexed.holes)} holes into {len(triangles)} triangles ({steiner} Steiner points)")
    return RawMesh(local, triangles)
