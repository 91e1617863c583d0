import logging

from .boundary import extract_boundary
from .errors import InvalidConfigurationError
from .geometry import point_segment_distance
from .polygon_graph import PolygonGraph
from .projection import apply_uvs
from .subdivision import reimport, subdivide
from .triangulation import triangulate
from .utils import SELECT_DISTANCE, SIMPLIFY_TOLERANCE, UV_BOUNDS_SPACE

logger = logging.getLogger(__name__)


class MeshEditor:
    """
    Editing session for one sprite's mesh.

    Owns the polygon graph, the sprite's affine mapping and texture metrics.
    ``click`` maps pointer presses with modifier keys to graph edits:

    - alt: toggle a hole at the point
    - near a vertex: select it, or delete it with shift
    - with a vertex selected, near the ghost edge to another vertex: add
      that segment with control, remove it with shift
    - control anywhere else: add a vertex and select it

    The mesh is rebuilt on demand by ``build_mesh`` and cached until the
    graph is edited again.
    """

    def __init__(self, affine, metrics, select_distance=SELECT_DISTANCE, bounds_space=UV_BOUNDS_SPACE,
                 world_bounds_min=None, **triangulate_options):
        if affine is None:
            raise InvalidConfigurationError('MeshEditor', "an affine mapping is required")
        self.affine = affine
        self.metrics = metrics
        self.select_distance = select_distance
        self.bounds_space = bounds_space
        self.world_bounds_min = world_bounds_min
        self.triangulate_options = triangulate_options
        self.graph = PolygonGraph()
        self.selected = None
        self._mesh = None

    @property
    def dirty(self):
        return self.graph.dirty or self._mesh is None

    def _selection(self):
        if self.graph.is_vertex_deleted(self.selected):
            self.selected = None
        return self.selected

    def _replace_graph(self, graph, mesh=None):
        self.graph = graph
        self.selected = None
        self._mesh = mesh
        graph.dirty = mesh is None

    def _project(self, mesh):
        return apply_uvs(mesh, self.metrics, affine=self.affine, bounds_space=self.bounds_space,
                         world_bounds_min=self.world_bounds_min)

    def ghost_segments(self, point):
        """
        Candidate edges from the selected vertex to every other vertex.

        Returns ``((selected, other), near)`` pairs; ``near`` marks the
        candidate closest to ``point`` if it lies within the pick distance.
        """
        selected = self._selection()
        if selected is None:
            return []
        origin = self.graph.position(selected)
        candidates = []
        for ref in self.graph.live_vertices():
            if ref != selected:
                dist = point_segment_distance(point, self.graph.position(ref), origin)
                candidates.append((ref, dist))
        near = min(candidates, key=lambda c: c[1], default=(None, None))
        if near[0] is not None and near[1] > self.select_distance:
            near = (None, None)
        return [((selected, ref), ref == near[0]) for ref, _ in candidates]

    def click(self, point, shift=False, control=False, alt=False):
        """Applies one pointer press. Returns the action taken, or None."""
        graph = self.graph
        tolerance = self.select_distance

        if alt:
            added = graph.add_or_toggle_hole(point, tolerance)
            return 'add_hole' if added else 'remove_hole'

        vertex = graph.nearest_vertex(point, tolerance)
        if vertex is not None:
            if shift:
                graph.remove_vertex(vertex)
                self.selected = None
                return 'remove_vertex'
            if not control:
                self.selected = vertex
                return 'select'

        selected = self._selection()
        if selected is not None:
            target = next((other for (_, other), near in self.ghost_segments(point) if near), None)
            if target is not None:
                if shift:
                    segment = graph.segment_between(selected, target)
                    if segment is None:
                        return None
                    graph.remove_segment(segment)
                    return 'remove_segment'
                if control:
                    graph.add_segment(selected, target)
                    return 'add_segment'

        if vertex is not None:
            # never stack a second vertex on an existing one
            self.selected = vertex
            return 'select'
        if control:
            self.selected = graph.add_vertex(point)
            return 'add_vertex'
        return None

    def move_vertex(self, ref, position):
        self.graph.move_vertex(ref, position)

    def reset(self):
        self.graph.reset()
        self.selected = None
        self._mesh = None

    def load_boundary(self, bitmap, simplify_tolerance=SIMPLIFY_TOLERANCE):
        """Replaces the graph with the traced outline of ``bitmap``."""
        graph = extract_boundary(bitmap, self.metrics, self.affine, simplify_tolerance=simplify_tolerance)
        self._replace_graph(graph)
        logger.info(f"Loaded outline with {len(graph)} vertices")
        return graph

    def build_mesh(self):
        """Triangulates the graph and projects UVs, reusing the last mesh when nothing changed."""
        if not self.dirty:
            return self._mesh.copy()
        mesh = triangulate(self.graph, self.affine, **self.triangulate_options)
        mesh = self._project(mesh)
        self._mesh = mesh
        self.graph.dirty = False
        return mesh.copy()

    def subdivide(self, factor):
        """Subdivides the current mesh and continues editing from its edges."""
        mesh = subdivide(self.build_mesh(), factor)
        mesh = self._project(mesh)
        self._replace_graph(reimport(mesh, self.affine), mesh=mesh)
        return mesh.copy()

    def reimport_mesh(self, mesh):
        self._replace_graph(reimport(mesh, self.affine))
        return self.graph

    def save(self, sink):
        """Hands the current mesh to ``sink``, any callable taking a RawMesh."""
        return sink(self.build_mesh())
