# spritemesh - 2D sprite mesh authoring: outline tracing, constrained triangulation, UVs
# noqa imports for re-export
from .utils import timed, SIMPLIFY_TOLERANCE, SELECT_DISTANCE, ALPHA_THRESHOLD  # noqa: F401
from .errors import SpriteMeshError, InvalidInputError, InvalidConfigurationError, TriangulationTopologyError  # noqa: F401
from .geometry import AffineMapping, point_segment_distance, bounding_box  # noqa: F401
from .sprite import SpriteMetrics  # noqa: F401
from .polygon_graph import PolygonGraph, IndexedGraph  # noqa: F401
from .mesh_utils import RawMesh, export_mesh  # noqa: F401
from .boundary import AlphaBitmap, trace_outline, simplify_polygon, rescale_polygon, extract_boundary  # noqa: F401
from .triangulation import triangulate  # noqa: F401
from .projection import project_uvs, apply_uvs  # noqa: F401
from .subdivision import subdivide, reimport  # noqa: F401
from .session import MeshEditor  # noqa: F401

__all__ = [
    'timed', 'SIMPLIFY_TOLERANCE', 'SELECT_DISTANCE', 'ALPHA_THRESHOLD',
    'SpriteMeshError', 'InvalidInputError', 'InvalidConfigurationError', 'TriangulationTopologyError',
    'AffineMapping', 'point_segment_distance', 'bounding_box',
    'SpriteMetrics',
    'PolygonGraph', 'IndexedGraph',
    'RawMesh', 'export_mesh',
    'AlphaBitmap', 'trace_outline', 'simplify_polygon', 'rescale_polygon', 'extract_boundary',
    'triangulate',
    'project_uvs', 'apply_uvs',
    'subdivide', 'reimport',
    'MeshEditor',
]
