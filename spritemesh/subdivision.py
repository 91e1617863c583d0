import logging

import numpy as np

from .errors import InvalidConfigurationError, InvalidInputError
from .mesh_utils import RawMesh
from .polygon_graph import PolygonGraph
from .utils import timed

logger = logging.getLogger(__name__)


@timed
def subdivide(mesh, factor):
    """
    Splits every triangle edge into ``factor`` equal parts and fills each
    triangle with ``factor**2`` smaller ones of the same winding.

    Original vertices keep their indices; points on shared edges are created
    once. The result carries no UVs.
    """
    if isinstance(factor, bool) or not isinstance(factor, (int, np.integer)) or factor < 1:
        raise InvalidInputError('subdivide', f"factor must be an integer >= 1, got {factor!r}")
    n = int(factor)
    vertices = [tuple(v) for v in mesh.vertices]
    created = {}

    def grid_vertex(a, b, c, i, j):
        weights = {}
        for v, w in ((a, n - i - j), (b, i), (c, j)):
            if w:
                weights[v] = weights.get(v, 0) + w
        if len(weights) == 1:
            return next(iter(weights))
        key = tuple(sorted(weights.items()))
        index = created.get(key)
        if index is None:
            pos = sum(w * mesh.vertices[v] for v, w in key) / n
            vertices.append(tuple(pos))
            index = created[key] = len(vertices) - 1
        return index

    triangles = []
    for a, b, c in mesh.triangles:
        grid = {
            (i, j): grid_vertex(int(a), int(b), int(c), i, j)
            for i in range(n + 1) for j in range(n + 1 - i)
        }
        for i in range(n):
            for j in range(n - i):
                triangles.append((grid[i, j], grid[i + 1, j], grid[i, j + 1]))
                if i + j < n - 1:
                    triangles.append((grid[i + 1, j], grid[i + 1, j + 1], grid[i, j + 1]))

    logger.debug(f"Subdivided {len(mesh.triangles)} triangles by {n} into {len(triangles)} triangles, "
                 f"{len(vertices)} vertices")
    return RawMesh(vertices, triangles)


def reimport(mesh, affine):
    """
    Turns a triangle mesh back into an editable polygon graph.

    One vertex per mesh vertex (mapped into editing space), one segment per
    distinct triangle edge, no holes.
    """
    if affine is None:
        raise InvalidConfigurationError('reimport', "no affine mapping to editing space was provided")
    graph = PolygonGraph()
    refs = [graph.add_vertex(p) for p in affine.to_world_space(mesh.vertices).reshape(-1, 2)]
    for a, b in mesh.edges():
        if a != b:
            graph.add_segment(refs[a], refs[b])
    logger.debug(f"Reimported {len(refs)} vertices and {len(graph.live_segments())} segments")
    return graph
