import numpy as np
import trimesh


class RawMesh:
    """
    Triangulation output: 2D mesh-local vertices, index triples and optional UVs.

    A mesh is an independent value; editing it never touches the graph it was
    generated from.
    """

    def __init__(self, vertices=None, triangles=None, uvs=None):
        self.vertices = np.asarray(vertices if vertices is not None else [], dtype=float).reshape(-1, 2)
        self.triangles = np.asarray(triangles if triangles is not None else [], dtype=np.int64).reshape(-1, 3)
        self.uvs = None if uvs is None else np.asarray(uvs, dtype=float).reshape(-1, 2)

    def __repr__(self):
        return (f"RawMesh(vertices={len(self.vertices)}, triangles={len(self.triangles)}, "
                f"uvs={'yes' if self.uvs is not None else 'no'})")

    @property
    def is_empty(self):
        return len(self.triangles) == 0

    def copy(self):
        return RawMesh(self.vertices.copy(), self.triangles.copy(),
                       None if self.uvs is None else self.uvs.copy())

    def with_uvs(self, uvs):
        return RawMesh(self.vertices.copy(), self.triangles.copy(), uvs)

    def edges(self):
        """Distinct undirected triangle edges as an ``(E, 2)`` array, smaller index first."""
        if self.is_empty:
            return np.zeros((0, 2), dtype=np.int64)
        return self.to_trimesh().edges_unique

    def to_trimesh(self):
        """Lifts the mesh to a flat trimesh (z = 0) with the UVs as texture visuals."""
        vertices = np.column_stack([self.vertices, np.zeros(len(self.vertices))])
        visual = None
        if self.uvs is not None:
            visual = trimesh.visual.TextureVisuals(uv=self.uvs)
        return trimesh.Trimesh(vertices=vertices, faces=self.triangles, visual=visual, process=False)


def signed_areas(vertices, triangles):
    """Twice the signed area of every triangle, positive for counter-clockwise."""
    a = vertices[triangles[:, 0]]
    b = vertices[triangles[:, 1]]
    c = vertices[triangles[:, 2]]
    return (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])


def orient_ccw(vertices, triangles):
    """Flips clockwise triangles so the whole mesh winds counter-clockwise."""
    tris = np.array(triangles, dtype=np.int64).reshape(-1, 3)
    if len(tris) == 0:
        return tris
    flip = signed_areas(vertices, tris) < 0.0
    if np.any(flip):
        tris[flip] = tris[flip][:, [0, 2, 1]]
    return tris


def export_mesh(mesh, path, file_type=None):
    """Default mesh sink: writes the mesh with trimesh in any format it supports."""
    return mesh.to_trimesh().export(file_obj=str(path), file_type=file_type)
