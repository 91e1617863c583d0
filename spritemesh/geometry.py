import math

import numpy as np

from .errors import InvalidConfigurationError


def point_segment_distance(point, a, b):
    """Euclidean distance from ``point`` to the closed segment ``a``-``b``."""
    px, py = point
    ax, ay = a
    bx, by = b
    dx = bx - ax
    dy = by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return math.hypot(px - ax, py - ay)
    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = min(max(t, 0.0), 1.0)
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def point_distance(a, b):
    return math.hypot(a[0] - b[0], a[1] - b[1])


def bounding_box(points):
    """Returns ``(min_x, min_y, max_x, max_y)`` of a point sequence."""
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(pts) == 0:
        return None
    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)
    return float(min_x), float(min_y), float(max_x), float(max_y)


def _apply(matrix, points):
    pts = np.asarray(points, dtype=float)
    single = pts.ndim == 1
    pts = pts.reshape(-1, 2)
    out = pts @ matrix[:2, :2].T + matrix[:2, 2]
    return out[0] if single else out


class AffineMapping:
    """
    Mesh-local to world (editing) space mapping of a sprite.

    ``matrix`` is a 3x3 homogeneous matrix taking mesh-local points to world
    points. Both directions accept a single ``(x, y)`` or an ``(N, 2)`` array
    and return numpy arrays of the same shape.
    """

    def __init__(self, matrix):
        matrix = np.asarray(matrix, dtype=float)
        if matrix.shape != (3, 3):
            raise InvalidConfigurationError('affine', f"expected a 3x3 matrix, got shape {matrix.shape}")
        det = np.linalg.det(matrix[:2, :2])
        if not np.isfinite(det) or abs(det) < 1e-12:
            raise InvalidConfigurationError('affine', "mapping is singular and has no inverse")
        self.matrix = matrix
        self._inverse = np.linalg.inv(matrix)

    @classmethod
    def identity(cls):
        return cls(np.eye(3))

    @classmethod
    def from_trs(cls, position=(0.0, 0.0), rotation_deg=0.0, scale=(1.0, 1.0)):
        """Builds translate * rotate * scale, the usual sprite transform order."""
        if np.isscalar(scale):
            scale = (scale, scale)
        theta = math.radians(rotation_deg)
        c, s = math.cos(theta), math.sin(theta)
        sx, sy = scale
        matrix = np.array([
            [c * sx, -s * sy, position[0]],
            [s * sx, c * sy, position[1]],
            [0.0, 0.0, 1.0],
        ])
        return cls(matrix)

    @property
    def inverse(self):
        return AffineMapping(self._inverse)

    @property
    def rotation_deg(self):
        return math.degrees(math.atan2(self.matrix[1, 0], self.matrix[0, 0]))

    def without_rotation(self):
        """Same translation and axis scales with the rotation removed."""
        sx = math.hypot(self.matrix[0, 0], self.matrix[1, 0])
        sy = math.hypot(self.matrix[0, 1], self.matrix[1, 1])
        if np.linalg.det(self.matrix[:2, :2]) < 0:
            sy = -sy
        return AffineMapping.from_trs(self.matrix[:2, 2], 0.0, (sx, sy))

    def to_world_space(self, points):
        return _apply(self.matrix, points)

    def to_mesh_space(self, points):
        return _apply(self._inverse, points)

    def __repr__(self):
        return f"AffineMapping({self.matrix[:2].tolist()})"
