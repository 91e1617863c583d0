import numpy as np

from .errors import InvalidConfigurationError
from .utils import UV_BOUNDS_SPACE


def _check_metrics(metrics):
    if metrics is None:
        raise InvalidConfigurationError('project_uvs', "no sprite metrics were provided")
    if not (metrics.texture_width > 0 and metrics.texture_height > 0):
        raise InvalidConfigurationError(
            'project_uvs',
            f"texture size must be positive, got {metrics.texture_width}x{metrics.texture_height}",
        )
    if not metrics.pixels_per_unit > 0:
        raise InvalidConfigurationError('project_uvs', f"pixels_per_unit must be positive, got {metrics.pixels_per_unit}")


def project_uvs(vertices, metrics, affine=None, bounds_space=UV_BOUNDS_SPACE, world_bounds_min=None):
    """
    Maps mesh-local vertices to normalized texture coordinates.

    Each vertex is offset from the bottom-left of the sprite's physical
    bounds, converted to pixels, shifted by the texel rect origin and
    divided by the texture size.

    ``bounds_space="local"`` takes the bottom-left from ``metrics.bounds``,
    which ignores any rotation of the sprite. ``bounds_space="world"`` maps
    ``world_bounds_min`` (the host's world-space bounds corner) through
    ``affine.to_mesh_space`` instead; that only lines up for un-rotated
    sprites.
    """
    _check_metrics(metrics)
    if bounds_space == 'local':
        bottom_left = np.asarray(metrics.bounds_min, dtype=float)
    elif bounds_space == 'world':
        if affine is None or world_bounds_min is None:
            raise InvalidConfigurationError(
                'project_uvs', "world-space projection needs an affine mapping and world_bounds_min")
        bottom_left = np.asarray(affine.to_mesh_space(world_bounds_min), dtype=float)
    else:
        raise InvalidConfigurationError('project_uvs', f"unknown bounds_space {bounds_space!r}")

    verts = np.asarray(vertices, dtype=float).reshape(-1, 2)
    pixels = (verts - bottom_left) * metrics.pixels_per_unit
    origin = np.array(metrics.texel_rect[:2], dtype=float)
    size = np.array([metrics.texture_width, metrics.texture_height], dtype=float)
    return (pixels + origin) / size


def apply_uvs(mesh, metrics, **kwargs):
    """Returns a copy of ``mesh`` carrying projected UVs."""
    return mesh.with_uvs(project_uvs(mesh.vertices, metrics, **kwargs))
