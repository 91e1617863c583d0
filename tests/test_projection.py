import numpy as np
import pytest

from spritemesh import AffineMapping, InvalidConfigurationError, RawMesh, SpriteMetrics, apply_uvs, project_uvs


def test_bounds_minimum_projects_to_origin(metrics):
    uvs = project_uvs([(-0.5, -0.5), (0.5, 0.5), (0.0, 0.0)], metrics)
    assert np.allclose(uvs, [(0, 0), (1, 1), (0.5, 0.5)])


def test_texel_rect_offsets_into_atlas():
    metrics = SpriteMetrics.from_texture((200, 100), texel_rect=(100, 0, 100, 100), pixels_per_unit=100)
    uvs = project_uvs([metrics.bounds_min, (0.5, 0.5)], metrics)
    assert np.allclose(uvs, [(0.5, 0.0), (1.0, 1.0)])


def test_zero_texture_size_is_configuration_error():
    metrics = SpriteMetrics(0, 100, (0, 0, 100, 100), 100, (-0.5, -0.5, 0.5, 0.5))
    with pytest.raises(InvalidConfigurationError):
        project_uvs([(0, 0)], metrics)


def test_missing_metrics_is_configuration_error():
    with pytest.raises(InvalidConfigurationError):
        project_uvs([(0, 0)], None)


def test_world_bounds_mode_maps_through_affine(metrics):
    affine = AffineMapping.from_trs((5, 5), 0, 1)
    uvs = project_uvs([(-0.5, -0.5)], metrics, affine=affine, bounds_space='world', world_bounds_min=(4.5, 4.5))
    assert np.allclose(uvs, [(0, 0)])


def test_world_bounds_mode_needs_affine(metrics):
    with pytest.raises(InvalidConfigurationError):
        project_uvs([(0, 0)], metrics, bounds_space='world')


def test_unknown_bounds_space_is_rejected(metrics):
    with pytest.raises(InvalidConfigurationError):
        project_uvs([(0, 0)], metrics, bounds_space='screen')


def test_local_projection_ignores_sprite_rotation(metrics):
    verts = [(-0.5, -0.5), (0.25, 0.1)]
    plain = project_uvs(verts, metrics, affine=AffineMapping.identity())
    rotated = project_uvs(verts, metrics, affine=AffineMapping.from_trs((3, 1), 45, 2))
    assert np.allclose(plain, rotated)


def test_apply_uvs_returns_new_mesh(metrics):
    mesh = RawMesh([(-0.5, -0.5), (0.5, -0.5), (0.5, 0.5)], [(0, 1, 2)])
    textured = apply_uvs(mesh, metrics)
    assert mesh.uvs is None
    assert textured.uvs.shape == (3, 2)
    assert np.allclose(textured.uvs[1], (1, 0))
