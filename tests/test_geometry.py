import numpy as np
import pytest

from spritemesh import AffineMapping, InvalidConfigurationError
from spritemesh.geometry import bounding_box, point_distance, point_segment_distance


def test_point_segment_distance_perpendicular_and_beyond_ends():
    assert point_segment_distance((0, 1), (-1, 0), (1, 0)) == pytest.approx(1.0)
    assert point_segment_distance((3, 0), (0, 0), (1, 0)) == pytest.approx(2.0)
    assert point_segment_distance((-3, 4), (0, 0), (1, 0)) == pytest.approx(5.0)


def test_point_segment_distance_degenerate_segment():
    assert point_segment_distance((3, 4), (0, 0), (0, 0)) == pytest.approx(5.0)


def test_point_distance():
    assert point_distance((1, 1), (4, 5)) == pytest.approx(5.0)


def test_bounding_box():
    assert bounding_box([(1, 2), (-1, 5), (3, 0)]) == (-1.0, 0.0, 3.0, 5.0)
    assert bounding_box([]) is None


def test_affine_trs_round_trip():
    affine = AffineMapping.from_trs((2, 3), 90, 2)
    world = affine.to_world_space((1, 0))
    assert np.allclose(world, (2, 5))
    assert np.allclose(affine.to_mesh_space(world), (1, 0))


def test_affine_accepts_point_arrays():
    affine = AffineMapping.from_trs((1, 0), 0, (2, 3))
    pts = np.array([[0, 0], [1, 1], [2, -1]], dtype=float)
    world = affine.to_world_space(pts)
    assert world.shape == (3, 2)
    assert np.allclose(world, [[1, 0], [3, 3], [5, -3]])
    assert np.allclose(affine.inverse.to_world_space(world), pts)


def test_affine_singular_is_configuration_error():
    with pytest.raises(InvalidConfigurationError):
        AffineMapping.from_trs((0, 0), 0, (0, 1))


def test_affine_rejects_wrong_shape():
    with pytest.raises(InvalidConfigurationError):
        AffineMapping(np.eye(2))


def test_without_rotation_keeps_translation_and_scale():
    rotated = AffineMapping.from_trs((1, 1), 30, (2, 3))
    assert rotated.rotation_deg == pytest.approx(30)
    plain = rotated.without_rotation()
    assert np.allclose(plain.matrix, AffineMapping.from_trs((1, 1), 0, (2, 3)).matrix)
