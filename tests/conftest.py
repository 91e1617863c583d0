import numpy as np
import pytest

from spritemesh import AffineMapping, AlphaBitmap, PolygonGraph, SpriteMetrics


@pytest.fixture
def identity():
    return AffineMapping.identity()


@pytest.fixture
def metrics():
    # 100x100 texture at 100 px/unit, pivot in the middle: bounds (-0.5, -0.5)..(0.5, 0.5)
    return SpriteMetrics.from_texture((100, 100), pixels_per_unit=100)


@pytest.fixture
def square_graph():
    return PolygonGraph.from_loop([(0, 0), (1, 0), (1, 1), (0, 1)])


@pytest.fixture
def disc_bitmap():
    yy, xx = np.mgrid[0:40, 0:40]
    return AlphaBitmap((xx - 19.5) ** 2 + (yy - 19.5) ** 2 <= 15 ** 2)

