import random

import pytest

from streetsim.dataclass import Bounds
from streetsim.utils.math_utils import MathUtils
from streetsim.utils.vector import Vector

SQUARE = [Vector(0, 0), Vector(100, 0), Vector(100, 100), Vector(0, 100)]
L_SHAPE = [Vector(0, 0), Vector(100, 0), Vector(100, 40), Vector(40, 40), Vector(40, 100), Vector(0, 100)]


def test_centroid():
    assert MathUtils.centroid(SQUARE) == Vector(50, 50)
    assert MathUtils.centroid([]) is None


def test_bounds_of():
    assert MathUtils.bounds_of(L_SHAPE) == Bounds(0, 100, 0, 100)
    assert MathUtils.bounds_of([]) is None


@pytest.mark.parametrize('x, y, inside', [
    (20, 20, True),
    (80, 20, True),
    (80, 80, False),
    (-1, 50, False),
])
def test_point_in_polygon(x, y, inside):
    assert MathUtils.point_in_polygon(x, y, L_SHAPE) is inside


def test_degenerate_polygon_contains_nothing():
    assert not MathUtils.point_in_polygon(0, 0, [Vector(0, 0), Vector(1, 1)])


def test_closest_point_on_segment_clamps():
    a, b = Vector(0, 0), Vector(10, 0)
    assert MathUtils.closest_point_on_segment(a, b, Vector(5, 7)) == Vector(5, 0)
    assert MathUtils.closest_point_on_segment(a, b, Vector(-5, 7)) == a
    assert MathUtils.closest_point_on_segment(a, a, Vector(5, 7)) == a


def test_polygon_edges_are_closed():
    edges = MathUtils.polygon_edges(SQUARE)
    assert len(edges) == 4
    assert edges[-1] == (SQUARE[3], SQUARE[0])


def test_random_point_in_polygon():
    rng = random.Random(0)
    for _ in range(20):
        point = MathUtils.random_point_in_polygon(L_SHAPE, rng)
        assert MathUtils.point_in_polygon(point.x, point.y, L_SHAPE)
    assert MathUtils.random_point_in_polygon([], rng) is None
