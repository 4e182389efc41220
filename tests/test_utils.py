"""
Tests for the math and polygon ring utilities.
"""

import math

import pytest

from straight_skeleton.models.geometry import Vector
from straight_skeleton.utils.math_utils import (
    clamp,
    orientation_sign,
    point_to_segment_distance,
    segments_intersect,
)
from straight_skeleton.utils.polygon_utils import (
    distinct_points,
    is_finite_ring,
    open_ring,
    point_in_polygon,
    polygon_signed_area,
)


SQUARE = [Vector(0, 0), Vector(4, 0), Vector(4, 4), Vector(0, 4)]


def test_orientation_sign() -> None:
    assert orientation_sign(Vector(0, 0), Vector(1, 0), Vector(1, 1)) == 1
    assert orientation_sign(Vector(0, 0), Vector(1, 0), Vector(1, -1)) == -1
    assert orientation_sign(Vector(0, 0), Vector(1, 0), Vector(2, 0)) == 0


@pytest.mark.parametrize(
    "p1, p2, p3, p4, expected",
    [
        (Vector(0, 0), Vector(4, 4), Vector(0, 4), Vector(4, 0), True),
        (Vector(0, 0), Vector(1, 0), Vector(0, 1), Vector(1, 1), False),
        (Vector(0, 0), Vector(4, 0), Vector(2, 0), Vector(2, 3), True),
        (Vector(0, 0), Vector(1, 1), Vector(2, 2), Vector(3, 0), False),
    ],
)
def test_segments_intersect(p1, p2, p3, p4, expected) -> None:
    assert segments_intersect(p1, p2, p3, p4) is expected


def test_point_to_segment_distance() -> None:
    a, b = Vector(0, 0), Vector(4, 0)
    assert point_to_segment_distance(Vector(2, 3), a, b) == 3.0
    assert point_to_segment_distance(Vector(-3, 4), a, b) == 5.0
    assert point_to_segment_distance(Vector(1, 1), a, a) == math.sqrt(2)


def test_clamp() -> None:
    assert clamp(5, 0, 1) == 1
    assert clamp(-5, 0, 1) == 0
    assert clamp(0.5, 0, 1) == 0.5


def test_signed_area() -> None:
    assert polygon_signed_area(SQUARE) == 16.0
    assert polygon_signed_area(list(reversed(SQUARE))) == -16.0
    assert polygon_signed_area(SQUARE[:2]) == 0.0


def test_open_ring() -> None:
    assert open_ring(SQUARE + [Vector(0, 0)]) == SQUARE
    assert open_ring(SQUARE) == SQUARE


def test_point_in_polygon() -> None:
    assert point_in_polygon(Vector(2, 2), SQUARE)
    assert point_in_polygon(Vector(4, 2), SQUARE)
    assert not point_in_polygon(Vector(5, 2), SQUARE)


def test_distinct_points() -> None:
    points = [Vector(0, 0), Vector(1e-9, 0), Vector(1, 1), Vector(1, 1 + 1e-9)]
    assert distinct_points(points, 1e-7) == [Vector(0, 0), Vector(1, 1)]


def test_is_finite_ring() -> None:
    assert is_finite_ring(SQUARE)
    assert not is_finite_ring([Vector(0, 0), Vector(math.inf, 0), Vector(0, 1)])
