"""
Tests for point primitives and corner ordering
"""

import math

import numpy as np
import pytest

from geometry import (
    Point,
    array_to_points,
    clamp_corners,
    distance,
    order_corners,
    points_to_array,
    to_point,
)


def test_distance():
    assert distance(Point(0, 0), Point(3, 4)) == 5.0
    assert distance(Point(2, 2), Point(2, 2)) == 0.0


def test_to_point_accepts_pairs_and_mappings():
    assert to_point((1, 2)) == Point(1.0, 2.0)
    assert to_point([3.5, 4]) == Point(3.5, 4.0)
    assert to_point({"x": 5, "y": 6}) == Point(5.0, 6.0)
    p = Point(7, 8)
    assert to_point(p) is p


def test_point_is_immutable():
    p = Point(1, 2)
    with pytest.raises(AttributeError):
        p.x = 3


def test_order_corners_shuffled_rectangle():
    tl, tr, br, bl = Point(10, 10), Point(90, 12), Point(95, 80), Point(8, 78)
    for shuffled in ([br, tl, bl, tr], [bl, br, tr, tl], [tr, bl, tl, br]):
        assert order_corners(shuffled) == [tl, tr, br, bl]


def test_order_corners_bottom_right_before_bottom_left():
    ordered = order_corners([(0, 100), (100, 100), (0, 0), (100, 0)])
    assert ordered == [Point(0, 0), Point(100, 0), Point(100, 100), Point(0, 100)]


def test_order_corners_idempotent():
    rng = np.random.RandomState(42)
    for _ in range(200):
        pts = [Point(*xy) for xy in rng.uniform(0, 1000, size=(4, 2))]
        once = order_corners(pts)
        assert order_corners(once) == once


def test_order_corners_rotated_page():
    # A page rotated ~45°: the top vertex has the smallest y
    pts = [(50, 0), (100, 50), (50, 100), (0, 50)]
    ordered = order_corners(pts)
    assert len(ordered) == 4
    assert ordered[0].y <= ordered[2].y
    assert sorted(p.as_tuple() for p in ordered) == sorted((float(x), float(y)) for x, y in pts)


def test_order_corners_requires_four_points():
    with pytest.raises(ValueError):
        order_corners([(0, 0), (1, 0), (1, 1)])


def test_clamp_corners():
    clamped = clamp_corners([(-5, 10), (120, -3), (130, 90), (20, 200)], 100, 80)
    assert clamped == [Point(0, 10), Point(100, 0), Point(100, 80), Point(20, 80)]


def test_array_conversion():
    pts = [Point(1.5, 2.5), Point(3, 4)]
    arr = points_to_array(pts)
    assert arr.shape == (2, 2)
    assert arr.dtype == np.float32
    assert array_to_points(arr) == pts

    contour = np.array([[[1, 2]], [[3, 4]], [[5, 6]], [[7, 8]]], dtype=np.int32)
    assert array_to_points(contour)[3] == Point(7, 8)
    assert math.isclose(distance(*array_to_points(contour)[:2]), math.sqrt(8))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
