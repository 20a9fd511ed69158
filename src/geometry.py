"""
Point primitives and corner ordering for page quadrilaterals
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class Point:
    """Sub-pixel image coordinate."""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


PointLike = Union[Point, Sequence[float]]


def to_point(value: PointLike) -> Point:
    """Accept a Point, an (x, y) pair or a {'x', 'y'} mapping."""
    if isinstance(value, Point):
        return value
    if isinstance(value, dict):
        return Point(float(value["x"]), float(value["y"]))
    x, y = value
    return Point(float(x), float(y))


def distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def order_corners(points: Iterable[PointLike]) -> List[Point]:
    """
    Order 4 points as: top-left, top-right, bottom-right, bottom-left.

    The two smallest-y points form the top edge, the other two the bottom
    edge; each pair is then sorted by x. Python's sort is stable, so equal
    coordinates keep their input order and the result is deterministic.
    """
    pts = [to_point(p) for p in points]
    if len(pts) != 4:
        raise ValueError(f"Expected 4 corner points, got {len(pts)}")

    by_y = sorted(pts, key=lambda p: p.y)
    top_left, top_right = sorted(by_y[:2], key=lambda p: p.x)
    bottom_left, bottom_right = sorted(by_y[2:], key=lambda p: p.x)

    return [top_left, top_right, bottom_right, bottom_left]


def clamp_corners(points: Iterable[PointLike], width: int, height: int) -> List[Point]:
    """Clamp user-adjusted corners into the [0, width] x [0, height] box."""
    clamped = []
    for p in (to_point(p) for p in points):
        clamped.append(Point(
            min(max(p.x, 0.0), float(width)),
            min(max(p.y, 0.0), float(height)),
        ))
    return clamped


def points_to_array(points: Sequence[Point]) -> np.ndarray:
    """(N, 2) float32 array in the layout cv2 expects for point sets."""
    return np.array([[p.x, p.y] for p in points], dtype=np.float32)


def array_to_points(arr: np.ndarray) -> List[Point]:
    """Inverse of points_to_array; also accepts cv2's (N, 1, 2) contours."""
    flat = np.asarray(arr).reshape(-1, 2)
    return [Point(float(x), float(y)) for x, y in flat]
