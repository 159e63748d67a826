"""Polyline smoothing and polygon helpers shared by coastlines and rivers."""

from enum import Enum
from typing import List, Sequence

import numpy as np

from .hex_grid import Point


class LoopPolicy(str, Enum):
    """Which traced loops a coastline stage returns."""

    LARGEST = "largest"
    ALL = "all"


def _to_points(arr: np.ndarray) -> List[Point]:
    return [Point(float(x), float(y)) for x, y in arr]


def chaikin_smooth(points: Sequence[Point], passes: int = 2, closed: bool = True) -> List[Point]:
    """
    Chaikin corner-cutting subdivision.

    Every subdivided edge (p0, p1) is replaced by Q = 0.75*p0 + 0.25*p1 and
    R = 0.25*p0 + 0.75*p1. A closed loop also subdivides the wrap-around edge;
    an open polyline subdivides only its interior edges and keeps both
    endpoints. Either way each pass doubles the vertex count.

    Args:
        points: Input vertices
        passes: Number of subdivision passes, 0 returns the input unchanged
        closed: Treat the input as an implicitly closed loop

    Returns:
        New list of smoothed points
    """
    if passes < 0:
        raise ValueError(f"passes must be non-negative, got {passes}")
    if passes == 0 or len(points) < 2:
        return list(points)

    pts = np.asarray(points, dtype=np.float64)
    for _ in range(passes):
        if closed:
            p0 = pts
            p1 = np.roll(pts, -1, axis=0)
        else:
            p0 = pts[:-1]
            p1 = pts[1:]

        cut = np.empty((2 * len(p0), 2), dtype=np.float64)
        cut[0::2] = 0.75 * p0 + 0.25 * p1
        cut[1::2] = 0.25 * p0 + 0.75 * p1

        if closed:
            pts = cut
        else:
            pts = np.vstack([pts[:1], cut, pts[-1:]])

    return _to_points(pts)


def polygon_area(points: Sequence[Point]) -> float:
    """Signed shoelace area of an implicitly closed polygon."""
    if len(points) < 3:
        return 0.0
    pts = np.asarray(points, dtype=np.float64)
    x = pts[:, 0]
    y = pts[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    return float(np.sum(x * y_next - x_next * y) * 0.5)


def sort_loops_by_area(loops: Sequence[List[Point]]) -> List[List[Point]]:
    """Order loops by descending absolute area (stable on ties)."""
    return sorted(loops, key=lambda loop: abs(polygon_area(loop)), reverse=True)


def select_loops(loops: Sequence[List[Point]], policy: LoopPolicy) -> List[List[Point]]:
    """
    Apply a loop retention policy.

    LARGEST keeps only the loop with the largest absolute area (the first
    one on ties); ALL keeps every loop in its original order.
    """
    if policy == LoopPolicy.ALL:
        return list(loops)
    if not loops:
        return []

    best = loops[0]
    best_area = abs(polygon_area(best))
    for loop in loops[1:]:
        area = abs(polygon_area(loop))
        if area > best_area:
            best, best_area = loop, area
    return [best]
