"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

from functools import cmp_to_key

import numpy as np
from numpy.typing import NDArray


def pixel_bbox(pixels: NDArray[np.int64]) -> tuple[int, int, int, int]:
    """Integer envelope (x, y, width, height) of a pixel set. Width/height >= 1."""
    min_x = int(pixels[:, 0].min())
    max_x = int(pixels[:, 0].max())
    min_y = int(pixels[:, 1].min())
    max_y = int(pixels[:, 1].max())
    return (min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)


def bbox_center(bbox: tuple[int, int, int, int]) -> tuple[float, float]:
    """Geometric midpoint of an integer pixel bbox (not the mass centroid)."""
    x, y, w, h = bbox
    return (x + (w - 1) / 2, y + (h - 1) / 2)


def cross_product(o, a, b) -> float:
    """z of (a - o) x (b - o). Positive when o→a→b turns towards +y from +x."""
    return float((a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0]))


def radial_distances(points: NDArray, center: tuple[float, float]) -> NDArray[np.float64]:
    """Euclidean distance of each point to center."""
    pts = np.asarray(points, dtype=np.float64)
    return np.hypot(pts[:, 0] - center[0], pts[:, 1] - center[1])


def convex_hull(points: NDArray) -> NDArray:
    """Graham scan.

    Pivot is the point with the largest y (smallest x on ties). The other points
    are ordered by polar angle around it using an exact cross-product comparison;
    points on the same ray are ordered nearest first. The sweep pops collinear
    and right turns, so only strict hull corners remain.

    Fewer than 3 points are returned unchanged.
    """
    if len(points) < 3:
        return points

    pts = [(p[0], p[1]) for p in np.asarray(points).tolist()]

    pivot_idx = 0
    for i, (x, y) in enumerate(pts):
        px, py = pts[pivot_idx]
        if y > py or (y == py and x < px):
            pivot_idx = i
    pivot = pts[pivot_idx]
    rest = pts[:pivot_idx] + pts[pivot_idx + 1 :]

    def _dist2(p) -> float:
        return (p[0] - pivot[0]) ** 2 + (p[1] - pivot[1]) ** 2

    def _compare(a, b) -> int:
        # Every point lies on or above the pivot row, so angles span less than π
        # and the cross product sign is a total order on them.
        turn = cross_product(pivot, a, b)
        if turn > 0:
            return -1
        if turn < 0:
            return 1
        da, db = _dist2(a), _dist2(b)
        return (da > db) - (da < db)

    ordered = sorted(rest, key=cmp_to_key(_compare))

    hull = [pivot]
    for p in ordered:
        while len(hull) >= 2 and cross_product(hull[-2], hull[-1], p) <= 0:
            hull.pop()
        hull.append(p)

    return np.array(hull, dtype=np.asarray(points).dtype)

