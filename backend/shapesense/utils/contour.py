"""Contour helpers — RDP simplification, closed perimeter, even sampling."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def rdp_simplify(points: NDArray, epsilon: float) -> NDArray:
    """Ramer-Douglas-Peucker polyline simplification.

    Reduces point count while preserving shape within epsilon tolerance. Uses an
    explicit work stack of (start, end) index spans instead of recursion, so
    long near-collinear inputs cannot exhaust the call stack. The result is the
    same as the recursive formulation: endpoints are always kept, and the first
    of several equally distant points is the one split on.
    """
    n = len(points)
    if n < 3:
        return points

    pts = np.asarray(points, dtype=np.float64)
    keep = np.zeros(n, dtype=bool)
    keep[0] = True
    keep[-1] = True

    stack = [(0, n - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        distances = perpendicular_distances(pts[start + 1 : end], pts[start], pts[end])
        offset = int(np.argmax(distances))
        if distances[offset] > epsilon:
            split = start + 1 + offset
            keep[split] = True
            stack.append((split, end))
            stack.append((start, split))

    return points[keep]


def perpendicular_distances(
    points: NDArray[np.float64],
    line_start: NDArray[np.float64],
    line_end: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Distance from each point to the infinite line through line_start and line_end.

    A zero-length line measures plain distance to line_start.
    """
    dx = line_end[0] - line_start[0]
    dy = line_end[1] - line_start[1]
    length = float(np.hypot(dx, dy))

    if length == 0.0:
        return np.hypot(points[:, 0] - line_start[0], points[:, 1] - line_start[1])

    num = np.abs(
        dy * points[:, 0]
        - dx * points[:, 1]
        + line_end[0] * line_start[1]
        - line_end[1] * line_start[0]
    )
    return num / length


def closed_perimeter(points: NDArray) -> float:
    """Sum of consecutive point distances, including the last→first closing edge."""
    if len(points) < 2:
        return 0.0
    pts = np.asarray(points, dtype=np.float64)
    diffs = np.roll(pts, -1, axis=0) - pts
    return float(np.sum(np.hypot(diffs[:, 0], diffs[:, 1])))


def sample_points(points: NDArray, count: int) -> NDArray:
    """Pick `count` points at even index strides. Short inputs come back whole."""
    n = len(points)
    if n <= count:
        return points
    step = n / count
    indices = [int(i * step) for i in range(count)]
    return points[indices]
