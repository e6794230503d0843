"""Connected components and boundary pixels on binary masks."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def label_components(mask: NDArray[np.uint8]) -> list[NDArray[np.int64]]:
    """Find 4-connected foreground components.

    Components come out in the row-major order of their first pixel. Each is an
    (N, 2) array of (x, y) in flood-fill visiting order.
    """
    height, width = mask.shape
    # Flat Python sequences: per-pixel numpy indexing is far slower in the loop.
    flat = mask.reshape(-1).tolist()
    visited = bytearray(width * height)
    components: list[NDArray[np.int64]] = []

    for idx, value in enumerate(flat):
        if value and not visited[idx]:
            y, x = divmod(idx, width)
            pixels = _flood_fill(flat, visited, x, y, width, height)
            if pixels:
                components.append(np.array(pixels, dtype=np.int64))

    return components


def _flood_fill(
    flat: list[int],
    visited: bytearray,
    start_x: int,
    start_y: int,
    width: int,
    height: int,
) -> list[tuple[int, int]]:
    """Explicit-stack (DFS) flood fill. Neighbours are checked when popped."""
    pixels: list[tuple[int, int]] = []
    stack = [(start_x, start_y)]

    while stack:
        x, y = stack.pop()
        if x < 0 or x >= width or y < 0 or y >= height:
            continue
        idx = y * width + x
        if not flat[idx] or visited[idx]:
            continue

        visited[idx] = 1
        pixels.append((x, y))

        stack.append((x + 1, y))
        stack.append((x - 1, y))
        stack.append((x, y + 1))
        stack.append((x, y - 1))

    return pixels


def boundary_pixels(pixels: NDArray[np.int64]) -> NDArray[np.int64]:
    """Pixels with at least one 4-neighbour outside the component.

    Neighbours beyond the image edge are outside the component too, so the image
    size is not needed. Keeps the input order (a subsequence of ``pixels``).
    """
    if len(pixels) == 0:
        return pixels

    xs = pixels[:, 0]
    ys = pixels[:, 1]
    min_x = int(xs.min())
    min_y = int(ys.min())

    # Local membership grid with a one-pixel empty margin on every side.
    cols = xs - min_x + 1
    rows = ys - min_y + 1
    grid = np.zeros((int(rows.max()) + 2, int(cols.max()) + 2), dtype=bool)
    grid[rows, cols] = True

    interior = (
        grid[rows, cols + 1]
        & grid[rows, cols - 1]
        & grid[rows + 1, cols]
        & grid[rows - 1, cols]
    )
    return pixels[~interior]
