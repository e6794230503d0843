"""Shared test fixtures — synthetic RGBA scenes."""

from __future__ import annotations

import math

import numpy as np
import pytest
from PIL import Image, ImageDraw

WIDTH = 200
HEIGHT = 200

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def blank_canvas(width: int = WIDTH, height: int = HEIGHT) -> np.ndarray:
    """Opaque white (height, width, 4) uint8 canvas."""
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = WHITE
    return canvas


def draw_disk(canvas: np.ndarray, cx: int, cy: int, r: float) -> np.ndarray:
    ys, xs = np.mgrid[: canvas.shape[0], : canvas.shape[1]]
    inside = (xs - cx) ** 2 + (ys - cy) ** 2 <= r**2
    canvas[inside] = BLACK
    return canvas


def draw_rect(canvas: np.ndarray, x: int, y: int, w: int, h: int) -> np.ndarray:
    canvas[y : y + h, x : x + w] = BLACK
    return canvas


def draw_polygon(canvas: np.ndarray, vertices: list[tuple[float, float]]) -> np.ndarray:
    height, width = canvas.shape[:2]
    img = Image.new("L", (width, height), 0)
    ImageDraw.Draw(img).polygon(vertices, fill=1)
    canvas[np.array(img) > 0] = BLACK
    return canvas


def star_vertices(
    cx: float, cy: float, outer: float, inner: float, points: int = 5
) -> list[tuple[float, float]]:
    """Alternating outer/inner vertices, first tip pointing up."""
    vertices = []
    for i in range(points * 2):
        radius = outer if i % 2 == 0 else inner
        angle = -math.pi / 2 + i * math.pi / points
        vertices.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
    return vertices


# Equilateral-ish triangle: side 100, integer corners.
TRIANGLE = [(100, 40), (50, 127), (150, 127)]

# Regular 5-pointed star, inner/outer 0.375 → extent ~0.33.
STAR = star_vertices(100, 105, 80, 30)


@pytest.fixture
def blank_scene() -> np.ndarray:
    return blank_canvas()


@pytest.fixture
def disk_scene() -> np.ndarray:
    return draw_disk(blank_canvas(), 100, 100, 40)


@pytest.fixture
def rect_scene() -> np.ndarray:
    return draw_rect(blank_canvas(), 40, 60, 120, 70)


@pytest.fixture
def triangle_scene() -> np.ndarray:
    return draw_polygon(blank_canvas(), TRIANGLE)


@pytest.fixture
def star_scene() -> np.ndarray:
    return draw_polygon(blank_canvas(), STAR)


@pytest.fixture
def circle_and_rect_scene() -> np.ndarray:
    canvas = blank_canvas(300, 200)
    draw_disk(canvas, 70, 70, 40)
    draw_rect(canvas, 160, 90, 110, 80)
    return canvas
