"""Tests for Layer 2 — the ordered shape classification rules."""

import math

import numpy as np
import pytest

from shapesense.engine.context import REJECT_UNCLASSIFIED, ComponentData, DetectionContext
from shapesense.engine.layer2.t2_01_shape_classification import (
    circularity,
    classify_shape,
    is_circular,
    is_star,
    shape_classification,
)

EMPTY = np.empty((0, 2), dtype=np.int64)


def _ring(radii: list[float], center=(50.0, 50.0)) -> np.ndarray:
    n = len(radii)
    return np.array(
        [
            (center[0] + r * math.cos(2 * math.pi * i / n), center[1] + r * math.sin(2 * math.pi * i / n))
            for i, r in enumerate(radii)
        ]
    )


CIRCLE_HULL = _ring([50.0] * 36)
STAR_HULL = _ring([50.0, 20.0] * 5)


def _classify(v, extent, width=100, height=100, hull=EMPTY, perimeter=1000.0):
    approx = np.zeros((v, 2), dtype=np.int64)
    area = round(extent * width * height)
    return classify_shape(approx, hull, (0, 0, width, height), (50.0, 50.0), area, perimeter)


def test_circularity():
    r = 10.0
    assert circularity(math.pi * r * r, 2 * math.pi * r) == pytest.approx(1.0)
    assert circularity(100, 0) == 0.0


def test_disk_hull_is_circle():
    result = classify_shape(
        np.zeros((12, 2)), CIRCLE_HULL, (0, 0, 101, 101), (50.0, 50.0), 8012, 317.3
    )
    assert result.type == "circle"
    assert result.confidence == pytest.approx(0.98)


def test_circle_test_runs_before_vertex_count():
    result = classify_shape(
        np.zeros((4, 2)), CIRCLE_HULL, (0, 0, 101, 101), (50.0, 50.0), 8012, 317.3
    )
    assert result.type == "circle"


def test_zero_perimeter_skips_circle_test():
    result = classify_shape(np.zeros((4, 2)), CIRCLE_HULL, (0, 0, 101, 101), (50.0, 50.0), 8012, 0.0)
    assert result == ("rectangle", 0.88)


def test_elongated_bbox_is_not_circle():
    assert not is_circular(CIRCLE_HULL, (50.0, 50.0), 140, 100, 0.9, 0.8)


def test_empty_hull_is_not_circle():
    assert not is_circular(EMPTY, (50.0, 50.0), 100, 100, 0.95, 0.8)


def test_three_vertices_is_triangle():
    assert _classify(3, 0.5) == ("triangle", 0.92)
    # Even with a star-shaped hull, triangle comes first
    assert _classify(3, 0.33, hull=STAR_HULL) == ("triangle", 0.92)


@pytest.mark.parametrize(
    "extent, expected",
    [
        (0.9, ("rectangle", 0.95)),
        (0.8, ("rectangle", 0.88)),
        (0.5, ("triangle", 0.85)),
        (0.65, ("rectangle", 0.78)),
    ],
)
def test_four_vertices(extent, expected):
    assert _classify(4, extent) == expected


@pytest.mark.parametrize(
    "extent, width, expected",
    [
        (0.8, 100, ("pentagon", 0.88)),
        (0.7, 100, ("pentagon", 0.80)),
        (0.55, 100, ("rectangle", 0.82)),
        (0.6, 200, ("pentagon", 0.75)),
        (0.5, 200, ("triangle", 0.70)),
    ],
)
def test_five_vertices(extent, width, expected):
    assert _classify(5, extent, width=width) == expected


def test_star_hull_with_many_vertices():
    assert _classify(10, 0.33, hull=STAR_HULL) == ("star", 0.85)


def test_six_vertex_star_needs_strict_extent():
    assert _classify(6, 0.33, hull=STAR_HULL) == ("star", 0.75)
    # No star hull and no fallback for a sparse hexagon
    assert _classify(6, 0.3) is None


def test_six_vertices_dense_is_pentagon():
    assert _classify(6, 0.6) == ("pentagon", 0.70)


def test_seven_plus_sparse_falls_back_to_star():
    assert _classify(7, 0.4) == ("star", 0.70)


@pytest.mark.parametrize(
    "extent, expected",
    [
        (0.55, ("star", 0.65)),
        (0.9, ("rectangle", 0.60)),
        (0.7, None),
    ],
)
def test_complex_outline(extent, expected):
    assert _classify(11, extent) == expected


def test_line_like_polygon():
    assert _classify(2, 0.9) == ("rectangle", 0.70)
    assert _classify(2, 0.5) is None


def test_mid_extent_octagon_is_unclassified():
    assert _classify(8, 0.7) is None


def test_is_star_needs_enough_hull_points():
    hull = _ring([50.0, 20.0] * 3 + [50.0])
    assert len(hull) == 7
    assert not is_star(hull, (50.0, 50.0), 10, 0.33)
    assert is_star(STAR_HULL, (50.0, 50.0), 10, 0.33)


def test_is_star_rejects_round_hull():
    assert not is_star(_ring([50.0] * 16), (50.0, 50.0), 10, 0.33)


def test_unclassified_component_is_rejected():
    events = []
    ctx = DetectionContext(observer=lambda name, data: events.append((name, data)))
    comp = ComponentData(
        id="C0",
        pixels=np.zeros((7000, 2), dtype=np.int64),
        bbox=(0, 0, 100, 100),
        center=(49.5, 49.5),
        approx=np.zeros((8, 2), dtype=np.int64),
        perimeter=1000.0,
    )
    ctx.components.append(comp)

    shape_classification(ctx, comp)

    assert comp.shape is None
    assert comp.rejection == REJECT_UNCLASSIFIED
    assert ("component_rejected", {"component": "C0", "reason": "unclassified", "vertices": 8}) in events


def test_classified_component_gets_shape():
    ctx = DetectionContext()
    comp = ComponentData(
        id="C3",
        pixels=np.zeros((900, 2), dtype=np.int64),
        bbox=(5, 6, 30, 30),
        center=(19.5, 20.5),
        approx=np.array([[5, 6], [34, 6], [34, 35], [5, 35]]),
        perimeter=116.0,
    )
    shape_classification(ctx, comp)

    assert comp.shape is not None
    assert comp.shape.type == "rectangle"
    assert comp.shape.bounding_box.width == 30
    assert comp.shape.center.x == 19.5
    assert comp.shape.area == 900
    assert comp.features["circularity"] == pytest.approx(4 * math.pi * 900 / 116.0**2, abs=1e-4)
