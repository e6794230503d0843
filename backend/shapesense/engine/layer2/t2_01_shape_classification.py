"""T2.01 — Shape Classification.

Vertex count of the simplified polygon is the primary signal; extent
(area/bbox), circularity (4π·area/perimeter²) and aspect ratio break ties.
Rules are tried in a fixed priority order and the first match wins:

  circle test passes                          → circle
  3 vertices                                  → triangle
  4 vertices: extent > 0.70 → rectangle, < 0.60 → triangle
  5 vertices: extent > 0.65 → pentagon, square-ish mid extent → rectangle
  8+ / 6-7 vertices, concave, star test       → star
  fallbacks by vertex count and extent
  nothing matched                             → rejected

Circle and star tests look at the convex hull's radial distances from the
bbox center, not at the simplified polygon.
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from shapesense.engine.context import REJECT_UNCLASSIFIED, ComponentData, DetectionContext
from shapesense.engine.registry import Layer, transform
from shapesense.models.shapes import BoundingBox, DetectedShape, Point, ShapeType
from shapesense.utils.geometry import radial_distances
from shapesense.utils.math_helpers import coefficient_of_variation, count_cyclic_jumps

# Circle: bbox within 25% of square.
_CIRCLE_ASPECT_TOLERANCE = 0.25
# Disk circularity ~0.9+ after pixelation; disk extent π/4 ≈ 0.785.
_CIRCLE_MIN_CIRCULARITY = 0.70
_CIRCLE_MIN_EXTENT = 0.70
# Mean |r - R| / R over hull points.
_CIRCLE_MAX_RADIAL_ERROR = 0.20

# Star: a regular pentagram fills ~1/3 of its bbox.
_STAR_MAX_EXTENT = 0.50
_STAR_MIN_VERTICES = 6
_STAR_MAX_VERTICES = 25
_STAR_MIN_HULL_POINTS = 8
_STAR_MIN_COV = 0.10
# Alternation = jump between neighbouring hull distances above 15% of the mean.
_STAR_JUMP_FRACTION = 0.15
_STAR_MAX_REQUIRED_JUMPS = 4
_STAR_JUMP_RATIO = 0.3

# Extent bands
_RECT_EXTENT = 0.70
_RECT_EXTENT_HIGH = 0.85
_TRIANGLE_QUAD_EXTENT = 0.60
_PENTAGON_EXTENT = 0.65
_PENTAGON_EXTENT_HIGH = 0.75
_RECT5_EXTENT_LO = 0.45
_RECT5_ASPECT_LO = 0.7
_RECT5_ASPECT_HI = 1.5
_STAR_EXTENT = 0.50
_STAR_EXTENT_STRICT = 0.38
_TRIANGLE5_EXTENT = 0.55
_HEXAGON_PENTAGON_EXTENT = 0.50
_COMPLEX_STAR_EXTENT = 0.60
_COMPLEX_RECT_EXTENT = 0.80
_LINE_RECT_EXTENT = 0.85

# Confidence ceiling for circles: 0.90 + 0.10·circularity, capped.
_CIRCLE_BASE_CONFIDENCE = 0.90
_CIRCLE_CONFIDENCE_CAP = 0.98


class Classification(NamedTuple):
    type: ShapeType
    confidence: float


def circularity(area: float, perimeter: float) -> float:
    """4π·area/perimeter². Zero perimeter gives 0."""
    if perimeter <= 0:
        return 0.0
    return 4 * math.pi * area / (perimeter**2)


def is_circular(
    hull: NDArray,
    center: tuple[float, float],
    width: int,
    height: int,
    circ: float,
    extent: float,
) -> bool:
    aspect = width / height
    if abs(aspect - 1.0) > _CIRCLE_ASPECT_TOLERANCE:
        return False
    if circ < _CIRCLE_MIN_CIRCULARITY or extent < _CIRCLE_MIN_EXTENT:
        return False
    if len(hull) == 0:
        return False

    radius = (width + height) / 4
    errors = np.abs(radial_distances(hull, center) - radius) / radius
    return float(np.mean(errors)) < _CIRCLE_MAX_RADIAL_ERROR


def is_star(hull: NDArray, center: tuple[float, float], vertices: int, extent: float) -> bool:
    if extent > _STAR_MAX_EXTENT:
        return False
    if vertices < _STAR_MIN_VERTICES or vertices > _STAR_MAX_VERTICES:
        return False
    if len(hull) < _STAR_MIN_HULL_POINTS:
        return False

    distances = radial_distances(hull, center)
    mean = float(np.mean(distances))
    if mean <= 0:
        return False
    if coefficient_of_variation(distances) < _STAR_MIN_COV:
        return False

    alternations = count_cyclic_jumps(distances, _STAR_JUMP_FRACTION * mean)
    required = min(_STAR_MAX_REQUIRED_JUMPS, math.floor(len(distances) * _STAR_JUMP_RATIO))
    return alternations >= required


def classify_shape(
    approx: NDArray,
    hull: NDArray,
    bbox: tuple[int, int, int, int],
    center: tuple[float, float],
    area: int,
    perimeter: float,
) -> Classification | None:
    """Classify a simplified polygon. Returns None when no rule matches."""
    _, _, width, height = bbox
    v = len(approx)
    aspect = width / height
    extent = area / (width * height)
    circ = circularity(area, perimeter)

    if perimeter > 0 and is_circular(hull, center, width, height, circ, extent):
        confidence = min(_CIRCLE_CONFIDENCE_CAP, _CIRCLE_BASE_CONFIDENCE + 0.10 * circ)
        return Classification("circle", confidence)

    if v == 3:
        return Classification("triangle", 0.92)

    if v == 4 and extent > _RECT_EXTENT:
        return Classification("rectangle", 0.95 if extent > _RECT_EXTENT_HIGH else 0.88)

    # Over-approximated triangle: a fourth vertex but half-empty bbox.
    if v == 4 and extent < _TRIANGLE_QUAD_EXTENT:
        return Classification("triangle", 0.85)

    if v == 5 and extent > _PENTAGON_EXTENT:
        return Classification("pentagon", 0.88 if extent > _PENTAGON_EXTENT_HIGH else 0.80)

    # Rotated rectangle picks up an extra corner.
    if (
        v == 5
        and _RECT5_EXTENT_LO < extent <= _PENTAGON_EXTENT
        and _RECT5_ASPECT_LO < aspect < _RECT5_ASPECT_HI
    ):
        return Classification("rectangle", 0.82)

    if v >= 8 and extent < _STAR_EXTENT and is_star(hull, center, v, extent):
        return Classification("star", 0.85)

    if 6 <= v <= 7 and extent < _STAR_EXTENT_STRICT and is_star(hull, center, v, extent):
        return Classification("star", 0.75)

    if v == 4:
        return Classification("rectangle", 0.78)

    if v == 5:
        if extent < _TRIANGLE5_EXTENT:
            return Classification("triangle", 0.70)
        return Classification("pentagon", 0.75)

    if v == 6 and extent > _HEXAGON_PENTAGON_EXTENT:
        return Classification("pentagon", 0.70)

    if v >= 7 and extent < _STAR_EXTENT:
        return Classification("star", 0.70)

    if v >= 10:
        if extent < _COMPLEX_STAR_EXTENT:
            return Classification("star", 0.65)
        if extent > _COMPLEX_RECT_EXTENT:
            return Classification("rectangle", 0.60)

    if v == 2 and extent > _LINE_RECT_EXTENT:
        return Classification("rectangle", 0.70)

    return None


@transform(
    id="T2.01",
    layer=Layer.CLASSIFICATION,
    dependencies=["T1.04"],
    per_component=True,
    description="Classify each simplified polygon into a shape type",
)
def shape_classification(ctx: DetectionContext, comp: ComponentData) -> None:
    comp.features["circularity"] = round(circularity(comp.area, comp.perimeter), 4)

    result = classify_shape(
        comp.approx, comp.hull, comp.bbox, comp.center, comp.area, comp.perimeter
    )
    if result is None:
        ctx.reject(comp, REJECT_UNCLASSIFIED, vertices=len(comp.approx))
        return

    x, y, w, h = comp.bbox
    comp.shape = DetectedShape(
        type=result.type,
        confidence=result.confidence,
        bounding_box=BoundingBox(x=x, y=y, width=w, height=h),
        center=Point(x=comp.center[0], y=comp.center[1]),
        area=comp.area,
    )
    ctx.emit(
        "shape_detected",
        component=comp.id,
        type=result.type,
        confidence=result.confidence,
        features=dict(comp.features),
    )
