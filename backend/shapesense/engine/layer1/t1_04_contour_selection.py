"""T1.04 — Contour Selection & Adaptive Simplification.

Picks the working contour and simplifies it with RDP, ε = 1% of perimeter:
  extent < 0.40                  → boundary (hull would erase star notches)
  hull < 4 points, extent > 0.80 → boundary (hull degenerated)
  otherwise                      → hull
Hull path only: too few vertices on a filled shape → ε = 0.5%, then even
sampling. Too many vertices (hull or degenerate-hull path) → ε = 3%, kept only
if it still has >= 4 vertices.

The boundary is in flood-fill order, so its perimeter and simplification treat
consecutive scan entries as neighbours along the outline. Downstream
thresholds were tuned on that behaviour; it is kept as-is.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from shapesense.engine.config import DetectionConfig
from shapesense.engine.context import ComponentData, DetectionContext
from shapesense.engine.registry import Layer, transform
from shapesense.utils.contour import closed_perimeter, rdp_simplify, sample_points

SOURCE_HULL = "hull"
SOURCE_BOUNDARY = "boundary"


@dataclass(frozen=True)
class ContourSelection:
    approx: NDArray[np.int64]
    perimeter: float
    source: str
    epsilon: float


def select_contour(
    boundary: NDArray[np.int64],
    hull: NDArray[np.int64],
    extent: float,
    config: DetectionConfig | None = None,
) -> ContourSelection:
    """Choose hull or boundary and derive the simplified polygon for classification."""
    cfg = config or DetectionConfig()
    concave = extent < cfg.concave_extent
    filled = extent > cfg.filled_extent

    if concave or (len(hull) < cfg.min_hull_points and filled):
        contour, source = boundary, SOURCE_BOUNDARY
    else:
        contour, source = hull, SOURCE_HULL

    perimeter = closed_perimeter(contour)
    epsilon = cfg.epsilon_ratio * perimeter
    approx = rdp_simplify(contour, epsilon)

    if concave:
        return ContourSelection(approx, perimeter, source, epsilon)

    if source == SOURCE_HULL and len(approx) < cfg.min_vertices and filled:
        epsilon = cfg.fine_epsilon_ratio * perimeter
        approx = rdp_simplify(contour, epsilon)
        if len(approx) < cfg.min_vertices:
            approx = sample_points(contour, min(len(contour), cfg.sample_count))

    if len(approx) > cfg.max_vertices and not (filled and len(approx) < cfg.filled_max_vertices):
        coarse_epsilon = cfg.coarse_epsilon_ratio * perimeter
        coarser = rdp_simplify(contour, coarse_epsilon)
        if len(coarser) >= cfg.min_vertices:
            approx, epsilon = coarser, coarse_epsilon

    return ContourSelection(approx, perimeter, source, epsilon)


@transform(
    id="T1.04",
    layer=Layer.COMPONENT_ANALYSIS,
    dependencies=["T1.03"],
    per_component=True,
    description="Select hull or boundary contour and simplify it adaptively",
)
def contour_selection(ctx: DetectionContext, comp: ComponentData) -> None:
    selection = select_contour(comp.boundary, comp.hull, comp.extent, ctx.config)

    comp.approx = selection.approx
    comp.contour_source = selection.source
    comp.perimeter = selection.perimeter

    comp.features["contour_source"] = selection.source
    comp.features["perimeter"] = round(selection.perimeter, 2)
    comp.features["epsilon"] = round(selection.epsilon, 3)
    comp.features["vertex_count"] = len(selection.approx)
