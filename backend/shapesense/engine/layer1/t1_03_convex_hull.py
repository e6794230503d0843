"""T1.03 — Convex Hull.

Graham scan over the boundary pixels.
"""

from __future__ import annotations

from shapesense.engine.context import ComponentData, DetectionContext
from shapesense.engine.registry import Layer, transform
from shapesense.utils.geometry import convex_hull as graham_scan


@transform(
    id="T1.03",
    layer=Layer.COMPONENT_ANALYSIS,
    dependencies=["T1.02"],
    per_component=True,
    description="Compute the convex hull of the boundary",
)
def convex_hull(ctx: DetectionContext, comp: ComponentData) -> None:
    comp.hull = graham_scan(comp.boundary)
    comp.features["hull_points"] = len(comp.hull)
