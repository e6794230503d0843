"""T1.02 — Boundary Extraction.

Boundary = component pixels with a 4-neighbour outside the component or the
image. Kept in flood-fill order, not walked along the outline.
"""

from __future__ import annotations

from shapesense.engine.context import REJECT_SHORT_BOUNDARY, ComponentData, DetectionContext
from shapesense.engine.registry import Layer, transform
from shapesense.utils.morphology import boundary_pixels


@transform(
    id="T1.02",
    layer=Layer.COMPONENT_ANALYSIS,
    dependencies=["T1.01"],
    per_component=True,
    description="Extract boundary pixels of each component",
)
def boundary_extraction(ctx: DetectionContext, comp: ComponentData) -> None:
    comp.boundary = boundary_pixels(comp.pixels)
    comp.features["boundary_points"] = len(comp.boundary)

    if len(comp.boundary) < ctx.config.min_boundary_points:
        ctx.reject(comp, REJECT_SHORT_BOUNDARY, boundary_points=len(comp.boundary))
