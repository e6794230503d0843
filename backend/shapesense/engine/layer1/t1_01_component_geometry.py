"""T1.01 — Component Geometry & Size Filters.

Area = pixel count. Bbox = integer envelope of the pixels. Center = bbox
midpoint. Drops noise (< 50 pixels) and slivers (bbox side < 10).
"""

from __future__ import annotations

from shapesense.engine.context import (
    REJECT_NOISE,
    REJECT_TOO_SMALL,
    ComponentData,
    DetectionContext,
)
from shapesense.engine.registry import Layer, transform
from shapesense.utils.geometry import bbox_center, pixel_bbox


@transform(
    id="T1.01",
    layer=Layer.COMPONENT_ANALYSIS,
    dependencies=["T0.02"],
    per_component=True,
    description="Compute bbox, center, extent; drop noise and small components",
)
def component_geometry(ctx: DetectionContext, comp: ComponentData) -> None:
    cfg = ctx.config
    if comp.area < cfg.min_component_pixels:
        ctx.reject(comp, REJECT_NOISE, area=comp.area)
        return

    comp.bbox = pixel_bbox(comp.pixels)
    comp.center = bbox_center(comp.bbox)

    if comp.width < cfg.min_bbox_side or comp.height < cfg.min_bbox_side:
        ctx.reject(comp, REJECT_TOO_SMALL, width=comp.width, height=comp.height)
        return

    comp.features["area"] = comp.area
    comp.features["extent"] = round(comp.extent, 4)
    comp.features["aspect_ratio"] = round(comp.width / comp.height, 3)
