"""T0.01 — Binary Mask.

Foreground = opaque dark pixels: alpha > 200 AND mean(R, G, B) < 128.
Everything else (light, translucent) is background.
"""

from __future__ import annotations

from shapesense.engine.context import DetectionContext
from shapesense.engine.registry import Layer, transform
from shapesense.utils.raster import binary_mask as segment


@transform(
    id="T0.01",
    layer=Layer.SEGMENTATION,
    description="Segment opaque dark pixels into a binary foreground mask",
)
def binary_mask(ctx: DetectionContext) -> None:
    if ctx.rgba is None:
        raise ValueError("No pixel buffer to segment")

    cfg = ctx.config
    ctx.mask = segment(
        ctx.rgba,
        ctx.width,
        ctx.height,
        alpha_min=cfg.alpha_min,
        intensity_max=cfg.intensity_max,
    )
    ctx.emit("mask_built", foreground_pixels=int(ctx.mask.sum()))
