"""T0.02 — Connected Components.

4-connected flood fill over the mask. Components are numbered C0, C1, ... in
the row-major order of their first pixel; that order is kept through to the
final shape list.
"""

from __future__ import annotations

from shapesense.engine.context import ComponentData, DetectionContext
from shapesense.engine.registry import Layer, transform
from shapesense.utils.morphology import label_components


@transform(
    id="T0.02",
    layer=Layer.SEGMENTATION,
    dependencies=["T0.01"],
    description="Label 4-connected foreground components",
)
def connected_components(ctx: DetectionContext) -> None:
    if ctx.mask is None:
        raise ValueError("Binary mask missing")

    ctx.components = [
        ComponentData(id=f"C{i}", pixels=pixels)
        for i, pixels in enumerate(label_components(ctx.mask))
    ]
    ctx.emit("components_found", count=len(ctx.components))
