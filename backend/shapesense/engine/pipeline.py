"""Pipeline orchestrator — runs transforms in dependency order, one component at a time."""

from __future__ import annotations

import logging
import time
from collections.abc import Generator
from typing import Any

from shapesense.engine.config import DetectionConfig
from shapesense.engine.context import REJECT_ERROR, DetectionContext, Observer
from shapesense.engine.registry import (
    Layer,
    TransformRegistry,
    TransformSpec,
    get_registry,
    load_transforms,
)
from shapesense.models.shapes import DetectionResult
from shapesense.utils.raster import PixelBuffer, as_rgba

logger = logging.getLogger(__name__)


class Pipeline:
    """Orchestrates the detection pipeline."""

    def __init__(
        self,
        registry: TransformRegistry | None = None,
        config: DetectionConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or DetectionConfig()

    def run(self, ctx: DetectionContext) -> DetectionContext:
        """Run the full pipeline on the given context."""
        start = time.perf_counter()
        ctx.config = self.config
        ordered = self.registry.resolve_order()

        logger.info("Pipeline: %d transforms queued", len(ordered))

        for spec in ordered:
            t0 = time.perf_counter()
            self._run_spec(ctx, spec)
            elapsed = (time.perf_counter() - t0) * 1000
            logger.debug("  %s completed in %.1fms", spec.id, elapsed)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d transforms, %d shapes from %d components in %.0fms",
            len(ctx.completed_transforms),
            len(ordered),
            len(ctx.shapes),
            ctx.num_components,
            total,
        )
        return ctx

    def run_streaming(self, ctx: DetectionContext) -> Generator[dict[str, Any], None, None]:
        """Run the pipeline, yielding a progress dict after each transform.

        The caller's ``ctx`` is mutated in-place, so after the generator is
        exhausted the context contains all results (same as ``run()``).
        """
        ctx.config = self.config
        ordered = self.registry.resolve_order()
        total = len(ordered)

        for i, spec in enumerate(ordered):
            # Emit "running" event so the UI shows what's in progress
            yield {
                "transform_id": spec.id,
                "description": spec.description,
                "layer": spec.layer.name,
                "index": i,
                "total": total,
                "elapsed_ms": 0.0,
                "status": "running",
                "active_components": len(ctx.active_components()),
                "error": "",
            }

            t0 = time.perf_counter()
            failed = self._run_spec(ctx, spec)
            elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)

            yield {
                "transform_id": spec.id,
                "description": spec.description,
                "layer": spec.layer.name,
                "index": i,
                "total": total,
                "elapsed_ms": elapsed_ms,
                "status": "error" if failed else "ok",
                "active_components": len(ctx.active_components()),
                "error": ctx.errors.get(spec.id, ""),
            }

    def run_layer(self, ctx: DetectionContext, layer: Layer) -> DetectionContext:
        """Run only transforms in a specific layer."""
        for spec in self.registry.get_layer(layer):
            self._run_spec(ctx, spec)
        return ctx

    def _run_spec(self, ctx: DetectionContext, spec: TransformSpec) -> bool:
        """Run one transform; return True if anything failed.

        A failing whole-image transform is recorded under its ID. A failing
        per-component transform only drops that component.
        """
        if not spec.per_component:
            try:
                spec.fn(ctx)
                ctx.completed_transforms.add(spec.id)
                return False
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
                return True

        failed = False
        for comp in ctx.active_components():
            try:
                spec.fn(ctx, comp)
            except Exception as e:
                ctx.errors[f"{spec.id}:{comp.id}"] = str(e)
                ctx.reject(comp, REJECT_ERROR, transform=spec.id)
                logger.warning("  %s FAILED on %s: %s", spec.id, comp.id, e)
                failed = True
            else:
                if comp.rejection is not None:
                    logger.debug("  %s rejected %s: %s", spec.id, comp.id, comp.rejection)
        ctx.completed_transforms.add(spec.id)
        return failed


def create_pipeline(config: DetectionConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline with every transform loaded."""
    return Pipeline(registry=load_transforms(), config=config)


def build_context(
    pixels: PixelBuffer,
    width: int,
    height: int,
    observer: Observer | None = None,
) -> DetectionContext:
    """Validate an RGBA buffer and wrap it in a fresh context."""
    return DetectionContext(
        rgba=as_rgba(pixels, width, height),
        width=width,
        height=height,
        observer=observer,
    )


def build_result(ctx: DetectionContext, elapsed_ms: float) -> DetectionResult:
    return DetectionResult(
        shapes=ctx.shapes,
        processing_time_ms=round(elapsed_ms, 3),
        image_width=ctx.width,
        image_height=ctx.height,
    )


def detect_shapes(
    pixels: PixelBuffer,
    width: int,
    height: int,
    config: DetectionConfig | None = None,
    observer: Observer | None = None,
) -> DetectionResult:
    """Detect filled shapes in a row-major RGBA buffer.

    Raises ValueError if the buffer does not hold width·height RGBA pixels.
    """
    start = time.perf_counter()
    ctx = build_context(pixels, width, height, observer=observer)
    create_pipeline(config).run(ctx)
    return build_result(ctx, (time.perf_counter() - start) * 1000)
