"""ShapeSense shape detection engine."""

from shapesense.engine.registry import transform, Layer, get_registry, load_transforms
from shapesense.engine.context import DetectionContext, ComponentData
from shapesense.engine.config import DetectionConfig
from shapesense.engine.pipeline import Pipeline, create_pipeline, detect_shapes

__all__ = [
    "transform",
    "Layer",
    "get_registry",
    "load_transforms",
    "DetectionContext",
    "ComponentData",
    "DetectionConfig",
    "Pipeline",
    "create_pipeline",
    "detect_shapes",
]
