"""DetectionContext — the per-call state object flowing through all transforms.

Per-component results → ComponentData fields and ComponentData.features
Whole-image results → DetectionContext.* (mask, components)

A context is created for one detection call and discarded afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray

from shapesense.engine.config import DetectionConfig
from shapesense.models.shapes import DetectedShape

# Soft rejection reasons
REJECT_NOISE = "noise"
REJECT_TOO_SMALL = "too_small"
REJECT_SHORT_BOUNDARY = "short_boundary"
REJECT_UNCLASSIFIED = "unclassified"
REJECT_ERROR = "error"

Observer = Callable[[str, dict[str, Any]], None]


@dataclass
class ComponentData:
    """Data for a single connected component of the foreground mask."""

    id: str
    # Component pixels: Nx2 array of (x, y), flood-fill order
    pixels: NDArray[np.int64] = field(default_factory=lambda: np.empty((0, 2), dtype=np.int64))
    # Bounding box: (x, y, width, height)
    bbox: tuple[int, int, int, int] = (0, 0, 1, 1)
    # Bbox midpoint
    center: tuple[float, float] = (0.0, 0.0)
    # Boundary pixels, same relative order as `pixels`
    boundary: NDArray[np.int64] = field(default_factory=lambda: np.empty((0, 2), dtype=np.int64))
    # Convex hull of the boundary
    hull: NDArray[np.int64] = field(default_factory=lambda: np.empty((0, 2), dtype=np.int64))
    # Simplified polygon fed to the classifier
    approx: NDArray[np.int64] = field(default_factory=lambda: np.empty((0, 2), dtype=np.int64))
    # "hull" or "boundary"
    contour_source: str = ""
    # Perimeter of the contour that was simplified
    perimeter: float = 0.0
    # All computed metrics go here (keyed by metric name)
    features: dict[str, Any] = field(default_factory=dict)
    # Final classification, if any
    shape: DetectedShape | None = None
    # Set once the component is dropped
    rejection: str | None = None

    @property
    def area(self) -> int:
        return int(len(self.pixels))

    @property
    def width(self) -> int:
        return self.bbox[2]

    @property
    def height(self) -> int:
        return self.bbox[3]

    @property
    def bbox_area(self) -> int:
        return self.bbox[2] * self.bbox[3]

    @property
    def extent(self) -> float:
        return self.area / self.bbox_area

    @property
    def active(self) -> bool:
        return self.rejection is None


@dataclass
class DetectionContext:
    """Shared state for one detection call."""

    # RGBA pixels, (height, width, 4) uint8
    rgba: NDArray[np.uint8] | None = None
    width: int = 0
    height: int = 0
    config: DetectionConfig = field(default_factory=DetectionConfig)

    # --- Layer 0 ---
    mask: NDArray[np.uint8] | None = None
    components: list[ComponentData] = field(default_factory=list)

    # --- Diagnostics ---
    observer: Observer | None = None

    # --- Pipeline metadata ---
    completed_transforms: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def num_components(self) -> int:
        return len(self.components)

    @property
    def shapes(self) -> list[DetectedShape]:
        """Detected shapes in component discovery order."""
        return [c.shape for c in self.components if c.shape is not None]

    @property
    def rejections(self) -> dict[str, str]:
        return {c.id: c.rejection for c in self.components if c.rejection is not None}

    def active_components(self) -> list[ComponentData]:
        return [c for c in self.components if c.active]

    def emit(self, event: str, **data: Any) -> None:
        if self.observer is not None:
            self.observer(event, data)

    def reject(self, comp: ComponentData, reason: str, **details: Any) -> None:
        comp.rejection = reason
        self.emit("component_rejected", component=comp.id, reason=reason, **details)
