"""Core detection data model — the structured output of the pipeline."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ShapeType = Literal["circle", "triangle", "rectangle", "pentagon", "star"]


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)


class DetectedShape(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ShapeType
    confidence: float = Field(..., ge=0.0, le=1.0)
    bounding_box: BoundingBox
    center: Point  # bbox midpoint, not the pixel centroid
    area: int  # pixel count of the component


class DetectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    shapes: list[DetectedShape] = Field(default_factory=list)
    processing_time_ms: float = 0.0
    image_width: int = 0
    image_height: int = 0
