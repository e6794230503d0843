"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shapesense.models.shapes import DetectionResult


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    transforms_registered: int = 0


class DetectResponse(BaseModel):
    result: DetectionResult
    components_found: int = 0
    rejections: dict[str, str] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
