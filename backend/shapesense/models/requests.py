"""API request models."""

from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from shapesense.config import settings

_CHANNELS = 4


class DetectRequest(BaseModel):
    width: int = Field(..., gt=0, description="Image width in pixels")
    height: int = Field(..., gt=0, description="Image height in pixels")
    pixels: str = Field(..., description="Base64 of the row-major RGBA buffer (4 bytes per pixel)")

    # Decoded once during validation
    _raw: bytes = PrivateAttr(default=b"")

    @model_validator(mode="after")
    def _check_pixels(self) -> "DetectRequest":
        if self.width * self.height > settings.max_image_pixels:
            raise ValueError(
                f"Image of {self.width}x{self.height} exceeds {settings.max_image_pixels} pixels"
            )
        try:
            raw = base64.b64decode(self.pixels, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"pixels is not valid base64: {e}") from e

        expected = self.width * self.height * _CHANNELS
        if len(raw) != expected:
            raise ValueError(f"pixels decodes to {len(raw)} bytes, expected {expected}")
        self._raw = raw
        return self

    def raw_pixels(self) -> bytes:
        return self._raw
