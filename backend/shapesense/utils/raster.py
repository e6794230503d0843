"""Raster utilities — RGBA buffer decoding and foreground segmentation.

No engine imports.
"""

from __future__ import annotations

from typing import Union

import numpy as np
from numpy.typing import NDArray

# Opaque: alpha strictly above ~78% of full scale.
DEFAULT_ALPHA_MIN = 200
# Dark: mean channel intensity strictly below mid-gray.
DEFAULT_INTENSITY_MAX = 128

_CHANNELS = 4

PixelBuffer = Union[bytes, bytearray, memoryview, NDArray[np.uint8]]


def as_rgba(pixels: PixelBuffer, width: int, height: int) -> NDArray[np.uint8]:
    """View a row-major RGBA buffer as an (height, width, 4) uint8 array."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    if isinstance(pixels, np.ndarray):
        arr = np.asarray(pixels, dtype=np.uint8).reshape(-1)
    else:
        arr = np.frombuffer(pixels, dtype=np.uint8)

    expected = width * height * _CHANNELS
    if arr.size != expected:
        raise ValueError(
            f"RGBA buffer has {arr.size} bytes, expected {expected} for {width}x{height}"
        )
    return arr.reshape(height, width, _CHANNELS)


def binary_mask(
    pixels: PixelBuffer,
    width: int,
    height: int,
    alpha_min: int = DEFAULT_ALPHA_MIN,
    intensity_max: int = DEFAULT_INTENSITY_MAX,
) -> NDArray[np.uint8]:
    """Foreground mask: opaque (alpha > alpha_min) and dark (mean RGB < intensity_max).

    Returns a read-only (height, width) array of 0/1.
    """
    rgba = as_rgba(pixels, width, height)
    # Sum in a wider type; compare sum < 3·max to keep the mean test exact.
    rgb_sum = rgba[:, :, :3].astype(np.uint16).sum(axis=2)
    alpha = rgba[:, :, 3]

    mask = ((alpha > alpha_min) & (rgb_sum < 3 * intensity_max)).astype(np.uint8)
    mask.flags.writeable = False
    return mask
