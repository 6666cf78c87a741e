"""Brightness and contrast pre-adjustment applied before conversion."""

from __future__ import annotations

import numpy as np

from .models import PixelBuffer

ADJUST_MIN = -100
ADJUST_MAX = 100


def contrast_factor(contrast: float) -> float:
    return (259 * (contrast + 255)) / (255 * (259 - contrast))


def apply_brightness_contrast(buffer: PixelBuffer, brightness: float = 0, contrast: float = 0) -> PixelBuffer:
    """Return a copy of ``buffer`` with RGB channels adjusted; alpha is kept.

    ``out = clamp(factor * (in + brightness - 128) + 128, 0, 255)``, stored
    back to 8 bits with round-half-to-even like a clamped byte array.
    """
    if brightness == 0 and contrast == 0:
        return buffer

    factor = contrast_factor(contrast)
    arr = buffer.to_array().copy()
    rgb = arr[..., :3].astype(np.float64)
    rgb = factor * (rgb + brightness - 128) + 128
    arr[..., :3] = np.rint(np.clip(rgb, 0, 255)).astype(np.uint8)
    return PixelBuffer(width=buffer.width, height=buffer.height, pixels=arr.tobytes())
