"""Image decoding and downscaling into RGBA pixel buffers."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import ImageLoadError
from .models import PixelBuffer

MAX_WIDTH = 1024


def fit_to_max_width(width: int, height: int, max_width: int = MAX_WIDTH) -> tuple[int, int]:
    if width <= max_width:
        return width, height
    ratio = max_width / width
    return max_width, max(1, int(height * ratio + 0.5))


def image_to_pixel_buffer(image: Image.Image, max_width: int = MAX_WIDTH) -> PixelBuffer:
    if getattr(image, "n_frames", 1) > 1:
        image.seek(0)
    if image.mode != "RGBA":
        image = image.convert("RGBA")

    size = fit_to_max_width(image.width, image.height, max_width)
    if size != image.size:
        image = image.resize(size, Image.Resampling.BILINEAR)
    return PixelBuffer(width=image.width, height=image.height, pixels=image.tobytes())


def load_pixel_buffer(path: Path | str, max_width: int = MAX_WIDTH) -> PixelBuffer:
    try:
        with Image.open(path) as image:
            image.load()
            return image_to_pixel_buffer(image, max_width=max_width)
    except (OSError, UnidentifiedImageError) as exc:
        raise ImageLoadError(f"Cannot load image {path}: {exc}") from exc
