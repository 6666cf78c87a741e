"""Block-sampling image to text conversion."""

from __future__ import annotations

import logging
import math

import numpy as np

from .charsets import resolve_characters
from .errors import InvalidInputError
from .markup import to_markup
from .models import AsciiArtifact, AsciiCell, ConversionConfig, PixelBuffer

logger = logging.getLogger(__name__)

MIN_DENSITY = 5
MAX_DENSITY = 200
MAX_INTERVAL = 200

# Above this density blocks are visited every HIGH_FREQUENCY_STRIDE pixels.
HIGH_FREQUENCY_DENSITY = 100
HIGH_FREQUENCY_STRIDE = 2


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def sampling_interval(density: int) -> int:
    """Pixel step between output cells: 200 at density 5 down to 1 at density 200."""
    span = MAX_DENSITY - MIN_DENSITY
    return max(1, math.ceil(MAX_INTERVAL * (1 - (density - MIN_DENSITY) / span)))


def output_size(width: int, height: int, density: int, aspect_scale: float) -> tuple[int, int]:
    """Return ``(rows, columns)`` produced for an image of the given size."""
    interval = sampling_interval(density)
    scaled_height = round_half_up(height * (1 + aspect_scale))
    return len(range(0, scaled_height, interval)), len(range(0, width, interval))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return "#" + "".join(f"{int(c):02x}" for c in (r, g, b))


def build_brightness_table(char_count: int) -> np.ndarray:
    levels = np.arange(256, dtype=np.float64) / 255
    table = np.floor(levels * (char_count - 1)).astype(np.int64)
    return np.minimum(table, char_count - 1)


def grayscale(rgba: np.ndarray) -> np.ndarray:
    # (r + g + b) / 3 never lands on .5, so (sum + 1) // 3 is round-half-up.
    total = rgba[..., :3].astype(np.int32).sum(axis=2)
    return ((total + 1) // 3).astype(np.uint8)


def _check_buffer(buffer: PixelBuffer) -> None:
    if buffer.width <= 0 or buffer.height <= 0:
        raise InvalidInputError(f"Pixel buffer has zero area ({buffer.width}x{buffer.height})")
    expected = buffer.width * buffer.height * 4
    if len(buffer.pixels) != expected:
        raise InvalidInputError(f"Pixel buffer holds {len(buffer.pixels)} bytes, expected {expected}")


def _round_avg(sums: np.ndarray, counts: np.ndarray) -> np.ndarray:
    return np.floor(sums / counts + 0.5).astype(np.int64)


def convert(buffer: PixelBuffer, config: ConversionConfig) -> AsciiArtifact:
    _check_buffer(buffer)
    chars = resolve_characters(config.char_set, config.custom_chars)

    width, height = buffer.width, buffer.height
    interval = sampling_interval(config.density)
    height_scale = 1 + config.aspect_scale
    scaled_height = round_half_up(height * height_scale)
    stride = HIGH_FREQUENCY_STRIDE if config.density > HIGH_FREQUENCY_DENSITY else 1

    rgba = buffer.to_array()
    gray = grayscale(rgba).astype(np.int64)
    table = build_brightness_table(len(chars))
    channels = rgba[..., :3].astype(np.int64) if config.color_enabled else None

    starts = np.arange(0, width, interval)
    column_mask = ((np.arange(width) % interval) % stride == 0).astype(np.int64)
    visited_columns = np.add.reduceat(column_mask, starts)

    rows: list[tuple[AsciiCell, ...]] = []
    for y in range(0, scaled_height, interval):
        original_y = min(height - 1, math.floor(y / height_scale))
        end_y = min(original_y + interval, height)
        band = slice(original_y, end_y, stride)
        counts = visited_columns * len(range(original_y, end_y, stride))

        gray_sums = np.add.reduceat(gray[band].sum(axis=0) * column_mask, starts)
        indices = table[_round_avg(gray_sums, counts)]

        if channels is None:
            rows.append(tuple(AsciiCell(chars[i]) for i in indices))
            continue

        color_sums = np.add.reduceat(channels[band].sum(axis=0) * column_mask[:, None], starts, axis=0)
        averages = _round_avg(color_sums, counts[:, None])
        rows.append(
            tuple(AsciiCell(chars[i], rgb_to_hex(*rgb)) for i, rgb in zip(indices, averages.tolist()))
        )

    logger.debug(
        "converted %dx%d image to %d rows (interval=%d, stride=%d)",
        width,
        height,
        len(rows),
        interval,
        stride,
        extra={"event": "convert"},
    )
    return AsciiArtifact(rows=tuple(rows))


def image_to_ascii(buffer: PixelBuffer, config: ConversionConfig) -> str:
    """Convert and render: color markup when color is enabled, plain text otherwise."""
    artifact = convert(buffer, config)
    if config.color_enabled:
        return to_markup(artifact)
    return artifact.to_text()
