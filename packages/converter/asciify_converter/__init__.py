"""Converter package turning RGBA pixel buffers into character art."""

from .adjust import apply_brightness_contrast
from .charsets import CHAR_SETS, CUSTOM_CHAR_SET, DEFAULT_CUSTOM_CHARS, list_char_sets, resolve_characters
from .converter import (
    build_brightness_table,
    convert,
    image_to_ascii,
    output_size,
    rgb_to_hex,
    sampling_interval,
)
from .errors import AsciifyError, ImageLoadError, InvalidConfigurationError, InvalidInputError
from .loader import MAX_WIDTH, image_to_pixel_buffer, load_pixel_buffer
from .markup import parse_markup, strip_markup, to_markup
from .models import AsciiArtifact, AsciiCell, ConversionConfig, PixelBuffer

__all__ = [
    "AsciiArtifact",
    "AsciiCell",
    "AsciifyError",
    "CHAR_SETS",
    "CUSTOM_CHAR_SET",
    "ConversionConfig",
    "DEFAULT_CUSTOM_CHARS",
    "ImageLoadError",
    "InvalidConfigurationError",
    "InvalidInputError",
    "MAX_WIDTH",
    "PixelBuffer",
    "apply_brightness_contrast",
    "build_brightness_table",
    "convert",
    "image_to_ascii",
    "image_to_pixel_buffer",
    "list_char_sets",
    "load_pixel_buffer",
    "output_size",
    "parse_markup",
    "resolve_characters",
    "rgb_to_hex",
    "sampling_interval",
    "strip_markup",
    "to_markup",
]
