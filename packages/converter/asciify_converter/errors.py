"""Exception types raised by the conversion pipeline."""

from __future__ import annotations


class AsciifyError(Exception):
    pass


class InvalidInputError(AsciifyError, ValueError):
    """Pixel buffer is zero-area or does not match its declared size."""


class InvalidConfigurationError(AsciifyError, ValueError):
    """Character set is empty or names an unknown preset."""


class ImageLoadError(AsciifyError, OSError):
    pass
