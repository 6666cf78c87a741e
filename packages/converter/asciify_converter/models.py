"""Typed converter models."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PixelBuffer:
    """RGBA8888 pixels, row-major with the origin at the top-left."""

    width: int
    height: int
    pixels: bytes

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError("array must have shape (height, width, 3|4)")
        arr = np.asarray(arr, dtype=np.uint8)
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        height, width = arr.shape[:2]
        return cls(width=width, height=height, pixels=np.ascontiguousarray(arr).tobytes())

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "PixelBuffer":
        return cls(width=width, height=height, pixels=bytes(rgba) * (width * height))

    def to_array(self) -> np.ndarray:
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape((self.height, self.width, 4))


@dataclass(frozen=True)
class ConversionConfig:
    char_set: str = "CUSTOM"
    custom_chars: str = "@#%xo-+:."
    density: int = 50
    aspect_scale: float = 0.5
    color_enabled: bool = False


@dataclass(frozen=True)
class AsciiCell:
    char: str
    color: str | None = None


@dataclass(frozen=True)
class AsciiArtifact:
    rows: tuple[tuple[AsciiCell, ...], ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def column_counts(self) -> list[int]:
        return [len(row) for row in self.rows]

    def to_text(self) -> str:
        return "\n".join("".join(cell.char for cell in row) for row in self.rows)
