"""Per-pixel 8-bit stencil values."""

from __future__ import annotations

import numpy as np

from softraster.bitmap import Bitmap, BitmapType, PathLike


class StencilBuffer:
    """A grid of stencil values in 0..255, indexed as buffer[x, y]."""

    def __init__(self, width: int, height: int) -> None:
        self._bitmap = Bitmap(width, height, BitmapType.ALPHA8)

    @property
    def width(self) -> int:
        return self._bitmap.width

    @property
    def height(self) -> int:
        return self._bitmap.height

    @property
    def pixels(self) -> np.ndarray:
        """The stencil values as a [y, x] array; writes go to the buffer."""
        return self._bitmap.pixels[..., 0]

    @staticmethod
    def _value(value: int) -> int:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"stencil value must be in 0..255, got {value}")
        return int(value)

    def _position(self, key: tuple[int, int]) -> tuple[int, int]:
        x, y = key
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"stencil position ({x}, {y}) out of range")
        return x, y

    def fill(self, value: int) -> None:
        self.pixels[...] = self._value(value)

    def __getitem__(self, key: tuple[int, int]) -> int:
        x, y = self._position(key)
        return int(self.pixels[y, x])

    def __setitem__(self, key: tuple[int, int], value: int) -> None:
        x, y = self._position(key)
        self.pixels[y, x] = self._value(value)

    def save(self, path: PathLike) -> None:
        """Write the stencil values as a grayscale PNG."""
        self._bitmap.save(path)