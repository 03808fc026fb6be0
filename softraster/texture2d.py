"""Sampled 2D textures with mipmaps and a shared cache of loaded files."""

from __future__ import annotations

import math
import os
from typing import ClassVar, Iterable, Optional, Sequence

import numpy as np

from softraster.bitmap import Bitmap, BitmapType, Color, PathLike
from softraster.sampler import AddressMode, FilterMode, sample_linear, sample_point

_BYTE_TYPES = (BitmapType.ALPHA8, BitmapType.RGB24, BitmapType.RGBA32)
_ALPHA_TYPES = (BitmapType.ALPHA8, BitmapType.ALPHA_FLOAT)
_RGB_TYPES = (BitmapType.RGB24, BitmapType.RGB_FLOAT)


def _round_to_int(value: float) -> int:
    return math.floor(value + 0.5)


def _lerp(a: Sequence[float], b: Sequence[float], t: float) -> Color:
    return tuple(x + (y - x) * t for x, y in zip(a, b))


def _decode(bitmap: Bitmap) -> np.ndarray:
    """All pixels of a bitmap as a [y, x, rgba] float array."""
    data = bitmap.pixels.astype(np.float64)
    t = bitmap.pixel_type
    if t in _BYTE_TYPES:
        data = data / 255.0
    colors = np.ones(data.shape[:2] + (4,), dtype=np.float64)
    if t in _ALPHA_TYPES:
        colors[..., 3] = data[..., 0]
    elif t in _RGB_TYPES:
        colors[..., :3] = data
    else:
        colors[...] = data
    return colors


def _encode(bitmap: Bitmap, colors: np.ndarray) -> None:
    """Store a [y, x, rgba] float array into a bitmap of the same size."""
    t = bitmap.pixel_type
    if t in _ALPHA_TYPES:
        data = colors[..., 3:4]
    elif t in _RGB_TYPES:
        data = colors[..., :3]
    else:
        data = colors
    if t in _BYTE_TYPES:
        data = np.floor(np.clip(data, 0.0, 1.0) * 255.0 + 0.5)
    bitmap.pixels[...] = data


class Texture2D:
    """A bitmap with a mip chain, addressing modes and a filter mode."""

    _pool: ClassVar[dict[str, "Texture2D"]] = {}

    def __init__(self, bitmap: Bitmap) -> None:
        if bitmap is None:
            raise ValueError("a texture needs a bitmap")
        self._main = bitmap
        self._mipmaps: list[Bitmap] = []
        self.x_address_mode: AddressMode = AddressMode.WRAP
        self.y_address_mode: AddressMode = AddressMode.WRAP
        self.filter_mode: FilterMode = FilterMode.BILINEAR
        self.file = ""

    @property
    def width(self) -> int:
        return self._main.width

    @property
    def height(self) -> int:
        return self._main.height

    @classmethod
    def load(cls, path: PathLike) -> "Texture2D":
        """Load a texture from a file, reusing an earlier load of the same path."""
        key = os.fspath(path)
        cached = Texture2D._pool.get(key)
        if cached is not None:
            return cached
        texture = cls(Bitmap.load(key))
        texture.file = key
        Texture2D._pool[key] = texture
        return texture

    @classmethod
    def clear_pool(cls) -> None:
        """Forget every cached texture."""
        Texture2D._pool.clear()

    def convert_bump_to_normal(self, strength: float = 10.0) -> None:
        """Replace the alpha of the bitmap, read as height, by an RGB24 normal map."""
        if strength == 0:
            raise ValueError("bump strength must not be zero")
        bump = _decode(self._main)[..., 3]
        height, width = bump.shape
        xs = np.arange(width)
        ys = np.arange(height)
        left = bump[:, np.maximum(xs - 1, 0)]
        right = bump[:, np.minimum(xs + 1, width - 1)]
        below = bump[np.maximum(ys - 1, 0), :]
        above = bump[np.minimum(ys + 1, height - 1), :]
        normal = np.stack(
            [left - right, below - above, np.full_like(bump, 1.0 / strength)], axis=-1
        )
        normal /= np.linalg.norm(normal, axis=-1, keepdims=True)
        colors = np.ones((height, width, 4), dtype=np.float64)
        colors[..., :3] = (normal + 1.0) / 2.0
        bitmap = Bitmap(width, height, BitmapType.RGB24)
        _encode(bitmap, colors)
        self._main = bitmap

    def generate_mipmaps(self) -> bool:
        """Build the box-filtered mip chain; False if the bitmap is not a square power of two."""
        size = self._main.width
        if size != self._main.height or size <= 0 or size & (size - 1):
            return False
        self._mipmaps = []
        source = _decode(self._main)
        size >>= 1
        while size > 0:
            top = _lerp_array(source[0::2, 0::2], source[0::2, 1::2])
            bottom = _lerp_array(source[1::2, 0::2], source[1::2, 1::2])
            mipmap = Bitmap(size, size, self._main.pixel_type)
            _encode(mipmap, _lerp_array(top, bottom))
            self._mipmaps.append(mipmap)
            source = _decode(mipmap)
            size >>= 1
        return True

    def calc_lod(self, ddx: Sequence[float], ddy: Sequence[float]) -> float:
        """Mip level from texture-coordinate derivatives across one pixel."""
        w2 = float(self.width) ** 2
        h2 = float(self.height) ** 2
        delta = max((ddx[0] ** 2 + ddx[1] ** 2) * w2, (ddy[0] ** 2 + ddy[1] ** 2) * h2)
        if delta <= 0.0:
            return 0.0
        return max(0.0, 0.5 * math.log2(delta))

    def _sample_level(self, level: int, uv: Sequence[float], sampler) -> Color:
        return sampler(
            self.bitmap(level), uv[0], uv[1], self.x_address_mode, self.y_address_mode
        )

    def sample(self, uv: Sequence[float], lod: float = 0.0) -> Color:
        """Filtered color at texture coordinates uv and mip level lod."""
        if self.filter_mode == FilterMode.POINT:
            return self._sample_level(self.fix_mip_level(_round_to_int(lod)), uv, sample_point)
        if self.filter_mode == FilterMode.BILINEAR:
            return self._sample_level(self.fix_mip_level(_round_to_int(lod)), uv, sample_linear)
        level1 = self.fix_mip_level(math.floor(lod))
        level2 = self.fix_mip_level(level1 + 1)
        color1 = self._sample_level(level1, uv, sample_linear)
        if level1 == level2:
            return color1
        color2 = self._sample_level(level2, uv, sample_linear)
        return _lerp(color1, color2, lod - level1)

    def sample_grad(
        self, uv: Sequence[float], ddx: Sequence[float], ddy: Sequence[float]
    ) -> Color:
        """Sample at the level chosen from derivatives."""
        return self.sample(uv, self.calc_lod(ddx, ddy))

    def mipmap_count(self) -> int:
        return len(self._mipmaps)

    def set_mipmaps(self, bitmaps: Iterable[Bitmap]) -> None:
        self._mipmaps = list(bitmaps)

    def bitmap(self, level: int = 0) -> Bitmap:
        """The bitmap of a mip level; level 0 is the full-size image."""
        level = self.fix_mip_level(level)
        return self._main if level == 0 else self._mipmaps[level - 1]

    def fix_mip_level(self, level: int) -> int:
        return min(max(level, 0), len(self._mipmaps))


def _lerp_array(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a + (b - a) * 0.5


__all__ = ["Texture2D", "Optional"]