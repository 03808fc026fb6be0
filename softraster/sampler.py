"""Texture addressing and point/bilinear sampling of bitmaps."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Sequence

from softraster.bitmap import Bitmap, Color


class AddressMode(IntEnum):
    WRAP = 0
    MIRROR = 1
    CLAMP = 2


class FilterMode(IntEnum):
    POINT = 0
    BILINEAR = 1
    TRILINEAR = 2


class WrapAddresser:
    """Repeats the texture outside [0, 1)."""

    @staticmethod
    def calc_address(coord: float, length: int) -> float:
        return (coord - math.floor(coord)) * length - 0.5

    @staticmethod
    def fix_address(coord: int, length: int) -> int:
        if coord < 0:
            return length - 1
        if coord >= length:
            return 0
        return coord


class ClampAddresser:
    """Holds the edge texels outside [0, 1]."""

    @staticmethod
    def calc_address(coord: float, length: int) -> float:
        return min(max(coord * length, 0.5), length - 0.5) - 0.5

    @staticmethod
    def fix_address(coord: int, length: int) -> int:
        if coord < 0:
            return 0
        if coord >= length:
            return length - 1
        return coord


class MirrorAddresser:
    """Reflects the texture on every integer boundary."""

    @staticmethod
    def calc_address(coord: float, length: int) -> float:
        whole = math.floor(coord)
        local = (1 + whole - coord) if whole & 1 else (coord - whole)
        return local * length - 0.5

    @staticmethod
    def fix_address(coord: int, length: int) -> int:
        if coord < 0:
            return 0
        if coord >= length:
            return length - 1
        return coord


_ADDRESSERS = {
    AddressMode.WRAP: WrapAddresser,
    AddressMode.MIRROR: MirrorAddresser,
    AddressMode.CLAMP: ClampAddresser,
}


def addresser_for(mode: AddressMode):
    """The addresser class implementing an address mode."""
    try:
        return _ADDRESSERS[AddressMode(mode)]
    except (KeyError, ValueError):
        raise ValueError(f"unknown address mode {mode!r}") from None


def _round_to_int(value: float) -> int:
    return math.floor(value + 0.5)


def _lerp(a: Sequence[float], b: Sequence[float], t: float) -> Color:
    return tuple(x + (y - x) * t for x, y in zip(a, b))


def sample_point(
    bitmap: Bitmap,
    u: float,
    v: float,
    x_mode: AddressMode = AddressMode.WRAP,
    y_mode: AddressMode = AddressMode.WRAP,
) -> Color:
    """Nearest-texel sample at texture coordinates (u, v)."""
    xa, ya = addresser_for(x_mode), addresser_for(y_mode)
    width, height = bitmap.width, bitmap.height
    x = xa.fix_address(_round_to_int(xa.calc_address(u, width)), width)
    y = ya.fix_address(_round_to_int(ya.calc_address(v, height)), height)
    return bitmap.get_pixel(x, y)


def sample_linear(
    bitmap: Bitmap,
    u: float,
    v: float,
    x_mode: AddressMode = AddressMode.WRAP,
    y_mode: AddressMode = AddressMode.WRAP,
) -> Color:
    """Bilinear sample of the four texels around (u, v)."""
    xa, ya = addresser_for(x_mode), addresser_for(y_mode)
    width, height = bitmap.width, bitmap.height
    fx = xa.calc_address(u, width)
    fy = ya.calc_address(v, height)
    x0 = math.floor(fx)
    y0 = math.floor(fy)
    x_frac = fx - x0
    y_frac = fy - y0
    x0 = xa.fix_address(x0, width)
    y0 = ya.fix_address(y0, height)
    x1 = xa.fix_address(x0 + 1, width)
    y1 = ya.fix_address(y0 + 1, height)
    bottom = _lerp(bitmap.get_pixel(x0, y0), bitmap.get_pixel(x1, y0), x_frac)
    top = _lerp(bitmap.get_pixel(x0, y1), bitmap.get_pixel(x1, y1), x_frac)
    return _lerp(bottom, top, y_frac)