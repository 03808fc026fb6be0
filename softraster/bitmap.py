"""Two-dimensional pixel storage in byte and float formats, with image file I/O.

Row 0 is the bottom row of the image: rows are flipped when reading and
writing files.
"""

from __future__ import annotations

import os
from enum import IntEnum
from pathlib import Path
from typing import Sequence, Union

import numpy as np
from PIL import Image

Color = tuple[float, float, float, float]
PathLike = Union[str, "os.PathLike[str]"]


class BitmapType(IntEnum):
    UNKNOWN = 0
    ALPHA8 = 1
    RGB24 = 2
    RGBA32 = 3
    ALPHA_FLOAT = 4
    RGB_FLOAT = 5
    RGBA_FLOAT = 6


_LAYOUT = {
    BitmapType.ALPHA8: (1, np.uint8),
    BitmapType.RGB24: (3, np.uint8),
    BitmapType.RGBA32: (4, np.uint8),
    BitmapType.ALPHA_FLOAT: (1, np.float32),
    BitmapType.RGB_FLOAT: (3, np.float32),
    BitmapType.RGBA_FLOAT: (4, np.float32),
}

_IMAGE_MODES = {
    "L": BitmapType.ALPHA8,
    "RGB": BitmapType.RGB24,
    "RGBA": BitmapType.RGBA32,
}


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _to_byte(value: float) -> int:
    return int(_clamp01(value) * 255.0 + 0.5)


class Bitmap:
    """A width x height grid of pixels of one BitmapType."""

    def __init__(self, width: int, height: int, pixel_type: BitmapType) -> None:
        pixel_type = BitmapType(pixel_type)
        if pixel_type not in _LAYOUT:
            raise ValueError(f"cannot allocate a bitmap of type {pixel_type.name}")
        if width < 0 or height < 0:
            raise ValueError(f"invalid bitmap size {width}x{height}")
        channels, dtype = _LAYOUT[pixel_type]
        self._width = width
        self._height = height
        self._type = pixel_type
        self._pixels = np.zeros((height, width, channels), dtype=dtype)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pixel_type(self) -> BitmapType:
        return self._type

    @property
    def pixels(self) -> np.ndarray:
        """The pixel array, indexed [y, x, channel]; writes go to the bitmap."""
        return self._pixels

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self._width}x{self._height} bitmap"
            )

    def _encode(self, color: Sequence[float]) -> tuple:
        r, g, b, a = color
        t = self._type
        if t is BitmapType.ALPHA8:
            return (_to_byte(a),)
        if t is BitmapType.RGB24:
            return (_to_byte(r), _to_byte(g), _to_byte(b))
        if t is BitmapType.RGBA32:
            return (_to_byte(r), _to_byte(g), _to_byte(b), _to_byte(a))
        if t is BitmapType.ALPHA_FLOAT:
            return (a,)
        if t is BitmapType.RGB_FLOAT:
            return (r, g, b)
        return (r, g, b, a)

    def get_pixel(self, x: int, y: int) -> Color:
        """The pixel as an (r, g, b, a) float color."""
        self._check(x, y)
        p = self._pixels[y, x]
        t = self._type
        if t is BitmapType.ALPHA8:
            return (1.0, 1.0, 1.0, int(p[0]) / 255.0)
        if t is BitmapType.RGB24:
            return (int(p[0]) / 255.0, int(p[1]) / 255.0, int(p[2]) / 255.0, 1.0)
        if t is BitmapType.RGBA32:
            return tuple(int(c) / 255.0 for c in p)
        if t is BitmapType.ALPHA_FLOAT:
            return (1.0, 1.0, 1.0, float(p[0]))
        if t is BitmapType.RGB_FLOAT:
            return (float(p[0]), float(p[1]), float(p[2]), 1.0)
        return tuple(float(c) for c in p)

    def set_pixel(self, x: int, y: int, color: Sequence[float]) -> None:
        """Store the channels of an (r, g, b, a) color this format holds."""
        self._check(x, y)
        self._pixels[y, x] = self._encode(color)

    def get_alpha(self, x: int, y: int) -> float:
        self._check(x, y)
        p = self._pixels[y, x]
        t = self._type
        if t is BitmapType.ALPHA8:
            return int(p[0]) / 255.0
        if t is BitmapType.RGBA32:
            return int(p[3]) / 255.0
        if t is BitmapType.ALPHA_FLOAT:
            return float(p[0])
        if t is BitmapType.RGBA_FLOAT:
            return float(p[3])
        return 1.0

    def set_alpha(self, x: int, y: int, alpha: float) -> None:
        """Store alpha; formats without an alpha channel ignore it."""
        self._check(x, y)
        t = self._type
        if t is BitmapType.ALPHA8:
            self._pixels[y, x, 0] = int(_clamp01(alpha) * 255.0)
        elif t is BitmapType.RGBA32:
            self._pixels[y, x, 3] = int(_clamp01(alpha) * 255.0)
        elif t is BitmapType.ALPHA_FLOAT:
            self._pixels[y, x, 0] = alpha
        elif t is BitmapType.RGBA_FLOAT:
            self._pixels[y, x, 3] = alpha

    def fill(self, color: Sequence[float]) -> None:
        """Set every pixel to the color."""
        self._pixels[...] = self._encode(color)

    @classmethod
    def load(cls, path: PathLike) -> "Bitmap":
        """Read an 8-bit L/RGB/RGBA image or a Radiance HDR file."""
        path = os.fspath(path)
        with open(path, "rb") as fh:
            magic = fh.read(2)
        if magic == b"#?":
            rgb = _read_hdr(path)
            bitmap = cls(rgb.shape[1], rgb.shape[0], BitmapType.RGB_FLOAT)
            bitmap._pixels[...] = np.flipud(rgb)
            return bitmap
        with Image.open(path) as image:
            pixel_type = _IMAGE_MODES.get(image.mode)
            if pixel_type is None:
                raise ValueError(f"{path}: unsupported image mode {image.mode!r}")
            data = np.asarray(image)
        channels, _ = _LAYOUT[pixel_type]
        height, width = data.shape[:2]
        bitmap = cls(width, height, pixel_type)
        bitmap._pixels[...] = np.flipud(data.reshape(height, width, channels))
        return bitmap

    def save(self, path: PathLike) -> None:
        """Write byte formats as PNG, float alpha as TIFF, float color as HDR."""
        path = os.fspath(path)
        data = np.flipud(self._pixels)
        t = self._type
        if t is BitmapType.ALPHA8:
            Image.fromarray(np.ascontiguousarray(data[..., 0])).save(path, format="PNG")
        elif t in (BitmapType.RGB24, BitmapType.RGBA32):
            Image.fromarray(np.ascontiguousarray(data)).save(path, format="PNG")
        elif t is BitmapType.ALPHA_FLOAT:
            Image.fromarray(np.ascontiguousarray(data[..., 0])).save(path, format="TIFF")
        else:
            _write_hdr(path, data[..., :3])


def _float_to_rgbe(rgb: np.ndarray) -> np.ndarray:
    rgb = np.maximum(np.asarray(rgb, dtype=np.float64), 0.0)
    peak = rgb.max(axis=2)
    mantissa, exponent = np.frexp(peak)
    valid = peak > 1e-32
    scale = np.where(valid, mantissa * 256.0 / np.where(valid, peak, 1.0), 0.0)
    out = np.zeros(rgb.shape[:2] + (4,), dtype=np.uint8)
    out[..., :3] = np.minimum(rgb * scale[..., None], 255.0).astype(np.uint8)
    out[..., 3] = np.clip(np.where(valid, exponent + 128, 0), 0, 255)
    return out


def _rgbe_to_float(rgbe: np.ndarray) -> np.ndarray:
    exponent = rgbe[..., 3].astype(np.int64)
    factor = np.where(exponent > 0, np.ldexp(1.0, exponent - 136), 0.0)
    return (rgbe[..., :3] * factor[..., None]).astype(np.float32)


def _write_hdr(path: str, rgb: np.ndarray) -> None:
    height, width = rgb.shape[:2]
    rgbe = _float_to_rgbe(rgb)
    header = f"#?RADIANCE\nFORMAT=32-bit_rle_rgbe\n\n-Y {height} +X {width}\n"
    with open(path, "wb") as fh:
        fh.write(header.encode("ascii"))
        if 8 <= width <= 0x7FFF:
            for row in rgbe:
                fh.write(bytes((2, 2, width >> 8, width & 0xFF)))
                for channel in row.T:
                    for start in range(0, width, 128):
                        chunk = channel[start:start + 128]
                        fh.write(bytes((len(chunk),)))
                        fh.write(chunk.tobytes())
        else:
            fh.write(rgbe.tobytes())


def _read_hdr(path: str) -> np.ndarray:
    data = Path(path).read_bytes()
    header_end = data.find(b"\n\n")
    if not data.startswith(b"#?") or header_end < 0:
        raise ValueError(f"{path}: not a Radiance HDR file")
    for line in data[:header_end].decode("ascii", "replace").splitlines()[1:]:
        if line.startswith("FORMAT=") and line != "FORMAT=32-bit_rle_rgbe":
            raise ValueError(f"{path}: unsupported HDR format {line[7:]!r}")
    res_end = data.find(b"\n", header_end + 2)
    parts = data[header_end + 2:res_end].split() if res_end >= 0 else []
    if len(parts) != 4 or parts[0] != b"-Y" or parts[2] != b"+X":
        raise ValueError(f"{path}: unsupported HDR resolution line")
    height, width = int(parts[1]), int(parts[3])
    try:
        rgbe = _decode_scanlines(data, res_end + 1, width, height)
    except IndexError:
        raise ValueError(f"{path}: truncated HDR data") from None
    return _rgbe_to_float(rgbe)


def _decode_scanlines(data: bytes, pos: int, width: int, height: int) -> np.ndarray:
    buf = np.frombuffer(data, dtype=np.uint8)
    out = np.empty((height, width, 4), dtype=np.uint8)
    for y in range(height):
        if (8 <= width <= 0x7FFF and data[pos] == 2 and data[pos + 1] == 2
                and not data[pos + 2] & 0x80):
            if (data[pos + 2] << 8 | data[pos + 3]) != width:
                raise ValueError("HDR scanline width mismatch")
            pos += 4
            for c in range(4):
                x = 0
                while x < width:
                    count = data[pos]
                    pos += 1
                    if count > 128:
                        count -= 128
                        if x + count > width:
                            raise ValueError("bad HDR run length")
                        out[y, x:x + count, c] = data[pos]
                        pos += 1
                    else:
                        if count == 0 or x + count > width or pos + count > len(data):
                            raise ValueError("bad HDR run length")
                        out[y, x:x + count, c] = buf[pos:pos + count]
                        pos += count
                    x += count
        else:
            end = pos + width * 4
            if end > len(data):
                raise IndexError("truncated")
            out[y] = buf[pos:end].reshape(width, 4)
            pos = end
    return out