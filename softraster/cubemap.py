"""Environment maps stored as six faces or as a latitude-longitude image."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Optional, Sequence

from softraster import pbsf
from softraster.bitmap import Bitmap, BitmapType, Color
from softraster.sampler import AddressMode
from softraster.texture2d import Texture2D

BLACK: Color = (0.0, 0.0, 0.0, 1.0)


class CubemapFace(IntEnum):
    POSITIVE_X = 0
    NEGATIVE_X = 1
    POSITIVE_Y = 2
    NEGATIVE_Y = 3
    POSITIVE_Z = 4
    NEGATIVE_Z = 5


class MappingType(IntEnum):
    NONE = 0
    SIX_IMAGES = 1
    LATLONG = 2


def _normalize(v: Sequence[float]) -> tuple[float, float, float]:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


def direction_to_latlong_texcoord(direction: Sequence[float]) -> tuple[float, float]:
    """Texture coordinates of a direction in a latitude-longitude map."""
    x, y, z = _normalize(direction)
    u = math.atan2(x, z) / math.pi * 0.5 + 0.5
    v = -math.acos(min(max(y, -1.0), 1.0)) / math.pi
    return (u, v)


def direction_to_face_texcoord(direction: Sequence[float]) -> tuple[CubemapFace, tuple[float, float]]:
    """The cube face a direction hits and the texture coordinates on it."""
    x, y, z = _normalize(direction)
    ax, ay, az = abs(x), abs(y), abs(z)
    if ax > ay and ax > az:
        if x > 0:
            face, a, b, m = CubemapFace.POSITIVE_X, z, y, ax
        else:
            face, a, b, m = CubemapFace.NEGATIVE_X, -z, y, ax
    elif ay > az:
        if y > 0:
            face, a, b, m = CubemapFace.POSITIVE_Y, x, z, ay
        else:
            face, a, b, m = CubemapFace.NEGATIVE_Y, x, -z, ay
    else:
        if z > 0:
            face, a, b, m = CubemapFace.POSITIVE_Z, -x, y, az
        else:
            face, a, b, m = CubemapFace.NEGATIVE_Z, x, y, az
    if m == 0.0:
        return face, (0.5, 0.5)
    return face, ((a / m + 1.0) / 2.0, (b / m + 1.0) / 2.0)


def _latlong_direction(x: int, y: int, width: int, height: int) -> tuple[float, float, float]:
    u = x * math.pi * 2.0 / width
    v = y * math.pi / height
    return (-math.sin(u) * math.sin(v), -math.cos(v), -math.cos(u) * math.sin(v))


def _use_wrap(texture: Texture2D) -> None:
    texture.x_address_mode = AddressMode.WRAP
    texture.y_address_mode = AddressMode.WRAP


class Cubemap:
    """An environment map sampled by direction."""

    def __init__(self) -> None:
        self.mapping_type = MappingType.NONE
        self._images: list[Optional[Texture2D]] = [None] * 6
        self._latlong: Optional[Texture2D] = None

    def init_with_6_images(self, images: Sequence[Optional[Texture2D]]) -> None:
        """Use six face textures, ordered as CubemapFace."""
        images = list(images)
        if len(images) != 6:
            raise ValueError(f"a cubemap needs 6 face images, got {len(images)}")
        self._images = images
        self.mapping_type = MappingType.SIX_IMAGES

    def init_with_latlong(self, texture: Texture2D) -> None:
        """Use a latitude-longitude texture; its addressing is set to wrap."""
        self._latlong = texture
        _use_wrap(texture)
        self.mapping_type = MappingType.LATLONG

    def sample(self, direction: Sequence[float], roughness: float = 0.0) -> Color:
        if self.mapping_type == MappingType.SIX_IMAGES:
            return self._sample_faces(direction)
        if self.mapping_type == MappingType.LATLONG:
            return self._sample_latlong(direction, self.roughness_to_lod(roughness))
        return BLACK

    def _sample_faces(self, direction: Sequence[float]) -> Color:
        face, texcoord = direction_to_face_texcoord(direction)
        texture = self._images[face]
        if texture is None:
            return BLACK
        return texture.sample(texcoord)

    def _sample_latlong(self, direction: Sequence[float], lod: float) -> Color:
        if self._latlong is None:
            return BLACK
        return self._latlong.sample(direction_to_latlong_texcoord(direction), lod)

    def map_6_images_to_latlong(self, height: int, pixel_type: BitmapType) -> None:
        """Resample the six faces into a latitude-longitude map twice as wide as high."""
        width = height * 2
        bitmap = Bitmap(width, height, pixel_type)
        for x in range(width):
            for y in range(height):
                bitmap.set_pixel(x, y, self._sample_faces(_latlong_direction(x, y, width, height)))
        self._latlong = Texture2D(bitmap)
        _use_wrap(self._latlong)
        self._images = [None] * 6
        self.mapping_type = MappingType.LATLONG

    def prefilter_env_map(self, map_count: int, sample_count: int) -> None:
        """Replace the latlong mip chain by GGX-prefiltered maps of rising roughness."""
        if self.mapping_type != MappingType.LATLONG or self._latlong is None:
            raise ValueError("prefiltering needs a latitude-longitude cubemap")
        height = self._latlong.height
        pixel_type = self._latlong.bitmap(0).pixel_type
        bitmaps = []
        for i in range(map_count):
            height = max(height >> 1, 1)
            width = height * 2
            bitmap = Bitmap(width, height, pixel_type)
            roughness = (i + 1) / map_count
            for y in range(height):
                for x in range(width):
                    rgb = pbsf.prefilter_env_map(
                        self, roughness, _latlong_direction(x, y, width, height), sample_count
                    )
                    bitmap.set_pixel(x, y, (*rgb, 1.0))
            bitmaps.append(bitmap)
        self._latlong.set_mipmaps(bitmaps)

    def faces(self) -> tuple[Optional[Texture2D], ...]:
        if self.mapping_type != MappingType.SIX_IMAGES:
            raise ValueError("cubemap is not made of six images")
        return tuple(self._images)

    def latlong_texture(self) -> Texture2D:
        if self.mapping_type != MappingType.LATLONG or self._latlong is None:
            raise ValueError("cubemap has no latitude-longitude texture")
        return self._latlong

    def roughness_to_lod(self, roughness: float) -> float:
        if self.mapping_type != MappingType.LATLONG or self._latlong is None:
            return 0.0
        return roughness * self._latlong.mipmap_count()