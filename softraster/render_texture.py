"""A render target: color and depth buffers plus optional g-buffers."""

from __future__ import annotations

from typing import Optional

from softraster.bitmap import Bitmap, BitmapType

GBUFFER_COUNT = 3


class RenderTexture:
    """Color (RGBA32) and depth (float) buffers of one size, and three g-buffer slots."""

    def __init__(self, width: int, height: int) -> None:
        self._setup(
            Bitmap(width, height, BitmapType.RGBA32),
            Bitmap(width, height, BitmapType.ALPHA_FLOAT),
        )

    @classmethod
    def from_buffers(cls, color_buffer: Bitmap, depth_buffer: Bitmap) -> "RenderTexture":
        """Build a render texture around existing buffers of equal size."""
        if color_buffer is None or depth_buffer is None:
            raise ValueError("color and depth buffers are required")
        if (color_buffer.width, color_buffer.height) != (depth_buffer.width, depth_buffer.height):
            raise ValueError("color and depth buffers differ in size")
        texture = cls.__new__(cls)
        texture._setup(color_buffer, depth_buffer)
        return texture

    def _setup(self, color_buffer: Bitmap, depth_buffer: Bitmap) -> None:
        self._color = color_buffer
        self._depth = depth_buffer
        self._width = color_buffer.width
        self._height = color_buffer.height
        self._gbuffers: list[Optional[Bitmap]] = [None] * GBUFFER_COUNT

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def color_buffer(self) -> Bitmap:
        return self._color

    @property
    def depth_buffer(self) -> Bitmap:
        return self._depth

    @staticmethod
    def _slot(index: int) -> int:
        if not 0 <= index < GBUFFER_COUNT:
            raise IndexError("g-buffer index out of range")
        return index

    def create_gbuffer(self, index: int, pixel_type: BitmapType) -> Bitmap:
        """Allocate a g-buffer of this texture's size in the given slot."""
        self._slot(index)
        bitmap = Bitmap(self._width, self._height, pixel_type)
        self.set_gbuffer(index, bitmap)
        return bitmap

    def set_gbuffer(self, index: int, bitmap: Optional[Bitmap]) -> None:
        self._slot(index)
        if bitmap is not None and (bitmap.width, bitmap.height) != (self._width, self._height):
            raise ValueError("g-buffer size differs from the render texture")
        self._gbuffers[index] = bitmap

    def clear_gbuffer(self, index: int) -> None:
        self.set_gbuffer(index, None)

    def gbuffer(self, index: int) -> Optional[Bitmap]:
        return self._gbuffers[self._slot(index)]