"""Per-vertex and per-pixel shader outputs (varyings) and their interpolation."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from softraster.clipper import calculate_clip_code

POSITION_SIZE = 4


def lerp_values(a: Sequence[float], b: Sequence[float], t: float) -> np.ndarray:
    """Component-wise a + (b - a) * t."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return a + (b - a) * t


def triangle_interp_values(
    a: Sequence[float], b: Sequence[float], c: Sequence[float], x: float, y: float, z: float
) -> np.ndarray:
    """Component-wise weighted sum a * x + b * y + c * z."""
    return (
        np.asarray(a, dtype=np.float64) * x
        + np.asarray(b, dtype=np.float64) * y
        + np.asarray(c, dtype=np.float64) * z
    )


class VertexVaryingData:
    """A varying record; its first four components are the clip-space position."""

    def __init__(self, buffer: Optional["VaryingDataBuffer"], data: np.ndarray) -> None:
        self.buffer = buffer
        self.data = data
        self.clip_code = 0

    @property
    def position(self) -> tuple[float, float, float, float]:
        return tuple(float(c) for c in self.data[:POSITION_SIZE])

    @position.setter
    def position(self, value: Sequence[float]) -> None:
        self.data[:POSITION_SIZE] = value

    def __repr__(self) -> str:
        return f"VertexVaryingData(data={self.data.tolist()!r}, clip_code={self.clip_code:#x})"

    @staticmethod
    def linear_interp(a: "VertexVaryingData", b: "VertexVaryingData", t: float) -> "VertexVaryingData":
        """A new record between a and b, stored in the buffer's dynamic pool."""
        buffer = a.buffer
        if buffer is None:
            raise ValueError("varying data is not attached to a buffer")
        if b.buffer is not buffer:
            raise ValueError("varying data belong to different buffers")
        data = buffer.create_dynamic()
        data[:] = lerp_values(a.data, b.data, t)
        out = VertexVaryingData(buffer, data)
        out.clip_code = calculate_clip_code(out.position)
        return out

    @staticmethod
    def triangle_interp(
        slot: int,
        v0: "VertexVaryingData",
        v1: "VertexVaryingData",
        v2: "VertexVaryingData",
        x: float,
        y: float,
        z: float,
    ) -> np.ndarray:
        """Interpolate three records into the buffer's pixel slot and return its data."""
        buffer = v0.buffer
        if buffer is None:
            raise ValueError("varying data is not attached to a buffer")
        if v1.buffer is not buffer or v2.buffer is not buffer:
            raise ValueError("varying data belong to different buffers")
        data = buffer.pixel(slot).data
        data[:] = triangle_interp_values(v0.data, v1.data, v2.data, x, y, z)
        return data


class VaryingDataBuffer:
    """Storage for vertex, dynamic (clipping) and pixel varying records of one size."""

    def __init__(self, size: int) -> None:
        if size < POSITION_SIZE:
            raise ValueError(
                f"varying data needs at least {POSITION_SIZE} components, got {size}"
            )
        self.size = size
        self._vertices: list[VertexVaryingData] = []
        self._pixels: list[VertexVaryingData] = []
        self._dynamic: list[np.ndarray] = []
        self._dynamic_next = 0

    def _records(self, count: int) -> list[VertexVaryingData]:
        if count < 0:
            raise ValueError("count must not be negative")
        storage = np.zeros((count, self.size), dtype=np.float64)
        return [VertexVaryingData(self, row) for row in storage]

    @staticmethod
    def _get(records: list[VertexVaryingData], index: int, kind: str) -> VertexVaryingData:
        if not 0 <= index < len(records):
            raise IndexError(f"{kind} index out of range: {index}")
        return records[index]

    def init_vertices(self, count: int) -> None:
        self._vertices = self._records(count)

    def vertex(self, index: int) -> VertexVaryingData:
        return self._get(self._vertices, index, "vertex")

    def init_dynamic(self) -> None:
        self._dynamic = []
        self._dynamic_next = 0

    def create_dynamic(self) -> np.ndarray:
        """Storage for one more record; reused after reset_dynamic."""
        if self._dynamic_next == len(self._dynamic):
            self._dynamic.append(np.zeros(self.size, dtype=np.float64))
        data = self._dynamic[self._dynamic_next]
        self._dynamic_next += 1
        return data

    def reset_dynamic(self) -> None:
        self._dynamic_next = 0

    def init_pixels(self, slots: int) -> None:
        self._pixels = self._records(slots)

    def pixel(self, slot: int) -> VertexVaryingData:
        return self._get(self._pixels, slot, "pixel slot")