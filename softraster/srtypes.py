"""Screen-space projections and small fixed-size primitive containers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Iterator, Sequence, TypeVar

T = TypeVar("T")


def _round_to_int(value: float) -> int:
    return math.floor(value + 0.5)


def orient2d(x0: int, y0: int, x1: int, y1: int, x2: int, y2: int) -> int:
    """Twice the signed area of the triangle (p0, p1, p2)."""
    return (x1 - x0) * (y2 - y1) - (y1 - y0) * (x2 - x1)


def orient2d_points(p0: "Projection", p1: "Projection", p2: "Projection") -> int:
    """Orientation of three projected points."""
    return orient2d(p0.x, p0.y, p1.x, p1.y, p2.x, p2.y)


@dataclass
class Projection:
    """A vertex projected to integer viewport coordinates."""

    x: int = 0
    y: int = 0
    z: float = 0.0
    inv_w: float = 1.0

    @staticmethod
    def from_clip(position: Sequence[float], width: int, height: int) -> "Projection":
        """Project a homogeneous clip-space position onto a width x height viewport."""
        x, y, z, w = position[0], position[1], position[2], position[3]
        if not w > 0.0:
            raise ValueError(f"clip-space w must be positive, got {w}")
        inv_w = 1.0 / w
        return Projection(
            x=_round_to_int((x * inv_w + 1.0) / 2.0 * width),
            y=_round_to_int((y * inv_w + 1.0) / 2.0 * height),
            z=z * inv_w,
            inv_w=inv_w,
        )


class _Fixed:
    _size = 0

    def _check(self, index: int) -> None:
        if not isinstance(index, int) or not 0 <= index < self._size:
            raise IndexError(f"{type(self).__name__} index out of range: {index!r}")

    def __getitem__(self, index: int) -> Any:
        self._check(index)
        return getattr(self, f"v{index}")

    def __setitem__(self, index: int, value: Any) -> None:
        self._check(index)
        setattr(self, f"v{index}", value)

    def __iter__(self) -> Iterator[Any]:
        return (getattr(self, f"v{i}") for i in range(self._size))

    def __len__(self) -> int:
        return self._size


@dataclass
class Line(_Fixed, Generic[T]):
    """Two vertices."""

    v0: T
    v1: T
    _size = 2

    def __getitem__(self, index: int) -> T:
        return _Fixed.__getitem__(self, index)


@dataclass
class Triangle(_Fixed, Generic[T]):
    """Three vertices."""

    v0: T
    v1: T
    v2: T
    _size = 3

    def __getitem__(self, index: int) -> T:
        return _Fixed.__getitem__(self, index)


@dataclass
class Quad(_Fixed, Generic[T]):
    """Four vertices, usually a 2x2 pixel block."""

    v0: T
    v1: T
    v2: T
    v3: T
    _size = 4

    def __getitem__(self, index: int) -> T:
        return _Fixed.__getitem__(self, index)