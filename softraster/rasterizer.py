"""Half-space triangle rasterization in 2x2 pixel blocks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from softraster.srtypes import Projection, Triangle, orient2d

Quad4 = tuple[float, float, float, float]


@dataclass(frozen=True)
class QuadFragment:
    """A 2x2 block at (x, y); bit i of mask covers pixel (x + (i & 1), y + (i >> 1))."""

    x: int
    y: int
    mask: int
    depth: Quad4
    wx: Quad4
    wy: Quad4
    wz: Quad4


def _is_top_left(dx: int, dy: int) -> bool:
    return dy > 0 or (dy == 0 and dx < 0)


class Rasterizer:
    """Walks the pixels of projected triangles inside a width x height viewport."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def rasterize_triangle(self, triangle: Triangle[Projection]) -> Iterator[QuadFragment]:
        """Yield every 2x2 block that has at least one covered pixel."""
        p0, p1, p2 = triangle.v0, triangle.v1, triangle.v2
        min_x = max(min(p0.x, p1.x, p2.x), 0)
        min_y = max(min(p0.y, p1.y, p2.y), 0)
        max_x = min(max(p0.x, p1.x, p2.x), self.width - 1)
        max_y = min(max(p0.y, p1.y, p2.y), self.height - 1)
        if max_x < min_x or max_y < min_y:
            return

        edges = (
            (p1.x - p0.x, p1.y - p0.y),
            (p2.x - p1.x, p2.y - p1.y),
            (p0.x - p2.x, p0.y - p2.y),
        )
        start = [
            orient2d(p1.x, p1.y, p0.x, p0.y, min_x, min_y),
            orient2d(p2.x, p2.y, p1.x, p1.y, min_x, min_y),
            orient2d(p0.x, p0.y, p2.x, p2.y, min_x, min_y),
        ]
        start = [s if _is_top_left(dx, dy) else s - 1 for s, (dx, dy) in zip(start, edges)]
        deltas = [(0, dy, -dx, dy - dx) for dx, dy in edges]

        for y in range(min_y, max_y + 1, 2):
            w = list(start)
            for x in range(min_x, max_x + 1, 2):
                e0, e1, e2 = ([we + d for d in de] for we, de in zip(w, deltas))
                mask = 0
                for i, (a, b, c) in enumerate(zip(e0, e1, e2)):
                    if (a | b | c) >= 0:
                        mask |= 1 << i
                if x + 1 >= max_x:
                    mask &= ~0xA
                if y + 1 >= max_y:
                    mask &= ~0xC
                if mask:
                    yield self._fragment(x, y, mask, e0, e1, e2, p0, p1, p2)
                w = [wi + dy * 2 for wi, (_, dy) in zip(w, edges)]
            start = [s - dx * 2 for s, (dx, _) in zip(start, edges)]

    @staticmethod
    def _fragment(x, y, mask, e0, e1, e2, p0, p1, p2) -> QuadFragment:
        wx, wy, wz, depth = [], [], [], []
        for a, b, c in zip(e0, e1, e2):
            fx = b * p0.inv_w
            fy = c * p1.inv_w
            fz = a * p2.inv_w
            total = fx + fy + fz
            if total == 0:
                fx = fy = fz = math.nan
            else:
                fx, fy, fz = fx / total, fy / total, fz / total
            wx.append(fx)
            wy.append(fy)
            wz.append(fz)
            depth.append(p0.z * fx + p1.z * fy + p2.z * fz)
        return QuadFragment(x, y, mask, tuple(depth), tuple(wx), tuple(wy), tuple(wz))