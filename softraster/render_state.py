"""Fixed-function pipeline state: blending, depth, stencil and culling."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Sequence, TypeVar

from softraster.blender import Blender, Color
from softraster.srtypes import Projection, Triangle, orient2d_points

V = TypeVar("V")


class RenderType(IntEnum):
    POINT = 0
    WIREFRAME = 1
    STANDARD = 2
    SHADOW_PRE_PASS = 3


class ZTest(IntEnum):
    ALWAYS = 0
    LESS = 1
    GREATER = 2
    LEQUAL = 3
    GEQUAL = 4
    EQUAL = 5
    NOT_EQUAL = 6


class CullMode(IntEnum):
    OFF = 0
    BACK = 1
    FRONT = 2


class StencilComparison(IntEnum):
    GREATER = 0
    GEQUAL = 1
    LESS = 2
    LEQUAL = 3
    EQUAL = 4
    NOT_EQUAL = 5
    ALWAYS = 6
    NEVER = 7


class StencilOperation(IntEnum):
    KEEP = 0
    ZERO = 1
    REPLACE = 2


def culling_determinant(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> float:
    """Signed volume deciding the facing of a triangle of homogeneous positions."""
    x0, y0, z0 = v0[0], v0[1], v0[2]
    x1, y1, z1 = v1[0], v1[1], v1[2]
    x2, y2, z2 = v2[0], v2[1], v2[2]
    return ((x1 - x0) * (y2 - y0) * z0
            - (x2 - x0) * (y1 - y0) * z0
            + (x2 - x0) * y0 * (z1 - z0)
            - (x1 - x0) * y0 * (z2 - z0)
            + x0 * (y1 - y0) * (z2 - z0)
            - x0 * (y2 - y0) * (z1 - z0))


@dataclass
class RenderState:
    """Per-draw pipeline settings."""

    render_type: RenderType = RenderType.STANDARD
    alpha_blend: bool = False
    blender: Blender = field(default_factory=Blender)
    depth_test: ZTest = ZTest.LEQUAL
    z_write: bool = True
    cull: CullMode = CullMode.BACK
    stencil_on: bool = False
    stencil_ref: int = 0
    stencil_comp: StencilComparison = StencilComparison.ALWAYS
    stencil_op: StencilOperation = StencilOperation.REPLACE

    def blend(self, src: Sequence[float], dst: Sequence[float]) -> Color:
        return self.blender.blend(src, dst)

    def stencil_test(self, stencil: float) -> bool:
        ref = self.stencil_ref
        comp = self.stencil_comp
        if comp is StencilComparison.GREATER:
            return stencil > ref
        if comp is StencilComparison.GEQUAL:
            return stencil >= ref
        if comp is StencilComparison.LESS:
            return stencil < ref
        if comp is StencilComparison.LEQUAL:
            return stencil <= ref
        if comp is StencilComparison.EQUAL:
            return stencil == ref
        if comp is StencilComparison.NOT_EQUAL:
            return stencil != ref
        if comp is StencilComparison.NEVER:
            return False
        return True

    def write_stencil(self, stencil: int) -> int:
        """The stencil value to store after a passing test."""
        if self.stencil_op is StencilOperation.KEEP:
            return stencil
        if self.stencil_op is StencilOperation.ZERO:
            return 0
        return self.stencil_ref

    def face_culling(self, v0: V, v1: V, v2: V) -> Optional[tuple[V, V, V]]:
        """None if the triangle is culled, else its vertices in rasterizing order."""
        det = culling_determinant(v0.position, v1.position, v2.position)
        if self.cull is CullMode.FRONT:
            if det <= 0.0:
                return None
            return v0, v2, v1
        if self.cull is CullMode.BACK:
            return None if det >= 0.0 else (v0, v1, v2)
        if det > 0.0:
            return v0, v2, v1
        return v0, v1, v2

    def face_culling_projected(
        self, projections: Triangle[Projection], vertices: Triangle[V]
    ) -> Optional[tuple[Triangle[Projection], Triangle[V]]]:
        """Cull by screen-space winding; None if culled, else possibly reordered triangles."""
        p, v = projections, vertices
        ret = orient2d_points(p.v0, p.v1, p.v2)
        swapped = (Triangle(p.v0, p.v2, p.v1), Triangle(v.v0, v.v2, v.v1))
        if self.cull is CullMode.FRONT:
            return None if ret <= 0 else swapped
        if self.cull is CullMode.BACK:
            return None if ret >= 0 else (p, v)
        return swapped if ret > 0 else (p, v)

    def z_test(self, z_pixel: float, z_buffer: float) -> bool:
        mode = self.depth_test
        if mode is ZTest.ALWAYS:
            return True
        if mode is ZTest.LESS:
            return z_pixel < z_buffer
        if mode is ZTest.GREATER:
            return z_pixel > z_buffer
        if mode is ZTest.LEQUAL:
            return z_pixel <= z_buffer
        if mode is ZTest.GEQUAL:
            return z_pixel >= z_buffer
        if mode is ZTest.EQUAL:
            return z_pixel == z_buffer
        if mode is ZTest.NOT_EQUAL:
            return z_pixel != z_buffer
        return False