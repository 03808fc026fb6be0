"""Homogeneous clipping of lines and triangles against the view frustum."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Sequence, TypeVar

from softraster.srtypes import Line, Triangle

Position = Sequence[float]


class ClippableVertex(Protocol):
    position: Position
    clip_code: int

    @staticmethod
    def linear_interp(a, b, t: float): ...


V = TypeVar("V", bound=ClippableVertex)


def clip_param(f0: float, w0: float, f1: float, w1: float) -> float:
    """Parameter along an edge where a coordinate crosses its clip boundary."""
    return (w0 - f0) / ((w0 - f0) - (w1 - f1))


@dataclass(frozen=True)
class Plane:
    """A frustum plane: its clip-code bit, an outside test and an intersection."""

    cull_mask: int
    is_outside: Callable[[Position], bool]
    intersect: Callable[[Position, Position], float]


VIEW_FRUSTUM_PLANES: tuple[Plane, ...] = (
    Plane(0x10, lambda v: v[2] < 0.0, lambda a, b: clip_param(a[2], 0.0, b[2], 0.0)),
    Plane(0x20, lambda v: v[2] > v[3], lambda a, b: clip_param(a[2], a[3], b[2], b[3])),
    Plane(0x01, lambda v: v[0] < -v[3], lambda a, b: clip_param(a[0], -a[3], b[0], -b[3])),
    Plane(0x04, lambda v: v[1] < -v[3], lambda a, b: clip_param(a[1], -a[3], b[1], -b[3])),
    Plane(0x02, lambda v: v[0] > v[3], lambda a, b: clip_param(a[0], a[3], b[0], b[3])),
    Plane(0x08, lambda v: v[1] > v[3], lambda a, b: clip_param(a[1], a[3], b[1], b[3])),
)


def calculate_clip_code(hc: Position) -> int:
    """Bit mask of the frustum planes a homogeneous position lies outside of."""
    code = 0
    for plane in VIEW_FRUSTUM_PLANES:
        if plane.is_outside(hc):
            code |= plane.cull_mask
    return code


def _lerp(a: V, b: V, t: float) -> V:
    return type(a).linear_interp(a, b, t)


def clip_line(v0: V, v1: V) -> list[Line[V]]:
    """Clip a line against all frustum planes."""
    if v0.clip_code & v1.clip_code:
        return []
    lines = [Line(v0, v1)]
    if not (v0.clip_code | v1.clip_code):
        return lines
    for plane in VIEW_FRUSTUM_PLANES:
        lines = [c for line in lines for c in clip_line_against_plane(line.v0, line.v1, plane)]
    return lines


def clip_triangle(v0: V, v1: V, v2: V) -> list[Triangle[V]]:
    """Clip a triangle against all frustum planes into zero or more triangles."""
    if v0.clip_code & v1.clip_code & v2.clip_code:
        return []
    triangles = [Triangle(v0, v1, v2)]
    if not (v0.clip_code | v1.clip_code | v2.clip_code):
        return triangles
    for plane in VIEW_FRUSTUM_PLANES:
        triangles = [
            c
            for tri in triangles
            for c in clip_triangle_against_plane(tri.v0, tri.v1, tri.v2, plane)
        ]
    return triangles


def clip_line_against_plane(v0: V, v1: V, plane: Plane) -> list[Line[V]]:
    """Clip a line against one plane."""
    out0 = bool(v0.clip_code & plane.cull_mask)
    out1 = bool(v1.clip_code & plane.cull_mask)
    if out0 and out1:
        return []
    if not out0 and not out1:
        return [Line(v0, v1)]
    if out1:
        t = plane.intersect(v1.position, v0.position)
        return [Line(v0, _lerp(v1, v0, t))]
    t = plane.intersect(v0.position, v1.position)
    return [Line(_lerp(v0, v1, t), v1)]


def clip_triangle_against_plane(v0: V, v1: V, v2: V, plane: Plane) -> list[Triangle[V]]:
    """Clip a triangle against one plane into zero, one or two triangles."""
    mask = plane.cull_mask
    out = (bool(v0.clip_code & mask), bool(v1.clip_code & mask), bool(v2.clip_code & mask))
    if all(out):
        return []
    if not any(out):
        return [Triangle(v0, v1, v2)]
    if out == (False, True, True):
        return _clip_two_out(v0, v1, v2, plane)
    if out == (True, False, True):
        return _clip_two_out(v1, v2, v0, plane)
    if out == (True, True, False):
        return _clip_two_out(v2, v0, v1, plane)
    if out == (False, False, True):
        return _clip_one_out(v0, v1, v2, plane)
    if out == (True, False, False):
        return _clip_one_out(v1, v2, v0, plane)
    return _clip_one_out(v2, v0, v1, plane)


def _clip_one_out(v0: V, v1: V, v2: V, plane: Plane) -> list[Triangle[V]]:
    # v0 and v1 inside, v2 outside
    t1 = plane.intersect(v2.position, v1.position)
    t0 = plane.intersect(v2.position, v0.position)
    tv0 = _lerp(v2, v1, t1)
    tv1 = _lerp(v2, v0, t0)
    return [Triangle(v0, v1, tv0), Triangle(v0, tv0, tv1)]


def _clip_two_out(v0: V, v1: V, v2: V, plane: Plane) -> list[Triangle[V]]:
    # v0 inside, v1 and v2 outside
    t1 = plane.intersect(v1.position, v0.position)
    t2 = plane.intersect(v2.position, v0.position)
    return [Triangle(v0, _lerp(v1, v0, t1), _lerp(v2, v0, t2))]