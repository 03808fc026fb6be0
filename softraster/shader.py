"""Programmable shader base class and the helper functions shaders use."""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

import numpy as np

Color = tuple[float, float, float, float]
Vec3 = tuple[float, float, float]

CLEAR: Color = (0.0, 0.0, 0.0, 0.0)
_DIRECTIONAL_EPSILON = 1e-6


def _clamp01(x: float) -> float:
    return min(max(x, 0.0), 1.0)


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


def _normalize(v: Sequence[float]) -> Vec3:
    length = math.sqrt(_dot(v, v))
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


def calc_lod(ddx: Sequence[float], ddy: Sequence[float]) -> float:
    """Mip level from the screen-space derivatives of a coordinate."""
    delta = max(_dot(ddx, ddx), _dot(ddy, ddy))
    if delta <= 0.0:
        return 0.0
    return max(0.0, 0.5 * math.log2(delta))


def tex2d(texture, uv: Sequence[float], lod: float = 0.0) -> Color:
    return texture.sample(uv, lod)


def tex2d_grad(texture, uv: Sequence[float], ddx: Sequence[float], ddy: Sequence[float]) -> Color:
    return texture.sample_grad(uv, ddx, ddy)


def sample_shadow_map(texture, uv: Sequence[float], depth: float, bias: float) -> float:
    """1.0 where the stored depth plus bias lies in front of depth, else 0.0."""
    stored_depth = texture.sample(uv)[3]
    occluded = stored_depth + bias < depth
    return float(occluded)


def sample_shadow_map_pcf(
    texture,
    uv: Sequence[float],
    depth: float,
    bias: float,
    blur_size: float,
    blur_iterations: int,
) -> float:
    """Shadow factor averaged over a square of neighbouring samples."""
    offsets = range(-blur_iterations, blur_iterations + 1)
    total = sum(
        sample_shadow_map(
            texture, (uv[0] + xoff * blur_size, uv[1] + yoff * blur_size), depth, bias
        )
        for xoff in offsets
        for yoff in offsets
    )
    side = blur_iterations * 2 + 1
    return total / (side * side)


def tex_cube(cube, direction: Sequence[float], lod: float = 0.0) -> Color:
    return cube.sample(direction, lod)


def unpack_normal(color: Sequence[float], tbn: Optional[Any] = None) -> Vec3:
    """Decode a normal stored in [0, 1] color channels, optionally into another space."""
    normal = (color[0] * 2.0 - 1.0, color[1] * 2.0 - 1.0, color[2] * 2.0 - 1.0)
    if tbn is None:
        return normal
    matrix = np.asarray(tbn, dtype=np.float64)[:3, :3]
    return _normalize(tuple(float(c) for c in matrix @ np.asarray(normal)))


def reflect(in_dir: Sequence[float], normal: Sequence[float]) -> Vec3:
    d = _dot(normal, in_dir) * 2.0
    return (in_dir[0] - normal[0] * d, in_dir[1] - normal[1] * d, in_dir[2] - normal[2] * d)


class Shader:
    """Vertex and fragment stages with their uniforms; subclasses override the stages."""

    varying_size = 4

    def __init__(self) -> None:
        self.is_clipped = False

        self.matrix_mvp = np.eye(4)
        self.matrix_mv = np.eye(4)
        self.world_to_camera = np.eye(4)
        self.camera_to_world = np.eye(4)
        self.matrix_p = np.eye(4)
        self.matrix_vp = np.eye(4)
        self.object_to_world = np.eye(4)
        self.world_to_object = np.eye(4)

        self.world_space_camera_pos: Vec3 = (0.0, 0.0, 0.0)
        self.screen_params = (0.0, 0.0, 0.0, 0.0)
        self.z_buffer_params = (0.0, 0.0, 0.0, 0.0)

        self.world_space_light_pos = (0.0, 0.0, 0.0, 0.0)
        self.light_color: Color = (1.0, 1.0, 1.0, 1.0)
        # atten0, atten1, atten2, range
        self.light_atten = (1.0, 0.0, 0.0, 10.0)
        self.spot_light_dir: Vec3 = (0.0, 0.0, 1.0)
        # cos(phi / 2), cos(theta / 2), falloff; x < 0 means no spot cone
        self.spot_light_params: Vec3 = (-1.0, 1.0, 1.0)

        self.targets: list[Color] = [CLEAR, CLEAR, CLEAR, CLEAR]
        self.quad_varyings: tuple[Any, ...] = ()

    def vert(self, vertex: Any) -> np.ndarray:
        """Transform the vertex position by the model-view-projection matrix."""
        position = getattr(vertex, "position", None)
        if position is None:
            position = vertex[0]
        x, y, z = position[:3]
        return self.matrix_mvp @ np.array([x, y, z, 1.0], dtype=np.float64)

    def pass_quad(self, quad: Any) -> None:
        """Keep the varyings of the current 2x2 pixel block for derivative use."""
        self.quad_varyings = tuple(quad)

    def frag(self, varying: Any) -> None:
        self.targets[0] = CLEAR

    def clip(self, x: float) -> bool:
        """Discard the fragment when x is negative."""
        self.is_clipped = x < 0.0
        return self.is_clipped

    def light_args(self, world_pos: Sequence[float]) -> tuple[Vec3, Color]:
        """Direction towards the light and the attenuated light color at world_pos."""
        lx, ly, lz, lw = self.world_space_light_pos
        color = tuple(self.light_color)
        if abs(lw) < _DIRECTIONAL_EPSILON:
            return (-lx, -ly, -lz), color

        diff = (lx - world_pos[0], ly - world_pos[1], lz - world_pos[2])
        distance = math.sqrt(_dot(diff, diff))
        light_dir = (diff[0] / distance, diff[1] / distance, diff[2] / distance)

        a0, a1, a2 = self.light_atten[:3]
        factor = 1.0 / (a0 + a1 * distance + a2 * distance * distance)
        cos_phi, cos_theta, falloff = self.spot_light_params
        if cos_phi >= 0.0:
            neg_spot = tuple(-c for c in self.spot_light_dir)
            spot = (_dot(neg_spot, light_dir) - cos_phi) / (cos_theta - cos_phi)
            factor *= _clamp01(max(spot, 0.0) ** falloff)
        return light_dir, tuple(c * factor for c in color)