"""Classic Lambert, Blinn-Phong and Phong lighting models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

Vec3 = tuple[float, float, float]
Color = tuple[float, float, float, float]


@dataclass
class LightInput:
    """Surface colors (r, g, b, a) and specular shininess."""

    ambient: Color = (0.0, 0.0, 0.0, 1.0)
    diffuse: Color = (1.0, 1.0, 1.0, 1.0)
    specular: Color = (1.0, 1.0, 1.0, 1.0)
    shininess: float = 10.0


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _normalize(a: Sequence[float]) -> Vec3:
    length = math.sqrt(_dot(a, a))
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (a[0] / length, a[1] / length, a[2] / length)


def _clamp01(x: float) -> float:
    return min(max(x, 0.0), 1.0)


def _combine(surface: LightInput, light_color: Sequence[float], lambert: float, specular: float) -> Vec3:
    return tuple(
        surface.ambient[i] * surface.diffuse[i]
        + surface.diffuse[i] * light_color[i] * lambert
        + surface.specular[i] * light_color[i] * specular
        for i in range(3)
    )


def lighting_lambert(
    surface: LightInput, normal: Sequence[float], light_dir: Sequence[float], light_color: Sequence[float]
) -> Vec3:
    """Ambient plus Lambertian diffuse."""
    n_dot_l = _clamp01(_dot(normal, light_dir))
    return _combine(surface, light_color, n_dot_l, 0.0)


def lighting_blinn_phong(
    surface: LightInput,
    normal: Sequence[float],
    light_dir: Sequence[float],
    light_color: Sequence[float],
    view_dir: Sequence[float],
) -> Vec3:
    """Lambert plus a half-vector specular with exponent 4 * shininess."""
    lambertian = _clamp01(_dot(normal, light_dir))
    specular = 0.0
    if lambertian > 0.0:
        half_dir = _normalize([l + v for l, v in zip(light_dir[:3], view_dir[:3])])
        spec_angle = max(_dot(half_dir, normal), 0.0)
        specular = spec_angle ** (surface.shininess * 4.0)
    return _combine(surface, light_color, lambertian, specular)


def lighting_phong(
    surface: LightInput,
    normal: Sequence[float],
    light_dir: Sequence[float],
    light_color: Sequence[float],
    view_dir: Sequence[float],
) -> Vec3:
    """Lambert plus a reflection-vector specular with exponent shininess."""
    lambertian = _clamp01(_dot(normal, light_dir))
    specular = 0.0
    if lambertian > 0.0:
        n_dot_l = _dot(normal, light_dir)
        reflect_dir = _normalize([n * n_dot_l * 2.0 - l for n, l in zip(normal[:3], light_dir[:3])])
        spec_angle = max(_dot(reflect_dir, view_dir), 0.0)
        specular = spec_angle ** surface.shininess
    return _combine(surface, light_color, lambertian, specular)