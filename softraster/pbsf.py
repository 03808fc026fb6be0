"""Physically based shading terms and image-based lighting integrals.

Vectors are (x, y, z) float sequences.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol, Sequence

Vec3 = tuple[float, float, float]

EPSILON = 1e-6
DIELECTRIC_SPEC = 0.220916301
_FRONT: Vec3 = (0.0, 0.0, 1.0)
_RIGHT: Vec3 = (1.0, 0.0, 0.0)


class CubeSampler(Protocol):
    def sample(self, direction: Sequence[float], roughness: float = 0.0): ...


def _clamp01(x: float) -> float:
    return min(max(x, 0.0), 1.0)


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _add(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _sub(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _scale(a: Sequence[float], s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def _mul(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])


def _cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1], a[2] * b[0] - a[0] * b[2], a[0] * b[1] - a[1] * b[0])


def _normalize(a: Sequence[float]) -> Vec3:
    length = math.sqrt(_dot(a, a))
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return _scale(a, 1.0 / length)


@dataclass
class PBSLight:
    """Direction towards the light and its color."""

    dir: Vec3
    color: Vec3


@dataclass
class PBSInput:
    """Surface parameters; setup derives the diffuse and specular colors."""

    albedo: Vec3 = (1.0, 1.0, 1.0)
    normal: Vec3 = _FRONT
    roughness: float = 0.5
    metallic: float = 0.0
    diff_color: Vec3 = field(default=(0.0, 0.0, 0.0))
    spec_color: Vec3 = field(default=(0.0, 0.0, 0.0))
    reflectivity: float = 0.0

    def setup(self) -> None:
        m = self.metallic
        self.spec_color = tuple(DIELECTRIC_SPEC + (a - DIELECTRIC_SPEC) * m for a in self.albedo)
        self.reflectivity = m + (1.0 - m) * DIELECTRIC_SPEC
        self.diff_color = _scale(self.albedo, 1.0 - self.reflectivity)


def ggx_term(n_dot_h: float, roughness: float) -> float:
    a = roughness * roughness
    a2 = a * a
    d = (n_dot_h * n_dot_h) * (a2 - 1.0) + 1.0
    return a2 / (math.pi * d * d + 1e-5)


def blinn_phong_term(n_dot_h: float, roughness: float) -> float:
    a = roughness * roughness
    a2 = a * a
    spec_power = max(2.0 / (a2 + 1e-4) - 2.0, 1e-4)
    return 4.0 * n_dot_h ** spec_power / (a2 + 1e-4)


def smith_visibility_term(n_dot_l: float, n_dot_v: float, k: float) -> float:
    """Generic Smith-Schlick visibility."""
    g_l = n_dot_l * (1.0 - k) + k
    g_v = n_dot_v * (1.0 - k) + k
    return 1.0 / (g_l * g_v + 1e-5)


def smith_beckmann_visibility_term(n_dot_l: float, n_dot_v: float, roughness: float) -> float:
    c = 0.797884560802865  # sqrt(2 / pi)
    k = roughness * roughness * c
    return smith_visibility_term(n_dot_l, n_dot_v, k) * 0.25


def smith_ggx_visibility_term(n_dot_l: float, n_dot_v: float, roughness: float) -> float:
    k = roughness * roughness * 0.5
    return smith_visibility_term(n_dot_l, n_dot_v, k) * 0.25


def smith_joint_ggx_visibility_term(n_dot_l: float, n_dot_v: float, roughness: float) -> float:
    a = roughness * roughness
    lambda_v = n_dot_l * (n_dot_v * (1.0 - a) + a)
    lambda_l = n_dot_v * (n_dot_l * (1.0 - a) + a)
    return 0.5 / (lambda_v + lambda_l + 1e-5)


def fresnel_term(v_dot_h: float, specular: Sequence[float]) -> Vec3:
    """Schlick's Fresnel approximation."""
    t = (1.0 - v_dot_h) ** 5
    return tuple(s + (1.0 - s) * t for s in specular[:3])


def disney_diffuse_term(n_dot_l: float, n_dot_v: float, l_dot_h: float, roughness: float) -> float:
    nl_pow5 = (1.0 - n_dot_l) ** 5
    nv_pow5 = (1.0 - n_dot_v) ** 5
    fd90 = 0.5 + 2.0 * l_dot_h * l_dot_h * roughness
    return (1.0 + (fd90 - 1.0) * nl_pow5) * (1.0 + (fd90 - 1.0) * nv_pow5)


def brdf1(surface: PBSInput, normal: Sequence[float], view_dir: Sequence[float], light: PBSLight) -> Vec3:
    """Disney diffuse with GGX specular."""
    half_dir = _normalize(_add(light.dir, view_dir))
    n_dot_l = _clamp01(_dot(normal, light.dir))
    n_dot_v = _clamp01(_dot(normal, view_dir))
    n_dot_h = _clamp01(_dot(normal, half_dir))
    v_dot_h = _clamp01(_dot(view_dir, half_dir))
    l_dot_h = _clamp01(_dot(light.dir, half_dir))
    diffuse = disney_diffuse_term(n_dot_l, n_dot_v, l_dot_h, surface.roughness)
    d = ggx_term(n_dot_h, surface.roughness)
    v = smith_ggx_visibility_term(n_dot_l, n_dot_v, surface.roughness)
    f = fresnel_term(v_dot_h, surface.spec_color)
    return _add(
        _scale(surface.diff_color, diffuse * n_dot_l),
        _scale(_mul(light.color, f), d * v * math.pi * n_dot_l),
    )


def brdf2(surface: PBSInput, normal: Sequence[float], view_dir: Sequence[float], light: PBSLight) -> Vec3:
    """Lambert diffuse with a simplified GGX specular."""
    half_dir = _normalize(_add(light.dir, view_dir))
    n_dot_l = _clamp01(_dot(normal, light.dir))
    l_dot_h = _clamp01(_dot(light.dir, half_dir))
    n_dot_h = _clamp01(_dot(normal, half_dir))
    d = ggx_term(n_dot_h, surface.roughness)
    vf = 1.0 / (4.0 * l_dot_h * l_dot_h * (surface.roughness + 0.5))
    return _add(
        _scale(surface.diff_color, n_dot_l),
        _scale(light.color, d * vf * n_dot_l * math.pi),
    )


def radical_inverse_vdc(bits: int) -> float:
    """Van der Corput radical inverse of a 32-bit integer."""
    bits &= 0xFFFFFFFF
    bits = ((bits << 16) | (bits >> 16)) & 0xFFFFFFFF
    bits = ((bits & 0x00FF00FF) << 8) | ((bits & 0xFF00FF00) >> 8)
    bits = ((bits & 0x0F0F0F0F) << 4) | ((bits & 0xF0F0F0F0) >> 4)
    bits = ((bits & 0x33333333) << 2) | ((bits & 0xCCCCCCCC) >> 2)
    bits = ((bits & 0x55555555) << 1) | ((bits & 0xAAAAAAAA) >> 1)
    return float(bits) * 2.3283064365386963e-10


def hammersley2d(i: int, sample_count: int) -> tuple[float, float]:
    return (float(i) / float(sample_count), radical_inverse_vdc(i))


def importance_sample_ggx(xi: Sequence[float], roughness: float, normal: Sequence[float]) -> Vec3:
    """A half vector around normal distributed by the GGX lobe."""
    a = roughness * roughness
    phi = 2.0 * math.pi * xi[0]
    cos_theta = math.sqrt((1.0 - xi[1]) / (1.0 + (a * a - 1.0) * xi[1]))
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    hx = sin_theta * math.cos(phi)
    hy = sin_theta * math.sin(phi)
    hz = cos_theta
    up = _FRONT if abs(normal[2]) < 0.999 else _RIGHT
    tangent_x = _normalize(_cross(up, normal))
    tangent_y = _cross(normal, tangent_x)
    return _add(_add(_scale(tangent_x, hx), _scale(tangent_y, hy)), _scale(normal, hz))


def ground_truth_specular_ibl(
    cube: CubeSampler,
    spec_color: Sequence[float],
    n: Sequence[float],
    v: Sequence[float],
    roughness: float,
    sample_count: int,
) -> Vec3:
    """Monte Carlo integral of the specular environment lighting."""
    total = (0.0, 0.0, 0.0)
    for i in range(sample_count):
        h = importance_sample_ggx(hammersley2d(i, sample_count), roughness, n)
        v_dot_h = _clamp01(_dot(v, h))
        l = _sub(_scale(h, 2.0 * v_dot_h), v)
        n_dot_v = _clamp01(_dot(n, v))
        n_dot_l = _clamp01(_dot(n, l))
        n_dot_h = _clamp01(_dot(n, h))
        if n_dot_l > 0.0:
            sample = cube.sample(l, 0.0)[:3]
            vis = smith_ggx_visibility_term(n_dot_l, n_dot_v, roughness)
            f = fresnel_term(v_dot_h, spec_color)
            weight = vis * 4.0 * n_dot_l * v_dot_h / (n_dot_h + EPSILON)
            total = _add(total, _scale(_mul(sample, f), weight))
    return _scale(total, 1.0 / sample_count)


def prefilter_env_map(cube: CubeSampler, roughness: float, r: Sequence[float], sample_count: int) -> Vec3:
    """Environment radiance around r filtered by the GGX lobe."""
    n = v = r
    color = (0.0, 0.0, 0.0)
    total_weight = EPSILON
    for i in range(sample_count):
        h = importance_sample_ggx(hammersley2d(i, sample_count), roughness, n)
        l = _sub(_scale(h, 2.0 * _dot(v, h)), v)
        n_dot_l = _dot(n, l)
        if n_dot_l > 0.0:
            color = _add(color, _scale(cube.sample(l, 0.0)[:3], n_dot_l))
            total_weight += n_dot_l
    return _scale(color, 1.0 / total_weight)


def integrate_brdf(roughness: float, n_dot_v: float, sample_count: int) -> tuple[float, float]:
    """Scale and bias applied to the specular color by the split-sum approximation."""
    v = (math.sqrt(max(0.0, 1.0 - n_dot_v * n_dot_v)), 0.0, n_dot_v)
    a = 0.0
    b = 0.0
    for i in range(sample_count):
        h = importance_sample_ggx(hammersley2d(i, sample_count), roughness, _FRONT)
        l = _sub(_scale(h, 2.0 * _dot(v, h)), v)
        n_dot_l = _clamp01(l[2])
        n_dot_h = _clamp01(h[2])
        v_dot_h = _clamp01(_dot(v, h))
        if n_dot_l > 0.0:
            vis = smith_ggx_visibility_term(n_dot_l, n_dot_v, roughness)
            g = vis * 4.0 * n_dot_l * v_dot_h / n_dot_h
            fc = (1.0 - v_dot_h) ** 5
            a += (1.0 - fc) * g
            b += fc * g
    return (a / sample_count, b / sample_count)


def approximate_specular_ibl(
    cube: CubeSampler,
    spec_color: Sequence[float],
    normal: Sequence[float],
    view_dir: Sequence[float],
    roughness: float,
    lut,
) -> Vec3:
    """Split-sum specular lighting using a prefiltered cube and a BRDF lookup texture."""
    n_dot_v = _clamp01(_dot(normal, view_dir))
    r = _sub(_scale(normal, 2.0 * n_dot_v), view_dir)
    prefiltered = cube.sample(r, roughness)[:3]
    env = lut.sample((roughness, n_dot_v), 0.0)
    scale, bias = env[0], env[1]
    return _mul(prefiltered, tuple(s * scale + bias for s in spec_color[:3]))