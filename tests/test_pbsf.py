import math

import pytest

from softraster import pbsf
from softraster.bitmap import Bitmap, BitmapType
from softraster.pbsf import PBSInput, PBSLight
from softraster.texture2d import Texture2D


class _UniformCube:
    def __init__(self, color):
        self.color = color

    def sample(self, direction, roughness=0.0):
        return self.color


def test_setup_metallic_uses_albedo_as_specular():
    surface = PBSInput(albedo=(0.5, 0.25, 0.75), metallic=1.0)
    surface.setup()
    assert surface.spec_color == pytest.approx(surface.albedo)
    assert surface.diff_color == pytest.approx((0.0, 0.0, 0.0))
    assert surface.reflectivity == pytest.approx(1.0)


def test_setup_dielectric():
    surface = PBSInput(albedo=(0.5, 0.25, 0.75), metallic=0.0)
    surface.setup()
    assert surface.spec_color == pytest.approx((pbsf.DIELECTRIC_SPEC,) * 3)
    assert surface.diff_color == pytest.approx(
        tuple(a * (1 - pbsf.DIELECTRIC_SPEC) for a in surface.albedo)
    )


def test_ggx_peaks_at_normal():
    assert pbsf.ggx_term(1.0, 0.3) > pbsf.ggx_term(0.5, 0.3)
    assert pbsf.blinn_phong_term(1.0, 0.3) > pbsf.blinn_phong_term(0.5, 0.3)


def test_fresnel_limits():
    spec = (0.25, 0.5, 0.75)
    assert pbsf.fresnel_term(1.0, spec) == pytest.approx(spec)
    assert pbsf.fresnel_term(0.0, spec) == pytest.approx((1.0, 1.0, 1.0))


def test_disney_diffuse_at_normal_incidence():
    assert pbsf.disney_diffuse_term(1.0, 1.0, 0.7, 0.4) == pytest.approx(1.0)


def test_visibility_terms_relate():
    assert pbsf.smith_ggx_visibility_term(0.6, 0.8, 0.5) == pytest.approx(
        pbsf.smith_visibility_term(0.6, 0.8, 0.125) * 0.25
    )
    assert pbsf.smith_beckmann_visibility_term(0.6, 0.8, 0.5) > 0.0
    assert pbsf.smith_joint_ggx_visibility_term(0.6, 0.8, 0.5) > 0.0


def test_radical_inverse_and_hammersley():
    assert pbsf.radical_inverse_vdc(0) == 0.0
    assert pbsf.radical_inverse_vdc(1) == 0.5
    values = [pbsf.radical_inverse_vdc(i) for i in range(64)]
    assert len(set(values)) == 64
    assert all(0.0 <= v < 1.0 for v in values)
    assert pbsf.hammersley2d(3, 16)[0] == 3 / 16


@pytest.mark.parametrize("normal", [(0.0, 0.0, 1.0), (0.0, 1.0, 0.0), (0.6, 0.0, 0.8)])
def test_importance_sample_is_unit_and_zero_roughness_returns_normal(normal):
    h = pbsf.importance_sample_ggx((0.3, 0.6), 0.7, normal)
    assert math.sqrt(sum(c * c for c in h)) == pytest.approx(1.0)
    assert pbsf.importance_sample_ggx((0.3, 0.6), 0.0, normal) == pytest.approx(normal)


def test_brdfs_vanish_when_light_is_grazing():
    surface = PBSInput(albedo=(0.5, 0.5, 0.5), roughness=0.5, metallic=0.2)
    surface.setup()
    light = PBSLight(dir=(1.0, 0.0, 0.0), color=(1.0, 1.0, 1.0))
    normal = view = (0.0, 0.0, 1.0)
    assert pbsf.brdf1(surface, normal, view, light) == pytest.approx((0.0, 0.0, 0.0))
    assert pbsf.brdf2(surface, normal, view, light) == pytest.approx((0.0, 0.0, 0.0))


def test_brdf_positive_when_lit():
    surface = PBSInput(albedo=(0.5, 0.5, 0.5), roughness=0.5, metallic=0.2)
    surface.setup()
    light = PBSLight(dir=(0.0, 0.0, 1.0), color=(1.0, 1.0, 1.0))
    normal = view = (0.0, 0.0, 1.0)
    assert all(c > 0.0 for c in pbsf.brdf1(surface, normal, view, light))
    assert all(c > 0.0 for c in pbsf.brdf2(surface, normal, view, light))


def test_prefilter_uniform_environment():
    color = (0.25, 0.5, 0.75, 1.0)
    result = pbsf.prefilter_env_map(_UniformCube(color), 0.5, (0.0, 1.0, 0.0), 16)
    assert result == pytest.approx(color[:3], abs=1e-4)


def test_ground_truth_ibl_uniform_white():
    result = pbsf.ground_truth_specular_ibl(
        _UniformCube((1.0, 1.0, 1.0, 1.0)), (1.0, 1.0, 1.0),
        (0.0, 0.0, 1.0), (0.0, 0.0, 1.0), 0.5, 16)
    assert result[0] == pytest.approx(result[1]) == pytest.approx(result[2])
    assert result[0] > 0.0


def test_integrate_brdf_non_negative():
    a, b = pbsf.integrate_brdf(0.5, 0.7, 32)
    assert a > 0.0 and b >= 0.0
    assert math.isfinite(a + b)


def test_approximate_specular_ibl_with_unit_scale_lut():
    lut_bitmap = Bitmap(1, 1, BitmapType.RGBA_FLOAT)
    lut_bitmap.fill((1.0, 0.0, 0.0, 1.0))
    cube = _UniformCube((0.5, 0.25, 1.0, 1.0))
    spec = (0.5, 1.0, 0.25)
    result = pbsf.approximate_specular_ibl(
        cube, spec, (0.0, 0.0, 1.0), (0.0, 0.0, 1.0), 0.3, Texture2D(lut_bitmap))
    assert result == pytest.approx(tuple(c * s for c, s in zip(cube.color, spec)))