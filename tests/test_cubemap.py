import pytest

from softraster.bitmap import Bitmap, BitmapType
from softraster.cubemap import (
    BLACK,
    Cubemap,
    CubemapFace,
    MappingType,
    direction_to_face_texcoord,
    direction_to_latlong_texcoord,
)
from softraster.sampler import AddressMode
from softraster.texture2d import Texture2D


def _texture(color, width=1, height=1):
    bitmap = Bitmap(width, height, BitmapType.RGBA_FLOAT)
    bitmap.fill(color)
    return Texture2D(bitmap)


FACE_COLORS = [
    (1.0, 0.0, 0.0, 1.0), (0.5, 0.0, 0.0, 1.0),
    (0.0, 1.0, 0.0, 1.0), (0.0, 0.5, 0.0, 1.0),
    (0.0, 0.0, 1.0, 1.0), (0.0, 0.0, 0.5, 1.0),
]
AXES = [
    ((1, 0, 0), CubemapFace.POSITIVE_X), ((-1, 0, 0), CubemapFace.NEGATIVE_X),
    ((0, 1, 0), CubemapFace.POSITIVE_Y), ((0, -1, 0), CubemapFace.NEGATIVE_Y),
    ((0, 0, 1), CubemapFace.POSITIVE_Z), ((0, 0, -1), CubemapFace.NEGATIVE_Z),
]


@pytest.mark.parametrize("direction,face", AXES)
def test_axis_directions_hit_face_centres(direction, face):
    hit, texcoord = direction_to_face_texcoord(direction)
    assert hit is face
    assert texcoord == pytest.approx((0.5, 0.5))


def test_face_texcoords_stay_in_unit_square():
    for direction in [(0.3, 0.9, -0.2), (-0.7, 0.1, 0.6), (0.2, -0.4, -0.9)]:
        _, (u, v) = direction_to_face_texcoord(direction)
        assert 0.0 <= u <= 1.0 and 0.0 <= v <= 1.0


def test_latlong_texcoords_of_poles():
    u, v = direction_to_latlong_texcoord((0.0, 2.0, 0.0))
    assert v == 0.0
    assert direction_to_latlong_texcoord((0.0, -1.0, 0.0))[1] == pytest.approx(-1.0)
    assert direction_to_latlong_texcoord((0.0, 0.0, 1.0))[0] == pytest.approx(0.5)


def test_empty_cubemap_samples_black():
    cube = Cubemap()
    assert cube.mapping_type is MappingType.NONE
    assert cube.sample((1.0, 0.0, 0.0)) == BLACK
    assert cube.roughness_to_lod(1.0) == 0.0


def test_six_images_sampling():
    cube = Cubemap()
    cube.init_with_6_images([_texture(c) for c in FACE_COLORS])
    for direction, face in AXES:
        assert cube.sample(direction) == pytest.approx(FACE_COLORS[face])
    assert len(cube.faces()) == 6
    with pytest.raises(ValueError):
        cube.latlong_texture()


def test_six_images_requires_six():
    with pytest.raises(ValueError):
        Cubemap().init_with_6_images([_texture(FACE_COLORS[0])] * 5)


def test_missing_face_samples_black():
    cube = Cubemap()
    images = [_texture(c) for c in FACE_COLORS]
    images[CubemapFace.POSITIVE_Y] = None
    cube.init_with_6_images(images)
    assert cube.sample((0.0, 1.0, 0.0)) == BLACK


def test_latlong_init_sets_wrap_and_samples():
    color = (0.25, 0.5, 0.75, 1.0)
    tex = _texture(color, 4, 2)
    tex.x_address_mode = AddressMode.CLAMP
    cube = Cubemap()
    cube.init_with_latlong(tex)
    assert tex.x_address_mode == AddressMode.WRAP
    assert cube.latlong_texture() is tex
    assert cube.sample((0.3, -0.4, 0.8)) == pytest.approx(color)
    with pytest.raises(ValueError):
        cube.faces()


def test_map_six_images_to_latlong():
    color = (0.25, 0.5, 0.75, 1.0)
    cube = Cubemap()
    cube.init_with_6_images([_texture(color) for _ in range(6)])
    cube.map_6_images_to_latlong(4, BitmapType.RGBA_FLOAT)
    latlong = cube.latlong_texture()
    assert (latlong.width, latlong.height) == (8, 4)
    assert latlong.bitmap(0).get_pixel(5, 2) == pytest.approx(color)
    assert cube.sample((0.0, 0.0, -1.0)) == pytest.approx(color)
    with pytest.raises(ValueError):
        cube.faces()


def test_roughness_to_lod_scales_with_mip_count():
    tex = _texture((1.0, 1.0, 1.0, 1.0), 4, 2)
    tex.set_mipmaps([Bitmap(2, 1, BitmapType.RGBA_FLOAT), Bitmap(2, 1, BitmapType.RGBA_FLOAT)])
    cube = Cubemap()
    cube.init_with_latlong(tex)
    assert cube.roughness_to_lod(0.5) == pytest.approx(0.5 * tex.mipmap_count())


def test_prefilter_requires_latlong():
    cube = Cubemap()
    cube.init_with_6_images([_texture(c) for c in FACE_COLORS])
    with pytest.raises(ValueError):
        cube.prefilter_env_map(2, 4)


def test_prefilter_uniform_latlong():
    color = (0.25, 0.5, 0.75, 1.0)
    cube = Cubemap()
    cube.init_with_latlong(_texture(color, 8, 4))
    cube.prefilter_env_map(2, 4)
    latlong = cube.latlong_texture()
    assert latlong.mipmap_count() == 2
    assert [latlong.bitmap(level).width for level in (1, 2)] == [4, 2]
    assert latlong.bitmap(2).get_pixel(1, 0) == pytest.approx(color, abs=1e-4)