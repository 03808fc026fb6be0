import numpy as np
import pytest

from softraster.bitmap import Bitmap, BitmapType
from softraster.stencil import StencilBuffer


def test_set_and_get():
    stencil = StencilBuffer(4, 3)
    stencil[3, 2] = 200
    assert stencil[3, 2] == 200
    assert stencil.pixels[2, 3] == 200


def test_fill():
    stencil = StencilBuffer(4, 3)
    stencil.fill(7)
    assert all(stencil[x, y] == 7 for x in range(4) for y in range(3))


@pytest.mark.parametrize("value", [256, -1])
def test_value_out_of_range(value):
    stencil = StencilBuffer(2, 2)
    with pytest.raises(ValueError):
        stencil[0, 0] = value
    with pytest.raises(ValueError):
        stencil.fill(value)
    assert stencil[0, 0] == 0


def test_position_out_of_range():
    stencil = StencilBuffer(2, 2)
    stencil[1, 1] = 9
    assert stencil[1, 1] == 9
    with pytest.raises(IndexError):
        stencil[2, 0]
    with pytest.raises(IndexError):
        stencil[0, -1] = 1
    assert stencil[0, 1] == 0


def test_save_round_trip(tmp_path):
    stencil = StencilBuffer(5, 4)
    stencil.pixels[...] = np.arange(20, dtype=np.uint8).reshape(4, 5) * 12
    path = tmp_path / "stencil.png"
    stencil.save(path)
    loaded = Bitmap.load(path)
    assert loaded.pixel_type == BitmapType.ALPHA8
    assert np.array_equal(loaded.pixels[..., 0], stencil.pixels)