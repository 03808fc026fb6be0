import numpy as np
import pytest

from softraster.clipper import calculate_clip_code, clip_triangle
from softraster.varying_data import (
    VaryingDataBuffer,
    VertexVaryingData,
    lerp_values,
    triangle_interp_values,
)


def make_vertices(buffer, rows):
    buffer.init_vertices(len(rows))
    out = []
    for i, row in enumerate(rows):
        v = buffer.vertex(i)
        v.data[:] = row
        out.append(v)
    return out


def test_lerp_values_endpoints():
    a = [1.0, 2.0, 3.0]
    b = [5.0, 6.0, 7.0]
    assert np.allclose(lerp_values(a, b, 0.0), a)
    assert np.allclose(lerp_values(a, b, 1.0), b)


def test_triangle_interp_values_unit_weights():
    a, b, c = [1.0, 2.0], [3.0, 4.0], [5.0, 6.0]
    assert np.allclose(triangle_interp_values(a, b, c, 1.0, 0.0, 0.0), a)
    assert np.allclose(triangle_interp_values(a, b, c, 0.0, 0.0, 1.0), c)


def test_buffer_rejects_small_size():
    with pytest.raises(ValueError):
        VaryingDataBuffer(3)


def test_vertex_index_out_of_range():
    buffer = VaryingDataBuffer(4)
    buffer.init_vertices(2)
    with pytest.raises(IndexError):
        buffer.vertex(2)
    with pytest.raises(IndexError):
        buffer.vertex(-1)


def test_position_property_reads_data():
    buffer = VaryingDataBuffer(6)
    (v,) = make_vertices(buffer, [[1.0, 2.0, 3.0, 4.0, 5.0, 6.0]])
    assert v.position == (1.0, 2.0, 3.0, 4.0)
    v.position = (0.0, 0.0, 0.0, 1.0)
    assert v.data.tolist()[:4] == [0.0, 0.0, 0.0, 1.0]


def test_linear_interp_midpoint_and_clip_code():
    buffer = VaryingDataBuffer(5)
    buffer.init_dynamic()
    a, b = make_vertices(buffer, [[0.0, 0.0, 0.2, 1.0, 0.0], [0.0, 0.0, 0.6, 1.0, 2.0]])
    mid = VertexVaryingData.linear_interp(a, b, 0.5)
    assert np.allclose(mid.data, [0.0, 0.0, 0.4, 1.0, 1.0])
    assert mid.clip_code == 0
    assert mid.buffer is buffer


def test_linear_interp_outside_sets_clip_code():
    buffer = VaryingDataBuffer(4)
    a, b = make_vertices(buffer, [[0.0, 0.0, -1.0, 1.0], [0.0, 0.0, -0.5, 1.0]])
    out = VertexVaryingData.linear_interp(a, b, 0.5)
    assert np.allclose(out.data, [0.0, 0.0, -0.75, 1.0])
    assert (out.clip_code & 0x10) == 0x10


def test_linear_interp_requires_same_buffer():
    first = VaryingDataBuffer(4)
    second = VaryingDataBuffer(4)
    (a,) = make_vertices(first, [[0.0, 0.0, 0.0, 1.0]])
    (b,) = make_vertices(second, [[0.0, 0.0, 0.0, 1.0]])
    with pytest.raises(ValueError):
        VertexVaryingData.linear_interp(a, b, 0.5)


def test_dynamic_storage_reused_after_reset():
    buffer = VaryingDataBuffer(4)
    buffer.init_dynamic()
    first = buffer.create_dynamic()
    second = buffer.create_dynamic()
    assert first is not second
    buffer.reset_dynamic()
    assert buffer.create_dynamic() is first


def test_triangle_interp_writes_pixel_slot():
    buffer = VaryingDataBuffer(4)
    buffer.init_pixels(4)
    v0, v1, v2 = make_vertices(
        buffer, [[1.0, 0.0, 0.0, 1.0], [0.0, 1.0, 0.0, 1.0], [0.0, 0.0, 1.0, 1.0]]
    )
    data = VertexVaryingData.triangle_interp(2, v0, v1, v2, 0.25, 0.25, 0.5)
    assert data is buffer.pixel(2).data
    assert np.allclose(data, triangle_interp_values(v0.data, v1.data, v2.data, 0.25, 0.25, 0.5))
    assert np.isclose(data.sum(), 2.0)


def test_pixel_slot_out_of_range():
    buffer = VaryingDataBuffer(4)
    buffer.init_pixels(1)
    with pytest.raises(IndexError):
        buffer.pixel(1)


def test_clipping_with_varying_vertices_stays_inside_near_plane():
    buffer = VaryingDataBuffer(4)
    buffer.init_dynamic()
    rows = [[0.0, 0.0, -0.5, 1.0], [0.0, 0.0, 0.5, 1.0], [0.5, 0.0, 0.5, 1.0]]
    verts = make_vertices(buffer, rows)
    for v in verts:
        v.clip_code = calculate_clip_code(v.position)
    triangles = clip_triangle(*verts)
    assert len(triangles) == 2
    for tri in triangles:
        for v in tri:
            assert v.position[2] >= -1e-9