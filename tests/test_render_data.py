import pytest

from softraster.mesh import Mesh, VertexElement
from softraster.render_data import RenderData
from softraster.srtypes import Triangle


def quad_mesh():
    return Mesh(
        name="quad",
        vertices=[(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)],
        texcoords=[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)],
        indices=[0, 1, 2, 0, 2, 3],
    )


def test_assign_mesh_builds_vertices_in_element_order():
    data = RenderData()
    mesh = quad_mesh()
    data.assign_mesh(mesh, [VertexElement.POSITION, VertexElement.TEXCOORD])
    assert data.vertex_count() == 4
    assert data.vertex(2) == (mesh.vertices[2], mesh.texcoords[2])
    data.assign_mesh(mesh, [VertexElement.TEXCOORD, VertexElement.POSITION])
    assert data.vertex(1) == (mesh.texcoords[1], mesh.vertices[1])


def test_assign_mesh_missing_attribute():
    with pytest.raises(ValueError):
        RenderData().assign_mesh(quad_mesh(), [VertexElement.POSITION, VertexElement.NORMAL])


def test_assign_mesh_wrong_component_count():
    mesh = quad_mesh()
    mesh.texcoords = [(0.0, 0.0, 0.0)] * 4
    with pytest.raises(ValueError):
        RenderData().assign_mesh(mesh, [VertexElement.TEXCOORD])


def test_triangles_and_counts():
    data = RenderData()
    data.assign_mesh(quad_mesh(), [VertexElement.POSITION])
    assert data.index_count() == 6
    assert data.primitive_count() == 2
    assert data.triangle(0) == Triangle(0, 1, 2)
    assert data.triangle(1) == Triangle(0, 2, 3)


def test_triangle_out_of_range():
    data = RenderData()
    data.assign_indices([0, 1, 2, 3])
    assert data.primitive_count() == 1
    with pytest.raises(IndexError):
        data.triangle(1)
    with pytest.raises(IndexError):
        data.triangle(-1)


def test_too_many_vertices():
    with pytest.raises(ValueError):
        RenderData().assign_vertices([None] * 65536)


def test_index_value_range():
    with pytest.raises(ValueError):
        RenderData().assign_indices([0, 65536, 1])


def test_vertex_out_of_range():
    data = RenderData()
    data.assign_vertices(["a", "b"])
    assert data.vertex(1) == "b"
    with pytest.raises(IndexError):
        data.vertex(2)