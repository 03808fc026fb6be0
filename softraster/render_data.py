"""Vertex and index data of one draw call."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from softraster.mesh import Mesh, VertexElement
from softraster.srtypes import Triangle

VERTEX_MAX_COUNT = (1 << 16) - 1
INDEX_MAX = 0xFFFF

_ELEMENT_SOURCES = {
    VertexElement.POSITION: ("vertices", 3),
    VertexElement.NORMAL: ("normals", 3),
    VertexElement.TANGENT: ("tangents", 4),
    VertexElement.TEXCOORD: ("texcoords", 2),
    VertexElement.COLOR: ("colors", 4),
}


class RenderData:
    """Vertices and 16-bit triangle indices ready for drawing."""

    def __init__(self) -> None:
        self._vertices: list[Any] = []
        self._indices: list[int] = []

    def assign_mesh(self, mesh: Mesh, elements: Sequence[VertexElement]) -> None:
        """Build vertices as tuples of the mesh attributes named by elements, in order."""
        elements = [VertexElement(e) for e in elements]
        count = len(mesh.vertices)
        columns = []
        for element in elements:
            name, width = _ELEMENT_SOURCES[element]
            values = getattr(mesh, name)
            if len(values) != count:
                raise ValueError(
                    f"mesh has {len(values)} {name} for {count} vertices"
                )
            column = [tuple(float(c) for c in value) for value in values]
            if any(len(value) != width for value in column):
                raise ValueError(f"every entry of {name} needs {width} components")
            columns.append(column)
        self.assign_vertices(list(zip(*columns)) if columns else [() for _ in range(count)])
        self.assign_indices(mesh.indices)

    def assign_vertices(self, vertices: Iterable[Any]) -> None:
        vertices = list(vertices)
        if len(vertices) > VERTEX_MAX_COUNT:
            raise ValueError(
                f"at most {VERTEX_MAX_COUNT} vertices are allowed, got {len(vertices)}"
            )
        self._vertices = vertices

    def assign_indices(self, indices: Iterable[int]) -> None:
        indices = [int(i) for i in indices]
        if any(not 0 <= i <= INDEX_MAX for i in indices):
            raise ValueError("indices must be in 0..65535")
        self._indices = indices

    def vertex(self, index: int) -> Any:
        if not 0 <= index < len(self._vertices):
            raise IndexError(f"vertex index out of range: {index}")
        return self._vertices[index]

    def vertex_count(self) -> int:
        return len(self._vertices)

    def index_count(self) -> int:
        return len(self._indices)

    def primitive_count(self) -> int:
        return len(self._indices) // 3

    def triangle(self, index: int) -> Triangle[int]:
        """The vertex indices of triangle number index."""
        offset = index * 3
        if index < 0 or offset + 3 > len(self._indices):
            raise IndexError(f"triangle index out of range: {index}")
        return Triangle(*self._indices[offset:offset + 3])