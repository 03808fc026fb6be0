"""Triangle meshes with per-vertex attributes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np


class VertexElement(IntEnum):
    POSITION = 0
    NORMAL = 1
    TANGENT = 2
    TEXCOORD = 3
    COLOR = 4


def _normalize_rows(vectors: np.ndarray) -> np.ndarray:
    lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
    out = np.zeros_like(vectors)
    np.divide(vectors, lengths, out=out, where=lengths > 0)
    return out


@dataclass
class Mesh:
    """Vertex positions, triangle indices and optional per-vertex attributes."""

    name: str = ""
    vertices: list = field(default_factory=list)
    indices: list = field(default_factory=list)
    colors: list = field(default_factory=list)
    normals: list = field(default_factory=list)
    tangents: list = field(default_factory=list)
    texcoords: list = field(default_factory=list)

    def vertex_count(self) -> int:
        return len(self.vertices)

    def _triangles(self) -> np.ndarray:
        indices = np.asarray(self.indices, dtype=np.int64).reshape(-1)
        count = len(indices) // 3
        return indices[:count * 3].reshape(count, 3)

    def recalculate_normals(self) -> None:
        """Area-weighted vertex normals; tangents too when texcoords match."""
        verts = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        tris = self._triangles()
        normals = np.zeros_like(verts)
        if len(tris):
            i0, i1, i2 = tris.T
            face = np.cross(verts[i1] - verts[i0], verts[i2] - verts[i0])
            for idx in (i0, i1, i2):
                np.add.at(normals, idx, face)
        normals = _normalize_rows(normals)
        self.normals = [tuple(float(c) for c in n) for n in normals]
        if len(self.texcoords) == len(verts):
            self.calculate_tangents()

    def calculate_tangents(self) -> None:
        """Per-vertex (x, y, z, handedness) tangents from normals and texcoords."""
        count = len(self.normals)
        if len(self.vertices) != count or len(self.texcoords) != count:
            raise ValueError("vertices, normals and texcoords must have the same length")
        verts = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        normals = np.asarray(self.normals, dtype=np.float64).reshape(-1, 3)
        uvs = np.asarray(self.texcoords, dtype=np.float64).reshape(-1, 2)
        tan1 = np.zeros_like(verts)
        tan2 = np.zeros_like(verts)
        tris = self._triangles()
        with np.errstate(divide="ignore", invalid="ignore"):
            if len(tris):
                i0, i1, i2 = tris.T
                e1 = verts[i1] - verts[i0]
                e2 = verts[i2] - verts[i0]
                st1 = uvs[i1] - uvs[i0]
                st2 = uvs[i2] - uvs[i0]
                r = 1.0 / (st1[:, 0] * st2[:, 1] - st2[:, 0] * st1[:, 1])
                sdir = (st2[:, 1:2] * e1 - st1[:, 1:2] * e2) * r[:, None]
                tdir = (st1[:, 0:1] * e2 - st2[:, 0:1] * e1) * r[:, None]
                for idx in (i0, i1, i2):
                    np.add.at(tan1, idx, sdir)
                    np.add.at(tan2, idx, tdir)
            ortho = tan1 - normals * np.sum(normals * tan1, axis=1, keepdims=True)
            xyz = _normalize_rows(ortho)
            handed = np.sum(np.cross(normals, tan1) * tan2, axis=1)
        w = np.where(handed < 0.0, -1.0, 1.0)
        self.tangents = [
            (float(t[0]), float(t[1]), float(t[2]), float(h)) for t, h in zip(xyz, w)
        ]