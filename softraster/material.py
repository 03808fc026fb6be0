"""Surface materials built from parsed OBJ/MTL material records."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from softraster.texture2d import Texture2D

Color = tuple[float, float, float, float]

EPSILON = 1e-6
BLACK: Color = (0.0, 0.0, 0.0, 1.0)
WHITE: Color = (1.0, 1.0, 1.0, 1.0)


@dataclass
class ObjMaterial:
    """A material record as read from an MTL file."""

    name: str = ""
    ambient: tuple[float, float, float] = (0.0, 0.0, 0.0)
    diffuse: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0)
    emission: tuple[float, float, float] = (0.0, 0.0, 0.0)
    shininess: float = 1.0
    dissolve: float = 1.0
    diffuse_texname: str = ""
    normal_texname: str = ""
    specular_texname: str = ""
    unknown_parameter: dict[str, str] = field(default_factory=dict)


@dataclass
class Material:
    """Colors, shininess and textures of a surface."""

    name: str = ""
    ambient: Color = BLACK
    diffuse: Color = WHITE
    specular: Color = WHITE
    shininess: float = 10.0
    emission: Color = WHITE
    alpha: float = 1.0
    is_transparent: bool = False
    ambient_texture: Optional[Texture2D] = None
    diffuse_texture: Optional[Texture2D] = None
    normal_texture: Optional[Texture2D] = None
    specular_texture: Optional[Texture2D] = None
    alpha_mask_texture: Optional[Texture2D] = None


def parse_bump_parameter(param: str) -> tuple[float, str]:
    """Split a bump map parameter into (multiplier, path), honouring a leading -bm."""
    if not param.startswith("-bm"):
        return 1.0, param
    tokens = param[4:].split()
    if not tokens:
        return 0.0, ""
    try:
        multiplier = float(tokens[0])
    except ValueError:
        return 0.0, ""
    return multiplier, tokens[1] if len(tokens) > 1 else ""


def _rgb(values) -> Color:
    return (float(values[0]), float(values[1]), float(values[2]), 1.0)


def _texture_path(file_dir: str, name: str) -> str:
    return (file_dir + name).replace("\\", "/")


def load_materials(
    obj_materials: Iterable[ObjMaterial], file_dir: Union[str, "os.PathLike[str]"] = ""
) -> list[Material]:
    """Build materials, loading their textures relative to file_dir."""
    file_dir = os.fspath(file_dir)
    materials = []
    for m in obj_materials:
        material = Material(
            name=m.name,
            ambient=_rgb(m.ambient),
            diffuse=_rgb(m.diffuse),
            specular=_rgb(m.specular),
            shininess=m.shininess,
            emission=_rgb(m.emission),
        )
        params = m.unknown_parameter

        if m.diffuse_texname:
            material.diffuse_texture = Texture2D.load(_texture_path(file_dir, m.diffuse_texname))
            material.diffuse_texture.generate_mipmaps()

        if m.normal_texname:
            material.normal_texture = Texture2D.load(_texture_path(file_dir, m.normal_texname))
        else:
            bump = params.get("map_bump", params.get("bump"))
            if bump is not None:
                _, bump_path = parse_bump_parameter(bump)
                if bump_path:
                    material.normal_texture = Texture2D.load(_texture_path(file_dir, bump_path))
                    material.normal_texture.convert_bump_to_normal()
        if material.normal_texture is not None:
            material.normal_texture.generate_mipmaps()

        if m.specular_texname:
            material.specular_texture = Texture2D.load(
                _texture_path(file_dir, m.specular_texname)
            )

        alpha_mask = params.get("map_d")
        if alpha_mask is not None:
            material.alpha_mask_texture = Texture2D.load(_texture_path(file_dir, alpha_mask))

        material.is_transparent = (
            material.alpha < 1.0 - EPSILON or material.alpha_mask_texture is not None
        )
        materials.append(material)
    return materials