# softraster

Building blocks for a CPU renderer in Python with NumPy and Pillow: pixel
storage and image files, texture sampling with mipmaps, environment maps,
frustum clipping, triangle rasterization in 2x2 pixel blocks, depth, stencil
and blend state, and classic and physically based lighting functions.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `softraster.bitmap` | `Bitmap` and `BitmapType`: 8-bit and float pixel storage with `get_pixel`, `set_pixel`, `get_alpha`, `set_alpha`, `fill`, `load` and `save` |
| `softraster.stencil` | `StencilBuffer`, 8-bit stencil values indexed as `buffer[x, y]` |
| `softraster.render_texture` | `RenderTexture`: RGBA32 colour and float depth buffers plus three g-buffer slots |
| `softraster.sampler` | `AddressMode` (wrap, mirror, clamp), `FilterMode`, `sample_point` and `sample_linear` |
| `softraster.texture2d` | `Texture2D` with `generate_mipmaps`, `calc_lod`, `sample`, `sample_grad`, `convert_bump_to_normal` and a cache used by `load` |
| `softraster.cubemap` | `Cubemap` from six face textures or a latitude-longitude texture, with `map_6_images_to_latlong` and `prefilter_env_map` |
| `softraster.mesh` | `Mesh` with `recalculate_normals` and `calculate_tangents` |
| `softraster.srtypes` | `Projection`, `orient2d`, and the `Line`, `Triangle` and `Quad` containers |
| `softraster.clipper` | `calculate_clip_code`, `clip_line` and `clip_triangle` against the view frustum |
| `softraster.rasterizer` | `Rasterizer`, yielding `QuadFragment` blocks with coverage mask, depth and barycentric weights |
| `softraster.blender` | `Blender`, `BlendMode`, `BlendOp` |
| `softraster.render_state` | `RenderState`: depth test, face culling, stencil test and write, blending |
| `softraster.buffer` | `Buffer`, a paged store of equally sized blocks, and `BufferCursor` |
| `softraster.varying_data` | `VaryingDataBuffer` and `VertexVaryingData`: shader outputs with linear and barycentric interpolation |
| `softraster.render_data` | `RenderData`: vertex tuples and 16-bit triangle indices built from a `Mesh` |
| `softraster.shader` | `Shader` base class and helpers: `tex2d`, `tex2d_grad`, `tex_cube`, `calc_lod`, `sample_shadow_map`, `sample_shadow_map_pcf`, `unpack_normal`, `reflect` |
| `softraster.shaderf` | `lighting_lambert`, `lighting_phong`, `lighting_blinn_phong` |
| `softraster.pbsf` | GGX, Smith and Fresnel terms, `brdf1`, `brdf2`, Hammersley sampling and image-based lighting integrals |
| `softraster.material` | `Material`, `ObjMaterial` and `load_materials`, which loads the textures a material names |

Colours are `(r, g, b, a)` tuples with components from 0 to 1. 8-bit formats
round to whole steps; float formats keep values as given. Row 0 of a bitmap is
the bottom row of the image file.

`Bitmap.load` reads 8-bit grayscale, RGB and RGBA images and Radiance HDR
files. `Bitmap.save` writes 8-bit formats as PNG, float alpha as TIFF and float
colour as Radiance HDR.

## Example

```python
from softraster.bitmap import Bitmap, BitmapType
from softraster.texture2d import Texture2D

bitmap = Bitmap(4, 4, BitmapType.RGBA32)
bitmap.fill((1.0, 0.5, 0.25, 1.0))

texture = Texture2D(bitmap)
texture.generate_mipmaps()
print(texture.mipmap_count())        # 2
print(texture.sample((0.5, 0.5), 0.0))
```

Rasterizing a projected triangle:

```python
from softraster.rasterizer import Rasterizer
from softraster.srtypes import Projection, Triangle

triangle = Triangle(
    Projection.from_clip((-1.0, -1.0, 0.5, 1.0), 8, 8),
    Projection.from_clip((1.0, -1.0, 0.5, 1.0), 8, 8),
    Projection.from_clip((-1.0, 1.0, 0.5, 1.0), 8, 8),
)
for fragment in Rasterizer(8, 8).rasterize_triangle(triangle):
    print(fragment.x, fragment.y, bin(fragment.mask))
```

## What this package does not do

The pieces are separate: there is no draw call or pipeline object that runs
vertex shading, clipping, rasterization, depth and stencil tests and blending
in sequence, and no scene, camera, transform or light objects. The caller
supplies matrices (as NumPy arrays) and wires the stages together.
`load_materials` takes `ObjMaterial` records that are already parsed; the
package reads neither OBJ nor MTL files. It opens no window and draws nothing
on screen; results go to bitmaps, which can be saved as image files.