"""Software rasterization building blocks: bitmaps, textures, clipping, rasterizing, blending and shading."""

__version__ = "0.1.0"