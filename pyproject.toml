[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "softraster"
version = "0.1.0"
description = "Building blocks for a software rasterizer: bitmaps, textures, clipping, blending, rasterization and physically based shading"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pillow",
]
keywords = ["rasterizer", "software rendering", "3d", "graphics", "pbr", "shading"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["softraster"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
