[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "tinyraster"
version = "0.1.0"
description = "A small software rasterizer: TGA images, OBJ models, line drawing, triangle filling, z-buffering and perspective projection."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "rasterizer",
    "rendering",
    "tga",
    "obj",
    "z-buffer",
    "software-renderer",
    "graphics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tinyraster-drawline = "tinyraster.drawline:main"
tinyraster-flatfill = "tinyraster.flatfill:main"
tinyraster-zbuffer = "tinyraster.zbuffer:main"
tinyraster-projection = "tinyraster.projection:main"

[tool.setuptools.packages.find]
include = ["tinyraster*"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
