"""A small software rasterizer that draws OBJ models into TGA images."""

__version__ = "0.1.0"

__all__ = [
    "geometry",
    "tgaimage",
    "model",
    "drawline",
    "flatfill",
    "zbuffer",
    "projection",
]