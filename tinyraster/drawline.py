"""Wireframe rendering of a mesh with a simple line algorithm."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .geometry import Vec3
from .model import Model
from .tgaimage import Format, TGAColor, TGAImage

WHITE = TGAColor.rgba(255, 255, 255, 255)
RED = TGAColor.rgba(255, 0, 0, 255)
BLUE = TGAColor.rgba(0, 0, 255, 255)
GREEN = TGAColor.rgba(0, 255, 0, 255)

WIDTH = 1000
HEIGHT = 1500


def line(x0: int, y0: int, x1: int, y1: int, image: TGAImage, color: TGAColor) -> None:
    """Draw a line between two pixels, inclusive of both ends."""
    steep = abs(x0 - x1) < abs(y0 - y1)
    if steep:
        x0, y0, x1, y1 = y0, x0, y1, x1
    if x0 > x1:
        x0, x1, y0, y1 = x1, x0, y1, y0
    span = x1 - x0
    for x in range(x0, x1 + 1):
        t = (x - x0) / span if span else 0.0
        y = int(y0 * (1.0 - t) + y1 * t)
        if steep:
            image.set(y, x, color)
        else:
            image.set(x, y, color)


def _to_screen(value: float, lo: float, hi: float, size: int) -> int:
    if hi <= lo:
        return 0
    return int((value - lo) / (hi - lo) * (size - 1))


def _project(v: Vec3, lo: Vec3, hi: Vec3, width: int, height: int) -> tuple[int, int]:
    return _to_screen(v.x, lo.x, hi.x, width), _to_screen(v.y, lo.y, hi.y, height)


def render_wireframe(
    model: Model, width: int = WIDTH, height: int = HEIGHT, color: TGAColor = RED
) -> TGAImage:
    """Draw each face's edges, fitting the model's x/y extent to the image.

    The returned image has its origin at the bottom-left corner.
    """
    image = TGAImage(width, height, Format.RGB)
    lo, hi = model.bounding_box()
    for face in model.faces:
        if len(face) < 3:
            continue
        points = [_project(model.vert(corner.vert), lo, hi, width, height) for corner in face[:3]]
        for (ax, ay), (bx, by) in zip(points, points[1:] + points[:1]):
            line(ax, ay, bx, by, image, color)
    image.flip_vertically()
    return image


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render an OBJ model as a wireframe TGA image.")
    parser.add_argument("obj", nargs="?", default="../obj/delisha.obj", help="model file")
    parser.add_argument("-o", "--output", default="output.tga", help="image to write")
    parser.add_argument("--width", type=int, default=WIDTH)
    parser.add_argument("--height", type=int, default=HEIGHT)
    args = parser.parse_args(argv)
    model = Model.load(args.obj)
    render_wireframe(model, args.width, args.height).write(args.output)
    return 0