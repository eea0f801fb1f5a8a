"""Flat-coloured triangle filling using signed areas."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .drawline import WHITE
from .geometry import Vec3
from .model import Model
from .tgaimage import Format, TGAColor, TGAImage

WIDTH = 1960
HEIGHT = 2180
_EPS = 1e-5


def signed_triangle_area(ax: int, ay: int, bx: int, by: int, cx: int, cy: int) -> float:
    """Signed area of a triangle; positive for counter-clockwise vertices."""
    return 0.5 * ((by - ay) * (bx + ax) + (cy - by) * (cx + bx) + (ay - cy) * (ax + cx))


def triangle(
    ax: int, ay: int, bx: int, by: int, cx: int, cy: int, framebuffer: TGAImage, color: TGAColor
) -> None:
    """Fill a counter-clockwise triangle; clockwise or tiny ones are skipped."""
    total = signed_triangle_area(ax, ay, bx, by, cx, cy)
    if total < 1:
        return
    for x in range(min(ax, bx, cx), max(ax, bx, cx) + 1):
        for y in range(min(ay, by, cy), max(ay, by, cy) + 1):
            alpha = signed_triangle_area(x, y, bx, by, cx, cy) / total
            beta = signed_triangle_area(x, y, cx, cy, ax, ay) / total
            gamma = signed_triangle_area(x, y, ax, ay, bx, by) / total
            if alpha < -_EPS or beta < -_EPS or gamma < -_EPS:
                continue
            framebuffer.set(x, y, color)


def _to_screen(value: float, lo: float, hi: float, size: int) -> int:
    if hi <= lo:
        return 0
    return int((value - lo) / (hi - lo) * (size - 1))


def _project(v: Vec3, lo: Vec3, hi: Vec3, width: int, height: int) -> tuple[int, int]:
    return _to_screen(v.x, lo.x, hi.x, width), _to_screen(v.y, lo.y, hi.y, height)


def render_silhouette(
    model: Model, width: int = WIDTH, height: int = HEIGHT, color: TGAColor = WHITE
) -> TGAImage:
    """Fill every face, fitting the model's x/y extent to the image.

    The returned image has its origin at the bottom-left corner.
    """
    image = TGAImage(width, height, Format.RGB)
    lo, hi = model.bounding_box()
    for face in model.faces:
        if len(face) < 3:
            continue
        (ax, ay), (bx, by), (cx, cy) = (
            _project(model.vert(corner.vert), lo, hi, width, height) for corner in face[:3]
        )
        triangle(ax, ay, bx, by, cx, cy, image, color)
    image.flip_vertically()
    return image


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render an OBJ model as a filled silhouette.")
    parser.add_argument("obj", nargs="?", default="../obj/delisha.obj", help="model file")
    parser.add_argument("-o", "--output", default="output.tga", help="image to write")
    parser.add_argument("--width", type=int, default=WIDTH)
    parser.add_argument("--height", type=int, default=HEIGHT)
    args = parser.parse_args(argv)
    model = Model.load(args.obj)
    render_silhouette(model, args.width, args.height).write(args.output)
    return 0