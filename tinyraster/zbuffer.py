"""Depth-tested triangle rasterization with a grayscale depth image."""

from __future__ import annotations

import argparse
import math
from typing import MutableSequence, Optional, Sequence

import numpy as np

from .drawline import WHITE
from .geometry import Vec3
from .model import Model
from .tgaimage import Format, TGAColor, TGAImage

WIDTH = 1000
HEIGHT = 1500


def compute_barycentric_2d(
    x: float, y: float, a: Vec3, b: Vec3, c: Vec3
) -> tuple[float, float, float]:
    """Barycentric weights of (x, y) in the triangle abc (x/y only).

    A degenerate triangle yields three NaN weights.
    """
    denominator = (b.y - c.y) * (a.x - c.x) + (c.x - b.x) * (a.y - c.y)
    if denominator == 0:
        nan = float("nan")
        return nan, nan, nan
    c1 = ((b.y - c.y) * (x - c.x) + (c.x - b.x) * (y - c.y)) / denominator
    c2 = ((c.y - a.y) * (x - c.x) + (a.x - c.x) * (y - c.y)) / denominator
    return c1, c2, 1.0 - c1 - c2


def _finite(*vertices: Vec3) -> bool:
    return all(math.isfinite(value) for v in vertices for value in v)


def triangle(
    a: Vec3,
    b: Vec3,
    c: Vec3,
    image: TGAImage,
    color: TGAColor,
    depth: MutableSequence[float],
    width: int,
) -> None:
    """Fill a screen-space triangle, keeping the pixel with the larger depth.

    ``depth`` is a row-major buffer of ``width`` columns; pixels that fall
    outside it are skipped.
    """
    if width <= 0 or not _finite(a, b, c):
        return
    height = len(depth) // width
    min_x = max(math.floor(min(a.x, b.x, c.x)), 0)
    max_x = min(math.ceil(max(a.x, b.x, c.x)), width)
    min_y = max(math.floor(min(a.y, b.y, c.y)), 0)
    max_y = min(math.ceil(max(a.y, b.y, c.y)), height)
    for x in range(min_x, max_x):
        for y in range(min_y, max_y):
            alpha, beta, gamma = compute_barycentric_2d(x + 0.5, y + 0.5, a, b, c)
            if not (alpha >= 0 and beta >= 0 and gamma >= 0):
                continue
            z = alpha * a.z + beta * b.z + gamma * c.z
            idx = y * width + x
            if z > depth[idx]:
                depth[idx] = z
                image.set(x, y, color)


def depth_image(
    depth: Sequence[float], width: int, height: int, invert: bool = False
) -> TGAImage:
    """Turn a depth buffer into a grayscale image, clamping to [0, 255].

    With ``invert`` the gray level is ``(1 - depth) * 255`` instead of
    ``depth * 255``.
    """
    values = np.asarray(depth, dtype=np.float64)[: width * height]
    if values.size != width * height:
        raise ValueError("depth buffer is smaller than the image")
    levels = (1.0 - values if invert else values) * 255.0
    levels = np.nan_to_num(levels, nan=0.0, posinf=255.0, neginf=0.0)
    gray = np.clip(levels, 0.0, 255.0).astype(np.uint8)
    image = TGAImage(width, height, Format.GRAYSCALE)
    image.buffer()[:] = gray.tobytes()
    return image


def render_depth(
    model: Model, width: int = WIDTH, height: int = HEIGHT, color: TGAColor = WHITE
) -> tuple[TGAImage, TGAImage]:
    """Render a model with x and y in [-1, 1] and return (frame, depth image).

    Both images have their origin at the bottom-left corner.
    """
    framebuffer = TGAImage(width, height, Format.RGB)
    depth = np.full(width * height, -np.inf)
    for face in model.faces:
        if len(face) < 3:
            continue
        corners = [
            Vec3((v.x + 1) * 0.5 * width, (v.y + 1) * 0.5 * height, v.z)
            for v in (model.vert(corner.vert) for corner in face[:3])
        ]
        triangle(*corners, framebuffer, color, depth, width)
    zbuffer = depth_image(depth, width, height)
    framebuffer.flip_vertically()
    zbuffer.flip_vertically()
    return framebuffer, zbuffer


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render an OBJ model with a depth buffer.")
    parser.add_argument("obj", nargs="?", default="../obj/delisha.obj", help="model file")
    parser.add_argument("--frame", default="frame.tga", help="colour image to write")
    parser.add_argument("--depth", default="buffer.tga", help="depth image to write")
    parser.add_argument("--width", type=int, default=WIDTH)
    parser.add_argument("--height", type=int, default=HEIGHT)
    args = parser.parse_args(argv)
    model = Model.load(args.obj)
    model.normalized()
    framebuffer, zbuffer = render_depth(model, args.width, args.height)
    framebuffer.write(args.frame)
    zbuffer.write(args.depth)
    return 0