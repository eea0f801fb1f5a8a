"""Perspective-projected, texture-mapped rendering with a depth buffer."""

from __future__ import annotations

import argparse
import math
import sys
from typing import Optional, Sequence

import numpy as np

from .geometry import Vec2, Vec3
from .model import Model
from .tgaimage import Format, TGAError, TGAImage
from .zbuffer import compute_barycentric_2d
from .zbuffer import depth_image as _depth_image

MY_PI = 3.1415926
WIDTH = 1000
HEIGHT = 1000
EYE_POS = (0.0, 0.7, 2.17)
FOV = 75.0
Z_NEAR = 0.8
Z_FAR = 3.0


def model_matrix(angle: float) -> np.ndarray:
    """Model transform; the mesh is used as given, so this is the identity."""
    translate = np.eye(4)
    rotation = np.eye(4)
    scale = np.eye(4)
    return translate @ rotation @ scale


def view_matrix(eye_pos: Sequence[float]) -> np.ndarray:
    """Move the eye to the origin, then flip z so the view looks along +z."""
    ex, ey, ez = (float(v) for v in eye_pos)
    translate = np.array([
        [1.0, 0.0, 0.0, -ex],
        [0.0, 1.0, 0.0, -ey],
        [0.0, 0.0, 1.0, -ez],
        [0.0, 0.0, 0.0, 1.0],
    ])
    rotate = np.diag([1.0, 1.0, -1.0, 1.0])
    return rotate @ translate


def projection_matrix(eye_fov: float, aspect: float, z_near: float, z_far: float) -> np.ndarray:
    """Perspective projection: the near plane maps to z = 1, the far plane to z = -1."""
    angle = eye_fov * MY_PI / 180.0
    t = math.tan(angle / 2.0) * z_near
    r = t * aspect
    l, b = -r, -t
    if r == l or t == b or z_near == z_far:
        raise ValueError("the view volume is empty")
    persp2ortho = np.array([
        [z_near, 0.0, 0.0, 0.0],
        [0.0, z_near, 0.0, 0.0],
        [0.0, 0.0, z_near + z_far, -z_near * z_far],
        [0.0, 0.0, 1.0, 0.0],
    ])
    ortho_scale = np.diag([2.0 / (r - l), 2.0 / (t - b), 2.0 / (z_near - z_far), 1.0])
    ortho_trans = np.array([
        [1.0, 0.0, 0.0, -(r + l) / 2.0],
        [0.0, 1.0, 0.0, -(t + b) / 2.0],
        [0.0, 0.0, 1.0, -(z_near + z_far) / 2.0],
        [0.0, 0.0, 0.0, 1.0],
    ])
    return ortho_scale @ ortho_trans @ persp2ortho


def viewport_matrix(width: int, height: int) -> np.ndarray:
    """Map normalized device coordinates to pixels, and z to [0, 1]."""
    return np.array([
        [width * 0.5, 0.0, 0.0, width * 0.5],
        [0.0, height * 0.5, 0.0, height * 0.5],
        [0.0, 0.0, 0.5, 0.5],
        [0.0, 0.0, 0.0, 1.0],
    ])


class Rasterizer:
    """Renders a textured model into a colour frame and a depth buffer."""

    def __init__(self, model: Model, width: int = WIDTH, height: int = HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("image size must be positive")
        self.model = model
        self.width = width
        self.height = height
        self.depth = np.full(width * height, np.inf)
        self.framebuffer = TGAImage(width, height, Format.RGB)
        self.zbuffer = TGAImage(width, height, Format.GRAYSCALE)

    def mvp(self) -> np.ndarray:
        """The combined projection, view and model transform."""
        aspect = self.width / self.height
        m = model_matrix(FOV)
        v = view_matrix(EYE_POS)
        p = projection_matrix(FOV, aspect, Z_NEAR, Z_FAR)
        return p @ v @ m

    def triangle(
        self,
        a: Vec3,
        b: Vec3,
        c: Vec3,
        t0: Vec2,
        t1: Vec2,
        t2: Vec2,
        w0: float,
        w1: float,
        w2: float,
        texture: TGAImage,
    ) -> None:
        """Fill a screen-space triangle with perspective-correct texturing.

        The nearest (smallest) depth wins; ``w0..w2`` are the reciprocal
        clip-space w of the corners.
        """
        if not all(math.isfinite(value) for v in (a, b, c) for value in v):
            return
        min_x = max(math.floor(min(a.x, b.x, c.x)), 0)
        max_x = min(math.ceil(max(a.x, b.x, c.x)), self.width - 1)
        min_y = max(math.floor(min(a.y, b.y, c.y)), 0)
        max_y = min(math.ceil(max(a.y, b.y, c.y)), self.height - 1)
        tex_w, tex_h = texture.width, texture.height
        for x in range(min_x, max_x + 1):
            for y in range(min_y, max_y + 1):
                alpha, beta, gamma = compute_barycentric_2d(x + 0.5, y + 0.5, a, b, c)
                if not (alpha >= 0 and beta >= 0 and gamma >= 0):
                    continue
                weight = alpha * w0 + beta * w1 + gamma * w2
                if weight == 0:
                    continue
                w_reciprocal = 1.0 / weight
                z = (alpha * a.z / w0 + beta * b.z / w1 + gamma * c.z / w2) * w_reciprocal
                idx = y * self.width + x
                if not z < self.depth[idx]:
                    continue
                self.depth[idx] = z
                u = (alpha * t0.x / w0 + beta * t1.x / w1 + gamma * t2.x / w2) * w_reciprocal
                v = (alpha * t0.y / w0 + beta * t1.y / w1 + gamma * t2.y / w2) * w_reciprocal
                u = max(0.0, min(u, 1.0))
                v = max(0.0, min(v, 1.0))
                tex_x = min(int(u * tex_w), tex_w - 1)
                tex_y = min(int(v * tex_h), tex_h - 1)
                self.framebuffer.set(x, y, texture.get(tex_x, tex_y))

    def draw(self, texture: Optional[TGAImage] = None) -> tuple[TGAImage, TGAImage]:
        """Render every face and return (frame, depth image), origin bottom-left."""
        if texture is None:
            texture = TGAImage()
        mvp = self.mvp()
        screen = viewport_matrix(self.width, self.height)
        for face in self.model.faces:
            if len(face) < 3:
                continue
            corners = face[:3]
            clips = []
            for corner in corners:
                v = self.model.vert(corner.vert)
                clips.append(mvp @ np.array([v.x, v.y, v.z, 1.0]))
            if any(clip[3] == 0 for clip in clips):
                continue
            inv_w = [float(1.0 / clip[3]) for clip in clips]
            screens = [screen @ (clip / clip[3]) for clip in clips]
            if not all(np.all(np.isfinite(s)) for s in screens):
                continue
            verts = [Vec3(float(s[0]), float(s[1]), float(s[2])) for s in screens]
            uvs = [self.model.texture(corner.uv) * iw for corner, iw in zip(corners, inv_w)]
            self.triangle(*verts, *uvs, *inv_w, texture)
        self.zbuffer = self.depth_image()
        self.framebuffer.flip_vertically()
        self.zbuffer.flip_vertically()
        return self.framebuffer, self.zbuffer

    def depth_image(self) -> TGAImage:
        """The depth buffer as gray levels, nearer pixels brighter."""
        return _depth_image(self.depth, self.width, self.height, invert=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render a textured OBJ model in perspective.")
    parser.add_argument("obj", nargs="?", default="../obj/youda.obj", help="model file")
    parser.add_argument("--texture", default="../obj/youda.tga", help="TGA texture")
    parser.add_argument("--frame", default="frame.tga", help="colour image to write")
    parser.add_argument("--depth", default="buffer.tga", help="depth image to write")
    parser.add_argument("--width", type=int, default=WIDTH)
    parser.add_argument("--height", type=int, default=HEIGHT)
    args = parser.parse_args(argv)
    model = Model.load(args.obj)
    try:
        texture = TGAImage.read(args.texture)
    except (OSError, TGAError) as exc:
        print(f"can't load texture {args.texture}: {exc}", file=sys.stderr)
        texture = TGAImage()
    rasterizer = Rasterizer(model, args.width, args.height)
    framebuffer, zbuffer = rasterizer.draw(texture)
    framebuffer.write(args.frame)
    zbuffer.write(args.depth)
    return 0