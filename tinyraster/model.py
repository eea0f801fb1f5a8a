"""Wavefront OBJ meshes: vertices, normals, texture coordinates and faces."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from os import PathLike
from typing import Iterable, Iterator, Union

from .geometry import Vec2, Vec3

_FACE_CORNER = re.compile(r"([+-]?\d+)/([+-]?\d+)/([+-]?\d+)")


@dataclass(frozen=True)
class FaceVertex:
    """Zero-based indices of one face corner: position, texture and normal."""

    vert: int
    uv: int
    normal: int

    def __iter__(self) -> Iterator[int]:
        yield self.vert
        yield self.uv
        yield self.normal


def _floats(words: list[str], count: int) -> list[float]:
    values: list[float] = []
    for word in words[:count]:
        try:
            values.append(float(word))
        except ValueError:
            break
    return values + [0.0] * (count - len(values))


def _face(words: list[str]) -> list[FaceVertex]:
    corners = []
    for word in words:
        match = _FACE_CORNER.fullmatch(word)
        if match is None:
            break
        vert, uv, normal = (int(group) - 1 for group in match.groups())
        corners.append(FaceVertex(vert, uv, normal))
    return corners


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return float("nan")
    return numerator / denominator


@dataclass
class Model:
    """A triangle mesh read from an OBJ file."""

    verts: list[Vec3] = field(default_factory=list)
    normals: list[Vec3] = field(default_factory=list)
    textures: list[Vec2] = field(default_factory=list)
    faces: list[list[FaceVertex]] = field(default_factory=list)

    @classmethod
    def load(cls, path: Union[str, PathLike]) -> Model:
        """Read a model from an OBJ file; raises OSError if it cannot be opened."""
        with open(path, encoding="utf-8", errors="replace") as handle:
            return cls.from_lines(handle)

    @classmethod
    def from_lines(cls, lines: Union[str, Iterable[str]]) -> Model:
        """Parse OBJ text given as a string or as an iterable of lines."""
        if isinstance(lines, str):
            lines = lines.splitlines()
        model = cls()
        for line in lines:
            words = line.split()
            if not words:
                continue
            kind, rest = words[0], words[1:]
            if kind == "v":
                model.verts.append(Vec3(*_floats(rest, 3)))
            elif kind == "vn":
                model.normals.append(Vec3(*_floats(rest, 3)))
            elif kind == "vt":
                model.textures.append(Vec2(*_floats(rest, 2)))
            elif kind == "f":
                model.faces.append(_face(rest))
        return model

    def nverts(self) -> int:
        return len(self.verts)

    def nfaces(self) -> int:
        return len(self.faces)

    def vert(self, index: int) -> Vec3:
        return self.verts[index]

    def normal(self, index: int) -> Vec3:
        return self.normals[index]

    def texture(self, index: int) -> Vec2:
        return self.textures[index]

    def face(self, index: int) -> list[FaceVertex]:
        """The corners of a face as index triples."""
        return list(self.faces[index])

    def face_vertices(self, index: int) -> list[Vec3]:
        """The vertex positions of a face's corners."""
        return [self.verts[corner.vert] for corner in self.faces[index]]

    def bounding_box(self) -> tuple[Vec3, Vec3]:
        """The smallest and largest coordinates over all vertices."""
        if not self.verts:
            raise ValueError("the model has no vertices")
        xs = [v.x for v in self.verts]
        ys = [v.y for v in self.verts]
        zs = [v.z for v in self.verts]
        return Vec3(min(xs), min(ys), min(zs)), Vec3(max(xs), max(ys), max(zs))

    def normalized(self) -> None:
        """Rescale vertices in place: x and y to [-1, 1], z to [0, 1]."""
        if not self.verts:
            return
        lo, hi = self.bounding_box()
        self.verts = [
            Vec3(
                _ratio(v.x - lo.x, hi.x - lo.x) * 2.0 - 1.0,
                _ratio(v.y - lo.y, hi.y - lo.y) * 2.0 - 1.0,
                _ratio(v.z - lo.z, hi.z - lo.z),
            )
            for v in self.verts
        ]