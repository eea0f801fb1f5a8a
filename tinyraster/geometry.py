"""Small two- and three-component vectors used by the renderers."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Iterator


def _fmt(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    return format(value, "g")


@dataclass
class Vec2:
    """A 2D vector; also used for texture coordinates."""

    x: float = 0
    y: float = 0

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        if not isinstance(factor, Real):
            return NotImplemented
        return Vec2(self.x * factor, self.y * factor)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __str__(self) -> str:
        return f"({_fmt(self.x)}, {_fmt(self.y)})"


@dataclass
class Vec3:
    """A 3D vector with dot product (``*``) and cross product (``^``)."""

    x: float = 0
    y: float = 0
    z: float = 0

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other):
        """Dot product with another vector, or scaling by a number."""
        if isinstance(other, Vec3):
            return self.x * other.x + self.y * other.y + self.z * other.z
        if isinstance(other, Real):
            return Vec3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __xor__(self, other: Vec3) -> Vec3:
        """Cross product."""
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __str__(self) -> str:
        return f"({_fmt(self.x)}, {_fmt(self.y)}, {_fmt(self.z)})"