"""In-memory images that read and write the Truevision TGA format."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from os import PathLike
from pathlib import Path
from typing import Iterator, Union

_HEADER = struct.Struct("<BBBhhBhhhhBB")
_FOOTER = b"TRUEVISION-XFILE.\x00"
_AREA_REFS = bytes(8)
_MAX_CHUNK = 128
_TOP_LEFT = 0x20
_RIGHT_TO_LEFT = 0x10


class TGAError(Exception):
    """Raised when TGA data cannot be read or written."""


class Format(IntEnum):
    """Bytes per pixel of the supported image kinds."""

    GRAYSCALE = 1
    RGB = 3
    RGBA = 4


@dataclass(frozen=True)
class TGAColor:
    """A pixel value stored as four bytes in B, G, R, A order."""

    raw: bytes = bytes(4)
    bytespp: int = 1

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        if len(raw) > 4:
            raise ValueError("a colour holds at most four bytes")
        object.__setattr__(self, "raw", raw.ljust(4, b"\x00"))

    @classmethod
    def rgba(cls, r: int, g: int, b: int, a: int) -> TGAColor:
        return cls(bytes((b & 0xFF, g & 0xFF, r & 0xFF, a & 0xFF)), 4)

    @classmethod
    def from_value(cls, value: int, bytespp: int) -> TGAColor:
        return cls((value & 0xFFFFFFFF).to_bytes(4, "little"), bytespp)

    @classmethod
    def from_bytes(cls, data: bytes, bytespp: int) -> TGAColor:
        return cls(bytes(data[:bytespp]), bytespp)

    @property
    def b(self) -> int:
        return self.raw[0]

    @property
    def g(self) -> int:
        return self.raw[1]

    @property
    def r(self) -> int:
        return self.raw[2]

    @property
    def a(self) -> int:
        return self.raw[3]

    @property
    def val(self) -> int:
        return int.from_bytes(self.raw, "little")


def _decode_rle(body: memoryview, pixel_count: int, bpp: int) -> bytearray:
    out = bytearray()
    pos = 0
    done = 0
    while done < pixel_count:
        if pos >= len(body):
            raise TGAError("an error occurred while reading the data")
        chunk_header = body[pos]
        pos += 1
        if chunk_header < 128:
            count = chunk_header + 1
            size = count * bpp
            chunk = body[pos:pos + size]
            if len(chunk) < size:
                raise TGAError("an error occurred while reading the data")
            if done + count > pixel_count:
                raise TGAError("too many pixels read")
            out += chunk
            pos += size
        else:
            count = chunk_header - 127
            pixel = body[pos:pos + bpp]
            if len(pixel) < bpp:
                raise TGAError("an error occurred while reading the data")
            if done + count > pixel_count:
                raise TGAError("too many pixels read")
            out += bytes(pixel) * count
            pos += bpp
        done += count
    return out


def _encode_rle(data: bytes, bpp: int) -> bytes:
    pixels = [data[i:i + bpp] for i in range(0, len(data), bpp)]
    npixels = len(pixels)
    out = bytearray()
    cur = 0
    while cur < npixels:
        run = 1
        raw = True
        while cur + run < npixels and run < _MAX_CHUNK:
            same = pixels[cur + run - 1] == pixels[cur + run]
            if run == 1:
                raw = not same
            if raw and same:
                run -= 1
                break
            if not raw and not same:
                break
            run += 1
        out.append(run - 1 if raw else run + 127)
        out += b"".join(pixels[cur:cur + run]) if raw else pixels[cur]
        cur += run
    return bytes(out)


class TGAImage:
    """A width x height raster with 1, 3 or 4 bytes per pixel."""

    def __init__(self, width: int = 0, height: int = 0, bytespp: int = 0) -> None:
        if width < 0 or height < 0 or bytespp < 0:
            raise ValueError("image dimensions must not be negative")
        self._width = int(width)
        self._height = int(height)
        self._bytespp = int(bytespp)
        self._data = bytearray(self._width * self._height * self._bytespp)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def bytespp(self) -> int:
        return self._bytespp

    @classmethod
    def read(cls, path: Union[str, PathLike]) -> TGAImage:
        """Load an image from a TGA file."""
        return cls.from_bytes(Path(path).read_bytes())

    @classmethod
    def from_bytes(cls, data: bytes) -> TGAImage:
        """Decode an uncompressed or run-length encoded TGA image."""
        if len(data) < _HEADER.size:
            raise TGAError("an error occurred while reading the header")
        (_, _, code, _, _, _, _, _, width, height, bits, descriptor) = _HEADER.unpack_from(data)
        bpp = bits >> 3
        if width <= 0 or height <= 0 or bpp not in (Format.GRAYSCALE, Format.RGB, Format.RGBA):
            raise TGAError("bad bpp (or width/height) value")
        nbytes = width * height * bpp
        body = memoryview(data)[_HEADER.size:]
        if code in (2, 3):
            if len(body) < nbytes:
                raise TGAError("an error occurred while reading the data")
            pixels = bytearray(body[:nbytes])
        elif code in (10, 11):
            pixels = _decode_rle(body, width * height, bpp)
        else:
            raise TGAError(f"unknown file format {code}")
        image = cls(width, height, bpp)
        image._data[:] = pixels
        if not descriptor & _TOP_LEFT:
            image.flip_vertically()
        if descriptor & _RIGHT_TO_LEFT:
            image.flip_horizontally()
        return image

    def to_bytes(self, rle: bool = True) -> bytes:
        """Encode the image as a TGA file with a top-left origin."""
        if self._bytespp == Format.GRAYSCALE:
            code = 11 if rle else 3
        else:
            code = 10 if rle else 2
        try:
            header = _HEADER.pack(
                0, 0, code, 0, 0, 0, 0, 0,
                self._width, self._height, self._bytespp << 3, _TOP_LEFT,
            )
        except struct.error as exc:
            raise TGAError("can't dump the tga file") from exc
        body = _encode_rle(bytes(self._data), self._bytespp) if rle else bytes(self._data)
        return header + body + _AREA_REFS + _FOOTER

    def write(self, path: Union[str, PathLike], rle: bool = True) -> None:
        """Write the image to a TGA file."""
        Path(path).write_bytes(self.to_bytes(rle))

    def copy(self) -> TGAImage:
        other = TGAImage(self._width, self._height, self._bytespp)
        other._data[:] = self._data
        return other

    def _offset(self, x: int, y: int) -> int | None:
        if not self._data or x < 0 or y < 0 or x >= self._width or y >= self._height:
            return None
        return (x + y * self._width) * self._bytespp

    def get(self, x: int, y: int) -> TGAColor:
        """Return the pixel at (x, y), or a blank colour outside the image."""
        offset = self._offset(x, y)
        if offset is None:
            return TGAColor()
        return TGAColor.from_bytes(self._data[offset:offset + self._bytespp], self._bytespp)

    def set(self, x: int, y: int, color: TGAColor) -> bool:
        """Store a pixel; returns False when (x, y) lies outside the image."""
        offset = self._offset(x, y)
        if offset is None:
            return False
        self._data[offset:offset + self._bytespp] = color.raw[:self._bytespp]
        return True

    def _rows(self) -> Iterator[bytes]:
        stride = self._width * self._bytespp
        for j in range(self._height):
            yield bytes(self._data[j * stride:(j + 1) * stride])

    def flip_horizontally(self) -> None:
        if not self._data:
            return
        bpp = self._bytespp
        flipped = []
        for row in self._rows():
            pixels = [row[i:i + bpp] for i in range(0, len(row), bpp)]
            flipped.append(b"".join(reversed(pixels)))
        self._data[:] = b"".join(flipped)

    def flip_vertically(self) -> None:
        if not self._data:
            return
        self._data[:] = b"".join(reversed(list(self._rows())))

    def scale(self, width: int, height: int) -> None:
        """Resize with nearest-neighbour sampling."""
        if width <= 0 or height <= 0:
            raise ValueError("target size must be positive")
        if not self._data:
            raise TGAError("cannot scale an empty image")
        bpp = self._bytespp
        new_rows = []
        erry = 0
        for row in self._rows():
            new_row = bytearray(width * bpp)
            nx = 0
            errx = self._width - width
            for i in range(self._width):
                errx += width
                pixel = row[i * bpp:(i + 1) * bpp]
                while errx >= self._width:
                    errx -= self._width
                    new_row[nx:nx + bpp] = pixel
                    nx += bpp
            erry += height
            while erry >= self._height:
                new_rows.append(bytes(new_row))
                erry -= self._height
        self._data[:] = b"".join(new_rows)
        self._width = width
        self._height = height

    def clear(self) -> None:
        self._data[:] = bytes(len(self._data))

    def buffer(self) -> bytearray:
        """The pixel bytes, row by row, shared with the image."""
        return self._data