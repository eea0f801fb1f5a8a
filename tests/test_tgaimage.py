import random
import struct

import pytest

from tinyraster.tgaimage import Format, TGAColor, TGAError, TGAImage

FOOTER = b"TRUEVISION-XFILE.\x00"


def _header(code, width, height, bits, descriptor=0x20):
    return struct.pack("<BBBhhBhhhhBB", 0, 0, code, 0, 0, 0, 0, 0, width, height, bits, descriptor)


def _noisy_image(width=7, height=5, bpp=Format.RGB, seed=1):
    rng = random.Random(seed)
    image = TGAImage(width, height, bpp)
    palette = [TGAColor.rgba(rng.randrange(256), rng.randrange(256), rng.randrange(256), 255)
               for _ in range(3)]
    for y in range(height):
        for x in range(width):
            image.set(x, y, rng.choice(palette))
    return image


def test_new_image_is_black():
    image = TGAImage(4, 3, Format.RGB)
    assert image.buffer() == bytearray(4 * 3 * 3)


def test_rgba_color_components():
    c = TGAColor.rgba(10, 20, 30, 40)
    assert (c.r, c.g, c.b, c.a) == (10, 20, 30, 40)
    assert c.raw == bytes([30, 20, 10, 40])
    assert c.bytespp == 4


def test_color_value_round_trip():
    c = TGAColor.rgba(1, 2, 3, 4)
    assert TGAColor.from_value(c.val, 4) == c


def test_default_color_is_blank():
    assert TGAColor().val == TGAColor.from_value(0, 1).val


def test_set_then_get():
    image = TGAImage(3, 3, Format.RGB)
    color = TGAColor.rgba(200, 100, 50, 255)
    assert image.set(1, 2, color) is True
    got = image.get(1, 2)
    assert (got.r, got.g, got.b) == (200, 100, 50)
    assert got.bytespp == 3


def test_out_of_bounds_access():
    image = TGAImage(2, 2, Format.RGB)
    assert image.set(2, 0, TGAColor.rgba(1, 1, 1, 1)) is False
    assert image.set(-1, 0, TGAColor.rgba(1, 1, 1, 1)) is False
    assert image.get(5, 5) == TGAColor()
    assert image.buffer() == bytearray(12)


def test_grayscale_set_uses_first_byte():
    image = TGAImage(2, 1, Format.GRAYSCALE)
    image.set(0, 0, TGAColor.from_value(77, 1))
    assert image.get(0, 0).val == 77


@pytest.mark.parametrize("bpp, rle, code", [
    (Format.RGB, False, 2),
    (Format.RGB, True, 10),
    (Format.GRAYSCALE, False, 3),
    (Format.GRAYSCALE, True, 11),
])
def test_header_datatype_codes(bpp, rle, code):
    data = TGAImage(2, 2, bpp).to_bytes(rle)
    assert data[2] == code
    assert data[16] == bpp * 8
    assert data[17] == 0x20
    assert struct.unpack_from("<hh", data, 12) == (2, 2)


def test_footer_and_area_refs():
    data = TGAImage(2, 2, Format.RGB).to_bytes(False)
    assert data.endswith(bytes(8) + FOOTER)
    assert len(data) == 18 + 2 * 2 * 3 + 8 + len(FOOTER)


@pytest.mark.parametrize("rle", [False, True])
@pytest.mark.parametrize("bpp", [Format.GRAYSCALE, Format.RGB, Format.RGBA])
def test_round_trip(rle, bpp):
    image = _noisy_image(bpp=bpp, seed=int(bpp))
    decoded = TGAImage.from_bytes(image.to_bytes(rle))
    assert (decoded.width, decoded.height, decoded.bytespp) == (image.width, image.height, image.bytespp)
    assert decoded.buffer() == image.buffer()


def test_rle_round_trip_long_runs():
    image = TGAImage(300, 2, Format.RGB)
    for x in range(150, 300):
        image.set(x, 1, TGAColor.rgba(9, 8, 7, 255))
    decoded = TGAImage.from_bytes(image.to_bytes(True))
    assert decoded.buffer() == image.buffer()


def test_rle_compresses_uniform_image():
    image = TGAImage(16, 16, Format.RGB)
    assert len(image.to_bytes(True)) < len(image.to_bytes(False))


def test_rle_run_packet_for_equal_pixels():
    image = TGAImage(2, 1, Format.RGB)
    color = TGAColor.rgba(5, 6, 7, 255)
    image.set(0, 0, color)
    image.set(1, 0, color)
    payload = image.to_bytes(True)[18:-26]
    assert payload == bytes([129]) + color.raw[:3]


def test_bottom_origin_is_flipped_on_read():
    image = _noisy_image()
    data = bytearray(image.to_bytes(False))
    data[17] = 0
    decoded = TGAImage.from_bytes(bytes(data))
    expected = image.copy()
    expected.flip_vertically()
    assert decoded.buffer() == expected.buffer()


def test_right_to_left_is_flipped_on_read():
    image = _noisy_image()
    data = bytearray(image.to_bytes(True))
    data[17] = 0x30
    decoded = TGAImage.from_bytes(bytes(data))
    expected = image.copy()
    expected.flip_horizontally()
    assert decoded.buffer() == expected.buffer()


def test_write_and_read_file(tmp_path):
    image = _noisy_image(bpp=Format.RGBA)
    path = tmp_path / "out.tga"
    image.write(path)
    assert TGAImage.read(path).buffer() == image.buffer()


def test_read_missing_file(tmp_path):
    with pytest.raises(OSError):
        TGAImage.read(tmp_path / "missing.tga")


def test_truncated_header():
    with pytest.raises(TGAError):
        TGAImage.from_bytes(b"\x00" * 10)


def test_bad_bits_per_pixel():
    with pytest.raises(TGAError):
        TGAImage.from_bytes(_header(2, 1, 1, 16) + bytes(2))


def test_bad_width():
    with pytest.raises(TGAError):
        TGAImage.from_bytes(_header(2, 0, 1, 24))


def test_unknown_datatype_code():
    with pytest.raises(TGAError):
        TGAImage.from_bytes(_header(1, 1, 1, 24) + bytes(3))


def test_truncated_raw_data():
    with pytest.raises(TGAError):
        TGAImage.from_bytes(_header(2, 2, 2, 24) + bytes(5))


def test_truncated_rle_data():
    with pytest.raises(TGAError):
        TGAImage.from_bytes(_header(10, 2, 2, 24) + bytes([0x80, 1, 2, 3]))


def test_rle_too_many_pixels():
    with pytest.raises(TGAError):
        TGAImage.from_bytes(_header(10, 1, 1, 24) + bytes([0x81, 1, 2, 3]))


def test_flip_vertically_moves_pixel_and_is_involution():
    image = TGAImage(3, 4, Format.RGB)
    color = TGAColor.rgba(1, 2, 3, 255)
    image.set(0, 0, color)
    original = bytes(image.buffer())
    image.flip_vertically()
    assert image.get(0, 3).raw[:3] == color.raw[:3]
    assert image.get(0, 0) == TGAColor.from_bytes(bytes(3), 3)
    image.flip_vertically()
    assert bytes(image.buffer()) == original


def test_flip_horizontally_moves_pixel_and_is_involution():
    image = TGAImage(4, 2, Format.RGBA)
    color = TGAColor.rgba(9, 9, 9, 9)
    image.set(0, 1, color)
    original = bytes(image.buffer())
    image.flip_horizontally()
    assert image.get(3, 1) == color
    image.flip_horizontally()
    assert bytes(image.buffer()) == original


def test_copy_is_independent():
    image = TGAImage(2, 2, Format.RGB)
    clone = image.copy()
    clone.set(0, 0, TGAColor.rgba(255, 255, 255, 255))
    assert image.buffer() == bytearray(12)
    assert clone.buffer() != image.buffer()


def test_clear_zeroes_pixels():
    image = _noisy_image()
    image.clear()
    assert image.buffer() == bytearray(image.width * image.height * image.bytespp)


def test_buffer_is_shared():
    image = TGAImage(1, 1, Format.GRAYSCALE)
    image.buffer()[0] = 42
    assert image.get(0, 0).val == 42


def test_scale_same_size_is_identity():
    image = _noisy_image()
    original = bytes(image.buffer())
    image.scale(image.width, image.height)
    assert bytes(image.buffer()) == original


def test_scale_down_uniform_image():
    image = TGAImage(4, 4, Format.RGB)
    color = TGAColor.rgba(12, 34, 56, 255)
    for y in range(4):
        for x in range(4):
            image.set(x, y, color)
    image.scale(2, 2)
    assert (image.width, image.height) == (2, 2)
    assert image.buffer() == bytearray(color.raw[:3] * 4)


def test_scale_up_rows_are_duplicated():
    image = TGAImage(2, 1, Format.GRAYSCALE)
    image.set(0, 0, TGAColor.from_value(5, 1))
    image.set(1, 0, TGAColor.from_value(6, 1))
    image.scale(2, 3)
    assert image.height == 3
    rows = [bytes(image.buffer()[i * 2:(i + 1) * 2]) for i in range(3)]
    assert rows[0] == rows[1] == rows[2] == bytes([5, 6])


def test_scale_invalid_size():
    with pytest.raises(ValueError):
        TGAImage(2, 2, Format.RGB).scale(0, 2)


def test_scale_empty_image():
    with pytest.raises(TGAError):
        TGAImage().scale(2, 2)


def test_negative_dimensions_rejected():
    with pytest.raises(ValueError):
        TGAImage(-1, 2, Format.RGB)