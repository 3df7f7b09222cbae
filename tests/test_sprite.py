import struct

import pytest

from wadtools import targa
from wadtools.palette import PLAYPAL_SIZE, parse_palette
from wadtools.sprite import BORDER, load_sprite, parse_sprite


def sprite_bytes():
    header = struct.pack("<HHHH", 2, 3, 5, 7)
    col0 = bytes([0, 2, 10, 11, 12, 13, 255])
    col1 = bytes([1, 1, 20, 21, 22, 255])
    offsets = struct.pack("<II", 16, 16 + len(col0))
    return header + offsets + col0 + col1


def make_palette():
    first = b"".join(bytes((i, (i + 1) % 256, (i + 2) % 256)) for i in range(256))
    return parse_palette(first + bytes(PLAYPAL_SIZE - len(first)))


IDENTITY = bytes(range(256))


def pixel(out, sprite, x, y):
    stride = sprite.width + BORDER * 2
    start = ((y + 1) * stride + x + BORDER) * 4
    return out[start:start + 4]


def test_header_fields():
    sprite = parse_sprite(sprite_bytes())
    assert (sprite.width, sprite.height, sprite.xoffset, sprite.yoffset) == (2, 3, 5, 7)


def test_posts_fill_columns():
    sprite = parse_sprite(sprite_bytes())
    assert bytes(sprite.data) == bytes([10, 0, 11, 20, 0, 0])
    assert bytes(sprite.mask) == bytes([1, 0, 1, 1, 0, 0])


def test_render_size_and_border():
    sprite = parse_sprite(sprite_bytes())
    out = sprite.render(make_palette(), IDENTITY)
    stride = sprite.width + BORDER * 2
    assert len(out) == stride * (sprite.height + BORDER * 2) * 4
    assert out[:stride * 4] == bytes(stride * 4)


def test_render_opaque_pixel_is_bgra():
    palette = make_palette()
    sprite = parse_sprite(sprite_bytes())
    out = sprite.render(palette, IDENTITY)
    c = palette.color(10)
    assert pixel(out, sprite, 0, 0) == bytes((c.b, c.g, c.r, 255))


def test_render_masked_pixel_is_transparent():
    sprite = parse_sprite(sprite_bytes())
    out = sprite.render(make_palette(), IDENTITY)
    assert pixel(out, sprite, 1, 0)[3] == 0


def test_render_applies_lightmap():
    palette = make_palette()
    sprite = parse_sprite(sprite_bytes())
    out = sprite.render(palette, bytes([3]) * 256)
    c = palette.color(3)
    assert pixel(out, sprite, 1, 1) == bytes((c.b, c.g, c.r, 255))


def test_write_round_trip(tmp_path):
    palette = make_palette()
    sprite = parse_sprite(sprite_bytes())
    path = tmp_path / "shade.tga"
    sprite.write(path, palette, IDENTITY)
    image = targa.read(path)
    assert image.width == sprite.width + BORDER * 2
    assert image.height == sprite.height + BORDER * 2
    assert image.pixel_depth == 32
    assert bytes(image.image_data) == sprite.render(palette, IDENTITY)


def test_load_from_file(tmp_path):
    path = tmp_path / "sprite.lmp"
    path.write_bytes(sprite_bytes())
    assert load_sprite(path) == parse_sprite(sprite_bytes())


def test_truncated_header_raises():
    with pytest.raises(ValueError):
        parse_sprite(b"\x01\x00")


def test_post_past_bottom_raises():
    header = struct.pack("<HHHH", 1, 1, 0, 0)
    column = bytes([0, 2, 1, 2, 3, 4, 255])
    data = header + struct.pack("<I", 12) + column
    with pytest.raises(ValueError):
        parse_sprite(data)