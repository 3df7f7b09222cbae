"""Column-based sprite pictures and their rendering to 32-bit Targa."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

from .palette import Palette
from .targa import write_bgr

BORDER = 2
END_OF_COLUMN = 255

_HEADER = struct.Struct("<HHHH")


@dataclass
class Sprite:
    """A sprite: palette indices plus a mask of which pixels are opaque."""

    width: int
    height: int
    xoffset: int
    yoffset: int
    data: bytearray
    mask: bytearray

    def render(self, palette: Palette, lightmap) -> bytes:
        """Return BGRA pixels, top row first, with a transparent border."""
        stride = self.width + BORDER * 2
        out = bytearray(stride * (self.height + BORDER * 2) * 4)
        for y in range(self.height):
            row_slice = slice(y * self.width, (y + 1) * self.width)
            row = bytearray()
            for value, opaque in zip(self.data[row_slice], self.mask[row_slice]):
                color = palette.color(lightmap[value])
                row += bytes((color.b, color.g, color.r, 255 if opaque == 1 else 0))
            start = ((y + 1) * stride + BORDER) * 4
            out[start:start + len(row)] = row
        return bytes(out)

    def write(self, path, palette: Palette, lightmap) -> None:
        """Write the rendered sprite as an uncompressed 32-bit Targa file."""
        write_bgr(
            path,
            self.render(palette, lightmap),
            self.width + BORDER * 2,
            self.height + BORDER * 2,
            32,
        )


def _posts(raw: bytes, offset: int):
    pos = offset
    while True:
        if pos >= len(raw):
            raise ValueError("sprite column is truncated")
        row_start = raw[pos]
        if row_start == END_OF_COLUMN:
            return
        if pos + 1 >= len(raw):
            raise ValueError("sprite column is truncated")
        count = raw[pos + 1]
        # Pixels are taken from the byte right after the count; the two
        # bytes after them are skipped.
        values = raw[pos + 2:pos + 2 + count]
        if len(values) != count:
            raise ValueError("sprite column is truncated")
        yield row_start, values
        pos += 2 + count + 2


def parse_sprite(data) -> Sprite:
    """Decode a sprite from its raw bytes."""
    raw = bytes(data)
    try:
        width, height, xoffset, yoffset = _HEADER.unpack_from(raw, 0)
        offsets = struct.unpack_from(f"<{width}I", raw, _HEADER.size)
    except struct.error as exc:
        raise ValueError("sprite header is truncated") from exc

    pixels = bytearray(width * height)
    mask = bytearray(width * height)
    for x, offset in enumerate(offsets):
        for row_start, values in _posts(raw, offset):
            for y, value in enumerate(values, start=row_start):
                if y >= height:
                    raise ValueError("sprite post runs past the bottom of the picture")
                pixels[x + y * width] = value
                mask[x + y * width] = 1
    return Sprite(width, height, xoffset, yoffset, pixels, mask)


def load_sprite(path) -> Sprite:
    """Read a sprite from the file at *path*."""
    return parse_sprite(Path(path).read_bytes())