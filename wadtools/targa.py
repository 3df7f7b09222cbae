"""Reading and writing Truevision Targa images."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import BinaryIO

COLOR_MAP_ABSENT = 0
COLOR_MAP_PRESENT = 1

ATTRIB_BITS = 0x0F
R_TO_L_BIT = 0x10
T_TO_B_BIT = 0x20
UNUSED_BITS = 0xC0

SANE_DEPTHS = frozenset({8, 16, 24, 32})
UNMAP_DEPTHS = frozenset({16, 24, 32})

FOOTER = b"\0\0\0\0" + b"\0\0\0\0" + b"TRUEVISION-XFILE." + b"\0"

_HEADER = struct.Struct("<BBBHHBHHHHBB")
_RLE_BIT = 0x80
_MAX_PACKET = 128


class ErrorCode(IntEnum):
    NOERR = 0
    FOPEN = 1
    EOF = 2
    WRITE = 3
    CMAP_TYPE = 4
    IMG_TYPE = 5
    NO_IMG = 6
    CMAP_MISSING = 7
    CMAP_PRESENT = 8
    CMAP_LENGTH = 9
    CMAP_DEPTH = 10
    ZERO_SIZE = 11
    PIXEL_DEPTH = 12
    NO_MEM = 13
    NOT_CMAP = 14
    RLE = 15
    INDEX_RANGE = 16
    MONO = 17


_MESSAGES = {
    ErrorCode.NOERR: "no error",
    ErrorCode.FOPEN: "error opening file",
    ErrorCode.EOF: "premature end of file",
    ErrorCode.WRITE: "error writing to file",
    ErrorCode.CMAP_TYPE: "invalid color map type",
    ErrorCode.IMG_TYPE: "invalid image type",
    ErrorCode.NO_IMG: "no image data included",
    ErrorCode.CMAP_MISSING: "color-mapped image without color map",
    ErrorCode.CMAP_PRESENT: "non-color-mapped image with extraneous color map",
    ErrorCode.CMAP_LENGTH: "color map has zero length",
    ErrorCode.CMAP_DEPTH: "invalid color map depth",
    ErrorCode.ZERO_SIZE: "the image dimensions are zero",
    ErrorCode.PIXEL_DEPTH: "invalid pixel depth",
    ErrorCode.NO_MEM: "out of memory",
    ErrorCode.NOT_CMAP: "image is not color mapped",
    ErrorCode.RLE: "RLE data is corrupt",
    ErrorCode.INDEX_RANGE: "color map index out of range",
    ErrorCode.MONO: "image is mono",
}


def error_message(code: int) -> str:
    """Return the description of an error code."""
    try:
        return _MESSAGES[ErrorCode(code)]
    except ValueError:
        return "unknown error code"


class TgaError(Exception):
    """A Targa image could not be read, written or transformed."""

    def __init__(self, code: int) -> None:
        self.code = ErrorCode(code)
        super().__init__(error_message(self.code))


class ImageType(IntEnum):
    NONE = 0
    COLORMAP = 1
    BGR = 2
    MONO = 3
    COLORMAP_RLE = 9
    BGR_RLE = 10
    MONO_RLE = 11


_VALID_TYPES = frozenset(t.value for t in ImageType if t is not ImageType.NONE)
_COLORMAPPED = frozenset({ImageType.COLORMAP, ImageType.COLORMAP_RLE})
_RLE_TYPES = frozenset({ImageType.COLORMAP_RLE, ImageType.BGR_RLE, ImageType.MONO_RLE})
_MONO_TYPES = frozenset({ImageType.MONO, ImageType.MONO_RLE})


@dataclass
class TgaImage:
    """A Targa image: header fields plus image id, color map and pixel data."""

    width: int
    height: int
    pixel_depth: int
    image_type: int = ImageType.NONE
    image_data: bytearray = field(default_factory=bytearray)
    color_map_type: int = COLOR_MAP_ABSENT
    color_map_origin: int = 0
    color_map_length: int = 0
    color_map_depth: int = 0
    origin_x: int = 0
    origin_y: int = 0
    image_descriptor: int = 0
    image_id: bytes = b""
    color_map_data: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        self.image_data = bytearray(self.image_data)
        self.image_id = bytes(self.image_id)
        self.color_map_data = bytearray(self.color_map_data)

    @property
    def image_id_length(self) -> int:
        return len(self.image_id)

    @property
    def bytes_per_pixel(self) -> int:
        return self.pixel_depth // 8

    def attribute_bits(self) -> int:
        return self.image_descriptor & ATTRIB_BITS

    def is_right_to_left(self) -> bool:
        return bool(self.image_descriptor & R_TO_L_BIT)

    def is_top_to_bottom(self) -> bool:
        return bool(self.image_descriptor & T_TO_B_BIT)

    def is_colormapped(self) -> bool:
        return self.image_type in _COLORMAPPED

    def is_rle(self) -> bool:
        return self.image_type in _RLE_TYPES

    def is_mono(self) -> bool:
        return self.image_type in _MONO_TYPES


# Reading ------------------------------------------------------------------


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if data is None or len(data) != size:
        raise TgaError(ErrorCode.EOF)
    return data


def read(path) -> TgaImage:
    """Read a Targa image from the file at *path*."""
    try:
        stream = open(path, "rb")
    except OSError as exc:
        raise TgaError(ErrorCode.FOPEN) from exc
    with stream:
        return read_from(stream)


def read_from(stream: BinaryIO) -> TgaImage:
    """Read a Targa image from a binary stream."""
    id_length, cmap_type = _read_exact(stream, 2)
    if cmap_type not in (COLOR_MAP_ABSENT, COLOR_MAP_PRESENT):
        raise TgaError(ErrorCode.CMAP_TYPE)

    (image_type,) = _read_exact(stream, 1)
    if image_type == ImageType.NONE:
        raise TgaError(ErrorCode.NO_IMG)
    if image_type not in _VALID_TYPES:
        raise TgaError(ErrorCode.IMG_TYPE)
    image_type = ImageType(image_type)

    colormapped = image_type in _COLORMAPPED
    if colormapped and cmap_type == COLOR_MAP_ABSENT:
        raise TgaError(ErrorCode.CMAP_MISSING)
    if not colormapped and cmap_type == COLOR_MAP_PRESENT:
        raise TgaError(ErrorCode.CMAP_PRESENT)

    cmap_origin, cmap_length, cmap_depth = struct.unpack("<HHB", _read_exact(stream, 5))
    if cmap_type == COLOR_MAP_PRESENT:
        if cmap_length == 0:
            raise TgaError(ErrorCode.CMAP_LENGTH)
        if cmap_depth not in UNMAP_DEPTHS:
            raise TgaError(ErrorCode.CMAP_DEPTH)

    origin_x, origin_y, width, height = struct.unpack("<HHHH", _read_exact(stream, 8))
    if width == 0 or height == 0:
        raise TgaError(ErrorCode.ZERO_SIZE)

    (pixel_depth,) = _read_exact(stream, 1)
    if pixel_depth not in SANE_DEPTHS or (pixel_depth != 8 and colormapped):
        raise TgaError(ErrorCode.PIXEL_DEPTH)

    (descriptor,) = _read_exact(stream, 1)

    image_id = _read_exact(stream, id_length) if id_length > 0 else b""

    color_map = bytearray()
    if cmap_type == COLOR_MAP_PRESENT:
        entry = cmap_depth // 8
        color_map = bytearray(cmap_origin * entry)
        color_map += _read_exact(stream, cmap_length * entry)

    bpp = pixel_depth // 8
    if image_type in _RLE_TYPES:
        pixels = _read_rle(stream, width * height, bpp)
    else:
        pixels = bytearray(_read_exact(stream, width * height * bpp))

    return TgaImage(
        width=width,
        height=height,
        pixel_depth=pixel_depth,
        image_type=image_type,
        image_data=pixels,
        color_map_type=cmap_type,
        color_map_origin=cmap_origin,
        color_map_length=cmap_length,
        color_map_depth=cmap_depth,
        origin_x=origin_x,
        origin_y=origin_y,
        image_descriptor=descriptor,
        image_id=image_id,
        color_map_data=color_map,
    )


def _read_rle(stream: BinaryIO, expected: int, bpp: int) -> bytearray:
    out = bytearray()
    loaded = 0
    while loaded < expected:
        (packet,) = _read_exact(stream, 1)
        count = (packet & ~_RLE_BIT & 0xFF) + 1
        if packet & _RLE_BIT:
            pixel = _read_exact(stream, bpp)
            if loaded + count > expected:
                raise TgaError(ErrorCode.RLE)
            out += pixel * count
        else:
            if loaded + count > expected:
                raise TgaError(ErrorCode.RLE)
            out += _read_exact(stream, bpp * count)
        loaded += count
    return out


# Writing ------------------------------------------------------------------


def _validate(image: TgaImage) -> None:
    if image.color_map_type not in (COLOR_MAP_ABSENT, COLOR_MAP_PRESENT):
        raise TgaError(ErrorCode.CMAP_TYPE)
    if image.image_type == ImageType.NONE:
        raise TgaError(ErrorCode.NO_IMG)
    if image.image_type not in _VALID_TYPES:
        raise TgaError(ErrorCode.IMG_TYPE)
    if image.is_colormapped() and image.color_map_type == COLOR_MAP_ABSENT:
        raise TgaError(ErrorCode.CMAP_MISSING)
    if not image.is_colormapped() and image.color_map_type == COLOR_MAP_PRESENT:
        raise TgaError(ErrorCode.CMAP_PRESENT)
    if image.color_map_type == COLOR_MAP_PRESENT:
        if image.color_map_length == 0:
            raise TgaError(ErrorCode.CMAP_LENGTH)
        if image.color_map_depth not in UNMAP_DEPTHS:
            raise TgaError(ErrorCode.CMAP_DEPTH)
    if image.width == 0 or image.height == 0:
        raise TgaError(ErrorCode.ZERO_SIZE)
    if image.pixel_depth not in SANE_DEPTHS or (
        image.pixel_depth != 8 and image.is_colormapped()
    ):
        raise TgaError(ErrorCode.PIXEL_DEPTH)


def _same(row: bytes, a: int, b: int, bpp: int) -> bool:
    return row[a * bpp:(a + 1) * bpp] == row[b * bpp:(b + 1) * bpp]


def _packet_is_rle(row: bytes, pos: int, width: int, bpp: int) -> bool:
    if pos == width - 1:
        return False
    if _same(row, pos, pos + 1, bpp):
        if bpp > 1:
            return True
        # Three repeats make a run worth it for one-byte pixels.
        if pos < width - 2 and _same(row, pos + 1, pos + 2, bpp):
            return True
    return False


def _packet_len(row: bytes, pos: int, width: int, bpp: int, rle: bool) -> int:
    if pos == width - 1:
        return 1
    if pos == width - 2:
        return 2
    length = 2
    while pos + length < width:
        if rle:
            extends = _same(row, pos, pos + length, bpp)
        else:
            extends = not _packet_is_rle(row, pos + length, width, bpp)
        if not extends:
            return length
        length += 1
        if length == _MAX_PACKET:
            return _MAX_PACKET
    return length


def _encode_row_rle(row: bytes, width: int, bpp: int) -> bytes:
    out = bytearray()
    pos = 0
    while pos < width:
        rle = _packet_is_rle(row, pos, width, bpp)
        length = _packet_len(row, pos, width, bpp, rle)
        out.append((length - 1) | (_RLE_BIT if rle else 0))
        start = pos * bpp
        out += row[start:start + (bpp if rle else bpp * length)]
        pos += length
    return bytes(out)


def _encode(image: TgaImage) -> bytes:
    _validate(image)
    out = bytearray(
        _HEADER.pack(
            image.image_id_length,
            image.color_map_type,
            image.image_type,
            image.color_map_origin,
            image.color_map_length,
            image.color_map_depth,
            image.origin_x,
            image.origin_y,
            image.width,
            image.height,
            image.pixel_depth,
            image.image_descriptor,
        )
    )
    out += image.image_id

    if image.color_map_type == COLOR_MAP_PRESENT:
        entry = image.color_map_depth // 8
        start = image.color_map_origin * entry
        size = image.color_map_length * entry
        cmap = image.color_map_data[start:start + size]
        if len(cmap) != size:
            raise ValueError("color map data is shorter than the header declares")
        out += cmap

    bpp = image.bytes_per_pixel
    row_size = image.width * bpp
    size = row_size * image.height
    pixels = bytes(image.image_data[:size])
    if len(pixels) != size:
        raise ValueError("image data is shorter than the image dimensions require")

    if image.is_rle():
        for offset in range(0, size, row_size):
            out += _encode_row_rle(pixels[offset:offset + row_size], image.width, bpp)
    else:
        out += pixels

    out += FOOTER
    return bytes(out)


def write(path, image: TgaImage) -> None:
    """Write *image* to the file at *path*."""
    encoded = _encode(image)
    try:
        stream = open(path, "wb")
    except OSError as exc:
        raise TgaError(ErrorCode.FOPEN) from exc
    with stream:
        _write_bytes(stream, encoded)


def write_to(stream: BinaryIO, image: TgaImage) -> None:
    """Write *image* to a binary stream."""
    _write_bytes(stream, _encode(image))


def _write_bytes(stream: BinaryIO, data: bytes) -> None:
    try:
        stream.write(data)
    except OSError as exc:
        raise TgaError(ErrorCode.WRITE) from exc


def _simple_image(data, width: int, height: int, depth: int, image_type: ImageType) -> TgaImage:
    return TgaImage(
        width=width,
        height=height,
        pixel_depth=depth,
        image_type=image_type,
        image_data=bytearray(data),
        image_descriptor=T_TO_B_BIT,
    )


def write_mono(path, data, width: int, height: int) -> None:
    """Write 8-bit greyscale pixels as an uncompressed image."""
    write(path, _simple_image(data, width, height, 8, ImageType.MONO))


def write_mono_rle(path, data, width: int, height: int) -> None:
    """Write 8-bit greyscale pixels as a run-length encoded image."""
    write(path, _simple_image(data, width, height, 8, ImageType.MONO_RLE))


def write_bgr(path, data, width: int, height: int, depth: int) -> None:
    """Write BGR(A) pixels as an uncompressed true-color image."""
    write(path, _simple_image(data, width, height, depth, ImageType.BGR))


def write_bgr_rle(path, data, width: int, height: int, depth: int) -> None:
    """Write BGR(A) pixels as a run-length encoded true-color image."""
    write(path, _simple_image(data, width, height, depth, ImageType.BGR_RLE))


# Pixels -------------------------------------------------------------------


def unpack_pixel(data, bits: int) -> tuple[int, int, int, int]:
    """Decode one pixel of the given depth into (b, g, r, a)."""
    if bits == 32:
        return data[0], data[1], data[2], data[3]
    if bits == 24:
        return data[0], data[1], data[2], 0
    if bits == 16:
        value = data[0] | (data[1] << 8)
        return (
            (value & 0x1F) << 3,
            ((value >> 5) & 0x1F) << 3,
            ((value >> 10) & 0x1F) << 3,
            255 if value & 0x8000 else 0,
        )
    if bits == 8:
        return data[0], data[0], data[0], 0
    raise TgaError(ErrorCode.PIXEL_DEPTH)


def pack_pixel(bits: int, b: int, g: int, r: int, a: int) -> bytes:
    """Encode (b, g, r, a) as one pixel of the given depth (32, 24 or 16)."""
    if bits == 32:
        return bytes((b, g, r, a))
    if bits == 24:
        return bytes((b, g, r))
    if bits == 16:
        value = (b >> 3) & 0x1F
        value |= ((g >> 3) & 0x1F) << 5
        value |= ((r >> 3) & 0x1F) << 10
        if a > 127:
            value |= 0x8000
        return bytes((value & 0xFF, (value >> 8) & 0xFF))
    raise TgaError(ErrorCode.PIXEL_DEPTH)


def swap_red_blue(image: TgaImage) -> None:
    """Swap red and blue in place for every pixel except the last one."""
    depth = image.pixel_depth
    if depth not in UNMAP_DEPTHS:
        raise TgaError(ErrorCode.PIXEL_DEPTH)
    bpp = depth // 8
    end = (image.width * image.height - 1) * bpp
    for pos in range(0, end, bpp):
        b, g, r, a = unpack_pixel(image.image_data[pos:pos + bpp], depth)
        image.image_data[pos:pos + bpp] = pack_pixel(depth, r, g, b, a)