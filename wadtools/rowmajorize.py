"""Transpose the pixels of a 24-bit Targa image from column to row order."""

from __future__ import annotations

import struct
import sys
from collections.abc import Sequence

HEADER = struct.Struct("<BBBHHBHHHHBB")
PIXEL_SIZE = 3
DEFAULT_OUTPUT = "out.tga"


class RowMajorizeError(Exception):
    """The input image could not be read or the output could not be written."""


def transpose_pixels(pixels: Sequence, width: int, height: int) -> list:
    """Return the pixels so that pixel (x, y) lands at index x * height + y."""
    rows = [pixels[y * width:(y + 1) * width] for y in range(height)]
    return [pixel for column in zip(*rows) for pixel in column]


def rowmajorize(data: bytes) -> bytes:
    """Transpose the pixel data of a 24-bit image, keeping its header as is."""
    if len(data) < HEADER.size:
        raise RowMajorizeError("Unable to read header.")
    header = bytes(data[:HEADER.size])
    fields = HEADER.unpack(header)
    width, height, bits = fields[8], fields[9], fields[10]
    if bits != 24:
        raise RowMajorizeError(f"Only 24-bit TGA are supported (got: {bits}).")

    size = width * height * PIXEL_SIZE
    body = bytes(data[HEADER.size:HEADER.size + size])
    if len(body) != size:
        raise RowMajorizeError("Pixel data is truncated.")
    pixels = [body[pos:pos + PIXEL_SIZE] for pos in range(0, size, PIXEL_SIZE)]
    return header + b"".join(transpose_pixels(pixels, width, height))


def rowmajorize_file(path, output=DEFAULT_OUTPUT) -> None:
    """Read the image at *path* and write its transposed form to *output*."""
    try:
        with open(path, "rb") as stream:
            data = stream.read()
    except OSError as exc:
        raise RowMajorizeError(f"Unable to open file {path}") from exc
    result = rowmajorize(data)
    try:
        with open(output, "wb") as stream:
            stream.write(result)
    except OSError as exc:
        raise RowMajorizeError("Unable to create output file.") from exc


def main(argv=None) -> int:
    """Transpose the image named on the command line into out.tga."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Missing input filename", file=sys.stderr)
        return 1
    try:
        rowmajorize_file(args[0])
    except RowMajorizeError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0