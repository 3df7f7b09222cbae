"""In-place manipulation of Targa images and RGB convenience writers."""

from __future__ import annotations

from contextlib import suppress

from .targa import (
    COLOR_MAP_ABSENT,
    R_TO_L_BIT,
    SANE_DEPTHS,
    T_TO_B_BIT,
    UNMAP_DEPTHS,
    ErrorCode,
    ImageType,
    TgaError,
    TgaImage,
    pack_pixel,
    swap_red_blue,
    unpack_pixel,
    write,
)


def _pixels(image: TgaImage) -> list[bytes]:
    bpp = image.pixel_depth // 8
    size = image.width * image.height * bpp
    data = image.image_data
    return [bytes(data[pos:pos + bpp]) for pos in range(0, size, bpp)]


def _rgb_image(data, width: int, height: int, depth: int, image_type: ImageType) -> TgaImage:
    image = TgaImage(
        width=width,
        height=height,
        pixel_depth=depth,
        image_type=image_type,
        image_data=bytearray(data),
        image_descriptor=T_TO_B_BIT,
    )
    # An unsupported depth leaves the pixels untouched; writing still proceeds.
    with suppress(TgaError):
        swap_red_blue(image)
    return image


def write_rgb(path, data, width: int, height: int, depth: int) -> None:
    """Write RGB(A) pixels as an uncompressed true-color image.

    The pixels are converted to BGR order on a copy; *data* is not changed.
    """
    write(path, _rgb_image(data, width, height, depth, ImageType.BGR))


def write_rgb_rle(path, data, width: int, height: int, depth: int) -> None:
    """Write RGB(A) pixels as a run-length encoded true-color image."""
    write(path, _rgb_image(data, width, height, depth, ImageType.BGR_RLE))


def flip_horiz(image: TgaImage) -> None:
    """Mirror the image left to right and toggle its right-to-left bit."""
    if image.pixel_depth not in SANE_DEPTHS:
        raise TgaError(ErrorCode.PIXEL_DEPTH)
    bpp = image.pixel_depth // 8
    row_size = image.width * bpp
    data = image.image_data
    for start in range(0, row_size * image.height, row_size):
        row = data[start:start + row_size]
        pixels = [row[pos:pos + bpp] for pos in range(0, row_size, bpp)]
        data[start:start + row_size] = b"".join(reversed(pixels))
    image.image_descriptor ^= R_TO_L_BIT


def flip_vert(image: TgaImage) -> None:
    """Mirror the image top to bottom and toggle its top-to-bottom bit."""
    if image.pixel_depth not in SANE_DEPTHS:
        raise TgaError(ErrorCode.PIXEL_DEPTH)
    row_size = image.width * (image.pixel_depth // 8)
    size = row_size * image.height
    data = image.image_data
    rows = [bytes(data[start:start + row_size]) for start in range(0, size, row_size)]
    data[:size] = b"".join(reversed(rows))
    image.image_descriptor ^= T_TO_B_BIT


def color_unmap(image: TgaImage) -> None:
    """Replace color-map indices with the colors they refer to."""
    if not image.is_colormapped():
        raise TgaError(ErrorCode.NOT_CMAP)
    if image.pixel_depth != 8:
        raise TgaError(ErrorCode.PIXEL_DEPTH)
    if image.color_map_depth not in SANE_DEPTHS:
        raise TgaError(ErrorCode.CMAP_DEPTH)

    entry = image.color_map_depth // 8
    limit = image.color_map_origin + image.color_map_length
    cmap = image.color_map_data
    out = bytearray()
    for index in image.image_data[:image.width * image.height]:
        if index >= limit:
            raise TgaError(ErrorCode.INDEX_RANGE)
        out += cmap[index * entry:(index + 1) * entry]

    image.image_data = out
    image.image_type = ImageType.BGR
    image.pixel_depth = image.color_map_depth
    image.color_map_data = bytearray()
    image.color_map_type = COLOR_MAP_ABSENT
    image.color_map_origin = 0
    image.color_map_length = 0
    image.color_map_depth = 0


def find_pixel(image: TgaImage, x: int, y: int) -> int | None:
    """Return the byte offset of pixel (x, y), honouring the image orientation.

    Coordinates count from the top-left corner. Returns None when the pixel
    lies outside the image.
    """
    if not (0 <= x < image.width and 0 <= y < image.height):
        return None
    if not image.is_top_to_bottom():
        y = image.height - 1 - y
    if image.is_right_to_left():
        x = image.width - 1 - x
    return (x + y * image.width) * image.pixel_depth // 8


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def desaturate(image: TgaImage, cr: int, cg: int, cb: int, dv: int) -> None:
    """Turn the image into 8-bit mono: (r*cr + g*cg + b*cb) / dv per pixel."""
    if image.is_mono():
        raise TgaError(ErrorCode.MONO)
    if image.is_colormapped():
        color_unmap(image)
    depth = image.pixel_depth
    if depth not in UNMAP_DEPTHS:
        raise TgaError(ErrorCode.PIXEL_DEPTH)

    grey = bytearray()
    for pixel in _pixels(image):
        b, g, r, _ = unpack_pixel(pixel, depth)
        grey.append(_trunc_div(b * cb + g * cg + r * cr, dv) & 0xFF)

    image.image_data = grey
    image.pixel_depth = 8
    image.image_type = ImageType.MONO


def desaturate_rec_601_1(image: TgaImage) -> None:
    """Desaturate with the Rec. 601-1 luma weights."""
    desaturate(image, 2989, 5866, 1145, 10000)


def desaturate_rec_709(image: TgaImage) -> None:
    """Desaturate with the Rec. 709 luma weights."""
    desaturate(image, 2126, 7152, 722, 10000)


def desaturate_itu(image: TgaImage) -> None:
    """Desaturate with the ITU luma weights."""
    desaturate(image, 2220, 7067, 713, 10000)


def desaturate_avg(image: TgaImage) -> None:
    """Desaturate by averaging the three channels."""
    desaturate(image, 1, 1, 1, 3)


def convert_depth(image: TgaImage, bits: int) -> None:
    """Convert the pixels to a depth of 32, 24 or 16 bits."""
    if bits not in UNMAP_DEPTHS or image.pixel_depth not in SANE_DEPTHS:
        raise TgaError(ErrorCode.PIXEL_DEPTH)
    if image.is_colormapped():
        color_unmap(image)
    depth = image.pixel_depth
    if depth == bits:
        return
    image.image_data = bytearray(
        b"".join(pack_pixel(bits, *unpack_pixel(pixel, depth)) for pixel in _pixels(image))
    )
    image.pixel_depth = bits