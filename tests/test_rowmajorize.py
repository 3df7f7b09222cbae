import struct

import pytest

from wadtools.rowmajorize import (
    RowMajorizeError,
    main,
    rowmajorize,
    rowmajorize_file,
    transpose_pixels,
)


def make_tga(width, height, bits=24, pixels=None):
    header = struct.pack("<BBBHHBHHHHBB", 0, 0, 2, 0, 0, 0, 0, 0, width, height, bits, 0)
    if pixels is None:
        pixels = bytes(range(width * height * 3))
    return header + pixels


def test_transpose_pixels_small():
    assert transpose_pixels(list(range(6)), 3, 2) == [0, 3, 1, 4, 2, 5]


def test_transpose_twice_is_identity():
    pixels = list(range(12))
    once = transpose_pixels(pixels, 4, 3)
    assert transpose_pixels(once, 3, 4) == pixels


def test_rowmajorize_keeps_header_and_moves_pixels():
    data = make_tga(2, 3)
    result = rowmajorize(data)
    assert result[:18] == data[:18]
    body = data[18:]
    src = [body[i:i + 3] for i in range(0, len(body), 3)]
    dst = [result[18 + i:18 + i + 3] for i in range(0, len(body), 3)]
    for y in range(3):
        for x in range(2):
            assert dst[x * 3 + y] == src[y * 2 + x]


def test_rowmajorize_drops_trailing_bytes():
    data = make_tga(1, 1) + b"extra"
    assert rowmajorize(data) == make_tga(1, 1)


def test_rowmajorize_rejects_other_depths():
    with pytest.raises(RowMajorizeError, match="Only 24-bit"):
        rowmajorize(make_tga(1, 1, bits=32, pixels=b"\0" * 4))


def test_rowmajorize_short_header():
    with pytest.raises(RowMajorizeError, match="header"):
        rowmajorize(b"\0" * 10)


def test_rowmajorize_truncated_pixels():
    with pytest.raises(RowMajorizeError):
        rowmajorize(make_tga(2, 2, pixels=b"\0" * 5))


def test_rowmajorize_file(tmp_path):
    source = tmp_path / "in.tga"
    target = tmp_path / "result.tga"
    source.write_bytes(make_tga(3, 2))
    rowmajorize_file(source, target)
    assert target.read_bytes() == rowmajorize(make_tga(3, 2))


def test_rowmajorize_file_missing(tmp_path):
    with pytest.raises(RowMajorizeError, match="Unable to open file"):
        rowmajorize_file(tmp_path / "absent.tga", tmp_path / "out.tga")


def test_main_without_arguments():
    assert main([]) == 1


def test_main_writes_out_tga(tmp_path, monkeypatch):
    source = tmp_path / "in.tga"
    source.write_bytes(make_tga(2, 2))
    monkeypatch.chdir(tmp_path)
    assert main([str(source)]) == 0
    assert (tmp_path / "out.tga").read_bytes() == rowmajorize(make_tga(2, 2))


def test_main_bad_depth_fails(tmp_path):
    source = tmp_path / "in.tga"
    source.write_bytes(make_tga(1, 1, bits=16, pixels=b"\0\0"))
    assert main([str(source)]) == 1