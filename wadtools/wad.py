"""WAD archives: the lump directory and a breakdown of space by lump kind."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

_HEADER = struct.Struct("<4sii")
_ENTRY = struct.Struct("<ii8s")

_OTHER_NAMES = frozenset({"PLAYPAL", "COLORMAP", "ENDOOM", "TEXTURE1", "TEXTURE2", "PNAMES"})
_MUSIC_NAMES = frozenset({"GENMIDI", "DMXGUS"})


@dataclass(frozen=True)
class Lump:
    """One named entry of a WAD archive and its payload."""

    name: str
    offset: int
    size: int
    payload: bytes = field(repr=False)


class Category(IntEnum):
    MAP = 0
    GFX = 1
    SOUND = 2
    MUSIC = 3
    OTHERS = 4


def _is_map_marker(name: str) -> bool:
    return (len(name) >= 3 and name[0] == "E" and name[2] == "M") or name.startswith("MAP")


def _category_of(name: str) -> Category:
    if name.startswith(("DS", "DP")):
        return Category.SOUND
    if name.startswith("D_"):
        return Category.MUSIC
    if name in _OTHER_NAMES:
        return Category.OTHERS
    if name in _MUSIC_NAMES:
        return Category.MUSIC
    if name.startswith("DEMO"):
        return Category.OTHERS
    return Category.GFX


def _categorize(lumps):
    in_map = False
    for lump in lumps:
        if in_map:
            # BLOCKMAP is the last lump of a map.
            if lump.name == "BLOCKMAP":
                in_map = False
            yield Category.MAP
        elif _is_map_marker(lump.name):
            in_map = True
            yield Category.MAP
        else:
            yield _category_of(lump.name)


def categorize_lumps(lumps) -> list[Category]:
    """Return the category of each lump, in order."""
    return list(_categorize(lumps))


@dataclass
class WadArchive:
    """A parsed WAD archive."""

    magic: str
    lumps: list[Lump]
    size: int

    def categories(self) -> dict[Category, int]:
        """Return the total payload size of each category."""
        sizes = {category: 0 for category in Category}
        for lump, category in zip(self.lumps, _categorize(self.lumps)):
            sizes[category] += lump.size
        return sizes

    def category_report(self) -> list[str]:
        """Return one line per category: index, size and share of the file."""
        return [
            f"{category.value}:{total}({total / self.size * 100:g}%)"
            for category, total in self.categories().items()
        ]


def _decode_name(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


def parse_wad(data) -> WadArchive:
    """Parse a WAD archive held in memory."""
    raw = bytes(data)
    if len(raw) < _HEADER.size:
        raise ValueError("WAD header is truncated")
    magic, count, directory = _HEADER.unpack_from(raw)
    end = directory + count * _ENTRY.size
    if count < 0 or directory < 0 or end > len(raw):
        raise ValueError("lump directory lies outside the file")

    lumps = []
    for offset, size, name in _ENTRY.iter_unpack(raw[directory:end]):
        decoded = _decode_name(name)
        if offset < 0 or size < 0 or offset + size > len(raw):
            raise ValueError(f"lump {decoded} lies outside the file")
        lumps.append(Lump(decoded, offset, size, raw[offset:offset + size]))
    return WadArchive(magic.decode("latin-1"), lumps, len(raw))


def open_wad(path) -> WadArchive:
    """Read and parse the WAD archive at *path*."""
    return parse_wad(Path(path).read_bytes())