"""The light maps of a COLORMAP lump: 34 tables remapping palette indices."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

LIGHTMAP_COUNT = 34
LIGHTMAP_SIZE = 256
COLORMAP_SIZE = LIGHTMAP_COUNT * LIGHTMAP_SIZE


@dataclass(frozen=True)
class Colormap:
    """A set of light maps, each 256 bytes mapping a palette index to another."""

    lightmaps: tuple[bytes, ...]

    def lightmap(self, index: int) -> bytes:
        """Return light map *index*."""
        return self.lightmaps[index]


def parse_colormap(data) -> Colormap:
    """Build a colormap from the raw bytes of a COLORMAP lump."""
    raw = bytes(data)
    if len(raw) != COLORMAP_SIZE:
        raise ValueError(f"colormap size is {len(raw)}, expected {COLORMAP_SIZE}")
    return Colormap(
        tuple(raw[start:start + LIGHTMAP_SIZE] for start in range(0, len(raw), LIGHTMAP_SIZE))
    )


def load_colormap(path) -> Colormap:
    """Read a COLORMAP lump from the file at *path*."""
    return parse_colormap(Path(path).read_bytes())