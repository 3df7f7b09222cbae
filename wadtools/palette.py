"""The 14 game palettes of 256 colors each, as stored in a PLAYPAL lump."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

PALETTE_COUNT = 14
COLORS_PER_PALETTE = 256
PALETTE_SIZE = COLORS_PER_PALETTE * 3
PLAYPAL_SIZE = PALETTE_SIZE * PALETTE_COUNT


@dataclass(frozen=True)
class Color:
    """An RGBA color with 8-bit channels."""

    r: int
    g: int
    b: int
    a: int = 0


@dataclass(frozen=True)
class Palette:
    """A set of palettes, each a tuple of 256 colors."""

    palettes: tuple[tuple[Color, ...], ...]

    def color(self, index: int, palette_id: int = 0) -> Color:
        """Return color *index* of palette *palette_id*."""
        return self.palettes[palette_id][index]


def parse_palette(data) -> Palette:
    """Build a palette set from the raw bytes of a PLAYPAL lump."""
    raw = bytes(data)
    if len(raw) != PLAYPAL_SIZE:
        raise ValueError(f"palette size is {len(raw)}, expected {PLAYPAL_SIZE}")
    colors = [Color(*raw[pos:pos + 3]) for pos in range(0, len(raw), 3)]
    palettes = tuple(
        tuple(colors[start:start + COLORS_PER_PALETTE])
        for start in range(0, len(colors), COLORS_PER_PALETTE)
    )
    return Palette(palettes)


def load_palette(path) -> Palette:
    """Read a PLAYPAL lump from the file at *path*."""
    return parse_palette(Path(path).read_bytes())