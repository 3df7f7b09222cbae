"""Render every light level of a sprite to a series of Targa files."""

from __future__ import annotations

import sys
from pathlib import Path

from .colormap import Colormap, load_colormap
from .palette import Palette, load_palette
from .sprite import Sprite, load_sprite

PALETTE_FILE = "PLAYPAL.lump"
COLORMAP_FILE = "COLORMAP.lmp"
SHADE_COUNT = 32
DEFAULT_PREFIX = "cacodemon"


def generate_shades(
    sprite: Sprite,
    palette: Palette,
    colormap: Colormap,
    prefix: str = DEFAULT_PREFIX,
    directory=".",
) -> list[Path]:
    """Write one file per light map, named <prefix>1.tga upwards."""
    paths = []
    for level in range(SHADE_COUNT):
        path = Path(directory) / f"{prefix}{level + 1}.tga"
        sprite.write(path, palette, colormap.lightmap(level))
        paths.append(path)
    return paths


def main(argv=None) -> int:
    """Shade the sprite named on the command line with the local palette files."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        program = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "spriteshader"
        print(f"Usage:{program} [spritePath].tga")
        return 1
    try:
        palette = load_palette(PALETTE_FILE)
        colormap = load_colormap(COLORMAP_FILE)
        sprite = load_sprite(args[0])
    except (OSError, ValueError) as exc:
        print(exc)
        return 1
    generate_shades(sprite, palette, colormap)
    return 0