"""Command that breaks a WAD archive down and draws its levels as SVG."""

from __future__ import annotations

import sys
from pathlib import Path

from .mapreader import MapReader
from .svg import SvgRenderer
from .wad import open_wad


def explore(path, output_dir=".") -> list[Path]:
    """Print the space used per lump category and render every level.

    Returns the SVG files written into *output_dir*.
    """
    archive = open_wad(path)
    for line in archive.category_report():
        print(line)

    reader = MapReader()
    reader.parse(archive.lumps)

    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return SvgRenderer(directory).render(reader.maps)


def main(argv=None) -> int:
    """Explore the WAD archive named on the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Missing input filename", file=sys.stderr)
        return 1
    try:
        explore(args[0])
    except (OSError, ValueError, IndexError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0