"""Find the levels of a WAD archive and parse their lumps into maps."""

from __future__ import annotations

from itertools import islice

from .level import Map
from .wad import Lump

MAP_LUMP_COUNT = 10
_NAME_LENGTH = 8


def map_identity(name: str) -> tuple[int, int] | None:
    """Return (episode, map id) when *name* marks the start of a level.

    Names of the form ExMy give episode x and map y; names starting with MAP
    give the two characters that follow. Other names give None.
    """
    padded = name.ljust(_NAME_LENGTH, "\0")
    if padded[0] == "E" and padded[2] == "M":
        return ord(padded[1]) - 48, ord(padded[3]) - 48
    if padded.startswith("MAP"):
        return ord(padded[3]) - 48, ord(padded[4]) - 48
    return None


class MapReader:
    """Collects every level found in a sequence of lumps."""

    def __init__(self) -> None:
        self.maps: list[Map] = []

    def parse(self, lumps) -> None:
        """Parse every level in *lumps*, appending them to :attr:`maps`."""
        cursor = iter(lumps)
        for lump in cursor:
            identity = map_identity(lump.name)
            if identity is None:
                continue
            episode, map_id = identity
            level = Map(episode, map_id)
            self.maps.append(level)
            self._parse_map(level, lump.name, list(islice(cursor, MAP_LUMP_COUNT)))

    @staticmethod
    def _parse_map(level: Map, marker: str, lumps: list[Lump]) -> None:
        if len(lumps) != MAP_LUMP_COUNT:
            raise ValueError(
                f"level {marker} has {len(lumps)} lumps, expected {MAP_LUMP_COUNT}"
            )
        (things, linedefs, sidedefs, vertices, segs,
         subsectors, nodes, sectors, rejects, blockmap) = lumps

        # Vertices come first: the other lumps refer to them.
        level.parse_vertices(vertices)
        level.parse_things(things)
        level.parse_linedefs(linedefs)
        level.parse_sidedefs(sidedefs)
        level.parse_segs(segs)
        # Subsectors must be known before the nodes that refer to them.
        level.parse_subsectors(subsectors)
        level.parse_nodes(nodes)
        level.parse_sectors(sectors)
        level.parse_rejects(rejects)
        level.parse_blockmap(blockmap)

        level.build_implicit_subsectors()