"""A single level: its geometry lumps, BSP tree and derived data."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .geometry import (
    AABB,
    Plan,
    Point,
    Polygon,
    Seg,
    bounding_box,
    split_line,
    split_polygon,
)
from .wad import Lump

LINE_FLAG_SECRET = 1 << 5
LINE_FLAG_BLOCK_SOUND = 1 << 6

SUBSECTOR_BIT = 0x8000
BLOCK_SIZE = 128

_NODE = struct.Struct("<hhhh8s8shh")
_VERTEX = struct.Struct("<hh")
_LINEDEF = struct.Struct("<HHhhhhh")
_SEG = struct.Struct("<HHhhhh")
_SUBSECTOR = struct.Struct("<HH")
_THING = struct.Struct("<hhhhh")
_BLOCKMAP_HEADER = struct.Struct("<hhhh")
_WORD = struct.Struct("<H")


@dataclass(frozen=True)
class Node:
    """A BSP node: a splitting line and two children.

    A child with bit 15 set is a subsector index, otherwise a node index.
    """

    start: Point
    end: Point
    left: int
    right: int


@dataclass(frozen=True)
class LineDef:
    start: Point
    end: Point
    left_side_id: int
    right_side_id: int
    flags: int

    def is_one_sided(self) -> bool:
        return self.left_side_id == -1

    def has_flag(self, flag: int) -> bool:
        return (self.flags & flag) == flag

    def is_secret(self) -> bool:
        return self.has_flag(LINE_FLAG_SECRET)

    def is_block_sound(self) -> bool:
        return self.has_flag(LINE_FLAG_BLOCK_SOUND)


@dataclass
class SubSector:
    segs: list[Seg] = field(default_factory=list)


@dataclass
class BlockMap:
    """The collision grid: line indices per block and the clipped segments."""

    origin: Point = Point(0, 0)
    num_rows: int = 0
    num_columns: int = 0
    blocks_lines: list[list[int]] = field(default_factory=list)
    segs: list[list[Seg]] = field(default_factory=list)


@dataclass(frozen=True)
class Thing:
    position: Point
    thing_type: int
    angle: int
    flags: int


@dataclass(frozen=True)
class Splitter:
    """The part of a node's splitting line that lies inside its region."""

    start: Point
    end: Point
    depth: int
    plan: Plan
    polygon: Polygon


def _expect(lump: Lump, prefix: str) -> None:
    if not lump.name.startswith(prefix):
        raise ValueError(f"expected a {prefix} lump, got {lump.name!r}")


def _entries(lump: Lump, layout: struct.Struct):
    count = len(lump.payload) // layout.size
    return layout.iter_unpack(lump.payload[:count * layout.size])


class Map:
    """A level, filled in by the parse_* methods."""

    def __init__(self, episode: int = 0, map_id: int = 0) -> None:
        self.episode = episode
        self.map_id = map_id
        self.things: list[Thing] = []
        self.bounding_box = AABB(Point(0, 0), Point(0, 0))
        self.vertices: list[Point] = []
        self.lines: list[LineDef] = []
        self.segs: list[Seg] = []
        self.nodes: list[Node] = []
        self.subsectors: list[SubSector] = []
        self.implicit_subsectors: list[Polygon] = []
        self.blockmap = BlockMap()
        self.splitters: list[Splitter] = []
        self.bsp_max_depth = 0

    # Lump parsing -----------------------------------------------------------

    def parse_nodes(self, lump: Lump) -> None:
        _expect(lump, "NODES")
        for x, y, dx, dy, _, _, left, right in _entries(lump, _NODE):
            self.nodes.append(Node(Point(x, y), Point(x + dx, y + dy), left, right))

    def parse_linedefs(self, lump: Lump) -> None:
        _expect(lump, "LINEDEFS")
        for from_id, to_id, flags, _, _, right_side, left_side in _entries(lump, _LINEDEF):
            self.lines.append(
                LineDef(self.vertices[from_id], self.vertices[to_id], left_side, right_side, flags)
            )

    def parse_sidedefs(self, lump: Lump) -> None:
        """Check that *lump* holds side definitions; their contents are not used."""
        _expect(lump, "SIDEDEFS")

    def parse_vertices(self, lump: Lump) -> None:
        _expect(lump, "VERTEXES")
        self.vertices.extend(Point(x, y) for x, y in _entries(lump, _VERTEX))
        self.bounding_box = bounding_box(self.vertices)

    def parse_segs(self, lump: Lump) -> None:
        _expect(lump, "SEGS")
        for start, end, *_ in _entries(lump, _SEG):
            self.segs.append(Seg(self.vertices[start], self.vertices[end]))

    def parse_subsectors(self, lump: Lump) -> None:
        _expect(lump, "SSECTORS")
        for count, first in _entries(lump, _SUBSECTOR):
            if first + count > len(self.segs):
                raise IndexError(f"subsector refers to seg {first + count - 1}, which does not exist")
            self.subsectors.append(SubSector(self.segs[first:first + count]))

    def parse_sectors(self, lump: Lump) -> None:
        """Check that *lump* holds sectors; their contents are not used."""
        _expect(lump, "SECTORS")

    def parse_rejects(self, lump: Lump) -> None:
        """Check that *lump* holds the reject table; its contents are not used."""
        _expect(lump, "REJECT")

    def parse_blockmap(self, lump: Lump) -> None:
        _expect(lump, "BLOCKMAP")
        payload = lump.payload

        def word(index: int) -> int:
            try:
                return _WORD.unpack_from(payload, index * 2)[0]
            except struct.error as exc:
                raise ValueError("blockmap is truncated") from exc

        try:
            origin_x, origin_y, columns, rows = _BLOCKMAP_HEADER.unpack_from(payload)
        except struct.error as exc:
            raise ValueError("blockmap header is truncated") from exc

        blockmap = self.blockmap
        blockmap.origin = Point(origin_x, origin_y)
        blockmap.num_columns = columns
        blockmap.num_rows = rows

        for block in range(max(0, columns * rows)):
            cursor = word(4 + block)
            if word(cursor) != 0x0000:
                raise ValueError("blockmap block list does not start with 0")
            lines = []
            cursor += 1
            while (value := word(cursor)) != 0xFFFF:
                lines.append(value)
                cursor += 1
            blockmap.blocks_lines.append(lines)

        blockmap.segs = [[] for _ in range(max(0, rows * columns))]
        for row in range(rows):
            for column in range(columns):
                index = row * columns + column
                blockmap.segs[index] = self._clip_block(row, column, blockmap.blocks_lines[index])

    def _clip_block(self, row: int, column: int, line_ids) -> list[Seg]:
        origin = self.blockmap.origin
        low = Point(origin.x + column * BLOCK_SIZE, origin.y + row * BLOCK_SIZE)
        high = Point(low.x + BLOCK_SIZE, low.y + BLOCK_SIZE)
        left_edge = Plan(Point(low.x, low.y), Point(low.x, high.y))
        right_edge = Plan(Point(high.x, low.y), Point(high.x, high.y))
        bottom_edge = Plan(Point(low.x, low.y), Point(high.x, low.y))
        top_edge = Plan(Point(low.x, high.y), Point(high.x, high.y))

        clipped = []
        for line_id in line_ids:
            line = self.lines[line_id]
            left, right = split_line(line.start, line.end, left_edge)
            left, right = split_line(right.start, right.end, right_edge)
            left, right = split_line(left.start, left.end, bottom_edge)
            left, right = split_line(left.start, left.end, top_edge)
            if not right.is_empty():
                clipped.append(right)
        return clipped

    def parse_things(self, lump: Lump) -> None:
        _expect(lump, "THINGS")
        for x, y, angle, thing_type, flags in _entries(lump, _THING):
            self.things.append(Thing(Point(x, y), thing_type, angle, flags))

    # BSP traversal ------------------------------------------------------------

    def build_implicit_subsectors(self) -> None:
        """Derive each subsector's convex region by walking the BSP tree."""
        box = self.bounding_box
        whole = Polygon(
            [
                box.min,
                Point(box.min.x, box.max.y),
                box.max,
                Point(box.max.x, box.min.y),
            ]
        )
        # The root of the tree is the last node.
        self._visit(self.nodes[-1], whole, 0)

    def _visit(self, node: Node, polygon: Polygon, depth: int) -> None:
        self.bsp_max_depth = max(self.bsp_max_depth, depth)
        if len(polygon) == 0:
            return

        plan = Plan(node.start, node.end)
        self._build_splitter(plan, polygon, depth)
        left, right = split_polygon(plan, polygon)

        for child, region in ((node.left, left), (node.right, right)):
            if child & SUBSECTOR_BIT:
                subsector = self.subsectors[child & ~SUBSECTOR_BIT & 0xFFFF]
                self.implicit_subsectors.append(self._clip(region, subsector.segs))
            else:
                self._visit(self.nodes[child & 0xFFFF], region, depth + 1)

    @staticmethod
    def _clip(polygon: Polygon, segs) -> Polygon:
        for seg in segs:
            polygon, _ = split_polygon(Plan(seg.start, seg.end), polygon)
        return polygon

    def _build_splitter(self, plan: Plan, polygon: Polygon, depth: int) -> None:
        crossings = [
            point
            for start, end in polygon.edges()
            if (point := plan.find_seg_intersection(start, end)) is not None
        ]
        if len(crossings) == 2:
            self.splitters.append(
                Splitter(crossings[0], crossings[1], depth, plan, Polygon(list(polygon.points)))
            )