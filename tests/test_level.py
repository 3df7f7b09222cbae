import struct

import pytest

from wadtools.geometry import Point, Seg
from wadtools.level import LINE_FLAG_BLOCK_SOUND, LINE_FLAG_SECRET, Map
from wadtools.wad import Lump


def _lump(name, fmt, rows):
    payload = b"".join(struct.pack(fmt, *row) for row in rows)
    return Lump(name, 0, len(payload), payload)


SQUARE = [(0, 0), (0, 64), (64, 64), (64, 0)]


def _map_with_vertices(points=SQUARE):
    level = Map()
    level.parse_vertices(_lump("VERTEXES", "<hh", points))
    return level


def test_parse_vertices_and_bounding_box():
    points = [(-5, 7), (12, -3), (4, 20)]
    level = _map_with_vertices(points)
    assert level.vertices == [Point(x, y) for x, y in points]
    box = level.bounding_box
    assert box.min == Point(min(x for x, _ in points), min(y for _, y in points))
    assert box.max == Point(max(x for x, _ in points), max(y for _, y in points))
    assert box.width == box.max.x - box.min.x


def test_wrong_lump_name_raises():
    level = Map()
    with pytest.raises(ValueError):
        level.parse_vertices(_lump("THINGS", "<hh", [(0, 0)]))
    with pytest.raises(ValueError):
        level.parse_sidedefs(_lump("SECTORS", "<h", [(0,)]))


def test_unused_lumps_leave_map_unchanged():
    level = _map_with_vertices()
    level.parse_sidedefs(_lump("SIDEDEFS", "<h", [(1,)]))
    level.parse_sectors(_lump("SECTORS", "<h", [(1,)]))
    level.parse_rejects(_lump("REJECT", "<h", [(1,)]))
    assert level.lines == [] and level.segs == [] and len(level.vertices) == 4


def test_parse_linedefs():
    level = _map_with_vertices()
    level.parse_linedefs(
        _lump(
            "LINEDEFS",
            "<HHhhhhh",
            [(0, 1, LINE_FLAG_SECRET, 0, 0, 0, -1), (1, 2, LINE_FLAG_BLOCK_SOUND, 0, 0, 0, 1)],
        )
    )
    first, second = level.lines
    assert first.start == level.vertices[0] and first.end == level.vertices[1]
    assert first.is_one_sided() and first.is_secret() and not first.is_block_sound()
    assert not second.is_one_sided() and second.is_block_sound() and not second.is_secret()
    assert second.right_side_id == 0 and second.left_side_id == 1


def test_linedef_with_missing_vertex_raises():
    level = _map_with_vertices()
    with pytest.raises(IndexError):
        level.parse_linedefs(_lump("LINEDEFS", "<HHhhhhh", [(0, 9, 0, 0, 0, 0, -1)]))


def test_parse_segs_and_subsectors():
    level = _map_with_vertices()
    level.parse_segs(_lump("SEGS", "<HHhhhh", [(0, 1, 0, 0, 0, 0), (1, 2, 0, 0, 0, 0), (2, 3, 0, 0, 0, 0)]))
    assert level.segs[1] == Seg(level.vertices[1], level.vertices[2])
    level.parse_subsectors(_lump("SSECTORS", "<HH", [(2, 0), (1, 2)]))
    assert level.subsectors[0].segs == level.segs[0:2]
    assert level.subsectors[1].segs == level.segs[2:3]


def test_subsector_out_of_range_raises():
    level = _map_with_vertices()
    level.parse_segs(_lump("SEGS", "<HHhhhh", [(0, 1, 0, 0, 0, 0)]))
    with pytest.raises(IndexError):
        level.parse_subsectors(_lump("SSECTORS", "<HH", [(2, 0)]))


def test_parse_nodes():
    level = Map()
    row = (10, 20, 5, -7, b"\0" * 8, b"\0" * 8, 3, -32768)
    level.parse_nodes(_lump("NODES", "<hhhh8s8shh", [row]))
    (node,) = level.nodes
    assert node.start == Point(10, 20)
    assert node.end.subtract(node.start) == Point(5, -7)
    assert node.left == 3 and node.right == -32768


def test_parse_things():
    level = Map()
    level.parse_things(_lump("THINGS", "<hhhhh", [(100, -200, 90, 3005, 7)]))
    (thing,) = level.things
    assert thing.position == Point(100, -200)
    assert (thing.angle, thing.thing_type, thing.flags) == (90, 3005, 7)


def _blockmap_lump(first_word=0):
    payload = struct.pack("<hhhhH", 0, 0, 1, 1, 5) + struct.pack("<HHHH", first_word, 0, 1, 0xFFFF)
    return Lump("BLOCKMAP", 0, len(payload), payload)


def test_parse_blockmap_clips_lines_to_block():
    level = _map_with_vertices([(10, 10), (100, 100), (200, 10), (300, 10)])
    level.parse_linedefs(_lump("LINEDEFS", "<HHhhhhh", [(0, 1, 0, 0, 0, 0, -1), (2, 3, 0, 0, 0, 0, -1)]))
    level.parse_blockmap(_blockmap_lump())
    blockmap = level.blockmap
    assert (blockmap.num_rows, blockmap.num_columns) == (1, 1)
    assert blockmap.origin == Point(0, 0)
    assert blockmap.blocks_lines == [[0, 1]]
    assert blockmap.segs == [[Seg(Point(10, 10), Point(100, 100))]]


def test_parse_blockmap_bad_block_marker_raises():
    level = _map_with_vertices()
    with pytest.raises(ValueError):
        level.parse_blockmap(_blockmap_lump(first_word=1))


def _bsp_map():
    level = _map_with_vertices()
    level.parse_subsectors(_lump("SSECTORS", "<HH", [(0, 0), (0, 0)]))
    node = (32, 0, 0, 64, b"\0" * 8, b"\0" * 8, -32768, -32767)
    level.parse_nodes(_lump("NODES", "<hhhh8s8shh", [node]))
    level.build_implicit_subsectors()
    return level


def test_build_implicit_subsectors_splits_map():
    level = _bsp_map()
    left, right = level.implicit_subsectors
    assert all(p.x >= 32 for p in left)
    assert all(p.x <= 32 for p in right)
    assert level.bsp_max_depth == 0


def test_build_implicit_subsectors_records_splitter():
    level = _bsp_map()
    (splitter,) = level.splitters
    assert splitter.depth == 0
    assert {splitter.start, splitter.end} == {Point(32, 0), Point(32, 64)}


def test_build_without_nodes_raises():
    level = _map_with_vertices()
    with pytest.raises(IndexError):
        level.build_implicit_subsectors()