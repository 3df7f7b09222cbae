"""Render levels as a series of SVG drawings."""

from __future__ import annotations

import math
import random
import struct
from dataclasses import dataclass, field
from pathlib import Path

from .geometry import Point
from .level import Map
from .things import THING_LEVEL3, is_monster, is_player, thing_radius

PADDING = 130
WIDTH = 900
BLOCK_SIZE = 128
GRID_STROKE_WIDTH = 5

MONSTER_COLOR = (165, 28, 28)
PLAYER_COLOR = (77, 193, 60)
NEUTRAL_COLOR = (0, 0, 0)

SVG_START = """
 xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
   <defs>
    <marker id="arrow" markerWidth="10" markerHeight="10" refX="0" refY="2" orient="auto" markerUnits="strokeWidth">
      <path d="M0,0 L0,4 L5,3 z" fill="#f00" />
    </marker>
    <linearGradient id="black-linearh">
      <stop offset="0%"  stop-color="rgb(0,0,0)" stop-opacity="90"/>
      <stop offset="90%"  stop-color="rgb(0,0,0)" stop-opacity="50"/>
      <stop offset="100%" stop-color="rgb(0,0,0)" stop-opacity="0"/>
    </linearGradient>

    <linearGradient id="black-linearv" x1="0" x2="0" y1="0" y2="1">
      <stop offset="0%"  stop-color="rgb(0,0,0)" stop-opacity="90"/>
      <stop offset="50%"  stop-color="rgb(0,0,0)" stop-opacity="90"/>
      <stop offset="100%" stop-color="rgb(0,0,0)" stop-opacity="0"/>
    </linearGradient>

    <linearGradient id="red-linearh">
      <stop offset="0%"  stop-color="rgb(206, 17, 74)" stop-opacity="100"/>
      <stop offset="90%"  stop-color="rgb(206, 17, 74)" stop-opacity="90"/>
      <stop offset="100%" stop-color="rgb(206,17,74)" stop-opacity="0"/>
    </linearGradient>

    <linearGradient id="red-linearv" x1="0" x2="0" y1="0" y2="1">
      <stop offset="0%"  stop-color="rgb(206, 17, 74)" stop-opacity="100"/>
      <stop offset="90%"  stop-color="rgb(206, 17, 74)" stop-opacity="90"/>
      <stop offset="100%" stop-color="rgb(206,17,74)" stop-opacity="0"/>
    </linearGradient>
  </defs>
"""

EPILOGUE = "\n</svg>\n"

_F32 = struct.Struct("<f")


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return _F32.unpack(_F32.pack(value))[0]


def _num(value: float) -> str:
    """Format a floating-point value the way a default-configured stream does."""
    return f"{value:g}"


def _c_mod(value: int, modulus: int) -> int:
    """Remainder with the sign of the dividend."""
    return int(math.fmod(value, modulus))


def _primary_color(selector: int) -> tuple[int, int, int]:
    return (
        ((selector & 4) >> 2) * 255,
        ((selector & 2) >> 1) * 255,
        (selector & 1) * 255,
    )


def _circle(point: Point, radius: int) -> str:
    return f'    <circle cx="{point.x}" cy="{-point.y}" r="{radius}"/>'


def _endpoints(start: Point, end: Point) -> str:
    return f'<line x1="{start.x}" y1="{-start.y}" x2="{end.x}" y2="{-end.y}"'


def _thing_color(thing_type: int) -> tuple[int, int, int]:
    color = NEUTRAL_COLOR
    if is_monster(thing_type):
        color = MONSTER_COLOR
    if is_player(thing_type):
        color = PLAYER_COLOR
    return color


def _thing_circle(thing) -> str:
    r, g, b = _thing_color(thing.thing_type)
    position = thing.position
    return (
        f'    <circle cx="{position.x}" cy="{-position.y}" r="{thing_radius(thing.thing_type)}"'
        f' stroke="rgb(0,0,0)" stroke-width="5" fill="rgb({r},{g},{b})"/>\n'
    )


@dataclass
class SvgRenderer:
    """Writes one SVG file per drawing and level into *output_dir*."""

    output_dir: Path = Path(".")
    rng: random.Random = field(default_factory=random.Random)

    def __post_init__(self) -> None:
        self.output_dir = Path(self.output_dir)

    # Common pieces -------------------------------------------------------------

    def svg_header(self, level: Map) -> str:
        """Return the opening svg element sized to the level's bounding box."""
        box = level.bounding_box
        if box.width == 0:
            raise ValueError("level has a bounding box of zero width")
        ratio = _f32(box.height / _f32(box.width))
        height = int(_f32(WIDTH * ratio))
        view_x = box.min.x - PADDING
        view_y = -box.min.y - box.height - PADDING
        view_w = box.width + PADDING * 2
        view_h = box.height + PADDING * 2
        return (
            f'<svg width="{WIDTH}" height="{height}" preserveAspectRatio="none"'
            f' viewBox="{view_x} {view_y} {view_w} {view_h}"'
            f"{SVG_START}\n"
        )

    def _write(self, level: Map, suffix: str, body: str) -> Path:
        path = self.output_dir / f"E{level.episode}M{level.map_id}_{suffix}.svg"
        text = self.svg_header(level) + body + EPILOGUE + "\n"
        path.write_text(text, encoding="utf-8")
        return path

    # Entry points --------------------------------------------------------------

    def render(self, maps) -> list[Path]:
        """Render every drawing of every level; return the written files."""
        paths: list[Path] = []
        for level in maps:
            paths.extend(self.render_map(level))
        return paths

    def render_map(self, level: Map) -> list[Path]:
        """Render every drawing of one level; return the written files."""
        return [
            self.render_nodes(level),
            self.render_special_lines(level),
            self.render_linedefs(level),
            self.render_segs(level),
            self.render_subsectors(level),
            self.render_nodes_and_subsectors(level),
            self.render_blockmap(level),
            self.render_blueprint(level),
            self.render_bsp_tree(level),
        ]

    # Drawings ------------------------------------------------------------------

    def render_nodes(self, level: Map) -> Path:
        """Draw the splitting line of every BSP node."""
        body = "".join(
            f'{_endpoints(node.start, node.end)} stroke-width="10" stroke="black"/>\n'
            for node in level.nodes
        )
        return self._write(level, "nodes", body)

    def render_special_lines(self, level: Map) -> Path:
        """Draw lines, highlighting those that block sound, and all things."""
        parts = []
        for line in level.lines:
            parts.append(f'{_endpoints(line.start, line.end)} stroke-width="')
            if line.is_one_sided():
                parts.append('7" stroke="black" />')
            elif line.is_block_sound():
                parts.append('17" stroke="red" />')
            else:
                parts.append('7" stroke="gray" />')
            parts.append("\n")
            parts.append(_circle(line.start, 10) + _circle(line.end, 10) + "\n")
        parts.extend(_thing_circle(thing) for thing in level.things)
        return self._write(level, "special_lines", "".join(parts))

    def render_linedefs(self, level: Map) -> Path:
        """Draw lines and the field of view of monsters present on skill 3."""
        parts = []
        for line in level.lines:
            parts.append(f'{_endpoints(line.start, line.end)} stroke-width="')
            if line.is_one_sided():
                parts.append('7" stroke="black" />')
            else:
                parts.append('7" stroke="gray" />')
            parts.append("\n")
            parts.append(_circle(line.start, 10) + _circle(line.end, 10) + "\n")

        for thing in level.things:
            if (thing.flags & THING_LEVEL3) != THING_LEVEL3:
                continue
            if not is_monster(thing.thing_type):
                continue
            parts.append(_thing_circle(thing))
            left = Point(730, 430).rotate(thing.angle)
            right = Point(730, -430).rotate(thing.angle)
            x, y = thing.position.x, thing.position.y
            parts.append(
                f'<polygon points="{x},{-y} {x + left.x},{-(y + left.y)}'
                f' {x + right.x},{-(y + right.y)}"'
                ' style="fill:blue;stroke:dark;stroke-width:1" opacity="0.25" />\n'
            )
        return self._write(level, "sides", "".join(parts))

    def render_segs(self, level: Map) -> Path:
        """Draw every seg and the splitters of the top of the BSP tree."""
        parts = []
        for seg in level.segs:
            parts.append(f'{_endpoints(seg.start, seg.end)} stroke-width="7" stroke="black" />\n')
            parts.append(_circle(seg.start, 10) + _circle(seg.end, 10) + "\n")
        opacity = _num(1.0)
        for splitter in level.splitters:
            if splitter.depth > 2:
                continue
            parts.append(
                f'<line x1="{splitter.start.x}" y1="{-splitter.start.y}"'
                f'    x2="{splitter.end.x}" y2="{-splitter.end.y}"'
                f' stroke-width="25" stroke="black" '
                f'stroke-opacity="{opacity}" fill-opacity="{opacity}"/>\n'
            )
        return self._write(level, "segs", "".join(parts))

    def render_subsectors(self, level: Map) -> Path:
        """Draw the segs of each subsector in a color of its own."""
        parts = []
        for subsector in level.subsectors:
            segs = subsector.segs
            if level.episode == 1 and level.map_id == 1 and len(segs) > 1:
                parts.append(" ")
            if not segs:
                raise IndexError("subsector has no segs")
            first = segs[0]
            r = _c_mod(first.start.x, 256)
            g = _c_mod(first.start.y, 256)
            b = _c_mod(first.end.x, 256)
            for seg in segs:
                parts.append(
                    f'{_endpoints(seg.start, seg.end)} stroke-width="10"'
                    f' stroke="rgb({r},{g},{b})" marker-end="url(#arrow)" />\n'
                )
        return self._write(level, "subsectors", "".join(parts))

    def render_nodes_and_subsectors(self, level: Map) -> Path:
        """Fill the region of every subsector found by walking the BSP tree."""
        factor = _f32(0.15)
        parts = []
        for polygon in level.implicit_subsectors:
            r, g, b = _primary_color(self.rng.randrange(6) + 1)
            luma = _f32(0.3 * r + 0.6 * g + 0.1 * b)
            new_r, new_g, new_b = (
                int(_f32(channel + _f32(factor * _f32(luma - channel))))
                for channel in (r, g, b)
            )
            points = "".join(f"{point.x},{-point.y} " for point in polygon.points)
            parts.append(
                f'<polygon points="{points}" fill="rgb({new_r},{new_g},{new_b})"'
                ' stroke="rgb(70,70,70)" stroke-width="10" stroke-linecap="round" />\n'
            )
        return self._write(level, "fab", "".join(parts))

    def render_blockmap(self, level: Map) -> Path:
        """Draw the lines clipped to each non-empty block and the block's square."""
        blockmap = level.blockmap
        parts = []
        for block_id, segs in enumerate(blockmap.segs):
            row = block_id // blockmap.num_columns
            column = block_id % blockmap.num_columns
            r, g, b = _primary_color((block_id + row % 6) % 6 + 1)
            if not segs:
                continue
            for seg in segs:
                parts.append(
                    f'{_endpoints(seg.start, seg.end)} stroke-width="13"'
                    f' stroke="rgb({r},{g},{b})"/>\n'
                )
            low = Point(
                blockmap.origin.x + column * BLOCK_SIZE,
                blockmap.origin.y + row * BLOCK_SIZE,
            )
            high = Point(low.x + BLOCK_SIZE, low.y + BLOCK_SIZE)
            width = GRID_STROKE_WIDTH
            parts.append(
                f'<line x1="{low.x}" y1="{-low.y}"    x2="{low.x}" y2="{-high.y}"'
                f' stroke-width="{width}" stroke="black" />\n'
            )
            parts.append(
                f'<line x1="{low.x}" y1="{-low.y}"    x2="{high.x}"   y2="{-low.y}"'
                f' stroke-width="{width}" stroke="black" />\n'
            )
            parts.append(
                f'<line x1="{high.x}" y1="{-low.y}"    x2="{high.x}" y2="{-high.y}"'
                f' stroke-width="{width}" stroke="black"/>\n'
            )
            parts.append(
                f'<line x1="{low.x}" y1="{-high.y}"    x2="{high.x}"   y2="{-high.y}"'
                f' stroke-width="{width}" stroke="black"/>\n'
            )
        return self._write(level, "blockmap", "".join(parts))

    def render_blueprint(self, level: Map) -> Path:
        """Draw things and lines in a hand-sketched style."""
        parts = [
            f'    <circle cx="{thing.position.x}" cy="{-thing.position.y}" r="18"'
            ' fill="rgb(170,170,170)"/>\n'
            for thing in level.things
        ]
        for line in level.lines:
            stretch = _f32(self.rng.randrange(1000) / _f32(4999.9))
            delta = line.end.subtract(line.start).multiply(stretch)
            x2 = _f32(line.end.x + delta.x + 0.01)
            y2 = -_f32(line.end.y + delta.y + 0.01)
            stroke = float(self.rng.randrange(6) + 8)
            parts.append(
                f'<line x1="{line.start.x - delta.x}" y1="{-(line.start.y - delta.y)}"'
                f' x2="{_num(x2)}" y2="{_num(y2)}" stroke-width="{_num(stroke)}'
            )
            orientation = "h" if delta.x > delta.y else "v"
            if line.is_one_sided():
                parts.append(
                    f'" stroke="url(#black-linear{orientation})"  stroke-linecap="round"/>'
                )
            else:
                parts.append(
                    f'" stroke="url(#red-linear{orientation})" stroke-linecap="round"/>'
                )
            parts.append("\n")
        return self._write(level, "blueprint", "".join(parts))

    def render_bsp_tree(self, level: Map) -> Path:
        """Draw every splitter, fading with its depth in the BSP tree."""
        max_depth = level.bsp_max_depth
        parts = []
        for splitter in level.splitters:
            if max_depth:
                opacity = _num(_f32((max_depth - splitter.depth) / _f32(max_depth)))
            else:
                opacity = _num(math.nan)
            parts.append(
                f'<line x1="{splitter.start.x}" y1="{-splitter.start.y}"'
                f'    x2="{splitter.end.x}" y2="{-splitter.end.y}"'
                f' stroke-width="15" stroke="black" '
                f'stroke-opacity="{opacity}" fill-opacity="{opacity}"/>\n'
            )
        return self._write(level, "bsptree", "".join(parts))