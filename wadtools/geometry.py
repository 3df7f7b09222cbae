"""Two-dimensional map geometry on 16-bit integer coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

INT16_MIN = -0x8000
INT16_MAX = 0x7FFF


def _int16(value) -> int:
    """Truncate toward zero and wrap into the signed 16-bit range."""
    return ((int(value) + 0x8000) & 0xFFFF) - 0x8000


def _uint16(value) -> int:
    return int(value) & 0xFFFF


@dataclass(frozen=True)
class Point:
    """A point with signed 16-bit coordinates; floats are truncated."""

    x: int
    y: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _int16(self.x))
        object.__setattr__(self, "y", _int16(self.y))

    def rotate(self, degree: float) -> Point:
        """Return the point rotated counter-clockwise about the origin."""
        radians = degree * 2 * 3.1415 / 360
        cos, sin = math.cos(radians), math.sin(radians)
        return Point(cos * self.x - sin * self.y, sin * self.x + cos * self.y)

    def subtract(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def multiply(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)


class Side(Enum):
    LEFT = 0
    RIGHT = 1
    ON_PLAN = 2


@dataclass(frozen=True)
class Seg:
    """A line segment between two points."""

    start: Point
    end: Point

    def is_empty(self) -> bool:
        return self.start == self.end


_EMPTY_SEG = Seg(Point(0, 0), Point(0, 0))


@dataclass(frozen=True)
class AABB:
    """An axis-aligned bounding box."""

    min: Point
    max: Point

    @property
    def width(self) -> int:
        return _uint16(self.max.x - self.min.x)

    @property
    def height(self) -> int:
        return _uint16(self.max.y - self.min.y)


@dataclass(frozen=True)
class Plan:
    """An infinite line through two points, used to split space."""

    start: Point
    end: Point

    @property
    def delta(self) -> Point:
        return self.end.subtract(self.start)

    def side(self, point: Point) -> Side:
        """Tell which side of the line *point* lies on."""
        delta = self.delta
        offset = self.start.subtract(point)
        length = delta.x * offset.y - delta.y * offset.x
        if length > 0:
            return Side.RIGHT
        if length < 0:
            return Side.LEFT
        return Side.ON_PLAN

    def find_intersection(self, start: Point, end: Point) -> Point:
        """Return where the line through *start* and *end* crosses this one."""
        x1, y1 = float(self.start.x), float(self.start.y)
        x2, y2 = float(self.end.x), float(self.end.y)
        x3, y3 = float(start.x), float(start.y)
        x4, y4 = float(end.x), float(end.y)

        denominator = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
        if denominator == 0:
            raise ValueError("lines are parallel")
        cross_u = x1 * y2 - y1 * x2
        cross_v = x3 * y4 - y3 * x4
        x = cross_u * (x3 - x4) - (x1 - x2) * cross_v
        y = cross_u * (y3 - y4) - (y1 - y2) * cross_v
        return Point(x / denominator, y / denominator)

    def find_seg_intersection(self, start: Point, end: Point) -> Point | None:
        """Return where the segment *start*-*end* crosses this line, or None."""
        cx, cy = float(start.x), float(start.y)
        dx, dy = float(end.x - start.x), float(end.y - start.y)
        ax, ay = float(self.start.x), float(self.start.y)
        delta = self.delta
        bx, by = float(delta.x), float(delta.y)

        denominator = dx * by - dy * bx
        if -0.001 < denominator < 0.001:
            return None
        u = (bx * (cy - ay) + by * (ax - cx)) / denominator
        if u < 0 or u > 1:
            return None
        return Point(start.x + u * (end.x - start.x), start.y + u * (end.y - start.y))


@dataclass
class Polygon:
    """A closed polygon; indices wrap around."""

    points: list[Point] = field(default_factory=list)

    def add_point(self, point: Point) -> None:
        self.points.append(point)

    def at(self, index: int) -> Point:
        if not self.points:
            raise IndexError("polygon has no points")
        return self.points[index % len(self.points)]

    def clear(self) -> None:
        self.points.clear()

    def edges(self) -> Iterator[tuple[Point, Point]]:
        """Yield each edge as (start, end), closing back to the first point."""
        for index in range(len(self.points)):
            yield self.at(index), self.at(index + 1)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)


def bounding_box(points) -> AABB:
    """Return the box enclosing *points*."""
    min_x = min_y = INT16_MAX
    max_x = max_y = INT16_MIN
    for point in points:
        min_x = min(min_x, point.x)
        min_y = min(min_y, point.y)
        max_x = max(max_x, point.x)
        max_y = max(max_y, point.y)
    return AABB(Point(min_x, min_y), Point(max_x, max_y))


def split_polygon(plan: Plan, polygon: Polygon) -> tuple[Polygon, Polygon]:
    """Cut *polygon* along *plan* into (left, right) pieces.

    Vertices on the plan's RIGHT side go to the first piece and vertices on
    its LEFT side to the second; points on the plan go to both.
    """
    left, right = Polygon(), Polygon()
    for start, end in polygon.edges():
        side_start = plan.side(start)
        side_end = plan.side(end)
        if side_end is Side.ON_PLAN:
            left.add_point(end)
            right.add_point(end)
            continue
        if side_start is side_end:
            (right if side_start is Side.LEFT else left).add_point(end)
            continue
        crossing = plan.find_intersection(start, end)
        if side_end is Side.LEFT:
            left.add_point(crossing)
            right.add_point(crossing)
            right.add_point(end)
        else:
            right.add_point(crossing)
            left.add_point(crossing)
            left.add_point(end)
    return left, right


def split_line(start: Point, end: Point, plan: Plan) -> tuple[Seg, Seg]:
    """Cut the segment *start*-*end* along *plan* into (left, right) parts.

    A part that does not exist is the empty segment at the origin.
    """
    side_start = plan.side(start)
    side_end = plan.side(end)
    whole = Seg(start, end)
    if side_end is Side.ON_PLAN:
        return whole, whole
    if side_start is side_end:
        if side_start is Side.LEFT:
            return whole, _EMPTY_SEG
        return _EMPTY_SEG, whole
    crossing = plan.find_intersection(start, end)
    if side_end is Side.LEFT:
        return Seg(crossing, end), Seg(start, crossing)
    return Seg(start, crossing), Seg(crossing, end)