from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


def snap_to_grid(value: float, grid_size: int) -> int:
    """Round ``value`` to the nearest multiple of ``grid_size``.

    Halves round up (towards positive infinity) so that snapping is stable for
    the symmetric midpoints produced by odd cell counts.
    """
    return int(math.floor(value / grid_size + 0.5)) * grid_size


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def translated(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Segment:
    """Straight line segment between two points (walls, closed doors)."""

    start: Point
    end: Point


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box in pixel coordinates (y grows downwards)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (
            Point(self.x, self.y),
            Point(self.right, self.y),
            Point(self.right, self.bottom),
            Point(self.x, self.bottom),
        )

    def moved_to(self, x: float, y: float) -> "Bounds":
        return Bounds(x, y, self.width, self.height)

    def overlaps(self, other: "Bounds", padding: float = 0) -> bool:
        """Strict intersection test after growing ``self`` by ``padding`` on every side.

        Boxes that merely touch (after padding) do not overlap.
        """
        return (
            self.x - padding < other.right
            and self.right + padding > other.x
            and self.y - padding < other.bottom
            and self.bottom + padding > other.y
        )

    def contained_in(self, other: "Bounds") -> bool:
        return (
            self.x >= other.x
            and self.y >= other.y
            and self.right <= other.right
            and self.bottom <= other.bottom
        )

    def edge(self, direction: "Direction") -> float:
        """Coordinate of the edge line facing ``direction`` (y for north/south, x otherwise)."""
        return {
            Direction.NORTH: self.y,
            Direction.SOUTH: self.bottom,
            Direction.EAST: self.right,
            Direction.WEST: self.x,
        }[direction]


class Direction(str, Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def is_horizontal(self) -> bool:
        """True when the wall facing this direction runs along the X axis."""
        return self in (Direction.NORTH, Direction.SOUTH)


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}


__all__ = ["Bounds", "Direction", "Point", "Segment", "snap_to_grid"]
