"""Per-direction wall state of a dungeon piece and the doorway splitter.

A piece owns exactly one wall value per direction, one of:

- ``NoWall``: the side is open (corridor ends, or a wall too short to keep)
- ``SolidWall``: one unbroken segment
- ``SplitWall``: two segments with a doorway gap between them

Horizontal walls (north/south) are split along X and vertical walls
(east/west) along Y; both cases go through the same code with the axes
swapped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple, Union

from .geometry import Direction, Point, Segment

if TYPE_CHECKING:  # pragma: no cover
    from .pieces import DungeonPiece

logger = logging.getLogger(__name__)

# A surviving sub-segment must be longer than this fraction of a grid cell.
MIN_SEGMENT_FRACTION = 0.25


@dataclass(frozen=True)
class NoWall:
    def segments(self) -> Tuple[Segment, ...]:
        return ()

    def translated(self, dx: float, dy: float) -> "NoWall":
        return self


@dataclass(frozen=True)
class SolidWall:
    start: Point
    end: Point

    def segments(self) -> Tuple[Segment, ...]:
        return (Segment(self.start, self.end),)

    def translated(self, dx: float, dy: float) -> "SolidWall":
        return SolidWall(self.start.translated(dx, dy), self.end.translated(dx, dy))


@dataclass(frozen=True)
class SplitWall:
    left_start: Point
    left_end: Point
    right_start: Point
    right_end: Point

    def segments(self) -> Tuple[Segment, ...]:
        return (
            Segment(self.left_start, self.left_end),
            Segment(self.right_start, self.right_end),
        )

    def translated(self, dx: float, dy: float) -> "SplitWall":
        return SplitWall(
            self.left_start.translated(dx, dy),
            self.left_end.translated(dx, dy),
            self.right_start.translated(dx, dy),
            self.right_end.translated(dx, dy),
        )


WallSegment = Union[NoWall, SolidWall, SplitWall]

NO_WALL = NoWall()


def _axis(p: Point, horizontal: bool) -> float:
    return p.x if horizontal else p.y


def _point(along: float, across: float, horizontal: bool) -> Point:
    return Point(along, across) if horizontal else Point(across, along)


def _from_segments(segments: List[Segment]) -> WallSegment:
    if not segments:
        return NO_WALL
    if len(segments) == 1:
        return SolidWall(segments[0].start, segments[0].end)
    if len(segments) == 2:
        left, right = segments
        return SplitWall(left.start, left.end, right.start, right.end)
    raise ValueError("A wall can carry at most one doorway (got %d sub-segments)" % len(segments))


def split_wall(
    wall: WallSegment,
    horizontal: bool,
    doorway_center: Point,
    doorway_width: float,
    min_length: float,
) -> WallSegment:
    """Remove a ``doorway_width`` gap centred on ``doorway_center`` from ``wall``.

    Sub-segments that end up ``min_length`` or shorter are dropped. Applying
    the same doorway twice leaves the wall unchanged.
    """
    if isinstance(wall, NoWall):
        return wall

    if isinstance(wall, SolidWall):
        span = abs(_axis(wall.end, horizontal) - _axis(wall.start, horizontal))
        if span <= doorway_width + min_length:
            return NO_WALL

    gap_lo = _axis(doorway_center, horizontal) - doorway_width / 2
    gap_hi = _axis(doorway_center, horizontal) + doorway_width / 2

    kept: List[Segment] = []
    for seg in wall.segments():
        a0, a1 = sorted((_axis(seg.start, horizontal), _axis(seg.end, horizontal)))
        across = seg.start.y if horizontal else seg.start.x
        for lo, hi in ((a0, min(a1, gap_lo)), (max(a0, gap_hi), a1)):
            if hi - lo > min_length:
                kept.append(Segment(_point(lo, across, horizontal), _point(hi, across, horizontal)))
    return _from_segments(kept)


def remove_connecting_walls(
    piece: "DungeonPiece",
    direction: Direction,
    doorway_center: Point,
    grid_size: int,
) -> WallSegment:
    """Carve a one-cell doorway into ``piece``'s wall facing ``direction``.

    The piece is updated in place; the new wall value is returned.
    """
    before = piece.walls[direction]
    after = split_wall(
        before,
        direction.is_horizontal,
        doorway_center,
        doorway_width=grid_size,
        min_length=grid_size * MIN_SEGMENT_FRACTION,
    )
    piece.walls[direction] = after
    logger.debug(
        "Doorway at (%s, %s) on %s wall: %s -> %s",
        doorway_center.x,
        doorway_center.y,
        direction.value,
        type(before).__name__,
        type(after).__name__,
    )
    return after


__all__ = [
    "MIN_SEGMENT_FRACTION",
    "NO_WALL",
    "NoWall",
    "SolidWall",
    "SplitWall",
    "WallSegment",
    "remove_connecting_walls",
    "split_wall",
]
