"""Circle-vs-segment collision shared by token movement and vision blocking.

Walls are the consecutive point pairs of every ``wall`` drawing. A closed
door contributes one segment of length ``door.size`` centred on the door;
an open door contributes nothing. ``vision_blocking_segments`` is the single
projection both movement checks and the fog-of-war raycaster consume.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from .geometry import Point, Segment
from .output import Door, DoorOrientation, Drawing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float


def circle_line_collision(circle: Circle, segment: Segment) -> bool:
    """
    True iff the closest point of ``segment`` lies within ``circle.radius`` of its centre.

    The circle centre is projected onto the segment and the projection is
    clamped to the segment's ends. A zero-length segment is treated as a point.
    """
    dx = circle.x - segment.start.x
    dy = circle.y - segment.start.y
    seg_dx = segment.end.x - segment.start.x
    seg_dy = segment.end.y - segment.start.y
    length_sq = seg_dx * seg_dx + seg_dy * seg_dy
    r_sq = circle.radius * circle.radius

    if length_sq == 0:
        return dx * dx + dy * dy <= r_sq

    t = (dx * seg_dx + dy * seg_dy) / length_sq
    t = max(0.0, min(1.0, t))
    closest_x = segment.start.x + t * seg_dx
    closest_y = segment.start.y + t * seg_dy
    dist_x = circle.x - closest_x
    dist_y = circle.y - closest_y
    return dist_x * dist_x + dist_y * dist_y <= r_sq


def door_blocking_segment(door: Door) -> Optional[Segment]:
    """Segment a door blocks with, or None when it is open. Locking does not matter."""
    if door.is_open:
        return None
    half = door.size / 2
    if door.orientation is DoorOrientation.HORIZONTAL:
        return Segment(Point(door.x - half, door.y), Point(door.x + half, door.y))
    return Segment(Point(door.x, door.y - half), Point(door.x, door.y + half))


def wall_segments(drawings: Iterable[Drawing]) -> Iterator[Segment]:
    for drawing in drawings:
        if drawing.tool != "wall":
            continue
        pts = drawing.points
        for i in range(0, len(pts) - 3, 2):
            yield Segment(Point(pts[i], pts[i + 1]), Point(pts[i + 2], pts[i + 3]))


def vision_blocking_segments(drawings: Iterable[Drawing], doors: Iterable[Door]) -> List[Segment]:
    segments = list(wall_segments(drawings))
    for door in doors:
        seg = door_blocking_segment(door)
        if seg is not None:
            segments.append(seg)
    return segments


def check_wall_collision(
    x: float,
    y: float,
    size: float,
    drawings: Iterable[Drawing],
    doors: Iterable[Door],
) -> bool:
    """True if a token of diameter ``size`` at ``(x, y)`` touches any wall or closed door."""
    circle = Circle(x, y, size / 2)
    return any(circle_line_collision(circle, seg) for seg in vision_blocking_segments(drawings, doors))


def find_nearest_valid_position(
    target_x: float,
    target_y: float,
    size: float,
    drawings: Iterable[Drawing],
    doors: Iterable[Door],
    max_radius: float = 100,
    *,
    step: float = 5,
) -> Point:
    """
    Nearest collision-free spot around a target, searched in growing rings.

    Each ring of radius ``r`` samples ``(r // step) * 8`` evenly spaced
    angles. If nothing within ``max_radius`` is free, the original target is
    returned even though it collides; callers needing a guarantee must check
    the result again.
    """
    drawings = list(drawings)
    doors = list(doors)
    if not check_wall_collision(target_x, target_y, size, drawings, doors):
        return Point(target_x, target_y)

    radius = step
    while radius <= max_radius:
        angles = int(radius // step) * 8
        for i in range(angles):
            angle = (i / angles) * math.pi * 2
            x = target_x + math.cos(angle) * radius
            y = target_y + math.sin(angle) * radius
            if not check_wall_collision(x, y, size, drawings, doors):
                return Point(x, y)
        radius += step

    logger.debug("No free position within %s of (%s, %s)", max_radius, target_x, target_y)
    return Point(target_x, target_y)


def is_near_door(token_x: float, token_y: float, door: Door, interaction_range: float = 50) -> bool:
    return math.hypot(token_x - door.x, token_y - door.y) <= interaction_range


__all__ = [
    "Circle",
    "check_wall_collision",
    "circle_line_collision",
    "door_blocking_segment",
    "find_nearest_valid_position",
    "is_near_door",
    "vision_blocking_segments",
    "wall_segments",
]
