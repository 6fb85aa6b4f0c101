from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .geometry import Bounds, Direction, Point, snap_to_grid
from .output import Door, IdFactory, make_door, new_id
from .pieces import DungeonPiece, PieceKind
from .rng import RandomSource
from .templates import RoomTemplateRegistry
from .walls import NO_WALL, SolidWall, remove_connecting_walls

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """A corridor plus the room at its far end, both already carved."""

    corridor: DungeonPiece
    room: DungeonPiece
    door: Door


class ConnectionBuilder:
    """Grows one corridor and one room off an existing room.

    All coordinates derive from grid-aligned room bounds, so connection points,
    corridor ends and the new room's corners stay on the grid. The corridor's
    side walls sit half its width either side of the connection axis.
    """

    def __init__(
        self,
        templates: RoomTemplateRegistry,
        rng: RandomSource,
        grid_size: int,
        corridor_length_cells: int = 4,
        corridor_width_cells: int = 1,
        canvas: Optional[Bounds] = None,
        id_factory: IdFactory = new_id,
    ) -> None:
        self.templates = templates
        self.rng = rng
        self.grid_size = grid_size
        self.corridor_length = corridor_length_cells * grid_size
        self.corridor_width = corridor_width_cells * grid_size
        self.canvas = canvas
        self.id_factory = id_factory

    def connection_point(self, bounds: Bounds, direction: Direction) -> Point:
        """Grid-snapped midpoint of the edge of ``bounds`` facing ``direction``."""
        center = bounds.center()
        if direction.is_horizontal:
            return Point(snap_to_grid(center.x, self.grid_size), bounds.edge(direction))
        return Point(bounds.edge(direction), snap_to_grid(center.y, self.grid_size))

    def build_corridor(self, origin: Point, direction: Direction) -> DungeonPiece:
        """Straight corridor leaving ``origin`` towards ``direction``.

        Side walls are solid; both ends are open.
        """
        length, half = self.corridor_length, self.corridor_width / 2
        if direction is Direction.NORTH:
            bounds = Bounds(origin.x - half, origin.y - length, self.corridor_width, length)
        elif direction is Direction.SOUTH:
            bounds = Bounds(origin.x - half, origin.y, self.corridor_width, length)
        elif direction is Direction.EAST:
            bounds = Bounds(origin.x, origin.y - half, length, self.corridor_width)
        else:
            bounds = Bounds(origin.x - length, origin.y - half, length, self.corridor_width)

        x, y, r, b = bounds.x, bounds.y, bounds.right, bounds.bottom
        if direction.is_horizontal:
            # travelling north/south: east and west are the side walls
            walls = {
                Direction.NORTH: NO_WALL,
                Direction.SOUTH: NO_WALL,
                Direction.EAST: SolidWall(Point(r, y), Point(r, b)),
                Direction.WEST: SolidWall(Point(x, y), Point(x, b)),
            }
        else:
            walls = {
                Direction.NORTH: SolidWall(Point(x, y), Point(r, y)),
                Direction.SOUTH: SolidWall(Point(x, b), Point(r, b)),
                Direction.EAST: NO_WALL,
                Direction.WEST: NO_WALL,
            }
        return DungeonPiece(kind=PieceKind.CORRIDOR, bounds=bounds, walls=walls)

    def _place_room(self, corridor: Bounds, direction: Direction) -> DungeonPiece:
        """Create a room and snap it flush against the corridor's far end."""
        g = self.grid_size
        room = self.templates.create_room(0, 0, self.rng)
        w, h = room.bounds.width, room.bounds.height
        axis = corridor.center()
        if direction is Direction.NORTH:
            x, y = snap_to_grid(axis.x - w / 2, g), corridor.y - h
        elif direction is Direction.SOUTH:
            x, y = snap_to_grid(axis.x - w / 2, g), corridor.bottom
        elif direction is Direction.EAST:
            x, y = corridor.right, snap_to_grid(axis.y - h / 2, g)
        else:
            x, y = corridor.x - w, snap_to_grid(axis.y - h / 2, g)
        return room.moved_to(x, y)

    def _doorway_center(self, corridor: Bounds, direction: Direction, wall_line: float) -> Point:
        """Point where the corridor axis crosses a wall line, snapped to the grid."""
        axis = corridor.center()
        if direction.is_horizontal:
            return Point(snap_to_grid(axis.x, self.grid_size), wall_line)
        return Point(wall_line, snap_to_grid(axis.y, self.grid_size))

    def _collides(self, bounds: Bounds, pieces: Sequence[DungeonPiece], source: DungeonPiece) -> bool:
        for other in pieces:
            if other is source:
                continue
            if bounds.overlaps(other.bounds, padding=self.grid_size):
                return True
        return False

    def try_add_piece_in_direction(
        self,
        source: DungeonPiece,
        direction: Direction,
        pieces: Sequence[DungeonPiece],
    ) -> Optional[Placement]:
        """Attempt to attach a corridor and a new room to ``source``.

        Returns None when either new piece would overlap (padded by one grid
        cell) anything other than ``source``; nothing is modified in that case.
        """
        origin = self.connection_point(source.bounds, direction)
        corridor = self.build_corridor(origin, direction)
        room = self._place_room(corridor.bounds, direction)

        for candidate in (corridor, room):
            if self._collides(candidate.bounds, pieces, source):
                logger.debug(
                    "Rejected %s %s of (%s, %s): overlaps existing piece",
                    candidate.kind.value,
                    direction.value,
                    source.bounds.x,
                    source.bounds.y,
                )
                return None
            if self.canvas is not None and not candidate.bounds.contained_in(self.canvas):
                logger.debug("Rejected %s %s: leaves canvas", candidate.kind.value, direction.value)
                return None

        room_facing = direction.opposite
        source_line = source.bounds.edge(direction)
        room_line = room.bounds.edge(room_facing)

        source_door = self._doorway_center(corridor.bounds, direction, source_line)
        room_door = self._doorway_center(corridor.bounds, direction, room_line)
        remove_connecting_walls(source, direction, source_door, self.grid_size)
        remove_connecting_walls(room, room_facing, room_door, self.grid_size)

        door = make_door(source_door, direction, self.grid_size, self.id_factory)
        logger.debug(
            "Placed corridor %s with room at (%s, %s) %sx%s; door at (%s, %s)",
            direction.value,
            room.bounds.x,
            room.bounds.y,
            room.bounds.width,
            room.bounds.height,
            door.x,
            door.y,
        )
        return Placement(corridor=corridor, room=room, door=door)


__all__ = ["ConnectionBuilder", "Placement"]
