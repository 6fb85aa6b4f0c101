from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .geometry import Bounds, Direction, Point
from .walls import NO_WALL, SolidWall, WallSegment


class PieceKind(str, Enum):
    ROOM = "room"
    CORRIDOR = "corridor"


def solid_walls_for(bounds: Bounds) -> Dict[Direction, WallSegment]:
    """One full-length solid wall along each edge of ``bounds``."""
    x, y, r, b = bounds.x, bounds.y, bounds.right, bounds.bottom
    return {
        Direction.NORTH: SolidWall(Point(x, y), Point(r, y)),
        Direction.EAST: SolidWall(Point(r, y), Point(r, b)),
        Direction.SOUTH: SolidWall(Point(x, b), Point(r, b)),
        Direction.WEST: SolidWall(Point(x, y), Point(x, b)),
    }


@dataclass
class DungeonPiece:
    """A room or corridor: bounds plus exactly one wall value per direction."""

    kind: PieceKind
    bounds: Bounds
    walls: Dict[Direction, WallSegment] = field(default_factory=dict)
    template_id: Optional[str] = None

    def __post_init__(self) -> None:
        for direction in Direction:
            self.walls.setdefault(direction, NO_WALL)

    @property
    def is_room(self) -> bool:
        return self.kind is PieceKind.ROOM

    def moved_to(self, x: float, y: float) -> "DungeonPiece":
        """Copy of this piece whose bounds start at ``(x, y)``, walls shifted along."""
        dx = x - self.bounds.x
        dy = y - self.bounds.y
        return DungeonPiece(
            kind=self.kind,
            bounds=self.bounds.moved_to(x, y),
            walls={d: w.translated(dx, dy) for d, w in self.walls.items()},
            template_id=self.template_id,
        )


class PieceArena:
    """Accepted pieces addressed by integer index.

    Used directions are tracked per index, and every successful placement
    records a ``(source_room, corridor, new_room)`` connection.
    """

    def __init__(self) -> None:
        self._pieces: List[DungeonPiece] = []
        self._used: List[Set[Direction]] = []
        self.connections: List[Tuple[int, int, int]] = []

    def __len__(self) -> int:
        return len(self._pieces)

    def __iter__(self) -> Iterator[DungeonPiece]:
        return iter(self._pieces)

    def __getitem__(self, index: int) -> DungeonPiece:
        return self._pieces[index]

    def add(self, piece: DungeonPiece, used: Optional[Set[Direction]] = None) -> int:
        self._pieces.append(piece)
        self._used.append(set(used or ()))
        return len(self._pieces) - 1

    def room_indices(self) -> List[int]:
        return [i for i, p in enumerate(self._pieces) if p.is_room]

    def used_directions(self, index: int) -> Set[Direction]:
        return set(self._used[index])

    def unused_directions(self, index: int) -> List[Direction]:
        return [d for d in Direction if d not in self._used[index]]

    def mark_used(self, index: int, direction: Direction) -> None:
        self._used[index].add(direction)

    def connect(self, source: int, corridor: int, room: int) -> None:
        self.connections.append((source, corridor, room))

    def pieces(self) -> Tuple[DungeonPiece, ...]:
        return tuple(self._pieces)


__all__ = ["DungeonPiece", "PieceArena", "PieceKind", "solid_walls_for"]
