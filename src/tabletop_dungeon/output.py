"""Flat output records handed to the tabletop state store.

``Drawing`` and ``Door`` serialise to the camelCase shapes the canvas layer
expects via ``model_dump(by_alias=True)``.
"""
from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Callable, Iterable, List, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .geometry import Direction, Point
from .pieces import DungeonPiece

logger = logging.getLogger(__name__)

Number = Union[int, float]
IdFactory = Callable[[], str]


def new_id() -> str:
    return str(uuid.uuid4())


def _num(value: float) -> Number:
    # keep grid-aligned coordinates as ints in the serialised output
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class DoorOrientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class SwingDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Drawing(_Record):
    id: str = Field(default_factory=new_id)
    tool: str = "wall"
    points: List[Number] = Field(..., description="Flat x0, y0, x1, y1, ... coordinate list")
    color: str
    size: Number


class Door(_Record):
    id: str = Field(default_factory=new_id)
    x: Number
    y: Number
    orientation: DoorOrientation
    is_open: bool = False
    is_locked: bool = False
    size: Number
    thickness: Number = 12
    swing_direction: SwingDirection = SwingDirection.RIGHT


def make_door(
    center: Point,
    direction: Direction,
    grid_size: int,
    id_factory: IdFactory = new_id,
) -> Door:
    """Closed, unlocked door spanning the doorway carved into the wall facing ``direction``."""
    if direction.is_horizontal:
        orientation, swing = DoorOrientation.HORIZONTAL, SwingDirection.RIGHT
    else:
        orientation, swing = DoorOrientation.VERTICAL, SwingDirection.DOWN
    return Door(
        id=id_factory(),
        x=_num(center.x),
        y=_num(center.y),
        orientation=orientation,
        size=grid_size,
        thickness=max(1, grid_size // 4),
        swing_direction=swing,
    )


def pieces_to_drawings(
    pieces: Iterable[DungeonPiece],
    color: str,
    size: Number,
    id_factory: IdFactory = new_id,
) -> List[Drawing]:
    """One wall ``Drawing`` per surviving sub-segment, in direction order per piece."""
    drawings: List[Drawing] = []
    for piece in pieces:
        for direction in Direction:
            for seg in piece.walls[direction].segments():
                drawings.append(
                    Drawing(
                        id=id_factory(),
                        tool="wall",
                        points=[_num(seg.start.x), _num(seg.start.y), _num(seg.end.x), _num(seg.end.y)],
                        color=color,
                        size=size,
                    )
                )
    logger.debug("Converted pieces into %d wall drawings", len(drawings))
    return drawings


__all__ = [
    "Door",
    "DoorOrientation",
    "Drawing",
    "IdFactory",
    "SwingDirection",
    "make_door",
    "new_id",
    "pieces_to_drawings",
]
