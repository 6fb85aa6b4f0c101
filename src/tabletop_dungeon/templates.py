from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from .geometry import Bounds
from .pieces import DungeonPiece, PieceKind, solid_walls_for
from .rng import RandomSource

logger = logging.getLogger(__name__)

# (x, y, width_cells, height_cells, grid_size) -> piece
RoomFactory = Callable[[float, float, int, int, int], DungeonPiece]


def rectangular_room(x: float, y: float, width_cells: int, height_cells: int, grid_size: int) -> DungeonPiece:
    bounds = Bounds(x, y, width_cells * grid_size, height_cells * grid_size)
    return DungeonPiece(
        kind=PieceKind.ROOM,
        bounds=bounds,
        walls=solid_walls_for(bounds),
        template_id="rectangular",
    )


@dataclass(frozen=True)
class RoomTemplate:
    id: str
    min_cells: int
    max_cells: int
    factory: RoomFactory


class RoomTemplateRegistry:
    """Pluggable room shapes.

    Usage:
      registry = RoomTemplateRegistry.default(min_cells=3, max_cells=8, grid_size=50)
      room = registry.create_room(0, 0, rng)
    """

    def __init__(self, grid_size: int) -> None:
        self.grid_size = grid_size
        self._templates: Dict[str, RoomTemplate] = {}

    @classmethod
    def default(cls, min_cells: int, max_cells: int, grid_size: int) -> "RoomTemplateRegistry":
        registry = cls(grid_size)
        registry.register(RoomTemplate("rectangular", min_cells, max_cells, rectangular_room))
        return registry

    def register(self, template: RoomTemplate) -> None:
        if template.id in self._templates:
            logger.warning("Replacing room template '%s'", template.id)
        self._templates[template.id] = template

    def get(self, template_id: str) -> RoomTemplate:
        return self._templates[template_id]

    def ids(self) -> List[str]:
        return list(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def create_room(self, x: float, y: float, rng: RandomSource) -> DungeonPiece:
        """Build a room at ``(x, y)`` from a uniformly chosen template.

        Width and height are drawn independently from the template's
        inclusive ``[min_cells, max_cells]`` range. All four walls start solid.
        """
        if not self._templates:
            raise ValueError("No room templates registered")
        template = rng.choice(list(self._templates.values()))
        width_cells = rng.randint(template.min_cells, template.max_cells)
        height_cells = rng.randint(template.min_cells, template.max_cells)
        logger.debug(
            "Template '%s' -> %dx%d cells at (%s, %s)", template.id, width_cells, height_cells, x, y
        )
        return template.factory(x, y, width_cells, height_cells, self.grid_size)


__all__ = ["RoomFactory", "RoomTemplate", "RoomTemplateRegistry", "rectangular_room"]
