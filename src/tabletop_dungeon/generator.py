from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .config import GeneratorSettings
from .corridors import ConnectionBuilder
from .geometry import Bounds, snap_to_grid
from .output import Door, Drawing, IdFactory, new_id, pieces_to_drawings
from .pieces import DungeonPiece, PieceArena
from .rng import RandomSource
from .templates import RoomTemplateRegistry

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    drawings: List[Drawing] = field(default_factory=list)
    doors: List[Door] = field(default_factory=list)
    pieces: Tuple[DungeonPiece, ...] = ()
    # (source room, corridor, new room) indices into ``pieces``
    connections: List[Tuple[int, int, int]] = field(default_factory=list)
    rooms_added: int = 0

    @property
    def rooms(self) -> List[Bounds]:
        return [p.bounds for p in self.pieces if p.is_room]

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "drawings": [d.model_dump(mode="json", by_alias=True) for d in self.drawings],
            "doors": [d.model_dump(mode="json", by_alias=True) for d in self.doors],
        }


class DungeonGenerator:
    """Organic-growth dungeon generator.

    Algorithm:
    - Seed one room centred on the canvas.
    - Repeatedly pick a room at random and try its unused directions in
      random order; the first direction that fits gets a corridor and a new
      room, with a doorway carved on both ends of the corridor.
    - Stop at the requested room count or when the retry budget runs out.
    - Flatten walls into wall drawings; one door per corridor.

    Each room is attached through exactly one new corridor, so the result is
    a tree rooted at the seed room. Fewer rooms than requested is a normal
    outcome on crowded layouts.
    """

    def __init__(
        self,
        settings: Union[GeneratorSettings, Mapping[str, Any], None] = None,
        rng: Optional[RandomSource] = None,
        templates: Optional[RoomTemplateRegistry] = None,
        id_factory: IdFactory = new_id,
        **overrides: Any,
    ) -> None:
        if isinstance(settings, GeneratorSettings) and not overrides:
            self.settings = settings
        elif isinstance(settings, GeneratorSettings):
            self.settings = GeneratorSettings.create(settings.model_dump(), **overrides)
        else:
            self.settings = GeneratorSettings.create(settings, **overrides)
        s = self.settings
        self.rng = rng if rng is not None else RandomSource(s.seed)
        self.templates = templates or RoomTemplateRegistry.default(s.min_room_size, s.max_room_size, s.grid_size)
        self.id_factory = id_factory
        canvas = Bounds(0, 0, s.canvas_width, s.canvas_height) if s.constrain_to_canvas else None
        self.builder = ConnectionBuilder(
            self.templates,
            self.rng,
            s.grid_size,
            corridor_length_cells=s.corridor.length_cells,
            corridor_width_cells=s.corridor.width_cells,
            canvas=canvas,
            id_factory=id_factory,
        )

    def _seed_room(self) -> DungeonPiece:
        s = self.settings
        room = self.templates.create_room(0, 0, self.rng)
        x = snap_to_grid(s.canvas_width / 2 - room.bounds.width / 2, s.grid_size)
        y = snap_to_grid(s.canvas_height / 2 - room.bounds.height / 2, s.grid_size)
        return room.moved_to(x, y)

    def generate(self) -> GenerationResult:
        s = self.settings
        arena = PieceArena()
        doors: List[Door] = []
        arena.add(self._seed_room())
        rooms_added = 1

        budget = s.retry.budget(s.num_rooms)
        early_exit = s.retry.early_exit_threshold(s.num_rooms)
        retries = 0
        logger.debug("Growing %d rooms (retry budget %d, early exit after %s)", s.num_rooms, budget, early_exit)

        while rooms_added < s.num_rooms and retries < budget:
            source_index = self.rng.choice(arena.room_indices())
            source = arena[source_index]
            placed = False
            for direction in self.rng.shuffled(arena.unused_directions(source_index)):
                placement = self.builder.try_add_piece_in_direction(source, direction, arena.pieces())
                if placement is None:
                    continue
                corridor_index = arena.add(placement.corridor)
                room_index = arena.add(placement.room, used={direction.opposite})
                arena.mark_used(source_index, direction)
                arena.connect(source_index, corridor_index, room_index)
                doors.append(placement.door)
                rooms_added += 1
                retries = 0
                placed = True
                break
            if not placed:
                retries += 1
                if retries > early_exit:
                    logger.debug("No progress after %d retries; stopping early", retries)
                    break

        if rooms_added < s.num_rooms:
            logger.warning("Placed %d of %d requested rooms", rooms_added, s.num_rooms)

        pieces = arena.pieces()
        drawings = pieces_to_drawings(pieces, s.wall_color, s.wall_size, self.id_factory)
        logger.info(
            "Generated dungeon: %d rooms, %d corridors, %d wall drawings, %d doors",
            rooms_added,
            len(arena.connections),
            len(drawings),
            len(doors),
        )
        return GenerationResult(
            drawings=drawings,
            doors=doors,
            pieces=pieces,
            connections=list(arena.connections),
            rooms_added=rooms_added,
        )


def generate_dungeon(num_rooms: int, *, seed: Union[int, str, None] = None, **options: Any) -> GenerationResult:
    """One-shot helper: ``generate_dungeon(5, gridSize=50)``."""
    return DungeonGenerator(num_rooms=num_rooms, seed=seed, **options).generate()


__all__ = ["DungeonGenerator", "GenerationResult", "generate_dungeon"]
