"""Layout checks for generated dungeons.

Used by ``tabletop-dungeon --diagnose`` and by the test-suite to confirm that
a generated layout keeps its structural guarantees: grid alignment, padded
non-overlap, tree connectivity and one-cell doorways.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from .generator import GenerationResult
from .geometry import Bounds, Direction
from .pieces import DungeonPiece
from .walls import SplitWall

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticReport:
    grid_size: int
    rooms: int = 0
    corridors: int = 0
    wall_drawings: int = 0
    doors: int = 0
    misaligned_doors: List[Tuple[float, float]] = field(default_factory=list)
    off_grid_corners: List[Tuple[int, float, float]] = field(default_factory=list)
    overlapping_pairs: List[Tuple[int, int]] = field(default_factory=list)
    bad_doorway_gaps: List[float] = field(default_factory=list)
    connected_tree: bool = True

    @property
    def ok(self) -> bool:
        return self.connected_tree and not (
            self.misaligned_doors or self.off_grid_corners or self.overlapping_pairs or self.bad_doorway_gaps
        )

    def problems(self) -> List[str]:
        out = []
        if self.misaligned_doors:
            out.append(f"{len(self.misaligned_doors)} door(s) off the grid: {self.misaligned_doors}")
        if self.off_grid_corners:
            out.append(f"{len(self.off_grid_corners)} room corner(s) off the grid")
        if self.overlapping_pairs:
            out.append(f"overlapping pieces: {self.overlapping_pairs}")
        if self.bad_doorway_gaps:
            out.append(f"doorway gaps not one cell wide: {self.bad_doorway_gaps}")
        if not self.connected_tree:
            out.append("rooms do not form a connected tree")
        return out

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["ok"] = self.ok
        data["problems"] = self.problems()
        return data


def direction_between(source: Bounds, corridor: Bounds) -> Optional[Direction]:
    """Side of ``source`` a corridor leaves from, if it touches one."""
    if corridor.bottom == source.y:
        return Direction.NORTH
    if corridor.y == source.bottom:
        return Direction.SOUTH
    if corridor.x == source.right:
        return Direction.EAST
    if corridor.right == source.x:
        return Direction.WEST
    return None


def _on_grid(value: float, grid_size: int) -> bool:
    return float(value) % grid_size == 0


def _gap_width(piece: DungeonPiece, direction: Direction) -> Optional[float]:
    wall = piece.walls[direction]
    if not isinstance(wall, SplitWall):
        return None
    if direction.is_horizontal:
        return abs(wall.right_start.x - wall.left_end.x)
    return abs(wall.right_start.y - wall.left_end.y)


def _is_connected_tree(room_indices: List[int], connections: List[Tuple[int, int, int]]) -> bool:
    if not room_indices:
        return True
    if len(connections) != len(room_indices) - 1:
        return False
    parent = {i: i for i in room_indices}

    def find(a: int) -> int:
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    for source, _corridor, room in connections:
        if source not in parent or room not in parent:
            return False
        ra, rb = find(source), find(room)
        if ra == rb:
            return False
        parent[rb] = ra
    roots = {find(i) for i in room_indices}
    return len(roots) == 1


def diagnose(result: GenerationResult, grid_size: int) -> DiagnosticReport:
    pieces = result.pieces
    room_indices = [i for i, p in enumerate(pieces) if p.is_room]
    report = DiagnosticReport(
        grid_size=grid_size,
        rooms=len(room_indices),
        corridors=len(pieces) - len(room_indices),
        wall_drawings=sum(1 for d in result.drawings if d.tool == "wall"),
        doors=len(result.doors),
    )

    for door in result.doors:
        if not (_on_grid(door.x, grid_size) and _on_grid(door.y, grid_size)):
            report.misaligned_doors.append((door.x, door.y))

    for i in room_indices:
        for corner in pieces[i].bounds.corners():
            if not (_on_grid(corner.x, grid_size) and _on_grid(corner.y, grid_size)):
                report.off_grid_corners.append((i, corner.x, corner.y))

    adjacent: Set[Tuple[int, int]] = set()
    for source, corridor, room in result.connections:
        adjacent.update({(source, corridor), (corridor, source), (corridor, room), (room, corridor)})
        direction = direction_between(pieces[source].bounds, pieces[corridor].bounds)
        if direction is None:
            report.connected_tree = False
            continue
        for piece, side in ((pieces[source], direction), (pieces[room], direction.opposite)):
            gap = _gap_width(piece, side)
            if gap is not None and gap != grid_size:
                report.bad_doorway_gaps.append(gap)

    for a in range(len(pieces)):
        for b in range(a + 1, len(pieces)):
            if (a, b) in adjacent:
                continue
            if pieces[a].bounds.overlaps(pieces[b].bounds, padding=grid_size):
                report.overlapping_pairs.append((a, b))

    if report.connected_tree:
        report.connected_tree = _is_connected_tree(room_indices, result.connections)

    logger.debug("Diagnostics: ok=%s problems=%s", report.ok, report.problems())
    return report


__all__ = ["DiagnosticReport", "diagnose", "direction_between"]
