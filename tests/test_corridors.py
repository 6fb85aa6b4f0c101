import pytest

from tabletop_dungeon.corridors import ConnectionBuilder
from tabletop_dungeon.geometry import Bounds, Direction, Point
from tabletop_dungeon.output import DoorOrientation
from tabletop_dungeon.pieces import PieceKind
from tabletop_dungeon.rng import RandomSource
from tabletop_dungeon.templates import RoomTemplateRegistry, rectangular_room
from tabletop_dungeon.walls import NO_WALL, SolidWall, SplitWall


@pytest.fixture
def builder():
    registry = RoomTemplateRegistry.default(3, 3, 50)
    return ConnectionBuilder(registry, RandomSource(1), 50)


def test_connection_point_is_snapped_edge_midpoint(builder):
    bounds = Bounds(500, 500, 150, 100)
    assert builder.connection_point(bounds, Direction.NORTH) == Point(600, 500)
    assert builder.connection_point(bounds, Direction.SOUTH) == Point(600, 600)
    assert builder.connection_point(bounds, Direction.EAST) == Point(650, 550)
    assert builder.connection_point(bounds, Direction.WEST) == Point(500, 550)


def test_corridor_has_solid_sides_and_open_ends(builder):
    corridor = builder.build_corridor(Point(600, 500), Direction.NORTH)
    assert corridor.kind is PieceKind.CORRIDOR
    assert corridor.bounds == Bounds(575, 300, 50, 200)
    assert corridor.walls[Direction.NORTH] is NO_WALL
    assert corridor.walls[Direction.SOUTH] is NO_WALL
    assert corridor.walls[Direction.EAST] == SolidWall(Point(625, 300), Point(625, 500))
    assert corridor.walls[Direction.WEST] == SolidWall(Point(575, 300), Point(575, 500))

    east = builder.build_corridor(Point(650, 550), Direction.EAST)
    assert east.bounds == Bounds(650, 525, 200, 50)
    assert east.walls[Direction.EAST] is NO_WALL
    assert east.walls[Direction.NORTH] == SolidWall(Point(650, 525), Point(850, 525))


def test_placement_north_carves_both_ends(builder):
    source = rectangular_room(500, 500, 3, 3, 50)
    placement = builder.try_add_piece_in_direction(source, Direction.NORTH, [source])
    assert placement is not None

    assert placement.corridor.bounds == Bounds(575, 300, 50, 200)
    assert placement.room.bounds == Bounds(550, 150, 150, 150)
    assert source.walls[Direction.NORTH] == SplitWall(Point(500, 500), Point(575, 500), Point(625, 500), Point(650, 500))
    assert placement.room.walls[Direction.SOUTH] == SplitWall(
        Point(550, 300), Point(575, 300), Point(625, 300), Point(700, 300)
    )
    assert (placement.door.x, placement.door.y) == (600, 500)
    assert placement.door.orientation is DoorOrientation.HORIZONTAL


def test_placement_west_uses_vertical_door(builder):
    source = rectangular_room(500, 500, 3, 3, 50)
    placement = builder.try_add_piece_in_direction(source, Direction.WEST, [source])
    assert placement.room.bounds == Bounds(150, 550, 150, 150)
    assert placement.door.orientation is DoorOrientation.VERTICAL
    assert (placement.door.x, placement.door.y) == (500, 600)
    assert isinstance(source.walls[Direction.WEST], SplitWall)


def test_blocked_placement_leaves_walls_alone(builder):
    source = rectangular_room(500, 500, 3, 3, 50)
    blocker = rectangular_room(550, 100, 3, 3, 50)
    assert builder.try_add_piece_in_direction(source, Direction.NORTH, [source, blocker]) is None
    assert source.walls[Direction.NORTH] == SolidWall(Point(500, 500), Point(650, 500))


def test_canvas_bounds_reject_placements_that_leave_it():
    registry = RoomTemplateRegistry.default(3, 3, 50)
    builder = ConnectionBuilder(registry, RandomSource(1), 50, canvas=Bounds(400, 400, 800, 800))
    source = rectangular_room(500, 500, 3, 3, 50)
    assert builder.try_add_piece_in_direction(source, Direction.NORTH, [source]) is None
    assert builder.try_add_piece_in_direction(source, Direction.EAST, [source]) is not None
