import math

import pytest

from tabletop_dungeon.collision import (
    Circle,
    check_wall_collision,
    circle_line_collision,
    door_blocking_segment,
    find_nearest_valid_position,
    is_near_door,
    vision_blocking_segments,
)
from tabletop_dungeon.geometry import Point, Segment
from tabletop_dungeon.output import Door, DoorOrientation, Drawing


def wall(*points):
    return Drawing(points=list(points), color="#ff0000", size=8)


def door(x, y, orientation=DoorOrientation.HORIZONTAL, **kw):
    return Door(x=x, y=y, orientation=orientation, size=50, **kw)


def test_closed_door_segment_and_open_door_has_none():
    seg = door_blocking_segment(door(100, 200))
    assert seg == Segment(Point(75, 200), Point(125, 200))
    assert door_blocking_segment(door(100, 200, is_open=True)) is None


def test_vertical_door_segment():
    seg = door_blocking_segment(door(100, 200, DoorOrientation.VERTICAL))
    assert seg == Segment(Point(100, 175), Point(100, 225))


def test_locked_door_blocks_only_while_closed():
    assert door_blocking_segment(door(0, 0, is_locked=True)) is not None
    assert door_blocking_segment(door(0, 0, is_locked=True, is_open=True)) is None


@pytest.mark.parametrize(
    "circle,expected",
    [
        (Circle(0, 5, 5), True),  # tangent counts as touching
        (Circle(0, 6, 5), False),
        (Circle(0, 0, 1), True),
        (Circle(14, 0, 5), True),  # beyond the end, within radius of the endpoint
        (Circle(16, 0, 5), False),
        (Circle(-14, 3, 5), True),
    ],
)
def test_circle_line_collision_clamps_to_segment(circle, expected):
    seg = Segment(Point(-10, 0), Point(10, 0))
    assert circle_line_collision(circle, seg) is expected


def test_zero_length_segment_is_a_point():
    seg = Segment(Point(0, 0), Point(0, 0))
    assert circle_line_collision(Circle(3, 4, 5), seg)
    assert not circle_line_collision(Circle(3, 4, 4.9), seg)


def test_check_wall_collision_walks_every_point_pair():
    drawings = [wall(0, 0, 100, 0, 100, 100)]
    assert check_wall_collision(50, 3, 10, drawings, [])
    assert not check_wall_collision(50, 20, 10, drawings, [])
    assert check_wall_collision(103, 50, 10, drawings, [])


def test_non_wall_drawings_do_not_block():
    sketch = Drawing(tool="pen", points=[0, 0, 100, 0], color="#000000", size=2)
    assert not check_wall_collision(50, 0, 10, [sketch], [])


def test_doors_block_until_opened():
    closed = door(100, 200)
    opened = door(100, 200, is_open=True)
    assert check_wall_collision(100, 203, 10, [], [closed])
    assert not check_wall_collision(100, 203, 10, [], [opened])
    assert len(vision_blocking_segments([wall(0, 0, 10, 0)], [closed, opened])) == 2


def test_nearest_valid_position_returns_free_target_unchanged():
    assert find_nearest_valid_position(50, 50, 10, [wall(0, 0, 100, 0)], []) == Point(50, 50)


def test_nearest_valid_position_moves_off_a_wall():
    drawings = [wall(-100, 0, 100, 0)]
    pos = find_nearest_valid_position(0, 0, 10, drawings, [])
    assert pos != Point(0, 0)
    assert not check_wall_collision(pos.x, pos.y, 10, drawings, [])
    assert math.hypot(pos.x, pos.y) == pytest.approx(10)


def test_nearest_valid_position_gives_up_with_target():
    drawings = [wall(-100, 0, 100, 0)]
    assert find_nearest_valid_position(0, 0, 10, drawings, [], max_radius=3) == Point(0, 0)


def test_is_near_door_uses_euclidean_range():
    d = door(0, 0)
    assert is_near_door(30, 40, d)
    assert not is_near_door(30, 41, d)
    assert is_near_door(60, 0, d, interaction_range=60)
