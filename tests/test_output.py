from tabletop_dungeon.geometry import Direction, Point
from tabletop_dungeon.output import (
    DoorOrientation,
    Drawing,
    SwingDirection,
    make_door,
    pieces_to_drawings,
)
from tabletop_dungeon.templates import rectangular_room


def test_make_door_for_north_and_east_walls():
    d = make_door(Point(100.0, 200.0), Direction.NORTH, 50, id_factory=lambda: "door-1")
    assert d.id == "door-1"
    assert (d.x, d.y) == (100, 200)
    assert isinstance(d.x, int)
    assert d.orientation is DoorOrientation.HORIZONTAL
    assert d.swing_direction is SwingDirection.RIGHT
    assert d.size == 50 and d.thickness == 12
    assert not d.is_open and not d.is_locked

    v = make_door(Point(300, 150), Direction.WEST, 50)
    assert v.orientation is DoorOrientation.VERTICAL
    assert v.swing_direction is SwingDirection.DOWN


def test_door_serialises_with_camel_case_keys():
    data = make_door(Point(0, 0), Direction.SOUTH, 40, id_factory=lambda: "d").model_dump(mode="json", by_alias=True)
    assert data == {
        "id": "d",
        "x": 0,
        "y": 0,
        "orientation": "horizontal",
        "isOpen": False,
        "isLocked": False,
        "size": 40,
        "thickness": 10,
        "swingDirection": "right",
    }


def test_drawing_ids_default_to_uuids():
    a = Drawing(points=[0, 0, 1, 1], color="#fff", size=1)
    b = Drawing(points=[0, 0, 1, 1], color="#fff", size=1)
    assert a.id != b.id and len(a.id) == 36
    assert a.tool == "wall"


def test_pieces_to_drawings_emits_one_drawing_per_segment():
    room = rectangular_room(0, 0, 2, 2, 50)
    drawings = pieces_to_drawings([room], "#00ff00", 4)
    assert [d.points for d in drawings] == [
        [0, 0, 100, 0],
        [100, 0, 100, 100],
        [0, 100, 100, 100],
        [0, 0, 0, 100],
    ]
    assert all(d.color == "#00ff00" and d.size == 4 and d.tool == "wall" for d in drawings)
