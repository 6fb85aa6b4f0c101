from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("tabletop-dungeon")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"

from .collision import (  # noqa: E402
    check_wall_collision,
    circle_line_collision,
    door_blocking_segment,
    find_nearest_valid_position,
    is_near_door,
    vision_blocking_segments,
)
from .config import CorridorSpec, GeneratorSettings, RetryPolicy, load_settings  # noqa: E402
from .exceptions import ConfigurationError, DungeonError  # noqa: E402
from .generator import DungeonGenerator, GenerationResult, generate_dungeon  # noqa: E402
from .geometry import Bounds, Direction, Point, Segment  # noqa: E402
from .output import Door, DoorOrientation, Drawing, SwingDirection  # noqa: E402

__all__ = [
    "__version__",
    "Bounds",
    "ConfigurationError",
    "CorridorSpec",
    "Direction",
    "Door",
    "DoorOrientation",
    "Drawing",
    "DungeonError",
    "DungeonGenerator",
    "GenerationResult",
    "GeneratorSettings",
    "Point",
    "RetryPolicy",
    "Segment",
    "SwingDirection",
    "check_wall_collision",
    "circle_line_collision",
    "door_blocking_segment",
    "find_nearest_valid_position",
    "generate_dungeon",
    "is_near_door",
    "load_settings",
    "vision_blocking_segments",
]
