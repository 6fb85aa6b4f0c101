from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .config import GeneratorSettings, load_settings
from .diagnostics import diagnose
from .exceptions import ConfigurationError
from .generator import DungeonGenerator

logger = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    # -v flags win over DUNGEON_LOG_LEVEL
    level_name = os.getenv("DUNGEON_LOG_LEVEL")
    if level_name and not verbosity:
        level = getattr(logging, level_name.upper(), level)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tabletop-dungeon",
        description="Generate a dungeon layout as wall drawings and doors (JSON on stdout)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file")
    parser.add_argument(
        "--rooms", type=int, default=None, help="Target number of rooms (default 5 unless the config file sets one)"
    )
    parser.add_argument("--min-room-size", type=int, default=None, help="Smallest room edge in cells")
    parser.add_argument("--max-room-size", type=int, default=None, help="Largest room edge in cells")
    parser.add_argument("--grid-size", type=int, default=None, help="Grid cell size in pixels")
    parser.add_argument("--canvas-width", type=int, default=None)
    parser.add_argument("--canvas-height", type=int, default=None)
    parser.add_argument("--seed", default=None, help="Seed for a reproducible layout")
    parser.add_argument(
        "--diagnose",
        action="store_true",
        help="Print a layout health report instead of the layout; exit 1 on problems",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GeneratorSettings:
    overrides: Dict[str, Any] = {
        "num_rooms": args.rooms,
        "min_room_size": args.min_room_size,
        "max_room_size": args.max_room_size,
        "grid_size": args.grid_size,
        "canvas_width": args.canvas_width,
        "canvas_height": args.canvas_height,
        "seed": int(args.seed) if args.seed is not None and args.seed.lstrip("-").isdigit() else args.seed,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    # a config file may set its own room count; flags still win
    return load_settings(args.config, defaults={"num_rooms": 5}, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    _setup_logging(args.verbose)

    try:
        settings = build_settings(args)
    except (ConfigurationError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    result = DungeonGenerator(settings).generate()
    if args.diagnose:
        report = diagnose(result, settings.grid_size)
        print(json.dumps(report.to_dict(), indent=2))
        return 0 if report.ok else 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
