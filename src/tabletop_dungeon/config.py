from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel, to_snake

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"

_ENV_FIELDS = {
    "DUNGEON_NUM_ROOMS": "num_rooms",
    "DUNGEON_MIN_ROOM_SIZE": "min_room_size",
    "DUNGEON_MAX_ROOM_SIZE": "max_room_size",
    "DUNGEON_GRID_SIZE": "grid_size",
    "DUNGEON_CANVAS_WIDTH": "canvas_width",
    "DUNGEON_CANVAS_HEIGHT": "canvas_height",
    "DUNGEON_WALL_COLOR": "wall_color",
    "DUNGEON_WALL_SIZE": "wall_size",
    "DUNGEON_SEED": "seed",
}


class _SettingsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class CorridorSpec(_SettingsModel):
    """Fixed corridor geometry, in grid cells."""

    length_cells: int = Field(4, ge=1, description="Corridor length along its direction of travel")
    width_cells: int = Field(1, ge=1, description="Corridor width across its direction of travel")


class RetryPolicy(_SettingsModel):
    """Best-effort placement budget.

    The growth loop gives up after ``num_rooms * attempts_per_room`` failed
    iterations, or earlier once failures without progress exceed
    ``early_exit_fraction`` of that budget.
    """

    attempts_per_room: int = Field(10, ge=1)
    early_exit_fraction: float = Field(0.5, gt=0.0, le=1.0)

    def budget(self, num_rooms: int) -> int:
        return num_rooms * self.attempts_per_room

    def early_exit_threshold(self, num_rooms: int) -> float:
        return self.budget(num_rooms) * self.early_exit_fraction


class GeneratorSettings(_SettingsModel):
    """Construction parameters of the dungeon generator.

    Accepts snake_case names or the camelCase names used by the tabletop
    front end (``numRooms``, ``gridSize``...).
    """

    num_rooms: int = Field(..., ge=1, description="Target room count (best effort)")
    min_room_size: int = Field(3, ge=1, description="Smallest room edge, in cells")
    max_room_size: int = Field(8, ge=1, description="Largest room edge, in cells")
    grid_size: int = Field(50, gt=0, description="Grid cell edge length in pixels")
    canvas_width: int = Field(1920, gt=0)
    canvas_height: int = Field(1080, gt=0)
    wall_color: str = Field("#ff0000", pattern=HEX_COLOR)
    wall_size: int = Field(8, gt=0, description="Stroke width of every wall drawing")
    corridor: CorridorSpec = Field(default_factory=CorridorSpec)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    seed: Optional[Union[int, str]] = None
    constrain_to_canvas: bool = Field(False, description="Reject pieces that leave the canvas")

    @model_validator(mode="after")
    def _room_size_range(self) -> "GeneratorSettings":
        if self.min_room_size > self.max_room_size:
            raise ValueError(
                f"min_room_size ({self.min_room_size}) must not exceed max_room_size ({self.max_room_size})"
            )
        return self

    @classmethod
    def create(cls, data: Optional[Mapping[str, Any]] = None, **overrides: Any) -> "GeneratorSettings":
        """Validate ``data`` merged with ``overrides``; raise ConfigurationError on failure."""
        merged = _normalise_keys(dict(data or {}))
        merged.update(_normalise_keys(overrides))
        try:
            return cls.model_validate(merged)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid dungeon generator settings: {exc}") from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> "GeneratorSettings":
        """Build settings from DUNGEON_* environment variables; unset ones keep defaults."""
        data: Dict[str, Any] = {"num_rooms": 5}
        for var, name in _ENV_FIELDS.items():
            raw = os.getenv(var)
            if raw is None or raw == "":
                continue
            data[name] = _coerce_seed(raw) if name == "seed" else raw
        logger.debug("Settings from environment: %s", data)
        return cls.create(data, **overrides)

    @classmethod
    def from_yaml(
        cls, path: Path, defaults: Optional[Mapping[str, Any]] = None, **overrides: Any
    ) -> "GeneratorSettings":
        """Load settings from a YAML mapping, optionally nested under ``dungeon:``.

        ``defaults`` fill keys the file leaves out; ``overrides`` beat the file.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Expected a mapping in {path}, got {type(raw).__name__}")
        if isinstance(raw.get("dungeon"), dict):
            raw = raw["dungeon"]
        logger.info("Loaded dungeon settings from %s", path)
        data = _normalise_keys(defaults or {})
        data.update(_normalise_keys(raw))
        return cls.create(data, **overrides)


def _normalise_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            value = _normalise_keys(value)
        out[to_snake(str(key))] = value
    return out


def _coerce_seed(raw: str) -> Union[int, str]:
    try:
        return int(raw)
    except ValueError:
        return raw


def load_settings(
    path: Optional[Path] = None,
    defaults: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> GeneratorSettings:
    """Defaults, then the optional YAML file, then explicit overrides (later wins)."""
    if path is None:
        return GeneratorSettings.create(defaults, **overrides)
    return GeneratorSettings.from_yaml(path, defaults, **overrides)


__all__ = ["CorridorSpec", "GeneratorSettings", "RetryPolicy", "load_settings"]
