"""
Map configuration loading.

A config file names the output size, the tile size, the spritesheet
coordinates of every tile kind and the room generation limits:

    (
        width: 640,
        height: 480,
        tile_size: 16,
        wall_tile_h: (0, 0),
        wall_tile_v_right: (16, 0),
        wall_tile_v_left: (32, 0),
        floor_tile: [(48, 0), (64, 0)],   // several variants, picked at random
        max_room_size: 10,
        min_room_size: 4,
        max_rooms: 8,
        min_rooms: 4,
    )

RON is the native format; YAML files (.yaml / .yml) are accepted as well.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from . import ron
from .dungeon_gen import MIN_ROOM_SIZE, RoomConfig, Tile
from .sprite import SpriteVariants

DEFAULT_CONFIG_PATH = "config.ron"
DEFAULT_MAX_ATTEMPTS = 1000

# One or more (x, y) pixel coordinates in the spritesheet
SpriteCoordinates = Tuple[Tuple[int, int], ...]


class ConfigError(ValueError):
    """Raised when a config file is structurally valid but its contents aren't."""


@dataclass(frozen=True)
class MapConfig:
    width: int
    height: int
    tile_size: int
    wall_tile_h: SpriteCoordinates
    wall_tile_v_right: SpriteCoordinates
    wall_tile_v_left: SpriteCoordinates
    floor_tile: SpriteCoordinates
    max_room_size: int
    min_room_size: int
    max_rooms: int
    min_rooms: int
    wall_tile_bottom: Optional[SpriteCoordinates] = None
    empty_tile: Optional[SpriteCoordinates] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    seed: Optional[int] = None

    @property
    def cols(self) -> int:
        return self.width // self.tile_size

    @property
    def rows(self) -> int:
        return self.height // self.tile_size

    @property
    def room_config(self) -> RoomConfig:
        return RoomConfig(
            max_room_size=self.max_room_size,
            min_room_size=self.min_room_size,
            max_rooms=self.max_rooms,
            min_rooms=self.min_rooms,
            max_attempts=self.max_attempts,
        )

    @property
    def sprites(self) -> Dict[Tile, SpriteVariants]:
        """Sprite variants for every tile kind that gets drawn."""

        def variants(coordinates: SpriteCoordinates) -> SpriteVariants:
            return SpriteVariants.from_coordinates(coordinates, self.tile_size)

        horizontal = variants(self.wall_tile_h)
        sprites: Dict[Tile, SpriteVariants] = {
            Tile.FLOOR: variants(self.floor_tile),
            Tile.WALL_TOP: horizontal,
            Tile.WALL_BOTTOM: (
                variants(self.wall_tile_bottom)
                if self.wall_tile_bottom is not None
                else horizontal
            ),
            Tile.WALL_LEFT: variants(self.wall_tile_v_left),
            Tile.WALL_RIGHT: variants(self.wall_tile_v_right),
        }
        if self.empty_tile is not None:
            sprites[Tile.NOTHING] = variants(self.empty_tile)
        return sprites

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "MapConfig":
        """Validates parsed config data and builds a MapConfig."""
        if not isinstance(raw, Mapping):
            raise ConfigError(
                f"Config must be a struct of named fields, got {type(raw).__name__}"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in raw if key not in known)
        if unknown:
            raise ConfigError(f"Unknown config field(s): {', '.join(unknown)}")

        required = [f.name for f in fields(cls) if f.name not in _OPTIONAL_FIELDS]
        missing = [name for name in required if name not in raw]
        if missing:
            raise ConfigError(f"Missing config field(s): {', '.join(missing)}")

        values: Dict[str, Any] = {}
        for name in _INT_FIELDS:
            if name in raw:
                values[name] = _positive_int(name, raw[name])
        for name in _SPRITE_FIELDS:
            if raw.get(name) is not None:
                values[name] = _sprite_coordinates(name, raw[name])

        seed = raw.get("seed")
        if seed is not None:
            if isinstance(seed, bool) or not isinstance(seed, int):
                raise ConfigError(f"seed must be an integer, got {seed!r}")
            values["seed"] = seed

        config = cls(**values)
        config._check_consistency()
        return config

    def _check_consistency(self) -> None:
        if self.min_room_size > self.max_room_size:
            raise ConfigError(
                f"min_room_size ({self.min_room_size}) is larger than "
                f"max_room_size ({self.max_room_size})"
            )
        if self.min_rooms > self.max_rooms:
            raise ConfigError(
                f"min_rooms ({self.min_rooms}) is larger than max_rooms ({self.max_rooms})"
            )
        if self.min_room_size < MIN_ROOM_SIZE:
            raise ConfigError(
                f"min_room_size must be at least {MIN_ROOM_SIZE} so rooms have floor "
                f"inside their walls, got {self.min_room_size}"
            )
        for name in ("width", "height"):
            if getattr(self, name) % self.tile_size:
                raise ConfigError(
                    f"{name} ({getattr(self, name)}) is not a multiple of "
                    f"tile_size ({self.tile_size})"
                )
        needed = self.max_room_size + 2
        if self.cols < needed or self.rows < needed:
            raise ConfigError(
                f"A {self.cols}x{self.rows} tile map can't hold rooms of size "
                f"{self.max_room_size}; it needs at least {needed}x{needed} tiles"
            )


_INT_FIELDS = (
    "width",
    "height",
    "tile_size",
    "max_room_size",
    "min_room_size",
    "max_rooms",
    "min_rooms",
    "max_attempts",
)
_SPRITE_FIELDS = (
    "wall_tile_h",
    "wall_tile_v_right",
    "wall_tile_v_left",
    "floor_tile",
    "wall_tile_bottom",
    "empty_tile",
)
_OPTIONAL_FIELDS = {"wall_tile_bottom", "empty_tile", "max_attempts", "seed"}


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _coordinate(name: str, value: Any) -> Tuple[int, int]:
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise ConfigError(f"{name} must be an (x, y) pair, got {value!r}")
    x, y = value
    for part in (x, y):
        if isinstance(part, bool) or not isinstance(part, int) or part < 0:
            raise ConfigError(
                f"{name} coordinates must be non-negative integers, got {value!r}"
            )
    return (x, y)


def _sprite_coordinates(name: str, value: Any) -> SpriteCoordinates:
    """
    Accepts a single (x, y) pair or a list of pairs.

    YAML has no tuples, so there a single pair is a two-element list
    of integers and variants are a list of such lists.
    """
    if isinstance(value, tuple) or (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(part, int) for part in value)
    ):
        return (_coordinate(name, value),)
    if isinstance(value, list):
        if not value:
            raise ConfigError(f"{name} needs at least one (x, y) pair")
        return tuple(_coordinate(name, item) for item in value)
    raise ConfigError(f"{name} must be an (x, y) pair or a list of pairs, got {value!r}")


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> MapConfig:
    """
    Loads and validates a map config file.

    Raises:
        FileNotFoundError: If the file does not exist
        ron.RonError: If a .ron file can't be parsed
        ConfigError: If the contents are invalid or the format unsupported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in (".ron", ".yaml", ".yml"):
        raise ConfigError(
            f"Unsupported config format '{path.suffix}' (use .ron, .yaml or .yml)"
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            if suffix == ".ron":
                raw = ron.load(f)
            else:
                raw = yaml.safe_load(f)
    except UnicodeDecodeError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    return MapConfig.from_dict(raw if raw is not None else {})
