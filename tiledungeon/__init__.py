"""Dungeon map generation and spritesheet rendering."""

__version__ = "0.3.0"

from tiledungeon.dungeon_gen import (
    Tile,
    DungeonMap,
    DungeonGenerationError,
    GeneratedMap,
    Position,
    Rect,
    RoomConfig,
    create_map,
    generate_map,
)
from tiledungeon.config import ConfigError, MapConfig, load_config
from tiledungeon.renderer import (
    Image,
    Spritesheet,
    SpritesheetError,
    create_dungeon_image,
    overlay_image,
    save_image,
)
from tiledungeon.sprite import Sprite, SpriteVariants
from tiledungeon.pathfinding import flood_fill, is_connected
from tiledungeon.ron import RonError
