"""
Dungeon Generation Algorithm
============================

We scatter rectangular rooms over a fixed-size grid and join them with
L-shaped tunnels.

1. Start with a grid full of NOTHING tiles
2. Pick a target number of rooms between min_rooms and max_rooms
3. Until we have the target number of rooms (or run out of attempts):
   a. Pick a random room size and a random position that keeps a
      one tile margin around the room
   b. If the room would touch or overlap an existing room, throw it away
   c. Otherwise carve it: floor inside, walls along its edges
4. Connect every room to the next room placed, center to center, with a
   horizontal and a vertical tunnel (coin flip decides which goes first)
5. Surround any floor that is still open to the void with walls
6. Check that all the floor is reachable from all the other floor
"""

import random
import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple

import numpy as np

from .pathfinding import is_connected


class Tile(IntEnum):
    """
    Tile types for a generated map.

    Walls are named for the side of the room they are on,
    so a WALL_LEFT is on the west side of a room, facing east.
    """

    NOTHING = 0

    # Walkable tiles
    FLOOR = 1

    # Walls (non-walkable)
    WALL_TOP = 10
    WALL_BOTTOM = 11
    WALL_LEFT = 12
    WALL_RIGHT = 13


WALL_TILES = frozenset(
    {Tile.WALL_TOP, Tile.WALL_BOTTOM, Tile.WALL_LEFT, Tile.WALL_RIGHT}
)
WALKABLE_TILES = frozenset({Tile.FLOOR})


class DungeonGenerationError(RuntimeError):
    """Raised when a map satisfying the room constraints can't be built."""


@dataclass(frozen=True)
class Position:
    """A position in the dungeon grid, measured in tiles."""

    row: int
    column: int


@dataclass(frozen=True)
class Rect:
    """A room rectangle, measured in tiles. (x, y) is the top-left corner."""

    x: int
    y: int
    w: int
    h: int

    def intersects(self, other: "Rect") -> bool:
        # Inclusive on the far edge, so rooms that merely touch
        # count as intersecting and always keep a gap between them.
        return (
            self.x <= other.x + other.w
            and self.x + self.w >= other.x
            and self.y <= other.y + other.h
            and self.y + self.h >= other.y
        )

    def center(self) -> Position:
        return Position(row=self.y + self.h // 2, column=self.x + self.w // 2)


@dataclass(frozen=True)
class RoomConfig:
    max_room_size: int
    min_room_size: int
    max_rooms: int
    min_rooms: int
    max_attempts: int = 1000


# Type Definition
DungeonMap = np.ndarray


@dataclass
class GeneratedMap:
    tiles: DungeonMap
    rooms: List[Rect] = field(default_factory=list)
    attempts: int = 0

    @property
    def rows(self) -> int:
        return self.tiles.shape[0]

    @property
    def cols(self) -> int:
        return self.tiles.shape[1]


# Smallest room with a floor tile inside its walls
MIN_ROOM_SIZE = 3


def _check_room_config(cols: int, rows: int, room_config: RoomConfig) -> None:
    if room_config.min_room_size < MIN_ROOM_SIZE:
        raise ValueError(
            f"min_room_size must be at least {MIN_ROOM_SIZE}, got {room_config.min_room_size}"
        )
    if room_config.min_room_size > room_config.max_room_size:
        raise ValueError("min_room_size is larger than max_room_size")
    if room_config.min_rooms > room_config.max_rooms:
        raise ValueError("min_rooms is larger than max_rooms")
    if room_config.min_rooms < 1:
        raise ValueError("min_rooms must be at least 1")
    if room_config.max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    # One tile of margin on each side of the largest room
    needed = room_config.max_room_size + 2
    if cols < needed or rows < needed:
        raise ValueError(
            f"A {cols}x{rows} tile map is too small for rooms of size "
            f"{room_config.max_room_size} (need at least {needed}x{needed})"
        )


def _random_room(cols: int, rows: int, room_config: RoomConfig) -> Rect:
    """Picks a random room size and position, keeping a one tile margin."""
    w = random.randint(room_config.min_room_size, room_config.max_room_size)
    h = random.randint(room_config.min_room_size, room_config.max_room_size)
    x = random.randint(1, cols - w - 1)
    y = random.randint(1, rows - h - 1)
    return Rect(x, y, w, h)


def _carve_room(dungeon_map: DungeonMap, room: Rect) -> None:
    """Fills a room with floor and lines its edges with walls."""
    top, bottom = room.y, room.y + room.h - 1
    left, right = room.x, room.x + room.w - 1

    dungeon_map[top : bottom + 1, left : right + 1] = Tile.FLOOR
    dungeon_map[top, left : right + 1] = Tile.WALL_TOP
    dungeon_map[bottom, left : right + 1] = Tile.WALL_BOTTOM
    # Side walls win at the corners
    dungeon_map[top : bottom + 1, left] = Tile.WALL_LEFT
    dungeon_map[top : bottom + 1, right] = Tile.WALL_RIGHT


def _carve_h_tunnel(dungeon_map: DungeonMap, x1: int, x2: int, row: int) -> None:
    # Inclusive on both ends, so the elbow of an L-shaped tunnel is always floor
    dungeon_map[row, min(x1, x2) : max(x1, x2) + 1] = Tile.FLOOR


def _carve_v_tunnel(dungeon_map: DungeonMap, y1: int, y2: int, column: int) -> None:
    dungeon_map[min(y1, y2) : max(y1, y2) + 1, column] = Tile.FLOOR


def _connect_rooms(dungeon_map: DungeonMap, rooms: List[Rect]) -> None:
    """Joins each room to the next one placed with an L-shaped tunnel."""
    for room, next_room in zip(rooms, rooms[1:]):
        current = room.center()
        target = next_room.center()

        if random.random() < 0.5:
            # Horizontal first, then vertical
            _carve_h_tunnel(dungeon_map, target.column, current.column, target.row)
            _carve_v_tunnel(dungeon_map, target.row, current.row, current.column)
        else:
            # Vertical first, then horizontal
            _carve_v_tunnel(dungeon_map, target.row, current.row, target.column)
            _carve_h_tunnel(dungeon_map, target.column, current.column, current.row)


def _wall_facing(dungeon_map: DungeonMap, row: int, col: int) -> Tile:
    """
    Picks the wall type for a void tile that borders floor.

    Returns NOTHING if no floor is within one tile (8-neighbourhood).
    """
    rows, cols = dungeon_map.shape

    def is_floor(r: int, c: int) -> bool:
        return 0 <= r < rows and 0 <= c < cols and dungeon_map[r, c] == Tile.FLOOR

    if is_floor(row + 1, col):
        return Tile.WALL_TOP
    if is_floor(row - 1, col):
        return Tile.WALL_BOTTOM
    if is_floor(row, col + 1):
        return Tile.WALL_LEFT
    if is_floor(row, col - 1):
        return Tile.WALL_RIGHT
    if is_floor(row + 1, col - 1) or is_floor(row + 1, col + 1):
        return Tile.WALL_TOP
    if is_floor(row - 1, col - 1) or is_floor(row - 1, col + 1):
        return Tile.WALL_BOTTOM
    return Tile.NOTHING


def _enclose_floor(dungeon_map: DungeonMap) -> None:
    """Turns every void tile touching floor into a wall."""
    walls: List[Tuple[int, int, Tile]] = []
    for row, col in np.argwhere(dungeon_map == Tile.NOTHING):
        wall = _wall_facing(dungeon_map, int(row), int(col))
        if wall != Tile.NOTHING:
            walls.append((int(row), int(col), wall))

    # Apply afterwards so new walls don't influence their neighbours
    for row, col, wall in walls:
        dungeon_map[row, col] = wall


def generate_map(cols: int, rows: int, room_config: RoomConfig) -> GeneratedMap:
    """
    Generates a map of rooms and tunnels.

    Uses the algorithm documented at the top of this file.

    Parameters:
        cols: Map width in tiles
        rows: Map height in tiles
        room_config: Room size and count limits

    Returns:
        GeneratedMap with the tile array, the rooms in placement order and
        the number of placement attempts used.

    Raises:
        ValueError: If room_config can't work for a map of this size
        DungeonGenerationError: If fewer than min_rooms rooms could be placed
    """
    _check_room_config(cols, rows, room_config)

    dungeon_map: DungeonMap = np.zeros((rows, cols), dtype=int)
    target_num_rooms = random.randint(room_config.min_rooms, room_config.max_rooms)
    rooms: List[Rect] = []

    attempts = 0
    while len(rooms) < target_num_rooms and attempts < room_config.max_attempts:
        attempts += 1
        new_room = _random_room(cols, rows, room_config)
        if any(new_room.intersects(room) for room in rooms):
            continue

        _carve_room(dungeon_map, new_room)
        rooms.append(new_room)

    if len(rooms) < room_config.min_rooms:
        raise DungeonGenerationError(
            f"Only placed {len(rooms)} of at least {room_config.min_rooms} rooms "
            f"after {attempts} attempts; try a larger map or smaller rooms"
        )
    if len(rooms) < target_num_rooms:
        print(
            f"Warning: placed {len(rooms)} of {target_num_rooms} rooms "
            f"after {attempts} attempts",
            file=sys.stderr,
        )

    _connect_rooms(dungeon_map, rooms)
    _enclose_floor(dungeon_map)

    connected, message = is_connected(dungeon_map, WALKABLE_TILES)
    if not connected:
        raise DungeonGenerationError(f"Generated map is not connected: {message}")

    return GeneratedMap(tiles=dungeon_map, rooms=rooms, attempts=attempts)


def create_map(
    width: int, height: int, tile_size: int, room_config: RoomConfig
) -> GeneratedMap:
    """
    Generates a map that fills an image of width x height pixels.

    Pixels left over after dividing by tile_size are not covered by tiles.
    """
    return generate_map(width // tile_size, height // tile_size, room_config)
