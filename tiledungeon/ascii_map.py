"""
Text rendering of generated maps, for debugging and tests.
"""

from typing import Dict, List

import numpy as np

from .dungeon_gen import DungeonMap, Tile

# Kept in sync with ASCII_TO_TILE below
TILE_TO_ASCII: Dict[Tile, str] = {
    Tile.NOTHING: " ",
    Tile.FLOOR: ".",
    Tile.WALL_TOP: "-",
    Tile.WALL_BOTTOM: "_",
    Tile.WALL_LEFT: "[",
    Tile.WALL_RIGHT: "]",
}

ASCII_TO_TILE: Dict[str, Tile] = {char: tile for tile, char in TILE_TO_ASCII.items()}


def render_map_ascii(dungeon_map: DungeonMap) -> str:
    """Convert a map to an ASCII string, one line per row."""
    lines = []
    for row in dungeon_map:
        lines.append("".join(TILE_TO_ASCII.get(int(tile), "?") for tile in row))
    return "\n".join(lines)


def parse_map_ascii(ascii_art: List[str]) -> DungeonMap:
    """
    Parse ASCII art back into a tile array.

    Short rows are padded with NOTHING to the width of the longest row.
    """
    width = max((len(line) for line in ascii_art), default=0)
    tiles = np.zeros((len(ascii_art), width), dtype=int)
    for row_idx, line in enumerate(ascii_art):
        for col_idx, char in enumerate(line):
            if char not in ASCII_TO_TILE:
                raise ValueError(
                    f"Unknown map character '{char}' at row {row_idx}, column {col_idx}"
                )
            tiles[row_idx, col_idx] = ASCII_TO_TILE[char]
    return tiles
