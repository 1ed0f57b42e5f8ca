#!/usr/bin/env python3
"""
Render a generated map as ASCII art for debugging.

Usage:
    python tools/render_map_ascii.py [--config config.ron] [--seed S]
"""

import argparse
import random
import sys
from pathlib import Path

# Add parent directory to path so we can import tiledungeon
sys.path.insert(0, str(Path(__file__).parent.parent))

from tiledungeon.ascii_map import render_map_ascii
from tiledungeon.config import DEFAULT_CONFIG_PATH, load_config
from tiledungeon.dungeon_gen import Tile, create_map


def main():
    parser = argparse.ArgumentParser(description="Render a generated map as ASCII art")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Map config file")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    args = parser.parse_args()

    config = load_config(args.config)
    seed = args.seed if args.seed is not None else config.seed
    if seed is not None:
        random.seed(seed)

    generated = create_map(config.width, config.height, config.tile_size, config.room_config)
    print(render_map_ascii(generated.tiles))

    # Print some debug info
    print("\n--- Debug Info ---")
    print(f"Map size: {generated.cols}x{generated.rows} tiles")
    print(f"Rooms generated: {len(generated.rooms)} in {generated.attempts} attempts")
    for index, room in enumerate(generated.rooms):
        center = room.center()
        print(f"  Room {index}: at tile ({room.x}, {room.y}), size {room.w}x{room.h}, center ({center.column}, {center.row})")
    floor = int((generated.tiles == Tile.FLOOR).sum())
    print(f"Floor tiles: {floor}")


if __name__ == "__main__":
    main()
