"""
Generate a random dungeon map and render it with tiles from a spritesheet.

Usage:
    tiledungeon tiles.png                          # config.ron -> output.png
    tiledungeon tiles.png --config maps/cave.ron   # Use another config file
    tiledungeon tiles.png --seed 42                # Reproducible map
    tiledungeon tiles.png -o dungeon.png           # Custom output path
    tiledungeon tiles.png --show-grid --ascii      # Debugging aids

The config file gives the output size in pixels, the tile size, the
(x, y) pixel position of each tile kind in the spritesheet and the room
limits. See config.ron for a complete example.
"""

import argparse
import random
import sys
from typing import List, Optional

from . import __version__
from .ascii_map import render_map_ascii
from .config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from .dungeon_gen import DungeonGenerationError, create_map
from .renderer import Spritesheet, SpritesheetError, render_to_file
from .ron import RonError

DEFAULT_OUTPUT_PATH = "output.png"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tiledungeon",
        description="Generate a dungeon map and render it from a spritesheet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "spritesheet",
        help="Spritesheet image the tiles are cut from",
    )
    parser.add_argument(
        "--config", "-c",
        default=DEFAULT_CONFIG_PATH,
        help=f"Map config file, .ron or .yaml (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--output", "-o",
        default=DEFAULT_OUTPUT_PATH,
        help=f"Output image path (default: {DEFAULT_OUTPUT_PATH})",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducible maps (overrides the config seed)",
    )
    parser.add_argument(
        "--show-grid",
        action="store_true",
        help="Overlay a tile grid on the image",
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Also print the map as ASCII art to stdout",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only report errors",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def run(args: argparse.Namespace) -> None:
    def log(message: str) -> None:
        if not args.quiet:
            print(message, file=sys.stderr)

    config = load_config(args.config)
    log(f"Loaded config: {args.config}")

    seed = args.seed if args.seed is not None else config.seed
    if seed is not None:
        random.seed(seed)
        log(f"Using random seed: {seed}")

    sheet = Spritesheet.load(args.spritesheet)
    log(f"Loaded spritesheet: {args.spritesheet} ({sheet.width}x{sheet.height})")

    log(f"Generating {config.cols}x{config.rows} tile map...")
    generated = create_map(
        config.width, config.height, config.tile_size, config.room_config
    )
    log(f"Placed {len(generated.rooms)} rooms in {generated.attempts} attempts")

    if args.ascii:
        print(render_map_ascii(generated.tiles))

    output_path = render_to_file(
        generated.tiles,
        sheet,
        config.sprites,
        config.tile_size,
        args.output,
        show_grid=args.show_grid,
        verbose=not args.quiet,
    )
    log(f"Saved to: {output_path.absolute()}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        run(args)
    except (
        ConfigError,
        RonError,
        SpritesheetError,
        DungeonGenerationError,
        OSError,
    ) as e:
        # FileNotFoundError is an OSError
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
