import os
import sys
from pathlib import Path
from typing import Dict, Mapping, Tuple, Union

import cv2
import numpy as np

from .dungeon_gen import DungeonMap, Tile
from .sprite import Sprite, SpriteVariants

# Type Definition
Image = np.ndarray

GRID_COLOR = (64, 64, 64)


class SpritesheetError(ValueError):
    """Raised for unreadable spritesheets and sprites outside the sheet."""


class Spritesheet:
    """A single source image that sprites are cut out of."""

    def __init__(self, image: Image, path: str = "<memory>") -> None:
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        if image.dtype == np.uint16:
            # 16-bit PNGs; the output canvas is 8-bit
            image = (image >> 8).astype(np.uint8)
        self.image: Image = image
        self.path = path
        self.sprites: Dict[Sprite, Image] = {}

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Spritesheet":
        path = str(path)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Spritesheet not found: {path}")

        img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        if img is None:
            raise SpritesheetError(f"Failed to load image: {path}")
        return cls(img, path)

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    @property
    def channels(self) -> int:
        return self.image.shape[2]

    def check_sprite(self, sprite: Sprite) -> None:
        if (
            sprite.x + sprite.width > self.width
            or sprite.y + sprite.height > self.height
        ):
            raise SpritesheetError(
                f"Sprite at ({sprite.x}, {sprite.y}) of size {sprite.width}x{sprite.height} "
                f"lies outside the {self.width}x{self.height} spritesheet {self.path}"
            )

    def get_sprite(self, sprite: Sprite) -> Image:
        if sprite in self.sprites:
            return self.sprites[sprite]

        self.check_sprite(sprite)
        cropped = self.image[
            sprite.y : sprite.y + sprite.height, sprite.x : sprite.x + sprite.width
        ]
        self.sprites[sprite] = cropped
        return cropped


def overlay_image(background: Image, foreground: Image, x: int, y: int) -> None:
    """Overlays fg on bg at (x,y) handling alpha channel."""
    bh, bw = background.shape[:2]
    fh, fw = foreground.shape[:2]

    # Check bounds
    if x >= bw or y >= bh or x + fw <= 0 or y + fh <= 0:
        return

    # Clip coordinates
    x1, y1 = max(x, 0), max(y, 0)
    x2, y2 = min(x + fw, bw), min(y + fh, bh)

    # Foreground offsets
    fx1 = max(0, -x)
    fy1 = max(0, -y)
    fx2 = fx1 + (x2 - x1)
    fy2 = fy1 + (y2 - y1)

    fg_crop = foreground[fy1:fy2, fx1:fx2]
    bg_crop = background[y1:y2, x1:x2]

    if fg_crop.shape[2] == 4 and bg_crop.shape[2] == 3:
        alpha = fg_crop[:, :, 3] / 255.0
        alpha_3ch = np.dstack([alpha, alpha, alpha])
        blended = (1.0 - alpha_3ch) * bg_crop + alpha_3ch * fg_crop[:, :, :3]
        background[y1:y2, x1:x2] = blended.astype(np.uint8)
    elif fg_crop.shape[2] == 3 and bg_crop.shape[2] == 4:
        background[y1:y2, x1:x2, :3] = fg_crop
        background[y1:y2, x1:x2, 3] = 255
    else:
        # Tiles replace whatever is underneath, transparency included
        background[y1:y2, x1:x2] = fg_crop


def create_dungeon_image(
    dungeon_map: DungeonMap,
    sheet: Spritesheet,
    sprites: Mapping[Tile, SpriteVariants],
    tile_size: int,
    verbose: bool = False,
) -> Image:
    """
    Creates the full image for the map by stamping one sprite per tile.

    Tiles without a sprite (normally NOTHING, unless an empty tile sprite
    is configured) stay black, or transparent for sheets with alpha.
    """
    # Fail before drawing anything if a configured sprite is off the sheet
    for variants in sprites.values():
        for sprite in variants:
            sheet.check_sprite(sprite)

    rows, cols = dungeon_map.shape
    width = cols * tile_size
    height = rows * tile_size

    image: Image = np.zeros((height, width, sheet.channels), np.uint8)

    if verbose:
        print(f"Rendering map image: {width}x{height}...", file=sys.stderr)

    for r in range(rows):
        for c in range(cols):
            variants = sprites.get(Tile(int(dungeon_map[r, c])))
            if variants is None:
                continue
            sprite = sheet.get_sprite(variants.choose())
            overlay_image(image, sprite, c * tile_size, r * tile_size)

    return image


def draw_grid(image: Image, tile_size: int, color: Tuple[int, int, int] = GRID_COLOR) -> None:
    """Draws tile boundaries over the image in place."""
    height, width = image.shape[:2]
    line_color = color + (255,) if image.shape[2] == 4 else color
    # Vertical lines
    for x in range(0, width + 1, tile_size):
        cv2.line(image, (x, 0), (x, height), line_color, 1)
    # Horizontal lines
    for y in range(0, height + 1, tile_size):
        cv2.line(image, (0, y), (width, y), line_color, 1)


def save_image(image: Image, path: Union[str, Path]) -> Path:
    output_path = Path(path)
    try:
        written = cv2.imwrite(str(output_path), image)
    except cv2.error as e:
        # Raised for extensions OpenCV has no writer for
        raise OSError(f"Failed to write image {output_path}: {e}") from e
    if not written:
        raise OSError(f"Failed to write image: {output_path}")
    return output_path


def render_to_file(
    dungeon_map: DungeonMap,
    sheet: Spritesheet,
    sprites: Mapping[Tile, SpriteVariants],
    tile_size: int,
    output: Union[str, Path],
    show_grid: bool = False,
    verbose: bool = False,
) -> Path:
    image = create_dungeon_image(dungeon_map, sheet, sprites, tile_size, verbose=verbose)
    if show_grid:
        draw_grid(image, tile_size)
    return save_image(image, output)
