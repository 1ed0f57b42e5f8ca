import random
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple


@dataclass(frozen=True)
class Sprite:
    # x and y are offsets into the spritesheet.
    # The sprite is the section of the sheet
    # at x,y and to width,height
    x: int
    y: int
    width: int
    height: int


class SpriteVariants:
    """
    One or more interchangeable sprites for a tile kind.

    A tile kind configured with several coordinates picks one
    of them at random for every cell it is drawn in.
    """

    def __init__(self, sprites: Iterable[Sprite]) -> None:
        self.sprites: Tuple[Sprite, ...] = tuple(sprites)
        if not self.sprites:
            raise ValueError("SpriteVariants needs at least one sprite")

    @classmethod
    def from_coordinates(
        cls, coordinates: Iterable[Tuple[int, int]], tile_size: int
    ) -> "SpriteVariants":
        return cls(Sprite(x, y, tile_size, tile_size) for x, y in coordinates)

    def choose(self) -> Sprite:
        if len(self.sprites) == 1:
            return self.sprites[0]
        return random.choice(self.sprites)

    def __iter__(self) -> Iterator[Sprite]:
        return iter(self.sprites)

    def __len__(self) -> int:
        return len(self.sprites)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpriteVariants):
            return NotImplemented
        return self.sprites == other.sprites

    def __repr__(self) -> str:
        return f"SpriteVariants({list(self.sprites)!r})"
