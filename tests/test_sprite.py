"""Tests for sprite variants."""

import random

import pytest

from tiledungeon.sprite import Sprite, SpriteVariants


class TestSpriteVariants:
    def test_single_sprite_is_always_chosen(self):
        sprite = Sprite(0, 0, 16, 16)
        variants = SpriteVariants([sprite])
        assert all(variants.choose() == sprite for _ in range(10))

    def test_choice_is_seeded_by_random(self):
        variants = SpriteVariants.from_coordinates([(0, 0), (16, 0), (32, 0)], 16)

        random.seed(5)
        first = [variants.choose() for _ in range(20)]
        random.seed(5)
        second = [variants.choose() for _ in range(20)]

        assert first == second
        assert set(first) <= set(variants)

    def test_from_coordinates_uses_tile_size(self):
        variants = SpriteVariants.from_coordinates([(32, 64)], 32)
        assert list(variants) == [Sprite(32, 64, 32, 32)]

    def test_empty_variants_rejected(self):
        with pytest.raises(ValueError):
            SpriteVariants([])
