"""Unit tests for the map connectivity checks."""

import numpy as np

from tiledungeon.ascii_map import parse_map_ascii
from tiledungeon.dungeon_gen import WALKABLE_TILES, Tile
from tiledungeon.pathfinding import flood_fill, is_connected, walkable_cells


def is_floor(tile: int) -> bool:
    return tile == Tile.FLOOR


class TestFloodFill:
    """Tests for the flood_fill function."""

    def test_fills_open_room(self):
        tiles = parse_map_ascii(
            [
                "[---]",
                "[...]",
                "[...]",
                "[___]",
            ]
        )
        reachable = flood_fill(tiles, (1, 1), is_floor)
        assert reachable == {(r, c) for r in (1, 2) for c in (1, 2, 3)}

    def test_does_not_move_diagonally(self):
        tiles = parse_map_ascii(
            [
                ".-",
                "-.",
            ]
        )
        assert flood_fill(tiles, (0, 0), is_floor) == {(0, 0)}

    def test_stops_at_map_edge(self):
        tiles = np.full((3, 3), int(Tile.FLOOR))
        assert len(flood_fill(tiles, (0, 0), is_floor)) == 9

    def test_blocked_start_reaches_nothing(self):
        tiles = parse_map_ascii(["-."])
        assert flood_fill(tiles, (0, 0), is_floor) == set()


class TestIsConnected:
    """Tests for the is_connected check."""

    def test_tunnel_joins_rooms(self):
        tiles = parse_map_ascii(
            [
                "[-]   [-]",
                "[.-----.]",
                "[.......]",
                "[_______]",
            ]
        )
        connected, message = is_connected(tiles, WALKABLE_TILES)
        assert connected, message
        assert "All 9 walkable tiles" in message

    def test_separate_rooms_are_not_connected(self):
        tiles = parse_map_ascii(
            [
                "[-]  [-]",
                "[.]  [.]",
                "[_]  [_]",
            ]
        )
        connected, message = is_connected(tiles, WALKABLE_TILES)
        assert not connected
        assert "1 unreachable tiles out of 2" in message

    def test_map_without_floor(self):
        connected, message = is_connected(np.zeros((4, 4), dtype=int), WALKABLE_TILES)
        assert not connected
        assert "No walkable tiles" in message

    def test_walkable_cells(self):
        tiles = parse_map_ascii(["-..", " _."])
        assert walkable_cells(tiles, WALKABLE_TILES) == {(0, 1), (0, 2), (1, 2)}

    def test_walkable_set_is_chosen_by_caller(self):
        """Floor cells split by a top wall connect once the wall counts as walkable."""
        tiles = parse_map_ascii(
            [
                ".-.",
            ]
        )
        connected, _ = is_connected(tiles, WALKABLE_TILES)
        assert not connected

        connected, message = is_connected(tiles, {Tile.FLOOR, Tile.WALL_TOP})
        assert connected, message
        assert "All 3 walkable tiles" in message
