"""
Connectivity checks for generated maps.
"""

from collections import deque
from typing import AbstractSet, Callable, Deque, Optional, Set, Tuple

import numpy as np

# A tile coordinate (row, col)
Cell = Tuple[int, int]

# 4-directional neighbors: (delta_row, delta_col)
DIRECTIONS = [(-1, 0), (1, 0), (0, -1), (0, 1)]  # North, South, West, East


def flood_fill(
    tiles: np.ndarray,
    start: Cell,
    passable: Callable[[int], bool],
) -> Set[Cell]:
    """
    Find every tile reachable from start using BFS.

    Args:
        tiles: The tile array
        start: Starting (row, col)
        passable: Callback that returns True if a tile value can be walked on

    Returns:
        Set of reachable (row, col) tiles, including start.
        Empty if start itself is not passable.
    """
    rows, cols = tiles.shape
    if not passable(int(tiles[start])):
        return set()

    visited: Set[Cell] = {start}
    queue: Deque[Cell] = deque([start])

    while queue:
        row, col = queue.popleft()
        for dr, dc in DIRECTIONS:
            next_row = row + dr
            next_col = col + dc
            next_tile = (next_row, next_col)

            if not (0 <= next_row < rows and 0 <= next_col < cols):
                continue
            if next_tile in visited:
                continue
            if not passable(int(tiles[next_tile])):
                continue

            visited.add(next_tile)
            queue.append(next_tile)

    return visited


def walkable_cells(tiles: np.ndarray, walkable_tiles: AbstractSet[int]) -> Set[Cell]:
    """Extract the coordinates of every tile whose value is in walkable_tiles."""
    walkable = np.isin(tiles, [int(t) for t in walkable_tiles])
    return {(int(row), int(col)) for row, col in np.argwhere(walkable)}


def is_connected(
    tiles: np.ndarray,
    walkable_tiles: AbstractSet[int],
    start: Optional[Cell] = None,
) -> Tuple[bool, str]:
    """
    Check if all walkable tiles in the map are connected.

    Returns:
        Tuple of (is_connected, message) where message explains any issues
    """
    walkable = walkable_cells(tiles, walkable_tiles)
    if not walkable:
        return False, "No walkable tiles found in map"

    if start is None:
        start = min(walkable)
    reachable = flood_fill(tiles, start, lambda tile: tile in walkable_tiles)

    unreachable = walkable - reachable
    if unreachable:
        return (
            False,
            f"Found {len(unreachable)} unreachable tiles out of {len(walkable)} total walkable tiles",
        )
    return True, f"All {len(walkable)} walkable tiles are connected"
