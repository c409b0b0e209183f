"""Placement cell kinds and the walkability rule.

Every generated map carries two parallel grids: a height map and a placement
grid of CellKind codes. Walkability is derived from both, and every consumer
(object placement, entity placement, pathfinding) goes through
`get_walkable_map` or `is_walkable_cell` so the rule lives in one place.
"""

from __future__ import annotations

from enum import IntEnum

import numpy as np

from realmgen import config


class CellKind(IntEnum):
    """What occupies a placement cell. Values are the stored uint8 codes."""

    FLOOR = 0
    WATER = 1
    CHEST = 2
    OBSTACLE = 3
    WALL = 4


# Kinds that block movement regardless of height.
BLOCKING_KINDS = frozenset(
    {CellKind.WATER, CellKind.CHEST, CellKind.OBSTACLE, CellKind.WALL}
)

# Single-character symbols used by text previews.
CELL_SYMBOLS: dict[CellKind, str] = {
    CellKind.FLOOR: ".",
    CellKind.WATER: "~",
    CellKind.CHEST: "$",
    CellKind.OBSTACLE: "o",
    CellKind.WALL: "#",
}


def is_walkable_cell(kind: int, height: float) -> bool:
    """A tile is walkable only if it is open floor at a standable height."""
    return kind == CellKind.FLOOR and height >= config.WALKABLE_MIN_HEIGHT


def get_walkable_map(cells: np.ndarray, heights: np.ndarray) -> np.ndarray:
    """Vectorized walkability for a whole map.

    Args:
        cells: (width, height) array of CellKind codes.
        heights: (width, height) array of tile heights.

    Returns:
        A boolean (width, height) array, True where the tile is walkable.
    """
    return (cells == CellKind.FLOOR) & (heights >= config.WALKABLE_MIN_HEIGHT)
