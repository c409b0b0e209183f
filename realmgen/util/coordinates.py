from __future__ import annotations

import math
from collections.abc import Iterator

import numpy as np

from realmgen.types import TileCoord, WorldTilePos

"""Rectangles, rasterizers and local connectivity checks in tile space."""


class Rect:
    """Rectangle/bounding box in tile coordinates.

    x2 and y2 are exclusive, so a Rect(0, 0, 5, 5) covers tiles 0..4.
    """

    def __init__(self, x: TileCoord, y: TileCoord, w: TileCoord, h: TileCoord) -> None:
        self.x1: TileCoord = x
        self.y1: TileCoord = y
        self.x2: TileCoord = x + w
        self.y2: TileCoord = y + h

    @classmethod
    def from_bounds(
        cls, x1: TileCoord, y1: TileCoord, x2: TileCoord, y2: TileCoord
    ) -> Rect:
        """Create a Rect from corner coordinates (x1, y1, x2, y2)."""
        width = x2 - x1
        height = y2 - y1
        return cls(x1, y1, width, height)

    @property
    def width(self) -> TileCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> TileCoord:
        return self.y2 - self.y1

    def center(self) -> tuple[int, int]:
        return (self.x1 + self.width // 2, self.y1 + self.height // 2)

    def contains(self, x: TileCoord, y: TileCoord) -> bool:
        return self.x1 <= x < self.x2 and self.y1 <= y < self.y2

    def intersects(self, other: Rect, padding: int = 0) -> bool:
        """True if the two rectangles overlap once both are grown by `padding`."""
        return (
            self.x1 - padding < other.x2 + padding
            and self.x2 + padding > other.x1 - padding
            and self.y1 - padding < other.y2 + padding
            and self.y2 + padding > other.y1 - padding
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (
            other.x1,
            other.y1,
            other.x2,
            other.y2,
        )

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


# =============================================================================
# BOUNDS CHECKING HELPERS
# =============================================================================


def is_valid_world_tile_pos(
    pos: WorldTilePos, map_width: TileCoord, map_height: TileCoord
) -> bool:
    """Check if world tile position is within map bounds."""
    x, y = pos
    return 0 <= x < map_width and 0 <= y < map_height


def polar_offset(
    cx: float, cy: float, angle: float, distance: float
) -> WorldTilePos:
    """Tile reached by walking `distance` from (cx, cy) at `angle` radians."""
    return (
        math.floor(cx + math.cos(angle) * distance),
        math.floor(cy + math.sin(angle) * distance),
    )


# =============================================================================
# RASTERIZERS
# =============================================================================


def bresenham_line(
    x0: TileCoord, y0: TileCoord, x1: TileCoord, y1: TileCoord
) -> list[WorldTilePos]:
    """Tiles on the Bresenham line from (x0, y0) to (x1, y1), both included."""
    points: list[WorldTilePos] = []
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    x, y = x0, y0

    while True:
        points.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
    return points


def orthogonal_line(
    x0: TileCoord, y0: TileCoord, x1: TileCoord, y1: TileCoord
) -> list[WorldTilePos]:
    """Like bresenham_line, but every step moves along one axis only.

    Diagonal steps get an extra tile, so the line is walkable with
    4-directional movement.
    """
    points: list[WorldTilePos] = []
    for x, y in bresenham_line(x0, y0, x1, y1):
        if points:
            px, py = points[-1]
            if px != x and py != y:
                points.append((x, py))
        points.append((x, y))
    return points


def disc_points(
    cx: float,
    cy: float,
    radius: float,
    width: TileCoord,
    height: TileCoord,
) -> Iterator[tuple[TileCoord, TileCoord, float]]:
    """Yield (x, y, distance) for in-bounds tiles within `radius` of (cx, cy)."""
    r = math.ceil(radius)
    icx, icy = math.floor(cx), math.floor(cy)
    for x in range(max(0, icx - r), min(width, icx + r + 1)):
        for y in range(max(0, icy - r), min(height, icy + r + 1)):
            d = math.hypot(x - cx, y - cy)
            if d <= radius:
                yield (x, y, d)


def distance_grid(
    width: TileCoord, height: TileCoord, cx: float, cy: float
) -> np.ndarray:
    """(width, height) array of euclidean distances from (cx, cy)."""
    xs = np.arange(width, dtype=np.float64)[:, None]
    ys = np.arange(height, dtype=np.float64)[None, :]
    return np.hypot(xs - cx, ys - cy)


# =============================================================================
# LOCAL CONNECTIVITY
# =============================================================================

# The 8 neighbours of a tile in ring order. Consecutive entries are
# orthogonally adjacent to each other; odd indices are the orthogonal
# neighbours of the center.
_RING = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
)


def is_safe_to_block(walkable: np.ndarray, x: TileCoord, y: TileCoord) -> bool:
    """Check whether blocking (x, y) keeps its neighbourhood connected.

    Any 4-connected path through (x, y) enters and leaves via two of its
    orthogonal neighbours. If all walkable orthogonal neighbours sit in a
    single run of walkable tiles around the ring, the path can detour along
    that run, so blocking the tile cannot disconnect anything.

    Args:
        walkable: Boolean (width, height) array, True for passable tiles.
        x: Column of the tile to test.
        y: Row of the tile to test.
    """
    width, height = walkable.shape
    ring = []
    for dx, dy in _RING:
        nx, ny = x + dx, y + dy
        ring.append(0 <= nx < width and 0 <= ny < height and bool(walkable[nx, ny]))

    if all(ring):
        return True

    # Label each walkable run, starting just after a blocked ring cell so no
    # run wraps around the end of the list.
    start = ring.index(False)
    run_of: dict[int, int] = {}
    run = -1
    previous = False
    for step in range(1, 9):
        i = (start + step) % 8
        if ring[i]:
            if not previous:
                run += 1
            run_of[i] = run
        previous = ring[i]

    orthogonal_runs = {run_of[i] for i in (1, 3, 5, 7) if ring[i]}
    return len(orthogonal_runs) <= 1
