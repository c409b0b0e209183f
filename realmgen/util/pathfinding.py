"""Grid pathfinding over generated maps.

`PathfindingGrid` is a walkability snapshot derived from a map's placement
and height grids. It answers 4-directional shortest-path queries with A*
(Manhattan heuristic, unit step cost) and supports per-cell updates for
dynamic changes such as doors opening or objects being destroyed.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections import deque
from typing import TYPE_CHECKING

import numpy as np

from realmgen import config
from realmgen.environment.cell_types import get_walkable_map
from realmgen.types import TilePath, TileCoord, WorldTilePos
from realmgen.util import rng

if TYPE_CHECKING:
    from realmgen.environment.map import MapModel
    from realmgen.util.rng import RNG

logger = logging.getLogger(__name__)

_rng = rng.get("map.queries")

# Neighbour order: up, right, down, left.
DIRECTIONS: tuple[WorldTilePos, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


def manhattan(a: WorldTilePos, b: WorldTilePos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def find_path(
    walkable: np.ndarray,
    start: WorldTilePos,
    end: WorldTilePos,
    max_expansions: int | None = None,
) -> TilePath | None:
    """Find a shortest 4-directional path with A*.

    The open set always yields the node with the lowest f = g + h. Nodes with
    equal f come out in the order they were pushed.

    Args:
        walkable: Boolean (width, height) array, True for passable tiles.
        start: The (x, y) starting tile. It does not need to be walkable.
        end: The (x, y) goal tile.
        max_expansions: Optional limit on closed nodes; the search gives up
            and returns None once it is exceeded.

    Returns:
        The path from start to end with both endpoints included, or None if
        an endpoint is off the map, the goal is blocked, or no path exists.
    """
    width, height = walkable.shape
    sx, sy = start
    ex, ey = end
    if not (0 <= sx < width and 0 <= sy < height):
        return None
    if not (0 <= ex < width and 0 <= ey < height):
        return None
    if not walkable[ex, ey]:
        return None

    start = (sx, sy)
    end = (ex, ey)
    if start == end:
        return [start]

    counter = itertools.count()
    open_heap: list[tuple[int, int, WorldTilePos]] = [
        (manhattan(start, end), next(counter), start)
    ]
    g_score: dict[WorldTilePos, int] = {start: 0}
    came_from: dict[WorldTilePos, WorldTilePos] = {}
    closed = np.zeros((width, height), dtype=np.bool_)
    expansions = 0

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        cx, cy = current
        if closed[cx, cy]:
            # Stale entry, a cheaper route to this node was already expanded
            continue
        if current == end:
            return _reconstruct_path(came_from, current)

        closed[cx, cy] = True
        expansions += 1
        if max_expansions is not None and expansions > max_expansions:
            logger.debug(
                f"A* gave up after {max_expansions} expansions: {start} -> {end}"
            )
            return None

        next_g = g_score[current] + 1
        for dx, dy in DIRECTIONS:
            nx, ny = cx + dx, cy + dy
            if not (0 <= nx < width and 0 <= ny < height):
                continue
            if closed[nx, ny] or not walkable[nx, ny]:
                continue
            neighbor = (nx, ny)
            if next_g < g_score.get(neighbor, next_g + 1):
                g_score[neighbor] = next_g
                came_from[neighbor] = current
                heapq.heappush(
                    open_heap,
                    (next_g + manhattan(neighbor, end), next(counter), neighbor),
                )

    return None


def _reconstruct_path(
    came_from: dict[WorldTilePos, WorldTilePos], current: WorldTilePos
) -> TilePath:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def reachable_mask(walkable: np.ndarray, start: WorldTilePos) -> np.ndarray:
    """Flood fill the 4-connected walkable region containing `start`.

    Returns:
        A boolean (width, height) array. All False if start is blocked or
        off the map.
    """
    width, height = walkable.shape
    seen = np.zeros((width, height), dtype=np.bool_)
    sx, sy = start
    if not (0 <= sx < width and 0 <= sy < height) or not walkable[sx, sy]:
        return seen

    seen[sx, sy] = True
    queue: deque[WorldTilePos] = deque([(sx, sy)])
    while queue:
        x, y = queue.popleft()
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height:
                if walkable[nx, ny] and not seen[nx, ny]:
                    seen[nx, ny] = True
                    queue.append((nx, ny))
    return seen


class PathfindingGrid:
    """Walkability snapshot of a map that answers path queries.

    Built lazily from a MapModel and cached there. `set_walkable` edits the
    snapshot in place; it must not race with concurrent queries.
    """

    def __init__(self, walkable: np.ndarray) -> None:
        self._walkable = np.array(walkable, dtype=np.bool_, copy=True)

    @classmethod
    def from_walkable(cls, walkable: np.ndarray) -> PathfindingGrid:
        return cls(walkable)

    @classmethod
    def from_cells(cls, cells: np.ndarray, heights: np.ndarray) -> PathfindingGrid:
        """Derive walkability from CellKind codes and heights."""
        return cls(get_walkable_map(cells, heights))

    @classmethod
    def from_map(cls, game_map: MapModel) -> PathfindingGrid:
        return cls.from_cells(game_map.placement_grid.data, game_map.height_map.data)

    @property
    def width(self) -> int:
        return self._walkable.shape[0]

    @property
    def height(self) -> int:
        return self._walkable.shape[1]

    @property
    def walkable(self) -> np.ndarray:
        """Read-only view of the walkability array."""
        view = self._walkable.view()
        view.flags.writeable = False
        return view

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_walkable(self, x: TileCoord, y: TileCoord) -> bool:
        return self.in_bounds(x, y) and bool(self._walkable[x, y])

    def set_walkable(self, x: TileCoord, y: TileCoord, walkable: bool) -> None:
        """Update one cell. Out-of-bounds updates are ignored."""
        if self.in_bounds(x, y):
            self._walkable[x, y] = walkable

    def find_path(
        self,
        start_x: TileCoord,
        start_y: TileCoord,
        end_x: TileCoord,
        end_y: TileCoord,
        *,
        max_expansions: int | None = None,
    ) -> TilePath | None:
        """Shortest 4-directional path, both endpoints included, or None."""
        return find_path(
            self._walkable, (start_x, start_y), (end_x, end_y), max_expansions
        )

    def get_random_walkable_position(self, rng: RNG | None = None) -> WorldTilePos:
        """Pick a walkable tile.

        Tries random tiles first, then scans a window around the map center,
        then the whole map. Only a map with no walkable tile at all yields
        (0, 0), which is logged as a warning.

        Args:
            rng: Stream to draw from. Defaults to the "map.queries" stream.
        """
        stream = rng if rng is not None else _rng
        w, h = self.width, self.height

        for _ in range(config.RANDOM_POSITION_ATTEMPTS):
            x = stream.randint(0, w - 1)
            y = stream.randint(0, h - 1)
            if self._walkable[x, y]:
                return (x, y)

        window = config.RANDOM_POSITION_CENTER_WINDOW
        cx, cy = w // 2, h // 2
        for x in range(max(0, cx - window), min(w, cx + window + 1)):
            for y in range(max(0, cy - window), min(h, cy + window + 1)):
                if self._walkable[x, y]:
                    return (x, y)

        candidates = np.argwhere(self._walkable)
        if len(candidates) > 0:
            x, y = candidates[0]
            return (int(x), int(y))

        logger.warning(f"No walkable tile on a {w}x{h} map, falling back to (0, 0)")
        return (0, 0)

    def __repr__(self) -> str:
        walkable = int(np.count_nonzero(self._walkable))
        return f"PathfindingGrid({self.width}x{self.height}, walkable={walkable})"
