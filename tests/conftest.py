from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import numpy as np
import pytest

from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.options import MapOptions, MapType
from realmgen.environment.generators.pipeline import GenerationContext
from realmgen.util import rng


@pytest.fixture(autouse=True)
def seeded_query_streams() -> Iterator[None]:
    """Give every test the same query-time random streams."""
    rng.init(12345)
    yield
    rng.init(12345)


@pytest.fixture
def make_context() -> Callable[..., GenerationContext]:
    """Factory for a fresh generation context.

    Usage: make_context(MapType.TOWN, width=60, height=60, seed=3)
    """

    def _make(
        map_type: MapType = MapType.DUNGEON,
        fill_cell: CellKind = CellKind.WALL,
        **options: Any,
    ) -> GenerationContext:
        options.setdefault("seed", 1234)
        return GenerationContext.create_empty(
            map_type, MapOptions(**options), fill_cell=fill_cell
        )

    return _make


@pytest.fixture
def open_context(make_context: Callable[..., GenerationContext]) -> GenerationContext:
    """A 30x20 field context that is entirely walkable floor."""
    ctx = make_context(MapType.FIELD, fill_cell=CellKind.FLOOR, width=30, height=20)
    ctx.heights[:] = 0.5
    return ctx


def bfs_distance(
    walkable: np.ndarray, start: tuple[int, int], goal: tuple[int, int]
) -> int | None:
    """Reference 4-directional BFS shortest distance, None if unreachable."""
    from collections import deque

    width, height = walkable.shape
    if not walkable[goal]:
        return None
    dist = {start: 0}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        if (x, y) == goal:
            return dist[(x, y)]
        for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height and walkable[nx, ny]:
                if (nx, ny) not in dist:
                    dist[(nx, ny)] = dist[(x, y)] + 1
                    queue.append((nx, ny))
    return None


@pytest.fixture
def bfs() -> Callable[..., int | None]:
    return bfs_distance
