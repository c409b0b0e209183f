from __future__ import annotations

import math
from collections.abc import Callable

import numpy as np

from realmgen import config
from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.options import MapType
from realmgen.environment.generators.pipeline import GenerationContext
from realmgen.environment.generators.pipeline.layers import (
    ObjectPlacementLayer,
    RoomLayoutLayer,
)
from realmgen.util.pathfinding import reachable_mask

MakeContext = Callable[..., GenerationContext]


def _open_field(make_context: MakeContext, **options) -> GenerationContext:
    ctx = make_context(
        MapType.FIELD, fill_cell=CellKind.FLOOR, width=30, height=20, **options
    )
    ctx.heights[:] = 0.5
    return ctx


class TestObjectPlacementLayer:
    """Tests for chest and obstacle quotas and the connectivity guard."""

    def test_quotas_follow_effective_density(self, make_context: MakeContext) -> None:
        ctx = _open_field(
            make_context, seed=3, chest_density=0.05, obstacle_density=0.05
        )
        n = ctx.width * ctx.height
        expected_chests = math.floor(n * ctx.densities.chest)
        expected_obstacles = math.floor(n * ctx.densities.obstacle)

        ObjectPlacementLayer().apply(ctx)

        assert np.count_nonzero(ctx.cells == CellKind.CHEST) == expected_chests
        assert np.count_nonzero(ctx.cells == CellKind.OBSTACLE) == expected_obstacles

    def test_zero_density_places_nothing(self, make_context: MakeContext) -> None:
        ctx = _open_field(make_context, seed=3, chest_density=0.0, obstacle_density=0.0)
        ObjectPlacementLayer().apply(ctx)

        assert np.all(ctx.cells == CellKind.FLOOR)

    def test_reserved_tiles_stay_open(self, make_context: MakeContext) -> None:
        ctx = _open_field(make_context, seed=4, chest_density=1.0, obstacle_density=1.0)
        reserved = {(x, 5) for x in range(ctx.width)}
        ctx.reserved.update(reserved)

        ObjectPlacementLayer().apply(ctx)

        for x, y in reserved:
            assert ctx.cells[x, y] == CellKind.FLOOR

    def test_placement_never_disconnects(self, make_context: MakeContext) -> None:
        """Even at full density, the walkable area stays one region."""
        ctx = _open_field(make_context, seed=5, chest_density=1.0, obstacle_density=1.0)
        ObjectPlacementLayer().apply(ctx)

        walkable = ctx.walkable_map()
        start = tuple(int(v) for v in np.argwhere(walkable)[0])
        reachable = reachable_mask(walkable, start)
        np.testing.assert_array_equal(reachable, walkable)

    def test_full_density_runs_out_gracefully(self, make_context: MakeContext) -> None:
        ctx = _open_field(make_context, seed=6, chest_density=1.0, obstacle_density=1.0)
        ObjectPlacementLayer().apply(ctx)

        placed = np.count_nonzero(ctx.cells != CellKind.FLOOR)
        assert 0 < placed < ctx.width * ctx.height

    def test_obstacles_are_raised(self, make_context: MakeContext) -> None:
        ctx = _open_field(make_context, seed=7, chest_density=0.0, obstacle_density=0.2)
        ctx.heights[:] = 0.3
        ObjectPlacementLayer().apply(ctx)

        obstacles = ctx.cells == CellKind.OBSTACLE
        assert np.any(obstacles)
        assert np.all(ctx.heights[obstacles] == config.OBSTACLE_MIN_HEIGHT["field"])

    def test_dungeon_doors_stay_connected(self, make_context: MakeContext) -> None:
        ctx = make_context(
            MapType.DUNGEON,
            width=40,
            height=40,
            seed=42,
            room_count=5,
            chest_density=0.5,
            obstacle_density=0.5,
        )
        RoomLayoutLayer().apply(ctx)
        ObjectPlacementLayer().apply(ctx)

        reachable = reachable_mask(ctx.walkable_map(), ctx.rooms[0].door)
        for room in ctx.rooms:
            assert reachable[room.door]
