from __future__ import annotations

import math
from collections.abc import Callable
from itertools import combinations

import pytest

from realmgen import config
from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.options import MapType
from realmgen.environment.generators.pipeline import GenerationContext
from realmgen.environment.generators.pipeline.layers import TownLayer
from realmgen.util.pathfinding import reachable_mask

MakeContext = Callable[..., GenerationContext]


def _town(make_context: MakeContext, seed: int, size: int = 60) -> GenerationContext:
    ctx = make_context(
        MapType.TOWN, fill_cell=CellKind.FLOOR, width=size, height=size, seed=seed
    )
    TownLayer().apply(ctx)
    return ctx


class TestTownLayer:
    """Tests for buildings, plaza, roads, perimeter and decorations."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 4])
    def test_buildings_do_not_overlap(
        self, make_context: MakeContext, seed: int
    ) -> None:
        ctx = _town(make_context, seed)

        assert len(ctx.rooms) >= 1
        for a, b in combinations(ctx.rooms, 2):
            assert not a.bounds.intersects(b.bounds, padding=config.ROOM_PADDING)

    def test_first_buildings_are_shops(self, make_context: MakeContext) -> None:
        ctx = _town(make_context, 5)
        shops = [room.is_shop for room in ctx.rooms]

        expected = min(config.TOWN_SHOP_COUNT, len(ctx.rooms))
        assert shops == [True] * expected + [False] * (len(ctx.rooms) - expected)

    def test_buildings_have_walls_and_door(self, make_context: MakeContext) -> None:
        ctx = _town(make_context, 6)

        for room in ctx.rooms:
            x2, y2 = room.x + room.width - 1, room.y + room.height - 1
            corners = ((room.x, room.y), (x2, room.y), (room.x, y2), (x2, y2))
            for x, y in corners:
                assert ctx.cells[x, y] == CellKind.WALL

            dx, dy = room.door
            on_outline = dx in (room.x, x2) or dy in (room.y, y2)
            assert on_outline
            assert room.door in ctx.reserved
            assert room.center in ctx.reserved
            assert ctx.is_walkable(dx, dy)
            assert ctx.is_walkable(*room.center)

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_doors_are_connected(self, make_context: MakeContext, seed: int) -> None:
        ctx = _town(make_context, seed)
        reachable = reachable_mask(ctx.walkable_map(), ctx.rooms[0].door)

        for room in ctx.rooms:
            assert reachable[room.door]

    def test_buildings_inside_perimeter(self, make_context: MakeContext) -> None:
        ctx = _town(make_context, 7)
        cx, cy = ctx.center
        limit = config.TOWN_PERIMETER_FRACTION * ctx.min_dimension - 3

        for room in ctx.rooms:
            for x in (room.x, room.x + room.width - 1):
                for y in (room.y, room.y + room.height - 1):
                    assert math.hypot(x - cx, y - cy) <= limit

    def test_fountain_in_plaza(self, make_context: MakeContext) -> None:
        ctx = _town(make_context, 8)
        cx, cy = ctx.center

        assert ctx.cells[cx, cy] == CellKind.OBSTACLE

    def test_gates_are_open(self, make_context: MakeContext) -> None:
        """The tile straight east on the perimeter circle is a gate."""
        ctx = _town(make_context, 9)
        cx, cy = ctx.center
        radius = config.TOWN_PERIMETER_FRACTION * ctx.min_dimension

        assert ctx.cells[math.floor(cx + radius), cy] == CellKind.FLOOR

    def test_perimeter_wall_exists(self, make_context: MakeContext) -> None:
        ctx = _town(make_context, 10)
        cx, cy = ctx.center
        radius = config.TOWN_PERIMETER_FRACTION * ctx.min_dimension
        diagonal = math.pi / 4
        x = math.floor(cx + math.cos(diagonal) * radius)
        y = math.floor(cy + math.sin(diagonal) * radius)

        assert ctx.cells[x, y] == CellKind.WALL
