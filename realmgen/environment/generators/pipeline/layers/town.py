"""Walled town: buildings, a central plaza, roads, a perimeter wall and decor.

Layout is radial around the map center:
- Buildings are scattered at polar offsets inside the perimeter wall
- A round plaza with a fountain sits at the center
- Roads run from every door to the plaza, plus a few door-to-door roads
- The perimeter wall has gates at the four cardinal directions
- Small decorations are scattered where they cannot cut anything off
"""

from __future__ import annotations

import logging
import math

import numpy as np

from realmgen import config
from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.pipeline.context import GenerationContext
from realmgen.environment.generators.pipeline.layer import GenerationLayer
from realmgen.environment.generators.pipeline.layers.terrain import carve_path
from realmgen.environment.map import Room
from realmgen.types import WorldTilePos
from realmgen.util.coordinates import Rect, disc_points, polar_offset

logger = logging.getLogger(__name__)

# Door side -> (door offset along the side, outward step)
_TOP, _RIGHT, _BOTTOM, _LEFT = range(4)


class TownLayer(GenerationLayer):
    """Builds the whole town on an open floor map."""

    def apply(self, ctx: GenerationContext) -> None:
        coarse = ctx.noise.sample_grid(ctx.width, ctx.height, scale=0.5)
        ctx.cells[:] = CellKind.FLOOR
        ctx.heights[:] = config.TOWN_GROUND_HEIGHT + 0.05 * coarse

        m = ctx.min_dimension
        plaza_radius = math.floor(config.TOWN_PLAZA_FRACTION * m)
        perimeter_radius = config.TOWN_PERIMETER_FRACTION * m

        self._place_buildings(ctx, plaza_radius, perimeter_radius)
        self._add_plaza(ctx, plaza_radius)
        roads = self._add_roads(ctx)
        self._add_perimeter(ctx, perimeter_radius)
        furniture = self._add_furniture(ctx)
        self._add_fountain(ctx, plaza_radius)
        decorations = self._add_decorations(ctx)

        logger.debug(
            f"Town: {len(ctx.rooms)} buildings "
            f"({sum(1 for r in ctx.rooms if r.is_shop)} shops), {roads} roads, "
            f"{furniture} furniture, {decorations} decorations"
        )

    # -------------------------------------------------------------------------
    # Buildings
    # -------------------------------------------------------------------------

    def _place_buildings(
        self, ctx: GenerationContext, plaza_radius: int, perimeter_radius: float
    ) -> None:
        cx, cy = ctx.center
        spread = config.TOWN_RADIUS_FRACTION * ctx.min_dimension
        plaza = Rect(
            cx - plaza_radius,
            cy - plaza_radius,
            2 * plaza_radius + 1,
            2 * plaza_radius + 1,
        )
        # Keep corners well inside the wall so every door opens onto free ground.
        max_corner_distance = perimeter_radius - 3

        target = ctx.rng.randint(*config.TOWN_BUILDING_COUNT)
        attempts = target * 10
        for _ in range(attempts):
            if len(ctx.rooms) >= target:
                break
            angle = ctx.rng.angle()
            distance = spread * ctx.rng.uniform(*config.TOWN_BUILDING_DISTANCE)
            w = ctx.rng.randint(*config.TOWN_BUILDING_SIZE)
            h = ctx.rng.randint(*config.TOWN_BUILDING_SIZE)
            px, py = polar_offset(cx, cy, angle, distance)
            bounds = Rect(px - w // 2, py - h // 2, w, h)

            if not self._fits(ctx, bounds, plaza, max_corner_distance):
                continue
            self._build(ctx, bounds)

        if len(ctx.rooms) < target:
            logger.debug(f"Placed {len(ctx.rooms)} of {target} buildings")

    def _fits(
        self,
        ctx: GenerationContext,
        bounds: Rect,
        plaza: Rect,
        max_corner_distance: float,
    ) -> bool:
        if bounds.x1 < 1 or bounds.y1 < 1:
            return False
        if bounds.x2 > ctx.width - 1 or bounds.y2 > ctx.height - 1:
            return False
        cx, cy = ctx.center
        for x, y in (
            (bounds.x1, bounds.y1),
            (bounds.x2 - 1, bounds.y1),
            (bounds.x1, bounds.y2 - 1),
            (bounds.x2 - 1, bounds.y2 - 1),
        ):
            if math.hypot(x - cx, y - cy) > max_corner_distance:
                return False
        if bounds.intersects(plaza, padding=1):
            return False
        return not any(
            bounds.intersects(room.bounds, padding=config.ROOM_PADDING)
            for room in ctx.rooms
        )

    def _build(self, ctx: GenerationContext, bounds: Rect) -> None:
        x1, y1, x2, y2 = bounds.x1, bounds.y1, bounds.x2, bounds.y2
        ctx.cells[x1:x2, y1:y2] = CellKind.WALL
        ctx.heights[x1:x2, y1:y2] = config.TOWN_WALL_HEIGHT
        ctx.cells[x1 + 1 : x2 - 1, y1 + 1 : y2 - 1] = CellKind.FLOOR
        ctx.heights[x1 + 1 : x2 - 1, y1 + 1 : y2 - 1] = config.TOWN_INTERIOR_HEIGHT

        mid_x = x1 + bounds.width // 2
        mid_y = y1 + bounds.height // 2
        side = ctx.rng.randint(0, 3)
        if side == _TOP:
            door, outside, inside = (mid_x, y1), (mid_x, y1 - 1), (mid_x, y1 + 1)
        elif side == _RIGHT:
            door, outside, inside = (x2 - 1, mid_y), (x2, mid_y), (x2 - 2, mid_y)
        elif side == _BOTTOM:
            door, outside, inside = (mid_x, y2 - 1), (mid_x, y2), (mid_x, y2 - 2)
        else:
            door, outside, inside = (x1, mid_y), (x1 - 1, mid_y), (x1 + 1, mid_y)

        ctx.set_cell(door[0], door[1], CellKind.FLOOR, config.TOWN_INTERIOR_HEIGHT)
        ctx.reserved.update((door, outside, inside, (mid_x, mid_y)))

        ctx.rooms.append(
            Room(
                x=x1,
                y=y1,
                width=bounds.width,
                height=bounds.height,
                center_x=mid_x,
                center_y=mid_y,
                door_x=door[0],
                door_y=door[1],
                is_shop=len(ctx.rooms) < config.TOWN_SHOP_COUNT,
            )
        )

    # -------------------------------------------------------------------------
    # Open spaces
    # -------------------------------------------------------------------------

    def _add_plaza(self, ctx: GenerationContext, plaza_radius: int) -> None:
        cx, cy = ctx.center
        for x, y, _d in disc_points(cx, cy, plaza_radius, ctx.width, ctx.height):
            ctx.set_cell(x, y, CellKind.FLOOR, config.TOWN_GROUND_HEIGHT)

    def _add_roads(self, ctx: GenerationContext) -> int:
        """Roads from each door to the center, then some door-to-door roads.

        Roads never cut through building walls.
        """
        center = ctx.center
        roads = 0
        for room in ctx.rooms:
            width = ctx.rng.randint(*config.TOWN_ROAD_WIDTH)
            carve_path(ctx, room.door, center, width, keep_walls=True)
            roads += 1

        extra = math.floor(len(ctx.rooms) * config.TOWN_EXTRA_ROAD_FRACTION)
        if len(ctx.rooms) >= 2:
            for _ in range(extra):
                a, b = ctx.rng.sample(ctx.rooms, 2)
                width = ctx.rng.randint(*config.TOWN_ROAD_WIDTH)
                carve_path(ctx, a.door, b.door, width, keep_walls=True)
                roads += 1
        return roads

    def _add_perimeter(self, ctx: GenerationContext, radius: float) -> None:
        """Ring wall with open gates at the four cardinal directions."""
        cx, cy = ctx.center
        cardinals = (0.0, math.pi / 2, math.pi, 3 * math.pi / 2, 2 * math.pi)
        walls: set[WorldTilePos] = set()
        gates: set[WorldTilePos] = set()

        for angle in np.arange(0.0, 2 * math.pi, config.TOWN_PERIMETER_STEP):
            pos = polar_offset(cx, cy, float(angle), radius)
            if not ctx.in_bounds(*pos):
                continue
            if any(abs(angle - c) < config.TOWN_GATE_HALF_WIDTH for c in cardinals):
                gates.add(pos)
            else:
                walls.add(pos)

        for x, y in walls - gates:
            ctx.set_cell(x, y, CellKind.WALL, config.TOWN_PERIMETER_HEIGHT)
        for x, y in gates:
            ctx.set_cell(x, y, CellKind.FLOOR, config.TOWN_GROUND_HEIGHT)

    # -------------------------------------------------------------------------
    # Clutter
    # -------------------------------------------------------------------------

    def _add_furniture(self, ctx: GenerationContext) -> int:
        walkable = ctx.walkable_map()
        placed = 0
        for room in ctx.rooms:
            for x in range(room.x + 1, room.x + room.width - 1):
                for y in range(room.y + 1, room.y + room.height - 1):
                    if not ctx.rng.chance(config.TOWN_FURNITURE_CHANCE):
                        continue
                    if not ctx.can_block(x, y, walkable):
                        continue
                    ctx.set_cell(x, y, CellKind.OBSTACLE, config.TOWN_INTERIOR_HEIGHT)
                    walkable[x, y] = False
                    placed += 1
        return placed

    def _add_fountain(self, ctx: GenerationContext, plaza_radius: int) -> None:
        """Fountain in the middle of the plaza, leaving a walkable ring around it."""
        radius = min(config.TOWN_FOUNTAIN_RADIUS, plaza_radius - 2)
        if radius < 1:
            return
        cx, cy = ctx.center
        for x, y, d in disc_points(cx, cy, radius, ctx.width, ctx.height):
            ctx.set_cell(x, y, CellKind.OBSTACLE, 0.5 + 0.3 * (1.0 - d / radius))

    def _add_decorations(self, ctx: GenerationContext) -> int:
        cx, cy = ctx.center
        spread = config.TOWN_RADIUS_FRACTION * ctx.min_dimension
        walkable = ctx.walkable_map()
        count = ctx.rng.randint(*config.TOWN_DECORATION_COUNT)
        placed = 0
        for _ in range(count):
            angle = ctx.rng.angle()
            distance = spread * ctx.rng.uniform(*config.TOWN_DECORATION_DISTANCE)
            x, y = polar_offset(cx, cy, angle, distance)
            if not ctx.in_bounds(x, y):
                continue
            if any(room.contains(x, y) for room in ctx.rooms):
                continue
            if not ctx.can_block(x, y, walkable):
                continue
            ctx.set_cell(x, y, CellKind.OBSTACLE, config.TOWN_DECORATION_HEIGHT)
            walkable[x, y] = False
            placed += 1
        return placed
