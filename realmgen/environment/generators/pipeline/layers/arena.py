"""Circular boss arena with pillars, cover, a central altar and one entrance."""

from __future__ import annotations

import logging
import math

from realmgen import config
from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.pipeline.context import GenerationContext
from realmgen.environment.generators.pipeline.layer import GenerationLayer
from realmgen.types import WorldTilePos
from realmgen.util.coordinates import (
    disc_points,
    distance_grid,
    orthogonal_line,
    polar_offset,
)

logger = logging.getLogger(__name__)


class ArenaLayer(GenerationLayer):
    """Carves the arena floor out of a solid map.

    The arena is a disc of radius 0.4 * min(width, height) around the map
    center, surrounded by a sloped buffer ring. The center tile is reserved
    for the boss.
    """

    def apply(self, ctx: GenerationContext) -> None:
        cx, cy = ctx.center
        radius = arena_radius(ctx.width, ctx.height)
        ctx.reserved.add((cx, cy))

        self._carve_floor(ctx, radius)
        pillars = self._add_pillars(ctx, radius)
        cover = self._add_cover_walls(ctx, radius, pillars)
        self._add_altar(ctx, radius)
        entrance = self._add_entrance(ctx, radius)

        logger.debug(
            f"Arena: radius {radius:.1f}, {pillars} pillars, {cover} cover walls, "
            f"entrance of {len(entrance)} tiles"
        )

    def _carve_floor(self, ctx: GenerationContext, radius: float) -> None:
        cx, cy = ctx.center
        fine = ctx.noise.sample_grid(ctx.width, ctx.height)
        detail = ctx.noise.sample_grid(ctx.width, ctx.height, scale=2.0)
        dist = distance_grid(ctx.width, ctx.height, cx, cy)

        ctx.cells[:] = CellKind.WALL
        ctx.heights[:] = 0.7 + 0.2 * fine

        inside = dist < radius
        ctx.cells[inside] = CellKind.FLOOR
        ctx.heights[inside] = (
            0.4 + 0.05 * (1.0 - dist[inside] / radius) + 0.05 * detail[inside]
        )

        buffer = config.ARENA_BUFFER_WIDTH
        ring = (dist >= radius) & (dist < radius + buffer)
        ctx.cells[ring] = CellKind.FLOOR
        ctx.heights[ring] = 0.4 + 0.3 * (dist[ring] - radius) / buffer

    def _add_pillars(self, ctx: GenerationContext, radius: float) -> int:
        cx, cy = ctx.center
        count = ctx.rng.randint(*config.ARENA_PILLAR_COUNT)
        for _ in range(count):
            angle = ctx.rng.angle()
            distance = radius * ctx.rng.uniform(*config.ARENA_PILLAR_DISTANCE)
            px, py = polar_offset(cx, cy, angle, distance)
            size = ctx.rng.randint(*config.ARENA_PILLAR_SIZE)

            for x, y, _d in disc_points(px, py, size, ctx.width, ctx.height):
                if (x, y) in ctx.reserved:
                    continue
                if ctx.rng.chance(config.ARENA_PILLAR_WALL_CHANCE):
                    ctx.set_cell(x, y, CellKind.WALL, ctx.rng.uniform(0.7, 0.9))
                else:
                    ctx.set_cell(x, y, CellKind.OBSTACLE, ctx.rng.uniform(0.5, 0.7))
        return count

    def _add_cover_walls(
        self, ctx: GenerationContext, radius: float, pillars: int
    ) -> int:
        """Short straight walls between the pillars for ranged cover."""
        cx, cy = ctx.center
        count = math.floor(pillars * config.ARENA_COVER_WALL_FACTOR)
        for _ in range(count):
            angle = ctx.rng.angle()
            distance = radius * ctx.rng.uniform(*config.ARENA_COVER_WALL_DISTANCE)
            wx, wy = polar_offset(cx, cy, angle, distance)
            half = ctx.rng.randint(*config.ARENA_PILLAR_SIZE)
            horizontal = ctx.rng.chance(0.5)

            for offset in range(-half, half + 1):
                x, y = (wx + offset, wy) if horizontal else (wx, wy + offset)
                if not ctx.in_bounds(x, y) or (x, y) in ctx.reserved:
                    continue
                if ctx.cells[x, y] == CellKind.FLOOR:
                    ctx.set_cell(x, y, CellKind.WALL, ctx.rng.uniform(0.7, 0.9))
        return count

    def _add_altar(self, ctx: GenerationContext, radius: float) -> None:
        """Raised open platform at the center, cleared of pillars."""
        cx, cy = ctx.center
        altar = math.floor(radius * config.ARENA_ALTAR_FRACTION)
        if altar <= 0:
            ctx.set_cell(cx, cy, CellKind.FLOOR, max(0.5, float(ctx.heights[cx, cy])))
            return
        for x, y, d in disc_points(cx, cy, altar, ctx.width, ctx.height):
            ctx.set_cell(x, y, CellKind.FLOOR, 0.5 + 0.2 * (1.0 - d / altar))

    def _add_entrance(
        self, ctx: GenerationContext, radius: float
    ) -> list[WorldTilePos]:
        """Corridor leading out of the arena at a random angle, walled on both sides."""
        cx, cy = ctx.center
        angle = ctx.rng.angle()
        cos_a, sin_a = math.cos(angle), math.sin(angle)

        # Start one tile inside the disc so the corridor joins the floor.
        start = polar_offset(cx, cy, angle, max(0.0, radius - 1))
        end = polar_offset(cx, cy, angle, radius + config.ARENA_ENTRANCE_LENGTH)
        corridor = [
            (x, y)
            for x, y in orthogonal_line(start[0], start[1], end[0], end[1])
            if ctx.in_bounds(x, y)
        ]
        corridor_set = set(corridor)

        jitter = ctx.noise.sample_grid(ctx.width, ctx.height, scale=0.5)
        for x, y in corridor:
            height = max(config.WALKABLE_MIN_HEIGHT, 0.4 + 0.1 * float(jitter[x, y]))
            ctx.set_cell(x, y, CellKind.FLOOR, height)

        # Perpendicular flanking walls, kept outside the arena proper.
        for x, y in corridor:
            for side in (-1, 1):
                fx = round(x - sin_a * side)
                fy = round(y + cos_a * side)
                if (fx, fy) in corridor_set or not ctx.in_bounds(fx, fy):
                    continue
                if math.hypot(fx - cx, fy - cy) < radius:
                    continue
                ctx.set_cell(fx, fy, CellKind.WALL, ctx.rng.uniform(0.7, 0.9))
        return corridor


def arena_radius(width: int, height: int) -> float:
    return config.ARENA_RADIUS_FRACTION * min(width, height)
