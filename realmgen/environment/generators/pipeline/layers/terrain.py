"""Open field terrain: noise heightmap plus forests, lakes, rocks and paths."""

from __future__ import annotations

import logging
import math

import numpy as np

from realmgen import config
from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.pipeline.context import GenerationContext
from realmgen.environment.generators.pipeline.layer import GenerationLayer
from realmgen.util.coordinates import bresenham_line, disc_points

logger = logging.getLogger(__name__)


class NoiseTerrainLayer(GenerationLayer):
    """Fills the map from a two-octave noise heightmap.

    Low ground becomes water, high ground becomes impassable rock and the
    rest is open floor.
    """

    def __init__(
        self,
        water_threshold: float = config.FIELD_WATER_THRESHOLD,
        mountain_threshold: float = config.FIELD_MOUNTAIN_THRESHOLD,
    ) -> None:
        self.water_threshold = water_threshold
        self.mountain_threshold = mountain_threshold

    def apply(self, ctx: GenerationContext) -> None:
        base = ctx.noise.sample_grid(ctx.width, ctx.height)
        detail = ctx.noise.sample_grid(
            ctx.width, ctx.height, scale=config.FIELD_DETAIL_FREQUENCY
        )
        weight = config.FIELD_DETAIL_WEIGHT
        # Remap the weighted sum from [-(1 + w), 1 + w] into [0, 1].
        heights = ((base + weight * detail) / (1.0 + weight)) * 0.5 + 0.5
        ctx.heights[:] = np.clip(heights, 0.0, 1.0)

        ctx.cells[:] = CellKind.FLOOR
        ctx.cells[ctx.heights < self.water_threshold] = CellKind.WATER
        ctx.cells[ctx.heights > self.mountain_threshold] = CellKind.WALL

        water = int(np.count_nonzero(ctx.cells == CellKind.WATER))
        rock = int(np.count_nonzero(ctx.cells == CellKind.WALL))
        logger.debug(f"Field terrain: {water} water, {rock} rock tiles")


class FieldFeatureLayer(GenerationLayer):
    """Overlays forests, lakes, natural obstacles and paths on the terrain.

    Paths are carved last so they cut through everything placed before them.
    """

    def apply(self, ctx: GenerationContext) -> None:
        forests = ctx.rng.randint(*config.FIELD_FOREST_COUNT)
        for _ in range(forests):
            self._add_forest(ctx)

        lakes = ctx.rng.randint(*config.FIELD_LAKE_COUNT)
        for _ in range(lakes):
            self._add_lake(ctx)

        obstacles = self._add_natural_obstacles(ctx)

        paths = ctx.rng.randint(*config.FIELD_PATH_COUNT)
        for _ in range(paths):
            start = self._random_tile(ctx)
            end = self._random_tile(ctx)
            width = ctx.rng.randint(*config.FIELD_PATH_WIDTH)
            carve_path(ctx, start, end, width)

        logger.debug(
            f"Field features: {forests} forests, {lakes} lakes, "
            f"{obstacles} natural obstacles, {paths} paths"
        )

    def _random_tile(self, ctx: GenerationContext) -> tuple[int, int]:
        x = ctx.rng.randint(0, ctx.width - 1)
        y = ctx.rng.randint(0, ctx.height - 1)
        return (x, y)

    def _add_forest(self, ctx: GenerationContext) -> None:
        cx, cy = self._random_tile(ctx)
        radius = ctx.rng.randint(*config.FIELD_FOREST_RADIUS)
        density = ctx.rng.uniform(*config.FIELD_FOREST_DENSITY)

        for x, y, d in disc_points(cx, cy, radius, ctx.width, ctx.height):
            if ctx.rng.chance(density * (1.0 - d / radius)):
                kind, heights = CellKind.WALL, config.FIELD_TREE_HEIGHT
            else:
                kind, heights = CellKind.FLOOR, config.FIELD_FOREST_FLOOR_HEIGHT
            ctx.set_cell(x, y, kind, ctx.rng.uniform(*heights))

    def _add_lake(self, ctx: GenerationContext) -> None:
        cx, cy = self._random_tile(ctx)
        size = ctx.rng.randint(*config.FIELD_LAKE_SIZE)
        stretch = config.FIELD_LAKE_STRETCH
        reach_x = math.ceil(size * math.sqrt(stretch))

        for x in range(max(0, cx - reach_x), min(ctx.width, cx + reach_x + 1)):
            for y in range(max(0, cy - size), min(ctx.height, cy + size + 1)):
                dx, dy = x - cx, y - cy
                d = math.sqrt(dx * dx / stretch + dy * dy)
                if d <= size:
                    # Deepest at the center, shallower toward the shore
                    ctx.set_cell(x, y, CellKind.WATER, 0.1 + 0.1 * d / size)

    def _add_natural_obstacles(self, ctx: GenerationContext) -> int:
        """Scatter rocks and bushes on floor tiles that have room around them."""
        chance = ctx.densities.wall
        if chance <= 0:
            return 0

        walkable = ctx.walkable_map()
        placed = 0
        for x in range(ctx.width):
            for y in range(ctx.height):
                if not walkable[x, y]:
                    continue
                open_sides = sum(
                    1
                    for nx, ny in ((x, y - 1), (x + 1, y), (x, y + 1), (x - 1, y))
                    if ctx.in_bounds(nx, ny) and walkable[nx, ny]
                )
                if open_sides < 2 or not ctx.rng.chance(chance):
                    continue
                if ctx.rng.chance(config.FIELD_ROCK_CHANCE):
                    kind, heights = CellKind.WALL, config.FIELD_ROCK_HEIGHT
                else:
                    kind, heights = CellKind.OBSTACLE, config.FIELD_BUSH_HEIGHT
                ctx.set_cell(x, y, kind, ctx.rng.uniform(*heights))
                walkable[x, y] = False
                placed += 1
        return placed


def carve_path(
    ctx: GenerationContext,
    start: tuple[int, int],
    end: tuple[int, int],
    width: int,
    keep_walls: bool = False,
) -> int:
    """Force a band of walkable floor along the line from start to end.

    Every tile within `width` of a line tile becomes FLOOR with a height that
    dips slightly toward the middle of the band.

    Args:
        ctx: The generation context to modify.
        start: First line endpoint.
        end: Second line endpoint.
        width: Band radius in tiles.
        keep_walls: Leave existing WALL tiles untouched (town roads).

    Returns:
        Number of tiles written.
    """
    carved = 0
    for px, py in bresenham_line(start[0], start[1], end[0], end[1]):
        for x, y, d in disc_points(px, py, width, ctx.width, ctx.height):
            if keep_walls and ctx.cells[x, y] == CellKind.WALL:
                continue
            ctx.set_cell(x, y, CellKind.FLOOR, 0.4 - 0.05 * d / width)
            carved += 1
    return carved
