"""Chest and obstacle placement on open floor."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator

import numpy as np

from realmgen import config
from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.pipeline.context import GenerationContext
from realmgen.environment.generators.pipeline.layer import GenerationLayer
from realmgen.types import WorldTilePos

logger = logging.getLogger(__name__)


class ObjectPlacementLayer(GenerationLayer):
    """Places chests, then obstacles, on a shuffled list of open floor tiles.

    Both quotas are floor(n * density) where n is the number of open,
    unreserved floor tiles before anything is placed, and the densities are
    the context's effective (difficulty and map type scaled) values. A tile
    only receives an object if blocking it keeps its neighbours connected,
    so objects never cut one part of the map off from another.
    """

    def apply(self, ctx: GenerationContext) -> None:
        walkable = ctx.walkable_map()
        candidates = [
            (int(x), int(y))
            for x, y in np.argwhere(walkable)
            if (int(x), int(y)) not in ctx.reserved
        ]
        n = len(candidates)
        ctx.rng.shuffle(candidates)
        order = iter(candidates)

        chest_quota = math.floor(n * ctx.densities.chest)
        obstacle_quota = math.floor(n * ctx.densities.obstacle)
        obstacle_height = config.OBSTACLE_MIN_HEIGHT.get(ctx.map_type.value, 0.4)

        chests = self._fill(ctx, order, chest_quota, walkable, CellKind.CHEST, None)
        obstacles = self._fill(
            ctx, order, obstacle_quota, walkable, CellKind.OBSTACLE, obstacle_height
        )

        if chests < chest_quota or obstacles < obstacle_quota:
            logger.debug(
                f"Object placement ran out of safe tiles: "
                f"chests {chests}/{chest_quota}, "
                f"obstacles {obstacles}/{obstacle_quota}"
            )
        logger.debug(f"Placed {chests} chests and {obstacles} obstacles on {n} tiles")

    def _fill(
        self,
        ctx: GenerationContext,
        order: Iterator[WorldTilePos],
        quota: int,
        walkable: np.ndarray,
        kind: CellKind,
        min_height: float | None,
    ) -> int:
        """Consume tiles from `order` until `quota` objects of `kind` are placed."""
        placed = 0
        while placed < quota:
            pos = next(order, None)
            if pos is None:
                break
            x, y = pos
            if not ctx.can_block(x, y, walkable):
                continue
            height = None
            if min_height is not None:
                height = max(min_height, float(ctx.heights[x, y]))
            ctx.set_cell(x, y, kind, height)
            walkable[x, y] = False
            placed += 1
        return placed
