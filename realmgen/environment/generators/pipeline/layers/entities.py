"""Enemy and NPC placement.

Enemies are scattered over walkable tiles at the map's effective enemy
density, with a few clustered groups on top. Arenas skip the density model
and get a fixed boss encounter. Towns also get shopkeepers, room residents
and a few wandering villagers.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from realmgen import config
from realmgen.environment.generators.options import Difficulty
from realmgen.environment.generators.pipeline.context import GenerationContext
from realmgen.environment.generators.pipeline.layer import GenerationLayer
from realmgen.environment.map import EnemySpawn, NpcSpawn, ShopItem
from realmgen.types import WorldTilePos
from realmgen.util.coordinates import distance_grid
from realmgen.util.rng import RNG

logger = logging.getLogger(__name__)

ELITE = "elite"
BOSS = "boss"


def level_range(difficulty: Difficulty, kind: str) -> tuple[int, int]:
    """Inclusive level range for an enemy of `kind` at `difficulty`.

    Elites and bosses scale the tier's bounds and round down.
    """
    low, high = difficulty.level_range
    if kind == BOSS:
        low_scale, high_scale = config.BOSS_LEVEL_SCALE
    elif kind == ELITE:
        low_scale, high_scale = config.ELITE_LEVEL_SCALE
    else:
        return (low, high)
    return (math.floor(low * low_scale), math.floor(high * high_scale))


def roll_level(rng: RNG, difficulty: Difficulty, kind: str) -> int:
    return rng.randint(*level_range(difficulty, kind))


def enemy_pool(map_type: str) -> tuple[str, ...]:
    return config.ENEMY_POOLS.get(map_type, config.DEFAULT_ENEMY_POOL)


class EnemyPlacementLayer(GenerationLayer):
    """Density-driven enemy scatter plus clustered groups.

    Scattered enemies number floor(candidates * enemy density) and are drawn
    without replacement. Group members carry a group_id; scattered enemies
    do not.
    """

    def apply(self, ctx: GenerationContext) -> None:
        walkable = ctx.walkable_map()
        occupied = ctx.occupied_positions()
        candidates = [
            pos
            for pos in ((int(x), int(y)) for x, y in np.argwhere(walkable))
            if pos not in occupied and pos not in ctx.reserved
        ]
        difficulty = ctx.options.difficulty_level
        pool = enemy_pool(ctx.map_type.value)

        total = math.floor(len(candidates) * ctx.densities.enemy)
        for x, y in ctx.rng.sample(candidates, total):
            if ctx.rng.chance(difficulty.elite_chance):
                kind = ELITE
            else:
                kind = ctx.rng.choice(pool)
            ctx.enemy_spawns.append(
                EnemySpawn(x, y, kind, roll_level(ctx.rng, difficulty, kind))
            )
            occupied.add((x, y))

        remaining = [pos for pos in candidates if pos not in occupied]
        grouped = self._place_groups(ctx, remaining, occupied, walkable, pool)

        logger.debug(
            f"Placed {total} scattered enemies and {grouped} group members "
            f"on {len(candidates)} candidate tiles"
        )

    def _place_groups(
        self,
        ctx: GenerationContext,
        remaining: list[WorldTilePos],
        occupied: set[WorldTilePos],
        walkable: np.ndarray,
        pool: tuple[str, ...],
    ) -> int:
        difficulty = ctx.options.difficulty_level
        placed = 0
        groups = ctx.rng.randint(*config.ENEMY_GROUP_COUNT)
        for group_id in range(groups):
            if not remaining:
                logger.debug(f"No anchor left for enemy group {group_id}")
                break
            ax, ay = remaining.pop(ctx.rng.randrange(len(remaining)))
            kind = ctx.rng.choice(pool)
            size = ctx.rng.randint(*config.ENEMY_GROUP_SIZE)
            for _ in range(size):
                angle = ctx.rng.angle()
                distance = ctx.rng.randint(*config.ENEMY_GROUP_SPREAD)
                x = round(ax + math.cos(angle) * distance)
                y = round(ay + math.sin(angle) * distance)
                if not ctx.in_bounds(x, y) or not walkable[x, y]:
                    continue
                if (x, y) in occupied or (x, y) in ctx.reserved:
                    continue
                ctx.enemy_spawns.append(
                    EnemySpawn(
                        x,
                        y,
                        kind,
                        roll_level(ctx.rng, difficulty, kind),
                        group_id=group_id,
                    )
                )
                occupied.add((x, y))
                placed += 1
        return placed


class ArenaEncounterLayer(GenerationLayer):
    """One boss on the arena center, ringed by elite guards."""

    def apply(self, ctx: GenerationContext) -> None:
        difficulty = ctx.options.difficulty_level
        cx, cy = ctx.center
        ctx.enemy_spawns.append(
            EnemySpawn(cx, cy, BOSS, roll_level(ctx.rng, difficulty, BOSS))
        )
        occupied = ctx.occupied_positions()

        low, high = config.ARENA_ELITE_DISTANCE
        wanted = ctx.rng.randint(*config.ARENA_ELITE_COUNT)
        placed = 0
        for _ in range(wanted):
            for _attempt in range(config.ARENA_ELITE_PLACEMENT_ATTEMPTS):
                angle = ctx.rng.angle()
                distance = ctx.rng.uniform(low, high)
                x = round(cx + math.cos(angle) * distance)
                y = round(cy + math.sin(angle) * distance)
                if not low <= math.hypot(x - cx, y - cy) <= high:
                    continue
                if not ctx.is_walkable(x, y) or (x, y) in occupied:
                    continue
                ctx.enemy_spawns.append(
                    EnemySpawn(x, y, ELITE, roll_level(ctx.rng, difficulty, ELITE))
                )
                occupied.add((x, y))
                placed += 1
                break

        if placed < wanted:
            logger.warning(f"Arena placed {placed} of {wanted} elite guards")
        logger.debug(f"Arena encounter: boss at {(cx, cy)} with {placed} elites")


class NpcPlacementLayer(GenerationLayer):
    """Shopkeepers, room residents and wandering townsfolk."""

    def apply(self, ctx: GenerationContext) -> None:
        occupied = ctx.occupied_positions()

        for room in ctx.rooms:
            if room.is_shop:
                npc = self._make_shopkeeper(ctx, room.center)
            elif ctx.rng.chance(config.ROOM_NPC_CHANCE):
                npc = self._make_resident(ctx, room.center)
            else:
                continue
            ctx.npc_spawns.append(npc)
            occupied.add(room.center)

        roaming = self._place_roaming(ctx, occupied)
        residents = len(ctx.npc_spawns) - roaming
        logger.debug(f"Placed {residents} room NPCs and {roaming} roaming NPCs")

    def _make_shopkeeper(self, ctx: GenerationContext, pos: WorldTilePos) -> NpcSpawn:
        kind = ctx.rng.choice(config.SHOP_NPC_KINDS)
        shop_kind = ctx.rng.choice(config.SHOP_KINDS)
        count = ctx.rng.randint(*config.SHOP_ITEM_COUNT)
        items = [
            ShopItem(f"item_{i}", ctx.rng.randint(*config.SHOP_ITEM_PRICE))
            for i in range(count)
        ]
        return NpcSpawn(
            x=pos[0],
            y=pos[1],
            kind=kind,
            is_shop=True,
            shop_kind=shop_kind,
            shop_items=items,
            dialogue_lines=list(config.SHOP_DIALOGUE),
        )

    def _make_resident(self, ctx: GenerationContext, pos: WorldTilePos) -> NpcSpawn:
        return NpcSpawn(
            x=pos[0],
            y=pos[1],
            kind=ctx.rng.choice(config.REGULAR_NPC_KINDS),
            dialogue_lines=self._dialogue(ctx),
        )

    def _dialogue(self, ctx: GenerationContext) -> list[str]:
        count = ctx.rng.randint(*config.DIALOGUE_LINE_COUNT)
        return ctx.rng.sample(config.TOWN_DIALOGUE, count)

    def _place_roaming(
        self, ctx: GenerationContext, occupied: set[WorldTilePos]
    ) -> int:
        """Scatter villagers on open ground inside the town, outside buildings."""
        cx, cy = ctx.center
        radius = config.TOWN_RADIUS_FRACTION * ctx.min_dimension
        open_ground = ctx.walkable_map() & (
            distance_grid(ctx.width, ctx.height, cx, cy) <= radius
        )
        for room in ctx.rooms:
            x1, y1, x2, y2 = room.x, room.y, room.x + room.width, room.y + room.height
            open_ground[x1:x2, y1:y2] = False

        candidates = [
            pos
            for pos in ((int(x), int(y)) for x, y in np.argwhere(open_ground))
            if pos not in occupied
        ]
        count = math.floor(len(candidates) * ctx.densities.npc)
        for pos in ctx.rng.sample(candidates, count):
            ctx.npc_spawns.append(self._make_resident(ctx, pos))
        return count
