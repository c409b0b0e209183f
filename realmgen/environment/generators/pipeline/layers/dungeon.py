"""Room-and-corridor dungeon layout.

Places non-overlapping rectangular rooms inside a solid rock map, links them
in placement order with L-shaped corridors, adds a few extra corridors to
form loops, scatters pillars inside large rooms, walls off everything that
touches open floor, and finally derives heights from the cell kinds.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from realmgen import config
from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.pipeline.context import GenerationContext
from realmgen.environment.generators.pipeline.layer import GenerationLayer
from realmgen.environment.map import Room
from realmgen.types import TileCoord

logger = logging.getLogger(__name__)


class RoomLayoutLayer(GenerationLayer):
    """Carves rooms and corridors into a map filled with WALL.

    Room count and size limits come from the context options. Placement
    degrades gracefully: if the map is too crowded, fewer rooms are placed
    and a warning is logged.
    """

    def __init__(self, padding: int = config.ROOM_PADDING) -> None:
        self.padding = padding

    def apply(self, ctx: GenerationContext) -> None:
        ctx.cells[:] = CellKind.WALL

        rooms = self._place_rooms(ctx)
        for room in rooms:
            ctx.cells[room.x : room.x + room.width, room.y : room.y + room.height] = (
                CellKind.FLOOR
            )
        ctx.rooms.extend(rooms)

        for previous, current in zip(rooms, rooms[1:], strict=False):
            self._connect(ctx, previous, current)

        extra = math.floor(len(rooms) * config.EXTRA_CORRIDOR_FRACTION)
        if len(rooms) >= 2:
            for _ in range(extra):
                a, b = ctx.rng.sample(rooms, 2)
                self._connect(ctx, a, b)

        for room in rooms:
            ctx.reserved.add(room.door)

        self._wall_off_floor(ctx)
        wall_heights = self._apply_heights(ctx)
        pillars = self._place_pillars(ctx, wall_heights)

        logger.debug(
            f"Dungeon layout: {len(rooms)} rooms, {max(0, len(rooms) - 1)} "
            f"corridors + {extra if len(rooms) >= 2 else 0} loops, {pillars} pillars"
        )

    # -------------------------------------------------------------------------
    # Rooms
    # -------------------------------------------------------------------------

    def _place_rooms(self, ctx: GenerationContext) -> list[Room]:
        """Place up to room_count rooms with random sizes and positions.

        Each attempt samples a size, then picks uniformly among the top-left
        corners where a room of that size keeps the padded gap to every room
        already placed. An attempt fails only if no such corner exists.
        """
        opts = ctx.options
        # Rooms stay inside a 1-tile border of rock.
        max_w = min(opts.room_max_size, ctx.width - 2)
        max_h = min(opts.room_max_size, ctx.height - 2)
        if max_w < 1 or max_h < 1:
            if opts.room_count > 0:
                logger.warning(f"Map {ctx.width}x{ctx.height} is too small for rooms")
            return []
        min_w = min(opts.room_min_size, max_w)
        min_h = min(opts.room_min_size, max_h)

        rooms: list[Room] = []
        attempts = opts.room_count * config.ROOM_PLACEMENT_ATTEMPTS_PER_ROOM
        for _ in range(attempts):
            if len(rooms) >= opts.room_count:
                break
            w = ctx.rng.randint(min_w, max_w)
            h = ctx.rng.randint(min_h, max_h)
            position = self._pick_position(ctx, rooms, w, h)
            if position is None:
                continue
            x, y = position
            rooms.append(
                Room(
                    x=x,
                    y=y,
                    width=w,
                    height=h,
                    center_x=x + w // 2,
                    center_y=y + h // 2,
                    door_x=x + w // 2,
                    door_y=y + h // 2,
                )
            )

        if len(rooms) < opts.room_count:
            logger.warning(
                f"Placed {len(rooms)} of {opts.room_count} rooms "
                f"after {attempts} attempts"
            )
        return rooms

    def _pick_position(
        self, ctx: GenerationContext, rooms: list[Room], w: int, h: int
    ) -> tuple[TileCoord, TileCoord] | None:
        # Candidate top-left corners are x in [1, width - 1 - w].
        span_x = ctx.width - 1 - w
        span_y = ctx.height - 1 - h
        if span_x < 1 or span_y < 1:
            return None

        allowed = np.ones((span_x, span_y), dtype=np.bool_)
        gap = 2 * self.padding
        for room in rooms:
            # Corners (index = x - 1) whose padded rect hits this room's padded rect.
            x_lo = max(0, room.x - w - gap)
            x_hi = min(span_x, room.x + room.width + gap - 1)
            y_lo = max(0, room.y - h - gap)
            y_hi = min(span_y, room.y + room.height + gap - 1)
            if x_lo < x_hi and y_lo < y_hi:
                allowed[x_lo:x_hi, y_lo:y_hi] = False

        free = np.flatnonzero(allowed)
        if len(free) == 0:
            return None
        ix, iy = divmod(int(free[ctx.rng.randrange(len(free))]), span_y)
        return (ix + 1, iy + 1)

    # -------------------------------------------------------------------------
    # Corridors
    # -------------------------------------------------------------------------

    def _connect(self, ctx: GenerationContext, a: Room, b: Room) -> None:
        """Join two room centers with an L-shaped corridor."""
        (x1, y1), (x2, y2) = a.center, b.center
        if ctx.rng.random() > 0.5:
            self._carve_horizontal(ctx, x1, x2, y1)
            self._carve_vertical(ctx, y1, y2, x2)
        else:
            self._carve_vertical(ctx, y1, y2, x1)
            self._carve_horizontal(ctx, x1, x2, y2)

    def _carve_horizontal(
        self, ctx: GenerationContext, x1: TileCoord, x2: TileCoord, y: TileCoord
    ) -> None:
        for x in range(min(x1, x2), max(x1, x2) + 1):
            ctx.set_cell(x, y, CellKind.FLOOR)
            for fy in (y - 1, y + 1):
                if ctx.in_bounds(x, fy) and ctx.cells[x, fy] != CellKind.FLOOR:
                    ctx.cells[x, fy] = CellKind.WALL

    def _carve_vertical(
        self, ctx: GenerationContext, y1: TileCoord, y2: TileCoord, x: TileCoord
    ) -> None:
        for y in range(min(y1, y2), max(y1, y2) + 1):
            ctx.set_cell(x, y, CellKind.FLOOR)
            for fx in (x - 1, x + 1):
                if ctx.in_bounds(fx, y) and ctx.cells[fx, y] != CellKind.FLOOR:
                    ctx.cells[fx, y] = CellKind.WALL

    # -------------------------------------------------------------------------
    # Finishing passes
    # -------------------------------------------------------------------------

    def _wall_off_floor(self, ctx: GenerationContext) -> None:
        """Turn every non-floor tile 8-adjacent to floor into WALL."""
        floor = ctx.cells == CellKind.FLOOR
        near_floor = np.zeros_like(floor)
        w, h = floor.shape
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                # near_floor[x, y] |= floor[x + dx, y + dy]
                src_x = slice(max(0, dx), w + min(0, dx))
                src_y = slice(max(0, dy), h + min(0, dy))
                dst_x = slice(max(0, -dx), w + min(0, -dx))
                dst_y = slice(max(0, -dy), h + min(0, -dy))
                near_floor[dst_x, dst_y] |= floor[src_x, src_y]
        ctx.cells[near_floor & ~floor] = CellKind.WALL

    def _apply_heights(self, ctx: GenerationContext) -> np.ndarray:
        coarse = ctx.noise.sample_grid(ctx.width, ctx.height, scale=0.5)
        fine = ctx.noise.sample_grid(ctx.width, ctx.height)

        base, amplitude = config.DUNGEON_FLOOR_HEIGHT
        floor_heights = np.clip(
            base + amplitude * coarse, *config.DUNGEON_FLOOR_HEIGHT_RANGE
        )
        base, amplitude = config.DUNGEON_WALL_HEIGHT
        wall_heights = np.clip(
            base + amplitude * fine, *config.DUNGEON_WALL_HEIGHT_RANGE
        )

        floor = ctx.cells == CellKind.FLOOR
        ctx.heights[:] = np.where(floor, floor_heights, wall_heights)
        return wall_heights

    def _place_pillars(self, ctx: GenerationContext, wall_heights: np.ndarray) -> int:
        """Scatter single-tile pillars inside open room interiors."""
        chance = ctx.densities.wall * config.DUNGEON_PILLAR_FACTOR
        if chance <= 0:
            return 0

        walkable = ctx.walkable_map()
        placed = 0
        for x in range(1, ctx.width - 1):
            for y in range(1, ctx.height - 1):
                if not walkable[x, y]:
                    continue
                if not (
                    walkable[x - 1, y]
                    and walkable[x + 1, y]
                    and walkable[x, y - 1]
                    and walkable[x, y + 1]
                ):
                    continue
                if not ctx.rng.chance(chance):
                    continue
                if not ctx.can_block(x, y, walkable):
                    continue
                ctx.set_cell(x, y, CellKind.WALL, float(wall_heights[x, y]))
                walkable[x, y] = False
                placed += 1
        return placed
