"""Generation context for the pipeline map generator.

The GenerationContext is a mutable container that holds all state during map
generation. Each layer in the pipeline receives the same context and modifies
it in place. This avoids copying large numpy arrays between layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from realmgen import config
from realmgen.environment.cell_types import CellKind, get_walkable_map
from realmgen.environment.generators.options import (
    DensityProfile,
    MapOptions,
    MapType,
)
from realmgen.environment.map import EnemySpawn, MapModel, NpcSpawn, Room
from realmgen.types import TileCoord, WorldTilePos
from realmgen.util.coordinates import is_safe_to_block
from realmgen.util.grid import Grid
from realmgen.util.noise import NoiseField
from realmgen.util.rng import RandomStream


@dataclass
class GenerationContext:
    """Mutable state container passed through the generation pipeline.

    Attributes:
        width: Map width in tiles.
        height: Map height in tiles.
        map_type: The kind of map being generated.
        options: Normalized caller options.
        densities: Effective densities after difficulty/map multipliers.
        rng: The run's single random stream. Layers draw from it in order.
        noise: Seeded noise field at the options' noise scale.
        cells: 2D numpy array of CellKind codes. Shape: (width, height).
        heights: 2D numpy array of tile heights. Shape: (width, height).
        rooms: Rooms or buildings placed so far.
        enemy_spawns: Enemy placements.
        npc_spawns: NPC placements.
        reserved: Tiles no optional object may occupy (doors, NPC anchors,
            the arena boss tile).
    """

    width: int
    height: int
    map_type: MapType
    options: MapOptions
    densities: DensityProfile
    rng: RandomStream
    noise: NoiseField
    cells: np.ndarray
    heights: np.ndarray
    rooms: list[Room] = field(default_factory=list)
    enemy_spawns: list[EnemySpawn] = field(default_factory=list)
    npc_spawns: list[NpcSpawn] = field(default_factory=list)
    reserved: set[WorldTilePos] = field(default_factory=set)

    @classmethod
    def create_empty(
        cls,
        map_type: MapType,
        options: MapOptions,
        rng: RandomStream | None = None,
        fill_cell: CellKind = CellKind.WALL,
        fill_height: float = 0.0,
    ) -> GenerationContext:
        """Create an empty generation context with default values.

        Args:
            map_type: The kind of map being generated.
            options: Normalized options. Width, height, seed and noise scale
                are read from here.
            rng: Stream to use. Defaults to a fresh stream seeded from
                options.seed.
            fill_cell: Cell kind to fill the initial map with.
            fill_height: Height to fill the initial map with.

        Returns:
            A new GenerationContext ready for layer processing.
        """
        width, height = options.width, options.height
        if rng is None:
            rng = RandomStream(options.seed)

        cells = np.full((width, height), fill_cell, dtype=np.uint8, order="F")
        heights = np.full((width, height), fill_height, dtype=np.float64, order="F")

        return cls(
            width=width,
            height=height,
            map_type=map_type,
            options=options,
            densities=DensityProfile.resolve(options, map_type),
            rng=rng,
            noise=NoiseField.from_stream(rng, options.noise_scale),
            cells=cells,
            heights=heights,
        )

    # -------------------------------------------------------------------------
    # Cell helpers
    # -------------------------------------------------------------------------

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_cell(
        self, x: TileCoord, y: TileCoord, kind: CellKind, height: float | None = None
    ) -> bool:
        """Write a cell (and optionally its height). Off-map writes are dropped."""
        if not self.in_bounds(x, y):
            return False
        self.cells[x, y] = kind
        if height is not None:
            self.heights[x, y] = height
        return True

    @property
    def center(self) -> WorldTilePos:
        return (self.width // 2, self.height // 2)

    @property
    def min_dimension(self) -> int:
        return min(self.width, self.height)

    def walkable_map(self) -> np.ndarray:
        return get_walkable_map(self.cells, self.heights)

    def is_walkable(self, x: TileCoord, y: TileCoord) -> bool:
        return (
            self.in_bounds(x, y)
            and self.cells[x, y] == CellKind.FLOOR
            and self.heights[x, y] >= config.WALKABLE_MIN_HEIGHT
        )

    def can_block(self, x: TileCoord, y: TileCoord, walkable: np.ndarray) -> bool:
        """True if an optional object may be placed on (x, y).

        The tile must be open, unreserved floor, and blocking it must not cut
        its neighbours off from each other.
        """
        return (
            (x, y) not in self.reserved
            and bool(walkable[x, y])
            and is_safe_to_block(walkable, x, y)
        )

    def occupied_positions(self) -> set[WorldTilePos]:
        taken = {spawn.position for spawn in self.enemy_spawns}
        taken.update(npc.position for npc in self.npc_spawns)
        return taken

    def to_map_model(self) -> MapModel:
        """Freeze the context into the MapModel handed to callers.

        Returns:
            A MapModel with copies of the grids, made read-only.
        """
        return MapModel(
            width=self.width,
            height=self.height,
            tile_size=self.options.tile_size,
            height_map=Grid.from_array(np.clip(self.heights, 0.0, 1.0)),
            placement_grid=Grid.from_array(self.cells, dtype=np.uint8),
            rooms=list(self.rooms),
            enemy_spawns=list(self.enemy_spawns),
            npc_spawns=list(self.npc_spawns),
            map_type=self.map_type,
            difficulty=self.options.difficulty_level,
            seed=self.rng.seed,
        )
