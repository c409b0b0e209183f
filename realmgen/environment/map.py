"""The generated map value and the records placed on it."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from realmgen.environment.cell_types import CellKind, get_walkable_map
from realmgen.types import TileCoord, TilePath, WorldTilePos
from realmgen.util.coordinates import Rect
from realmgen.util.grid import Grid
from realmgen.util.pathfinding import PathfindingGrid

if TYPE_CHECKING:
    from realmgen.environment.generators.options import Difficulty, MapType
    from realmgen.util.rng import RNG


@dataclass
class Room:
    """A dungeon room or town building footprint.

    Attributes:
        x: Left column of the footprint.
        y: Top row of the footprint.
        width: Footprint width in tiles (town buildings include their walls).
        height: Footprint height in tiles.
        center_x: Column of the room center.
        center_y: Row of the room center.
        door_x: Column of the door tile. Dungeon rooms use the center.
        door_y: Row of the door tile.
        is_shop: True for the town's shop buildings.
    """

    x: TileCoord
    y: TileCoord
    width: TileCoord
    height: TileCoord
    center_x: TileCoord
    center_y: TileCoord
    door_x: TileCoord
    door_y: TileCoord
    is_shop: bool = False

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def center(self) -> WorldTilePos:
        return (self.center_x, self.center_y)

    @property
    def door(self) -> WorldTilePos:
        return (self.door_x, self.door_y)

    def contains(self, x: TileCoord, y: TileCoord) -> bool:
        return self.bounds.contains(x, y)


@dataclass
class EnemySpawn:
    """An enemy placement. kind is a biome enemy name, "elite" or "boss"."""

    x: TileCoord
    y: TileCoord
    kind: str
    level: int
    group_id: int | None = None

    @property
    def position(self) -> WorldTilePos:
        return (self.x, self.y)


@dataclass
class ShopItem:
    item_id: str
    price: int


@dataclass
class NpcSpawn:
    """A non-hostile character placement."""

    x: TileCoord
    y: TileCoord
    kind: str
    is_shop: bool = False
    shop_kind: str | None = None
    shop_items: list[ShopItem] = field(default_factory=list)
    dialogue_lines: list[str] = field(default_factory=list)

    @property
    def position(self) -> WorldTilePos:
        return (self.x, self.y)


@dataclass(eq=False)
class MapModel:
    """A finished map. Immutable once generate_map() returns it.

    Attributes:
        width: Map width in tiles.
        height: Map height in tiles.
        tile_size: Pixels per tile, for renderers.
        height_map: Read-only grid of tile heights in [0, 1].
        placement_grid: Read-only grid of CellKind codes.
        rooms: Dungeon rooms or town buildings, in placement order.
        enemy_spawns: Enemy placements.
        npc_spawns: NPC placements (towns only).
        map_type: The generator that produced this map.
        difficulty: Difficulty the densities and levels were scaled for.
        seed: The integer seed actually used, so unseeded maps can be rebuilt.
    """

    width: int
    height: int
    tile_size: int
    height_map: Grid[float]
    placement_grid: Grid[CellKind]
    rooms: list[Room]
    enemy_spawns: list[EnemySpawn]
    npc_spawns: list[NpcSpawn]
    map_type: MapType
    difficulty: Difficulty
    seed: int

    def __post_init__(self) -> None:
        self.height_map.freeze()
        self.placement_grid.freeze()

    # -------------------------------------------------------------------------
    # Derived grids
    # -------------------------------------------------------------------------

    @functools.cached_property
    def walkable(self) -> np.ndarray:
        """Boolean (width, height) walkability array, cached and read-only."""
        walkable = get_walkable_map(self.placement_grid.data, self.height_map.data)
        walkable.flags.writeable = False
        return walkable

    @functools.cached_property
    def pathfinding_grid(self) -> PathfindingGrid:
        """Pathfinding snapshot, built on first use."""
        return PathfindingGrid.from_walkable(self.walkable)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_kind(self, x: TileCoord, y: TileCoord) -> CellKind | None:
        value = self.placement_grid.get(x, y)
        return None if value is None else CellKind(int(value))

    def is_walkable(self, x: TileCoord, y: TileCoord) -> bool:
        return self.in_bounds(x, y) and bool(self.walkable[x, y])

    def find_path(
        self,
        start_x: TileCoord,
        start_y: TileCoord,
        end_x: TileCoord,
        end_y: TileCoord,
        *,
        max_expansions: int | None = None,
    ) -> TilePath | None:
        """Shortest 4-directional path between two tiles, or None."""
        return self.pathfinding_grid.find_path(
            start_x, start_y, end_x, end_y, max_expansions=max_expansions
        )

    def get_random_walkable_position(self, rng: RNG | None = None) -> WorldTilePos:
        return self.pathfinding_grid.get_random_walkable_position(rng)

    def count_cells(self, kind: CellKind) -> int:
        return self.placement_grid.count(kind)

    def __repr__(self) -> str:
        return (
            f"MapModel({self.map_type!s} {self.width}x{self.height}, "
            f"difficulty={self.difficulty!s}, seed={self.seed}, "
            f"rooms={len(self.rooms)}, enemies={len(self.enemy_spawns)}, "
            f"npcs={len(self.npc_spawns)})"
        )
