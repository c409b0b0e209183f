"""Procedural RPG map generation with grid pathfinding.

Typical use:

    from realmgen import generate_map

    dungeon = generate_map("dungeon", width=40, height=40, seed=42, room_count=5)
    path = dungeon.find_path(*dungeon.rooms[0].door, *dungeon.rooms[1].door)
"""

from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators import (
    Difficulty,
    MapGenerator,
    MapOptions,
    MapType,
    generate_map,
)
from realmgen.environment.map import EnemySpawn, MapModel, NpcSpawn, Room, ShopItem
from realmgen.util.pathfinding import PathfindingGrid
from realmgen.util.rng import RandomStream

__all__ = [
    "CellKind",
    "Difficulty",
    "EnemySpawn",
    "MapGenerator",
    "MapModel",
    "MapOptions",
    "MapType",
    "NpcSpawn",
    "PathfindingGrid",
    "RandomStream",
    "Room",
    "ShopItem",
    "generate_map",
]
