"""Generation layers, one concern each, applied in order by the pipeline."""

from .arena import ArenaLayer
from .dungeon import RoomLayoutLayer
from .entities import ArenaEncounterLayer, EnemyPlacementLayer, NpcPlacementLayer
from .objects import ObjectPlacementLayer
from .terrain import FieldFeatureLayer, NoiseTerrainLayer
from .town import TownLayer

__all__ = [
    "ArenaEncounterLayer",
    "ArenaLayer",
    "EnemyPlacementLayer",
    "FieldFeatureLayer",
    "NoiseTerrainLayer",
    "NpcPlacementLayer",
    "ObjectPlacementLayer",
    "RoomLayoutLayer",
    "TownLayer",
]
