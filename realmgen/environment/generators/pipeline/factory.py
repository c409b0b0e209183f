"""Pipeline recipes, one per map type."""

from __future__ import annotations

from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.options import MapOptions, MapType

from .layer import GenerationLayer
from .layers import (
    ArenaEncounterLayer,
    ArenaLayer,
    EnemyPlacementLayer,
    FieldFeatureLayer,
    NoiseTerrainLayer,
    NpcPlacementLayer,
    ObjectPlacementLayer,
    RoomLayoutLayer,
    TownLayer,
)
from .pipeline import PipelineGenerator


def create_layers(map_type: MapType) -> list[GenerationLayer]:
    """Return fresh layer instances for a map type, in application order."""
    if map_type == MapType.FIELD:
        return [
            NoiseTerrainLayer(),
            FieldFeatureLayer(),
            ObjectPlacementLayer(),
            EnemyPlacementLayer(),
        ]
    if map_type == MapType.ARENA:
        return [
            ArenaLayer(),
            ObjectPlacementLayer(),
            ArenaEncounterLayer(),
        ]
    if map_type == MapType.TOWN:
        return [
            TownLayer(),
            ObjectPlacementLayer(),
            EnemyPlacementLayer(),
            NpcPlacementLayer(),
        ]
    return [
        RoomLayoutLayer(),
        ObjectPlacementLayer(),
        EnemyPlacementLayer(),
    ]


def create_pipeline(
    map_type: MapType | str,
    options: MapOptions | None = None,
) -> PipelineGenerator:
    """Create the generator for a map type.

    Args:
        map_type: One of dungeon, field, arena, town. Unknown values fall
            back to dungeon.
        options: Normalized options. Defaults to MapOptions().

    Returns:
        A PipelineGenerator ready to generate().

    Example:
        gen = create_pipeline("town", MapOptions(width=80, height=80, seed=7))
        town = gen.generate()
    """
    map_type = MapType.parse(map_type)
    if options is None:
        options = MapOptions()
    open_ground = map_type in (MapType.FIELD, MapType.TOWN)
    fill_cell = CellKind.FLOOR if open_ground else CellKind.WALL
    return PipelineGenerator(
        layers=create_layers(map_type),
        map_type=map_type,
        options=options,
        fill_cell=fill_cell,
    )
