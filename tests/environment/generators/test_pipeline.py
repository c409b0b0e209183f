"""Tests for the pipeline infrastructure: context, generator and factory."""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

import numpy as np
import pytest

from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.options import MapOptions, MapType
from realmgen.environment.generators.pipeline import (
    GenerationContext,
    GenerationLayer,
    PipelineGenerator,
    create_pipeline,
)
from realmgen.environment.generators.pipeline.factory import create_layers
from realmgen.environment.generators.pipeline.layers import (
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
from realmgen.environment.map import EnemySpawn, MapModel
from realmgen.util.rng import RandomStream

# =============================================================================
# GenerationContext
# =============================================================================


class TestGenerationContext:
    """Tests for GenerationContext dataclass."""

    def test_create_empty_initializes_arrays(self) -> None:
        """cells/heights have correct shape and dtype."""
        ctx = GenerationContext.create_empty(
            MapType.DUNGEON, MapOptions(width=40, height=30, seed=1)
        )

        assert ctx.cells.shape == (40, 30)
        assert ctx.cells.dtype == np.uint8
        assert ctx.heights.shape == (40, 30)
        assert ctx.heights.dtype == np.float64

        # Default fill is WALL at height 0
        assert np.all(ctx.cells == CellKind.WALL)
        assert np.all(ctx.heights == 0.0)

    def test_create_empty_custom_fill_cell(self) -> None:
        ctx = GenerationContext.create_empty(
            MapType.FIELD, MapOptions(width=10, height=10), fill_cell=CellKind.FLOOR
        )

        assert np.all(ctx.cells == CellKind.FLOOR)

    def test_create_empty_resolves_densities(self) -> None:
        ctx = GenerationContext.create_empty(MapType.ARENA, MapOptions(seed=2))

        assert ctx.densities.enemy == 0.0

    def test_uses_given_stream(self) -> None:
        stream = RandomStream(99)
        ctx = GenerationContext.create_empty(
            MapType.DUNGEON, MapOptions(width=10, height=10), rng=stream
        )

        assert ctx.rng is stream

    def test_set_cell_drops_off_map_writes(
        self, make_context: Callable[..., GenerationContext]
    ) -> None:
        ctx = make_context(width=5, height=5)

        assert ctx.set_cell(2, 2, CellKind.FLOOR, 0.5)
        assert ctx.cells[2, 2] == CellKind.FLOOR
        assert ctx.heights[2, 2] == 0.5
        assert not ctx.set_cell(5, 0, CellKind.FLOOR)

    def test_center_and_min_dimension(
        self, make_context: Callable[..., GenerationContext]
    ) -> None:
        ctx = make_context(width=21, height=10)

        assert ctx.center == (10, 5)
        assert ctx.min_dimension == 10

    def test_is_walkable_uses_height(self, open_context: GenerationContext) -> None:
        assert open_context.is_walkable(0, 0)
        open_context.heights[0, 0] = 0.1
        assert not open_context.is_walkable(0, 0)
        assert not open_context.walkable_map()[0, 0]
        assert not open_context.is_walkable(-1, 0)

    def test_can_block_respects_reserved(self, open_context: GenerationContext) -> None:
        walkable = open_context.walkable_map()

        assert open_context.can_block(5, 5, walkable)
        open_context.reserved.add((5, 5))
        assert not open_context.can_block(5, 5, walkable)

    def test_can_block_protects_corridors(
        self, open_context: GenerationContext
    ) -> None:
        open_context.cells[:, :] = CellKind.WALL
        open_context.cells[:, 10] = CellKind.FLOOR
        walkable = open_context.walkable_map()

        assert not open_context.can_block(15, 10, walkable)
        assert not open_context.can_block(15, 11, walkable)  # wall already

    def test_occupied_positions(self, open_context: GenerationContext) -> None:
        open_context.enemy_spawns.append(EnemySpawn(1, 2, "slime", 3))

        assert open_context.occupied_positions() == {(1, 2)}

    def test_to_map_model(self, open_context: GenerationContext) -> None:
        open_context.heights[0, 0] = 1.7
        game_map = open_context.to_map_model()

        assert isinstance(game_map, MapModel)
        assert game_map.width == 30
        assert game_map.height == 20
        assert game_map.map_type is MapType.FIELD
        assert game_map.seed == open_context.rng.seed
        assert game_map.height_map[0, 0] == 1.0
        assert game_map.placement_grid.frozen
        # The model owns copies; later context edits do not leak into it
        open_context.cells[1, 1] = CellKind.WALL
        assert game_map.cell_kind(1, 1) is CellKind.FLOOR


# =============================================================================
# PipelineGenerator
# =============================================================================


class RecordingLayer(GenerationLayer):
    """Test layer that records when it was applied."""

    call_order: ClassVar[list[str]] = []

    def __init__(self, name: str) -> None:
        self.name = name

    def apply(self, ctx: GenerationContext) -> None:
        RecordingLayer.call_order.append(self.name)
        ctx.set_cell(len(RecordingLayer.call_order) - 1, 0, CellKind.FLOOR, 0.5)


class TestPipelineGenerator:
    """Tests for sequential layer execution."""

    def setup_method(self) -> None:
        RecordingLayer.call_order = []

    def test_layers_run_in_order(self) -> None:
        generator = PipelineGenerator(
            layers=[RecordingLayer("a"), RecordingLayer("b"), RecordingLayer("c")],
            map_type=MapType.DUNGEON,
            options=MapOptions(width=10, height=5, seed=3),
        )

        game_map = generator.generate()

        assert RecordingLayer.call_order == ["a", "b", "c"]
        assert game_map.is_walkable(0, 0)
        assert game_map.is_walkable(2, 0)
        assert not game_map.is_walkable(3, 0)

    def test_empty_pipeline_returns_filled_map(self) -> None:
        generator = PipelineGenerator(
            layers=[],
            map_type=MapType.FIELD,
            options=MapOptions(width=8, height=8, seed=3),
            fill_cell=CellKind.FLOOR,
        )

        game_map = generator.generate()

        assert game_map.count_cells(CellKind.FLOOR) == 64

    def test_abstract_layer_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            GenerationLayer()  # type: ignore[abstract]


# =============================================================================
# Factory
# =============================================================================


class TestFactory:
    """Tests for the per-map-type layer recipes."""

    @pytest.mark.parametrize(
        ("map_type", "expected"),
        [
            (
                MapType.DUNGEON,
                [RoomLayoutLayer, ObjectPlacementLayer, EnemyPlacementLayer],
            ),
            (
                MapType.FIELD,
                [
                    NoiseTerrainLayer,
                    FieldFeatureLayer,
                    ObjectPlacementLayer,
                    EnemyPlacementLayer,
                ],
            ),
            (MapType.ARENA, [ArenaLayer, ObjectPlacementLayer, ArenaEncounterLayer]),
            (
                MapType.TOWN,
                [
                    TownLayer,
                    ObjectPlacementLayer,
                    EnemyPlacementLayer,
                    NpcPlacementLayer,
                ],
            ),
        ],
    )
    def test_layer_order(self, map_type: MapType, expected: list[type]) -> None:
        assert [type(layer) for layer in create_layers(map_type)] == expected

    def test_create_pipeline_parses_map_type(self) -> None:
        pipeline = create_pipeline("unknown")

        assert pipeline.map_type is MapType.DUNGEON
        assert pipeline.options == MapOptions()

    def test_fill_cell_per_type(self) -> None:
        assert create_pipeline("town").fill_cell == CellKind.FLOOR
        assert create_pipeline("field").fill_cell == CellKind.FLOOR
        assert create_pipeline("arena").fill_cell == CellKind.WALL
        assert create_pipeline("dungeon").fill_cell == CellKind.WALL
