"""Pipeline generator that orchestrates layer-based map generation.

The PipelineGenerator runs a sequence of GenerationLayers, each transforming
a shared GenerationContext. This enables compositional map generation where
each layer focuses on one aspect of the map.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from realmgen.environment.cell_types import CellKind
from realmgen.environment.generators.options import MapOptions, MapType
from realmgen.environment.map import MapModel

from .context import GenerationContext

if TYPE_CHECKING:
    from realmgen.util.rng import RandomStream

    from .layer import GenerationLayer

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Map generator that runs layers sequentially on a shared context.

    The pipeline creates an empty GenerationContext and passes it through
    each layer in order. Layers modify the context in place, building up
    the final map.

    Example:
        generator = PipelineGenerator(
            layers=[
                RoomLayoutLayer(),
                ObjectPlacementLayer(),
                EnemyPlacementLayer(),
            ],
            map_type=MapType.DUNGEON,
            options=MapOptions(width=80, height=43, seed=12345),
        )
        game_map = generator.generate()

    Attributes:
        layers: List of GenerationLayer instances to apply.
        map_type: The map type recorded on the result.
        options: Normalized generation options.
        fill_cell: Cell kind the context starts out filled with.
    """

    def __init__(
        self,
        layers: list[GenerationLayer],
        map_type: MapType,
        options: MapOptions,
        fill_cell: CellKind = CellKind.WALL,
    ) -> None:
        self.layers = layers
        self.map_type = map_type
        self.options = options
        self.fill_cell = fill_cell

    def create_context(self, rng: RandomStream | None = None) -> GenerationContext:
        return GenerationContext.create_empty(
            map_type=self.map_type,
            options=self.options,
            rng=rng,
            fill_cell=self.fill_cell,
        )

    def run(self, ctx: GenerationContext) -> GenerationContext:
        """Apply every layer to an existing context, in order."""
        for layer in self.layers:
            started = time.perf_counter()
            layer.apply(ctx)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(f"{type(layer).__name__} finished in {elapsed_ms:.1f}ms")
        return ctx

    def generate(self, rng: RandomStream | None = None) -> MapModel:
        """Generate a map by running all layers in sequence.

        Args:
            rng: Stream to draw from. Defaults to a fresh stream seeded from
                the options, so repeated calls give identical maps.

        Returns:
            The finished, read-only MapModel.
        """
        # Create empty context - layers will fill it
        ctx = self.create_context(rng)

        self.run(ctx)

        return ctx.to_map_model()
