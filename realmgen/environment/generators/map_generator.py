"""Public entry point for map generation.

`generate_map` normalizes options, picks the pipeline for the map type and
runs it with a fresh random stream, so the same seed and options always
give the same map and concurrent calls never share random state.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from realmgen.environment.generators.options import MapOptions, MapType
from realmgen.environment.generators.pipeline.factory import create_pipeline
from realmgen.environment.map import MapModel
from realmgen.util.rng import RandomStream

logger = logging.getLogger(__name__)


class MapGenerator:
    """Facade that turns options into finished maps.

    Example:
        generator = MapGenerator({"width": 40, "height": 40, "seed": 42})
        dungeon = generator.generate_map("dungeon")
        town = generator.generate_map("town")
    """

    def __init__(
        self, options: MapOptions | Mapping[str, Any] | None = None, **overrides: Any
    ) -> None:
        self.options = MapOptions.coerce(options, **overrides)

    def generate_map(self, map_type: MapType | str = MapType.DUNGEON) -> MapModel:
        """Generate one map.

        Every call starts a new random stream from the configured seed. With
        no seed, each call draws a new one, recorded on the result as
        `MapModel.seed`.
        """
        map_type = MapType.parse(map_type)
        rng = RandomStream(self.options.seed)
        started = time.perf_counter()

        game_map = create_pipeline(map_type, self.options).generate(rng)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Generated {game_map!r} in {elapsed_ms:.1f}ms")
        return game_map


def generate_map(
    map_type: MapType | str = MapType.DUNGEON,
    options: MapOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> MapModel:
    """Generate a map of the given type.

    Args:
        map_type: dungeon, field, arena or town. Unknown values fall back to
            dungeon with a warning.
        options: A MapOptions, a mapping with snake_case or camelCase keys
            (e.g. {"roomCount": 5, "difficultyLevel": "hell"}), or None.
        **overrides: Option fields applied on top of `options`.

    Returns:
        A read-only MapModel.
    """
    return MapGenerator(options, **overrides).generate_map(map_type)
