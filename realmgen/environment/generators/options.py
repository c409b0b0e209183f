"""Map options, map types, difficulties and effective densities.

Options arrive from callers as a MapOptions, a plain mapping (snake_case or
camelCase keys), or keyword overrides. Parsing never raises: unknown keys
are ignored, bad values fall back to defaults or are clamped, and every
correction is logged as a warning.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from realmgen import config
from realmgen.types import RandomSeed

logger = logging.getLogger(__name__)


class MapType(StrEnum):
    DUNGEON = "dungeon"
    FIELD = "field"
    ARENA = "arena"
    TOWN = "town"

    @classmethod
    def parse(cls, value: MapType | str | None) -> MapType:
        """Convert a user value to a MapType, falling back to dungeon."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown map type {value!r}, generating a dungeon instead")
            return cls(config.DEFAULT_MAP_TYPE)


class Difficulty(StrEnum):
    NORMAL = "normal"
    NIGHTMARE = "nightmare"
    HELL = "hell"

    @classmethod
    def parse(cls, value: Difficulty | str | None) -> Difficulty:
        """Convert a user value to a Difficulty, falling back to normal."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown difficulty {value!r}, using normal")
            return cls(config.DEFAULT_DIFFICULTY)

    @property
    def level_range(self) -> tuple[int, int]:
        return config.DIFFICULTY_LEVEL_RANGES[self.value]

    @property
    def elite_chance(self) -> float:
        return config.DIFFICULTY_ELITE_CHANCE[self.value]

    def density_multiplier(self, kind: str) -> float:
        return config.DIFFICULTY_DENSITY_MULTIPLIERS[self.value].get(kind, 1.0)


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


@dataclass(frozen=True)
class MapOptions:
    """Caller-facing generation options. Defaults come from config."""

    width: int = config.DEFAULT_MAP_WIDTH
    height: int = config.DEFAULT_MAP_HEIGHT
    seed: RandomSeed = None
    tile_size: int = config.DEFAULT_TILE_SIZE
    noise_scale: float = config.DEFAULT_NOISE_SCALE
    room_min_size: int = config.DEFAULT_ROOM_MIN_SIZE
    room_max_size: int = config.DEFAULT_ROOM_MAX_SIZE
    room_count: int = config.DEFAULT_ROOM_COUNT
    enemy_density: float = config.DEFAULT_ENEMY_DENSITY
    chest_density: float = config.DEFAULT_CHEST_DENSITY
    obstacle_density: float = config.DEFAULT_OBSTACLE_DENSITY
    wall_density: float = config.DEFAULT_WALL_DENSITY
    npc_density: float = config.DEFAULT_NPC_DENSITY
    difficulty_level: Difficulty = Difficulty.NORMAL

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__.
        for name, value in self._normalized_fields().items():
            object.__setattr__(self, name, value)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None = None) -> MapOptions:
        """Build options from a mapping with snake_case or camelCase keys."""
        return cls().merged(values or {})

    @classmethod
    def coerce(
        cls, options: MapOptions | Mapping[str, Any] | None = None, **overrides: Any
    ) -> MapOptions:
        """Accept any supported options form and apply keyword overrides."""
        if isinstance(options, MapOptions):
            base = options
        else:
            base = cls.from_mapping(options)
        return base.merged(overrides) if overrides else base

    def merged(self, values: Mapping[str, Any]) -> MapOptions:
        """Return a copy with `values` applied on top of these options."""
        known = {f.name for f in dataclasses.fields(self)}
        changes: dict[str, Any] = {}
        for key, value in values.items():
            name = key if key in known else _snake_case(key)
            if name not in known:
                logger.warning(f"Ignoring unknown map option {key!r}")
                continue
            changes[name] = value
        return dataclasses.replace(self, **changes)

    # -------------------------------------------------------------------------
    # Normalization
    # -------------------------------------------------------------------------

    def _normalized_fields(self) -> dict[str, Any]:
        defaults = {f.name: f.default for f in dataclasses.fields(self)}
        out: dict[str, Any] = {}

        for name in ("width", "height", "tile_size", "room_min_size", "room_max_size"):
            out[name] = _as_int(name, getattr(self, name), defaults[name], minimum=1)
        out["room_count"] = _as_int(
            "room_count", self.room_count, defaults["room_count"], minimum=0
        )
        if out["room_min_size"] > out["room_max_size"]:
            logger.warning(
                f"room_min_size {out['room_min_size']} exceeds room_max_size "
                f"{out['room_max_size']}, clamping"
            )
            out["room_max_size"] = out["room_min_size"]

        noise_scale = _as_float(
            "noise_scale", self.noise_scale, defaults["noise_scale"]
        )
        if noise_scale <= 0:
            logger.warning(f"noise_scale must be positive, got {noise_scale}")
            noise_scale = defaults["noise_scale"]
        out["noise_scale"] = noise_scale

        for name in (
            "enemy_density",
            "chest_density",
            "obstacle_density",
            "wall_density",
            "npc_density",
        ):
            value = _as_float(name, getattr(self, name), defaults[name])
            if not 0.0 <= value <= 1.0:
                logger.warning(f"{name} {value} is outside [0, 1], clamping")
                value = min(1.0, max(0.0, value))
            out[name] = value

        seed = self.seed
        if seed is not None and not isinstance(seed, (int, str)):
            logger.warning(f"Unsupported seed {seed!r}, using its string form")
            seed = str(seed)
        out["seed"] = seed

        out["difficulty_level"] = Difficulty.parse(self.difficulty_level)
        return out


def _as_int(name: str, value: Any, default: int, minimum: int) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid value {value!r} for {name}, using {default}")
        result = default
    if result < minimum:
        logger.warning(f"{name} {result} is below {minimum}, clamping")
        result = minimum
    return result


def _as_float(name: str, value: Any, default: float) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        result = math.nan
    if not math.isfinite(result):
        logger.warning(f"Invalid value {value!r} for {name}, using {default}")
        return default
    return result


@dataclass(frozen=True)
class DensityProfile:
    """Effective per-cell densities for one map after all multipliers.

    Attributes:
        chest: Fraction of open floor that receives a chest.
        obstacle: Fraction of open floor that receives an obstacle.
        enemy: Fraction of walkable tiles that receives an enemy.
        npc: Fraction of free town tiles that receives a roaming NPC.
        wall: Base wall density (pillars, rocks) before feature factors.
    """

    chest: float
    obstacle: float
    enemy: float
    npc: float
    wall: float

    @classmethod
    def resolve(cls, options: MapOptions, map_type: MapType) -> DensityProfile:
        """Apply difficulty and map type multipliers to the option densities."""
        difficulty = options.difficulty_level
        per_type = config.MAP_TYPE_DENSITY_MULTIPLIERS.get(map_type.value, {})

        def scaled(base: float, kind: str) -> float:
            value = base * difficulty.density_multiplier(kind) * per_type.get(kind, 1.0)
            return min(1.0, max(0.0, value))

        return cls(
            chest=scaled(options.chest_density, "chest"),
            obstacle=scaled(options.obstacle_density, "obstacle"),
            enemy=scaled(options.enemy_density, "enemy"),
            npc=options.npc_density,
            wall=options.wall_density,
        )
