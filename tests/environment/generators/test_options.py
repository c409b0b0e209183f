"""Tests for option parsing, map types, difficulties and density scaling."""

from __future__ import annotations

import logging

import pytest

from realmgen import config
from realmgen.environment.generators.options import (
    DensityProfile,
    Difficulty,
    MapOptions,
    MapType,
)

# =============================================================================
# Enums
# =============================================================================


class TestMapType:
    def test_parse_known_values(self) -> None:
        assert MapType.parse("town") is MapType.TOWN
        assert MapType.parse(" Arena ") is MapType.ARENA
        assert MapType.parse(MapType.FIELD) is MapType.FIELD

    def test_parse_unknown_falls_back_to_dungeon(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            assert MapType.parse("castle") is MapType.DUNGEON
        assert "castle" in caplog.text


class TestDifficulty:
    def test_parse(self) -> None:
        assert Difficulty.parse("HELL") is Difficulty.HELL
        assert Difficulty.parse("impossible") is Difficulty.NORMAL
        assert Difficulty.parse(None) is Difficulty.NORMAL

    def test_level_ranges_increase(self) -> None:
        ranges = [d.level_range for d in Difficulty]

        assert ranges == [(1, 30), (30, 60), (60, 100)]

    def test_elite_chance_increases(self) -> None:
        chances = [d.elite_chance for d in Difficulty]

        assert chances == sorted(chances)

    def test_density_multiplier_defaults_to_one(self) -> None:
        assert Difficulty.NORMAL.density_multiplier("enemy") == 1.0
        assert Difficulty.HELL.density_multiplier("enemy") == 2.5
        assert Difficulty.NIGHTMARE.density_multiplier("chest") == 1.0


# =============================================================================
# MapOptions
# =============================================================================


class TestMapOptions:
    """Tests for MapOptions normalization."""

    def test_defaults_come_from_config(self) -> None:
        options = MapOptions()

        assert options.width == config.DEFAULT_MAP_WIDTH
        assert options.height == config.DEFAULT_MAP_HEIGHT
        assert options.room_count == config.DEFAULT_ROOM_COUNT
        assert options.enemy_density == config.DEFAULT_ENEMY_DENSITY
        assert options.seed is None
        assert options.difficulty_level is Difficulty.NORMAL

    def test_from_mapping_accepts_camel_case(self) -> None:
        options = MapOptions.from_mapping(
            {"width": 40, "roomCount": 5, "difficultyLevel": "hell", "seed": 42}
        )

        assert options.width == 40
        assert options.room_count == 5
        assert options.difficulty_level is Difficulty.HELL
        assert options.seed == 42

    def test_unknown_keys_are_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            options = MapOptions.from_mapping({"fogOfWar": True, "width": 20})

        assert options.width == 20
        assert "fogOfWar" in caplog.text

    def test_invalid_numbers_fall_back(self) -> None:
        options = MapOptions(
            width="wide",  # type: ignore[arg-type]
            height=-3,
            noise_scale=0,
        )

        assert options.width == config.DEFAULT_MAP_WIDTH
        assert options.height == 1
        assert options.noise_scale == config.DEFAULT_NOISE_SCALE

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_numbers_fall_back(self, value: float) -> None:
        options = MapOptions(
            width=value,  # type: ignore[arg-type]
            noise_scale=value,
            enemy_density=value,
        )

        assert options.width == config.DEFAULT_MAP_WIDTH
        assert options.noise_scale == config.DEFAULT_NOISE_SCALE
        assert options.enemy_density == config.DEFAULT_ENEMY_DENSITY

    def test_numeric_strings_are_accepted(self) -> None:
        options = MapOptions(width="64", enemy_density="0.2")  # type: ignore[arg-type]

        assert options.width == 64
        assert options.enemy_density == 0.2

    def test_densities_are_clamped(self) -> None:
        options = MapOptions(enemy_density=2.0, chest_density=-0.5)

        assert options.enemy_density == 1.0
        assert options.chest_density == 0.0

    def test_room_sizes_are_ordered(self) -> None:
        options = MapOptions(room_min_size=12, room_max_size=6)

        assert options.room_min_size == 12
        assert options.room_max_size == 12

    def test_negative_room_count(self) -> None:
        assert MapOptions(room_count=-4).room_count == 0

    def test_unsupported_seed_uses_string_form(self) -> None:
        assert MapOptions(seed=1.5).seed == "1.5"  # type: ignore[arg-type]

    def test_coerce_applies_overrides(self) -> None:
        base = MapOptions(width=30, seed=1)
        options = MapOptions.coerce(base, height=25, roomCount=3)

        assert options.width == 30
        assert options.height == 25
        assert options.room_count == 3
        assert base.height == config.DEFAULT_MAP_HEIGHT

    def test_coerce_none(self) -> None:
        assert MapOptions.coerce(None) == MapOptions()

    def test_options_are_frozen(self) -> None:
        options = MapOptions()

        with pytest.raises(AttributeError):
            options.width = 5  # type: ignore[misc]


# =============================================================================
# DensityProfile
# =============================================================================


class TestDensityProfile:
    """Tests for difficulty and map type density scaling."""

    def test_dungeon_normal(self) -> None:
        options = MapOptions(
            chest_density=0.02, obstacle_density=0.01, enemy_density=0.05
        )
        profile = DensityProfile.resolve(options, MapType.DUNGEON)

        assert profile.chest == pytest.approx(0.03)
        assert profile.obstacle == pytest.approx(0.007)
        assert profile.enemy == pytest.approx(0.06)

    def test_hell_scales_up(self) -> None:
        options = MapOptions(
            difficulty_level="hell",  # type: ignore[arg-type]
            enemy_density=0.05,
        )
        profile = DensityProfile.resolve(options, MapType.FIELD)

        assert profile.enemy == pytest.approx(0.05 * 2.5 * 0.8)
        assert profile.chest == pytest.approx(0.02 * 1.3 * 1.0)

    def test_arena_has_no_density_enemies(self) -> None:
        profile = DensityProfile.resolve(MapOptions(), MapType.ARENA)

        assert profile.enemy == 0.0

    def test_scaled_density_is_clamped(self) -> None:
        options = MapOptions(
            difficulty_level="hell",  # type: ignore[arg-type]
            enemy_density=0.9,
        )
        profile = DensityProfile.resolve(options, MapType.DUNGEON)

        assert profile.enemy == 1.0

    @pytest.mark.parametrize("map_type", list(MapType))
    def test_enemy_density_monotonic_in_difficulty(self, map_type: MapType) -> None:
        values = [
            DensityProfile.resolve(MapOptions(difficulty_level=d), map_type).enemy
            for d in Difficulty
        ]

        assert values == sorted(values)
