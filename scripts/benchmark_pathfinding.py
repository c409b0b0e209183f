#!/usr/bin/env python3
"""Benchmark comparing realmgen's A* and tcod's C implementation.

Runs both implementations on identical walkability grids (random grids and
generated maps) and prints a timing comparison table, followed by
correctness checks. Both search 4-directionally, so path lengths must match.

Usage:
    python scripts/benchmark_pathfinding.py
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import sys
import timeit
from pathlib import Path

import numpy as np
import tcod.path

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from realmgen import generate_map
from realmgen.util.pathfinding import find_path

# ---------------------------------------------------------------------------
# Grid builders
# ---------------------------------------------------------------------------


def _make_open_field(width: int, height: int) -> np.ndarray:
    """All-walkable grid (worst case - maximum search space)."""
    return np.ones((width, height), dtype=np.bool_)


def _make_random(
    width: int,
    height: int,
    wall_fraction: float,
    seed: int,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> np.ndarray:
    """Random walls. Start and goal are forced walkable."""
    rng = np.random.default_rng(seed)
    walkable = rng.random((width, height)) > wall_fraction
    walkable[start[0], start[1]] = True
    walkable[goal[0], goal[1]] = True
    return walkable


def _make_generated(
    map_type: str, width: int, height: int, seed: int
) -> tuple[np.ndarray, tuple[int, int], tuple[int, int]]:
    """Walkability of a generated map, with two far-apart endpoints."""
    game_map = generate_map(map_type, width=width, height=height, seed=seed)
    walkable = np.array(game_map.walkable)
    positions = np.argwhere(walkable)
    start = (int(positions[0][0]), int(positions[0][1]))
    goal = (int(positions[-1][0]), int(positions[-1][1]))
    return walkable, start, goal


# ---------------------------------------------------------------------------
# Runners
# ---------------------------------------------------------------------------


def _run_tcod(
    walkable: np.ndarray,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> list[tuple[int, int]]:
    """Run tcod A* and return the path (excluding start)."""
    astar = tcod.path.AStar(cost=walkable.astype(np.int8), diagonal=0)
    return astar.get_path(start[0], start[1], goal[0], goal[1])


def _run_realmgen(
    walkable: np.ndarray,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> list[tuple[int, int]]:
    """Run our A* and return the path (excluding start, like tcod)."""
    path = find_path(walkable, start, goal)
    return path[1:] if path else []


def _bench(fn: object, *args: object) -> float:
    """Time *fn(*args)* and return average ms per call."""
    # Warm up
    fn(*args)  # type: ignore[operator]
    timer = timeit.Timer(lambda: fn(*args))  # type: ignore[operator]
    number, total = timer.autorange()
    return (total / number) * 1000


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    scenarios: list[tuple[str, np.ndarray, tuple[int, int], tuple[int, int]]] = [
        ("Open 120x80", _make_open_field(120, 80), (5, 5), (115, 75)),
        (
            "Random 120x80 (30%)",
            _make_random(120, 80, 0.30, seed=42, start=(5, 5), goal=(115, 75)),
            (5, 5),
            (115, 75),
        ),
        ("Dungeon 100x100", *_make_generated("dungeon", 100, 100, seed=42)),
        ("Field 100x100", *_make_generated("field", 100, 100, seed=42)),
        ("Town 100x100", *_make_generated("town", 100, 100, seed=42)),
    ]

    print("A* Benchmark: realmgen (Python) vs tcod (C), 4-directional")
    print("=" * 78)
    print(f"{'Scenario':<28} {'tcod (C)':>10} {'realmgen':>12} {'ratio':>12}")
    print("-" * 78)

    for name, walkable, start, goal in scenarios:
        tcod_ms = _bench(_run_tcod, walkable, start, goal)
        ours_ms = _bench(_run_realmgen, walkable, start, goal)
        ratio = ours_ms / tcod_ms if tcod_ms > 0 else float("inf")
        print(f"{name:<28} {tcod_ms:>9.3f}ms {ours_ms:>11.3f}ms {ratio:>11.2f}x")

    print("-" * 78)
    print()

    # ------------------------------------------------------------------
    # Correctness checks
    # ------------------------------------------------------------------
    print("Correctness checks...")
    mismatches = 0
    for name, walkable, start, goal in scenarios:
        tcod_path = _run_tcod(walkable, start, goal)
        our_path = _run_realmgen(walkable, start, goal)
        if len(tcod_path) != len(our_path):
            mismatches += 1
            print(
                f"  MISMATCH {name}: tcod={len(tcod_path)} steps, "
                f"realmgen={len(our_path)} steps"
            )
    if mismatches == 0:
        print("  All path lengths agree with tcod.")

    # No-path check.
    blocked = np.zeros((10, 10), dtype=np.bool_)
    blocked[0, 0] = True
    blocked[9, 9] = True
    if find_path(blocked, (0, 0), (9, 9)) is None and not _run_tcod(
        blocked, (0, 0), (9, 9)
    ):
        print("  Blocked-map check: both correctly report no path.")
    else:
        print("  Blocked-map MISMATCH")


if __name__ == "__main__":
    main()
