"""Command line preview: generate a map and print it as text.

Usage:
    python -m realmgen town --width 60 --height 40 --seed 7
    python -m realmgen arena --difficulty hell --path
"""

from __future__ import annotations

import argparse
import logging

from . import config
from .environment.cell_types import CELL_SYMBOLS, CellKind
from .environment.generators import Difficulty, MapType, generate_map
from .environment.map import MapModel
from .types import TilePath
from .util import rng


def render_map(game_map: MapModel, path: TilePath | None = None) -> str:
    """Render a map as lines of text, one character per tile.

    Spawns are drawn over terrain: B boss, E enemy/elite, N NPC, and
    `path` tiles as '*'.
    """
    cells = game_map.placement_grid.data
    overlay: dict[tuple[int, int], str] = {}
    for pos in path or ():
        overlay[pos] = "*"
    for npc in game_map.npc_spawns:
        overlay[npc.position] = "N"
    for enemy in game_map.enemy_spawns:
        overlay[enemy.position] = "B" if enemy.kind == "boss" else "E"

    lines = []
    for y in range(game_map.height):
        row = []
        for x in range(game_map.width):
            symbol = overlay.get((x, y))
            if symbol is None:
                symbol = CELL_SYMBOLS[CellKind(int(cells[x, y]))]
            row.append(symbol)
        lines.append("".join(row))
    return "\n".join(lines)


def summarize(game_map: MapModel) -> str:
    walkable = int(game_map.walkable.sum())
    elites = sum(1 for e in game_map.enemy_spawns if e.kind == "elite")
    bosses = sum(1 for e in game_map.enemy_spawns if e.kind == "boss")
    return (
        f"{game_map.map_type} {game_map.width}x{game_map.height} "
        f"seed={game_map.seed} difficulty={game_map.difficulty}\n"
        f"rooms={len(game_map.rooms)} walkable={walkable} "
        f"chests={game_map.count_cells(CellKind.CHEST)} "
        f"obstacles={game_map.count_cells(CellKind.OBSTACLE)}\n"
        f"enemies={len(game_map.enemy_spawns)} (elite={elites}, boss={bosses}) "
        f"npcs={len(game_map.npc_spawns)}"
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate and preview an RPG map")
    parser.add_argument(
        "map_type",
        nargs="?",
        default=config.DEFAULT_MAP_TYPE,
        choices=[t.value for t in MapType],
    )
    parser.add_argument("--width", type=int, default=80)
    parser.add_argument("--height", type=int, default=40)
    parser.add_argument("--seed", type=str, default=None, help="Int or string seed")
    parser.add_argument(
        "--difficulty",
        default=config.DEFAULT_DIFFICULTY,
        choices=[d.value for d in Difficulty],
    )
    parser.add_argument("--rooms", type=int, default=config.DEFAULT_ROOM_COUNT)
    parser.add_argument(
        "--path",
        "-p",
        action="store_true",
        help="Draw a path between two random walkable tiles",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    rng.init(config.RANDOM_SEED)

    seed: int | str | None = args.seed
    if args.seed is not None and args.seed.lstrip("-").isdigit():
        seed = int(args.seed)

    game_map = generate_map(
        args.map_type,
        width=args.width,
        height=args.height,
        seed=seed,
        difficulty_level=args.difficulty,
        room_count=args.rooms,
    )

    path = None
    if args.path:
        preview = rng.get("cli.preview")
        start = game_map.get_random_walkable_position(preview)
        end = game_map.get_random_walkable_position(preview)
        path = game_map.find_path(*start, *end)
        if path is None:
            print(f"No path from {start} to {end}")
        else:
            print(f"Path from {start} to {end}: {len(path) - 1} steps")

    print(render_map(game_map, path))
    print(summarize(game_map))


if __name__ == "__main__":
    main()
