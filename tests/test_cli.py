from __future__ import annotations

import pytest

from realmgen import generate_map
from realmgen.__main__ import main, render_map, summarize


class TestRenderMap:
    """Tests for the text preview."""

    def test_one_line_per_row(self) -> None:
        game_map = generate_map("dungeon", width=20, height=12, seed=1, room_count=2)
        lines = render_map(game_map).splitlines()

        assert len(lines) == 12
        assert all(len(line) == 20 for line in lines)
        assert set("".join(lines)) <= set(".~$o#*NBE")

    def test_overlays(self) -> None:
        game_map = generate_map("arena", width=40, height=40, seed=2)
        cx, cy = 20, 20
        lines = render_map(game_map).splitlines()

        assert lines[cy][cx] == "B"

    def test_path_overlay(self) -> None:
        game_map = generate_map("dungeon", width=40, height=40, seed=42, room_count=5)
        a, b = game_map.rooms[0].door, game_map.rooms[1].door
        path = game_map.find_path(*a, *b)
        assert path is not None

        lines = render_map(game_map, path).splitlines()
        x, y = path[len(path) // 2]
        assert lines[y][x] in "*E"

    def test_summary(self) -> None:
        game_map = generate_map("town", width=40, height=40, seed=3)
        text = summarize(game_map)

        assert "town 40x40" in text
        assert "seed=" in text
        assert "npcs=" in text


class TestMain:
    def test_prints_map_and_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["field", "--width", "24", "--height", "10", "--seed", "5"])
        out = capsys.readouterr().out.splitlines()

        assert len(out[0]) == 24
        assert any(line.startswith("field 24x10 seed=5") for line in out)

    def test_string_seed_and_path(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["dungeon", "--width", "30", "--height", "30", "--seed", "crypt", "-p"])
        out = capsys.readouterr().out

        assert "Path from" in out or "No path" in out

    def test_rejects_unknown_map_type(self) -> None:
        with pytest.raises(SystemExit):
            main(["castle"])
