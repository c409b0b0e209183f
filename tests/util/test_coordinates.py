from __future__ import annotations

import math

import numpy as np

from realmgen.util.coordinates import (
    Rect,
    bresenham_line,
    disc_points,
    distance_grid,
    is_safe_to_block,
    is_valid_world_tile_pos,
    orthogonal_line,
    polar_offset,
)

# =============================================================================
# Rect
# =============================================================================


class TestRect:
    """Tests for the exclusive-corner rectangle."""

    def test_basic_geometry(self) -> None:
        rect = Rect(2, 3, 5, 4)

        assert (rect.x1, rect.y1, rect.x2, rect.y2) == (2, 3, 7, 7)
        assert rect.width == 5
        assert rect.height == 4
        assert rect.center() == (4, 5)

    def test_from_bounds(self) -> None:
        assert Rect.from_bounds(1, 1, 4, 6) == Rect(1, 1, 3, 5)

    def test_contains_is_exclusive(self) -> None:
        rect = Rect(0, 0, 5, 5)

        assert rect.contains(0, 0)
        assert rect.contains(4, 4)
        assert not rect.contains(5, 4)
        assert not rect.contains(-1, 0)

    def test_intersects(self) -> None:
        a = Rect(0, 0, 5, 5)

        assert a.intersects(Rect(4, 4, 3, 3))
        assert not a.intersects(Rect(5, 0, 3, 3))  # touching edges

    def test_intersects_with_padding(self) -> None:
        """Padding grows both rects, so a 1 tile pad needs a 2 tile gap."""
        a = Rect(0, 0, 5, 5)

        assert a.intersects(Rect(6, 0, 3, 3), padding=1)
        assert not a.intersects(Rect(7, 0, 3, 3), padding=1)

    def test_hashable(self) -> None:
        assert len({Rect(0, 0, 2, 2), Rect(0, 0, 2, 2), Rect(1, 0, 2, 2)}) == 2


# =============================================================================
# Helpers and rasterizers
# =============================================================================


class TestTileHelpers:
    def test_is_valid_world_tile_pos(self) -> None:
        assert is_valid_world_tile_pos((0, 0), 10, 5)
        assert is_valid_world_tile_pos((9, 4), 10, 5)
        assert not is_valid_world_tile_pos((10, 0), 10, 5)
        assert not is_valid_world_tile_pos((0, -1), 10, 5)

    def test_polar_offset_floors(self) -> None:
        assert polar_offset(10, 10, 0.0, 3.7) == (13, 10)
        assert polar_offset(10, 10, math.pi / 2, 2.0) == (10, 12)
        assert polar_offset(10, 10, math.pi, 2.0) == (8, 10)

    def test_bresenham_endpoints_and_continuity(self) -> None:
        line = bresenham_line(0, 0, 7, 3)

        assert line[0] == (0, 0)
        assert line[-1] == (7, 3)
        for (x0, y0), (x1, y1) in zip(line, line[1:], strict=False):
            assert max(abs(x1 - x0), abs(y1 - y0)) == 1

    def test_bresenham_single_point(self) -> None:
        assert bresenham_line(3, 3, 3, 3) == [(3, 3)]

    def test_orthogonal_line_is_four_connected(self) -> None:
        line = orthogonal_line(0, 0, 5, 5)

        assert line[0] == (0, 0)
        assert line[-1] == (5, 5)
        for (x0, y0), (x1, y1) in zip(line, line[1:], strict=False):
            assert abs(x1 - x0) + abs(y1 - y0) == 1

    def test_disc_points_within_radius_and_bounds(self) -> None:
        points = list(disc_points(1, 1, 2.0, 4, 4))

        assert (1, 1, 0.0) in points
        for x, y, d in points:
            assert 0 <= x < 4 and 0 <= y < 4
            assert d <= 2.0
            assert math.isclose(d, math.hypot(x - 1, y - 1))

    def test_distance_grid(self) -> None:
        dist = distance_grid(5, 3, 2, 1)

        assert dist.shape == (5, 3)
        assert dist[2, 1] == 0.0
        assert math.isclose(dist[4, 2], math.hypot(2, 1))


# =============================================================================
# Local connectivity
# =============================================================================


class TestIsSafeToBlock:
    """Tests for the neighbourhood connectivity guard."""

    def test_open_field_is_safe(self) -> None:
        walkable = np.ones((5, 5), dtype=np.bool_)

        assert is_safe_to_block(walkable, 2, 2)

    def test_corridor_tile_is_not_safe(self) -> None:
        """Blocking a 1-wide corridor tile would split it."""
        walkable = np.zeros((5, 3), dtype=np.bool_)
        walkable[:, 1] = True

        assert not is_safe_to_block(walkable, 2, 1)

    def test_dead_end_is_safe(self) -> None:
        walkable = np.zeros((5, 3), dtype=np.bool_)
        walkable[:3, 1] = True

        assert is_safe_to_block(walkable, 2, 1)

    def test_corner_bend_with_diagonal_is_safe(self) -> None:
        """An L bend with its inner diagonal open can be detoured around."""
        walkable = np.zeros((3, 3), dtype=np.bool_)
        walkable[1, 1] = True
        walkable[1, 0] = True  # up
        walkable[2, 1] = True  # right
        walkable[2, 0] = True  # diagonal between them

        assert is_safe_to_block(walkable, 1, 1)

    def test_corner_bend_without_diagonal_is_not_safe(self) -> None:
        walkable = np.zeros((3, 3), dtype=np.bool_)
        walkable[1, 1] = True
        walkable[1, 0] = True
        walkable[2, 1] = True

        assert not is_safe_to_block(walkable, 1, 1)

    def test_map_edge_counts_as_blocked(self) -> None:
        walkable = np.ones((3, 1), dtype=np.bool_)

        assert not is_safe_to_block(walkable, 1, 0)
        assert is_safe_to_block(walkable, 0, 0)
