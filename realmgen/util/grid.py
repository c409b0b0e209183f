"""Dense 2D grid storage backed by a numpy array.

Arrays are shaped (width, height) and indexed [x, y], the same layout the
rest of the package and tcod use. Hot loops index `grid.data` directly;
the bounds-checked helpers are for callers that may step off the map.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Generic, TypeVar

import numpy as np
import numpy.typing as npt

from realmgen.types import TileCoord, WorldTilePos


T = TypeVar("T")


class Grid(Generic[T]):
    """A width x height grid of values of one numpy dtype."""

    def __init__(self, data: np.ndarray) -> None:
        if data.ndim != 2:
            raise ValueError(f"Grid data must be 2D, got shape {data.shape}")
        self._data = data

    @classmethod
    def full(
        cls,
        width: TileCoord,
        height: TileCoord,
        fill: T,
        dtype: npt.DTypeLike = None,
    ) -> Grid[T]:
        """Create a grid with every cell set to `fill`.

        Non-positive dimensions are clamped to 1 so callers always get a
        usable grid.
        """
        width = max(1, int(width))
        height = max(1, int(height))
        return cls(np.full((width, height), fill, dtype=dtype, order="F"))

    @classmethod
    def from_array(cls, data: npt.ArrayLike, dtype: npt.DTypeLike = None) -> Grid[T]:
        """Wrap a copy of an existing (width, height) array."""
        return cls(np.array(data, dtype=dtype, copy=True))

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    @property
    def data(self) -> np.ndarray:
        """The underlying numpy array, indexed [x, y]."""
        return self._data

    @property
    def width(self) -> int:
        return self._data.shape[0]

    @property
    def height(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def frozen(self) -> bool:
        return not self._data.flags.writeable

    # -------------------------------------------------------------------------
    # Cell access
    # -------------------------------------------------------------------------

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: TileCoord, y: TileCoord, default: Any = None) -> Any:
        """Return the value at (x, y), or `default` when out of bounds."""
        if not self.in_bounds(x, y):
            return default
        return self._data[x, y]

    def set(self, x: TileCoord, y: TileCoord, value: T) -> bool:
        """Set the value at (x, y).

        Returns:
            True if the cell was written, False if (x, y) is out of bounds.
        """
        if not self.in_bounds(x, y):
            return False
        self._data[x, y] = value
        return True

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[key] = value

    def fill(self, value: T) -> None:
        self._data.fill(value)

    def count(self, value: T) -> int:
        """Number of cells equal to `value`."""
        return int(np.count_nonzero(self._data == value))

    def positions(self) -> Iterator[WorldTilePos]:
        """Iterate every (x, y) in x-major order."""
        for x in range(self.width):
            for y in range(self.height):
                yield (x, y)

    # -------------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------------

    def copy(self) -> Grid[T]:
        """Return a writable deep copy."""
        return Grid(self._data.copy(order="F"))

    def freeze(self) -> Grid[T]:
        """Make the grid read-only in place and return it."""
        self._data.flags.writeable = False
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self._data, other._data)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Grid(width={self.width}, height={self.height}, "
            f"dtype={self._data.dtype})"
        )
