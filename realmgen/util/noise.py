"""Seeded coherent noise for terrain and height synthesis.

Thin wrapper over `tcod.noise.Noise` (simplex, SIMPLE implementation) that
fixes the sampling frequency and seeds the generator from a RandomStream,
so a map's noise is reproducible from the map seed.
"""

from __future__ import annotations

import numpy as np
import tcod.noise

from realmgen import config
from realmgen.util.rng import LCG_MODULUS, RandomStream


class NoiseField:
    """Deterministic 2D or 3D simplex noise sampled at a fixed frequency.

    Values are in [-1, 1]. Coordinates are tile positions; they are scaled
    by `frequency` before sampling, so a frequency of 0.1 gives features
    roughly ten tiles across.
    """

    def __init__(
        self,
        seed: int,
        frequency: float = config.DEFAULT_NOISE_SCALE,
        dimensions: int = 2,
    ) -> None:
        if dimensions not in (2, 3):
            dimensions = 2
        if frequency <= 0:
            frequency = config.DEFAULT_NOISE_SCALE

        self.seed = seed
        self.frequency = frequency
        self.dimensions = dimensions
        self.noise = tcod.noise.Noise(
            dimensions=dimensions,
            algorithm=tcod.noise.Algorithm.SIMPLEX,
            implementation=tcod.noise.Implementation.SIMPLE,
            seed=seed,
        )

    @classmethod
    def from_stream(
        cls,
        rng: RandomStream,
        frequency: float = config.DEFAULT_NOISE_SCALE,
        dimensions: int = 2,
    ) -> NoiseField:
        """Create a field seeded by drawing one value from `rng`."""
        return cls(rng.randrange(0, LCG_MODULUS), frequency, dimensions)

    def sample(self, x: float, y: float, z: float = 0.0) -> float:
        """Sample the field at a single tile position."""
        f = self.frequency
        if self.dimensions == 3:
            value = self.noise.get_point(x * f, y * f, z * f)
        else:
            value = self.noise.get_point(x * f, y * f)
        return float(np.clip(value, -1.0, 1.0))

    def sample_grid(self, width: int, height: int, scale: float = 1.0) -> np.ndarray:
        """Sample the whole map at once.

        Args:
            width: Number of columns.
            height: Number of rows.
            scale: Extra frequency multiplier (2.0 gives finer features).

        Returns:
            A (width, height) float64 array indexed [x, y], values in [-1, 1].
        """
        grid = tcod.noise.grid(
            shape=(width, height),
            scale=self.frequency * scale,
            indexing="ij",
        )
        values = self.noise[grid]
        return np.clip(values.astype(np.float64), -1.0, 1.0)

    def __repr__(self) -> str:
        return (
            f"NoiseField(seed={self.seed}, frequency={self.frequency}, "
            f"dimensions={self.dimensions})"
        )
