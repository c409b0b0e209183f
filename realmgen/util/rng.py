"""Deterministic random number generation with isolated streams.

Map generation is driven by a single `RandomStream`, a small linear
congruential generator seeded from the map options. Every random decision a
generator makes is drawn from that one stream, in a fixed order, so the same
options always produce the same map.

Randomness that is *not* part of a generation run (for example picking a
random walkable tile for a caller after the map exists) comes from the domain
registry below. Each domain gets its own stream derived from a master seed,
so that:

1. Queries are reproducible from the same master seed
2. Query randomness never perturbs a generation run
3. Adding/removing query domains doesn't shift other domains' sequences

Usage:
    # At startup
    from realmgen.util import rng
    rng.init(config.RANDOM_SEED)

    # In any module - cache the stream reference
    _rng = rng.get("map.queries")

    def pick(options: list[str]) -> str | None:
        return _rng.choice(options)

    # After rng.reset(), cached references automatically use the new stream

Domain naming convention (hierarchical):
    - "map.queries"
    - "map.noise", "map.noise.detail"
    - "cli.preview"
"""

from __future__ import annotations

import math
import secrets
import zlib
from collections.abc import MutableSequence, Sequence
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from realmgen.types import RandomSeed

T = TypeVar("T")

# LCG parameters (glibc-style multiplier and increment, modulus 2**31).
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2**31


def resolve_seed(seed: RandomSeed) -> int:
    """Turn any accepted seed into an integer in [0, 2**31).

    Use crc32 instead of hash() - hash() is randomized per Python session via
    PYTHONHASHSEED, which would break cross-session determinism.
    """
    if seed is None:
        return secrets.randbits(31)
    if isinstance(seed, str):
        return zlib.crc32(seed.encode()) % LCG_MODULUS
    return int(seed) % LCG_MODULUS


class RandomStream:
    """Seeded linear congruential random stream.

    `random()` advances the state with
    ``state = (1103515245 * state + 12345) mod 2**31`` and returns
    ``state / 2**31``. Every other helper is built on `random()` alone, so a
    stream's output is fully determined by its seed and the order of calls.

    Helpers never raise on degenerate input: an empty `choice()` returns None,
    `randint(a, b)` with b < a returns a, and `sample()` clamps k.
    """

    def __init__(self, seed: RandomSeed = None) -> None:
        self._seed = resolve_seed(seed)
        self._state = self._seed

    @property
    def seed(self) -> int:
        """The integer seed this stream started from."""
        return self._seed

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        self._state = (LCG_MULTIPLIER * self._state + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        if b <= a:
            return a
        return a + int(self.random() * (b - a + 1))

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        """Return randomly selected element from range(start, stop, step)."""
        if stop is None:
            start, stop = 0, start
        choices = range(start, stop, step)
        if not choices:
            return start
        return choices[int(self.random() * len(choices))]

    def uniform(self, a: float, b: float) -> float:
        """Return random float N such that a <= N < b."""
        return a + (b - a) * self.random()

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.random() < probability

    def angle(self) -> float:
        """Return a random angle in radians in [0, 2*pi)."""
        return self.random() * 2.0 * math.pi

    def choice(self, seq: Sequence[T]) -> T | None:
        """Return random element from a sequence, or None if it is empty."""
        if not seq:
            return None
        return seq[int(self.random() * len(seq))]

    def shuffle(self, x: MutableSequence) -> None:
        """Shuffle x in place (Fisher-Yates, walking from the end)."""
        for i in range(len(x) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            x[i], x[j] = x[j], x[i]

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        """Return up to k unique elements from population.

        Runs a partial Fisher-Yates from the front, so drawing k elements
        costs k random numbers regardless of the population size.
        """
        pool = list(population)
        k = max(0, min(k, len(pool)))
        for i in range(k):
            j = i + int(self.random() * (len(pool) - i))
            pool[i], pool[j] = pool[j], pool[i]
        return pool[:k]

    def getstate(self) -> int:
        return self._state

    def setstate(self, state: int) -> None:
        self._state = int(state) % LCG_MODULUS

    def fork(self, domain: str) -> RandomStream:
        """Derive an independent child stream for a named purpose.

        The child depends only on this stream's seed and the domain name, not
        on how much of this stream has been consumed.
        """
        return RandomStream(zlib.crc32(f"{self._seed}:{domain}".encode()))

    def __repr__(self) -> str:
        return f"RandomStream(seed={self._seed})"


class RNGStream:
    """Proxy that delegates to the current stream for a domain.

    This wrapper allows callers to cache a reference that survives rng.reset().
    All method calls are forwarded to the underlying RandomStream,
    which is looked up fresh each time from the provider.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    def _rng(self) -> RandomStream:
        """Get the current underlying stream."""
        return self._provider._get_raw(self._domain)

    # -------------------------------------------------------------------------
    # RandomStream method proxies
    # -------------------------------------------------------------------------

    def random(self) -> float:
        return self._rng().random()

    def randint(self, a: int, b: int) -> int:
        return self._rng().randint(a, b)

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        return self._rng().randrange(start, stop, step)

    def uniform(self, a: float, b: float) -> float:
        return self._rng().uniform(a, b)

    def chance(self, probability: float) -> bool:
        return self._rng().chance(probability)

    def angle(self) -> float:
        return self._rng().angle()

    def choice(self, seq: Sequence[T]) -> T | None:
        return self._rng().choice(seq)

    def shuffle(self, x: MutableSequence) -> None:
        self._rng().shuffle(x)

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        return self._rng().sample(population, k)


# Type alias for functions that accept either a RandomStream or a proxy.
# Use this in type hints: `def foo(rng: RNG) -> int:`
RNG = RandomStream | RNGStream


class RNGProvider:
    """Provides isolated random streams for named domains.

    Each domain gets its own RandomStream derived deterministically
    from the master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, RandomStream] = {}
        self._proxies: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        """Get a random stream for the named domain.

        Returns a proxy object that can be cached. The proxy automatically
        uses the current underlying stream, even after reset().

        Args:
            domain: Hierarchical name like "map.queries"

        Returns:
            An RNGStream proxy with the same interface as RandomStream
        """
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> RandomStream:
        """Get the raw RandomStream for a domain (internal use)."""
        if domain not in self._streams:
            if self._master_seed is None:
                # No seed: use system entropy for non-deterministic behavior
                self._streams[domain] = RandomStream(None)
            else:
                self._streams[domain] = RandomStream(f"{self._master_seed}:{domain}")
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reset all streams with a new master seed.

        Existing RNGStream proxies remain valid and will use the new streams.

        Args:
            master_seed: New master seed for all streams
        """
        self._master_seed = master_seed
        self._streams.clear()
        # Note: _proxies are kept - they'll get fresh streams on next access


# =============================================================================
# Module-level API
# =============================================================================

_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Initialize the global RNG provider with a master seed.

    If a provider already exists, resets it instead of creating a new one.
    This ensures cached RNGStream proxies continue to work after init().

    Args:
        master_seed: The master seed for all random streams.
            Can be int, str, or None for non-deterministic behavior.
    """
    global _provider
    if _provider is not None:
        # Reset existing provider so cached proxies keep working
        _provider.reset(master_seed)
    else:
        _provider = RNGProvider(master_seed)


def get(domain: str) -> RNGStream:
    """Get a random stream for the named domain.

    The returned RNGStream can be cached at module or instance level.
    It will automatically use the current stream even after reset().

    If the RNG provider hasn't been initialized yet, it will be auto-initialized
    with a default seed (None, which gives non-deterministic behavior).

    Args:
        domain: Hierarchical name like "map.queries"

    Returns:
        An RNGStream proxy with the same interface as RandomStream
    """
    global _provider
    if _provider is None:
        # Auto-initialize with default seed for module-level usage
        _provider = RNGProvider(None)
    return _provider.get(domain)


def reset(master_seed: RandomSeed = None) -> None:
    """Reset all random streams with a new master seed.

    Existing cached RNGStream references remain valid.

    Args:
        master_seed: New master seed for all streams
    """
    if _provider is None:
        raise RuntimeError("RNG not initialized - call rng.init() first")
    _provider.reset(master_seed)
