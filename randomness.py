"""
Seedable randomness for decks.

Every deck owns one RandomSource. All shuffles draw from it through three
primitives, so a fixed seed and a fixed sequence of calls always replays the
same deck orders:

- uniform(n): index in [0, n), equal probability.
- binomial_index(n): index in [0, n) from Binomial(n - 1, 0.5). Models a person
  aiming for the middle of a packet. For 53 cut points (a 52-card deck) the
  cut lands in the middle half 99.98% of the time.
- bernoulli(p): True with probability p.
"""

from __future__ import annotations

import logging
from numbers import Integral
from typing import Optional, Union

import numpy as np
from numpy.random import Generator

from errors import InvalidArgument

logger = logging.getLogger(__name__)

SEED_BYTES = 16  # 128 bits of state
Seed = Union[int, bytes, bytearray]


def _generator_from_seed(seed: Optional[Seed]) -> Generator:
    if seed is None:
        return np.random.default_rng()
    if isinstance(seed, (bytes, bytearray)):
        if len(seed) != SEED_BYTES:
            raise InvalidArgument(f"seed block must be {SEED_BYTES} bytes, got {len(seed)}")
        return np.random.default_rng(int.from_bytes(bytes(seed), "little"))
    if isinstance(seed, Integral) and not isinstance(seed, bool):
        if not 0 <= seed < 2**64:
            raise InvalidArgument(f"integer seed must fit in 64 unsigned bits, got {seed}")
        return np.random.default_rng(int(seed))
    raise InvalidArgument(f"unsupported seed type: {type(seed).__name__}")


class RandomSource:
    """Wraps a numpy Generator (PCG64). Seeded from OS entropy unless given a seed."""

    def __init__(self, seed: Optional[Seed] = None, *, generator: Optional[Generator] = None):
        self._generator = generator if generator is not None else _generator_from_seed(seed)

    def reseed(self, seed: Optional[Seed]) -> None:
        """Replace the generator state. None reseeds from entropy."""
        self._generator = _generator_from_seed(seed)
        logger.debug("reseeded random source (%s)", "entropy" if seed is None else type(seed).__name__)

    def spawn(self) -> RandomSource:
        """Independent child source, derived without advancing this stream."""
        return RandomSource(generator=self._generator.spawn(1)[0])

    def uniform(self, n: int) -> int:
        if n <= 0:
            raise InvalidArgument(f"uniform index needs n > 0, got {n}")
        return int(self._generator.integers(n))

    def binomial_index(self, n: int) -> int:
        """Index in [0, n) drawn from Binomial(n - 1, 0.5)."""
        if n <= 0:
            raise InvalidArgument(f"binomial index needs n > 0, got {n}")
        return int(self._generator.binomial(n - 1, 0.5))

    def bernoulli(self, p: float) -> bool:
        # NaN fails the range check too
        if not 0.0 <= p <= 1.0:
            raise InvalidArgument(f"probability must be in [0, 1], got {p}")
        return bool(self._generator.random() < p)
