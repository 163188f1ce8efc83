"""Random sources.

Two independent generators are used:

1. ``NoiseSource``: created fresh inside every synthesis call and seeded from
   the parameter set, so the noise waveform is reproducible.
2. ``DesignRandom``: owned by the caller and seeded from the wall clock, used
   by the preset generators and the mutation operator.
"""

from __future__ import annotations

import time

import numpy as np
from numpy.typing import NDArray

NOISE_TABLE_SIZE = 32
_RESOLUTION = 10_000
_SEED_MASK = 0xFFFFFFFF


def _clock_seed() -> int:
    return time.time_ns()


class NoiseSource:
    """Per-call seeded source for the noise table."""

    def __init__(self, seed: int = 0) -> None:
        # Seed 0 means "unseeded": the table comes from fresh OS entropy.
        # Negative int32 seeds wrap to their unsigned 32-bit value.
        self._generator = np.random.default_rng(seed & _SEED_MASK if seed != 0 else None)

    def table(self) -> list[float]:
        values: NDArray[np.int64] = self._generator.integers(
            0, _RESOLUTION, size=NOISE_TABLE_SIZE, endpoint=True
        )
        return (values / _RESOLUTION * 2.0 - 1.0).tolist()

    def refill(self, table: list[float]) -> None:
        table[:] = self.table()


class DesignRandom:
    """General-purpose source for presets and mutation.

    Seeded from the wall clock unless ``seed`` is given.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.reseed(seed)

    def reseed(self, seed: int | None = None) -> None:
        self._generator = np.random.default_rng(_clock_seed() if seed is None else seed)

    def value(self, low: int, high: int) -> int:
        """Integer in ``[low, high]`` inclusive."""
        return int(self._generator.integers(low, high, endpoint=True))

    def coin(self) -> bool:
        return self.value(0, 1) == 1

    def chance(self, sides: int) -> bool:
        """True with probability ``1 / sides``."""
        return self.value(0, sides - 1) == 0

    def frnd(self, span: float) -> float:
        return self.value(0, _RESOLUTION) / _RESOLUTION * span

    def signed(self) -> float:
        """Uniform in ``[-1, 1]`` on the same grid as ``frnd``."""
        return self.frnd(2.0) - 1.0
