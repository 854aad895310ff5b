"""
Seeded generator for deterministic, replayable simulations.
Park-Miller "minimal standard" LCG: every client that starts from the same
seed draws the same sequence, which is what keeps viewers in sync.
"""
from __future__ import annotations

import math

MULTIPLIER = 16807  # 7**5
MODULUS = 2**31 - 1  # Mersenne prime


class InvalidSeedError(ValueError):
    """Seed is a multiple of the modulus; the generator would emit zeros forever."""


class SeededGenerator:
    """Integer-only LCG; draws are bit-identical across conforming implementations."""

    def __init__(self, seed: int) -> None:
        state = int(seed) % MODULUS
        if state == 0:
            raise InvalidSeedError(f"Seed {seed} is a multiple of {MODULUS}")
        self._seed = int(seed)
        self._state = state

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def state(self) -> int:
        return self._state

    def next_float(self) -> float:
        """Advance the state and return a float in [0, 1)."""
        self._state = (self._state * MULTIPLIER) % MODULUS
        return (self._state - 1) / (MODULUS - 1)

    def next_int(self, lo: int, hi: int) -> int:
        """Random integer in [lo, hi], both inclusive."""
        if hi < lo:
            raise ValueError(f"Empty range: [{lo}, {hi}]")
        return math.floor(self.next_float() * (hi - lo + 1)) + lo
