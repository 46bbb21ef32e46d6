"""Random sources for artifact generation. Any Rng subclass may be swapped for another."""

from __future__ import annotations

import math

import numpy as np


class Rng:
    """Uniform float source with derived integer helpers"""

    def next_float(self) -> float:
        """Float in [0, 1)"""
        raise NotImplementedError

    def next_int(self, stop: int) -> int:
        """Integer in [0, stop)"""
        return math.floor(self.next_float() * stop)

    def next_int_range(self, start: int, stop: int) -> int:
        """Integer in [start, stop)"""
        return math.floor(self.next_float() * (stop - start)) + start

    def seed(self, seed: int):
        raise NotImplementedError


class DefaultRng(Rng):
    """numpy Generator backed source for production use"""

    def __init__(self, seed: int = None):
        self._generator = np.random.default_rng(seed)

    def next_float(self) -> float:
        return float(self._generator.random())

    def seed(self, seed: int):
        self._generator = np.random.default_rng(seed)


class SeededRng(Rng):
    """32-bit linear congruential generator, reproducible across platforms"""

    _multiplier = 1664525
    _increment = 1013904223
    _modulus = 2**32

    def __init__(self, seed: int):
        self._state = seed % self._modulus

    def next_float(self) -> float:
        self._state = (self._state * self._multiplier + self._increment) % self._modulus
        return self._state / self._modulus

    def seed(self, seed: int):
        self._state = seed % self._modulus


class MockRng(Rng):
    """Replays a scripted sequence of floats, wrapping around at the end"""

    def __init__(self, values: list[float]):
        if len(values) == 0:
            raise ValueError("MockRng requires at least one value.")
        self._values = list(values)
        self._index = 0

    def next_float(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value

    def seed(self, seed: int):
        # Restart the script, the seed itself is irrelevant
        self._index = 0
