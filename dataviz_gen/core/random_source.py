"""Injectable sources of uniform random floats for the data generators."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

import numpy as np


class RandomSource(ABC):
    """Source of uniform floats in [0, 1)."""

    @abstractmethod
    def random(self) -> float:
        pass

    def uniform(self, low: float, high: float) -> float:
        """Return a float in [low, high)."""
        return low + (high - low) * self.random()

    def choice_index(self, size: int) -> int:
        """Return an index in [0, size) with uniform probability."""
        return min(int(self.random() * size), size - 1)


class NumpyRandomSource(RandomSource):
    """Default source backed by a numpy ``Generator``; seed for reproducible data."""

    def __init__(self, seed: int | None = None):
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self._rng.random())


class PythonRandomSource(RandomSource):
    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()
