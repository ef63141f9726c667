"""
Pluggable randomness and coherent-noise sources.

Generation never calls a global random generator. Everything random goes
through a ``RandomSource`` and the shell silhouette goes through a noise
callable, so tests can inject fixed sequences and a seeded pass is
reproducible bit for bit.
"""

from typing import Callable, Optional, Protocol

import numpy as np


NoiseFunction = Callable[[float, float], float]


class RandomSource(Protocol):
    """Uniform random values."""

    def value(self) -> float:
        """Uniform value in [0, 1)."""
        ...

    def uniform(self, low: float, high: float) -> float:
        """Uniform value in [low, high)."""
        ...


class NumpyRandomSource:
    """
    RandomSource backed by ``numpy.random.default_rng``.

    Parameters
    ----------
    seed : int, optional
        Seed for reproducible passes
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def value(self) -> float:
        return float(self.rng.random())

    def uniform(self, low: float, high: float) -> float:
        return float(self.rng.uniform(low, high))


def perlin_noise(x: float, y: float) -> float:
    """
    2D Perlin noise remapped to roughly [0, 1].

    Backed by ``noise.pnoise2``, whose output lies roughly in [-1, 1].
    """
    from noise import pnoise2

    return 0.5 + 0.5 * pnoise2(x, y)


def flat_noise(x: float, y: float) -> float:
    """Constant 0.5: leaves shell rings perfectly circular."""
    return 0.5


__all__ = [
    "NoiseFunction",
    "RandomSource",
    "NumpyRandomSource",
    "perlin_noise",
    "flat_noise",
]
