"""
Shared fixtures for crystalline mountain tests.
"""

import math

import pytest


class ScriptedRandomSource:
    """
    RandomSource that replays a fixed list of values in [0, 1).

    ``uniform(low, high)`` maps the next value linearly into [low, high).
    The list repeats when exhausted. ``calls`` counts draws.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def value(self):
        v = self.values[self.calls % len(self.values)]
        self.calls += 1
        return v

    def uniform(self, low, high):
        return low + self.value() * (high - low)


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRandomSource instances."""
    return ScriptedRandomSource


@pytest.fixture
def wavy_noise():
    """Deterministic noise that actually perturbs ring radii."""
    def noise(x, y):
        return 0.5 + 0.4 * math.sin(3.0 * x) * math.cos(2.0 * y)
    return noise
