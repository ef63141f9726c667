"""Utility helpers for mountain generation."""

from .geometry import (
    UP,
    RIGHT,
    normalize,
    lerp,
    horizontal_distance,
    cross_section_basis,
)
from .sources import (
    NoiseFunction,
    RandomSource,
    NumpyRandomSource,
    perlin_noise,
    flat_noise,
)

__all__ = [
    "UP",
    "RIGHT",
    "normalize",
    "lerp",
    "horizontal_distance",
    "cross_section_basis",
    "NoiseFunction",
    "RandomSource",
    "NumpyRandomSource",
    "perlin_noise",
    "flat_noise",
]
