"""
Vector helpers shared by the shell and tube builders.

Y is up throughout.
"""

import numpy as np
from typing import Tuple

UP = np.array([0.0, 1.0, 0.0])
RIGHT = np.array([1.0, 0.0, 0.0])

EPSILON = 1e-10

# Below this cross-product magnitude the up reference is treated as parallel.
BASIS_DEGENERACY_THRESHOLD = 0.1


def normalize(v: np.ndarray, fallback: np.ndarray = UP) -> np.ndarray:
    """Return v / |v|, or a copy of ``fallback`` when v has (near) zero length."""
    v = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(v)
    if norm < EPSILON:
        return np.array(fallback, dtype=np.float64)
    return v / norm


def lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    """Linear interpolation a + (b - a) * t."""
    return np.asarray(a, dtype=np.float64) + (np.asarray(b, dtype=np.float64) - a) * t


def horizontal_distance(point: np.ndarray) -> float:
    """Distance from the vertical axis, measured in the XZ plane."""
    return float(np.hypot(point[0], point[2]))


def cross_section_basis(direction: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Two unit axes spanning the plane orthogonal to ``direction``.

    The first axis is ``direction x UP``. When that product is too short
    (direction within about 6 degrees of vertical) ``direction x RIGHT`` is
    used instead. For a unit direction the two products satisfy
    |d x UP|^2 + |d x RIGHT|^2 = 2 - dy^2 - dx^2 >= 1, so they cannot both
    fall under the threshold.

    Parameters
    ----------
    direction : np.ndarray
        Unit branch direction

    Returns
    -------
    ortho, ortho2 : np.ndarray
        Unit vectors with ortho2 = direction x ortho
    """
    ortho = np.cross(direction, UP)
    if np.linalg.norm(ortho) < BASIS_DEGENERACY_THRESHOLD:
        ortho = np.cross(direction, RIGHT)
    ortho = ortho / np.linalg.norm(ortho)
    ortho2 = normalize(np.cross(direction, ortho))
    return ortho, ortho2


__all__ = [
    "UP",
    "RIGHT",
    "normalize",
    "lerp",
    "horizontal_distance",
    "cross_section_basis",
]
