"""
High-level API for crystalline mountain generation.
"""

from .generate import (
    MaterialHints,
    MountainMesh,
    CrystallineMountainGenerator,
    check_mountain_policy,
    generate_crystalline_mountain,
)

__all__ = [
    "MaterialHints",
    "MountainMesh",
    "CrystallineMountainGenerator",
    "check_mountain_policy",
    "generate_crystalline_mountain",
]
