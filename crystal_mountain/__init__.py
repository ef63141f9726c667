"""
Crystal Mountain - Procedural crystalline mountain mesh synthesis

This package builds a layered, crystal-like mountain as in-memory render
buffers: a stack of concentric cone shells with random crystal-facet
protrusions, a fractal network of glowing vein tubes branching from the
mountain's axis, and a deduplicated wireframe skeleton of the rock shells.

Main Entry Points:
    - generate_crystalline_mountain(): One full generation pass
    - CrystallineMountainGenerator: Keeps the latest mesh, rebuilds on demand
    - build_mountain_shells(), grow_vein_tree(), mesh_vein_tree(),
      assemble_geometry(): The individual pipeline stages

Example:
    >>> from crystal_mountain import generate_crystalline_mountain
    >>> from mountain_policies import MountainPolicy
    >>>
    >>> policy = MountainPolicy(seed=7)
    >>> policy.shells.number_of_cones = 4
    >>> mesh, report = generate_crystalline_mountain(policy)
    >>> solid = mesh.geometry.solid[0]
    >>> wireframe = mesh.geometry.lines[0]
"""

__version__ = "0.1.0"

from .api import (
    generate_crystalline_mountain,
    check_mountain_policy,
    CrystallineMountainGenerator,
    MountainMesh,
    MaterialHints,
)
from .ops import (
    build_mountain_shells,
    generate_cone_shell,
    grow_vein_tree,
    mesh_vein_tree,
    assemble_geometry,
)
from .core import (
    GeometryStream,
    EdgeSet,
    VeinTree,
    Branch,
    ConfigurationError,
    MeshSizeLimitError,
    GeometryStreamStateError,
)
from .utils import NumpyRandomSource, perlin_noise, flat_noise

__all__ = [
    # High-level API
    "generate_crystalline_mountain",
    "check_mountain_policy",
    "CrystallineMountainGenerator",
    "MountainMesh",
    "MaterialHints",
    # Operations
    "build_mountain_shells",
    "generate_cone_shell",
    "grow_vein_tree",
    "mesh_vein_tree",
    "assemble_geometry",
    # Core types
    "GeometryStream",
    "EdgeSet",
    "VeinTree",
    "Branch",
    "ConfigurationError",
    "MeshSizeLimitError",
    "GeometryStreamStateError",
    # Sources
    "NumpyRandomSource",
    "perlin_noise",
    "flat_noise",
]
