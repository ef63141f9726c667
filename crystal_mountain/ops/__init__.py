"""
Geometry synthesis operations for the crystalline mountain.
"""

from .shells import (
    ShellParams,
    ShellResult,
    derive_shell_params,
    generate_cone_shell,
    build_mountain_shells,
)
from .veins import distance_to_outer_cone, grow_vein_tree
from .tubes import tube_radius_at, mesh_branch_tube, mesh_vein_tree
from .assemble import (
    SolidBuffer,
    LineBuffer,
    AssembledGeometry,
    partition_triangles,
    assemble_geometry,
)

__all__ = [
    "ShellParams",
    "ShellResult",
    "derive_shell_params",
    "generate_cone_shell",
    "build_mountain_shells",
    "distance_to_outer_cone",
    "grow_vein_tree",
    "tube_radius_at",
    "mesh_branch_tube",
    "mesh_vein_tree",
    "SolidBuffer",
    "LineBuffer",
    "AssembledGeometry",
    "partition_triangles",
    "assemble_geometry",
]
