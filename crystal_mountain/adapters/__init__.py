"""
Adapters to third-party geometry and graph libraries.
"""

from .trimesh_adapter import solid_to_trimesh, lines_to_path, mountain_to_scene
from .networkx_adapter import vein_tree_to_graph, analyze_vein_tree

__all__ = [
    "solid_to_trimesh",
    "lines_to_path",
    "mountain_to_scene",
    "vein_tree_to_graph",
    "analyze_vein_tree",
]
