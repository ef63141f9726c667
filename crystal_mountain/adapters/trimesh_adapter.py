"""
Conversion of render buffers to trimesh objects.

Useful for previewing or inspecting a generated mountain with trimesh's
viewers and analysis tools. Nothing here writes files.
"""

from typing import TYPE_CHECKING
import logging

import numpy as np

from ..ops.assemble import LineBuffer, SolidBuffer

if TYPE_CHECKING:
    import trimesh
    from ..api.generate import MountainMesh

logger = logging.getLogger(__name__)


def _rgba8(colors: np.ndarray) -> np.ndarray:
    return np.clip(np.round(np.asarray(colors) * 255.0), 0, 255).astype(np.uint8)


def solid_to_trimesh(buffer: SolidBuffer) -> "trimesh.Trimesh":
    """
    Wrap a solid buffer in a trimesh.Trimesh.

    Vertices are kept exactly as generated (no merging or reordering);
    UVs are carried in ``mesh.metadata["uv"]``.
    """
    import trimesh

    mesh = trimesh.Trimesh(
        vertices=np.asarray(buffer.positions, dtype=np.float64),
        faces=np.asarray(buffer.triangles, dtype=np.int64),
        vertex_normals=np.asarray(buffer.normals, dtype=np.float64),
        process=False,
    )
    mesh.visual = trimesh.visual.ColorVisuals(mesh=mesh, vertex_colors=_rgba8(buffer.colors))
    mesh.metadata["uv"] = np.asarray(buffer.uvs, dtype=np.float64)
    return mesh


def lines_to_path(buffer: LineBuffer) -> "trimesh.path.Path3D":
    """Wrap a line buffer in a trimesh Path3D made of independent segments."""
    import trimesh

    positions = np.asarray(buffer.positions, dtype=np.float64)
    segments = positions[np.asarray(buffer.lines, dtype=np.int64)]
    path = trimesh.load_path(segments)
    path.metadata["colors"] = np.asarray(buffer.colors, dtype=np.float64)
    return path


def mountain_to_scene(mesh: "MountainMesh") -> "trimesh.Scene":
    """
    Collect every solid and line buffer of a generated mountain in a Scene.

    Geometry is named ``solid_<i>`` and ``wireframe_<i>``.
    """
    import trimesh

    geometry = {}
    for i, buffer in enumerate(mesh.geometry.solid):
        geometry[f"solid_{i}"] = solid_to_trimesh(buffer)
    for i, buffer in enumerate(mesh.geometry.lines):
        if buffer.line_count:
            geometry[f"wireframe_{i}"] = lines_to_path(buffer)

    logger.debug(f"Built trimesh scene with {len(geometry)} geometries")
    return trimesh.Scene(geometry=geometry)
