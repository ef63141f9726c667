"""
Final buffer assembly.

Turns the finalized geometry stream and the wireframe edge set into render
buffers: solid triangle meshes and line meshes. A buffer that exceeds the
renderer's vertex budget is split into several draw buffers (or rejected
with MeshSizeLimitError), never truncated.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import logging

import numpy as np

from mountain_policies import AssemblyPolicy, OperationReport
from ..core.edges import EdgeSet
from ..core.errors import MeshSizeLimitError
from ..core.stream import StreamSnapshot

logger = logging.getLogger(__name__)

UINT16_LIMIT = 65535


@dataclass
class SolidBuffer:
    """Filled triangle mesh for one draw call."""

    positions: np.ndarray  # (N, 3) float32
    normals: np.ndarray  # (N, 3) float32
    uvs: np.ndarray  # (N, 2) float32
    colors: np.ndarray  # (N, 4) float32
    triangles: np.ndarray  # (M, 3) uint16 | uint32

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)


@dataclass
class LineBuffer:
    """Independent 2-point line primitives for one draw call."""

    positions: np.ndarray  # (2E, 3) float32
    colors: np.ndarray  # (2E, 4) float32
    lines: np.ndarray  # (E, 2) uint16 | uint32

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass
class AssembledGeometry:
    """Solid and line buffers plus overall bounds."""

    solid: List[SolidBuffer] = field(default_factory=list)
    lines: List[LineBuffer] = field(default_factory=list)
    bounds: np.ndarray = field(default_factory=lambda: np.zeros((2, 3)))

    @property
    def vertex_count(self) -> int:
        return sum(b.vertex_count for b in self.solid)

    @property
    def triangle_count(self) -> int:
        return sum(b.triangle_count for b in self.solid)

    @property
    def line_count(self) -> int:
        return sum(b.line_count for b in self.lines)


def index_dtype(max_vertices: int) -> np.dtype:
    """Narrowest index type able to address ``max_vertices`` vertices."""
    return np.dtype(np.uint16) if max_vertices <= UINT16_LIMIT else np.dtype(np.uint32)


def compute_bounds(*position_arrays: np.ndarray) -> np.ndarray:
    """Axis-aligned bounds [[min xyz], [max xyz]]; zeros when empty."""
    arrays = [p for p in position_arrays if len(p)]
    if not arrays:
        return np.zeros((2, 3))
    stacked = np.vstack(arrays)
    return np.array([stacked.min(axis=0), stacked.max(axis=0)])


def partition_triangles(triangles: np.ndarray, max_vertices: int) -> List[Tuple[np.ndarray, np.ndarray]]:
    """
    Split a triangle list into chunks that each reference at most
    ``max_vertices`` distinct vertices.

    Triangles keep their order and winding.

    Returns
    -------
    list of (vertex_ids, local_triangles)
        ``vertex_ids`` maps local index -> original stream index;
        ``local_triangles`` uses local indices
    """
    chunks = []
    local: Dict[int, int] = {}
    order: List[int] = []
    chunk_tris: List[Tuple[int, int, int]] = []

    def flush():
        if chunk_tris:
            chunks.append((
                np.array(order, dtype=np.int64),
                np.array(chunk_tris, dtype=np.int64).reshape(len(chunk_tris), 3),
            ))

    for tri in triangles:
        tri = [int(v) for v in tri]
        new = len({v for v in tri if v not in local})
        if len(order) + new > max_vertices:
            flush()
            local, order, chunk_tris = {}, [], []

        mapped = []
        for v in tri:
            if v not in local:
                local[v] = len(order)
                order.append(v)
            mapped.append(local[v])
        chunk_tris.append(tuple(mapped))

    flush()
    return chunks


def _solid_buffer(snapshot: StreamSnapshot, vertex_ids: np.ndarray, triangles: np.ndarray, dtype) -> SolidBuffer:
    return SolidBuffer(
        positions=snapshot.positions[vertex_ids].astype(np.float32),
        normals=snapshot.normals[vertex_ids].astype(np.float32),
        uvs=snapshot.uvs[vertex_ids].astype(np.float32),
        colors=snapshot.colors[vertex_ids].astype(np.float32),
        triangles=triangles.astype(dtype),
    )


def _line_buffers(edges: EdgeSet, max_vertices: int, dtype) -> List[LineBuffer]:
    positions = edges.positions.astype(np.float32)
    colors = edges.colors.astype(np.float32)
    lines_per_buffer = max(max_vertices // 2, 1)
    total_lines = len(edges)

    buffers = []
    for first in range(0, total_lines, lines_per_buffer):
        count = min(lines_per_buffer, total_lines - first)
        start, stop = 2 * first, 2 * (first + count)
        buffers.append(LineBuffer(
            positions=positions[start:stop],
            colors=colors[start:stop],
            lines=np.arange(2 * count, dtype=dtype).reshape(count, 2),
        ))
    return buffers


def assemble_geometry(
    snapshot: StreamSnapshot,
    edges: EdgeSet,
    policy: AssemblyPolicy,
) -> Tuple[AssembledGeometry, OperationReport]:
    """
    Build the solid and line buffer sets.

    Parameters
    ----------
    snapshot : StreamSnapshot
        Finalized geometry stream (shells and vein tubes)
    edges : EdgeSet
        Deduplicated wireframe edges
    policy : AssemblyPolicy
        Vertex budget and overflow behavior

    Returns
    -------
    geometry : AssembledGeometry
        Render buffers and bounds
    report : OperationReport
        Buffer counts and any size-limit warnings

    Raises
    ------
    MeshSizeLimitError
        If a buffer exceeds the budget and ``overflow_mode == "error"``
    """
    limit = policy.max_vertices_per_buffer
    dtype = index_dtype(limit)
    report = OperationReport(
        operation="assemble_geometry",
        success=True,
        requested_policy=policy.to_dict(),
        effective_policy=policy.to_dict(),
    )

    solid_vertices = snapshot.vertex_count
    line_vertices = 2 * len(edges)

    for kind, count in (("solid", solid_vertices), ("line", line_vertices)):
        if count <= limit:
            continue
        if policy.overflow_mode == "error":
            raise MeshSizeLimitError(count, limit, buffer_kind=kind)
        message = (
            f"{kind} buffer has {count:,} vertices, above the limit of {limit:,}; "
            f"splitting into multiple draw buffers"
        )
        logger.warning(message)
        report.add_warning(message)

    if solid_vertices <= limit:
        solid = [_solid_buffer(
            snapshot, np.arange(solid_vertices), snapshot.triangles, dtype,
        )] if solid_vertices else []
    else:
        solid = [
            _solid_buffer(snapshot, vertex_ids, local_tris, dtype)
            for vertex_ids, local_tris in partition_triangles(snapshot.triangles, limit)
        ]

    lines = _line_buffers(edges, limit, dtype)

    geometry = AssembledGeometry(
        solid=solid,
        lines=lines,
        bounds=compute_bounds(snapshot.positions, edges.positions),
    )

    report.set_metric("solid_buffers", len(solid))
    report.set_metric("line_buffers", len(lines))
    report.set_metric("vertex_count", geometry.vertex_count)
    report.set_metric("triangle_count", geometry.triangle_count)
    report.set_metric("line_count", geometry.line_count)
    report.set_metric("index_dtype", dtype.name)
    report.set_metric("bounds", geometry.bounds.tolist())

    logger.debug(
        f"Assembled {len(solid)} solid and {len(lines)} line buffers "
        f"({geometry.vertex_count} vertices, {geometry.line_count} lines)"
    )
    return geometry, report
