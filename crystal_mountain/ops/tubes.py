"""
Tapered tube meshes for vein branches.

Each branch becomes an open polygonal tube: ``segments + 1`` evenly spaced
rings of ``sides`` vertices, swept along the straight start -> end line.
Ring radius shrinks linearly from ``thickness`` to ``(1 - taper) * thickness``.

Tubes are not decorated with facets and do not contribute wireframe edges.
"""

from typing import List, Tuple
import logging
import math

import numpy as np

from mountain_policies import OperationReport, TubeMeshPolicy
from ..core.branches import Branch, VeinTree
from ..core.stream import GeometryStream
from ..utils.geometry import cross_section_basis, lerp, normalize

logger = logging.getLogger(__name__)


def tube_radius_at(thickness: float, t: float, taper: float = 0.3) -> float:
    """
    Radius of the cross-section at normalized position t along the branch.

    Parameters
    ----------
    thickness : float
        Radius at the branch start
    t : float
        Position along branch (0 = start, 1 = end), clipped to [0, 1]
    taper : float
        Fraction of thickness lost by the end

    Returns
    -------
    float
        ``thickness * (1 - t * taper)``
    """
    t = min(max(t, 0.0), 1.0)
    return thickness * (1.0 - t * taper)


def mesh_branch_tube(
    stream: GeometryStream,
    branch: Branch,
    policy: TubeMeshPolicy,
) -> Tuple[int, int]:
    """
    Append one branch's tube to the stream.

    Returns
    -------
    first_vertex : int
        Stream index of the first ring vertex
    triangle_count : int
        Number of triangles emitted
    """
    segments = policy.segments
    sides = policy.sides

    direction = normalize(branch.end - branch.start)
    ortho, ortho2 = cross_section_basis(direction)

    base_index = stream.vertex_count
    step = 2.0 * math.pi / sides

    for i in range(segments + 1):
        t = i / segments
        center = lerp(branch.start, branch.end, t)
        radius = tube_radius_at(branch.thickness, t, policy.taper)

        for j in range(sides):
            angle = j * step
            radial = ortho * math.cos(angle) + ortho2 * math.sin(angle)
            stream.add_vertex(
                center + radial * radius,
                radial,
                (j / sides, t),
                policy.tube_color,
            )

    triangle_count = 0
    for i in range(segments):
        ring_start = base_index + i * sides
        next_ring_start = base_index + (i + 1) * sides

        for j in range(sides):
            next_j = (j + 1) % sides

            # Two triangles per quad
            stream.add_triangle(ring_start + j, next_ring_start + j, ring_start + next_j)
            stream.add_triangle(ring_start + next_j, next_ring_start + j, next_ring_start + next_j)
            triangle_count += 2

    return base_index, triangle_count


def mesh_vein_tree(
    stream: GeometryStream,
    tree: VeinTree,
    policy: TubeMeshPolicy,
) -> Tuple[List[int], OperationReport]:
    """
    Mesh every branch of the tree in pre-order (parent before children).

    Returns
    -------
    first_vertices : list of int
        First stream vertex of each tube, in emission order
    report : OperationReport
        Tube vertex and triangle counts
    """
    vertex_start = stream.vertex_count
    triangle_count = 0
    first_vertices = []

    for index in tree.walk():
        first, emitted = mesh_branch_tube(stream, tree[index], policy)
        first_vertices.append(first)
        triangle_count += emitted

    report = OperationReport(
        operation="mesh_vein_tree",
        success=True,
        requested_policy=policy.to_dict(),
        effective_policy=policy.to_dict(),
        metadata={
            "tube_count": len(first_vertices),
            "vertex_count": stream.vertex_count - vertex_start,
            "triangle_count": triangle_count,
            "vertices_per_tube": (policy.segments + 1) * policy.sides,
        },
    )
    logger.info(
        f"Meshed {len(first_vertices)} vein tubes: "
        f"{report.metadata['vertex_count']} vertices, {triangle_count} triangles"
    )
    return first_vertices, report
