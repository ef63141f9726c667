"""
Concentric cone shells that form the rock body of the mountain.

Each shell is a ring of base vertices plus an apex, optionally sprouting
crystal-facet triangles along its ring edges. Every emitted triangle has
its three edges registered with the EdgeSet for the wireframe.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import logging
import math

import numpy as np

from mountain_policies import OperationReport, ShellPolicy
from ..core.edges import EdgeSet
from ..core.errors import ConfigurationError
from ..core.stream import GeometryStream
from ..utils.geometry import UP, normalize
from ..utils.sources import NoiseFunction, RandomSource

logger = logging.getLogger(__name__)

RING_COLOR = (0.85, 0.95, 1.0, 0.02)
APEX_COLOR = (1.0, 0.7, 1.0, 0.02)
FACET_COLOR = (0.95, 0.98, 1.0, 0.02)


@dataclass
class ShellParams:
    """Derived parameters for one shell; discarded once emitted."""

    index: int
    radius: float
    height: float
    resolution: int
    facet_chance: float


@dataclass
class ShellResult:
    """Stream bookkeeping for one emitted shell."""

    index: int
    ring_indices: List[int]
    apex_index: int
    side_triangles: List[int] = field(default_factory=list)
    facet_triangles: List[int] = field(default_factory=list)

    @property
    def base_vertex_count(self) -> int:
        return len(self.ring_indices) + 1


def derive_shell_params(policy: ShellPolicy) -> List[ShellParams]:
    """Compute every shell's parameters, outermost first."""
    return [
        ShellParams(
            index=i,
            radius=policy.shell_radius(i),
            height=policy.shell_height(i),
            resolution=policy.cone_resolution,
            facet_chance=policy.facet_chance(i),
        )
        for i in range(policy.number_of_cones)
    ]


def _emit_facet(
    stream: GeometryStream,
    edges: EdgeSet,
    current: int,
    following: int,
    shell: ShellParams,
    policy: ShellPolicy,
    rng: RandomSource,
) -> int:
    low, high = policy.facet_jitter
    crystal_height = shell.height * policy.facet_height_fraction * rng.uniform(low, high)
    crystal_width = shell.radius * policy.facet_width_fraction * rng.uniform(low, high)

    p0 = stream.position(current)
    p1 = stream.position(following)
    midpoint = (p0 + p1) * 0.5
    out_direction = normalize(midpoint)
    tip = midpoint + out_direction * crystal_width + UP * crystal_height

    face_normal = normalize(np.cross(p1 - p0, tip - p0))

    cv1 = stream.add_vertex(p0, face_normal, (0.0, 0.0), FACET_COLOR)
    cv2 = stream.add_vertex(p1, face_normal, (1.0, 0.0), FACET_COLOR)
    cv3 = stream.add_vertex(tip, face_normal, (0.5, 1.0), FACET_COLOR)

    triangle = stream.add_triangle(cv1, cv2, cv3)
    edges.register_triangle(cv1, cv2, cv3)
    return triangle


def generate_cone_shell(
    stream: GeometryStream,
    edges: EdgeSet,
    shell: ShellParams,
    policy: ShellPolicy,
    rng: RandomSource,
    noise: NoiseFunction,
) -> ShellResult:
    """
    Emit one cone shell with its crystal facets.

    Parameters
    ----------
    stream : GeometryStream
        Open stream receiving vertices and triangles
    edges : EdgeSet
        Wireframe edge registry
    shell : ShellParams
        Radius, height, resolution and facet chance of this shell
    policy : ShellPolicy
        Noise and facet shape settings
    rng : RandomSource
        Source for facet rolls and jitter
    noise : callable
        2D coherent noise in about [0, 1], sampled at ring positions

    Returns
    -------
    ShellResult
        Indices of the emitted ring, apex and triangles
    """
    if shell.resolution < 3:
        raise ConfigurationError(
            [f"shell {shell.index} resolution must be at least 3, got {shell.resolution}"]
        )

    resolution = shell.resolution
    step = 2.0 * math.pi / resolution
    ring: List[int] = []

    for i in range(resolution):
        angle = i * step
        x = math.cos(angle) * shell.radius
        z = math.sin(angle) * shell.radius

        variation = 1.0 + (
            noise(x * policy.noise_frequency, z * policy.noise_frequency) - 0.5
        ) * policy.noise_amplitude

        ring.append(stream.add_vertex(
            (x * variation, 0.0, z * variation),
            normalize(np.array([x, 0.0, z])),
            (i / resolution, 0.0),
            RING_COLOR,
        ))

    apex = stream.add_vertex((0.0, shell.height, 0.0), UP, (0.5, 1.0), APEX_COLOR)
    result = ShellResult(index=shell.index, ring_indices=ring, apex_index=apex)

    for i in range(resolution):
        current = ring[i]
        following = ring[(i + 1) % resolution]

        result.side_triangles.append(stream.add_triangle(current, following, apex))
        edges.register_triangle(current, following, apex)

        if rng.value() > 1.0 - shell.facet_chance:
            result.facet_triangles.append(
                _emit_facet(stream, edges, current, following, shell, policy, rng)
            )

    logger.debug(
        f"Shell {shell.index}: radius={shell.radius:.3f}, height={shell.height:.3f}, "
        f"{resolution} sides, {len(result.facet_triangles)} facets"
    )
    return result


def build_mountain_shells(
    stream: GeometryStream,
    edges: EdgeSet,
    policy: ShellPolicy,
    rng: RandomSource,
    noise: NoiseFunction,
) -> Tuple[List[ShellResult], OperationReport]:
    """
    Emit the full stack of shells into the stream.

    All derived shell parameters are validated before the first vertex is
    written, so a rejected stack leaves the stream untouched.

    Returns
    -------
    results : list of ShellResult
        One entry per shell, outermost first
    report : OperationReport
        Counts of emitted geometry
    """
    errors = policy.validate()
    if errors:
        raise ConfigurationError(errors)

    warnings = policy.recommendations()
    for message in warnings:
        logger.warning(message)

    shells = derive_shell_params(policy)

    vertex_start = stream.vertex_count
    triangle_start = stream.triangle_count
    edge_start = len(edges)

    results = [
        generate_cone_shell(stream, edges, shell, policy, rng, noise)
        for shell in shells
    ]

    facet_count = sum(len(r.facet_triangles) for r in results)
    report = OperationReport(
        operation="build_mountain_shells",
        success=True,
        requested_policy=policy.to_dict(),
        effective_policy=policy.to_dict(),
        warnings=warnings,
        metadata={
            "shell_count": len(results),
            "vertex_count": stream.vertex_count - vertex_start,
            "triangle_count": stream.triangle_count - triangle_start,
            "facet_count": facet_count,
            "wireframe_edges": len(edges) - edge_start,
        },
    )

    logger.info(
        f"Built {len(results)} shells: {report.metadata['vertex_count']} vertices, "
        f"{report.metadata['triangle_count']} triangles ({facet_count} facets)"
    )
    return results, report
