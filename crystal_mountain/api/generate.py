"""
High-level API for generating a crystalline mountain.

One call runs a complete pass: validate the policy, open the geometry
stream, emit the rock shells (registering wireframe edges), grow and mesh
the vein tree, finalize the stream and assemble the render buffers.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from mountain_policies import (
    MountainPolicy,
    OperationReport,
    validate_mountain_policy,
    validate_policy,
)
from ..core.branches import VeinTree
from ..core.edges import EdgeSet
from ..core.errors import ConfigurationError
from ..core.stream import GeometryStream, StreamSnapshot
from ..ops.assemble import AssembledGeometry, assemble_geometry
from ..ops.shells import ShellResult, build_mountain_shells
from ..ops.tubes import mesh_vein_tree
from ..ops.veins import grow_vein_tree
from ..utils.sources import NoiseFunction, NumpyRandomSource, RandomSource, perlin_noise

logger = logging.getLogger(__name__)

Color = Tuple[float, float, float, float]


def _scaled(color: Color, factor: float) -> Color:
    r, g, b, a = color
    return (r * factor, g * factor, b * factor, a)


@dataclass
class MaterialHints:
    """
    Appearance values for the presentation layer.

    Emission colors are pre-multiplied by their intensities (HDR values may
    exceed 1). Geometry never depends on these.
    """

    crystal_color: Color
    emission_color: Color
    wireframe_color: Color
    wireframe_emission: Color
    wireframe_thickness: float
    roughness: float
    metallic: float

    @classmethod
    def from_policy(cls, policy: MountainPolicy) -> "MaterialHints":
        appearance = policy.appearance
        wireframe = policy.wireframe
        return cls(
            crystal_color=appearance.crystal_color,
            emission_color=_scaled(appearance.emission_color, appearance.emission_intensity),
            wireframe_color=wireframe.color,
            wireframe_emission=_scaled(wireframe.color, wireframe.emission_intensity),
            wireframe_thickness=wireframe.thickness,
            roughness=appearance.roughness,
            metallic=appearance.metallic,
        )


@dataclass
class MountainMesh:
    """Everything produced by one generation pass."""

    geometry: AssembledGeometry
    material: MaterialHints
    snapshot: StreamSnapshot
    edges: EdgeSet
    shells: List[ShellResult]
    vein_tree: VeinTree


def check_mountain_policy(policy: MountainPolicy) -> List[str]:
    """All configuration errors for ``policy`` (empty if valid)."""
    errors = validate_policy(
        policy,
        required_fields=["shells", "veins", "tubes", "wireframe", "appearance", "assembly"],
    )
    if errors:
        return errors
    return validate_mountain_policy(policy)


def generate_crystalline_mountain(
    policy: Optional[MountainPolicy] = None,
    rng: Optional[RandomSource] = None,
    noise: Optional[NoiseFunction] = None,
    stream: Optional[GeometryStream] = None,
) -> Tuple[MountainMesh, OperationReport]:
    """
    Run one full generation pass.

    Parameters
    ----------
    policy : MountainPolicy, optional
        Generation parameters (defaults to MountainPolicy())
    rng : RandomSource, optional
        Random source; defaults to a numpy generator seeded with policy.seed
    noise : callable, optional
        2D noise for the shell silhouettes; defaults to Perlin noise
    stream : GeometryStream, optional
        Stream to reuse; it is cleared at the start of the pass

    Returns
    -------
    mesh : MountainMesh
        Render buffers, material hints and intermediate structures
    report : OperationReport
        Requested/effective policy, warnings and metrics

    Raises
    ------
    ConfigurationError
        If the policy is invalid. Raised before the stream is touched.
    MeshSizeLimitError
        If a buffer exceeds the vertex budget in "error" overflow mode
    """
    if policy is None:
        policy = MountainPolicy()

    errors = check_mountain_policy(policy)
    if errors:
        logger.error(f"Rejected mountain configuration with {len(errors)} error(s)")
        raise ConfigurationError(errors)

    if rng is None:
        rng = NumpyRandomSource(policy.seed)
    if noise is None:
        noise = perlin_noise
    if stream is None:
        stream = GeometryStream()

    stream.begin()
    try:
        edges = EdgeSet(stream, policy.wireframe.color)
        shells, shell_report = build_mountain_shells(stream, edges, policy.shells, rng, noise)

        tree, vein_report = grow_vein_tree(
            policy.veins,
            policy.shells.base_radius,
            policy.shells.base_height,
            rng,
        )
        _, tube_report = mesh_vein_tree(stream, tree, policy.tubes)
        snapshot = stream.finalize()
    except Exception:
        stream.abort()
        raise

    line_source = edges if policy.wireframe.enabled else EdgeSet(stream, policy.wireframe.color)
    geometry, assembly_report = assemble_geometry(snapshot, line_source, policy.assembly)

    report = OperationReport(
        operation="generate_crystalline_mountain",
        success=True,
        requested_policy=policy.to_dict(),
        effective_policy=policy.to_dict(),
    )
    for sub_report in (shell_report, vein_report, tube_report, assembly_report):
        report.merge(sub_report)

    report.set_metric("vertex_count", snapshot.vertex_count)
    report.set_metric("triangle_count", snapshot.triangle_count)
    report.set_metric("wireframe_line_count", geometry.line_count)
    report.set_metric("solid_buffer_count", len(geometry.solid))
    report.set_metric("line_buffer_count", len(geometry.lines))

    logger.info(
        f"Generated crystalline mountain: {snapshot.vertex_count} vertices, "
        f"{snapshot.triangle_count} triangles, {geometry.line_count} wireframe lines"
    )

    mesh = MountainMesh(
        geometry=geometry,
        material=MaterialHints.from_policy(policy),
        snapshot=snapshot,
        edges=edges,
        shells=shells,
        vein_tree=tree,
    )
    return mesh, report


class CrystallineMountainGenerator:
    """
    Keeps the latest generated mesh and rebuilds it on demand.

    ``regenerate`` replaces the previous mesh only when the new pass
    succeeds; a rejected configuration keeps the old buffers. Calls must be
    serialized by the caller.

    Parameters
    ----------
    policy : MountainPolicy, optional
        Initial parameters
    noise : callable, optional
        Noise function used for every pass
    """

    def __init__(
        self,
        policy: Optional[MountainPolicy] = None,
        noise: Optional[NoiseFunction] = None,
    ):
        self.policy = policy or MountainPolicy()
        self.noise = noise
        self.stream = GeometryStream()
        self.mesh: Optional[MountainMesh] = None
        self.report: Optional[OperationReport] = None

    def regenerate(
        self,
        policy: Optional[MountainPolicy] = None,
        rng: Optional[RandomSource] = None,
    ) -> MountainMesh:
        """Run a pass with ``policy`` (or the current one) and keep the result."""
        policy = policy or self.policy
        mesh, report = generate_crystalline_mountain(
            policy, rng=rng, noise=self.noise, stream=self.stream,
        )
        self.policy = policy
        self.mesh = mesh
        self.report = report
        return mesh
