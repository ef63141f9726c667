"""
End-to-end tests for a full crystalline mountain generation pass.
"""

import numpy as np
import pytest

from crystal_mountain import (
    ConfigurationError,
    CrystallineMountainGenerator,
    GeometryStream,
    MeshSizeLimitError,
    NumpyRandomSource,
    flat_noise,
    generate_crystalline_mountain,
)
from mountain_policies import MountainPolicy


def small_policy(seed=42):
    policy = MountainPolicy(seed=seed)
    policy.shells.number_of_cones = 3
    policy.shells.cone_resolution = 12
    policy.veins.main_branches = 3
    policy.veins.sub_branch_levels = 2
    policy.veins.branches_per_level = 2
    return policy


def bare_cone_policy():
    """One shell, eight sides, no facets, no veins."""
    policy = MountainPolicy(seed=0)
    policy.shells.number_of_cones = 1
    policy.shells.cone_resolution = 8
    policy.shells.facet_chance_outer = 0.0
    policy.shells.facet_chance_middle = 0.0
    policy.shells.facet_chance_inner = 0.0
    policy.veins.main_branches = 0
    return policy


class TestBareCone:
    """Smallest complete pass."""

    def test_counts(self):
        mesh, report = generate_crystalline_mountain(bare_cone_policy(), noise=flat_noise)

        assert mesh.snapshot.vertex_count == 9
        assert mesh.snapshot.triangle_count == 8
        assert mesh.geometry.line_count == 16
        assert len(mesh.vein_tree) == 0
        assert len(mesh.geometry.solid) == 1
        assert len(mesh.geometry.lines) == 1
        assert report.success
        assert report.metrics["wireframe_line_count"] == 16
        # One shell and eight sides are below the recommended minima
        assert any("number_of_cones" in w for w in report.warnings)

    def test_bounds(self):
        mesh, _ = generate_crystalline_mountain(bare_cone_policy(), noise=flat_noise)

        np.testing.assert_allclose(mesh.geometry.bounds, [[-20.0, 0.0, -20.0], [20.0, 15.0, 20.0]], atol=1e-9)


class TestFullPass:
    """Shells, veins and wireframe together."""

    def test_report_metrics(self, wavy_noise):
        mesh, report = generate_crystalline_mountain(small_policy(), noise=wavy_noise)

        assert report.metrics["vertex_count"] == mesh.snapshot.vertex_count
        assert report.metrics["triangle_count"] == mesh.snapshot.triangle_count
        assert report.metrics["grow_vein_tree.branch_count"] == 3 * 7
        assert report.metrics["build_mountain_shells.shell_count"] == 3
        tube_vertices = report.metrics["mesh_vein_tree.vertex_count"]
        shell_vertices = report.metrics["build_mountain_shells.vertex_count"]
        assert tube_vertices == 21 * 36
        assert shell_vertices + tube_vertices == mesh.snapshot.vertex_count

    def test_wireframe_covers_shells_only(self, wavy_noise):
        mesh, report = generate_crystalline_mountain(small_policy(), noise=wavy_noise)

        shell_vertices = report.metrics["build_mountain_shells.vertex_count"]
        shell_triangles = report.metrics["build_mountain_shells.triangle_count"]

        for a, b, c in mesh.snapshot.triangles[:shell_triangles]:
            assert (a, b) in mesh.edges
            assert (b, c) in mesh.edges
            assert (a, c) in mesh.edges

        for a, b in mesh.edges:
            assert a < shell_vertices and b < shell_vertices

    def test_same_seed_is_reproducible(self, wavy_noise):
        mesh_a, _ = generate_crystalline_mountain(small_policy(), noise=wavy_noise)
        mesh_b, _ = generate_crystalline_mountain(small_policy(), noise=wavy_noise)

        np.testing.assert_array_equal(mesh_a.snapshot.positions, mesh_b.snapshot.positions)
        np.testing.assert_array_equal(mesh_a.snapshot.triangles, mesh_b.snapshot.triangles)
        np.testing.assert_array_equal(mesh_a.edges.positions, mesh_b.edges.positions)

    def test_explicit_rng_matches_seed(self, wavy_noise):
        mesh_a, _ = generate_crystalline_mountain(small_policy(seed=5), noise=wavy_noise)
        mesh_b, _ = generate_crystalline_mountain(
            small_policy(seed=None), rng=NumpyRandomSource(5), noise=wavy_noise,
        )

        np.testing.assert_array_equal(mesh_a.snapshot.positions, mesh_b.snapshot.positions)

    def test_wireframe_disabled(self, wavy_noise):
        policy = small_policy()
        policy.wireframe.enabled = False

        mesh, report = generate_crystalline_mountain(policy, noise=wavy_noise)

        assert mesh.geometry.lines == []
        assert report.metrics["wireframe_line_count"] == 0

    def test_material_hints(self):
        mesh, _ = generate_crystalline_mountain(bare_cone_policy(), noise=flat_noise)

        assert mesh.material.emission_color == pytest.approx((0.9 * 1.5, 0.95 * 1.5, 1.5, 1.0))
        assert mesh.material.wireframe_emission == pytest.approx((0.8 * 2.5, 0.9 * 2.5, 2.5, 0.8))
        assert mesh.material.crystal_color == (0.8, 0.9, 1.0, 0.05)

    def test_split_on_small_budget(self, wavy_noise):
        policy = small_policy()
        policy.assembly.max_vertices_per_buffer = 300

        mesh, report = generate_crystalline_mountain(policy, noise=wavy_noise)

        assert len(mesh.geometry.solid) > 1
        assert all(b.vertex_count <= 300 for b in mesh.geometry.solid)
        assert mesh.geometry.triangle_count == mesh.snapshot.triangle_count
        assert report.warnings

    def test_error_on_small_budget(self, wavy_noise):
        policy = small_policy()
        policy.assembly.max_vertices_per_buffer = 300
        policy.assembly.overflow_mode = "error"

        with pytest.raises(MeshSizeLimitError):
            generate_crystalline_mountain(policy, noise=wavy_noise)

    def test_default_perlin_noise(self):
        pytest.importorskip("noise")

        mesh, report = generate_crystalline_mountain(small_policy())

        assert report.success
        assert np.all(np.isfinite(mesh.snapshot.positions))


class TestFailureHandling:
    """Rejected configurations and aborted passes."""

    def test_rejected_policy_leaves_stream_untouched(self):
        stream = GeometryStream()
        policy = bare_cone_policy()
        policy.shells.number_of_cones = 20

        with pytest.raises(ConfigurationError):
            generate_crystalline_mountain(policy, noise=flat_noise, stream=stream)

        assert not stream.is_open
        assert stream.vertex_count == 0

    @pytest.mark.parametrize("field_name", ["base_radius", "base_height"])
    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_envelope_rejected_before_generation(self, field_name, value):
        stream = GeometryStream()
        policy = bare_cone_policy()
        setattr(policy.shells, field_name, value)

        with pytest.raises(ConfigurationError) as exc_info:
            generate_crystalline_mountain(policy, noise=flat_noise, stream=stream)

        assert any(field_name in e for e in exc_info.value.errors)
        assert stream.vertex_count == 0

    def test_fractional_resolution_rejected_before_generation(self):
        stream = GeometryStream()
        policy = MountainPolicy.from_dict({"seed": 1, "shells": {"cone_resolution": 8.5}})

        with pytest.raises(ConfigurationError):
            generate_crystalline_mountain(policy, noise=flat_noise, stream=stream)

        assert not stream.is_open
        assert stream.vertex_count == 0

    def test_failure_mid_pass_closes_stream(self):
        stream = GeometryStream()

        def broken_noise(x, y):
            raise RuntimeError("noise backend failed")

        with pytest.raises(RuntimeError):
            generate_crystalline_mountain(bare_cone_policy(), noise=broken_noise, stream=stream)

        assert not stream.is_open
        assert stream.vertex_count == 0
        mesh, _ = generate_crystalline_mountain(bare_cone_policy(), noise=flat_noise, stream=stream)
        assert mesh.snapshot.vertex_count == 9


class TestCrystallineMountainGenerator:
    """Regeneration keeps the previous mesh on failure."""

    def test_regenerate_replaces_mesh(self):
        generator = CrystallineMountainGenerator(bare_cone_policy(), noise=flat_noise)
        first = generator.regenerate()

        policy = bare_cone_policy()
        policy.shells.cone_resolution = 10
        second = generator.regenerate(policy)

        assert second is not first
        assert second.snapshot.vertex_count == 11
        assert generator.policy is policy

    def test_rejected_policy_keeps_previous_mesh(self):
        generator = CrystallineMountainGenerator(bare_cone_policy(), noise=flat_noise)
        previous = generator.regenerate()
        previous_positions = previous.snapshot.positions.copy()

        bad = bare_cone_policy()
        bad.shells.cone_resolution = 2
        with pytest.raises(ConfigurationError):
            generator.regenerate(bad)

        assert generator.mesh is previous
        assert generator.policy is not bad
        np.testing.assert_array_equal(generator.mesh.snapshot.positions, previous_positions)
        assert generator.stream.vertex_count == 9
