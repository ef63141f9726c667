"""
Tests for the trimesh and networkx adapters on generated mountains.
"""

import numpy as np
import pytest

from crystal_mountain import flat_noise, generate_crystalline_mountain
from crystal_mountain.adapters import (
    analyze_vein_tree,
    lines_to_path,
    mountain_to_scene,
    solid_to_trimesh,
    vein_tree_to_graph,
)
from crystal_mountain.core.branches import VeinTree
from mountain_policies import MountainPolicy


@pytest.fixture
def mountain():
    policy = MountainPolicy(seed=3)
    policy.shells.number_of_cones = 3
    policy.shells.cone_resolution = 10
    policy.veins.main_branches = 3
    policy.veins.sub_branch_levels = 2
    policy.veins.branches_per_level = 2
    mesh, _ = generate_crystalline_mountain(policy, noise=flat_noise)
    return mesh


class TestTrimeshAdapter:
    """Solid and line buffers as trimesh objects."""

    def test_solid_buffer_kept_verbatim(self, mountain):
        import trimesh

        buffer = mountain.geometry.solid[0]
        tm = solid_to_trimesh(buffer)

        assert isinstance(tm, trimesh.Trimesh)
        assert len(tm.vertices) == buffer.vertex_count
        np.testing.assert_array_equal(tm.faces, buffer.triangles.astype(np.int64))
        np.testing.assert_allclose(tm.vertices, buffer.positions, atol=1e-6)
        assert tm.metadata["uv"].shape == (buffer.vertex_count, 2)
        assert tm.visual.vertex_colors.shape == (buffer.vertex_count, 4)

    def test_lines_to_path(self, mountain):
        import trimesh

        buffer = mountain.geometry.lines[0]
        path = lines_to_path(buffer)

        assert isinstance(path, trimesh.path.Path3D)
        assert path.metadata["colors"].shape == (buffer.vertex_count, 4)
        np.testing.assert_allclose(path.bounds[0], buffer.positions.min(axis=0), atol=1e-5)
        np.testing.assert_allclose(path.bounds[1], buffer.positions.max(axis=0), atol=1e-5)

    def test_scene_names(self, mountain):
        scene = mountain_to_scene(mountain)

        assert "solid_0" in scene.geometry
        assert "wireframe_0" in scene.geometry
        assert len(scene.geometry) == len(mountain.geometry.solid) + len(mountain.geometry.lines)


class TestNetworkxAdapter:
    """Vein tree topology."""

    def test_graph_structure(self, mountain):
        graph = vein_tree_to_graph(mountain.vein_tree)

        assert graph.number_of_nodes() == 3 * 7
        assert graph.number_of_edges() == 3 * 6
        roots = [n for n, is_root in graph.nodes(data="is_root") if is_root]
        assert sorted(roots) == sorted(mountain.vein_tree.roots)
        for parent, child in graph.edges:
            assert graph.nodes[child]["depth"] == graph.nodes[parent]["depth"] + 1

    def test_analysis(self, mountain):
        summary = analyze_vein_tree(mountain.vein_tree)

        assert summary["is_forest"] is True
        assert summary["component_count"] == 3
        assert summary["max_depth"] == 2
        assert summary["leaf_count"] == 12
        expected_length = sum(b.length for b in mountain.vein_tree.branches)
        assert summary["total_length"] == pytest.approx(expected_length)

    def test_empty_tree(self):
        summary = analyze_vein_tree(VeinTree())

        assert summary["component_count"] == 0
        assert summary["leaf_count"] == 0
