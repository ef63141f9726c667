"""
Tests for the crystal-mountain command line.
"""

import json

from crystal_mountain.cli import build_parser, main, policy_from_args


SMALL_ARGS = [
    "--cones", "2",
    "--resolution", "8",
    "--branches", "2",
    "--levels", "1",
    "--per-level", "2",
    "--seed", "1",
    "--no-noise",
]


class TestCLI:
    """Exit codes and printed report."""

    def test_policy_from_args(self):
        args = build_parser().parse_args(SMALL_ARGS + ["--overflow", "error"])

        policy = policy_from_args(args)

        assert policy.seed == 1
        assert policy.shells.number_of_cones == 2
        assert policy.shells.cone_resolution == 8
        assert policy.veins.main_branches == 2
        assert policy.veins.sub_branch_levels == 1
        assert policy.veins.branches_per_level == 2
        assert policy.assembly.overflow_mode == "error"

    def test_success_prints_report(self, capsys):
        exit_code = main(SMALL_ARGS)

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["operation"] == "generate_crystalline_mountain"
        assert output["success"] is True
        assert output["metrics"]["vertex_count"] > 0
        assert output["vein_topology"]["component_count"] == 2
        assert output["vein_topology"]["max_depth"] == 1
        assert output["vein_topology"]["is_forest"] is True

    def test_configuration_error_exit_code(self, capsys):
        exit_code = main(["--cones", "20", "--no-noise"])

        assert exit_code == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "number_of_cones" in captured.err

    def test_size_limit_exit_code(self, capsys):
        exit_code = main(SMALL_ARGS + ["--max-vertices", "10", "--overflow", "error"])

        assert exit_code == 3
        assert "Mesh size limit exceeded" in capsys.readouterr().err
