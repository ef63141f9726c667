"""
Command-Line Interface

Generate a crystalline mountain in memory and print the generation report.
No mesh files are written.
"""

import argparse
import json
import logging
import sys

from mountain_policies import MountainPolicy
from .adapters.networkx_adapter import analyze_vein_tree
from .api.generate import generate_crystalline_mountain
from .core.errors import ConfigurationError, MeshSizeLimitError
from .utils.sources import flat_noise


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crystal-mountain",
        description="Crystalline mountain generator - procedural cone shells with fractal veins",
    )
    parser.add_argument("--cones", type=int, default=5, help="Number of cone shells (default: 5)")
    parser.add_argument("--resolution", type=int, default=36, help="Ring vertices per shell (default: 36)")
    parser.add_argument("--radius", type=float, default=20.0, help="Base radius (default: 20)")
    parser.add_argument("--height", type=float, default=15.0, help="Base height (default: 15)")
    parser.add_argument("--branches", type=int, default=12, help="Main vein branches (default: 12)")
    parser.add_argument("--levels", type=int, default=3, help="Sub-branch recursion depth (default: 3)")
    parser.add_argument("--per-level", type=int, default=3, help="Children per branch (default: 3)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--max-vertices",
        type=int,
        default=60000,
        help="Vertex budget per draw buffer (default: 60000)",
    )
    parser.add_argument(
        "--overflow",
        choices=["split", "error"],
        default="split",
        help="What to do when a buffer exceeds the budget (default: split)",
    )
    parser.add_argument(
        "--no-noise",
        action="store_true",
        help="Keep shell rings perfectly circular",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def policy_from_args(args: argparse.Namespace) -> MountainPolicy:
    policy = MountainPolicy(seed=args.seed)
    policy.shells.number_of_cones = args.cones
    policy.shells.cone_resolution = args.resolution
    policy.shells.base_radius = args.radius
    policy.shells.base_height = args.height
    policy.veins.main_branches = args.branches
    policy.veins.sub_branch_levels = args.levels
    policy.veins.branches_per_level = args.per_level
    policy.assembly.max_vertices_per_buffer = args.max_vertices
    policy.assembly.overflow_mode = args.overflow
    return policy


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    policy = policy_from_args(args)
    try:
        mesh, report = generate_crystalline_mountain(
            policy, noise=flat_noise if args.no_noise else None,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except MeshSizeLimitError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 3

    output = report.to_dict()
    output["vein_topology"] = analyze_vein_tree(mesh.vein_tree)
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
