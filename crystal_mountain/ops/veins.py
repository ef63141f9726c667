"""
Fractal vein tree generation.

Builds the branch structure of the glowing veins as pure geometric data.
Meshing happens separately in ``tubes.py``.

Main branches start on the mountain's central axis and point outward and
upward. Each branch recursively sprouts ``branches_per_level`` children
whose directions are blended with the parent's so the network bends
gradually instead of turning sharply.
"""

from typing import Tuple
import logging

import numpy as np

from mountain_policies import OperationReport, VeinPolicy
from ..core.branches import Branch, VeinTree
from ..core.errors import ConfigurationError
from ..utils.geometry import horizontal_distance, lerp, normalize
from ..utils.sources import RandomSource

logger = logging.getLogger(__name__)

# Main branches start below this fraction of the mountain height.
MAIN_START_MAX_RATIO = 0.8
MAIN_VERTICAL_RANGE = (0.2, 0.8)

CHILD_START_RANGE = (0.3, 0.8)
CHILD_VERTICAL_RANGE = (0.1, 0.5)
CHILD_THICKNESS_RATIO = 0.7

# Child length factor is (BASE - STEP * depth_from_top).
CHILD_LENGTH_BASE = 0.6
CHILD_LENGTH_STEP = 0.1

DISTANCE_ESTIMATE_SCALE = 1.5


def distance_to_outer_cone(
    point: np.ndarray,
    base_radius: float,
    base_height: float,
) -> float:
    """
    Approximate distance from ``point`` to the outer cone surface.

    This is a cheap heuristic rather than a ray/cone intersection: the
    smaller of the horizontal room left inside the base radius and the cone
    radius at the point's height, scaled by 1.5. Negative room (a point
    outside the envelope) clamps to zero.
    """
    remaining_radius = base_radius - horizontal_distance(point)
    cone_radius_at_height = base_radius * (1.0 - point[1] / base_height)
    return max(0.0, min(remaining_radius, cone_radius_at_height) * DISTANCE_ESTIMATE_SCALE)


def _random_direction(rng: RandomSource, vertical_range: Tuple[float, float]) -> np.ndarray:
    x = rng.uniform(-1.0, 1.0)
    y = rng.uniform(*vertical_range)
    z = rng.uniform(-1.0, 1.0)
    return normalize(np.array([x, y, z]))


def _grow_children(
    tree: VeinTree,
    parent_index: int,
    levels_remaining: int,
    policy: VeinPolicy,
    base_radius: float,
    base_height: float,
    rng: RandomSource,
) -> None:
    if levels_remaining <= 0:
        return

    parent = tree[parent_index]
    parent_dir = normalize(parent.end - parent.start)
    depth_from_top = policy.sub_branch_levels - levels_remaining
    length_decay = CHILD_LENGTH_BASE - CHILD_LENGTH_STEP * depth_from_top

    for _ in range(policy.branches_per_level):
        start = lerp(parent.start, parent.end, rng.uniform(*CHILD_START_RANGE))

        random_dir = _random_direction(rng, CHILD_VERTICAL_RANGE)
        direction = normalize(lerp(parent_dir, random_dir, policy.branch_randomness), fallback=parent_dir)

        length = (
            distance_to_outer_cone(start, base_radius, base_height)
            * policy.branch_length_factor
            * length_decay
        )

        child_index = tree.add_child(parent_index, Branch(
            start=start,
            end=start + direction * length,
            thickness=parent.thickness * CHILD_THICKNESS_RATIO,
            color=policy.sub_color,
        ))

        _grow_children(
            tree, child_index, levels_remaining - 1,
            policy, base_radius, base_height, rng,
        )


def grow_vein_tree(
    policy: VeinPolicy,
    base_radius: float,
    base_height: float,
    rng: RandomSource,
) -> Tuple[VeinTree, OperationReport]:
    """
    Grow the fractal vein tree inside a mountain of the given envelope.

    Random values are drawn depth-first (each main branch, then its whole
    subtree), so a seeded source reproduces the same tree.

    Parameters
    ----------
    policy : VeinPolicy
        Branch counts, depth and shape factors
    base_radius, base_height : float
        Envelope of the outermost shell
    rng : RandomSource
        Source for every random choice

    Returns
    -------
    tree : VeinTree
        Branch arena with main branches as roots
    report : OperationReport
        Branch statistics
    """
    errors = policy.validate()
    if errors:
        raise ConfigurationError(errors)

    tree = VeinTree()
    base_center = np.zeros(3)
    peak = np.array([0.0, base_height, 0.0])

    if policy.enabled:
        for _ in range(policy.main_branches):
            start = lerp(base_center, peak, rng.uniform(0.0, MAIN_START_MAX_RATIO))
            direction = _random_direction(rng, MAIN_VERTICAL_RANGE)
            length = distance_to_outer_cone(start, base_radius, base_height) * policy.branch_length_factor

            root = tree.add_root(Branch(
                start=start,
                end=start + direction * length,
                thickness=policy.branch_thickness,
                color=policy.main_color,
            ))
            _grow_children(
                tree, root, policy.sub_branch_levels,
                policy, base_radius, base_height, rng,
            )

    report = OperationReport(
        operation="grow_vein_tree",
        success=True,
        requested_policy=policy.to_dict(),
        effective_policy=policy.to_dict(),
        metadata={
            "branch_count": len(tree),
            "main_branch_count": len(tree.roots),
            "leaf_count": len(tree.leaves()),
            "max_depth": tree.max_depth(),
        },
    )
    logger.info(
        f"Grew vein tree: {len(tree)} branches from {len(tree.roots)} main branches, "
        f"max depth {tree.max_depth()}"
    )
    return tree, report
