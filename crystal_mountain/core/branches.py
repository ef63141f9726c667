"""
Arena of vein branches.

Branches are stored in a flat list and refer to their children by index,
so the tree has no back-pointers and cannot form cycles.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

import numpy as np

Color = Tuple[float, float, float, float]


@dataclass
class Branch:
    """
    One straight vein segment.

    ``depth`` is the number of recursion edges between this branch and its
    main (root) branch; main branches have depth 0.
    """

    start: np.ndarray
    end: np.ndarray
    thickness: float
    color: Color
    depth: int = 0
    children: List[int] = field(default_factory=list)

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    @property
    def is_leaf(self) -> bool:
        return not self.children


class VeinTree:
    """Flat branch storage with a list of root (main branch) indices."""

    def __init__(self):
        self.branches: List[Branch] = []
        self.roots: List[int] = []

    def __len__(self) -> int:
        return len(self.branches)

    def __getitem__(self, index: int) -> Branch:
        return self.branches[index]

    def add_root(self, branch: Branch) -> int:
        branch.depth = 0
        self.branches.append(branch)
        index = len(self.branches) - 1
        self.roots.append(index)
        return index

    def add_child(self, parent_index: int, branch: Branch) -> int:
        parent = self.branches[parent_index]
        branch.depth = parent.depth + 1
        self.branches.append(branch)
        index = len(self.branches) - 1
        parent.children.append(index)
        return index

    def walk(self) -> Iterator[int]:
        """Yield branch indices in pre-order (parent before its subtree)."""
        stack = list(reversed(self.roots))
        while stack:
            index = stack.pop()
            yield index
            stack.extend(reversed(self.branches[index].children))

    def leaves(self) -> List[int]:
        return [i for i, b in enumerate(self.branches) if b.is_leaf]

    def max_depth(self) -> int:
        if not self.branches:
            return 0
        return max(b.depth for b in self.branches)
