"""
Deduplicated wireframe edge tracking.
"""

from typing import Iterator, List, Sequence, Set, Tuple

import numpy as np

from .stream import GeometryStream

EdgeKey = Tuple[int, int]


def canonical_edge(a: int, b: int) -> EdgeKey:
    """Unordered vertex pair with the smaller index first."""
    a, b = int(a), int(b)
    return (a, b) if a <= b else (b, a)


class EdgeSet:
    """
    Set of emitted wireframe edges.

    Each canonical key produces exactly one line record (two endpoint
    positions copied from the stream plus the wireframe color), no matter
    how many triangles share the edge. The set only grows.

    Parameters
    ----------
    stream : GeometryStream
        Stream the registered indices refer to
    color : sequence of 4 floats
        RGBA color given to every line vertex
    """

    def __init__(self, stream: GeometryStream, color: Sequence[float]):
        self.stream = stream
        self.color = tuple(float(c) for c in color)
        self._keys: Set[EdgeKey] = set()
        self._order: List[EdgeKey] = []
        self._positions: List[Tuple[float, float, float]] = []

    def register_edge(self, a: int, b: int) -> bool:
        """
        Register the edge (a, b).

        Returns
        -------
        bool
            True if the edge was new and a line record was emitted
        """
        key = canonical_edge(a, b)
        if key in self._keys:
            return False

        self._keys.add(key)
        self._order.append(key)
        self._positions.append(self.stream.vertex(a).position)
        self._positions.append(self.stream.vertex(b).position)
        return True

    def register_triangle(self, a: int, b: int, c: int) -> int:
        """Register all three edges of a triangle; return how many were new."""
        return sum((
            self.register_edge(a, b),
            self.register_edge(a, c),
            self.register_edge(b, c),
        ))

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, pair) -> bool:
        return canonical_edge(*pair) in self._keys

    def __iter__(self) -> Iterator[EdgeKey]:
        return iter(self._order)

    @property
    def positions(self) -> np.ndarray:
        """Line vertex positions, two per edge, shape (2E, 3)."""
        return np.array(self._positions, dtype=np.float64).reshape(len(self._positions), 3)

    @property
    def colors(self) -> np.ndarray:
        return np.tile(np.array(self.color, dtype=np.float64), (len(self._positions), 1))

    @property
    def indices(self) -> np.ndarray:
        """Independent 2-point line primitives, shape (E, 2)."""
        return np.arange(len(self._positions), dtype=np.int64).reshape(len(self._order), 2)
