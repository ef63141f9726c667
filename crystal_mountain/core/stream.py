"""
Shared geometry accumulator for one generation pass.

Every mesh-producing step appends into a single GeometryStream. The stream
has an explicit lifecycle: ``begin()`` clears it and opens it for writing,
``finalize()`` freezes the contents into numpy arrays and closes it.
Appending outside that window is an error, which also rejects a second
pass running against the same stream.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple
import logging

import numpy as np

from .errors import GeometryStreamStateError

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Vec4 = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Vertex:
    """Single vertex record. Immutable once appended."""

    position: Vec3
    normal: Vec3
    uv: Vec2
    color: Vec4


@dataclass
class StreamSnapshot:
    """Frozen contents of a finalized stream."""

    positions: np.ndarray  # (N, 3)
    normals: np.ndarray  # (N, 3)
    uvs: np.ndarray  # (N, 2)
    colors: np.ndarray  # (N, 4)
    triangles: np.ndarray  # (M, 3)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)


def _as_tuple(values: Sequence[float], size: int) -> tuple:
    if len(values) != size:
        raise ValueError(f"Expected {size} components, got {len(values)}")
    return tuple(float(v) for v in values)


class GeometryStream:
    """
    Growing vertex/triangle buffers shared by every generation step.
    """

    def __init__(self):
        self._vertices: List[Vertex] = []
        self._triangles: List[Tuple[int, int, int]] = []
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def triangle_count(self) -> int:
        return len(self._triangles)

    def begin(self) -> None:
        """Clear all buffers and open the stream for one generation pass."""
        if self._open:
            raise GeometryStreamStateError(
                "begin() called while a generation pass is already in progress"
            )
        self._vertices = []
        self._triangles = []
        self._open = True

    def abort(self) -> None:
        """Discard a partial pass and close the stream."""
        self._vertices = []
        self._triangles = []
        self._open = False

    def _require_open(self, action: str) -> None:
        if not self._open:
            raise GeometryStreamStateError(f"Cannot {action}: stream is not open (call begin() first)")

    def add_vertex(
        self,
        position: Sequence[float],
        normal: Sequence[float],
        uv: Sequence[float],
        color: Sequence[float],
    ) -> int:
        """Append a vertex and return its stream index."""
        self._require_open("add a vertex")
        self._vertices.append(Vertex(
            position=_as_tuple(position, 3),
            normal=_as_tuple(normal, 3),
            uv=_as_tuple(uv, 2),
            color=_as_tuple(color, 4),
        ))
        return len(self._vertices) - 1

    def add_triangle(self, a: int, b: int, c: int) -> int:
        """Append a triangle (winding a -> b -> c) and return its index."""
        self._require_open("add a triangle")
        self._triangles.append((int(a), int(b), int(c)))
        return len(self._triangles) - 1

    def vertex(self, index: int) -> Vertex:
        return self._vertices[index]

    def position(self, index: int) -> np.ndarray:
        return np.array(self._vertices[index].position)

    def triangles(self) -> List[Tuple[int, int, int]]:
        return list(self._triangles)

    def finalize(self) -> StreamSnapshot:
        """Close the stream and return its contents as numpy arrays."""
        self._require_open("finalize")
        self._open = False

        n = len(self._vertices)
        snapshot = StreamSnapshot(
            positions=np.array([v.position for v in self._vertices], dtype=np.float64).reshape(n, 3),
            normals=np.array([v.normal for v in self._vertices], dtype=np.float64).reshape(n, 3),
            uvs=np.array([v.uv for v in self._vertices], dtype=np.float64).reshape(n, 2),
            colors=np.array([v.color for v in self._vertices], dtype=np.float64).reshape(n, 4),
            triangles=np.array(self._triangles, dtype=np.int64).reshape(len(self._triangles), 3),
        )
        logger.debug(
            f"Finalized geometry stream: {snapshot.vertex_count} vertices, "
            f"{snapshot.triangle_count} triangles"
        )
        return snapshot
