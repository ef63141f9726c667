"""
Exceptions raised by mountain generation.
"""

from typing import List, Optional


class ConfigurationError(ValueError):
    """
    Raised when a generation policy is rejected.

    Validation runs before any buffer is touched, so a rejected
    configuration leaves previously generated geometry intact.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        message = "Invalid mountain configuration:\n" + "\n".join(
            f"  - {e}" for e in self.errors
        )
        super().__init__(message)


class MeshSizeLimitError(Exception):
    """
    Raised when a buffer would exceed the renderer's vertex budget.

    Carries diagnostics so the caller can split the mesh or reduce
    parameters.
    """

    def __init__(
        self,
        vertex_count: int,
        max_vertices: int,
        buffer_kind: str = "solid",
        suggestion: Optional[str] = None,
    ):
        self.vertex_count = vertex_count
        self.max_vertices = max_vertices
        self.buffer_kind = buffer_kind
        self.suggestion = suggestion or (
            "use overflow_mode='split' or reduce cone_resolution, "
            "main_branches or sub_branch_levels"
        )

        message = (
            f"Mesh size limit exceeded: {buffer_kind} buffer has {vertex_count:,} vertices, "
            f"max allowed is {max_vertices:,}.\n"
            f"Suggestion: {self.suggestion}"
        )
        super().__init__(message)


class GeometryStreamStateError(RuntimeError):
    """Raised when a geometry stream is used outside its begin/finalize window."""
    pass
