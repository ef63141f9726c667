"""Core data structures for mountain geometry."""

from .errors import ConfigurationError, MeshSizeLimitError, GeometryStreamStateError
from .stream import GeometryStream, StreamSnapshot, Vertex
from .edges import EdgeSet, canonical_edge
from .branches import Branch, VeinTree

__all__ = [
    "ConfigurationError",
    "MeshSizeLimitError",
    "GeometryStreamStateError",
    "GeometryStream",
    "StreamSnapshot",
    "Vertex",
    "EdgeSet",
    "canonical_edge",
    "Branch",
    "VeinTree",
]
