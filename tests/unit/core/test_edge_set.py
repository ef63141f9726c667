"""
Tests for wireframe edge deduplication.
"""

import itertools

import numpy as np
import pytest

from crystal_mountain.core.edges import EdgeSet, canonical_edge
from crystal_mountain.core.stream import GeometryStream


WIRE_COLOR = (0.8, 0.9, 1.0, 0.8)


def make_stream(n=6):
    stream = GeometryStream()
    stream.begin()
    for i in range(n):
        stream.add_vertex((float(i), 2.0 * i, -float(i)), (0, 1, 0), (0, 0), (1, 1, 1, 1))
    return stream


class TestCanonicalEdge:
    """Canonical key ordering."""

    def test_smaller_index_first(self):
        assert canonical_edge(5, 2) == (2, 5)
        assert canonical_edge(2, 5) == (2, 5)

    def test_self_edge(self):
        assert canonical_edge(3, 3) == (3, 3)


class TestEdgeSet:
    """EdgeSet emits one line record per distinct canonical key."""

    def test_new_edge_is_emitted(self):
        edges = EdgeSet(make_stream(), WIRE_COLOR)

        assert edges.register_edge(0, 1) is True
        assert len(edges) == 1

    def test_reversed_pair_is_duplicate(self):
        edges = EdgeSet(make_stream(), WIRE_COLOR)

        assert edges.register_edge(0, 1) is True
        assert edges.register_edge(1, 0) is False
        assert len(edges) == 1
        assert (1, 0) in edges
        assert (0, 1) in edges

    def test_line_count_equals_distinct_keys_for_any_order(self):
        """Repeated and reordered calls never add extra lines."""
        pairs = [(0, 1), (1, 2), (2, 0), (1, 0), (3, 4), (4, 3), (2, 0), (5, 5)]
        distinct = {canonical_edge(a, b) for a, b in pairs}

        for permutation in itertools.islice(itertools.permutations(pairs), 50):
            edges = EdgeSet(make_stream(), WIRE_COLOR)
            for a, b in permutation:
                edges.register_edge(a, b)
            assert len(edges) == len(distinct)
            assert edges.positions.shape == (2 * len(distinct), 3)

    def test_line_record_copies_endpoint_positions(self):
        stream = make_stream()
        edges = EdgeSet(stream, WIRE_COLOR)
        edges.register_edge(4, 1)

        np.testing.assert_allclose(edges.positions[0], stream.position(4))
        np.testing.assert_allclose(edges.positions[1], stream.position(1))

    def test_line_buffers_are_independent_pairs(self):
        edges = EdgeSet(make_stream(), WIRE_COLOR)
        edges.register_edge(0, 1)
        edges.register_edge(2, 3)
        edges.register_edge(3, 2)
        edges.register_edge(4, 5)

        assert edges.indices.tolist() == [[0, 1], [2, 3], [4, 5]]
        assert edges.colors.shape == (6, 4)
        np.testing.assert_allclose(edges.colors, np.tile(WIRE_COLOR, (6, 1)))

    def test_register_triangle_counts_new_edges(self):
        edges = EdgeSet(make_stream(), WIRE_COLOR)

        assert edges.register_triangle(0, 1, 2) == 3
        # Shares edge (1, 2)
        assert edges.register_triangle(2, 1, 3) == 2
        assert len(edges) == 5

    def test_empty_set_buffers(self):
        edges = EdgeSet(make_stream(), WIRE_COLOR)

        assert len(edges) == 0
        assert edges.positions.shape == (0, 3)
        assert edges.colors.shape == (0, 4)
        assert edges.indices.shape == (0, 2)
