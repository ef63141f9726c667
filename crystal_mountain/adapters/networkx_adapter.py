"""
NetworkX view of the vein tree for topology analysis.
"""

from typing import Any, Dict, TYPE_CHECKING

from ..core.branches import VeinTree

if TYPE_CHECKING:
    import networkx as nx


def vein_tree_to_graph(tree: VeinTree) -> "nx.DiGraph":
    """
    Directed graph with one node per branch and parent -> child edges.

    Node attributes: ``start``, ``end``, ``thickness``, ``length``,
    ``depth`` and ``is_root``.
    """
    import networkx as nx

    G = nx.DiGraph()
    roots = set(tree.roots)
    for index, branch in enumerate(tree.branches):
        G.add_node(
            index,
            start=tuple(float(c) for c in branch.start),
            end=tuple(float(c) for c in branch.end),
            thickness=branch.thickness,
            length=branch.length,
            depth=branch.depth,
            is_root=index in roots,
        )
    for index, branch in enumerate(tree.branches):
        for child in branch.children:
            G.add_edge(index, child)
    return G


def analyze_vein_tree(tree: VeinTree) -> Dict[str, Any]:
    """
    Topology summary of a vein tree.

    Returns
    -------
    dict
        ``is_forest``: every component is a tree;
        ``component_count``: number of weakly connected components
        (one per main branch);
        ``max_depth``: longest root-to-branch path in edges;
        ``leaf_count``: branches with no children;
        ``total_length``: summed branch length
    """
    import networkx as nx

    G = vein_tree_to_graph(tree)
    if G.number_of_nodes() == 0:
        return {
            "is_forest": True,
            "component_count": 0,
            "max_depth": 0,
            "leaf_count": 0,
            "total_length": 0.0,
        }

    max_depth = 0
    for root in tree.roots:
        lengths = nx.single_source_shortest_path_length(G, root)
        max_depth = max(max_depth, max(lengths.values()))

    return {
        "is_forest": nx.is_forest(G),
        "component_count": nx.number_weakly_connected_components(G),
        "max_depth": max_depth,
        "leaf_count": sum(1 for n in G.nodes if G.out_degree(n) == 0),
        "total_length": float(sum(length for _, length in G.nodes(data="length"))),
    }
