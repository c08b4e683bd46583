"""
Structural snapshot of the editor graph as a NetworkX DiGraph.

Nodes are keyed by address and carry display attributes; edges run parent -> child
with the child's order. Renderers consume this instead of walking GraphNodes, and it
gives a plain structure to compare before and after edits.
"""

from typing import Any, Dict, List, Optional

import networkx as nx

from btgraph.address import encode_address
from btgraph.graph_node import GraphNode


def build_digraph(root: Optional[GraphNode]) -> nx.DiGraph:
    """Build a DiGraph of root's subtree. An absent root gives an empty graph."""
    G = nx.DiGraph()
    if root is None:
        return G

    def _add(node: GraphNode, address: str, order: int, depth: int):
        G.add_node(
            address,
            title=node.title,
            type_name=node.node.type_name,
            kind=node.kind.value,
            order=order,
            depth=depth,
            selected=node.is_selected,
            breakpoint=node.breakpoint.value,
            position=node.position,
        )
        for i, child in enumerate(node.children):
            child_address = encode_address(child)
            _add(child, child_address, i, depth + 1)
            G.add_edge(address, child_address, order=i)

    _add(root, encode_address(root), 0, 0)
    return G


def children_titles(G: nx.DiGraph, address: str) -> List[str]:
    """Titles of a snapshot node's children in child order."""
    succ = sorted(G.successors(address), key=lambda a: G.edges[address, a]["order"])
    return [G.nodes[a]["title"] for a in succ]


def outline(G: nx.DiGraph) -> List[Dict[str, Any]]:
    """Flatten a snapshot into pre-order rows of (depth, title, kind)."""
    roots = [n for n, deg in G.in_degree() if deg == 0]
    rows: List[Dict[str, Any]] = []

    def _visit(address: str):
        attrs = G.nodes[address]
        rows.append({"depth": attrs["depth"], "title": attrs["title"], "kind": attrs["kind"]})
        for child in sorted(G.successors(address), key=lambda a: G.edges[address, a]["order"]):
            _visit(child)

    for root in roots:
        _visit(root)
    return rows
