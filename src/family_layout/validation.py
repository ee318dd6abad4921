"""Snapshot validation for family tree data.

The layout engine assumes an acyclic parent-child graph and does not check
it; callers that accept edits run these checks before handing a snapshot over.
"""

from __future__ import annotations

from collections.abc import Sequence

import networkx as nx

from family_layout.ir.model import Edge, Node, id_sort_key
from family_layout.types import EdgeType


def _lineage(edges: Sequence[Edge]) -> nx.DiGraph:
    g: nx.DiGraph = nx.DiGraph()
    for edge in edges:
        if edge.type == EdgeType.ParentChild:
            g.add_edge(edge.source, edge.target)
    return g


def would_create_cycle(edges: Sequence[Edge], parent_id: str, child_id: str) -> bool:
    """Return True if adding ``parent_id -> child_id`` closes a parent-child cycle.

    A self-reference counts as a cycle.
    """
    if parent_id == child_id:
        return True
    g = _lineage(edges)
    if parent_id not in g or child_id not in g:
        return False
    # the new link closes a loop when the parent already descends from the child
    return nx.has_path(g, child_id, parent_id)


def check_snapshot(nodes: Sequence[Node], edges: Sequence[Edge]) -> list[str]:
    """Return a list of human-readable problems found in the snapshot."""
    problems: list[str] = []
    known = {n.id for n in nodes}

    seen_links: set[tuple[str, str]] = set()
    seen_pairs: set[tuple[str, str]] = set()
    for edge in edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in known:
                problems.append(f"Edge {edge.id} references unknown person {endpoint}")
        if edge.source == edge.target:
            kind = "partnership" if edge.type == EdgeType.Partnership else "parent-child link"
            problems.append(f"Edge {edge.id} is a self-referencing {kind}")
            continue
        if edge.type == EdgeType.ParentChild:
            link = (edge.source, edge.target)
            if link in seen_links:
                problems.append(f"Duplicate parent-child link {edge.source} -> {edge.target}")
            seen_links.add(link)
        else:
            pair = tuple(sorted((edge.source, edge.target), key=id_sort_key))
            if pair in seen_pairs:
                problems.append(f"Duplicate partnership {pair[0]} - {pair[1]}")
            seen_pairs.add(pair)

    g = _lineage([e for e in edges if e.source != e.target])
    try:
        cycle = nx.find_cycle(g, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        problems.append(f"Cycle detected in parent-child links: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    return problems
