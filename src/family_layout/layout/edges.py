"""Render-edge materialization.

Partnership edges pass through untouched. Parent-child links collapse to one
edge per child, drawn from the child's lowest-id parent, so a couple's shared
child is never connected twice.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import Edge, id_sort_key
from family_layout.types import EdgeType


def canonical_parent(parents: Sequence[str]) -> str:
    """The parent that anchors the child's edge: the lowest id."""
    return min(parents, key=id_sort_key)


def materialize_edges(edges: Sequence[Edge], graph: FamilyGraph) -> list[Edge]:
    """Build the deduplicated render edge list.

    Args:
        edges: The caller's snapshot edges, in caller order.
        graph: Relationship lookups for the same snapshot (dangling links
            already dropped).
    """
    result: list[Edge] = [replace(e, data=dict(e.data)) for e in edges if e.type == EdgeType.Partnership]

    originals: dict[tuple[str, str], Edge] = {}
    for edge in edges:
        if edge.type == EdgeType.ParentChild:
            originals.setdefault((edge.source, edge.target), edge)

    emitted: set[str] = set()
    for edge in edges:
        if edge.type != EdgeType.ParentChild:
            continue
        child = edge.target
        if child in emitted:
            continue
        parents = graph.parents_of(child)
        if not parents:
            continue
        emitted.add(child)

        source = canonical_parent(parents)
        partner = graph.partner(source)
        co_parent = partner if partner in parents else None
        if co_parent is not None:
            edge_id = f"family-{source}-{co_parent}-to-{child}"
        else:
            edge_id = f"parent-child-{source}-{child}"

        original = originals.get((source, child))
        data = dict(original.data) if original is not None else {}
        data.update(
            {
                "parentIds": sorted(parents, key=id_sort_key),
                "partnerId": co_parent,
            }
        )
        result.append(Edge(id=edge_id, source=source, target=child, type=EdgeType.ParentChild, data=data))

    return result
