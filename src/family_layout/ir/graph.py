"""Relationship analysis: turns an edge snapshot into lookup structures.

``FamilyGraph`` is built once per layout pass and threaded through every
later stage. It wraps a networkx DiGraph of parent -> child links and a
symmetric partner map.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import networkx as nx

from family_layout.ir.model import Edge, id_sort_key
from family_layout.types import EdgeType

logger = logging.getLogger(__name__)


class FamilyGraph:
    """Partner-of, children-of and parents-of lookups over one snapshot.

    Lookups for unknown ids return empty results instead of raising, so a
    dangling reference has no effect on later stages.
    """

    def __init__(
        self,
        lineage: nx.DiGraph,
        partner_of: dict[str, str],
        partnerships: list[tuple[str, str]],
        partnership_flipped: dict[tuple[str, str], bool] | None = None,
    ) -> None:
        self.lineage = lineage
        self.partner_of = partner_of
        self.partnerships = partnerships
        self.partnership_flipped = partnership_flipped or {}

    @classmethod
    def from_edges(cls, edges: Iterable[Edge], node_ids: Iterable[str] | None = None) -> FamilyGraph:
        """Scan ``edges`` once.

        Args:
            edges: Snapshot edges in caller order.
            node_ids: Known person ids. When given, edges touching any other id
                are ignored; when omitted every endpoint is accepted.
        """
        known: set[str] | None = set(node_ids) if node_ids is not None else None
        lineage: nx.DiGraph = nx.DiGraph()
        if known is not None:
            lineage.add_nodes_from(known)
        partner_of: dict[str, str] = {}
        partnerships: list[tuple[str, str]] = []
        flipped: dict[tuple[str, str], bool] = {}

        for edge in edges:
            if known is not None and (edge.source not in known or edge.target not in known):
                logger.debug("Ignoring edge %s with unknown endpoint (%s -> %s)", edge.id, edge.source, edge.target)
                continue
            if edge.source == edge.target:
                logger.debug("Ignoring self-referencing edge %s", edge.id)
                continue

            if edge.type == EdgeType.Partnership:
                pair = _normalize_pair(edge.source, edge.target)
                if pair in flipped:
                    continue
                flipped[pair] = edge.is_flipped
                partnerships.append(pair)
                # greedy matching: the first partnership listed for both people
                # makes them a couple; later ones are kept for generations and edges
                if edge.source not in partner_of and edge.target not in partner_of:
                    partner_of[edge.source] = edge.target
                    partner_of[edge.target] = edge.source
            else:
                lineage.add_edge(edge.source, edge.target)

        return cls(lineage=lineage, partner_of=partner_of, partnerships=partnerships, partnership_flipped=flipped)

    def children_of(self, node_id: str) -> list[str]:
        if node_id not in self.lineage:
            return []
        return list(self.lineage.successors(node_id))

    def parents_of(self, node_id: str) -> list[str]:
        if node_id not in self.lineage:
            return []
        return list(self.lineage.predecessors(node_id))

    def has_parents(self, node_id: str) -> bool:
        return node_id in self.lineage and self.lineage.in_degree(node_id) > 0

    def has_children(self, node_id: str) -> bool:
        return node_id in self.lineage and self.lineage.out_degree(node_id) > 0

    def partner(self, node_id: str) -> str | None:
        return self.partner_of.get(node_id)

    def couples(self) -> list[tuple[str, str]]:
        """Matched partnerships, in input order.

        A person with several partnerships appears in at most one couple.
        """
        return [(a, b) for a, b in self.partnerships if self.partner_of.get(a) == b]

    def is_flipped(self, a: str, b: str) -> bool:
        return self.partnership_flipped.get(_normalize_pair(a, b), False)

    def parent_child_pairs(self) -> list[tuple[str, str]]:
        return list(self.lineage.edges())


def _normalize_pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if id_sort_key(a) <= id_sort_key(b) else (b, a)
