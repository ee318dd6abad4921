"""Family-tree layout pipeline.

Stages:
  1. Relationship analysis
  2. Family units + generation assignment
  3. Initial placement
  4. Force relaxation
  5. Overlap resolution + parent re-centering
  6. Edge materialization
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import replace

from family_layout.config import LayoutConfig, resolve_config
from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import Edge, Node, Position
from family_layout.layout.edges import materialize_edges
from family_layout.layout.families import assign_unit_generations, build_family_units
from family_layout.layout.forces import build_arena, relax
from family_layout.layout.generations import assign_generations
from family_layout.layout.overlap import finalize_positions
from family_layout.layout.planner import plan_positions, row_y
from family_layout.layout.siblings import sort_siblings
from family_layout.layout.types import LayoutResult
from family_layout.types import EdgeType

logger = logging.getLogger(__name__)

ConfigArg = LayoutConfig | Mapping[str, object] | None


def _check_inputs(nodes: object, edges: object) -> None:
    if not isinstance(nodes, list):
        raise TypeError(f"nodes must be a list of Node, got {type(nodes).__name__}")
    if not isinstance(edges, list):
        raise TypeError(f"edges must be a list of Edge, got {type(edges).__name__}")
    for node in nodes:
        if not isinstance(node, Node):
            raise TypeError(f"nodes must contain Node records, got {type(node).__name__}")
    for edge in edges:
        if not isinstance(edge, Edge):
            raise TypeError(f"edges must contain Edge records, got {type(edge).__name__}")


def _node_ids(nodes: Sequence[Node]) -> list[str]:
    ids = [n.id for n in nodes]
    seen: set[str] = set()
    dupes: set[str] = set()
    for node_id in ids:
        if node_id in seen:
            dupes.add(node_id)
        seen.add(node_id)
    if dupes:
        raise ValueError(f"Duplicate node ids: {', '.join(sorted(dupes))}")
    return ids


def _positioned(node: Node, x: float, y: float, generation: int) -> Node:
    return replace(node, person=copy.copy(node.person), position=Position(x=x, y=y), generation=generation)


class FamilyTreeLayout:
    """Generation-banded, couple-aware family tree layout engine."""

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def layout(self, nodes: list[Node], edges: list[Edge]) -> LayoutResult:
        _check_inputs(nodes, edges)
        if not nodes:
            return LayoutResult(nodes=[], edges=[])

        config = self.config
        node_ids = _node_ids(nodes)
        persons = {n.id: n.person for n in nodes}
        logger.debug("Laying out %d nodes, %d edges", len(nodes), len(edges))

        graph = FamilyGraph.from_edges(edges, node_ids)

        units, solos = build_family_units(graph, node_ids)
        generations = assign_generations(graph, node_ids)
        assign_unit_generations(units, generations)
        for unit in units:
            unit.children = sort_siblings(unit.children, persons)

        seeds = {n.id: (n.position.x, n.position.y) for n in nodes if n.position is not None}
        planned = plan_positions(node_ids, graph, units, solos, generations, config, seeds)

        arena = build_arena(node_ids, planned, generations)
        max_x = max(config.canvas_width, max(x for x, _ in planned.values()) + config.margin_x)
        relax(arena, graph, units, config, max_x)
        finalize_positions(arena, graph, units, generations, config)

        out_nodes: list[Node] = []
        for node in nodes:
            body = arena.get(node.id)
            out_nodes.append(_positioned(node, body.x, body.y, generations[node.id]))

        out_edges = materialize_edges(edges, graph)
        logger.debug("Layout done: %d family units, %d render edges", len(units), len(out_edges))
        return LayoutResult(nodes=out_nodes, edges=out_edges)


def layout(nodes: list[Node], edges: list[Edge], config: ConfigArg = None) -> LayoutResult:
    """Lay out a family tree snapshot.

    Args:
        nodes: One ``Node`` per person; never mutated.
        edges: Parent-child and partnership edges; never mutated.
        config: A ``LayoutConfig``, a mapping of partial options, or None.

    Returns:
        New nodes with ``position`` and ``generation`` set, and the
        deduplicated render edges.

    Raises:
        TypeError: If ``nodes``/``edges`` are not lists of records.
        ValueError: On duplicate node ids or invalid config.
    """
    return FamilyTreeLayout(resolve_config(config)).layout(nodes, edges)


def generation_layout(nodes: list[Node], edges: list[Edge], config: ConfigArg = None) -> LayoutResult:
    """Plain generation rows with no clustering or relaxation.

    Generations come from a breadth-first walk from the roots where the first
    visit wins. Edges are returned unchanged.
    """
    _check_inputs(nodes, edges)
    cfg = resolve_config(config)
    if not nodes:
        return LayoutResult(nodes=[], edges=[])

    node_ids = _node_ids(nodes)
    children: dict[str, list[str]] = {}
    has_parent: set[str] = set()
    for edge in edges:
        if edge.type == EdgeType.ParentChild:
            children.setdefault(edge.source, []).append(edge.target)
            has_parent.add(edge.target)

    generations: dict[str, int] = {}
    queue: deque[tuple[str, int]] = deque((n, 0) for n in node_ids if n not in has_parent)
    while queue:
        node_id, gen = queue.popleft()
        if node_id in generations:
            continue
        generations[node_id] = gen
        for child in children.get(node_id, []):
            queue.append((child, gen + 1))

    rows: dict[int, list[str]] = {}
    for node_id in node_ids:
        rows.setdefault(generations.get(node_id, 0), []).append(node_id)

    out_nodes: list[Node] = []
    for node in nodes:
        gen = generations.get(node.id, 0)
        index = rows[gen].index(node.id)
        x = index * (cfg.node_width + 60) + cfg.margin_x
        out_nodes.append(_positioned(node, x, row_y(gen, cfg), gen))
    return LayoutResult(nodes=out_nodes, edges=[replace(e, data=dict(e.data)) for e in edges])


def auto_layout(nodes: list[Node], edges: list[Edge], config: ConfigArg = None) -> LayoutResult:
    """Run ``layout`` and fall back to ``generation_layout`` if the engine fails.

    Caller mistakes (``TypeError``/``ValueError`` from input checks) are not
    masked and propagate unchanged.
    """
    cfg = resolve_config(config)
    _check_inputs(nodes, edges)
    _node_ids(nodes)
    try:
        return FamilyTreeLayout(cfg).layout(nodes, edges)
    except Exception:
        logger.exception("Family tree layout failed; using plain generation layout")
        return generation_layout(nodes, edges, cfg)
