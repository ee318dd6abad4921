"""Generation assignment over the parent -> child DAG.

Generations only ever grow: a child sits at least one row below every
parent, and partners are reconciled to the deeper of their two rows.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Sequence

from family_layout.ir.graph import FamilyGraph

logger = logging.getLogger(__name__)

# Termination guarantee for partner reconciliation, not a tuning knob.
# Chains of partnerships needing more rounds keep a residual mismatch.
PARTNER_RECONCILE_ROUNDS: int = 6


def assign_generations(graph: FamilyGraph, node_ids: Sequence[str]) -> dict[str, int]:
    """Compute an integer generation for every id in ``node_ids``.

    1. Roots (no parents) start at 0.
    2. Breadth-first propagation: ``gen(child) = max(gen(child), gen(parent) + 1)``.
    3. Partners are reconciled to ``max`` of the two, repeated to a fixpoint
       (bounded by ``PARTNER_RECONCILE_ROUNDS``); descendants of a raised
       partner are pushed down again so children stay below parents.
    4. Anything still unassigned (only possible with a cycle) falls back to
       ``max(parent generations) + 1``, or 0 without assigned parents.
    """
    generations: dict[str, int] = {}
    # a simple path in a DAG never exceeds this depth; deeper means a cycle
    depth_cap = len(node_ids)

    roots = [n for n in node_ids if not graph.has_parents(n)]
    for root in roots:
        generations[root] = 0
    _propagate(graph, generations, roots, depth_cap)

    known = set(node_ids)
    for round_idx in range(PARTNER_RECONCILE_ROUNDS):
        raised = _reconcile_partners(graph, generations, known)
        if not raised:
            break
        logger.debug("Partner reconciliation round %d raised %d nodes", round_idx + 1, len(raised))
        _propagate(graph, generations, raised, depth_cap)
    else:
        if _reconcile_partners(graph, dict(generations), known):
            logger.warning(
                "Partner generations still differ after %d rounds; leaving residual mismatch",
                PARTNER_RECONCILE_ROUNDS,
            )

    for node_id in node_ids:
        if node_id in generations:
            continue
        parent_gens = [generations[p] for p in graph.parents_of(node_id) if p in generations]
        if parent_gens:
            generations[node_id] = max(parent_gens) + 1
        elif graph.has_parents(node_id):
            generations[node_id] = 1
        else:
            generations[node_id] = 0
        logger.debug("Fallback generation %d for unreachable node %s", generations[node_id], node_id)

    return {n: generations[n] for n in node_ids}


def _propagate(graph: FamilyGraph, generations: dict[str, int], sources: Iterable[str], depth_cap: int) -> None:
    queue: deque[str] = deque(sources)
    truncated = False
    while queue:
        parent = queue.popleft()
        child_gen = generations[parent] + 1
        for child in graph.children_of(parent):
            current = generations.get(child)
            if current is not None and current >= child_gen:
                continue
            if child_gen > depth_cap:
                truncated = True
                continue
            generations[child] = child_gen
            queue.append(child)
    if truncated:
        logger.warning("Generation propagation stopped at depth cap %d (cycle or conflicting partnerships)", depth_cap)


def _reconcile_partners(graph: FamilyGraph, generations: dict[str, int], known: set[str]) -> list[str]:
    """One reconciliation round. Returns the ids whose generation changed."""
    raised: list[str] = []
    for a, b in graph.partnerships:
        if a not in known or b not in known:
            continue
        gen_a = generations.get(a)
        gen_b = generations.get(b)
        if gen_a is None and gen_b is None:
            continue
        if gen_a is None:
            generations[a] = gen_b
            raised.append(a)
        elif gen_b is None:
            generations[b] = gen_a
            raised.append(b)
        elif gen_a != gen_b:
            target = max(gen_a, gen_b)
            lower = a if gen_a < gen_b else b
            generations[lower] = target
            raised.append(lower)
    return raised
