"""Force relaxation with family-specific constraint forces.

Per tick, in this order:
  1. Repulsion (pairs closer than 2 * min_distance)
  2. Parent-child attraction (toward a generation_height span)
  3. Generation banding (soft pull toward the row's mean y)
  4. Family centering (parents over children, children under parents)
  5. Integration (damped velocity, clamped position)
  6. Spouse rigidity (equal y, exact couple_distance; overrides 1-5)
  7. Convergence check on total |velocity|

The generic physical forces are weak next to the constraint passes,
which carry the genealogy semantics.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Mapping, Sequence

from family_layout.config import LayoutConfig
from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import id_sort_key
from family_layout.layout.types import Arena, Body, FamilyUnit

logger = logging.getLogger(__name__)


def build_arena(
    node_ids: Sequence[str],
    positions: Mapping[str, tuple[float, float]],
    generations: Mapping[str, int],
) -> Arena:
    """Copy planned positions into a fresh arena (zero velocity)."""
    bodies = [
        Body(id=node_id, x=float(positions[node_id][0]), y=float(positions[node_id][1]), generation=generations[node_id])
        for node_id in node_ids
    ]
    return Arena(bodies)


# ─── Constraint Enforcers ────────────────────────────────────────────────────


def apply_repulsion(arena: Arena, config: LayoutConfig) -> None:
    """Push apart every pair closer than ``2 * min_distance``, proportionally to the overlap."""
    reach = config.min_distance * 2
    if reach <= 0:
        return
    bodies = arena.bodies
    for i in range(len(bodies)):
        b1 = bodies[i]
        for j in range(i + 1, len(bodies)):
            b2 = bodies[j]
            dx = b1.x - b2.x
            dy = b1.y - b2.y
            distance = math.hypot(dx, dy)
            if distance >= reach:
                continue
            if distance == 0:
                # coincident cards: separate along x in handle order
                dx, dy, distance = -1.0, 0.0, 1.0
            strength = (reach - distance) / distance * config.repulsion_strength
            b1.fx += dx * strength
            b1.fy += dy * strength
            b2.fx -= dx * strength
            b2.fy -= dy * strength


def apply_parent_child_attraction(arena: Arena, graph: FamilyGraph, config: LayoutConfig) -> None:
    """Pull each parent-child distance toward ``generation_height``, split 50/50."""
    ideal = config.generation_height
    for parent_id, child_id in graph.parent_child_pairs():
        parent = arena.get(parent_id)
        child = arena.get(child_id)
        if parent is None or child is None:
            continue
        dx = child.x - parent.x
        dy = child.y - parent.y
        distance = math.hypot(dx, dy)
        if distance == 0 or abs(distance - ideal) <= config.attraction_slack:
            continue
        magnitude = (distance - ideal) * config.attraction_strength
        fx = dx / distance * magnitude
        fy = dy / distance * magnitude
        parent.fx += fx * 0.5
        parent.fy += fy * 0.5
        child.fx -= fx * 0.5
        child.fy -= fy * 0.5


def apply_generation_banding(arena: Arena, config: LayoutConfig) -> None:
    """Pull each node's y toward the mean y of its generation."""
    groups: dict[int, list[Body]] = defaultdict(list)
    for body in arena:
        groups[body.generation].append(body)
    for group in groups.values():
        if len(group) <= 1:
            continue
        mean_y = sum(b.y for b in group) / len(group)
        for body in group:
            body.fy += (mean_y - body.y) * config.banding_strength


def apply_family_centering(arena: Arena, units: Sequence[FamilyUnit], config: LayoutConfig) -> None:
    """Pull parents toward their children's x-centroid and children toward the parents' midpoint."""
    k = config.centering_strength
    for unit in units:
        parents = [b for b in (arena.get(p) for p in unit.parents) if b is not None]
        children = [b for b in (arena.get(c) for c in unit.children) if b is not None]
        if not parents or not children:
            continue
        children_x = sum(c.x for c in children) / len(children)
        parents_x = sum(p.x for p in parents) / len(parents)
        shift = (children_x - parents_x) * k
        for parent in parents:
            parent.fx += shift
        for child in children:
            child.fx += (parents_x - child.x) * k


def integrate(arena: Arena, config: LayoutConfig, max_x: float) -> None:
    """Fold forces into damped velocities, move, and clamp to the canvas."""
    for body in arena:
        body.vx = (body.vx + body.fx) * config.dampening
        body.vy = (body.vy + body.fy) * config.dampening
        body.x = min(max(body.x + body.vx, 0.0), max_x)
        body.y = max(body.y + body.vy, 0.0)


def apply_spouse_rigidity(arena: Arena, couples: Sequence[tuple[str, str]], config: LayoutConfig) -> None:
    """Lock partners to a shared y and exactly ``couple_distance`` apart.

    The couple's midpoint is kept; their left/right order is kept too, with
    id order breaking an exact tie.
    """
    half = config.couple_distance / 2
    for a_id, b_id in couples:
        a = arena.get(a_id)
        b = arena.get(b_id)
        if a is None or b is None:
            continue
        y = (a.y + b.y) / 2
        a.y = b.y = y
        a.vy = b.vy = 0.0
        a.fy = b.fy = 0.0

        if a.x == b.x:
            left, right = (a, b) if id_sort_key(a.id) <= id_sort_key(b.id) else (b, a)
        else:
            left, right = (a, b) if a.x < b.x else (b, a)
        mid = (a.x + b.x) / 2
        left.x = mid - half
        right.x = left.x + config.couple_distance
        a.vx = b.vx = 0.0
        a.fx = b.fx = 0.0


# ─── Simulation Loop ─────────────────────────────────────────────────────────


def relax(
    arena: Arena,
    graph: FamilyGraph,
    units: Sequence[FamilyUnit],
    config: LayoutConfig,
    max_x: float,
) -> int:
    """Run up to ``config.iterations`` ticks; return the number of ticks run."""
    couples = graph.couples()
    # partners start exactly coupled even when no tick runs
    apply_spouse_rigidity(arena, couples, config)

    for tick in range(config.iterations):
        arena.reset_forces()
        apply_repulsion(arena, config)
        apply_parent_child_attraction(arena, graph, config)
        apply_generation_banding(arena, config)
        apply_family_centering(arena, units, config)
        integrate(arena, config, max_x)
        apply_spouse_rigidity(arena, couples, config)

        energy = arena.kinetic_energy()
        if energy < config.energy_threshold:
            logger.debug("Relaxation converged after %d ticks (energy %.4f)", tick + 1, energy)
            return tick + 1

    logger.debug("Relaxation stopped at the %d-tick budget", config.iterations)
    return config.iterations
