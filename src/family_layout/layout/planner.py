"""Initial position planning.

Each generation row is laid out left to right as a sequence of family blocks:
a block holds the unit's parents and, one row further down, its children,
both spans centered on the block's center. Solo nodes follow the last block
of their row. Married-in spouses (a unit child's partner who belongs to no
unit) ride along directly to the right of their partner.

Positions are card top-left corners.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from family_layout.config import LayoutConfig
from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import id_sort_key
from family_layout.layout.families import primary_units
from family_layout.layout.types import FamilyUnit

logger = logging.getLogger(__name__)


def row_y(generation: int, config: LayoutConfig) -> float:
    """Vertical position shared by every card of ``generation``."""
    return generation * config.generation_height + config.margin_y


@dataclass
class _Block:
    unit: FamilyUnit
    children: list[str]
    parents_width: float
    children_width: float

    @property
    def width(self) -> float:
        return max(self.parents_width, self.children_width)


def married_in_spouses(graph: FamilyGraph, units: Sequence[FamilyUnit], solos: Sequence[str]) -> dict[str, str]:
    """Map unit child -> partner for partners that belong to no unit."""
    solo_set = set(solos)
    attached: dict[str, str] = {}
    for unit in units:
        for child in unit.children:
            partner = graph.partner(child)
            if partner is not None and partner in solo_set and partner not in attached.values():
                attached[child] = partner
    return attached


def plan_positions(
    node_ids: Sequence[str],
    graph: FamilyGraph,
    units: Sequence[FamilyUnit],
    solos: Sequence[str],
    generations: Mapping[str, int],
    config: LayoutConfig,
    seeds: Mapping[str, tuple[float, float]] | None = None,
) -> dict[str, tuple[float, float]]:
    """Compute the seed position of every node before relaxation.

    Args:
        node_ids: All ids, in caller order.
        units: Family units with sibling-ordered ``children``.
        solos: Ids in no unit.
        generations: Generation per id.
        seeds: Persisted positions, used only for ids the planner cannot place.
    """
    owner = primary_units(units)
    attached = married_in_spouses(graph, units, solos)
    slot = config.node_width

    def child_slot(child: str) -> float:
        # a child followed by its married-in spouse needs a couple's width
        return slot + config.couple_distance if child in attached else slot

    blocks_by_gen: dict[int, list[_Block]] = defaultdict(list)
    for unit in units:
        children = [c for c in unit.children if owner.get(c) is unit]
        parents_width = config.couple_distance + slot if unit.is_couple else slot
        if children:
            children_width = sum(child_slot(c) for c in children) + (len(children) - 1) * (config.child_spacing - slot)
        else:
            children_width = 0.0
        blocks_by_gen[unit.generation].append(
            _Block(unit=unit, children=children, parents_width=parents_width, children_width=max(children_width, slot))
        )

    parent_pos: dict[str, tuple[float, float]] = {}
    child_pos: dict[str, tuple[float, float]] = {}
    row_extent: dict[int, float] = {}

    def mark_extent(gen: int, right: float) -> None:
        row_extent[gen] = max(row_extent.get(gen, right), right)

    for gen in sorted(blocks_by_gen):
        blocks = blocks_by_gen[gen]
        total = sum(b.width for b in blocks) + (len(blocks) - 1) * config.family_spacing
        start = config.margin_x + (config.canvas_width - 2 * config.margin_x - total) / 2
        cursor = max(config.margin_x, start)

        for block in blocks:
            center = cursor + block.width / 2
            y = row_y(gen, config)
            x = center - block.parents_width / 2
            for parent in block.unit.display_parents():
                parent_pos[parent] = (x, y)
                x += config.couple_distance
            mark_extent(gen, center + block.parents_width / 2)

            x = center - block.children_width / 2
            for child in block.children:
                child_gen = generations.get(child, gen + 1)
                child_pos[child] = (x, row_y(child_gen, config))
                if child in attached:
                    spouse = attached[child]
                    child_pos[spouse] = (x + config.couple_distance, row_y(child_gen, config))
                x += child_slot(child) + config.child_spacing - slot
                mark_extent(child_gen, x - config.child_spacing + slot)

            cursor += block.width + config.family_spacing

    positions: dict[str, tuple[float, float]] = {}
    positions.update(child_pos)
    positions.update(parent_pos)

    spouses = set(attached.values())
    pending = [s for s in solos if s not in spouses]
    solos_by_gen: dict[int, list[str]] = defaultdict(list)
    for node_id in pending:
        solos_by_gen[generations.get(node_id, 0)].append(node_id)

    for gen in sorted(solos_by_gen):
        row = solos_by_gen[gen]
        in_row = set(row)
        y = row_y(gen, config)
        x = row_extent[gen] + config.family_spacing if gen in row_extent else config.margin_x
        placed: set[str] = set()
        for node_id in row:
            if node_id in placed:
                continue
            partner = graph.partner(node_id)
            if partner is not None and partner in in_row and partner not in placed:
                pair = sorted((node_id, partner), key=id_sort_key)
                if graph.is_flipped(*pair):
                    pair.reverse()
                positions[pair[0]] = (x, y)
                positions[pair[1]] = (x + config.couple_distance, y)
                placed.update(pair)
                x += config.couple_distance + config.solo_node_spacing
            else:
                positions[node_id] = (x, y)
                placed.add(node_id)
                x += config.solo_node_spacing

    for node_id in node_ids:
        if node_id in positions:
            continue
        gen = generations.get(node_id, 0)
        seed = (seeds or {}).get(node_id)
        positions[node_id] = seed if seed is not None else (config.margin_x, row_y(gen, config))
        logger.debug("No planned slot for %s; seeding at %s", node_id, positions[node_id])

    logger.debug("Planned %d blocks over %d generations", sum(len(b) for b in blocks_by_gen.values()), len(blocks_by_gen))
    return positions
