"""Family-unit clustering.

A family unit is a couple (or a single parent) plus the children they anchor.
Every person is a parent in at most one unit. A child may be listed in more
than one unit when its parents are not partnered with each other; the first
unit to claim it decides where it is planned (see ``primary_units``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import id_sort_key
from family_layout.layout.types import FamilyUnit

logger = logging.getLogger(__name__)


def build_family_units(graph: FamilyGraph, node_ids: Sequence[str]) -> tuple[list[FamilyUnit], list[str]]:
    """Group people into family units.

    Returns:
        ``(units, solos)``: units in processing order (couples first, then
        single parents in node order) and the ids that belong to no unit,
        in node order. Childless couples are solos.
    """
    units: list[FamilyUnit] = []
    consumed: set[str] = set()

    for a, b in graph.couples():
        consumed.update((a, b))
        children = _merge_children(graph.children_of(a), graph.children_of(b))
        if not children:
            continue
        parents = sorted((a, b), key=id_sort_key)
        units.append(
            FamilyUnit(
                id=f"family-{len(units)}",
                parents=parents,
                children=children,
                flipped=graph.is_flipped(a, b),
            )
        )

    for node_id in node_ids:
        if node_id in consumed:
            continue
        children = graph.children_of(node_id)
        if not children:
            continue
        consumed.add(node_id)
        units.append(FamilyUnit(id=f"family-{len(units)}", parents=[node_id], children=list(children)))

    members: set[str] = set()
    for unit in units:
        members.update(unit.parents)
        members.update(unit.children)
    solos = [node_id for node_id in node_ids if node_id not in members]

    logger.debug(
        "Built %d family units (%d couples), %d solo nodes",
        len(units),
        sum(1 for u in units if u.is_couple),
        len(solos),
    )
    return units, solos


def _merge_children(first: list[str], second: list[str]) -> list[str]:
    merged = list(first)
    seen = set(first)
    for child in second:
        if child not in seen:
            seen.add(child)
            merged.append(child)
    return merged


def assign_unit_generations(units: Sequence[FamilyUnit], generations: Mapping[str, int]) -> None:
    """Set each unit's generation to the deepest generation among its parents."""
    for unit in units:
        unit.generation = max(generations.get(p, 0) for p in unit.parents)


def primary_units(units: Sequence[FamilyUnit]) -> dict[str, FamilyUnit]:
    """Map each child id to the first unit (in processing order) that claims it."""
    owner: dict[str, FamilyUnit] = {}
    for unit in units:
        for child in unit.children:
            owner.setdefault(child, unit)
    return owner
