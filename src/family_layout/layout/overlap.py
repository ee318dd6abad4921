"""Final passes after relaxation.

Rows are snapped flat, siblings get their birth order back, and a
left-to-right sweep per generation band removes every horizontal overlap.
Couples move through the sweep as one rigid item so the partner gap survives.
Parents are then re-centered over their children from the deepest band up.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping, Sequence

from family_layout.config import LayoutConfig
from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import id_sort_key
from family_layout.layout.families import primary_units
from family_layout.layout.planner import row_y
from family_layout.layout.types import Arena, Body, FamilyUnit

logger = logging.getLogger(__name__)

# An item is one card or a rigid couple, listed left to right.
Item = list[Body]


def snap_rows(arena: Arena, generations: Mapping[str, int], couples: Sequence[tuple[str, str]], config: LayoutConfig) -> None:
    """Put every card on its generation row; partners share the deeper row."""
    rows = {body.id: generations.get(body.id, body.generation) for body in arena}
    for a, b in couples:
        if a in rows and b in rows:
            rows[a] = rows[b] = max(rows[a], rows[b])
    for body in arena:
        body.y = row_y(rows[body.id], config)


def restore_sibling_order(arena: Arena, units: Sequence[FamilyUnit], couples: Sequence[tuple[str, str]]) -> None:
    """Reassign sibling x-slots so uncoupled siblings read in birth order again."""
    coupled = {p for pair in couples for p in pair}
    owner = primary_units(units)
    for unit in units:
        by_band: dict[float, list[Body]] = defaultdict(list)
        for child_id in unit.children:
            body = arena.get(child_id)
            if body is None or child_id in coupled or owner.get(child_id) is not unit:
                continue
            by_band[body.y].append(body)
        for siblings in by_band.values():
            slots = sorted(b.x for b in siblings)
            for body, x in zip(siblings, slots):
                body.x = x


def band_items(bodies: Sequence[Body], couples: Sequence[tuple[str, str]]) -> list[Item]:
    """Group one band's bodies into items."""
    by_id = {b.id: b for b in bodies}
    items: list[Item] = []
    taken: set[str] = set()
    for a_id, b_id in couples:
        a = by_id.get(a_id)
        b = by_id.get(b_id)
        if a is None or b is None:
            continue
        if a.x == b.x:
            pair = sorted((a, b), key=lambda body: id_sort_key(body.id))
        else:
            pair = sorted((a, b), key=lambda body: body.x)
        items.append(pair)
        taken.update((a_id, b_id))
    items.extend([b] for b in bodies if b.id not in taken)
    return items


def sweep(items: list[Item], config: LayoutConfig) -> None:
    """Left-to-right sweep pushing each item to the next allowed x.

    Items keep their x unless it falls left of the cursor. Coordinates are
    rounded to whole units on the way.
    """
    items.sort(key=lambda item: (item[0].x, id_sort_key(item[0].id)))
    cursor = 0.0
    for item in items:
        left = max(round(item[0].x), cursor)
        for offset, body in enumerate(item):
            body.x = left + offset * config.couple_distance
            body.vx = 0.0
        width = (len(item) - 1) * config.couple_distance + config.node_width
        cursor = left + width + config.min_gap


def _bands(arena: Arena) -> dict[int, list[Body]]:
    bands: dict[int, list[Body]] = defaultdict(list)
    for body in arena:
        bands[round(body.y)].append(body)
    return bands


def resolve_overlaps(arena: Arena, couples: Sequence[tuple[str, str]], config: LayoutConfig) -> None:
    """Enforce ``node_width + min_gap`` between neighbours in every band."""
    for bodies in _bands(arena).values():
        sweep(band_items(bodies, couples), config)


def recenter_parents(arena: Arena, units: Sequence[FamilyUnit], couples: Sequence[tuple[str, str]], config: LayoutConfig) -> None:
    """Move parents over their children's centroid, deepest band first.

    Each band is swept again after its parents move, so the band stays
    overlap-free; parents land as close to centered as spacing allows.
    """
    bands = _bands(arena)
    units_by_band: dict[int, list[FamilyUnit]] = defaultdict(list)
    for unit in units:
        first = arena.get(unit.parents[0])
        if first is not None:
            units_by_band[round(first.y)].append(unit)

    for band_y in sorted(bands, reverse=True):
        moved = False
        for unit in units_by_band.get(band_y, []):
            parents = [b for b in (arena.get(p) for p in unit.parents) if b is not None and round(b.y) == band_y]
            children = [b for b in (arena.get(c) for c in unit.children) if b is not None and round(b.y) > band_y]
            if not parents or not children:
                continue
            delta = sum(c.x for c in children) / len(children) - sum(p.x for p in parents) / len(parents)
            if delta == 0:
                continue
            for parent in parents:
                parent.x += delta
            moved = True
        if moved:
            sweep(band_items(bands[band_y], couples), config)


def finalize_positions(
    arena: Arena,
    graph: FamilyGraph,
    units: Sequence[FamilyUnit],
    generations: Mapping[str, int],
    config: LayoutConfig,
) -> None:
    """Run the post-relaxation passes in order."""
    couples = graph.couples()
    snap_rows(arena, generations, couples, config)
    restore_sibling_order(arena, units, couples)
    resolve_overlaps(arena, couples, config)
    recenter_parents(arena, units, couples, config)
    logger.debug("Finalized %d positions in %d bands", len(arena), len(_bands(arena)))
