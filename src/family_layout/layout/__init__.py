"""Layout engine registry and public API."""

from __future__ import annotations

from family_layout.layout.edges import canonical_parent, materialize_edges
from family_layout.layout.engine import FamilyTreeLayout, auto_layout, generation_layout, layout
from family_layout.layout.families import assign_unit_generations, build_family_units, primary_units
from family_layout.layout.forces import (
    apply_family_centering,
    apply_generation_banding,
    apply_parent_child_attraction,
    apply_repulsion,
    apply_spouse_rigidity,
    build_arena,
    relax,
)
from family_layout.layout.generations import PARTNER_RECONCILE_ROUNDS, assign_generations
from family_layout.layout.overlap import finalize_positions, recenter_parents, resolve_overlaps
from family_layout.layout.planner import plan_positions, row_y
from family_layout.layout.siblings import birth_order_priority, compare_siblings, sort_siblings
from family_layout.layout.types import Arena, Body, FamilyUnit, LayoutResult

__all__ = [
    "PARTNER_RECONCILE_ROUNDS",
    "Arena",
    "Body",
    "FamilyTreeLayout",
    "FamilyUnit",
    "LayoutResult",
    "apply_family_centering",
    "apply_generation_banding",
    "apply_parent_child_attraction",
    "apply_repulsion",
    "apply_spouse_rigidity",
    "assign_generations",
    "assign_unit_generations",
    "auto_layout",
    "birth_order_priority",
    "build_arena",
    "build_family_units",
    "canonical_parent",
    "compare_siblings",
    "finalize_positions",
    "generation_layout",
    "layout",
    "materialize_edges",
    "plan_positions",
    "primary_units",
    "recenter_parents",
    "relax",
    "resolve_overlaps",
    "row_y",
    "sort_siblings",
]
