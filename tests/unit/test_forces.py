"""Tests for the force relaxation stage and its constraint enforcers."""

import pytest

from family_layout.config import LayoutConfig
from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import Edge
from family_layout.layout.forces import (
    apply_family_centering,
    apply_generation_banding,
    apply_parent_child_attraction,
    apply_repulsion,
    apply_spouse_rigidity,
    build_arena,
    integrate,
    relax,
)
from family_layout.layout.types import Arena, Body, FamilyUnit
from family_layout.types import EdgeType


def body(node_id: str, x: float, y: float, generation: int = 0) -> Body:
    return Body(id=node_id, x=x, y=y, generation=generation)


def pc(parent: str, child: str) -> Edge:
    return Edge(id=f"pc-{parent}-{child}", source=parent, target=child, type=EdgeType.ParentChild)


CFG = LayoutConfig()


def test_build_arena_copies_positions():
    arena = build_arena(["a", "b"], {"a": (1, 2), "b": (3, 4)}, {"a": 0, "b": 1})
    assert len(arena) == 2
    assert "a" in arena
    assert arena.get("b").y == 4.0
    assert arena.get("b").generation == 1
    assert arena.get("zz") is None
    assert arena.kinetic_energy() == 0


class TestRepulsion:
    def test_far_apart_untouched(self):
        arena = Arena([body("a", 0, 0), body("b", 500, 0)])
        apply_repulsion(arena, CFG)
        assert arena.get("a").fx == 0
        assert arena.get("b").fx == 0

    def test_close_pair_pushed_apart(self):
        arena = Arena([body("a", 0, 0), body("b", 40, 0)])
        apply_repulsion(arena, CFG)
        assert arena.get("a").fx < 0
        assert arena.get("b").fx > 0
        assert arena.get("a").fx == pytest.approx(-arena.get("b").fx)

    def test_coincident_pair_separated(self):
        arena = Arena([body("a", 10, 10), body("b", 10, 10)])
        apply_repulsion(arena, CFG)
        assert arena.get("a").fx < 0 < arena.get("b").fx


def test_attraction_respects_slack():
    graph = FamilyGraph.from_edges([pc("p", "c")], ["p", "c"])
    arena = Arena([body("p", 0, 0), body("c", 0, 180, 1)])
    apply_parent_child_attraction(arena, graph, CFG)
    assert arena.get("p").fy == 0

    arena = Arena([body("p", 0, 0), body("c", 0, 400, 1)])
    apply_parent_child_attraction(arena, graph, CFG)
    assert arena.get("p").fy > 0
    assert arena.get("c").fy < 0


def test_banding_pulls_to_mean():
    arena = Arena([body("a", 0, 0), body("b", 300, 20), body("c", 0, 500, 1)])
    apply_generation_banding(arena, CFG)
    assert arena.get("a").fy > 0
    assert arena.get("b").fy < 0
    assert arena.get("c").fy == 0


def test_family_centering():
    unit = FamilyUnit(id="family-0", parents=["p"], children=["c1", "c2"])
    arena = Arena([body("p", 0, 0), body("c1", 200, 160, 1), body("c2", 400, 160, 1)])
    apply_family_centering(arena, [unit], CFG)
    assert arena.get("p").fx > 0
    assert arena.get("c1").fx < 0
    assert arena.get("c2").fx < arena.get("c1").fx


def test_integrate_clamps_to_canvas():
    arena = Arena([body("a", 5, 5), body("b", 995, 5)])
    arena.get("a").fx = -20
    arena.get("a").fy = -20
    arena.get("b").fx = 20
    integrate(arena, CFG, max_x=1000)
    assert arena.get("a").x == 0
    assert arena.get("a").y == 0
    assert arena.get("b").x == 1000


class TestSpouseRigidity:
    def test_exact_distance_and_shared_row(self):
        arena = Arena([body("a", 0, 0), body("b", 100, 10)])
        apply_spouse_rigidity(arena, [("a", "b")], CFG)
        a, b = arena.get("a"), arena.get("b")
        assert a.y == b.y == 5
        assert b.x - a.x == 190
        assert (a.x + b.x) / 2 == 50

    def test_keeps_left_right_order(self):
        arena = Arena([body("a", 300, 0), body("b", 100, 0)])
        apply_spouse_rigidity(arena, [("a", "b")], CFG)
        assert arena.get("a").x - arena.get("b").x == 190

    def test_tie_broken_by_id(self):
        arena = Arena([body("2", 100, 0), body("1", 100, 0)])
        apply_spouse_rigidity(arena, [("2", "1")], CFG)
        assert arena.get("1").x < arena.get("2").x

    def test_velocity_cleared(self):
        arena = Arena([body("a", 0, 0), body("b", 100, 0)])
        arena.get("a").vx = 5
        apply_spouse_rigidity(arena, [("a", "b")], CFG)
        assert arena.get("a").vx == 0


class TestRelax:
    def test_zero_iterations_still_couples(self):
        cfg = LayoutConfig(iterations=0)
        graph = FamilyGraph.from_edges(
            [Edge(id="p", source="a", target="b", type=EdgeType.Partnership)], ["a", "b"]
        )
        arena = Arena([body("a", 0, 0), body("b", 50, 0)])
        assert relax(arena, graph, [], cfg, max_x=1200) == 0
        assert arena.get("b").x - arena.get("a").x == 190

    def test_still_arena_converges_at_once(self):
        graph = FamilyGraph.from_edges([], ["a"])
        arena = Arena([body("a", 80, 80)])
        assert relax(arena, graph, [], CFG, max_x=1200) == 1
        assert (arena.get("a").x, arena.get("a").y) == (80, 80)

    def test_bounded_by_iterations(self):
        cfg = LayoutConfig(iterations=3, energy_threshold=0)
        graph = FamilyGraph.from_edges([], ["a", "b"])
        arena = Arena([body("a", 0, 0), body("b", 10, 0)])
        assert relax(arena, graph, [], cfg, max_x=1200) == 3
