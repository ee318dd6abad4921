"""Tests for family-unit clustering."""

from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import Edge
from family_layout.layout.families import assign_unit_generations, build_family_units, primary_units
from family_layout.types import EdgeType


def pc(parent: str, child: str) -> Edge:
    return Edge(id=f"pc-{parent}-{child}", source=parent, target=child, type=EdgeType.ParentChild)


def partner(a: str, b: str, flipped: bool = False) -> Edge:
    data = {"isFlipped": True} if flipped else {}
    return Edge(id=f"p-{a}-{b}", source=a, target=b, type=EdgeType.Partnership, data=data)


def build(ids: list[str], edges: list[Edge]):
    graph = FamilyGraph.from_edges(edges, ids)
    return build_family_units(graph, ids)


def test_couple_with_children():
    units, solos = build(["1", "2", "3", "4"], [partner("1", "2"), pc("1", "3"), pc("2", "3"), pc("2", "4")])
    assert len(units) == 1
    unit = units[0]
    assert unit.id == "family-0"
    assert unit.parents == ["1", "2"]
    assert unit.children == ["3", "4"]
    assert unit.is_couple
    assert solos == []


def test_childless_couple_is_solo():
    units, solos = build(["1", "2"], [partner("1", "2")])
    assert units == []
    assert solos == ["1", "2"]


def test_single_parent_unit():
    units, solos = build(["1", "2", "3"], [pc("1", "2")])
    assert [u.parents for u in units] == [["1"]]
    assert units[0].children == ["2"]
    assert not units[0].is_couple
    assert solos == ["3"]


def test_couples_come_before_single_parents():
    units, _ = build(
        ["5", "1", "2", "3", "6"],
        [pc("5", "6"), partner("1", "2"), pc("1", "3")],
    )
    assert [u.parents for u in units] == [["1", "2"], ["5"]]


def test_every_person_parents_at_most_one_unit():
    units, _ = build(
        ["1", "2", "3", "4", "5"],
        [partner("1", "2"), partner("1", "3"), pc("1", "4"), pc("3", "5")],
    )
    parents = [p for u in units for p in u.parents]
    assert len(parents) == len(set(parents))
    assert [u.parents for u in units] == [["1", "2"], ["3"]]


def test_shared_child_of_unpartnered_parents():
    """The child is listed by both units; the first unit owns its slot."""
    units, solos = build(["1", "2", "3"], [pc("1", "3"), pc("2", "3")])
    assert [u.children for u in units] == [["3"], ["3"]]
    assert primary_units(units)["3"] is units[0]
    assert solos == []


def test_flipped_couple_display_order():
    units, _ = build(["1", "2", "3"], [partner("1", "2", flipped=True), pc("1", "3")])
    assert units[0].parents == ["1", "2"]
    assert units[0].display_parents() == ["2", "1"]


def test_unit_generation_is_deepest_parent():
    units, _ = build(["1", "2", "3"], [partner("1", "2"), pc("1", "3")])
    assign_unit_generations(units, {"1": 0, "2": 2, "3": 1})
    assert units[0].generation == 2
