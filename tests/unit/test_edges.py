"""Tests for render-edge materialization."""

from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import Edge
from family_layout.layout.edges import canonical_parent, materialize_edges
from family_layout.types import EdgeType


def pc(parent: str, child: str, **data) -> Edge:
    return Edge(id=f"pc-{parent}-{child}", source=parent, target=child, type=EdgeType.ParentChild, data=data)


def partner(a: str, b: str) -> Edge:
    return Edge(id=f"p-{a}-{b}", source=a, target=b, type=EdgeType.Partnership)


def materialize(ids: list[str], edges: list[Edge]) -> list[Edge]:
    return materialize_edges(edges, FamilyGraph.from_edges(edges, ids))


def test_canonical_parent_is_lowest_id():
    assert canonical_parent(["10", "9"]) == "9"
    assert canonical_parent(["b", "2"]) == "2"


def test_couple_child_gets_one_edge():
    edges = [pc("2", "3"), partner("1", "2"), pc("1", "3")]
    out = materialize(["1", "2", "3"], edges)
    assert [e.type for e in out] == [EdgeType.Partnership, EdgeType.ParentChild]
    child_edge = out[1]
    assert child_edge.id == "family-1-2-to-3"
    assert child_edge.source == "1"
    assert child_edge.target == "3"
    assert child_edge.data["parentIds"] == ["1", "2"]
    assert child_edge.data["partnerId"] == "2"


def test_single_parent_edge_id():
    out = materialize(["5", "6"], [pc("5", "6")])
    assert [e.id for e in out] == ["parent-child-5-6"]
    assert out[0].data["partnerId"] is None


def test_unpartnered_parents_use_lowest_id():
    out = materialize(["1", "2", "3"], [pc("2", "3"), pc("1", "3")])
    assert len(out) == 1
    assert out[0].id == "parent-child-1-3"
    assert out[0].data["parentIds"] == ["1", "2"]


def test_original_data_kept():
    out = materialize(["1", "2"], [pc("1", "2", note="adopted")])
    assert out[0].data["note"] == "adopted"


def test_one_edge_per_child_in_first_appearance_order():
    edges = [pc("1", "4"), pc("1", "3"), pc("1", "4")]
    out = materialize(["1", "3", "4"], edges)
    assert [e.target for e in out] == ["4", "3"]


def test_dangling_links_dropped_but_partnerships_copied():
    edges = [partner("1", "2"), pc("1", "99")]
    out = materialize(["1", "2"], edges)
    assert [e.id for e in out] == ["p-1-2"]


def test_inputs_not_mutated():
    edges = [pc("1", "2", note="x")]
    materialize(["1", "2"], edges)
    assert edges[0].data == {"note": "x"}
