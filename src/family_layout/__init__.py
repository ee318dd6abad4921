"""family-tree-layout: generation-banded, couple-aware family tree layout."""

from family_layout.config import LayoutConfig
from family_layout.ir.model import Edge, Node, Person, Position
from family_layout.layout.engine import FamilyTreeLayout, auto_layout, generation_layout, layout
from family_layout.layout.types import LayoutResult
from family_layout.renderers.text import render_preview
from family_layout.types import EdgeType, Sex
from family_layout.validation import check_snapshot, would_create_cycle

__all__ = [
    "Edge",
    "EdgeType",
    "FamilyTreeLayout",
    "LayoutConfig",
    "LayoutResult",
    "Node",
    "Person",
    "Position",
    "Sex",
    "auto_layout",
    "check_snapshot",
    "generation_layout",
    "layout",
    "load_snapshot",
    "render_preview",
    "would_create_cycle",
]


def load_snapshot(data: dict) -> tuple[list[Node], list[Edge]]:
    """Decode a ``{"nodes": [...], "edges": [...]}`` JSON document.

    Raises:
        ValueError: If the document is not an object or a record is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("snapshot must be a JSON object with 'nodes' and 'edges'")
    for key in ("nodes", "edges"):
        if not isinstance(data.get(key) or [], list):
            raise ValueError(f"snapshot '{key}' must be a list")
    records = [*(data.get("nodes") or []), *(data.get("edges") or [])]
    for record in records:
        if not isinstance(record, dict):
            raise ValueError(f"snapshot records must be objects, got {record!r}")
    nodes = [Node.from_dict(n) for n in data.get("nodes") or []]
    edges = [Edge.from_dict(e) for e in data.get("edges") or []]
    return nodes, edges
