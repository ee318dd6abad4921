"""Intermediate representation: snapshot records and the relationship graph."""

from family_layout.ir.graph import FamilyGraph
from family_layout.ir.model import Edge, Node, Person, Position, id_sort_key

__all__ = [
    "Edge",
    "FamilyGraph",
    "Node",
    "Person",
    "Position",
    "id_sort_key",
]
