"""Snapshot records exchanged with the layout engine.

A caller hands the engine a list of ``Node`` (one per person) and a list of
``Edge`` (parent-child links and partnerships). The records mirror the JSON
shape used by the editor front end, so ``from_dict``/``to_dict`` are the only
place where camelCase keys appear.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from family_layout.types import EdgeType, Sex


def id_sort_key(node_id: str) -> tuple[int, int, str]:
    """Order ids numerically when they are integers, lexically otherwise.

    Numeric ids sort before non-numeric ones so "lower id" decisions agree
    with the integer primary keys used by the persistence layer.
    """
    if node_id.isdigit():
        return (0, int(node_id), node_id)
    return (1, 0, node_id)


def _opt_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _parse_position(pos: Any) -> Position | None:
    """A persisted position, or None when the record has none yet."""
    if pos is None:
        return None
    if not isinstance(pos, dict):
        raise ValueError(f"position must be an object with x and y, got {pos!r}")
    x, y = pos.get("x"), pos.get("y")
    if x is None and y is None:
        return None
    for value in (x, y):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"position needs numeric x and y, got {pos!r}")
    return Position(x=x, y=y)


@dataclass
class Person:
    first_name: str = ""
    last_name: str = ""
    sex: Sex | None = None
    birth_order: str | None = None
    birth_date: str | None = None
    death_date: str | None = None
    is_deceased: bool = False

    @property
    def display_name(self) -> str:
        return f"{self.last_name} {self.first_name}".strip()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Person:
        return cls(
            first_name=str(data.get("firstName") or ""),
            last_name=str(data.get("lastName") or ""),
            sex=Sex.parse(data.get("sex")),
            birth_order=_opt_str(data.get("birthOrder")),
            birth_date=_opt_str(data.get("birthDate")),
            death_date=_opt_str(data.get("deathDate")),
            is_deceased=bool(data.get("isDeceased", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "sex": self.sex.value if self.sex is not None else None,
            "birthOrder": self.birth_order,
            "birthDate": self.birth_date,
            "deathDate": self.death_date,
            "isDeceased": self.is_deceased,
        }


@dataclass
class Position:
    x: float
    y: float


@dataclass
class Node:
    """A person card on the diagram."""

    id: str
    person: Person = field(default_factory=Person)
    position: Position | None = None
    generation: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        if data.get("id") is None:
            raise ValueError(f"Node record is missing 'id': {data!r}")
        payload = data.get("data") or {}
        person_data = (payload.get("person") or {}) if isinstance(payload, dict) else None
        if not isinstance(person_data, dict):
            raise ValueError(f"Node {data['id']!r}: 'data.person' must be an object")
        position = _parse_position(data.get("position"))
        return cls(
            id=str(data["id"]),
            person=Person.from_dict(person_data),
            position=position,
            generation=data.get("generation"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "position": {"x": self.position.x, "y": self.position.y} if self.position else None,
            "data": {"person": self.person.to_dict()},
        }
        if self.generation is not None:
            out["generation"] = self.generation
        return out


@dataclass
class Edge:
    """A parent-child link (source is the parent) or a partnership."""

    id: str
    source: str
    target: str
    type: EdgeType
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_flipped(self) -> bool:
        return bool(self.data.get("isFlipped", False))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Edge:
        for key in ("source", "target", "type"):
            if data.get(key) is None:
                raise ValueError(f"Edge record is missing '{key}': {data!r}")
        source = str(data["source"])
        target = str(data["target"])
        edge_type = EdgeType.parse(str(data["type"]))
        edge_id = data.get("id")
        if edge_id is None:
            edge_id = f"{edge_type.value}-{source}-{target}"
        extra = data.get("data") or {}
        if not isinstance(extra, dict):
            raise ValueError(f"Edge {edge_id}: 'data' must be an object, got {extra!r}")
        return cls(
            id=str(edge_id),
            source=source,
            target=target,
            type=edge_type,
            data=dict(extra),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type.value,
        }
        if self.data:
            out["data"] = dict(self.data)
        return out
