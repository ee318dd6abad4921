"""Layout working types shared across the layout stages."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from family_layout.ir.model import Edge, Node


@dataclass
class FamilyUnit:
    """A couple (or single parent) together with the children they anchor."""

    id: str
    parents: list[str]
    children: list[str]
    generation: int = 0
    flipped: bool = False

    @property
    def is_couple(self) -> bool:
        return len(self.parents) == 2

    def display_parents(self) -> list[str]:
        """Parents in left-to-right drawing order."""
        return list(reversed(self.parents)) if self.flipped else list(self.parents)


@dataclass
class Body:
    """Mutable simulation record for one node."""

    id: str
    x: float
    y: float
    generation: int
    vx: float = 0.0
    vy: float = 0.0
    fx: float = 0.0
    fy: float = 0.0


class Arena:
    """Flat array of bodies addressed by a stable integer handle.

    The arena owns every coordinate touched during relaxation and never
    aliases the caller's ``Node`` records.
    """

    def __init__(self, bodies: list[Body]) -> None:
        self.bodies = bodies
        self.handles: dict[str, int] = {b.id: i for i, b in enumerate(bodies)}

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.handles

    def get(self, node_id: str) -> Body | None:
        handle = self.handles.get(node_id)
        return self.bodies[handle] if handle is not None else None

    def reset_forces(self) -> None:
        for body in self.bodies:
            body.fx = 0.0
            body.fy = 0.0

    def kinetic_energy(self) -> float:
        """Sum of |vx| + |vy| over all bodies (the convergence measure)."""
        return sum(abs(b.vx) + abs(b.vy) for b in self.bodies)

    def positions(self) -> dict[str, tuple[float, float]]:
        return {b.id: (b.x, b.y) for b in self.bodies}


@dataclass
class LayoutResult:
    """Self-contained layout output: positioned nodes plus render edges."""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
