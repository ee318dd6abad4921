"""Shared type definitions for family-layout.

Enums used across the IR, layout stages, and renderers.
"""

from __future__ import annotations

from enum import Enum


class Sex(Enum):
    Male = "male"
    Female = "female"
    Other = "other"
    Unknown = "unknown"

    @classmethod
    def parse(cls, value: object) -> Sex | None:
        if value is None or value == "":
            return None
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.Unknown


class EdgeType(Enum):
    ParentChild = "parent-child"  # parent -> child
    Partnership = "partnership"  # undirected couple link

    @classmethod
    def parse(cls, value: str) -> EdgeType:
        # accept the storage spelling as well
        normalized = value.replace("_", "-").lower()
        if normalized == "spouse":
            return cls.Partnership
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown edge type '{value}'; use parent-child or partnership") from None
