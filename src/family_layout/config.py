"""Centralized configuration for the family-tree layout engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

# camelCase option names accepted from JSON / UI callers
_OPTION_ALIASES: dict[str, str] = {
    "nodeWidth": "node_width",
    "nodeHeight": "node_height",
    "minDistance": "min_distance",
    "minGap": "min_gap",
    "generationHeight": "generation_height",
    "coupleDistance": "couple_distance",
    "childSpacing": "child_spacing",
    "familySpacing": "family_spacing",
    "soloNodeSpacing": "solo_node_spacing",
    "marginX": "margin_x",
    "marginY": "margin_y",
    "canvasWidth": "canvas_width",
    "iterations": "iterations",
    "dampening": "dampening",
    "energyThreshold": "energy_threshold",
}


@dataclass(frozen=True)
class LayoutConfig:
    """Tunable constants for every layout stage.

    Sizes are in abstract pixels. Only ratios matter for the structural
    guarantees: cards of ``node_width`` never overlap within a generation row
    as long as ``couple_distance >= node_width + min_gap``.
    """

    # Card geometry
    node_width: float = 160
    node_height: float = 80

    # Initial placement
    couple_distance: float = 190
    child_spacing: float = 220
    family_spacing: float = 220
    solo_node_spacing: float = 220
    generation_height: float = 160
    margin_x: float = 80
    margin_y: float = 80
    canvas_width: float = 1200

    # Relaxation
    iterations: int = 100
    dampening: float = 0.9
    energy_threshold: float = 0.1
    min_distance: float = 40
    repulsion_strength: float = 0.1
    attraction_strength: float = 0.01
    attraction_slack: float = 50
    banding_strength: float = 0.05
    centering_strength: float = 0.02

    # Overlap resolution
    min_gap: float = 30

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Layout option '{f.name}' must be a number, got {value!r}")
            if value < 0:
                raise ValueError(f"Layout option '{f.name}' must not be negative, got {value!r}")
        if not isinstance(self.iterations, int):
            raise ValueError(f"Layout option 'iterations' must be an integer, got {self.iterations!r}")
        if not 0 < self.dampening <= 1:
            raise ValueError(f"Layout option 'dampening' must be in (0, 1], got {self.dampening!r}")
        if self.node_width <= 0 or self.generation_height <= 0:
            raise ValueError("Layout options 'node_width' and 'generation_height' must be positive")
        if self.couple_distance < self.node_width + self.min_gap:
            raise ValueError(
                f"couple_distance ({self.couple_distance}) must be at least node_width + min_gap "
                f"({self.node_width + self.min_gap}) so partners never overlap"
            )

    @property
    def column_width(self) -> float:
        """Horizontal room one card needs inside a generation row."""
        return self.node_width + self.min_gap

    @classmethod
    def from_options(cls, options: Mapping[str, object] | None = None, base: LayoutConfig | None = None) -> LayoutConfig:
        """Build a config from a partial mapping of camelCase or snake_case options.

        Args:
            options: Partial options; omitted keys keep their defaults.
            base: Config to override; defaults to ``LayoutConfig()``.

        Raises:
            ValueError: On unknown option names or invalid values.
        """
        base = base or cls()
        if not options:
            return base
        known = {f.name for f in fields(cls)}
        overrides: dict[str, object] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown layout option '{key}'")
            overrides[name] = value
        return replace(base, **overrides)


def resolve_config(config: LayoutConfig | Mapping[str, object] | None) -> LayoutConfig:
    """Normalize the ``config`` argument accepted by the public API."""
    if config is None:
        return LayoutConfig()
    if isinstance(config, LayoutConfig):
        return config
    if isinstance(config, Mapping):
        return LayoutConfig.from_options(config)
    raise TypeError(f"config must be a LayoutConfig or a mapping, got {type(config).__name__}")
