"""Text renderers for laid-out family trees."""

from family_layout.renderers.text import render_preview

__all__ = ["render_preview"]
