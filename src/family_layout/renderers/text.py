"""Text preview of a laid-out family tree.

Scales pixel positions onto a character canvas: one box per person, a
double line between partners, and a bus line from each parent (or couple)
down to the child. Meant for terminals and debugging, not print output.
"""

from __future__ import annotations

import unicodedata

from family_layout.config import LayoutConfig
from family_layout.layout.types import LayoutResult
from family_layout.renderers.canvas import Canvas, Card
from family_layout.renderers.charset import BoxChars, CharSet
from family_layout.types import EdgeType

CARD_ROWS: int = 3


def _cells(text: str) -> list[str]:
    """Split text into canvas cells; wide (CJK) characters take two."""
    cells: list[str] = []
    for ch in text:
        cells.append(ch)
        if unicodedata.east_asian_width(ch) in ("W", "F"):
            cells.append("")
    return cells


def _fit(text: str, width: int) -> list[str]:
    cells = _cells(text)
    if len(cells) <= width:
        return cells
    cells = cells[:width]
    if cells and cells[-1] != "" and len(_cells(cells[-1])) == 2:
        # a wide char cut in half
        cells[-1] = " "
    return cells


def render_preview(
    result: LayoutResult,
    unicode: bool = True,
    config: LayoutConfig | None = None,
    scale_x: float = 8.0,
    scale_y: float = 20.0,
) -> str:
    """Render ``result`` as a character diagram.

    Args:
        result: Output of ``layout``; every node must have a position.
        unicode: Box-drawing characters when True, plain ASCII otherwise.
        config: Supplies the card width; defaults to ``LayoutConfig()``.
        scale_x: Pixels per character column.
        scale_y: Pixels per character row.

    Returns:
        The diagram, or an empty string for an empty result.
    """
    placed = [n for n in result.nodes if n.position is not None]
    if not placed:
        return ""

    config = config or LayoutConfig()
    cs = CharSet.Unicode if unicode else CharSet.Ascii
    card_cols = max(6, round(config.node_width / scale_x))

    min_x = min(n.position.x for n in placed)
    min_y = min(n.position.y for n in placed)
    cards: dict[str, Card] = {}
    for node in placed:
        col = round((node.position.x - min_x) / scale_x)
        row = round((node.position.y - min_y) / scale_y)
        cards[node.id] = Card(col, row, card_cols, CARD_ROWS)

    width = max(c.right for c in cards.values()) + 1
    height = max(c.bottom for c in cards.values()) + 1
    canvas = Canvas(width, height, BoxChars.for_charset(cs))

    for edge in result.edges:
        if edge.type != EdgeType.Partnership:
            continue
        a = cards.get(edge.source)
        b = cards.get(edge.target)
        if a is not None and b is not None and a.row == b.row:
            canvas.couple_link(a, b)

    for edge in result.edges:
        if edge.type != EdgeType.ParentChild:
            continue
        parent = cards.get(edge.source)
        child = cards.get(edge.target)
        if parent is None or child is None:
            continue
        partner_id = edge.data.get("partnerId")
        partner = cards.get(str(partner_id)) if partner_id is not None else None
        if partner is not None and partner.row == parent.row:
            # drop from the middle of the couple link
            left, right = (parent, partner) if parent.col <= partner.col else (partner, parent)
            canvas.bus((left.right + right.col - 1) // 2, parent.mid_row + 1, child)
        else:
            canvas.bus(parent.center_col, parent.bottom, child)

    for node in placed:
        label = _fit(node.person.display_name or node.id, card_cols - 2)
        canvas.card(cards[node.id], label, deceased=node.person.is_deceased or bool(node.person.death_date))

    return canvas.to_string()
