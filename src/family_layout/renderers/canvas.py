"""Character grid the preview paints person cards and family connectors onto."""

from __future__ import annotations

from dataclasses import dataclass

from family_layout.renderers.charset import BoxChars


@dataclass
class Card:
    """Cell footprint of one person card."""

    col: int
    row: int
    width: int
    height: int = 3

    @property
    def right(self) -> int:
        """First column past the card."""
        return self.col + self.width

    @property
    def bottom(self) -> int:
        """First row below the card."""
        return self.row + self.height

    @property
    def mid_row(self) -> int:
        return self.row + self.height // 2

    @property
    def center_col(self) -> int:
        return self.col + self.width // 2


class Canvas:
    """Rows of single-cell strings.

    A wide character occupies its own cell plus an empty-string cell, so
    joined rows keep their display width.
    """

    def __init__(self, width: int, height: int, chars: BoxChars) -> None:
        self.width = width
        self.height = height
        self.chars = chars
        self.cells: list[list[str]] = [[" "] * width for _ in range(height)]

    def _inside(self, col: int, row: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get(self, col: int, row: int) -> str:
        return self.cells[row][col] if self._inside(col, row) else " "

    def put(self, col: int, row: int, c: str) -> None:
        if self._inside(col, row):
            self.cells[row][col] = c

    def stroke(self, col: int, row: int, c: str) -> None:
        """Draw a line cell, joining crossing lines; never paints over text."""
        if not self._inside(col, row):
            return
        existing = self.cells[row][col]
        if existing == " ":
            self.cells[row][col] = c
            return
        joined = self.chars.join(existing, c)
        if joined is not None:
            self.cells[row][col] = joined

    def card(self, card: Card, label: list[str], deceased: bool = False) -> None:
        """Box with ``label`` cells centered on the middle row."""
        bc = self.chars
        last_col = card.right - 1
        last_row = card.bottom - 1
        for col in range(card.col + 1, last_col):
            self.put(col, card.row, bc.horizontal)
            self.put(col, last_row, bc.horizontal)
        for row in range(card.row + 1, last_row):
            self.put(card.col, row, bc.vertical)
            self.put(last_col, row, bc.vertical)
        self.put(card.col, card.row, bc.top_left)
        self.put(last_col, card.row, bc.top_right)
        self.put(card.col, last_row, bc.bottom_left)
        self.put(last_col, last_row, bc.bottom_right)
        if deceased:
            self.put(card.col + 1, card.row, bc.deceased)

        inner = card.width - 2
        start = card.col + 1 + max(0, inner - len(label)) // 2
        for i, cell in enumerate(label[:inner]):
            self.put(start + i, card.mid_row, cell)

    def couple_link(self, a: Card, b: Card) -> None:
        """Double line between two partners' cards on their middle row."""
        left, right = (a, b) if a.col <= b.col else (b, a)
        for col in range(left.right, right.col):
            self.put(col, left.mid_row, self.chars.couple)

    def bus(self, drop_col: int, start_row: int, child: Card) -> bool:
        """Drop from ``(drop_col, start_row)``, run along the row two above
        ``child``, and end in an arrow over its center. Returns False when
        there is no room between the two.
        """
        bus_row = child.row - 2
        if bus_row < start_row:
            return False
        for row in range(start_row, bus_row + 1):
            self.stroke(drop_col, row, self.chars.vertical)
        lo, hi = sorted((drop_col, child.center_col))
        for col in range(lo, hi + 1):
            self.stroke(col, bus_row, self.chars.horizontal)
        self.put(child.center_col, child.row - 1, self.chars.arrow_down)
        return True

    def to_string(self) -> str:
        lines = ["".join(row).rstrip() for row in self.cells]
        return "\n".join(lines).rstrip("\n") + "\n"
