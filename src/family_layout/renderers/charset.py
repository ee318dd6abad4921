"""Character sets and junction merging for the text preview."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CharSet(Enum):
    Unicode = "unicode"
    Ascii = "ascii"


@dataclass
class Arms:
    """Which arms of a connector cell are active."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    def merge(self, other: Arms) -> Arms:
        return Arms(
            up=self.up or other.up,
            down=self.down or other.down,
            left=self.left or other.left,
            right=self.right or other.right,
        )

    def key(self) -> tuple[bool, bool, bool, bool]:
        # a lone arm is drawn as the full straight line
        up = self.up or (self.down and not (self.left or self.right))
        down = self.down or (self.up and not (self.left or self.right))
        left = self.left or (self.right and not (self.up or self.down))
        right = self.right or (self.left and not (self.up or self.down))
        return (up, down, left, right)


@dataclass
class BoxChars:
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str
    tee_right: str  # ├
    tee_left: str  # ┤
    tee_down: str  # ┬
    tee_up: str  # ┴
    cross: str
    arrow_down: str
    couple: str  # partnership connector
    deceased: str  # marker written in a deceased person's top border

    @classmethod
    def unicode(cls) -> BoxChars:
        return cls(
            top_left="┌",
            top_right="┐",
            bottom_left="└",
            bottom_right="┘",
            horizontal="─",
            vertical="│",
            tee_right="├",
            tee_left="┤",
            tee_down="┬",
            tee_up="┴",
            cross="┼",
            arrow_down="▼",
            couple="═",
            deceased="†",
        )

    @classmethod
    def ascii(cls) -> BoxChars:
        return cls(
            top_left="+",
            top_right="+",
            bottom_left="+",
            bottom_right="+",
            horizontal="-",
            vertical="|",
            tee_right="+",
            tee_left="+",
            tee_down="+",
            tee_up="+",
            cross="+",
            arrow_down="v",
            couple="=",
            deceased="x",
        )

    @classmethod
    def for_charset(cls, cs: CharSet) -> BoxChars:
        if cs == CharSet.Unicode:
            return cls.unicode()
        return cls.ascii()

    def junctions(self) -> dict[tuple[bool, bool, bool, bool], str]:
        """Line characters keyed by their (up, down, left, right) arms."""
        return {
            (False, False, True, True): self.horizontal,
            (True, True, False, False): self.vertical,
            (False, True, False, True): self.top_left,
            (False, True, True, False): self.top_right,
            (True, False, False, True): self.bottom_left,
            (True, False, True, False): self.bottom_right,
            (True, True, False, True): self.tee_right,
            (True, True, True, False): self.tee_left,
            (False, True, True, True): self.tee_down,
            (True, False, True, True): self.tee_up,
            (True, True, True, True): self.cross,
        }

    def arms_of(self, c: str) -> Arms | None:
        """Arms of a line character, or None for text and blanks.

        When several junctions share one glyph (ASCII "+"), the fullest wins.
        """
        found: Arms | None = None
        for (up, down, left, right), char in self.junctions().items():
            if char == c:
                found = Arms(up=up, down=down, left=left, right=right)
        return found

    def join(self, existing: str, new: str) -> str | None:
        """The character for ``new`` drawn over ``existing``, or None if they do not join."""
        a = self.arms_of(existing)
        b = self.arms_of(new)
        if a is None or b is None:
            return None
        return self.junctions().get(a.merge(b).key(), self.cross)
