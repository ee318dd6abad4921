"""Deterministic sibling ordering.

Children are ordered by birth-rank label (sons before daughters, eldest
first), then birth date, then display name. The order is a pure function of
the person records; input order never matters.
"""

from __future__ import annotations

import functools
import re
import unicodedata
from collections.abc import Mapping, Sequence
from datetime import date

from family_layout.ir.model import Person, id_sort_key
from family_layout.types import Sex

NO_LABEL_PRIORITY: int = 1000
UNKNOWN_MALE_PRIORITY: int = 100
UNKNOWN_FEMALE_PRIORITY: int = 200
UNKNOWN_PRIORITY: int = 300
_DAUGHTER_OFFSET: int = 10
_NTH_RANK: int = 6  # sixth child of a sex and beyond share one rank

_JA_RANKS: dict[str, int] = {"長": 1, "次": 2, "二": 2, "三": 3, "四": 4, "五": 5}
_JA_LABEL = re.compile(r"([長次二三四五六七八九十])([男女])")

_EN_RANKS: dict[str, int] = {
    "eldest": 1,
    "first": 1,
    "1st": 1,
    "second": 2,
    "2nd": 2,
    "third": 3,
    "3rd": 3,
    "fourth": 4,
    "4th": 4,
    "fifth": 5,
    "5th": 5,
}
_EN_LABEL = re.compile(r"\b(eldest|first|second|third|fourth|fifth|sixth|seventh|eighth|ninth|tenth|\d+(?:st|nd|rd|th))[\s_-]*(son|daughter)\b")


def birth_order_priority(label: str | None, sex: Sex | None) -> int:
    """Map a birth-rank label to a sort priority (lower sorts first).

    Sons rank 1..6, daughters 11..16. A label that matches no known pattern
    falls back to the person's sex (100 male, 200 female, 300 otherwise); a
    missing label sorts after all of them at 1000.
    """
    if not label:
        return NO_LABEL_PRIORITY
    rank = _parse_label(label)
    if rank is not None:
        return rank
    if sex == Sex.Male:
        return UNKNOWN_MALE_PRIORITY
    if sex == Sex.Female:
        return UNKNOWN_FEMALE_PRIORITY
    return UNKNOWN_PRIORITY


def _parse_label(label: str) -> int | None:
    m = _JA_LABEL.search(label)
    if m:
        rank = _JA_RANKS.get(m.group(1), _NTH_RANK)
        return rank if m.group(2) == "男" else rank + _DAUGHTER_OFFSET
    m = _EN_LABEL.search(label.lower())
    if m:
        rank = _EN_RANKS.get(m.group(1), _NTH_RANK)
        return rank if m.group(2) == "son" else rank + _DAUGHTER_OFFSET
    return None


def parse_birth_date(value: str | None) -> date | None:
    """Parse an ISO date; ``YYYY`` and ``YYYY-MM`` are padded to the first day."""
    if not value:
        return None
    text = value.strip()[:10]
    if len(text) == 4:
        text += "-01-01"
    elif len(text) == 7:
        text += "-01"
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _name_key(person: Person) -> str:
    return unicodedata.normalize("NFKC", person.display_name).casefold()


def compare_siblings(a: Person, b: Person) -> int:
    """Three-way comparison of two siblings; negative when ``a`` goes first."""
    pa = birth_order_priority(a.birth_order, a.sex)
    pb = birth_order_priority(b.birth_order, b.sex)
    if pa != pb:
        return pa - pb

    da = parse_birth_date(a.birth_date)
    db = parse_birth_date(b.birth_date)
    if da and db:
        if da != db:
            return -1 if da < db else 1
    elif da:
        return -1
    elif db:
        return 1

    na = _name_key(a)
    nb = _name_key(b)
    return (na > nb) - (na < nb)


def sort_siblings(child_ids: Sequence[str], persons: Mapping[str, Person]) -> list[str]:
    """Return ``child_ids`` in sibling order.

    Ids without a person record keep their relative order after all known ids.
    Equal siblings fall back to id order so the result never depends on input order.
    """
    known = sorted(
        (cid for cid in child_ids if cid in persons),
        key=id_sort_key,
    )

    def cmp(x: str, y: str) -> int:
        return compare_siblings(persons[x], persons[y])

    ordered = sorted(known, key=functools.cmp_to_key(cmp))
    unknown = [cid for cid in child_ids if cid not in persons]
    return ordered + unknown
