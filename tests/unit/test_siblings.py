"""Tests for deterministic sibling ordering."""

from datetime import date

import pytest

from family_layout.ir.model import Person
from family_layout.layout.siblings import (
    NO_LABEL_PRIORITY,
    birth_order_priority,
    compare_siblings,
    parse_birth_date,
    sort_siblings,
)
from family_layout.types import Sex


@pytest.mark.parametrize(
    "label, expected",
    [
        ("長男", 1),
        ("次男", 2),
        ("三男", 3),
        ("長女", 11),
        ("次女", 12),
        ("七男", 6),
        ("eldest son", 1),
        ("2nd daughter", 12),
        ("Third-Son", 3),
        ("sixth daughter", 16),
    ],
)
def test_known_labels(label, expected):
    assert birth_order_priority(label, None) == expected


def test_unrecognized_label_uses_sex():
    assert birth_order_priority("favourite", Sex.Male) == 100
    assert birth_order_priority("favourite", Sex.Female) == 200
    assert birth_order_priority("favourite", None) == 300


def test_missing_label_sorts_last():
    assert birth_order_priority(None, Sex.Male) == NO_LABEL_PRIORITY
    assert birth_order_priority("", None) == NO_LABEL_PRIORITY


def test_parse_birth_date():
    assert parse_birth_date("1990-05-17") == date(1990, 5, 17)
    assert parse_birth_date("1990") == date(1990, 1, 1)
    assert parse_birth_date("1990-05") == date(1990, 5, 1)
    assert parse_birth_date("someday") is None
    assert parse_birth_date(None) is None


class TestSortSiblings:
    def test_japanese_labels(self):
        persons = {
            "a": Person(birth_order="次男"),
            "b": Person(birth_order="長男"),
            "c": Person(birth_order="長女"),
        }
        assert sort_siblings(["a", "b", "c"], persons) == ["b", "a", "c"]

    def test_date_then_name(self):
        persons = {
            "1": Person(first_name="Cho", birth_date="2001-01-01"),
            "2": Person(first_name="Bo"),
            "3": Person(first_name="Al"),
            "4": Person(first_name="Di", birth_date="1999-06-01"),
        }
        assert sort_siblings(["1", "2", "3", "4"], persons) == ["4", "1", "3", "2"]

    def test_independent_of_input_order(self):
        persons = {str(i): Person(first_name="Same") for i in range(1, 6)}
        forward = sort_siblings(["1", "2", "3", "4", "5"], persons)
        backward = sort_siblings(["5", "4", "3", "2", "1"], persons)
        assert forward == backward == ["1", "2", "3", "4", "5"]

    def test_unknown_ids_appended(self):
        persons = {"1": Person(birth_order="長男")}
        assert sort_siblings(["x", "1"], persons) == ["1", "x"]

    def test_labelled_before_unlabelled(self):
        a = Person(first_name="A")
        b = Person(first_name="B", birth_order="次女")
        assert compare_siblings(b, a) < 0
