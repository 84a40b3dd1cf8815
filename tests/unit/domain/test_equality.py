"""Unit tests for :mod:`chk.domain.equality`."""

from __future__ import annotations

import math
from dataclasses import dataclass

import pytest

from chk.domain.equality import (
    any_instance,
    anything,
    equals,
    is_anything,
    match_object,
    strict_deep_equals,
    strict_equals,
)


@dataclass
class Point:
    """Plain dataclass used as a structured value."""

    x: int
    y: int


class Bag:  # pylint: disable=too-few-public-methods
    """Plain object compared through ``vars()``."""

    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


class TestEquals:
    """Structural equality."""

    @staticmethod
    @pytest.mark.parametrize(
        ("a", "b"),
        [
            (1, 1.0),
            ("a", "a"),
            ([1, [2, 3]], [1, [2, 3]]),
            ({"a": 1, "b": [1]}, {"b": [1], "a": 1}),
            (Point(1, 2), Point(1, 2)),
            (Bag(a=1, b="x"), Bag(a=1, b="x")),
            (None, None),
        ],
    )
    def test_equal_values(a, b):
        assert equals(a, b)

    @staticmethod
    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ([1, 2], [1, 2, 3]),
            ({"a": 1}, {"a": 1, "b": 2}),
            ([1], (1,)),
            ("1", 1),
            (Point(1, 2), Point(2, 1)),
            (Bag(a=1), Bag(a=2)),
            (None, 0),
        ],
    )
    def test_unequal_values(a, b):
        assert not equals(a, b)

    @staticmethod
    def test_bool_is_a_number_only_against_itself():
        """True and 1 differ because bool is not treated as a number."""
        assert equals(True, True)
        assert not equals(True, 1)

    @staticmethod
    @pytest.mark.parametrize(
        ("received", "expected_type", "matches"),
        [
            (3, int, True),
            (True, int, False),
            (3.5, float, True),
            (3, float, True),
            ("s", str, True),
            (None, None, True),
            (0, None, False),
            (len, callable, True),
            (object(), object, True),
            (None, object, False),
        ],
    )
    def test_any_instance_marker(received, expected_type, matches):
        """any_instance(T) in the expected position is a type check."""
        assert equals(received, any_instance(expected_type)) is matches

    @staticmethod
    def test_any_instance_nested():
        assert equals({"id": 7, "name": "x"}, {"id": any_instance(int), "name": "x"})


class TestStrictEquals:
    """Identity comparison with value semantics for numbers and strings."""

    @staticmethod
    def test_numbers_and_strings_by_value():
        assert strict_equals(2, 2.0)
        assert strict_equals("abc", "".join(["a", "b", "c"]))

    @staticmethod
    def test_objects_by_identity():
        a = [1]
        assert strict_equals(a, a)
        assert not strict_equals(a, [1])


class TestStrictDeepEquals:
    """Structural equality that requires identical types."""

    @staticmethod
    def test_int_is_not_float():
        assert not strict_deep_equals(1, 1.0)
        assert strict_deep_equals([1, {"a": 2.0}], [1, {"a": 2.0}])

    @staticmethod
    def test_list_is_not_tuple():
        assert not strict_deep_equals([1, 2], (1, 2))

    @staticmethod
    def test_nan_never_equal():
        assert not strict_deep_equals(math.nan, math.nan)

    @staticmethod
    def test_dataclass_fields():
        assert strict_deep_equals(Point(1, 2), Point(1, 2))
        assert not strict_deep_equals(Point(1, 2), Point(1, 3))


class TestMatchObject:
    """Recursive subset matching."""

    @staticmethod
    def test_subset_of_mapping():
        received = {"a": 1, "b": {"c": 2, "d": 3}}
        assert match_object(received, {"b": {"c": 2}})
        assert not match_object(received, {"b": {"c": 3}})
        assert not match_object(received, {"z": 1})

    @staticmethod
    def test_attributes_of_objects():
        assert match_object(Bag(name="btn", size=3), {"name": "btn"})
        assert not match_object(Bag(name="btn"), {"color": "red"})

    @staticmethod
    def test_lists_must_have_same_length():
        assert match_object([{"a": 1, "b": 2}], [{"a": 1}])
        assert not match_object([{"a": 1}, {"a": 2}], [{"a": 1}])


class TestAnything:
    """The "don't care" marker."""

    @staticmethod
    def test_singleton():
        assert anything() is anything()
        assert repr(anything()) == "anything"

    @staticmethod
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (anything(), True),
            ([1, anything()], True),
            ((anything(),), True),
            ({"a": anything()}, False),
            (None, False),
        ],
    )
    def test_is_anything(value, expected):
        assert is_anything(value) is expected

    @staticmethod
    def test_equals_does_not_special_case_anything():
        assert not equals(5, anything())
