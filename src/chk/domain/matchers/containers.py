"""Matchers over containers, attributes and strings."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from chk.domain.equality import equals, strict_equals

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation
    from chk.domain.matchers.registry import MatcherRegistry

_MISSING = object()


def to_contain(e: Expectation, item: Any) -> Expectation:
    """Pass when ``item in subject`` (substring for strings)."""
    try:
        passed = item in e.subject
    except TypeError:
        passed = False
    return e.process("to_contain", passed, e.subject, item)


def to_contain_equal(e: Expectation, item: Any) -> Expectation:
    """Pass when some element of the subject deep-equals *item*."""
    try:
        passed = any(equals(element, item) for element in e.subject)
    except TypeError:
        passed = False
    return e.process("to_contain_equal", passed, e.subject, item)


def to_contain_all(e: Expectation, items: Iterable[Any]) -> Expectation:
    """Pass when every one of *items* is in the subject."""
    items = list(items)
    try:
        passed = all(item in e.subject for item in items)
    except TypeError:
        passed = False
    return e.process("array.contains", passed, e.subject, items)


def to_have_length(e: Expectation, length: int) -> Expectation:
    try:
        passed = len(e.subject) == length
    except TypeError:
        passed = False
    return e.process("to_have_length", passed, e.subject, length)


def _lookup(subject: Any, key: Any) -> Any:
    if isinstance(subject, Mapping):
        return subject.get(key, _MISSING)
    if isinstance(subject, Sequence) and isinstance(key, int):
        try:
            return subject[key]
        except IndexError:
            return _MISSING
    if isinstance(key, str):
        return getattr(subject, key, _MISSING)
    return _MISSING


def to_have_property(
    e: Expectation, path: str | Sequence[Any], value: Any = _MISSING
) -> Expectation:
    """Pass when the subject has *path*, and, if given, its value is *value*.

    *path* is a dotted string (``"a.b"``) or a sequence of keys. Mapping keys,
    sequence indexes and attributes are all followed. The value is compared
    with strict equality.
    """
    keys = path.split(".") if isinstance(path, str) else list(path)
    current = e.subject
    for key in keys:
        current = _lookup(current, key)
        if current is _MISSING:
            break
    passed = current is not _MISSING
    if passed and value is not _MISSING:
        passed = strict_equals(current, value)
    return e.process("to_have_property", passed, e.subject, path)


def to_match(e: Expectation, pattern: str | re.Pattern[str]) -> Expectation:
    """Pass when the string subject contains a match for *pattern*."""
    passed = isinstance(e.subject, str) and re.search(pattern, e.subject) is not None
    return e.process("to_match", passed, e.subject, pattern)


def install(registry: MatcherRegistry) -> None:
    """Register the container matchers."""
    registry.add("to_contain", to_contain)
    registry.add("to_contain_equal", to_contain_equal)
    registry.add(("array.contains", "to_contain_all"), to_contain_all)
    registry.add("to_have_length", to_have_length)
    registry.add("to_have_property", to_have_property)
    registry.add("to_match", to_match)
