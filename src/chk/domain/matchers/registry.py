"""Matcher registry.

Matchers are plain functions ``(expectation, *args) -> Expectation`` (or a
coroutine resolving to one). Each is registered under one or more names; an
expectation resolves names against its registry at call time, so the set of
matchers is an explicit, enumerable mapping instead of methods patched onto a
class.

A *messenger* renders one recorded outcome for reports. It receives the report
key (possibly ``!``-prefixed), the subject and the target.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeAlias

from chk.domain.errors import DuplicateMatcherError, MockUsageError
from chk.domain.formatting import format_value
from chk.domain.mock import MockFunction, is_mock_function

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation

MatcherFn: TypeAlias = Callable[..., Any]
Messenger: TypeAlias = Callable[[str, Any, Any], str]

__all__ = [
    "MatcherFn",
    "MatcherRegistry",
    "Messenger",
    "binary",
    "require_mock",
    "unary",
]


def binary(key: str, subject: Any, target: Any) -> str:
    """``<subject> <key> <target>``"""
    return f"{format_value(subject)} {key} {format_value(target)}"


def unary(key: str, subject: Any, target: Any) -> str:  # pylint: disable=unused-argument
    """``<subject> <key>`` for matchers without a meaningful target."""
    return f"{format_value(subject)} {key}"


class MatcherRegistry:
    """Name -> matcher mapping plus report-key -> messenger mapping."""

    def __init__(self) -> None:
        self._matchers: dict[str, MatcherFn] = {}
        self._messengers: dict[str, Messenger] = {}

    # --- Registration ---

    def add(
        self,
        names: str | Iterable[str],
        func: MatcherFn,
        *,
        messenger: Messenger | None = None,
        keys: Iterable[str] = (),
        replace: bool = False,
    ) -> MatcherFn:
        """Register *func* under every name in *names*.

        Args:
            names: One name or several aliases.
            func: The matcher implementation.
            messenger: Renderer for the report keys this matcher records.
            keys: Report keys rendered by *messenger*; defaults to *names*.
            replace: Allow overriding an existing registration.

        Returns:
            The registered function, so ``add`` can back a decorator.

        Raises:
            DuplicateMatcherError: If a name is taken and *replace* is False.
        """
        aliases = (names,) if isinstance(names, str) else tuple(names)
        for name in aliases:
            if name in self._matchers and not replace:
                raise DuplicateMatcherError(name)
        for name in aliases:
            self._matchers[name] = func
        if messenger is not None:
            for key in tuple(keys) or aliases:
                self._messengers[key] = messenger
        return func

    def register(
        self, *names: str, messenger: Messenger | None = None, keys: Iterable[str] = ()
    ) -> Callable[[MatcherFn], MatcherFn]:
        """Decorator form of :meth:`add`."""

        def decorator(func: MatcherFn) -> MatcherFn:
            return self.add(names or (func.__name__,), func, messenger=messenger, keys=keys)

        return decorator

    # --- Lookup ---

    def get(self, name: str) -> MatcherFn | None:
        """Return the matcher registered under *name*, if any."""
        return self._matchers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._matchers

    def names(self) -> list[str]:
        """All registered names and aliases."""
        return sorted(self._matchers)

    def messenger_for(self, key: str) -> Messenger:
        """Return the messenger for a report key, ignoring a negation prefix."""
        if key in self._messengers:
            return self._messengers[key]
        return self._messengers.get(key.removeprefix("!"), binary)

    def copy(self) -> MatcherRegistry:
        """Independent copy, for adding project-specific matchers."""
        clone = MatcherRegistry()
        clone._matchers = dict(self._matchers)  # pylint: disable=protected-access
        clone._messengers = dict(self._messengers)  # pylint: disable=protected-access
        return clone


def require_mock(expectation: Expectation, matcher: str) -> MockFunction:
    """Return the subject if it is a mock, else raise MockUsageError."""
    if not is_mock_function(expectation.subject):
        raise MockUsageError(matcher)
    return expectation.subject
