"""Expectation nodes.

An :class:`Expectation` wraps one subject and records an :class:`Outcome` for
every matcher applied to it. Matchers are looked up in a
:class:`~chk.domain.matchers.registry.MatcherRegistry` at call time, either as
attributes (``e.to_equal(2)``) or by item for operator aliases (``e["=="](2)``).

Negation is a toggle: every access to :attr:`Expectation.not_` flips it, and
:meth:`Expectation.process` inverts boolean results and prefixes the report key
with ``!`` while it is set. Outcomes whose target is (or contains) the
``anything()`` marker are inverted as well.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from chk.domain.callsite import CallSite, CallSiteCapture, capture_call_site
from chk.domain.equality import is_anything
from chk.domain.errors import UnknownMatcherError

if TYPE_CHECKING:
    from chk.domain.matchers.registry import MatcherRegistry
    from chk.service_layer.snapshots import SnapshotSession

logger = logging.getLogger(__name__)

__all__ = ["Expectation", "Outcome", "ResultType"]

ResultType: TypeAlias = bool | Literal["info", "warn"]


@dataclass(slots=True)
class Outcome:
    """One recorded result of applying a matcher ("messenger").

    Attributes:
        key: Report key, ``!``-prefixed when recorded under negation.
        result: True/False, or ``"info"``/``"warn"`` which never fail a node.
        subject: The value under test when the matcher ran.
        target: The matcher argument.
        location: Where the matcher was called.
        detail: Optional extra text for the report (e.g. a diff).
    """

    key: str
    result: ResultType
    subject: Any
    target: Any
    location: CallSite
    detail: str | None = None

    @property
    def passed(self) -> bool:
        """False only for a failing boolean result."""
        return self.result is not False

    @property
    def negated(self) -> bool:
        """True when the outcome was recorded under ``not_``."""
        return self.key.startswith("!")


class Expectation:
    """Assertion object for a single subject."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        subject: Any,
        title: str | None = None,
        *,
        registry: MatcherRegistry | None = None,
        snapshots: SnapshotSession | None = None,
        capture: CallSiteCapture = capture_call_site,
    ) -> None:
        if registry is None:
            # pylint: disable=import-outside-toplevel
            from chk.domain.matchers import default_registry

            registry = default_registry()
        self.subject = subject
        self.title = title
        self.outcomes: list[Outcome] = []
        self.resolved: bool | None = None
        self.rejected: bool | None = None
        self.snapshots = snapshots
        self._not = False
        self._pending: list[Coroutine[Any, Any, Any]] = []
        self._registry = registry
        self._capture = capture
        self.location = capture()

    # --- Dispatch ---

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._bind(name)

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._bind(name)

    def _bind(self, name: str) -> Callable[..., Any]:
        matcher = self._registry.get(name)
        if matcher is None:
            raise UnknownMatcherError(name)

        def call(*args: Any, **kwargs: Any) -> Any:
            result = matcher(self, *args, **kwargs)
            if inspect.iscoroutine(result):
                self._pending.append(result)
            return result

        return call

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._registry.names()))

    # --- Negation ---

    @property
    def not_(self) -> Expectation:
        """Toggle negation and return self (``e.not_.not_`` restores polarity)."""
        self._not = not self._not
        return self

    @property
    def negated(self) -> bool:
        """Current state of the negation toggle."""
        return self._not

    # --- Recording ---

    def process(
        self,
        key: str,
        result: ResultType,
        subject: Any,
        target: Any,
        *,
        detail: str | None = None,
    ) -> Expectation:
        """Append an outcome, applying negation, and return self for chaining.

        Args:
            key: Matcher report key.
            result: Raw matcher result.
            subject: Value under test.
            target: Matcher argument.
            detail: Optional report detail.

        Returns:
            Expectation: ``self``.
        """
        if isinstance(result, bool) and (self._not or is_anything(target)):
            result = not result
        if self._not:
            key = "!" + key
        outcome = Outcome(key, result, subject, target, self._capture(), detail)
        self.outcomes.append(outcome)
        logger.debug("%s %s -> %s", self.title or "expect", key, result)
        return self

    @property
    def result(self) -> bool:
        """True unless some outcome failed ("info"/"warn" never fail)."""
        return all(o.passed for o in self.outcomes)

    async def settle(self) -> None:
        """Await matcher coroutines that were created but never started."""
        pending, self._pending = self._pending, []
        for coro in pending:
            if inspect.getcoroutinestate(coro) == inspect.CORO_CREATED:
                await coro

    # --- Async unwrap ---

    @property
    def resolves(self) -> Coroutine[Any, Any, Expectation]:
        """Await the subject and replace it with the resolved value.

        On rejection the subject is left untouched and ``resolved`` is False.
        """
        return self._resolve()

    @property
    def rejects(self) -> Coroutine[Any, Any, Expectation]:
        """Await the subject and replace it with the raised exception.

        When the subject resolves instead, it is replaced with the value and
        ``rejected`` is False.
        """
        return self._reject()

    async def _resolve(self) -> Expectation:
        self.resolved = False
        try:
            self.subject = await self.subject
        except Exception:  # pylint: disable=broad-exception-caught
            logger.debug("Subject of %s rejected while resolving", self.title or "expect")
            return self
        self.resolved = True
        return self

    async def _reject(self) -> Expectation:
        self.rejected = False
        try:
            self.subject = await self.subject
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self.rejected = True
            self.subject = exc
        return self

    # --- Reporting ---

    def describe(self, outcome: Outcome) -> str:
        """Render *outcome* through the messenger registered for its key."""
        text = self._registry.messenger_for(outcome.key)(
            outcome.key, outcome.subject, outcome.target
        )
        return f"{self.title} {text}" if self.title else text

    def __repr__(self) -> str:
        return f"<Expectation {self.title or self.subject!r} outcomes={len(self.outcomes)}>"
