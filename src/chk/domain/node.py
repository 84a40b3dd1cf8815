"""Test nodes.

A :class:`TestNode` owns a body function and the children that body registers
while it runs: :class:`~chk.domain.expectation.Expectation` objects (through
``ctx.expect``) and nested test nodes (through ``ctx.test``). Running a node
executes its body, then every child test node, either all at once
(``asyncio.gather``) or one after another in interactive mode.

A body exception is caught at the node that ran it. It is logged, stored on
``node.error`` and shown in the report; the parent and siblings carry on.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from chk.domain.automock import ModuleMockRegistry, module_mocks
from chk.domain.callsite import CallSite, CallSiteCapture, capture_call_site
from chk.domain.expectation import Expectation
from chk.domain.formatting import format_value
from chk.domain.matchers import default_registry
from chk.domain.report import ReportLine, ReportOptions
from chk.domain.serialization import serialize_props

if TYPE_CHECKING:
    from chk.domain.matchers.registry import MatcherRegistry
    from chk.service_layer.snapshots import SnapshotSession

logger = logging.getLogger(__name__)

__all__ = [
    "TestContext",
    "TestEnvironment",
    "TestNode",
    "TestOptions",
    "current_context",
]

Body = Callable[..., Any]

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


@dataclass(frozen=True, slots=True)
class TestOptions:
    """Per-node options.

    Attributes:
        prefix: Text placed before the formatted subject in the title.
        suffix: Text placed after it.
        formatter: Turns the subject into title text.
        no_location: Hide locations of this node's passing expectations.
        timeout: Seconds to wait for an awaitable body; overrides the
            environment default.
    """

    __test__ = False

    prefix: str = ""
    suffix: str = ""
    formatter: Callable[[Any], str] | None = None
    no_location: bool = False
    timeout: float | None = None


@dataclass(slots=True)
class TestEnvironment:
    """Collaborators shared by every node of one runner."""

    __test__ = False

    registry: MatcherRegistry = field(default_factory=default_registry)
    snapshots: SnapshotSession | None = None
    capture: CallSiteCapture = capture_call_site
    timeout: float | None = None
    modules: ModuleMockRegistry = field(default_factory=lambda: module_mocks)


_current: ContextVar[TestContext | None] = ContextVar("chk_test_context", default=None)


def current_context() -> TestContext | None:
    """Context of the test body running in this task, if any."""
    return _current.get()


def _coerce_options(options: TestOptions | Mapping[str, Any] | None) -> TestOptions:
    if options is None:
        return TestOptions()
    if isinstance(options, TestOptions):
        return options
    return TestOptions(**options)


def _default_formatter(subject: Any) -> str:
    if isinstance(subject, str):
        return subject
    name = getattr(subject, "__name__", None)
    if isinstance(name, str):
        return name
    return format_value(subject)


def _wants_context(body: Body) -> bool:
    try:
        params = inspect.signature(body).parameters.values()
    except (TypeError, ValueError):
        return True
    return any(p.kind in _POSITIONAL for p in params)


class TestContext:
    """What a body receives: ``expect``, ``test``, ``subject``, ``parent``.

    Also exposes ``node``, ``env`` and the module-mock aware ``require`` and
    ``import_``.
    """

    __test__ = False

    def __init__(self, node: TestNode, env: TestEnvironment) -> None:
        self.node = node
        self.env = env

    @property
    def subject(self) -> Any:
        return self.node.subject

    @property
    def parent(self) -> TestNode | None:
        return self.node.parent

    def expect(self, subject: Any, title: str | None = None) -> Expectation:
        """Create an expectation on *subject* and attach it to the running node."""
        expectation = Expectation(
            subject,
            title,
            registry=self.env.registry,
            snapshots=self.env.snapshots,
            capture=self.env.capture,
        )
        self.node.children.append(expectation)
        return expectation

    def test(
        self,
        subject: Any,
        options: TestOptions | Mapping[str, Any] | Body | None = None,
        body: Body | None = None,
    ) -> TestNode:
        """Register a child test node.

        ``options`` may be skipped (``ctx.test("title", body)``). Without a body
        the returned node can be used as a decorator.
        """
        if body is None and callable(options):
            body, options = options, None
        return self.add(TestNode(subject, options, body, env=self.env))

    def add(self, node: TestNode) -> TestNode:
        """Attach an already built node (e.g. a snapshot test) as a child."""
        node.parent = self.node
        node.env = self.env
        self.node.children.append(node)
        return node

    def require(self, name: str) -> Any:
        """Import *name*, honoring registered module mocks."""
        return self.env.modules.require(name)

    async def import_(self, name: str) -> Any:
        """Async variant of :meth:`require`."""
        return await self.env.modules.import_(name)


class TestNode:  # pylint: disable=too-many-instance-attributes
    """A test suite or case: a body plus the children it registers."""

    __test__ = False

    def __init__(  # pylint: disable=too-many-arguments
        self,
        subject: Any,
        options: TestOptions | Mapping[str, Any] | None = None,
        body: Body | None = None,
        *,
        parent: TestNode | None = None,
        env: TestEnvironment | None = None,
        location: CallSite | None = None,
    ) -> None:
        self.subject = subject
        self.options = _coerce_options(options)
        self.body = body
        self.parent = parent
        self.env = env if env is not None else TestEnvironment()
        self.children: list[TestNode | Expectation] = []
        self.error: Exception | None = None
        self.tested = 0
        self.location = location if location is not None else self.env.capture()
        self._subscribers: list[Callable[[TestNode], None]] = []

    def __call__(self, body: Body) -> TestNode:
        """Set the body; lets a bodiless node decorate a function."""
        self.body = body
        return self

    @property
    def title(self) -> str:
        formatter = self.options.formatter or _default_formatter
        parts = (self.options.prefix, formatter(self.subject), self.options.suffix)
        return " ".join(part for part in parts if part)

    # --- Execution ---

    async def test(self, interactive: bool = False) -> TestNode:
        """Run the body, then every child test node.

        Children from a previous run are discarded first, so a node can be
        re-run (snapshot tests do this after saving).

        Args:
            interactive: Run child nodes one at a time instead of concurrently.

        Returns:
            TestNode: ``self``, settled.
        """
        self.children = []
        self.error = None
        ctx = TestContext(self, self.env)
        token = _current.set(ctx)
        try:
            await self._run_body(ctx)
            for expectation in self.expectations():
                await expectation.settle()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self.error = exc
            logger.exception("Test %r raised in its body", self.title)
        finally:
            _current.reset(token)

        tests = [child for child in self.children if isinstance(child, TestNode)]
        if interactive:
            for child in tests:
                await child.test(interactive)
        else:
            await asyncio.gather(*(child.test(interactive) for child in tests))

        self.tested += 1
        for callback in list(self._subscribers):
            callback(self)
        return self

    async def _run_body(self, ctx: TestContext) -> None:
        if self.body is None:
            return
        result = self.body(ctx) if _wants_context(self.body) else self.body()
        if not inspect.isawaitable(result):
            return
        timeout = self.options.timeout
        if timeout is None:
            timeout = self.env.timeout
        async with asyncio.timeout(timeout):
            await result

    def subscribe(self, callback: Callable[[TestNode], None]) -> Callable[[], None]:
        """Call *callback* after every run; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # --- State ---

    @property
    def result(self) -> bool:
        """True iff every child passed; True with no children."""
        return all(child.result for child in self.children)

    @property
    def passed(self) -> bool:
        """Like :attr:`result`, but also False when this node or a descendant raised."""
        if self.error is not None:
            return False
        return all(
            child.passed if isinstance(child, TestNode) else child.result
            for child in self.children
        )

    def walk(self) -> Iterator[TestNode]:
        """Yield this node and all descendant test nodes, depth first."""
        yield self
        for child in self.children:
            if isinstance(child, TestNode):
                yield from child.walk()

    def expectations(self) -> list[Expectation]:
        """Direct expectation children."""
        return [child for child in self.children if isinstance(child, Expectation)]

    # --- Reporting ---

    def _show_location(self, passed: bool, options: ReportOptions) -> bool:
        if not passed:
            return True
        return not (options.no_location or self.options.no_location)

    def report(self, options: ReportOptions | None = None) -> ReportLine:
        """Build the report tree for this node.

        Args:
            options: ``head`` drops expectation lines; ``no_location`` hides
                locations of passing entries.

        Returns:
            ReportLine: Root line for this node; passing nodes are collapsed.
        """
        options = options or ReportOptions()
        status = self.passed
        line = ReportLine(
            status=status,
            text=self.title,
            location=str(self.location) if self._show_location(status, options) else None,
            detail=_describe_error(self.error),
            collapsed=status is True,
        )
        for child in self.children:
            if isinstance(child, TestNode):
                line.children.append(child.report(options))
            elif not options.head:
                line.children.extend(self._outcome_lines(child, options))
        return line

    def _outcome_lines(
        self, expectation: Expectation, options: ReportOptions
    ) -> list[ReportLine]:
        return [
            ReportLine(
                status=outcome.result,
                text=expectation.describe(outcome),
                location=(
                    str(outcome.location)
                    if self._show_location(outcome.passed, options)
                    else None
                ),
                detail=outcome.detail,
            )
            for outcome in expectation.outcomes
        ]

    def json(self) -> dict[str, Any]:
        """Plain-data view of the settled tree; does not await anything."""
        data: dict[str, Any] = {
            "result": self.passed,
            "title": self.title,
            "location": str(self.location),
            "modules": [_module_json(child) for child in self.children],
        }
        if self.error is not None:
            data["error"] = _describe_error(self.error)
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.title!r} children={len(self.children)}>"


def _describe_error(error: Exception | None) -> str | None:
    if error is None:
        return None
    return f"{type(error).__name__}: {error}"


def _module_json(child: TestNode | Expectation) -> dict[str, Any]:
    if isinstance(child, TestNode):
        data = child.json()
        return {
            "title": data["title"],
            "result": data["result"],
            "location": data["location"],
            "tests": data["modules"],
            **({"error": data["error"]} if "error" in data else {}),
        }
    return {
        "title": child.title or format_value(child.subject),
        "result": child.result,
        "expects": [
            {
                "key": outcome.key,
                "result": outcome.result,
                "subject": serialize_props(outcome.subject),
                "target": serialize_props(outcome.target),
                "location": str(outcome.location),
                "title": child.describe(outcome),
            }
            for outcome in child.outcomes
        ],
    }
