"""Mock functions and spies.

``fn()`` returns a :class:`MockFunction`: a callable that records every
invocation and resolves its return value from, in order of priority,

1. the queue of one-shot implementations (``mock_implementation_once``,
   ``mock_resolved_value_once``, ``mock_rejected_value_once``),
2. the queue of one-shot return values (``mock_return_value_once``),
3. the persistent base implementation,
4. ``None``.

Each call appends a :class:`Call` to ``mock.calls`` and exactly one
:class:`MockResult` to ``mock.results`` (``"throw"`` when resolution raised, in
which case the exception is re-raised to the caller). The constructor path
(:meth:`MockFunction.new`) records the call and the created instance but no
result, and leaves the one-shot queues untouched.

Resolved and rejected values are wrapped in :class:`Settled`, an awaitable that
can be awaited any number of times, so both the code under test and the
``to_have_resolved*`` matchers can consume it.

``spy_on(obj, name)`` replaces an attribute with a call-through mock and
remembers how to put the original back on ``mock_restore()``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass, field
from types import MethodType, SimpleNamespace
from typing import Any, Literal, NamedTuple

from chk.domain.errors import RejectedValueError, SpyError

logger = logging.getLogger(__name__)

__all__ = [
    "Call",
    "MockFunction",
    "MockResult",
    "MockState",
    "Settled",
    "fn",
    "is_mock_function",
    "spy_on",
]

_NO_THIS = object()


def _return_this(*_args: Any, **_kwargs: Any) -> None:
    """Placeholder implementation installed by ``mock_return_this``."""


# ============================================================================
#                               Records
# ============================================================================


class Call(NamedTuple):
    """Arguments of one recorded invocation."""

    args: tuple[Any, ...]
    kwargs: dict[str, Any]


@dataclass(frozen=True, slots=True)
class MockResult:
    """Outcome of one recorded invocation.

    Attributes:
        type: ``"return"`` when the call produced a value, ``"throw"`` when it raised.
        value: The returned value or the raised exception.
    """

    type: Literal["return", "throw"]
    value: Any


@dataclass
class MockState:
    """Tracking state exposed as ``mock_function.mock``."""

    name: str = ""
    calls: list[Call] = field(default_factory=list)
    instances: list[Any] = field(default_factory=list)
    results: list[MockResult] = field(default_factory=list)

    @property
    def last_call(self) -> Call | None:
        """The most recent call, or None if the mock was never called."""
        return self.calls[-1] if self.calls else None


class Settled:
    """An already-settled awaitable that can be awaited repeatedly."""

    __slots__ = ("_value", "_error")

    def __init__(self, value: Any = None, error: BaseException | None = None) -> None:
        self._value = value
        self._error = error

    @property
    def rejected(self) -> bool:
        """True when awaiting raises."""
        return self._error is not None

    def __await__(self) -> Generator[Any, None, Any]:
        if self._error is not None:
            raise self._error
        return self._value
        yield  # pylint: disable=unreachable

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Settled(rejected={self._error!r})"
        return f"Settled({self._value!r})"


def _as_error(value: Any) -> BaseException:
    return value if isinstance(value, BaseException) else RejectedValueError(value)


def _schedule(result: Any) -> Any:
    """Turn a coroutine into a task when a loop is running so it can be awaited twice."""
    if not inspect.iscoroutine(result):
        return result
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return result
    return loop.create_task(result)


# ============================================================================
#                               MockFunction
# ============================================================================


class MockFunction:  # pylint: disable=too-many-public-methods
    """Callable call-recorder with queued one-shot behaviours."""

    is_mock_function = True

    def __init__(
        self, implementation: Callable[..., Any] | None = None, *, name: str = ""
    ) -> None:
        self.mock = MockState(name=name)
        self._implementation = implementation
        self._implementation_once: deque[Callable[..., Any]] = deque()
        self._return_value_once: deque[Any] = deque()
        self._restore: Callable[[], None] | None = None

    # --- Invocation ---

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._invoke(_NO_THIS, args, kwargs)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return MethodType(_BoundCall(self), instance)

    def _invoke(self, this: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        self.mock.calls.append(Call(args, kwargs))
        try:
            if self._implementation_once:
                result = self._call(self._implementation_once.popleft(), this, args, kwargs)
            elif self._return_value_once:
                result = self._return_value_once.popleft()
            elif self._implementation is not None:
                result = self._call(self._implementation, this, args, kwargs)
            else:
                result = None
        except Exception as exc:
            self.mock.results.append(MockResult("throw", exc))
            raise
        result = _schedule(result)
        self.mock.results.append(MockResult("return", result))
        return result

    def _call(
        self,
        implementation: Callable[..., Any],
        this: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        if implementation is _return_this:
            return self if this is _NO_THIS else this
        if this is _NO_THIS:
            return implementation(*args, **kwargs)
        return implementation(this, *args, **kwargs)

    def new(self, *args: Any, **kwargs: Any) -> Any:
        """Constructor path: record the call and a fresh instance.

        The base implementation, if any, runs with the instance as its first
        argument. No result is recorded and the one-shot queues are untouched.
        """
        instance = SimpleNamespace()
        self.mock.instances.append(instance)
        self.mock.calls.append(Call(args, kwargs))
        if self._implementation is not None:
            self._implementation(instance, *args, **kwargs)
        return instance

    # --- Naming ---

    @property
    def __name__(self) -> str:  # type: ignore[override]
        return self.mock.name or "mock"

    def mock_name(self, name: str) -> MockFunction:
        """Set the name used in reports."""
        self.mock.name = name
        return self

    def get_mock_name(self) -> str:
        """Return the mock's name (``"mock"`` when unnamed)."""
        return self.__name__

    # --- Implementations ---

    def get_mock_implementation(self) -> Callable[..., Any] | None:
        """Return the persistent base implementation."""
        return self._implementation

    def mock_implementation(self, implementation: Callable[..., Any]) -> MockFunction:
        """Replace the persistent base implementation."""
        self._implementation = implementation
        return self

    def mock_implementation_once(self, implementation: Callable[..., Any]) -> MockFunction:
        """Queue an implementation for the next unserved call."""
        self._implementation_once.append(implementation)
        return self

    def mock_return_this(self) -> MockFunction:
        """Make calls return the bound instance (or the mock itself when unbound)."""
        self._implementation = _return_this
        return self

    def mock_return_value(self, value: Any) -> MockFunction:
        """Make every call return *value*."""
        self._implementation = lambda *_a, **_k: value
        return self

    def mock_return_value_once(self, value: Any) -> MockFunction:
        """Queue *value* as the return value of the next unserved call."""
        self._return_value_once.append(value)
        return self

    def mock_resolved_value(self, value: Any) -> MockFunction:
        """Make every call return an awaitable resolving to *value*."""
        self._implementation = lambda *_a, **_k: Settled(value)
        return self

    def mock_resolved_value_once(self, value: Any) -> MockFunction:
        """Queue an awaitable resolving to *value* (on the implementation queue)."""
        self._implementation_once.append(lambda *_a, **_k: Settled(value))
        return self

    def mock_rejected_value(self, error: Any) -> MockFunction:
        """Make every call return an awaitable raising *error*."""
        exc = _as_error(error)
        self._implementation = lambda *_a, **_k: Settled(error=exc)
        return self

    def mock_rejected_value_once(self, error: Any) -> MockFunction:
        """Queue an awaitable raising *error* (on the implementation queue)."""
        exc = _as_error(error)
        self._implementation_once.append(lambda *_a, **_k: Settled(error=exc))
        return self

    def with_implementation(
        self, implementation: Callable[..., Any], callback: Callable[[], Any]
    ) -> Any:
        """Run *callback* with *implementation* temporarily installed.

        The previous base implementation is restored when *callback* returns or
        raises. When *callback* returns an awaitable, a coroutine is returned
        instead and the restore happens once that awaitable settles.

        Returns:
            Whatever *callback* returns, or a coroutine wrapping its awaitable.
        """
        previous = self._implementation
        self._implementation = implementation
        try:
            result = callback()
        except BaseException:
            self._implementation = previous
            raise
        if not inspect.isawaitable(result):
            self._implementation = previous
            return result
        return self._restore_after(result, previous)

    async def _restore_after(
        self, pending: Awaitable[Any], previous: Callable[..., Any] | None
    ) -> Any:
        try:
            return await pending
        finally:
            self._implementation = previous

    # --- Resetting ---

    def mock_clear(self) -> MockFunction:
        """Forget calls, instances, results and queued one-shot behaviours."""
        self.mock.calls.clear()
        self.mock.instances.clear()
        self.mock.results.clear()
        self._implementation_once.clear()
        self._return_value_once.clear()
        return self

    def mock_reset(self) -> MockFunction:
        """``mock_clear()`` and drop the base implementation."""
        self.mock_clear()
        self._implementation = None
        return self

    def mock_restore(self) -> MockFunction:
        """``mock_clear()`` and, for spies, put the original attribute back."""
        self.mock_clear()
        if self._restore is not None:
            restore, self._restore = self._restore, None
            restore()
            logger.debug("Restored spied attribute for %s", self.get_mock_name())
        return self

    def __repr__(self) -> str:
        return f"<MockFunction {self.get_mock_name()} calls={len(self.mock.calls)}>"


class _BoundCall:  # pylint: disable=too-few-public-methods
    """Binds a MockFunction to an instance without recording the instance as an argument."""

    __slots__ = ("_mock",)

    def __init__(self, mock: MockFunction) -> None:
        self._mock = mock

    def __call__(self, this: Any, *args: Any, **kwargs: Any) -> Any:
        return self._mock._invoke(this, args, kwargs)  # pylint: disable=protected-access


# ============================================================================
#                               Factories
# ============================================================================


def fn(implementation: Callable[..., Any] | None = None, *, name: str = "") -> MockFunction:
    """Create a mock function, optionally with a base implementation."""
    return MockFunction(implementation, name=name)


def is_mock_function(value: Any) -> bool:
    """Return True if *value* is a mock created by ``fn()`` or ``spy_on()``."""
    return isinstance(value, MockFunction)


def spy_on(
    obj: Any, name: str, access: Literal["get", "set"] | None = None
) -> MockFunction:
    """Replace ``obj.<name>`` with a call-through mock.

    Args:
        obj: Object (instance, class or module) owning the attribute.
        name: Attribute name to spy on.
        access: ``None`` for a callable attribute, ``"get"`` or ``"set"`` to spy on
            one side of a property.

    Returns:
        MockFunction: The installed spy. ``mock_restore()`` reinstates the original.

    Raises:
        SpyError: If the attribute is missing, not callable, or not a property
            when *access* is given.
    """
    if access is None:
        return _spy_on_callable(obj, name)
    return _spy_on_property(obj, name, access)


def _spy_on_callable(obj: Any, name: str) -> MockFunction:
    try:
        original = getattr(obj, name)
    except AttributeError as e:
        raise SpyError(name, "attribute does not exist") from e
    if not callable(original):
        raise SpyError(name, "attribute is not callable")

    own = vars(obj) if hasattr(obj, "__dict__") else {}
    had_own = name in own
    raw = own.get(name)

    spy = fn(original, name=name)
    static = inspect.getattr_static(obj, name, None)
    if isinstance(obj, type) and isinstance(static, (staticmethod, classmethod)):
        # already bound (classmethod) or unbound (staticmethod); never rebind
        setattr(obj, name, staticmethod(spy))
    else:
        setattr(obj, name, spy)

    def restore() -> None:
        if had_own:
            setattr(obj, name, raw)
        else:
            delattr(obj, name)

    spy._restore = restore  # pylint: disable=protected-access
    return spy


def _spy_on_property(obj: Any, name: str, access: Literal["get", "set"]) -> MockFunction:
    owner = obj if isinstance(obj, type) else type(obj)
    descriptor = inspect.getattr_static(owner, name, None)
    if not isinstance(descriptor, property):
        raise SpyError(name, "attribute is not a property")
    accessor = descriptor.fget if access == "get" else descriptor.fset
    if accessor is None:
        raise SpyError(name, f"property has no {access}ter")

    had_own = name in vars(owner)
    spy = fn(accessor, name=name)
    if access == "get":
        replacement = property(spy, descriptor.fset, descriptor.fdel, descriptor.__doc__)
    else:
        replacement = property(descriptor.fget, spy, descriptor.fdel, descriptor.__doc__)
    setattr(owner, name, replacement)

    def restore() -> None:
        if had_own:
            setattr(owner, name, descriptor)
        else:
            delattr(owner, name)

    spy._restore = restore  # pylint: disable=protected-access
    return spy
