"""Automatic module mocks and a registry of mocked modules.

``create_mock_from_module`` walks a module (or any object) and builds a
look-alike where every function is a named ``fn()`` mock, every class is a
subclass-free stand-in whose methods are mocks, nested mappings and plain
objects are mocked recursively, sequences become empty and primitives are kept.

``ModuleMockRegistry`` maps import names to mocked modules so test bodies can
``require()`` a dependency and receive the mock instead of the real module.
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
import logging
import types
from collections.abc import Callable, Mapping
from typing import Any

from chk.domain.mock import fn

logger = logging.getLogger(__name__)

__all__ = ["ModuleMockRegistry", "create_mock_from_module", "module_mocks"]

_PRIMITIVES = (str, bytes, int, float, complex, bool, type(None))


def create_mock_from_module(module: Any) -> Any:
    """Return an automocked copy of *module*.

    Args:
        module: A module object, or any object whose public attributes should be
            mocked.

    Returns:
        A ``types.ModuleType`` when *module* is a module, otherwise the mocked
        value for *module* itself.
    """
    return _automock(module, seen={})


def _public_items(obj: Any) -> list[tuple[str, Any]]:
    names = getattr(obj, "__all__", None)
    if names is None:
        names = [n for n in dir(obj) if not n.startswith("_")]
    return [(n, getattr(obj, n)) for n in names if hasattr(obj, n)]


def _automock(value: Any, seen: dict[int, Any]) -> Any:  # pylint: disable=too-many-return-statements
    if id(value) in seen:
        return seen[id(value)]
    if isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, types.ModuleType):
        mocked = types.ModuleType(value.__name__, value.__doc__)
        seen[id(value)] = mocked
        for name, attr in _public_items(value):
            if isinstance(attr, types.ModuleType) and not attr.__name__.startswith(
                value.__name__ + "."
            ):
                # imported dependency, not part of this module's surface
                setattr(mocked, name, attr)
                continue
            setattr(mocked, name, _automock(attr, seen))
        return mocked
    if inspect.isclass(value):
        return _mock_class(value, seen)
    if callable(value):
        return fn(name=getattr(value, "__name__", ""))
    if isinstance(value, Mapping):
        mapping: dict[Any, Any] = {}
        seen[id(value)] = mapping
        mapping.update({k: _automock(v, seen) for k, v in value.items()})
        return mapping
    if isinstance(value, (list, tuple, set, frozenset)):
        return type(value)()
    if hasattr(value, "__dict__"):
        mocked_obj = types.SimpleNamespace()
        seen[id(value)] = mocked_obj
        for name, attr in vars(value).items():
            if not name.startswith("_"):
                setattr(mocked_obj, name, _automock(attr, seen))
        return mocked_obj
    return value


def _mock_class(cls: type, seen: dict[int, Any]) -> type:
    namespace: dict[str, Any] = {"__module__": cls.__module__, "__doc__": cls.__doc__}
    for klass in reversed(cls.__mro__[:-1]):
        for name, attr in vars(klass).items():
            if name.startswith("_"):
                continue
            if isinstance(attr, (staticmethod, classmethod)):
                namespace[name] = staticmethod(fn(name=name))
            elif isinstance(attr, property):
                namespace[name] = property(fn(name=name))
            elif inspect.isfunction(attr):
                namespace[name] = fn(name=name)
            else:
                namespace[name] = _automock(attr, seen)
    mocked = type(cls.__name__, (), namespace)
    seen[id(cls)] = mocked
    return mocked


class ModuleMockRegistry:
    """Registry of mocked modules keyed by import name."""

    def __init__(self) -> None:
        self._mocks: dict[str, Any] = {}

    def mock(self, name: str, factory: Callable[[], Any] | None = None) -> Any:
        """Register a mock for module *name*.

        Args:
            name: Import name (``"package.module"``).
            factory: Builds the replacement. When omitted the real module is
                imported and automocked.

        Returns:
            The registered replacement.
        """
        replacement = (
            factory()
            if factory is not None
            else create_mock_from_module(importlib.import_module(name))
        )
        self._mocks[name] = replacement
        logger.debug("Registered module mock for %s", name)
        return replacement

    def unmock(self, name: str) -> None:
        """Forget the mock for *name*; later lookups import the real module."""
        self._mocks.pop(name, None)

    def clear(self) -> None:
        """Forget every registered mock."""
        self._mocks.clear()

    def is_mocked(self, name: str) -> bool:
        """Return True if *name* has a registered mock."""
        return name in self._mocks

    def require(self, name: str) -> Any:
        """Return the mock for *name*, or the real module when none is registered."""
        if name in self._mocks:
            return self._mocks[name]
        return importlib.import_module(name)

    async def import_(self, name: str) -> Any:
        """Asynchronous ``require``; real imports run in a worker thread."""
        if name in self._mocks:
            return self._mocks[name]
        return await asyncio.to_thread(importlib.import_module, name)


module_mocks = ModuleMockRegistry()
