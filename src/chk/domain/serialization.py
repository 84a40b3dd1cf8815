"""Snapshot serialization and diff helpers.

Props are converted to a JSON-safe structure before they are stored or
compared, so the comparison is structural rather than a raw string diff:

- ``datetime``/``date`` -> ``{"__date__": "<iso>"}``
- callables             -> ``{"__function__": "[Function: <name>]"}``
- tuples and sets       -> lists (sets sorted by ``repr`` for stability)
- dataclasses           -> dicts of their fields
- enums                 -> their value
- other objects         -> ``{"__repr__": repr(obj)}``

Rendered output is normalized by collapsing whitespace.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import difflib
import enum
import json
import re
from collections.abc import Mapping
from typing import Any

DATE_KEY = "__date__"  # pragma: no mutate
FUNCTION_KEY = "__function__"  # pragma: no mutate
REPR_KEY = "__repr__"  # pragma: no mutate

_WHITESPACE = re.compile(r"\s+")


def serialize_props(value: Any) -> Any:  # pylint: disable=too-many-return-statements
    """Convert *value* into a JSON-safe structure (see module docstring)."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (dt.datetime, dt.date)):
        return {DATE_KEY: value.isoformat()}
    if isinstance(value, enum.Enum):
        return serialize_props(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: serialize_props(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return {str(k): serialize_props(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_props(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return [serialize_props(v) for v in sorted(value, key=repr)]
    if callable(value):
        name = getattr(value, "__name__", "") or "anonymous"
        return {FUNCTION_KEY: f"[Function: {name}]"}
    return {REPR_KEY: repr(value)}


def deserialize_props(value: Any) -> Any:
    """Reverse the date encoding of :func:`serialize_props`; other markers stay as-is."""
    if isinstance(value, list):
        return [deserialize_props(v) for v in value]
    if isinstance(value, dict):
        if set(value) == {DATE_KEY}:
            text = value[DATE_KEY]
            if "T" in text:
                return dt.datetime.fromisoformat(text)
            return dt.date.fromisoformat(text)
        return {k: deserialize_props(v) for k, v in value.items()}
    return value


def serialize_output(output: Any) -> str:
    """Collapse runs of whitespace and trim the rendered output."""
    return _WHITESPACE.sub(" ", str(output)).strip()


def dumps(value: Any) -> str:
    """Stable, human-readable JSON used for storage and props diffs."""
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False)


def char_diff(expected: str, received: str) -> str:
    """Character-level diff: ``[-removed-]`` and ``{+added+}`` around changes."""
    matcher = difflib.SequenceMatcher(a=expected, b=received, autojunk=False)
    parts: list[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            parts.append(expected[i1:i2])
            continue
        if tag in ("delete", "replace"):
            parts.append(f"[-{expected[i1:i2]}-]")
        if tag in ("insert", "replace"):
            parts.append(f"{{+{received[j1:j2]}+}}")
    return "".join(parts)


def props_diff(expected: Any, received: Any) -> str:
    """Unified diff of the pretty JSON of two serialized props."""
    return "\n".join(
        difflib.unified_diff(
            dumps(expected).splitlines(),
            dumps(received).splitlines(),
            fromfile="snapshot",
            tofile="received",
            lineterm="",
        )
    )
