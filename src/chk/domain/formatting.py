"""Value formatting for report lines."""

from __future__ import annotations

import reprlib
from typing import Any

_repr = reprlib.Repr()
_repr.maxstring = 120
_repr.maxother = 120
_repr.maxlist = 12
_repr.maxdict = 12
_repr.maxlevel = 4


def format_value(value: Any) -> str:
    """Render *value* for a report line.

    Strings are double-quoted, callables collapse to ``function`` (or the mock's
    name), everything else goes through a size-limited ``repr``.
    """
    if isinstance(value, str):
        return '"' + _repr.repr(value)[1:-1] + '"'
    if getattr(value, "is_mock_function", False) is True:
        return f"fn({value.get_mock_name()})"
    if callable(value) and not isinstance(value, type):
        return "function"
    return _repr.repr(value)
