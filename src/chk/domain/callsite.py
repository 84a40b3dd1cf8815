"""Call-site capture for tests and assertions.

Nodes and expectations remember *where* they were declared so reports can point
back at the source line. Rather than slicing a formatted stack at fixed offsets,
capture walks the live frame chain and returns the first frame that lives outside
the ``chk`` package. The capture function is injected, so tests and embedders can
substitute their own.
"""

from __future__ import annotations

import inspect
import os
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

PACKAGE_ROOT = str(Path(__file__).resolve().parents[1])


@dataclass(frozen=True, slots=True)
class CallSite:
    """Source position of a declaration.

    Attributes:
        filename: Path of the source file as reported by the interpreter.
        lineno: 1-based line number.
        function: Name of the enclosing function (``<module>`` at top level).
    """

    filename: str
    lineno: int
    function: str

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"

    @property
    def basename(self) -> str:
        """File name without its directory."""
        return Path(self.filename).name


UNKNOWN_SITE = CallSite("<unknown>", 0, "<unknown>")

CallSiteCapture = Callable[[], CallSite]


@lru_cache(maxsize=512)
def _is_internal(filename: str) -> bool:
    try:
        resolved = str(Path(filename).resolve())
    except (OSError, ValueError):
        return False
    return resolved.startswith(PACKAGE_ROOT + os.sep)


def capture_call_site() -> CallSite:
    """Return the nearest caller frame outside the chk package.

    Returns:
        CallSite: The first external frame, or ``UNKNOWN_SITE`` when every frame
        on the stack belongs to chk.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None:
            filename = frame.f_code.co_filename
            if not filename.startswith("<frozen") and not _is_internal(filename):
                return CallSite(filename, frame.f_lineno, frame.f_code.co_name)
            frame = frame.f_back
    finally:
        del frame
    return UNKNOWN_SITE


def fixed_call_site(filename: str, lineno: int, function: str = "<test>") -> CallSiteCapture:
    """Build a capture function that always returns the same site.

    Useful when the caller already knows the position (generated tests, embedders).
    """
    site = CallSite(filename, lineno, function)
    return lambda: site
