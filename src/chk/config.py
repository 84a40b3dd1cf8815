"""Configuration for chk.

Settings come from ``CHK_*`` environment variables; CLI options override them.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

__all__ = ["InvalidSettingError", "Settings"]

DEFAULT_SNAPSHOT_DIR = ".snapshots"  # pragma: no mutate

ENV_SNAPSHOT_DIR = "CHK_SNAPSHOT_DIR"  # pragma: no mutate
ENV_SNAPSHOT_URL = "CHK_SNAPSHOT_URL"  # pragma: no mutate
ENV_TIMEOUT = "CHK_TIMEOUT"  # pragma: no mutate
ENV_INTERACTIVE = "CHK_INTERACTIVE"  # pragma: no mutate

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class InvalidSettingError(Exception):
    """Raised when an environment variable holds an unusable value.

    Attributes:
        name (str): The variable name.
        value (str): The raw value.
    """

    def __init__(self, name: str, value: str, expected: str):
        super().__init__(f"{name}={value!r} is invalid: expected {expected}.")
        self.name = name
        self.value = value


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise InvalidSettingError(ENV_TIMEOUT, raw, "a number of seconds") from None
    if timeout <= 0:
        raise InvalidSettingError(ENV_TIMEOUT, raw, "a positive number of seconds")
    return timeout


def _parse_bool(name: str, raw: str | None) -> bool:
    if raw is None:
        return False
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise InvalidSettingError(name, raw, "one of 1/0, true/false, yes/no, on/off")


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        snapshot_dir: Root of the local JSON snapshot store.
        snapshot_url: SQLAlchemy URL; when set the SQL store replaces files.
        timeout: Seconds an awaitable test body may run; None waits forever.
        interactive: Prompt on snapshot mismatches.
    """

    snapshot_dir: Path = Path(DEFAULT_SNAPSHOT_DIR)
    snapshot_url: str | None = None
    timeout: float | None = None
    interactive: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from *environ* (``os.environ`` by default).

        Raises:
            InvalidSettingError: If a variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        return cls(
            snapshot_dir=Path(env.get(ENV_SNAPSHOT_DIR) or DEFAULT_SNAPSHOT_DIR),
            snapshot_url=env.get(ENV_SNAPSHOT_URL) or None,
            timeout=_parse_timeout(env.get(ENV_TIMEOUT)),
            interactive=_parse_bool(ENV_INTERACTIVE, env.get(ENV_INTERACTIVE)),
        )

    def override(self, **changes: Any) -> Settings:
        """Copy with every non-None keyword applied (CLI options)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
