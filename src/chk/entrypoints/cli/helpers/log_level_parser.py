"""Parser for ``-L NAME=LEVEL`` options.

Values may repeat (``-L sqlalchemy=INFO -L asyncio=DEBUG``) or arrive as one
comma/space separated string from ``CHK_LOGGER_LEVELS``. LEVEL is a logging
level name in any case, or a number.
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "asyncio": logging.WARNING}

_SEPARATORS = re.compile(r"[,\s]+")


def _split(value: str | list[str] | tuple[str, ...]) -> list[str]:
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in _SEPARATORS.split(chunk) if item]


def _to_level(text: str) -> int:
    text = text.strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelNamesMapping().get(text.upper())
    if level is None:
        raise click.BadParameter(f"Invalid log level: {text}")
    return level


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback: merge NAME=LEVEL items over DEFAULT_LIB_LEVELS.

    Later items win.

    Raises:
        click.BadParameter: On an item without ``=``, an empty name, or an
            unknown level.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _split(value):
        name, sep, level = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        levels[name.strip()] = _to_level(level)
    return levels
