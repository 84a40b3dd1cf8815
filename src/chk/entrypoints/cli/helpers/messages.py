"""Terminal message helpers.

Lines go to stderr so stdout stays usable for reports and ``--json``. Emoji
glyphs fall back to ASCII when stderr cannot encode them.
"""

import click


def _glyph(emoji: str, fallback: str) -> str:
    """Return *emoji* if stderr can encode it, else *fallback*."""
    encoding = getattr(click.get_text_stream("stderr"), "encoding", None) or "ascii"
    try:
        emoji.encode(encoding)
    except (UnicodeEncodeError, LookupError):
        return fallback
    return emoji


def caution_glyph() -> str:
    return _glyph("⚠️", "[!]")  # pragma: no mutate


def success_glyph() -> str:
    return _glyph("✅", "[OK]")  # pragma: no mutate


def error_glyph() -> str:
    return _glyph("❌", "[X]")  # pragma: no mutate


def warn(msg: str) -> None:
    """Yellow warning line on stderr."""
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Green success line on stderr."""
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Red error line on stderr."""
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)
