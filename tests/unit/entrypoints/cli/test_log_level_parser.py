"""Unit tests for the CLI log level parser.

These tests exercise chk.entrypoints.cli.helpers.log_level_parser.parse_log_level,
covering default behavior, override semantics, input normalization (commas/spaces),
case-insensitivity, numeric levels, and error handling for malformed input.
"""

import logging
import types

import click
import pytest

from chk.entrypoints.cli.helpers.log_level_parser import parse_log_level


def make_ctx():
    """Create a minimal Click context stub.

    The parser callback expects a Click context argument but does not use it;
    a lightweight SimpleNamespace is sufficient for testing.
    """
    return types.SimpleNamespace()


def test_empty_uses_defaults():
    """When no levels are provided, return the default library logger levels."""
    ctx = make_ctx()
    assert parse_log_level(ctx, None, ()) == {
        "sqlalchemy": logging.WARNING,
        "asyncio": logging.WARNING,
    }


def test_repeated_flags_override_order():
    """Later repeated CLI flags override earlier ones for the same logger."""
    ctx = make_ctx()
    value = ("sqlalchemy=INFO", "asyncio=ERROR", "sqlalchemy=DEBUG")
    out = parse_log_level(ctx, None, value)
    # later entries win
    assert out["sqlalchemy"] == logging.DEBUG
    assert out["asyncio"] == logging.ERROR


def test_envvar_string_with_commas_and_spaces():
    """Accept a plain string (e.g. from an env var) with commas and spaces."""
    ctx = make_ctx()
    value = "sqlalchemy=INFO,  chk.domain=WARNING asyncio=ERROR"
    out = parse_log_level(ctx, None, value)
    assert out["sqlalchemy"] == logging.INFO
    assert out["asyncio"] == logging.ERROR
    assert out["chk.domain"] == logging.WARNING


def test_case_insensitive_levels():
    """Level names should be parsed case-insensitively."""
    ctx = make_ctx()
    out = parse_log_level(ctx, None, ("sqlalchemy=info", "asyncio=WaRnInG"))
    assert out["sqlalchemy"] == logging.INFO
    assert out["asyncio"] == logging.WARNING


def test_numeric_levels():
    """Digits are taken as a numeric level."""
    out = parse_log_level(make_ctx(), None, ("chk=15",))
    assert out["chk"] == 15  # pylint: disable=magic-value-comparison


@pytest.mark.parametrize("item", ["not-a-pair", "=INFO", "  =DEBUG"])
def test_invalid_pair_raises(item):
    """Malformed NAME=LEVEL pairs should raise click.BadParameter."""
    with pytest.raises(click.BadParameter):
        parse_log_level(make_ctx(), None, (item,))


def test_invalid_level_raises():
    """Unknown level names should raise click.BadParameter."""
    with pytest.raises(click.BadParameter, match="LOUD"):
        parse_log_level(make_ctx(), None, ("sqlalchemy=LOUD",))
