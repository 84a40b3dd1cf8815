"""Fixtures and test helpers for end-to-end CLI tests.

Provides a test-only `log-demo` Click command that emits structured log
messages, fixtures to register that command, obtain a CliRunner, and run
tests within an isolated filesystem, plus a helper that writes chk test
files into that filesystem.
"""

import logging
from pathlib import Path
from textwrap import dedent

import click
import pytest
from click.testing import CliRunner

from chk.entrypoints.cli.main import chk

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests.

    Emits DEBUG/INFO/WARNING/ERROR/CRITICAL messages on the 'chk.demo'
    logger and additional messages on a 'some.thirdparty' logger to exercise
    logger-level filtering and flight-recorder behavior.
    """
    logger = logging.getLogger("chk.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its internal sections.

    Ensures the test-only command is removed from the group and any internal
    registries Click may use so cleanup is robust across Click versions.
    """
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test.

    Adds the command to the top-level `chk` group before the test and
    removes it afterwards to avoid leaking test commands between tests.
    """
    chk.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(chk, "log-demo")


# 2) Fixture for a runner
@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


# 3) Fixture for an isolated filesystem per test
@pytest.fixture
def fs(runner):
    """Provide an isolated filesystem context for tests using CliRunner.

    Uses runner.isolated_filesystem() to ensure filesystem side-effects are
    confined to the test.
    """
    with runner.isolated_filesystem():
        yield


# 4) Helper to write chk test files
@pytest.fixture
def write_checks(fs):
    """Return a function that writes a dedented chk test file and returns its path."""

    def write(source: str, name: str = "checks.py") -> Path:
        path = Path(name)
        path.write_text(dedent(source).lstrip(), encoding="utf-8")
        return path

    return write
