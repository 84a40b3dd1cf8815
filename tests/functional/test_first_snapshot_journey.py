"""Functional test: a developer's first week with snapshot tests.

The story runs entirely through the CLI in an isolated filesystem:

1. write a component check and run it; the snapshot is recorded
2. run again unchanged; it passes
3. change the component; the run fails and shows a diff
4. accept the change interactively; the run passes again
5. prune the snapshot; the next run records it afresh
"""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

from click.testing import CliRunner

from chk.domain.serialization import char_diff
from chk.entrypoints.cli.main import chk

# pylint: disable=magic-value-comparison

COMPONENT = """
    import chk

    def badge(props):
        return f"<span class='badge'>  {{props['count']}} {label} </span>"

    @chk.test("badge")
    def _(ctx):
        chk.snapshot("badge/default", {{"count": 3}}, badge)
        chk.expect(badge({{"count": 0}})).to_contain("0")
"""


def write_component(label: str) -> str:
    Path("badge_checks.py").write_text(
        dedent(COMPONENT.format(label=label)).lstrip(), encoding="utf-8"
    )
    return "badge_checks.py"


def run(runner: CliRunner, *args: str, **kwargs):
    return runner.invoke(chk, ["--no-flight-recorder", "run", *args], **kwargs)


class TestFirstSnapshot:
    """A developer adopts snapshot tests for a small component."""

    @staticmethod
    def test_snapshot_lifecycle():
        runner = CliRunner()
        with runner.isolated_filesystem():
            # The developer writes a check and runs it for the first time;
            # chk records the snapshot and the run passes.
            path = write_component("new")
            first = run(runner, path)
            assert first.exit_code == 0, first.output
            stored = Path(".snapshots/badge/default.snapshot.json")
            assert stored.is_file()
            assert "<span class='badge'> 3 new </span>" in stored.read_text(encoding="utf-8")

            # Nothing changed, so the next run passes too.
            assert run(runner, path).exit_code == 0

            # The label changes; the run fails and shows what moved.
            path = write_component("unread")
            failed = run(runner, path)
            assert failed.exit_code == 1
            diff = char_diff(
                "<span class='badge'> 3 new </span>",
                "<span class='badge'> 3 unread </span>",
            )
            assert diff in failed.stdout

            # The developer reviews the diff and accepts it.
            accepted = run(runner, "--interactive", path, input="accept\n")
            assert accepted.exit_code == 0, accepted.output
            assert "unread" in stored.read_text(encoding="utf-8")

            # Later they prune the snapshot; the next run records it again.
            deleted = runner.invoke(
                chk, ["--no-flight-recorder", "snapshots", "delete", "badge/default", "-y"]
            )
            assert deleted.exit_code == 0
            assert not stored.exists()
            assert run(runner, path).exit_code == 0
            assert stored.is_file()
