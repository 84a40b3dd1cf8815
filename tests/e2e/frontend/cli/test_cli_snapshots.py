"""End-to-end tests for `chk snapshots list|show|delete`."""

import json
from pathlib import Path

import pytest

from chk.adapters.snapshot_store.local import LocalSnapshotStore
from chk.entrypoints.cli.main import chk
from chk.interfaces.snapshot_store import SnapshotRecord

# pylint: disable=redefined-outer-name,unused-argument,magic-value-comparison


@pytest.fixture
def seeded(fs) -> LocalSnapshotStore:
    """Two snapshots in the default `.snapshots` directory."""
    store = LocalSnapshotStore(".snapshots")
    store.save("button/primary", SnapshotRecord({"label": "Go"}, "<b>Go</b>"))
    store.save("card", SnapshotRecord(None, "<p>card</p>"))
    return store


def invoke(runner, *args, **kwargs):
    return runner.invoke(chk, ["--no-flight-recorder", "snapshots", *args], **kwargs)


class TestList:
    @staticmethod
    def test_lists_ids(runner, seeded):
        result = invoke(runner, "list")
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["button/primary", "card"]

    @staticmethod
    def test_json(runner, seeded):
        result = invoke(runner, "list", "--json")
        assert json.loads(result.stdout) == ["button/primary", "card"]

    @staticmethod
    def test_empty_store_warns(runner, fs):
        result = invoke(runner, "--snapshot-dir", "empty", "list")
        assert result.exit_code == 0
        assert result.stdout == ""
        assert "No snapshots in" in result.stderr
        assert "empty" in result.stderr

    @staticmethod
    def test_dir_from_env(runner, fs):
        LocalSnapshotStore("elsewhere").save("x", SnapshotRecord(None, "x"))
        result = invoke(runner, "list", env={"CHK_SNAPSHOT_DIR": "elsewhere"})
        assert result.stdout.splitlines() == ["x"]


class TestShow:
    @staticmethod
    def test_prints_record(runner, seeded):
        result = invoke(runner, "show", "button/primary")
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "output": "<b>Go</b>",
            "props": {"label": "Go"},
        }

    @staticmethod
    def test_missing(runner, seeded):
        result = invoke(runner, "show", "nope")
        assert result.exit_code == 1
        assert "Snapshot 'nope' not found." in result.stderr

    @staticmethod
    def test_invalid_id(runner, seeded):
        result = invoke(runner, "show", "../escape")
        assert result.exit_code == 1
        assert "Invalid snapshot id" in result.stderr

    @staticmethod
    def test_corrupt_file(runner, seeded):
        Path(".snapshots/card.snapshot.json").write_text("{", encoding="utf-8")
        result = invoke(runner, "show", "card")
        assert result.exit_code == 1
        assert "Snapshot 'card' is corrupt" in result.stderr


class TestDelete:
    @staticmethod
    def test_delete_with_yes(runner, seeded):
        result = invoke(runner, "delete", "card", "-y")
        assert result.exit_code == 0
        assert "Deleted snapshot 'card'." in result.stderr
        assert seeded.list_ids() == ["button/primary"]

    @staticmethod
    def test_confirmation_declined(runner, seeded):
        result = invoke(runner, "delete", "card", input="n\n")
        assert result.exit_code == 1
        assert "Aborted!" in result.stderr
        assert seeded.exists("card")

    @staticmethod
    def test_confirmation_accepted(runner, seeded):
        result = invoke(runner, "delete", "card", input="y\n")
        assert result.exit_code == 0
        assert not seeded.exists("card")

    @staticmethod
    def test_delete_missing(runner, seeded):
        result = invoke(runner, "delete", "nope", "-y")
        assert result.exit_code == 1
        assert "Snapshot 'nope' not found." in result.stderr
