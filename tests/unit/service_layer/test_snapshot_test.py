"""Unit tests for :class:`chk.service_layer.snapshots.SnapshotTest`."""

from __future__ import annotations

import pytest

from chk.adapters.snapshot_store.memory import MemorySnapshotStore
from chk.domain.callsite import fixed_call_site
from chk.domain.errors import ChkError
from chk.domain.node import TestEnvironment
from chk.interfaces.snapshot_store import SnapshotRecord, SnapshotStoreUnavailableError
from chk.service_layer.snapshots import SnapshotSession, SnapshotTest

# pylint: disable=magic-value-comparison


def heading(props):
    return f"<h1>  {props['title']} </h1>"


def outcome_of(node: SnapshotTest):
    """The single outcome recorded by a snapshot test."""
    (expectation,) = node.expectations()
    (outcome,) = expectation.outcomes
    return outcome


class TestRendering:
    """``render`` may take props, take nothing, be async, or be a value."""

    @pytest.mark.asyncio
    async def test_first_run_records_snapshot(self, env, snapshot_store):
        node = SnapshotTest("card", {"title": "Hi"}, heading, env=env)
        await node.test()
        assert node.title == "card"
        assert node.output == "<h1> Hi </h1>"
        assert node.result
        assert outcome_of(node).key == "new_snapshot"
        assert snapshot_store.load("card") == SnapshotRecord(
            {"title": "Hi"}, "<h1> Hi </h1>"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "render",
        [lambda: "<p>x</p>", "<p>x</p>"],
        ids=["no-args", "plain-value"],
    )
    async def test_render_forms(self, env, render):
        node = await SnapshotTest("para", None, render, env=env).test()
        assert node.output == "<p>x</p>"

    @pytest.mark.asyncio
    async def test_async_render(self, env):
        async def render(props):
            return f"<i>{props['n']}</i>"

        node = await SnapshotTest("async", {"n": 2}, render, env=env).test()
        assert node.output == "<i>2</i>"
        assert node.result


class TestComparison:
    """Later runs compare against the stored record."""

    @pytest.mark.asyncio
    async def test_mismatch_fails_and_keeps_snapshot(self, env, snapshot_store):
        snapshot_store.save("card", SnapshotRecord({"title": "Hi"}, "<h1> Hi </h1>"))
        node = await SnapshotTest("card", {"title": "Bye"}, heading, env=env).test()
        outcome = outcome_of(node)
        assert outcome.key == "output_mismatch"
        assert outcome.result is False
        assert outcome.target == "card"
        assert snapshot_store.load("card").output == "<h1> Hi </h1>"

    @pytest.mark.asyncio
    async def test_save_overwrites_and_reruns(self, env, snapshot_store):
        snapshot_store.save("card", SnapshotRecord({"title": "Hi"}, "<h1> Hi </h1>"))
        node = SnapshotTest("card", {"title": "Bye"}, heading, env=env)
        await node.test()
        assert not node.result

        assert await node.save() is node
        assert node.result
        assert outcome_of(node).key == "match"
        assert snapshot_store.load("card").props == {"title": "Bye"}


class TestWithoutSession:
    """Snapshot tests need a snapshot session."""

    @pytest.mark.asyncio
    async def test_test_records_error(self):
        env = TestEnvironment(capture=fixed_call_site("x.py", 1))
        node = await SnapshotTest("card", None, "x", env=env).test()
        assert isinstance(node.error, ChkError)
        assert node.report().status is False

    @pytest.mark.asyncio
    async def test_save_raises(self):
        env = TestEnvironment(capture=fixed_call_site("x.py", 1))
        with pytest.raises(ChkError, match="no snapshot session"):
            await SnapshotTest("card", None, "x", env=env).save()

    @pytest.mark.asyncio
    async def test_save_failure_raises(self):
        class Failing(MemorySnapshotStore):
            def save(self, snapshot_id, record):
                raise SnapshotStoreUnavailableError("read-only")

        env = TestEnvironment(
            snapshots=SnapshotSession(Failing()), capture=fixed_call_site("x.py", 1)
        )
        with pytest.raises(ChkError, match="read-only"):
            await SnapshotTest("card", None, "x", env=env).save()
