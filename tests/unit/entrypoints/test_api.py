"""Unit tests for the module-level ``test``/``expect``/``snapshot`` API."""

from __future__ import annotations

import pytest

import chk
from chk.domain.errors import ContextError
from chk.entrypoints.api import expect, get_runner, set_runner, snapshot, test
from chk.service_layer.runner import Runner
from chk.service_layer.snapshots import SnapshotTest

# pylint: disable=magic-value-comparison


class TestDefaultRunner:
    @staticmethod
    def test_created_lazily_and_reused():
        runner = get_runner()
        assert isinstance(runner, Runner)
        assert get_runner() is runner

    @staticmethod
    def test_set_runner_returns_previous(env):
        first = get_runner()
        replacement = Runner(env)
        assert set_runner(replacement) is first
        assert get_runner() is replacement


class TestOutsideABody:
    @staticmethod
    def test_test_registers_root(env):
        set_runner(Runner(env))
        node = test("root", lambda ctx: None)
        assert get_runner().tests == [node]
        assert node.env is env

    @staticmethod
    def test_snapshot_registers_root(env):
        set_runner(Runner(env))
        node = snapshot("card", {"a": 1}, "<b>1</b>")
        assert isinstance(node, SnapshotTest)
        assert get_runner().tests == [node]

    @staticmethod
    def test_expect_raises():
        with pytest.raises(ContextError, match=r"expect\(\) must be called inside"):
            expect(1)


class TestInsideABody:
    @pytest.mark.asyncio
    async def test_calls_attach_to_running_node(self, env):
        runner = Runner(env)
        set_runner(runner)

        def body():
            expect(1).to_equal(1)
            test("child", lambda: expect("x").to_be_truthy())
            snapshot("inner", None, "<i>x</i>")

        root = test("root", body)
        await runner.test()

        assert runner.tests == [root]
        assert [type(c).__name__ for c in root.children] == [
            "Expectation",
            "TestNode",
            "SnapshotTest",
        ]
        assert root.result
        assert root.children[1].result

    @pytest.mark.asyncio
    async def test_package_reexports(self, env):
        set_runner(Runner(env))

        @chk.test("decorated")
        def _():
            chk.expect([1, 2]).to_contain(2)

        summary = await chk.get_runner().run()
        assert summary.passed == 1
