"""chk

A self-hosted assertion, mocking and snapshot-testing engine: nested test
nodes with async bodies, a matcher registry with negation, call-recording
mock functions and a snapshot comparator with an interactive accept flow.
"""

from chk.domain.automock import create_mock_from_module, module_mocks
from chk.domain.equality import any_instance, anything
from chk.domain.errors import ChkError, ContextError, MockUsageError
from chk.domain.expectation import Expectation
from chk.domain.mock import MockFunction, fn, is_mock_function, spy_on
from chk.domain.node import TestNode, TestOptions
from chk.domain.report import ReportOptions, RunSummary
from chk.entrypoints.api import expect, get_runner, set_runner, snapshot, test
from chk.service_layer.runner import Runner

__all__ = [
    "ChkError",
    "ContextError",
    "Expectation",
    "MockFunction",
    "MockUsageError",
    "ReportOptions",
    "RunSummary",
    "Runner",
    "TestNode",
    "TestOptions",
    "__version__",
    "any_instance",
    "anything",
    "create_mock_from_module",
    "expect",
    "fn",
    "get_runner",
    "is_mock_function",
    "module_mocks",
    "set_runner",
    "snapshot",
    "spy_on",
    "test",
]
__version__ = "0.1.0"
