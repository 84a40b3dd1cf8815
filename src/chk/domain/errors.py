"""Domain-layer error definitions."""

# ============================================================================
#                           General errors
# ============================================================================


class ChkError(Exception):
    """Base class for chk errors."""


class ContextError(ChkError):
    """Raised when a context-bound helper is used outside a running test body."""

    def __init__(self, helper: str) -> None:
        super().__init__(f"{helper}() must be called inside a running test body.")
        self.helper = helper


# ============================================================================
#                           Matcher errors
# ============================================================================


class UnknownMatcherError(ChkError, AttributeError):
    """Raised when an expectation is asked for a matcher that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No matcher registered under {name!r}.")
        self.name = name


class DuplicateMatcherError(ChkError):
    """Raised when a matcher name or alias is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"A matcher is already registered under {name!r}.")
        self.name = name


class MockUsageError(ChkError):
    """Raised when a mock-only matcher is applied to something that is not a mock."""

    def __init__(self, matcher: str) -> None:
        super().__init__(
            f"{matcher}() can only be called on a mock function created with fn()"
        )
        self.matcher = matcher


# ============================================================================
#                           Mock errors
# ============================================================================


class SpyError(ChkError):
    """Raised when spy_on() cannot replace the requested attribute."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Cannot spy on {name!r}: {reason}.")
        self.name = name
        self.reason = reason


class RejectedValueError(ChkError):
    """Carries a non-exception value passed to ``mock_rejected_value``."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Mock rejected with {value!r}")
        self.value = value
