from collections.abc import Sequence

from timebound.timebound_common.errors import BaseTimeboundError


class InvalidAssertionArgumentError(BaseTimeboundError, ValueError):
    """Raised when an assertion is called incorrectly. This signals misuse, not a failed test."""


class NegativePrecisionError(InvalidAssertionArgumentError):
    """Raised when a closeness assertion is given a negative precision."""

    def __init__(self, precision_seconds: float) -> None:
        self.precision_seconds = precision_seconds
        super().__init__(f"The value of precision must be non-negative, got {precision_seconds}s")


class ConfigParseError(BaseTimeboundError, ValueError):
    """Raised when assertion configuration cannot be read or validated."""


class ExecutionTimeAssertionError(BaseTimeboundError, AssertionError):
    """Raised when a measured execution time does not satisfy an assertion.

    When raised from an assertion scope, failures holds every message collected in the scope.
    """

    def __init__(self, message: str, failures: Sequence[str] = ()) -> None:
        self.message = message
        self.failures = tuple(failures) if failures else (message,)
        super().__init__(message)


class InvalidAssertionScopeStateError(BaseTimeboundError, RuntimeError):
    """Raised when an assertion scope is exited without having been entered."""
