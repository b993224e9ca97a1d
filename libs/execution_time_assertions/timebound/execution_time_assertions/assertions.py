from typing import Any
from typing import Generic
from typing import TypeVar

from pydantic import ConfigDict

from timebound.execution_time_assertions.config import AssertionConfig
from timebound.execution_time_assertions.config import get_default_config
from timebound.execution_time_assertions.errors import InvalidAssertionArgumentError
from timebound.execution_time_assertions.errors import NegativePrecisionError
from timebound.execution_time_assertions.failures import fail_unless
from timebound.execution_time_assertions.failures import format_reason
from timebound.execution_time_assertions.polling import PollOutcome
from timebound.execution_time_assertions.polling import poll_until
from timebound.execution_time_assertions.predicates import ComparisonKind
from timebound.execution_time_assertions.predicates import DurationBound
from timebound.execution_time_assertions.predicates import closeness_bounds
from timebound.execution_time_assertions.predicates import polling_expectation
from timebound.timebound_common.frozen_model import FrozenModel
from timebound.timebound_common.logging import log_span
from timebound.timebound_common.primitives import DurationLike
from timebound.timebound_common.primitives import format_duration
from timebound.timebound_common.primitives import to_seconds
from timebound.timed_execution.interfaces import TimedExecutionInterface

A = TypeVar("A")


class AndConstraint(FrozenModel, Generic[A]):
    """Returned by every assertion so that further assertions can be chained with `.and_`."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    and_: A


def _outcome_phrase(outcome: PollOutcome) -> str:
    elapsed = format_duration(outcome.elapsed_seconds)
    if outcome.is_ceiling_reached:
        return f"it was still running after {elapsed} when the poll ceiling was reached"
    qualifier = "more than" if outcome.is_running else "exactly"
    return f"it required {qualifier} {elapsed}"


class ExecutionTimeAssertions:
    """Assertions about how long a timed execution takes.

    Each assertion waits only as long as needed: it stops as soon as the outcome can no
    longer change, or when the execution finishes. If the execution raised, that exception
    is raised again instead of an assertion failure.
    """

    def __init__(self, execution: TimedExecutionInterface, config: AssertionConfig | None = None) -> None:
        if execution is None:
            raise InvalidAssertionArgumentError("execution must not be None")
        self._execution = execution
        self._config = config if config is not None else get_default_config()

    @property
    def execution(self) -> TimedExecutionInterface:
        return self._execution

    def _poll(self, bound: DurationBound, expected_result: bool) -> PollOutcome:
        return poll_until(
            self._execution,
            condition=bound.is_satisfied_by,
            expected_result=expected_result,
            rate_seconds=bound.bound_seconds,
            ceiling_seconds=self._config.poll_ceiling_seconds,
            min_poll_interval_seconds=self._config.min_poll_interval_seconds,
        )

    def _assert_bound(
        self,
        kind: ComparisonKind,
        duration: DurationLike,
        because: str,
        because_args: tuple[Any, ...],
    ) -> "AndConstraint[ExecutionTimeAssertions]":
        bound = DurationBound(kind=kind, bound_seconds=to_seconds(duration))
        with log_span(
            "Asserting execution time of {} is {} {}",
            self._execution.description,
            bound.phrase,
            format_duration(bound.bound_seconds),
            kind=str(kind),
        ):
            outcome = self._poll(bound, expected_result=polling_expectation(kind))
            final_elapsed = outcome.elapsed_seconds
            if kind == ComparisonKind.LESS_THAN:
                final_elapsed = self._execution.elapsed_seconds
            # Still running at the ceiling is undecided, even if an upper bound holds so far.
            fail_unless(
                bound.is_satisfied_by(final_elapsed) and not outcome.is_ceiling_reached,
                f"Execution of {self._execution.description} should be {bound.phrase} "
                f"{format_duration(bound.bound_seconds)}{format_reason(because, because_args)}, "
                f"but {_outcome_phrase(outcome)}.",
            )
        return AndConstraint(and_=self)

    def be_less_than_or_equal_to(
        self, max_duration: DurationLike, because: str = "", *because_args: Any
    ) -> "AndConstraint[ExecutionTimeAssertions]":
        """Assert that the execution time is less than or equal to max_duration."""
        return self._assert_bound(ComparisonKind.AT_MOST, max_duration, because, because_args)

    def be_less_or_equal_to(
        self, max_duration: DurationLike, because: str = "", *because_args: Any
    ) -> "AndConstraint[ExecutionTimeAssertions]":
        return self.be_less_than_or_equal_to(max_duration, because, *because_args)

    def be_less_than(
        self, max_duration: DurationLike, because: str = "", *because_args: Any
    ) -> "AndConstraint[ExecutionTimeAssertions]":
        """Assert that the execution time is strictly less than max_duration."""
        return self._assert_bound(ComparisonKind.LESS_THAN, max_duration, because, because_args)

    def be_greater_than_or_equal_to(
        self, min_duration: DurationLike, because: str = "", *because_args: Any
    ) -> "AndConstraint[ExecutionTimeAssertions]":
        """Assert that the execution time is greater than or equal to min_duration."""
        return self._assert_bound(ComparisonKind.AT_LEAST, min_duration, because, because_args)

    def be_greater_or_equal_to(
        self, min_duration: DurationLike, because: str = "", *because_args: Any
    ) -> "AndConstraint[ExecutionTimeAssertions]":
        return self.be_greater_than_or_equal_to(min_duration, because, *because_args)

    def be_greater_than(
        self, min_duration: DurationLike, because: str = "", *because_args: Any
    ) -> "AndConstraint[ExecutionTimeAssertions]":
        """Assert that the execution time is strictly greater than min_duration."""
        return self._assert_bound(ComparisonKind.GREATER_THAN, min_duration, because, because_args)

    def be_close_to(
        self,
        expected_duration: DurationLike,
        precision: DurationLike,
        because: str = "",
        *because_args: Any,
    ) -> "AndConstraint[ExecutionTimeAssertions]":
        """Assert that the execution time is within precision of expected_duration (inclusive)."""
        expected_seconds = to_seconds(expected_duration)
        precision_seconds = to_seconds(precision)
        if precision_seconds < 0:
            raise NegativePrecisionError(precision_seconds)

        minimum, maximum = closeness_bounds(expected_seconds, precision_seconds)
        with log_span(
            "Asserting execution time of {} is within {} from {}",
            self._execution.description,
            format_duration(precision_seconds),
            format_duration(expected_seconds),
            kind="CLOSE_TO",
        ):
            # Polling tracks only the maximum; the minimum is checked once, on the final sample.
            outcome = self._poll(maximum, expected_result=False)
            elapsed = outcome.elapsed_seconds
            is_within = minimum.is_satisfied_by(elapsed) and maximum.is_satisfied_by(elapsed)
            fail_unless(
                is_within and not outcome.is_ceiling_reached,
                f"Execution of {self._execution.description} should be within {format_duration(precision_seconds)} "
                f"from {format_duration(expected_seconds)}{format_reason(because, because_args)}, "
                f"but {_outcome_phrase(outcome)}.",
            )
        return AndConstraint(and_=self)


def should(execution: TimedExecutionInterface, config: AssertionConfig | None = None) -> ExecutionTimeAssertions:
    """Entry point for fluent execution time assertions: should(execution).be_less_than(0.5)."""
    return ExecutionTimeAssertions(execution, config=config)
