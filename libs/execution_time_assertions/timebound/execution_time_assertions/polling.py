from collections.abc import Callable
from typing import Final

from loguru import logger

from timebound.timebound_common.frozen_model import FrozenModel
from timebound.timed_execution.interfaces import TimedExecutionInterface

DEFAULT_MIN_POLL_INTERVAL_SECONDS: Final[float] = 0.001


class PollOutcome(FrozenModel):
    """Snapshot taken when polling stopped: was the operation still running, and how long had it run."""

    is_running: bool
    elapsed_seconds: float
    # Polling gave up at the ceiling before the condition was decided.
    is_ceiling_reached: bool = False


def poll_until(
    execution: TimedExecutionInterface,
    condition: Callable[[float], bool],
    expected_result: bool,
    rate_seconds: float,
    ceiling_seconds: float | None = None,
    min_poll_interval_seconds: float = DEFAULT_MIN_POLL_INTERVAL_SECONDS,
) -> PollOutcome:
    """Wait until condition(elapsed) == expected_result or the execution finishes.

    Between checks, blocks for up to rate_seconds waiting for the execution to finish. There
    is no deadline unless ceiling_seconds is given: an execution that never finishes and a
    condition that never reaches expected_result keep polling forever. With a ceiling, no
    wait runs past it, and the outcome is marked with is_ceiling_reached when polling stopped
    there undecided.

    If the execution captured an exception, that exception object is raised again, whatever
    the condition decided.

    Returns the elapsed time to use for the final check (don't measure twice).
    """
    interval = max(rate_seconds, min_poll_interval_seconds)

    elapsed = execution.elapsed_seconds
    is_running = execution.is_running
    is_ceiling_reached = False

    while is_running:
        if condition(elapsed) == expected_result:
            logger.debug("Condition decided for {} after {:.5f} sec", execution.description, elapsed)
            break
        if ceiling_seconds is not None and elapsed >= ceiling_seconds:
            logger.debug(
                "Polling of {} reached the {:.5f} sec ceiling while still running",
                execution.description,
                ceiling_seconds,
            )
            is_ceiling_reached = True
            break

        wait_seconds = interval
        if ceiling_seconds is not None:
            wait_seconds = max(min(interval, ceiling_seconds - elapsed), min_poll_interval_seconds)
        is_running = not execution.wait(wait_seconds)
        elapsed = execution.elapsed_seconds
        logger.trace(
            "Polled {}: elapsed={:.5f} sec, running={}",
            execution.description,
            elapsed,
            is_running,
        )

    if not is_running:
        # Frozen once finished, so this is the final value even if the first sample raced the end.
        elapsed = execution.elapsed_seconds

    exception = execution.exception
    if exception is not None:
        raise exception

    return PollOutcome(is_running=is_running, elapsed_seconds=elapsed, is_ceiling_reached=is_ceiling_reached)
