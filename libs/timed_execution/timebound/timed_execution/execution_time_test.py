import asyncio
import threading

import pytest

from timebound.timed_execution.errors import InvalidExecutionArgumentError
from timebound.timed_execution.execution_time import ExecutionTime
from timebound.timed_execution.execution_time import describe_action
from timebound.timed_execution.execution_time import execution_time_of
from timebound.timed_execution.execution_time import measure_execution_time
from timebound.timed_execution.test_utils import wait_interval
from timebound.timed_execution.testing import FakeClock

SMALL_SLEEP = 0.05


def _do_nothing() -> None:
    pass


class _Calculator:
    def slow_add(self, a: int, b: int) -> int:
        wait_interval(SMALL_SLEEP)
        return a + b


def test_execution_time_reports_running_until_action_finishes() -> None:
    release = threading.Event()
    execution = measure_execution_time(lambda: release.wait(timeout=5.0))
    try:
        assert execution.is_running
        assert execution.wait(timeout_seconds=0.01) is False
    finally:
        release.set()
    assert execution.wait(timeout_seconds=5.0) is True
    assert not execution.is_running
    assert execution.exception is None


def test_execution_time_freezes_elapsed_once_finished() -> None:
    execution = measure_execution_time(lambda: wait_interval(SMALL_SLEEP))
    assert execution.wait(timeout_seconds=5.0)
    elapsed = execution.elapsed_seconds
    assert elapsed >= SMALL_SLEEP * 0.9
    wait_interval(SMALL_SLEEP)
    assert execution.elapsed_seconds == elapsed


def test_execution_time_elapsed_is_non_decreasing_while_running() -> None:
    release = threading.Event()
    execution = measure_execution_time(lambda: release.wait(timeout=5.0))
    samples = []
    for _ in range(5):
        samples.append(execution.elapsed_seconds)
        wait_interval(0.005)
    release.set()
    execution.wait(timeout_seconds=5.0)
    samples.append(execution.elapsed_seconds)
    assert samples == sorted(samples)


def test_execution_time_captures_the_original_exception() -> None:
    error = RuntimeError("operation failed")

    def _fail() -> None:
        raise error

    execution = measure_execution_time(_fail)
    assert execution.wait(timeout_seconds=5.0)
    assert execution.exception is error
    assert not execution.is_running


def test_execution_time_runs_coroutines_to_completion() -> None:
    finished: list[bool] = []

    async def _async_work() -> None:
        await asyncio.sleep(SMALL_SLEEP)
        finished.append(True)

    execution = measure_execution_time(_async_work)
    assert execution.wait(timeout_seconds=5.0)
    assert finished == [True]
    assert execution.elapsed_seconds >= SMALL_SLEEP * 0.9


def test_execution_time_captures_exceptions_from_coroutines() -> None:
    async def _async_fail() -> None:
        raise KeyError("missing")

    execution = measure_execution_time(_async_fail)
    assert execution.wait(timeout_seconds=5.0)
    assert isinstance(execution.exception, KeyError)


def test_measure_execution_time_rejects_none_action() -> None:
    with pytest.raises(InvalidExecutionArgumentError, match="None action"):
        measure_execution_time(None)  # type: ignore[arg-type]


def test_measure_execution_time_rejects_non_callables() -> None:
    with pytest.raises(InvalidExecutionArgumentError, match="Expected a callable"):
        measure_execution_time(42)  # type: ignore[arg-type]


def test_describe_action_uses_qualified_name_or_generic_phrase() -> None:
    assert describe_action(_do_nothing) == "`_do_nothing`"
    assert describe_action(_Calculator.slow_add) == "`_Calculator.slow_add`"
    assert describe_action(lambda: None) == "the action"


def test_measure_execution_time_uses_explicit_description() -> None:
    execution = measure_execution_time(_do_nothing, description="the cache warmup")
    execution.wait(timeout_seconds=5.0)
    assert execution.description == "the cache warmup"
    assert isinstance(execution, ExecutionTime)


def test_execution_time_of_times_an_action_on_a_subject() -> None:
    calculator = _Calculator()
    execution = execution_time_of(calculator, lambda c: c.slow_add(1, 2))
    assert execution.wait(timeout_seconds=5.0)
    assert execution.description == "the action on _Calculator"
    assert execution.elapsed_seconds >= SMALL_SLEEP * 0.9
    assert execution.exception is None


def test_execution_time_of_rejects_none_subject() -> None:
    with pytest.raises(InvalidExecutionArgumentError, match="None subject"):
        execution_time_of(None, lambda s: s)


def test_execution_time_measures_with_injected_clock() -> None:
    clock = FakeClock()
    started = threading.Event()
    release = threading.Event()

    def _work() -> None:
        started.set()
        release.wait(timeout=5.0)

    execution = measure_execution_time(_work, clock=clock)
    assert started.wait(timeout=5.0)
    clock.advance(2.5)
    assert execution.elapsed_seconds == pytest.approx(2.5)

    release.set()
    assert execution.wait(timeout_seconds=5.0)
    clock.advance(1.0)
    assert execution.elapsed_seconds == pytest.approx(2.5)
