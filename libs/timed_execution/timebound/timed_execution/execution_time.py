import asyncio
import inspect
from typing import Any
from typing import Callable
from typing import Final
from typing import TypeVar

from loguru import logger
from pydantic import ConfigDict
from pydantic import Field
from pydantic import PrivateAttr

from timebound.timed_execution.clock import Clock
from timebound.timed_execution.clock import MonotonicClock
from timebound.timed_execution.errors import InvalidExecutionArgumentError
from timebound.timed_execution.interfaces import TimedExecutionInterface
from timebound.timed_execution.stopwatch import Stopwatch
from timebound.timed_execution.thread_utils import ObservableThread

T = TypeVar("T")

UNNAMED_ACTION_DESCRIPTION: Final[str] = "the action"


def describe_action(action: Callable[..., Any]) -> str:
    """Describe a callable for failure messages: its qualified name, or 'the action' for lambdas."""
    qualname = getattr(action, "__qualname__", None)
    if not qualname or "<lambda>" in qualname:
        return UNNAMED_ACTION_DESCRIPTION
    return f"`{qualname}`"


class ExecutionTime(TimedExecutionInterface):
    """Runs an action on a background thread and tracks how long it takes.

    The action starts as soon as the model is constructed. If calling the action returns
    a coroutine, it is driven to completion with asyncio.run on the background thread.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    action: Callable[[], Any] = Field(frozen=True, description="The operation being timed")
    clock: Clock = Field(default_factory=MonotonicClock, frozen=True)

    _stopwatch: Stopwatch = PrivateAttr()
    _thread: ObservableThread = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._stopwatch = Stopwatch(clock=self.clock)
        self._thread = ObservableThread(
            target=self._run_action,
            name=f"execution-time-{self.description}",
        )
        logger.debug("Starting timed execution of {}", self.description)
        self._thread.start()

    def _run_action(self) -> None:
        self._stopwatch.start()
        try:
            result = self.action()
            if inspect.iscoroutine(result):
                asyncio.run(result)
        finally:
            self._stopwatch.stop()
            logger.debug(
                "Timed execution of {} ended after {:.5f} sec",
                self.description,
                self._stopwatch.elapsed_seconds,
            )

    @property
    def elapsed_seconds(self) -> float:
        return self._stopwatch.elapsed_seconds

    @property
    def is_running(self) -> bool:
        return not self._thread.is_finished

    @property
    def exception(self) -> BaseException | None:
        return self._thread.exception

    def wait(self, timeout_seconds: float) -> bool:
        return self._thread.wait(timeout_seconds)


def measure_execution_time(
    action: Callable[[], Any],
    description: str | None = None,
    clock: Clock | None = None,
) -> ExecutionTime:
    """Start timing action on a background thread and return the handle."""
    if action is None:
        raise InvalidExecutionArgumentError("Cannot measure the execution time of a None action")
    if not callable(action):
        raise InvalidExecutionArgumentError(f"Expected a callable action, got {type(action).__name__}")
    return ExecutionTime(
        action=action,
        description=description if description is not None else describe_action(action),
        clock=clock if clock is not None else MonotonicClock(),
    )


def execution_time_of(
    subject: T,
    action: Callable[[T], Any],
    description: str | None = None,
    clock: Clock | None = None,
) -> ExecutionTime:
    """Start timing action(subject) on a background thread, e.g. a single method call on an object."""
    if subject is None:
        raise InvalidExecutionArgumentError("Cannot measure the execution time of an action on a None subject")
    if action is None:
        raise InvalidExecutionArgumentError("Cannot measure the execution time of a None action")

    def _bound_action() -> Any:
        return action(subject)

    if description is None:
        description = f"the action on {type(subject).__name__}"
    return measure_execution_time(_bound_action, description=description, clock=clock)
