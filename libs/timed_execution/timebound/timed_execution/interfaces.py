from abc import ABC
from abc import abstractmethod

from pydantic import Field

from timebound.timebound_common.mutable_model import MutableModel


class TimedExecutionInterface(MutableModel, ABC):
    """An operation running (or already finished) on a background execution context.

    Implementations must make every read safe from any thread, and must publish state in
    this order when the operation ends: freeze the elapsed time, record the exception,
    then stop reporting is_running.
    """

    description: str = Field(frozen=True, description="Human readable description of the operation")

    @property
    @abstractmethod
    def elapsed_seconds(self) -> float:
        """Seconds since the operation started. Non-decreasing, and frozen once it finished."""
        ...

    @property
    @abstractmethod
    def is_running(self) -> bool: ...

    @property
    @abstractmethod
    def exception(self) -> BaseException | None:
        """The exception the operation raised, if any. Set at most once."""
        ...

    @abstractmethod
    def wait(self, timeout_seconds: float) -> bool:
        """Block until the operation finishes or timeout_seconds pass. Return whether it finished."""
        ...
