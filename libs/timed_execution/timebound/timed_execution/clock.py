import time
from abc import ABC
from abc import abstractmethod


class Clock(ABC):
    """Source of monotonic time in seconds. Only differences between readings are meaningful."""

    @abstractmethod
    def now(self) -> float: ...


class MonotonicClock(Clock):
    def now(self) -> float:
        return time.monotonic()
