from pydantic import ConfigDict
from pydantic import PrivateAttr

from timebound.timed_execution.interfaces import TimedExecutionInterface


class ScriptedExecution(TimedExecutionInterface):
    """A timed execution on a virtual timeline, for deterministic tests.

    Virtual time only advances inside wait(), by at most the requested timeout, and stops at
    finishes_at_seconds. finishes_at_seconds=None means the execution never finishes.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    description: str = "the action"
    finishes_at_seconds: float | None = None
    raises: BaseException | None = None

    _now: float = PrivateAttr(default=0.0)
    _samples: list[float] = PrivateAttr(default_factory=list)
    _waits: list[float] = PrivateAttr(default_factory=list)

    @property
    def has_finished(self) -> bool:
        return self.finishes_at_seconds is not None and self._now >= self.finishes_at_seconds

    @property
    def elapsed_seconds(self) -> float:
        self._samples.append(self._now)
        return self._now

    @property
    def is_running(self) -> bool:
        return not self.has_finished

    @property
    def exception(self) -> BaseException | None:
        return self.raises if self.has_finished else None

    def wait(self, timeout_seconds: float) -> bool:
        self._waits.append(timeout_seconds)
        if self.finishes_at_seconds is not None and self._now + timeout_seconds >= self.finishes_at_seconds:
            self._now = max(self._now, self.finishes_at_seconds)
            return True
        self._now += timeout_seconds
        return False

    @property
    def samples(self) -> tuple[float, ...]:
        return tuple(self._samples)

    @property
    def waits(self) -> tuple[float, ...]:
        return tuple(self._waits)
