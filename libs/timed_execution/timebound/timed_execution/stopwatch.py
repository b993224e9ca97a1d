from threading import Lock

from pydantic import ConfigDict
from pydantic import Field
from pydantic import PrivateAttr

from timebound.timebound_common.mutable_model import MutableModel
from timebound.timed_execution.clock import Clock
from timebound.timed_execution.clock import MonotonicClock
from timebound.timed_execution.errors import InvalidStopwatchStateError


class Stopwatch(MutableModel):
    """Measures one interval of monotonic time.

    Reads 0.0 until started, grows while running, and is frozen once stopped.
    Safe to read from any thread while another thread starts or stops it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    clock: Clock = Field(default_factory=MonotonicClock)

    _started_at: float | None = PrivateAttr(default=None)
    _stopped_at: float | None = PrivateAttr(default=None)
    _lock: Lock = PrivateAttr(default_factory=Lock)

    def start(self) -> None:
        with self._lock:
            if self._started_at is not None:
                raise InvalidStopwatchStateError("Stopwatch was already started")
            self._started_at = self.clock.now()

    def stop(self) -> None:
        with self._lock:
            if self._started_at is None:
                raise InvalidStopwatchStateError("Stopwatch cannot be stopped before it was started")
            if self._stopped_at is None:
                self._stopped_at = self.clock.now()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._started_at is not None and self._stopped_at is None

    @property
    def elapsed_seconds(self) -> float:
        with self._lock:
            if self._started_at is None:
                return 0.0
            end = self._stopped_at if self._stopped_at is not None else self.clock.now()
            # Guard against clocks that step backwards between readings.
            return max(0.0, end - self._started_at)
