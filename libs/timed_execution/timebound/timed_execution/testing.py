from timebound.timed_execution.clock import Clock


class FakeClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: float = 100.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds
