from timebound.timebound_common.errors import BaseTimeboundError


class TimedExecutionError(BaseTimeboundError):
    """Base exception for errors raised by timed execution handles themselves."""


class InvalidExecutionArgumentError(TimedExecutionError, ValueError):
    """Raised when a timed execution is created with an unusable argument."""


class InvalidStopwatchStateError(TimedExecutionError):
    """Raised when a stopwatch is started twice or stopped before it was started."""
