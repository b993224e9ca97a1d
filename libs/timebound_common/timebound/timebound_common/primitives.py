from datetime import timedelta
from typing import Any
from typing import Self

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema
from pydantic_core import core_schema

from timebound.timebound_common.pure import pure

# Anything a caller may pass where a duration is expected.
DurationLike = timedelta | float | int


class PositiveFloat(float):
    """A float that must be > 0."""

    def __new__(cls, value: float) -> Self:
        if value <= 0:
            raise ValueError(f"{cls.__name__} must be > 0, got {value}")
        return super().__new__(cls, value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.float_schema(gt=0),
        )


@pure
def to_seconds(duration: DurationLike) -> float:
    """Normalize a timedelta or a number of seconds into float seconds.

    All internal durations are float seconds; timedelta is only accepted at the edges.
    """
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise TypeError(f"Expected a timedelta or a number of seconds, got {type(duration).__name__}")
    return float(duration)


@pure
def format_duration(seconds: float) -> str:
    """Render a duration for humans: '250ms', '1.5s', '2m 3.5s'."""
    sign = "-" if seconds < 0 else ""
    magnitude = abs(seconds)
    if magnitude < 1.0:
        return f"{sign}{_trim(round(magnitude * 1000, 3))}ms"
    if magnitude < 60.0:
        return f"{sign}{_trim(round(magnitude, 3))}s"
    minutes, remainder = divmod(magnitude, 60.0)
    return f"{sign}{int(minutes)}m {_trim(round(remainder, 3))}s"


@pure
def _trim(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")
