from enum import auto
from typing import Final
from typing import assert_never

from timebound.timebound_common.enums import UpperCaseStrEnum
from timebound.timebound_common.frozen_model import FrozenModel
from timebound.timebound_common.pure import pure


class ComparisonKind(UpperCaseStrEnum):
    """How a measured duration is compared against a bound."""

    AT_MOST = auto()
    LESS_THAN = auto()
    AT_LEAST = auto()
    GREATER_THAN = auto()


class DurationBound(FrozenModel):
    """A comparison of elapsed time against one fixed bound."""

    kind: ComparisonKind
    bound_seconds: float

    @pure
    def is_satisfied_by(self, elapsed_seconds: float) -> bool:
        match self.kind:
            case ComparisonKind.AT_MOST:
                return elapsed_seconds <= self.bound_seconds
            case ComparisonKind.LESS_THAN:
                return elapsed_seconds < self.bound_seconds
            case ComparisonKind.AT_LEAST:
                return elapsed_seconds >= self.bound_seconds
            case ComparisonKind.GREATER_THAN:
                return elapsed_seconds > self.bound_seconds
            case _ as unreachable:
                assert_never(unreachable)

    @property
    def phrase(self) -> str:
        return _PHRASES[self.kind]


_PHRASES: Final[dict[ComparisonKind, str]] = {
    ComparisonKind.AT_MOST: "less than or equal to",
    ComparisonKind.LESS_THAN: "less than",
    ComparisonKind.AT_LEAST: "greater than or equal to",
    ComparisonKind.GREATER_THAN: "greater than",
}


@pure
def polling_expectation(kind: ComparisonKind) -> bool:
    """The predicate result at which polling can stop early.

    Upper bounds are decided once they stop holding (the elapsed time can only grow).
    Lower bounds are decided once they start holding.
    """
    return kind in (ComparisonKind.AT_LEAST, ComparisonKind.GREATER_THAN)


@pure
def closeness_bounds(expected_seconds: float, precision_seconds: float) -> tuple[DurationBound, DurationBound]:
    """Return the (minimum, maximum) bounds of expected +/- precision, both inclusive."""
    return (
        DurationBound(kind=ComparisonKind.AT_LEAST, bound_seconds=expected_seconds - precision_seconds),
        DurationBound(kind=ComparisonKind.AT_MOST, bound_seconds=expected_seconds + precision_seconds),
    )
