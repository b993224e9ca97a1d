from collections.abc import Callable
from typing import TypeVar

_F = TypeVar("_F", bound=Callable[..., object])


def pure(func: _F) -> _F:
    """Mark a function as pure: same output for the same inputs, no side effects, no I/O.

    Advisory only; nothing is patched or checked at runtime. Pure functions here are called
    while a measured action runs on another thread, so they must not touch process-wide state.
    """
    return func
