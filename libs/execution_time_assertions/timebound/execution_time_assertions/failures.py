"""Turning a false condition into a reported assertion failure.

Failures are raised immediately as ExecutionTimeAssertionError, unless an AssertionScope is
active in the current context, in which case they are collected and raised together when
the outermost scope exits.
"""

from contextlib import AbstractContextManager
from contextvars import ContextVar
from contextvars import Token
from typing import Any

from pydantic import PrivateAttr

from timebound.execution_time_assertions.errors import ExecutionTimeAssertionError
from timebound.execution_time_assertions.errors import InvalidAssertionScopeStateError
from timebound.timebound_common.mutable_model import MutableModel

_CURRENT_SCOPE: ContextVar["AssertionScope | None"] = ContextVar("timebound_assertion_scope", default=None)


def format_reason(because: str, because_args: tuple[Any, ...]) -> str:
    """Render a 'because' clause so it can be appended directly after the expectation.

    "" -> "", "it is cached" -> " because it is cached", "because {}" with ("x",) -> " because x".
    """
    phrase = because.strip()
    if not phrase:
        return ""
    if because_args:
        try:
            phrase = phrase.format(*because_args)
        except (IndexError, KeyError, ValueError) as e:
            phrase = f"{phrase} (could not format reason with {because_args!r}: {e})"
    if not phrase.lower().startswith("because"):
        phrase = "because " + phrase
    return " " + phrase


class AssertionScope(MutableModel, AbstractContextManager):
    """Collects assertion failures instead of raising on the first one.

    Nested scopes hand their failures to the enclosing scope; only the outermost scope raises.
    Any other exception passing through a scope propagates untouched, with the failures
    collected so far attached as notes.
    """

    name: str | None = None

    _failures: list[str] = PrivateAttr(default_factory=list)
    _parent: "AssertionScope | None" = PrivateAttr(default=None)
    _token: Token | None = PrivateAttr(default=None)

    @property
    def failures(self) -> tuple[str, ...]:
        return tuple(self._failures)

    def add_failure(self, message: str) -> None:
        self._failures.append(message)

    def __enter__(self) -> "AssertionScope":
        self._parent = _CURRENT_SCOPE.get()
        self._token = _CURRENT_SCOPE.set(self)
        return self

    def __exit__(self, exc_type: type | None, exc_value: BaseException | None, traceback: Any) -> None:
        if self._token is None:
            raise InvalidAssertionScopeStateError(f"Assertion scope {self.name!r} exited without being entered")
        _CURRENT_SCOPE.reset(self._token)
        self._token = None

        if exc_value is not None:
            for failure in self._failures:
                exc_value.add_note(failure)
            return None

        if not self._failures:
            return None

        if self._parent is not None:
            for failure in self._failures:
                self._parent.add_failure(failure)
            return None

        prefix = f"{len(self._failures)} assertion(s) failed"
        if self.name:
            prefix += f" in {self.name}"
        message = prefix + ":\n" + "\n".join(f"- {failure}" for failure in self._failures)
        raise ExecutionTimeAssertionError(message, failures=self._failures)


def assertion_scope(name: str | None = None) -> AssertionScope:
    return AssertionScope(name=name)


def fail_unless(condition: bool, message: str) -> None:
    """Report message as a failure unless condition holds."""
    if condition:
        return
    scope = _CURRENT_SCOPE.get()
    if scope is not None:
        scope.add_failure(message)
        return
    raise ExecutionTimeAssertionError(message)
