"""Shared pytest hooks for every library in the repo.

Provides:
- shared markers
- a test suite time limit (configurable via the PYTEST_MAX_DURATION env var)

Usage in a conftest.py:
    from timebound.timebound_common.conftest_hooks import register_conftest_hooks
    register_conftest_hooks(globals())

Registration is guarded so that a root conftest and a per-library conftest can both
call it without pytest complaining about duplicate hooks.
"""

import os
import time
from collections.abc import Mapping
from typing import Any
from typing import Final

import pytest

_SHARED_MARKERS: Final[list[str]] = [
    "timing: marks tests that measure real wall-clock time on background threads",
]

# Suites of timing tests are inherently slow, but they should never take minutes.
_DEFAULT_MAX_DURATION_SECONDS: Final[float] = 120.0
_CI_MAX_DURATION_SECONDS: Final[float] = 60.0

_registered: bool = False


def get_max_suite_duration(environ: Mapping[str, str]) -> float:
    """Return the allowed duration of the whole test session, in seconds."""
    if "PYTEST_MAX_DURATION" in environ:
        return float(environ["PYTEST_MAX_DURATION"])
    if "CI" in environ:
        return _CI_MAX_DURATION_SECONDS
    return _DEFAULT_MAX_DURATION_SECONDS


@pytest.hookimpl(tryfirst=True)
def _pytest_configure(config: pytest.Config) -> None:
    for marker in _SHARED_MARKERS:
        config.addinivalue_line("markers", marker)


@pytest.hookimpl(tryfirst=True)
def _pytest_sessionstart(session: pytest.Session) -> None:
    setattr(session, "start_time", time.monotonic())  # noqa: B010


@pytest.hookimpl(trylast=True)
def _pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    """Fail the session if the suite took longer than allowed."""
    if not hasattr(session, "start_time"):
        return
    duration = time.monotonic() - session.start_time
    max_duration = get_max_suite_duration(os.environ)
    if duration > max_duration:
        pytest.exit(
            f"Test suite took {duration:.2f}s, exceeding the {max_duration}s limit",
            returncode=1,
        )


def register_conftest_hooks(namespace: dict[str, Any]) -> None:
    """Inject the shared hooks into a conftest module namespace (only once per process)."""
    global _registered
    if _registered:
        return
    _registered = True
    namespace["pytest_configure"] = _pytest_configure
    namespace["pytest_sessionstart"] = _pytest_sessionstart
    namespace["pytest_sessionfinish"] = _pytest_sessionfinish
