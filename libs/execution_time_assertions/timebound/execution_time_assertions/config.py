import functools
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from typing import Final

from loguru import logger
from pydantic import ValidationError

from timebound.execution_time_assertions.errors import ConfigParseError
from timebound.timebound_common.frozen_model import FrozenModel
from timebound.timebound_common.primitives import PositiveFloat

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"

# Environment variable name -> AssertionConfig field name.
_ENV_OVERRIDES: Final[dict[str, str]] = {
    "TIMEBOUND_POLL_CEILING_SECONDS": "poll_ceiling_seconds",
    "TIMEBOUND_MIN_POLL_INTERVAL_SECONDS": "min_poll_interval_seconds",
    "TIMEBOUND_LOG_LEVEL": "log_level",
}

_VALID_LOG_LEVELS: Final[frozenset[str]] = frozenset(
    {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
)


class AssertionConfig(FrozenModel):
    """Settings shared by every execution time assertion."""

    # Opt-in upper limit on how long polling may wait. None means polling only stops
    # when the comparison is decided or the operation finishes.
    poll_ceiling_seconds: PositiveFloat | None = None
    # Lower limit on the re-check interval, so zero or negative bounds cannot busy-spin.
    min_poll_interval_seconds: PositiveFloat = PositiveFloat(0.001)
    log_level: str = "WARNING"


def find_pyproject(context_dir: Path) -> Path | None:
    """Return the nearest pyproject.toml at or above context_dir."""
    for directory in (context_dir, *context_dir.parents):
        candidate = directory / PYPROJECT_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _load_tool_table(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Failed to parse {path}: {e}") from e
    table = raw.get("tool", {}).get("timebound", {})
    if not isinstance(table, dict):
        raise ConfigParseError(f"[tool.timebound] in {path} must be a table")
    return table


def _check_unknown_fields(raw_config: Mapping[str, Any], source: str) -> None:
    unknown = sorted(set(raw_config) - set(AssertionConfig.model_fields))
    if unknown:
        raise ConfigParseError(f"Unknown timebound config field(s) in {source}: {', '.join(unknown)}")


def load_assertion_config(
    context_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AssertionConfig:
    """Load assertion settings from all sources.

    Precedence (lowest to highest):
    1. Defaults
    2. [tool.timebound] in the nearest pyproject.toml at or above context_dir (default: cwd)
    3. TIMEBOUND_* environment variables
    """
    environ = os.environ if environ is None else environ
    context_dir = Path.cwd() if context_dir is None else context_dir

    values: dict[str, Any] = {}
    pyproject_path = find_pyproject(context_dir)
    if pyproject_path is not None:
        table = _load_tool_table(pyproject_path)
        _check_unknown_fields(table, str(pyproject_path))
        values.update(table)

    for env_name, field_name in _ENV_OVERRIDES.items():
        if env_name in environ:
            values[field_name] = environ[env_name]

    if "log_level" in values:
        level = str(values["log_level"]).upper()
        if level not in _VALID_LOG_LEVELS:
            raise ConfigParseError(f"Invalid log level: {values['log_level']!r}")
        values["log_level"] = level

    try:
        config = AssertionConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid timebound configuration: {e}") from e

    logger.debug("Loaded assertion config {} (pyproject: {})", config, pyproject_path)
    return config


@functools.cache
def get_default_config() -> AssertionConfig:
    """The config loaded from the current working directory and environment, once per process."""
    return load_assertion_config()
