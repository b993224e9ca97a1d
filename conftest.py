"""Root conftest: shared pytest hooks and logging setup for every library in the repo."""

from timebound.execution_time_assertions.config import get_default_config
from timebound.timebound_common.conftest_hooks import register_conftest_hooks
from timebound.timebound_common.logging import setup_logging

setup_logging(get_default_config().log_level)
register_conftest_hooks(globals())
