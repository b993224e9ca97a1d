import threading
from typing import Any
from typing import Callable

from loguru import logger


class ObservableThread(threading.Thread):
    """Thread that captures whatever its target raises instead of letting it escape.

    Any BaseException is captured, including SystemExit and KeyboardInterrupt, so that a
    target that exits abnormally is never mistaken for one that returned. The captured
    exception object is kept as-is so that whoever observes the thread can raise it again
    with its original traceback.
    """

    def __init__(self, target: Callable[[], Any], name: str | None = None, daemon: bool = True) -> None:
        super().__init__(name=name, daemon=daemon)
        self._action = target
        self._target_name = getattr(target, "__name__", None)
        self._exception: BaseException | None = None
        self._finished_event = threading.Event()

    @property
    def target_name(self) -> str | None:
        return self._target_name

    def run(self) -> None:
        try:
            self._action()
        except BaseException as e:
            self._exception = e
            logger.opt(exception=e).debug(
                "Captured exception in thread '{}' with target '{}'",
                self.name,
                self.target_name,
            )
        finally:
            self._finished_event.set()

    def wait(self, timeout_seconds: float | None = None) -> bool:
        """Wait up to timeout_seconds for the target to finish. Return whether it finished."""
        return self._finished_event.wait(timeout=timeout_seconds)

    @property
    def is_finished(self) -> bool:
        return self._finished_event.is_set()

    @property
    def exception(self) -> BaseException | None:
        """The exception raised by the target, if any (without re-raising)."""
        return self._exception
