import logging
import typing as t
from dataclasses import dataclass
from types import SimpleNamespace

import pytest
import structlog

from logbridge.boundary import reset_caller_boundaries
from logbridge.configurators import stop_watching
from logbridge.facade import AbstractLogger, GlobalVariablesContext
from logbridge.levels import FacadeLevel
from logbridge.manager import LogManager


@dataclass
class Write:
    name: str
    boundary: str
    level: int
    message: str
    exception: BaseException | None


class RecordingRuntime:
    """Engine runtime that records configuration calls and writes instead of emitting them."""

    def __init__(self, threshold: int = logging.INFO):
        self.threshold = threshold
        self.configured: list[tuple[t.Any, ...]] = []
        self.writes: list[Write] = []

    def basic_configure(self) -> None:
        self.configured.append(("BASIC",))

    def configure_inline(self, level, fmt) -> None:
        self.configured.append(("INLINE", level, fmt))

    def configure_file(self, path) -> None:
        self.configured.append(("FILE", path))

    def configure_and_watch(self, path) -> None:
        self.configured.append(("FILE-WATCH", path))

    def get_logger(self, name: str) -> SimpleNamespace:
        return SimpleNamespace(name=name)

    def is_level_enabled(self, handle, level: int) -> bool:
        return level >= self.threshold

    def write(self, handle, boundary, level, message, exception) -> None:
        if not self.is_level_enabled(handle, level):
            return
        self.writes.append(Write(handle.name, boundary, level, message(), exception))


class RecordingLogger(AbstractLogger):
    """Facade logger keeping every accepted write in memory."""

    def __init__(self, min_level: FacadeLevel = FacadeLevel.ALL):
        self.min_level = min_level
        self.writes: list[tuple[FacadeLevel, str, BaseException | None]] = []

    def is_enabled(self, level: FacadeLevel) -> bool:
        return level != FacadeLevel.OFF and level >= self.min_level

    def write_internal(self, level, message, exception) -> None:
        self.writes.append((level, message(), exception))


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.NOTSET)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def recording_runtime() -> RecordingRuntime:
    return RecordingRuntime()


@pytest.fixture
def recording_logger() -> t.Callable[..., RecordingLogger]:
    return RecordingLogger


@pytest.fixture
def stdlib_logger() -> t.Iterator[tuple[logging.Logger, ListHandler]]:
    """An isolated stdlib logger at INFO with a capturing handler."""
    logger = logging.getLogger("app.tests")
    handler = ListHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    yield logger, handler
    logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def isolate_logging_state():
    """
    Every test starts with no published caller boundaries, no active adapter,
    empty variables and default structlog configuration, and leaves the root
    logger as it found it.
    """
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level

    reset_caller_boundaries()
    LogManager.reset()
    GlobalVariablesContext().clear()
    structlog.contextvars.clear_contextvars()

    yield

    stop_watching()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    reset_caller_boundaries()
    LogManager.reset()
    GlobalVariablesContext().clear()
    structlog.contextvars.clear_contextvars()
