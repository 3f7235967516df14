"""
Facade loggers backed by concrete engines.
"""

from __future__ import annotations

from typing import Any

import structlog

from .boundary import resolve_caller_boundary
from .facade import AbstractLogger, MessageProducer
from .levels import FacadeLevel, engine_level
from .runtime import EngineRuntime


class EngineLogger(AbstractLogger):
    """Facade logger writing through an ``EngineRuntime`` handle."""

    def __init__(self, handle: Any, runtime: EngineRuntime):
        self._handle = handle
        self._runtime = runtime

    @property
    def name(self) -> str:
        return getattr(self._handle, "name", "")

    def is_enabled(self, level: FacadeLevel) -> bool:
        if level == FacadeLevel.OFF:
            return False
        return self._runtime.is_level_enabled(self._handle, engine_level(level))

    def write_internal(self, level: FacadeLevel, message: MessageProducer, exception: BaseException | None) -> None:
        boundary = resolve_caller_boundary(type(self), AbstractLogger)
        self._runtime.write(self._handle, boundary, engine_level(level), message, exception)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


# Structlog has no TRACE level.
_STRUCTLOG_METHODS: dict[FacadeLevel, str] = {
    FacadeLevel.ALL: "debug",
    FacadeLevel.TRACE: "debug",
    FacadeLevel.DEBUG: "debug",
    FacadeLevel.INFO: "info",
    FacadeLevel.WARN: "warning",
    FacadeLevel.ERROR: "error",
    FacadeLevel.FATAL: "critical",
}


class StructlogLogger(AbstractLogger):
    """Facade logger for applications whose sink is structlog."""

    def __init__(self, name: str, min_level: FacadeLevel = FacadeLevel.INFO):
        self.name = name
        self.min_level = min_level
        self._logger = structlog.get_logger(name)

    def is_enabled(self, level: FacadeLevel) -> bool:
        return level != FacadeLevel.OFF and level >= self.min_level

    def write_internal(self, level: FacadeLevel, message: MessageProducer, exception: BaseException | None) -> None:
        boundary = resolve_caller_boundary(type(self), AbstractLogger)
        event: dict[str, Any] = {"logger": self.name, "caller_boundary": boundary}
        if exception is not None:
            event["exc_info"] = exception
        getattr(self._logger, _STRUCTLOG_METHODS[level])(message(), **event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, min_level={self.min_level.name})"
