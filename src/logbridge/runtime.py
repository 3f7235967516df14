"""
Boundary with the underlying engine.

The engine adapter only talks to the engine through ``EngineRuntime`` so that
tests (and alternative engines) can substitute their own implementation.
"""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Protocol

from . import configurators
from .boundary import find_caller
from .config import LogFormat, LogLevel

ORIGIN_KEY = "logbridge_origin"
ORIGIN_FACADE = "facade"


class EngineRuntime(Protocol):
    def basic_configure(self) -> None: ...

    def configure_inline(self, level: LogLevel, fmt: LogFormat) -> None: ...

    def configure_file(self, path: str | Path) -> None: ...

    def configure_and_watch(self, path: str | Path) -> None: ...

    def get_logger(self, name: str) -> Any: ...

    def is_level_enabled(self, handle: Any, level: int) -> bool: ...

    def write(
        self,
        handle: Any,
        boundary: str,
        level: int,
        message: Callable[[], str],
        exception: BaseException | None,
    ) -> None: ...


class StdlibRuntime:
    """``EngineRuntime`` backed by the stdlib ``logging`` module."""

    def basic_configure(self) -> None:
        configurators.basic_configure()

    def configure_inline(self, level: LogLevel = LogLevel.INFO, fmt: LogFormat = LogFormat.CONSOLE) -> None:
        configurators.configure_inline(level, fmt)

    def configure_file(self, path: str | Path) -> None:
        configurators.configure_file(path)

    def configure_and_watch(self, path: str | Path) -> None:
        configurators.configure_and_watch(path)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def is_level_enabled(self, handle: logging.Logger, level: int) -> bool:
        return handle.isEnabledFor(level)

    def write(
        self,
        handle: logging.Logger,
        boundary: str,
        level: int,
        message: Callable[[], str],
        exception: BaseException | None,
    ) -> None:
        """
        Emit one record on ``handle``.

        The message is rendered only when the level is enabled, and before any
        handler runs, so rendering errors reach the caller. The record's
        location is the first frame past ``boundary``.
        """
        if not handle.isEnabledFor(level):
            return

        text = message()
        site = find_caller(boundary, inspect.currentframe())
        exc_info = (type(exception), exception, exception.__traceback__) if exception is not None else None
        record = handle.makeRecord(
            handle.name,
            level,
            site.filename,
            site.lineno,
            text,
            (),
            exc_info,
            func=site.funcname,
            extra={ORIGIN_KEY: ORIGIN_FACADE, "caller_boundary": boundary},
        )
        handle.handle(record)
