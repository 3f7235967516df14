"""
Route stdlib engine records into the facade.
"""

from __future__ import annotations

import copy
import logging
import threading
from functools import partial
from typing import Callable

from .diagnostics import ROOT_NAME
from .extraction import extract_exception
from .facade import AbstractLogger
from .levels import FacadeLevel, closest_level
from .manager import LogManager
from .runtime import ORIGIN_FACADE, ORIGIN_KEY

_LOG_METHODS: dict[FacadeLevel, str] = {
    FacadeLevel.ALL: "trace",
    FacadeLevel.TRACE: "trace",
    FacadeLevel.DEBUG: "debug",
    FacadeLevel.INFO: "info",
    FacadeLevel.WARN: "warn",
    FacadeLevel.ERROR: "error",
    FacadeLevel.FATAL: "fatal",
}

# Set while a record is being forwarded on this thread. Records the facade
# writes back into the engine meanwhile are its own output.
_forwarding = threading.local()


class FacadeHandler(logging.Handler):
    """
    Redirect stdlib logging records to facade loggers.

    The record level is rounded down to the nearest facade level, and the
    record is rendered only if the facade logger accepts it. Records written
    by the engine adapter, by logbridge's own diagnostics, or by any facade
    logger while it handles a forwarded record are skipped, so a facade
    backed by the same engine does not loop.
    """

    def __init__(
        self,
        level: int = logging.NOTSET,
        get_logger: Callable[[str], AbstractLogger] | None = None,
    ):
        super().__init__(level)
        self._get_logger = get_logger or LogManager.get_logger

    def _render(self, record: logging.LogRecord) -> str:
        # The exception is forwarded on its own; keep the traceback out of the text.
        if record.exc_info is None and record.exc_text is None:
            return self.format(record)
        clean = copy.copy(record)
        clean.exc_info = None
        clean.exc_text = None
        return self.format(clean)

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(_forwarding, "active", False):
            return
        if getattr(record, ORIGIN_KEY, None) == ORIGIN_FACADE:
            return
        if record.name == ROOT_NAME or record.name.startswith(f"{ROOT_NAME}."):
            return

        level = closest_level(record.levelno)
        if level == FacadeLevel.OFF:
            return

        exception = extract_exception(record)
        _forwarding.active = True
        try:
            facade_logger = self._get_logger(record.name)
            getattr(facade_logger, _LOG_METHODS[level])(partial(self._render, record), exception)
        except Exception:
            self.handleError(record)
        finally:
            _forwarding.active = False
