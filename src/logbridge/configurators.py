"""
Engine configurators.

Each configuration mode of the adapter ends up here: the embedded default
configuration, configuration files (JSON, YAML or INI), file watching, and
the basic fallback.
"""

from __future__ import annotations

import logging
import logging.config
import threading
from pathlib import Path
from typing import Any

import orjson
import structlog
import yaml
from structlog.typing import EventDict, WrappedLogger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers.polling import PollingObserver as Observer

from .config import ConfigurationError, LogFormat, LogLevel
from .diagnostics import get_logger
from .facade import GlobalVariablesContext

logger = get_logger("configurators")

DICT_CONFIG_SUFFIXES = {".json", ".yaml", ".yml"}


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Structlog Processors
# =============================================================================


def merge_global_variables(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add process-wide facade variables without overriding call-scoped ones."""
    for key, value in GlobalVariablesContext.snapshot().items():
        event_dict.setdefault(key, value)
    return event_dict


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        merge_global_variables,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            [
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]


# =============================================================================
# INLINE
# =============================================================================


def inline_config(level: LogLevel = LogLevel.INFO, fmt: LogFormat = LogFormat.CONSOLE) -> dict[str, Any]:
    """The embedded default ``dictConfig``: one stderr handler rendered by structlog."""
    if fmt == LogFormat.JSON:
        renderer_chain: list[Any] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=orjson_dumps),
        ]
    else:
        renderer_chain = [structlog.dev.ConsoleRenderer(colors=False)]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "logbridge": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderer_chain],
                "foreign_pre_chain": _shared_processors(),
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "logbridge",
                "stream": "ext://sys.stderr",
            }
        },
        "root": {"level": level.value, "handlers": ["default"]},
    }


def configure_inline(level: LogLevel = LogLevel.INFO, fmt: LogFormat = LogFormat.CONSOLE) -> None:
    """Apply the embedded configuration and point structlog at the engine."""
    logging.config.dictConfig(inline_config(level, fmt))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            merge_global_variables,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    logger.debug("engine configured", mode="INLINE", level=level.value, format=fmt.value)


# =============================================================================
# FILE
# =============================================================================


def _read_dict_config(path: Path) -> dict[str, Any]:
    if path.suffix.lower() == ".json":
        data = orjson.loads(path.read_bytes())
    else:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ConfigurationError(f"logging configuration file '{path}' must contain a mapping")
    return data


def configure_file(path: str | Path) -> None:
    """Configure the engine from a JSON/YAML ``dictConfig`` file or an INI ``fileConfig`` file."""
    path = Path(path)
    if path.suffix.lower() in DICT_CONFIG_SUFFIXES:
        logging.config.dictConfig(_read_dict_config(path))
    else:
        logging.config.fileConfig(str(path), disable_existing_loggers=False)
    logger.debug("engine configured", mode="FILE", path=str(path))


# =============================================================================
# FILE-WATCH
# =============================================================================


class ReloadHandler(FileSystemEventHandler):
    """Re-applies a configuration file whenever it changes on disk."""

    def __init__(self, path: Path):
        super().__init__()
        self.path = path.resolve()

    def _matches(self, raw_path: str | bytes) -> bool:
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode()
        return bool(raw_path) and Path(raw_path).resolve() == self.path

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(event.src_path):
            self.reload()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(event.src_path):
            self.reload()

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(getattr(event, "dest_path", "")):
            self.reload()

    def reload(self) -> None:
        try:
            configure_file(self.path)
        except Exception:
            # The previous configuration stays in effect until the file is fixed.
            logger.exception("engine reconfiguration failed", path=str(self.path))


_watch_lock = threading.Lock()
_observer: Any = None


def configure_and_watch(path: str | Path, *, timeout: float = 1.0) -> ReloadHandler:
    """Configure from ``path`` now and again every time it changes."""
    global _observer

    path = Path(path)
    configure_file(path)

    handler = ReloadHandler(path)
    with _watch_lock:
        if _observer is not None:
            _observer.stop()
            _observer.join()
        _observer = Observer(timeout=timeout)
        _observer.daemon = True
        _observer.schedule(handler, str(handler.path.parent), recursive=False)
        _observer.start()
    logger.debug("watching engine configuration", path=str(handler.path))
    return handler


def stop_watching() -> None:
    """Stop the FILE-WATCH observer, if one is running."""
    global _observer

    with _watch_lock:
        if _observer is not None:
            _observer.stop()
            _observer.join()
            _observer = None


# =============================================================================
# Fallback
# =============================================================================


def basic_configure() -> None:
    """Minimal default configuration: a stderr handler on the root logger."""
    logging.basicConfig()
    logger.debug("engine configured", mode="BASIC")
