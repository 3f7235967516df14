"""
Logger factory adapters.

A factory adapter configures its backend once, at construction, and hands out
one cached facade logger per name.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping

from .config import AdapterSettings, ConfigType, ConfigurationError
from .diagnostics import get_logger
from .facade import AbstractLogger
from .levels import FacadeLevel
from .logger import EngineLogger, StructlogLogger
from .runtime import EngineRuntime, StdlibRuntime

logger = get_logger("factory")

# Property names accepted in addition to the settings field names.
_PROPERTY_ALIASES = {
    "configType": "config_type",
    "configFile": "config_file",
    "baseDir": "base_dir",
    "inlineLevel": "inline_level",
    "inlineFormat": "inline_format",
}


def _logger_name(name: str | type) -> str:
    if isinstance(name, type):
        return f"{name.__module__}.{name.__qualname__}"
    return name


def settings_from_properties(properties: Mapping[str, Any] | AdapterSettings | None) -> AdapterSettings:
    """Build settings from a property mapping; unset keys fall back to the environment."""
    if isinstance(properties, AdapterSettings):
        return properties
    values = {_PROPERTY_ALIASES.get(key, key): value for key, value in (properties or {}).items()}
    return AdapterSettings(**values)


class AbstractLoggerFactoryAdapter(ABC):
    """Caches facade loggers by name."""

    def __init__(self) -> None:
        self._loggers: dict[str, AbstractLogger] = {}
        self._lock = threading.Lock()

    @abstractmethod
    def create_logger(self, name: str) -> AbstractLogger: ...

    def get_logger(self, name: str | type) -> AbstractLogger:
        key = _logger_name(name)
        cached = self._loggers.get(key)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._loggers.get(key)
            if cached is None:
                cached = self._loggers[key] = self.create_logger(key)
            return cached


class EngineLoggerFactoryAdapter(AbstractLoggerFactoryAdapter):
    """
    Factory adapter for the stdlib engine.

    Args:
        properties: ``configType``/``configFile`` mapping (snake-case keys work
            too) or ready-made ``AdapterSettings``.
        runtime: Engine boundary; defaults to ``StdlibRuntime``.

    Raises:
        ConfigurationError: FILE or FILE-WATCH without an existing ``configFile``.
    """

    def __init__(
        self,
        properties: Mapping[str, Any] | AdapterSettings | None = None,
        runtime: EngineRuntime | None = None,
    ):
        super().__init__()
        self.runtime: EngineRuntime = runtime if runtime is not None else StdlibRuntime()
        self.settings = settings_from_properties(properties)
        self._configure()

    def _validated_config_file(self) -> str:
        config_file = self.settings.resolved_config_file
        if not config_file:
            raise ConfigurationError(
                "Configuration property 'configFile' must be set for engine configuration "
                f"of type '{self.settings.config_type}'."
            )
        if not Path(config_file).is_file():
            raise ConfigurationError(f"Engine configuration file '{config_file}' does not exist")
        return config_file

    def _configure(self) -> None:
        mode = self.settings.mode
        if mode in (ConfigType.FILE, ConfigType.FILE_WATCH):
            config_file = self._validated_config_file()

        if mode == ConfigType.INLINE:
            self.runtime.configure_inline(self.settings.inline_level, self.settings.inline_format)
        elif mode == ConfigType.FILE:
            self.runtime.configure_file(config_file)
        elif mode == ConfigType.FILE_WATCH:
            self.runtime.configure_and_watch(config_file)
        elif mode == ConfigType.EXTERNAL:
            logger.debug("engine configured externally")
        else:
            self.runtime.basic_configure()

    def create_logger(self, name: str) -> AbstractLogger:
        return EngineLogger(self.runtime.get_logger(name), self.runtime)


class StructlogFactoryAdapter(AbstractLoggerFactoryAdapter):
    """Factory adapter handing out ``StructlogLogger`` instances. Structlog configuration is left to the application."""

    def __init__(self, min_level: FacadeLevel = FacadeLevel.INFO):
        super().__init__()
        self.min_level = min_level

    def create_logger(self, name: str) -> AbstractLogger:
        return StructlogLogger(name, self.min_level)
