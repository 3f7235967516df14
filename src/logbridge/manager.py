"""
Process-wide entry point of the facade.
"""

from __future__ import annotations

import threading

from .facade import AbstractLogger
from .factory import AbstractLoggerFactoryAdapter, EngineLoggerFactoryAdapter


class LogManager:
    """Holds the active factory adapter. Defaults to the engine adapter configured from the environment."""

    _adapter: AbstractLoggerFactoryAdapter | None = None
    _lock = threading.Lock()

    @classmethod
    def adapter(cls) -> AbstractLoggerFactoryAdapter:
        adapter = cls._adapter
        if adapter is None:
            with cls._lock:
                if cls._adapter is None:
                    cls._adapter = EngineLoggerFactoryAdapter()
                adapter = cls._adapter
        return adapter

    @classmethod
    def set_adapter(cls, adapter: AbstractLoggerFactoryAdapter) -> None:
        with cls._lock:
            cls._adapter = adapter

    @classmethod
    def get_logger(cls, name: str | type) -> AbstractLogger:
        return cls.adapter().get_logger(name)

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._adapter = None


def get_logger(name: str | type) -> AbstractLogger:
    """Get a facade logger from the active adapter."""
    return LogManager.get_logger(name)
