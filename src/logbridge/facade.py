"""
Vendor-neutral logging facade.

Application code talks to ``AbstractLogger``; concrete adapters decide where
records go. Messages may be given as plain objects or as zero-argument
callables, and are only rendered once the level gate is known to be open.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from functools import partial
from typing import Any, Callable

import structlog

from .boundary import register_adapter_type
from .levels import FacadeLevel

MessageProducer = Callable[[], str]


def _render(message: Any) -> str:
    # Classes are rendered with str(), not instantiated.
    if callable(message) and not isinstance(message, type):
        message = message()
    return message if isinstance(message, str) else str(message)


def _render_format(fmt: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    return fmt.format(*args, **kwargs)


# =============================================================================
# Variables Contexts
# =============================================================================


class VariablesContext(ABC):
    """Key/value store whose entries are attached to every record."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None: ...

    @abstractmethod
    def get(self, key: str) -> Any: ...

    @abstractmethod
    def contains(self, key: str) -> bool: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class GlobalVariablesContext(VariablesContext):
    """Process-wide variables, shared by every logger."""

    _values: dict[str, Any] = {}
    _lock = threading.Lock()

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def contains(self, key: str) -> bool:
        return key in self._values

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    @classmethod
    def snapshot(cls) -> dict[str, Any]:
        with cls._lock:
            return dict(cls._values)


class ThreadVariablesContext(VariablesContext):
    """Call-scoped variables stored in ``structlog.contextvars``."""

    def set(self, key: str, value: Any) -> None:
        structlog.contextvars.bind_contextvars(**{key: value})

    def get(self, key: str) -> Any:
        return structlog.contextvars.get_contextvars().get(key)

    def contains(self, key: str) -> bool:
        return key in structlog.contextvars.get_contextvars()

    def remove(self, key: str) -> None:
        structlog.contextvars.unbind_contextvars(key)

    def clear(self) -> None:
        structlog.contextvars.clear_contextvars()


# =============================================================================
# Logger
# =============================================================================


@register_adapter_type
class AbstractLogger(ABC):
    """
    Base class of every facade logger.

    Subclasses implement ``is_enabled`` and ``write_internal``. They are
    registered as adapter types automatically, so their frames are never
    reported as the origin of a record.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        register_adapter_type(cls)

    @abstractmethod
    def is_enabled(self, level: FacadeLevel) -> bool:
        """Whether a write at ``level`` would be emitted."""

    @abstractmethod
    def write_internal(self, level: FacadeLevel, message: MessageProducer, exception: BaseException | None) -> None:
        """Forward an enabled write. ``message`` is rendered only if the record is emitted."""

    # -------------------------------------------------------------------------
    # Level Gates
    # -------------------------------------------------------------------------

    @property
    def is_trace_enabled(self) -> bool:
        return self.is_enabled(FacadeLevel.TRACE)

    @property
    def is_debug_enabled(self) -> bool:
        return self.is_enabled(FacadeLevel.DEBUG)

    @property
    def is_info_enabled(self) -> bool:
        return self.is_enabled(FacadeLevel.INFO)

    @property
    def is_warn_enabled(self) -> bool:
        return self.is_enabled(FacadeLevel.WARN)

    @property
    def is_error_enabled(self) -> bool:
        return self.is_enabled(FacadeLevel.ERROR)

    @property
    def is_fatal_enabled(self) -> bool:
        return self.is_enabled(FacadeLevel.FATAL)

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    @property
    def global_variables(self) -> VariablesContext:
        return GlobalVariablesContext()

    @property
    def thread_variables(self) -> VariablesContext:
        return ThreadVariablesContext()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _write(self, level: FacadeLevel, message: Any, exception: BaseException | None) -> None:
        if not self.is_enabled(level):
            return
        self.write_internal(level, partial(_render, message), exception)

    def _write_format(
        self,
        level: FacadeLevel,
        fmt: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        exception: BaseException | None,
    ) -> None:
        if not self.is_enabled(level):
            return
        self.write_internal(level, partial(_render_format, fmt, args, kwargs), exception)

    def log(self, level: FacadeLevel, message: Any, exception: BaseException | None = None) -> None:
        if level == FacadeLevel.OFF:
            return
        self._write(level, message, exception)

    def trace(self, message: Any, exception: BaseException | None = None) -> None:
        self._write(FacadeLevel.TRACE, message, exception)

    def debug(self, message: Any, exception: BaseException | None = None) -> None:
        self._write(FacadeLevel.DEBUG, message, exception)

    def info(self, message: Any, exception: BaseException | None = None) -> None:
        self._write(FacadeLevel.INFO, message, exception)

    def warn(self, message: Any, exception: BaseException | None = None) -> None:
        self._write(FacadeLevel.WARN, message, exception)

    def error(self, message: Any, exception: BaseException | None = None) -> None:
        self._write(FacadeLevel.ERROR, message, exception)

    def fatal(self, message: Any, exception: BaseException | None = None) -> None:
        self._write(FacadeLevel.FATAL, message, exception)

    def trace_format(self, fmt: str, *args: Any, exception: BaseException | None = None, **kwargs: Any) -> None:
        self._write_format(FacadeLevel.TRACE, fmt, args, kwargs, exception)

    def debug_format(self, fmt: str, *args: Any, exception: BaseException | None = None, **kwargs: Any) -> None:
        self._write_format(FacadeLevel.DEBUG, fmt, args, kwargs, exception)

    def info_format(self, fmt: str, *args: Any, exception: BaseException | None = None, **kwargs: Any) -> None:
        self._write_format(FacadeLevel.INFO, fmt, args, kwargs, exception)

    def warn_format(self, fmt: str, *args: Any, exception: BaseException | None = None, **kwargs: Any) -> None:
        self._write_format(FacadeLevel.WARN, fmt, args, kwargs, exception)

    def error_format(self, fmt: str, *args: Any, exception: BaseException | None = None, **kwargs: Any) -> None:
        self._write_format(FacadeLevel.ERROR, fmt, args, kwargs, exception)

    def fatal_format(self, fmt: str, *args: Any, exception: BaseException | None = None, **kwargs: Any) -> None:
        self._write_format(FacadeLevel.FATAL, fmt, args, kwargs, exception)
