"""
Exception extraction strategies.

Records coming from the engine expose the logged exception differently
depending on the engine version. A strategy is selected from what the record
supports; the legacy field accessor is the last resort and fails loudly when
the field is missing, since that means an incompatible engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .boundary import type_name

LEGACY_EXCEPTION_FIELD = "_thrown_exception"

_MISSING = object()


class IncompatibleEngineError(AttributeError):
    """The record type does not carry the exception where this engine version should."""


class ExceptionStrategy(ABC):
    name: str

    @abstractmethod
    def supports(self, record: Any) -> bool: ...

    @abstractmethod
    def extract(self, record: Any) -> BaseException | None: ...


class ExcInfoStrategy(ExceptionStrategy):
    """Current stdlib records: ``record.exc_info`` is ``(type, value, traceback)`` or None."""

    name = "exc_info"

    def supports(self, record: Any) -> bool:
        return hasattr(record, "exc_info")

    def extract(self, record: Any) -> BaseException | None:
        exc_info = record.exc_info
        if isinstance(exc_info, BaseException):
            return exc_info
        if isinstance(exc_info, tuple) and len(exc_info) == 3:
            return exc_info[1]
        return None


class AttributeStrategy(ExceptionStrategy):
    """Records exposing the exception through a public attribute."""

    def __init__(self, attribute: str):
        self.name = attribute
        self._attribute = attribute

    def supports(self, record: Any) -> bool:
        return hasattr(record, self._attribute)

    def extract(self, record: Any) -> BaseException | None:
        value = getattr(record, self._attribute)
        return value if isinstance(value, BaseException) else None


class FieldStrategy(ExceptionStrategy):
    """Legacy records that keep the exception in an internal field."""

    def __init__(self, field: str):
        self.name = field
        self._field = field

    def supports(self, record: Any) -> bool:
        return True

    def extract(self, record: Any) -> BaseException | None:
        value = getattr(record, self._field, _MISSING)
        if value is _MISSING:
            raise IncompatibleEngineError(
                f"Field {self._field} was not found in type {type_name(type(record))}",
                name=self._field,
                obj=record,
            )
        return value


STRATEGIES: tuple[ExceptionStrategy, ...] = (
    ExcInfoStrategy(),
    AttributeStrategy("exception"),
)
FALLBACK_STRATEGY: ExceptionStrategy = FieldStrategy(LEGACY_EXCEPTION_FIELD)


_selected: dict[type, ExceptionStrategy] = {}


def select_strategy(record: Any) -> ExceptionStrategy:
    """Strategy for records of this type, chosen from the first one seen."""
    record_type = type(record)
    strategy = _selected.get(record_type)
    if strategy is None:
        strategy = next((s for s in STRATEGIES if s.supports(record)), FALLBACK_STRATEGY)
        _selected[record_type] = strategy
    return strategy


def extract_exception(record: Any) -> BaseException | None:
    """Return the exception logged with ``record``, if any."""
    return select_strategy(record).extract(record)
