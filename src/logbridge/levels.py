"""
Severity levels of the engine and of the facade, and the reconciliation between them.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class EngineLevel(IntEnum):
    """Levels understood by the stdlib engine. Any other integer is a gradation."""

    ALL = logging.NOTSET
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL
    OFF = 2**31 - 1


class FacadeLevel(IntEnum):
    """Levels exposed by the facade, from most verbose to disabled."""

    ALL = 0
    TRACE = 1
    DEBUG = 2
    INFO = 3
    WARN = 4
    ERROR = 5
    FATAL = 6
    OFF = 7


logging.addLevelName(EngineLevel.TRACE, "TRACE")
logging.addLevelName(EngineLevel.OFF, "OFF")

# Most severe first.
_THRESHOLDS: tuple[tuple[EngineLevel, FacadeLevel], ...] = (
    (EngineLevel.FATAL, FacadeLevel.FATAL),
    (EngineLevel.ERROR, FacadeLevel.ERROR),
    (EngineLevel.WARN, FacadeLevel.WARN),
    (EngineLevel.INFO, FacadeLevel.INFO),
    (EngineLevel.DEBUG, FacadeLevel.DEBUG),
    (EngineLevel.TRACE, FacadeLevel.TRACE),
)

_WRITE_LEVELS: dict[FacadeLevel, EngineLevel] = {
    # The engine never emits at NOTSET.
    FacadeLevel.ALL: EngineLevel.TRACE,
    FacadeLevel.TRACE: EngineLevel.TRACE,
    FacadeLevel.DEBUG: EngineLevel.DEBUG,
    FacadeLevel.INFO: EngineLevel.INFO,
    FacadeLevel.WARN: EngineLevel.WARN,
    FacadeLevel.ERROR: EngineLevel.ERROR,
    FacadeLevel.FATAL: EngineLevel.FATAL,
}


def closest_level(level: int) -> FacadeLevel:
    """
    Round an engine level down to the nearest facade level.

    ``OFF`` and ``ALL`` map to their facade counterparts. Gradations between
    named levels resolve to the next less severe named level, and anything
    more verbose than ``TRACE`` resolves to ``FacadeLevel.ALL``.

    Raises:
        TypeError: if ``level`` is not an integer.
    """
    if isinstance(level, bool) or not isinstance(level, int):
        raise TypeError(f"engine level must be an int, got {type(level).__name__}: {level!r}")

    if level == EngineLevel.OFF:
        return FacadeLevel.OFF
    if level == EngineLevel.ALL:
        return FacadeLevel.ALL

    for threshold, facade_level in _THRESHOLDS:
        if level >= threshold:
            return facade_level

    return FacadeLevel.ALL


def engine_level(level: FacadeLevel) -> EngineLevel:
    """Engine level used when the facade writes at ``level``."""
    try:
        return _WRITE_LEVELS[FacadeLevel(level)]
    except (KeyError, ValueError):
        raise ValueError(f"unknown log level: {level!r}") from None


LEVEL_MAP: Mapping[EngineLevel, FacadeLevel] = MappingProxyType(
    {member: closest_level(member) for member in EngineLevel}
)
