"""
logbridge: a vendor-neutral logging facade over the stdlib ``logging`` engine.

- facade -> engine: ``EngineLogger`` via ``EngineLoggerFactoryAdapter``
- engine -> facade: ``FacadeHandler``
- levels: ``closest_level`` rounds engine levels down to facade levels

Library: structlog for contextual variables and rendering, pydantic-settings
for configuration.
"""

from .config import AdapterSettings, ConfigType, ConfigurationError
from .extraction import IncompatibleEngineError
from .facade import AbstractLogger, GlobalVariablesContext, ThreadVariablesContext, VariablesContext
from .factory import AbstractLoggerFactoryAdapter, EngineLoggerFactoryAdapter, StructlogFactoryAdapter
from .handler import FacadeHandler
from .levels import LEVEL_MAP, EngineLevel, FacadeLevel, closest_level, engine_level
from .logger import EngineLogger, StructlogLogger
from .manager import LogManager, get_logger
from .runtime import EngineRuntime, StdlibRuntime

__all__ = [
    "LEVEL_MAP",
    "AbstractLogger",
    "AbstractLoggerFactoryAdapter",
    "AdapterSettings",
    "ConfigType",
    "ConfigurationError",
    "EngineLevel",
    "EngineLogger",
    "EngineLoggerFactoryAdapter",
    "EngineRuntime",
    "FacadeHandler",
    "FacadeLevel",
    "GlobalVariablesContext",
    "IncompatibleEngineError",
    "LogManager",
    "StdlibRuntime",
    "StructlogFactoryAdapter",
    "StructlogLogger",
    "ThreadVariablesContext",
    "VariablesContext",
    "closest_level",
    "engine_level",
    "get_logger",
]
