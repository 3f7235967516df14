"""
Adapter Configuration.

Selects how the stdlib engine is configured when the engine adapter starts.
"""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HOME_PREFIXES = ("~/", "~\\")


class ConfigurationError(ValueError):
    """Raised when the adapter cannot be configured as requested."""


class ConfigType(str, Enum):
    INLINE = "INLINE"
    FILE = "FILE"
    FILE_WATCH = "FILE-WATCH"
    EXTERNAL = "EXTERNAL"


class LogLevel(str, Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


def _application_base_dir() -> Path:
    main_file = getattr(sys.modules.get("__main__"), "__file__", None)
    if main_file:
        return Path(main_file).resolve().parent
    return Path.cwd()


class AdapterSettings(BaseSettings):
    """Engine adapter configuration. Prefix: LOGBRIDGE_"""

    model_config = SettingsConfigDict(
        env_prefix="LOGBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    config_type: str = Field(default="", description="INLINE, FILE, FILE-WATCH, EXTERNAL; anything else applies a basic config")
    config_file: str = Field(default="", description="Engine configuration file for FILE and FILE-WATCH")
    base_dir: Path = Field(default_factory=_application_base_dir, description="Directory '~/' expands to")
    inline_level: LogLevel = Field(default=LogLevel.INFO, description="Root level of the INLINE configuration")
    inline_format: LogFormat = Field(default=LogFormat.CONSOLE, description="Output format of the INLINE configuration")

    @field_validator("config_type", mode="before")
    @classmethod
    def _normalize_config_type(cls, value: object) -> str:
        return str(value or "").strip().upper()

    @property
    def mode(self) -> ConfigType | None:
        """The recognized configuration mode, or None for the basic fallback."""
        try:
            return ConfigType(self.config_type)
        except ValueError:
            return None

    @property
    def resolved_config_file(self) -> str:
        """``config_file`` with a home-relative prefix expanded against ``base_dir``."""
        path = self.config_file.strip()
        if path.startswith(HOME_PREFIXES):
            base_dir = str(self.base_dir).rstrip("/\\")
            return f"{base_dir}/{path[2:]}"
        return path
