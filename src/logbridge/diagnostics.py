"""
Internal diagnostics for logbridge itself.

Diagnostics are structlog loggers bound directly to stdlib loggers under the
``logbridge`` namespace, so they obey whatever levels the engine is
configured with and never pass through the facade.
"""

from __future__ import annotations

import logging

import structlog

ROOT_NAME = "logbridge"


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a diagnostics logger, e.g. ``get_logger("factory")`` -> ``logbridge.factory``."""
    full_name = f"{ROOT_NAME}.{name}" if name else ROOT_NAME
    return structlog.wrap_logger(
        logging.getLogger(full_name),
        wrapper_class=structlog.stdlib.BoundLogger,
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
        ],
    )
