from __future__ import annotations

from .config import LoggingConfig
from .core import (
    configure_logging,
    get_logger,
    reset_logging,
)
from .handlers import (
    LoggerBridgeHandler,
    severity_for_level,
)

__all__ = [
    "LoggingConfig",
    "LoggerBridgeHandler",
    "configure_logging",
    "get_logger",
    "reset_logging",
    "severity_for_level",
]
