from __future__ import annotations

"""
Logging Handlers and Low-Level Utilities.

Provides the handler that bridges the stdlib `logging` module into an
asyncfilelog Logger, and the tagging mechanism used to tell our own
handlers apart from handlers installed by the host application.
"""

import logging
from typing import TYPE_CHECKING

from asyncfilelog.domain.constants import Severity

if TYPE_CHECKING:
    from asyncfilelog.core.logger import Logger

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_asyncfilelog_handler"

# Records from these loggers are never forwarded, to avoid feedback loops
_INTERNAL_LOGGER_PREFIX: str = "asyncfilelog"


# ==============================================================================
# INTERNAL LOGGING UTILITIES
# ==============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    """
    Mark a handler as an internally-managed handler.

    Args:
        handler: The logging handler instance to tag.
    """
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """
    Verify if a handler was installed by this package.

    Args:
        handler: The handler to inspect.

    Returns:
        bool: True if the handler carries our internal tag.
    """
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def severity_for_level(levelno: int) -> Severity:
    """Map a numeric stdlib level to the closest entry severity (rounding down)."""
    if levelno >= logging.CRITICAL:
        return Severity.FATAL
    if levelno >= logging.ERROR:
        return Severity.ERROR
    if levelno >= logging.WARNING:
        return Severity.WARN
    if levelno >= logging.INFO:
        return Severity.INFO
    return Severity.DEBUG


# ==============================================================================
# STDLIB BRIDGE
# ==============================================================================

class LoggerBridgeHandler(logging.Handler):
    """
    Forward stdlib `logging` records into an asyncfilelog Logger.

    CRITICAL records take the synchronous fatal path; everything else is
    queued. Records emitted by this package's own modules are dropped so a
    failing write can never feed itself.
    """

    def __init__(self, target: "Logger", level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._target = target
        _tag_handler(self)

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _INTERNAL_LOGGER_PREFIX or record.name.startswith(
                _INTERNAL_LOGGER_PREFIX + "."):
            return
        try:
            message = self.format(record) if self.formatter else record.getMessage()
            exc = record.exc_info[1] if record.exc_info else None
            self._target.log(severity_for_level(record.levelno), message, exc)
        except Exception:
            self.handleError(record)
