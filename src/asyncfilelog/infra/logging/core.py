from __future__ import annotations

"""
Diagnostics Logging Orchestrator.

Maintains the idempotent setup of the stdlib root logger for command line
use: a tagged stderr handler for the package's diagnostics and, optionally,
a bridge that routes every stdlib record into an asyncfilelog Logger.
"""

import logging
import sys
from typing import TYPE_CHECKING, Optional

from asyncfilelog.infra.logging.config import _LEVEL_MAP, LoggingConfig
from asyncfilelog.infra.logging.handlers import (
    LoggerBridgeHandler,
    _is_our_handler,
    _tag_handler,
)

if TYPE_CHECKING:
    from asyncfilelog.core.logger import Logger

# Internal state flag for idempotency
_CONFIGURED_FLAG_ATTR: str = "_asyncfilelog_configured"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(
        cfg: LoggingConfig,
        *,
        force: bool = False,
        bridge: Optional["Logger"] = None,
) -> logging.Logger:
    """
    Execute idempotent configuration of the root logger.

    Repeated calls do not attach duplicate handlers unless `force` is set,
    in which case previously installed handlers are replaced.

    Args:
        cfg: Structural configuration for the diagnostics output.
        force: If True, bypass idempotency checks and re-initialize handlers.
        bridge: Optional Logger receiving every stdlib record.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    root = logging.getLogger()

    try:
        already_configured = bool(getattr(root, _CONFIGURED_FLAG_ATTR, False))
        if already_configured and not force:
            return root

        level_int = _parse_level(cfg.level)
        root.setLevel(level_int)
        _remove_our_handlers(root)

        if cfg.console:
            sh = logging.StreamHandler(sys.stderr)
            sh.setLevel(level_int)
            sh.setFormatter(logging.Formatter(cfg.console_fmt, datefmt=cfg.datefmt))
            _tag_handler(sh)
            root.addHandler(sh)

        if bridge is not None:
            root.addHandler(LoggerBridgeHandler(bridge, level=level_int))

        setattr(root, _CONFIGURED_FLAG_ATTR, True)
        return root

    # Fallback to emergency console logging if the setup fails
    except Exception:
        _remove_our_handlers(root)
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
        _tag_handler(sh)
        root.addHandler(sh)
        root.warning("Diagnostics logging setup failed. Switched to emergency console.")
        return root


def reset_logging() -> None:
    """Detach every handler installed by configure_logging() and clear its state."""
    root = logging.getLogger()
    _remove_our_handlers(root)
    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


def get_logger(name: str) -> logging.Logger:
    """
    Acquire a named stdlib logger.

    Args:
        name: Hierarchical name for the logger (usually __name__).

    Returns:
        logging.Logger: The requested logger instance.
    """
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Convert a string-based logging level to its numeric constant."""
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.WARNING)


def _remove_our_handlers(root: logging.Logger) -> None:
    """Identify and detach all internally-managed handlers from the root."""
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()
