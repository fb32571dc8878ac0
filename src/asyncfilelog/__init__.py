from __future__ import annotations

"""
asyncfilelog: asynchronous, thread-safe file logging.

Producers enqueue entries without blocking; one background worker writes
them to a size-rotated, count-pruned log file. Fatal entries bypass the
queue and are written synchronously to their own files.
"""

from asyncfilelog.core.logger import Logger
from asyncfilelog.core.worker import WorkerState
from asyncfilelog.domain.config import (
    ConfigurationError,
    LoggerConfigBuilder,
    LoggerConfiguration,
    load_config,
)
from asyncfilelog.domain.constants import Severity, ThreadPriority
from asyncfilelog.domain.entry import (
    EntryFormatError,
    ErrorDetail,
    LogEntry,
    parse_entries,
    parse_entry,
)
from asyncfilelog.infra.logging import LoggerBridgeHandler

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "EntryFormatError",
    "ErrorDetail",
    "LogEntry",
    "Logger",
    "LoggerBridgeHandler",
    "LoggerConfigBuilder",
    "LoggerConfiguration",
    "Severity",
    "ThreadPriority",
    "WorkerState",
    "load_config",
    "parse_entries",
    "parse_entry",
]
