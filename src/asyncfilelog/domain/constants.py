from __future__ import annotations

"""
Domain Constants and Severity Definitions.

Centralizes the severity labels, configuration defaults, and the textual
formats used for log lines and generated file names.
"""

import logging
from enum import Enum

# -----------------------------------------------------------------------------
# SEVERITY
# -----------------------------------------------------------------------------

class Severity(str, Enum):
    """Severity label attached to every log entry."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"

    @property
    def label(self) -> str:
        return self.value

    @property
    def stdlib_level(self) -> int:
        """Equivalent numeric level of the standard `logging` module."""
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class ThreadPriority(str, Enum):
    """
    Scheduling hint for the worker thread.

    Mapped to a per-thread niceness increment on platforms that support it.
    Raising priority above NORMAL usually requires elevated privileges.
    """

    LOWEST = "lowest"
    BELOW_NORMAL = "below_normal"
    NORMAL = "normal"
    ABOVE_NORMAL = "above_normal"
    HIGHEST = "highest"

    @property
    def niceness(self) -> int:
        return _NICENESS[self]


_NICENESS = {
    ThreadPriority.LOWEST: 10,
    ThreadPriority.BELOW_NORMAL: 5,
    ThreadPriority.NORMAL: 0,
    ThreadPriority.ABOVE_NORMAL: -5,
    ThreadPriority.HIGHEST: -10,
}

# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_DIRECTORY = "."
DEFAULT_FILE_NAME = "Program"
DEFAULT_EXTENSION = ".log"
BYTES_PER_MB = 1048576
DEFAULT_MAX_FILE_SIZE_MB = 1
DEFAULT_MAX_FILES = 10
DEFAULT_THREAD_NAME = "asyncfilelog-worker"
DEFAULT_STOP_TIMEOUT = 5.0

FATAL_MARKER = "[ FATAL ]"

# -----------------------------------------------------------------------------
# TEXT FORMATS
# -----------------------------------------------------------------------------

# Line timestamp: dd.MM.yy HH:mm:ss fff (milliseconds appended separately)
LINE_TIME_FORMAT = "%d.%m.%y %H:%M:%S"

# File name stamp: YYYY.MM.DD_HH.MM.SS (hundredths appended separately)
FILE_STAMP_FORMAT = "%Y.%m.%d_%H.%M.%S"

# Regex matching a rendered file name stamp, hundredths included
FILE_STAMP_PATTERN = r"\d{4}\.\d{2}\.\d{2}_\d{2}\.\d{2}\.\d{2}\.\d{2}"

LINE_TERMINATOR = "\r\n"
STACK_TRACE_HEADER = "[StackTrace]"
UNKNOWN_SOURCE = "<unknown>"

STARTING_MESSAGE = "Starting logger..."
STOPPING_MESSAGE = "Stopping logger..."
