from __future__ import annotations

"""
Log Entry Domain Model.

Defines the immutable value that travels from a producer thread to the
worker, its deterministic text rendering, and the inverse parser used to
read persisted log files back into entries.
"""

import re
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from asyncfilelog.domain.constants import (
    FILE_STAMP_FORMAT,
    LINE_TERMINATOR,
    LINE_TIME_FORMAT,
    STACK_TRACE_HEADER,
    UNKNOWN_SOURCE,
    Severity,
)


class EntryFormatError(ValueError):
    """Raised when text does not follow the persisted entry format."""


# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorDetail:
    """
    Snapshot of an exception attached to a log entry.

    Attributes:
        source: Originating call site as 'module.qualified_function'.
        message: Exception type and text, e.g. 'ValueError: bad input'.
        stack_trace: Formatted traceback, empty if the error was never raised.
    """
    source: str
    message: str
    stack_trace: str = ""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorDetail":
        """
        Capture the call site, message, and traceback of an exception.

        The call site is taken from the innermost traceback frame, i.e. the
        function that actually raised.

        Args:
            exc: Exception instance, raised or not.

        Returns:
            ErrorDetail: Immutable snapshot safe to hand to another thread.
        """
        message = "".join(traceback.format_exception_only(type(exc), exc)).strip()

        tb = exc.__traceback__
        if tb is None:
            return cls(source=UNKNOWN_SOURCE, message=message, stack_trace="")

        stack_trace = "".join(traceback.format_tb(tb)).rstrip("\n")
        while tb.tb_next is not None:
            tb = tb.tb_next

        code = tb.tb_frame.f_code
        module = tb.tb_frame.f_globals.get("__name__", "")
        func = getattr(code, "co_qualname", code.co_name)
        source = f"{module}.{func}" if module else func

        return cls(source=source, message=message, stack_trace=stack_trace)


@dataclass(frozen=True)
class LogEntry:
    """
    One discrete log event.

    The timestamp is captured when the entry is built on the producer
    thread, never when the worker writes it.
    """
    message: str
    severity: Severity
    timestamp: datetime = field(default_factory=datetime.now)
    error: Optional[ErrorDetail] = None

    @classmethod
    def create(
            cls,
            message: str,
            severity: Union[Severity, str],
            exc: Optional[BaseException] = None,
    ) -> "LogEntry":
        """
        Build an entry from caller input.

        Args:
            message: Free-form text. Non-string values are converted with str().
            severity: Severity member or its label.
            exc: Optional exception to attach.

        Returns:
            LogEntry: The immutable entry.
        """
        error = ErrorDetail.from_exception(exc) if exc is not None else None
        return cls(message=str(message), severity=Severity(severity), error=error)

    def render(self) -> str:
        """
        Produce the persisted text of this entry.

        Format:
            {LABEL} [{dd.MM.yy HH:mm:ss fff}] {message}\\r\\n
        followed, when an error is attached, by:
            [{source}()] {error message}]\\n[StackTrace]\\n{stack trace}\\r\\n

        Returns:
            str: The rendered text. Pure function of the entry's fields.
        """
        text = (
            f"{self.severity.label} [{format_line_time(self.timestamp)}] "
            f"{self.message}{LINE_TERMINATOR}"
        )
        if self.error is not None:
            text += (
                f"[{self.error.source}()] {self.error.message}]\n"
                f"{STACK_TRACE_HEADER}\n"
                f"{self.error.stack_trace}{LINE_TERMINATOR}"
            )
        return text

    def __str__(self) -> str:
        return self.render()


# -----------------------------------------------------------------------------
# TIMESTAMP FORMATTING
# -----------------------------------------------------------------------------

def format_line_time(ts: datetime) -> str:
    """Render a timestamp as 'dd.MM.yy HH:mm:ss fff'."""
    return f"{ts.strftime(LINE_TIME_FORMAT)} {ts.microsecond // 1000:03d}"


def format_file_stamp(ts: datetime) -> str:
    """Render a timestamp as 'YYYY.MM.DD_HH.MM.SS.hh' for use in file names."""
    return f"{ts.strftime(FILE_STAMP_FORMAT)}.{ts.microsecond // 10000:02d}"


# -----------------------------------------------------------------------------
# PARSING
# -----------------------------------------------------------------------------

_HEADER = r"(?:DEBUG|INFO|WARN|ERROR|FATAL) \[\d{2}\.\d{2}\.\d{2} \d{2}:\d{2}:\d{2} \d{3}\] "

# Messages and stack traces may hold CRLF themselves; a terminator only ends
# them where another entry or an error block starts, or at the end of text.
_ENTRY_RE = re.compile(
    r"(?P<label>DEBUG|INFO|WARN|ERROR|FATAL) "
    r"\[(?P<time>\d{2}\.\d{2}\.\d{2} \d{2}:\d{2}:\d{2}) (?P<millis>\d{3})\] "
    r"(?P<message>.*?)\r\n"
    r"(?=" + _HEADER + r"|\[[^\r\n]*?\(\)\] |\Z)"
    r"(?:\[(?P<source>[^\r\n]*?)\(\)\] (?P<error>.*?)\]\n"
    r"\[StackTrace\]\n"
    r"(?P<stack>.*?)\r\n"
    r"(?=" + _HEADER + r"|\Z))?",
    re.DOTALL,
)


def parse_entry(text: str) -> LogEntry:
    """
    Parse the rendered text of exactly one entry.

    Timestamps are recovered with millisecond precision.

    Args:
        text: Output of LogEntry.render().

    Returns:
        LogEntry: The reconstructed entry.

    Raises:
        EntryFormatError: If the text is not a single rendered entry.
    """
    match = _ENTRY_RE.fullmatch(text)
    if match is None:
        raise EntryFormatError(f"Not a log entry: {text[:80]!r}")
    return _entry_from_match(match)


def parse_entries(text: str) -> List[LogEntry]:
    """
    Parse the full content of a log file into its entries, in file order.

    Raises:
        EntryFormatError: If any segment of the text is not a rendered entry.
    """
    entries: List[LogEntry] = []
    pos = 0
    while pos < len(text):
        match = _ENTRY_RE.match(text, pos)
        if match is None or match.end() == pos:
            raise EntryFormatError(f"Malformed log content at offset {pos}: {text[pos:pos + 80]!r}")
        entries.append(_entry_from_match(match))
        pos = match.end()
    return entries


def _entry_from_match(match: "re.Match[str]") -> LogEntry:
    timestamp = datetime.strptime(match.group("time"), LINE_TIME_FORMAT)
    timestamp = timestamp.replace(microsecond=int(match.group("millis")) * 1000)

    error = None
    if match.group("source") is not None:
        error = ErrorDetail(
            source=match.group("source"),
            message=match.group("error"),
            stack_trace=match.group("stack"),
        )

    return LogEntry(
        message=match.group("message"),
        severity=Severity(match.group("label")),
        timestamp=timestamp,
        error=error,
    )
