from __future__ import annotations

"""
Asynchronous Logger Facade.

Public entry point of the package. Producer calls build an immutable entry
and hand it to the queue without blocking; the worker thread persists it.
Fatal calls are written synchronously on the caller's thread. No call made
by host code ever raises because of a logging failure.
"""

import atexit
import logging
import math
import threading
from typing import Any, Optional, Union

from asyncfilelog.core.fatal import FatalWriter
from asyncfilelog.core.log_queue import LogQueue
from asyncfilelog.core.worker import LogWorker, WorkerState
from asyncfilelog.domain.config import LoggerConfiguration
from asyncfilelog.domain.constants import STARTING_MESSAGE, STOPPING_MESSAGE, Severity
from asyncfilelog.domain.entry import LogEntry
from asyncfilelog.domain.results import FailureKind, OperationResult, failure
from asyncfilelog.infra.fallback import report_failure
from asyncfilelog.infra.writer import ConsoleSink, FileWriter

logger = logging.getLogger(__name__)


class Logger:
    """
    Thread-safe asynchronous file logger.

    Each instance owns its queue, worker thread and fatal lock; there is no
    process-wide state. Dispose explicitly (or use it as a context manager);
    an atexit hook disposes forgotten instances on interpreter shutdown.

    Args:
        config: Immutable configuration, defaults if omitted.
        writer: File writer used by the worker for the active file.
        console: Secondary sink for console duplication.
    """

    def __init__(
            self,
            config: Optional[LoggerConfiguration] = None,
            *,
            writer: Optional[FileWriter] = None,
            console: Optional[ConsoleSink] = None,
    ) -> None:
        self._config = config or LoggerConfiguration()
        self._queue = LogQueue()
        self._closed = False
        self._close_lock = threading.Lock()

        sink = console or ConsoleSink()
        self._fatal = FatalWriter(self._config, writer=FileWriter(), console=sink)
        self._worker = LogWorker(self._config, self._queue, writer=writer, console=sink)

        if self._config.lifecycle_entries:
            self.info(STARTING_MESSAGE)

        self._worker.start()
        atexit.register(self._dispose_at_exit)
        logger.debug(f"Logger started for '{self._config.log_file_path}'")

    # -------------------------------------------------------------------------
    # PROPERTIES
    # -------------------------------------------------------------------------

    @property
    def config(self) -> LoggerConfiguration:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def worker_state(self) -> WorkerState:
        return self._worker.state

    @property
    def pending(self) -> int:
        """Approximate number of entries queued but not yet consumed."""
        return len(self._queue)

    # -------------------------------------------------------------------------
    # PRODUCER API
    # -------------------------------------------------------------------------

    def debug(self, msg: Any) -> None:
        """Internal events useful when determining how something happened."""
        self.log(Severity.DEBUG, msg)

    def info(self, msg: Any) -> None:
        """Observable actions the system performs."""
        self.log(Severity.INFO, msg)

    def warn(self, msg: Any, exc: Optional[BaseException] = None) -> None:
        """Degraded or unexpected behaviour."""
        self.log(Severity.WARN, msg, exc)

    warning = warn

    def error(self, msg: Any, exc: Optional[BaseException] = None) -> None:
        """Unavailable functionality or broken expectations."""
        self.log(Severity.ERROR, msg, exc)

    def fatal(self, msg: Any, exc: Optional[BaseException] = None) -> None:
        """
        Write immediately to a dedicated fatal file on the calling thread.

        Does not depend on the worker, so it works even when the worker is
        stalled or the logger has been disposed.
        """
        self.log(Severity.FATAL, msg, exc)

    def log(
            self,
            severity: Union[Severity, str],
            msg: Any,
            exc: Optional[BaseException] = None,
    ) -> None:
        """
        Record an entry of any severity.

        FATAL entries take the synchronous path, every other severity is
        queued. Never raises.
        """
        try:
            severity = Severity(severity)
            if severity is Severity.FATAL:
                report_failure(self._fatal.write(LogEntry.create(msg, severity, exc)))
                return
            if not self._config.should_persist(severity):
                return
            self._enqueue(LogEntry.create(msg, severity, exc))
        except Exception as e:
            report_failure(failure(FailureKind.INTERNAL, self._config.log_file_path, e))

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    def dispose(self, timeout: Optional[float] = None) -> bool:
        """
        Stop accepting entries, let the worker drain, and wait for it.

        Args:
            timeout: Seconds to wait for the worker, defaults to config.stop_timeout.
                     Non-finite or negative values fall back to the default.

        Returns:
            bool: True if the worker exited within the timeout. Repeated
                  calls report the current worker state.
        """
        with self._close_lock:
            if self._closed:
                return self._worker.state is WorkerState.STOPPED
            if self._config.lifecycle_entries:
                self._enqueue(LogEntry.create(STOPPING_MESSAGE, Severity.INFO))
            self._closed = True

        atexit.unregister(self._dispose_at_exit)

        wait = self._config.stop_timeout
        if timeout is not None:
            if _is_valid_timeout(timeout):
                wait = timeout
            else:
                logger.debug(f"Ignoring invalid dispose timeout {timeout!r}; using {wait}s")
        stopped = self._worker.stop(wait)
        if not stopped:
            report_failure(OperationResult(
                ok=False,
                kind=FailureKind.INTERNAL,
                path=self._config.log_file_path,
                error=f"worker did not stop within {wait}s; queued entries may be lost",
            ))
        return stopped

    close = dispose

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return (
            f"Logger(path={self._config.log_file_path!r}, "
            f"state={self._worker.state.value}, closed={self._closed})"
        )

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _enqueue(self, entry: LogEntry) -> None:
        if self._closed:
            logger.debug(f"Entry dropped after dispose: {entry.message[:80]!r}")
            return
        self._queue.put(entry)

    def _dispose_at_exit(self) -> None:
        self.dispose()


def _is_valid_timeout(value: Any) -> bool:
    """True for a finite, non-negative number of seconds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0
