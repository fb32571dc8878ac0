from __future__ import annotations

"""
Background Drain Worker.

Owns the single thread that consumes the log queue. Each wake drains every
queued entry, writing it to the active file and checking size rotation
after each write; each drained batch ends with one pruning cycle. Failures
are reported through the fallback channel and never stop the loop.
"""

import logging
import os
import sys
import threading
from enum import Enum
from typing import Callable, Optional

from asyncfilelog.core.log_queue import LogQueue
from asyncfilelog.domain.config import LoggerConfiguration
from asyncfilelog.domain.entry import LogEntry
from asyncfilelog.domain.results import FailureKind, OperationResult, failure
from asyncfilelog.infra.fallback import report_failure
from asyncfilelog.infra.rotation import RotationPolicy
from asyncfilelog.infra.writer import ConsoleSink, FileWriter

logger = logging.getLogger(__name__)


class WorkerState(str, Enum):
    """Lifecycle of the drain loop."""

    CREATED = "created"
    RUNNING = "running"
    WAITING = "waiting"
    STOPPING = "stopping"
    STOPPED = "stopped"


class LogWorker:
    """
    Single consumer of a LogQueue.

    State machine: CREATED -> RUNNING <-> WAITING -> STOPPING -> STOPPED.
    A stop request wakes the loop, which performs one final drain before
    the thread exits.

    Args:
        config: Logger configuration.
        log_queue: Queue shared with the producers.
        writer: File writer for the active log file.
        console: Secondary sink used when console duplication is enabled.
        rotation: Rotation and pruning policy.
        report: Callback receiving every operation result.
    """

    def __init__(
            self,
            config: LoggerConfiguration,
            log_queue: LogQueue,
            writer: Optional[FileWriter] = None,
            console: Optional[ConsoleSink] = None,
            rotation: Optional[RotationPolicy] = None,
            report: Callable[[OperationResult], None] = report_failure,
    ) -> None:
        self._config = config
        self._queue = log_queue
        self._writer = writer or FileWriter()
        self._console = console or ConsoleSink()
        self._rotation = rotation or RotationPolicy(config)
        self._report = report

        self._stop_requested = threading.Event()
        self._state = WorkerState.CREATED
        self._thread = threading.Thread(
            target=self._run,
            name=config.thread_name,
            daemon=config.background,
        )

        # Only mutated on the worker thread
        self.written = 0
        self.failed = 0

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def thread(self) -> threading.Thread:
        return self._thread

    def start(self) -> None:
        """Start the worker thread."""
        self._thread.start()

    def stop(self, timeout: float) -> bool:
        """
        Request a cooperative stop and wait for the thread to exit.

        Args:
            timeout: Maximum seconds to wait for the final drain.

        Returns:
            bool: True if the thread exited within the timeout.
        """
        self._stop_requested.set()
        self._queue.wake()

        if self._state is WorkerState.CREATED and not self._thread.is_alive():
            self._state = WorkerState.STOPPED
            return True
        if threading.current_thread() is self._thread:
            # Called from a callback running on the worker itself
            return False

        self._thread.join(min(timeout, threading.TIMEOUT_MAX))
        stopped = not self._thread.is_alive()
        if not stopped:
            logger.debug(f"Worker '{self._thread.name}' did not stop within {timeout}s")
        return stopped

    # -------------------------------------------------------------------------
    # DRAIN LOOP
    # -------------------------------------------------------------------------

    def _run(self) -> None:
        try:
            self._state = WorkerState.RUNNING
            self._apply_priority()
            self._report(self._rotation.prune())

            while not self._stop_requested.is_set():
                self._state = WorkerState.WAITING
                self._queue.wait()
                if self._stop_requested.is_set():
                    break
                self._state = WorkerState.RUNNING
                self._process_batch()

            self._state = WorkerState.STOPPING
            self._process_batch()
        finally:
            self._state = WorkerState.STOPPED

    def _process_batch(self) -> None:
        """Drain the queue until empty, then run one pruning cycle if anything was written."""
        wrote = False
        for entry in self._queue.drain():
            if self._process_entry(entry):
                wrote = True
        if wrote:
            self._report(self._rotation.prune())

    def _process_entry(self, entry: LogEntry) -> bool:
        """
        Persist one entry and check rotation.

        Returns:
            bool: True if the entry reached the active file.
        """
        path = self._config.log_file_path
        try:
            if not self._config.should_persist(entry.severity):
                return False

            text = entry.render()
            if self._config.duplicate_to_console:
                self._console.emit(text)

            result = self._writer.append(path, text)
            self._report(result)
            if not result.ok:
                self.failed += 1
                return False

            self.written += 1
            self._report(self._rotation.rotate_if_needed())
            return True
        except Exception as e:
            self.failed += 1
            self._report(failure(FailureKind.INTERNAL, path, e))
            return False

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _apply_priority(self) -> None:
        """Apply the configured niceness to this thread where the OS allows it."""
        niceness = self._config.thread_priority.niceness
        if niceness == 0:
            return
        if not sys.platform.startswith("linux") or not hasattr(os, "setpriority"):
            logger.debug("Per-thread priority is not supported on this platform.")
            return
        try:
            tid = threading.get_native_id()
            current = os.getpriority(os.PRIO_PROCESS, tid)
            os.setpriority(os.PRIO_PROCESS, tid, current + niceness)
        except OSError as e:
            logger.debug(f"Could not apply thread priority {self._config.thread_priority.value}: {e}")
