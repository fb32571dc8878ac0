from __future__ import annotations

"""
Synchronous Fatal Path.

Fatal entries bypass the queue and are written on the calling thread, each
to its own file, so they survive a stalled worker or an imminent crash.
Concurrent fatal calls are serialized by a lock; regular writes are not
affected by it.
"""

import threading
from typing import Optional

from asyncfilelog.domain.config import LoggerConfiguration
from asyncfilelog.domain.entry import LogEntry
from asyncfilelog.domain.results import FailureKind, OperationResult
from asyncfilelog.infra.fs import unique_path
from asyncfilelog.infra.writer import ConsoleSink, FileWriter


class FatalWriter:
    """
    Lock-serialized writer of one file per fatal event.

    Fatal files live in the log directory under the '[ FATAL ] <name>'
    prefix and are excluded from rotation and pruning.
    """

    def __init__(
            self,
            config: LoggerConfiguration,
            writer: Optional[FileWriter] = None,
            console: Optional[ConsoleSink] = None,
    ) -> None:
        self._config = config
        self._writer = writer or FileWriter()
        self._console = console or ConsoleSink()
        self._lock = threading.Lock()

    def write(self, entry: LogEntry) -> OperationResult:
        """
        Persist a fatal entry immediately.

        Args:
            entry: The entry to write; its timestamp names the file.

        Returns:
            OperationResult: Outcome of the write, with the fatal file path.
        """
        text = entry.render()
        with self._lock:
            path = unique_path(self._config.fatal_file_path(entry.timestamp))
            result = self._writer.append(path, text, kind=FailureKind.FATAL_WRITE)
            if self._config.duplicate_to_console:
                self._console.emit(text)
        return result
