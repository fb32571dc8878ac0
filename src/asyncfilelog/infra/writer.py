from __future__ import annotations

"""
Output Persistence.

Performs the physical append of rendered entries. Files are opened, written
and closed on every call so that no handle is held between writes; external
tools (and the rotation policy) may move or delete the file at any time.
"""

import sys
from typing import Optional, TextIO

from asyncfilelog.domain.results import FailureKind, OperationResult, failure, success
from asyncfilelog.infra.fs import ensure_parent_dir

# -----------------------------------------------------------------------------
# FILE OUTPUT MANAGEMENT
# -----------------------------------------------------------------------------

class FileWriter:
    """
    Append-and-close file writer.

    Not synchronized: callers guarantee a single writer per path (the worker
    thread for the active file, the fatal lock for fatal files).
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def append(
            self,
            path: str,
            text: str,
            kind: FailureKind = FailureKind.WRITE,
    ) -> OperationResult:
        """
        Append text to a file, creating it (and its directory) if needed.

        Args:
            path: Target file.
            text: Already rendered content.
            kind: Failure category reported if the write fails.

        Returns:
            OperationResult: Success, or a failure carrying the OS error.
        """
        try:
            ensure_parent_dir(path)
            with open(path, "a", encoding=self._encoding, newline="") as out:
                out.write(text)
        except (OSError, ValueError) as e:
            return failure(kind, path, e)
        return success(path)


class ConsoleSink:
    """
    Secondary sink that mirrors rendered entries to a text stream.

    The stream defaults to whatever `sys.stdout` is at emit time, so
    redirections installed after the logger starts are honoured.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def emit(self, text: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        if stream is None:
            return
        try:
            stream.write(text.replace("\r\n", "\n"))
            stream.flush()
        except (OSError, ValueError):
            # A closed or broken console must not take the worker down
            pass
