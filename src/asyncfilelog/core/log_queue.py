from __future__ import annotations

"""
Producer/Consumer Handoff.

An unbounded FIFO paired with an auto-resetting wake signal. Any number of
producer threads may put entries; exactly one consumer waits on the signal
and drains the queue.
"""

import queue
import threading
from typing import Iterator, Optional

from asyncfilelog.domain.entry import LogEntry


class LogQueue:
    """
    Unbounded N-producer / 1-consumer queue with a wake signal.

    The signal is a hint, not a per-item token: one wake may cover many
    entries, and the consumer must drain until empty after each wake.
    Because wait() resets the signal before the consumer drains, an entry
    put at any point after the reset leaves the signal raised for the next
    wait(), so no entry is stranded by a missed wake.
    """

    def __init__(self) -> None:
        self._items: "queue.SimpleQueue[LogEntry]" = queue.SimpleQueue()
        self._signal = threading.Event()

    def put(self, entry: LogEntry) -> None:
        """Append an entry and wake the consumer. Never blocks."""
        self._items.put_nowait(entry)
        self._signal.set()

    def wake(self) -> None:
        """Wake the consumer without adding an entry (stop requests)."""
        self._signal.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until signalled, then reset the signal.

        Args:
            timeout: Maximum seconds to wait, None for no limit.

        Returns:
            bool: True if the signal was raised, False on timeout.
        """
        signalled = self._signal.wait(timeout)
        self._signal.clear()
        return signalled

    def get_nowait(self) -> Optional[LogEntry]:
        """Remove and return the oldest entry, or None if the queue is empty."""
        try:
            return self._items.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> Iterator[LogEntry]:
        """Yield entries in FIFO order until the queue is observed empty."""
        while True:
            entry = self.get_nowait()
            if entry is None:
                return
            yield entry

    def empty(self) -> bool:
        return self._items.empty()

    def __len__(self) -> int:
        return self._items.qsize()
