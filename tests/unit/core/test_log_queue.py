from __future__ import annotations

"""
Unit tests for the Producer/Consumer Handoff.

Verifies:
1. FIFO ordering and non-blocking puts.
2. Auto-reset semantics of the wake signal.
3. That an entry put after the reset is never stranded.
"""

import threading

from asyncfilelog.core.log_queue import LogQueue
from asyncfilelog.domain.constants import Severity
from asyncfilelog.domain.entry import LogEntry


def _entry(i: int) -> LogEntry:
    return LogEntry.create(f"m{i}", Severity.INFO)


def test_drain_is_fifo_and_empties_queue():
    q = LogQueue()
    for i in range(5):
        q.put(_entry(i))

    assert len(q) == 5
    assert [e.message for e in q.drain()] == ["m0", "m1", "m2", "m3", "m4"]
    assert q.empty()
    assert q.get_nowait() is None


def test_put_raises_signal():
    q = LogQueue()
    q.put(_entry(0))

    assert q.wait(timeout=0) is True


def test_signal_auto_resets_after_wait():
    """One wake covers any number of puts; the next wait blocks again."""
    q = LogQueue()
    q.put(_entry(0))
    q.put(_entry(1))

    assert q.wait(timeout=0) is True
    assert q.wait(timeout=0.05) is False
    assert len(list(q.drain())) == 2


def test_wake_without_entry():
    q = LogQueue()
    q.wake()

    assert q.wait(timeout=0) is True
    assert list(q.drain()) == []


def test_put_between_reset_and_next_wait_is_not_lost():
    """
    Simulate the race: the consumer resets the signal and drains, a producer
    puts after the drain observed empty; the next wait must return at once.
    """
    q = LogQueue()
    q.put(_entry(0))

    assert q.wait(timeout=0) is True
    assert [e.message for e in q.drain()] == ["m0"]

    q.put(_entry(1))

    assert q.wait(timeout=0) is True
    assert [e.message for e in q.drain()] == ["m1"]


def test_wait_wakes_blocked_consumer():
    q = LogQueue()
    woke = threading.Event()

    def consumer() -> None:
        if q.wait(timeout=5):
            woke.set()

    t = threading.Thread(target=consumer)
    t.start()
    q.put(_entry(0))
    t.join(timeout=5)

    assert woke.is_set()


def test_concurrent_producers_lose_nothing():
    q = LogQueue()
    producers, per_producer = 8, 500

    def produce(pid: int) -> None:
        for i in range(per_producer):
            q.put(LogEntry.create(f"{pid}:{i}", Severity.INFO))

    threads = [threading.Thread(target=produce, args=(p,)) for p in range(producers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    drained = [e.message for e in q.drain()]
    assert len(drained) == producers * per_producer

    # Per-producer order is preserved
    for p in range(producers):
        mine = [int(m.split(":")[1]) for m in drained if m.startswith(f"{p}:")]
        assert mine == list(range(per_producer))
