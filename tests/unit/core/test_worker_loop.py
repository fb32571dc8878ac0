from __future__ import annotations

"""
Unit tests for the Background Drain Worker.

Verifies:
1. State machine transitions (CREATED -> RUNNING/WAITING -> STOPPED).
2. Final drain on stop and bounded stop for an unresponsive worker.
3. Failure isolation: one failing write does not stop later entries.
4. Debug filtering, console duplication and per-batch pruning.
"""

import threading
import time
from typing import List
from unittest.mock import MagicMock

from asyncfilelog.core.log_queue import LogQueue
from asyncfilelog.core.worker import LogWorker, WorkerState
from asyncfilelog.domain.constants import Severity
from asyncfilelog.domain.entry import LogEntry, parse_entries
from asyncfilelog.domain.results import FailureKind, OperationResult, success
from asyncfilelog.infra.writer import FileWriter


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class RecordingWriter(FileWriter):
    """Writer that records texts and can be told to fail or block."""

    def __init__(self) -> None:
        super().__init__()
        self.texts: List[str] = []
        self.fail_on: set = set()
        self.gate = threading.Event()
        self.gate.set()
        self.entered = threading.Event()

    def append(self, path, text, kind=FailureKind.WRITE):
        self.entered.set()
        self.gate.wait()
        if any(marker in text for marker in self.fail_on):
            return OperationResult(ok=False, kind=kind, path=path, error="OSError: disk full")
        self.texts.append(text)
        return success(path)


def _worker(config, writer=None, console=None, rotation=None, reports=None):
    q = LogQueue()
    report = reports.append if reports is not None else (lambda r: None)
    w = LogWorker(config, q, writer=writer, console=console, rotation=rotation, report=report)
    return w, q


def test_state_transitions(make_config):
    w, q = _worker(make_config())
    assert w.state is WorkerState.CREATED

    w.start()
    assert _wait_for(lambda: w.state is WorkerState.WAITING)

    assert w.stop(timeout=5) is True
    assert w.state is WorkerState.STOPPED
    assert not w.thread.is_alive()


def test_stop_before_start_is_immediate(make_config):
    w, _ = _worker(make_config())
    assert w.stop(timeout=0.1) is True
    assert w.state is WorkerState.STOPPED


def test_thread_settings_follow_configuration(make_config):
    w, _ = _worker(make_config(background=False, thread_name="custom-worker"))
    assert w.thread.daemon is False
    assert w.thread.name == "custom-worker"


def test_writes_entries_in_order(make_config, log_dir):
    cfg = make_config()
    w, q = _worker(cfg)
    w.start()
    for i in range(20):
        q.put(LogEntry.create(f"msg {i}", Severity.INFO))

    assert w.stop(timeout=5)

    text = (log_dir / "app.log").read_bytes().decode("utf-8")
    assert [e.message for e in parse_entries(text)] == [f"msg {i}" for i in range(20)]
    assert w.written == 20


def test_final_drain_on_stop(make_config):
    """Entries queued while the worker is busy are flushed by stop()."""
    writer = RecordingWriter()
    writer.gate.clear()
    w, q = _worker(make_config(), writer=writer)
    w.start()

    q.put(LogEntry.create("first", Severity.INFO))
    assert writer.entered.wait(5)
    for i in range(10):
        q.put(LogEntry.create(f"late {i}", Severity.INFO))

    stopper = threading.Thread(target=w.stop, args=(5,))
    stopper.start()
    writer.gate.set()
    stopper.join(5)

    assert w.state is WorkerState.STOPPED
    assert len(writer.texts) == 11


def test_stop_is_bounded_when_worker_is_unresponsive(make_config):
    writer = RecordingWriter()
    writer.gate.clear()
    w, q = _worker(make_config(), writer=writer)
    w.start()
    q.put(LogEntry.create("stuck", Severity.INFO))
    assert writer.entered.wait(5)

    started = time.monotonic()
    stopped = w.stop(timeout=0.2)
    elapsed = time.monotonic() - started

    assert stopped is False
    assert elapsed < 2.0

    writer.gate.set()
    assert _wait_for(lambda: w.state is WorkerState.STOPPED)


def test_write_failure_is_reported_and_processing_continues(make_config):
    writer = RecordingWriter()
    writer.fail_on.add("bad")
    reports: List[OperationResult] = []
    w, q = _worker(make_config(), writer=writer, reports=reports)
    w.start()

    q.put(LogEntry.create("good 1", Severity.INFO))
    q.put(LogEntry.create("bad", Severity.ERROR))
    q.put(LogEntry.create("good 2", Severity.INFO))
    assert w.stop(timeout=5)

    assert [t.split("] ", 1)[1].strip() for t in writer.texts] == ["good 1", "good 2"]
    failures = [r for r in reports if not r.ok]
    assert len(failures) == 1
    assert failures[0].kind is FailureKind.WRITE
    assert w.failed == 1


def test_unexpected_exception_does_not_kill_thread(make_config):
    writer = MagicMock(spec=FileWriter)
    writer.append.side_effect = [RuntimeError("boom"), success("x")]
    reports: List[OperationResult] = []
    w, q = _worker(make_config(), writer=writer, reports=reports)
    w.start()

    q.put(LogEntry.create("one", Severity.INFO))
    q.put(LogEntry.create("two", Severity.INFO))
    assert w.stop(timeout=5)

    assert writer.append.call_count == 2
    assert any(r.kind is FailureKind.INTERNAL for r in reports)
    assert w.written == 1


def test_debug_entries_skipped_when_disabled(make_config):
    writer = RecordingWriter()
    w, q = _worker(make_config(persist_debug=False), writer=writer)
    w.start()

    q.put(LogEntry.create("hidden", Severity.DEBUG))
    q.put(LogEntry.create("shown", Severity.INFO))
    assert w.stop(timeout=5)

    assert len(writer.texts) == 1
    assert "shown" in writer.texts[0]


def test_console_duplication(make_config):
    console = MagicMock()
    w, q = _worker(make_config(duplicate_to_console=True), console=console)
    w.start()
    q.put(LogEntry.create("echo me", Severity.WARN))
    assert w.stop(timeout=5)

    console.emit.assert_called_once()
    assert "echo me" in console.emit.call_args[0][0]


def test_rotation_checked_per_entry_and_pruning_per_batch(make_config):
    rotation = MagicMock()
    rotation.rotate_if_needed.return_value = success()
    rotation.prune.return_value = success()
    writer = RecordingWriter()
    writer.gate.clear()
    w, q = _worker(make_config(), writer=writer, rotation=rotation)
    w.start()

    # Startup pruning cycle
    assert _wait_for(lambda: rotation.prune.call_count == 1)

    # Hold the first entry in the writer so the next three form one batch
    q.put(LogEntry.create("a", Severity.INFO))
    assert writer.entered.wait(5)
    for m in ("b", "c", "d"):
        q.put(LogEntry.create(m, Severity.INFO))
    writer.gate.set()
    assert w.stop(timeout=5)

    assert rotation.rotate_if_needed.call_count == 4
    # startup + the batch holding 'a'..'d' (or two batches if 'b'.. arrived late)
    assert 2 <= rotation.prune.call_count <= 3
