from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Runs main() in-process against a temporary directory and checks exit
codes, configuration precedence and the produced log files.
"""

import io
import json
import logging
import os

import pytest

from asyncfilelog.domain.constants import Severity
from asyncfilelog.domain.entry import parse_entries
from asyncfilelog.infra.logging import reset_logging
from asyncfilelog.interface.cli.app import _merge_config, main


@pytest.fixture(autouse=True)
def restore_root_logger():
    level = logging.getLogger().level
    yield
    reset_logging()
    logging.getLogger().setLevel(level)


def _read(path) -> list:
    return parse_entries(path.read_bytes().decode("utf-8"))


def test_messages_are_logged(tmp_path):
    code = main(["first", "second", "-d", str(tmp_path), "-n", "cli", "--no-lifecycle"])

    assert code == 0
    assert [e.message for e in _read(tmp_path / "cli.log")] == ["first", "second"]


def test_level_and_lifecycle_entries(tmp_path):
    assert main(["careful", "-l", "warn", "-d", str(tmp_path), "-n", "cli"]) == 0

    entries = _read(tmp_path / "cli.log")
    assert len(entries) == 3
    assert entries[1].severity is Severity.WARN
    assert entries[1].message == "careful"


def test_fatal_level_writes_fatal_file(tmp_path):
    assert main(["boom", "-l", "FATAL", "-d", str(tmp_path), "-n", "cli", "--no-lifecycle"]) == 0

    assert any(n.startswith("[ FATAL ] cli") for n in os.listdir(tmp_path))


def test_reads_stdin_when_no_messages(tmp_path, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("one\n\ntwo\r\n"))

    assert main(["-d", str(tmp_path), "-n", "cli", "--no-lifecycle"]) == 0
    assert [e.message for e in _read(tmp_path / "cli.log")] == ["one", "two"]


def test_dump_config_applies_file_then_flags(tmp_path, capsys):
    conf = tmp_path / "conf.json"
    conf.write_text(json.dumps({"file_name": "from_file", "max_files": 3}), encoding="utf-8")

    code = main(["-c", str(conf), "--max-files", "9", "--dump-config"])
    dumped = json.loads(capsys.readouterr().out)

    assert code == 0
    assert dumped["file_name"] == "from_file"
    assert dumped["max_files"] == 9


def test_missing_config_file_is_an_error(tmp_path, capsys):
    code = main(["-c", str(tmp_path / "absent.json"), "x"])

    assert code == 2
    assert "Config file not found" in capsys.readouterr().err


def test_invalid_configuration_is_an_error(tmp_path, capsys):
    code = main(["x", "-d", str(tmp_path), "--max-files", "-1"])

    assert code == 2
    assert "ERROR" in capsys.readouterr().err


def test_merge_config_ignores_none():
    base = {"a": 1, "b": 2}
    assert _merge_config(base, {"a": None, "b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}
    assert base == {"a": 1, "b": 2}
