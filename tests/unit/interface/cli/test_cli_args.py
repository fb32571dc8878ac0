from __future__ import annotations

"""
Unit tests for CLI Argument Parsing and Mapping.

Verifies that command-line flags map to configuration overrides and that
flags which were not given never shadow file-based values.
"""

import pytest

from asyncfilelog.interface.cli.args import args_to_overrides, build_parser


def test_defaults_produce_no_overrides():
    args = build_parser().parse_args([])
    overrides = args_to_overrides(args)

    assert args.messages == []
    assert args.level == "INFO"
    assert all(v is None for v in overrides.values())


def test_full_flag_mapping():
    parser = build_parser()
    args = parser.parse_args([
        "hello", "world",
        "-l", "warn",
        "-d", "/tmp/logs",
        "-n", "svc",
        "--ext", ".txt",
        "--max-size", "2.5",
        "--max-files", "7",
        "--no-debug",
        "--console",
        "--no-lifecycle",
        "--priority", "lowest",
        "--stop-timeout", "3",
    ])
    overrides = args_to_overrides(args)

    assert args.messages == ["hello", "world"]
    assert args.level == "WARN"
    assert overrides == {
        "directory": "/tmp/logs",
        "file_name": "svc",
        "extension": ".txt",
        "max_file_size_mb": 2.5,
        "max_files": 7,
        "thread_priority": "lowest",
        "stop_timeout": 3.0,
        "persist_debug": False,
        "duplicate_to_console": True,
        "lifecycle_entries": False,
    }


@pytest.mark.parametrize("argv", [
    ["-l", "NOTICE"],
    ["--priority", "realtime"],
    ["--max-files", "many"],
])
def test_invalid_values_exit_with_usage_error(argv):
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(argv)
    assert exc.value.code == 2


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["--version"])

    assert exc.value.code == 0
    assert "asyncfilelog" in capsys.readouterr().out
