from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures building configurations and loggers bound to a
   temporary log directory, disposed after each test.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Iterator, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from asyncfilelog.core.logger import Logger  # noqa: E402
from asyncfilelog.domain.config import LoggerConfiguration  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Return an isolated directory for log files."""
    d = tmp_path / "logs"
    d.mkdir()
    return d


@pytest.fixture
def make_config(log_dir: Path) -> Callable[..., LoggerConfiguration]:
    """
    Return a factory for configurations rooted in the temporary log directory.

    Start/stop entries are disabled by default so tests see only their own
    entries; keyword arguments override any field.
    """
    def _make(**overrides: Any) -> LoggerConfiguration:
        values = {
            "directory": str(log_dir),
            "file_name": "app",
            "lifecycle_entries": False,
            "stop_timeout": 5.0,
        }
        values.update(overrides)
        return LoggerConfiguration(**values)

    return _make


@pytest.fixture
def make_logger(make_config: Callable[..., LoggerConfiguration]) -> Iterator[Callable[..., Logger]]:
    """Return a factory for started loggers; all of them are disposed at teardown."""
    created: List[Logger] = []

    def _make(**overrides: Any) -> Logger:
        log = Logger(make_config(**overrides))
        created.append(log)
        return log

    yield _make

    for log in created:
        log.dispose(timeout=2.0)