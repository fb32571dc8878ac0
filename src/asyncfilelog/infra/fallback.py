from __future__ import annotations

"""
Fallback Failure Reporting.

Last-resort channel for failures of the logging machinery itself. Writes
one line per failure to the process stderr; never raises.
"""

import logging
import sys
from typing import Optional, TextIO

from asyncfilelog.domain.results import OperationResult

logger = logging.getLogger(__name__)

_PREFIX = "asyncfilelog"


def format_failure(result: OperationResult) -> str:
    """Human-readable single line describing a failed operation."""
    kind = result.kind.value if result.kind is not None else "operation"
    return f"{_PREFIX}: {kind} failed for '{result.path}': {result.error}"


def report_failure(result: OperationResult, stream: Optional[TextIO] = None) -> None:
    """
    Report a failed operation to stderr (or the given stream).

    Successful results are ignored, so callers may pass every result.

    Args:
        result: Outcome of a write, rotation or pruning operation.
        stream: Override of the destination, resolved to sys.stderr by default.
    """
    if result.ok:
        return

    line = format_failure(result)
    logger.debug(line)

    target = stream if stream is not None else sys.stderr
    if target is None:
        return
    try:
        target.write(line + "\n")
        target.flush()
    except (OSError, ValueError):
        pass
