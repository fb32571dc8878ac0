from __future__ import annotations

"""
Operation Result Models.

Internal I/O operations (writes, rotation, pruning) report their outcome
through these values instead of raising, leaving the decision of what to do
with a failure to the caller (the worker loop or the fatal path).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

class FailureKind(str, Enum):
    """Category of a failed logging operation."""

    WRITE = "write"
    FATAL_WRITE = "fatal write"
    ROTATION = "rotation"
    PRUNE = "prune"
    INTERNAL = "internal"


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a single internal logging operation.

    Attributes:
        ok: True if the operation completed.
        kind: Failure category, None on success.
        path: File the operation targeted (written, archived, or deleted).
        error: Description of the failure, empty on success.
        changed: True if the operation modified the filesystem layout
                 (a rotation happened or a file was pruned).
    """
    ok: bool
    kind: Optional[FailureKind] = None
    path: str = ""
    error: str = ""
    changed: bool = False

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def success(path: str = "", changed: bool = False) -> OperationResult:
    """Build a successful result."""
    return OperationResult(ok=True, path=path, changed=changed)


def failure(kind: FailureKind, path: str, exc: BaseException) -> OperationResult:
    """
    Build a failed result from the exception that caused it.

    Args:
        kind: Which operation failed.
        path: Target path of the operation.
        exc: The caught exception.

    Returns:
        OperationResult: Result with ok=False and a readable error text.
    """
    return OperationResult(
        ok=False,
        kind=kind,
        path=path,
        error=f"{type(exc).__name__}: {exc}",
    )
