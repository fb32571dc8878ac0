from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Small path and metadata helpers shared by the writers and the rotation
policy. Acts as an abstraction over 'os' differences between Windows and
Unix-like systems (notably, how a file's creation time is exposed).
"""

import os
from typing import List

# -----------------------------------------------------------------------------
# PATH HELPERS
# -----------------------------------------------------------------------------

def ensure_parent_dir(path: str) -> None:
    """
    Create the parent directory hierarchy for a target file if missing.

    Args:
        path: Path of the file about to be written.

    Raises:
        OSError: If the directory cannot be created.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not os.path.isdir(parent):
        os.makedirs(parent, exist_ok=True)


def unique_path(path: str) -> str:
    """
    Return `path` itself, or the first '<stem>_<n><ext>' variant that does not exist.

    Used for time-stamped names, where two events within the same
    hundredth of a second would otherwise collide.
    """
    if not os.path.exists(path):
        return path

    stem, ext = os.path.splitext(path)
    n = 1
    while os.path.exists(f"{stem}_{n}{ext}"):
        n += 1
    return f"{stem}_{n}{ext}"

# -----------------------------------------------------------------------------
# METADATA HELPERS
# -----------------------------------------------------------------------------

def list_file_names(directory: str) -> List[str]:
    """
    List the names of regular files directly inside a directory.

    Raises:
        OSError: If the directory is missing or unreadable.
    """
    with os.scandir(directory) as it:
        return sorted(e.name for e in it if e.is_file())


def file_creation_time(path: str) -> float:
    """
    Best available creation timestamp of a file.

    Uses the birth time where the platform records it (macOS, BSD, and
    Windows on recent interpreters), 'st_ctime' on older Windows builds
    (where it means creation), and the modification time elsewhere.
    """
    st = os.stat(path)
    birth = getattr(st, "st_birthtime", None)
    if birth is not None:
        return birth
    if os.name == "nt":
        return st.st_ctime
    return st.st_mtime
