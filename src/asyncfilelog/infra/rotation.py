from __future__ import annotations

"""
Log File Rotation and Retention.

Implements the two maintenance decisions taken on the worker thread:
size-based rotation of the active file, and count-based pruning of old
files in the log directory. Both report through OperationResult values
and never raise.
"""

import logging
import os
from datetime import datetime
from typing import Callable

from asyncfilelog.domain.config import LoggerConfiguration
from asyncfilelog.domain.results import FailureKind, OperationResult, failure, success
from asyncfilelog.infra.fs import file_creation_time, list_file_names, unique_path

logger = logging.getLogger(__name__)


class RotationPolicy:
    """
    Rotation and pruning rules bound to one configuration.

    Args:
        config: Logger configuration (directory, names, limits).
        clock: Time source used to stamp archive names.
    """

    def __init__(
            self,
            config: LoggerConfiguration,
            clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config
        self._clock = clock

    # -------------------------------------------------------------------------
    # SIZE-BASED ROTATION
    # -------------------------------------------------------------------------

    def rotate_if_needed(self) -> OperationResult:
        """
        Archive the active file if it has grown beyond the size limit.

        The archive is created next to the active file under a time-stamped
        name and a fresh, empty active file is left at the original path.

        Returns:
            OperationResult: changed=True with the archive path when a
                             rotation happened.
        """
        path = self._config.log_file_path
        limit = self._config.max_file_size_bytes
        if limit <= 0:
            return success(path)

        try:
            size = os.path.getsize(path)
        except FileNotFoundError:
            return success(path)
        except OSError as e:
            return failure(FailureKind.ROTATION, path, e)

        if size <= limit:
            return success(path)

        archive = unique_path(self._config.archive_file_path(self._clock()))
        try:
            os.replace(path, archive)
            with open(path, "a", encoding="utf-8"):
                pass
        except OSError as e:
            return failure(FailureKind.ROTATION, path, e)

        logger.debug(f"Rotated '{path}' ({size} bytes) to '{archive}'")
        return success(archive, changed=True)

    # -------------------------------------------------------------------------
    # COUNT-BASED PRUNING
    # -------------------------------------------------------------------------

    def prune(self) -> OperationResult:
        """
        Delete the single oldest archived file if too many files are retained.

        The count covers the active file and its archives; fatal files are
        never counted nor deleted, and the active file is never a deletion
        candidate. At most one file is removed per call, so a directory far
        above the limit converges over several cycles.

        Returns:
            OperationResult: changed=True with the deleted path when a file
                             was removed.
        """
        directory = self._config.directory
        limit = self._config.max_files
        if limit <= 0:
            return success(directory)

        try:
            names = [n for n in list_file_names(directory) if self._config.is_log_file(n)]
        except FileNotFoundError:
            # Nothing was written yet
            return success(directory)
        except OSError as e:
            return failure(FailureKind.PRUNE, directory, e)

        if len(names) <= limit:
            return success(directory)

        active = os.path.basename(self._config.log_file_path)
        candidates = [os.path.join(directory, n) for n in names if n != active]
        if not candidates:
            return success(directory)

        try:
            oldest = min(candidates, key=file_creation_time)
            os.remove(oldest)
        except OSError as e:
            return failure(FailureKind.PRUNE, directory, e)

        logger.debug(f"Pruned '{oldest}' ({len(names)} files, limit {limit})")
        return success(oldest, changed=True)
