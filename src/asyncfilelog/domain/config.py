from __future__ import annotations

"""
Logger Configuration Domain.

Holds the immutable configuration consumed by the worker, the writers and
the rotation policy, the fluent builder used to assemble it, and the JSON
loader used by the command line interface.
"""

import json
import logging
import math
import os
import re
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Union

from asyncfilelog.domain.constants import (
    BYTES_PER_MB,
    DEFAULT_DIRECTORY,
    DEFAULT_EXTENSION,
    DEFAULT_FILE_NAME,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_MAX_FILES,
    DEFAULT_STOP_TIMEOUT,
    DEFAULT_THREAD_NAME,
    FATAL_MARKER,
    FILE_STAMP_PATTERN,
    Severity,
    ThreadPriority,
)
from asyncfilelog.domain.entry import format_file_stamp

if TYPE_CHECKING:
    from asyncfilelog.core.logger import Logger

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a configuration value is out of range or malformed."""


# -----------------------------------------------------------------------------
# CONFIGURATION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LoggerConfiguration:
    """
    Immutable settings of a Logger instance.

    Attributes:
        directory: Directory holding the active, archived and fatal files.
        file_name: Base name of the active log file.
        extension: File extension, always starting with a dot.
        max_file_size_bytes: Size above which the active file is rotated (0 = unlimited).
        max_files: Maximum number of retained log files (0 = unlimited).
        persist_debug: Whether DEBUG entries reach the file.
        duplicate_to_console: Whether rendered entries are echoed to stdout.
        background: Whether the worker runs as a daemon thread.
        thread_priority: Scheduling hint for the worker thread.
        thread_name: Name given to the worker thread.
        stop_timeout: Seconds dispose() waits for the worker to exit.
        lifecycle_entries: Whether start/stop INFO entries are written.
    """
    directory: str = DEFAULT_DIRECTORY
    file_name: str = DEFAULT_FILE_NAME
    extension: str = DEFAULT_EXTENSION
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_MB * BYTES_PER_MB
    max_files: int = DEFAULT_MAX_FILES
    persist_debug: bool = True
    duplicate_to_console: bool = False
    background: bool = True
    thread_priority: ThreadPriority = ThreadPriority.LOWEST
    thread_name: str = DEFAULT_THREAD_NAME
    stop_timeout: float = DEFAULT_STOP_TIMEOUT
    lifecycle_entries: bool = True

    def __post_init__(self) -> None:
        if not self.file_name or not self.file_name.strip():
            raise ConfigurationError("Log file name must not be empty.")
        if os.sep in self.file_name or (os.altsep and os.altsep in self.file_name):
            raise ConfigurationError(
                f"Log file name must not contain path separators: '{self.file_name}'."
            )
        if self.max_file_size_bytes < 0:
            raise ConfigurationError("Maximum file size must be >= 0 (0 = unlimited).")
        if self.max_files < 0:
            raise ConfigurationError("Maximum file count must be >= 0 (0 = unlimited).")
        if not math.isfinite(self.stop_timeout) or self.stop_timeout <= 0:
            raise ConfigurationError("Stop timeout must be a positive, finite number of seconds.")

        extension = self.extension.strip()
        if extension and not extension.startswith("."):
            extension = "." + extension
        object.__setattr__(self, "extension", extension)
        object.__setattr__(self, "directory", self.directory or DEFAULT_DIRECTORY)
        try:
            object.__setattr__(self, "thread_priority", ThreadPriority(self.thread_priority))
        except ValueError as e:
            raise ConfigurationError(f"Unknown thread priority: {self.thread_priority!r}.") from e

    # --- Derived file names ---

    @property
    def log_file_path(self) -> str:
        """Path of the active log file. Stable for the lifetime of a logger."""
        return os.path.join(self.directory, f"{self.file_name}{self.extension}")

    @property
    def fatal_prefix(self) -> str:
        return f"{FATAL_MARKER} {self.file_name}"

    def fatal_file_path(self, ts: datetime) -> str:
        """Path of the dedicated file for a fatal event raised at `ts`."""
        return os.path.join(
            self.directory, f"{self.fatal_prefix} {format_file_stamp(ts)}{self.extension}"
        )

    def archive_file_path(self, ts: datetime) -> str:
        """Path the active file is moved to when it is rotated at `ts`."""
        return os.path.join(
            self.directory, f"{self.file_name}_{format_file_stamp(ts)}{self.extension}"
        )

    def is_log_file(self, name: str) -> bool:
        """
        Check whether a bare file name belongs to this logger's rotation set.

        Matches the active file and its time-stamped archives (with the
        optional collision suffix). Fatal files and the files of other
        loggers sharing the directory never match.
        """
        if name == f"{self.file_name}{self.extension}":
            return True
        archive = (
            re.escape(f"{self.file_name}_") + FILE_STAMP_PATTERN
            + r"(?:_\d+)?" + re.escape(self.extension)
        )
        return re.fullmatch(archive, name) is not None

    def should_persist(self, severity: Severity) -> bool:
        """Decide whether entries of the given severity are written at all."""
        return self.persist_debug or severity is not Severity.DEBUG

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view using the same keys accepted by config_from_dict()."""
        data = asdict(self)
        data["thread_priority"] = self.thread_priority.value
        data["max_file_size_mb"] = self.max_file_size_bytes / BYTES_PER_MB
        del data["max_file_size_bytes"]
        return data


# -----------------------------------------------------------------------------
# FLUENT BUILDER
# -----------------------------------------------------------------------------

class LoggerConfigBuilder:
    """
    Chained assembly of a LoggerConfiguration.

    Every setter returns the builder. Nothing is validated until build(),
    and the produced configuration is immutable.
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def write_debug_logs(self, write_debug: bool) -> "LoggerConfigBuilder":
        self._values["persist_debug"] = bool(write_debug)
        return self

    def log_files_directory(self, path: Union[str, "os.PathLike[str]"]) -> "LoggerConfigBuilder":
        self._values["directory"] = os.fspath(path)
        return self

    def log_file_name(self, name: str) -> "LoggerConfigBuilder":
        self._values["file_name"] = name
        return self

    def log_file_format(self, extension: str) -> "LoggerConfigBuilder":
        self._values["extension"] = extension
        return self

    def max_log_file_size(self, size_mb: float) -> "LoggerConfigBuilder":
        """Maximum active file size in MB (0 = unlimited)."""
        self._values["max_file_size_bytes"] = int(round(size_mb * BYTES_PER_MB))
        return self

    def thread_priority(self, priority: Union[ThreadPriority, str]) -> "LoggerConfigBuilder":
        self._values["thread_priority"] = priority
        return self

    def background_thread(self, background: bool = True) -> "LoggerConfigBuilder":
        self._values["background"] = bool(background)
        return self

    def thread_name(self, name: str) -> "LoggerConfigBuilder":
        self._values["thread_name"] = name
        return self

    def log_files_cleanup(self, max_files: int) -> "LoggerConfigBuilder":
        """Maximum number of retained log files (0 = unlimited)."""
        self._values["max_files"] = int(max_files)
        return self

    def duplicate_logs_in_console(self, duplicate: bool = True) -> "LoggerConfigBuilder":
        self._values["duplicate_to_console"] = bool(duplicate)
        return self

    def stop_timeout(self, seconds: float) -> "LoggerConfigBuilder":
        self._values["stop_timeout"] = float(seconds)
        return self

    def lifecycle_entries(self, enabled: bool) -> "LoggerConfigBuilder":
        self._values["lifecycle_entries"] = bool(enabled)
        return self

    def build(self) -> LoggerConfiguration:
        """
        Produce the immutable configuration.

        Raises:
            ConfigurationError: If any collected value is invalid.
        """
        return LoggerConfiguration(**self._values)

    def build_logger(self) -> "Logger":
        """Build the configuration and start a Logger with it."""
        from asyncfilelog.core.logger import Logger

        return Logger(self.build())


# -----------------------------------------------------------------------------
# DICTIONARY AND FILE LOADING
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Default configuration in its dictionary form.

    Returns:
        Dict[str, Any]: Keys accepted by config_from_dict().
    """
    return LoggerConfiguration().to_dict()


def config_from_dict(data: Dict[str, Any], *, strict: bool = False) -> LoggerConfiguration:
    """
    Build a configuration from untrusted dictionary input.

    Args:
        data: Raw values (from JSON or CLI overrides).
        strict: Raise on type mismatches instead of falling back to defaults.

    Returns:
        LoggerConfiguration: The validated configuration.

    Raises:
        ConfigurationError: If a value is out of range, or mistyped in strict mode.
    """
    from asyncfilelog.domain.validation import validate_config

    try:
        clean, warnings = validate_config(data, strict=strict)
    except TypeError as e:
        raise ConfigurationError(str(e)) from e

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    size_mb = clean.pop("max_file_size_mb")
    clean["max_file_size_bytes"] = int(round(size_mb * BYTES_PER_MB))
    return LoggerConfiguration(**clean)


def load_config(path: str, *, strict: bool = False) -> LoggerConfiguration:
    """
    Load a configuration from a JSON file.

    A missing or unreadable file yields the default configuration
    unless strict mode is requested.

    Args:
        path: JSON file holding a single object.
        strict: Raise ConfigurationError instead of falling back to defaults.

    Returns:
        LoggerConfiguration: The loaded configuration.
    """
    if not os.path.exists(path):
        if strict:
            raise ConfigurationError(f"Config file not found: {path}")
        logger.debug(f"Config file '{path}' not found. Returning defaults.")
        return LoggerConfiguration()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        if strict:
            raise ConfigurationError(f"Failed to load config '{path}': {e}") from e
        logger.error(f"Failed to load config '{path}': {e}. Using defaults.")
        return LoggerConfiguration()

    if not isinstance(data, dict):
        if strict:
            raise ConfigurationError(f"Config file '{path}' must contain a JSON object.")
        logger.warning(f"Corrupted config file '{path}'. Using defaults.")
        return LoggerConfiguration()

    return config_from_dict(data, strict=strict)


def save_config(config: LoggerConfiguration, path: str) -> None:
    """
    Persist a configuration as JSON.

    Raises:
        OSError: If the file cannot be written.
    """
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, ensure_ascii=False, indent=4)
    logger.debug(f"Configuration saved to {path}")
