from __future__ import annotations

"""
Configuration Validation Service.

Normalizes untrusted configuration input (JSON files, CLI overrides) into
strictly typed values before a LoggerConfiguration is built. Handles type
coercion and default injection, collecting human-readable warnings.
"""

import logging
from typing import Any, Dict, List, Tuple

from asyncfilelog.domain.config import get_default_config
from asyncfilelog.domain.constants import ThreadPriority

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# SCHEMA
# -----------------------------------------------------------------------------

_STRING_FIELDS = ["directory", "file_name", "extension", "thread_name"]
_BOOL_FIELDS = ["persist_debug", "duplicate_to_console", "background", "lifecycle_entries"]
_INT_FIELDS = ["max_files"]
_FLOAT_FIELDS = ["max_file_size_mb", "stop_timeout"]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Missing keys are filled from defaults. Unknown keys are dropped with a
    warning. Range checks are left to LoggerConfiguration itself.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise TypeError on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    for key, value in config.items():
        if key not in defaults:
            warnings.append(f"Unknown field '{key}' ignored.")
            continue
        merged[key] = value

    for field in _STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in _BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field in _INT_FIELDS:
        merged[field] = _as_int(merged.get(field), defaults[field], field, warnings, strict)

    for field in _FLOAT_FIELDS:
        merged[field] = _as_float(merged.get(field), defaults[field], field, warnings, strict)

    merged["thread_priority"] = _as_priority(
        merged.get("thread_priority"), defaults["thread_priority"], warnings, strict
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Accept integers, and integral floats or numeric strings outside strict mode."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, float) and value.is_integer():
            warnings.append(f"Field '{field}' converted from float {value} to int.")
            return int(value)
        if isinstance(value, str):
            try:
                parsed = int(value.strip())
                warnings.append(f"Field '{field}' converted from '{value}' to {parsed}.")
                return parsed
            except ValueError:
                pass

    msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_float(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    """Accept any real number, and numeric strings outside strict mode."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if value is None:
        return fallback

    if not strict and isinstance(value, str):
        try:
            parsed = float(value.strip())
            warnings.append(f"Field '{field}' converted from '{value}' to {parsed}.")
            return parsed
        except ValueError:
            pass

    msg = f"Invalid field '{field}': expected number, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_priority(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    """Map a priority name (case-insensitive) to its ThreadPriority value."""
    if value is None:
        return fallback
    if isinstance(value, ThreadPriority):
        return value.value
    if isinstance(value, str):
        candidate = value.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return ThreadPriority(candidate).value
        except ValueError:
            pass

    msg = f"Invalid field 'thread_priority': unknown priority {value!r}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback
