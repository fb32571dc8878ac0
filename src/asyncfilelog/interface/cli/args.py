from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides understood by config_from_dict().
"""

import argparse
from typing import Any, Dict

from asyncfilelog.domain.constants import Severity, ThreadPriority

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the asyncfilelog CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    from asyncfilelog import __version__

    p = argparse.ArgumentParser(
        prog="asyncfilelog",
        description=(
            "Append messages to a size-rotated log file through the "
            "asynchronous logger. Reads one message per stdin line when "
            "no MESSAGE is given."
        ),
    )

    p.add_argument("messages", nargs="*", metavar="MESSAGE", help="Messages to log.")
    p.add_argument(
        "-l", "--level",
        type=str.upper,
        choices=[s.value for s in Severity],
        default=Severity.INFO.value,
        help="Severity of the logged messages (default: INFO). FATAL writes a dedicated file.",
    )

    # --- File Layout ---
    p.add_argument("-d", "--dir", dest="directory", default=None, help="Log directory.")
    p.add_argument("-n", "--name", dest="file_name", default=None, help="Base log file name.")
    p.add_argument("--ext", dest="extension", default=None, help="Log file extension.")

    # --- Rotation & Retention ---
    p.add_argument(
        "--max-size",
        dest="max_file_size_mb",
        type=float,
        default=None,
        help="Rotate the active file above this size in MB (0 = unlimited).",
    )
    p.add_argument(
        "--max-files",
        dest="max_files",
        type=int,
        default=None,
        help="Maximum number of retained log files (0 = unlimited).",
    )

    # --- Behaviour ---
    p.add_argument("--no-debug", action="store_true", help="Do not persist DEBUG entries.")
    p.add_argument("--console", action="store_true", help="Duplicate entries to stdout.")
    p.add_argument(
        "--no-lifecycle",
        action="store_true",
        help="Do not write the start/stop entries.",
    )
    p.add_argument(
        "--priority",
        dest="thread_priority",
        choices=[tp.value for tp in ThreadPriority],
        default=None,
        help="Worker thread priority hint.",
    )
    p.add_argument(
        "--stop-timeout",
        dest="stop_timeout",
        type=float,
        default=None,
        help="Seconds to wait for pending entries on exit.",
    )

    # --- Configuration Sources & Diagnostics ---
    p.add_argument("-c", "--config", dest="config_file", default=None, help="JSON configuration file.")
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the resolved configuration as JSON and exit.",
    )
    p.add_argument("--debug", action="store_true", help="Print diagnostics to stderr.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Convert parsed arguments into configuration overrides.

    Flags that were not given map to None so they do not shadow values
    coming from a configuration file.

    Args:
        args: Namespace returned by the parser.

    Returns:
        Dict[str, Any]: Overrides keyed like config_from_dict() input.
    """
    return {
        "directory": args.directory,
        "file_name": args.file_name,
        "extension": args.extension,
        "max_file_size_mb": args.max_file_size_mb,
        "max_files": args.max_files,
        "thread_priority": args.thread_priority,
        "stop_timeout": args.stop_timeout,
        "persist_debug": False if args.no_debug else None,
        "duplicate_to_console": True if args.console else None,
        "lifecycle_entries": False if args.no_lifecycle else None,
    }
