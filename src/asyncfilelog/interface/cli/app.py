from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: diagnostics logging setup, merging of the
configuration sources (defaults, JSON file, CLI overrides), feeding the
messages to a Logger, and a bounded shutdown.
"""

import json
import os
import sys
from typing import Any, Dict, Iterable, List, Optional

from asyncfilelog.core.logger import Logger
from asyncfilelog.domain.config import (
    ConfigurationError,
    config_from_dict,
    get_default_config,
    load_config,
)
from asyncfilelog.infra.logging import LoggingConfig, configure_logging, get_logger
from asyncfilelog.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_STOP_TIMEOUT = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Diagnostics bootstrap (stderr only)
    log_level = "DEBUG" if args.debug else "WARNING"
    configure_logging(LoggingConfig(level=log_level, console=True), force=True)

    # 3. Resolve configuration hierarchy
    try:
        if args.config_file:
            if not os.path.exists(args.config_file):
                raise ConfigurationError(f"Config file not found: {args.config_file}")
            base_conf = load_config(args.config_file).to_dict()
        else:
            base_conf = get_default_config()

        raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
        config = config_from_dict(raw_conf)
    except ConfigurationError as e:
        logger.debug(f"Configuration rejected: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.dump_config:
        print(json.dumps(config.to_dict(), ensure_ascii=False, indent=2))
        return EXIT_OK

    # 4. Logging phase
    logger.debug(f"Writing to '{config.log_file_path}' at level {args.level}")
    log = Logger(config)
    try:
        messages: Iterable[str] = args.messages or _read_stdin_lines()
        count = 0
        for message in messages:
            log.log(args.level, message)
            count += 1
        logger.debug(f"Queued {count} message(s)")
    except KeyboardInterrupt:
        print("Interrupted. Flushing pending entries...", file=sys.stderr)
        log.dispose()
        return EXIT_INTERRUPTED

    # 5. Bounded shutdown
    if not log.dispose():
        return EXIT_STOP_TIMEOUT
    return EXIT_OK

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge non-None overrides into the base configuration.

    Args:
        base: The primary configuration dictionary.
        overrides: Values from the command line.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k, v in overrides.items():
        if v is not None:
            out[k] = v
    return out


def _read_stdin_lines() -> Iterable[str]:
    """Yield non-empty stdin lines without their line terminators."""
    for line in sys.stdin:
        text = line.rstrip("\r\n")
        if text:
            yield text
