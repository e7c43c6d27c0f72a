"""
Logging configuration — set up once by the CLI entry points.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
this config. Logging is diagnostics only; what the user is meant to read
goes through ``ui.cli.output``.

Levels are resolved in precedence order:
    --debug  >  --verbose  >  CNP_LOG_LEVEL env var  >  WARNING (default)

Optional file output via CNP_LOG_FILE / CNP_LOG_FILE_LEVEL env vars.
"""

from __future__ import annotations

import logging
import os
import sys

# WARNING level — message only
_FMT_MINIMAL = "%(message)s"

# INFO level — timestamped with module context
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG level and file output — full diagnostic with file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_CONSOLE = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

ENV_LEVEL = "CNP_LOG_LEVEL"
ENV_FILE = "CNP_LOG_FILE"
ENV_FILE_LEVEL = "CNP_LOG_FILE_LEVEL"


def resolve_level(verbose: bool = False, debug: bool = False) -> str:
    """Pick the console level from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_CONSOLE
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_CONSOLE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    # Effective root level = minimum of console and file levels
    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)
    logging.raiseExceptions = False


def setup_from_flags(verbose: bool = False, debug: bool = False) -> None:
    """``setup_logging`` with the level and file sink taken from flags and env."""
    setup_logging(
        level=resolve_level(verbose=verbose, debug=debug),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
