"""
Logging configuration — set up once by the CLI entrypoint.

Every module that does ``logger = logging.getLogger(__name__)`` inherits
this config. Build-tool output is not logged: it streams straight to
the terminal, so log lines stay on stderr and short.

Levels are resolved in precedence order:
    --debug  >  --verbose  >  --quiet  >  ORCHESTRA_LOG_LEVEL  >  WARNING

Optional file output via ORCHESTRA_LOG_FILE / ORCHESTRA_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

ENV_LEVEL = "ORCHESTRA_LOG_LEVEL"
ENV_FILE = "ORCHESTRA_LOG_FILE"
ENV_FILE_LEVEL = "ORCHESTRA_LOG_FILE_LEVEL"

# ── Format strings ──────────────────────────────────────────────

_FMT_MINIMAL = "%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_CONSOLE = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file, always written in full format.
        log_file_level: Level for the log file. Defaults to ``level``.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_CONSOLE)
    elif numeric_level <= logging.INFO:
        formatter = logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT_CONSOLE)
    else:
        formatter = logging.Formatter(_FMT_MINIMAL)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

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


def setup_from_environment(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Resolve the level and configure logging. Returns the console level name."""
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet)
    setup_logging(
        level=level,
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )
    return level


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant, WARNING if unknown."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
