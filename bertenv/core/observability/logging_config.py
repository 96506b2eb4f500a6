"""
Logging configuration for the installer CLI.

The console belongs to the progress reporter, so logging stays out of
the way by default: only warnings and errors reach stderr. ``-v`` and
``--debug`` add the step timings and the captured pip/conda output that
adapters log under ``bertenv.*``.

Levels are resolved in precedence order:
    CLI flag  >  BERTENV_LOG_LEVEL  >  WARNING

BERTENV_LOG_FILE keeps a full record of a run (at BERTENV_LOG_FILE_LEVEL,
DEBUG by default), which is what to attach when an install fails.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

# Plain messages at WARNING and above; timestamped with -v or --debug.
_FMT_CONSOLE = "%(message)s"
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s — %(message)s"
_DATEFMT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Captured output is logged line by line, prefixed so it reads as a quote.
_TAIL_PREFIX = "    | "
_TAIL_LINES = 20


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure process-wide logging.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path to a log file, appended to.
        log_file_level: Level for the log file. Defaults to DEBUG so the
            file holds everything the adapters captured.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    if console_level <= logging.INFO:
        console.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT))
    else:
        console.setFormatter(logging.Formatter(_FMT_CONSOLE))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level, default=logging.DEBUG)
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)


def setup_cli_logging(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Apply CLI flags and the ``BERTENV_LOG_*`` variables."""
    env = os.environ if environ is None else environ
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=env.get("BERTENV_LOG_LEVEL"),
        ),
        log_file=env.get("BERTENV_LOG_FILE"),
        log_file_level=env.get("BERTENV_LOG_FILE_LEVEL"),
    )


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def log_output_tail(
    logger: logging.Logger,
    label: str,
    text: str,
    level: int = logging.DEBUG,
    lines: int = _TAIL_LINES,
) -> None:
    """Log the last ``lines`` lines of a command's captured output."""
    if not text or not logger.isEnabledFor(level):
        return
    tail = text.splitlines()[-lines:]
    logger.log(level, "%s (last %d lines):", label, len(tail))
    for line in tail:
        logger.log(level, "%s%s", _TAIL_PREFIX, line)


def _parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Convert a level name to its numeric value; unknown names give ``default``."""
    if not level:
        return default
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return default
    return numeric
