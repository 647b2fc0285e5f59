"""
Logging configuration — central setup for the CLI.

Called once at startup by ``gitseq.main``.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    --debug / --verbose / --quiet  >  GITSEQ_LOG_LEVEL  >  WARNING (default)

Optional file output via GITSEQ_LOG_FILE / GITSEQ_LOG_FILE_LEVEL.

The git adapter logs every subprocess it starts at DEBUG. On a large
history that is one line per commit, so it is held at INFO unless the
console itself runs at DEBUG or ``per_query`` is requested.
"""

from __future__ import annotations

import logging
import os
import sys

# ── Format strings ──────────────────────────────────────────────

# (format, datefmt) by console level; WARNING and above print bare messages
_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    logging.WARNING: ("%(levelname)s: %(message)s", None),
}

# File output: always full detail
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Loggers that emit one record per VCS query
_PER_QUERY_LOGGERS = ("gitseq.adapters.vcs.git",)

ENV_LEVEL = "GITSEQ_LOG_LEVEL"
ENV_FILE = "GITSEQ_LOG_FILE"
ENV_FILE_LEVEL = "GITSEQ_LOG_FILE_LEVEL"


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> str:
    """Pick the console level from CLI flags, falling back to the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    per_query: bool = False,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
        per_query: Keep per-query git logging even below DEBUG console level.
    """
    numeric_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(_console_formatter(numeric_level))

    handlers: list[logging.Handler] = [console]
    if log_file:
        handlers.append(_file_handler(log_file, _parse_level(log_file_level or level)))

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))

    query_level = logging.NOTSET if per_query or numeric_level <= logging.DEBUG else logging.INFO
    for name in _PER_QUERY_LOGGERS:
        logging.getLogger(name).setLevel(query_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _file_handler(path: str, numeric_level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
    return handler


def _console_formatter(numeric_level: int) -> logging.Formatter:
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FORMATS[logging.DEBUG]
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FORMATS[logging.INFO]
    else:
        fmt, datefmt = _FORMATS[logging.WARNING]
    return logging.Formatter(fmt, datefmt=datefmt)


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
