"""
Logging setup for the jlink-wrapper CLI.

main.py calls ``setup_logging`` once; modules log through
``logging.getLogger(__name__)``.  The console shows bare messages by
default so jlink's own diagnostics read as they were printed.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "JLINK_WRAPPER_LOG_LEVEL"
ENV_LOG_FILE = "JLINK_WRAPPER_LOG_FILE"
ENV_LOG_FILE_LEVEL = "JLINK_WRAPPER_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d | %(message)s"

# Console format by the most verbose level it applies to.
_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "[%(levelname)s] %(message)s", None),
)


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """CLI flags win over ``JLINK_WRAPPER_LOG_LEVEL``; WARNING otherwise."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def _console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter("%(message)s")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root handlers with a stderr handler and an optional file.

    The file handler always uses the detailed format; its level defaults
    to ``level``.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(console_level)

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        root.setLevel(min(console_level, file_level))

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to number; unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
