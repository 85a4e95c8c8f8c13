"""
Text utilities: hash-line parsing, jdeps report mining, progress bar.

Pure functions apart from ``render_progress``, which writes to a stream.
"""

from __future__ import annotations

import math
import re
from typing import IO

import click

from jlink_wrapper.core.errors import ParseError

_MODULE_LINE = re.compile(r"^(.*)->(.*)$")
_FILE_HASH = re.compile(r"([0-9a-fA-F]+)\s+(.+)")

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_FILLED = "▒"
_EMPTY = "-"


def extract_file_hash(text: str) -> str:
    """Pull the digest out of a ``"<hex>  <filename>"`` checksum line.

    Raises:
        ParseError: If the line has no leading hex run followed by a name.
    """
    match = _FILE_HASH.match(text.strip())
    if match is None:
        raise ParseError(f"Can't extract file hash from '{text}'", text)
    return match.group(1)


def extract_module_names(report_text: str) -> list[str]:
    """Mine target module names from a jdeps report.

    Every ``source -> target`` line contributes its trimmed right-hand
    side.  Targets containing whitespace are annotations such as
    ``"java.foo (not found)"`` and are skipped.
    """
    names: list[str] = []
    for line in report_text.split("\n"):
        match = _MODULE_LINE.match(line)
        if match is None:
            continue
        name = match.group(2).strip()
        if name and not any(ch.isspace() for ch in name):
            names.append(name)
    return names


def render_progress(
    label: str,
    value: int,
    max_value: int,
    bar_width: int,
    last_value: int,
    stream: IO[str] | None = None,
) -> int:
    """Redraw a one-line progress bar if its fill changed.

    Args:
        label: Text printed before the bar.
        value: Current amount of work done.
        max_value: Total amount of work; ``<= 0`` renders an empty bar.
        bar_width: Number of cells in the bar.
        last_value: Fill returned by the previous call.
        stream: Output stream (default: stdout).

    Returns:
        The fill drawn (or that would have been drawn), to be passed back
        as ``last_value`` on the next call.
    """
    if max_value > 0:
        fill = math.floor(bar_width * value / max_value + 0.5)
    else:
        fill = 0
    fill = max(0, min(bar_width, fill))

    if fill != last_value:
        bar = _FILLED * fill + _EMPTY * (bar_width - fill)
        click.echo(f"\r{_HIDE_CURSOR}{label}[{bar}]{_SHOW_CURSOR}", file=stream, nl=False)

    return fill
