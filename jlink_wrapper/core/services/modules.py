"""
Module list: what goes into ``--add-modules``.

Modules mined from a jdeps report come first, explicitly configured
ones after.  Duplicates are kept; jlink tolerates them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from jlink_wrapper.core.errors import ReportReadError
from jlink_wrapper.core.services.text_utils import extract_module_names

logger = logging.getLogger(__name__)


def read_jdeps_modules(report_path: Path | None) -> list[str]:
    """Module names found in a jdeps report, or ``[]`` without a report.

    Raises:
        ReportReadError: If the report file cannot be read as text.
    """
    if report_path is None:
        return []
    try:
        text = report_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReportReadError(f"Can't read jdeps out file: {report_path}", report_path) from e

    names = extract_module_names(text)
    logger.debug("Modules from jdeps report %s: %s", report_path, names)
    return names


def build_module_list(
    explicit_modules: Sequence[str],
    jdeps_report_path: Path | None = None,
) -> list[str]:
    """Merge mined and explicit module names, trimmed, in that order."""
    modules = read_jdeps_modules(jdeps_report_path)
    modules.extend(name.strip() for name in explicit_modules if name.strip())
    return modules
