"""
Command assembly: the exact argv handed to ``jlink``.

    [jlink, --output, <out>, *options, --module-path, <jdk>/jmods, --add-modules, <mods>]

A caller-supplied ``--add-modules`` is extended in place instead of
adding the flag a second time.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from jlink_wrapper.core.errors import ConfigurationError, JlinkIOError, NoModulesError

logger = logging.getLogger(__name__)

ADD_MODULES = "--add-modules"
MODULE_PATH = "--module-path"
OUTPUT = "--output"


def check_modules(module_list: Sequence[str], options: Sequence[str]) -> None:
    """Validate the module inputs before anything touches the disk.

    Raises:
        NoModulesError: No ``--add-modules`` in ``options`` and no modules.
        ConfigurationError: ``--add-modules`` is last or followed by another flag.
    """
    if ADD_MODULES not in options:
        if not module_list:
            raise NoModulesError("There are not provided modules to be added.")
        return

    index = list(options).index(ADD_MODULES) + 1
    if index >= len(options) or options[index].startswith("-"):
        raise ConfigurationError(f"Option {ADD_MODULES} has no value")


def build_command(
    jlink_exe: str | Path,
    output_path: str | Path,
    jdk_home: Path,
    module_list: Sequence[str],
    options: Sequence[str],
) -> tuple[str, ...]:
    """Assemble the jlink command line.

    Args:
        jlink_exe: Path to the jlink executable (element zero).
        output_path: Image output folder.
        jdk_home: Provider JDK; its ``jmods`` folder is the module path.
        module_list: Modules to add, joined with commas.
        options: Raw jlink options supplied by the caller.

    Raises:
        NoModulesError: No ``--add-modules`` in ``options`` and no modules.
        ConfigurationError: ``--add-modules`` given without a value.
    """
    check_modules(module_list, options)

    assembled = list(options)
    assembled += [MODULE_PATH, str(jdk_home / "jmods")]

    joined = ",".join(module_list)

    if ADD_MODULES not in assembled:
        assembled += [ADD_MODULES, joined]
    elif joined:
        index = assembled.index(ADD_MODULES) + 1
        assembled[index] = f"{assembled[index]},{joined}"

    return (str(jlink_exe), OUTPUT, str(output_path), *assembled)


def reset_output_dir(output_path: Path) -> None:
    """Delete an existing image folder; jlink refuses to overwrite one."""
    if not output_path.is_dir():
        return
    logger.warning("Deleting existing output folder: %s", output_path)
    try:
        shutil.rmtree(output_path)
    except OSError as e:
        raise JlinkIOError(f"Can't delete output folder: {output_path}", output_path) from e
