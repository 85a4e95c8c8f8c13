"""
JDK cache directory: resolution and validation of the cache root.

Every JDK provider materializes its JDKs beneath this directory, so it
is resolved and checked once per invocation before any provider runs.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from jlink_wrapper.core.errors import ConfigurationError, JlinkIOError

logger = logging.getLogger(__name__)


def resolve_cache_root(path_string: str) -> Path:
    """Return the validated cache root, creating it when missing.

    Raises:
        ConfigurationError: If ``path_string`` is blank.
        JlinkIOError: If the directory cannot be created or is not a
            readable, writable directory.
    """
    if not path_string or not path_string.strip():
        raise ConfigurationError("Path to the cache folder is not provided")

    root = Path(path_string.strip()).expanduser()

    if not root.exists():
        logger.info("Creating JDK cache folder: %s", root)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise JlinkIOError(f"Can't create the cache folder {root}: {e}", root) from e

    # All three are evaluated; the first failure in this order is reported.
    is_dir = root.is_dir()
    readable = os.access(root, os.R_OK)
    writable = os.access(root, os.W_OK)

    if not is_dir:
        raise JlinkIOError(f"Cache path is not a folder: {root}", root)
    if not readable:
        raise JlinkIOError(f"Can't read from the cache folder, check rights: {root}", root)
    if not writable:
        raise JlinkIOError(f"Can't write to the cache folder, check rights: {root}", root)

    logger.debug("JDK cache folder: %s", root)
    return root
