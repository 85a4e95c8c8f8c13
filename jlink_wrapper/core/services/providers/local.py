"""
LOCAL provider: use a JDK already installed on this machine.

Config keys:
    path: JDK home (default: the ``JAVA_HOME`` environment variable).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from jlink_wrapper.core.errors import ProviderFailure
from jlink_wrapper.core.services.providers.base import JdkProvider, has_jmods

logger = logging.getLogger(__name__)


class LocalJdkProvider(JdkProvider):
    """Point the pipeline at a locally installed JDK."""

    name = "LOCAL"

    def prepare_jdk_folder(self, config: dict[str, str]) -> Path:
        raw = config.get("path") or os.environ.get("JAVA_HOME")
        if not raw:
            raise ProviderFailure(
                "LOCAL provider needs 'path' in provider config or JAVA_HOME to be set"
            )

        jdk_home = Path(raw).expanduser()
        if not jdk_home.is_dir():
            raise ProviderFailure(f"Can't find local JDK folder: {jdk_home}")
        if not has_jmods(jdk_home):
            raise ProviderFailure(f"Local JDK has no jmods folder: {jdk_home}")

        logger.info("Using local JDK: %s", jdk_home)
        return jdk_home
