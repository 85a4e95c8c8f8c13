"""
JDK provider contract.

A provider turns an opaque ``dict[str, str]`` of settings into a JDK
home that contains a ``jmods`` folder.  Providers that fetch anything
store it under the shared cache root and must:

    - return an already materialized cache entry without fetching again
    - never touch the network in offline mode
      (``OfflineUnavailableError`` when the JDK is not cached)
    - leave cache entries complete or absent, never half written
    - raise ``JlinkIOError`` for I/O trouble, ``ProviderFailure`` otherwise
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from jlink_wrapper.core.models.config import ProxySettings

logger = logging.getLogger(__name__)


def is_offline_mode(use_only_cache: bool, session_offline: bool) -> bool:
    """Offline if either the cache-only flag or the build session says so."""
    return use_only_cache or session_offline


def has_jmods(jdk_home: Path) -> bool:
    return (jdk_home / "jmods").is_dir()


@dataclass(frozen=True)
class ProviderContext:
    """Settings shared by every provider for one invocation."""

    cache_root: Path
    offline: bool = False
    disable_ssl_check: bool = False
    proxy: ProxySettings | None = None


class JdkProvider(ABC):
    """Base class for JDK providers."""

    name: str = ""

    def __init__(self, context: ProviderContext):
        self.context = context

    @abstractmethod
    def prepare_jdk_folder(self, config: dict[str, str]) -> Path:
        """Make sure the configured JDK exists and return its home.

        The returned folder always contains ``jmods``.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} cache={str(self.context.cache_root)!r}>"
