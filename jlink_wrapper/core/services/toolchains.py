"""
Toolchain resolution: locate a JDK tool (``jlink``) to run.

Resolution order:
    1. An explicitly configured tool JDK home.
    2. The toolchain pinned in the build context.
    3. Extended lookup of every registered JDK toolchain ``>= 1.8``;
       the LAST candidate wins (most recently registered).

Registries that cannot do the extended lookup simply don't subclass
``ExtendedToolchainRegistry``; the resolver probes for the capability
with ``isinstance`` and treats its absence as "no candidates".
"""

from __future__ import annotations

import logging
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from jlink_wrapper.core.models.config import BuildSession
from jlink_wrapper.core.models.toolchain import ToolchainEntry, ToolchainsFile

logger = logging.getLogger(__name__)

JDK_KIND = "jdk"
MIN_JDK_REQUIREMENTS = {"version": "[1.8,)"}


# ── Executables ─────────────────────────────────────────────────


def _is_windows() -> bool:
    return os.name == "nt"


def ensure_os_extension(path: str | None) -> str | None:
    """Append the host executable extension to ``path`` if it lacks one."""
    if path is None or not _is_windows():
        return path
    if path.lower().endswith(".exe"):
        return path
    return path + ".exe"


def find_jdk_executable(jdk_home: Path, tool_name: str) -> Path | None:
    """Find ``tool_name`` in ``jdk_home/bin`` (or ``jdk_home`` itself)."""
    exe_name = ensure_os_extension(tool_name)
    for folder in (jdk_home / "bin", jdk_home):
        candidate = folder / exe_name
        if candidate.is_file():
            logger.debug("Found %s: %s", tool_name, candidate)
            return candidate
    logger.error("Can't find %s in JDK: %s", exe_name, jdk_home)
    return None


# ── Version ranges ──────────────────────────────────────────────

_RANGE = re.compile(r"^([\[(])\s*([^,]*?)\s*,\s*([^,]*?)\s*([\])])$")


def _parse_version(version: str) -> tuple[int, ...]:
    """``"17.0.2+8"`` -> ``(17, 0, 2)``; stops at the first non-numeric part."""
    parts: list[int] = []
    for piece in re.split(r"[.\-_+]", version.strip().lstrip("v")):
        if not piece.isdigit():
            break
        parts.append(int(piece))
    if not parts:
        raise ValueError(f"Not a version: {version!r}")
    return tuple(parts)


def version_matches(version: str, constraint: str) -> bool:
    """Check ``version`` against a range like ``[1.8,)`` or a bare prefix.

    Bracket ranges use inclusive ``[ ]`` and exclusive ``( )`` bounds,
    either bound may be empty.  A bare constraint such as ``17`` matches any
    version whose leading components equal it (``17.0.2``).
    Unparseable versions never match.
    """
    try:
        actual = _parse_version(version)
        match = _RANGE.match(constraint.strip())
        if match is None:
            wanted = _parse_version(constraint)
            return actual[: len(wanted)] == wanted

        lower_kind, lower, upper, upper_kind = match.groups()
        if lower:
            low = _parse_version(lower)
            if actual < low or (lower_kind == "(" and actual == low):
                return False
        if upper:
            high = _parse_version(upper)
            if actual > high or (upper_kind == ")" and actual == high):
                return False
        return True
    except ValueError:
        return False


def entry_matches(entry: ToolchainEntry, requirements: dict[str, str]) -> bool:
    """Whether a toolchain entry provides everything in ``requirements``."""
    for key, wanted in requirements.items():
        provided = entry.provides.get(key)
        if provided is None:
            return False
        if key == "version":
            if not version_matches(provided, wanted):
                return False
        elif provided != wanted:
            return False
    return True


# ── Toolchains ──────────────────────────────────────────────────


class Toolchain(Protocol):
    """Anything that can find a tool by name."""

    def find_tool(self, tool_name: str) -> str | None: ...


@dataclass(frozen=True)
class JdkToolchain:
    """A locally installed JDK registered as a toolchain."""

    home: Path
    version: str = ""
    vendor: str = ""

    def find_tool(self, tool_name: str) -> str | None:
        found = find_jdk_executable(self.home, tool_name)
        return str(found) if found else None

    @classmethod
    def from_entry(cls, entry: ToolchainEntry) -> JdkToolchain | None:
        home = entry.jdk_home
        if not home:
            logger.warning("Toolchain %s has no jdkHome, ignored", entry.provides)
            return None
        return cls(
            home=Path(home).expanduser(),
            version=entry.provides.get("version", ""),
            vendor=entry.provides.get("vendor", ""),
        )


class ToolchainRegistry(ABC):
    """Simple single-result toolchain lookup."""

    @abstractmethod
    def toolchain_from_build_context(self, kind: str, session: BuildSession) -> Toolchain | None:
        """Return the toolchain selected for ``kind`` in this build, if any."""


class ExtendedToolchainRegistry(ToolchainRegistry):
    """Registry that can also list every toolchain matching requirements."""

    @abstractmethod
    def get_toolchains(
        self,
        session: BuildSession,
        kind: str,
        requirements: dict[str, str],
    ) -> list[Toolchain]:
        """All matching toolchains in registration order."""


class FileToolchainRegistry(ExtendedToolchainRegistry):
    """Registry backed by a parsed toolchains file."""

    def __init__(self, toolchains: ToolchainsFile | None = None):
        self._entries = list(toolchains.toolchains) if toolchains else []

    @property
    def entries(self) -> list[ToolchainEntry]:
        return list(self._entries)

    def _matching(self, kind: str, requirements: dict[str, str]) -> list[Toolchain]:
        result: list[Toolchain] = []
        for entry in self._entries:
            if entry.type != kind or not entry_matches(entry, requirements):
                continue
            toolchain = JdkToolchain.from_entry(entry)
            if toolchain is not None:
                result.append(toolchain)
        return result

    def toolchain_from_build_context(self, kind: str, session: BuildSession) -> Toolchain | None:
        requirements = session.toolchain_requirements.get(kind)
        if requirements is None:
            return None
        matching = self._matching(kind, requirements)
        return matching[0] if matching else None

    def get_toolchains(
        self,
        session: BuildSession,
        kind: str,
        requirements: dict[str, str],
    ) -> list[Toolchain]:
        return self._matching(kind, requirements)


# ── Resolution ──────────────────────────────────────────────────


def find_toolchain(
    registry: ToolchainRegistry | None,
    session: BuildSession,
) -> Toolchain | None:
    """Pick the JDK toolchain for this build, or None."""
    if registry is None:
        return None

    toolchain = registry.toolchain_from_build_context(JDK_KIND, session)
    if toolchain is not None:
        return toolchain

    if not isinstance(registry, ExtendedToolchainRegistry):
        return None

    try:
        candidates = registry.get_toolchains(session, JDK_KIND, dict(MIN_JDK_REQUIREMENTS))
    except Exception as e:
        logger.debug("Exception during extended toolchain lookup: %s", e, exc_info=True)
        return None

    if not candidates:
        return None
    return candidates[-1]


def resolve_tool_path(
    tool_name: str,
    explicit_jdk_home: str | None = None,
    *,
    registry: ToolchainRegistry | None = None,
    session: BuildSession | None = None,
) -> str | None:
    """Locate ``tool_name``; returns None (never raises) when it can't.

    Callers decide whether a missing tool is fatal.
    """
    if explicit_jdk_home is not None:
        jdk_home = Path(explicit_jdk_home).expanduser()
        if not jdk_home.is_dir():
            logger.error("Can't find directory: %s", jdk_home)
            return None
        found = find_jdk_executable(jdk_home, tool_name)
        return str(found) if found else None

    toolchain = find_toolchain(registry, session or BuildSession())
    if toolchain is None:
        logger.debug("No JDK toolchain available for %s", tool_name)
        return None
    return ensure_os_extension(toolchain.find_tool(tool_name))
