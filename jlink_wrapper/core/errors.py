"""
Error taxonomy for the image pipeline.

Every failure the pipeline can surface is one of these types.  All of
them except ``ExecutionInterrupted`` derive from ``JlinkError`` so the
CLI can report them uniformly.  Nothing here is retried automatically.
"""

from __future__ import annotations

from pathlib import Path


class JlinkError(Exception):
    """Base class for all pipeline failures."""


class ConfigurationError(JlinkError):
    """Raised when a required setting is missing or invalid."""


class JlinkIOError(JlinkError):
    """Raised on filesystem or network access problems.

    Carries the offending path (or URL) when one is known.
    """

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path


class OfflineUnavailableError(JlinkIOError):
    """Raised when a JDK is not cached and network access is forbidden."""


class ProviderFailure(JlinkError):
    """Raised by a JDK provider for logical errors (bad checksum, bad id)."""


class ReportReadError(JlinkError):
    """Raised when the jdeps report cannot be read."""

    def __init__(self, message: str, path: Path | str):
        super().__init__(message)
        self.path = path


class ParseError(JlinkError):
    """Raised when a text fragment does not have the expected shape."""

    def __init__(self, message: str, text: str):
        super().__init__(message)
        self.text = text


class NoModulesError(ConfigurationError):
    """Raised when no module for ``--add-modules`` came from any source."""


class LaunchError(JlinkError):
    """Raised when the external tool cannot be spawned at all."""


class ToolExecutionError(JlinkError):
    """Raised when the external tool ran and returned a non-zero exit code."""

    def __init__(self, exit_code: int, diagnostic: str = "", tool: str = "jlink"):
        super().__init__(f"{tool} returns error status code: {exit_code}")
        self.exit_code = exit_code
        self.diagnostic = diagnostic
        self.tool = tool


class ExecutionInterrupted(KeyboardInterrupt):
    """Raised when waiting for the external tool was interrupted.

    Subclasses ``KeyboardInterrupt`` rather than ``JlinkError`` so that
    ``except Exception`` handlers up the stack cannot swallow it.
    """
