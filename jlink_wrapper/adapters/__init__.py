"""Adapters: bindings to external tools.

Public re-exports for convenient access.
"""

from jlink_wrapper.adapters.shell.process import ProcessOutcome, ProcessRunner, check_outcome

__all__ = [
    "ProcessOutcome",
    "ProcessRunner",
    "check_outcome",
]
