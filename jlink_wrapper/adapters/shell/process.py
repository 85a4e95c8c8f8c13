"""
Process runner: the single place where the external tool is spawned.

Runs synchronously with no timeout (image assembly can take minutes),
captures stdout and stderr separately, then classifies the outcome.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from jlink_wrapper.core.errors import ExecutionInterrupted, LaunchError, ToolExecutionError

logger = logging.getLogger(__name__)

INCOMPATIBLE_JDK_MARKER = "IllegalArgumentException"
INCOMPATIBLE_JDK_HINT = "It looks like that working JDK is incompatible with the source module JDK!"


@dataclass(frozen=True)
class ProcessOutcome:
    """Exit code and captured output of one finished run."""

    command: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def tool(self) -> str:
        return Path(self.command[0]).stem if self.command else "tool"


def check_outcome(outcome: ProcessOutcome, output_path: Path | str | None = None) -> ProcessOutcome:
    """Log the outcome and raise on a non-zero exit code.

    Raises:
        ToolExecutionError: With the exit code and the captured diagnostic
            (stderr, or stdout when stderr is empty).
    """
    if outcome.ok:
        logger.debug(outcome.stdout)
        logger.info("Execution completed successfully, the result folder is %s", output_path)
        return outcome

    hint = ""
    if outcome.exit_code == 1 and INCOMPATIBLE_JDK_MARKER in outcome.stdout:
        logger.error(INCOMPATIBLE_JDK_HINT)
        hint = INCOMPATIBLE_JDK_HINT

    if outcome.stderr:
        logger.info(outcome.stdout)
        logger.error(outcome.stderr)
        diagnostic = outcome.stderr
    else:
        logger.error(outcome.stdout)
        diagnostic = outcome.stdout

    if hint:
        diagnostic = f"{diagnostic.rstrip()}\n{hint}" if diagnostic.strip() else hint

    raise ToolExecutionError(outcome.exit_code, diagnostic, tool=outcome.tool)


class ProcessRunner:
    """Spawn a command, wait for it, and classify its result."""

    def execute(self, command: Sequence[str]) -> ProcessOutcome:
        """Run ``command`` to completion without classifying the result.

        Raises:
            LaunchError: The executable could not be started.
            ExecutionInterrupted: Waiting was interrupted; the child is killed.
        """
        argv = tuple(str(part) for part in command)
        logger.debug("Command line: %s", list(argv))
        start = time.monotonic()

        try:
            proc = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise LaunchError(f"Error during execution of {argv[0]}: {e}") from e

        try:
            stdout, stderr = proc.communicate()
        except KeyboardInterrupt as e:
            proc.kill()
            proc.wait()
            raise ExecutionInterrupted("Execution interrupted") from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return ProcessOutcome(
            command=argv,
            exit_code=proc.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
            duration_ms=elapsed_ms,
        )

    def run(self, command: Sequence[str], output_path: Path | str | None = None) -> ProcessOutcome:
        """Execute and classify; returns the outcome only on success."""
        return check_outcome(self.execute(command), output_path)
