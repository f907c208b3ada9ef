"""Thin wrapper around subprocess for external tool invocations."""

import logging
import subprocess
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120
TIMEOUT_EXIT_CODE = -1
MISSING_BINARY_EXIT_CODE = 127


class CommandResult(BaseModel):
    """Captured result of one external command."""

    args: list[str]
    returncode: int
    output: str
    error: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


def run_command(
    args: list[str],
    cwd: str | Path | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> CommandResult:
    """Run a command to completion and capture its output.

    Never raises for tool failures: a missing binary or a timeout is
    reported as a failed CommandResult so callers can fall back.

    Args:
        args: Program and arguments (no shell interpolation).
        cwd: Working directory for the command.
        timeout: Seconds before the command is killed.

    Returns:
        CommandResult with decoded stdout/stderr.
    """
    logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
    try:
        proc = subprocess.run(
            args,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        return CommandResult(
            args=args,
            returncode=MISSING_BINARY_EXIT_CODE,
            output="",
            error=str(exc),
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            args=args,
            returncode=TIMEOUT_EXIT_CODE,
            output="",
            error=f"Command timed out after {timeout}s: {' '.join(args)}",
        )

    return CommandResult(
        args=args,
        returncode=proc.returncode,
        output=proc.stdout or "",
        error=proc.stderr or "",
    )
