"""Run external commands and capture their output."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from pathgate.exceptions import TransportError

logger = logging.getLogger("pathgate.exec")


@dataclass
class ExecResult:
    """Exit code and captured streams of a finished command."""
    code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.code == 0


def run_command(
    args: list[str],
    cwd: Path | str | None = None,
    timeout: float | None = None,
) -> ExecResult:
    """Run a command to completion.

    A non-zero exit is reported through ``ExecResult.code``, not raised.
    Output is decoded with ``surrogateescape`` so NUL-delimited and
    non-UTF-8 paths survive intact.

    Raises:
        TransportError: If the executable is missing or the timeout expires.
    """
    logger.debug("Running %s", " ".join(args))
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise TransportError(f"Command not found: {args[0]}") from e
    except subprocess.TimeoutExpired as e:
        raise TransportError(
            f"Command timed out after {timeout}s: {' '.join(args)}"
        ) from e

    return ExecResult(
        code=result.returncode,
        stdout=result.stdout.decode("utf-8", "surrogateescape"),
        stderr=result.stderr.decode("utf-8", "surrogateescape"),
    )
