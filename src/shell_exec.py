"""Shell execution primitive used by the npm command wrappers.

Command lines handed to ``run`` must already be built from validated and
escaped values; this module does not inspect them.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants

logger = logging.getLogger(__name__)


@dataclass
class ExecResult:
    """Captured outcome of a shell command."""

    command: str
    stdout: str
    stderr: str
    code: int

    @property
    def summary(self) -> str:
        """One-line description suitable for error messages."""
        detail = self.stderr.strip() or self.stdout.strip()
        text = f"command '{self.command}' exited with code {self.code}"
        if detail:
            text += f": {detail}"
        return text


class CommandError(RuntimeError):
    """Raised when a command exits non-zero or cannot be run to completion."""

    def __init__(self, message: str, result: Optional[ExecResult] = None):
        super().__init__(message)
        self.result = result


def run(
    command_line: str,
    *,
    cwd: Optional[str] = None,
    silent: bool = False,
    no_throw: bool = False,
    timeout: Optional[int] = None,
) -> ExecResult:
    """Run ``command_line`` through the local shell and capture its output.

    Args:
        command_line: A complete, already-escaped command line.
        cwd: Working directory for the command.
        silent: Do not echo stdout to the log.
        no_throw: Return the result instead of raising on a non-zero exit.
        timeout: Seconds before the command is killed; defaults to
            Constants.EXEC_TIMEOUT_SEC.

    Returns:
        ExecResult with stdout, stderr and the exit code.

    Raises:
        CommandError: On non-zero exit (unless ``no_throw``), timeout, or
            when the shell itself cannot be started.
    """
    limit = timeout if timeout is not None else Constants.EXEC_TIMEOUT_SEC
    with Timer() as t:
        try:
            proc = subprocess.run(  # noqa: S602
                command_line,
                shell=True,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=limit,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.error("Command timed out after %s seconds: %s", limit, command_line)
            raise CommandError(f"command '{command_line}' timed out after {limit} seconds") from exc
        except OSError as exc:
            logger.error("Failed to start command %s: %s", command_line, exc)
            raise CommandError(f"could not run command '{command_line}': {exc}") from exc

    result = ExecResult(
        command=command_line,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        code=proc.returncode,
    )

    if is_debug_enabled(logger):
        logger.debug(
            "Command finished",
            extra=extra_context(
                event="exec",
                component="shell_exec",
                target=command_line,
                cwd=cwd,
                outcome="success" if result.code == 0 else "failure",
                status_code=result.code,
                duration_ms=t.duration_ms(),
            ),
        )
    if not silent and result.stdout.strip():
        logger.info("%s", result.stdout.rstrip())

    if result.code != 0 and not no_throw:
        raise CommandError(result.summary, result)
    return result
