"""Subprocess execution with Result-based error handling.

``run`` captures output for plumbing commands (git). ``run_shell`` hands a
user-written command line to the shell and lets its output stream to the
terminal, which is what workflow ``Command`` steps need.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_shell"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A subprocess that could not be started or exited non-zero.

    Attributes:
        command: The command as executed (a single item for shell lines).
        returncode: Exit code, -1 when the process never ran.
        stdout: Captured standard output (empty when streamed).
        stderr: Captured standard error or the OS error text.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute ``cmd`` and return its stdout.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.
        timeout: Seconds to wait before giving up (None for no limit).

    Returns:
        Ok(stdout) on exit code 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_shell(command: str, cwd: Path) -> Result[None, ProcessError]:
    """Run ``command`` through the user's shell with inherited stdio."""
    try:
        proc = subprocess.run(command, cwd=str(cwd), shell=True, check=False)
    except OSError as e:
        return Err(ProcessError(command=(command,), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=(command,), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)
