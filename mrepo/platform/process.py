"""Subprocess execution with Result-based error handling.

Every external process mrepo starts (git plumbing and user commands alike)
goes through ``run_command``. The process runs to completion in the given
directory; stdout and stderr are captured separately as bytes.

Usage:
    result = run_command(["git", "status"], cwd=Path(repo.path), key=repo.key)
    match result:
        case Ok(execution):
            print(execution.stdout_text)
        case Err(CommandFailed() as failure):
            print(failure.result.stderr_text)
        case Err(IoFailure(message=message)):
            print(message)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from mrepo.core.errors import CommandFailed, IoFailure
from mrepo.core.result import Err, Ok, Result

__all__ = ["ExecutionResult", "run_command"]


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of one terminated process.

    Attributes:
        exit_code: Process return code (-1 when it timed out)
        stdout: Captured standard output
        stderr: Captured standard error
        command: The command line that produced it
    """

    exit_code: int
    stdout: bytes
    stderr: bytes
    command: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


def run_command(
    cmd: list[str],
    cwd: Path,
    *,
    key: str,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> Result[ExecutionResult, CommandFailed | IoFailure]:
    """Execute a command and capture its outcome.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the process.
        key: Repository key, attached to any error for attribution.
        env: Environment variables (inherits the current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(ExecutionResult) when the process exits 0,
        Err(CommandFailed) on a non-zero exit or timeout,
        Err(IoFailure) when the process cannot be started.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, bytes) else b""
        result = ExecutionResult(
            exit_code=-1,
            stdout=partial,
            stderr=f"Command timed out after {timeout}s".encode(),
            command=command,
        )
        return Err(CommandFailed(key=key, command=command, result=result))
    except OSError as e:
        return Err(IoFailure(message=f"{cmd[0]}: {e.strerror or e}", path=str(cwd), key=key))

    result = ExecutionResult(
        exit_code=proc.returncode,
        stdout=proc.stdout,
        stderr=proc.stderr,
        command=command,
    )
    if proc.returncode != 0:
        return Err(CommandFailed(key=key, command=command, result=result))
    return Ok(result)
