"""Error kinds and CLI exit codes.

Errors are plain frozen dataclasses returned inside ``Err``; nothing here is
raised. Every per-repository error carries the repository key so aggregated
batch output can attribute it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mrepo.platform.process import ExecutionResult

__all__ = [
    "ErrorCode",
    "NoRepo",
    "NoRemotes",
    "BranchUnknown",
    "OperationsInProgress",
    "RepoDirty",
    "CommandFailed",
    "ConfigError",
    "IoFailure",
    "DuplicateRepo",
    "InvalidKey",
    "BuildError",
    "RepoError",
]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable.
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BATCH_FAILED = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


@dataclass(frozen=True, slots=True)
class NoRepo:
    """Path is not inside a git working copy with at least one commit."""

    path: str
    reason: str = "not a git working copy"


@dataclass(frozen=True, slots=True)
class NoRemotes:
    """Repository has no remotes and none was given."""

    path: str


@dataclass(frozen=True, slots=True)
class BranchUnknown:
    """HEAD is detached or otherwise has no branch name."""

    key: str


@dataclass(frozen=True, slots=True)
class OperationsInProgress:
    """A merge, rebase, cherry-pick, revert or bisect is mid-flight."""

    key: str
    operation: str


@dataclass(frozen=True, slots=True)
class RepoDirty:
    """Uncommitted changes block an update and stashing was not allowed."""

    key: str


@dataclass(frozen=True, slots=True)
class CommandFailed:
    """External process exited non-zero.

    Attributes:
        key: Repository key the command ran for
        command: The full command line
        result: Captured exit code, stdout and stderr
    """

    key: str
    command: tuple[str, ...]
    result: ExecutionResult

    def describe(self) -> str:
        cmd_str = " ".join(self.command[:4])
        if len(self.command) > 4:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.result.exit_code})"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Persisted registry or settings file is malformed or unreadable."""

    message: str
    path: str | None = None


@dataclass(frozen=True, slots=True)
class IoFailure:
    """Filesystem or process-spawn failure."""

    message: str
    path: str | None = None
    key: str | None = None


@dataclass(frozen=True, slots=True)
class DuplicateRepo:
    """Candidate collides with a tracked repository by key or by path."""

    key: str
    path: str


@dataclass(frozen=True, slots=True)
class InvalidKey:
    """Repository key is empty or whitespace only."""

    key: str


# Errors from descriptor construction (track / clone).
BuildError = NoRepo | NoRemotes | InvalidKey | BranchUnknown | CommandFailed | IoFailure

# Errors from a per-repository batch task.
RepoError = (
    NoRepo | BranchUnknown | OperationsInProgress | RepoDirty | CommandFailed | IoFailure
)
