"""Error presentation utilities.

Centralized error wording and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mrepo.core.errors import (
    BranchUnknown,
    CommandFailed,
    ConfigError,
    DuplicateRepo,
    ErrorCode,
    InvalidKey,
    IoFailure,
    NoRemotes,
    NoRepo,
    OperationsInProgress,
    RepoDirty,
)
from mrepo.output.console import Style

if TYPE_CHECKING:
    from mrepo.output.console import ConsoleProtocol

type AnyError = (
    NoRepo
    | NoRemotes
    | InvalidKey
    | BranchUnknown
    | OperationsInProgress
    | RepoDirty
    | CommandFailed
    | ConfigError
    | IoFailure
    | DuplicateRepo
)

__all__ = ["AnyError", "describe_error", "error_exit_code", "print_error"]


def describe_error(error: AnyError) -> str:
    """One-line description of an error."""
    match error:
        case NoRepo(path=path, reason=reason):
            return f"no git repository at {path} ({reason})"
        case NoRemotes(path=path):
            return f"repository at {path} has no remotes; pass --remote"
        case InvalidKey(key=key):
            return f"invalid repository key {key!r}: keys must not be blank"
        case BranchUnknown(key=key):
            return f"{key}: cannot determine current branch (detached HEAD?)"
        case OperationsInProgress(key=key, operation=operation):
            return f"{key}: {operation} in progress; finish or abort it first"
        case RepoDirty(key=key):
            return f"{key}: uncommitted changes (use --stash to stash them)"
        case CommandFailed(key=key):
            return f"{key}: {error.describe()}"
        case ConfigError(message=message, path=path):
            return f"{message} ({path})" if path else message
        case IoFailure(message=message, path=path, key=key):
            prefix = f"{key}: " if key else ""
            suffix = f" ({path})" if path else ""
            return f"{prefix}{message}{suffix}"
        case DuplicateRepo(key=key, path=path):
            return f"a repository with key '{key}' or path {path} is already tracked"


def error_exit_code(error: AnyError) -> int:
    """Exit code for a single-operation error (track, untrack, clone, load)."""
    match error:
        case NoRepo() | NoRemotes() | InvalidKey() | DuplicateRepo() | BranchUnknown():
            return int(ErrorCode.USER_ERROR)
        case ConfigError():
            return int(ErrorCode.ENV_ERROR)
        case OperationsInProgress() | RepoDirty() | CommandFailed():
            return int(ErrorCode.BATCH_FAILED)
        case IoFailure():
            return int(ErrorCode.IO_ERROR)


def print_error(error: AnyError, console: ConsoleProtocol) -> None:
    """Print an error, with captured process output when there is any."""
    console.error(describe_error(error))
    if isinstance(error, CommandFailed):
        for stream in (error.result.stdout_text, error.result.stderr_text):
            if stream.strip():
                console.print(stream.rstrip("\n"), Style.DIM)
