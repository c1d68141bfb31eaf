"""Per-repository update and status operations.

``update_repo`` is a linear state machine:

    Validate -> CheckDirty -> (Stash) -> DetermineOriginalBranch ->
    (SwitchToTarget) -> Rebase -> (RestoreOriginalBranch) -> (Unstash) -> Done

Any failing step aborts the remaining ones. Nothing is compensated: a rebase
that fails after a branch switch leaves the working copy on the target
branch with the stash still in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mrepo.core.errors import BranchUnknown, OperationsInProgress, RepoDirty, RepoError
from mrepo.core.result import Err, Ok, Result
from mrepo.git.descriptor import RepoDescriptor
from mrepo.git.repository import GitRepository
from mrepo.platform.process import ExecutionResult

__all__ = ["UpdateOutcome", "UpdateStep", "status_repo", "update_repo"]


class UpdateStep(Enum):
    """Steps of the update sequence, in execution order."""

    VALIDATE = "validate"
    CHECK_DIRTY = "check-dirty"
    STASH = "stash"
    DETERMINE_BRANCH = "determine-branch"
    SWITCH_TO_TARGET = "switch-to-target"
    REBASE = "rebase"
    RESTORE_BRANCH = "restore-branch"
    UNSTASH = "unstash"

    @property
    def restoring(self) -> bool:
        """True for steps that undo an earlier forward step."""
        return self in (UpdateStep.RESTORE_BRANCH, UpdateStep.UNSTASH)


@dataclass(frozen=True, slots=True)
class UpdateOutcome:
    """Successful update.

    Attributes:
        output: Captured output of the rebase step
        steps: Steps that ran, in order
        original_branch: Branch that was checked out before the update
        stashed: True if local changes were stashed and restored
    """

    output: ExecutionResult
    steps: tuple[UpdateStep, ...]
    original_branch: str
    stashed: bool = False


def update_repo(
    repo: GitRepository,
    descriptor: RepoDescriptor,
    *,
    allow_stash: bool,
) -> Result[UpdateOutcome, RepoError]:
    """Bring ``descriptor.branch`` up to date with its upstream.

    Args:
        repo: Opened working copy
        descriptor: Tracked-repository descriptor (key and target branch)
        allow_stash: Stash uncommitted changes instead of failing with RepoDirty

    Returns:
        Ok(UpdateOutcome) carrying the rebase output, or Err with the first
        error encountered.
    """
    key = descriptor.key
    steps: list[UpdateStep] = []

    steps.append(UpdateStep.VALIDATE)
    in_progress = repo.operation_in_progress()
    if isinstance(in_progress, Err):
        return in_progress
    if in_progress.value is not None:
        return Err(OperationsInProgress(key=key, operation=in_progress.value))

    steps.append(UpdateStep.CHECK_DIRTY)
    dirty = repo.is_dirty()
    if isinstance(dirty, Err):
        return dirty

    stashed = False
    if dirty.value:
        if not allow_stash:
            return Err(RepoDirty(key=key))
        steps.append(UpdateStep.STASH)
        stash = repo.stash()
        if isinstance(stash, Err):
            return stash
        stashed = True

    steps.append(UpdateStep.DETERMINE_BRANCH)
    current = repo.current_branch()
    if isinstance(current, Err):
        return current
    original_branch = current.value
    if original_branch is None:
        return Err(BranchUnknown(key=key))

    switched = original_branch != descriptor.branch
    if switched:
        steps.append(UpdateStep.SWITCH_TO_TARGET)
        checkout = repo.checkout(descriptor.branch)
        if isinstance(checkout, Err):
            return checkout

    steps.append(UpdateStep.REBASE)
    rebase = repo.pull_rebase()
    if isinstance(rebase, Err):
        return rebase

    if switched:
        steps.append(UpdateStep.RESTORE_BRANCH)
        restore = repo.checkout(original_branch)
        if isinstance(restore, Err):
            return restore

    if stashed:
        steps.append(UpdateStep.UNSTASH)
        unstash = repo.stash_pop()
        if isinstance(unstash, Err):
            return unstash

    return Ok(
        UpdateOutcome(
            output=rebase.value,
            steps=tuple(steps),
            original_branch=original_branch,
            stashed=stashed,
        )
    )


def status_repo(
    repo: GitRepository,
    *,
    only_if_dirty: bool,
) -> Result[ExecutionResult | None, RepoError]:
    """``git status`` output, or None for a clean tree when ``only_if_dirty``."""
    if only_if_dirty:
        dirty = repo.is_dirty()
        if isinstance(dirty, Err):
            return dirty
        if not dirty.value:
            return Ok(None)

    status = repo.status()
    if isinstance(status, Err):
        return status
    return Ok(status.value)
