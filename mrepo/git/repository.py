"""Live binding between a tracked repository and its working copy.

A ``GitRepository`` is opened per operation and thrown away afterwards; it is
never stored in the registry. All version-control work goes through the
``git`` binary via ``run_command``.

Usage:
    match GitRepository.discover(Path.cwd()):
        case Ok(repo):
            print(repo.root, repo.current_branch())
        case Err(error):
            print(error)
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from mrepo.core.errors import CommandFailed, IoFailure, NoRepo
from mrepo.core.result import Err, Ok, Result
from mrepo.platform.process import ExecutionResult, run_command

if TYPE_CHECKING:
    from mrepo.git.descriptor import RepoDescriptor

__all__ = ["GitRepository", "GitResult", "IN_PROGRESS_MARKERS"]

type GitResult[T] = Result[T, CommandFailed | IoFailure]

# Files or directories inside the git dir that mark an unfinished operation,
# checked in order.
IN_PROGRESS_MARKERS: tuple[tuple[str, str], ...] = (
    ("rebase-merge", "rebase"),
    ("rebase-apply/applying", "am"),
    ("rebase-apply", "rebase"),
    ("MERGE_HEAD", "merge"),
    ("CHERRY_PICK_HEAD", "cherry-pick"),
    ("REVERT_HEAD", "revert"),
    ("BISECT_LOG", "bisect"),
)


class GitRepository:
    """Git working copy addressed by its root directory.

    Attributes:
        root: Working-copy root (the directory containing ``.git``)
        key: Registry key, used to attribute errors
    """

    def __init__(self, root: Path, key: str = "") -> None:
        self.root = root
        self.key = key or root.name

    @classmethod
    def discover(cls, path: Path, key: str = "") -> Result[GitRepository, NoRepo | IoFailure]:
        """Find the working-copy root at or above ``path``.

        Fails with NoRepo when there is no enclosing working copy, when it is
        bare, or when it has no commits yet.
        """
        if not path.is_dir():
            return Err(NoRepo(path=str(path), reason="directory does not exist"))

        toplevel = run_command(["git", "rev-parse", "--show-toplevel"], cwd=path, key=key)
        match toplevel:
            case Err(IoFailure() as failure):
                return Err(failure)
            case Err(CommandFailed(result=result)):
                reason = result.stderr_text.strip() or "not a git working copy"
                return Err(NoRepo(path=str(path), reason=reason))
            case Ok(execution):
                root_str = execution.stdout_text.strip()

        if not root_str:
            return Err(NoRepo(path=str(path), reason="repository has no working directory"))

        repo = cls(Path(root_str).resolve(), key=key)
        head = repo._git(["rev-parse", "--verify", "--quiet", "HEAD"])
        match head:
            case Err(IoFailure() as failure):
                return Err(failure)
            case Err(CommandFailed()):
                return Err(NoRepo(path=str(repo.root), reason="repository has no commits"))
            case Ok(_):
                return Ok(repo)

    @classmethod
    def open(cls, descriptor: RepoDescriptor) -> Result[GitRepository, NoRepo | IoFailure]:
        """Open the working copy a descriptor points at."""
        return cls.discover(Path(descriptor.path), key=descriptor.key)

    # -- queries --------------------------------------------------------------

    def git_dir(self) -> GitResult[Path]:
        match self._git(["rev-parse", "--absolute-git-dir"]):
            case Err() as err:
                return err
            case Ok(execution):
                return Ok(Path(execution.stdout_text.strip()))

    def operation_in_progress(self) -> GitResult[str | None]:
        """Name of the unfinished operation, or None when the repository is clean."""
        match self.git_dir():
            case Err() as err:
                return err
            case Ok(git_dir):
                for marker, operation in IN_PROGRESS_MARKERS:
                    if (git_dir / marker).exists():
                        return Ok(operation)
                return Ok(None)

    def is_dirty(self) -> GitResult[bool]:
        """True if the working tree differs from the index.

        Untracked files do not make a repository dirty.
        """
        match self._git(["diff", "--name-only"]):
            case Err() as err:
                return err
            case Ok(execution):
                return Ok(bool(execution.stdout.strip()))

    def current_branch(self) -> GitResult[str | None]:
        """Checked-out branch name, None on a detached HEAD."""
        match self._git(["rev-parse", "--abbrev-ref", "HEAD"]):
            case Err() as err:
                return err
            case Ok(execution):
                branch = execution.stdout_text.strip()
                return Ok(None if branch in ("", "HEAD") else branch)

    def remotes(self) -> GitResult[list[str]]:
        """Configured remotes in the order git lists them."""
        match self._git(["remote"]):
            case Err() as err:
                return err
            case Ok(execution):
                return Ok([ln.strip() for ln in execution.stdout_text.splitlines() if ln.strip()])

    # -- commands -------------------------------------------------------------

    def stash(self) -> GitResult[ExecutionResult]:
        return self._git(["stash"])

    def stash_pop(self) -> GitResult[ExecutionResult]:
        return self._git(["stash", "pop"])

    def checkout(self, branch: str) -> GitResult[ExecutionResult]:
        return self._git(["checkout", branch])

    def pull_rebase(self) -> GitResult[ExecutionResult]:
        return self._git(["pull", "--rebase"])

    def status(self) -> GitResult[ExecutionResult]:
        return self._git(["status"])

    def run(self, program: str, args: list[str]) -> GitResult[ExecutionResult]:
        """Run an arbitrary program with the working-copy root as cwd."""
        return run_command([program, *args], cwd=self.root, key=self.key)

    def _git(self, args: list[str]) -> GitResult[ExecutionResult]:
        return run_command(["git", *args], cwd=self.root, key=self.key)
