"""Tracked-repository descriptors and their normalizing builder.

A ``RepoDescriptor`` is only ever produced by ``build_descriptor`` (or read
back from the registry file). The builder resolves the real working-copy
root, fills in defaults, and never touches the registry; callers decide
what to do with a duplicate.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from mrepo.core.errors import BuildError, InvalidKey, IoFailure, NoRemotes
from mrepo.core.result import Err, Ok, Result
from mrepo.core.structured import get_raw_str
from mrepo.git.repository import GitRepository
from mrepo.platform.process import run_command

__all__ = [
    "DEFAULT_BRANCH",
    "DescriptorOptions",
    "RepoDescriptor",
    "build_descriptor",
    "clone_repository",
    "default_clone_dest",
    "is_same_repository",
]

DEFAULT_BRANCH = "master"


@dataclass(frozen=True, slots=True)
class RepoDescriptor:
    """Identity and sync target of one tracked repository.

    Attributes:
        key: Unique, user-chosen name
        path: Absolute path of the working-copy root
        remote: Remote to sync with
        branch: Branch to keep up to date
    """

    key: str
    path: str
    remote: str
    branch: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "path": self.path, "remote": self.remote, "branch": self.branch}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> RepoDescriptor | None:
        """Rebuild a descriptor from its serialized form, None if a field is missing."""
        key = get_raw_str(data, "key")
        path = get_raw_str(data, "path")
        remote = get_raw_str(data, "remote")
        branch = get_raw_str(data, "branch")
        if key is None or path is None or remote is None or branch is None:
            return None
        return cls(key=key, path=path, remote=remote, branch=branch)


def is_same_repository(a: RepoDescriptor, b: RepoDescriptor) -> bool:
    """Two descriptors name the same repository if their key OR their path matches."""
    return a.key == b.key or a.path == b.path


@dataclass(frozen=True, slots=True)
class DescriptorOptions:
    """Caller input for ``build_descriptor``; unset fields get defaults."""

    path: Path
    key: str | None = None
    remote: str | None = None
    branch: str | None = None


def build_descriptor(
    options: DescriptorOptions,
    *,
    default_branch: str = DEFAULT_BRANCH,
) -> Result[RepoDescriptor, BuildError]:
    """Build a descriptor for the working copy enclosing ``options.path``.

    - path is the discovered root, not the given path
    - key defaults to the root's directory name and must not be blank
    - remote defaults to the first configured remote (NoRemotes if none)
    - branch defaults to ``default_branch``; a given branch is kept as is
    """
    discovered = GitRepository.discover(options.path.expanduser().resolve(), key=options.key or "")
    if isinstance(discovered, Err):
        return discovered
    repo = discovered.value

    key = options.key or repo.root.name
    if not key.strip():
        return Err(InvalidKey(key=key))

    remote = options.remote
    if not remote:
        match repo.remotes():
            case Err() as err:
                return err
            case Ok(names):
                if not names:
                    return Err(NoRemotes(path=str(repo.root)))
                remote = names[0]

    branch = options.branch or default_branch
    return Ok(RepoDescriptor(key=key, path=str(repo.root), remote=remote, branch=branch))


def clone_repository(
    url: str,
    dest: Path,
    *,
    key: str | None = None,
    branch: str | None = None,
    default_branch: str = DEFAULT_BRANCH,
) -> Result[RepoDescriptor, BuildError]:
    """Clone ``url`` into ``dest`` and build a descriptor for the new copy."""
    dest = dest.expanduser().resolve()
    if dest.exists() and any(dest.iterdir()):
        return Err(IoFailure(message="destination exists and is not empty", path=str(dest)))
    dest.parent.mkdir(parents=True, exist_ok=True)

    cmd = ["git", "clone"]
    if branch:
        cmd.extend(["--branch", branch])
    cmd.extend([url, str(dest)])

    cloned = run_command(cmd, cwd=dest.parent, key=key or dest.name)
    if isinstance(cloned, Err):
        return cloned

    return build_descriptor(
        DescriptorOptions(path=dest, key=key, branch=branch),
        default_branch=default_branch,
    )


def default_clone_dest(url: str, parent: Path) -> Path:
    """Directory git itself would clone ``url`` into."""
    name = url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return parent / (name or "repo")

