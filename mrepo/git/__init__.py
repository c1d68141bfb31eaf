"""Git operations module.

- GitRepository: one working copy, opened per operation
- RepoDescriptor / build_descriptor: tracked-repository identity
- Registry: the set of tracked repositories
- update_repo / status_repo: per-repository operations
- run_batch: fan an operation out over the whole registry

Usage:
    from mrepo.git import Registry, Update, load_registry, run_batch
"""

from mrepo.git.batch import (
    BatchOperation,
    BatchOptions,
    BatchReport,
    RunCommand,
    Status,
    TaskOutcome,
    Update,
    run_batch,
)
from mrepo.git.descriptor import (
    DEFAULT_BRANCH,
    DescriptorOptions,
    RepoDescriptor,
    build_descriptor,
    clone_repository,
    default_clone_dest,
    is_same_repository,
)
from mrepo.git.registry import Registry, load_registry, save_registry
from mrepo.git.repository import GitRepository
from mrepo.git.update import UpdateOutcome, UpdateStep, status_repo, update_repo

__all__ = [
    # Batch
    "BatchOperation",
    "BatchOptions",
    "BatchReport",
    "RunCommand",
    "Status",
    "TaskOutcome",
    "Update",
    "run_batch",
    # Descriptor
    "DEFAULT_BRANCH",
    "DescriptorOptions",
    "RepoDescriptor",
    "build_descriptor",
    "clone_repository",
    "default_clone_dest",
    "is_same_repository",
    # Registry
    "Registry",
    "load_registry",
    "save_registry",
    # Repository
    "GitRepository",
    # Update
    "UpdateOutcome",
    "UpdateStep",
    "status_repo",
    "update_repo",
]
