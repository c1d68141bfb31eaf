"""Registry of tracked repositories and its JSON file store.

On disk the registry is a single JSON document:

    {"repos": {"<key>": {"key": ..., "path": ..., "remote": ..., "branch": ...}}}

A missing file is an empty registry. The file is rewritten atomically after
every mutation; there is no locking between processes.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

from mrepo.core.errors import ConfigError, IoFailure
from mrepo.core.result import Err, Ok, Result
from mrepo.core.structured import as_str_dict
from mrepo.git.descriptor import RepoDescriptor, is_same_repository
from mrepo.platform.files import atomic_write_text

__all__ = ["Registry", "load_registry", "save_registry"]


class Registry:
    """In-memory mapping of key -> RepoDescriptor.

    ``add`` does not check for duplicates; callers test ``contains`` first so
    the collision can be reported as a ``DuplicateRepo`` error.
    """

    def __init__(self, repos: dict[str, RepoDescriptor] | None = None) -> None:
        self._repos: dict[str, RepoDescriptor] = dict(repos or {})

    def __len__(self) -> int:
        return len(self._repos)

    def __iter__(self) -> Iterator[RepoDescriptor]:
        return (descriptor for _, descriptor in self.list())

    def list(self) -> list[tuple[str, RepoDescriptor]]:
        """Entries sorted by key (code-point order)."""
        return sorted(self._repos.items(), key=lambda item: item[0])

    def keys(self) -> list[str]:
        return [key for key, _ in self.list()]

    def get(self, key: str) -> RepoDescriptor | None:
        return self._repos.get(key)

    def contains(self, candidate: RepoDescriptor) -> bool:
        """True if an entry matches ``candidate`` by key or by path."""
        return any(is_same_repository(existing, candidate) for existing in self._repos.values())

    def add(self, descriptor: RepoDescriptor) -> None:
        self._repos[descriptor.key] = descriptor

    def remove(self, key: str) -> bool:
        return self._repos.pop(key, None) is not None

    def to_dict(self) -> dict[str, object]:
        return {"repos": {key: descriptor.to_dict() for key, descriptor in self.list()}}


def load_registry(path: Path) -> Result[Registry, ConfigError]:
    """Read the registry file; a missing file yields an empty registry."""
    if not path.exists():
        return Ok(Registry())

    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=str(path)))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Invalid registry JSON: {e}", path=str(path)))
    except OSError as e:
        return Err(ConfigError(f"Error reading registry: {e}", path=str(path)))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Registry root must be a JSON object", path=str(path)))

    repos_obj = data.get("repos", {})
    repos = as_str_dict(repos_obj)
    if repos is None:
        return Err(
            ConfigError(f"'repos' must be an object, got {type(repos_obj).__name__}", str(path))
        )

    entries: dict[str, RepoDescriptor] = {}
    for key, entry_obj in repos.items():
        entry = as_str_dict(entry_obj)
        descriptor = RepoDescriptor.from_dict(entry) if entry is not None else None
        if descriptor is None:
            return Err(ConfigError(f"Invalid registry entry: {key!r}", path=str(path)))
        if descriptor.key != key:
            return Err(
                ConfigError(
                    f"Registry entry {key!r} has mismatched key {descriptor.key!r}",
                    path=str(path),
                )
            )
        entries[key] = descriptor

    return Ok(Registry(entries))


def save_registry(registry: Registry, path: Path) -> Result[None, IoFailure]:
    """Write the whole registry to ``path`` atomically."""
    content = json.dumps(registry.to_dict(), indent=2) + "\n"
    try:
        atomic_write_text(path, content)
    except OSError as e:
        return Err(IoFailure(message=f"Error writing registry: {e}", path=str(path)))
    return Ok(None)
