"""Typed settings loading.

Settings live in an optional TOML file (``~/.config/mrepo/config.toml``,
overridable with ``MREPO_SETTINGS``):

    registry = "~/.mrepo.json"
    default_branch = "main"
    max_workers = 8

    [github]
    api_url = "https://api.github.com"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_table

__all__ = [
    "DEFAULT_GITHUB_API",
    "DEFAULT_REGISTRY_NAME",
    "REGISTRY_ENV",
    "SETTINGS_ENV",
    "GithubSettings",
    "Settings",
    "default_settings_path",
    "load_settings",
    "resolve_registry_path",
]

DEFAULT_REGISTRY_NAME = ".mrepo.json"
DEFAULT_GITHUB_API = "https://api.github.com"

REGISTRY_ENV = "MREPO_CONFIG"
SETTINGS_ENV = "MREPO_SETTINGS"


@dataclass(frozen=True, slots=True)
class GithubSettings:
    api_url: str = DEFAULT_GITHUB_API


@dataclass(frozen=True, slots=True)
class Settings:
    """User settings.

    Attributes:
        registry: Registry file path, None for the default
        default_branch: Branch tracked when ``track`` is given none
        max_workers: Cap on concurrent batch tasks, None for unbounded
        github: GitHub API settings for ``mrepo org``
    """

    registry: str | None = None
    default_branch: str = "master"
    max_workers: int | None = None
    github: GithubSettings = field(default_factory=GithubSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Settings:
        github: StrDict = get_table(data, "github") or {}
        max_workers = get_int(data, "max_workers")
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        return cls(
            registry=get_str(data, "registry"),
            default_branch=get_str(data, "default_branch") or "master",
            max_workers=max_workers,
            github=GithubSettings(api_url=get_str(github, "api_url") or DEFAULT_GITHUB_API),
        )


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "mrepo" / "config.toml"


def load_settings(path: Path | None = None) -> Result[Settings, ConfigError]:
    """Load settings; a missing file yields the defaults."""
    import tomllib

    path = path or default_settings_path()
    if not path.exists():
        return Ok(Settings())

    try:
        data = as_str_dict(tomllib.loads(path.read_text(encoding="utf-8")))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=str(path)))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=str(path)))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading settings: {e}", path=str(path)))

    if data is None:
        return Err(ConfigError("Settings root must be a TOML table", path=str(path)))

    try:
        return Ok(Settings.from_dict(data))
    except ValueError as e:
        return Err(ConfigError(f"Invalid settings: {e}", path=str(path)))


def resolve_registry_path(settings: Settings) -> Path:
    """Registry file: MREPO_CONFIG (also set by --config) > settings > ~/.mrepo.json."""
    env = os.environ.get(REGISTRY_ENV)
    if env:
        return Path(env).expanduser()
    if settings.registry:
        return Path(settings.registry).expanduser()
    return Path.home() / DEFAULT_REGISTRY_NAME
