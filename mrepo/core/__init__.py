"""Core types: results, errors, settings."""

from .config import Settings, load_settings, resolve_registry_path
from .errors import (
    BranchUnknown,
    BuildError,
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
    RepoError,
)
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "Settings",
    "load_settings",
    "resolve_registry_path",
    # errors
    "BranchUnknown",
    "BuildError",
    "CommandFailed",
    "ConfigError",
    "DuplicateRepo",
    "ErrorCode",
    "InvalidKey",
    "IoFailure",
    "NoRemotes",
    "NoRepo",
    "OperationsInProgress",
    "RepoDirty",
    "RepoError",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
