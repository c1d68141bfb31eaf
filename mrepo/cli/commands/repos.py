"""Registry commands: list, track, untrack, clone."""

from __future__ import annotations

from pathlib import Path

import typer

from mrepo.cli.context import CLIContext, build_context
from mrepo.core.errors import BuildError, DuplicateRepo, ErrorCode, InvalidKey
from mrepo.core.result import Err, Ok, Result
from mrepo.git.descriptor import (
    DescriptorOptions,
    RepoDescriptor,
    build_descriptor,
    clone_repository,
    default_clone_dest,
)
from mrepo.output.errors import error_exit_code, print_error
from mrepo.output.report import print_registry


def list_repos() -> None:
    """List tracked repositories."""
    ctx = build_context()
    print_registry(ctx.registry, ctx.console)


def track(
    path: Path = typer.Argument(
        Path("."),
        help="Repository path; any subdirectory of a working copy works.",
    ),
    key: str | None = typer.Option(
        None, "--key", "-k", help="Unique key (defaults to the root directory name)."
    ),
    remote: str | None = typer.Option(
        None, "--remote", "-r", help="Remote to sync with (defaults to the first remote)."
    ),
    branch: str | None = typer.Option(
        None, "--branch", "-b", help="Branch to track (defaults to the configured default)."
    ),
) -> None:
    """Track an existing repository."""
    ctx = build_context()
    built = build_descriptor(
        DescriptorOptions(path=path, key=key, remote=remote, branch=branch),
        default_branch=ctx.settings.default_branch,
    )
    _register(ctx, built)


def untrack(key: str = typer.Argument(..., help="Key of the repository to untrack.")) -> None:
    """Stop tracking a repository."""
    ctx = build_context()
    if not ctx.registry.remove(key):
        ctx.console.error(f"no repository tracked under '{key}'")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    ctx.save()
    ctx.console.success(f"untracked {key}")


def clone(
    url: str = typer.Argument(..., help="Clone URL."),
    dest: Path | None = typer.Argument(None, help="Destination directory."),
    key: str | None = typer.Option(None, "--key", "-k", help="Unique key."),
    branch: str | None = typer.Option(None, "--branch", "-b", help="Branch to track."),
) -> None:
    """Clone a repository and start tracking it."""
    ctx = build_context()
    target = dest or default_clone_dest(url, Path.cwd())

    if key is not None and not key.strip():
        invalid = InvalidKey(key=key)
        print_error(invalid, ctx.console)
        raise typer.Exit(code=error_exit_code(invalid))

    candidate_key = key or target.name
    existing = ctx.registry.get(candidate_key)
    if existing is not None:
        error = DuplicateRepo(key=candidate_key, path=existing.path)
        print_error(error, ctx.console)
        raise typer.Exit(code=error_exit_code(error))

    ctx.console.print(f"cloning {url} -> {target}")
    built = clone_repository(
        url,
        target,
        key=key,
        branch=branch,
        default_branch=ctx.settings.default_branch,
    )
    _register(ctx, built)


def _register(ctx: CLIContext, built: Result[RepoDescriptor, BuildError]) -> None:
    match built:
        case Err(error):
            print_error(error, ctx.console)
            raise typer.Exit(code=error_exit_code(error))
        case Ok(descriptor):
            if ctx.registry.contains(descriptor):
                duplicate = DuplicateRepo(key=descriptor.key, path=descriptor.path)
                print_error(duplicate, ctx.console)
                raise typer.Exit(code=error_exit_code(duplicate))
            ctx.registry.add(descriptor)
            ctx.save()
            ctx.console.success(
                f"tracking {descriptor.key} ({descriptor.remote}/{descriptor.branch})"
                f" at {descriptor.path}"
            )
