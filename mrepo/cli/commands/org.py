"""List the repositories of a GitHub organization."""

from __future__ import annotations

import os
from itertools import islice

import typer

from mrepo.core.config import load_settings
from mrepo.core.errors import ErrorCode
from mrepo.core.result import Err
from mrepo.output.console import RichConsole
from mrepo.output.errors import error_exit_code, print_error
from mrepo.remote.github import RemoteRepo, list_org_repos
from mrepo.remote.http import RealHttpClient


def org(
    name: str = typer.Argument(..., help="Organization name."),
    limit: int | None = typer.Option(None, "--limit", help="Stop after N repositories."),
) -> None:
    """List an organization's repositories (uses GITHUB_TOKEN when set)."""
    console = RichConsole()
    settings_result = load_settings()
    if isinstance(settings_result, Err):
        print_error(settings_result.error, console)
        raise typer.Exit(code=error_exit_code(settings_result.error))

    http = RealHttpClient(token=os.environ.get("GITHUB_TOKEN"))
    repos: list[RemoteRepo] = []
    for item in islice(
        list_org_repos(http, name, api_url=settings_result.value.github.api_url), limit
    ):
        if isinstance(item, Err):
            console.error(str(item.error))
            raise typer.Exit(code=int(ErrorCode.NETWORK_ERROR))
        repos.append(item.value)

    if not repos:
        console.info(f"no repositories found for {name}")
        return
    console.table(
        ["id", "name", "full name", "clone url"],
        [[str(r.id), r.name, r.full_name, r.clone_url] for r in repos],
    )
