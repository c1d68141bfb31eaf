from __future__ import annotations

import os
from pathlib import Path

import typer

from mrepo import __version__
from mrepo.cli.commands.batch import run, status, update
from mrepo.cli.commands.org import org
from mrepo.cli.commands.repos import clone, list_repos, track, untrack
from mrepo.core.config import REGISTRY_ENV

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Manage multiple git repositories.",
)


# Registry
app.command("list")(list_repos)
app.command()(track)
app.command()(untrack)
app.command()(clone)

# Batch
app.command()(update)
app.command("pull", hidden=True)(update)
app.command()(status)
app.command()(run)

# Remote
app.command()(org)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Registry file (default: ~/.mrepo.json).",
    ),
) -> None:
    if config is not None:
        os.environ[REGISTRY_ENV] = str(config.expanduser())


def main() -> None:
    app()
