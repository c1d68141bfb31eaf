"""Batch commands: update, status, run."""

from __future__ import annotations

import typer

from mrepo.cli.context import CLIContext, build_context
from mrepo.core.errors import ErrorCode
from mrepo.git.batch import (
    BatchOperation,
    BatchOptions,
    RunCommand,
    Status,
    TaskOutcome,
    Update,
    run_batch,
)
from mrepo.output.report import print_block, print_summary


def update(
    stash: bool = typer.Option(
        False,
        "--stash",
        "-s",
        help="Stash uncommitted changes before updating. Without it, dirty repos fail.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show per-task progress."),
) -> None:
    """Pull and rebase every tracked repository."""
    ctx = build_context(verbose=verbose)
    _run(ctx, Update(allow_stash=stash), suppress_failures=False)


def status(
    dirty_only: bool = typer.Option(
        False, "--dirty-only", "-d", help="Only show repositories with uncommitted changes."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show per-task progress."),
) -> None:
    """Show git status for every tracked repository."""
    ctx = build_context(verbose=verbose)
    _run(ctx, Status(only_if_dirty=dirty_only), suppress_failures=False)


def run(
    command: list[str] = typer.Argument(..., help="Program and arguments, after `--`."),
    quiet_failures: bool = typer.Option(
        False,
        "--quiet-failures",
        "-q",
        help="Do not report failures or exit non-zero when a command fails.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show per-task progress."),
) -> None:
    """Run a command in every tracked repository."""
    ctx = build_context(verbose=verbose)
    operation = RunCommand(program=command[0], args=tuple(command[1:]))
    _run(ctx, operation, suppress_failures=quiet_failures)


def _run(ctx: CLIContext, operation: BatchOperation, *, suppress_failures: bool) -> None:
    if len(ctx.registry) == 0:
        ctx.console.info("no repositories tracked")
        return

    for key in ctx.registry.keys():
        ctx.console.debug(f"queue {key}")

    def on_complete(outcome: TaskOutcome) -> None:
        if outcome.steps:
            ctx.console.debug(f"{outcome.key}: {' -> '.join(s.value for s in outcome.steps)}")
        print_block(outcome, ctx.console)

    report = run_batch(
        ctx.registry,
        operation,
        BatchOptions(
            suppress_failure_reporting=suppress_failures,
            max_workers=ctx.settings.max_workers,
        ),
        on_complete=on_complete,
    )

    if report.failed:
        print_summary(report, ctx.console)
        raise typer.Exit(code=int(ErrorCode.BATCH_FAILED))
