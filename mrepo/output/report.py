"""Rendering of registry listings and batch reports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mrepo.core.errors import CommandFailed
from mrepo.output.errors import describe_error

if TYPE_CHECKING:
    from mrepo.git.batch import BatchReport, TaskOutcome
    from mrepo.git.registry import Registry
    from mrepo.output.console import ConsoleProtocol

__all__ = ["format_block", "print_block", "print_registry", "print_summary"]


def format_block(outcome: TaskOutcome) -> str:
    """One repository's output as a single labelled block.

    Returns an empty string for a skipped task (nothing to show).
    """
    if outcome.skipped:
        return ""

    if outcome.error is None:
        label = f"==> {outcome.key}\n"
        result = outcome.output
    else:
        label = f"==> {outcome.key} [failed: {describe_error(outcome.error)}]\n"
        result = outcome.error.result if isinstance(outcome.error, CommandFailed) else None

    parts = [label]
    if result is not None:
        for text in (result.stdout_text, result.stderr_text):
            if text:
                parts.append(text if text.endswith("\n") else text + "\n")
    return "".join(parts)


def print_block(outcome: TaskOutcome, console: ConsoleProtocol) -> None:
    """Emit a task's block in one write."""
    block = format_block(outcome)
    if block:
        console.raw(block)


def print_summary(report: BatchReport, console: ConsoleProtocol) -> None:
    """Aggregate failure report printed after every task has finished."""
    failures = report.failures
    if not failures:
        return
    console.newline()
    console.error(f"{len(failures)} of {len(report.outcomes)} repositories failed:")
    for outcome in failures:
        if outcome.error is None:
            continue
        console.print(f"  {describe_error(outcome.error)}")


def print_registry(registry: Registry, console: ConsoleProtocol) -> None:
    rows = [[d.key, d.path, d.remote, d.branch] for _, d in registry.list()]
    if not rows:
        console.info("no repositories tracked")
        return
    console.table(["key", "path", "remote", "branch"], rows)
