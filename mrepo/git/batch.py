"""Batch operations across every tracked repository.

One task per registry entry runs on a thread pool. Tasks share nothing but
the read-only registry snapshot; each returns its own ``TaskOutcome``
through its future, and the outcomes are merged once every task is done.

Usage:
    report = run_batch(registry, Update(allow_stash=True), on_complete=print_block)
    if report.failed:
        raise typer.Exit(code=int(ErrorCode.BATCH_FAILED))
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from mrepo.core.errors import IoFailure, RepoError
from mrepo.core.result import Err, Ok
from mrepo.git.descriptor import RepoDescriptor
from mrepo.git.registry import Registry
from mrepo.git.repository import GitRepository
from mrepo.git.update import UpdateStep, status_repo, update_repo
from mrepo.platform.process import ExecutionResult

__all__ = [
    "BatchOperation",
    "BatchOptions",
    "BatchReport",
    "RunCommand",
    "Status",
    "TaskOutcome",
    "Update",
    "run_batch",
]


@dataclass(frozen=True, slots=True)
class Update:
    allow_stash: bool = False


@dataclass(frozen=True, slots=True)
class Status:
    only_if_dirty: bool = False


@dataclass(frozen=True, slots=True)
class RunCommand:
    program: str
    args: tuple[str, ...] = ()


BatchOperation = Update | Status | RunCommand


@dataclass(frozen=True, slots=True)
class BatchOptions:
    """Batch behaviour.

    Attributes:
        suppress_failure_reporting: Never mark the batch as failed
        max_workers: Thread cap; None runs every repository at once
    """

    suppress_failure_reporting: bool = False
    max_workers: int | None = None


@dataclass(frozen=True, slots=True)
class TaskOutcome:
    """Outcome of one repository's task.

    Attributes:
        key: Repository key
        output: Captured output on success, None when there was nothing to show
        error: Error if the task failed, None on success
        steps: Update steps that ran (update operations only)
    """

    key: str
    output: ExecutionResult | None = None
    error: RepoError | None = None
    steps: tuple[UpdateStep, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def skipped(self) -> bool:
        """Succeeded without producing output (e.g. clean repo in dirty-only status)."""
        return self.error is None and self.output is None


@dataclass(frozen=True, slots=True)
class BatchReport:
    """Aggregate of every task, sorted by key.

    Attributes:
        outcomes: One outcome per tracked repository
        failed: True if any task failed and failures are not suppressed
    """

    outcomes: tuple[TaskOutcome, ...]
    failed: bool = False

    @property
    def failures(self) -> list[TaskOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def successes(self) -> list[TaskOutcome]:
        return [o for o in self.outcomes if o.ok]

    def get(self, key: str) -> TaskOutcome | None:
        return next((o for o in self.outcomes if o.key == key), None)

    def summary(self) -> dict[str, int]:
        """Counts: total, ok, skipped, failed."""
        return {
            "total": len(self.outcomes),
            "ok": sum(1 for o in self.outcomes if o.ok and not o.skipped),
            "skipped": sum(1 for o in self.outcomes if o.skipped),
            "failed": sum(1 for o in self.outcomes if not o.ok),
        }


def run_batch(
    registry: Registry,
    operation: BatchOperation,
    options: BatchOptions | None = None,
    *,
    on_complete: Callable[[TaskOutcome], None] | None = None,
) -> BatchReport:
    """Run ``operation`` against every tracked repository concurrently.

    Tasks are submitted in key order. ``on_complete`` is called on the calling
    thread once per task as it finishes, so each repository's output can be
    emitted as one uninterrupted block; completion order varies between runs.
    No task is cancelled when another fails.
    """
    options = options or BatchOptions()
    entries = [descriptor for _, descriptor in registry.list()]
    if not entries:
        return BatchReport(outcomes=())

    workers = options.max_workers or len(entries)
    outcomes: list[TaskOutcome] = []

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="mrepo") as executor:
        futures = [executor.submit(_run_task, descriptor, operation) for descriptor in entries]
        for future in as_completed(futures):
            outcome = future.result()
            if on_complete is not None:
                on_complete(outcome)
            outcomes.append(outcome)

    ordered = tuple(sorted(outcomes, key=lambda o: o.key))
    any_failed = any(not o.ok for o in ordered)
    return BatchReport(
        outcomes=ordered,
        failed=any_failed and not options.suppress_failure_reporting,
    )


def _run_task(descriptor: RepoDescriptor, operation: BatchOperation) -> TaskOutcome:
    try:
        return _dispatch(descriptor, operation)
    except Exception as e:  # noqa: BLE001
        # Any exception becomes this repository's failure; siblings keep running.
        return TaskOutcome(
            key=descriptor.key,
            error=IoFailure(
                message=f"{type(e).__name__}: {e}",
                path=descriptor.path,
                key=descriptor.key,
            ),
        )


def _dispatch(descriptor: RepoDescriptor, operation: BatchOperation) -> TaskOutcome:
    key = descriptor.key
    opened = GitRepository.open(descriptor)
    if isinstance(opened, Err):
        return TaskOutcome(key=key, error=opened.error)
    repo = opened.value

    match operation:
        case Update(allow_stash=allow_stash):
            match update_repo(repo, descriptor, allow_stash=allow_stash):
                case Ok(update):
                    return TaskOutcome(key=key, output=update.output, steps=update.steps)
                case Err(error):
                    return TaskOutcome(key=key, error=error)
        case Status(only_if_dirty=only_if_dirty):
            match status_repo(repo, only_if_dirty=only_if_dirty):
                case Ok(output):
                    return TaskOutcome(key=key, output=output)
                case Err(error):
                    return TaskOutcome(key=key, error=error)
        case RunCommand(program=program, args=args):
            match repo.run(program, list(args)):
                case Ok(output):
                    return TaskOutcome(key=key, output=output)
                case Err(error):
                    return TaskOutcome(key=key, error=error)
