"""Tests for the update state machine and status operation."""

from __future__ import annotations

from pathlib import Path

import pytest

from mrepo.core.errors import BranchUnknown, CommandFailed, OperationsInProgress, RepoDirty
from mrepo.core.result import Err, Ok
from mrepo.git.descriptor import RepoDescriptor
from mrepo.git.repository import GitRepository
from mrepo.git.update import UpdateStep, status_repo, update_repo
from mrepo.test.git.fakegit import FakeGit, FakeRepo


def _setup(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, *, target: str = "main", **kwargs: object
) -> tuple[FakeRepo, GitRepository, RepoDescriptor]:
    git = FakeGit().install(monkeypatch)
    fake = git.add(tmp_path / "repo", **kwargs)
    descriptor = RepoDescriptor(key="repo", path=str(fake.root), remote="origin", branch=target)
    return fake, GitRepository(fake.root, key="repo"), descriptor


class TestUpdateRepo:
    def test_same_branch_clean_only_rebases(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, descriptor = _setup(tmp_path, monkeypatch)

        result = update_repo(repo, descriptor, allow_stash=False)

        assert isinstance(result, Ok)
        assert fake.mutating_calls == [("pull", "--rebase")]
        assert result.value.output.stdout == fake.rebase_output
        assert result.value.steps == (
            UpdateStep.VALIDATE,
            UpdateStep.CHECK_DIRTY,
            UpdateStep.DETERMINE_BRANCH,
            UpdateStep.REBASE,
        )

    def test_switches_and_restores_branch(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, descriptor = _setup(tmp_path, monkeypatch, branch="feature")

        result = update_repo(repo, descriptor, allow_stash=False)

        assert isinstance(result, Ok)
        assert result.value.original_branch == "feature"
        assert fake.mutating_calls == [
            ("checkout", "main"),
            ("pull", "--rebase"),
            ("checkout", "feature"),
        ]
        assert fake.branch == "feature"

    def test_dirty_without_stash_does_nothing(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, descriptor = _setup(tmp_path, monkeypatch, dirty=True, branch="feature")

        result = update_repo(repo, descriptor, allow_stash=False)

        assert result == Err(RepoDirty(key="repo"))
        assert fake.mutating_calls == []
        assert fake.calls[-1] == ("diff", "--name-only")

    def test_dirty_with_stash_full_sequence(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, descriptor = _setup(tmp_path, monkeypatch, dirty=True, branch="feature")

        result = update_repo(repo, descriptor, allow_stash=True)

        assert isinstance(result, Ok)
        assert result.value.stashed is True
        assert fake.mutating_calls == [
            ("stash",),
            ("checkout", "main"),
            ("pull", "--rebase"),
            ("checkout", "feature"),
            ("stash", "pop"),
        ]
        assert [s for s in result.value.steps if s.restoring] == [
            UpdateStep.RESTORE_BRANCH,
            UpdateStep.UNSTASH,
        ]

    def test_operation_in_progress_is_hard_stop(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, descriptor = _setup(tmp_path, monkeypatch, dirty=True)
        fake.start("MERGE_HEAD")

        result = update_repo(repo, descriptor, allow_stash=True)

        assert result == Err(OperationsInProgress(key="repo", operation="merge"))
        assert fake.calls == [("rev-parse", "--absolute-git-dir")]

    def test_detached_head(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        fake, repo, descriptor = _setup(tmp_path, monkeypatch, branch=None)

        result = update_repo(repo, descriptor, allow_stash=False)

        assert result == Err(BranchUnknown(key="repo"))
        assert fake.mutating_calls == []

    def test_rebase_failure_leaves_target_branch_and_stash(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, descriptor = _setup(
            tmp_path, monkeypatch, dirty=True, branch="feature", failing={("pull",)}
        )

        result = update_repo(repo, descriptor, allow_stash=True)

        assert isinstance(result, Err)
        assert isinstance(result.error, CommandFailed)
        assert result.error.key == "repo"
        assert result.error.command == ("git", "pull", "--rebase")
        assert fake.mutating_calls == [("stash",), ("checkout", "main"), ("pull", "--rebase")]
        assert fake.branch == "main"

    def test_checkout_failure_stops_before_rebase(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, descriptor = _setup(
            tmp_path, monkeypatch, branch="feature", failing={("checkout",)}
        )

        result = update_repo(repo, descriptor, allow_stash=False)

        assert isinstance(result, Err)
        assert fake.mutating_calls == [("checkout", "main")]


class TestStatusRepo:
    def test_clean_and_dirty_only_is_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, _ = _setup(tmp_path, monkeypatch)

        assert status_repo(repo, only_if_dirty=True) == Ok(None)
        assert ("status",) not in fake.calls

    def test_dirty_reports_status(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        fake, repo, _ = _setup(tmp_path, monkeypatch, dirty=True)

        result = status_repo(repo, only_if_dirty=True)

        assert isinstance(result, Ok)
        assert result.value is not None
        assert result.value.stdout == fake.status_output

    def test_always_reports_without_filter(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake, repo, _ = _setup(tmp_path, monkeypatch)

        result = status_repo(repo, only_if_dirty=False)

        assert isinstance(result, Ok)
        assert result.value is not None
        assert ("diff", "--name-only") not in fake.calls
