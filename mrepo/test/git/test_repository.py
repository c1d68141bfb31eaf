"""Tests for mrepo.git.repository."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from mrepo.core.errors import NoRepo
from mrepo.core.result import Err, Ok
from mrepo.git.descriptor import RepoDescriptor
from mrepo.git.repository import GitRepository
from mrepo.test.git.fakegit import FakeGit


class TestOperationInProgress:
    @pytest.mark.parametrize(
        ("marker", "operation"),
        [
            ("MERGE_HEAD", "merge"),
            ("rebase-merge", "rebase"),
            ("rebase-apply", "rebase"),
            ("CHERRY_PICK_HEAD", "cherry-pick"),
            ("REVERT_HEAD", "revert"),
            ("BISECT_LOG", "bisect"),
        ],
    )
    def test_detects_marker(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, marker: str, operation: str
    ) -> None:
        git = FakeGit().install(monkeypatch)
        fake = git.add(tmp_path / "repo")
        fake.start(marker)

        repo = GitRepository(fake.root, key="repo")

        assert repo.operation_in_progress() == Ok(operation)

    def test_clean(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        git = FakeGit().install(monkeypatch)
        fake = git.add(tmp_path / "repo")

        assert GitRepository(fake.root).operation_in_progress() == Ok(None)


class TestQueries:
    def test_detached_head_has_no_branch(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        git = FakeGit().install(monkeypatch)
        fake = git.add(tmp_path / "repo", branch=None)

        assert GitRepository(fake.root).current_branch() == Ok(None)

    def test_remotes_in_listed_order(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        git = FakeGit().install(monkeypatch)
        fake = git.add(tmp_path / "repo", remotes=["origin", "fork"])

        assert GitRepository(fake.root).remotes() == Ok(["origin", "fork"])

    def test_open_attaches_key(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        git = FakeGit().install(monkeypatch)
        fake = git.add(tmp_path / "repo")
        descriptor = RepoDescriptor(key="k", path=str(fake.root), remote="origin", branch="main")

        repo = GitRepository.open(descriptor).unwrap()

        assert repo.key == "k"
        assert repo.root == fake.root

    def test_open_missing_path(self, tmp_path: Path) -> None:
        descriptor = RepoDescriptor(
            key="gone", path=str(tmp_path / "gone"), remote="origin", branch="main"
        )

        result = GitRepository.open(descriptor)

        assert isinstance(result, Err)
        assert isinstance(result.error, NoRepo)


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=True)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not available")
class TestWithRealGit:
    @pytest.fixture
    def repo(self, tmp_path: Path) -> GitRepository:
        root = tmp_path / "repo"
        root.mkdir()
        _git(root, "init", "-b", "main")
        _git(root, "config", "user.email", "test@example.com")
        _git(root, "config", "user.name", "Test")
        (root / "tracked.txt").write_text("v1\n", encoding="utf-8")
        _git(root, "add", "tracked.txt")
        _git(root, "commit", "-m", "init")
        return GitRepository.discover(root).unwrap()

    def test_clean_repository(self, repo: GitRepository) -> None:
        assert repo.is_dirty() == Ok(False)
        assert repo.current_branch() == Ok("main")
        assert repo.operation_in_progress() == Ok(None)
        assert repo.remotes() == Ok([])

    def test_untracked_file_is_not_dirty(self, repo: GitRepository) -> None:
        (repo.root / "new.txt").write_text("x\n", encoding="utf-8")
        assert repo.is_dirty() == Ok(False)

    def test_modified_file_is_dirty(self, repo: GitRepository) -> None:
        (repo.root / "tracked.txt").write_text("v2\n", encoding="utf-8")
        assert repo.is_dirty() == Ok(True)

    def test_detached_head(self, repo: GitRepository) -> None:
        _git(repo.root, "checkout", "--detach")
        assert repo.current_branch() == Ok(None)

    def test_stash_round_trip(self, repo: GitRepository) -> None:
        (repo.root / "tracked.txt").write_text("v2\n", encoding="utf-8")

        assert isinstance(repo.stash(), Ok)
        assert repo.is_dirty() == Ok(False)
        assert isinstance(repo.stash_pop(), Ok)
        assert (repo.root / "tracked.txt").read_text(encoding="utf-8") == "v2\n"
