"""Tests for mrepo.platform.process."""

from __future__ import annotations

import sys
from pathlib import Path

from mrepo.core.errors import CommandFailed, IoFailure
from mrepo.core.result import Err, Ok
from mrepo.platform.process import ExecutionResult, run_command


class TestRunCommand:
    def test_echo_captures_stdout(self, tmp_path: Path) -> None:
        result = run_command(["echo", "hello"], cwd=tmp_path, key="a")

        assert isinstance(result, Ok)
        assert result.value.stdout == b"hello\n"
        assert result.value.stderr == b""
        assert result.value.exit_code == 0
        assert result.value.command == ("echo", "hello")

    def test_nonzero_exit_carries_output(self, tmp_path: Path) -> None:
        result = run_command(
            [sys.executable, "-c", "import sys; print('out'); sys.stderr.write('bad'); sys.exit(3)"],
            cwd=tmp_path,
            key="b",
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, CommandFailed)
        assert result.error.key == "b"
        assert result.error.result.exit_code == 3
        assert result.error.result.stdout_text.strip() == "out"
        assert result.error.result.stderr == b"bad"

    def test_missing_program_is_io_failure(self, tmp_path: Path) -> None:
        result = run_command(["nonexistent_command_12345"], cwd=tmp_path, key="c")

        assert isinstance(result, Err)
        assert isinstance(result.error, IoFailure)
        assert result.error.key == "c"

    def test_runs_in_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "marker.txt").write_text("x", encoding="utf-8")

        result = run_command(
            [sys.executable, "-c", "import os; print(sorted(os.listdir('.')))"],
            cwd=tmp_path,
            key="d",
        )

        assert isinstance(result, Ok)
        assert "marker.txt" in result.value.stdout_text

    def test_timeout_reports_failure(self, tmp_path: Path) -> None:
        result = run_command(
            [sys.executable, "-c", "import time; time.sleep(5)"],
            cwd=tmp_path,
            key="e",
            timeout=0.2,
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, CommandFailed)
        assert result.error.result.exit_code == -1
        assert "timed out" in result.error.result.stderr_text


def test_execution_result_text_decoding() -> None:
    result = ExecutionResult(exit_code=0, stdout=b"caf\xc3\xa9\n", stderr=b"\xff")
    assert result.ok
    assert result.stdout_text == "café\n"
    assert result.stderr_text == "�"
