"""Tests for mrepo.output.console module."""

from __future__ import annotations

import pytest

from mrepo.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestMockConsole:
    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("broken")
        console.info("note")

        assert console.messages == ["OK done", "error: broken", "info: note"]
        assert console.has_error()

    def test_debug_only_when_verbose(self) -> None:
        quiet = MockConsole()
        loud = MockConsole(verbose=True)

        quiet.debug("hidden")
        loud.debug("shown")

        assert quiet.outputs == []
        assert loud.count(Style.DIM) == 1

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.newline()


class TestRichConsole:
    def test_raw_is_written_verbatim(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()

        console.raw("==> a\n[bold]not markup[/bold]\n")

        assert capsys.readouterr().out == "==> a\n[bold]not markup[/bold]\n"

    def test_error_text_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().error("bad [value]")

        assert "error: bad [value]" in capsys.readouterr().out

    def test_debug_hidden_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().debug("hidden")
        RichConsole(verbose=True).debug("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out
