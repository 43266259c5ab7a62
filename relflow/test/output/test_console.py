"""Tests for relflow.output.console."""

from __future__ import annotations

import pytest

from relflow.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestMockConsole:
    def test_records_prefixed_messages(self) -> None:
        console = MockConsole()
        console.success("done")
        console.warning("careful")
        console.info("note")
        console.error("broken")
        console.header("[1/2] SwitchBranches")
        console.print("plain", Style.DIM)

        assert console.messages == [
            "OK done",
            "warning: careful",
            "info: note",
            "error: broken",
            "[1/2] SwitchBranches",
            "plain",
        ]
        assert console.outputs[-1].style is Style.DIM

    def test_has_error(self) -> None:
        console = MockConsole()
        console.info("fine")
        assert console.has_error() is False
        console.print("bad", Style.ERROR)
        assert console.has_error() is True

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.success("selected PROJ-1: Title")
        console.info("other")
        assert len(console.find("PROJ-1")) == 1
        assert console.text == "OK selected PROJ-1: Title\ninfo: other"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.print("x")


class TestRichConsole:
    def test_markup_is_not_interpreted(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Issue titles can contain square brackets."""
        console = RichConsole()
        console.print("[bold]literal[/bold]")
        console.success("selected 42: [WIP] crash")
        out = capsys.readouterr().out
        assert "[bold]literal[/bold]" in out
        assert "OK selected 42: [WIP] crash" in out

    def test_header(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().header("[1/3] BumpVersion")
        assert "[1/3] BumpVersion" in capsys.readouterr().out

    def test_style_str(self) -> None:
        assert str(Style.SUCCESS) == "success"
