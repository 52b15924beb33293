"""Tests for scopepub.output.console module."""

from __future__ import annotations

import pytest

from scopepub.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.ERROR) == "error"
        assert str(Style.DEFAULT) == "default"


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs == [OutputRecord("hello", Style.DEFAULT)]

    def test_glyphs(self) -> None:
        console = MockConsole()
        console.success("@sownt/a@1.0.0")
        console.warning("Skipping private package: @usewaypoint/b")
        console.error("Failed to publish @sownt/c@1.0.0")
        console.info("Building all packages...")
        assert console.messages == [
            "✔ @sownt/a@1.0.0",
            "⚠ Skipping private package: @usewaypoint/b",
            "✘ Failed to publish @sownt/c@1.0.0",
            "[publish] Building all packages...",
        ]

    def test_style_flags(self) -> None:
        console = MockConsole()
        assert not console.has_error()
        console.error("x")
        console.warning("y")
        console.success("z")
        assert console.has_error() and console.has_warning()
        assert console.count(Style.ERROR) == 1
        assert console.count(Style.SUCCESS) == 1

    def test_find_and_clear(self) -> None:
        console = MockConsole()
        console.header("Summary")
        console.newline()
        assert console.find("Summary")[0].style == Style.HEADER
        assert console.text == "Summary\n"
        console.clear()
        assert console.outputs == []

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.info("ok")


class TestRichConsole:
    def test_markup_in_messages_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.info("Publishing [bold]@sownt/a[/bold]")
        out = capsys.readouterr().out
        assert "[publish]" in out
        assert "[bold]@sownt/a[/bold]" in out

    def test_plain_print(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().print("      @sownt/a@1.0.0", Style.DIM)
        assert "@sownt/a@1.0.0" in capsys.readouterr().out
