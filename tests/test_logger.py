"""Tests for terminal output helpers."""
from __future__ import annotations

from baselinegate.utils.logger import create_panel, create_table, print_error, print_success, severity_style


class TestPrintHelpers:
    def test_errors_go_to_stderr(self, capsys) -> None:
        print_error("boom")
        captured = capsys.readouterr()
        assert "boom" in captured.err and "boom" not in captured.out

    def test_success_goes_to_stdout(self, capsys) -> None:
        print_success("done")
        assert "done" in capsys.readouterr().out


class TestRenderables:
    def test_table_accepts_non_string_cells(self) -> None:
        table = create_table("Yearly rules", [("Year", "bold"), ("Level", "")], [[2022, "error"], [2023, "warn"]])
        assert table.row_count == 2 and len(table.columns) == 2

    def test_panel_renders_markup(self) -> None:
        panel = create_panel("[bold]Mode:[/bold] yearly", title="Enforcement")
        assert panel.renderable.plain == "Mode: yearly"

    def test_severity_style(self) -> None:
        assert severity_style("high") == "sev.high" and severity_style("off") == "white"
