import importlib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from notecell.cli.render import Renderer, html_to_text

cli_app_module = importlib.import_module("notecell.cli.app")


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_app_module, "configure_logging", lambda **_kwargs: None)


def _script(tmp_path: Path, source: str) -> Path:
    path = tmp_path / "cells.py"
    path.write_text(source, encoding="utf-8")
    return path


def test_split_cells_on_percent_markers() -> None:
    source = "x = 1\n# %%\nprint(x)\n#%% second\n\n"
    assert cli_app_module.split_cells(source) == ["x = 1\n", "\nprint(x)\n"]


def test_run_evaluates_cells_in_one_session(tmp_path: Path) -> None:
    path = _script(tmp_path, "# %%\nx = 21\n# %%\nprint(x * 2)\n")
    result = CliRunner().invoke(cli_app_module.app, ["run", str(path)])
    assert result.exit_code == 0
    assert "42" in result.output


def test_run_stops_at_failing_cell(tmp_path: Path) -> None:
    path = _script(tmp_path, "# %%\n1 / 0\n# %%\nprint('after')\n")
    result = CliRunner().invoke(cli_app_module.app, ["run", str(path)])
    assert result.exit_code == 1
    assert "ZeroDivisionError" in result.output
    assert "after" not in result.output


def test_run_keep_going(tmp_path: Path) -> None:
    path = _script(tmp_path, "# %%\n1 / 0\n# %%\nprint('after')\n")
    result = CliRunner().invoke(cli_app_module.app, ["run", str(path), "--keep-going"])
    assert result.exit_code == 1
    assert "after" in result.output


def test_run_reports_bad_startup_import(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NOTECELL_STARTUP_IMPORTS", '["import notecell_missing_module"]')
    path = _script(tmp_path, "x = 1\n")
    result = CliRunner().invoke(cli_app_module.app, ["run", str(path)])
    assert result.exit_code == 1
    assert "startup import failed" in result.output


def test_repl_evaluates_until_quit(monkeypatch: pytest.MonkeyPatch) -> None:
    cells = ["x = 2", "", "x * 21", ":q", "print('unreached')"]
    counters: list[int] = []

    def fake_read_cell(self: Renderer, execution_count: int) -> str:
        counters.append(execution_count)
        return cells.pop(0)

    monkeypatch.setattr(Renderer, "read_cell", fake_read_cell)
    result = CliRunner().invoke(cli_app_module.app, ["repl"])
    assert result.exit_code == 0
    assert "42" in result.output
    assert "unreached" not in result.output
    assert counters == [1, 2, 2, 3]


def test_repl_exits_on_eof(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_read_cell(self: Renderer, execution_count: int) -> str:
        raise EOFError

    monkeypatch.setattr(Renderer, "read_cell", fake_read_cell)
    result = CliRunner().invoke(cli_app_module.app, ["repl"])
    assert result.exit_code == 0


def test_html_to_text() -> None:
    payload = "<span style='color: red; font-style: italic;'>a<br/>b &lt;c&gt;</span>"
    assert html_to_text(payload) == "a\nb <c>"
