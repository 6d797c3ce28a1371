"""CLI main module for notecell."""

from __future__ import annotations

import re
from pathlib import Path

import typer

from notecell.cli.render import Renderer
from notecell.config import Settings, load_settings
from notecell.core.display import is_error
from notecell.core.engine import Evaluator
from notecell.errors import ConfigurationError
from notecell.logging_utils import LogProfile, configure_logging
from notecell.runtime.session import create_session

QUIT_COMMANDS = {":q", ":quit"}
CELL_SEPARATOR_RE = re.compile(r"^#\s*%%.*$", re.MULTILINE)

app = typer.Typer(
    name="notecell",
    help="Evaluate notebook-style Python cells.",
    add_completion=False,
    rich_markup_mode="rich",
)


def split_cells(source: str) -> list[str]:
    """Split a percent-format script (``# %%`` separators) into cells."""
    return [cell for cell in CELL_SEPARATOR_RE.split(source) if cell.strip()]


def _build_evaluator(settings: Settings, renderer: Renderer) -> Evaluator:
    try:
        session = create_session(settings)
    except ConfigurationError as exc:
        renderer.error(str(exc))
        raise typer.Exit(1) from exc
    return Evaluator(session, settings)


def _setup(log_level: str | None, profile: LogProfile) -> Settings:
    settings = load_settings(log_level=log_level)
    configure_logging(profile=profile, level=settings.log_level)
    return settings


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        repl(log_level=None)


@app.command()
def run(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Script with # %% cells"),  # noqa: B008
    log_level: str | None = typer.Option(None, "--log-level", help="Override NOTECELL_LOG_LEVEL"),
    keep_going: bool = typer.Option(False, "--keep-going", help="Run later cells after a failing one"),
) -> None:
    """Evaluate every cell of a script in one session."""

    settings = _setup(log_level, "default")
    renderer = Renderer()
    evaluator = _build_evaluator(settings, renderer)

    failed = False
    for execution_count, cell in enumerate(split_cells(path.read_text(encoding="utf-8")), start=1):
        records = evaluator.evaluate(execution_count, cell)
        renderer.display(records)
        if any(is_error(record) for record in records):
            failed = True
            if not keep_going:
                break
    if failed:
        raise typer.Exit(1)


@app.command()
def repl(
    log_level: str | None = typer.Option(None, "--log-level", help="Override NOTECELL_LOG_LEVEL"),
) -> None:
    """Start an interactive cell loop."""

    settings = _setup(log_level, "repl")
    renderer = Renderer()
    evaluator = _build_evaluator(settings, renderer)
    renderer.welcome()

    execution_count = 1
    while True:
        try:
            cell = renderer.read_cell(execution_count)
        except (EOFError, KeyboardInterrupt):
            break
        if cell.strip() in QUIT_COMMANDS:
            break
        if not cell.strip():
            continue
        renderer.display(evaluator.evaluate(execution_count, cell))
        execution_count += 1
