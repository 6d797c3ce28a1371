"""CLI renderer for notecell."""

from __future__ import annotations

import html
import re
from collections.abc import Iterable

from prompt_toolkit import PromptSession
from rich.console import Console
from rich.text import Text

from notecell.core.display import LINE_BREAK, is_error
from notecell.core.types import DisplayRecord, MimeKind

TAG_RE = re.compile(r"<[^>]+>")


def html_to_text(payload: str) -> str:
    return html.unescape(TAG_RE.sub("", payload.replace(LINE_BREAK, "\n")))


class Renderer:
    """CLI renderer using Rich for terminal output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console()
        self._prompt_session: PromptSession[str] | None = None

    def welcome(self, message: str = "[bold blue]notecell[/bold blue] - blank line runs the cell, :q quits") -> None:
        self.console.print(message)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def display(self, records: Iterable[DisplayRecord]) -> None:
        """Render display records: plain text verbatim, HTML as styled text."""
        for record in records:
            if record.mime is MimeKind.PLAIN:
                if record.payload:
                    self.console.print(Text(record.payload), end="")
                continue
            style = "italic red" if is_error(record) else "bold green"
            self.console.print(Text(html_to_text(record.payload), style=style))

    def read_cell(self, execution_count: int) -> str:
        """Prompt for cell lines until a blank line. Raises EOFError on Ctrl+D."""
        if self._prompt_session is None:
            self._prompt_session = PromptSession()
        lines: list[str] = []
        while True:
            prompt = f"In [{execution_count}]: " if not lines else "   ...: "
            line = self._prompt_session.prompt(prompt)
            if not line.strip():
                return "\n".join(lines)
            lines.append(line)
