from __future__ import annotations

import importlib
import sys
from dataclasses import dataclass, field
from typing import Any

from rich.logging import RichHandler

logging_module = importlib.import_module("notecell.logging_utils")


@dataclass
class RecordingLogger:
    removed: int = 0
    extra: dict[str, Any] = field(default_factory=dict)
    sinks: list[tuple[Any, dict[str, Any]]] = field(default_factory=list)

    def remove(self) -> None:
        self.removed += 1

    def configure(self, *, extra: dict[str, Any]) -> None:
        self.extra = extra

    def add(self, sink: Any, **kwargs: Any) -> int:
        self.sinks.append((sink, kwargs))
        return len(self.sinks)


def _patch(monkeypatch) -> RecordingLogger:
    fake = RecordingLogger()
    monkeypatch.setattr(logging_module, "logger", fake)
    monkeypatch.setattr(logging_module, "_CONFIGURED", None)
    return fake


def test_default_profile_writes_to_stderr_with_cell_field(monkeypatch) -> None:
    fake = _patch(monkeypatch)

    logging_module.configure_logging(profile="default", level="debug")

    assert fake.removed == 1
    assert fake.extra == {"cell": "-"}
    [(sink, options)] = fake.sinks
    assert sink is sys.stderr
    assert options["level"] == "DEBUG"
    assert "cell={extra[cell]}" in options["format"]


def test_repl_profile_uses_rich_handler(monkeypatch) -> None:
    fake = _patch(monkeypatch)

    logging_module.configure_logging(profile="repl", level="INFO")

    [(sink, options)] = fake.sinks
    assert isinstance(sink, RichHandler)
    assert options["format"] == "{message}"


def test_configure_is_skipped_when_profile_and_level_are_unchanged(monkeypatch) -> None:
    fake = _patch(monkeypatch)

    logging_module.configure_logging(profile="default", level="INFO")
    logging_module.configure_logging(profile="default", level="info")
    assert fake.removed == 1

    logging_module.configure_logging(profile="repl", level="INFO")
    assert fake.removed == 2
