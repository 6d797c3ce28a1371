"""Shared core dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

GET_TYPE = "type"


@dataclass(frozen=True)
class Directive:
    """Meta-instruction handled by the engine rather than the session."""

    name: str
    argument: str


@dataclass(frozen=True)
class Import:
    text: str


@dataclass(frozen=True)
class Declaration:
    text: str


@dataclass(frozen=True)
class Statement:
    text: str


@dataclass(frozen=True)
class ParseError:
    """Block that matched no grammar. Locations are 1-based, 0 when unknown."""

    line: int
    column: int
    message: str


Command = Directive | Import | Declaration | Statement | ParseError


class MimeKind(str, Enum):
    PLAIN = "text/plain"
    HTML = "text/html"


@dataclass(frozen=True)
class DisplayRecord:
    """One unit of output tagged with how it should be rendered."""

    mime: MimeKind
    payload: str

    @classmethod
    def plain(cls, payload: str) -> DisplayRecord:
        return cls(MimeKind.PLAIN, payload)

    @classmethod
    def html(cls, payload: str) -> DisplayRecord:
        return cls(MimeKind.HTML, payload)


@dataclass(frozen=True)
class RunOk:
    names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RunException:
    error: BaseException


@dataclass(frozen=True)
class RunBreak:
    """Execution stopped at a breakpoint. Never expected from a cell run."""


RunResult = RunOk | RunException | RunBreak


@dataclass(frozen=True)
class CommandOutcome:
    """Display output of one command and whether the cell may continue."""

    ok: bool
    displays: list[DisplayRecord] = field(default_factory=list)
