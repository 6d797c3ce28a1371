"""Display record merging and user-facing error markup."""

from __future__ import annotations

import html
import re
import traceback
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from notecell.config import DEFAULT_ERROR_HINTS, DEFAULT_IGNORED_TYPE_PREFIXES
from notecell.core.types import DisplayRecord, MimeKind

ERROR_TEMPLATE = "<span style='color: red; font-style: italic;'>{}</span>"
TYPE_TEMPLATE = "<span style='font-weight: bold; color: green;'>{}</span>"
LINE_BREAK = "<br/>"
STRING_ALIAS_RE = re.compile(r"\bText\b")
_ERROR_PREFIX = ERROR_TEMPLATE.split("{}", 1)[0]


def is_error(record: DisplayRecord) -> bool:
    return record.mime is MimeKind.HTML and record.payload.startswith(_ERROR_PREFIX)


def join_displays(displays: Iterable[DisplayRecord]) -> list[DisplayRecord]:
    """Collapse all plain-text records into one, placed before every other record."""

    plains: list[str] = []
    others: list[DisplayRecord] = []
    for display in displays:
        if display.mime is MimeKind.PLAIN:
            plains.append(display.payload)
        else:
            others.append(display)
    if not plains:
        return others
    return [DisplayRecord.plain("".join(plains)), *others]


def _prefix_pattern(prefixes: Sequence[str]) -> re.Pattern[str] | None:
    if not prefixes:
        return None
    alternatives = "|".join(re.escape(prefix) for prefix in sorted(prefixes, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})\.")


def type_cleaner(text: str, prefixes: Sequence[str] = DEFAULT_IGNORED_TYPE_PREFIXES) -> str:
    """Drop noisy module qualifiers from type names and spell string aliases as ``str``."""

    # Alias first, so prefixes the rewrite produces are stripped in the same pass.
    text = STRING_ALIAS_RE.sub("str", text)
    pattern = _prefix_pattern(prefixes)
    if pattern is None:
        return text
    return pattern.sub("", text)


def describe_exception(exc: BaseException) -> str:
    return "".join(traceback.format_exception_only(type(exc), exc))


@dataclass(frozen=True)
class DisplayFormatter:
    """Renders errors and types as HTML records."""

    ignored_prefixes: tuple[str, ...] = DEFAULT_IGNORED_TYPE_PREFIXES
    hints: tuple[str, ...] = DEFAULT_ERROR_HINTS

    def clean(self, text: str) -> str:
        return type_cleaner(text, self.ignored_prefixes)

    def error_markup(self, text: str) -> str:
        for hint in self.hints:
            text = text.removesuffix(hint)
        text = html.escape(self.clean(text), quote=False)
        return ERROR_TEMPLATE.format(text.replace("\n", LINE_BREAK))

    def error(self, text: str) -> DisplayRecord:
        return DisplayRecord.html(self.error_markup(text))

    def exception(self, exc: BaseException) -> DisplayRecord:
        return self.error(describe_exception(exc))

    def type_signature(self, rendered: str) -> DisplayRecord:
        return DisplayRecord.html(TYPE_TEMPLATE.format(html.escape(self.clean(rendered), quote=False)))
