"""Merge adjacent declarations of the same name."""

from __future__ import annotations

import re

from notecell.core.types import Command, Declaration

DECLARED_NAME_RE = re.compile(r"^(?:@[^\n]*\n\s*)*(?:async\s+)?(?:(?:def|class|type)\s+)?([^\s:(\[=]*)")


def declared_name(text: str) -> str:
    """Leading name declared by ``text``, skipping decorators and definition keywords."""

    match = DECLARED_NAME_RE.match(text.strip())
    return match.group(1) if match else ""


def _same_declaration(first: Command, second: Command) -> bool:
    if not isinstance(first, Declaration) or not isinstance(second, Declaration):
        return False
    return declared_name(first.text) == declared_name(second.text)


def join_multiline_declarations(commands: list[Command]) -> list[Command]:
    groups: list[list[Command]] = []
    for command in commands:
        if groups and _same_declaration(groups[-1][0], command):
            groups[-1].append(command)
        else:
            groups.append([command])

    joined: list[Command] = []
    for group in groups:
        if len(group) == 1:
            joined.append(group[0])
        else:
            joined.append(Declaration("\n".join(command.text for command in group)))  # type: ignore[union-attr]
    return joined
