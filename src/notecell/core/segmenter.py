"""Split raw cell text into blocks along indentation boundaries."""

from __future__ import annotations

import io
import re
import tokenize
from collections.abc import Callable

from notecell.core.grammar import is_bare_annotation, is_decorator_block

DIRECTIVE_MARKER = ":"
IMPORT_RE = re.compile(r"^(?:import|from)\s")
CLAUSE_RE = re.compile(r"^(?:else|elif|except|finally)\b")


def indent_level(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def is_directive(text: str, marker: str = DIRECTIVE_MARKER) -> bool:
    return text.strip().startswith(marker)


def is_import(text: str) -> bool:
    return IMPORT_RE.match(text.strip()) is not None


def is_open(text: str) -> bool:
    """Whether text ends inside a bracket, a multi-line string or a backslash continuation."""

    try:
        for _ in tokenize.generate_tokens(io.StringIO(text + "\n").readline):
            pass
    except tokenize.TokenError:
        return True
    except SyntaxError:
        # Covers IndentationError too; the grammar attempts report these.
        return False
    return False


def _skip_blank(lines: list[str], index: int) -> int:
    while index < len(lines) and not lines[index].strip():
        index += 1
    return index


def _continues(line: str, indent: int) -> bool:
    level = indent_level(line)
    if level > indent:
        return True
    return level == indent and CLAUSE_RE.match(line.lstrip()) is not None


def _block_end(lines: list[str], start: int, marker: str) -> int:
    first = lines[start]
    if is_directive(first, marker):
        return start + 1

    single_line = is_import(first)
    indent = indent_level(first)
    end = start + 1
    while end < len(lines):
        if is_open("\n".join(lines[start:end])):
            end += 1
            continue
        if single_line:
            break
        line = lines[end]
        if not line.strip():
            following = _skip_blank(lines, end)
            if following < len(lines) and _continues(lines[following], indent):
                end = following + 1
                continue
            break
        if not _continues(line, indent):
            break
        end += 1
    return end


def split_by_indent(lines: list[str], marker: str = DIRECTIVE_MARKER) -> tuple[str, list[str]]:
    """Return the first block of ``lines`` and the lines left after it."""

    start = _skip_blank(lines, 0)
    if start >= len(lines):
        return "", []
    end = _block_end(lines, start, marker)
    block = "\n".join(lines[start:end]).rstrip()
    return block, lines[_skip_blank(lines, end) :]


def _attach_following(blocks: list[str], should_attach: Callable[[str], bool], marker: str) -> list[str]:
    attached: list[str] = []
    index = 0
    while index < len(blocks):
        block = blocks[index]
        while should_attach(block) and index + 1 < len(blocks):
            following = blocks[index + 1]
            if not following.strip() or is_directive(following, marker) or is_import(following):
                break
            block = f"{block}\n{following}"
            index += 1
        attached.append(block)
        index += 1
    return attached


def split_blocks(code: str, marker: str = DIRECTIVE_MARKER) -> list[str]:
    """Split cell text into blocks.

    Directive and import lines are blocks of their own. Any other block is its
    first line plus every following line indented deeper than it. Decorators
    and bare annotations are then glued to the block that follows them, so a
    signature and its definition reach the classifier as one unit.
    """

    blocks: list[str] = []
    rest = code.splitlines()
    while rest:
        block, rest = split_by_indent(rest, marker)
        if block:
            blocks.append(block)

    blocks = _attach_following(blocks, is_decorator_block, marker)
    return _attach_following(blocks, is_bare_annotation, marker)
