"""Turn cell text into typed commands."""

from __future__ import annotations

import ast

from notecell.core.grammar import (
    is_bare_annotation,
    looks_like_declaration,
    parse_declaration,
    parse_statements,
)
from notecell.core.joiner import declared_name, join_multiline_declarations
from notecell.core.segmenter import DIRECTIVE_MARKER, is_directive, is_import, split_blocks, split_by_indent
from notecell.core.types import GET_TYPE, Command, Declaration, Directive, Import, ParseError, Statement


def parse_directive(text: str, marker: str = DIRECTIVE_MARKER) -> Command:
    """Parse a marker line. ``:t <expr>`` asks for the type of ``expr``."""

    stripped = text.strip()
    prefix = f"{marker}t "
    if stripped.startswith(prefix):
        return Directive(GET_TYPE, stripped[len(prefix) :])
    return ParseError(0, 0, f"Unknown command: {stripped}.")


def classify_block(block: str, marker: str = DIRECTIVE_MARKER) -> list[Command]:
    if is_directive(block, marker):
        return [parse_directive(block, marker)]
    if is_import(block):
        return [Import(block.strip())]

    first, rest = split_by_indent(block.splitlines(), marker)
    if rest and is_bare_annotation(first):
        signature = ast.unparse(ast.parse(first).body[0])
        following = classify_block("\n".join(rest), marker)
        if (
            following
            and isinstance(following[0], Declaration)
            and declared_name(following[0].text) == declared_name(signature)
        ):
            return [Declaration(f"{signature}\n{following[0].text}"), *following[1:]]
        return [Declaration(signature), *following]

    declaration = parse_declaration(block)
    if declaration.ok:
        return [Declaration(form) for form in declaration.forms]

    statements = parse_statements(block)
    if statements.ok:
        return [Statement(form) for form in statements.forms]

    # Report whichever failure matches what the block most likely is.
    failure = declaration if looks_like_declaration(block) else statements
    return [ParseError(failure.line, failure.column, failure.message)]


def parse_commands(code: str, marker: str = DIRECTIVE_MARKER) -> list[Command]:
    """Split, classify and join the commands contained in ``code``."""

    commands = [command for block in split_blocks(code, marker) for command in classify_block(block, marker)]
    return join_multiline_declarations(commands)
