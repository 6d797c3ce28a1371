"""Grammar attempts used to classify a block of cell text."""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass, field

STATEMENT_TERMINATOR = "pass"
DECLARATION_KEYWORDS = ("def", "class", "type")
DECLARATION_KEYWORD_RE = re.compile(r"\b(?:" + "|".join(DECLARATION_KEYWORDS) + r")\b")

_DECLARATION_NODES: tuple[type[ast.AST], ...] = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)
if hasattr(ast, "TypeAlias"):
    _DECLARATION_NODES += (ast.TypeAlias,)

_DECORATOR_PROBE = "def _probe(): pass"


@dataclass(frozen=True)
class ParseAttempt:
    """Outcome of one grammar attempt: either parsed forms or a failure location."""

    ok: bool
    forms: list[str] = field(default_factory=list)
    line: int = 0
    column: int = 0
    message: str = ""

    @classmethod
    def succeeded(cls, forms: list[str]) -> ParseAttempt:
        return cls(ok=True, forms=forms)

    @classmethod
    def failed(cls, line: int, column: int, message: str) -> ParseAttempt:
        return cls(ok=False, line=line, column=column, message=message)

    @classmethod
    def from_syntax_error(cls, exc: SyntaxError, *, line_offset: int = 0) -> ParseAttempt:
        line = max((exc.lineno or 0) - line_offset, 0)
        return cls.failed(line, exc.offset or 0, exc.msg)


def is_declaration_node(node: ast.AST) -> bool:
    if isinstance(node, ast.AnnAssign):
        return isinstance(node.target, ast.Name)
    return isinstance(node, _DECLARATION_NODES)


def _parse_module(block: str) -> ast.Module | SyntaxError:
    try:
        return ast.parse(block, mode="exec")
    except SyntaxError as exc:
        return exc
    except ValueError as exc:
        # Null bytes are rejected before parsing on older interpreters.
        return SyntaxError(str(exc))


def parse_declaration(block: str) -> ParseAttempt:
    """Parse the block as exactly one top-level declaration."""

    tree = _parse_module(block)
    if isinstance(tree, SyntaxError):
        return ParseAttempt.from_syntax_error(tree)
    if len(tree.body) == 1 and is_declaration_node(tree.body[0]):
        return ParseAttempt.succeeded([ast.unparse(tree.body[0])])
    if not tree.body:
        return ParseAttempt.failed(0, 0, "expected a declaration")
    node = tree.body[-1] if is_declaration_node(tree.body[0]) else tree.body[0]
    return ParseAttempt.failed(node.lineno, node.col_offset + 1, "expected a declaration")


def parse_statements(block: str) -> ParseAttempt:
    """Parse the block as a statement list closed by a synthetic terminator.

    The terminator is dropped from the result, so a block holding only
    comments parses to an empty statement list.
    """

    tree = _parse_module(f"{block}\n{STATEMENT_TERMINATOR}")
    if isinstance(tree, SyntaxError):
        return ParseAttempt.from_syntax_error(tree)
    return ParseAttempt.succeeded([ast.unparse(node) for node in tree.body[:-1]])


def is_bare_annotation(block: str) -> bool:
    """Whether the block is only a type annotation for a name, like ``f: Callable[[int], int]``."""

    tree = _parse_module(block)
    if isinstance(tree, SyntaxError) or len(tree.body) != 1:
        return False
    node = tree.body[0]
    return isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name) and node.value is None


def is_decorator_block(block: str) -> bool:
    """Whether the block is a run of decorators waiting for their definition."""

    if not block.lstrip().startswith("@"):
        return False
    tree = _parse_module(f"{block}\n{_DECORATOR_PROBE}")
    return not isinstance(tree, SyntaxError) and len(tree.body) == 1


def looks_like_declaration(block: str) -> bool:
    return DECLARATION_KEYWORD_RE.search(block) is not None
