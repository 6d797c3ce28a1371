"""Interactive Python session that cell commands run against."""

from __future__ import annotations

import ast
import asyncio
import builtins
import contextlib
import inspect
import io
import sys
from typing import Any, Protocol, TextIO

from loguru import logger

from notecell.config import Settings
from notecell.core.types import RunException, RunOk, RunResult
from notecell.errors import ConfigurationError, SessionError

IMPLICIT_NAME = "it"
CELL_FILENAME = "<cell>"

ImportNode = ast.Import | ast.ImportFrom


class Session(Protocol):
    """Contract the evaluation engine needs from an interactive session."""

    execution_count: int

    @property
    def implicit(self) -> Any: ...

    @implicit.setter
    def implicit(self, value: Any) -> None: ...

    def parse_import(self, text: str) -> Any: ...

    def add_import(self, handle: Any) -> None: ...

    def register_declaration(self, text: str) -> None: ...

    def run_statement(self, text: str) -> RunResult: ...

    def type_of(self, expr: str) -> str: ...

    def current_output(self) -> TextIO: ...

    def rebind_output(self, sink: TextIO) -> None: ...


def render_type(value: Any) -> str:
    if inspect.isclass(value):
        return f"type[{inspect.formatannotation(value)}]"
    if callable(value):
        try:
            return str(inspect.signature(value))
        except (TypeError, ValueError):
            pass
    return inspect.formatannotation(type(value))


class PythonSession:
    """Persistent namespace plus the imports and declarations registered into it."""

    def __init__(self, *, module_name: str = "__main__") -> None:
        self.namespace: dict[str, Any] = {"__name__": module_name, "__builtins__": builtins}
        self.namespace[IMPLICIT_NAME] = None
        self.imports: list[str] = []
        self.declarations: list[str] = []
        self.execution_count = 0
        self._annotations: dict[str, str] = {}

    @property
    def implicit(self) -> Any:
        return self.namespace.get(IMPLICIT_NAME)

    @implicit.setter
    def implicit(self, value: Any) -> None:
        self.namespace[IMPLICIT_NAME] = value

    def parse_import(self, text: str) -> ImportNode:
        tree = ast.parse(text, mode="exec")
        if len(tree.body) != 1 or not isinstance(tree.body[0], ast.Import | ast.ImportFrom):
            raise SessionError(f"not an import: {text}")
        return tree.body[0]

    def add_import(self, handle: ImportNode) -> None:
        module = ast.Module(body=[handle], type_ignores=[])
        exec(compile(module, "<import>", "exec"), self.namespace)  # noqa: S102
        self.imports.append(ast.unparse(handle))

    def register_declaration(self, text: str) -> None:
        tree = ast.parse(text, mode="exec")
        exec(compile(tree, CELL_FILENAME, "exec"), self.namespace)  # noqa: S102
        for node in tree.body:
            if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
                self._annotations[node.target.id] = ast.unparse(node.annotation)
        self.declarations.append(text)

    def run_statement(self, text: str) -> RunResult:
        """Run one statement. Compile errors raise; errors from running user code are returned."""

        tree = ast.parse(text, mode="exec")
        is_expression = len(tree.body) == 1 and isinstance(tree.body[0], ast.Expr)
        flags = ast.PyCF_ALLOW_TOP_LEVEL_AWAIT
        if is_expression:
            code = compile(ast.Expression(tree.body[0].value), CELL_FILENAME, "eval", flags=flags)
        else:
            code = compile(tree, CELL_FILENAME, "exec", flags=flags)

        before = {name: id(value) for name, value in self.namespace.items()}
        try:
            value = eval(code, self.namespace)  # noqa: S307
            if code.co_flags & inspect.CO_COROUTINE:
                value = asyncio.run(value)
        except (Exception, SystemExit) as exc:
            return RunException(exc)

        if is_expression and value is not None:
            print(repr(value))
            self.implicit = value
        names = [
            name
            for name, value in self.namespace.items()
            if not name.startswith("__") and before.get(name) != id(value)
        ]
        return RunOk(names)

    def type_of(self, expr: str) -> str:
        tree = ast.parse(expr.strip(), mode="eval")
        if isinstance(tree.body, ast.Name) and tree.body.id in self._annotations:
            return self._annotations[tree.body.id]
        with contextlib.redirect_stdout(io.StringIO()):
            value = eval(compile(tree, "<directive>", "eval"), self.namespace)  # noqa: S307
        return render_type(value)

    def current_output(self) -> TextIO:
        return sys.stdout

    def rebind_output(self, sink: TextIO) -> None:
        sys.stdout = sink


def create_session(settings: Settings | None = None) -> PythonSession:
    """Build a session with the configured startup imports already in scope."""

    settings = settings or Settings()
    session = PythonSession()
    for text in settings.startup_imports:
        try:
            session.add_import(session.parse_import(text))
        except Exception as exc:
            raise ConfigurationError(f"startup import failed: {text}: {exc!s}") from exc
    logger.debug("Session ready with {} startup imports", len(session.imports))
    return session
