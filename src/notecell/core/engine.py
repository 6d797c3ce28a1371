"""Sequential evaluation of cell commands against a session."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from notecell.config import Settings
from notecell.core.capture import capture_output
from notecell.core.classifier import parse_commands
from notecell.core.display import DisplayFormatter, join_displays
from notecell.core.types import (
    GET_TYPE,
    Command,
    CommandOutcome,
    Declaration,
    Directive,
    DisplayRecord,
    Import,
    ParseError,
    RunBreak,
    RunException,
    RunOk,
    Statement,
)
from notecell.errors import UnsupportedOutcomeError
from notecell.runtime.session import IMPLICIT_NAME, Session


def store_implicit_command(execution_count: int) -> Statement:
    """Statement that keeps this cell's ``it`` reachable as ``it<n>``."""

    return Statement(f"{IMPLICIT_NAME}{execution_count} = {IMPLICIT_NAME}")


class Evaluator:
    """Runs cells command by command, stopping at the first failure."""

    def __init__(self, session: Session, settings: Settings | None = None) -> None:
        self._session = session
        self._settings = settings or Settings()
        self._formatter = DisplayFormatter(
            ignored_prefixes=tuple(self._settings.ignored_type_prefixes),
            hints=tuple(self._settings.error_hints),
        )

    @property
    def session(self) -> Session:
        return self._session

    def evaluate(self, execution_count: int, code: str) -> list[DisplayRecord]:
        """Evaluate one cell and return its merged display records.

        Never raises for user errors: they come back as HTML error records.
        """

        code = code.strip()
        if not code:
            return []

        self._session.execution_count = execution_count
        commands = [*parse_commands(code, self._settings.directive_marker), store_implicit_command(execution_count)]
        displays: list[DisplayRecord] = []
        with logger.contextualize(cell=execution_count):
            for command in commands:
                outcome = self.eval_command(command)
                displays.extend(outcome.displays)
                if not outcome.ok:
                    logger.info("Cell stopped at {}", type(command).__name__)
                    break
        return join_displays(displays)

    def eval_command(self, command: Command) -> CommandOutcome:
        if isinstance(command, Import):
            return self._guarded(lambda: self._eval_import(command))
        if isinstance(command, Directive):
            return self._guarded(lambda: self._eval_directive(command))
        if isinstance(command, Declaration):
            return self._guarded(lambda: self._eval_declaration(command))
        if isinstance(command, Statement):
            return self._eval_statement(command)
        return self._eval_parse_error(command)

    def _guarded(self, action: Callable[[], list[DisplayRecord]]) -> CommandOutcome:
        try:
            return CommandOutcome(ok=True, displays=action())
        except (Exception, SystemExit) as exc:
            logger.debug("Command failed: {!r}", exc)
            return CommandOutcome(ok=False, displays=[self._formatter.exception(exc)])

    def _eval_import(self, command: Import) -> list[DisplayRecord]:
        logger.debug("Import: {}", command.text)
        handle = self._session.parse_import(command.text)
        self._session.add_import(handle)
        return []

    def _eval_directive(self, command: Directive) -> list[DisplayRecord]:
        logger.debug("Directive: {} {}", command.name, command.argument)
        if command.name != GET_TYPE:
            raise ValueError(f"unknown directive: {command.name}")
        rendered = self._session.type_of(command.argument)
        return [self._formatter.type_signature(rendered)]

    def _eval_declaration(self, command: Declaration) -> list[DisplayRecord]:
        logger.debug("Declaration: {}", command.text)
        with capture_output(self._session, directory=self._settings.capture_dir) as captured:
            self._session.register_declaration(command.text)
        if not captured.text:
            return []
        return [DisplayRecord.plain(captured.text)]

    def _eval_statement(self, command: Statement) -> CommandOutcome:
        logger.debug("Statement: {}", command.text)
        try:
            with capture_output(self._session, directory=self._settings.capture_dir) as captured:
                result = self._session.run_statement(command.text)
        except (Exception, SystemExit) as exc:
            logger.debug("Statement raised {!r} from:\n{}", exc, command.text)
            return CommandOutcome(ok=False, displays=[self._formatter.exception(exc)])

        if isinstance(result, RunOk):
            logger.debug("Names: {}", result.names)
            return CommandOutcome(ok=True, displays=[DisplayRecord.plain(captured.text)])
        if isinstance(result, RunException):
            logger.debug("RunException: {!r}", result.error)
            return CommandOutcome(ok=False, displays=[self._formatter.exception(result.error)])
        if isinstance(result, RunBreak):
            raise UnsupportedOutcomeError("statement stopped at a breakpoint")
        raise UnsupportedOutcomeError(f"unknown run result: {result!r}")

    def _eval_parse_error(self, command: ParseError) -> CommandOutcome:
        text = f"Error (line {command.line}, column {command.column}): {command.message}"
        return CommandOutcome(ok=False, displays=[self._formatter.error(text)])


def evaluate(session: Session, execution_count: int, code: str, settings: Settings | None = None) -> list[DisplayRecord]:
    return Evaluator(session, settings).evaluate(execution_count, code)
