"""Scoped redirection of the session's standard output."""

from __future__ import annotations

import contextlib
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from notecell.runtime.session import Session


class CaptureBuffer:
    """Text written to stdout while one command ran. Filled in on teardown."""

    def __init__(self) -> None:
        self.text = ""


@contextlib.contextmanager
def capture_output(session: Session, *, directory: Path | None = None) -> Generator[CaptureBuffer, None, None]:
    """Redirect the session's stdout into a private sink for the duration of the block.

    The previous stream and the implicit ``it`` binding are restored on every
    exit path, including when the wrapped statement raises.
    """

    buffer = CaptureBuffer()
    held = session.implicit
    sink = tempfile.TemporaryFile(mode="w+", encoding="utf-8", newline="", dir=directory)
    previous = session.current_output()
    session.rebind_output(sink)
    session.implicit = held
    try:
        yield buffer
    finally:
        held = session.implicit
        sink.flush()
        session.rebind_output(previous)
        # Read eagerly: the sink is gone once closed.
        sink.seek(0)
        buffer.text = sink.read()
        sink.close()
        session.implicit = held
        logger.debug("Captured {} characters of stdout", len(buffer.text))
