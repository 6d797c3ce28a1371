"""Session runtime for notecell."""

from .session import IMPLICIT_NAME, PythonSession, Session, create_session

__all__ = ["IMPLICIT_NAME", "PythonSession", "Session", "create_session"]
