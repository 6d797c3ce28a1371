"""Application-level exception types for notecell."""

from __future__ import annotations


class NotecellError(Exception):
    """Base exception for notecell."""


class ConfigurationError(NotecellError):
    """Raised when settings or startup imports are invalid."""


class SessionError(NotecellError):
    """Raised when the session is handed input it cannot act on."""


class UnsupportedOutcomeError(NotecellError):
    """Raised when the session reports a run outcome the engine cannot handle.

    This is a broken session contract, not a user error, so it is never
    turned into a display record.
    """
