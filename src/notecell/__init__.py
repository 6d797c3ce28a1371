"""notecell - notebook cell evaluation for Python."""

from .config import Settings, load_settings
from .core.display import join_displays, type_cleaner
from .core.engine import Evaluator, evaluate
from .core.types import DisplayRecord, MimeKind
from .runtime.session import PythonSession, create_session

__version__ = "0.1.0"

__all__ = [
    "DisplayRecord",
    "Evaluator",
    "MimeKind",
    "PythonSession",
    "Settings",
    "create_session",
    "evaluate",
    "join_displays",
    "load_settings",
    "type_cleaner",
]
