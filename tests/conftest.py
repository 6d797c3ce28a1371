from __future__ import annotations

import pytest

from notecell.core.engine import Evaluator
from notecell.runtime.session import PythonSession


@pytest.fixture
def session() -> PythonSession:
    return PythonSession()


@pytest.fixture
def evaluator(session: PythonSession) -> Evaluator:
    return Evaluator(session)
