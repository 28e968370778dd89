from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import List

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from treelox.evaluator import Interpreter
from treelox.utils import DEBUG_PY_TRACE_ENV, LOG_LEVEL_ENV

@pytest.fixture(autouse=True)
def _clean_treelox_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each test starts without the treelox env switches set."""
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)

@pytest.fixture
def interpreter() -> Interpreter:
    return Interpreter()

def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Scenario tables are keyed by id; a repeated id hides a case."""
    del session
    del config

    counts = Counter(item.nodeid for item in items)
    duplicates = sorted(nodeid for nodeid, n in counts.items() if n > 1)

    if duplicates:
        lines = "\n".join(f"- {nodeid}" for nodeid in duplicates)
        raise pytest.UsageError(f"Duplicate scenario ids:\n{lines}")
