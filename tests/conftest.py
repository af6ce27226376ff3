"""Pytest configuration for test isolation.

Settings are read from the environment on every call, and the CLI loads a
``.env`` from the working directory. A developer's own ``DATABASE_URL`` or
model settings must never leak into a test, so an autouse fixture clears them
and runs each test from its own temporary directory. Cached SQLAlchemy
engines are disposed afterwards so SQLite files can be removed cleanly.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `statement_import` is importable
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

from statement_import.db import dispose_engines  # noqa: E402

_ENV_VARS = (
    "DATABASE_URL",
    "OPENAI_API_KEY",
    "STATEMENT_IMPORT_MODEL",
    "STATEMENT_IMPORT_LLM_TIMEOUT",
    "STATEMENT_IMPORT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    dispose_engines()
