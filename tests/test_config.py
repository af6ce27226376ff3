from __future__ import annotations

import logging

import pytest

from statement_import import config
from statement_import.logging_setup import get_logger, resolve_level


def test_database_url_prefers_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///env.db")
    assert config.database_url() == "sqlite:///env.db"
    assert config.database_url("sqlite:///override.db") == "sqlite:///override.db"


def test_database_url_missing_raises() -> None:
    with pytest.raises(RuntimeError):
        config.database_url()


def test_openai_key_required(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(RuntimeError):
        config.require_openai_api_key()
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    assert config.require_openai_api_key() == "sk-test"


@pytest.mark.parametrize(("raw", "expected"), [("30", 30.0), ("abc", 120.0), ("0", 120.0)])
def test_llm_timeout_parsing(monkeypatch: pytest.MonkeyPatch, raw: str, expected: float) -> None:
    monkeypatch.setenv("STATEMENT_IMPORT_LLM_TIMEOUT", raw)
    assert config.llm_timeout_seconds() == expected


def test_library_loggers_are_namespaced_and_silent_by_default() -> None:
    logger = get_logger("statement_import.validation")
    assert logger.name == "statement_import.validation"
    pkg = logging.getLogger("statement_import")
    assert pkg.handlers


def test_resolve_level_from_argument_and_env(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("15") == 15
    assert resolve_level("nonsense") == logging.INFO
    assert resolve_level(None) == logging.INFO
    monkeypatch.setenv("STATEMENT_IMPORT_LOG_LEVEL", "WARNING")
    assert resolve_level(None) == logging.WARNING
