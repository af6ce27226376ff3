"""Environment-driven settings.

Values are read on each call so tests (and long-lived hosts) can change the
environment without re-importing modules. The CLI loads a local ``.env`` with
``python-dotenv`` before any of these run.
"""

from __future__ import annotations

import os

DEFAULT_MODEL = "gpt-5"
DEFAULT_LLM_TIMEOUT_SEC = 120.0


def model_name() -> str:
    """Return the model used for statement parsing (``STATEMENT_IMPORT_MODEL``)."""

    raw = os.getenv("STATEMENT_IMPORT_MODEL")
    return raw.strip() if raw and raw.strip() else DEFAULT_MODEL


def llm_timeout_seconds() -> float:
    """Return the model-call timeout (``STATEMENT_IMPORT_LLM_TIMEOUT``).

    Non-numeric or non-positive values fall back to the default.
    """

    raw = os.getenv("STATEMENT_IMPORT_LLM_TIMEOUT")
    if not raw:
        return DEFAULT_LLM_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_LLM_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_LLM_TIMEOUT_SEC


def require_openai_api_key() -> str:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is required for statement parsing")
    return api_key


def database_url(override: str | None = None) -> str:
    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; cannot reach the category store")
    return url


__all__ = [
    "DEFAULT_MODEL",
    "DEFAULT_LLM_TIMEOUT_SEC",
    "model_name",
    "llm_timeout_seconds",
    "require_openai_api_key",
    "database_url",
]
