"""Logging for ``statement_import``.

Library modules call ``get_logger("statement_import.<module>")`` and never
attach handlers. Hosts (the CLI, a web worker) call ``configure_logging()``
once at startup; until then the package is silent.

Statement parsing pulls in two chatty dependencies: pdfminer logs a line per
malformed PDF object and the OpenAI SDK (through httpx) logs every request.
``configure_logging`` caps those at WARNING so pipeline events stay readable.
Log lines never carry statement text, only counts and identifiers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "statement_import"
_LEVEL_ENV = "STATEMENT_IMPORT_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_NOISY_LIBRARIES: tuple[str, ...] = ("pdfminer", "pdfplumber", "httpx", "httpcore", "openai")

_configured = False


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``STATEMENT_IMPORT_LOG_LEVEL``) into a numeric level.

    Unknown names resolve to ``INFO``.
    """

    if level is None:
        level = os.getenv(_LEVEL_ENV)
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    return numeric if numeric is not None else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach one stream handler to the package logger (first call only).

    Parameters
    ----------
    level:
        ``int`` or level name; ``None`` reads ``STATEMENT_IMPORT_LOG_LEVEL``
        and falls back to ``INFO``.
    fmt:
        Format string for the handler.
    stream:
        Destination stream, ``sys.stderr`` by default so ``--json`` output on
        stdout stays parseable.
    """

    global _configured
    if _configured:
        return

    resolved = resolve_level(level)
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in [h for h in pkg_logger.handlers if isinstance(h, logging.NullHandler)]:
        pkg_logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolved)
    pkg_logger.propagate = False

    # Debugging the package should not turn on pdfminer's per-object chatter.
    for name in _NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))

    _configured = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "resolve_level"]
