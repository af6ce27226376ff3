"""PDF text extraction for uploaded bank statements.

Extraction runs entirely in memory through ``pdfplumber``. Password handling
mirrors how encrypted statements behave in practice: pdfminer raises the same
family of errors for "no password" and "wrong password", so the caller-visible
distinction is made on whether a password was supplied.
"""

from __future__ import annotations

import io

import pdfplumber

from .errors import (
    EmptyExtractionError,
    IncorrectPasswordError,
    PasswordRequiredError,
    PdfExtractionError,
)
from .logging_setup import get_logger

_logger = get_logger("statement_import.pdf_extraction")

_PASSWORD_MARKERS: tuple[str, ...] = ("password", "encrypted")
_PASSWORD_TYPE_MARKERS: tuple[str, ...] = ("password", "encrypt")


def _iter_error_chain(exc: BaseException):
    """Yield ``exc``, its exception args, causes and contexts (each once)."""

    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur
        # pdfplumber wraps pdfminer errors as PdfminerException(original)
        stack.extend(a for a in cur.args if isinstance(a, BaseException))
        if cur.__cause__ is not None:
            stack.append(cur.__cause__)
        if cur.__context__ is not None:
            stack.append(cur.__context__)


def is_password_error(exc: BaseException) -> bool:
    """Return True when ``exc`` signals an encrypted document or a bad password."""

    for err in _iter_error_chain(exc):
        message = str(err).lower()
        if any(marker in message for marker in _PASSWORD_MARKERS):
            return True
        type_name = type(err).__name__.lower()
        if any(marker in type_name for marker in _PASSWORD_TYPE_MARKERS):
            return True
    return False


def extract_text(data: bytes, password: str | None = None) -> str:
    """Extract plain text from PDF ``data``.

    Pages are read in order and joined with newlines.

    Raises
    ------
    PasswordRequiredError
        The document is encrypted and no password was supplied.
    IncorrectPasswordError
        A password was supplied and rejected.
    EmptyExtractionError
        The document opened but yielded no text (likely image-only).
    PdfExtractionError
        Any other extraction failure, chained to the original error.
    """

    try:
        with pdfplumber.open(io.BytesIO(data), password=password or "") as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:  # noqa: BLE001 - classify, then re-raise as a typed error
        if is_password_error(e):
            _logger.info(
                "pdf_extraction:password_error password_supplied=%s error=%s",
                bool(password),
                e.__class__.__name__,
            )
            if password:
                raise IncorrectPasswordError() from e
            raise PasswordRequiredError() from e
        _logger.error("pdf_extraction:failed error=%s", e.__class__.__name__)
        raise PdfExtractionError(f"Failed to extract text from PDF: {e}") from e

    text = "\n".join(pages)
    if not text.strip():
        _logger.warning("pdf_extraction:empty pages=%d", len(pages))
        raise EmptyExtractionError()

    _logger.info("pdf_extraction:done pages=%d chars=%d", len(pages), len(text))
    return text


__all__ = ["extract_text", "is_password_error"]
