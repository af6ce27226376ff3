from __future__ import annotations

from typing import Any

import pytest

import statement_import.pdf_extraction as pdf_mod
from statement_import.errors import (
    EmptyExtractionError,
    IncorrectPasswordError,
    PasswordRequiredError,
    PdfExtractionError,
    PdfPasswordError,
)
from statement_import.pdf_extraction import extract_text, is_password_error


# ---- Helpers -----------------------------------------------------------------


class _Page:
    def __init__(self, text: str | None) -> None:
        self._text = text

    def extract_text(self) -> str | None:
        return self._text


class _Pdf:
    def __init__(self, pages: list[str | None]) -> None:
        self.pages = [_Page(t) for t in pages]

    def __enter__(self) -> _Pdf:
        return self

    def __exit__(self, *exc: Any) -> None:
        return None


class PDFPasswordIncorrect(Exception):
    pass


class PdfminerException(Exception):
    pass


def _patch_open(monkeypatch: pytest.MonkeyPatch, *, pages=None, error=None, calls=None):
    def _open(stream, password=""):
        if calls is not None:
            calls.append({"password": password, "data": stream.read()})
        if error is not None:
            raise error
        return _Pdf(pages or [])

    monkeypatch.setattr(pdf_mod.pdfplumber, "open", _open)


# ---- Tests -------------------------------------------------------------------


def test_pages_joined_in_order_with_newlines(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    _patch_open(monkeypatch, pages=["Page one", None, "Page three"], calls=calls)

    text = extract_text(b"%PDF-1.7 fake")

    assert text == "Page one\n\nPage three"
    assert calls == [{"password": "", "data": b"%PDF-1.7 fake"}]


def test_supplied_password_is_forwarded(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    _patch_open(monkeypatch, pages=["Statement"], calls=calls)

    extract_text(b"x", password="s3cret")

    assert calls[0]["password"] == "s3cret"


def test_blank_text_is_empty_extraction(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_open(monkeypatch, pages=["   ", None, "\n"])

    with pytest.raises(EmptyExtractionError):
        extract_text(b"x")


def test_wrapped_password_error_without_password_requires_one(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # pdfplumber wraps the pdfminer error instance as the first argument
    _patch_open(monkeypatch, error=PdfminerException(PDFPasswordIncorrect()))

    with pytest.raises(PasswordRequiredError) as exc_info:
        extract_text(b"x")

    assert isinstance(exc_info.value, PdfPasswordError)
    assert not isinstance(exc_info.value, IncorrectPasswordError)


def test_password_error_with_password_is_incorrect_password(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_open(monkeypatch, error=PdfminerException(PDFPasswordIncorrect()))

    with pytest.raises(IncorrectPasswordError):
        extract_text(b"x", password="wrong")


def test_encrypted_message_marker_is_recognized(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_open(monkeypatch, error=ValueError("File has not been decrypted: Encrypted document"))

    with pytest.raises(PasswordRequiredError):
        extract_text(b"x")


def test_other_errors_are_generic_and_chained(monkeypatch: pytest.MonkeyPatch) -> None:
    original = ValueError("broken xref table")
    _patch_open(monkeypatch, error=original)

    with pytest.raises(PdfExtractionError) as exc_info:
        extract_text(b"x")

    assert not isinstance(exc_info.value, PdfPasswordError)
    assert exc_info.value.__cause__ is original


def test_is_password_error_follows_cause_chain() -> None:
    try:
        try:
            raise PDFPasswordIncorrect()
        except PDFPasswordIncorrect as inner:
            raise RuntimeError("could not open") from inner
    except RuntimeError as outer:
        assert is_password_error(outer)

    assert not is_password_error(ValueError("bad stream"))
