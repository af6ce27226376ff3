"""Exception hierarchy for the statement import pipeline.

Callers branch on the class, never on message text:

- ``PasswordRequiredError`` / ``IncorrectPasswordError``: prompt the user
  (first time vs. again).
- ``EmptyExtractionError``: terminal; the PDF most likely holds scanned
  images only.
- ``StatementShapeInvalidError``: terminal; not a recognizable statement.
- ``BlockedResponseError`` / ``EmptyResponseError`` /
  ``InvalidResponseError``: the model call failed; re-issuing the same
  request is safe. No automatic retry happens here.
"""

from __future__ import annotations


class StatementImportError(Exception):
    """Base class for all pipeline failures."""


# ---- PDF extraction -----------------------------------------------------------


class PdfExtractionError(StatementImportError):
    """Text could not be extracted from the uploaded PDF."""


class PdfPasswordError(PdfExtractionError):
    """The PDF is encrypted and could not be opened."""


class PasswordRequiredError(PdfPasswordError):
    def __init__(
        self,
        message: str = "This PDF is password protected. Please provide the password.",
    ) -> None:
        super().__init__(message)


class IncorrectPasswordError(PdfPasswordError):
    def __init__(self, message: str = "Incorrect password. Please try again.") -> None:
        super().__init__(message)


class EmptyExtractionError(PdfExtractionError):
    def __init__(
        self,
        message: str = "No text could be extracted from the PDF. It may be an image-based PDF.",
    ) -> None:
        super().__init__(message)


# ---- Shape gate ----------------------------------------------------------------


class StatementShapeInvalidError(StatementImportError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


# ---- Model call ----------------------------------------------------------------


class LlmResponseError(StatementImportError, ValueError):
    """The model call returned something the parser cannot use."""


class BlockedResponseError(LlmResponseError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Request was blocked due to: {reason}")
        self.reason = reason


class EmptyResponseError(LlmResponseError):
    def __init__(self, message: str = "No response from the language model") -> None:
        super().__init__(message)


class InvalidResponseError(LlmResponseError):
    pass


class ParseCancelledError(StatementImportError):
    """The caller went away while the model call was in flight."""


__all__ = [
    "StatementImportError",
    "PdfExtractionError",
    "PdfPasswordError",
    "PasswordRequiredError",
    "IncorrectPasswordError",
    "EmptyExtractionError",
    "StatementShapeInvalidError",
    "LlmResponseError",
    "BlockedResponseError",
    "EmptyResponseError",
    "InvalidResponseError",
    "ParseCancelledError",
]
