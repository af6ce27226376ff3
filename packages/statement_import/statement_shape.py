"""Cheap heuristic gate run before the (costly) model call."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import StatementShapeInvalidError

TRANSACTION_KEYWORDS: tuple[str, ...] = (
    "transaction",
    "debit",
    "credit",
    "balance",
    "withdrawal",
    "deposit",
    "remarks",
)
BANK_KEYWORDS: tuple[str, ...] = ("bank", "statement", "account")

# Grouped thousands with exactly two decimals, e.g. 1,234.56 or 12.00
AMOUNT_RE = re.compile(r"\d{1,3}(?:,\d{3})*\.\d{2}")

NOT_A_STATEMENT = "Document does not appear to be a recognizable bank statement"
NO_TRANSACTION_DATA = "No transaction data found in document"


@dataclass(frozen=True, slots=True)
class ShapeValidation:
    valid: bool
    reason: str | None = None


def validate_statement_shape(text: str) -> ShapeValidation:
    """Return whether ``text`` plausibly is a bank statement.

    Rules
    -----
    - At least one transaction keyword or bank-identity keyword must appear
      (case-insensitive substring).
    - At least one amount-shaped number must appear.
    """

    lower = text.lower()
    has_transaction_words = any(k in lower for k in TRANSACTION_KEYWORDS)
    has_bank_words = any(k in lower for k in BANK_KEYWORDS)

    if not has_transaction_words and not has_bank_words:
        return ShapeValidation(False, NOT_A_STATEMENT)
    if not AMOUNT_RE.search(text):
        return ShapeValidation(False, NO_TRANSACTION_DATA)
    return ShapeValidation(True, None)


def ensure_statement_shape(text: str) -> None:
    """Raise :class:`StatementShapeInvalidError` when the gate fails."""

    result = validate_statement_shape(text)
    if not result.valid:
        raise StatementShapeInvalidError(result.reason or NOT_A_STATEMENT)


__all__ = [
    "AMOUNT_RE",
    "BANK_KEYWORDS",
    "NOT_A_STATEMENT",
    "NO_TRANSACTION_DATA",
    "ShapeValidation",
    "TRANSACTION_KEYWORDS",
    "ensure_statement_shape",
    "validate_statement_shape",
]
