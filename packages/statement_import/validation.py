"""Review-oriented validation of parsed transactions.

Each transaction gets flags, a confidence level and a ``needs_review`` bit.
Rules never raise: any input, however malformed, ends with a defined outcome.

Description-shape rules (first match wins):

1. empty -> ``NO_DESCRIPTION``, ``manual``
2. exactly a generic term -> ``GENERIC_DESCRIPTION``, ``low``
3. digits/space/hyphen/slash only -> ``ONLY_NUMBERS``, ``manual``
4. shorter than 3 characters -> ``GENERIC_DESCRIPTION``, ``low``

Independent rules (stack on top):

5. ``abs(amount)`` above 1,000,000 or below 10 -> ``UNUSUAL_AMOUNT``;
   ``high`` becomes ``medium``
6. no category -> review; ``high`` becomes ``low``

The batch pass then marks every ``(date, abs(amount))`` group of two or more
as ``DUPLICATE_SUSPECTED``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from decimal import Decimal

from .logging_setup import get_logger
from .models import Confidence, ParsedTransaction, TransactionFlag, ValidationSummary

_logger = get_logger("statement_import.validation")

GENERIC_PATTERNS: frozenset[str] = frozenset(
    {
        "transfer",
        "payment",
        "debit",
        "credit",
        "withdrawal",
        "deposit",
        "transaction",
        "pos",
        "atm",
        "web",
        "mobile",
        "online",
        "bank",
    }
)

ONLY_NUMBERS_RE = re.compile(r"^[\d\s\-/]+$")

UNUSUAL_AMOUNT_ABOVE = Decimal("1000000")
UNUSUAL_AMOUNT_BELOW = Decimal("10")
MIN_DESCRIPTION_LENGTH = 3

_FLAG_DESCRIPTIONS: dict[TransactionFlag, str] = {
    TransactionFlag.NO_DESCRIPTION: "Missing description",
    TransactionFlag.GENERIC_DESCRIPTION: "Description is too generic",
    TransactionFlag.ONLY_NUMBERS: "Only reference numbers",
    TransactionFlag.AMBIGUOUS: "Could match multiple categories",
    TransactionFlag.UNUSUAL_AMOUNT: "Unusually large or small amount",
    TransactionFlag.DUPLICATE_SUSPECTED: "Possible duplicate transaction",
}


def flag_description(flag: TransactionFlag | str) -> str:
    """Human-readable label for ``flag`` (``"Unknown flag"`` when unrecognized)."""

    try:
        return _FLAG_DESCRIPTIONS[TransactionFlag(flag)]
    except (ValueError, KeyError):
        return "Unknown flag"


def _description_rule(desc: str) -> tuple[TransactionFlag, Confidence] | None:
    if not desc:
        return TransactionFlag.NO_DESCRIPTION, Confidence.MANUAL
    if desc in GENERIC_PATTERNS:
        return TransactionFlag.GENERIC_DESCRIPTION, Confidence.LOW
    if ONLY_NUMBERS_RE.match(desc):
        return TransactionFlag.ONLY_NUMBERS, Confidence.MANUAL
    if len(desc) < MIN_DESCRIPTION_LENGTH:
        return TransactionFlag.GENERIC_DESCRIPTION, Confidence.LOW
    return None


def _is_unusual_amount(amount: Decimal) -> bool:
    magnitude = abs(amount)
    return magnitude > UNUSUAL_AMOUNT_ABOVE or magnitude < UNUSUAL_AMOUNT_BELOW


def validate_transaction(transaction: ParsedTransaction) -> ParsedTransaction:
    """Return a copy of ``transaction`` with flags, confidence and review state.

    ``original_desc`` keeps the description exactly as received.
    """

    flags: list[TransactionFlag] = []
    confidence = Confidence.HIGH
    needs_review = False

    desc = (transaction.description or "").strip().lower()
    shape = _description_rule(desc)
    if shape is not None:
        flag, confidence = shape
        flags.append(flag)
        needs_review = True

    if _is_unusual_amount(transaction.amount):
        flags.append(TransactionFlag.UNUSUAL_AMOUNT)
        needs_review = True
        if confidence is Confidence.HIGH:
            confidence = Confidence.MEDIUM

    if not transaction.category:
        needs_review = True
        if confidence is Confidence.HIGH:
            confidence = Confidence.LOW

    return transaction.model_copy(
        update={
            "flags": tuple(flags) or None,
            "confidence": confidence,
            "needs_review": needs_review,
            "original_desc": transaction.description,
        }
    )


def validate_transactions(transactions: Iterable[ParsedTransaction]) -> list[ParsedTransaction]:
    """Validate each transaction, then flag suspected duplicates.

    Duplicates share ``date`` and ``abs(amount)``. Existing flags are kept
    and ``DUPLICATE_SUSPECTED`` is never added twice.
    """

    validated = [validate_transaction(t) for t in transactions]

    groups: dict[tuple[object, Decimal], list[int]] = {}
    for index, tx in enumerate(validated):
        # normalize() so 5000 and 5000.00 share a key
        key = (tx.date, abs(tx.amount).normalize())
        groups.setdefault(key, []).append(index)

    duplicates = 0
    for indices in groups.values():
        if len(indices) < 2:
            continue
        for index in indices:
            tx = validated[index]
            flags = tx.flags or ()
            if TransactionFlag.DUPLICATE_SUSPECTED in flags:
                continue
            validated[index] = tx.model_copy(
                update={
                    "flags": (*flags, TransactionFlag.DUPLICATE_SUSPECTED),
                    "needs_review": True,
                }
            )
            duplicates += 1

    _logger.info(
        "validation:done transactions=%d duplicates_flagged=%d",
        len(validated),
        duplicates,
    )
    return validated


def validation_summary(transactions: Sequence[ParsedTransaction]) -> ValidationSummary:
    counts = {level: 0 for level in Confidence}
    for tx in transactions:
        if tx.confidence is not None:
            counts[tx.confidence] += 1
    return ValidationSummary(
        total=len(transactions),
        needs_review=sum(1 for t in transactions if t.needs_review),
        auto_categorized=sum(1 for t in transactions if t.category and not t.needs_review),
        flagged=sum(1 for t in transactions if t.flags),
        confidence_counts=counts,
    )


__all__ = [
    "GENERIC_PATTERNS",
    "ONLY_NUMBERS_RE",
    "flag_description",
    "validate_transaction",
    "validate_transactions",
    "validation_summary",
]
