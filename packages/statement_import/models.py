"""Data models for ``statement_import``.

Wire-facing records are frozen pydantic models with camelCase aliases so a
``model_dump(by_alias=True, exclude_none=True)`` produces the review-layer
JSON contract directly. ``None`` always means "absent"; updates go through
``model_copy(update=...)`` and never mutate a returned record.

Aggregates computed in-process (summaries, coverage, suggestions) are plain
frozen dataclasses / named tuples.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TransactionType(StrEnum):
    DEBIT = "debit"
    CREDIT = "credit"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    MANUAL = "manual"


class TransactionFlag(StrEnum):
    NO_DESCRIPTION = "NO_DESCRIPTION"
    GENERIC_DESCRIPTION = "GENERIC_DESCRIPTION"
    ONLY_NUMBERS = "ONLY_NUMBERS"
    AMBIGUOUS = "AMBIGUOUS"
    UNUSUAL_AMOUNT = "UNUSUAL_AMOUNT"
    DUPLICATE_SUSPECTED = "DUPLICATE_SUSPECTED"


class SemanticGroup(StrEnum):
    EXPENSE = "expense"
    INCOME = "income"
    FEE = "fee"


# Catalog-wide group order: expense categories are tried/rendered first.
GROUP_ORDER: tuple[SemanticGroup, ...] = (
    SemanticGroup.EXPENSE,
    SemanticGroup.INCOME,
    SemanticGroup.FEE,
)


_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=False,
)


# ---------------------------------------------------------------------------
# Transactions and statements
# ---------------------------------------------------------------------------


class ParsedTransaction(BaseModel):
    """A single extracted statement line after normalization.

    ``amount`` is the principal only. The fee breakdown lives in the seven
    fee fields, and ``total`` (``amount`` plus every fee) is present exactly
    when at least one fee is nonzero. The validation stage fills ``flags``,
    ``confidence``, ``needs_review`` and ``original_desc``.
    """

    model_config = _WIRE_CONFIG

    date: dt.date
    description: str
    amount: Decimal
    type: TransactionType
    category: str | None = None
    balance: Decimal | None = None

    vat: Decimal | None = None
    service_fee: Decimal | None = None
    commission: Decimal | None = None
    stamp_duty: Decimal | None = None
    transfer_fee: Decimal | None = None
    processing_fee: Decimal | None = None
    other_fees: Decimal | None = None
    fee_note: str | None = None
    total: Decimal | None = None

    flags: tuple[TransactionFlag, ...] | None = None
    confidence: Confidence | None = None
    needs_review: bool | None = None
    original_desc: str | None = None

    @field_validator("flags")
    @classmethod
    def _empty_flags_are_absent(
        cls, v: tuple[TransactionFlag, ...] | None
    ) -> tuple[TransactionFlag, ...] | None:
        return v or None

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-compatible camelCase mapping with absent fields dropped."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StatementPeriod(BaseModel):
    model_config = _WIRE_CONFIG

    from_: dt.date = Field(alias="from")
    to: dt.date


class StatementParseResult(BaseModel):
    model_config = _WIRE_CONFIG

    bank_name: str = "Unknown Bank"
    account_number: str | None = None
    period: StatementPeriod | None = None
    transactions: tuple[ParsedTransaction, ...] = ()

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Category catalog
# ---------------------------------------------------------------------------


class CategoryEntry(BaseModel):
    """One row of the externally owned category catalog.

    ``sort_order`` is the explicit priority used by first-match keyword
    classification; ties fall back to ``value``.
    """

    model_config = _WIRE_CONFIG

    value: str
    name: str
    group: SemanticGroup
    description: str | None = None
    keywords: tuple[str, ...] = ()
    sort_order: int = 0
    is_active: bool = True

    @field_validator("value", "name")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("must be a non-empty string")
        return s

    @field_validator("description")
    @classmethod
    def _blank_description_is_absent(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("keywords")
    @classmethod
    def _normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        cleaned = (k.strip().lower() for k in v if isinstance(k, str))
        return tuple(dict.fromkeys(k for k in cleaned if k))


@dataclass(frozen=True, slots=True)
class CategoryRule:
    category_value: str
    semantic_group: SemanticGroup
    keywords: tuple[str, ...]


class CategorySuggestion(NamedTuple):
    category_value: str
    confidence: float


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def _empty_confidence_counts() -> dict[Confidence, int]:
    return {level: 0 for level in Confidence}


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    """Counts over a validated batch.

    ``auto_categorized`` counts transactions with a category that do not need
    review. ``confidence_counts`` always carries every level.
    """

    total: int
    needs_review: int
    auto_categorized: int
    flagged: int
    confidence_counts: Mapping[Confidence, int] = field(default_factory=_empty_confidence_counts)

    def to_wire(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "needsReview": self.needs_review,
            "autoCategorized": self.auto_categorized,
            "flagged": self.flagged,
            "confidenceCounts": {str(k): v for k, v in self.confidence_counts.items()},
        }


@dataclass(frozen=True, slots=True)
class CategorizationCoverage:
    total: int
    categorized: int
    uncategorized: int
    coverage_percentage: float
    category_breakdown: Mapping[str, int]


__all__ = [
    "TransactionType",
    "Confidence",
    "TransactionFlag",
    "SemanticGroup",
    "GROUP_ORDER",
    "ParsedTransaction",
    "StatementPeriod",
    "StatementParseResult",
    "CategoryEntry",
    "CategoryRule",
    "CategorySuggestion",
    "ValidationSummary",
    "CategorizationCoverage",
]
