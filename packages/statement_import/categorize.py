"""Keyword fallback for transactions the model left uncategorized.

Credits are matched against income categories and debits against expense
categories. Already-categorized transactions are returned unchanged, so
running the fallback twice is a no-op.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from .category_mapper import CategoryMapper
from .logging_setup import get_logger
from .models import CategorizationCoverage, ParsedTransaction, SemanticGroup, TransactionType

_logger = get_logger("statement_import.categorize")


def _group_for(tx: ParsedTransaction) -> SemanticGroup:
    return SemanticGroup.INCOME if tx.type is TransactionType.CREDIT else SemanticGroup.EXPENSE


def categorize_transaction(tx: ParsedTransaction, mapper: CategoryMapper) -> ParsedTransaction:
    if tx.category:
        return tx
    category = mapper.match(tx.description, _group_for(tx))
    if category is None:
        return tx
    return tx.model_copy(update={"category": category})


def categorize_transactions(
    transactions: Iterable[ParsedTransaction], mapper: CategoryMapper
) -> list[ParsedTransaction]:
    out: list[ParsedTransaction] = []
    filled = 0
    for tx in transactions:
        result = categorize_transaction(tx, mapper)
        if result is not tx:
            filled += 1
        out.append(result)
    _logger.info("categorize:fallback transactions=%d filled=%d", len(out), filled)
    return out


def categorization_coverage(transactions: Sequence[ParsedTransaction]) -> CategorizationCoverage:
    """Summarize how many transactions carry a category, and which ones."""

    total = len(transactions)
    breakdown = Counter(t.category for t in transactions if t.category)
    categorized = sum(breakdown.values())
    return CategorizationCoverage(
        total=total,
        categorized=categorized,
        uncategorized=total - categorized,
        coverage_percentage=(categorized / total) * 100 if total > 0 else 0.0,
        category_breakdown=dict(breakdown),
    )


__all__ = ["categorization_coverage", "categorize_transaction", "categorize_transactions"]
