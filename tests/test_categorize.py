from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from statement_import.categorize import (
    categorization_coverage,
    categorize_transaction,
    categorize_transactions,
)
from statement_import.category_mapper import CategoryMapper
from statement_import.models import ParsedTransaction, TransactionType
from tests.helpers.fakes import small_catalog


@pytest.fixture
def mapper() -> CategoryMapper:
    return CategoryMapper(small_catalog())


def _tx(description: str, type_: TransactionType = TransactionType.DEBIT, category=None):
    return ParsedTransaction(
        date=dt.date(2024, 1, 5),
        description=description,
        amount=Decimal("2500"),
        type=type_,
        category=category,
    )


def test_debit_uses_expense_categories(mapper: CategoryMapper) -> None:
    out = categorize_transaction(_tx("UBER TRIP LAGOS"), mapper)
    assert out.category == "transportation"


def test_credit_uses_income_categories(mapper: CategoryMapper) -> None:
    assert categorize_transaction(_tx("Salary Jan", TransactionType.CREDIT), mapper).category == (
        "salary"
    )
    # an expense keyword on a credit does not apply
    assert categorize_transaction(_tx("Uber refund", TransactionType.CREDIT), mapper).category == (
        "other_income"
    )


def test_already_categorized_is_returned_unchanged(mapper: CategoryMapper) -> None:
    tx = _tx("UBER TRIP", category="shopping")
    assert categorize_transaction(tx, mapper) is tx


def test_categorizing_twice_is_a_no_op(mapper: CategoryMapper) -> None:
    batch = [_tx("UBER TRIP"), _tx("Unknown merchant"), _tx("Jumia order")]
    once = categorize_transactions(batch, mapper)
    twice = categorize_transactions(once, mapper)
    assert twice == once
    assert [t.category for t in once] == ["transportation", None, "shopping"]


def test_empty_description_is_left_alone(mapper: CategoryMapper) -> None:
    tx = _tx("")
    assert categorize_transaction(tx, mapper) is tx


def test_coverage_statistics() -> None:
    txs = [
        _tx("a", category="transportation"),
        _tx("b", category="transportation"),
        _tx("c", category="salary"),
        _tx("d"),
    ]
    cov = categorization_coverage(txs)
    assert cov.total == 4
    assert cov.categorized == 3
    assert cov.uncategorized == 1
    assert cov.coverage_percentage == 75.0
    assert cov.category_breakdown == {"transportation": 2, "salary": 1}


def test_coverage_of_nothing_is_zero() -> None:
    cov = categorization_coverage([])
    assert cov.coverage_percentage == 0.0
    assert cov.category_breakdown == {}
