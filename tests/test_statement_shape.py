from __future__ import annotations

import pytest

from statement_import.errors import StatementShapeInvalidError
from statement_import.statement_shape import (
    NO_TRANSACTION_DATA,
    NOT_A_STATEMENT,
    ensure_statement_shape,
    validate_statement_shape,
)


@pytest.mark.parametrize(
    "text",
    [
        "Date Remarks Debit Credit Balance\n05/01/2024 POS SHOPRITE 5,000.00 120,500.75",
        "ACCESS BANK ACCOUNT STATEMENT 12.00",
        "withdrawal 1,234,567.89",
    ],
)
def test_statement_like_text_is_valid(text: str) -> None:
    result = validate_statement_shape(text)
    assert result.valid is True
    assert result.reason is None


def test_missing_keywords_is_not_a_statement() -> None:
    result = validate_statement_shape("Invoice for services rendered 1,500.00")
    assert result.valid is False
    assert result.reason == NOT_A_STATEMENT


def test_keywords_without_amounts_has_no_transaction_data() -> None:
    result = validate_statement_shape("Bank statement for January. Balance: 1500")
    assert result.valid is False
    assert result.reason == NO_TRANSACTION_DATA


def test_amount_requires_exactly_two_decimals_and_grouped_thousands() -> None:
    assert not validate_statement_shape("debit 1500.5").valid
    assert validate_statement_shape("debit 1500.50").valid


def test_ensure_statement_shape_raises_with_reason() -> None:
    with pytest.raises(StatementShapeInvalidError) as exc_info:
        ensure_statement_shape("hello world")
    assert exc_info.value.reason == NOT_A_STATEMENT


def test_keyword_match_is_case_insensitive() -> None:
    assert validate_statement_shape("TRANSACTION HISTORY 10.00").valid
