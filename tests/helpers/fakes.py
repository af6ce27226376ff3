"""In-process fakes shared by parser, pipeline and CLI tests."""

from __future__ import annotations

import json
from typing import Any

from statement_import.model_client import ModelReply
from statement_import.models import CategoryEntry, SemanticGroup


class FakeModelClient:
    """``StatementModelClient`` returning a canned reply and recording prompts."""

    def __init__(
        self,
        body: Any = None,
        *,
        text: str | None = None,
        block_reason: str | None = None,
        on_generate: Any = None,
    ) -> None:
        self._text = text if text is not None or body is None else json.dumps(body)
        self._block_reason = block_reason
        self._on_generate = on_generate
        self.prompts: list[str] = []
        self.formats: list[Any] = []

    def generate(self, prompt, response_format, *, instructions=None) -> ModelReply:
        self.prompts.append(prompt)
        self.formats.append(response_format)
        if self._on_generate is not None:
            self._on_generate()
        return ModelReply(text=self._text, block_reason=self._block_reason)


def statement_body(transactions: list[dict[str, Any]], **top: Any) -> dict[str, Any]:
    """Wrap transactions in the ``{"statements": [...]}`` response shape."""

    stmt: dict[str, Any] = {
        "bankName": "GTBank",
        "accountNumber": "0123456789",
        "period": {"from": "2024-01-01", "to": "2024-01-31"},
        "transactions": transactions,
    }
    stmt.update(top)
    return {"statements": [stmt]}


def small_catalog() -> list[CategoryEntry]:
    """A compact catalog with deliberate keyword overlaps for ordering tests."""

    return [
        CategoryEntry(
            value="food_groceries",
            name="Food & Groceries",
            group=SemanticGroup.EXPENSE,
            description="Food, groceries, restaurants, and dining",
            keywords=("shoprite", "market", "food", "restaurant", "kfc", "pizza"),
            sort_order=1,
        ),
        CategoryEntry(
            value="transportation",
            name="Transportation",
            group=SemanticGroup.EXPENSE,
            description="Fuel, public transport, ride-hailing, vehicle maintenance",
            keywords=("uber", "bolt", "taxi", "fuel", "petrol"),
            sort_order=2,
        ),
        CategoryEntry(
            value="shopping",
            name="Shopping",
            group=SemanticGroup.EXPENSE,
            description="Clothing, electronics, personal items",
            keywords=("jumia", "market", "store"),
            sort_order=9,
        ),
        CategoryEntry(
            value="salary",
            name="Salary",
            group=SemanticGroup.INCOME,
            description="Monthly salary and wages",
            keywords=("salary", "payroll", "wage"),
            sort_order=1,
        ),
        CategoryEntry(
            value="other_income",
            name="Other Income",
            group=SemanticGroup.INCOME,
            description=None,
            keywords=("refund", "cashback"),
            sort_order=7,
        ),
        CategoryEntry(
            value="vat",
            name="VAT",
            group=SemanticGroup.FEE,
            description="Value Added Tax",
            keywords=("vat",),
            sort_order=1,
        ),
        CategoryEntry(
            value="other_fees",
            name="Other Fees",
            group=SemanticGroup.FEE,
            description="Miscellaneous fees and charges",
            keywords=("sms charge", "sms alert", "maintenance fee"),
            sort_order=7,
        ),
    ]
