"""Prompt construction and the strict response schema for statement parsing.

This module builds:
- The system instructions for the extraction task.
- The user content: extraction rules, the category listing rendered by
  :meth:`CategoryMapper.prompt_description`, and the statement text delimited
  by ``BEGIN_STATEMENT_TEXT`` / ``END_STATEMENT_TEXT`` markers.
- The strict ``response_format`` (JSON Schema) object for the OpenAI
  Responses API.
"""

from __future__ import annotations

from typing import Any

from openai.types.responses.response_format_text_json_schema_config_param import (
    ResponseFormatTextJSONSchemaConfigParam,
)

BEGIN_STATEMENT = "BEGIN_STATEMENT_TEXT\n"
END_STATEMENT = "\nEND_STATEMENT_TEXT"

_NO_CATEGORY_LISTING = (
    "No category listing is available for this statement. Set every "
    '"category" to null.'
)


def build_system_instructions() -> str:
    return (
        "You are a finance expert that extracts transactions from bank statements. "
        "Extract every transaction exactly once, never invent transactions, and output "
        "JSON only that conforms to the specified schema."
    )


def build_user_content(statement_text: str, category_prompt: str | None = None) -> str:
    """Return the user message for one statement.

    ``category_prompt`` is the catalog listing; when absent the model is told
    to leave categories null (the fallback categorizer fills them later).
    """

    listing = category_prompt.strip() if category_prompt and category_prompt.strip() else None

    sections: list[str] = [
        "Parse the following bank statement and extract ALL transactions.",
        "",
        "IMPORTANT INSTRUCTIONS:",
        "1. Extract every single transaction from the statement; do not skip any.",
        '2. Use "debit" for money going out (withdrawals, payments, transfers out) and '
        '"credit" for money coming in (deposits, income, transfers in).',
        "3. Write dates in ISO format (YYYY-MM-DD).",
        "4. Write amounts as plain numbers without currency symbols or thousands separators.",
        "5. Keep each description as it appears on the statement, trimmed but complete.",
        "6. Extract the bank name, account number and statement period when present.",
        "7. Assign each transaction a category VALUE taken only from the category listing "
        "below. Never return a display name and never invent a category; use null when "
        "nothing fits.",
        "",
        "FEES:",
        "- Lines have been pre-grouped: fee figures that appear on the same line as a "
        "transaction (VAT, service fee, commission, stamp duty, transfer fee, processing "
        "fee, other charges) are components of that transaction, not separate entries.",
        '- For such a line, "amount" is the base transaction amount only. Put each fee in '
        'its own field (vat, serviceFee, commission, stampDuty, transferFee, processingFee, '
        "otherFees) and describe anything unusual in feeNote.",
        "- A transaction that IS itself a fee (for example an SMS alert charge, a card "
        "maintenance fee, a standalone VAT or stamp duty debit) has the charge as its "
        '"amount", a fee category, and no separate fee fields.',
        "- Only use the fee fields when the line carries a fee ON TOP of a base amount.",
        "- Fees are always non-negative numbers. Use null for fees that do not apply.",
        "",
        "CATEGORIES:",
        listing or _NO_CATEGORY_LISTING,
        "",
        "Return a single object in the statements array.",
        "",
        "Bank statement text:",
        f"{BEGIN_STATEMENT}{statement_text}{END_STATEMENT}",
    ]
    return "\n".join(sections)


def _nullable(schema: dict[str, Any]) -> dict[str, Any]:
    return {"anyOf": [schema, {"type": "null"}]}


_FEE_PROPERTIES: tuple[str, ...] = (
    "vat",
    "serviceFee",
    "commission",
    "stampDuty",
    "transferFee",
    "processingFee",
    "otherFees",
)


def _transaction_schema() -> dict[str, Any]:
    properties: dict[str, Any] = {
        "date": {"type": "string"},
        "description": {"type": "string"},
        "amount": {"type": "number"},
        "type": {"type": "string", "enum": ["debit", "credit"]},
        "category": {"type": ["string", "null"]},
        "balance": {"type": ["number", "null"]},
    }
    for fee in _FEE_PROPERTIES:
        properties[fee] = {"type": ["number", "null"]}
    properties["feeNote"] = {"type": ["string", "null"]}
    return {
        "type": "object",
        "properties": properties,
        # Strict mode requires every property; optional ones are nullable.
        "required": list(properties),
        "additionalProperties": False,
    }


def build_response_format() -> ResponseFormatTextJSONSchemaConfigParam:
    """Return the strict JSON Schema response_format object.

    Schema shape::

        {"statements": [
            {"bankName": str, "accountNumber": str|null,
             "period": {"from": str, "to": str}|null,
             "transactions": [ {date, description, amount, type, category,
                                balance, <seven fees>, feeNote} ]}
        ]}

    The statements array carries exactly one object; it is wrapped in a root
    object because strict structured output requires an object at the top.
    """

    period = {
        "type": "object",
        "properties": {"from": {"type": "string"}, "to": {"type": "string"}},
        "required": ["from", "to"],
        "additionalProperties": False,
    }
    statement = {
        "type": "object",
        "properties": {
            "bankName": {"type": "string"},
            "accountNumber": {"type": ["string", "null"]},
            "period": _nullable(period),
            "transactions": {"type": "array", "items": _transaction_schema()},
        },
        "required": ["bankName", "accountNumber", "period", "transactions"],
        "additionalProperties": False,
    }
    result: ResponseFormatTextJSONSchemaConfigParam = {
        "type": "json_schema",
        "name": "bank_statement",
        "schema": {
            "type": "object",
            "properties": {"statements": {"type": "array", "items": statement}},
            "required": ["statements"],
            "additionalProperties": False,
        },
        "strict": True,
    }
    return result


__all__ = [
    "BEGIN_STATEMENT",
    "END_STATEMENT",
    "build_response_format",
    "build_system_instructions",
    "build_user_content",
]
