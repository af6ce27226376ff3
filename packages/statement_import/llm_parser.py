"""Model-assisted statement parsing.

Public API:
    - :class:`StatementParser`

The parser builds one prompt for the whole statement, issues a single model
call through a :class:`~statement_import.model_client.StatementModelClient`,
and normalizes the JSON answer into a :class:`StatementParseResult`. Entries
missing a required field are dropped (logged) without failing the batch; an
empty transaction list is a valid "nothing found" result.
"""

from __future__ import annotations

import datetime as dt
import json
from collections.abc import Callable, Collection, Mapping
from decimal import Decimal
from typing import Any

from . import prompting
from .category_mapper import CategoryMapper
from .errors import (
    BlockedResponseError,
    EmptyResponseError,
    InvalidResponseError,
    ParseCancelledError,
)
from .fees import reconcile_fees, to_decimal
from .logging_setup import get_logger
from .model_client import OpenAIModelClient, StatementModelClient
from .models import (
    ParsedTransaction,
    StatementParseResult,
    StatementPeriod,
    TransactionType,
)

_logger = get_logger("statement_import.llm_parser")

DEFAULT_BANK_NAME = "Unknown Bank"
REQUIRED_FIELDS: tuple[str, ...] = ("date", "description", "amount", "type")

# Tried in order after ISO parsing fails; day-first is the statement norm.
_DATE_FORMATS: tuple[str, ...] = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y/%m/%d",
    "%d %b %Y",
    "%d-%b-%Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d/%m/%y",
    "%d-%b-%y",
)


def normalize_date(raw: Any) -> dt.date:
    """Parse a model-supplied date; unparseable input falls back to today.

    The fallback is lossy and is logged at WARNING level.
    """

    if isinstance(raw, dt.datetime):
        return raw.date()
    if isinstance(raw, dt.date):
        return raw
    s = str(raw).strip() if raw is not None else ""
    if s:
        try:
            return dt.date.fromisoformat(s)
        except ValueError:
            pass
        try:
            return dt.datetime.fromisoformat(s).date()
        except ValueError:
            pass
        for fmt in _DATE_FORMATS:
            try:
                return dt.datetime.strptime(s, fmt).date()
            except ValueError:
                continue
    _logger.warning("llm_parser:date_fallback raw=%r", raw)
    return dt.date.today()


def _optional_text(raw: Any) -> str | None:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


def _decode_statement(text: str) -> Mapping[str, Any]:
    """Return the single statement object from the model's JSON text.

    Accepts ``{"statements": [obj]}`` (the requested shape), a bare
    ``[obj]`` array, or a bare ``obj``.
    """

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidResponseError("Model output was not valid JSON") from e

    if isinstance(decoded, Mapping) and "statements" in decoded:
        decoded = decoded["statements"]
    if isinstance(decoded, list):
        if not decoded:
            raise InvalidResponseError("Invalid LLM response: no statement object returned")
        decoded = decoded[0]
    if not isinstance(decoded, Mapping):
        raise InvalidResponseError("Invalid LLM response: expected a JSON object")
    return decoded


class StatementParser:
    """Turn pre-cleaned statement text into a :class:`StatementParseResult`.

    Parameters
    ----------
    client:
        Model access; defaults to :class:`OpenAIModelClient` for ``model``.
    model:
        Model name used only when ``client`` is not given.
    mapper:
        Catalog snapshot. Supplies the default category listing and the set
        of valid category values; categories outside it are discarded.
    """

    def __init__(
        self,
        client: StatementModelClient | None = None,
        *,
        model: str | None = None,
        mapper: CategoryMapper | None = None,
    ) -> None:
        self._client: StatementModelClient = client or OpenAIModelClient(model=model)
        self._mapper = mapper

    def parse(
        self,
        statement_text: str,
        category_prompt: str | None = None,
        *,
        should_abort: Callable[[], bool] | None = None,
    ) -> StatementParseResult:
        """Parse one statement with a single model call.

        Raises
        ------
        ParseCancelledError
            ``should_abort()`` returned True before or after the call.
        BlockedResponseError, EmptyResponseError, InvalidResponseError
            The model call produced no usable answer.
        """

        if category_prompt is None and self._mapper is not None:
            category_prompt = self._mapper.prompt_description()

        prompt = prompting.build_user_content(statement_text, category_prompt)
        response_format = prompting.build_response_format()

        if should_abort is not None and should_abort():
            _logger.info("llm_parser:cancelled stage=before_call")
            raise ParseCancelledError("Statement parsing was cancelled before the model call")

        reply = self._client.generate(
            prompt,
            response_format,
            instructions=prompting.build_system_instructions(),
        )

        if should_abort is not None and should_abort():
            _logger.info("llm_parser:cancelled stage=after_call")
            raise ParseCancelledError("Statement parsing was cancelled; result discarded")

        if reply.block_reason:
            _logger.warning("llm_parser:blocked reason=%s", reply.block_reason)
            raise BlockedResponseError(reply.block_reason)
        if not reply.text or not reply.text.strip():
            raise EmptyResponseError()

        valid = {e.value for e in self._mapper.entries} if self._mapper is not None else None
        return normalize_response(_decode_statement(reply.text), valid_categories=valid)


def normalize_response(
    body: Mapping[str, Any],
    *,
    valid_categories: Collection[str] | None = None,
) -> StatementParseResult:
    """Normalize one decoded statement object.

    Raises :class:`InvalidResponseError` when ``transactions`` is missing or
    not a list. Individual malformed entries are dropped.
    """

    raw_transactions = body.get("transactions")
    if not isinstance(raw_transactions, list):
        raise InvalidResponseError("Invalid LLM response: transactions array missing")

    transactions: list[ParsedTransaction] = []
    dropped = 0
    for position, raw in enumerate(raw_transactions):
        tx = _normalize_transaction(position, raw, valid_categories=valid_categories)
        if tx is None:
            dropped += 1
        else:
            transactions.append(tx)

    period: StatementPeriod | None = None
    raw_period = body.get("period")
    if isinstance(raw_period, Mapping):
        period = StatementPeriod(
            from_=normalize_date(raw_period.get("from")),
            to=normalize_date(raw_period.get("to")),
        )

    _logger.info(
        "llm_parser:normalized transactions=%d dropped=%d",
        len(transactions),
        dropped,
    )
    return StatementParseResult(
        bank_name=_optional_text(body.get("bankName")) or DEFAULT_BANK_NAME,
        account_number=_optional_text(body.get("accountNumber")),
        period=period,
        transactions=tuple(transactions),
    )


def _normalize_transaction(
    position: int,
    raw: Any,
    *,
    valid_categories: Collection[str] | None,
) -> ParsedTransaction | None:
    if not isinstance(raw, Mapping):
        _logger.warning("llm_parser:entry_dropped index=%d reason=not_an_object", position)
        return None

    missing = [k for k in REQUIRED_FIELDS if raw.get(k) is None]
    if missing:
        _logger.warning(
            "llm_parser:entry_dropped index=%d reason=missing_fields fields=%s",
            position,
            ",".join(missing),
        )
        return None

    amount: Decimal | None = to_decimal(raw["amount"])
    if amount is None:
        _logger.warning("llm_parser:entry_dropped index=%d reason=non_numeric_amount", position)
        return None

    category = _optional_text(raw.get("category"))
    if category is not None and valid_categories is not None and category not in valid_categories:
        _logger.info("llm_parser:category_discarded index=%d category=%s", position, category)
        category = None

    fees = reconcile_fees(amount, raw)
    return ParsedTransaction(
        date=normalize_date(raw["date"]),
        description=str(raw["description"]).strip(),
        amount=amount,
        type=TransactionType.CREDIT if raw["type"] == "credit" else TransactionType.DEBIT,
        category=category,
        balance=to_decimal(raw.get("balance")),
        fee_note=_optional_text(raw.get("feeNote")),
        total=fees.total,
        **fees.fees,
    )


__all__ = ["DEFAULT_BANK_NAME", "StatementParser", "normalize_date", "normalize_response"]
