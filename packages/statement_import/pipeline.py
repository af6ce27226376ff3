"""End-to-end statement import.

Stages run strictly in sequence for one upload:

    extract_text -> ensure_statement_shape -> preprocess -> StatementParser
    -> categorize_transactions (fallback) -> validate_transactions

Each request takes its own catalog snapshot from the repository; nothing is
shared between concurrent uploads.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from .categories import CategoryRepository
from .categorize import categorization_coverage, categorize_transactions
from .category_mapper import CategoryMapper
from .llm_parser import StatementParser
from .logging_setup import get_logger
from .model_client import StatementModelClient
from .models import CategorizationCoverage, StatementParseResult, ValidationSummary
from .pdf_extraction import extract_text
from .statement_shape import ensure_statement_shape
from .validation import validate_transactions, validation_summary

_logger = get_logger("statement_import.pipeline")

Preprocessor: TypeAlias = Callable[[str], str]
AbortCheck: TypeAlias = Callable[[], bool]


@dataclass(frozen=True, slots=True)
class StatementImportResult:
    statement: StatementParseResult
    summary: ValidationSummary
    coverage: CategorizationCoverage

    def to_wire(self) -> dict[str, Any]:
        return {
            **self.statement.to_wire(),
            "summary": self.summary.to_wire(),
        }


def import_statement_text(
    text: str,
    *,
    repository: CategoryRepository,
    client: StatementModelClient | None = None,
    preprocess: Preprocessor | None = None,
    should_abort: AbortCheck | None = None,
) -> StatementImportResult:
    """Run the stages after extraction on already-extracted ``text``.

    Raises :class:`StatementShapeInvalidError` before any model call when the
    text does not look like a statement.
    """

    ensure_statement_shape(text)

    cleaned = preprocess(text) if preprocess is not None else text
    mapper = CategoryMapper.from_repository(repository)
    parser = StatementParser(client, mapper=mapper)
    parsed = parser.parse(cleaned, should_abort=should_abort)

    categorized = categorize_transactions(parsed.transactions, mapper)
    validated = validate_transactions(categorized)
    summary = validation_summary(validated)
    coverage = categorization_coverage(validated)

    _logger.info(
        "pipeline:done bank=%s transactions=%d needs_review=%d coverage_pct=%.1f",
        parsed.bank_name,
        summary.total,
        summary.needs_review,
        coverage.coverage_percentage,
    )
    return StatementImportResult(
        statement=parsed.model_copy(update={"transactions": tuple(validated)}),
        summary=summary,
        coverage=coverage,
    )


def process_statement(
    data: bytes,
    *,
    repository: CategoryRepository,
    password: str | None = None,
    client: StatementModelClient | None = None,
    preprocess: Preprocessor | None = None,
    should_abort: AbortCheck | None = None,
) -> StatementImportResult:
    """Import one uploaded statement PDF.

    Parameters
    ----------
    data:
        Raw PDF bytes.
    repository:
        Category catalog source; read once for this request.
    password:
        Optional PDF password.
    client:
        Model access; defaults to the OpenAI Responses client.
    preprocess:
        Statement text cleaner applied after the shape gate; identity when
        omitted.
    should_abort:
        Polled around the model call; a True result raises
        :class:`ParseCancelledError`.

    Raises
    ------
    PasswordRequiredError, IncorrectPasswordError, EmptyExtractionError,
    PdfExtractionError, StatementShapeInvalidError, LlmResponseError,
    ParseCancelledError
    """

    _logger.info("pipeline:start bytes=%d password_supplied=%s", len(data), bool(password))
    text = extract_text(data, password=password)
    return import_statement_text(
        text,
        repository=repository,
        client=client,
        preprocess=preprocess,
        should_abort=should_abort,
    )


__all__ = ["StatementImportResult", "import_statement_text", "process_statement"]
