"""Public interface for the ``statement_import`` package.

This module exposes the pipeline entry points, the stage functions and the
public models/errors as the stable import surface. There is no runtime logic
here, only symbol re-exports.
"""

from .categories import (
    CategoryRepository,
    InMemoryCategoryRepository,
    SqlCategoryRepository,
    load_catalog_json,
    reseed_categories,
)
from .categorize import categorization_coverage, categorize_transaction, categorize_transactions
from .category_mapper import CategoryMapper
from .errors import (
    BlockedResponseError,
    EmptyExtractionError,
    EmptyResponseError,
    IncorrectPasswordError,
    InvalidResponseError,
    LlmResponseError,
    ParseCancelledError,
    PasswordRequiredError,
    PdfExtractionError,
    PdfPasswordError,
    StatementImportError,
    StatementShapeInvalidError,
)
from .fees import reconcile_fees
from .llm_parser import StatementParser
from .model_client import ModelReply, OpenAIModelClient, StatementModelClient
from .models import (
    CategorizationCoverage,
    CategoryEntry,
    CategoryRule,
    CategorySuggestion,
    Confidence,
    ParsedTransaction,
    SemanticGroup,
    StatementParseResult,
    StatementPeriod,
    TransactionFlag,
    TransactionType,
    ValidationSummary,
)
from .pdf_extraction import extract_text
from .pipeline import StatementImportResult, import_statement_text, process_statement
from .statement_shape import ShapeValidation, ensure_statement_shape, validate_statement_shape
from .validation import (
    flag_description,
    validate_transaction,
    validate_transactions,
    validation_summary,
)

__all__ = [
    # Pipeline
    "process_statement",
    "import_statement_text",
    "StatementImportResult",
    # Stages
    "extract_text",
    "validate_statement_shape",
    "ensure_statement_shape",
    "ShapeValidation",
    "CategoryMapper",
    "StatementParser",
    "reconcile_fees",
    "categorize_transaction",
    "categorize_transactions",
    "categorization_coverage",
    "validate_transaction",
    "validate_transactions",
    "validation_summary",
    "flag_description",
    # Catalog
    "CategoryRepository",
    "InMemoryCategoryRepository",
    "SqlCategoryRepository",
    "load_catalog_json",
    "reseed_categories",
    # Model access
    "StatementModelClient",
    "OpenAIModelClient",
    "ModelReply",
    # Models / types
    "ParsedTransaction",
    "StatementParseResult",
    "StatementPeriod",
    "TransactionType",
    "Confidence",
    "TransactionFlag",
    "SemanticGroup",
    "CategoryEntry",
    "CategoryRule",
    "CategorySuggestion",
    "ValidationSummary",
    "CategorizationCoverage",
    # Errors
    "StatementImportError",
    "PdfExtractionError",
    "PdfPasswordError",
    "PasswordRequiredError",
    "IncorrectPasswordError",
    "EmptyExtractionError",
    "StatementShapeInvalidError",
    "LlmResponseError",
    "BlockedResponseError",
    "EmptyResponseError",
    "InvalidResponseError",
    "ParseCancelledError",
]
