"""CLI for the ``statement_import`` package.

Environment variables (``OPENAI_API_KEY``, ``DATABASE_URL``, ...) are loaded
from a local ``.env`` using ``python-dotenv`` before any command runs.
Business logic lives in ``statement_import.pipeline`` and the modules it
composes; commands here only resolve inputs, call it, and render output.

Exit status is 0 on success, 2 when the PDF needs a (different) password so
wrappers can re-prompt, and 1 for every other failure.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from .categories import (
    CategoryRepository,
    InMemoryCategoryRepository,
    SqlCategoryRepository,
    load_catalog_json,
    reseed_categories,
)
from .category_mapper import CategoryMapper
from .config import require_openai_api_key
from .db import get_engine, metadata
from .errors import PdfPasswordError, StatementImportError
from .logging_setup import configure_logging
from .model_client import OpenAIModelClient
from .models import ParsedTransaction, SemanticGroup
from .pdf_extraction import extract_text
from .pipeline import StatementImportResult, process_statement
from .statement_shape import validate_statement_shape
from .validation import flag_description

_PASSWORD_EXIT_CODE = 2

console = Console()


# ---- Small module-level helpers used by CLI commands -------------------------


def _fail(message: str, code: int = 1) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code)


def _resolve_repository(catalog: Path | None, database_url: str | None) -> CategoryRepository:
    """Pick the catalog source for a command.

    An explicit ``--catalog`` JSON wins, then ``--database-url`` /
    ``DATABASE_URL``; otherwise the bundled seed catalog is used.
    """

    if catalog is not None:
        return InMemoryCategoryRepository.from_seed(catalog)
    if database_url or os.getenv("DATABASE_URL"):
        return SqlCategoryRepository(database_url=database_url)
    return InMemoryCategoryRepository.from_seed()


def _read_pdf(pdf_path: Path) -> bytes:
    try:
        return pdf_path.read_bytes()
    except FileNotFoundError:
        raise _fail(f"File not found: {pdf_path}") from None
    except PermissionError:
        raise _fail(f"Permission denied: {pdf_path}") from None


def _fees_total(tx: ParsedTransaction) -> str:
    if tx.total is None:
        return ""
    return f"{tx.total - tx.amount:,.2f}"


def _render_table(result: StatementImportResult) -> None:
    stmt = result.statement
    title = stmt.bank_name
    if stmt.account_number:
        title += f" ({stmt.account_number})"
    if stmt.period is not None:
        title += f" {stmt.period.from_.isoformat()} to {stmt.period.to.isoformat()}"

    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Type")
    table.add_column("Amount", justify="right")
    table.add_column("Fees", justify="right")
    table.add_column("Category")
    table.add_column("Confidence")
    table.add_column("Flags")
    for tx in stmt.transactions:
        table.add_row(
            tx.date.isoformat(),
            tx.description,
            str(tx.type),
            f"{tx.amount:,.2f}",
            _fees_total(tx),
            tx.category or "",
            str(tx.confidence or ""),
            ", ".join(flag_description(f) for f in tx.flags or ()),
        )
    console.print(table)

    s = result.summary
    console.print(
        f"total={s.total} needs_review={s.needs_review} auto_categorized={s.auto_categorized} "
        f"flagged={s.flagged} coverage={result.coverage.coverage_percentage:.1f}%"
    )


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Extract, categorize and validate transactions from bank statement PDFs using "
        "OpenAI (Responses API). Loads OPENAI_API_KEY from a local .env before running."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect these when used as default values below.
PASSWORD_OPTION: OptionInfo = typer.Option(
    ..., "--password", help="Password for an encrypted PDF."
)
CATALOG_OPTION: OptionInfo = typer.Option(
    ...,
    "--catalog",
    help="Category catalog JSON (defaults to DATABASE_URL, then the bundled catalog).",
    dir_okay=False,
    exists=True,
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    ..., "--database-url", help="Override DATABASE_URL (falls back to env var)."
)


@app.command("parse")
def parse_cmd(
    pdf_path: Annotated[Path, typer.Argument(help="Bank statement PDF", dir_okay=False)],
    *,
    password: Annotated[str | None, PASSWORD_OPTION] = None,
    catalog: Annotated[Path | None, CATALOG_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
    model: str | None = typer.Option(None, help="Override STATEMENT_IMPORT_MODEL."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Run the full import pipeline on one statement PDF."""

    try:
        require_openai_api_key()
    except RuntimeError as e:
        raise _fail(str(e)) from None

    data = _read_pdf(pdf_path)
    try:
        repository = _resolve_repository(catalog, database_url)
        result = process_statement(
            data,
            repository=repository,
            password=password,
            client=OpenAIModelClient(model=model),
        )
    except PdfPasswordError as e:
        raise _fail(str(e), _PASSWORD_EXIT_CODE) from None
    except StatementImportError as e:
        raise _fail(str(e)) from None
    except (RuntimeError, ValueError) as e:
        raise _fail(f"statement import failed: {e}") from None

    if as_json:
        typer.echo(json.dumps(result.to_wire(), indent=2, ensure_ascii=False))
    else:
        _render_table(result)


@app.command("check")
def check_cmd(
    pdf_path: Annotated[Path, typer.Argument(help="Bank statement PDF", dir_okay=False)],
    *,
    password: Annotated[str | None, PASSWORD_OPTION] = None,
) -> None:
    """Extract text and run the statement shape gate only (no model call)."""

    data = _read_pdf(pdf_path)
    try:
        text = extract_text(data, password=password)
    except PdfPasswordError as e:
        raise _fail(str(e), _PASSWORD_EXIT_CODE) from None
    except StatementImportError as e:
        raise _fail(str(e)) from None

    shape = validate_statement_shape(text)
    if not shape.valid:
        raise _fail(shape.reason or "not a bank statement")
    typer.echo(f"OK: looks like a bank statement ({len(text)} characters extracted)")


@app.command("suggest")
def suggest_cmd(
    description: Annotated[str, typer.Argument(help="Transaction description")],
    *,
    catalog: Annotated[Path | None, CATALOG_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Rank up to three categories for a description by keyword hits."""

    try:
        mapper = CategoryMapper.from_repository(_resolve_repository(catalog, database_url))
    except (RuntimeError, ValueError) as e:
        raise _fail(f"failed to load categories: {e}") from None

    suggestions = mapper.suggest(description)
    if not suggestions:
        typer.echo("No matching categories.")
        return
    for s in suggestions:
        typer.echo(f"{s.category_value}\t{s.confidence:.1f}")


@app.command("categories")
def categories_cmd(
    *,
    group: SemanticGroup | None = typer.Option(None, help="Only list one semantic group."),
    catalog: Annotated[Path | None, CATALOG_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Print the category listing exactly as it is embedded in the prompt."""

    try:
        mapper = CategoryMapper.from_repository(_resolve_repository(catalog, database_url))
    except (RuntimeError, ValueError) as e:
        raise _fail(f"failed to load categories: {e}") from None
    typer.echo(mapper.prompt_description(group))


@app.command("seed-categories")
def seed_categories_cmd(
    *,
    catalog: Annotated[Path | None, CATALOG_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Create the categories table if needed and replace its rows from JSON."""

    try:
        entries = load_catalog_json(catalog)
        metadata.create_all(get_engine(database_url=database_url))
        written = reseed_categories(database_url=database_url, entries=entries)
    except Exception as e:  # noqa: BLE001 - report any store failure on stderr
        raise _fail(f"seeding categories failed: {e}") from None
    typer.echo(f"Seeded {written} categories.")


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m statement_import.cli`
    app()
