"""Category catalog access.

The catalog (value, name, semantic group, description, keywords, priority) is
owned by an external store. This module defines the narrow repository seam
the mapper and parser depend on, plus two implementations:

- ``InMemoryCategoryRepository``: a fixed list of entries, typically the
  bundled seed catalog (``seeds/categories.v1.json``) or a test fixture.
- ``SqlCategoryRepository``: reads the ``categories`` table through
  SQLAlchemy.

Every repository returns active entries only, in catalog order: groups as
expense, income, fee; within a group by ``(sort_order, value)``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from importlib import resources
from os import PathLike
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import delete, select

from .db.client import session_scope
from .db.models import CategoryRow
from .logging_setup import get_logger
from .models import GROUP_ORDER, CategoryEntry, SemanticGroup

_logger = get_logger("statement_import.categories")

SEED_RESOURCE = "categories.v1.json"


def catalog_sort_key(entry: CategoryEntry) -> tuple[int, int, str]:
    return (GROUP_ORDER.index(entry.group), entry.sort_order, entry.value)


def order_catalog(entries: Iterable[CategoryEntry]) -> list[CategoryEntry]:
    """Return active entries in catalog order, de-duplicated by ``value``.

    Duplicate values keep the last occurrence (last writer wins).
    """

    by_value: dict[str, CategoryEntry] = {}
    for entry in entries:
        by_value[entry.value] = entry
    return sorted((e for e in by_value.values() if e.is_active), key=catalog_sort_key)


@runtime_checkable
class CategoryRepository(Protocol):
    def list_categories(self) -> list[CategoryEntry]:
        """Return active categories in catalog order."""
        ...


class InMemoryCategoryRepository:
    """Repository over a fixed list of catalog entries."""

    def __init__(self, entries: Iterable[CategoryEntry | Mapping[str, Any]]) -> None:
        self._entries = order_catalog(
            e if isinstance(e, CategoryEntry) else CategoryEntry.model_validate(e) for e in entries
        )

    @classmethod
    def from_seed(cls, path: str | PathLike[str] | None = None) -> InMemoryCategoryRepository:
        return cls(load_catalog_json(path))

    def list_categories(self) -> list[CategoryEntry]:
        return list(self._entries)


def _row_to_entry(row: CategoryRow) -> CategoryEntry:
    return CategoryEntry(
        value=row.value,
        name=row.name,
        group=SemanticGroup(row.category_group),
        description=row.description,
        keywords=tuple(k for k in (row.keywords or []) if isinstance(k, str)),
        sort_order=row.sort_order,
        is_active=bool(row.is_active),
    )


class SqlCategoryRepository:
    """Repository reading the ``categories`` table.

    Each call takes a fresh snapshot; administrative edits are picked up by
    the next request.
    """

    def __init__(self, *, database_url: str | None = None) -> None:
        self._database_url = database_url

    def list_categories(self) -> list[CategoryEntry]:
        with session_scope(database_url=self._database_url) as session:
            rows = (
                session.execute(select(CategoryRow).where(CategoryRow.is_active.is_(True)))
                .scalars()
                .all()
            )
            entries = [_row_to_entry(r) for r in rows]
        if not entries:
            raise RuntimeError("no active categories present in the category store")
        return order_catalog(entries)


# ---------------------------------------------------------------------------
# Seed catalog I/O
# ---------------------------------------------------------------------------


def load_catalog_json(path: str | PathLike[str] | None = None) -> list[CategoryEntry]:
    """Load catalog entries from JSON (the bundled seed when ``path`` is None)."""

    if path is None:
        raw_text = resources.files("statement_import.seeds").joinpath(SEED_RESOURCE).read_text(
            encoding="utf-8"
        )
    else:
        raw_text = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw_text)
    if not isinstance(data, list):
        raise ValueError("Category catalog JSON must be a list of category objects")
    return [CategoryEntry.model_validate(item) for item in data]


def reseed_categories(*, database_url: str | None, entries: Sequence[CategoryEntry]) -> int:
    """Replace the ``categories`` table contents with ``entries``.

    Returns the number of rows written.
    """

    with session_scope(database_url=database_url) as session:
        session.execute(delete(CategoryRow))
        for entry in entries:
            session.add(
                CategoryRow(
                    value=entry.value,
                    name=entry.name,
                    category_group=entry.group.value,
                    description=entry.description,
                    keywords=list(entry.keywords),
                    sort_order=entry.sort_order,
                    is_active=entry.is_active,
                )
            )
        session.flush()
    _logger.info("categories:reseeded rows=%d", len(entries))
    return len(entries)


__all__ = [
    "CategoryRepository",
    "InMemoryCategoryRepository",
    "SqlCategoryRepository",
    "catalog_sort_key",
    "load_catalog_json",
    "order_catalog",
    "reseed_categories",
]
