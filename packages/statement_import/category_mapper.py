"""Keyword-based category classification over a catalog snapshot.

A :class:`CategoryMapper` is built once per request from the active catalog
(``CategoryMapper.from_repository(repo)``). Iteration order is explicit and
part of the observable contract: groups run expense, income, fee, and within
a group categories run by ``(sort_order, value)``. ``match`` returns the
**first** category in that order with a keyword hit, not the best one.
"""

from __future__ import annotations

from collections.abc import Iterable

from .categories import CategoryRepository, order_catalog
from .logging_setup import get_logger
from .models import GROUP_ORDER, CategoryEntry, CategoryRule, CategorySuggestion, SemanticGroup

_logger = get_logger("statement_import.category_mapper")

_MAX_SUGGESTIONS = 3
_CONFIDENCE_PER_HIT = 0.3
_MAX_PROMPT_EXAMPLES = 5

_SECTION_HEADINGS: dict[SemanticGroup, str] = {
    SemanticGroup.EXPENSE: "EXPENSE CATEGORIES (use for debits/money out)",
    SemanticGroup.INCOME: "INCOME CATEGORIES (use for credits/money in)",
    SemanticGroup.FEE: "FEE CATEGORIES (use for bank charges/fees)",
}

_DEFAULT_DESCRIPTIONS: dict[SemanticGroup, str] = {
    SemanticGroup.EXPENSE: "General expense category",
    SemanticGroup.INCOME: "General income category",
    SemanticGroup.FEE: "Fee category",
}

_VALUE_REMINDER = (
    '**IMPORTANT**: Return the category VALUE (e.g., "{value}"), '
    'NOT the display name (e.g., "{name}").'
)


class CategoryMapper:
    """Classifier and prompt renderer for one catalog snapshot."""

    def __init__(self, entries: Iterable[CategoryEntry]) -> None:
        self._entries: list[CategoryEntry] = order_catalog(entries)
        self._by_value: dict[str, CategoryEntry] = {e.value: e for e in self._entries}
        # Keywords are copied so add_keyword() never leaks into the caller's entries
        self._keywords: dict[str, list[str]] = {e.value: list(e.keywords) for e in self._entries}

    @classmethod
    def from_repository(cls, repository: CategoryRepository) -> CategoryMapper:
        entries = repository.list_categories()
        _logger.debug("category_mapper:snapshot categories=%d", len(entries))
        return cls(entries)

    # ---- Catalog views -------------------------------------------------------

    @property
    def entries(self) -> list[CategoryEntry]:
        return list(self._entries)

    def _entries_in(self, group: SemanticGroup | None) -> list[CategoryEntry]:
        if group is None:
            return list(self._entries)
        return [e for e in self._entries if e.group == group]

    def rules(self, group: SemanticGroup | None = None) -> list[CategoryRule]:
        """Return the classification rules in iteration order."""

        return [
            CategoryRule(
                category_value=e.value,
                semantic_group=e.group,
                keywords=tuple(self._keywords[e.value]),
            )
            for e in self._entries_in(group)
        ]

    def is_valid(self, value: str | None) -> bool:
        return value is not None and value in self._by_value

    def keywords_for(self, value: str) -> list[str]:
        return list(self._keywords.get(value, ()))

    def add_keyword(self, value: str, keyword: str) -> None:
        """Teach ``keyword`` (lower-cased) to category ``value`` in this snapshot.

        Raises ``KeyError`` for a value not present in the snapshot. Blank
        keywords and keywords already known are ignored.
        """

        if value not in self._keywords:
            raise KeyError(value)
        kw = keyword.strip().lower()
        if kw and kw not in self._keywords[value]:
            self._keywords[value].append(kw)
            _logger.debug("category_mapper:keyword_added value=%s keyword=%s", value, kw)

    # ---- Classification ------------------------------------------------------

    def match(self, description: str | None, group: SemanticGroup) -> str | None:
        """Return the first category in ``group`` whose keyword occurs in ``description``."""

        desc = (description or "").strip().lower()
        if not desc:
            return None
        for entry in self._entries_in(group):
            if any(kw in desc for kw in self._keywords[entry.value]):
                return entry.value
        return None

    def suggest(self, description: str | None) -> list[CategorySuggestion]:
        """Rank up to three categories across all groups by keyword hits.

        ``confidence = min(hits * 0.3, 1.0)``. Ties keep catalog order. The
        result assists manual correction and is never applied automatically.
        """

        desc = (description or "").strip().lower()
        if not desc:
            return []

        scored: list[tuple[int, int, str]] = []
        for position, entry in enumerate(self._entries):
            hits = sum(1 for kw in self._keywords[entry.value] if kw in desc)
            if hits > 0:
                scored.append((hits, position, entry.value))

        # sort is stable; negate hits for descending order, position breaks ties
        scored.sort(key=lambda t: (-t[0], t[1]))
        return [
            CategorySuggestion(value, min(hits * _CONFIDENCE_PER_HIT, 1.0))
            for hits, _pos, value in scored[:_MAX_SUGGESTIONS]
        ]

    # ---- Prompt context ------------------------------------------------------

    def prompt_description(self, group: SemanticGroup | None = None) -> str:
        """Render the catalog listing embedded in the parsing prompt.

        One section per semantic group (or only ``group``), each line giving
        value, display name and description, followed by up to five example
        keywords. Ends with a reminder to answer with the value.
        """

        groups = GROUP_ORDER if group is None else (group,)
        lines: list[str] = []
        for g in groups:
            if lines:
                lines.append("")
            lines.append(f"**{_SECTION_HEADINGS[g]}:**")
            for entry in self._entries_in(g):
                desc = entry.description or _DEFAULT_DESCRIPTIONS[g]
                lines.append(f'- value: "{entry.value}" | name: "{entry.name}" - {desc}')
                examples = self._keywords[entry.value][:_MAX_PROMPT_EXAMPLES]
                if examples:
                    lines.append(f"  Examples: {', '.join(examples)}")

        sample = next(iter(self._entries_in(group)), None)
        lines.append("")
        lines.append(
            _VALUE_REMINDER.format(
                value=sample.value if sample else "food_groceries",
                name=sample.name if sample else "Food & Groceries",
            )
        )
        return "\n".join(lines)


__all__ = ["CategoryMapper"]
