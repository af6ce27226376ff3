from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Integer, String, Text, text, true
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: categories
# ---------------------------


class CategoryRow(Base):
    __tablename__ = "categories"
    __table_args__ = (
        CheckConstraint(
            "category_group IN ('expense', 'income', 'fee')", name="ck_categories_group"
        ),
    )

    # Stable machine identifier (e.g. "food_groceries"); never a display name.
    value: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    category_group: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Lower-case substrings used by keyword classification, in display order.
    keywords: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    # Explicit first-match priority within a group; lower wins.
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=true())
