"""Category store persistence (SQLAlchemy).

Public exports
--------------
- ``Base`` and ``metadata`` for schema creation
- ``CategoryRow`` ORM model
- Engine/session helpers from ``statement_import.db.client``
"""

from __future__ import annotations

from .client import dispose_engines, get_engine, get_session, session_scope
from .models import Base, CategoryRow

metadata = Base.metadata

__all__ = [
    "Base",
    "CategoryRow",
    "metadata",
    "dispose_engines",
    "get_engine",
    "get_session",
    "session_scope",
]
