"""db: local SQLite store (SQLAlchemy models and session helpers).

Public exports
--------------
- ``Base`` and ``metadata`` for schema creation
- ORM models ``TransactionRow`` and ``RuleRow``
- Engine/session helpers in ``gastos.db.client``
"""

from __future__ import annotations

from .client import dispose_engines, get_engine, session_scope
from .models import Base, RuleRow, TransactionRow

metadata = Base.metadata

__all__ = [
    "Base",
    "RuleRow",
    "TransactionRow",
    "dispose_engines",
    "get_engine",
    "metadata",
    "session_scope",
]
