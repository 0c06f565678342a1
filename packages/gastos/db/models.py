"""SQLAlchemy models for the local finance database.

Two tables live in the SQLite file (``finance.db`` by default):

- ``transactions``: one row per persisted credit-card posting. ``date`` is a
  SQLite ``DATE`` column, which SQLAlchemy stores as ``YYYY-MM-DD`` text.
- ``rules``: keyword-to-category mappings. ``id`` only pins insertion order
  for the classifier; ``keyword`` is the natural unique key.
"""

from __future__ import annotations

import datetime as dt

from sqlalchemy import CheckConstraint, Date, Float, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class TransactionRow(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    # Upper-cased on ingest; see gastos.models.normalize_description.
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("category <> ''", name="ck_transactions_category_non_empty"),
    )


class RuleRow(Base):
    __tablename__ = "rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    keyword: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    category: Mapped[str] = mapped_column(Text, nullable=False)


__all__ = ["Base", "RuleRow", "TransactionRow"]
