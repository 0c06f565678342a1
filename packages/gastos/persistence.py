"""Persistence for transactions and classification rules.

Functions here take an active SQLAlchemy ``Session`` and perform one small
operation each. :class:`Persister` wraps them as the single writer used by the
ingest consumer and the resolver: every ``save``/``learn`` commits on its own,
and insert errors are logged and counted rather than raised so one bad row
does not abort an import.

Scope:
- Create the schema and seed the bootstrap rules (idempotent).
- Append transactions to ``transactions``.
- Append rules to ``rules`` with insert-or-ignore semantics on ``keyword``.
- Read rules (insertion order) and transactions (id order) back.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import insert, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .db.client import get_engine, session_scope
from .db.models import Base, RuleRow, TransactionRow
from .errors import StoreError
from .logging_setup import get_logger
from .models import DEFAULT_RULES, Rule, Transaction

logger = get_logger("gastos.persistence")


def open_store(database_url: str | None = None, *, seed: Iterable[Rule] = DEFAULT_RULES) -> Engine:
    """Open the database, create the schema and seed the bootstrap rules.

    Raises :class:`StoreError` on any database failure; callers must not start
    the ingest pipeline without a working store.
    """

    try:
        engine = get_engine(database_url=database_url)
        Base.metadata.create_all(bind=engine)
        with session_scope(database_url=database_url) as session:
            added = seed_rules(session, seed)
    except SQLAlchemyError as e:
        raise StoreError(f"cannot open database: {e}") from e
    if added:
        logger.info("seeded %d default rule(s)", added)
    return engine


def _insert_or_ignore(values: Mapping[str, Any]):
    stmt = sqlite_insert(RuleRow).values(**values)
    return stmt.on_conflict_do_nothing(index_elements=[RuleRow.keyword])


def insert_rule(session: Session, keyword: str, category: str) -> bool:
    """Insert a rule unless ``keyword`` already exists; return whether it was added."""

    result = session.execute(_insert_or_ignore({"keyword": keyword, "category": category}))
    return result.rowcount == 1


def seed_rules(session: Session, rules: Iterable[Rule]) -> int:
    """Insert-or-ignore each rule in order; return the number actually added."""

    return sum(1 for r in rules if insert_rule(session, r.keyword, r.category))


def load_rules(session: Session) -> list[Rule]:
    """Return all usable rules in insertion order.

    Rows with an empty keyword or category are skipped: an empty keyword would
    match every description and an empty category cannot be persisted.
    """

    rows = session.execute(
        select(RuleRow.keyword, RuleRow.category).order_by(RuleRow.id)
    ).all()
    rules: list[Rule] = []
    for keyword, category in rows:
        if not keyword or not category:
            logger.warning("ignoring unusable rule %r -> %r", keyword, category)
            continue
        rules.append(Rule(keyword, category))
    return rules


def insert_transaction(session: Session, tx: Transaction, category: str) -> None:
    session.execute(
        insert(TransactionRow).values(
            date=tx.date,
            amount=tx.amount,
            description=tx.description,
            category=category,
        )
    )


def fetch_transactions(session: Session) -> list[Transaction]:
    """Return every persisted transaction in id (insertion) order."""

    rows = session.execute(
        select(
            TransactionRow.date,
            TransactionRow.amount,
            TransactionRow.description,
            TransactionRow.category,
        ).order_by(TransactionRow.id)
    ).all()
    return [
        Transaction(date=d, amount=amount, description=description, category=category)
        for d, amount, description, category in rows
    ]


class Persister:
    """Single writer for ``transactions`` and appender for ``rules``.

    Not thread-safe by itself: the ingest pipeline feeds it from one consumer
    thread and the resolver uses it only after ingest has drained.
    """

    def __init__(self, *, database_url: str | None = None) -> None:
        self._database_url = database_url
        self.saved = 0
        self.learned = 0
        self.failures = 0

    def save(self, tx: Transaction, category: str) -> bool:
        """Append ``tx`` with ``category``; return ``False`` when the insert failed."""

        if not category:
            raise ValueError("category must be non-empty")
        try:
            with session_scope(database_url=self._database_url) as session:
                insert_transaction(session, tx, category)
        except SQLAlchemyError as e:
            self.failures += 1
            logger.error("failed to save %s %s: %s", tx.date, tx.description, e)
            return False
        self.saved += 1
        return True

    def learn(self, keyword: str, category: str) -> bool:
        """Append a rule; ``False`` when the keyword already existed or the insert failed."""

        try:
            with session_scope(database_url=self._database_url) as session:
                added = insert_rule(session, keyword, category)
        except SQLAlchemyError as e:
            self.failures += 1
            logger.error("failed to learn rule %r -> %r: %s", keyword, category, e)
            return False
        if added:
            self.learned += 1
            logger.info("learned rule %r -> %r", keyword, category)
        return added


__all__ = [
    "Persister",
    "fetch_transactions",
    "insert_rule",
    "insert_transaction",
    "load_rules",
    "open_store",
    "seed_rules",
]
