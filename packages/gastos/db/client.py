"""SQLAlchemy engine/session helpers for the local finance database.

Usage
-----
from gastos.db.client import session_scope

with session_scope(database_url=url) as s:
    s.execute(...)

Only SQLite URLs are accepted. Engines are cached per URL. SQLite connections are opened with
``check_same_thread=False`` because ingest writes happen on the consumer
thread while schema setup and export run on the main thread; the pipeline
guarantees those never overlap.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..errors import StoreError

DEFAULT_DATABASE_URL = "sqlite:///finance.db"

_ENGINES: dict[str, Engine] = {}
_SESSION_MAKERS: dict[str, sessionmaker[Session]] = {}


def resolve_database_url(override: str | None = None) -> str:
    """Return ``override``, else ``$GASTOS_DATABASE_URL``, else the default."""

    return override or os.getenv("GASTOS_DATABASE_URL") or DEFAULT_DATABASE_URL


def _engine_kwargs(url: str) -> dict[str, Any]:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        backend = parsed.get_backend_name()
        raise StoreError(f"unsupported database backend {backend!r}; use a sqlite URL")
    kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        # One shared connection, otherwise every checkout sees an empty database.
        kwargs["poolclass"] = StaticPool
    return kwargs


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the shared engine for ``database_url``, creating it on first use."""

    url = resolve_database_url(database_url)
    engine = _ENGINES.get(url)
    if engine is None:
        engine = create_engine(url, **_engine_kwargs(url))
        _ENGINES[url] = engine
        _SESSION_MAKERS[url] = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
    return engine


def get_session(*, database_url: str | None = None) -> Session:
    """Return a new session bound to the shared engine for ``database_url``."""

    get_engine(database_url=database_url)
    return _SESSION_MAKERS[resolve_database_url(database_url)]()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines() -> None:
    """Dispose and forget every cached engine (tests, end of CLI run)."""

    for engine in _ENGINES.values():
        engine.dispose()
    _ENGINES.clear()
    _SESSION_MAKERS.clear()


__all__ = [
    "DEFAULT_DATABASE_URL",
    "dispose_engines",
    "get_engine",
    "get_session",
    "resolve_database_url",
    "session_scope",
]
