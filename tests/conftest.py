"""Pytest configuration for test isolation.

Makes ``packages/`` importable without an install, keeps the developer's
``GASTOS_*`` environment out of the tests, and resets process-wide state the
package caches (SQLAlchemy engines per URL, the configured log handler) so
every test starts from scratch.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

from gastos import logging_setup  # noqa: E402
from gastos.db.client import dispose_engines  # noqa: E402
from gastos.persistence import open_store  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("GASTOS_DATABASE_URL", "GASTOS_WORKERS", "GASTOS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
    dispose_engines()
    pkg_logger = logging.getLogger("gastos")
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
    pkg_logger.setLevel(logging.NOTSET)
    pkg_logger.propagate = True
    logging_setup._CONFIGURED = False


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """URL of a fresh file-backed SQLite database with schema and default rules."""

    url = f"sqlite+pysqlite:///{tmp_path / 'finance.db'}"
    open_store(url)
    return url
