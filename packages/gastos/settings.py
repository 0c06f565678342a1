"""Run settings for an import, validated with pydantic.

Values come from CLI options; options left unset fall back to environment
variables (``GASTOS_DATABASE_URL``, ``GASTOS_WORKERS``), which the CLI may
have loaded from a local ``.env``.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from .db.client import resolve_database_url
from .export import DEFAULT_OUTPUT

DEFAULT_INPUT_DIR = Path("./ofxs")


def resolve_workers(requested: int | None = None) -> int:
    """Resolve the parser worker count.

    An explicit positive ``requested`` wins, then a positive integer in
    ``GASTOS_WORKERS``, then one worker per logical CPU.
    """

    if requested is not None and requested > 0:
        return requested
    env_val = os.getenv("GASTOS_WORKERS")
    try:
        from_env = int(env_val) if env_val else None
    except ValueError:
        from_env = None
    if from_env is not None and from_env > 0:
        return from_env
    return os.cpu_count() or 1


class ImportSettings(BaseModel):
    """Everything an import run needs, after defaults and env fallbacks."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    input_dir: Path = DEFAULT_INPUT_DIR
    output: Path = DEFAULT_OUTPUT
    database_url: str
    workers: int

    @field_validator("database_url")
    @classmethod
    def _url_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("database_url must be non-empty")
        return v

    @field_validator("workers")
    @classmethod
    def _workers_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("workers must be a positive integer")
        return v

    @classmethod
    def resolve(
        cls,
        *,
        input_dir: Path | None = None,
        output: Path | None = None,
        database_url: str | None = None,
        workers: int | None = None,
    ) -> ImportSettings:
        return cls(
            input_dir=input_dir or DEFAULT_INPUT_DIR,
            output=output or DEFAULT_OUTPUT,
            database_url=resolve_database_url(database_url),
            workers=resolve_workers(workers),
        )


__all__ = ["DEFAULT_INPUT_DIR", "ImportSettings", "resolve_workers"]
