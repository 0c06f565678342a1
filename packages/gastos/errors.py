"""Exception hierarchy for fatal conditions of an import run.

Per-file parse problems and individual insert failures are not exceptions at
this level: they are logged and counted where they happen. Only conditions
that must stop the run before it damages persisted state are raised.
"""

from __future__ import annotations


class GastosError(Exception):
    """Base class for fatal import errors reported by the CLI."""


class StoreError(GastosError):
    """The database could not be opened or its schema initialized."""


class ExportError(GastosError):
    """The spreadsheet could not be backed up or written."""


__all__ = ["ExportError", "GastosError", "StoreError"]
