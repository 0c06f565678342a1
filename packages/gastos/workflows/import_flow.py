"""End-to-end import: OFX directory → database → monthly spreadsheet.

Steps run strictly in sequence: open the store (schema + bootstrap rules),
discover files, run the concurrent ingest pipeline, resolve unknowns on the
terminal, then back up and rewrite the spreadsheet. Ingest has fully drained
before the resolver reads stdin, and the resolver has finished before the
export reads the transactions back.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable
from dataclasses import dataclass

from prompt_toolkit import PromptSession

from ..classifier import RuleBook
from ..db.client import session_scope
from ..discovery import list_ofx_files
from ..export import ExportResult, export_spreadsheet
from ..logging_setup import get_logger
from ..persistence import Persister, open_store
from ..pipeline import IngestResult, ingest
from ..resolver import ResolveResult, resolve_unknowns
from ..settings import ImportSettings

logger = get_logger("gastos.workflows.import_flow")


@dataclass(frozen=True, slots=True)
class ImportReport:
    ingest: IngestResult
    resolve: ResolveResult
    export: ExportResult
    store_failures: int

    @property
    def ok(self) -> bool:
        """``False`` when any transaction or rule insert failed during the run."""

        return self.store_failures == 0


def run_import(
    settings: ImportSettings,
    *,
    prompt_session: PromptSession | None = None,
    echo: Callable[[str], None] = print,
    now: dt.datetime | None = None,
) -> ImportReport:
    """Run one import with ``settings``.

    Raises :class:`~gastos.errors.StoreError` before any file is parsed when
    the database cannot be opened, and :class:`~gastos.errors.ExportError`
    when the previous spreadsheet cannot be backed up or the new one saved.
    Insert failures do not raise; they are reported in
    :attr:`ImportReport.store_failures`.
    """

    open_store(settings.database_url)
    with session_scope(database_url=settings.database_url) as session:
        rulebook = RuleBook.load(session)

    files = list_ofx_files(settings.input_dir)
    persister = Persister(database_url=settings.database_url)

    ingested = ingest(files, rulebook, persister, workers=settings.workers, echo=echo)

    resolved = ResolveResult()
    if ingested.unknowns:
        resolved = resolve_unknowns(
            ingested.unknowns, rulebook, persister, session=prompt_session, echo=echo
        )

    exported = export_spreadsheet(settings.output, database_url=settings.database_url, now=now)

    if persister.failures:
        logger.error("%d store insert(s) failed during this run", persister.failures)
    return ImportReport(
        ingest=ingested,
        resolve=resolved,
        export=exported,
        store_failures=persister.failures,
    )


__all__ = ["ImportReport", "run_import"]
