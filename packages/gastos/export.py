"""Monthly spreadsheet export (openpyxl).

The workbook holds one sheet per ``YYYY-MM`` month key, in ascending order.
Each sheet starts with the header ``Data, Valor, Descrição, Categoria``
followed by that month's transactions in read (id) order: the date as ISO
text, the amount as a number, then description and category.

An existing output file is first renamed to a timestamped ``.bak`` sibling.
The new workbook is written to a temporary sibling and moved over the target
with ``os.replace``, so the target path never holds a partial file.
"""

from __future__ import annotations

import datetime as dt
import os
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from openpyxl import Workbook
from sqlalchemy.exc import SQLAlchemyError

from .db.client import session_scope
from .errors import ExportError
from .logging_setup import get_logger
from .models import Transaction
from .persistence import fetch_transactions

logger = get_logger("gastos.export")

HEADER: tuple[str, ...] = ("Data", "Valor", "Descrição", "Categoria")
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
AMOUNT_NUMBER_FORMAT = "0.00"
EMPTY_SHEET_TITLE = "Sem dados"
DEFAULT_OUTPUT = Path("gastos.xlsx")


@dataclass(frozen=True, slots=True)
class ExportResult:
    path: Path
    backup: Path | None
    sheets: tuple[str, ...]
    rows: int


def group_by_month(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    """Bucket transactions by month key, keeping their relative order."""

    buckets: dict[str, list[Transaction]] = {}
    for tx in transactions:
        buckets.setdefault(tx.month_key, []).append(tx)
    return buckets


def backup_path_for(path: Path, now: dt.datetime) -> Path:
    return path.with_name(f"{path.name}.{now.strftime(BACKUP_TIMESTAMP_FORMAT)}.bak")


def backup_spreadsheet(
    path: str | PathLike[str], *, now: dt.datetime | None = None
) -> Path | None:
    """Rename an existing ``path`` to ``<path>.<YYYYMMDD_HHMMSS>.bak``.

    Returns the backup path, or ``None`` when there was nothing to back up.
    The rename stays in the same directory and is atomic. Raises
    :class:`ExportError` when it fails or would overwrite an earlier backup.
    """

    target = Path(path)
    if not target.exists():
        return None
    backup = backup_path_for(target, now or dt.datetime.now())
    if backup.exists():
        raise ExportError(f"backup {backup} already exists; refusing to overwrite it")
    try:
        target.rename(backup)
    except OSError as e:
        raise ExportError(f"cannot back up {target} to {backup}: {e}") from e
    logger.info("backed up %s to %s", target, backup)
    return backup


def build_workbook(transactions: Iterable[Transaction]) -> Workbook:
    wb = Workbook()
    default_sheet = wb.active
    buckets = group_by_month(transactions)
    if not buckets:
        # A workbook must keep at least one sheet.
        default_sheet.title = EMPTY_SHEET_TITLE
        default_sheet.append(HEADER)
        return wb

    wb.remove(default_sheet)
    for key in sorted(buckets):
        ws = wb.create_sheet(title=key)
        ws.append(HEADER)
        for tx in buckets[key]:
            ws.append([tx.date.isoformat(), tx.amount, tx.description, tx.category])
            ws.cell(row=ws.max_row, column=2).number_format = AMOUNT_NUMBER_FORMAT
    return wb


def write_spreadsheet(
    transactions: Iterable[Transaction], path: str | PathLike[str]
) -> tuple[str, ...]:
    """Write the monthly workbook to ``path``; return the sheet names written."""

    target = Path(path)
    wb = build_workbook(transactions)
    tmp = target.with_name(f".{target.name}.tmp")
    try:
        wb.save(tmp)
        os.replace(tmp, target)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise ExportError(f"cannot save spreadsheet {target}: {e}") from e
    return tuple(wb.sheetnames)


def export_spreadsheet(
    path: str | PathLike[str] = DEFAULT_OUTPUT,
    *,
    database_url: str | None = None,
    now: dt.datetime | None = None,
) -> ExportResult:
    """Back up any previous ``path`` and export every stored transaction to it."""

    try:
        with session_scope(database_url=database_url) as session:
            transactions = fetch_transactions(session)
    except SQLAlchemyError as e:
        raise ExportError(f"cannot read transactions for export: {e}") from e

    target = Path(path)
    backup = backup_spreadsheet(target, now=now)
    sheets = write_spreadsheet(transactions, target)
    logger.info("wrote %d row(s) across %d sheet(s) to %s", len(transactions), len(sheets), target)
    return ExportResult(path=target, backup=backup, sheets=sheets, rows=len(transactions))


__all__ = [
    "DEFAULT_OUTPUT",
    "ExportResult",
    "HEADER",
    "backup_spreadsheet",
    "build_workbook",
    "export_spreadsheet",
    "group_by_month",
    "write_spreadsheet",
]
