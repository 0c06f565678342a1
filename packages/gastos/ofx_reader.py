"""Adapter from OFX statements (via ``ofxparse``) to :class:`Transaction`.

Only credit-card statements are read; bank and investment accounts inside the
same file are skipped. A file is decoded completely before anything is
returned, so a malformed file contributes no transactions at all.

Mapping rules:
- ``date``: the line's posted date (``DTPOSTED``) in the file's own offset,
  truncated to the calendar day
- ``amount``: the line's ``TRNAMT`` Decimal converted to ``float``
- ``description``: the line's payee (``NAME``), trimmed and upper-cased
"""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Iterator
from os import PathLike
from typing import Any

from ofxparse import AccountType, OfxParser

from .logging_setup import get_logger
from .models import Transaction, normalize_description

logger = get_logger("gastos.ofx_reader")

# Trailing zone of an OFX date-time, e.g. ``[-3:BRT]``; same pattern ofxparse uses.
_TZ_SUFFIX = re.compile(r"\[(?P<tz>[-+]?\d+\.?\d*)\:\w*\]$")


class LocalTimeOfxParser(OfxParser):
    """``OfxParser`` that keeps date-times in the offset written in the file.

    ofxparse subtracts the ``[offset:TZ]`` suffix and returns naive UTC, which
    moves late-evening postings west of UTC to the next day (and sometimes the
    next month). Adding the offset back restores the statement's wall-clock time.
    """

    @classmethod
    def parseOfxDateTime(cls, text):
        value = super().parseOfxDateTime(text)
        match = _TZ_SUFFIX.search(text)
        if value is None or match is None:
            return value
        return value + dt.timedelta(hours=float(match.group("tz")))


def _posted_day(value: dt.datetime | dt.date) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def credit_card_transactions(ofx: Any) -> Iterator[Transaction]:
    """Yield transactions of every credit-card account in a parsed OFX document."""

    for account in ofx.accounts:
        if account.type != AccountType.CreditCard:
            logger.debug("skipping non credit-card account %s", getattr(account, "account_id", "?"))
            continue
        statement = account.statement
        if statement is None:
            continue
        for line in statement.transactions:
            yield Transaction(
                date=_posted_day(line.date),
                amount=float(line.amount),
                description=normalize_description(line.payee),
            )


def read_ofx_transactions(path: str | PathLike[str]) -> list[Transaction]:
    """Decode one OFX file and return its credit-card transactions in file order.

    Open and decode failures are logged and yield an empty list; they never
    propagate to the worker that called this function.
    """

    try:
        with open(path, "rb") as fh:
            ofx = LocalTimeOfxParser.parse(fh)
            return list(credit_card_transactions(ofx))
    except OSError as e:
        logger.warning("cannot open %s: %s", path, e)
    except Exception as e:  # noqa: BLE001 - ofxparse raises assorted errors on bad input
        logger.warning("cannot parse %s: %s: %s", path, type(e).__name__, e)
    return []


__all__ = ["LocalTimeOfxParser", "credit_card_transactions", "read_ofx_transactions"]
