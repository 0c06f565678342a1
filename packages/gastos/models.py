"""Data models for ``gastos``.

A :class:`Transaction` is one credit-card posting extracted from an OFX
statement. Descriptions are normalized to upper case on construction through
:func:`normalize_description` so keyword rules (stored upper case) match
regardless of how the bank capitalized the payee.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass


def normalize_description(raw: str | None) -> str:
    """Return ``raw`` trimmed and upper-cased (``""`` for ``None``)."""

    if raw is None:
        return ""
    return raw.strip().upper()


def first_word(description: str) -> str:
    """Return the prefix of ``description`` up to the first ASCII space.

    The whole description is returned when it contains no space. Short tokens
    such as ``"99"`` are returned as-is; callers learning rules from them accept
    that such keywords match broadly.
    """

    return description.split(" ", 1)[0]


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single credit-card posting.

    ``amount`` is negative for charges and positive for credits/refunds.
    ``category`` is ``None`` until the transaction is classified or resolved;
    the store never holds a transaction without one.
    """

    date: dt.date
    amount: float
    description: str
    category: str | None = None

    @property
    def month_key(self) -> str:
        """``YYYY-MM`` truncation of :attr:`date`, used as the sheet name."""

        return f"{self.date.year:04d}-{self.date.month:02d}"


@dataclass(frozen=True, slots=True)
class Rule:
    """Keyword-to-category mapping used for substring classification."""

    keyword: str
    category: str


# Seeded on first run (insert-or-ignore), in this order. Insertion order is the
# classifier's tie-break, so ``UBER`` wins over ``99`` for ``"UBER 99"``.
DEFAULT_RULES: tuple[Rule, ...] = (
    Rule("IFOOD", "Alimentação"),
    Rule("UBER", "Transporte"),
    Rule("99", "Transporte"),
    Rule("NETFLIX", "Assinaturas"),
    Rule("SPOTIFY", "Assinaturas"),
    Rule("AMAZON", "Compras"),
)


__all__ = [
    "DEFAULT_RULES",
    "Rule",
    "Transaction",
    "first_word",
    "normalize_description",
]
