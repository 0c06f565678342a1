"""Keyword rule classifier.

Rules are loaded once per run into an ordered in-memory list. ``classify``
scans them in insertion order and returns the category of the first rule whose
keyword is a substring of the (upper-cased) description, so overlapping
keywords resolve the same way on every run.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from sqlalchemy.orm import Session

from .models import Rule
from .persistence import load_rules


class RuleBook:
    """Ordered, append-only cache of classification rules.

    Owned by the ingest consumer thread while ingest runs, then handed to the
    resolver, which appends the rules it learns with :meth:`add`.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: list[Rule] = []
        self._keywords: set[str] = set()
        for rule in rules:
            self.add(rule.keyword, rule.category)

    @classmethod
    def load(cls, session: Session) -> RuleBook:
        return cls(load_rules(session))

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __contains__(self, keyword: object) -> bool:
        return keyword in self._keywords

    def classify(self, description: str) -> str | None:
        """Return the category of the first matching rule, or ``None``."""

        for rule in self._rules:
            if rule.keyword in description:
                return rule.category
        return None

    def add(self, keyword: str, category: str) -> bool:
        """Append a rule; the first rule for a keyword wins, like the store."""

        if not keyword or not category or keyword in self._keywords:
            return False
        self._rules.append(Rule(keyword, category))
        self._keywords.add(keyword)
        return True

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order (for prompt completion)."""

        return list(dict.fromkeys(rule.category for rule in self._rules))


__all__ = ["RuleBook"]
