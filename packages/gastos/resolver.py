"""Interactive resolution of transactions no rule matched during ingest.

For each unknown, in the order ingest produced them:

1. Re-check the rule book. A rule learned earlier in this loop may now match,
   in which case the transaction is saved with that category without asking.
2. Otherwise show ``<date> | <amount> | <description>`` and prompt for a
   category (blank input re-prompts). Without a TTY, answers are read one line
   at a time from stdin.
3. Save the transaction with the answer and learn a rule from the first word
   of its description.

End of input stops the loop; the unknowns not yet answered are discarded.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from prompt_toolkit import PromptSession

from .classifier import RuleBook
from .logging_setup import get_logger
from .models import Transaction, first_word
from .persistence import Persister
from .term_ui import is_interactive, prompt_category

logger = get_logger("gastos.resolver")


@dataclass(slots=True)
class ResolveResult:
    prompted: int = 0
    auto_resolved: int = 0
    learned: int = 0
    discarded: int = 0


def format_unknown(tx: Transaction) -> str:
    return f"{tx.date.isoformat()} | {tx.amount:.2f} | {tx.description}"


def resolve_unknowns(
    unknowns: Sequence[Transaction],
    rulebook: RuleBook,
    persister: Persister,
    *,
    session: PromptSession | None = None,
    echo: Callable[[str], None] = print,
) -> ResolveResult:
    """Resolve ``unknowns`` interactively, saving each and learning rules.

    Parameters
    ----------
    unknowns:
        The unknown batch from ingest, in arrival order.
    rulebook:
        The run's rule cache; learned rules are appended so they apply to the
        remaining unknowns.
    persister:
        Single writer for transactions and rules.
    session:
        Optional ``PromptSession`` (tests pass one bound to a pipe input).
    echo:
        Sink for the transaction line shown before each prompt.
    """

    result = ResolveResult()
    for pos, tx in enumerate(unknowns):
        category = rulebook.classify(tx.description)
        if category is not None:
            persister.save(tx, category)
            result.auto_resolved += 1
            continue

        echo("\n" + format_unknown(tx))
        if session is None and is_interactive():
            # Shared by every prompt in this loop.
            session = PromptSession()
        try:
            category = prompt_category(rulebook.categories(), session=session)
        except EOFError:
            result.discarded = len(unknowns) - pos
            logger.warning("input closed; %d unknown transaction(s) discarded", result.discarded)
            break
        result.prompted += 1

        persister.save(tx, category)
        keyword = first_word(tx.description)
        # An empty keyword would match every description.
        if keyword and persister.learn(keyword, category):
            rulebook.add(keyword, category)
            result.learned += 1
    return result


__all__ = ["ResolveResult", "format_unknown", "resolve_unknowns"]
