"""Terminal prompt for categories of unknown transactions (prompt_toolkit-based).

Kept apart from the resolver loop so it can be driven in tests with a pipe
input and ``DummyOutput``.

On a TTY the prompt is a ``PromptSession`` with completion over the known
categories. When stdin is not a terminal (piped or redirected answers), one
newline-terminated line is read per prompt instead, with the same rules:
blank lines are skipped and end of input raises ``EOFError``.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import IO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError, Validator

CATEGORY_MESSAGE = "Categoria: "


def is_interactive() -> bool:
    """Return True when both stdin and stdout are attached to a TTY."""

    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class NonEmptyCategory(Validator):
    """Reject blank input so the prompt stays open until a category is typed."""

    def validate(self, document: Document) -> None:
        if not document.text.strip():
            raise ValidationError(message="Informe uma categoria", cursor_position=0)


def read_category_line(
    message: str = CATEGORY_MESSAGE,
    *,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
) -> str:
    """Read the next non-blank line from ``stdin`` and return it trimmed.

    ``message`` is written to ``stdout`` before every read. Raises
    ``EOFError`` when the stream ends before a non-blank line arrives.
    """

    src = stdin if stdin is not None else sys.stdin
    out = stdout if stdout is not None else sys.stdout
    while True:
        out.write(message)
        out.flush()
        line = src.readline()
        if not line:
            out.write("\n")
            raise EOFError
        if line.strip():
            return line.strip()


def prompt_category(
    categories: Iterable[str],
    *,
    message: str = CATEGORY_MESSAGE,
    session: PromptSession | None = None,
) -> str:
    """Read one category from the terminal and return it trimmed.

    Known ``categories`` are offered as Tab completions (case-insensitive, also
    matching in the middle of a word); any other non-empty text is accepted
    as a new category. Raises ``EOFError`` when input ends (Ctrl-D or closed
    stdin) and lets ``KeyboardInterrupt`` propagate.

    Without a ``session`` and with no TTY attached, falls back to
    :func:`read_category_line`.
    """

    if session is None and not is_interactive():
        return read_category_line(message)

    completer = WordCompleter(list(categories), ignore_case=True, match_middle=True)
    sess: PromptSession = session if session is not None else PromptSession()
    text = sess.prompt(
        message,
        completer=completer,
        complete_while_typing=False,
        validator=NonEmptyCategory(),
        validate_while_typing=False,
    )
    return text.strip()


__all__ = [
    "CATEGORY_MESSAGE",
    "NonEmptyCategory",
    "is_interactive",
    "prompt_category",
    "read_category_line",
]
