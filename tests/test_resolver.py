import datetime as dt

from gastos.classifier import RuleBook
from gastos.models import DEFAULT_RULES, Transaction
from gastos.persistence import Persister
from gastos.resolver import format_unknown, resolve_unknowns
from tests.helpers.db import rule_rows, transaction_rows
from tests.helpers.prompt import ScriptedAnswers, pipe_session


def _tx(day: str, amount: float, description: str) -> Transaction:
    return Transaction(date=dt.date.fromisoformat(day), amount=amount, description=description)


def test_format_unknown_shows_iso_date_and_two_decimals():
    assert format_unknown(_tx("2024-03-15", -20.0, "PADARIA CENTRAL")) == (
        "2024-03-15 | -20.00 | PADARIA CENTRAL"
    )


def test_resolved_unknown_is_saved_and_first_word_learned(db_url: str):
    book = RuleBook(DEFAULT_RULES)
    with pipe_session() as (pipe, sess):
        echo = ScriptedAnswers(pipe, ["Alimentação\r"])
        result = resolve_unknowns(
            [_tx("2024-03-15", -20.0, "PADARIA CENTRAL")],
            book,
            Persister(database_url=db_url),
            session=sess,
            echo=echo,
        )

    assert result.prompted == 1
    assert result.learned == 1
    assert transaction_rows(db_url) == [("2024-03-15", -20.0, "PADARIA CENTRAL", "Alimentação")]
    assert ("PADARIA", "Alimentação") in rule_rows(db_url)
    assert book.classify("PADARIA NORTE") == "Alimentação"
    assert echo.lines == ["\n2024-03-15 | -20.00 | PADARIA CENTRAL"]


def test_learned_rule_resolves_later_unknowns_without_prompt(db_url: str):
    unknowns = [
        _tx("2024-03-15", -20.0, "PADARIA CENTRAL"),
        _tx("2024-03-16", -12.0, "PADARIA NORTE"),
    ]
    with pipe_session() as (pipe, sess):
        echo = ScriptedAnswers(pipe, ["Alimentação\r"])
        result = resolve_unknowns(
            unknowns, RuleBook(DEFAULT_RULES), Persister(database_url=db_url), session=sess, echo=echo
        )

    assert result.prompted == 1
    assert result.auto_resolved == 1
    assert len(echo.lines) == 1
    assert [(r[2], r[3]) for r in transaction_rows(db_url)] == [
        ("PADARIA CENTRAL", "Alimentação"),
        ("PADARIA NORTE", "Alimentação"),
    ]


def test_prompts_follow_batch_order(db_url: str):
    unknowns = [
        _tx("2024-03-03", -3.0, "CCC LOJA"),
        _tx("2024-03-01", -1.0, "AAA LOJA"),
        _tx("2024-03-02", -2.0, "BBB LOJA"),
    ]
    with pipe_session() as (pipe, sess):
        echo = ScriptedAnswers(pipe, ["C\r", "A\r", "B\r"])
        resolve_unknowns(unknowns, RuleBook(), Persister(database_url=db_url), session=sess, echo=echo)

    assert [line.split(" | ")[2] for line in echo.lines] == ["CCC LOJA", "AAA LOJA", "BBB LOJA"]
    assert [(r[2], r[3]) for r in transaction_rows(db_url)] == [
        ("CCC LOJA", "C"),
        ("AAA LOJA", "A"),
        ("BBB LOJA", "B"),
    ]


def test_end_of_input_discards_remaining_unknowns(db_url: str):
    unknowns = [
        _tx("2024-03-15", -20.0, "PADARIA CENTRAL"),
        _tx("2024-03-16", -30.0, "FARMACIA POPULAR"),
        _tx("2024-03-17", -40.0, "POSTO SHELL"),
    ]
    with pipe_session() as (pipe, sess):
        echo = ScriptedAnswers(pipe, ["Alimentação\r", None])
        result = resolve_unknowns(
            unknowns, RuleBook(DEFAULT_RULES), Persister(database_url=db_url), session=sess, echo=echo
        )

    assert result.prompted == 1
    assert result.discarded == 2
    assert [r[2] for r in transaction_rows(db_url)] == ["PADARIA CENTRAL"]
    assert "FARMACIA" not in dict(rule_rows(db_url))


def test_existing_keyword_is_not_overwritten(db_url: str):
    # "UBER" is already a rule in the store, but this run's book lacks it.
    book = RuleBook()
    with pipe_session() as (pipe, sess):
        echo = ScriptedAnswers(pipe, ["Lazer\r"])
        result = resolve_unknowns(
            [_tx("2024-03-15", -9.0, "UBER EATS")],
            book,
            Persister(database_url=db_url),
            session=sess,
            echo=echo,
        )

    assert result.learned == 0
    assert dict(rule_rows(db_url))["UBER"] == "Transporte"
    assert transaction_rows(db_url)[0][3] == "Lazer"


def test_empty_first_word_is_not_learned(db_url: str):
    before = rule_rows(db_url)
    with pipe_session() as (pipe, sess):
        echo = ScriptedAnswers(pipe, ["Outros\r"])
        resolve_unknowns(
            [_tx("2024-03-15", -9.0, " ESPACO INICIAL")],
            RuleBook(),
            Persister(database_url=db_url),
            session=sess,
            echo=echo,
        )

    assert rule_rows(db_url) == before
    assert transaction_rows(db_url)[0][3] == "Outros"
