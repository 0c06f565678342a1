import io
import logging

import pytest

from gastos.logging_setup import configure_logging, get_logger


def _pkg_level() -> int:
    return logging.getLogger("gastos").level


def test_explicit_level_name_is_case_insensitive():
    configure_logging(" debug ", stream=io.StringIO())
    assert _pkg_level() == logging.DEBUG


def test_env_level_used_when_option_missing(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GASTOS_LOG_LEVEL", "info")
    configure_logging(None, stream=io.StringIO())
    assert _pkg_level() == logging.INFO


@pytest.mark.parametrize(
    ("option", "env"),
    [(None, "verbose"), ("foo", "verbose"), ("foo", "FOO"), (None, "")],
)
def test_unknown_level_names_fall_back_to_warning(
    monkeypatch: pytest.MonkeyPatch, option: str | None, env: str
):
    monkeypatch.setenv("GASTOS_LOG_LEVEL", env)
    configure_logging(option, stream=io.StringIO())
    assert _pkg_level() == logging.WARNING


def test_invalid_option_falls_back_to_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GASTOS_LOG_LEVEL", "error")
    configure_logging("loud", stream=io.StringIO())
    assert _pkg_level() == logging.ERROR


def test_configured_handler_writes_to_stream():
    stream = io.StringIO()
    configure_logging("INFO", stream=stream, fmt="%(levelname)s %(message)s")

    get_logger("gastos.test").info("hello %s", "mundo")

    assert stream.getvalue() == "INFO hello mundo\n"
