"""Unit tests for `understudy.config`."""

import logging

import pytest

from understudy.config import (
    LOG_LEVEL_ENV,
    InvalidLogLevelError,
    get_log_level,
    parse_log_level,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        (" Warning ", logging.WARNING),
        ("error", logging.ERROR),
        ("CRITICAL", logging.CRITICAL),
    ],
)
def test_parse_log_level(value, expected):
    """Level names are accepted in any case, with surrounding whitespace."""
    assert parse_log_level(value) == expected


def test_parse_log_level_rejects_unknown_names():
    """Unknown names raise InvalidLogLevelError carrying the raw value."""
    with pytest.raises(InvalidLogLevelError, match="Invalid log level: 'LOUD'") as exc:
        parse_log_level("LOUD")
    assert exc.value.value == "LOUD"
    assert isinstance(exc.value, ValueError)


def test_get_log_level_default_when_unset(monkeypatch):
    """Without the env var the default level is returned."""
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    assert get_log_level() == logging.WARNING
    assert get_log_level(default=logging.ERROR) == logging.ERROR


def test_get_log_level_default_when_empty(monkeypatch):
    """An empty env var counts as unset."""
    monkeypatch.setenv(LOG_LEVEL_ENV, "")
    assert get_log_level() == logging.WARNING


def test_get_log_level_from_env(monkeypatch):
    """The env var selects the level."""
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    assert get_log_level() == logging.DEBUG


def test_get_log_level_invalid_env(monkeypatch):
    """An invalid env var is reported rather than silently ignored."""
    monkeypatch.setenv(LOG_LEVEL_ENV, "verbose")
    with pytest.raises(InvalidLogLevelError):
        get_log_level()
