"""Tests for forker.logging (stderr setup from LoggingConfig)."""

import logging
import sys

import pytest

from forker.config import LoggingConfig
from forker.logging import DEFAULT_FORMAT, DEFAULT_LEVEL, LEVELS, ForkerLogging, level_from_name


def test_default_level_matches_config_default() -> None:
    """LoggingConfig defaults to the module's DEFAULT_LEVEL."""
    assert DEFAULT_LEVEL == "WARNING"
    assert LoggingConfig().level == DEFAULT_LEVEL


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        (" warning ", logging.WARNING),
        ("Error", logging.ERROR),
        ("TRACE", logging.WARNING),
        ("", logging.WARNING),
        (None, logging.WARNING),
    ],
)
def test_level_from_name(name: str | None, expected: int) -> None:
    """Names are case/whitespace-insensitive; unknown names mean
    DEFAULT_LEVEL."""
    assert level_from_name(name) == expected


def test_setup_sets_root_level() -> None:
    """setup() applies every supported level to the root logger."""
    for level_name, number in LEVELS.items():
        ForkerLogging(LoggingConfig(level=level_name, format="%(message)s")).setup()
        assert logging.root.level == number


def test_setup_writes_to_stderr() -> None:
    """Log records go to stderr, leaving stdout to the reports."""
    ForkerLogging(LoggingConfig()).setup()
    handler = logging.root.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert handler.stream is sys.stderr


def test_setup_returns_package_logger() -> None:
    """setup() returns the 'forker' logger."""
    log = ForkerLogging(LoggingConfig()).setup()
    assert log.name == "forker"


def test_setup_uses_default_format_when_empty() -> None:
    """An empty format falls back to DEFAULT_FORMAT."""
    ForkerLogging(LoggingConfig(level="INFO", format="")).setup()
    formatter = logging.root.handlers[0].formatter
    assert formatter is not None
    assert formatter._fmt == DEFAULT_FORMAT


def test_unknown_level_warns_and_keeps_default(capsys: pytest.CaptureFixture[str]) -> None:
    """An unknown level keeps WARNING and reports it on stderr."""
    log = ForkerLogging(LoggingConfig(level="TRACE", format="%(levelname)s %(message)s")).setup()
    assert logging.root.level == logging.WARNING
    assert not log.isEnabledFor(logging.INFO)
    captured = capsys.readouterr()
    assert "WARNING Unknown log level 'TRACE', using WARNING" in captured.err
    assert captured.out == ""


def test_level_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """FORKER_LOGGING_LEVEL overrides the default level."""
    monkeypatch.setenv("FORKER_LOGGING_LEVEL", "debug")
    ForkerLogging(LoggingConfig()).setup()
    assert logging.root.level == logging.DEBUG
