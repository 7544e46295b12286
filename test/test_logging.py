"""Test the logging provider."""

import logging
from pathlib import Path

import pytest

from typedsettings.logging.logging_provider import LOG_LEVEL_ENV
from typedsettings.logging.logging_provider import LoggingProvider


def test_file_logging(tmp_path: Path) -> None:
    """After init_logging(), loggers write to their file."""
    provider = LoggingProvider()
    log = provider.new_logger("typedsettings-test-file", log_to_console=False)
    try:
        provider.init_logging(tmp_path, "DEBUG")
        log.debug("hello from the test")
        handlers = provider.handlers["typedsettings-test-file"]
        assert [type(h) for h in handlers] == [logging.FileHandler]
        assert log.level == logging.DEBUG
    finally:
        provider.shutdown()
    assert "hello from the test" in (tmp_path / "typedsettings-test-file.log").read_text(encoding="utf-8")
    assert not provider.handlers


def test_late_logger_is_configured(tmp_path: Path) -> None:
    """Loggers created after init_logging() get handlers as well."""
    provider = LoggingProvider()
    try:
        provider.init_logging(tmp_path, logging.WARNING)
        log = provider.new_logger("typedsettings-test-late")
        assert log.level == logging.WARNING
        assert len(provider.handlers["typedsettings-test-late"]) == 2
    finally:
        provider.shutdown()


def test_reinit_replaces_handlers(tmp_path: Path) -> None:
    """Initializing twice does not duplicate handlers."""
    provider = LoggingProvider()
    log = provider.new_logger("typedsettings-test-reinit")
    try:
        provider.init_logging(None, "INFO")
        provider.init_logging(None, "INFO")
        added = provider.handlers["typedsettings-test-reinit"]
        assert len(added) == 1
        assert sum(1 for h in log.handlers if h in added) == 1
    finally:
        provider.shutdown()
    assert not any(isinstance(h, logging.StreamHandler) for h in log.handlers)


def test_level_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """The level comes from the environment, INFO by default."""
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    assert LoggingProvider.level_from_env() == logging.INFO
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    assert LoggingProvider.level_from_env() == logging.DEBUG
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    with pytest.raises(ValueError):
        LoggingProvider.level_from_env()


def test_unknown_level() -> None:
    """Unknown level names are rejected."""
    with pytest.raises(ValueError):
        LoggingProvider().init_logging(None, "chatty")
