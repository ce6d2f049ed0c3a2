"""Tests for context_processor.core.utils.logging."""

import sys

import pytest
from loguru import logger

from context_processor.core.config import Config
from context_processor.core.exceptions import ConfigurationError
from context_processor.core.utils.logging import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)


def _config(**logging_section):
    return Config(env_prefix="", defaults={"logging": logging_section})


def test_resolve_level():
    assert resolve_level("debug") == "DEBUG"
    assert resolve_level(" Warning ") == "WARNING"
    with pytest.raises(ConfigurationError, match="Unknown log level"):
        resolve_level("LOUD")


def test_file_sink_from_config(tmp_path):
    log_file = tmp_path / "logs" / "store.log"
    setup_logging(_config(level="info", file=str(log_file)))

    logger.debug("hidden detail")
    logger.info("document saved")

    text = log_file.read_text(encoding="utf-8")
    assert "document saved" in text
    assert "| INFO    | " in text
    assert "test_logging:test_file_sink_from_config:" in text
    assert "hidden detail" not in text


def test_level_argument_overrides_config(tmp_path):
    log_file = tmp_path / "store.log"
    setup_logging(_config(level="ERROR", file=str(log_file)), level="DEBUG")

    logger.debug("now visible")
    assert "now visible" in log_file.read_text(encoding="utf-8")


def test_console_format_names_module(capsys):
    setup_logging(level="WARNING")
    logger.warning("record restored")
    err = capsys.readouterr().err
    assert "WARNING" in err
    assert "test_logging: record restored" in err


def test_unknown_level_in_config():
    with pytest.raises(ConfigurationError):
        setup_logging(_config(level="chatty"))


def test_defaults_without_config(capsys):
    setup_logging()
    logger.info("quiet")
    logger.warning("loud")
    err = capsys.readouterr().err
    assert "quiet" not in err
    assert "loud" in err
