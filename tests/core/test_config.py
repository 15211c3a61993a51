"""
Tests for the engine configuration, errors and logging helpers.
"""

import logging

import pytest
from pydantic import ValidationError

from auras.core.config import EngineConfig
from auras.core.errors import (
    AuraError,
    DuplicateRegistrationError,
    InvalidSettingsError,
    UnknownAuraError,
)
from auras.core.logging import get_logger, log_info, log_warning, setup_logging


# === EngineConfig ===


def test_defaults():
    config = EngineConfig()
    assert config.validate_fields is True
    assert config.emit_events is True
    assert config.log_level is None


def test_config_is_frozen():
    config = EngineConfig()
    with pytest.raises(ValidationError):
        config.emit_events = False


def test_log_level_is_normalized():
    assert EngineConfig(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        EngineConfig(log_level="verbose")


def test_from_env():
    """
    Test reading AURAS_* variables, ignoring unrelated ones.
    """
    config = EngineConfig.from_env(
        {
            "AURAS_VALIDATE_FIELDS": "false",
            "AURAS_LOG_LEVEL": "info",
            "AURAS_UNKNOWN": "1",
            "PATH": "/usr/bin",
        }
    )
    assert config.validate_fields is False
    assert config.emit_events is True
    assert config.log_level == "INFO"


def test_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv("AURAS_EMIT_EVENTS", "0")
    assert EngineConfig.from_env().emit_events is False


def test_from_env_rejects_garbage():
    with pytest.raises(ValidationError):
        EngineConfig.from_env({"AURAS_EMIT_EVENTS": "sometimes"})


# === Errors ===


def test_error_hierarchy():
    assert issubclass(UnknownAuraError, LookupError)
    assert issubclass(InvalidSettingsError, ValueError)
    for error in (UnknownAuraError("Stun"), DuplicateRegistrationError("Aura", "Stun")):
        assert isinstance(error, AuraError)
        assert "Stun" in str(error)


# === Logging ===


def test_setup_logging_sets_level():
    setup_logging(EngineConfig(log_level="debug").log_level)
    assert get_logger("auras").level == logging.DEBUG
    setup_logging("WARNING")
    assert get_logger("auras").level == logging.WARNING


def test_log_helpers_include_context(caplog):
    """
    Test that the context mapping is rendered into the log message.
    """
    setup_logging("DEBUG")
    with caplog.at_level(logging.DEBUG, logger="auras"):
        log_info("Applied aura Stun", {"aura_instance": "abc"})
        log_warning("Effect already registered", {"name": "Stunned"})

    messages = [record.getMessage() for record in caplog.records]
    assert any("Applied aura Stun" in m and "abc" in m for m in messages)
    assert any("Stunned" in m for m in messages)
    setup_logging("WARNING")
