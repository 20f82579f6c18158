"""Tests for config module."""

import pytest

from managed_generators.config import (
    GeneratorConfig,
    get_generator_config,
    reset_generator_config,
)


def test_defaults():
    """Test configuration with a clean environment."""
    config = GeneratorConfig.from_env()

    assert config.failure_propagation is True
    assert config.log_level == "INFO"


@pytest.mark.parametrize("value", ["disabled", "false", "0", "OFF"])
def test_failure_propagation_disabled(monkeypatch, value):
    """Test the accepted spellings of the disabled switch."""
    monkeypatch.setenv("GENERATOR_FAILURE_PROPAGATION", value)

    assert GeneratorConfig.from_env().failure_propagation is False


def test_invalid_switch_value(monkeypatch):
    """Test that an unknown switch value is rejected."""
    monkeypatch.setenv("GENERATOR_FAILURE_PROPAGATION", "sometimes")

    with pytest.raises(ValueError, match="GENERATOR_FAILURE_PROPAGATION"):
        GeneratorConfig.from_env()


def test_config_is_cached_until_reset(monkeypatch):
    """Test that configuration is read once per process."""
    first = get_generator_config()
    monkeypatch.setenv("GENERATOR_LOG_LEVEL", "debug")

    assert get_generator_config() is first

    reset_generator_config()
    assert get_generator_config().log_level == "DEBUG"


def test_log_level_is_normalised(monkeypatch):
    """Test that level names are accepted in any case."""
    monkeypatch.setenv("GENERATOR_LOG_LEVEL", " warning ")

    assert GeneratorConfig.from_env().log_level == "WARNING"


@pytest.mark.parametrize("value", ["verbose", "BASICCONFIG", "10"])
def test_invalid_log_level(monkeypatch, value):
    """Test that anything but a standard level name is rejected."""
    monkeypatch.setenv("GENERATOR_LOG_LEVEL", value)

    with pytest.raises(ValueError, match="GENERATOR_LOG_LEVEL"):
        GeneratorConfig.from_env()
