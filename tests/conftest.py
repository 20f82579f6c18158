"""Shared fixtures."""

import pytest

from managed_generators.config import reset_generator_config


@pytest.fixture(autouse=True)
def fresh_generator_config(monkeypatch):
    """Re-read generator configuration from a clean environment in every test."""
    monkeypatch.delenv("GENERATOR_FAILURE_PROPAGATION", raising=False)
    monkeypatch.delenv("GENERATOR_LOG_LEVEL", raising=False)
    reset_generator_config()
    yield
    reset_generator_config()
