"""Configuration management for managed generators."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

_ENABLED_VALUES = ("enabled", "true", "1", "yes", "on")
_DISABLED_VALUES = ("disabled", "false", "0", "no", "off")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_switch(name: str, default: str) -> bool:
    raw = os.getenv(name, default).strip().lower()
    if raw in _ENABLED_VALUES:
        return True
    if raw in _DISABLED_VALUES:
        return False
    raise ValueError(
        f"Invalid {name} value: {raw!r} (expected 'enabled' or 'disabled')"
    )


def _parse_log_level(name: str, default: str) -> str:
    raw = os.getenv(name, default).strip().upper()
    if raw not in _LOG_LEVELS:
        raise ValueError(
            f"Invalid {name} value: {raw!r} (expected one of {', '.join(_LOG_LEVELS)})"
        )
    return raw


@dataclass
class GeneratorConfig:
    """Runtime switches of the generator machinery."""

    failure_propagation: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Load generator configuration from environment variables.

        - GENERATOR_FAILURE_PROPAGATION: 'enabled' (default) captures a body's
          exception and re-raises it from the next resume; 'disabled' logs
          and discards it, leaving the generator finished.
        - GENERATOR_LOG_LEVEL: standard level name used by the demo entry point.
        """
        return cls(
            failure_propagation=_parse_switch("GENERATOR_FAILURE_PROPAGATION", "enabled"),
            log_level=_parse_log_level("GENERATOR_LOG_LEVEL", "INFO"),
        )


_generator_config: Optional[GeneratorConfig] = None


def get_generator_config() -> GeneratorConfig:
    """Get generator configuration, read from the environment once per process."""
    global _generator_config
    if _generator_config is None:
        _generator_config = GeneratorConfig.from_env()
    return _generator_config


def reset_generator_config() -> None:
    """Forget the cached configuration so the next access re-reads the environment."""
    global _generator_config
    _generator_config = None
