"""Managed generators - lazy sequences with shared and weak ownership of suspended frames."""

__version__ = "0.1.0"

from .config import GeneratorConfig, get_generator_config
from .decorators import generator
from .errors import (
    GeneratorAdoptionError,
    GeneratorError,
    GeneratorRunningError,
    GeneratorUsageError,
)
from .handles import GeneratorHandle, GeneratorIterator, WeakGeneratorHandle
from .models import GeneratorStatistics, GeneratorStatus
from .state import CoroutineState

__all__ = [
    # Core
    "generator",
    "CoroutineState",
    "GeneratorHandle",
    "WeakGeneratorHandle",
    "GeneratorIterator",
    # Models
    "GeneratorStatus",
    "GeneratorStatistics",
    # Errors
    "GeneratorError",
    "GeneratorUsageError",
    "GeneratorRunningError",
    "GeneratorAdoptionError",
    # Config
    "GeneratorConfig",
    "get_generator_config",
]
