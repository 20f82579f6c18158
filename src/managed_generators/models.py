"""Data models for generator state."""

from dataclasses import dataclass
from enum import Enum


class GeneratorStatus(str, Enum):
    """Lifecycle status of a coroutine state."""

    UNSTARTED = "unstarted"
    SUSPENDED = "suspended"
    RUNNING = "running"
    FINISHED = "finished"
    FAILED = "failed"
    DESTROYED = "destroyed"

    @property
    def is_terminal(self) -> bool:
        """True for statuses from which the body is never re-entered."""
        return self in (
            GeneratorStatus.FINISHED,
            GeneratorStatus.FAILED,
            GeneratorStatus.DESTROYED,
        )


@dataclass
class GeneratorStatistics:
    """Counters for one coroutine state."""

    resumes: int = 0
    values_produced: int = 0

