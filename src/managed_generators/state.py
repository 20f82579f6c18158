"""Coroutine state: one suspended execution of a generator body."""

import logging
from types import GeneratorType
from typing import Any, Generic, Optional, TypeVar

from .errors import GeneratorRunningError
from .models import GeneratorStatistics, GeneratorStatus
from .protocols import LoggerProtocol

T = TypeVar("T")

_NO_VALUE: Any = object()


class CoroutineState(Generic[T]):
    """
    Owns the native generator frame of one body invocation.

    Besides the frame it keeps the value from the most recent yield and any
    exception that escaped the body. The exception is not raised where it
    happened: it is stored here and handed to whoever asks right after the
    resume that discovered it.
    """

    def __init__(
        self,
        frame: GeneratorType,
        propagate_failures: bool = True,
        logger: Optional[LoggerProtocol] = None,
    ):
        """
        Initialize an unstarted state.

        Args:
            frame: Native generator object, not yet started
            propagate_failures: Capture body exceptions for the resumer
                instead of logging and discarding them
            logger: Logger instance
        """
        self._frame: Optional[GeneratorType] = frame
        self._propagate_failures = propagate_failures
        self._logger = logger or logging.getLogger(__name__)
        self._current: Any = _NO_VALUE
        self._failure: Optional[BaseException] = None
        self._status = GeneratorStatus.UNSTARTED
        self.name = getattr(frame, "__qualname__", type(frame).__name__)
        self.statistics = GeneratorStatistics()

        self._logger.debug(f"Created generator state for {self.name}")

    @property
    def status(self) -> GeneratorStatus:
        return self._status

    def is_done(self) -> bool:
        """True once the body completed, failed or was torn down."""
        return self._status.is_terminal

    def has_value(self) -> bool:
        return self._current is not _NO_VALUE

    def has_failure(self) -> bool:
        return self._failure is not None

    def get_current_value_or(self, default: Any = None) -> Any:
        """Return the value of the latest yield, or ``default`` if none is held."""
        if self._current is _NO_VALUE:
            return default
        return self._current

    def resume(self) -> bool:
        """
        Run the body until its next yield.

        Returns:
            True if the body yielded a new value, False if it is finished.
            A body that raised also returns False; the exception waits in
            the state until raise_if_failure() is called.
        """
        if self._status is GeneratorStatus.RUNNING:
            raise GeneratorRunningError(
                f"Attempted to resume generator {self.name} while it is running"
            )
        if self.is_done():
            return False

        self._status = GeneratorStatus.RUNNING
        self.statistics.resumes += 1
        try:
            value = next(self._frame)
        except StopIteration:
            self._status = GeneratorStatus.FINISHED
            self._logger.debug(
                f"Generator {self.name} finished after "
                f"{self.statistics.values_produced} values"
            )
            return False
        except Exception as e:
            self._status = GeneratorStatus.FAILED
            self._capture(e)
            return False
        except BaseException:
            # Interrupts end the frame but are never deferred
            self._status = GeneratorStatus.FAILED
            raise

        self._current = value
        self._status = GeneratorStatus.SUSPENDED
        self.statistics.values_produced += 1
        return True

    def _capture(self, error: Exception) -> None:
        if self._propagate_failures:
            self._failure = error
            self._logger.debug(f"Captured failure from generator {self.name}: {error!r}")
        else:
            self._logger.error(
                f"Generator {self.name} failed with failure propagation disabled; "
                f"discarding {error!r}",
                exc_info=error,
            )

    def raise_if_failure(self) -> None:
        """Re-raise the captured failure, if any. Each failure is raised once."""
        failure, self._failure = self._failure, None
        if failure is not None:
            raise failure

    def destroy(self) -> None:
        """
        Tear down the frame.

        A body suspended at a yield is closed, which runs its pending
        ``finally`` blocks and ``with`` exits before the frame is dropped.
        Calling destroy on an already destroyed state does nothing.
        """
        if self._status is GeneratorStatus.RUNNING:
            raise GeneratorRunningError(
                f"Attempted to destroy generator {self.name} while it is running"
            )
        if self._status is GeneratorStatus.DESTROYED:
            return

        if self._status is GeneratorStatus.SUSPENDED:
            self._logger.debug(f"Cancelling suspended generator {self.name}")
        try:
            self._frame.close()
        finally:
            self._frame = None
            self._current = _NO_VALUE
            self._failure = None
            self._status = GeneratorStatus.DESTROYED

    def __repr__(self) -> str:
        return f"<CoroutineState {self.name} status={self._status.value}>"
