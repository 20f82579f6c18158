"""Strong and weak handles over a coroutine state, and the iterator adaptor."""

import inspect
import logging
import weakref
from typing import Any, Generic, Iterator, Optional, TypeVar

from .config import get_generator_config
from .errors import GeneratorAdoptionError, GeneratorUsageError
from .models import GeneratorStatistics, GeneratorStatus
from .protocols import LoggerProtocol
from .state import CoroutineState

T = TypeVar("T")

logger = logging.getLogger(__name__)


class _ControlBlock:
    """Strong count and the state it governs. Weak handles point here."""

    __slots__ = ("state", "strong_count", "__weakref__")

    def __init__(self, state: CoroutineState):
        self.state: Optional[CoroutineState] = state
        self.strong_count = 0

    @property
    def expired(self) -> bool:
        return self.state is None

    def acquire(self) -> None:
        self.strong_count += 1

    def release(self) -> None:
        self.strong_count -= 1
        if self.strong_count > 0:
            return
        state = self.state
        logger.debug(f"Released last handle to {state.name}; destroying state")
        try:
            state.destroy()
        finally:
            self.state = None


class GeneratorHandle(Generic[T]):
    """
    Shared owner of one coroutine state.

    Every copy made with ``copy.copy`` (or ``copy()``) is another owner of
    the same state, so resuming through one copy is visible through all of
    them. The state is destroyed when the last owner is released, either
    explicitly, by leaving a ``with`` block, or by garbage collection. A body
    that needs a reference to its own generator must hold a
    WeakGeneratorHandle; a strong one keeps the frame alive through a cycle.
    """

    def __init__(self, state: Optional[CoroutineState[T]] = None):
        """
        Initialize a handle.

        Args:
            state: State to own; None creates an empty handle
        """
        self._block: Optional[_ControlBlock] = None
        if state is not None:
            self._attach(_ControlBlock(state))

    @classmethod
    def _from_block(cls, block: _ControlBlock) -> "GeneratorHandle[T]":
        handle = cls()
        handle._attach(block)
        return handle

    @classmethod
    def adopt(
        cls,
        frame,
        propagate_failures: Optional[bool] = None,
        logger: Optional[LoggerProtocol] = None,
    ) -> "GeneratorHandle[T]":
        """
        Take ownership of an unstarted native generator.

        Args:
            frame: Generator object, e.g. the result of calling a function
                containing ``yield`` or a generator expression
            propagate_failures: Override of the configured failure switch
            logger: Logger instance passed to the state

        Returns:
            Handle over a new, unstarted state
        """
        if not inspect.isgenerator(frame):
            raise TypeError(f"Expected a native generator, got {type(frame).__name__}")
        if inspect.getgeneratorstate(frame) != inspect.GEN_CREATED:
            raise GeneratorAdoptionError(
                f"Cannot adopt generator {frame.__qualname__}: it has already started"
            )
        if propagate_failures is None:
            propagate_failures = get_generator_config().failure_propagation
        return cls(CoroutineState(frame, propagate_failures, logger))

    def _attach(self, block: _ControlBlock) -> None:
        block.acquire()
        self._block = block

    def _require_state(self, action: str) -> CoroutineState[T]:
        if self._block is None:
            raise GeneratorUsageError(f"Attempted to {action} an empty generator")
        return self._block.state

    def __bool__(self) -> bool:
        return self._block is not None

    @property
    def status(self) -> GeneratorStatus:
        """Finer-grained lifecycle status; an empty handle reports DESTROYED."""
        if self._block is None:
            return GeneratorStatus.DESTROYED
        return self._block.state.status

    @property
    def statistics(self) -> GeneratorStatistics:
        return self._require_state("inspect").statistics

    def has_value(self) -> bool:
        return self._block is not None and self._block.state.has_value()

    def is_done(self) -> bool:
        if self._block is None:
            return True
        return self._block.state.is_done()

    def get_value(self) -> T:
        """Return the value of the latest yield."""
        if not self.has_value():
            raise GeneratorUsageError("Attempted to access an empty generator")
        return self._block.state.get_current_value_or()

    def get_current_value_or(self, default: Any = None) -> Any:
        if self._block is None:
            return default
        return self._block.state.get_current_value_or(default)

    def resume(self) -> bool:
        """Resume and return True if the generator produced another value."""
        state = self._require_state("resume")
        result = state.resume()
        state.raise_if_failure()
        return result

    def begin(self) -> "GeneratorIterator[T]":
        """
        Return an iterator positioned on the current value.

        If no value has been produced yet the body is resumed once first.
        A generator that is already finished gives an iterator equal to end().
        """
        state = self._require_state("iterate")
        if not state.has_value():
            state.resume()
        state.raise_if_failure()
        if state.is_done():
            return self.end()
        return GeneratorIterator(self)

    @staticmethod
    def end() -> "GeneratorIterator":
        return GeneratorIterator()

    def create_iterator(self) -> "GeneratorIterator[T]":
        return self.begin()

    def __iter__(self) -> "GeneratorIterator[T]":
        iterator = self.begin()
        if iterator:
            # A for statement keeps only the iterator, so it co-owns the state
            iterator._owner = self.copy()
        return iterator

    def get_weak_handle(self) -> "WeakGeneratorHandle[T]":
        return WeakGeneratorHandle(self)

    def copy(self) -> "GeneratorHandle[T]":
        """Return another owner of the same state."""
        if self._block is None:
            return type(self)()
        return type(self)._from_block(self._block)

    __copy__ = copy

    def shares_state_with(self, other: "GeneratorHandle") -> bool:
        return self._block is not None and self._block is other._block

    def release(self) -> None:
        """Give up ownership; the last release destroys the state."""
        block, self._block = self._block, None
        if block is not None:
            block.release()

    def __enter__(self) -> "GeneratorHandle[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def __del__(self):
        self.release()

    def __repr__(self) -> str:
        if self._block is None:
            return "<GeneratorHandle empty>"
        state = self._block.state
        return f"<GeneratorHandle {state.name} status={state.status.value}>"


class WeakGeneratorHandle(Generic[T]):
    """Non-owning reference to a generator's state."""

    def __init__(self, handle: Optional[GeneratorHandle[T]] = None):
        self._ref: Optional[weakref.ref] = None
        if handle is not None and handle._block is not None:
            self._ref = weakref.ref(handle._block)

    def _live_block(self) -> Optional[_ControlBlock]:
        block = self._ref() if self._ref is not None else None
        if block is None or block.expired:
            return None
        return block

    def expired(self) -> bool:
        return self._live_block() is None

    def __bool__(self) -> bool:
        return self._live_block() is not None

    def pin(self) -> GeneratorHandle[T]:
        """Return an owning handle, or an empty one if the state is gone."""
        block = self._live_block()
        if block is None:
            return GeneratorHandle()
        return GeneratorHandle._from_block(block)


class GeneratorIterator(WeakGeneratorHandle[T]):
    """
    Iterator adaptor over a generator.

    Holds the generator weakly and becomes equal to GeneratorHandle.end()
    once the sequence is exhausted. Supports both the explicit
    dereference()/advance() pair and Python's iterator protocol.
    """

    def __init__(self, handle: Optional[GeneratorHandle[T]] = None):
        super().__init__(handle)
        self._owner: Optional[GeneratorHandle[T]] = None
        self._pending_advance = False

    def _clear(self) -> None:
        self._ref = None
        owner, self._owner = self._owner, None
        if owner is not None:
            owner.release()

    def advance(self) -> "GeneratorIterator[T]":
        """Resume the generator once; on exhaustion this iterator becomes end()."""
        block = self._live_block()
        if block is None:
            raise GeneratorUsageError("Attempted to advance an invalid iterator")
        with GeneratorHandle._from_block(block) as pinned:
            state = pinned._block.state
            if not state.resume():
                self._clear()
                state.raise_if_failure()
        return self

    def dereference(self) -> T:
        block = self._live_block()
        if block is None:
            raise GeneratorUsageError("Attempted to dereference an invalid iterator")
        with GeneratorHandle._from_block(block) as pinned:
            return pinned.get_value()

    def __eq__(self, other) -> bool:
        if not isinstance(other, GeneratorIterator):
            return NotImplemented
        return self._live_block() is other._live_block()

    __hash__ = None

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._pending_advance:
            self._pending_advance = False
            self.advance()
        if not self:
            raise StopIteration
        value = self.dereference()
        self._pending_advance = True
        return value
