"""Tests for state module."""

import pytest

from managed_generators.errors import GeneratorRunningError
from managed_generators.models import GeneratorStatus
from managed_generators.state import CoroutineState


def count(n, entries=None):
    if entries is not None:
        entries.append("enter")
    for i in range(n):
        yield i


def test_new_state_is_unstarted():
    """Test that creating a state does not run the body."""
    entries = []
    state = CoroutineState(count(3, entries))

    assert entries == []
    assert state.status == GeneratorStatus.UNSTARTED
    assert not state.is_done()
    assert not state.has_value()


def test_resume_produces_values_in_order():
    """Test resuming through a whole body."""
    state = CoroutineState(count(3))
    seen = []
    while state.resume():
        seen.append(state.get_current_value_or())

    assert seen == [0, 1, 2]
    assert state.is_done()
    assert state.status == GeneratorStatus.FINISHED


def test_resume_after_completion_does_not_reenter_body():
    """Test that resume is idempotent once finished."""
    entries = []
    state = CoroutineState(count(1, entries))

    assert state.resume() is True
    assert state.resume() is False
    assert state.resume() is False
    assert state.resume() is False

    assert entries == ["enter"]
    assert state.statistics.resumes == 2
    assert state.statistics.values_produced == 1


def test_last_value_survives_completion():
    """Test that the final yielded value stays readable after the body ends."""
    state = CoroutineState(count(3))
    while state.resume():
        pass

    assert state.has_value()
    assert state.get_current_value_or() == 2


def test_failure_is_captured_not_raised():
    """Test that a body exception is stored until asked for."""

    def broken():
        yield 1
        raise ValueError("broken body")

    state = CoroutineState(broken())
    assert state.resume() is True
    assert state.resume() is False

    assert state.is_done()
    assert state.status == GeneratorStatus.FAILED
    assert state.has_failure()

    with pytest.raises(ValueError, match="broken body"):
        state.raise_if_failure()

    # Raised exactly once
    assert not state.has_failure()
    state.raise_if_failure()


def test_base_exceptions_are_not_deferred():
    """Test that exceptions outside Exception propagate immediately."""

    class Abort(BaseException):
        pass

    def aborting():
        raise Abort()
        yield

    state = CoroutineState(aborting())
    with pytest.raises(Abort):
        state.resume()

    assert state.is_done()
    assert not state.has_failure()


def test_destroy_unwinds_suspended_frame():
    """Test that destroying a suspended state runs its cleanup."""
    events = []

    def guarded():
        events.append("acquired")
        try:
            yield 1
            yield 2
        finally:
            events.append("released")

    state = CoroutineState(guarded())
    state.resume()
    state.destroy()

    assert events == ["acquired", "released"]
    assert state.status == GeneratorStatus.DESTROYED
    assert state.is_done()
    assert not state.has_value()
    assert state.resume() is False

    # A second destroy is harmless
    state.destroy()


def test_destroy_unstarted_state_never_runs_body():
    """Test that an unstarted body is dropped without executing."""
    entries = []
    state = CoroutineState(count(3, entries))
    state.destroy()

    assert entries == []
    assert state.is_done()


def test_reentrant_resume_is_rejected():
    """Test that a body cannot resume its own state."""
    holder = {}

    def reentrant():
        yield 1
        holder["state"].resume()
        yield 2

    state = CoroutineState(reentrant())
    holder["state"] = state
    state.resume()

    assert state.resume() is False
    with pytest.raises(GeneratorRunningError, match="while it is running"):
        state.raise_if_failure()


def test_destroy_from_inside_running_body_is_rejected():
    """Test that a body cannot tear down its own running frame."""
    holder = {}

    def self_destroying():
        yield 1
        holder["state"].destroy()
        yield 2

    state = CoroutineState(self_destroying())
    holder["state"] = state
    state.resume()

    assert state.resume() is False
    assert state.status == GeneratorStatus.FAILED
    with pytest.raises(GeneratorRunningError, match="destroy generator .* while it is running"):
        state.raise_if_failure()

    # Once the body has stopped the state can be destroyed normally
    state.destroy()
    assert state.status == GeneratorStatus.DESTROYED


def test_destroy_drops_undelivered_failure():
    """Test that a failure nobody asked for disappears with the state."""

    def broken():
        raise ValueError("never delivered")
        yield

    state = CoroutineState(broken())
    assert state.resume() is False
    assert state.has_failure()

    state.destroy()

    assert not state.has_failure()
    state.raise_if_failure()
    assert state.resume() is False
