"""Tests for RunState pause and cancellation signals."""

import threading
import time

import pytest

from stepsort.signals import RunCancelledError, RunState


def _checkpoint_in_thread(state, outcome):
    def target():
        try:
            state.checkpoint()
            outcome.append("passed")
        except RunCancelledError:
            outcome.append("cancelled")

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    return thread


def test_checkpoint_passes_when_running():
    state = RunState()
    state.checkpoint()


def test_checkpoint_raises_after_cancel():
    state = RunState()
    state.cancel()
    with pytest.raises(RunCancelledError):
        state.checkpoint()


def test_paused_checkpoint_waits_for_resume():
    state = RunState()
    state.pause()
    outcome = []

    thread = _checkpoint_in_thread(state, outcome)
    thread.join(timeout=0.1)
    assert thread.is_alive()
    assert outcome == []

    state.resume()
    thread.join(timeout=5.0)
    assert outcome == ["passed"]


def test_cancel_wakes_a_paused_checkpoint():
    state = RunState()
    state.pause()
    outcome = []

    thread = _checkpoint_in_thread(state, outcome)
    thread.join(timeout=0.1)
    state.cancel()
    thread.join(timeout=5.0)

    assert outcome == ["cancelled"]


def test_sleep_returns_early_on_cancel():
    state = RunState()
    timer = threading.Timer(0.05, state.cancel)
    timer.start()

    started = time.monotonic()
    state.sleep(10.0)
    elapsed = time.monotonic() - started
    timer.join()

    assert elapsed < 5.0
    assert state.is_cancelled()


def test_sleep_zero_returns_immediately():
    state = RunState()
    started = time.monotonic()
    state.sleep(0)
    assert time.monotonic() - started < 0.5
