"""
Shared pytest configuration for stepsort.

Provides fixtures for recording step events and an autouse check that every
background run started by a test has been joined before the test ends.
"""

import os
import sys
import threading

import pytest

# Add parent directory to path so we can import stepsort
_stepsort_path = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _stepsort_path not in sys.path:
    sys.path.insert(0, _stepsort_path)

from stepsort.controller import RunController  # noqa: E402


def pytest_configure(config):
    """Register stepsort markers."""
    config.addinivalue_line(
        "markers",
        "intentionally_leaves_dangling_threads: mark test as intentionally leaving a run thread alive",
    )


@pytest.fixture(autouse=True)
def _check_thread_cleanup(request):
    """Fail tests that leave a background run thread alive.

    A run left paused forever would otherwise sit in a daemon thread for the
    rest of the session; checking explicitly gives a clear error instead.
    """
    initial_threads = set(threading.enumerate())

    yield

    new_threads = set(threading.enumerate()) - initial_threads
    alive_threads = [t for t in new_threads if t.is_alive() and t.name.startswith("stepsort-")]

    if alive_threads and not request.node.get_closest_marker("intentionally_leaves_dangling_threads"):
        thread_info = ", ".join(f"{t.name} (ident={t.ident})" for t in alive_threads)
        pytest.fail(
            f"Test {request.node.nodeid} left {len(alive_threads)} run thread(s) running: {thread_info}. "
            f"Cancel and wait for every run before the test completes."
        )


@pytest.fixture
def controller():
    """A RunController that is cancelled and joined after the test."""
    ctrl = RunController()
    yield ctrl
    ctrl.reset(timeout=5.0)


class EventRecorder:
    """Listener that keeps every StepEvent it receives."""

    def __init__(self):
        self.events = []
        self.lock = threading.Lock()

    def __call__(self, event):
        with self.lock:
            self.events.append(event)

    def __len__(self):
        with self.lock:
            return len(self.events)


@pytest.fixture
def recorder():
    return EventRecorder()
