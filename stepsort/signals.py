"""Cooperative cancellation and pause signals for a single run.

A :class:`RunState` is shared between the orchestrator, which writes the
flags, and the running algorithm, which reads them at every step boundary
through :meth:`RunState.checkpoint`.  Both flags live under one
``threading.Condition`` so that a paused algorithm wakes as soon as it is
resumed or cancelled instead of polling on a fixed interval.
"""

import threading


class RunCancelledError(Exception):
    """Raised at a step boundary once the run has been cancelled.

    Algorithms never catch this; it unwinds loops and recursion alike and is
    caught by the controller, which records the run as cancelled.
    """


class RunState:
    """Cancellation and pause flags for one run.

    A new run always gets a fresh RunState; the object is passed by reference
    through every layer of an algorithm (including recursive calls) so a
    cancel issued mid-recursion is observed at the very next step.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.condition = threading.Condition(self.lock)
        self.cancelled = False
        self.paused = False

    def cancel(self) -> None:
        """Request cancellation and wake any paused or sleeping step."""
        with self.condition:
            self.cancelled = True
            self.condition.notify_all()

    def pause(self) -> None:
        with self.condition:
            self.paused = True

    def resume(self) -> None:
        with self.condition:
            self.paused = False
            self.condition.notify_all()

    def checkpoint(self) -> None:
        """Block while paused, then raise if the run was cancelled.

        Called before every comparison and every write.

        Raises:
            RunCancelledError: If cancellation has been requested
        """
        with self.condition:
            while self.paused and not self.cancelled:
                self.condition.wait()
            if self.cancelled:
                raise RunCancelledError()

    def sleep(self, seconds: float) -> None:
        """Suspend after a step for pacing; returns early on cancellation.

        Pausing during the sleep does not extend it: the pause takes effect at
        the next checkpoint.
        """
        if seconds <= 0:
            return
        with self.condition:
            if not self.cancelled:
                self.condition.wait_for(lambda: self.cancelled, timeout=seconds)

    def is_cancelled(self) -> bool:
        with self.condition:
            return self.cancelled

    def is_paused(self) -> bool:
        with self.condition:
            return self.paused
