"""
Run controller: starts, pauses, resumes and cancels one sorting run.

The controller owns the lifecycle of a run::

    IDLE -> RUNNING <-> PAUSED -> CANCELLED
                   \\-> COMPLETED

A run executes an algorithm against a fresh :class:`SequenceEngine` either in
the calling thread (:meth:`RunController.run`) or in a background worker
thread (:meth:`RunController.start`).  The orchestrator talks to the run only
through :meth:`pause`, :meth:`resume` and :meth:`cancel`, which flip flags on
a :class:`~stepsort.signals.RunState`; the algorithm observes them at its
next step boundary.

Example usage::

    controller = RunController()
    controller.add_listener(render)
    controller.start("quick", [5, 3, 8, 1], delay=0.03)
    ...
    controller.pause()
    controller.resume()
    result = controller.wait()
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

from stepsort.algorithms import get_algorithm
from stepsort.common import Counters, RunInProgressError, RunResult, RunStatus, StepEvent
from stepsort.sequence import Listener, SequenceEngine
from stepsort.signals import RunCancelledError, RunState

logger = logging.getLogger(__name__)

StatusCallback = Callable[[RunStatus], None]


class RunController:
    """Drives one algorithm over one array at a time.

    Listeners registered on the controller are attached to the engine of
    every run it starts, so a renderer subscribes once and follows every run.
    """

    def __init__(self):
        self.state = RunState()
        self.engine: SequenceEngine | None = None
        self.result: RunResult | None = None
        self.error: Exception | None = None
        self.thread: threading.Thread | None = None
        self.algorithm = ""
        self._status = RunStatus.IDLE
        self._status_lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._status_callbacks: list[StatusCallback] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def status(self) -> RunStatus:
        with self._status_lock:
            return self._status

    @property
    def counters(self) -> Counters:
        if self.engine is None:
            return Counters()
        return self.engine.counters.copy()

    def snapshot(self) -> tuple[Any, ...]:
        if self.engine is None:
            return ()
        return self.engine.snapshot()

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Stop attaching ``listener`` to new runs; a run already going keeps it."""
        self._listeners.remove(listener)

    def on_status(self, callback: StatusCallback) -> None:
        """Register a callback invoked with the new status on every transition."""
        self._status_callbacks.append(callback)

    def _set_status(self, status: RunStatus, expected: tuple[RunStatus, ...] | None = None) -> bool:
        with self._status_lock:
            if expected is not None and self._status not in expected:
                return False
            self._status = status
        self._notify(status)
        return True

    def _notify(self, status: RunStatus) -> None:
        for callback in self._status_callbacks:
            callback(status)

    # ------------------------------------------------------------------
    # Starting a run
    # ------------------------------------------------------------------

    def _prepare(
        self,
        algorithm: str,
        values: Iterable[Any],
        delay: float,
        key: Callable[[Any], Any] | None,
    ) -> tuple[str, Callable[[SequenceEngine], None], SequenceEngine, RunState]:
        info = get_algorithm(algorithm)
        if delay < 0:
            raise ValueError("delay must be >= 0")
        state = RunState()
        engine = SequenceEngine(values, state, delay=delay, key=key)
        for listener in self._listeners:
            engine.add_listener(listener)
        idle = (RunStatus.IDLE, RunStatus.CANCELLED, RunStatus.COMPLETED)
        with self._status_lock:
            if self._status not in idle:
                raise RunInProgressError(f"a {self.algorithm} sort is already in progress")
            self._status = RunStatus.RUNNING
            self.state = state
            self.algorithm = info.key
            self.engine = engine
            self.result = None
            self.error = None
        self._notify(RunStatus.RUNNING)
        return info.key, info.sort, engine, state

    def _execute(
        self,
        algorithm: str,
        sort: Callable[[SequenceEngine], None],
        engine: SequenceEngine,
        state: RunState,
    ) -> tuple[RunResult, Exception | None]:
        """Run ``sort`` to a terminal state and publish the result.

        Cancellation is a normal outcome; any other exception, including one
        raised by a listener on the completion event, is returned alongside
        a cancelled result.  The result and status are only published while
        ``state`` still belongs to the controller's current run; a run that
        :meth:`reset` gave up waiting for finishes silently.
        """
        error: Exception | None = None
        started = time.monotonic()
        logger.info("starting %s sort on %d values", algorithm, len(engine))
        try:
            sort(engine)
            if state.is_cancelled():
                raise RunCancelledError()
            engine.mark_all_sorted()
            engine.emit_final()
        except RunCancelledError:
            status = RunStatus.CANCELLED
            logger.info("%s sort cancelled after %r", algorithm, engine.counters)
        except Exception as e:
            error = e
            status = RunStatus.CANCELLED
            logger.error("%s sort failed: %s", algorithm, e)
        else:
            status = RunStatus.COMPLETED
            logger.info("%s sort completed with %r", algorithm, engine.counters)

        result = RunResult(
            algorithm=algorithm,
            status=status,
            sequence=engine.snapshot(),
            counters=engine.counters.copy(),
            sorted_marks=engine.sorted_marks,
            elapsed=time.monotonic() - started,
        )
        with self._status_lock:
            current = self.state is state
            if current:
                self.result = result
                self.error = error
                self._status = status
        if current:
            self._notify(status)
        else:
            logger.debug("discarding result of a %s sort detached by reset", algorithm)
        return result, error

    def run(
        self,
        algorithm: str,
        values: Iterable[Any],
        delay: float = 0.0,
        key: Callable[[Any], Any] | None = None,
    ) -> RunResult:
        """Run an algorithm to completion in the calling thread.

        Args:
            algorithm: Catalogue key of the algorithm ("bubble", "merge", ...)
            values: Source array; the run sorts a private copy
            delay: Seconds to suspend after each step
            key: Optional ordering key for non-integer elements

        Returns:
            The RunResult of the run

        Raises:
            RunInProgressError: If another run is active on this controller
            Any exception raised by the algorithm or a listener
        """
        result, error = self._execute(*self._prepare(algorithm, values, delay, key))
        if error is not None:
            raise error
        return result

    def start(
        self,
        algorithm: str,
        values: Iterable[Any],
        delay: float = 0.0,
        key: Callable[[Any], Any] | None = None,
    ) -> None:
        """Start a run in a background worker thread and return immediately.

        Args:
            algorithm: Catalogue key of the algorithm
            values: Source array; the run sorts a private copy
            delay: Seconds to suspend after each step
            key: Optional ordering key for non-integer elements

        Raises:
            RunInProgressError: If another run is active on this controller
        """
        run = self._prepare(algorithm, values, delay, key)
        self.thread = threading.Thread(
            target=self._execute,
            args=run,
            name=f"stepsort-{run[0]}",
            daemon=True,
        )
        self.thread.start()

    def wait(self, timeout: float | None = None) -> RunResult | None:
        """Wait for the background run to finish.

        Args:
            timeout: Optional timeout in seconds

        Returns:
            The RunResult, or None if the run is still going after ``timeout``

        Raises:
            Any exception the algorithm or a listener raised during the run
        """
        if self.thread is not None:
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                return None
        if self.error is not None:
            raise self.error
        return self.result

    # ------------------------------------------------------------------
    # Control signals
    # ------------------------------------------------------------------

    def pause(self) -> None:
        """Suspend the run at its next step boundary; no-op unless running."""
        if self._set_status(RunStatus.PAUSED, expected=(RunStatus.RUNNING,)):
            self.state.pause()
            logger.debug("%s sort paused", self.algorithm)

    def resume(self) -> None:
        """Continue a paused run exactly where it stopped; no-op unless paused."""
        if self._set_status(RunStatus.RUNNING, expected=(RunStatus.PAUSED,)):
            self.state.resume()
            logger.debug("%s sort resumed", self.algorithm)

    def cancel(self) -> None:
        """Stop the run at its next step boundary, keeping its partial state."""
        if self.status.is_active:
            self.state.cancel()

    def reset(self, timeout: float | None = None) -> None:
        """Cancel any active run, wait for it, and return to IDLE.

        A worker still alive after ``timeout`` is detached rather than
        waited for: it is already cancelled, and once the controller has a
        new run state it can no longer publish a result or status.
        """
        self.cancel()
        thread = self.thread
        if thread is not None:
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("%s sort did not stop within %ss; detaching it", self.algorithm, timeout)
        with self._status_lock:
            self.state = RunState()
            self.thread = None
            self.engine = None
            self.result = None
            self.error = None
            self._status = RunStatus.IDLE
        self._notify(RunStatus.IDLE)


def sort_values(algorithm: str, values: Iterable[Any], listener: Listener | None = None) -> RunResult:
    """Convenience function: run one algorithm synchronously with no delay.

    Example::

        result = sort_values("merge", [5, 3, 8, 1])
        assert result.sequence == (1, 3, 5, 8)
    """
    controller = RunController()
    if listener is not None:
        controller.add_listener(listener)
    return controller.run(algorithm, values)


def collect_events(algorithm: str, values: Iterable[Any]) -> tuple[RunResult, list[StepEvent]]:
    """Run synchronously and return the result together with every emitted event."""
    events: list[StepEvent] = []
    result = sort_values(algorithm, values, events.append)
    return result, events
