"""
Asyncio facade over a sorting run.

The algorithms themselves are synchronous and pace themselves by blocking on
the run's condition variable, so an async application cannot run them on its
event loop directly.  :class:`AsyncRunController` mirrors the sync controller:
the run executes in a worker thread (``asyncio.to_thread``), and every
:class:`~stepsort.common.StepEvent` is handed back to the event loop with
``loop.call_soon_threadsafe`` and queued for :meth:`AsyncRunController.events`.

Example usage::

    async def render_run():
        controller = AsyncRunController()
        task = asyncio.create_task(controller.run("merge", values, delay=0.01))
        async for event in controller.events():
            draw(event.snapshot, event.active_indices, event.sorted_marks)
        return await task
"""

import asyncio
from collections.abc import AsyncIterator, Callable, Iterable
from typing import Any

from stepsort.common import RunInProgressError, RunResult, RunStatus, StepEvent
from stepsort.controller import RunController

# Queued after the last event of a run so events() knows to stop.
_DONE = object()


class AsyncRunController:
    """Runs one algorithm at a time in a worker thread and streams its events."""

    def __init__(self, controller: RunController | None = None):
        self.controller = controller if controller is not None else RunController()
        self._queue: asyncio.Queue[Any] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def status(self) -> RunStatus:
        return self.controller.status

    def _forward(self, event: StepEvent) -> None:
        if self._loop is not None and self._queue is not None:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event)

    def _ensure_queue(self) -> asyncio.Queue[Any]:
        loop = asyncio.get_running_loop()
        if self._queue is None or self._loop is not loop:
            self._loop = loop
            self._queue = asyncio.Queue()
        return self._queue

    async def run(
        self,
        algorithm: str,
        values: Iterable[Any],
        delay: float = 0.0,
        key: Callable[[Any], Any] | None = None,
    ) -> RunResult:
        """Run an algorithm without blocking the event loop.

        Events still queued from an earlier run are dropped first, and the
        event forwarder is attached only for the length of this call.

        Args:
            algorithm: Catalogue key of the algorithm
            values: Source array; the run sorts a private copy
            delay: Seconds to suspend after each step
            key: Optional ordering key for non-integer elements

        Returns:
            The RunResult of the run

        Raises:
            RunInProgressError: If another run is active
            Any exception raised by the algorithm or a listener
        """
        if self.controller.status.is_active:
            raise RunInProgressError(f"a {self.controller.algorithm} sort is already in progress")
        queue = self._ensure_queue()
        while not queue.empty():
            queue.get_nowait()
        self.controller.add_listener(self._forward)
        try:
            return await asyncio.to_thread(self.controller.run, algorithm, values, delay, key)
        finally:
            self.controller.remove_listener(self._forward)
            # Events scheduled by the worker are already queued ahead of this.
            queue.put_nowait(_DONE)

    async def events(self) -> AsyncIterator[StepEvent]:
        """Yield the events of the current (or next) run until it finishes."""
        queue = self._ensure_queue()
        while True:
            item = await queue.get()
            if item is _DONE:
                return
            yield item

    def pause(self) -> None:
        self.controller.pause()

    def resume(self) -> None:
        self.controller.resume()

    def cancel(self) -> None:
        self.controller.cancel()
