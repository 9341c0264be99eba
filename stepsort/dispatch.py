"""
Dispatcher: the control surface a presentation layer drives.

The dispatcher keeps the current source array, the selected algorithm and
the pacing settings, and turns play/pause/reset style commands into runs on
a single :class:`~stepsort.controller.RunController`.  While a run is active
everything that would change what is being sorted is refused with
:class:`~stepsort.common.RunInProgressError`; pause, resume and cancel are
always accepted.

Example usage::

    dispatcher = Dispatcher(RunConfig(delay_ms=10))
    dispatcher.add_listener(render)
    dispatcher.select("merge")
    dispatcher.set_custom_input("10, 45, 2, 99")
    dispatcher.start()
    dispatcher.pause()
    dispatcher.resume()
    dispatcher.wait()
"""

import logging
import random
import threading
from collections.abc import Callable, Iterable

from stepsort.algorithms import ALGORITHMS, get_algorithm
from stepsort.common import AlgorithmInfo, RunInProgressError, RunResult, RunStatus
from stepsort.config import RunConfig
from stepsort.controller import RunController
from stepsort.inputs import parse_custom_input, random_array
from stepsort.sequence import Listener

logger = logging.getLogger(__name__)


class Dispatcher:
    """Single-run orchestrator over the algorithm catalogue."""

    def __init__(self, config: RunConfig | None = None, controller: RunController | None = None):
        self.config = config if config is not None else RunConfig()
        self.controller = controller if controller is not None else RunController()
        self.rng = random.Random(self.config.seed)
        self.algorithm: AlgorithmInfo = next(iter(ALGORITHMS.values()))
        self.size = self.config.size
        self.delay_ms = self.config.delay_ms
        self._values: tuple[int, ...] = ()
        self._stop_demo = threading.Event()
        self.regenerate()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def values(self) -> tuple[int, ...]:
        """The source array the next run will sort."""
        return self._values

    @property
    def status(self) -> RunStatus:
        return self.controller.status

    @property
    def is_sorting(self) -> bool:
        return self.controller.status.is_active

    def add_listener(self, listener: Listener) -> None:
        self.controller.add_listener(listener)

    def _require_idle(self, action: str) -> None:
        if self.is_sorting:
            raise RunInProgressError(f"cannot {action} while a sort is running")

    # ------------------------------------------------------------------
    # Run selection
    # ------------------------------------------------------------------

    def select(self, key: str) -> AlgorithmInfo:
        self._require_idle("change algorithm")
        self.algorithm = get_algorithm(key)
        return self.algorithm

    def set_values(self, values: Iterable[int]) -> None:
        self._require_idle("replace the array")
        self._values = tuple(values)

    def regenerate(self, size: int | None = None) -> tuple[int, ...]:
        """Replace the source array with fresh random values."""
        self._require_idle("regenerate the array")
        if size is not None:
            self.set_size(size)
        self._values = tuple(random_array(self.size, self.config.value_low, self.config.value_high, self.rng))
        return self._values

    def set_size(self, size: int) -> None:
        """Change the generated array length; takes effect on the next regenerate."""
        self._require_idle("resize the array")
        if not self.config.min_size <= size <= self.config.max_size:
            raise ValueError(f"size must be between {self.config.min_size} and {self.config.max_size}")
        self.size = size

    def set_delay(self, delay_ms: float) -> None:
        self._require_idle("change speed")
        if delay_ms < 0:
            raise ValueError("delay must be >= 0")
        self.delay_ms = delay_ms

    def set_custom_input(self, text: str) -> bool:
        """Use comma-separated numbers as the source array.

        Tokens that are not integers are dropped.  If nothing is left the
        edit is ignored and the current array is kept.

        Returns:
            True if the array was replaced
        """
        self._require_idle("edit the array")
        values = parse_custom_input(text)
        if not values:
            logger.debug("ignoring custom input %r: no integers", text)
            return False
        self._values = tuple(values)
        return True

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def start(self, delay_ms: float | None = None) -> None:
        """Start the selected algorithm on a copy of the current array in the background."""
        if delay_ms is not None:
            self.set_delay(delay_ms)
        self.controller.start(self.algorithm.key, self._values, delay=self.delay_ms / 1000)

    def run(self, delay_ms: float | None = None) -> RunResult:
        """Run the selected algorithm in the calling thread and return its result."""
        if delay_ms is not None:
            self.set_delay(delay_ms)
        return self.controller.run(self.algorithm.key, self._values, delay=self.delay_ms / 1000)

    def wait(self, timeout: float | None = None) -> RunResult | None:
        return self.controller.wait(timeout)

    def pause(self) -> None:
        self.controller.pause()

    def resume(self) -> None:
        self.controller.resume()

    def toggle(self) -> None:
        """Play/pause button: start when idle, pause when running, resume when paused."""
        status = self.status
        if status is RunStatus.RUNNING:
            self.pause()
        elif status is RunStatus.PAUSED:
            self.resume()
        else:
            self.start()

    def cancel(self) -> None:
        """Stop the current run (and the demo loop, if one is going)."""
        self._stop_demo.set()
        self.controller.cancel()

    def reset(self, values: Iterable[int] | None = None, timeout: float | None = None) -> tuple[int, ...]:
        """Cancel any run, clear its statistics and load a new source array.

        Args:
            values: The new array; a random one is generated if omitted
            timeout: How long to wait for a background run to stop
        """
        self.cancel()
        self.controller.reset(timeout=timeout)
        if values is None:
            return self.regenerate()
        self.set_values(values)
        return self._values

    # ------------------------------------------------------------------
    # Demo loop
    # ------------------------------------------------------------------

    def demo(
        self,
        rounds: int | None = None,
        on_algorithm: Callable[[AlgorithmInfo], None] | None = None,
        on_result: Callable[[RunResult], None] | None = None,
    ) -> list[RunResult]:
        """Cycle through every algorithm on fresh random arrays until cancelled.

        Each algorithm gets a new array, a rest of ``config.pause_before``
        seconds, a run, and a rest of ``config.pause_after`` seconds.  Blocks
        the calling thread; :meth:`cancel` from another thread ends the loop.

        Args:
            rounds: Number of full passes over the catalogue (forever if None)
            on_algorithm: Called with each algorithm before its run starts
            on_result: Called with each run's result

        Returns:
            Results of every run that was started
        """
        self._stop_demo.clear()
        results: list[RunResult] = []
        completed_rounds = 0
        while rounds is None or completed_rounds < rounds:
            for info in ALGORITHMS.values():
                if self._stop_demo.is_set():
                    return results
                self.algorithm = info
                self.controller.reset()
                self.regenerate()
                if on_algorithm is not None:
                    on_algorithm(info)
                if self._stop_demo.wait(self.config.pause_before):
                    return results
                result = self.run()
                results.append(result)
                if on_result is not None:
                    on_result(result)
                if self._stop_demo.wait(self.config.pause_after):
                    return results
            completed_rounds += 1
        return results
