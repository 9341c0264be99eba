"""The sequence under sort and its step-by-step access protocol.

Algorithms never touch a raw list.  They read values through the engine and
go through :meth:`SequenceEngine.compare`, :meth:`SequenceEngine.write` and
friends for every comparison and mutation.  Each of those calls is one *step*:

1. the shared :class:`~stepsort.signals.RunState` is checked (blocking while
   paused, raising :class:`~stepsort.signals.RunCancelledError` once
   cancelled),
2. the operation is applied and the counters are updated,
3. a :class:`~stepsort.common.StepEvent` carrying an immutable snapshot is
   sent to every listener,
4. the run sleeps for the step delay so an observer can follow along.

Example usage::

    engine = SequenceEngine([5, 3, 8, 1], RunState())
    engine.add_listener(print)
    if engine.compare(0, 1, ">"):
        engine.swap(0, 1)
"""

import operator
from collections.abc import Callable, Iterable
from typing import Any

from stepsort.common import Counters, StepEvent
from stepsort.signals import RunState

OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "==": operator.eq,
    "!=": operator.ne,
}

Listener = Callable[[StepEvent], None]


def _identity(value: Any) -> Any:
    return value


class SequenceEngine:
    """Owns the working sequence of a run and emits a StepEvent per step.

    The engine copies the initial values, so the caller never holds a live
    alias to the sequence being sorted; everything it sees comes from
    :meth:`snapshot` or from event snapshots.
    """

    def __init__(
        self,
        values: Iterable[Any],
        state: RunState | None = None,
        delay: float = 0.0,
        key: Callable[[Any], Any] | None = None,
    ):
        """Initialize the engine.

        Args:
            values: Initial sequence contents (copied)
            state: Shared run signals; a private one is created if omitted
            delay: Seconds to suspend after each step
            key: Maps an element to the integer it is ordered by (identity
                by default; used to sort tagged values in stability checks)
        """
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._values: list[Any] = list(values)
        self.state = state if state is not None else RunState()
        self.delay = delay
        self.key = key if key is not None else _identity
        self.counters = Counters()
        self._sorted: set[int] = set()
        self._listeners: list[Listener] = []

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> Any:
        return self._values[index]

    def value(self, index: int) -> Any:
        """Return the ordering key of the element at ``index``."""
        return self.key(self._values[index])

    def snapshot(self) -> tuple[Any, ...]:
        return tuple(self._values)

    @property
    def sorted_marks(self) -> frozenset[int]:
        return frozenset(self._sorted)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def compare(self, i: int, j: int, op: str) -> bool:
        """Compare the elements at ``i`` and ``j`` with ``op``.

        Counts one comparison and highlights both indices.
        """
        return self.compare_values(self[i], self[j], op, (i, j))

    def compare_values(self, left: Any, right: Any, op: str, active: tuple[int, ...] = ()) -> bool:
        """Compare two elements held outside the sequence (merge halves, a saved key).

        Args:
            left: Left-hand element
            right: Right-hand element
            op: One of ``<``, ``<=``, ``>``, ``>=``, ``==``, ``!=``
            active: Indices to highlight for this step (may be empty)

        Returns:
            The result of ``key(left) op key(right)``
        """
        try:
            fn = OPERATORS[op]
        except KeyError:
            raise ValueError(f"unknown comparison operator {op!r}") from None
        self.state.checkpoint()
        result = fn(self.key(left), self.key(right))
        self.counters.comparisons += 1
        self._emit(tuple(active), comparison_delta=1)
        self.state.sleep(self.delay)
        return result

    def write(self, index: int, value: Any) -> None:
        """Overwrite one position; counts one write whether or not the value changed."""
        self.state.checkpoint()
        self._values[index] = value
        self.counters.writes += 1
        self._emit((index,), write_delta=1)
        self.state.sleep(self.delay)

    def swap(self, i: int, j: int) -> None:
        """Exchange two positions; counts as a single write."""
        self.state.checkpoint()
        values = self._values
        values[i], values[j] = values[j], values[i]
        self.counters.writes += 1
        self._emit((i, j), write_delta=1)
        self.state.sleep(self.delay)

    def place(self, index: int, value: Any) -> None:
        """Put a held element back into the sequence without counting a write.

        Used for the final drop of an element that was lifted out earlier
        (insertion sort's key), whose displacement was already counted as shifts.
        """
        self.state.checkpoint()
        self._values[index] = value
        self._emit((index,))

    def touch(self, index: int) -> None:
        """Visit one position without comparing or writing it."""
        self.state.checkpoint()
        self._emit((index,))
        self.state.sleep(self.delay / 2)

    def mark_sorted(self, *indices: int) -> None:
        self._sorted.update(indices)

    def mark_all_sorted(self) -> None:
        self._sorted.update(range(len(self._values)))

    def emit_final(self) -> StepEvent:
        """Send a closing event with no active indices and no counter change."""
        return self._emit(())

    def _emit(self, active: tuple[int, ...], comparison_delta: int = 0, write_delta: int = 0) -> StepEvent:
        event = StepEvent(
            active_indices=active,
            comparison_delta=comparison_delta,
            write_delta=write_delta,
            snapshot=tuple(self._values),
            comparisons=self.counters.comparisons,
            writes=self.counters.writes,
            sorted_marks=frozenset(self._sorted),
        )
        for listener in self._listeners:
            listener(event)
        return event
