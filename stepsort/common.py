"""Shared data structures for stepsort."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RunStatus(Enum):
    """Lifecycle of one run of one algorithm over one array."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def is_active(self) -> bool:
        return self in (RunStatus.RUNNING, RunStatus.PAUSED)

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.CANCELLED, RunStatus.COMPLETED)


class RunInProgressError(RuntimeError):
    """Raised when a run is started or reconfigured while another is active."""


@dataclass
class Counters:
    """Running statistics for a run.

    Attributes:
        comparisons: Number of comparisons performed so far
        writes: Number of writes (overwrites and swaps) performed so far
    """

    comparisons: int = 0
    writes: int = 0

    def reset(self) -> None:
        self.comparisons = 0
        self.writes = 0

    def copy(self) -> "Counters":
        return Counters(self.comparisons, self.writes)

    def __repr__(self):
        return f"Counters(comparisons={self.comparisons}, writes={self.writes})"


@dataclass(frozen=True)
class StepEvent:
    """Notification emitted after each atomic step of a run.

    Attributes:
        active_indices: Indices being compared or moved (0 to 2 of them)
        comparison_delta: 1 if this step was a comparison, else 0
        write_delta: 1 if this step was a write or swap, else 0
        snapshot: The full sequence after the step
        comparisons: Cumulative comparison count including this step
        writes: Cumulative write count including this step
        sorted_marks: Indices the algorithm has settled so far
    """

    active_indices: tuple[int, ...]
    comparison_delta: int
    write_delta: int
    snapshot: tuple[Any, ...]
    comparisons: int
    writes: int
    sorted_marks: frozenset[int] = frozenset()


@dataclass
class RunResult:
    """Outcome of a finished run.

    Attributes:
        algorithm: Key of the algorithm that ran
        status: COMPLETED or CANCELLED
        sequence: The sequence as the run left it (partial when cancelled)
        counters: Final comparison and write counts
        sorted_marks: Indices marked settled when the run ended
        elapsed: Wall-clock seconds spent in the run
    """

    algorithm: str
    status: RunStatus
    sequence: tuple[Any, ...]
    counters: Counters = field(default_factory=Counters)
    sorted_marks: frozenset[int] = frozenset()
    elapsed: float = 0.0

    @property
    def completed(self) -> bool:
        return self.status is RunStatus.COMPLETED


@dataclass(frozen=True)
class AlgorithmInfo:
    """Catalogue entry describing one sorting algorithm.

    Attributes:
        key: Short identifier used to select the algorithm ("bubble", "quick", ...)
        label: Human-readable name
        best: Best-case time complexity
        average: Average-case time complexity
        worst: Worst-case time complexity
        stable: Whether equal elements keep their relative order
        description: One-paragraph explanation for display
        sort: The step-driven implementation, called with a SequenceEngine
    """

    key: str
    label: str
    best: str
    average: str
    worst: str
    stable: bool
    description: str
    sort: Callable[..., None] = field(repr=False, compare=False)

    def __repr__(self):
        return f"AlgorithmInfo({self.key!r}, {self.label!r})"
