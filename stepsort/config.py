"""Configuration knobs for runs, generated arrays and the demo loop.

Defaults reproduce the reference visualizer: 40 random values between 5 and
104, a 30 ms step delay, array sizes between 5 and 100, one second of rest
before each demo run and two seconds after it.
"""

import os
from dataclasses import dataclass, replace

# Environment variables read by RunConfig.from_env()
DELAY_ENV = "STEPSORT_DELAY_MS"
SIZE_ENV = "STEPSORT_SIZE"
SEED_ENV = "STEPSORT_SEED"

DEFAULT_DELAY_MS = 30
DEFAULT_SIZE = 40
MIN_SIZE = 5
MAX_SIZE = 100
VALUE_LOW = 5
VALUE_HIGH = 104


@dataclass(frozen=True)
class RunConfig:
    """Settings shared by the dispatcher, the demo loop and the CLI."""

    delay_ms: float = DEFAULT_DELAY_MS
    size: int = DEFAULT_SIZE
    min_size: int = MIN_SIZE
    max_size: int = MAX_SIZE
    value_low: int = VALUE_LOW
    value_high: int = VALUE_HIGH
    pause_before: float = 1.0
    pause_after: float = 2.0
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        if self.min_size < 0 or self.min_size > self.max_size:
            raise ValueError("min_size must be between 0 and max_size")
        if not self.min_size <= self.size <= self.max_size:
            raise ValueError(f"size must be between {self.min_size} and {self.max_size}")
        if self.value_low > self.value_high:
            raise ValueError("value_low must be <= value_high")
        if self.pause_before < 0 or self.pause_after < 0:
            raise ValueError("demo pauses must be >= 0")

    @property
    def delay(self) -> float:
        """Step delay in seconds."""
        return self.delay_ms / 1000

    def with_changes(self, **changes) -> "RunConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> "RunConfig":
        """Build a config from ``STEPSORT_*`` environment variables.

        Explicit keyword overrides win over the environment.

        Raises:
            ValueError: If a variable is set to something that is not a number
        """
        if environ is None:
            environ = dict(os.environ)
        values: dict = {}
        if environ.get(DELAY_ENV):
            values["delay_ms"] = float(environ[DELAY_ENV])
        if environ.get(SIZE_ENV):
            values["size"] = int(environ[SIZE_ENV])
        if environ.get(SEED_ENV):
            values["seed"] = int(environ[SEED_ENV])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
