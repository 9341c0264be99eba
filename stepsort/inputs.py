"""Source arrays: random generation and free-text custom input."""

import random


def random_array(size: int, low: int, high: int, rng: random.Random | None = None) -> list[int]:
    """Return ``size`` integers drawn uniformly from ``[low, high]``."""
    if size < 0:
        raise ValueError("size must be >= 0")
    rng = rng if rng is not None else random.Random()
    return [rng.randint(low, high) for _ in range(size)]


def parse_custom_input(text: str) -> list[int]:
    """Parse comma-separated integers, silently dropping anything else.

    >>> parse_custom_input("10, 45, x, 2,, 99")
    [10, 45, 2, 99]
    """
    values = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            values.append(int(token))
        except ValueError:
            continue
    return values
