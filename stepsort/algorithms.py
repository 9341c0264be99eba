"""Step-driven sorting algorithms.

Every algorithm takes a :class:`~stepsort.sequence.SequenceEngine` and sorts
it in place, performing each comparison and each write through the engine.
That is the whole control protocol: the engine checks for pause and
cancellation before every step and reports every step to its listeners, so
the algorithms below are written as plain loops and recursion with no
knowledge of threads, delays or rendering.

Cancellation surfaces as :class:`~stepsort.signals.RunCancelledError` raised
out of the next step, which unwinds nested loops and recursive calls alike
and leaves the sequence exactly as the last completed step left it.

None of the algorithms terminates early on already-sorted input; bubble and
insertion sort always perform their full passes.
"""

import functools
import math

from stepsort.common import AlgorithmInfo
from stepsort.sequence import SequenceEngine


def bubble_sort(seq: SequenceEngine) -> None:
    n = len(seq)
    for i in range(n - 1):
        for j in range(n - i - 1):
            if seq.compare(j, j + 1, ">"):
                seq.swap(j, j + 1)
        seq.mark_sorted(n - 1 - i)
    if n:
        seq.mark_sorted(0)


def selection_sort(seq: SequenceEngine) -> None:
    n = len(seq)
    for i in range(n):
        min_index = i
        for j in range(i + 1, n):
            if seq.compare(j, min_index, "<"):
                min_index = j
        if min_index != i:
            seq.swap(i, min_index)
        seq.mark_sorted(i)


def insertion_sort(seq: SequenceEngine) -> None:
    """Shift larger elements right, then drop the saved key into the gap.

    Every shift is one write; dropping the key into the gap is not counted.
    """
    for i in range(1, len(seq)):
        key = seq[i]
        j = i - 1
        while j >= 0 and seq.compare_values(seq[j], key, ">", (j, j + 1)):
            seq.write(j + 1, seq[j])
            j -= 1
        if j + 1 != i:
            seq.place(j + 1, key)


def merge_sort(seq: SequenceEngine) -> None:
    _merge_sort(seq, 0, len(seq) - 1)


def _merge_sort(seq: SequenceEngine, left: int, right: int) -> None:
    if left >= right:
        return
    mid = left + (right - left) // 2
    _merge_sort(seq, left, mid)
    _merge_sort(seq, mid + 1, right)
    _merge(seq, left, mid, right)


def _merge(seq: SequenceEngine, left: int, mid: int, right: int) -> None:
    lower = [seq[k] for k in range(left, mid + 1)]
    upper = [seq[k] for k in range(mid + 1, right + 1)]
    i = j = 0
    k = left

    while i < len(lower) and j < len(upper):
        # <= keeps the left element first on ties
        if seq.compare_values(lower[i], upper[j], "<=", (left + i, mid + 1 + j)):
            seq.write(k, lower[i])
            i += 1
        else:
            seq.write(k, upper[j])
            j += 1
        k += 1

    for value in lower[i:] + upper[j:]:
        seq.write(k, value)
        k += 1


def quick_sort(seq: SequenceEngine) -> None:
    """Lomuto quicksort with the last element as pivot.

    Pending ranges live on an explicit stack, pushed right-then-left so the
    left range is always finished first.
    """
    ranges = [(0, len(seq) - 1)]
    while ranges:
        low, high = ranges.pop()
        if low > high:
            continue
        if low == high:
            seq.mark_sorted(low)
            continue
        pivot = _partition(seq, low, high)
        seq.mark_sorted(pivot)
        ranges.append((pivot + 1, high))
        ranges.append((low, pivot - 1))


def _partition(seq: SequenceEngine, low: int, high: int) -> int:
    i = low - 1
    for j in range(low, high):
        if seq.compare(j, high, "<"):
            i += 1
            seq.swap(i, j)
    # Always a step, even when the pivot is already in place.
    seq.swap(i + 1, high)
    return i + 1


def radix_sort(seq: SequenceEngine) -> None:
    """LSD radix sort, one stable counting pass per decimal digit.

    Negative inputs are sorted on their distance from the minimum.
    """
    n = len(seq)
    if n == 0:
        return
    keys = [seq.value(k) for k in range(n)]
    offset = min(min(keys), 0)
    largest = max(keys) - offset
    exp = 1
    while largest // exp > 0:
        _counting_pass(seq, exp, offset)
        exp *= 10


def _counting_pass(seq: SequenceEngine, exp: int, offset: int) -> None:
    n = len(seq)

    def digit(index: int) -> int:
        return (seq.value(index) - offset) // exp % 10

    count = [0] * 10
    for k in range(n):
        count[digit(k)] += 1
    for d in range(1, 10):
        count[d] += count[d - 1]

    output = [None] * n
    for k in range(n - 1, -1, -1):
        seq.touch(k)
        d = digit(k)
        count[d] -= 1
        output[count[d]] = seq[k]

    for k in range(n):
        seq.write(k, output[k])


def bucket_sort(seq: SequenceEngine) -> None:
    """Distribute into floor(sqrt(n)) buckets, sort each, write them back in order.

    The bucket index ``(v - min) * count // (max - min + 1)`` is always below
    ``count``, including for ``v == max`` and when every value is equal.
    Buckets are sorted with :func:`sorted`; each comparator call is one
    comparison.
    """
    n = len(seq)
    if n == 0:
        return
    keys = [seq.value(k) for k in range(n)]
    low, high = min(keys), max(keys)
    bucket_count = math.isqrt(n)
    buckets: list[list] = [[] for _ in range(bucket_count)]

    for k in range(n):
        seq.touch(k)
        index = (seq.value(k) - low) * bucket_count // (high - low + 1)
        buckets[index].append(seq[k])

    def compare(a, b) -> int:
        # sorted() only ever asks whether a < b
        return -1 if seq.compare_values(a, b, "<") else 1

    order = functools.cmp_to_key(compare)
    k = 0
    for bucket in buckets:
        for value in sorted(bucket, key=order):
            seq.write(k, value)
            k += 1


ALGORITHMS: dict[str, AlgorithmInfo] = {
    info.key: info
    for info in [
        AlgorithmInfo(
            key="bubble",
            label="Bubble Sort",
            best="O(n²)",
            average="O(n²)",
            worst="O(n²)",
            stable=True,
            description=(
                "Repeatedly steps through the list, compares adjacent elements and swaps them "
                "if they are in the wrong order."
            ),
            sort=bubble_sort,
        ),
        AlgorithmInfo(
            key="selection",
            label="Selection Sort",
            best="O(n²)",
            average="O(n²)",
            worst="O(n²)",
            stable=False,
            description=(
                "Divides the list into a sorted prefix, built up from left to right, and the "
                "remaining unsorted items; each pass moves the smallest unsorted item to the "
                "end of the prefix."
            ),
            sort=selection_sort,
        ),
        AlgorithmInfo(
            key="insertion",
            label="Insertion Sort",
            best="O(n)",
            average="O(n²)",
            worst="O(n²)",
            stable=True,
            description=(
                "Builds the final sorted list one item at a time by shifting larger items right "
                "and inserting each new item into the gap."
            ),
            sort=insertion_sort,
        ),
        AlgorithmInfo(
            key="merge",
            label="Merge Sort",
            best="O(n log n)",
            average="O(n log n)",
            worst="O(n log n)",
            stable=True,
            description=(
                "Divide and conquer: splits the list into two halves, sorts each half "
                "recursively, then merges the two sorted halves."
            ),
            sort=merge_sort,
        ),
        AlgorithmInfo(
            key="quick",
            label="Quick Sort",
            best="O(n log n)",
            average="O(n log n)",
            worst="O(n²)",
            stable=False,
            description=(
                "Divide and conquer: picks the last element as pivot, partitions the list "
                "around it, then sorts both sides."
            ),
            sort=quick_sort,
        ),
        AlgorithmInfo(
            key="radix",
            label="Radix Sort",
            best="O(nk)",
            average="O(nk)",
            worst="O(nk)",
            stable=True,
            description=(
                "Non-comparative: distributes elements by one decimal digit at a time, least "
                "significant first, using a stable counting sort per digit."
            ),
            sort=radix_sort,
        ),
        AlgorithmInfo(
            key="bucket",
            label="Bucket Sort",
            best="O(n log n)",
            average="O(n log n)",
            worst="O(n²)",
            stable=True,
            description=(
                "Distribution sort: spreads elements over a number of value-range buckets, sorts "
                "each bucket individually, then concatenates them."
            ),
            sort=bucket_sort,
        ),
    ]
}


def get_algorithm(key: str) -> AlgorithmInfo:
    """Look up an algorithm by key.

    Raises:
        KeyError: If no algorithm is registered under ``key``
    """
    try:
        return ALGORITHMS[key]
    except KeyError:
        known = ", ".join(ALGORITHMS)
        raise KeyError(f"unknown algorithm {key!r} (known: {known})") from None
