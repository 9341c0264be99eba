"""Tests for the stepsort sequence engine."""

import pytest

from stepsort.sequence import SequenceEngine
from stepsort.signals import RunCancelledError, RunState


def test_compare_counts_and_highlights(recorder):
    engine = SequenceEngine([5, 3], RunState())
    engine.add_listener(recorder)

    assert engine.compare(0, 1, ">") is True
    assert engine.compare(0, 1, "<") is False

    assert engine.counters.comparisons == 2
    assert engine.counters.writes == 0
    first = recorder.events[0]
    assert first.active_indices == (0, 1)
    assert first.comparison_delta == 1
    assert first.write_delta == 0
    assert first.snapshot == (5, 3)
    assert [e.comparisons for e in recorder.events] == [1, 2]


def test_write_and_swap_count_one_write_each(recorder):
    engine = SequenceEngine([1, 2, 3], RunState())
    engine.add_listener(recorder)

    engine.write(0, 9)
    engine.swap(1, 2)
    # Overwriting with the same value is still a write.
    engine.write(2, engine[2])

    assert engine.snapshot() == (9, 3, 2)
    assert engine.counters.writes == 3
    assert [e.active_indices for e in recorder.events] == [(0,), (1, 2), (2,)]
    assert [e.write_delta for e in recorder.events] == [1, 1, 1]
    assert recorder.events[1].snapshot == (9, 3, 2)


def test_compare_values_with_no_active_indices(recorder):
    engine = SequenceEngine([], RunState())
    engine.add_listener(recorder)

    assert engine.compare_values(1, 1, "<=") is True
    assert recorder.events[0].active_indices == ()
    assert engine.counters.comparisons == 1


def test_unknown_operator_is_rejected():
    engine = SequenceEngine([1, 2], RunState())
    with pytest.raises(ValueError, match="unknown comparison operator"):
        engine.compare(0, 1, "<>")
    assert engine.counters.comparisons == 0


def test_touch_has_no_counter_effect(recorder):
    engine = SequenceEngine([4, 2], RunState())
    engine.add_listener(recorder)

    engine.touch(1)

    assert engine.counters.comparisons == 0
    assert engine.counters.writes == 0
    event = recorder.events[0]
    assert event.active_indices == (1,)
    assert (event.comparison_delta, event.write_delta) == (0, 0)


def test_engine_copies_its_input():
    values = [3, 2, 1]
    engine = SequenceEngine(values, RunState())
    engine.swap(0, 2)
    assert values == [3, 2, 1]
    assert engine.snapshot() == (1, 2, 3)


def test_sorted_marks_grow_and_appear_in_events(recorder):
    engine = SequenceEngine([2, 1, 3], RunState())
    engine.add_listener(recorder)

    engine.mark_sorted(2)
    engine.swap(0, 1)
    engine.mark_all_sorted()

    assert recorder.events[0].sorted_marks == frozenset({2})
    assert engine.sorted_marks == frozenset({0, 1, 2})


def test_cancelled_state_stops_the_next_step():
    state = RunState()
    engine = SequenceEngine([2, 1], state)
    state.cancel()

    with pytest.raises(RunCancelledError):
        engine.swap(0, 1)
    with pytest.raises(RunCancelledError):
        engine.compare(0, 1, "<")

    assert engine.snapshot() == (2, 1)
    assert engine.counters.writes == 0
    assert engine.counters.comparisons == 0


def test_key_orders_tagged_values():
    engine = SequenceEngine([(2, "a"), (1, "b")], RunState(), key=lambda item: item[0])
    assert engine.value(0) == 2
    assert engine.compare(0, 1, ">") is True


def test_negative_delay_is_rejected():
    with pytest.raises(ValueError):
        SequenceEngine([1], RunState(), delay=-1)


def test_listener_errors_propagate():
    engine = SequenceEngine([1, 2], RunState())

    def broken(event):
        raise RuntimeError("renderer failed")

    engine.add_listener(broken)
    with pytest.raises(RuntimeError, match="renderer failed"):
        engine.write(0, 5)


def test_place_updates_without_counting(recorder):
    engine = SequenceEngine([4, 4], RunState())
    engine.add_listener(recorder)

    engine.place(0, 1)

    assert engine.snapshot() == (1, 4)
    assert engine.counters.writes == 0
    event = recorder.events[0]
    assert event.active_indices == (0,)
    assert event.snapshot == (1, 4)
    assert (event.comparison_delta, event.write_delta) == (0, 0)


def test_place_respects_cancellation():
    state = RunState()
    engine = SequenceEngine([4, 4], state)
    state.cancel()

    with pytest.raises(RunCancelledError):
        engine.place(0, 1)
    assert engine.snapshot() == (4, 4)
