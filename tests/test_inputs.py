"""Tests for source-array generation, custom input parsing and configuration."""

import random

import pytest

from stepsort.config import DELAY_ENV, SEED_ENV, SIZE_ENV, RunConfig
from stepsort.inputs import parse_custom_input, random_array


@pytest.mark.parametrize(
    "text,expected",
    [
        ("10, 45, 2, 99", [10, 45, 2, 99]),
        ("1,2,3", [1, 2, 3]),
        ("  -4 ,7 ", [-4, 7]),
        ("5, abc, 6", [5, 6]),
        ("1.5, 2", [2]),
        ("", []),
        (",,,", []),
        ("not numbers", []),
    ],
)
def test_parse_custom_input(text, expected):
    assert parse_custom_input(text) == expected


def test_random_array_bounds():
    values = random_array(200, 5, 104, random.Random(0))
    assert len(values) == 200
    assert min(values) >= 5
    assert max(values) <= 104


def test_random_array_is_seedable():
    assert random_array(10, 0, 9, random.Random(3)) == random_array(10, 0, 9, random.Random(3))


def test_random_array_rejects_negative_size():
    with pytest.raises(ValueError):
        random_array(-1, 0, 1)


def test_config_defaults():
    config = RunConfig()
    assert config.delay_ms == 30
    assert config.delay == pytest.approx(0.03)
    assert config.size == 40
    assert (config.min_size, config.max_size) == (5, 100)
    assert (config.value_low, config.value_high) == (5, 104)


@pytest.mark.parametrize(
    "changes",
    [
        {"delay_ms": -1},
        {"size": 4},
        {"size": 101},
        {"value_low": 10, "value_high": 1},
        {"pause_after": -1},
    ],
)
def test_config_validation(changes):
    with pytest.raises(ValueError):
        RunConfig(**changes)


def test_config_from_env():
    config = RunConfig.from_env({DELAY_ENV: "5", SIZE_ENV: "12", SEED_ENV: "7"})
    assert config.delay_ms == 5
    assert config.size == 12
    assert config.seed == 7


def test_config_overrides_win_over_env():
    config = RunConfig.from_env({DELAY_ENV: "5"}, delay_ms=0, size=None)
    assert config.delay_ms == 0
    assert config.size == 40


def test_config_from_env_rejects_garbage():
    with pytest.raises(ValueError):
        RunConfig.from_env({SIZE_ENV: "lots"})
