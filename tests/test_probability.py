"""Tests for probability module."""
import random

import pytest

from hatchery import probability
from hatchery._types import FEMALE, GENDERLESS, MALE, STATS


def test_chance_clamps():
    assert probability.chance(8192) == pytest.approx(1 / 8192)
    assert probability.chance(8192, 10) == pytest.approx(10 / 8192)
    assert probability.chance(4, 10) == 1.0
    assert probability.chance(0) == 1.0


def test_roll_chance_converges():
    rng = random.Random(1)
    n = 200_000
    hits = sum(probability.roll_chance(100, 2, rng) for _ in range(n))
    assert hits / n == pytest.approx(0.02, rel=0.1)


def test_roll_chance_certain():
    rng = random.Random(2)
    assert all(probability.roll_shiny(5, 10, rng) for _ in range(100))


def test_square_shiny_only_for_shiny():
    rng = random.Random(3)
    assert not any(probability.roll_square_shiny(False, 1, rng) for _ in range(100))
    assert all(probability.roll_square_shiny(True, 1, rng) for _ in range(100))


def test_roll_ivs_range():
    rng = random.Random(4)
    for _ in range(500):
        ivs = probability.roll_ivs(31, rng)
        assert set(ivs) == set(STATS)
        assert all(0 <= v <= 31 for v in ivs.values())


def test_roll_gender_fixed_rates():
    rng = random.Random(5)
    assert probability.roll_gender(-1, rng) == GENDERLESS
    assert probability.roll_gender(0, rng) == FEMALE
    assert probability.roll_gender(100, rng) == MALE


def test_roll_gender_ratio():
    rng = random.Random(6)
    n = 20_000
    males = sum(probability.roll_gender(88, rng) == MALE for _ in range(n))
    assert males / n == pytest.approx(0.88, abs=0.02)


def test_roll_nature_from_list():
    rng = random.Random(7)
    assert probability.roll_nature(("Calm",), rng) == "Calm"


def test_weighted_choice():
    rng = random.Random(8)
    counts = {"a": 0, "b": 0}
    for _ in range(10_000):
        counts[probability.weighted_choice(["a", "b"], [3, 1], rng)] += 1
    assert counts["a"] / 10_000 == pytest.approx(0.75, abs=0.03)


def test_weighted_choice_edge_cases():
    assert probability.weighted_choice([], []) is None
    assert probability.weighted_choice(["x", "y"], [0, 0]) == "x"
