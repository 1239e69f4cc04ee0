"""Tests for retro module."""
import random

import pytest

from hatchery._types import BASE_RETRO
from hatchery.balance import TraitBoost
from hatchery.retro import (
    RetroSpriteDef,
    can_cover_gen,
    get_retro,
    retro_chance,
    retro_display_name,
    roll_retro_sprite,
    sprite_path,
)


class _ScriptedRng:
    """Returns queued values from random()."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)

    def randint(self, a, b):
        return a

    def randrange(self, stop):
        return 0


_CATALOG = (
    RetroSpriteDef("a", "A", 4, 10),
    RetroSpriteDef("b", "B", 2, 4),
)


def test_lookup():
    assert get_retro(BASE_RETRO) is None
    assert get_retro(None) is None
    assert get_retro("frlg").max_gen == 3
    assert retro_display_name("frlg") == "Fire Red / Leaf Green"
    assert retro_display_name(BASE_RETRO) == "Base"


def test_chance_with_parent_boost():
    retro = _CATALOG[0]
    boost = TraitBoost(one=2.0, two=5.0)
    assert retro_chance(retro) == pytest.approx(0.1)
    assert retro_chance(retro, "a", BASE_RETRO, boost) == pytest.approx(0.2)
    assert retro_chance(retro, "a", "a", boost) == pytest.approx(0.5)
    # A parent with another variant does not boost this one
    assert retro_chance(retro, "b", BASE_RETRO, boost) == pytest.approx(0.1)


def test_chance_clamped():
    retro = RetroSpriteDef("x", "X", 9, 2)
    assert retro_chance(retro, "x", "x", TraitBoost(one=2, two=5)) == 1.0


def test_no_eligible_variant_is_base():
    rng = _ScriptedRng([])
    assert roll_retro_sprite(9, rng=rng, catalog=_CATALOG) == BASE_RETRO


def test_ineligible_variants_skip_roll():
    # Only "a" covers gen 3; one random() call for it
    rng = _ScriptedRng([0.05])
    assert roll_retro_sprite(3, rng=rng, catalog=_CATALOG) == "a"


def test_no_winner_is_base():
    rng = _ScriptedRng([0.9, 0.9])
    assert roll_retro_sprite(1, rng=rng, catalog=_CATALOG) == BASE_RETRO


def test_multiple_winners_weighted_pick():
    # Both win (0.1 and 0.25); selection roll 0.5 * 0.35 = 0.175 >= 0.1 -> "b"
    rng = _ScriptedRng([0.05, 0.2, 0.5])
    assert roll_retro_sprite(1, rng=rng, catalog=_CATALOG) == "b"
    rng = _ScriptedRng([0.05, 0.2, 0.1])
    assert roll_retro_sprite(1, rng=rng, catalog=_CATALOG) == "a"


def test_base_rate_matches_independent_trials():
    rng = random.Random(11)
    n = 50_000
    base = sum(roll_retro_sprite(1, rng=rng, catalog=_CATALOG) == BASE_RETRO for _ in range(n))
    assert base / n == pytest.approx(0.9 * 0.75, abs=0.01)


def test_can_cover_gen():
    assert can_cover_gen(BASE_RETRO, 9)
    assert can_cover_gen("rb", 1)
    assert not can_cover_gen("rb", 2)


def test_sprite_path():
    assert sprite_path("sprites/pokemon/base/1.png", "frlg") == "sprites/pokemon/frlg/1.png"
    assert sprite_path("sprites/pokemon/base/1.png", BASE_RETRO) == "sprites/pokemon/base/1.png"
