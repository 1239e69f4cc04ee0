"""Primitive odds rolls shared by wild and bred egg generation."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

from hatchery._types import FEMALE, GENDERLESS, MALE, NATURES, STATS, RandomSource

T = TypeVar("T")

_RNG = random.Random()


def resolve_rng(rng: RandomSource | None) -> RandomSource:
    return rng if rng is not None else _RNG


def chance(odds: float, multiplier: float = 1.0) -> float:
    """Probability of a ``multiplier`` in ``odds`` roll, clamped to 1."""
    if odds <= 0:
        return 1.0
    return min(1.0, multiplier / odds)


def roll_chance(odds: float, multiplier: float = 1.0, rng: RandomSource | None = None) -> bool:
    return resolve_rng(rng).random() < chance(odds, multiplier)


def roll_shiny(odds: float, multiplier: float = 1.0, rng: RandomSource | None = None) -> bool:
    return roll_chance(odds, multiplier, rng)


def roll_alpha(odds: float, multiplier: float = 1.0, rng: RandomSource | None = None) -> bool:
    return roll_chance(odds, multiplier, rng)


def roll_square_shiny(is_shiny: bool, odds: float = 16, rng: RandomSource | None = None) -> bool:
    """Secondary roll, only evaluated for shiny creatures."""
    if not is_shiny:
        return False
    return roll_chance(odds, 1.0, rng)


def roll_ivs(max_iv: int = 31, rng: RandomSource | None = None) -> dict[str, int]:
    r = resolve_rng(rng)
    return {stat: r.randint(0, max_iv) for stat in STATS}


def roll_nature(natures: Sequence[str] = NATURES, rng: RandomSource | None = None) -> str:
    return natures[resolve_rng(rng).randrange(len(natures))]


def roll_gender(gender_rate: int, rng: RandomSource | None = None) -> str:
    """Gender code from a species gender rate (percent male, -1 genderless)."""
    if gender_rate < 0:
        return GENDERLESS
    if gender_rate == 0:
        return FEMALE
    if gender_rate >= 100:
        return MALE
    return MALE if resolve_rng(rng).random() * 100 < gender_rate else FEMALE


def weighted_choice(
    items: Sequence[T],
    weights: Sequence[float],
    rng: RandomSource | None = None,
) -> T | None:
    """Pick one item by cumulative weight; first item on rounding fall-through."""
    if not items:
        return None
    total = sum(weights)
    if total <= 0:
        return items[0]
    roll = resolve_rng(rng).random() * total
    for item, weight in zip(items, weights):
        if roll < weight:
            return item
        roll -= weight
    return items[0]
