"""Retro sprite variants and their genetics roll."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from hatchery._types import BASE_RETRO, RandomSource
from hatchery.balance import TraitBoost
from hatchery.probability import resolve_rng


@dataclass(frozen=True)
class RetroSpriteDef:
    """A cosmetic sprite set covering species up to ``max_gen``."""

    name: str
    display_name: str
    max_gen: int
    probability: float  # 1 in X

    def covers(self, gen: int) -> bool:
        return gen <= self.max_gen


RETRO_SPRITES: tuple[RetroSpriteDef, ...] = (
    RetroSpriteDef("hgss2", "Heart Gold / Soul Silver 2", 4, 12.5),
    RetroSpriteDef("bw", "Black / White", 5, 250),
    RetroSpriteDef("pt", "Platinum", 4, 150),
    RetroSpriteDef("pt2", "Platinum 2", 4, 300),
    RetroSpriteDef("dp", "Diamond / Pearl", 4, 250),
    RetroSpriteDef("dp2", "Diamond / Pearl 2", 4, 500),
    RetroSpriteDef("frlg", "Fire Red / Leaf Green", 3, 1000),
    RetroSpriteDef("rs", "Ruby / Sapphire", 3, 1500),
    RetroSpriteDef("e", "Emerald", 3, 3000),
    RetroSpriteDef("gd", "Gold", 2, 2500),
    RetroSpriteDef("s", "Silver", 2, 2500),
    RetroSpriteDef("c", "Crystal", 2, 2500),
    RetroSpriteDef("y", "Yellow", 1, 2000),
    RetroSpriteDef("rb", "Red / Blue", 1, 3571),
    RetroSpriteDef("g", "Green", 1, 50000),
)

_BY_NAME = {r.name: r for r in RETRO_SPRITES}

_NO_BOOST = TraitBoost(enabled=False)


def get_retro(name: str | None) -> RetroSpriteDef | None:
    if not name or name == BASE_RETRO:
        return None
    return _BY_NAME.get(name)


def _carriers(name: str, parent1: str | None, parent2: str | None) -> int:
    return sum(
        1 for p in (parent1, parent2) if p and p != BASE_RETRO and p == name
    )


def retro_chance(
    retro: RetroSpriteDef,
    parent1: str | None = None,
    parent2: str | None = None,
    boost: TraitBoost | None = None,
) -> float:
    """Effective probability of one variant's independent trial."""
    p = 1.0 / retro.probability
    p *= (boost or _NO_BOOST).multiplier(_carriers(retro.name, parent1, parent2))
    return min(1.0, p)


def roll_retro_sprite(
    target_gen: int,
    parent1: str | None = None,
    parent2: str | None = None,
    boost: TraitBoost | None = None,
    rng: RandomSource | None = None,
    catalog: Sequence[RetroSpriteDef] = RETRO_SPRITES,
) -> str:
    """Roll every eligible variant independently, then pick among the winners.

    Each winner is weighted by its own effective probability, so the result
    differs from a single roll over one partitioned probability space. With no
    parents (wild eggs) every multiplier is 1.
    """
    r = resolve_rng(rng)
    eligible = [retro for retro in catalog if retro.covers(target_gen)]
    if not eligible:
        return BASE_RETRO

    winners: list[tuple[str, float]] = []
    for retro in eligible:
        p = retro_chance(retro, parent1, parent2, boost)
        if r.random() < p:
            winners.append((retro.name, p))

    if not winners:
        return BASE_RETRO
    if len(winners) == 1:
        return winners[0][0]

    total = sum(weight for _, weight in winners)
    roll = r.random() * total
    for name, weight in winners:
        if roll < weight:
            return name
        roll -= weight
    return winners[0][0]


def retro_display_name(name: str | None) -> str:
    retro = get_retro(name)
    return retro.display_name if retro else "Base"


def can_cover_gen(name: str | None, gen: int) -> bool:
    """Whether a creature wearing this variant may become a species of ``gen``."""
    retro = get_retro(name)
    if retro is None:
        return True
    return retro.covers(gen)


def sprite_path(base_path: str, name: str | None) -> str:
    """'sprites/pokemon/base/1.png' -> 'sprites/pokemon/frlg/1.png'."""
    if not name or name == BASE_RETRO:
        return base_path
    return base_path.replace("/base/", f"/{name}/")
