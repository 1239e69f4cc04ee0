"""Breeding rules: pair compatibility, egg species and trait inheritance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from hatchery import probability
from hatchery._types import BASE_RETRO, FEMALE, GENDERLESS, STATS, RandomSource
from hatchery.balance import Balance, GeneticsMultipliers
from hatchery.egg import Egg
from hatchery.retro import get_retro, retro_chance, roll_retro_sprite
from hatchery.species import SpeciesDef, SpeciesTable

logger = logging.getLogger(__name__)

MAX_INHERITED_IVS = 6


class Parent(Protocol):
    """Anything carrying hatched genetics (a Creature in practice)."""

    species_id: int
    is_shiny: bool
    is_alpha: bool
    ivs: dict[str, int]
    nature: str
    gender: str
    retro: str


# ── Compatibility ────────────────────────────────────────────────────


def are_compatible(parent1: Parent, parent2: Parent, species: SpeciesTable) -> bool:
    """Whether two creatures can produce an egg together."""
    species1 = species.get(parent1.species_id)
    species2 = species.get(parent2.species_id)
    if species1 is None or species2 is None:
        return False

    if not species1.egg_groups or not species2.egg_groups:
        return False
    if not species1.egg_groups & species2.egg_groups:
        return False

    genderless1 = parent1.gender == GENDERLESS
    genderless2 = parent2.gender == GENDERLESS

    if genderless1 and genderless2:
        return False
    if genderless1:
        return species1.is_ditto
    if genderless2:
        return species2.is_ditto

    return parent1.gender != parent2.gender


def egg_species_for(
    parent1: Parent, parent2: Parent, species: SpeciesTable
) -> SpeciesDef | None:
    """The female parent's species, or the partner's when the female is Ditto.

    Without a female parent (Ditto with a male or genderless partner) the
    Ditto falls into the female slot, so the egg still takes the partner's
    species whichever slot Ditto occupies.
    """
    if parent1.gender == FEMALE:
        female, male = parent1, parent2
    else:
        female, male = parent2, parent1

    female_species = species.get(female.species_id)
    male_species = species.get(male.species_id)
    if female_species is None or male_species is None:
        return None
    if female_species.is_ditto:
        return male_species
    return female_species


# ── Trait inheritance ────────────────────────────────────────────────


def inherit_shiny(
    parent1: Parent,
    parent2: Parent,
    balance: Balance,
    rng: RandomSource | None = None,
) -> bool:
    carriers = int(parent1.is_shiny) + int(parent2.is_shiny)
    multiplier = balance.daycare.genetics.shiny.multiplier(carriers)
    return probability.roll_shiny(balance.shiny_odds, multiplier, rng)


def inherit_alpha(
    parent1: Parent,
    parent2: Parent,
    balance: Balance,
    rng: RandomSource | None = None,
) -> bool:
    carriers = int(parent1.is_alpha) + int(parent2.is_alpha)
    multiplier = balance.daycare.genetics.alpha.multiplier(carriers)
    return probability.roll_alpha(balance.alpha_odds, multiplier, rng)


def inherit_ivs(
    parent1: Parent,
    parent2: Parent,
    inherit_count: int,
    max_iv: int = 31,
    rng: RandomSource | None = None,
) -> dict[str, int]:
    """Random IVs with ``inherit_count`` distinct stats copied from the parents."""
    target = min(max(inherit_count, 0), MAX_INHERITED_IVS)
    ivs = probability.roll_ivs(max_iv, rng)

    pool: list[tuple[str, int]] = []
    for stat in STATS:
        pool.append((stat, parent1.ivs[stat]))
        pool.append((stat, parent2.ivs[stat]))

    r = probability.resolve_rng(rng)
    chosen: set[str] = set()
    while len(chosen) < target and pool:
        stat, value = pool.pop(r.randrange(len(pool)))
        if stat not in chosen:
            ivs[stat] = value
            chosen.add(stat)
    return ivs


def inherit_nature(
    parent1: Parent,
    parent2: Parent,
    balance: Balance,
    rng: RandomSource | None = None,
) -> str:
    genetics = balance.daycare.genetics.nature
    if genetics.enabled and parent1.nature == parent2.nature:
        if probability.resolve_rng(rng).random() < genetics.match_chance / 100:
            return parent1.nature
    return probability.roll_nature(balance.natures, rng)


def inherit_retro(
    parent1: Parent,
    parent2: Parent,
    egg_gen: int,
    genetics: GeneticsMultipliers,
    rng: RandomSource | None = None,
) -> str:
    if not genetics.retro.enabled:
        return roll_retro_sprite(egg_gen, None, None, rng=rng)
    return roll_retro_sprite(
        egg_gen,
        parent1.retro or BASE_RETRO,
        parent2.retro or BASE_RETRO,
        boost=genetics.retro,
        rng=rng,
    )


# ── Egg creation ─────────────────────────────────────────────────────


def create_breeding_egg(
    parent1: Parent,
    parent2: Parent,
    species: SpeciesTable,
    balance: Balance,
    iv_inherit_count: int | None = None,
    rng: RandomSource | None = None,
) -> Egg | None:
    """Roll a bred egg. Compatibility must be checked by the caller."""
    egg_species = egg_species_for(parent1, parent2, species)
    if egg_species is None:
        logger.warning(
            "Cannot breed species %s x %s: unknown species",
            parent1.species_id,
            parent2.species_id,
        )
        return None

    if iv_inherit_count is None:
        iv_inherit_count = balance.daycare.iv_inheritance_count

    return Egg(
        species_id=egg_species.id,
        steps=0,
        is_shiny=inherit_shiny(parent1, parent2, balance, rng),
        is_alpha=inherit_alpha(parent1, parent2, balance, rng),
        ivs=inherit_ivs(parent1, parent2, iv_inherit_count, balance.max_iv, rng),
        nature=inherit_nature(parent1, parent2, balance, rng),
        gender=probability.roll_gender(egg_species.gender_rate, rng),
        retro=inherit_retro(parent1, parent2, egg_species.gen, balance.daycare.genetics, rng),
    )


# ── Odds preview ─────────────────────────────────────────────────────


@dataclass
class BreedingOdds:
    """Per-egg trait chances for a pair, as shown before breeding."""

    species_id: int
    shiny: float
    alpha: float
    nature: str | None  # the shared nature that may be inherited
    nature_chance: float
    retro: dict[str, float] = field(default_factory=dict)


def breeding_odds(
    parent1: Parent,
    parent2: Parent,
    species: SpeciesTable,
    balance: Balance,
) -> BreedingOdds | None:
    """Chances of each inheritable trait, or None for an unbreedable pair.

    Retro chances cover the variants the parents carry, each as its own
    independent trial before the pick among several winners.
    """
    if not are_compatible(parent1, parent2, species):
        return None
    egg_species = egg_species_for(parent1, parent2, species)
    if egg_species is None:
        return None

    genetics = balance.daycare.genetics
    shiny_carriers = int(parent1.is_shiny) + int(parent2.is_shiny)
    alpha_carriers = int(parent1.is_alpha) + int(parent2.is_alpha)

    nature: str | None = None
    nature_chance = 0.0
    if genetics.nature.enabled and parent1.nature == parent2.nature:
        nature = parent1.nature
        nature_chance = genetics.nature.match_chance / 100

    boost = genetics.retro if genetics.retro.enabled else None
    retro: dict[str, float] = {}
    for name in dict.fromkeys((parent1.retro, parent2.retro)):
        variant = get_retro(name)
        if variant is None or not variant.covers(egg_species.gen):
            continue
        retro[name] = retro_chance(variant, parent1.retro, parent2.retro, boost)

    return BreedingOdds(
        species_id=egg_species.id,
        shiny=probability.chance(balance.shiny_odds, genetics.shiny.multiplier(shiny_carriers)),
        alpha=probability.chance(balance.alpha_odds, genetics.alpha.multiplier(alpha_carriers)),
        nature=nature,
        nature_chance=nature_chance,
        retro=retro,
    )
