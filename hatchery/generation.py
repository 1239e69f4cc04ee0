"""Wild egg generation for the shelter."""

from __future__ import annotations

import logging

from hatchery import probability
from hatchery._types import RandomSource
from hatchery.balance import Balance
from hatchery.egg import Egg
from hatchery.retro import roll_retro_sprite
from hatchery.species import SpeciesDef, SpeciesTable

logger = logging.getLogger(__name__)


def wild_candidates(
    species: SpeciesTable, rarity_weights: dict[str, float]
) -> list[SpeciesDef]:
    """Egg-capable species whose rarity tier has a configured weight."""
    return [s for s in species.egg_capable() if s.rarity in rarity_weights]


def pick_wild_species(
    species: SpeciesTable,
    rarity_weights: dict[str, float],
    rng: RandomSource | None = None,
) -> SpeciesDef | None:
    candidates = wild_candidates(species, rarity_weights)
    weights = [rarity_weights[s.rarity] for s in candidates]
    return probability.weighted_choice(candidates, weights, rng)


def create_wild_egg(
    species: SpeciesTable,
    balance: Balance,
    rng: RandomSource | None = None,
) -> Egg | None:
    """Roll a fresh egg with base odds and no parental influence."""
    picked = pick_wild_species(species, balance.rarity_weights, rng)
    if picked is None:
        logger.warning("No egg-capable species with a weighted rarity")
        return None

    return Egg(
        species_id=picked.id,
        steps=0,
        is_shiny=probability.roll_shiny(balance.shiny_odds, 1.0, rng),
        is_alpha=probability.roll_alpha(balance.alpha_odds, 1.0, rng),
        ivs=probability.roll_ivs(balance.max_iv, rng),
        nature=probability.roll_nature(balance.natures, rng),
        gender=probability.roll_gender(picked.gender_rate, rng),
        retro=roll_retro_sprite(picked.gen, rng=rng),
    )
