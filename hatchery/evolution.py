from __future__ import annotations

import dataclasses
import logging

from hatchery._types import gender_label
from hatchery.egg import Creature
from hatchery.retro import can_cover_gen, retro_display_name
from hatchery.species import Evolution, SpeciesTable
from hatchery.state import GameState

logger = logging.getLogger(__name__)

LEVEL = "level"
GENDER = "gender"
ITEM = "item"


def _candy_cost(evolution: Evolution) -> int:
    return evolution.value if evolution.value is not None else 0


def check_evolution_conditions(
    creature: Creature,
    evolution: Evolution,
    species: SpeciesTable,
    rare_candy: int,
) -> bool:
    if not evolution.method:
        return False

    evolved = species.by_name(evolution.evolves_to)
    if evolved is not None and not can_cover_gen(creature.retro, evolved.gen):
        return False

    for method in evolution.method:
        if method == LEVEL:
            if rare_candy < _candy_cost(evolution):
                return False
        elif method == GENDER:
            if creature.gender != evolution.value_2:
                return False
        else:
            # Items are not implemented; unknown methods never pass.
            return False
    return True


def evolution_block_reason(
    creature: Creature,
    evolution: Evolution,
    species: SpeciesTable,
    rare_candy: int,
) -> str:
    if not evolution.method:
        return "Unknown condition"

    evolved = species.by_name(evolution.evolves_to)
    if evolved is not None and not can_cover_gen(creature.retro, evolved.gen):
        return f"{retro_display_name(creature.retro)} sprite doesn't cover Gen {evolved.gen}"

    reasons: list[str] = []
    for method in evolution.method:
        if method == LEVEL and rare_candy < _candy_cost(evolution):
            reasons.append(f"Level {evolution.value} (Have {rare_candy} candies)")
        elif method == GENDER and creature.gender != evolution.value_2:
            wanted = gender_label(evolution.value_2 or "")
            reasons.append(f"{wanted} only (You have {gender_label(creature.gender)})")
        elif method == ITEM:
            reasons.append("Requires item (not implemented)")
    return ", ".join(reasons) if reasons else "Unknown"


def possible_evolutions(
    creature: Creature, species: SpeciesTable, rare_candy: int
) -> list[Evolution]:
    sdef = species.get(creature.species_id)
    if sdef is None:
        return []
    return [
        evo for evo in sdef.evolutions
        if check_evolution_conditions(creature, evo, species, rare_candy)
    ]


def rare_candies_needed(creature: Creature, species: SpeciesTable) -> int | None:
    """Candy cost of the first level-based evolution, if any."""
    sdef = species.get(creature.species_id)
    if sdef is None:
        return None
    for evo in sdef.evolutions:
        if LEVEL in evo.method:
            return evo.value
    return None


def evolve(
    state: GameState, pc_index: int, evolves_to: str, species: SpeciesTable
) -> bool:
    """Evolve the creature in a PC slot, spending its rare candy cost."""
    creature = state.pc_get(pc_index)
    if creature is None:
        return False
    sdef = species.get(creature.species_id)
    if sdef is None:
        return False

    evolution = next((e for e in sdef.evolutions if e.evolves_to == evolves_to), None)
    if evolution is None:
        return False
    if not check_evolution_conditions(creature, evolution, species, state.rare_candy):
        return False

    cost = _candy_cost(evolution)
    if not state.use_rare_candy(cost):
        return False

    evolved = species.by_name(evolves_to)
    if evolved is None:
        state.add_rare_candy(cost)
        logger.warning("Evolution target %r is not in the species table", evolves_to)
        return False

    state.pc[pc_index] = dataclasses.replace(creature, species_id=evolved.id)
    logger.info("%s evolved into %s", sdef.name, evolved.name)
    return True
