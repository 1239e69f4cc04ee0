"""Tests for evolution module."""
import pytest

from hatchery._types import BASE_RETRO, FEMALE, MALE, STATS
from hatchery.egg import Creature
from hatchery.evolution import (
    check_evolution_conditions,
    evolution_block_reason,
    evolve,
    possible_evolutions,
    rare_candies_needed,
)
from hatchery.species import Evolution, SpeciesDef, SpeciesTable
from hatchery.state import GameState


def _make_species() -> SpeciesTable:
    return SpeciesTable([
        SpeciesDef(
            280, "Ralts", gen=3,
            evolutions=(Evolution("Kirlia", ("level",), 20),),
        ),
        SpeciesDef(
            281, "Kirlia", gen=3,
            evolutions=(
                Evolution("Gardevoir", ("level",), 30),
                Evolution("Gallade", ("level", "gender"), 30, "M"),
            ),
        ),
        SpeciesDef(282, "Gardevoir", gen=3),
        SpeciesDef(475, "Gallade", gen=4),
        SpeciesDef(
            25, "Pikachu", gen=1,
            evolutions=(Evolution("Raichu", ("item",), None, "thunder-stone"),),
        ),
        SpeciesDef(26, "Raichu", gen=1),
    ])


def _make_creature(species_id, gender=MALE, retro=BASE_RETRO) -> Creature:
    return Creature(
        species_id=species_id,
        is_shiny=True,
        is_square_shiny=False,
        is_alpha=False,
        ivs={s: 12 for s in STATS},
        nature="Calm",
        gender=gender,
        retro=retro,
        capture_time="2024-01-01T00:00:00.000Z",
    )


def test_level_requires_candy():
    species = _make_species()
    ralts = _make_creature(280)
    evo = species.get(280).evolutions[0]
    assert not check_evolution_conditions(ralts, evo, species, 19)
    assert check_evolution_conditions(ralts, evo, species, 20)


def test_gender_method():
    species = _make_species()
    gallade = species.get(281).evolutions[1]
    assert check_evolution_conditions(_make_creature(281, MALE), gallade, species, 30)
    assert not check_evolution_conditions(_make_creature(281, FEMALE), gallade, species, 30)


def test_item_never_passes():
    species = _make_species()
    evo = species.get(25).evolutions[0]
    assert not check_evolution_conditions(_make_creature(25), evo, species, 999)
    assert evolution_block_reason(_make_creature(25), evo, species, 0) == (
        "Requires item (not implemented)"
    )


def test_retro_must_cover_target_gen():
    species = _make_species()
    kirlia = _make_creature(281, MALE, retro="rs")  # covers up to gen 3
    gardevoir, gallade = species.get(281).evolutions
    assert check_evolution_conditions(kirlia, gardevoir, species, 30)
    assert not check_evolution_conditions(kirlia, gallade, species, 30)
    assert "doesn't cover Gen 4" in evolution_block_reason(kirlia, gallade, species, 30)


def test_block_reasons():
    species = _make_species()
    gallade = species.get(281).evolutions[1]
    reason = evolution_block_reason(_make_creature(281, FEMALE), gallade, species, 2)
    assert reason == "Level 30 (Have 2 candies), Male only (You have Female)"


def test_possible_evolutions_and_candy_needed():
    species = _make_species()
    kirlia = _make_creature(281, FEMALE)
    names = [e.evolves_to for e in possible_evolutions(kirlia, species, 30)]
    assert names == ["Gardevoir"]
    assert rare_candies_needed(kirlia, species) == 30
    assert rare_candies_needed(_make_creature(25), species) is None


def test_evolve_spends_candy_and_keeps_traits():
    species = _make_species()
    state = GameState(pc_capacity=3)
    state.pc[1] = _make_creature(280)
    state.rare_candy = 25

    assert evolve(state, 1, "Kirlia", species)
    evolved = state.pc[1]
    assert evolved.species_id == 281
    assert evolved.is_shiny
    assert evolved.nature == "Calm"
    assert evolved.capture_time == "2024-01-01T00:00:00.000Z"
    assert state.rare_candy == 5


def test_evolve_rejected():
    species = _make_species()
    state = GameState(pc_capacity=3)
    state.pc[0] = _make_creature(280)
    state.rare_candy = 5
    assert not evolve(state, 0, "Kirlia", species)
    assert not evolve(state, 0, "Gardevoir", species)
    assert not evolve(state, 2, "Kirlia", species)
    assert state.rare_candy == 5
    assert state.pc[0].species_id == 280
