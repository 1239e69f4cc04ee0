"""Tests for breeding and generation modules."""
import random

import pytest

from hatchery._types import BASE_RETRO, FEMALE, GENDERLESS, MALE, STATS
from hatchery.balance import Balance
from hatchery.breeding import (
    are_compatible,
    breeding_odds,
    create_breeding_egg,
    egg_species_for,
    inherit_ivs,
    inherit_nature,
)
from hatchery.egg import Creature
from hatchery.generation import create_wild_egg, pick_wild_species, wild_candidates
from hatchery.species import SpeciesDef, SpeciesTable


def _make_species() -> SpeciesTable:
    return SpeciesTable([
        SpeciesDef(1, "Rattata", frozenset({"field"}), 50, "common", 1, 100, egg_sprite="e"),
        SpeciesDef(2, "Eevee", frozenset({"field"}), 88, "rare", 1, 100, egg_sprite="e"),
        SpeciesDef(3, "Magnemite", frozenset({"mineral"}), -1, "uncommon", 1, 100, egg_sprite="e"),
        SpeciesDef(4, "Ditto", frozenset({"ditto", "field", "mineral"}), -1, "special", 1, 100),
        SpeciesDef(5, "Nidoran", frozenset({"monster"}), 0, "uncommon", 1, 100, egg_sprite="e"),
        SpeciesDef(6, "Loner", frozenset(), 50, "common", 1, 100, egg_sprite="e"),
    ])


def _make_creature(species_id, gender, **kwargs) -> Creature:
    defaults = dict(
        is_shiny=False,
        is_square_shiny=False,
        is_alpha=False,
        ivs={s: 0 for s in STATS},
        nature="Hardy",
        retro=BASE_RETRO,
    )
    defaults.update(kwargs)
    return Creature(species_id=species_id, gender=gender, **defaults)


# ── Compatibility ────────────────────────────────────────────────────


def test_opposite_gender_same_group():
    species = _make_species()
    assert are_compatible(_make_creature(1, MALE), _make_creature(2, FEMALE), species)


def test_same_gender_rejected():
    species = _make_species()
    assert not are_compatible(_make_creature(1, MALE), _make_creature(2, MALE), species)


def test_no_shared_group_rejected():
    species = _make_species()
    assert not are_compatible(_make_creature(1, MALE), _make_creature(5, FEMALE), species)


def test_missing_egg_groups_rejected():
    species = _make_species()
    assert not are_compatible(_make_creature(6, MALE), _make_creature(1, FEMALE), species)


def test_genderless_needs_ditto():
    species = _make_species()
    magnemite = _make_creature(3, GENDERLESS)
    ditto = _make_creature(4, GENDERLESS)
    assert are_compatible(magnemite, ditto, species) is False  # both genderless
    assert not are_compatible(magnemite, _make_creature(3, GENDERLESS), species)
    assert are_compatible(ditto, _make_creature(1, MALE), species)
    assert are_compatible(_make_creature(1, FEMALE), ditto, species)


def test_unknown_species_rejected():
    species = _make_species()
    assert not are_compatible(_make_creature(99, MALE), _make_creature(1, FEMALE), species)


# ── Egg species ──────────────────────────────────────────────────────


def test_egg_takes_female_species():
    species = _make_species()
    sdef = egg_species_for(_make_creature(1, MALE), _make_creature(2, FEMALE), species)
    assert sdef.name == "Eevee"


def test_ditto_yields_partner_species_in_either_slot():
    species = _make_species()
    ditto = _make_creature(4, GENDERLESS)
    for partner in (_make_creature(1, MALE), _make_creature(1, FEMALE)):
        assert egg_species_for(ditto, partner, species).name == "Rattata"
        assert egg_species_for(partner, ditto, species).name == "Rattata"


# ── Inheritance ──────────────────────────────────────────────────────


def test_inherit_ivs_distinct_stats():
    # Sentinels no random roll can produce when max_iv is 0
    p1 = _make_creature(1, MALE, ivs={s: 1 + i for i, s in enumerate(STATS)})
    p2 = _make_creature(2, FEMALE, ivs={s: 11 + i for i, s in enumerate(STATS)})
    rng = random.Random(21)
    for count in range(0, 7):
        for _ in range(50):
            ivs = inherit_ivs(p1, p2, count, max_iv=0, rng=rng)
            assert set(ivs) == set(STATS)
            inherited = [
                s for s in STATS if ivs[s] in (p1.ivs[s], p2.ivs[s])
            ]
            assert len(inherited) == count
            assert all(ivs[s] == 0 for s in STATS if s not in inherited)


def test_inherit_ivs_copies_parent_values():
    p1 = _make_creature(1, MALE, ivs={s: 31 for s in STATS})
    p2 = _make_creature(2, FEMALE, ivs={s: 30 for s in STATS})
    ivs = inherit_ivs(p1, p2, 6, rng=random.Random(22))
    assert all(v in (30, 31) for v in ivs.values())


def test_inherit_ivs_clamps_count():
    p1 = _make_creature(1, MALE, ivs={s: 31 for s in STATS})
    p2 = _make_creature(2, FEMALE, ivs={s: 31 for s in STATS})
    assert inherit_ivs(p1, p2, 9, rng=random.Random(23)) == {s: 31 for s in STATS}


def test_shared_nature_inherited():
    bal = Balance()
    p1 = _make_creature(1, MALE, nature="Calm")
    p2 = _make_creature(2, FEMALE, nature="Calm")
    rng = random.Random(24)
    assert all(inherit_nature(p1, p2, bal, rng) == "Calm" for _ in range(50))


def test_nature_genetics_disabled():
    bal = Balance(natures=("Bold",))
    bal.daycare.genetics.nature.enabled = False
    p1 = _make_creature(1, MALE, nature="Calm")
    p2 = _make_creature(2, FEMALE, nature="Calm")
    assert inherit_nature(p1, p2, bal, random.Random(25)) == "Bold"


def test_bred_egg_is_populated():
    species = _make_species()
    bal = Balance()
    rng = random.Random(26)
    p1 = _make_creature(1, MALE)
    p2 = _make_creature(2, FEMALE)
    for _ in range(200):
        egg = create_breeding_egg(p1, p2, species, bal, rng=rng)
        assert egg.species_id == 2
        assert egg.steps == 0
        assert egg.gender in (MALE, FEMALE)
        assert egg.nature == "Hardy"


def test_non_carriers_breed_at_base_odds():
    species = _make_species()
    bal = Balance(shiny_odds=50, alpha_odds=20)
    rng = random.Random(28)
    p1 = _make_creature(1, MALE)
    p2 = _make_creature(2, FEMALE)
    n = 20_000
    eggs = [create_breeding_egg(p1, p2, species, bal, rng=rng) for _ in range(n)]
    assert sum(e.is_shiny for e in eggs) / n == pytest.approx(1 / 50, abs=0.004)
    assert sum(e.is_alpha for e in eggs) / n == pytest.approx(1 / 20, abs=0.008)


def test_bred_gender_follows_egg_species_rate():
    species = _make_species()
    bal = Balance()
    rng = random.Random(29)
    # Nidoran is always female
    female_only = [
        create_breeding_egg(
            _make_creature(5, FEMALE), _make_creature(1, MALE), species, bal, rng=rng
        ).gender
        for _ in range(200)
    ]
    assert set(female_only) == {FEMALE}

    # Eevee is 88% male
    n = 5_000
    eevee = [
        create_breeding_egg(
            _make_creature(1, MALE), _make_creature(2, FEMALE), species, bal, rng=rng
        ).gender
        for _ in range(n)
    ]
    assert eevee.count(MALE) / n == pytest.approx(0.88, abs=0.02)
    assert set(eevee) == {MALE, FEMALE}


def test_bred_shiny_rate_with_shiny_parents():
    species = _make_species()
    bal = Balance(shiny_odds=100)
    rng = random.Random(27)
    p1 = _make_creature(1, MALE, is_shiny=True)
    p2 = _make_creature(2, FEMALE, is_shiny=True)
    n = 20_000
    shiny = sum(create_breeding_egg(p1, p2, species, bal, rng=rng).is_shiny for _ in range(n))
    assert shiny / n == pytest.approx(0.1, abs=0.01)


def test_bred_egg_unknown_species():
    species = _make_species()
    egg = create_breeding_egg(
        _make_creature(99, MALE), _make_creature(2, FEMALE), species, Balance()
    )
    assert egg is None


def test_breeding_odds():
    species = _make_species()
    bal = Balance()
    p1 = _make_creature(1, MALE, is_shiny=True, nature="Calm", retro="rb")
    p2 = _make_creature(2, FEMALE, nature="Calm", retro="rb")
    odds = breeding_odds(p1, p2, species, bal)
    assert odds.species_id == 2
    assert odds.shiny == pytest.approx(2 / 8192)
    assert odds.alpha == pytest.approx(1 / 1000)
    assert odds.nature == "Calm"
    assert odds.nature_chance == 1.0
    assert odds.retro == {"rb": pytest.approx(5 / 3571)}


def test_breeding_odds_incompatible():
    species = _make_species()
    assert breeding_odds(_make_creature(1, MALE), _make_creature(2, MALE), species, Balance()) is None


# ── Wild eggs ────────────────────────────────────────────────────────


def test_wild_candidates_need_egg_sprite_and_weight():
    species = _make_species()
    names = {s.name for s in wild_candidates(species, {"common": 1, "rare": 1})}
    assert names == {"Rattata", "Eevee", "Loner"}


def test_pick_wild_species_weighted():
    species = _make_species()
    rng = random.Random(28)
    picks = [pick_wild_species(species, {"rare": 1}, rng).name for _ in range(20)]
    assert set(picks) == {"Eevee"}


def test_wild_egg():
    species = _make_species()
    egg = create_wild_egg(species, Balance(rarity_weights={"uncommon": 1}), random.Random(29))
    assert egg.species_id in (3, 5)
    assert egg.steps == 0
    if egg.species_id == 3:
        assert egg.gender == GENDERLESS
    else:
        assert egg.gender == FEMALE


def test_wild_egg_without_candidates():
    assert create_wild_egg(_make_species(), Balance(rarity_weights={"legendary": 1})) is None
