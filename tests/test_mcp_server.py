"""Tests for MCP server tool functions."""

import pytest

from hatchery._types import BASE_RETRO, DAYCARE, FEMALE, MALE, STATS
from hatchery.balance import Balance
from hatchery.definition import GameConfig, GameDefinition
from hatchery.egg import Creature
from hatchery.species import Evolution, SpeciesDef, SpeciesTable

from hatchery.mcp.server import (
    _MAX_WAIT,
    _GameHolder,
    _tool_buy_upgrade,
    _tool_delete_filter,
    _tool_evolve,
    _tool_export_save,
    _tool_get_daycare,
    _tool_get_game_info,
    _tool_get_game_state,
    _tool_get_upgrades,
    _tool_import_save,
    _tool_list_filters,
    _tool_list_pc,
    _tool_new_game,
    _tool_save_filter,
    _tool_set_breeders,
    _tool_set_egg_source,
    _tool_toggle_breeding,
    _tool_toggle_filter,
    _tool_toggle_pause,
    _tool_wait,
)


def _make_test_definition() -> GameDefinition:
    """A small but complete game definition for testing."""
    return GameDefinition(
        config=GameConfig(name="Test Game"),
        balance=Balance(pc_capacity=50),
        species=SpeciesTable([
            SpeciesDef(
                1, "Rattata", frozenset({"field"}), 50, "common", 1, 100, egg_sprite="e",
                evolutions=(Evolution("Raticate", ("level",), 2),),
            ),
            SpeciesDef(2, "Raticate", frozenset({"field"}), 50, "uncommon", 1, 100),
            SpeciesDef(3, "Eevee", frozenset({"field"}), 88, "common", 1, 100, egg_sprite="e"),
        ]),
    )


def _make_holder(seed=42) -> _GameHolder:
    return _GameHolder(definition=_make_test_definition(), seed=seed)


def _make_creature(species_id, gender) -> Creature:
    return Creature(
        species_id=species_id,
        is_shiny=False,
        is_square_shiny=False,
        is_alpha=False,
        ivs={s: 31 for s in STATS},
        nature="Hardy",
        gender=gender,
        retro=BASE_RETRO,
    )


def _seed_pc(holder: _GameHolder) -> None:
    holder.session.state.pc[0] = _make_creature(1, MALE)
    holder.session.state.pc[1] = _make_creature(3, FEMALE)


# ── Info & state ─────────────────────────────────────────────────────


def test_get_game_info():
    info = _tool_get_game_info(_make_holder())
    assert info["name"] == "Test Game"
    # Raticate has no egg and is not offered by the shelter
    assert [s["name"] for s in info["species"]] == ["Rattata", "Eevee"]
    assert info["pc_capacity"] == 50
    assert "tickSpeedBoost" in {u["id"] for u in info["upgrades"]}


def test_get_game_state_initial():
    state = _tool_get_game_state(_make_holder())
    assert state["time_elapsed"] == 0
    assert state["paused"] is False
    assert state["egg_source"] == "shelter"
    assert state["eggs_hatched"] == 0
    assert state["pc_count"] == 0
    assert state["daycare_status"] == "empty"


def test_wait_hatches_eggs():
    holder = _make_holder()
    result = _tool_wait(holder, 60)
    assert result["waited"] == 60
    assert result["hatched"] > 0
    assert result["kept"] == result["hatched"]
    assert result["pokedollars"] == result["hatched"]

    state = _tool_get_game_state(holder)
    assert state["time_elapsed"] == 60
    assert state["eggs_hatched"] == result["hatched"]
    assert len(state["incubator"]) <= 6


def test_wait_rejects_bad_durations():
    holder = _make_holder()
    assert "error" in _tool_wait(holder, 0)
    assert "error" in _tool_wait(holder, -5)
    assert "error" in _tool_wait(holder, _MAX_WAIT + 1)


def test_seeded_holders_agree():
    a = _tool_wait(_make_holder(seed=3), 120)
    b = _tool_wait(_make_holder(seed=3), 120)
    assert a == b


def test_toggle_pause_stops_hatching():
    holder = _make_holder()
    assert _tool_toggle_pause(holder) == {"paused": True}
    assert _tool_wait(holder, 120)["hatched"] == 0
    assert _tool_toggle_pause(holder) == {"paused": False}


def test_set_egg_source():
    holder = _make_holder()
    assert "error" in _tool_set_egg_source(holder, "beach")
    assert _tool_set_egg_source(holder, DAYCARE) == {"egg_source": DAYCARE}
    assert _tool_get_game_state(holder)["egg_source"] == DAYCARE


def test_list_pc_pages():
    holder = _make_holder()
    _tool_wait(holder, 120)
    listing = _tool_list_pc(holder, offset=0, limit=2)
    assert listing["total"] == holder.session.state.pc_count()
    assert len(listing["creatures"]) == min(2, listing["total"])
    first = listing["creatures"][0]
    assert first["index"] == 0
    assert first["species"] in {"Rattata", "Eevee"}
    assert "error" in _tool_list_pc(holder, limit=0)


# ── Upgrades ─────────────────────────────────────────────────────────


def test_upgrades_and_purchase():
    holder = _make_holder()
    upgrades = _tool_get_upgrades(holder)
    assert upgrades["pokedollars"] == 0
    assert not any(u["affordable"] for u in upgrades["upgrades"])

    failed = _tool_buy_upgrade(holder, "eggStepsBoost")
    assert failed["success"] is False
    assert failed["reason"]

    holder.session.state.pokedollars = 1_000
    bought = _tool_buy_upgrade(holder, "eggStepsBoost")
    assert bought == {"success": True, "new_level": 1, "cost": 150}
    assert holder.session.state.pokedollars == 850


# ── Filters ──────────────────────────────────────────────────────────


def test_filter_lifecycle():
    holder = _make_holder()
    bad = _tool_save_filter(holder, "", [])
    assert bad["success"] is False
    assert bad["errors"]

    saved = _tool_save_filter(holder, "Shiny", [{"type": "shiny", "value": "Yes"}])
    assert saved["success"] is True
    filter_id = saved["filter_id"]

    listed = _tool_list_filters(holder)["filters"]
    assert [f["name"] for f in listed] == ["Shiny"]
    assert listed[0]["active"] is True

    assert _tool_toggle_filter(holder, filter_id) == {"filter_id": filter_id, "active": False}
    assert "error" in _tool_toggle_filter(holder, "missing")
    assert _tool_delete_filter(holder, filter_id) == {"success": True}
    assert "error" in _tool_delete_filter(holder, filter_id)


def test_save_filter_rejects_malformed_criteria():
    holder = _make_holder()
    result = _tool_save_filter(holder, "Bad", [5])
    assert result["success"] is False
    assert result["errors"]
    assert _tool_list_filters(holder)["filters"] == []


def test_active_filter_discards_hatches():
    holder = _make_holder()
    _tool_save_filter(holder, "Shiny", [{"type": "shiny", "value": "Yes"}])
    result = _tool_wait(holder, 120)
    assert result["hatched"] > 0
    assert result["kept"] == holder.session.state.pc_count()


# ── Daycare & evolution ──────────────────────────────────────────────


def test_set_breeders_starts_breeding():
    holder = _make_holder()
    _seed_pc(holder)
    assert _tool_set_breeders(holder, 0, 1) == {"success": True}

    daycare = _tool_get_daycare(holder)
    assert daycare["status"] == "breeding"
    assert daycare["breeders"] == [0, 1]
    assert daycare["remaining_seconds"] == 30.0
    assert daycare["compatible"] is True
    assert daycare["odds"]["species"] == "Eevee"

    _tool_wait(holder, 31)
    assert _tool_get_daycare(holder)["eggs"] == 1


def test_set_breeders_rejects_bad_pairs():
    holder = _make_holder()
    _seed_pc(holder)
    assert _tool_set_breeders(holder, 0, 5)["success"] is False
    holder.session.state.pc[2] = _make_creature(3, MALE)
    assert _tool_set_breeders(holder, 0, 2)["success"] is False


def test_toggle_breeding():
    holder = _make_holder()
    _seed_pc(holder)
    _tool_set_breeders(holder, 0, 1)
    _tool_wait(holder, 10)
    assert _tool_toggle_breeding(holder) == {"breeding": False}
    assert _tool_get_daycare(holder)["status"] == "paused"
    assert _tool_toggle_breeding(holder) == {"breeding": True}
    assert _tool_get_daycare(holder)["remaining_seconds"] == 20.0


def test_evolve():
    holder = _make_holder()
    _seed_pc(holder)
    assert _tool_evolve(holder, 0, "Raticate")["success"] is False
    holder.session.state.rare_candy = 5
    assert _tool_evolve(holder, 0, "Raticate") == {"success": True, "rare_candy": 3}
    assert _tool_list_pc(holder)["creatures"][0]["species"] == "Raticate"


# ── Saves & reset ────────────────────────────────────────────────────


def test_export_import_save():
    holder = _make_holder()
    _tool_wait(holder, 60)
    save = _tool_export_save(holder)["save"]
    hatched = holder.session.state.egg_hatched

    other = _make_holder(seed=1)
    assert _tool_import_save(other, save) == {"success": True}
    assert other.session.state.egg_hatched == hatched
    assert _tool_import_save(other, "garbage!")["success"] is False


def test_new_game_resets():
    holder = _make_holder()
    _tool_wait(holder, 60)
    assert holder.session.state.egg_hatched > 0

    result = _tool_new_game(holder)
    assert result["success"] is True
    state = _tool_get_game_state(holder)
    assert state["eggs_hatched"] == 0
    assert state["time_elapsed"] == 0


@pytest.mark.parametrize("seconds", [0.5, 1, 5])
def test_short_waits_are_accepted(seconds):
    result = _tool_wait(_make_holder(), seconds)
    assert result["waited"] == seconds
    assert "error" not in result
