"""Tests for storage module."""
import base64
import json

import pytest

from hatchery._types import DAYCARE, FEMALE, GENDERLESS, MALE, SHELTER, STATS
from hatchery.criteria import Crit
from hatchery.egg import Creature, Egg
from hatchery.filters import Filter
from hatchery.scheduler import Scheduler, VirtualClock
from hatchery.state import GameState
from hatchery.storage import (
    COUNTER_SAVE_DELAY_MS,
    JsonFileStore,
    MemoryStore,
    SaveManager,
    decode_save,
    export_save,
    import_save,
)


def _make_state() -> GameState:
    state = GameState(pc_capacity=5)
    state.incubator = [Egg(species_id=1, steps=12, gender=MALE, retro="rb")]
    state.pc[2] = Creature(
        species_id=2,
        is_shiny=True,
        is_square_shiny=False,
        is_alpha=True,
        ivs={s: 31 for s in STATS},
        nature="Calm",
        gender=FEMALE,
        capture_time="2024-01-01T00:00:00.000Z",
    )
    state.filters = [Filter("Shiny", [Crit.shiny()])]
    state.egg_hatched = 7
    state.shiny_hatched = 1
    state.rare_candy = 3
    state.pokedollars = 250
    state.paused = True
    state.upgrades = {"eggStepsBoost": 2}
    state.daycare.breeders = [2, None]
    state.daycare.remaining_time = 1234
    state.daycare.eggs = [Egg(species_id=1)]
    state.egg_source = DAYCARE
    return state


def test_save_load_round_trip():
    store = MemoryStore()
    saves = SaveManager(store, pc_capacity=5)
    state = _make_state()
    saves.save(state)
    saves.save_egg_source(state)
    saves.record_last_active(state, 42)

    loaded = saves.load()
    assert loaded.incubator == state.incubator
    assert loaded.pc == state.pc
    assert loaded.filters[0].to_dict() == state.filters[0].to_dict()
    assert loaded.egg_hatched == 7
    assert loaded.shiny_hatched == 1
    assert loaded.rare_candy == 3
    assert loaded.pokedollars == 250
    assert loaded.paused is True
    assert loaded.upgrades == {"eggStepsBoost": 2}
    assert loaded.daycare.breeders == [2, None]
    assert loaded.daycare.remaining_time == 1234
    assert loaded.last_active_time == 42
    assert loaded.egg_source == DAYCARE


def test_persisted_key_layout():
    store = MemoryStore()
    saves = SaveManager(store, pc_capacity=5)
    state = _make_state()
    saves.save(state)
    saves.record_last_active(state, 42)
    data = store.snapshot()
    assert data["paused"] == "true"
    assert data["eggHatched"] == "7"
    assert data["lastActiveTime"] == "42"
    assert json.loads(data["incubator"])[0] == {
        "id": 1, "steps": 12, "isShiny": False, "isAlpha": False,
        "ivs": {s: 0 for s in STATS}, "nature": "Hardy", "gender": "M", "retro": "rb",
    }
    assert json.loads(data["pc"])[0] is None
    assert set(json.loads(data["daycare"])) == {"breeders", "eggTimer", "remainingTime", "eggs"}


def test_empty_store_defaults():
    store = MemoryStore()
    state = SaveManager(store, pc_capacity=4).load()
    assert state.incubator == []
    assert state.pc == [None] * 4
    assert state.egg_hatched == 0
    assert state.paused is False
    assert state.last_active_time is None
    assert state.egg_source == SHELTER
    assert store.get("eggSource") == SHELTER


def test_malformed_values_fall_back():
    store = MemoryStore({
        "incubator": "{not json",
        "pc": json.dumps([{"id": 1}, {"bad": True}, "junk"]),
        "filters": json.dumps([
            5,
            {"name": "Shiny", "criteria": [None, 3, {"type": "shiny", "value": "Yes"}]},
        ]),
        "pokedollars": "lots",
        "upgrades": json.dumps([1, 2]),
        "daycare": "[]",
        "lastActiveTime": "yesterday",
        "eggSource": "beach",
    })
    state = SaveManager(store, pc_capacity=3).load()
    assert state.incubator == []
    assert state.pc[0].species_id == 1
    assert state.pc[1] is None
    assert state.pc[2] is None
    assert len(state.pc) == 3
    assert [f.name for f in state.filters] == ["Shiny"]
    assert [c.to_dict()["type"] for c in state.filters[0].criteria] == ["shiny"]
    assert state.pokedollars == 0
    assert state.upgrades == {}
    assert state.daycare.breeders == [None, None]
    assert state.last_active_time is None
    assert state.egg_source == SHELTER


def test_legacy_gender_words_normalised():
    record = {"id": 1, "gender": "Female"}
    store = MemoryStore({"pc": json.dumps([record, {"id": 2, "gender": "Genderless"}])})
    state = SaveManager(store, pc_capacity=2).load()
    assert state.pc[0].gender == FEMALE
    assert state.pc[1].gender == GENDERLESS


def test_daycare_without_remaining_time_backfilled():
    store = MemoryStore({"daycare": json.dumps({"breeders": [0, 1], "eggTimer": 5, "eggs": []})})
    state = SaveManager(store, pc_capacity=2).load()
    assert state.daycare.egg_timer == 5
    assert state.daycare.remaining_time is None


def test_counter_writes_are_debounced():
    clock = VirtualClock()
    sched = Scheduler(clock)
    store = MemoryStore()
    saves = SaveManager(store, scheduler=sched)
    state = GameState(pc_capacity=1)

    state.egg_hatched = 1
    saves.schedule_counters(state)
    state.egg_hatched = 2
    saves.schedule_counters(state)
    assert store.get("eggHatched") is None

    sched.advance(COUNTER_SAVE_DELAY_MS)
    assert store.get("eggHatched") == "2"
    assert sched.pending() == []


def test_flush_writes_pending_counters():
    sched = Scheduler(VirtualClock())
    store = MemoryStore()
    saves = SaveManager(store, scheduler=sched)
    state = GameState(pc_capacity=1)
    state.shiny_hatched = 4
    saves.schedule_counters(state)
    saves.flush(state)
    assert store.get("shinyHatched") == "4"
    assert sched.pending() == []


# ── Export / import ──────────────────────────────────────────────────


def test_export_format():
    store = MemoryStore({"pokedollars": "5", "eggSource": "shelter"})
    text = export_save(store, 1_000)
    payload = json.loads(base64.b64decode(text).decode("utf-8"))
    assert payload == {
        "version": "1.0",
        "timestamp": 1_000,
        "data": {"pokedollars": "5", "eggSource": "shelter"},
    }


def test_export_import_reproduces_store():
    source = MemoryStore()
    saves = SaveManager(source, pc_capacity=5)
    state = _make_state()
    saves.save(state)
    saves.save_egg_source(state)

    target = MemoryStore({"stale": "1"})
    assert import_save(target, export_save(source, 0))
    assert target.snapshot() == source.snapshot()


def test_import_rejects_malformed():
    store = MemoryStore({"pokedollars": "5"})
    assert not import_save(store, "not base64 at all!")
    no_version = base64.b64encode(json.dumps({"data": {}}).encode()).decode()
    assert not import_save(store, no_version)
    assert decode_save(base64.b64encode(b"[1]").decode()) is None
    assert store.snapshot() == {"pokedollars": "5"}


def test_import_blocks_saving_until_finished():
    sched = Scheduler(VirtualClock())
    store = MemoryStore()
    saves = SaveManager(store, scheduler=sched)
    text = export_save(MemoryStore({"pokedollars": "99"}), 0)

    stale = GameState(pc_capacity=1)
    saves.schedule_counters(stale)
    assert saves.import_save(text)
    saves.save(stale)
    saves.flush(stale)
    sched.advance(10_000)
    assert store.snapshot() == {"pokedollars": "99"}

    saves.finish_import()
    saves.save(stale)
    assert store.get("pokedollars") == "0"


def test_json_file_store(tmp_path):
    path = tmp_path / "save.json"
    store = JsonFileStore(path)
    store.set("pokedollars", "10")
    store.update({"paused": "false", "eggSource": "daycare"})
    store.delete("paused")

    reopened = JsonFileStore(path)
    assert reopened.snapshot() == {"pokedollars": "10", "eggSource": "daycare"}
    reopened.clear()
    assert JsonFileStore(path).keys() == []


def test_json_file_store_recovers_from_corrupt_file(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("{not json")
    store = JsonFileStore(path)
    assert store.keys() == []

    store.set("pokedollars", "3")
    assert JsonFileStore(path).snapshot() == {"pokedollars": "3"}


def test_json_file_store_ignores_non_object_file(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("[1, 2, 3]")
    assert JsonFileStore(path).keys() == []
