"""Key-value persistence, save/load of ``GameState`` and save export/import."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Iterator

from hatchery._types import EGG_SOURCES, SHELTER
from hatchery.egg import Creature, Egg
from hatchery.filters import Filter
from hatchery.scheduler import Scheduler
from hatchery.state import DaycareState, GameState

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
COUNTER_SAVE_DELAY_MS = 500

INCUBATOR = "incubator"
PC = "pc"
FILTERS = "filters"
EGG_HATCHED = "eggHatched"
SHINY_HATCHED = "shinyHatched"
RARE_CANDY = "rareCandy"
POKEDOLLARS = "pokedollars"
PAUSED = "paused"
UPGRADES = "upgrades"
DAYCARE = "daycare"
LAST_ACTIVE_TIME = "lastActiveTime"
EGG_SOURCE = "eggSource"


# ── Stores ───────────────────────────────────────────────────────────


class KeyValueStore(ABC):
    """String keys to string values, like browser local storage."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...

    @abstractmethod
    def keys(self) -> list[str]: ...

    def clear(self) -> None:
        for key in self.keys():
            self.delete(key)

    def items(self) -> Iterator[tuple[str, str]]:
        for key in self.keys():
            value = self.get(key)
            if value is not None:
                yield key, value

    def update(self, values: dict[str, str]) -> None:
        for key, value in values.items():
            self.set(key, value)

    def snapshot(self) -> dict[str, str]:
        return dict(self.items())


class MemoryStore(KeyValueStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore(KeyValueStore):
    """The whole store as one JSON object, rewritten atomically on change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, str] = {}
        if not self.path.exists():
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except ValueError as e:
            logger.error("Error loading %s: %s", self.path, e)
            return
        if not isinstance(raw, dict):
            logger.error("Error loading %s: expected a JSON object", self.path)
            return
        self._data = {str(k): str(v) for k, v in raw.items()}
        logger.info("Loaded %d keys from %s", len(self._data), self.path)

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()
        self._write()

    def update(self, values: dict[str, str]) -> None:
        self._data.update(values)
        self._write()

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError:
            os.unlink(tmp)
            raise


# ── Load helpers ─────────────────────────────────────────────────────


def _load_json(store: KeyValueStore, key: str, default: Callable[[], Any]) -> Any:
    raw = store.get(key)
    if not raw:
        return default()
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.error("Error loading %s: %s", key, e)
        return default()


def _load_int(store: KeyValueStore, key: str) -> int:
    raw = store.get(key)
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError:
        logger.error("Error loading %s: not an integer: %r", key, raw)
        return 0


def _load_records(store: KeyValueStore, key: str, build: Callable[[dict], Any]) -> list[Any]:
    records = _load_json(store, key, list)
    if not isinstance(records, list):
        logger.error("Error loading %s: expected a list", key)
        return []
    out = []
    for record in records:
        if record is None:
            out.append(None)
            continue
        if not isinstance(record, dict):
            logger.error("Dropping malformed %s entry %r: not an object", key, record)
            out.append(None)
            continue
        try:
            out.append(build(record))
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Dropping malformed %s entry %r: %s", key, record, e)
            out.append(None)
    return out


# ── Save manager ─────────────────────────────────────────────────────


class SaveManager:
    """Reads and writes a ``GameState`` through a ``KeyValueStore``."""

    def __init__(
        self,
        store: KeyValueStore,
        pc_capacity: int = 1200,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.store = store
        self.pc_capacity = pc_capacity
        self.scheduler = scheduler
        self.import_in_progress = False
        self.suppress_counter_flush = False
        self._counter_timer: int | None = None

    def load(self) -> GameState:
        """Build state from the store, substituting safe defaults per key."""
        store = self.store
        state = GameState(self.pc_capacity)

        state.incubator = [e for e in _load_records(store, INCUBATOR, Egg.from_dict) if e]

        pc = _load_records(store, PC, Creature.from_dict)
        if len(pc) < self.pc_capacity:
            pc.extend([None] * (self.pc_capacity - len(pc)))
        state.pc = pc

        state.filters = [f for f in _load_records(store, FILTERS, Filter.from_dict) if f]
        state.egg_hatched = _load_int(store, EGG_HATCHED)
        state.shiny_hatched = _load_int(store, SHINY_HATCHED)
        state.rare_candy = _load_int(store, RARE_CANDY)
        state.pokedollars = _load_int(store, POKEDOLLARS)
        state.paused = store.get(PAUSED) == "true"

        upgrades = _load_json(store, UPGRADES, dict)
        try:
            state.upgrades = {str(k): int(v or 0) for k, v in upgrades.items()}
        except (AttributeError, TypeError, ValueError) as e:
            logger.error("Error loading upgrades: %s", e)
            state.upgrades = {}

        daycare = _load_json(store, DAYCARE, dict)
        try:
            state.daycare = DaycareState.from_dict(daycare if isinstance(daycare, dict) else {})
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Error loading daycare: %s", e)
            state.daycare = DaycareState()

        raw_active = store.get(LAST_ACTIVE_TIME)
        state.last_active_time = int(raw_active) if raw_active and raw_active.isdigit() else None

        source = store.get(EGG_SOURCE)
        if source in EGG_SOURCES:
            state.egg_source = source
        else:
            state.egg_source = SHELTER
            store.set(EGG_SOURCE, SHELTER)

        logger.debug(
            "Loaded save: %d incubating, %d in PC, %d filters",
            len(state.incubator), state.pc_count(), len(state.filters),
        )
        return state

    def save(self, state: GameState) -> None:
        """Write every key. Skipped while an import is replacing the store."""
        if self.import_in_progress:
            return
        self.store.update({
            INCUBATOR: json.dumps([egg.to_dict() for egg in state.incubator]),
            PC: json.dumps([c.to_dict() if c else None for c in state.pc]),
            FILTERS: json.dumps([f.to_dict() for f in state.filters]),
            EGG_HATCHED: str(state.egg_hatched),
            SHINY_HATCHED: str(state.shiny_hatched),
            RARE_CANDY: str(state.rare_candy),
            PAUSED: "true" if state.paused else "false",
            POKEDOLLARS: str(state.pokedollars),
            UPGRADES: json.dumps(state.upgrades),
            DAYCARE: json.dumps(state.daycare.to_dict()),
        })

    def save_egg_source(self, state: GameState) -> None:
        if not self.import_in_progress:
            self.store.set(EGG_SOURCE, state.egg_source)

    def record_last_active(self, state: GameState, now_ms: int) -> None:
        state.last_active_time = now_ms
        if not self.import_in_progress:
            self.store.set(LAST_ACTIVE_TIME, str(now_ms))

    # ── Hatch counters ───────────────────────────────────────────────

    def save_counters(self, state: GameState) -> None:
        if self.import_in_progress:
            return
        self.store.update({
            EGG_HATCHED: str(state.egg_hatched),
            SHINY_HATCHED: str(state.shiny_hatched),
        })

    def schedule_counters(self, state: GameState) -> None:
        """Coalesce counter writes into one per ``COUNTER_SAVE_DELAY_MS``."""
        if self.scheduler is None:
            self.save_counters(state)
            return
        if self.scheduler.is_scheduled(self._counter_timer):
            return

        def _write(now: int) -> None:
            self._counter_timer = None
            self.save_counters(state)

        self._counter_timer = self.scheduler.call_later(
            COUNTER_SAVE_DELAY_MS, _write, name="hatch-counters"
        )

    def flush(self, state: GameState) -> None:
        """Write pending counters now, as on exit."""
        if self.suppress_counter_flush:
            return
        if self.scheduler is not None:
            self.scheduler.cancel(self._counter_timer)
        self._counter_timer = None
        self.save_counters(state)

    # ── Export / import ──────────────────────────────────────────────

    def export_save(self, now_ms: int) -> str:
        return export_save(self.store, now_ms)

    def import_save(self, text: str) -> bool:
        """Replace the store with an exported save.

        On success, saving and counter flushing stay blocked until
        ``finish_import()``, so stale in-memory state cannot overwrite the
        imported data before the owner reloads.
        """
        data = decode_save(text)
        if data is None:
            return False
        self.import_in_progress = True
        self.suppress_counter_flush = True
        if self.scheduler is not None:
            self.scheduler.cancel(self._counter_timer)
        self._counter_timer = None
        self.store.clear()
        self.store.update(data)
        logger.info("Imported save with %d keys", len(data))
        return True

    def finish_import(self) -> None:
        self.import_in_progress = False
        self.suppress_counter_flush = False


# ── Export format ────────────────────────────────────────────────────


def export_save(store: KeyValueStore, now_ms: int) -> str:
    """Every key of the store as base64 of ``{"version", "timestamp", "data"}``."""
    payload = {
        "version": EXPORT_VERSION,
        "timestamp": now_ms,
        "data": store.snapshot(),
    }
    encoded = base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
    logger.info("Exported save with %d keys", len(payload["data"]))
    return encoded


def decode_save(text: str) -> dict[str, str] | None:
    """The key/value data of an exported save, or None when malformed."""
    try:
        raw = base64.b64decode(text.strip(), validate=True).decode("utf-8")
        payload = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.error("Import error: %s", e)
        return None
    if not isinstance(payload, dict) or not payload.get("version") or not isinstance(
        payload.get("data"), dict
    ):
        logger.error("Import error: invalid save file")
        return None
    return {str(k): str(v) for k, v in payload["data"].items()}


def import_save(store: KeyValueStore, text: str) -> bool:
    """Clear ``store`` and fill it from an exported save. False if malformed."""
    data = decode_save(text)
    if data is None:
        return False
    store.clear()
    store.update(data)
    return True
