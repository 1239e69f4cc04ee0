from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from hatchery._types import DAYCARE, EGG_SOURCES, RandomSource, iso_from_ms
from hatchery.criteria import Criterion
from hatchery.daycare import Daycare
from hatchery.definition import GameDefinition
from hatchery.egg import Egg
from hatchery.evolution import evolve as evolve_creature
from hatchery.filters import Filter
from hatchery.incubator import HatchResult, Incubator
from hatchery.scheduler import Clock, Scheduler, SystemClock
from hatchery.state import GameState
from hatchery.storage import KeyValueStore, MemoryStore, SaveManager
from hatchery.upgrades import PurchaseResult, buy_upgrade

logger = logging.getLogger(__name__)

CHECK_INTERVAL_MS = 1000


@dataclass
class OfflineProgress:
    hatched: list[HatchResult] = field(default_factory=list)
    bred: list[Egg] = field(default_factory=list)


class GameSession:
    """Owns the live ``GameState``: load, mutate, persist, drive timers."""

    def __init__(
        self,
        definition: GameDefinition,
        store: KeyValueStore | None = None,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
        on_hatch: Callable[[HatchResult], None] | None = None,
        on_change: Callable[[GameState], None] | None = None,
    ) -> None:
        errors = definition.validate()
        if errors:
            raise ValueError(
                "Invalid GameDefinition:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        self.definition = definition
        self.balance = definition.balance
        self.species = definition.species
        self.clock = clock or SystemClock()
        self.scheduler = Scheduler(self.clock)
        self.store = store if store is not None else MemoryStore()
        self.rng = rng
        self.on_hatch = on_hatch
        self.on_change = on_change
        self.saves = SaveManager(self.store, self.balance.pc_capacity, self.scheduler)
        self.running = False
        self._tick_timer: int | None = None
        self._check_timer: int | None = None
        self._load()

    def now(self) -> int:
        return self.clock.now_ms()

    # ── Lifecycle ────────────────────────────────────────────────────

    def start(self) -> OfflineProgress:
        """Catch up on time spent away, then start the drivers unless paused."""
        progress = self.apply_offline_progress()
        self.running = True
        if not self.state.paused:
            self._start_drivers()
        return progress

    def stop(self) -> None:
        self._stop_drivers()
        self.running = False
        self.suspend()

    def suspend(self) -> None:
        """What happens when the player leaves: stamp the time, flush counters."""
        self.saves.record_last_active(self.state, self.now())
        self.saves.flush(self.state)
        self.persist()

    def reload(self) -> None:
        was_running = self.running
        self._stop_drivers()
        self.running = False
        self._load()
        if was_running:
            self.start()

    def apply_offline_progress(self) -> OfflineProgress:
        now = self.now()
        progress = OfflineProgress()
        progress.bred = self.daycare.apply_offline_progress(now)
        progress.hatched = self.incubator.apply_offline_progress(now)
        # Stamp right away so a second call at the same time is a no-op.
        self.saves.record_last_active(self.state, now)
        self.persist()
        return progress

    def wait(self, ms: int) -> int:
        """Advance a virtual clock, running every driver that falls due."""
        return self.scheduler.advance(ms)

    def run_pending(self) -> int:
        return self.scheduler.run_due()

    def persist(self) -> None:
        self.saves.save(self.state)
        if self.on_change is not None:
            self.on_change(self.state)

    # ── Incubator ────────────────────────────────────────────────────

    def toggle_pause(self) -> bool:
        self.state.paused = not self.state.paused
        if self.state.paused:
            self._stop_drivers()
        elif self.running:
            self._start_drivers()
        logger.info("Game %s", "paused" if self.state.paused else "resumed")
        self.persist()
        return self.state.paused

    def set_egg_source(self, source: str) -> bool:
        if source not in EGG_SOURCES:
            return False
        self.state.egg_source = source
        self.saves.save_egg_source(self.state)
        return True

    def add_egg(self) -> bool:
        """Manually add one egg from the current source."""
        added = self.incubator.add_egg_from_source()
        if added:
            self.persist()
        return added

    # ── PC ───────────────────────────────────────────────────────────

    def swap(self, index1: int, index2: int) -> bool:
        pc = self.state.pc
        if not (0 <= index1 < len(pc) and 0 <= index2 < len(pc)):
            return False
        if self.daycare.is_breeder(index1) or self.daycare.is_breeder(index2):
            return False
        pc[index1], pc[index2] = pc[index2], pc[index1]
        self.persist()
        return True

    def release(self, index: int) -> bool:
        if self.state.pc_get(index) is None:
            return False
        if self.daycare.is_breeder(index):
            return False
        self.state.pc[index] = None
        self.persist()
        return True

    def put_in_daycare(self, index: int, replace_slot: int = 1) -> bool:
        """Toggle a PC creature in or out of the daycare.

        With both parent slots taken, ``replace_slot`` picks the one to
        replace. Returns True when the creature ends up in the daycare.
        """
        if self.state.pc_get(index) is None:
            return False
        breeders = self.state.daycare.breeders
        if index in breeders:
            self.daycare.set_parent(breeders.index(index) + 1, None)
            self.persist()
            return False

        if breeders[0] is not None and breeders[1] is not None:
            self.daycare.set_parent(replace_slot, index)
        elif breeders[0] is not None:
            self.daycare.set_parent(2, index)
        else:
            self.daycare.set_parent(1, index)
        self.persist()
        return True

    # ── Daycare ──────────────────────────────────────────────────────

    def set_breeders(self, index1: int | None, index2: int | None) -> bool:
        for index in (index1, index2):
            if index is not None and self.state.pc_get(index) is None:
                return False
        self.daycare.set_breeders(index1, index2)
        self.persist()
        return True

    def start_breeding(self) -> bool:
        started = self.daycare.start(self.now())
        self.persist()
        return started

    def pause_breeding(self) -> None:
        self.daycare.pause(self.now())
        self.persist()

    def clear_daycare_parent(self, slot: int) -> None:
        self.daycare.clear_parent(slot)
        self.persist()

    # ── Filters ──────────────────────────────────────────────────────

    def save_filter(
        self,
        name: str,
        criteria: list[Criterion],
        filter_id: str | None = None,
    ) -> list[str]:
        """Create a filter, or replace the one with ``filter_id``.

        Returns authoring errors; nothing is stored when there are any.
        """
        new = Filter(name=name, criteria=list(criteria), created_at=iso_from_ms(self.now()))
        errors = new.validate()
        if errors:
            return errors

        filters = self.state.filters
        existing = next((f for f in filters if f.id == filter_id), None)
        if existing is not None:
            existing.name = new.name
            existing.criteria = new.criteria
        else:
            if filter_id is not None:
                new.id = filter_id
            filters.append(new)
        self.persist()
        return []

    def toggle_filter(self, filter_id: str) -> bool | None:
        """Flip a filter's active flag. Returns the new flag, None if unknown."""
        for f in self.state.filters:
            if f.id == filter_id:
                f.active = not f.active
                self.persist()
                return f.active
        return None

    def delete_filter(self, filter_id: str) -> bool:
        before = len(self.state.filters)
        self.state.filters = [f for f in self.state.filters if f.id != filter_id]
        if len(self.state.filters) == before:
            return False
        self.persist()
        return True

    # ── Store & evolution ────────────────────────────────────────────

    def buy_upgrade(self, upgrade_id: str) -> PurchaseResult:
        result = buy_upgrade(self.balance.upgrades, self.state, upgrade_id)
        if result.success:
            logger.info("Bought %s level %s for %s", upgrade_id, result.new_level, result.cost)
            self.persist()
        return result

    def evolve(self, index: int, evolves_to: str) -> bool:
        evolved = evolve_creature(self.state, index, evolves_to, self.species)
        if evolved:
            self.persist()
        return evolved

    # ── Export / import ──────────────────────────────────────────────

    def export_save(self) -> str:
        self.saves.save_counters(self.state)
        self.persist()
        return self.saves.export_save(self.now())

    def import_save(self, text: str) -> bool:
        """Replace the whole save, then reload the session from the store."""
        if not self.saves.import_save(text):
            return False
        was_running = self.running
        self._stop_drivers()
        self.running = False
        self._load()
        self.saves.finish_import()
        if was_running:
            self.start()
        return True

    # ── Private helpers ──────────────────────────────────────────────

    def _load(self) -> None:
        self.state = self.saves.load()
        self.incubator = Incubator(
            self.state,
            self.species,
            self.balance,
            rng=self.rng,
            on_hatch=self._handle_hatch,
            on_counters_changed=self._counters_changed,
        )
        self.daycare = Daycare(self.state, self.species, self.balance, rng=self.rng)

    def _start_drivers(self) -> None:
        if self._tick_timer is None:
            self._tick_timer = self.scheduler.every(
                self.incubator.tick_interval_ms, self._egg_tick, name="egg-tick"
            )
        if self._check_timer is None:
            self._check_timer = self.scheduler.every(
                CHECK_INTERVAL_MS, self._check_tick, name="incubator-check"
            )

    def _stop_drivers(self) -> None:
        self.scheduler.cancel(self._tick_timer)
        self.scheduler.cancel(self._check_timer)
        self._tick_timer = None
        self._check_timer = None

    def _egg_tick(self, now: int) -> None:
        if self.state.paused:
            return
        self.incubator.tick(now)
        self.persist()

    def _check_tick(self, now: int) -> None:
        if self.state.paused:
            return
        self.incubator.check_and_fill()
        self.daycare.update(now)
        if self.state.egg_source == DAYCARE:
            self.daycare.transfer_to_incubator(self.incubator)
        self.persist()

    def _handle_hatch(self, result: HatchResult) -> None:
        if self.on_hatch is not None:
            self.on_hatch(result)

    def _counters_changed(self) -> None:
        self.saves.schedule_counters(self.state)
