"""Egg incubation: step accumulation, hatching and offline catch-up."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from hatchery import probability
from hatchery._types import DAYCARE, SHELTER, RandomSource, iso_from_ms
from hatchery.balance import Balance
from hatchery.egg import Creature, Egg
from hatchery.filters import check_against_filters
from hatchery.generation import create_wild_egg
from hatchery.species import SpeciesTable
from hatchery.state import GameState
from hatchery.upgrades import EGG_STEPS_BOOST, TICK_SPEED_BOOST, upgrade_bonus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HatchResult:
    creature: Creature
    kept: bool
    pc_slot: int | None = None
    rare_candy: bool = False
    pokedollars: int = 0


class Incubator:
    """Incubating eggs of a ``GameState`` and the rules that advance them."""

    def __init__(
        self,
        state: GameState,
        species: SpeciesTable,
        balance: Balance,
        rng: RandomSource | None = None,
        on_hatch: Callable[[HatchResult], None] | None = None,
        on_counters_changed: Callable[[], None] | None = None,
    ) -> None:
        self.state = state
        self.species = species
        self.balance = balance
        self.rng = rng
        self.on_hatch = on_hatch
        self.on_counters_changed = on_counters_changed

    @property
    def eggs(self) -> list[Egg]:
        return self.state.incubator

    # ── Pace ─────────────────────────────────────────────────────────

    def steps_per_tick_range(self) -> tuple[int, int]:
        bonus = int(upgrade_bonus(self.balance.upgrades, self.state, EGG_STEPS_BOOST))
        return (
            self.balance.steps_per_tick_min + bonus,
            self.balance.steps_per_tick_max + bonus,
        )

    def tick_interval_ms(self) -> int:
        bonus = int(upgrade_bonus(self.balance.upgrades, self.state, TICK_SPEED_BOOST))
        return max(self.balance.min_tick_interval_ms, self.balance.tick_interval_ms - bonus)

    def random_steps_per_tick(self) -> int:
        low, high = self.steps_per_tick_range()
        return probability.resolve_rng(self.rng).randint(low, high)

    def average_steps_per_tick(self) -> int:
        low, high = self.steps_per_tick_range()
        return (low + high) // 2

    # ── Filling ──────────────────────────────────────────────────────

    def can_add_egg(self) -> bool:
        return len(self.eggs) < self.balance.incubator_capacity

    def add_egg(self, egg: Egg) -> bool:
        if not self.can_add_egg():
            return False
        self.eggs.append(egg)
        return True

    def add_wild_egg(self) -> bool:
        if not self.can_add_egg():
            return False
        egg = create_wild_egg(self.species, self.balance, self.rng)
        if egg is None:
            return False
        self.eggs.append(egg)
        return True

    def add_from_daycare(self) -> bool:
        """Move the oldest queued daycare egg in, with its steps reset."""
        queue = self.state.daycare.eggs
        if not self.can_add_egg() or not queue:
            return False
        self.eggs.append(queue.pop(0).fresh_copy())
        return True

    def add_egg_from_source(self) -> bool:
        if self.state.egg_source == DAYCARE:
            return self.add_from_daycare()
        if self.state.egg_source == SHELTER:
            return self.add_wild_egg()
        return False

    def check_and_fill(self) -> int:
        """Top up every free slot with wild eggs. Shelter mode only."""
        if self.state.egg_source != SHELTER:
            return 0
        added = 0
        while self.can_add_egg():
            if not self.add_wild_egg():
                break
            added += 1
        return added

    # ── Progress ─────────────────────────────────────────────────────

    def add_steps(self, index: int, steps: int | None, now_ms: int) -> HatchResult | None:
        """Add steps to one egg, hatching it in the same call once it is ready.

        Returns the hatch outcome, or None when the egg keeps incubating or
        the index or species cannot be resolved.
        """
        if not 0 <= index < len(self.eggs):
            return None
        egg = self.eggs[index]
        sdef = self.species.get(egg.species_id)
        if sdef is None:
            logger.warning("Incubating egg has unknown species %s", egg.species_id)
            return None

        if steps is None:
            steps = self.random_steps_per_tick()
        egg.steps += steps

        if egg.steps >= sdef.egg_steps:
            return self.hatch(index, now_ms)
        return None

    def hatch(self, index: int, now_ms: int) -> HatchResult | None:
        if not 0 <= index < len(self.eggs):
            return None
        egg = self.eggs[index]
        sdef = self.species.get(egg.species_id)
        if sdef is None:
            return None

        state = self.state
        creature = Creature.from_egg(
            egg,
            is_square_shiny=probability.roll_square_shiny(
                egg.is_shiny, self.balance.square_shiny_odds, self.rng
            ),
            capture_time=iso_from_ms(now_ms),
        )
        state.record_hatched(creature.is_shiny)
        if self.on_counters_changed is not None:
            self.on_counters_changed()

        kept = check_against_filters(creature, state.filters, self.species)
        slot = state.add_to_pc(creature) if kept else None
        if kept and slot is None:
            logger.warning("PC is full, %s was not stored", sdef.name)

        # Rewards are granted whether or not the creature was kept.
        candy = probability.resolve_rng(self.rng).randrange(self.balance.rare_candy_chance) == 0
        if candy:
            state.add_rare_candy(1)
        state.add_pokedollars(self.balance.pokedollars_per_hatch)

        del self.eggs[index]

        result = HatchResult(
            creature=creature,
            kept=kept,
            pc_slot=slot,
            rare_candy=candy,
            pokedollars=self.balance.pokedollars_per_hatch,
        )
        logger.info(
            "Hatched %s%s%s (%s)",
            sdef.name,
            " [shiny]" if creature.is_shiny else "",
            " [alpha]" if creature.is_alpha else "",
            "kept" if kept else "released",
        )
        if self.on_hatch is not None:
            self.on_hatch(result)
        return result

    def tick(self, now_ms: int) -> list[HatchResult]:
        """One egg tick: every egg gains a fresh random step count."""
        hatched: list[HatchResult] = []
        # Highest index first so hatching never shifts an unvisited egg.
        for i in range(len(self.eggs) - 1, -1, -1):
            result = self.add_steps(i, self.random_steps_per_tick(), now_ms)
            if result is not None:
                hatched.append(result)
        return hatched

    def apply_offline_progress(self, now_ms: int) -> list[HatchResult]:
        """Lump the average step rate over the time since last activity."""
        state = self.state
        if state.paused or not state.last_active_time:
            return []
        elapsed = now_ms - state.last_active_time
        if elapsed <= 0:
            return []
        ticks = elapsed // self.tick_interval_ms()
        if ticks <= 0:
            return []

        total_steps = self.average_steps_per_tick() * ticks
        hatched: list[HatchResult] = []
        for i in range(len(self.eggs) - 1, -1, -1):
            result = self.add_steps(i, total_steps, now_ms)
            if result is not None:
                hatched.append(result)
        logger.info(
            "Offline progress: %d ticks, %d steps per egg, %d hatched",
            ticks, total_steps, len(hatched),
        )
        return hatched
