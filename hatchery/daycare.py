"""Daycare breeding: a pausable timer feeding a bounded egg queue."""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import TYPE_CHECKING

from hatchery._types import RARITY_RANKS, RandomSource
from hatchery.balance import Balance
from hatchery.breeding import are_compatible, create_breeding_egg
from hatchery.egg import Creature, Egg
from hatchery.species import SpeciesTable
from hatchery.state import DaycareState, GameState
from hatchery.upgrades import (
    EGG_CAPACITY_BOOST,
    EGG_SPEED_BOOST,
    IV_INHERITANCE_BOOST,
    upgrade_bonus,
)

if TYPE_CHECKING:
    from hatchery.incubator import Incubator

logger = logging.getLogger(__name__)

_RARITY_BY_RANK = {rank: name for name, rank in RARITY_RANKS.items()}


class DaycareStatus(Enum):
    EMPTY = "empty"
    AWAITING_START = "awaiting_start"
    BREEDING = "breeding"
    PAUSED = "paused"
    COLLECTIBLE = "collectible"
    FULL = "full"


class Daycare:
    """Rules over the ``DaycareState`` of a game."""

    def __init__(
        self,
        state: GameState,
        species: SpeciesTable,
        balance: Balance,
        rng: RandomSource | None = None,
    ) -> None:
        self.state = state
        self.species = species
        self.balance = balance
        self.rng = rng

    @property
    def data(self) -> DaycareState:
        return self.state.daycare

    # ── Capacity & pace ──────────────────────────────────────────────

    def max_eggs(self) -> int:
        bonus = int(upgrade_bonus(self.balance.upgrades, self.state, EGG_CAPACITY_BOOST))
        return self.balance.daycare.max_eggs + bonus

    def can_add_more(self) -> bool:
        return len(self.data.eggs) < self.max_eggs()

    def iv_inherit_count(self) -> int:
        bonus = int(upgrade_bonus(self.balance.upgrades, self.state, IV_INHERITANCE_BOOST))
        return self.balance.daycare.iv_inheritance_count + bonus

    def rarity_rank(self, creature: Creature) -> int:
        sdef = self.species.get(creature.species_id)
        if sdef is None:
            return 1
        return RARITY_RANKS.get(sdef.rarity, 1)

    def timer_duration(self, parent1: Creature, parent2: Creature) -> int:
        """Milliseconds per egg for this pair at the current upgrade level."""
        avg = math.ceil((self.rarity_rank(parent1) + self.rarity_rank(parent2)) / 2)
        rarity = _RARITY_BY_RANK[min(max(avg, 1), len(_RARITY_BY_RANK))]
        base = self.balance.daycare.egg_timers[rarity]
        speed = upgrade_bonus(self.balance.upgrades, self.state, EGG_SPEED_BOOST, default=1.0)
        return math.floor(base * speed)

    # ── Parents ──────────────────────────────────────────────────────

    def parents(self) -> tuple[Creature | None, Creature | None]:
        first, second = self.data.breeders
        return self.state.pc_get(first), self.state.pc_get(second)

    def is_breeder(self, pc_index: int) -> bool:
        return pc_index in self.data.breeders

    def set_breeders(self, index1: int | None, index2: int | None) -> None:
        """Assign a new pair. Any running or paused timer is discarded."""
        self.data.breeders = [index1, index2]
        self.stop()

    def set_parent(self, slot: int, pc_index: int | None) -> None:
        breeders = list(self.data.breeders)
        breeders[slot - 1] = pc_index
        self.set_breeders(breeders[0], breeders[1])

    def clear_parent(self, slot: int) -> None:
        self.set_parent(slot, None)

    def is_compatible(self) -> bool:
        parent1, parent2 = self.parents()
        if parent1 is None or parent2 is None:
            return False
        return are_compatible(parent1, parent2, self.species)

    # ── Timer control ────────────────────────────────────────────────

    @property
    def is_paused(self) -> bool:
        return self.data.remaining_time is not None

    def start(self, now_ms: int) -> bool:
        """Start breeding, or resume it from a pause.

        An incompatible pair is removed from the daycare. Returns False when
        nothing could be started.
        """
        data = self.data
        if not data.has_pair:
            return False

        if data.remaining_time is not None:
            data.set_timer(now_ms + max(0, data.remaining_time))
            logger.debug("Breeding resumed, egg due at %d", data.egg_timer)
            return True
        if data.egg_timer is not None:
            return True

        parent1, parent2 = self.parents()
        if parent1 is None or parent2 is None:
            return False
        if not are_compatible(parent1, parent2, self.species):
            logger.warning("Parents in PC slots %s are not compatible", data.breeders)
            data.clear_breeders()
            return False
        if not self.can_add_more():
            return False

        data.set_timer(now_ms + self.timer_duration(parent1, parent2))
        logger.info("Breeding started, egg due at %d", data.egg_timer)
        return True

    def pause(self, now_ms: int) -> None:
        """Freeze the countdown, keeping the exact time left."""
        data = self.data
        if data.egg_timer is not None:
            data.remaining_time = max(0, data.egg_timer - now_ms)
            data.egg_timer = None
        elif data.remaining_time is None and data.has_pair:
            parent1, parent2 = self.parents()
            if parent1 is not None and parent2 is not None:
                data.remaining_time = self.timer_duration(parent1, parent2)

    def toggle(self, now_ms: int) -> bool:
        """Pause a running timer, otherwise start. Returns True when breeding."""
        if self.data.egg_timer is not None:
            self.pause(now_ms)
            return False
        return self.start(now_ms)

    def stop(self) -> None:
        self.data.egg_timer = None
        self.data.remaining_time = None

    # ── Collection ───────────────────────────────────────────────────

    def check_and_collect(self, now_ms: int) -> Egg | None:
        """Queue a bred egg once the timer has elapsed."""
        data = self.data
        if data.egg_timer is None or data.breeders[0] is None or self.is_paused:
            return None
        if now_ms < data.egg_timer:
            return None

        if not self.can_add_more():
            data.set_timer(None)
            return None

        parent1, parent2 = self.parents()
        if parent1 is None or parent2 is None:
            logger.warning("Daycare parent missing, clearing daycare")
            data.clear_breeders()
            return None
        if not are_compatible(parent1, parent2, self.species):
            logger.warning("Daycare parents no longer compatible, clearing daycare")
            data.clear_breeders()
            return None

        egg = self._breed(parent1, parent2)
        if egg is None:
            data.clear_breeders()
            return None
        data.eggs.append(egg)
        logger.info("Daycare egg collected (%d/%d)", len(data.eggs), self.max_eggs())

        if len(data.eggs) >= self.max_eggs():
            data.set_timer(None)
        else:
            data.set_timer(now_ms + self.timer_duration(parent1, parent2))
        return egg

    def update(self, now_ms: int) -> Egg | None:
        """Once-per-second driver: restart a frozen timer, then collect."""
        if self.is_paused:
            return None
        data = self.data
        if data.has_pair and data.egg_timer is None and self.can_add_more():
            parent1, parent2 = self.parents()
            if (
                parent1 is not None
                and parent2 is not None
                and are_compatible(parent1, parent2, self.species)
            ):
                data.set_timer(now_ms + self.timer_duration(parent1, parent2))
        return self.check_and_collect(now_ms)

    def apply_offline_progress(self, now_ms: int) -> list[Egg]:
        """Breed the eggs that would have completed since the last activity.

        Eggs past the queue capacity are lost.
        """
        data = self.data
        last_active = self.state.last_active_time
        if self.state.paused or self.is_paused:
            return []
        if not data.has_pair or not last_active or data.egg_timer is None:
            return []
        elapsed = now_ms - last_active
        if elapsed <= 0:
            return []

        parent1, parent2 = self.parents()
        if (
            parent1 is None
            or parent2 is None
            or not are_compatible(parent1, parent2, self.species)
        ):
            logger.warning("Daycare parents can no longer breed, clearing pair")
            data.clear_breeders()
            return []

        duration = self.timer_duration(parent1, parent2)
        remaining = elapsed
        bred: list[Egg] = []
        while remaining >= duration and self.can_add_more():
            egg = self._breed(parent1, parent2)
            if egg is None:
                break
            data.eggs.append(egg)
            bred.append(egg)
            remaining -= duration

        if self.can_add_more():
            data.set_timer(now_ms + (duration - remaining))
        else:
            data.set_timer(None)
        if bred:
            logger.info("Offline breeding produced %d eggs", len(bred))
        return bred

    def transfer_to_incubator(self, incubator: Incubator) -> int:
        """Move queued eggs, newest first, until the incubator is full."""
        moved = 0
        queue = self.data.eggs
        for i in range(len(queue) - 1, -1, -1):
            if not incubator.add_egg(queue[i].fresh_copy()):
                break
            del queue[i]
            moved += 1
        return moved

    # ── Queries ──────────────────────────────────────────────────────

    def remaining_ms(self, now_ms: int) -> int | None:
        data = self.data
        if data.remaining_time is not None:
            return data.remaining_time
        if data.egg_timer is not None:
            return max(0, data.egg_timer - now_ms)
        return None

    def status(self, now_ms: int) -> DaycareStatus:
        data = self.data
        if not data.has_pair:
            return DaycareStatus.EMPTY
        if data.remaining_time is not None:
            return DaycareStatus.PAUSED
        if data.egg_timer is None:
            if not self.can_add_more():
                return DaycareStatus.FULL
            return DaycareStatus.AWAITING_START
        if now_ms >= data.egg_timer:
            return DaycareStatus.COLLECTIBLE
        return DaycareStatus.BREEDING

    def _breed(self, parent1: Creature, parent2: Creature) -> Egg | None:
        return create_breeding_egg(
            parent1,
            parent2,
            self.species,
            self.balance,
            iv_inherit_count=self.iv_inherit_count(),
            rng=self.rng,
        )
