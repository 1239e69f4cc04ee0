from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hatchery._types import SHELTER
from hatchery.egg import Creature, Egg
from hatchery.filters import Filter


@dataclass
class DaycareState:
    """Breeding pair, timer and queued eggs.

    ``egg_timer`` is the completion time in epoch ms while breeding runs;
    ``remaining_time`` holds the ms left while breeding is paused. At most one
    of them is set.
    """

    breeders: list[int | None] = field(default_factory=lambda: [None, None])
    egg_timer: int | None = None
    remaining_time: int | None = None
    eggs: list[Egg] = field(default_factory=list)

    @property
    def has_pair(self) -> bool:
        return self.breeders[0] is not None and self.breeders[1] is not None

    def set_timer(self, timestamp: int | None) -> None:
        self.egg_timer = timestamp
        if timestamp is not None:
            self.remaining_time = None

    def clear_breeders(self) -> None:
        self.breeders = [None, None]
        self.egg_timer = None
        self.remaining_time = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "breeders": list(self.breeders),
            "eggTimer": self.egg_timer,
            "remainingTime": self.remaining_time,
            "eggs": [egg.to_dict() for egg in self.eggs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DaycareState:
        breeders = list(data.get("breeders") or [None, None])[:2]
        breeders += [None] * (2 - len(breeders))
        timer = data.get("eggTimer")
        remaining = data.get("remainingTime")
        return cls(
            breeders=[int(b) if b is not None else None for b in breeders],
            egg_timer=int(timer) if timer is not None else None,
            remaining_time=int(remaining) if remaining is not None else None,
            eggs=[Egg.from_dict(e) for e in data.get("eggs") or ()],
        )


class GameState:
    """Mutable runtime container holding the whole save."""

    def __init__(self, pc_capacity: int = 1200) -> None:
        self.incubator: list[Egg] = []
        self.pc: list[Creature | None] = [None] * pc_capacity
        self.filters: list[Filter] = []
        self.egg_hatched: int = 0
        self.shiny_hatched: int = 0
        self.rare_candy: int = 0
        self.pokedollars: int = 0
        self.paused: bool = False
        self.upgrades: dict[str, int] = {}
        self.daycare = DaycareState()
        self.last_active_time: int | None = None
        self.egg_source: str = SHELTER

    # ── Currencies ───────────────────────────────────────────────────

    def add_pokedollars(self, amount: int) -> None:
        self.pokedollars += amount

    def spend_pokedollars(self, amount: int) -> bool:
        if self.pokedollars < amount:
            return False
        self.pokedollars -= amount
        return True

    def add_rare_candy(self, amount: int = 1) -> None:
        self.rare_candy += amount

    def use_rare_candy(self, amount: int = 1) -> bool:
        if self.rare_candy < amount:
            return False
        self.rare_candy -= amount
        return True

    def upgrade_level(self, upgrade_id: str) -> int:
        return self.upgrades.get(upgrade_id, 0)

    # ── PC ───────────────────────────────────────────────────────────

    def pc_get(self, index: int) -> Creature | None:
        if index is None or not 0 <= index < len(self.pc):
            return None
        return self.pc[index]

    def add_to_pc(self, creature: Creature) -> int | None:
        """Store in the first empty slot; None when the PC is full."""
        for i, slot in enumerate(self.pc):
            if slot is None:
                self.pc[i] = creature
                return i
        return None

    def pc_count(self) -> int:
        return sum(1 for slot in self.pc if slot is not None)

    def record_hatched(self, is_shiny: bool) -> None:
        self.egg_hatched += 1
        if is_shiny:
            self.shiny_hatched += 1
