from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hatchery.incubator import HatchResult
    from hatchery.state import GameState
    from hatchery.upgrades import PurchaseResult


@dataclass
class StateSnapshot:
    time: float
    eggs_hatched: int
    shiny_hatched: int
    pokedollars: int
    rare_candy: int
    pc_count: int
    incubating: int
    daycare_eggs: int


@dataclass
class HatchEvent:
    time: float
    species_id: int
    is_shiny: bool
    is_square_shiny: bool
    is_alpha: bool
    perfect_ivs: int
    retro: str
    kept: bool
    rare_candy: bool


@dataclass
class PurchaseEvent:
    time: float
    upgrade_id: str
    cost: int
    new_level: int
    pokedollars_after: int


class MetricsCollector:
    """Collects simulation metrics at configurable intervals."""

    def __init__(self, snapshot_interval: float = 1.0) -> None:
        self.snapshot_interval = snapshot_interval
        self._last_snapshot_time: float = -1.0

        self.snapshots: list[StateSnapshot] = []
        self.hatches: list[HatchEvent] = []
        self.purchases: list[PurchaseEvent] = []

    def record_tick(self, state: GameState, time: float) -> None:
        """Record a snapshot if enough time has passed."""
        if time - self._last_snapshot_time >= self.snapshot_interval:
            self._take_snapshot(state, time)
            self._last_snapshot_time = time

    def record_hatch(self, result: HatchResult, time: float) -> None:
        c = result.creature
        self.hatches.append(
            HatchEvent(
                time=time,
                species_id=c.species_id,
                is_shiny=c.is_shiny,
                is_square_shiny=c.is_square_shiny,
                is_alpha=c.is_alpha,
                perfect_ivs=c.perfect_iv_count,
                retro=c.retro,
                kept=result.kept,
                rare_candy=result.rare_candy,
            )
        )

    def record_purchase(
        self,
        state: GameState,
        upgrade_id: str,
        result: PurchaseResult,
        time: float,
    ) -> None:
        self.purchases.append(
            PurchaseEvent(
                time=time,
                upgrade_id=upgrade_id,
                cost=result.cost or 0,
                new_level=result.new_level or 0,
                pokedollars_after=state.pokedollars,
            )
        )

    def _take_snapshot(self, state: GameState, time: float) -> None:
        self.snapshots.append(
            StateSnapshot(
                time=time,
                eggs_hatched=state.egg_hatched,
                shiny_hatched=state.shiny_hatched,
                pokedollars=state.pokedollars,
                rare_candy=state.rare_candy,
                pc_count=state.pc_count(),
                incubating=len(state.incubator),
                daycare_eggs=len(state.daycare.eggs),
            )
        )
