from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field

from hatchery.balance import Balance
from hatchery.breeding import Parent, are_compatible, create_breeding_egg
from hatchery.definition import GameDefinition
from hatchery.incubator import HatchResult
from hatchery.metrics import MetricsCollector
from hatchery.report import SimulationReport, build_report
from hatchery.scheduler import VirtualClock
from hatchery.session import GameSession
from hatchery.species import SpeciesTable
from hatchery.storage import KeyValueStore, MemoryStore
from hatchery.strategy import Strategy
from hatchery.terminal import SimulationContext, TerminalCondition
from hatchery.upgrades import upgrade_statuses

logger = logging.getLogger(__name__)

MAX_TICKS = 10_000_000


class Simulation:
    """Orchestrates a headless run of a game definition on a virtual clock."""

    def __init__(
        self,
        definition: GameDefinition,
        strategy: Strategy,
        terminal: TerminalCondition,
        tick_resolution: float = 1.0,
        seed: int | None = None,
        store: KeyValueStore | None = None,
        start_ms: int = 0,
    ) -> None:
        self.definition = definition
        self.strategy = strategy
        self.terminal = terminal
        self.tick_resolution = tick_resolution

        self.rng = random.Random(seed)
        self.clock = VirtualClock(start_ms)
        self.session = GameSession(
            definition,
            store=store if store is not None else MemoryStore(),
            clock=self.clock,
            rng=self.rng,
            on_hatch=self._on_hatch,
        )
        self.collector = MetricsCollector(snapshot_interval=tick_resolution)
        self.context = SimulationContext()

    def run(self) -> SimulationReport:
        session = self.session
        state = session.state
        step_ms = max(1, int(self.tick_resolution * 1000))

        self.strategy.setup(session)
        session.start()

        tick_count = 0
        while not self.terminal.is_met(state, self.context):
            tick_count += 1
            if tick_count > MAX_TICKS:
                break

            # 1. Advance time, firing every due driver
            session.wait(step_ms)
            self.context.time_elapsed += step_ms / 1000.0

            # 2. Evaluate purchases
            self._buy_upgrades()

            # 3. Record metrics
            self.collector.record_tick(state, self.context.time_elapsed)

        session.stop()
        outcome = (
            "Terminal condition met"
            if self.terminal.is_met(state, self.context)
            else "Max ticks reached"
        )
        return self._build_report(outcome)

    def _buy_upgrades(self) -> None:
        session = self.session
        state = session.state
        affordable = [
            u for u in upgrade_statuses(self.definition.balance.upgrades, state) if u.affordable
        ]
        for upgrade_id in self.strategy.decide_purchases(state, affordable):
            result = session.buy_upgrade(upgrade_id)
            if result.success:
                self.collector.record_purchase(
                    state, upgrade_id, result, self.context.time_elapsed
                )
                self.context.total_purchases += 1

    def _on_hatch(self, result: HatchResult) -> None:
        self.collector.record_hatch(result, self.context.time_elapsed)
        self.context.eggs_hatched += 1
        if result.creature.is_shiny:
            self.context.shinies_found += 1

    def _build_report(self, outcome: str) -> SimulationReport:
        return build_report(
            collector=self.collector,
            game_name=self.definition.config.name,
            strategy_description=self.strategy.describe(),
            terminal_description=self.terminal.describe(),
            outcome=outcome,
            total_time=self.context.time_elapsed,
            final_levels=dict(self.session.state.upgrades),
        )


# ── Bulk breeding odds ───────────────────────────────────────────────


@dataclass
class BreedingSample:
    """Trait counts over many bred eggs of one pair."""

    count: int = 0
    shiny: int = 0
    alpha: int = 0
    species: dict[int, int] = field(default_factory=dict)
    genders: dict[str, int] = field(default_factory=dict)
    natures: dict[str, int] = field(default_factory=dict)
    retro: dict[str, int] = field(default_factory=dict)
    perfect_ivs: dict[int, int] = field(default_factory=dict)

    def rate(self, hits: int) -> float:
        return hits / self.count if self.count else 0.0


def simulate_breeding(
    parent1: Parent,
    parent2: Parent,
    species: SpeciesTable,
    balance: Balance,
    count: int = 10_000,
    iv_inherit_count: int | None = None,
    seed: int | None = None,
) -> BreedingSample | None:
    """Roll ``count`` eggs for a pair without touching any game state.

    Returns None when the pair cannot breed.
    """
    if not are_compatible(parent1, parent2, species):
        return None

    rng = random.Random(seed)
    sample = BreedingSample()
    species_ids: Counter[int] = Counter()
    genders: Counter[str] = Counter()
    natures: Counter[str] = Counter()
    retro: Counter[str] = Counter()
    perfect: Counter[int] = Counter()

    for _ in range(count):
        egg = create_breeding_egg(
            parent1, parent2, species, balance, iv_inherit_count=iv_inherit_count, rng=rng
        )
        if egg is None:
            return None
        sample.count += 1
        sample.shiny += int(egg.is_shiny)
        sample.alpha += int(egg.is_alpha)
        species_ids[egg.species_id] += 1
        genders[egg.gender] += 1
        natures[egg.nature] += 1
        retro[egg.retro] += 1
        perfect[sum(1 for v in egg.ivs.values() if v == balance.max_iv)] += 1

    sample.species = dict(species_ids)
    sample.genders = dict(genders)
    sample.natures = dict(natures)
    sample.retro = dict(retro)
    sample.perfect_ivs = dict(sorted(perfect.items()))
    logger.debug("Sampled %d eggs: %d shiny, %d alpha", sample.count, sample.shiny, sample.alpha)
    return sample
