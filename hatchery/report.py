from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from hatchery._types import BASE_RETRO
from hatchery.metrics import HatchEvent, MetricsCollector, PurchaseEvent, StateSnapshot


@dataclass
class SimulationReport:
    """Container for simulation results and derived metrics."""

    game_name: str = ""
    strategy_description: str = ""
    terminal_description: str = ""
    outcome: str = ""
    total_time: float = 0.0

    # Raw metrics
    snapshots: list[StateSnapshot] = field(default_factory=list)
    hatches: list[HatchEvent] = field(default_factory=list)
    purchases: list[PurchaseEvent] = field(default_factory=list)

    # Derived metrics
    eggs_hatched: int = 0
    shinies: int = 0
    square_shinies: int = 0
    alphas: int = 0
    kept: int = 0
    discarded: int = 0
    rare_candy_found: int = 0
    retro_counts: dict[str, int] = field(default_factory=dict)
    first_shiny_time: float | None = None
    hatches_per_minute: float = 0.0
    purchases_per_minute: float = 0.0
    final_levels: dict[str, int] = field(default_factory=dict)

    def series(self, attr: str) -> list[tuple[float, float]]:
        """(time, value) series of one snapshot field, e.g. 'pokedollars'."""
        return [(s.time, getattr(s, attr)) for s in self.snapshots]


def build_report(
    collector: MetricsCollector,
    game_name: str,
    strategy_description: str,
    terminal_description: str,
    outcome: str,
    total_time: float,
    final_levels: dict[str, int] | None = None,
) -> SimulationReport:
    """Build a SimulationReport from collected metrics."""
    hatches = collector.hatches
    shiny_times = [h.time for h in hatches if h.is_shiny]
    retro_counts = Counter(h.retro for h in hatches if h.retro != BASE_RETRO)
    minutes = total_time / 60.0

    return SimulationReport(
        game_name=game_name,
        strategy_description=strategy_description,
        terminal_description=terminal_description,
        outcome=outcome,
        total_time=total_time,
        snapshots=collector.snapshots,
        hatches=hatches,
        purchases=collector.purchases,
        eggs_hatched=len(hatches),
        shinies=len(shiny_times),
        square_shinies=sum(1 for h in hatches if h.is_square_shiny),
        alphas=sum(1 for h in hatches if h.is_alpha),
        kept=sum(1 for h in hatches if h.kept),
        discarded=sum(1 for h in hatches if not h.kept),
        rare_candy_found=sum(1 for h in hatches if h.rare_candy),
        retro_counts=dict(retro_counts),
        first_shiny_time=min(shiny_times) if shiny_times else None,
        hatches_per_minute=len(hatches) / minutes if minutes > 0 else 0.0,
        purchases_per_minute=len(collector.purchases) / minutes if minutes > 0 else 0.0,
        final_levels=dict(final_levels or {}),
    )
