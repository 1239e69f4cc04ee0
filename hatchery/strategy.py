from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from hatchery.upgrades import UpgradeStatus

if TYPE_CHECKING:
    from hatchery.session import GameSession
    from hatchery.state import GameState


class Strategy(ABC):
    """Base class for simulation strategies."""

    egg_source: str | None = None

    def setup(self, session: GameSession) -> None:
        """Configure the session before the run (egg source, filters, daycare)."""
        if self.egg_source is not None:
            session.set_egg_source(self.egg_source)

    @abstractmethod
    def decide_purchases(
        self, state: GameState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        """Return ordered list of upgrade IDs to buy."""
        ...

    @abstractmethod
    def describe(self) -> str: ...


class NoPurchases(Strategy):
    """Never spend pokedollars; measures the base pace."""

    def decide_purchases(
        self, state: GameState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        return []

    def describe(self) -> str:
        return "NoPurchases"


class GreedyCheapest(Strategy):
    """Buy the cheapest affordable upgrade first."""

    def decide_purchases(
        self, state: GameState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        if not affordable:
            return []
        return [u.id for u in sorted(affordable, key=lambda u: u.cost or 0)]

    def describe(self) -> str:
        return "GreedyCheapest"


class PriorityList(Strategy):
    """Follow a designer-specified purchase order."""

    def __init__(
        self,
        priorities: list[tuple[str, int]],
        fallback: Strategy | None = None,
    ) -> None:
        self.priorities = priorities  # (upgrade_id, target_level)
        self.fallback = fallback

    def decide_purchases(
        self, state: GameState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        affordable_ids = {u.id for u in affordable}

        for upgrade_id, target_level in self.priorities:
            if state.upgrade_level(upgrade_id) < target_level:
                # Save up for the next priority rather than skipping ahead
                if upgrade_id in affordable_ids:
                    return [upgrade_id]
                return []

        if self.fallback:
            return self.fallback.decide_purchases(state, affordable)
        return []

    def describe(self) -> str:
        items = ", ".join(f"{uid}x{lvl}" for uid, lvl in self.priorities)
        return f"PriorityList([{items}])"


class CustomStrategy(Strategy):
    """Strategy defined by callables."""

    def __init__(
        self,
        decide_fn: Callable[[GameState, list[UpgradeStatus]], list[str]] | None = None,
        setup_fn: Callable[[GameSession], None] | None = None,
        name: str = "Custom",
    ) -> None:
        self._decide_fn = decide_fn
        self._setup_fn = setup_fn
        self._name = name

    def setup(self, session: GameSession) -> None:
        super().setup(session)
        if self._setup_fn:
            self._setup_fn(session)

    def decide_purchases(
        self, state: GameState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        if self._decide_fn:
            return self._decide_fn(state, affordable)
        return []

    def describe(self) -> str:
        return self._name


STRATEGY_REGISTRY: dict[str, type[Strategy]] = {
    "none": NoPurchases,
    "greedy_cheapest": GreedyCheapest,
    "priority_list": PriorityList,
    "custom": CustomStrategy,
}
