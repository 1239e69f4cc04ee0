from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hatchery._types import compare

if TYPE_CHECKING:
    from hatchery.state import GameState


@dataclass
class SimulationContext:
    """Extra context available to terminal conditions during simulation."""

    time_elapsed: float = 0.0
    eggs_hatched: int = 0
    shinies_found: int = 0
    total_purchases: int = 0


class TerminalCondition(ABC):
    """Base class for simulation stopping conditions."""

    @abstractmethod
    def is_met(self, state: GameState, context: SimulationContext) -> bool: ...

    @abstractmethod
    def describe(self) -> str: ...


class _TimeTerminal(TerminalCondition):
    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    def is_met(self, state: GameState, context: SimulationContext) -> bool:
        return context.time_elapsed >= self.seconds

    def describe(self) -> str:
        return f"time({self.seconds})"


class _EggsHatchedTerminal(TerminalCondition):
    def __init__(self, count: int) -> None:
        self.count = count

    def is_met(self, state: GameState, context: SimulationContext) -> bool:
        return context.eggs_hatched >= self.count

    def describe(self) -> str:
        return f"eggs_hatched({self.count})"


class _ShinyFoundTerminal(TerminalCondition):
    def __init__(self, count: int) -> None:
        self.count = count

    def is_met(self, state: GameState, context: SimulationContext) -> bool:
        return context.shinies_found >= self.count

    def describe(self) -> str:
        return f"shiny_found({self.count})"


class _PokedollarsTerminal(TerminalCondition):
    def __init__(self, op: str, threshold: float) -> None:
        self.op = op
        self.threshold = threshold

    def is_met(self, state: GameState, context: SimulationContext) -> bool:
        return compare(state.pokedollars, self.op, self.threshold)

    def describe(self) -> str:
        return f'pokedollars("{self.op}", {self.threshold})'


class _AnyTerminal(TerminalCondition):
    def __init__(self, conditions: list[TerminalCondition]) -> None:
        self.conditions = conditions

    def is_met(self, state: GameState, context: SimulationContext) -> bool:
        return any(c.is_met(state, context) for c in self.conditions)

    def describe(self) -> str:
        return " OR ".join(c.describe() for c in self.conditions)


class _AllTerminal(TerminalCondition):
    def __init__(self, conditions: list[TerminalCondition]) -> None:
        self.conditions = conditions

    def is_met(self, state: GameState, context: SimulationContext) -> bool:
        return all(c.is_met(state, context) for c in self.conditions)

    def describe(self) -> str:
        return " AND ".join(c.describe() for c in self.conditions)


class Terminal:
    """Factory for built-in terminal conditions."""

    @staticmethod
    def time(seconds: float) -> TerminalCondition:
        return _TimeTerminal(seconds)

    @staticmethod
    def eggs_hatched(count: int) -> TerminalCondition:
        return _EggsHatchedTerminal(count)

    @staticmethod
    def shiny_found(count: int = 1) -> TerminalCondition:
        return _ShinyFoundTerminal(count)

    @staticmethod
    def pokedollars(op: str, threshold: float) -> TerminalCondition:
        return _PokedollarsTerminal(op, threshold)

    @staticmethod
    def any(*conditions: TerminalCondition) -> TerminalCondition:
        return _AnyTerminal(list(conditions))

    @staticmethod
    def all(*conditions: TerminalCondition) -> TerminalCondition:
        return _AllTerminal(list(conditions))
