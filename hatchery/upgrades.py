from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hatchery.cost_scaling import CostScaling

if TYPE_CHECKING:
    from hatchery.state import GameState

EGG_STEPS_BOOST = "eggStepsBoost"
TICK_SPEED_BOOST = "tickSpeedBoost"
EGG_SPEED_BOOST = "eggSpeedBoost"
EGG_CAPACITY_BOOST = "eggCapacityBoost"
IV_INHERITANCE_BOOST = "ivInheritanceBoost"


@dataclass
class UpgradeDef:
    """Static definition of a purchasable upgrade."""

    id: str
    display_name: str = ""
    description: str = ""
    base_cost: int = 100
    cost_scaling: CostScaling = field(default_factory=CostScaling.fixed)
    effect_per_level: float = 1.0
    stacking: str = "add"  # "add" or "multiply"
    max_level: int | None = None

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.id

    def cost_at(self, level: int) -> int | None:
        """Cost of buying the next level, or None at max level."""
        if self.max_level is not None and level >= self.max_level:
            return None
        return self.cost_scaling.compute(self.base_cost, level)

    def bonus_at(self, level: int) -> float:
        """Total effect at the given level (sum, or product for multipliers)."""
        if self.stacking == "multiply":
            return self.effect_per_level ** level
        return level * self.effect_per_level


@dataclass(frozen=True)
class PurchaseResult:
    success: bool
    message: str = ""
    cost: int | None = None
    new_level: int | None = None


def default_upgrades() -> dict[str, UpgradeDef]:
    defs = [
        UpgradeDef(
            id=EGG_STEPS_BOOST,
            display_name="Egg Steps Boost",
            description="Increases egg steps gained per tick",
            base_cost=150,
            cost_scaling=CostScaling.exponential(1.8),
            effect_per_level=3,
        ),
        UpgradeDef(
            id=TICK_SPEED_BOOST,
            display_name="Tick Speed Boost",
            description="Reduces time between ticks",
            base_cost=200,
            cost_scaling=CostScaling.exponential(1.9),
            effect_per_level=25,
        ),
        UpgradeDef(
            id=EGG_SPEED_BOOST,
            display_name="Breeding Speed",
            description="Make eggs generate faster",
            base_cost=250,
            cost_scaling=CostScaling.exponential(1.85),
            effect_per_level=0.9,
            stacking="multiply",
        ),
        UpgradeDef(
            id=EGG_CAPACITY_BOOST,
            display_name="Egg Capacity",
            description="Increase max eggs in daycare storage",
            base_cost=300,
            cost_scaling=CostScaling.exponential(1.75),
            effect_per_level=1,
        ),
        UpgradeDef(
            id=IV_INHERITANCE_BOOST,
            display_name="IV Inheritance",
            description="Pass one more parent IV to bred eggs",
            base_cost=1000,
            cost_scaling=CostScaling.exponential(2.5),
            effect_per_level=1,
            max_level=3,
        ),
    ]
    return {d.id: d for d in defs}


# ── Queries over live state ──────────────────────────────────────────


def upgrade_cost(upgrades: dict[str, UpgradeDef], state: GameState, upgrade_id: str) -> int | None:
    udef = upgrades.get(upgrade_id)
    if udef is None:
        return None
    return udef.cost_at(state.upgrade_level(upgrade_id))


def upgrade_bonus(
    upgrades: dict[str, UpgradeDef],
    state: GameState,
    upgrade_id: str,
    default: float = 0.0,
) -> float:
    """Current effect of an upgrade; ``default`` if it is not in the catalog."""
    udef = upgrades.get(upgrade_id)
    if udef is None:
        return default
    return udef.bonus_at(state.upgrade_level(upgrade_id))


def buy_upgrade(upgrades: dict[str, UpgradeDef], state: GameState, upgrade_id: str) -> PurchaseResult:
    """Spend pokedollars on the next level of an upgrade."""
    if upgrade_id not in upgrades:
        return PurchaseResult(success=False, message=f"Unknown upgrade: {upgrade_id!r}")

    cost = upgrade_cost(upgrades, state, upgrade_id)
    if cost is None:
        return PurchaseResult(success=False, message="Max level reached!")

    if not state.spend_pokedollars(cost):
        return PurchaseResult(success=False, message="Not enough Pokedollars!", cost=cost)

    state.upgrades[upgrade_id] = state.upgrade_level(upgrade_id) + 1
    return PurchaseResult(
        success=True,
        message="Upgrade purchased!",
        cost=cost,
        new_level=state.upgrades[upgrade_id],
    )


@dataclass(frozen=True)
class UpgradeStatus:
    """Store view of one upgrade at the current level."""

    id: str
    display_name: str
    level: int
    cost: int | None
    affordable: bool
    max_level: int | None = None


def upgrade_statuses(upgrades: dict[str, UpgradeDef], state: GameState) -> list[UpgradeStatus]:
    result: list[UpgradeStatus] = []
    for udef in upgrades.values():
        level = state.upgrade_level(udef.id)
        cost = udef.cost_at(level)
        result.append(
            UpgradeStatus(
                id=udef.id,
                display_name=udef.display_name,
                level=level,
                cost=cost,
                affordable=cost is not None and state.pokedollars >= cost,
                max_level=udef.max_level,
            )
        )
    return result
