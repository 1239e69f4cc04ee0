from __future__ import annotations

from dataclasses import dataclass, field

from hatchery._types import NATURES, RARITY_RANKS
from hatchery.upgrades import UpgradeDef, default_upgrades


@dataclass
class TraitBoost:
    """Parent-driven odds multiplier for one inherited trait."""

    enabled: bool = True
    one: float = 2.0
    two: float = 10.0

    def multiplier(self, carriers: int) -> float:
        """Multiplier for the number of parents (0, 1 or 2) carrying the trait."""
        if not self.enabled:
            return 1.0
        if carriers >= 2:
            return self.two
        if carriers == 1:
            return self.one
        return 1.0


@dataclass
class NatureGenetics:
    enabled: bool = True
    match_chance: float = 100.0  # percent


@dataclass
class GeneticsMultipliers:
    shiny: TraitBoost = field(default_factory=TraitBoost)
    alpha: TraitBoost = field(default_factory=TraitBoost)
    nature: NatureGenetics = field(default_factory=NatureGenetics)
    retro: TraitBoost = field(default_factory=lambda: TraitBoost(one=2.0, two=5.0))


@dataclass
class DaycareBalance:
    """Breeding pace and inheritance tuning."""

    egg_timers: dict[str, int] = field(
        default_factory=lambda: {
            "common": 30_000,
            "uncommon": 45_000,
            "rare": 60_000,
            "special": 120_000,
        }
    )
    max_eggs: int = 10
    iv_inheritance_count: int = 3
    genetics: GeneticsMultipliers = field(default_factory=GeneticsMultipliers)


@dataclass
class Balance:
    """Every tunable number of the incubator, shelter and daycare."""

    steps_per_tick_min: int = 20
    steps_per_tick_max: int = 45
    tick_interval_ms: int = 1000
    min_tick_interval_ms: int = 250
    fill_interval_ms: int = 1000
    rarity_weights: dict[str, float] = field(
        default_factory=lambda: {"common": 50, "uncommon": 30, "rare": 10}
    )
    shiny_odds: int = 8192
    alpha_odds: int = 1000
    square_shiny_odds: int = 16
    max_iv: int = 31
    rare_candy_chance: int = 20
    pokedollars_per_hatch: int = 1
    pc_capacity: int = 1200
    incubator_capacity: int = 6
    natures: tuple[str, ...] = NATURES
    daycare: DaycareBalance = field(default_factory=DaycareBalance)
    upgrades: dict[str, UpgradeDef] = field(default_factory=default_upgrades)

    def validate(self) -> list[str]:
        """Check for inconsistent tuning. Returns list of error messages."""
        errors: list[str] = []
        if self.steps_per_tick_min < 0:
            errors.append("steps_per_tick_min must not be negative")
        if self.steps_per_tick_max < self.steps_per_tick_min:
            errors.append("steps_per_tick_max must be >= steps_per_tick_min")
        if self.min_tick_interval_ms <= 0:
            errors.append("min_tick_interval_ms must be positive")
        if self.tick_interval_ms < self.min_tick_interval_ms:
            errors.append("tick_interval_ms must be >= min_tick_interval_ms")
        for name, odds in (
            ("shiny_odds", self.shiny_odds),
            ("alpha_odds", self.alpha_odds),
            ("square_shiny_odds", self.square_shiny_odds),
            ("rare_candy_chance", self.rare_candy_chance),
        ):
            if odds <= 0:
                errors.append(f"{name} must be positive")
        if not self.natures:
            errors.append("natures must not be empty")
        if self.pc_capacity <= 0:
            errors.append("pc_capacity must be positive")
        if self.incubator_capacity <= 0:
            errors.append("incubator_capacity must be positive")
        for rarity, weight in self.rarity_weights.items():
            if weight < 0:
                errors.append(f"Rarity weight for {rarity!r} must not be negative")
        for rarity in RARITY_RANKS:
            if rarity not in self.daycare.egg_timers:
                errors.append(f"Missing daycare egg timer for rarity {rarity!r}")
        if not 0 <= self.daycare.iv_inheritance_count <= 6:
            errors.append("iv_inheritance_count must be between 0 and 6")
        for key, upgrade in self.upgrades.items():
            if key != upgrade.id:
                errors.append(f"Upgrade registered as {key!r} has id {upgrade.id!r}")
        return errors
