from __future__ import annotations

import warnings
from dataclasses import dataclass, field

from hatchery._types import RARITY_RANKS
from hatchery.balance import Balance
from hatchery.generation import wild_candidates
from hatchery.species import SpeciesTable


@dataclass
class GameConfig:
    """Top-level game configuration."""

    name: str = "Untitled"


@dataclass
class GameDefinition:
    """Complete static definition of a hatchery game."""

    config: GameConfig = field(default_factory=GameConfig)
    balance: Balance = field(default_factory=Balance)
    species: SpeciesTable = field(default_factory=SpeciesTable)

    def validate(self) -> list[str]:
        """Check for consistency errors. Returns list of error messages."""
        errors: list[str] = []
        errors.extend(self.balance.validate())
        errors.extend(self.species.validate())

        # Every species needs a rarity the daycare can time
        for s in self.species:
            if s.rarity not in RARITY_RANKS:
                errors.append(f"Species {s.name!r} has unknown rarity {s.rarity!r}")

        # Shelter mode only produces weighted, egg-capable species
        if self.species and not wild_candidates(self.species, self.balance.rarity_weights):
            warnings.warn(
                f"Game {self.config.name!r} has no egg-capable species with a "
                f"weighted rarity; the shelter will never produce eggs.",
                stacklevel=2,
            )

        return errors
