from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hatchery._types import BASE_RETRO, STATS, normalize_gender


def _ivs_from_record(raw: Any) -> dict[str, int]:
    raw = raw if isinstance(raw, dict) else {}
    return {stat: int(raw.get(stat, 0)) for stat in STATS}


@dataclass
class Egg:
    """Pre-hatch entity; every genetic trait is rolled at creation."""

    species_id: int
    steps: int = 0
    is_shiny: bool = False
    is_alpha: bool = False
    ivs: dict[str, int] = field(default_factory=lambda: {s: 0 for s in STATS})
    nature: str = "Hardy"
    gender: str = "-"
    retro: str = BASE_RETRO

    def fresh_copy(self) -> Egg:
        """Same genetics with steps reset, as moved from daycare to incubator."""
        return Egg(
            species_id=self.species_id,
            steps=0,
            is_shiny=self.is_shiny,
            is_alpha=self.is_alpha,
            ivs=dict(self.ivs),
            nature=self.nature,
            gender=self.gender,
            retro=self.retro,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.species_id,
            "steps": self.steps,
            "isShiny": self.is_shiny,
            "isAlpha": self.is_alpha,
            "ivs": dict(self.ivs),
            "nature": self.nature,
            "gender": self.gender,
            "retro": self.retro,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Egg:
        return cls(
            species_id=int(data["id"]),
            steps=int(data.get("steps", 0)),
            is_shiny=bool(data.get("isShiny", False)),
            is_alpha=bool(data.get("isAlpha", False)),
            ivs=_ivs_from_record(data.get("ivs")),
            nature=data.get("nature", "Hardy"),
            gender=normalize_gender(data.get("gender")),
            retro=data.get("retro") or BASE_RETRO,
        )


@dataclass(frozen=True)
class Creature:
    """A hatched creature as stored in a PC slot."""

    species_id: int
    is_shiny: bool
    is_square_shiny: bool
    is_alpha: bool
    ivs: dict[str, int]
    nature: str
    gender: str
    retro: str = BASE_RETRO
    capture_time: str = ""

    @property
    def perfect_iv_count(self) -> int:
        return sum(1 for stat in STATS if self.ivs.get(stat) == 31)

    @classmethod
    def from_egg(cls, egg: Egg, is_square_shiny: bool, capture_time: str) -> Creature:
        return cls(
            species_id=egg.species_id,
            is_shiny=egg.is_shiny,
            is_square_shiny=is_square_shiny,
            is_alpha=egg.is_alpha,
            ivs=dict(egg.ivs),
            nature=egg.nature,
            gender=egg.gender,
            retro=egg.retro or BASE_RETRO,
            capture_time=capture_time,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.species_id,
            "isShiny": self.is_shiny,
            "isSquareShiny": self.is_square_shiny,
            "isAlpha": self.is_alpha,
            "ivs": dict(self.ivs),
            "nature": self.nature,
            "gender": self.gender,
            "retro": self.retro,
            "captureTime": self.capture_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Creature:
        return cls(
            species_id=int(data["id"]),
            is_shiny=bool(data.get("isShiny", False)),
            is_square_shiny=bool(data.get("isSquareShiny", False)),
            is_alpha=bool(data.get("isAlpha", False)),
            ivs=_ivs_from_record(data.get("ivs")),
            nature=data.get("nature", "Hardy"),
            gender=normalize_gender(data.get("gender")),
            retro=data.get("retro") or BASE_RETRO,
            capture_time=data.get("captureTime", ""),
        )
