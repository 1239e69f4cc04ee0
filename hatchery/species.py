from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from hatchery._types import DITTO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Evolution:
    """One evolution rule of a species."""

    evolves_to: str
    method: tuple[str, ...] = ()
    value: int | None = None
    value_2: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Evolution:
        method = record.get("method") or ()
        if isinstance(method, str):
            method = (method,)
        return cls(
            evolves_to=record["evolves_to"],
            method=tuple(method),
            value=record.get("value"),
            value_2=record.get("value_2"),
        )


@dataclass(frozen=True)
class SpeciesDef:
    """Static reference data for one species."""

    id: int
    name: str
    egg_groups: frozenset[str] = frozenset()
    gender_rate: int = 50  # percent male, -1 genderless
    rarity: str = "common"
    gen: int = 1
    egg_steps: int = 1000
    evolutions: tuple[Evolution, ...] = ()
    sprite: str | None = None
    shiny_sprite: str | None = None
    egg_sprite: str | None = None

    @property
    def has_egg(self) -> bool:
        return bool(self.egg_sprite)

    @property
    def is_ditto(self) -> bool:
        return self.name == DITTO

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> SpeciesDef:
        gender_rate = record.get("gender_rate", 50)
        if gender_rate == "-" or gender_rate is None:
            gender_rate = -1
        groups = record.get("egg_group") or record.get("egg_groups") or ()
        if isinstance(groups, str):
            groups = (groups,)
        return cls(
            id=int(record["id"]),
            name=record["name"],
            egg_groups=frozenset(groups),
            gender_rate=int(gender_rate),
            rarity=record.get("rarity", "common"),
            gen=int(record.get("gen", 1)),
            egg_steps=int(record.get("egg_steps", 1000)),
            evolutions=tuple(
                Evolution.from_record(e) for e in record.get("evolutions") or ()
            ),
            sprite=record.get("sprite"),
            shiny_sprite=record.get("shiny_sprite"),
            egg_sprite=record.get("egg_sprite"),
        )


@dataclass
class SpeciesTable:
    """Read-only species lookup by id and by name."""

    species: list[SpeciesDef] = field(default_factory=list)

    _by_id: dict[int, SpeciesDef] = field(default_factory=dict, init=False, repr=False)
    _by_name: dict[str, SpeciesDef] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_id = {s.id: s for s in self.species}
        self._by_name = {s.name: s for s in self.species}

    def __len__(self) -> int:
        return len(self.species)

    def __iter__(self):
        return iter(self.species)

    def get(self, species_id: int) -> SpeciesDef | None:
        return self._by_id.get(species_id)

    def by_name(self, name: str) -> SpeciesDef | None:
        return self._by_name.get(name)

    def egg_capable(self) -> list[SpeciesDef]:
        return [s for s in self.species if s.has_egg]

    def validate(self) -> list[str]:
        errors: list[str] = []
        seen: set[int] = set()
        for s in self.species:
            if s.id in seen:
                errors.append(f"Duplicate species ID: {s.id!r}")
            seen.add(s.id)
            if s.egg_steps <= 0:
                errors.append(f"Species {s.name!r} has non-positive egg_steps")
            if not (s.gender_rate == -1 or 0 <= s.gender_rate <= 100):
                errors.append(f"Species {s.name!r} has invalid gender_rate {s.gender_rate}")
            for evo in s.evolutions:
                if evo.evolves_to not in self._by_name:
                    errors.append(
                        f"Species {s.name!r} evolves into unknown species {evo.evolves_to!r}"
                    )
        return errors

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> SpeciesTable:
        return cls([SpeciesDef.from_record(r) for r in records])

    @classmethod
    def from_json(cls, path: str | Path) -> SpeciesTable:
        with open(str(path)) as f:
            records = json.load(f)
        table = cls.from_records(records)
        logger.info("Loaded %d species from %s", len(table), path)
        return table
