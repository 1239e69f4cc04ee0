from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Sequence

from hatchery._types import (
    BASE_RETRO,
    GENDER_LABELS,
    NATURES,
    RARITY_LABELS,
    STAT_LABELS,
)
from hatchery.retro import retro_display_name

if TYPE_CHECKING:
    from hatchery.egg import Creature
    from hatchery.species import SpeciesTable

logger = logging.getLogger(__name__)

SHINY = "shiny"
ALPHA = "alpha"
NATURE = "nature"
GENDER = "gender"
IV_STAT = "iv_stat"
RARITY = "rarity"
PERFECT_IV_COUNT = "perfect_iv_count"
SPECIES = "species"
RETRO_SPRITE = "retro_sprite"

ANY_NON_BASE = "__any_non_base__"

YES_NO = ("Yes", "No")


class Criterion(ABC):
    """One condition a hatched creature must satisfy."""

    type: str = ""

    @abstractmethod
    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool: ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]: ...

    def validate(self) -> list[str]:
        return []

    def describe(self) -> str:
        return f"{self.type}: {self.to_dict().get('value')}"


# ── Private implementations ──────────────────────────────────────────


class _FlagCriterion(Criterion):
    def __init__(self, type: str, value: str, attr: str, label: str) -> None:
        self.type = type
        self.value = value
        self.attr = attr
        self.label = label

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        actual = getattr(creature, self.attr)
        match = actual == (self.value == "Yes")
        logger.debug("%s check: %s=%s, criterion=%s, match=%s",
                     self.label, self.attr, actual, self.value, match)
        return match

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value}

    def validate(self) -> list[str]:
        if self.value not in YES_NO:
            return [f"{self.label} value must be 'Yes' or 'No', got {self.value!r}"]
        return []

    def describe(self) -> str:
        return f"{self.label}: {self.value}"


class _NatureCriterion(Criterion):
    type = NATURE

    def __init__(self, value: str) -> None:
        self.value = value

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        match = creature.nature == self.value
        logger.debug("Nature check: nature=%s, criterion=%s, match=%s",
                     creature.nature, self.value, match)
        return match

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value}

    def validate(self) -> list[str]:
        if self.value not in NATURES:
            return [f"Unknown nature {self.value!r}"]
        return []

    def describe(self) -> str:
        return f"Nature: {self.value}"


class _GenderCriterion(Criterion):
    type = GENDER

    def __init__(self, value: str) -> None:
        self.value = value

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        code = GENDER_LABELS.get(self.value)
        match = code is not None and creature.gender == code
        logger.debug("Gender check: gender=%s, criterion=%s, mapped=%s, match=%s",
                     creature.gender, self.value, code, match)
        return match

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value}

    def validate(self) -> list[str]:
        if self.value not in GENDER_LABELS:
            return [f"Unknown gender {self.value!r}"]
        return []

    def describe(self) -> str:
        return f"Gender: {self.value}"


class _IvStatCriterion(Criterion):
    type = IV_STAT

    def __init__(self, stat: str, min_iv: int = 0, max_iv: int = 31) -> None:
        self.stat = stat
        self.min_iv = min_iv
        self.max_iv = max_iv

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        key = STAT_LABELS.get(self.stat)
        iv = creature.ivs.get(key) if key else None
        match = iv is not None and self.min_iv <= iv <= self.max_iv
        logger.debug("IV check: stat=%s, iv=%s, range=%s-%s, match=%s",
                     self.stat, iv, self.min_iv, self.max_iv, match)
        return match

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "value": self.stat,
            "minIv": self.min_iv,
            "maxIv": self.max_iv,
        }

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.stat not in STAT_LABELS:
            errors.append(f"Unknown IV stat {self.stat!r}")
        if self.min_iv > self.max_iv:
            errors.append("Min IV cannot be greater than Max IV")
        return errors

    def describe(self) -> str:
        return f"{self.stat} IV: {self.min_iv} - {self.max_iv}"


class _RarityCriterion(Criterion):
    type = RARITY

    def __init__(self, value: str) -> None:
        self.value = value

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        sdef = species.get(creature.species_id)
        rarity = sdef.rarity if sdef else None
        wanted = RARITY_LABELS.get(self.value)
        match = rarity is not None and rarity == wanted
        logger.debug("Rarity check: rarity=%s, criterion=%s, mapped=%s, match=%s",
                     rarity, self.value, wanted, match)
        return match

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value}

    def validate(self) -> list[str]:
        if self.value not in RARITY_LABELS:
            return [f"Unknown rarity {self.value!r}"]
        return []

    def describe(self) -> str:
        return f"Rarity: {self.value}"


class _PerfectIvCountCriterion(Criterion):
    type = PERFECT_IV_COUNT

    def __init__(self, count: int) -> None:
        self.count = count

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        perfect = creature.perfect_iv_count
        match = perfect >= self.count
        logger.debug("Perfect IV count check: has=%d, requires=%d, match=%s",
                     perfect, self.count, match)
        return match

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.count}

    def validate(self) -> list[str]:
        if not 0 <= self.count <= 6:
            return ["Perfect IV count must be between 0 and 6"]
        return []

    def describe(self) -> str:
        return f"Perfect IV Count: {self.count}"


class _SpeciesCriterion(Criterion):
    type = SPECIES

    def __init__(self, name: str) -> None:
        self.name = name

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        sdef = species.get(creature.species_id)
        name = sdef.name if sdef else None
        match = name is not None and name == self.name
        logger.debug("Species check: species=%s, criterion=%s, match=%s",
                     name, self.name, match)
        return match

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.name}

    def describe(self) -> str:
        return f"Species: {self.name}"


class _RetroSpriteCriterion(Criterion):
    """Matches a set of variants; legacy saves hold a sentinel or one name."""

    type = RETRO_SPRITE

    def __init__(self, value: Sequence[str] | str) -> None:
        self.value = list(value) if isinstance(value, (list, tuple)) else value

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        retro = creature.retro or BASE_RETRO
        if isinstance(self.value, list):
            match = retro in self.value
        elif self.value == ANY_NON_BASE:
            match = retro != BASE_RETRO
        else:
            match = retro == self.value
        logger.debug("Retro sprite check: retro=%s, criterion=%s, match=%s",
                     retro, self.value, match)
        return match

    def to_dict(self) -> dict[str, Any]:
        value = list(self.value) if isinstance(self.value, list) else self.value
        return {"type": self.type, "value": value}

    def validate(self) -> list[str]:
        if isinstance(self.value, list) and not self.value:
            return ["Select at least one retro sprite"]
        return []

    def describe(self) -> str:
        if isinstance(self.value, list):
            names = ", ".join(retro_display_name(v) for v in self.value)
            return f"Retro Sprite: {names}"
        if self.value == ANY_NON_BASE:
            return "Retro Sprite: Any Retro"
        return f"Retro Sprite: {retro_display_name(self.value)}"


class _UnknownCriterion(Criterion):
    """A saved criterion of a type this version does not know; never matches."""

    def __init__(self, record: dict[str, Any]) -> None:
        self.record = dict(record)
        self.type = str(record.get("type", ""))

    def evaluate(self, creature: Creature, species: SpeciesTable) -> bool:
        logger.warning("Unknown criterion type: %s", self.type)
        return False

    def to_dict(self) -> dict[str, Any]:
        return dict(self.record)

    def validate(self) -> list[str]:
        return [f"Unknown criterion type {self.type!r}"]


# ── Public factory ───────────────────────────────────────────────────


class Crit:
    """Factory for built-in criterion types."""

    @staticmethod
    def shiny(value: str = "Yes") -> Criterion:
        return _FlagCriterion(SHINY, value, "is_shiny", "Shiny")

    @staticmethod
    def alpha(value: str = "Yes") -> Criterion:
        return _FlagCriterion(ALPHA, value, "is_alpha", "Alpha")

    @staticmethod
    def nature(value: str) -> Criterion:
        return _NatureCriterion(value)

    @staticmethod
    def gender(value: str) -> Criterion:
        return _GenderCriterion(value)

    @staticmethod
    def iv_stat(stat: str, min_iv: int = 0, max_iv: int = 31) -> Criterion:
        return _IvStatCriterion(stat, min_iv, max_iv)

    @staticmethod
    def rarity(value: str) -> Criterion:
        return _RarityCriterion(value)

    @staticmethod
    def perfect_iv_count(count: int) -> Criterion:
        return _PerfectIvCountCriterion(count)

    @staticmethod
    def species(name: str) -> Criterion:
        return _SpeciesCriterion(name)

    @staticmethod
    def retro_sprite(value: Sequence[str] | str) -> Criterion:
        return _RetroSpriteCriterion(value)


def criterion_from_dict(record: dict[str, Any]) -> Criterion:
    """Rebuild a criterion from its persisted form."""
    if not isinstance(record, dict):
        raise TypeError(f"Criterion must be an object, got {record!r}")
    ctype = record.get("type")
    value = record.get("value")
    if ctype == SHINY:
        return Crit.shiny(value)
    if ctype == ALPHA:
        return Crit.alpha(value)
    if ctype == NATURE:
        return Crit.nature(value)
    if ctype == GENDER:
        return Crit.gender(value)
    if ctype == IV_STAT:
        return Crit.iv_stat(
            value,
            int(record.get("minIv", 0)),
            int(record.get("maxIv", 31)),
        )
    if ctype == RARITY:
        return Crit.rarity(value)
    if ctype == PERFECT_IV_COUNT:
        return Crit.perfect_iv_count(int(value or 0))
    if ctype == SPECIES:
        return Crit.species(value)
    if ctype == RETRO_SPRITE:
        return Crit.retro_sprite(value if value is not None else [])
    return _UnknownCriterion(record)
