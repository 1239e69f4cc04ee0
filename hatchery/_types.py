from __future__ import annotations

import operator
from datetime import datetime, timezone
from typing import Callable, Protocol

STATS: tuple[str, ...] = ("hp", "atk", "def", "spAtk", "spDef", "spd")

# Display label -> persisted IV key
STAT_LABELS: dict[str, str] = {
    "HP": "hp",
    "ATK": "atk",
    "DEF": "def",
    "SP.ATK": "spAtk",
    "SP.DEF": "spDef",
    "SPD": "spd",
}

NATURES: tuple[str, ...] = (
    "Hardy", "Bold", "Modest", "Calm", "Timid",
    "Lonely", "Docile", "Mild", "Gentle", "Hasty",
    "Brave", "Relaxed", "Quiet", "Sassy", "Careful",
    "Serious", "Jolly", "Naive", "Bashful", "Quirky",
    "Adamant", "Impish", "Lax", "Rash", "Naughty",
)

MALE = "M"
FEMALE = "F"
GENDERLESS = "-"

GENDER_LABELS: dict[str, str] = {
    "Male": MALE,
    "Female": FEMALE,
    "Genderless": GENDERLESS,
}

RARITY_RANKS: dict[str, int] = {
    "common": 1,
    "uncommon": 2,
    "rare": 3,
    "special": 4,
}

RARITY_LABELS: dict[str, str] = {
    "Common": "common",
    "Uncommon": "uncommon",
    "Rare": "rare",
    "Special": "special",
}

BASE_RETRO = "base"
DITTO = "Ditto"

SHELTER = "shelter"
DAYCARE = "daycare"
EGG_SOURCES = (SHELTER, DAYCARE)


class RandomSource(Protocol):
    """The subset of ``random.Random`` the engines rely on."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def randrange(self, stop: int) -> int: ...


def normalize_gender(value: object) -> str:
    """Map any stored gender spelling to its single-character code."""
    if value in (MALE, FEMALE, GENDERLESS):
        return value  # type: ignore[return-value]
    if isinstance(value, str) and value in GENDER_LABELS:
        return GENDER_LABELS[value]
    return GENDERLESS


def gender_label(code: str) -> str:
    for label, c in GENDER_LABELS.items():
        if c == code:
            return label
    return code


def iso_from_ms(ms: int) -> str:
    """'2024-01-01T00:00:00.000Z' style UTC timestamp for epoch milliseconds."""
    stamp = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


_OPS: dict[str, Callable[[float, float], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


def compare(left: float, op: str, right: float) -> bool:
    """Compare two values using a string operator."""
    fn = _OPS.get(op)
    if fn is None:
        raise ValueError(f"Unknown operator: {op!r}. Expected one of {list(_OPS)}")
    return fn(left, right)
