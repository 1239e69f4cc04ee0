"""Keep/discard filters over hatched creatures.

Filters are ORed together and the criteria inside one filter are ANDed. A
creature is kept when any active filter matches it, or when no filter is
active at all.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from hatchery.criteria import Criterion, criterion_from_dict

if TYPE_CHECKING:
    from hatchery.egg import Creature
    from hatchery.species import SpeciesTable

logger = logging.getLogger(__name__)


@dataclass
class Filter:
    name: str
    criteria: list[Criterion] = field(default_factory=list)
    active: bool = True
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = ""

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.name.strip():
            errors.append("Filter name must not be empty")
        if not self.criteria:
            errors.append("Filter needs at least one criterion")
        for crit in self.criteria:
            errors.extend(crit.validate())
        return errors

    def describe(self) -> list[str]:
        return [crit.describe() for crit in self.criteria]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "criteria": [crit.to_dict() for crit in self.criteria],
            "active": self.active,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Filter:
        criteria: list[Criterion] = []
        for record in data.get("criteria") or ():
            try:
                criteria.append(criterion_from_dict(record))
            except (TypeError, ValueError) as e:
                logger.error("Skipping malformed criterion %r: %s", record, e)
        return cls(
            id=str(data.get("id") or uuid.uuid4().hex),
            name=str(data.get("name") or ""),
            criteria=criteria,
            active=bool(data.get("active", True)),
            created_at=str(data.get("createdAt") or ""),
        )


def matches_all_criteria(
    creature: Creature, criteria: Iterable[Criterion], species: SpeciesTable
) -> bool:
    return all(crit.evaluate(creature, species) for crit in criteria)


def check_against_filters(
    creature: Creature, filters: Iterable[Filter], species: SpeciesTable
) -> bool:
    """Whether a hatched creature is kept."""
    active = [f for f in filters if f.active]
    if not active:
        logger.debug("No active filters, keeping species %s", creature.species_id)
        return True

    for f in active:
        if matches_all_criteria(creature, f.criteria, species):
            logger.debug("Species %s matched filter %r", creature.species_id, f.name)
            return True

    logger.debug("Species %s matched no active filter", creature.species_id)
    return False
