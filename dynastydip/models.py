"""
Pydantic models for kingdoms, their royals, and the results handed back to
the host.

Field names are snake_case in Python and camelCase when dumped with
``by_alias=True`` (the persisted ``diplomacyState`` schema uses
``destroyedDay`` / ``createdDay``).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"

    def opposite(self) -> Gender:
        return Gender.FEMALE if self is Gender.MALE else Gender.MALE


class Person(_CamelModel):
    """A ruler or heir of a rival kingdom.

    ``married`` is only tracked for heirs; rulers carry ``None``.
    """

    id: str
    name: str
    dynasty: str
    gender: Gender
    age: float = Field(ge=0)
    traits: list[str] = Field(default_factory=list)
    alive: bool = True
    married: Optional[bool] = None

    def has_trait(self, trait: str) -> bool:
        return trait in self.traits

    @property
    def marriageable(self) -> bool:
        return self.alive and self.married is False


class Kingdom(_CamelModel):
    id: str
    name: str
    dynasty: str
    ruler: Person
    heirs: list[Person] = Field(default_factory=list)
    strength: int = Field(ge=0)
    wealth: int = Field(ge=0)
    destroyed: bool = False
    destroyed_day: Optional[int] = None
    created_day: int = 1

    @property
    def active(self) -> bool:
        return not self.destroyed

    def members(self) -> list[Person]:
        """Ruler followed by every heir, in succession order."""
        return [self.ruler, *self.heirs]

    def find_heir(self, person_id: str) -> Optional[Person]:
        for heir in self.heirs:
            if heir.id == person_id:
                return heir
        return None


class Dowry(_CamelModel):
    gold: float = 0
    soldiers: int = 0


class DiplomacyBonuses(_CamelModel):
    """Host-supplied modifiers, typically from researched technologies."""

    kingdom_discovery: float = 0.0
    marriage_chance: float = 0.0


class MarriageCandidate(_CamelModel):
    person: Person
    kingdom: Kingdom
    marriage_chance: float = Field(ge=0.0, le=1.0)
    dowry: Dowry
    inbreeding_risk: bool = False


class ProposalOutcome(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    NOT_FOUND = "not_found"


class ProposalResult(_CamelModel):
    outcome: ProposalOutcome
    kingdom_id: Optional[str] = None
    spouse: Optional[Person] = None
    dowry: Optional[Dowry] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is ProposalOutcome.ACCEPTED


class DiplomacyState(_CamelModel):
    """Shape of the persisted ``diplomacyState`` blob."""

    kingdoms: list[Kingdom] = Field(default_factory=list)
    relations: list[tuple[str, float]] = Field(default_factory=list)
    lineage: list[tuple[str, list[str]]] = Field(default_factory=list)
