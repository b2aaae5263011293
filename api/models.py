"""
Pydantic models for the dynasty diplomacy HTTP API.

Request bodies are validated here before they reach the core. Response
bodies reuse the core's own models (Kingdom, MarriageCandidate,
ProposalResult) directly.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from dynastydip.models import DiplomacyBonuses


class DailyTickRequest(BaseModel):
    """One or more simulated days to advance, starting at ``currentDay``."""

    currentDay: int = Field(ge=0)
    days: int = Field(default=1, ge=1, le=3650)
    threatLevel: float | None = Field(default=None, ge=0.0)
    bonuses: DiplomacyBonuses | None = None


class DailyTickResponse(BaseModel):
    lastDay: int
    saved: bool
    activeKingdoms: int


class ProposalRequest(BaseModel):
    candidateId: str = Field(min_length=1)
    seekerId: str = Field(min_length=1)


class GiftRequest(BaseModel):
    kingdomId: str = Field(min_length=1)
    gold: int = Field(gt=0)


class LineageRequest(BaseModel):
    personId: str = Field(min_length=1)
    parentIds: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def not_own_parent(self) -> LineageRequest:
        if self.personId in self.parentIds:
            raise ValueError("A person cannot be registered as their own parent.")
        return self


class LineageResponse(BaseModel):
    personId: str
    ancestorIds: list[str]


class InbreedingResponse(BaseModel):
    personId1: str
    personId2: str
    inbred: bool
