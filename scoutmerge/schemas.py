"""Pydantic models for scouting observations and consolidated match statistics.

Python attribute names are snake_case; the wire and persisted representation is
camelCase (``fuelScored``, ``teamStats``).  Field paths used by the aggregation
engine are always expressed in the camelCase form, e.g. ``auton.fuelScored``.

Document helpers:
    stats.to_document()                 -> JSON-ready dict (camelCase keys)
    MatchStats.model_validate(document) -> model
"""

from __future__ import annotations

import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Alliance = Literal["red", "blue"]
ClimbLevel = Literal["none", "low", "mid", "high", "traverse"]
SubmissionStatus = Literal["pending", "approved", "rejected"]

# Fields read from the first submission of a team group, never conflict-checked
IDENTITY_FIELDS = ("teamNumber", "alliance")

MATCH_STATS_COLLECTION = "matchStats"


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def match_stats_id(match_id: str) -> str:
    """Deterministic statistics id for a match, so re-aggregation overwrites."""
    return f"match_{match_id}"


class CamelModel(BaseModel):
    """Base model serialising to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# ---------------------------------------------------------------------------
# Observations and submissions
# ---------------------------------------------------------------------------


class PhaseObservation(CamelModel):
    """Counts and climb result for one phase (auton or teleop) of a match."""

    fuel_scored: int = Field(0, ge=0)
    fuel_missed: int = Field(0, ge=0)
    climb_level: ClimbLevel = "none"


class Observation(CamelModel):
    """What one scout saw one team do in one match."""

    # Used as a key in dotted store paths, so it may not contain "."
    team_number: str = Field(pattern=r"^[^.]+$")
    alliance: Alliance
    auton: PhaseObservation = Field(default_factory=PhaseObservation)
    teleop: PhaseObservation = Field(default_factory=PhaseObservation)
    team_penalties: int = Field(0, ge=0)
    opponent_penalties: int = Field(0, ge=0)


class Submission(CamelModel):
    """An observation wrapped with identity and review lifecycle metadata."""

    id: str
    match_id: str
    data: Observation
    created_by: str
    created_by_name: str
    created_at: datetime.datetime = Field(default_factory=utcnow)
    status: SubmissionStatus = "pending"
    approved_by: str | None = None
    approved_at: datetime.datetime | None = None
    notes: str | None = None


# ---------------------------------------------------------------------------
# Aggregation results
# ---------------------------------------------------------------------------


class FieldValue(CamelModel):
    """One distinct observed value for a field path, with its provenance."""

    value: Any
    submission_ids: list[str] = Field(default_factory=list)
    submitted_by: list[str] = Field(default_factory=list)


class ConflictField(CamelModel):
    """A field path where scouts reported two or more distinct values."""

    field_path: str
    values: list[FieldValue]
    resolved: bool = False
    selected_value: Any = None


class TeamMatchStats(CamelModel):
    """Consolidated statistics for one team in one match."""

    match_id: str
    team_number: str
    alliance: Alliance
    conflicts: list[ConflictField] = Field(default_factory=list)
    resolved_data: dict[str, Any] = Field(default_factory=dict)
    last_updated: datetime.datetime = Field(default_factory=utcnow)

    def has_unresolved(self) -> bool:
        return any(not c.resolved for c in self.conflicts)


class MatchStats(CamelModel):
    """Consolidated statistics for every scouted team in one match."""

    id: str
    match_id: str
    team_stats: dict[str, TeamMatchStats] = Field(default_factory=dict)
    has_unresolved_conflicts: bool = False
    last_updated: datetime.datetime = Field(default_factory=utcnow)

    def compute_unresolved(self) -> bool:
        """True iff any team still has a conflict awaiting a decision."""
        return any(ts.has_unresolved() for ts in self.team_stats.values())
