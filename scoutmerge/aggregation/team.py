"""Build the consolidated statistics record for one team in one match.

Every non-identity field path ends up in exactly one of three places:
  default   — no scout recorded a non-default value; resolved data gets the default
  single    — exactly one distinct value; resolved data gets that value
  conflict  — two or more distinct values; an unresolved ConflictField is
              recorded and resolved data is left empty at that path

Team number and alliance come from the first submission and are not checked
for disagreement.

Carrying resolutions forward:
  Without ``previous`` the build starts from scratch, so conflicts that a human
  already resolved come back unresolved.  With ``previous``, a resolved conflict
  is kept when the same field path still conflicts over exactly the same set of
  distinct values; its selected value is written into the resolved data again.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Sequence

from scoutmerge.aggregation.detector import detect_conflicts, value_key
from scoutmerge.fields.defaults import default_for
from scoutmerge.fields.paths import schema_field_paths, set_nested
from scoutmerge.schemas import (
    IDENTITY_FIELDS,
    ConflictField,
    FieldValue,
    Observation,
    Submission,
    TeamMatchStats,
    utcnow,
)

logger = logging.getLogger(__name__)


def observation_field_paths() -> list[str]:
    """Field paths subject to conflict detection, in schema order."""
    return [p for p in schema_field_paths(Observation) if p not in IDENTITY_FIELDS]


def _signature(values: Sequence[FieldValue]) -> frozenset[str]:
    return frozenset(value_key(v.value) for v in values)


def _carried_resolution(
    field_path: str,
    values: list[FieldValue],
    previous: TeamMatchStats | None,
) -> ConflictField | None:
    """Return the previous resolved conflict for this path if its values are unchanged."""
    if previous is None:
        return None
    for old in previous.conflicts:
        if old.field_path != field_path or not old.resolved:
            continue
        if _signature(old.values) == _signature(values):
            return old
    return None


def build_team_stats(
    match_id: str,
    team_number: str,
    submissions: Sequence[Submission],
    previous: TeamMatchStats | None = None,
    now: datetime.datetime | None = None,
) -> TeamMatchStats:
    """Merge a team's approved submissions field by field.

    Args:
        match_id:    Match the submissions belong to.
        team_number: Team the submissions describe.
        submissions: Non-empty list of approved submissions for the team.
        previous:    Last stored stats for this team; only consulted to carry
                     forward resolved conflicts.
        now:         Timestamp for ``last_updated`` (defaults to current UTC time).

    Returns:
        A freshly built TeamMatchStats.

    Raises:
        ValueError: If ``submissions`` is empty.
    """
    if not submissions:
        raise ValueError(f"No submissions to aggregate for team {team_number}")

    alliance = submissions[0].data.alliance
    conflicts: list[ConflictField] = []
    resolved_data: dict = {}

    for field_path in observation_field_paths():
        values = detect_conflicts(submissions, field_path)

        if not values:
            set_nested(resolved_data, field_path, default_for(field_path))
            logger.debug("team %s %s: default", team_number, field_path)
        elif len(values) == 1:
            set_nested(resolved_data, field_path, values[0].value)
            logger.debug("team %s %s: single value %r", team_number, field_path, values[0].value)
        else:
            carried = _carried_resolution(field_path, values, previous)
            if carried is not None:
                conflicts.append(
                    ConflictField(
                        field_path=field_path,
                        values=values,
                        resolved=True,
                        selected_value=carried.selected_value,
                    )
                )
                set_nested(resolved_data, field_path, carried.selected_value)
                logger.debug(
                    "team %s %s: kept earlier resolution %r",
                    team_number,
                    field_path,
                    carried.selected_value,
                )
            else:
                conflicts.append(ConflictField(field_path=field_path, values=values))
                logger.debug(
                    "team %s %s: conflict across %d values", team_number, field_path, len(values)
                )

    return TeamMatchStats(
        match_id=match_id,
        team_number=team_number,
        alliance=alliance,
        conflicts=conflicts,
        resolved_data=resolved_data,
        last_updated=now or utcnow(),
    )
