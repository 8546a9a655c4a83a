"""Apply a human decision to one conflict in a stored MatchStats document.

resolve_conflict() is the only way a conflict changes state.  It:
  - marks the conflict resolved with the selected value
  - writes the value into the team's resolved data at the conflict's path
  - recomputes the match-level hasUnresolvedConflicts flag
  - patches only ``teamStats.<team>``, ``hasUnresolvedConflicts`` and
    ``lastUpdated``; other teams' data is not rewritten

By default the selected value is not checked against the conflict's recorded
values.  Callers at the HTTP / CLI boundary pass ``recorded_only=True`` so the
check runs under the same lock as the write, against the conflict actually
being updated.
"""

from __future__ import annotations

import logging
from typing import Any

from scoutmerge.aggregation.detector import value_key
from scoutmerge.aggregation.locks import KeyedLocks, stats_locks
from scoutmerge.fields.paths import set_nested
from scoutmerge.schemas import MATCH_STATS_COLLECTION, ConflictField, MatchStats, utcnow
from scoutmerge.store.base import StatsStore

logger = logging.getLogger(__name__)


class MatchStatsNotFoundError(LookupError):
    """No statistics document exists for the given id."""


class TeamStatsNotFoundError(LookupError):
    """The statistics document has no entry for the given team."""


class ConflictNotFoundError(LookupError):
    """The team has no conflict at the given index."""


class ValueNotRecordedError(ValueError):
    """The selected value is not one of the conflict's recorded values."""


def value_in_conflict(conflict: ConflictField, value: Any) -> bool:
    """True iff ``value`` is one of the conflict's recorded distinct values."""
    key = value_key(value)
    return any(value_key(v.value) == key for v in conflict.values)


async def resolve_conflict(
    stats_id: str,
    team_number: str,
    conflict_index: int,
    selected_value: Any,
    store: StatsStore,
    locks: KeyedLocks = stats_locks,
    recorded_only: bool = False,
) -> MatchStats:
    """Resolve one conflict and persist the incremental update.

    Args:
        stats_id:       Id of the MatchStats document (``match_<matchId>``).
        team_number:    Team whose conflict is being resolved.
        conflict_index: Index into that team's full conflict list.
        selected_value: Value chosen by the reviewer.
        store:          Persistence backend.
        locks:          Lock registry guarding the stats document.
        recorded_only:  Reject values the scouts never reported.

    Returns:
        The MatchStats as it stands after the update.

    Raises:
        MatchStatsNotFoundError, TeamStatsNotFoundError, ConflictNotFoundError:
            If the target does not exist.
        ValueNotRecordedError: ``recorded_only`` is set and the value is not
            among the conflict's recorded values.
    """
    async with locks.hold(stats_id):
        try:
            doc = await store.get(MATCH_STATS_COLLECTION, stats_id)
        except Exception:
            logger.exception("Failed to load match stats %s", stats_id)
            raise

        if doc is None:
            raise MatchStatsNotFoundError(f"Match stats '{stats_id}' not found")
        stats = MatchStats.model_validate(doc)

        team = stats.team_stats.get(team_number)
        if team is None:
            raise TeamStatsNotFoundError(f"Team {team_number} not found in '{stats_id}'")
        if not 0 <= conflict_index < len(team.conflicts):
            raise ConflictNotFoundError(
                f"Team {team_number} has no conflict at index {conflict_index}"
            )

        conflict = team.conflicts[conflict_index]
        if recorded_only and not value_in_conflict(conflict, selected_value):
            raise ValueNotRecordedError(
                f"{selected_value!r} was not reported for {conflict.field_path} "
                f"(team {team_number}, '{stats_id}')"
            )
        if conflict.resolved:
            logger.info(
                "Re-resolving %s for team %s in %s (was %r)",
                conflict.field_path,
                team_number,
                stats_id,
                conflict.selected_value,
            )
        conflict.resolved = True
        conflict.selected_value = selected_value
        set_nested(team.resolved_data, conflict.field_path, selected_value)

        now = utcnow()
        team.last_updated = now
        stats.last_updated = now
        stats.has_unresolved_conflicts = stats.compute_unresolved()

        try:
            await store.patch(
                MATCH_STATS_COLLECTION,
                stats_id,
                {
                    f"teamStats.{team_number}": team.to_document(),
                    "hasUnresolvedConflicts": stats.has_unresolved_conflicts,
                    "lastUpdated": now.isoformat(),
                },
            )
        except Exception:
            logger.exception("Failed to save resolution for %s in %s", conflict.field_path, stats_id)
            raise

    logger.info(
        "Resolved %s for team %s in %s -> %r (unresolved remaining=%s)",
        conflict.field_path,
        team_number,
        stats_id,
        selected_value,
        stats.has_unresolved_conflicts,
    )
    return stats
