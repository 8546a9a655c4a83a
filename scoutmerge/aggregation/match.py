"""Match-level aggregation: approved submissions -> one MatchStats document.

Steps:
  1. Load approved submissions for the match (pending/rejected never count).
  2. No approved submissions -> return None and write nothing.
  3. Group by team number, first-seen order.
  4. Build each team's stats (see scoutmerge.aggregation.team).
  5. Derive hasUnresolvedConflicts and write the whole document under
     ``match_<matchId>``, replacing any earlier version.

The full cycle runs under the per-document lock so it cannot interleave with a
conflict resolution on the same match in this process.  Store failures are
logged and re-raised unchanged; nothing is retried here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from scoutmerge.aggregation.locks import KeyedLocks, stats_locks
from scoutmerge.aggregation.team import build_team_stats
from scoutmerge.config import settings
from scoutmerge.schemas import (
    MATCH_STATS_COLLECTION,
    MatchStats,
    Submission,
    match_stats_id,
    utcnow,
)
from scoutmerge.store.base import StatsStore

logger = logging.getLogger(__name__)


def group_submissions_by_team(submissions: Iterable[Submission]) -> dict[str, list[Submission]]:
    """Group submissions by team number, keeping first-seen team order."""
    groups: dict[str, list[Submission]] = {}
    for sub in submissions:
        groups.setdefault(sub.data.team_number, []).append(sub)
    return groups


async def aggregate_match_stats(
    match_id: str,
    store: StatsStore,
    preserve_resolutions: bool | None = None,
    locks: KeyedLocks = stats_locks,
) -> MatchStats | None:
    """Rebuild and persist the consolidated statistics for a match.

    Args:
        match_id:             Match to aggregate.
        store:                Persistence backend.
        preserve_resolutions: Carry forward earlier human resolutions whose
                              conflicting values are unchanged.  Defaults to
                              ``settings.preserve_resolutions``.
        locks:                Lock registry guarding the stats document.

    Returns:
        The persisted MatchStats, or None when the match has no approved
        submissions (no document is created in that case).
    """
    if preserve_resolutions is None:
        preserve_resolutions = settings.preserve_resolutions

    stats_id = match_stats_id(match_id)

    async with locks.hold(stats_id):
        try:
            submissions = [
                s for s in await store.list_approved(match_id) if s.status == "approved"
            ]
            if not submissions:
                logger.info("No approved submissions for match %s, nothing to aggregate", match_id)
                return None

            previous: MatchStats | None = None
            if preserve_resolutions:
                doc = await store.get(MATCH_STATS_COLLECTION, stats_id)
                if doc is not None:
                    previous = MatchStats.model_validate(doc)

            now = utcnow()
            team_stats = {}
            for team_number, subs in group_submissions_by_team(submissions).items():
                team_stats[team_number] = build_team_stats(
                    match_id,
                    team_number,
                    subs,
                    previous=previous.team_stats.get(team_number) if previous else None,
                    now=now,
                )

            stats = MatchStats(
                id=stats_id,
                match_id=match_id,
                team_stats=team_stats,
                last_updated=now,
            )
            stats.has_unresolved_conflicts = stats.compute_unresolved()

            await store.put(MATCH_STATS_COLLECTION, stats_id, stats.to_document())
        except Exception:
            logger.exception("Failed to aggregate match stats for match %s", match_id)
            raise

    logger.info(
        "Aggregated match %s: %d submission(s), %d team(s), unresolved=%s",
        match_id,
        len(submissions),
        len(team_stats),
        stats.has_unresolved_conflicts,
    )
    return stats
