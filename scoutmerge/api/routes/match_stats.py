"""Match statistics and conflict-resolution REST endpoints.

Endpoints:
- GET  /match-stats                                   — all stored match statistics
- GET  /match-stats/{match_id}                        — one match; 404 = no statistics yet
- POST /match-stats/{match_id}/aggregate              — re-run aggregation for a match
- POST /match-stats/{stats_id}/teams/{team}/conflicts/{index}/resolve
                                                      — resolve one conflict

The resolve endpoint rejects (422) any selected value that is not one of the
conflict's recorded values.  The check runs inside resolve_conflict, under the
same lock as the write.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query

from scoutmerge.aggregation.match import aggregate_match_stats
from scoutmerge.aggregation.resolution import (
    ConflictNotFoundError,
    MatchStatsNotFoundError,
    TeamStatsNotFoundError,
    ValueNotRecordedError,
    resolve_conflict,
)
from scoutmerge.api.deps import get_store
from scoutmerge.schemas import MATCH_STATS_COLLECTION, CamelModel, MatchStats, match_stats_id
from scoutmerge.store.base import StatsStore

match_stats_router = APIRouter(prefix="/match-stats", tags=["match-stats"])


class ResolveRequest(CamelModel):
    """Request body for the resolve endpoint."""

    selected_value: Any


@match_stats_router.get(
    "",
    response_model=list[MatchStats],
    operation_id="list_match_stats",
    summary="List consolidated match statistics",
)
async def list_match_stats(
    conflicts_only: Annotated[
        bool, Query(description="Only matches with unresolved conflicts")
    ] = False,
    store: StatsStore = Depends(get_store),
) -> list[MatchStats]:
    docs = await store.list_documents(MATCH_STATS_COLLECTION)
    stats = [MatchStats.model_validate(d) for d in docs]
    if conflicts_only:
        stats = [s for s in stats if s.has_unresolved_conflicts]
    return stats


@match_stats_router.get(
    "/{match_id}",
    response_model=MatchStats,
    operation_id="get_match_stats",
    summary="Consolidated statistics for one match",
)
async def get_match_stats(
    match_id: str,
    store: StatsStore = Depends(get_store),
) -> MatchStats:
    doc = await store.get(MATCH_STATS_COLLECTION, match_stats_id(match_id))
    if doc is None:
        raise HTTPException(status_code=404, detail=f"No statistics yet for match '{match_id}'.")
    return MatchStats.model_validate(doc)


@match_stats_router.post(
    "/{match_id}/aggregate",
    response_model=MatchStats,
    operation_id="aggregate_match",
    summary="Re-run aggregation for a match",
)
async def aggregate_match(
    match_id: str,
    store: StatsStore = Depends(get_store),
) -> MatchStats:
    stats = await aggregate_match_stats(match_id, store)
    if stats is None:
        raise HTTPException(
            status_code=404,
            detail=f"Match '{match_id}' has no approved submissions.",
        )
    return stats


@match_stats_router.post(
    "/{stats_id}/teams/{team_number}/conflicts/{conflict_index}/resolve",
    response_model=MatchStats,
    operation_id="resolve_conflict",
    summary="Resolve one conflict with a reviewer-selected value",
)
async def resolve_conflict_endpoint(
    stats_id: str,
    team_number: str,
    conflict_index: int,
    body: ResolveRequest,
    store: StatsStore = Depends(get_store),
) -> MatchStats:
    try:
        return await resolve_conflict(
            stats_id,
            team_number,
            conflict_index,
            body.selected_value,
            store,
            recorded_only=True,
        )
    except (MatchStatsNotFoundError, TeamStatsNotFoundError, ConflictNotFoundError) as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueNotRecordedError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
