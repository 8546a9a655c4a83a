"""Submission REST endpoints for scouts and reviewers.

Endpoints:
- POST /submissions                 — queue a new pending observation
- GET  /submissions                 — list submissions (filter by status / match / scout)
- POST /submissions/{id}/approve    — approve and re-aggregate the match
- POST /submissions/{id}/reject     — reject a pending submission

Unknown ids return 404; approving or rejecting a submission that is no longer
pending returns 409.  Store failures during the aggregation triggered by an
approval propagate as 500 — the submission stays approved and the reviewer
can re-run aggregation for the match.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from scoutmerge.api.deps import get_store
from scoutmerge.review import (
    InvalidTransitionError,
    SubmissionNotFoundError,
    approve_submission,
    create_submission,
    reject_submission,
)
from scoutmerge.schemas import CamelModel, MatchStats, Observation, Submission, SubmissionStatus
from scoutmerge.store.base import StatsStore

submissions_router = APIRouter(prefix="/submissions", tags=["submissions"])


# ---------------------------------------------------------------------------
# Request / response schemas
# ---------------------------------------------------------------------------


class SubmissionCreate(CamelModel):
    """Request body for POST /submissions."""

    match_id: str
    data: Observation
    created_by: str
    created_by_name: str
    notes: str | None = None


class ApproveRequest(CamelModel):
    """Request body for POST /submissions/{id}/approve."""

    approved_by: str


class ApproveResponse(CamelModel):
    """Response body for POST /submissions/{id}/approve."""

    status: str
    submission_id: str
    match_stats: MatchStats | None


class RejectResponse(CamelModel):
    """Response body for POST /submissions/{id}/reject."""

    status: str
    submission_id: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@submissions_router.post(
    "",
    response_model=Submission,
    status_code=201,
    operation_id="create_submission",
    summary="Queue a scouting observation for review",
)
async def create_submission_endpoint(
    body: SubmissionCreate,
    store: StatsStore = Depends(get_store),
) -> Submission:
    return await create_submission(
        store,
        match_id=body.match_id,
        data=body.data,
        created_by=body.created_by,
        created_by_name=body.created_by_name,
        notes=body.notes,
    )


@submissions_router.get(
    "",
    response_model=list[Submission],
    operation_id="list_submissions",
    summary="List submissions",
)
async def list_submissions_endpoint(
    status: Annotated[SubmissionStatus | None, Query(description="Filter by status")] = None,
    match_id: Annotated[str | None, Query(description="Filter by match")] = None,
    created_by: Annotated[str | None, Query(description="Filter by scout user id")] = None,
    store: StatsStore = Depends(get_store),
) -> list[Submission]:
    return await store.list_submissions(
        status=status, match_id=match_id, created_by=created_by
    )


@submissions_router.post(
    "/{submission_id}/approve",
    response_model=ApproveResponse,
    operation_id="approve_submission",
    summary="Approve a pending submission",
    description=(
        "Marks the submission approved and re-aggregates every approved "
        "submission for its match. Returns the resulting match statistics."
    ),
)
async def approve_submission_endpoint(
    submission_id: str,
    body: ApproveRequest,
    store: StatsStore = Depends(get_store),
) -> ApproveResponse:
    try:
        stats = await approve_submission(store, submission_id, approved_by=body.approved_by)
    except SubmissionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return ApproveResponse(status="approved", submission_id=submission_id, match_stats=stats)


@submissions_router.post(
    "/{submission_id}/reject",
    response_model=RejectResponse,
    operation_id="reject_submission",
    summary="Reject a pending submission",
)
async def reject_submission_endpoint(
    submission_id: str,
    store: StatsStore = Depends(get_store),
) -> RejectResponse:
    try:
        await reject_submission(store, submission_id)
    except SubmissionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return RejectResponse(status="rejected", submission_id=submission_id)
