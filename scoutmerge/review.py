"""Submission review workflow: create, approve, reject.

Approving a submission is what triggers aggregation for its match: the
submission is moved to "approved", then the whole match is re-aggregated and
the resulting MatchStats returned.  Rejecting does not aggregate.

Lifecycle:
    pending -> approved
    pending -> rejected

Any other transition raises InvalidTransitionError.  Approved submissions are
otherwise immutable; only status and approval metadata are ever written.
"""

from __future__ import annotations

import logging
import uuid

from scoutmerge.aggregation.match import aggregate_match_stats
from scoutmerge.schemas import MatchStats, Observation, Submission, SubmissionStatus, utcnow
from scoutmerge.store.base import StatsStore

logger = logging.getLogger(__name__)


class SubmissionNotFoundError(LookupError):
    """No submission exists with the given id."""


class InvalidTransitionError(ValueError):
    """The submission is not in a state that allows the requested change."""


async def create_submission(
    store: StatsStore,
    match_id: str,
    data: Observation,
    created_by: str,
    created_by_name: str,
    notes: str | None = None,
) -> Submission:
    """Queue a new pending submission and return it."""
    submission = Submission(
        id=uuid.uuid4().hex,
        match_id=match_id,
        data=data,
        created_by=created_by,
        created_by_name=created_by_name,
        created_at=utcnow(),
        status="pending",
        notes=notes,
    )
    await store.add_submission(submission)
    logger.info(
        "Submission %s queued: match=%s team=%s by=%s",
        submission.id,
        match_id,
        data.team_number,
        created_by,
    )
    return submission


async def _load_pending(store: StatsStore, submission_id: str, target: SubmissionStatus) -> Submission:
    submission = await store.get_submission(submission_id)
    if submission is None:
        raise SubmissionNotFoundError(f"Submission '{submission_id}' not found.")
    if submission.status != "pending":
        raise InvalidTransitionError(
            f"Submission '{submission_id}' is {submission.status}; cannot mark {target}."
        )
    return submission


async def approve_submission(
    store: StatsStore,
    submission_id: str,
    approved_by: str,
) -> MatchStats | None:
    """Approve a pending submission and re-aggregate its match.

    Returns:
        The match statistics produced by aggregation.

    Raises:
        SubmissionNotFoundError: Unknown id.
        InvalidTransitionError:  Submission is not pending.
        Exception:               Store failures during aggregation, unchanged.
                                 The submission stays approved; re-running
                                 aggregation is the caller's decision.
    """
    submission = await _load_pending(store, submission_id, "approved")

    submission.status = "approved"
    submission.approved_by = approved_by
    submission.approved_at = utcnow()
    await store.update_submission(submission)

    logger.info(
        "Submission approved: submission_id=%s match=%s approved_by=%s",
        submission_id,
        submission.match_id,
        approved_by,
    )

    return await aggregate_match_stats(submission.match_id, store)


async def reject_submission(store: StatsStore, submission_id: str) -> Submission:
    """Reject a pending submission.  It will never take part in aggregation."""
    submission = await _load_pending(store, submission_id, "rejected")

    submission.status = "rejected"
    await store.update_submission(submission)

    logger.info(
        "Submission rejected: submission_id=%s match=%s",
        submission_id,
        submission.match_id,
    )
    return submission
