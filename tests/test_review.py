"""Submission lifecycle: create, approve (triggers aggregation), reject."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from scoutmerge.review import (
    InvalidTransitionError,
    SubmissionNotFoundError,
    approve_submission,
    create_submission,
    reject_submission,
)
from scoutmerge.schemas import MATCH_STATS_COLLECTION, Observation


def _observation(team: str = "1234", **data) -> Observation:
    return Observation.model_validate({"teamNumber": team, "alliance": "red", **data})


async def test_create_queues_pending_submission(store):
    sub = await create_submission(
        store, "q1", _observation(auton={"fuelScored": 3}), "uid-alice", "Alice", notes="fast bot"
    )

    stored = await store.get_submission(sub.id)
    assert stored.status == "pending"
    assert stored.created_by_name == "Alice"
    assert stored.notes == "fast bot"
    assert stored.data.auton.fuel_scored == 3
    assert stored.created_at.tzinfo is not None


async def test_pending_submissions_do_not_create_stats(store):
    await create_submission(store, "q1", _observation(), "uid-alice", "Alice")
    assert await store.get(MATCH_STATS_COLLECTION, "match_q1") is None


async def test_approve_sets_metadata_and_aggregates(store):
    first = await create_submission(store, "q1", _observation(auton={"fuelScored": 5}), "u1", "Alice")
    second = await create_submission(store, "q1", _observation(auton={"fuelScored": 7}), "u2", "Bob")

    stats = await approve_submission(store, first.id, approved_by="mod-1")
    assert not stats.has_unresolved_conflicts
    assert stats.team_stats["1234"].resolved_data["auton"]["fuelScored"] == 5

    stats = await approve_submission(store, second.id, approved_by="mod-1")
    assert stats.has_unresolved_conflicts
    conflict = stats.team_stats["1234"].conflicts[0]
    assert [v.submitted_by for v in conflict.values] == [["Alice"], ["Bob"]]

    approved = await store.get_submission(first.id)
    assert approved.status == "approved"
    assert approved.approved_by == "mod-1"
    assert approved.approved_at is not None


async def test_reject_excludes_submission_from_aggregation(store):
    kept = await create_submission(store, "q1", _observation(auton={"fuelScored": 5}), "u1", "Alice")
    dropped = await create_submission(store, "q1", _observation(auton={"fuelScored": 9}), "u2", "Bob")

    rejected = await reject_submission(store, dropped.id)
    stats = await approve_submission(store, kept.id, approved_by="mod-1")

    assert rejected.status == "rejected"
    assert stats.team_stats["1234"].conflicts == []
    assert stats.team_stats["1234"].resolved_data["auton"]["fuelScored"] == 5


async def test_only_pending_submissions_can_transition(store):
    sub = await create_submission(store, "q1", _observation(), "u1", "Alice")
    await approve_submission(store, sub.id, approved_by="mod-1")

    with pytest.raises(InvalidTransitionError):
        await approve_submission(store, sub.id, approved_by="mod-2")
    with pytest.raises(InvalidTransitionError):
        await reject_submission(store, sub.id)


async def test_unknown_submission_raises(store):
    with pytest.raises(SubmissionNotFoundError):
        await approve_submission(store, "missing", approved_by="mod-1")
    with pytest.raises(SubmissionNotFoundError):
        await reject_submission(store, "missing")


def test_team_number_with_dot_is_rejected():
    with pytest.raises(ValidationError, match="teamNumber"):
        _observation(team="254.1")


async def test_list_submissions_by_scout(store):
    mine = await create_submission(store, "q1", _observation(), "uid-alice", "Alice")
    await create_submission(store, "q1", _observation(team="5678"), "uid-bob", "Bob")
    later = await create_submission(store, "q2", _observation(), "uid-alice", "Alice")
    await reject_submission(store, later.id)

    listed = await store.list_submissions(created_by="uid-alice")

    assert {s.id: s.status for s in listed} == {mine.id: "pending", later.id: "rejected"}
    assert await store.list_submissions(created_by="uid-alice", status="rejected") == [
        await store.get_submission(later.id)
    ]
