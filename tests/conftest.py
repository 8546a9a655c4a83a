"""Shared fixtures: in-memory store and a submission factory."""

from __future__ import annotations

import datetime
import itertools

import pytest

from scoutmerge.schemas import Observation, Submission
from scoutmerge.store.memory import InMemoryStore

_BASE_TIME = datetime.datetime(2026, 1, 10, 10, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def make_submission():
    """Build a Submission; keyword overrides use camelCase observation keys.

    Example:
        make_submission("s1", auton={"fuelScored": 5}, scout="Alice")
    """
    counter = itertools.count()

    def _make(
        sub_id: str,
        team: str = "1234",
        alliance: str = "red",
        scout: str = "Alice",
        match_id: str = "q1",
        status: str = "approved",
        **data,
    ) -> Submission:
        observation = Observation.model_validate(
            {"teamNumber": team, "alliance": alliance, **data}
        )
        return Submission(
            id=sub_id,
            match_id=match_id,
            data=observation,
            created_by=f"uid-{scout.lower()}",
            created_by_name=scout,
            created_at=_BASE_TIME + datetime.timedelta(seconds=next(counter)),
            status=status,
        )

    return _make
