"""Per-team aggregation: default / single / conflict partition and carry-forward."""

from __future__ import annotations

import random

import pytest

from scoutmerge.aggregation.team import build_team_stats, observation_field_paths
from scoutmerge.fields.paths import get_nested

CLIMBS = ["none", "low", "mid", "high", "traverse"]


def _random_phase(rng: random.Random) -> dict:
    return {
        "fuelScored": rng.choice([0, 0, 3, 5]),
        "fuelMissed": rng.choice([0, 1]),
        "climbLevel": rng.choice(CLIMBS[:3]),
    }


def test_field_paths_exclude_identity_fields():
    paths = observation_field_paths()
    assert "teamNumber" not in paths
    assert "alliance" not in paths
    assert paths[0] == "auton.fuelScored"
    assert len(paths) == 8


@pytest.mark.parametrize("seed", range(12))
def test_every_field_lands_in_exactly_one_outcome(make_submission, seed):
    rng = random.Random(seed)
    subs = [
        make_submission(
            f"s{i}",
            scout=f"scout{i}",
            auton=_random_phase(rng),
            teleop=_random_phase(rng),
            teamPenalties=rng.choice([0, 1]),
            opponentPenalties=rng.choice([0, 2]),
        )
        for i in range(rng.randint(1, 4))
    ]

    stats = build_team_stats("q1", "1234", subs)

    conflict_paths = {c.field_path for c in stats.conflicts}
    resolved_paths = {p for p in observation_field_paths() if get_nested(stats.resolved_data, p) is not None}

    assert conflict_paths.isdisjoint(resolved_paths)
    assert conflict_paths | resolved_paths == set(observation_field_paths())
    assert len(stats.conflicts) == len(conflict_paths)
    for conflict in stats.conflicts:
        assert len(conflict.values) >= 2
        assert not conflict.resolved


def test_all_default_field_resolves_to_default(make_submission):
    subs = [make_submission(f"s{i}", auton={"climbLevel": "none"}) for i in range(3)]

    stats = build_team_stats("q1", "1234", subs)

    assert stats.resolved_data["auton"]["climbLevel"] == "none"
    assert stats.resolved_data["teleop"]["fuelMissed"] == 0
    assert stats.conflicts == []


def test_single_value_from_one_scout_is_resolved_not_conflicted(make_submission):
    subs = [
        make_submission("s1", teleop={"fuelScored": 12}),
        make_submission("s2"),
        make_submission("s3"),
    ]

    stats = build_team_stats("q1", "1234", subs)

    assert stats.resolved_data["teleop"]["fuelScored"] == 12
    assert not any(c.field_path == "teleop.fuelScored" for c in stats.conflicts)


def test_conflicting_field_is_left_out_of_resolved_data(make_submission):
    subs = [
        make_submission("s1", auton={"fuelScored": 5}),
        make_submission("s2", auton={"fuelScored": 5}),
        make_submission("s3", auton={"fuelScored": 7}),
    ]

    stats = build_team_stats("q1", "1234", subs)

    assert "fuelScored" not in stats.resolved_data["auton"]
    assert len(stats.conflicts) == 1
    conflict = stats.conflicts[0]
    assert conflict.field_path == "auton.fuelScored"
    assert [v.value for v in conflict.values] == [5, 7]
    assert conflict.values[0].submission_ids == ["s1", "s2"]
    assert conflict.values[1].submission_ids == ["s3"]


def test_identity_comes_from_first_submission(make_submission):
    subs = [
        make_submission("s1", alliance="blue"),
        make_submission("s2", alliance="red"),
    ]

    stats = build_team_stats("q1", "1234", subs)

    assert stats.alliance == "blue"
    assert stats.team_number == "1234"
    assert stats.match_id == "q1"
    assert "alliance" not in stats.resolved_data
    assert "teamNumber" not in stats.resolved_data


def test_empty_submission_list_is_rejected():
    with pytest.raises(ValueError):
        build_team_stats("q1", "1234", [])


def _resolved_copy(stats, value):
    resolved = stats.model_copy(deep=True)
    resolved.conflicts[0].resolved = True
    resolved.conflicts[0].selected_value = value
    return resolved


def test_previous_resolution_is_carried_forward_when_values_unchanged(make_submission):
    subs = [
        make_submission("s1", auton={"fuelScored": 5}),
        make_submission("s2", auton={"fuelScored": 7}),
    ]
    first = build_team_stats("q1", "1234", subs)
    previous = _resolved_copy(first, 7)

    # A third scout agrees with an existing value: same set of distinct values
    subs.append(make_submission("s3", auton={"fuelScored": 5}))
    second = build_team_stats("q1", "1234", subs, previous=previous)

    assert second.conflicts[0].resolved
    assert second.conflicts[0].selected_value == 7
    assert second.conflicts[0].values[0].submission_ids == ["s1", "s3"]
    assert second.resolved_data["auton"]["fuelScored"] == 7
    assert not second.has_unresolved()


def test_previous_resolution_dropped_when_new_value_appears(make_submission):
    subs = [
        make_submission("s1", auton={"fuelScored": 5}),
        make_submission("s2", auton={"fuelScored": 7}),
    ]
    previous = _resolved_copy(build_team_stats("q1", "1234", subs), 7)

    subs.append(make_submission("s3", auton={"fuelScored": 9}))
    second = build_team_stats("q1", "1234", subs, previous=previous)

    assert not second.conflicts[0].resolved
    assert second.conflicts[0].selected_value is None
    assert "fuelScored" not in second.resolved_data["auton"]


def test_without_previous_resolutions_are_forgotten(make_submission):
    subs = [
        make_submission("s1", auton={"fuelScored": 5}),
        make_submission("s2", auton={"fuelScored": 7}),
    ]

    rebuilt = build_team_stats("q1", "1234", subs)

    assert not rebuilt.conflicts[0].resolved
