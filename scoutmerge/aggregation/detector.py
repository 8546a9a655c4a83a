"""Per-field conflict detection across a team's approved submissions.

For one field path, every submission's value is read and grouped by structural
equality.  Default values (and absent values) are skipped entirely: a scout who
left a field untouched does not compete with scouts who recorded something.

Output ordering:
- groups appear in the order their value was first seen among submissions
- submission ids within a group keep submission order
- scout names within a group are de-duplicated, first-seen order
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from scoutmerge.fields.defaults import is_default_value
from scoutmerge.fields.paths import get_nested
from scoutmerge.schemas import FieldValue, Submission


def value_key(value: Any) -> str:
    """Canonical grouping key; equal nested values map to the same key."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def detect_conflicts(submissions: Iterable[Submission], field_path: str) -> list[FieldValue]:
    """Group the non-default values observed at ``field_path``.

    Args:
        submissions: Approved submissions for a single team in a single match.
        field_path:  Dotted path of the leaf to inspect, e.g. ``auton.fuelScored``.

    Returns:
        One FieldValue per distinct value.  An empty list means every
        submission reported the default or nothing at all.
    """
    groups: dict[str, FieldValue] = {}

    for sub in submissions:
        value = get_nested(sub.data.to_document(), field_path)

        if value is None or is_default_value(field_path, value):
            continue

        key = value_key(value)
        group = groups.get(key)
        if group is None:
            group = FieldValue(value=value)
            groups[key] = group
        group.submission_ids.append(sub.id)
        if sub.created_by_name not in group.submitted_by:
            group.submitted_by.append(sub.created_by_name)

    return list(groups.values())
