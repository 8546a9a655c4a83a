"""Canonical "no observation" defaults for observation leaf fields.

Defaults are keyed by leaf name only, so ``auton.fuelScored`` and
``teleop.fuelScored`` share the default of ``fuelScored``.  A scout who leaves a
field untouched submits the default, and the conflict detector ignores it.
"""

from __future__ import annotations

from typing import Any

DEFAULT_VALUES: dict[str, Any] = {
    "fuelScored": 0,
    "fuelMissed": 0,
    "climbLevel": "none",
    "teamPenalties": 0,
    "opponentPenalties": 0,
}

FIELD_LABELS: dict[str, str] = {
    "auton.fuelScored": "Auton Fuel Scored",
    "auton.fuelMissed": "Auton Fuel Missed",
    "auton.climbLevel": "Auton Climb Level",
    "teleop.fuelScored": "Teleop Fuel Scored",
    "teleop.fuelMissed": "Teleop Fuel Missed",
    "teleop.climbLevel": "Teleop Climb Level",
    "teamPenalties": "Team Penalties",
    "opponentPenalties": "Opponent Penalties",
}


def leaf_name(field_path: str) -> str:
    return field_path.rsplit(".", 1)[-1]


def default_for(field_path: str) -> Any:
    """Return the declared default for the path's leaf, or None if undeclared."""
    return DEFAULT_VALUES.get(leaf_name(field_path))


def is_default_value(field_path: str, value: Any) -> bool:
    """True iff ``value`` is exactly the declared default for the path's leaf.

    Comparison is strict on type: ``False`` does not count as the default ``0``.
    Leaves without a declared default never match.
    """
    leaf = leaf_name(field_path)
    if leaf not in DEFAULT_VALUES:
        return False
    default = DEFAULT_VALUES[leaf]
    return type(value) is type(default) and value == default


def field_label(field_path: str) -> str:
    return FIELD_LABELS.get(field_path, field_path)
