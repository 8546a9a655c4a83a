"""Aggregation and conflict-resolution engine.

Public API:
- detector.detect_conflicts       : group one field's values across submissions
- team.build_team_stats           : merge a team's submissions field by field
- match.aggregate_match_stats     : rebuild and persist a match's statistics
- resolution.resolve_conflict     : apply a reviewer's choice to one conflict

Conflicts are never resolved automatically — no voting, no averaging.
"""
