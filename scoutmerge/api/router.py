"""Top-level FastAPI APIRouter for the ScoutMerge REST API (v1).

Prefix:  /api/v1
Tags:    ["rest-api"]

Sub-routers included:
- submissions_router  — /api/v1/submissions, approve / reject
- match_stats_router  — /api/v1/match-stats, aggregate, conflict resolution
"""

from __future__ import annotations

from fastapi import APIRouter

from scoutmerge.api.routes.match_stats import match_stats_router
from scoutmerge.api.routes.submissions import submissions_router

api_router = APIRouter(prefix="/api/v1", tags=["rest-api"])

api_router.include_router(submissions_router)
api_router.include_router(match_stats_router)
