"""Shared FastAPI dependencies for the ScoutMerge REST API.

``get_store`` returns the process-wide SqlStore.  Tests substitute their own
backend with ``app.dependency_overrides[get_store] = lambda: store``.
"""

from __future__ import annotations

from scoutmerge.store.base import StatsStore
from scoutmerge.store.sql import SqlStore

# Module-level lazy singleton, created on first request
_store: StatsStore | None = None


def get_store() -> StatsStore:
    """FastAPI dependency returning the configured persistence backend."""
    global _store
    if _store is None:
        _store = SqlStore()
    return _store
