"""Persistence backends for submissions and aggregate documents.

- base.StatsStore      : abstract contract used by the aggregation engine
- memory.InMemoryStore : dict-backed, for local runs and tests
- sql.SqlStore         : SQLAlchemy async, backed by scoutmerge.db
"""
