"""SqlStore against an in-memory SQLite database (aiosqlite)."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from scoutmerge.aggregation.match import aggregate_match_stats
from scoutmerge.aggregation.resolution import resolve_conflict
from scoutmerge.config import settings
from scoutmerge.db.session import build_engine, dispose_engine, init_models
from scoutmerge.schemas import MATCH_STATS_COLLECTION
from scoutmerge.store.sql import SqlStore


@pytest.fixture
async def sql_store():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_models(engine)
    yield SqlStore(async_sessionmaker(engine, expire_on_commit=False))
    await engine.dispose()


async def test_put_get_and_overwrite(sql_store):
    await sql_store.put("matchStats", "match_q1", {"a": 1, "nested": {"b": 2}})
    assert await sql_store.get("matchStats", "match_q1") == {"a": 1, "nested": {"b": 2}}

    await sql_store.put("matchStats", "match_q1", {"a": 3})
    assert await sql_store.get("matchStats", "match_q1") == {"a": 3}
    assert await sql_store.get("matchStats", "match_q9") is None


async def test_patch_updates_paths_and_keeps_siblings(sql_store):
    await sql_store.put("matchStats", "match_q1", {"teamStats": {"1": {"x": 1}, "2": {"x": 2}}, "flag": True})

    await sql_store.patch("matchStats", "match_q1", {"teamStats.1": {"x": 10}, "flag": False})

    assert await sql_store.get("matchStats", "match_q1") == {
        "teamStats": {"1": {"x": 10}, "2": {"x": 2}},
        "flag": False,
    }


async def test_patch_missing_document_raises(sql_store):
    with pytest.raises(KeyError):
        await sql_store.patch("matchStats", "missing", {"flag": True})


async def test_list_documents_is_scoped_and_ordered(sql_store):
    await sql_store.put("matchStats", "match_q2", {"id": "match_q2"})
    await sql_store.put("matchStats", "match_q1", {"id": "match_q1"})
    await sql_store.put("other", "x", {"id": "x"})

    docs = await sql_store.list_documents("matchStats")

    assert [d["id"] for d in docs] == ["match_q1", "match_q2"]


async def test_submission_roundtrip_and_filters(sql_store, make_submission):
    await sql_store.add_submission(make_submission("s1", auton={"fuelScored": 4}))
    await sql_store.add_submission(make_submission("s2", status="pending"))
    await sql_store.add_submission(make_submission("s3", match_id="q2"))

    loaded = await sql_store.get_submission("s1")
    assert loaded.data.auton.fuel_scored == 4
    assert loaded.created_at.tzinfo is not None

    assert [s.id for s in await sql_store.list_approved("q1")] == ["s1"]
    assert [s.id for s in await sql_store.list_submissions(status="pending")] == ["s2"]
    assert [s.id for s in await sql_store.list_submissions(match_id="q2")] == ["s3"]
    assert len(await sql_store.list_submissions()) == 3
    assert await sql_store.get_submission("nope") is None


async def test_update_submission_status(sql_store, make_submission):
    sub = make_submission("s1", status="pending")
    await sql_store.add_submission(sub)

    sub.status = "approved"
    sub.approved_by = "mod-1"
    await sql_store.update_submission(sub)

    loaded = await sql_store.get_submission("s1")
    assert loaded.status == "approved"
    assert loaded.approved_by == "mod-1"


async def test_update_unknown_submission_raises(sql_store, make_submission):
    with pytest.raises(KeyError):
        await sql_store.update_submission(make_submission("ghost"))


async def test_aggregate_and_resolve_through_sql(sql_store, make_submission):
    await sql_store.add_submission(make_submission("s1", team="1234", auton={"fuelScored": 5}))
    await sql_store.add_submission(make_submission("s2", team="1234", auton={"fuelScored": 7}))
    await sql_store.add_submission(make_submission("s3", team="5678", alliance="blue"))

    stats = await aggregate_match_stats("q1", sql_store)
    assert stats.has_unresolved_conflicts

    await resolve_conflict("match_q1", "1234", 0, 7, sql_store)

    doc = await sql_store.get(MATCH_STATS_COLLECTION, "match_q1")
    assert doc["hasUnresolvedConflicts"] is False
    assert doc["teamStats"]["1234"]["resolvedData"]["auton"]["fuelScored"] == 7
    assert doc["teamStats"]["1234"]["conflicts"][0]["selectedValue"] == 7
    assert doc["teamStats"]["5678"]["alliance"] == "blue"


async def test_list_submissions_by_creator(sql_store, make_submission):
    await sql_store.add_submission(make_submission("s1", scout="Alice"))
    await sql_store.add_submission(make_submission("s2", scout="Bob", status="pending"))
    await sql_store.add_submission(make_submission("s3", scout="Alice", status="rejected", match_id="q2"))

    assert [s.id for s in await sql_store.list_submissions(created_by="uid-alice")] == ["s1", "s3"]
    assert [s.id for s in await sql_store.list_submissions(created_by="uid-bob")] == ["s2"]
    assert await sql_store.list_submissions(created_by="uid-nobody") == []


async def test_default_store_uses_configured_engine(monkeypatch):
    await dispose_engine()
    monkeypatch.setattr(settings, "database_url", "sqlite+aiosqlite:///:memory:")
    try:
        await init_models()
        store = SqlStore()
        await store.put("matchStats", "match_q1", {"id": "match_q1"})
        assert await store.get("matchStats", "match_q1") == {"id": "match_q1"}
    finally:
        await dispose_engine()
