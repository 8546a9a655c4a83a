"""SQLAlchemy-backed StatsStore.

Each call opens its own session from the factory and commits before returning,
so a failed write leaves nothing half-applied within that call.  ``patch``
reads and rewrites the JSON body inside one transaction (row locked with
FOR UPDATE on backends that support it).
"""

from __future__ import annotations

import copy
import datetime
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scoutmerge.db.models import DocumentRow, SubmissionRow
from scoutmerge.db.session import get_session
from scoutmerge.fields.paths import set_nested
from scoutmerge.schemas import Observation, Submission, SubmissionStatus, utcnow
from scoutmerge.store.base import StatsStore


def _aware(value: datetime.datetime | None) -> datetime.datetime | None:
    # SQLite returns naive datetimes even for timezone=True columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def _to_submission(row: SubmissionRow) -> Submission:
    return Submission(
        id=row.id,
        match_id=row.match_id,
        data=Observation.model_validate(row.data),
        created_by=row.created_by,
        created_by_name=row.created_by_name,
        created_at=_aware(row.created_at),
        status=row.status,
        approved_by=row.approved_by,
        approved_at=_aware(row.approved_at),
        notes=row.notes,
    )


class SqlStore(StatsStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._session_factory is None:
            async with get_session() as session:
                yield session
        else:
            async with self._session_factory() as session:
                yield session

    # -- aggregate documents -------------------------------------------------

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        async with self._session() as session:
            row = await session.get(DocumentRow, (collection, doc_id))
            return copy.deepcopy(row.body) if row is not None else None

    async def put(self, collection: str, doc_id: str, record: dict[str, Any]) -> None:
        async with self._session() as session:
            row = await session.get(DocumentRow, (collection, doc_id))
            if row is None:
                session.add(
                    DocumentRow(
                        collection=collection,
                        id=doc_id,
                        body=copy.deepcopy(record),
                        updated_at=utcnow(),
                    )
                )
            else:
                row.body = copy.deepcopy(record)
                row.updated_at = utcnow()
            await session.commit()

    async def patch(self, collection: str, doc_id: str, changes: dict[str, Any]) -> None:
        async with self._session() as session:
            result = await session.execute(
                sa.select(DocumentRow)
                .where(DocumentRow.collection == collection, DocumentRow.id == doc_id)
                .with_for_update()
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise KeyError(f"{collection}/{doc_id}")

            # Assign a new object so the JSON column registers the change
            body = copy.deepcopy(row.body)
            for path, value in changes.items():
                set_nested(body, path, copy.deepcopy(value))
            row.body = body
            row.updated_at = utcnow()
            await session.commit()

    async def list_documents(self, collection: str) -> list[dict[str, Any]]:
        async with self._session() as session:
            result = await session.execute(
                sa.select(DocumentRow)
                .where(DocumentRow.collection == collection)
                .order_by(DocumentRow.id.asc())
            )
            return [copy.deepcopy(row.body) for row in result.scalars().all()]

    # -- submissions ---------------------------------------------------------

    async def add_submission(self, submission: Submission) -> None:
        async with self._session() as session:
            session.add(
                SubmissionRow(
                    id=submission.id,
                    match_id=submission.match_id,
                    team_number=submission.data.team_number,
                    status=submission.status,
                    data=submission.data.to_document(),
                    created_by=submission.created_by,
                    created_by_name=submission.created_by_name,
                    created_at=submission.created_at,
                    approved_by=submission.approved_by,
                    approved_at=submission.approved_at,
                    notes=submission.notes,
                )
            )
            await session.commit()

    async def get_submission(self, submission_id: str) -> Submission | None:
        async with self._session() as session:
            row = await session.get(SubmissionRow, submission_id)
            return _to_submission(row) if row is not None else None

    async def update_submission(self, submission: Submission) -> None:
        async with self._session() as session:
            result = await session.execute(
                sa.update(SubmissionRow)
                .where(SubmissionRow.id == submission.id)
                .values(
                    status=submission.status,
                    approved_by=submission.approved_by,
                    approved_at=submission.approved_at,
                )
            )
            if result.rowcount == 0:
                await session.rollback()
                raise KeyError(submission.id)
            await session.commit()

    async def list_submissions(
        self,
        status: SubmissionStatus | None = None,
        match_id: str | None = None,
        created_by: str | None = None,
    ) -> list[Submission]:
        stmt = sa.select(SubmissionRow)
        if status is not None:
            stmt = stmt.where(SubmissionRow.status == status)
        if match_id is not None:
            stmt = stmt.where(SubmissionRow.match_id == match_id)
        if created_by is not None:
            stmt = stmt.where(SubmissionRow.created_by == created_by)
        stmt = stmt.order_by(SubmissionRow.created_at.asc(), SubmissionRow.id.asc())

        async with self._session() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()

        return [_to_submission(row) for row in rows]
