"""SQLAlchemy ORM models for ScoutMerge.

Tables:
- submissions : one scout's observation for one team in one match, with its
                review status (pending / approved / rejected)
- documents   : schemaless JSON documents keyed by (collection, id); match
                statistics live in the "matchStats" collection

Observation payloads and aggregate documents are stored as JSON in their
camelCase wire form so dotted field paths address them directly.
"""

from __future__ import annotations

import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SubmissionRow(Base):
    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    match_id: Mapped[str] = mapped_column(sa.String(64), index=True)
    team_number: Mapped[str] = mapped_column(sa.String(16))
    status: Mapped[str] = mapped_column(sa.String(16), index=True, default="pending")
    data: Mapped[dict[str, Any]] = mapped_column(sa.JSON)
    created_by: Mapped[str] = mapped_column(sa.String(128), index=True)
    created_by_name: Mapped[str] = mapped_column(sa.String(255))
    created_at: Mapped[datetime.datetime] = mapped_column(sa.DateTime(timezone=True))
    approved_by: Mapped[str | None] = mapped_column(sa.String(128), nullable=True)
    approved_at: Mapped[datetime.datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)


class DocumentRow(Base):
    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    id: Mapped[str] = mapped_column(sa.String(128), primary_key=True)
    body: Mapped[dict[str, Any]] = mapped_column(sa.JSON)
    updated_at: Mapped[datetime.datetime] = mapped_column(sa.DateTime(timezone=True))
