"""Initial schema — submissions and JSON documents.

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates:
- submissions : scout observations with review status
- documents   : JSON documents keyed by (collection, id); match statistics
                live under collection "matchStats" with id "match_<matchId>"

Indexes:
- ix_submissions_match_id : aggregation loads every approved row for one match
- ix_submissions_status   : review queue lists pending rows
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers used by Alembic
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "submissions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("match_id", sa.String(64), nullable=False),
        sa.Column("team_number", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("data", sa.JSON, nullable=False),
        sa.Column("created_by", sa.String(128), nullable=False),
        sa.Column("created_by_name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("approved_by", sa.String(128), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
    )
    op.create_index("ix_submissions_match_id", "submissions", ["match_id"])
    op.create_index("ix_submissions_status", "submissions", ["status"])

    op.create_table(
        "documents",
        sa.Column("collection", sa.String(64), primary_key=True),
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("body", sa.JSON, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("documents")
    op.drop_index("ix_submissions_status", table_name="submissions")
    op.drop_index("ix_submissions_match_id", table_name="submissions")
    op.drop_table("submissions")
