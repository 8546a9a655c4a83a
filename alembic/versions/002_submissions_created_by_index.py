"""Index submissions by creator for the per-scout listing.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op

# revision identifiers used by Alembic
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index("ix_submissions_created_by", "submissions", ["created_by"])


def downgrade() -> None:
    op.drop_index("ix_submissions_created_by", table_name="submissions")
