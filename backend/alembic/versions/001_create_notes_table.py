"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2024-09-08 17:06:32.000000+00:00

What:  Creates the `notes` table and the index backing the default
       "most recently updated first" listing.

Rollback: downgrade() drops the table (destructive; all notes are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(120), nullable=False),
        sa.Column("content", sa.String(5000), nullable=True),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_notes_updated_at_utc",
        "notes",
        [sa.text("updated_at_utc DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_notes_updated_at_utc", table_name="notes")
    op.drop_table("notes")
