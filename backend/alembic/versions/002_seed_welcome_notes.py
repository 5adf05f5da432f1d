"""Seed welcome notes

Revision ID: 002
Revises: 001
Create Date: 2024-09-08 17:45:40.000000+00:00

What:  Inserts the two starter notes a fresh installation shows.
"""

import uuid
from datetime import datetime, timezone
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SEED_TIMESTAMP = datetime(2024, 9, 8, 12, 0, 0, tzinfo=timezone.utc)

SEED_NOTES = [
    {
        "id": uuid.UUID("f47ac10b-58cc-4372-a567-0e02b2c3d479"),
        "title": "Welcome to Notes App",
        "content": "This is your first note. Feel free to edit or delete it.",
    },
    {
        "id": uuid.UUID("6ba7b810-9dad-11d1-80b4-00c04fd430c8"),
        "title": "Project Ideas",
        "content": (
            "1. Build a task management system\n"
            "2. Create a recipe sharing platform\n"
            "3. Develop a fitness tracker"
        ),
    },
]

notes_table = sa.table(
    "notes",
    sa.column("id", sa.Uuid(as_uuid=True)),
    sa.column("title", sa.String(120)),
    sa.column("content", sa.String(5000)),
    sa.column("created_at_utc", sa.DateTime(timezone=True)),
    sa.column("updated_at_utc", sa.DateTime(timezone=True)),
)


def upgrade() -> None:
    op.bulk_insert(
        notes_table,
        [
            {**note, "created_at_utc": SEED_TIMESTAMP, "updated_at_utc": SEED_TIMESTAMP}
            for note in SEED_NOTES
        ],
    )


def downgrade() -> None:
    op.execute(
        notes_table.delete().where(notes_table.c.id.in_([note["id"] for note in SEED_NOTES]))
    )
