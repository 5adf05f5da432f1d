"""
Notes API - Note SQLAlchemy Model
=================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by NoteStore for CRUD and by the query builder for column access.

Table Design:
    - UUID primary key, generated by the application at creation time
    - title: VARCHAR(120), required, stored trimmed
    - content: VARCHAR(5000), optional, stored trimmed
    - created_at_utc / updated_at_utc: timezone-aware UTC timestamps

    Index on updated_at_utc DESC backs the default listing order
    ("most recently edited first").
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

TITLE_MAX_LENGTH = 120
CONTENT_MAX_LENGTH = 5000


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalizes a datetime to aware UTC.

    Backends without timezone support (SQLite) hand back naive values that
    were written as UTC; those are tagged rather than converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Note(Base):
    """
    A user's note.

    Lifecycle:
        1. Created through Note.new() with server-generated id and timestamps
           (created_at_utc == updated_at_utc)
        2. Mutated only through apply_update(), a full title + content replace
           that always moves updated_at_utc forward
        3. Hard-deleted on request; no soft-delete, no versioning
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    content: Mapped[Optional[str]] = mapped_column(
        String(CONTENT_MAX_LENGTH),
        nullable=True,
        default=None,
    )

    created_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    updated_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (
        Index("idx_notes_updated_at_utc", updated_at_utc.desc()),
    )

    @classmethod
    def new(cls, title: str, content: Optional[str] = None) -> "Note":
        """Builds an unsaved note whose two timestamps are identical."""
        now = utc_now()
        return cls(
            id=uuid.uuid4(),
            title=title,
            content=content,
            created_at_utc=now,
            updated_at_utc=now,
        )

    def apply_update(self, title: str, content: Optional[str]) -> None:
        """
        Replaces title and content and refreshes updated_at_utc.

        The new timestamp is always strictly later than the stored one, even
        if the clock has not advanced (or went backwards) since the last write.
        """
        self.title = title
        self.content = content
        previous = as_utc(self.updated_at_utc)
        now = utc_now()
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        self.updated_at_utc = now

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"updated_at_utc='{self.updated_at_utc}')>"
        )
