"""
Notes API - Note Request/Response Schemas
=========================================

What:  Pydantic models defining the note API contract.
How:   FastAPI validates request bodies against these, serializes responses
       through them, and builds the OpenAPI docs from them.

Request bodies are deliberately permissive (every field optional, no length
rules). The business rules live in NoteService so that a bad request reports
its complete list of violations in the standard envelope.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from app.models.note import as_utc
from app.schemas.common import CamelModel

SEARCH_MIN_LENGTH = 3
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(CamelModel):
    """
    Wire representation of a note.

        { "id": "...", "title": "...", "content": "...",
          "createdAtUtc": "2024-09-08T12:00:00Z", "updatedAtUtc": "..." }
    """

    id: UUID = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title")
    content: Optional[str] = Field(default=None, description="Note body, if any")
    created_at_utc: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at_utc: datetime = Field(description="Last modification time (UTC ISO 8601)")

    @field_validator("created_at_utc", "updated_at_utc")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class HealthResponse(CamelModel):
    """Health check payload for monitoring and load balancer probes."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    auth_mode: str = Field(description="Active authentication scheme: development, bearer")
    cached_entries: int = Field(description="Live entries in the note listing cache")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateNoteRequest(CamelModel):
    """Body of POST /api/v1/notes."""

    title: Optional[str] = Field(default=None, description="1-120 characters after trimming")
    content: Optional[str] = Field(default=None, description="Up to 5000 characters after trimming")


class UpdateNoteRequest(CamelModel):
    """Body of PUT /api/v1/notes/{id}. A full replace of title and content."""

    title: Optional[str] = Field(default=None, description="1-120 characters after trimming")
    content: Optional[str] = Field(default=None, description="Up to 5000 characters after trimming")


class NotesPagedRequest(CamelModel):
    """
    Filter, sort and page parameters for the paged listing.

    Parameters:
        page / page_size: clamped by sanitized(), never rejected
        search: matches title OR content; at least 3 characters when given
        title / content: independent substring filters
        created_after / created_before: inclusive bounds on created_at_utc
        sort_by: one of title, content, created, updated (see SortField)
        sort_descending: direction for sort_by

    Blank strings are treated as absent.
    """

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    search: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    sort_by: Optional[str] = "updatedAtUtc"
    sort_descending: bool = True

    @field_validator("search", "title", "content", "sort_by", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("search")
    @classmethod
    def validate_search_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) < SEARCH_MIN_LENGTH:
            raise PydanticCustomError(
                "search_too_short",
                "Search term must be at least {min_length} characters.",
                {"min_length": SEARCH_MIN_LENGTH},
            )
        return v

    @field_validator("created_after", "created_before")
    @classmethod
    def normalize_bound(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Bounds without an offset are read as UTC."""
        return as_utc(v) if v is not None else None

    def sanitized(self) -> "NotesPagedRequest":
        """Copy with page >= 1 and 1 <= page_size <= 100."""
        page = self.page if self.page >= 1 else DEFAULT_PAGE
        page_size = self.page_size
        if page_size < 1:
            page_size = DEFAULT_PAGE_SIZE
        elif page_size > MAX_PAGE_SIZE:
            page_size = MAX_PAGE_SIZE
        return self.model_copy(update={"page": page, "page_size": page_size})

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
