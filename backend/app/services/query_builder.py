"""
Notes API - Note Query Builder
==============================

What:  Turns a NotesPagedRequest into SQLAlchemy statements: one for the
       requested page and one for the total match count.
How:   Pure functions over the Note model. Nothing here touches a session;
       NoteStore executes what this module builds.

Query Plan (paged listing):
    SELECT * FROM notes
    WHERE <search> AND <title> AND <content> AND <created bounds>
    ORDER BY <one sort column> <ASC|DESC>
    LIMIT :page_size OFFSET (:page - 1) * :page_size

    SELECT count(*) FROM notes WHERE <same predicates>

    - search:  title ILIKE %term% OR content ILIKE %term%
    - title:   title ILIKE %value%
    - content: content ILIKE %value%
    - bounds:  created_at_utc >= after, created_at_utc <= before (inclusive)

    LIKE wildcards in user input are escaped, so "50%" matches literally.
    Rows with equal sort keys come back in whatever order the database picks;
    there is no tie-breaker column.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from app.models.note import Note
from app.schemas.note import NotesPagedRequest


class SortField(str, Enum):
    """Sortable note columns. Values are the wire names echoed back as `sortBy`."""

    TITLE = "title"
    CONTENT = "content"
    CREATED = "createdAtUtc"
    UPDATED = "updatedAtUtc"


SORT_COLUMNS: Dict[SortField, ColumnElement] = {
    SortField.TITLE: Note.title,
    SortField.CONTENT: Note.content,
    SortField.CREATED: Note.created_at_utc,
    SortField.UPDATED: Note.updated_at_utc,
}

# Accepted spellings, compared lower-cased with underscores removed
_SORT_ALIASES: Dict[str, SortField] = {
    "title": SortField.TITLE,
    "content": SortField.CONTENT,
    "created": SortField.CREATED,
    "createdat": SortField.CREATED,
    "createdatutc": SortField.CREATED,
    "updated": SortField.UPDATED,
    "updatedat": SortField.UPDATED,
    "updatedatutc": SortField.UPDATED,
}

DEFAULT_SORT: Tuple[SortField, bool] = (SortField.UPDATED, True)


def resolve_sort(sort_by: Optional[str], descending: bool = True) -> Tuple[SortField, bool]:
    """
    Maps a client sort key onto a SortField.

    An absent or unrecognized key falls back to updated-descending, ignoring
    the requested direction.
    """
    if not sort_by:
        return DEFAULT_SORT
    field = _SORT_ALIASES.get(sort_by.strip().lower().replace("_", ""))
    if field is None:
        return DEFAULT_SORT
    return field, descending


@dataclass(frozen=True)
class NoteQueryPlan:
    """Statements and resolved parameters for one paged listing request."""

    request: NotesPagedRequest
    sort_field: SortField
    sort_descending: bool
    page_statement: Select
    count_statement: Select


def _filter_conditions(request: NotesPagedRequest) -> list:
    conditions = []
    if request.search:
        conditions.append(
            or_(
                Note.title.icontains(request.search, autoescape=True),
                Note.content.icontains(request.search, autoescape=True),
            )
        )
    if request.title:
        conditions.append(Note.title.icontains(request.title, autoescape=True))
    if request.content:
        conditions.append(Note.content.icontains(request.content, autoescape=True))
    if request.created_after is not None:
        conditions.append(Note.created_at_utc >= request.created_after)
    if request.created_before is not None:
        conditions.append(Note.created_at_utc <= request.created_before)
    return conditions


def build_note_query(request: NotesPagedRequest) -> NoteQueryPlan:
    """
    Builds the page and count statements for a paged listing request.

    The request is sanitized first (page and page size clamped), so callers
    may pass raw client input. The returned plan carries the sanitized
    request for echoing back to the client.
    """
    request = request.sanitized()
    sort_field, descending = resolve_sort(request.sort_by, request.sort_descending)
    conditions = _filter_conditions(request)

    column = SORT_COLUMNS[sort_field]
    order = column.desc() if descending else column.asc()

    page_statement = select(Note)
    count_statement = select(func.count()).select_from(Note)
    if conditions:
        predicate = and_(*conditions)
        page_statement = page_statement.where(predicate)
        count_statement = count_statement.where(predicate)

    page_statement = (
        page_statement
        .order_by(order)
        .offset(request.offset)
        .limit(request.page_size)
    )

    return NoteQueryPlan(
        request=request,
        sort_field=sort_field,
        sort_descending=descending,
        page_statement=page_statement,
        count_statement=count_statement,
    )


def build_listing_query() -> Select:
    """Every note, most recently updated first. Backs the cached listing."""
    return select(Note).order_by(Note.updated_at_utc.desc())


def build_title_search_query(term: str) -> Select:
    """Notes whose title contains `term` (case-insensitive), newest edits first."""
    return (
        select(Note)
        .where(Note.title.icontains(term, autoescape=True))
        .order_by(Note.updated_at_utc.desc())
    )
