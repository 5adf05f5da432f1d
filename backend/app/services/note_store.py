"""
Notes API - Note Store (Persistence Access)
===========================================

What:  CRUD and query execution for notes over an AsyncSession.
How:   Executes statements from the query builder; commits each mutation
       as its own transaction; wraps driver errors in DatabaseError.
Who:   Constructed per request with that request's session; used only by
       NoteService.

Every mutation touches a single row and commits before returning, so a
caller that invalidates a cache afterwards never races an uncommitted write.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError
from app.models.note import Note
from app.schemas.note import NotesPagedRequest
from app.services.query_builder import (
    NoteQueryPlan,
    build_listing_query,
    build_note_query,
    build_title_search_query,
)

logger = logging.getLogger(__name__)


class NoteStore:
    """Database access for the Note entity."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_by_updated(self) -> List[Note]:
        """All notes, most recently updated first."""
        try:
            result = await self._session.execute(build_listing_query())
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get(self, note_id: UUID) -> Optional[Note]:
        """Primary key lookup; None when absent."""
        try:
            return await self._session.get(Note, note_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

    async def add(self, note: Note) -> Note:
        """Inserts a new note and commits."""
        self._session.add(note)
        await self._commit("insert", note.id)
        return note

    async def save(self, note: Note) -> Note:
        """Commits pending changes to a note loaded from this store."""
        await self._commit("update", note.id)
        return note

    async def delete(self, note: Note) -> None:
        """Deletes a note loaded from this store and commits."""
        await self._session.delete(note)
        await self._commit("delete", note.id)

    async def search_by_title(self, term: str) -> List[Note]:
        try:
            result = await self._session.execute(build_title_search_query(term))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error searching notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not search notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def query_page(self, request: NotesPagedRequest) -> Tuple[List[Note], int, NoteQueryPlan]:
        """
        Runs a paged listing request.

        Returns:
            (page items, total matches before paging, the executed plan)
        """
        plan = build_note_query(request)
        try:
            count_result = await self._session.execute(plan.count_statement)
            total_count = count_result.scalar() or 0

            # Pages past the last match are empty; the offset is never sent
            items: List[Note] = []
            if plan.request.offset < total_count:
                page_result = await self._session.execute(plan.page_statement)
                items = list(page_result.scalars().all())
            return items, total_count, plan
        except SQLAlchemyError as e:
            logger.error("Database error in paged note query: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def _commit(self, operation: str, note_id: UUID) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Database error on %s of note %s: %s", operation, note_id, str(e))
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"note_id": str(note_id), "operation": operation,
                         "error_type": type(e).__name__},
            )
