"""
Notes API - Note Service (Business Logic Orchestrator)
======================================================

What:  The single entry point for note lifecycle operations.
How:   Composes NoteStore (persistence + query builder) with the shared
       MemoryCache that holds the full note listing.
Who:   Built per request by app.dependencies.get_note_service; called by the
       note routes.

Operation Map:
    list_notes()        → cache hit? return it : store.list_by_updated() → cache
    get_note(id)        → store.get()                       (None if absent)
    create_note()       → validate → store.add()    → evict cache
    update_note(id)     → validate → store.get() → apply_update → store.save() → evict
    delete_note(id)     → store.get() → store.delete()      → evict   (False if absent)
    search_notes(term)  → store.search_by_title()           (never cached)
    list_notes_paged()  → store.query_page()                (never cached)

Cache Coherence:
    Only the unfiltered, updated-descending listing is cached, under one key.
    Every successful mutation evicts it after the store has committed and
    before the service returns, so the next list_notes() call re-reads the
    store. Concurrent misses may each query the store and overwrite the entry
    with equivalent data. A miss whose reload overlaps an eviction does not
    cache what it read (checked through MemoryCache.invalidations).

    Cache calls are best-effort: a failing cache is logged and bypassed.

Not-found is reported as a return value (None / False). Deciding that it is
an HTTP 404 is the route's job.
"""

import logging
from typing import Any, List, Optional, Tuple
from uuid import UUID

from app.exceptions import ValidationError
from app.models.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH, Note
from app.schemas.common import PaginatedResponse
from app.schemas.note import NoteResponse, NotesPagedRequest
from app.services.cache import MemoryCache
from app.services.note_store import NoteStore

logger = logging.getLogger(__name__)

ALL_NOTES_CACHE_KEY = "all_notes"


def normalize_note_input(
    title: Optional[str], content: Optional[str]
) -> Tuple[str, Optional[str]]:
    """
    Trims and validates a title/content pair.

    Returns:
        (trimmed title, trimmed content or None)

    Raises:
        ValidationError: listing every violated rule
    """
    errors: List[str] = []

    trimmed_title = title.strip() if title is not None else ""
    if not trimmed_title:
        if title:
            errors.append("Title cannot contain only whitespace.")
        else:
            errors.append("Title is required.")
    elif len(trimmed_title) > TITLE_MAX_LENGTH:
        errors.append(f"Title cannot exceed {TITLE_MAX_LENGTH} characters.")

    trimmed_content: Optional[str] = None
    if content is not None:
        trimmed_content = content.strip()
        if not trimmed_content:
            errors.append("Content cannot contain only whitespace when provided.")
        elif len(trimmed_content) > CONTENT_MAX_LENGTH:
            errors.append(f"Content cannot exceed {CONTENT_MAX_LENGTH} characters.")

    if errors:
        raise ValidationError(errors=errors)
    return trimmed_title, trimmed_content


class NoteService:
    """
    Business logic layer for note operations.

    Args:
        store:            persistence for this request
        cache:            application-wide listing cache
        sliding_seconds:  idle expiry of the cached listing
        absolute_seconds: maximum age of the cached listing
    """

    def __init__(
        self,
        store: NoteStore,
        cache: MemoryCache,
        sliding_seconds: float = 300,
        absolute_seconds: float = 900,
    ):
        self._store = store
        self._cache = cache
        self._sliding_seconds = sliding_seconds
        self._absolute_seconds = absolute_seconds

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_notes(self) -> List[NoteResponse]:
        """Every note, most recently updated first, served from cache when live."""
        cached = self._cache_get()
        if cached is not None:
            logger.info("Returning %d notes from cache", len(cached))
            return list(cached)

        generation = self._cache_generation()
        notes = [_to_response(note) for note in await self._store.list_by_updated()]
        if generation == self._cache_generation():
            self._cache_set(notes)
        else:
            logger.info("Note listing changed during reload; not caching it")
        return list(notes)

    async def get_note(self, note_id: UUID) -> Optional[NoteResponse]:
        note = await self._store.get(note_id)
        return _to_response(note) if note is not None else None

    async def search_notes(self, term: Optional[str]) -> List[NoteResponse]:
        """Case-insensitive title search. Bypasses the cache."""
        trimmed = term.strip() if term is not None else ""
        if not trimmed:
            raise ValidationError(errors=["Search term is required."])
        notes = await self._store.search_by_title(trimmed)
        return [_to_response(note) for note in notes]

    async def list_notes_paged(
        self, request: NotesPagedRequest
    ) -> PaginatedResponse[NoteResponse]:
        """Filtered, sorted page of notes. Bypasses the cache."""
        items, total_count, plan = await self._store.query_page(request)
        sanitized = plan.request
        return PaginatedResponse[NoteResponse](
            items=[_to_response(note) for note in items],
            total_count=total_count,
            page=sanitized.page,
            page_size=sanitized.page_size,
            search=sanitized.search,
            sort_by=plan.sort_field.value,
            sort_descending=plan.sort_descending,
        )

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_note(self, title: Optional[str], content: Optional[str]) -> NoteResponse:
        title, content = normalize_note_input(title, content)
        note = await self._store.add(Note.new(title=title, content=content))
        self._invalidate()
        logger.info("Created note with ID %s and cleared cache", note.id)
        return _to_response(note)

    async def update_note(
        self, note_id: UUID, title: Optional[str], content: Optional[str]
    ) -> Optional[NoteResponse]:
        title, content = normalize_note_input(title, content)
        note = await self._store.get(note_id)
        if note is None:
            return None

        note.apply_update(title=title, content=content)
        await self._store.save(note)
        self._invalidate()
        logger.info("Updated note with ID %s and cleared cache", note.id)
        return _to_response(note)

    async def delete_note(self, note_id: UUID) -> bool:
        note = await self._store.get(note_id)
        if note is None:
            return False

        await self._store.delete(note)
        self._invalidate()
        logger.info("Deleted note with ID %s and cleared cache", note_id)
        return True

    # ── Cache (best-effort) ───────────────────────────────────────────────

    def _cache_get(self) -> Optional[Any]:
        try:
            return self._cache.get(ALL_NOTES_CACHE_KEY)
        except Exception as e:
            logger.warning("Note cache read failed, falling back to store: %s", str(e))
            return None

    def _cache_generation(self) -> Optional[int]:
        try:
            return self._cache.invalidations
        except Exception as e:
            logger.warning("Note cache read failed: %s", str(e))
            return None

    def _cache_set(self, notes: List[NoteResponse]) -> None:
        try:
            self._cache.set(
                ALL_NOTES_CACHE_KEY,
                notes,
                sliding_seconds=self._sliding_seconds,
                absolute_seconds=self._absolute_seconds,
            )
            logger.info(
                "Cached %d notes with %ds sliding expiration",
                len(notes),
                self._sliding_seconds,
            )
        except Exception as e:
            logger.warning("Note cache population failed: %s", str(e))

    def _invalidate(self) -> None:
        try:
            self._cache.remove(ALL_NOTES_CACHE_KEY)
        except Exception as e:
            logger.warning("Note cache eviction failed: %s", str(e))


def _to_response(note: Note) -> NoteResponse:
    return NoteResponse.model_validate(note)
