"""
Notes API - Service Wiring
==========================

What:  FastAPI dependencies that assemble a NoteService per request.
How:   The request's AsyncSession feeds a NoteStore; the application-wide
       MemoryCache comes from app.state, where create_app() put it.

    get_db_session ──▶ NoteStore ──┐
                                   ├──▶ NoteService
    app.state.note_cache ──────────┘

Tests swap either piece through app.dependency_overrides.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.services.cache import MemoryCache
from app.services.note_service import NoteService
from app.services.note_store import NoteStore


def get_note_cache(request: Request) -> MemoryCache:
    return request.app.state.note_cache


def get_note_service(
    db: AsyncSession = Depends(get_db_session),
    cache: MemoryCache = Depends(get_note_cache),
) -> NoteService:
    return NoteService(
        store=NoteStore(db),
        cache=cache,
        sliding_seconds=settings.cache_sliding_expiration_seconds,
        absolute_seconds=settings.cache_absolute_expiration_seconds,
    )
