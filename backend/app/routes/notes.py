"""
Notes API - Notes Route Handlers
================================

What:  CRUD, search and paged listing endpoints under /api/v1/notes.
How:   Each handler collects HTTP input, calls NoteService, and wraps the
       result in the ApiResponse envelope. A None/False "not found" result
       from the service becomes NotFoundError (→ 404) here.
Who:   Consumed by the single-page app.

Endpoints:
    GET    /api/v1/notes            full listing (cached)
    GET    /api/v1/notes/paged      filtered, sorted, paged listing
    GET    /api/v1/notes/search     title search
    GET    /api/v1/notes/{id}       one note
    POST   /api/v1/notes            create  → 201 + Location
    PUT    /api/v1/notes/{id}       replace title and content
    DELETE /api/v1/notes/{id}       delete

Every endpoint requires an authenticated caller (app.auth).
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import ValidationError as PydanticValidationError

from app.auth import get_current_user
from app.dependencies import get_note_service
from app.exceptions import NotFoundError, ValidationError
from app.middleware.request_id import current_trace_id
from app.schemas.common import ApiResponse, PaginatedResponse
from app.schemas.note import (
    CreateNoteRequest,
    NoteResponse,
    NotesPagedRequest,
    UpdateNoteRequest,
)
from app.services.note_service import NoteService


router = APIRouter(
    prefix="/api/v1/notes",
    tags=["Notes"],
    dependencies=[Depends(get_current_user)],
)

_ERROR_RESPONSES = {
    401: {"description": "Missing or invalid credentials", "model": ApiResponse[None]},
    500: {"description": "Server error", "model": ApiResponse[None]},
}


@router.get(
    "",
    response_model=ApiResponse[List[NoteResponse]],
    responses=_ERROR_RESPONSES,
    summary="Get all notes",
    description="Retrieves all notes, ordered by last updated date (newest first).",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> ApiResponse[List[NoteResponse]]:
    notes = await service.list_notes()
    return ApiResponse[List[NoteResponse]].ok(
        notes,
        message=f"Retrieved {len(notes)} notes successfully",
        trace_id=current_trace_id(),
    )


@router.get(
    "/paged",
    response_model=ApiResponse[PaginatedResponse[NoteResponse]],
    responses={400: {"description": "Invalid query", "model": ApiResponse[None]}, **_ERROR_RESPONSES},
    summary="Get notes page",
    description=(
        "Returns one page of notes matching every supplied filter. Page and "
        "page size are clamped to valid values (page >= 1, 1 <= pageSize <= 100)."
    ),
)
async def list_notes_paged(
    page: int = Query(default=1, description="1-based page number"),
    page_size: int = Query(default=10, alias="pageSize", description="Items per page (max 100)"),
    search: Optional[str] = Query(
        default=None, description="Matches title or content (at least 3 characters)"
    ),
    title: Optional[str] = Query(default=None, description="Title contains"),
    content: Optional[str] = Query(default=None, description="Content contains"),
    created_after: Optional[datetime] = Query(
        default=None, alias="createdAfter", description="Inclusive lower bound (ISO 8601)"
    ),
    created_before: Optional[datetime] = Query(
        default=None, alias="createdBefore", description="Inclusive upper bound (ISO 8601)"
    ),
    sort_by: Optional[str] = Query(
        default="updatedAtUtc",
        alias="sortBy",
        description="title, content, createdAtUtc or updatedAtUtc",
    ),
    sort_descending: bool = Query(default=True, alias="sortDescending"),
    service: NoteService = Depends(get_note_service),
) -> ApiResponse[PaginatedResponse[NoteResponse]]:
    try:
        request = NotesPagedRequest(
            page=page,
            page_size=page_size,
            search=search,
            title=title,
            content=content,
            created_after=created_after,
            created_before=created_before,
            sort_by=sort_by,
            sort_descending=sort_descending,
        )
    except PydanticValidationError as exc:
        raise ValidationError(errors=[error["msg"] for error in exc.errors()])

    result = await service.list_notes_paged(request)
    return ApiResponse[PaginatedResponse[NoteResponse]].ok(
        result,
        message=f"Retrieved {len(result.items)} of {result.total_count} notes",
        trace_id=current_trace_id(),
    )


@router.get(
    "/search",
    response_model=ApiResponse[List[NoteResponse]],
    responses={400: {"description": "Missing search term", "model": ApiResponse[None]}, **_ERROR_RESPONSES},
    summary="Search notes by title",
)
async def search_notes(
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    service: NoteService = Depends(get_note_service),
) -> ApiResponse[List[NoteResponse]]:
    notes = await service.search_notes(search_term)
    return ApiResponse[List[NoteResponse]].ok(
        notes,
        message=f"Found {len(notes)} notes matching '{search_term.strip()}'",
        trace_id=current_trace_id(),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    responses={404: {"description": "Note not found", "model": ApiResponse[None]}, **_ERROR_RESPONSES},
    summary="Get note by ID",
)
async def get_note(
    note_id: UUID,
    service: NoteService = Depends(get_note_service),
) -> ApiResponse[NoteResponse]:
    note = await service.get_note(note_id)
    if note is None:
        raise NotFoundError(resource="Note", resource_id=str(note_id))
    return ApiResponse[NoteResponse].ok(
        note, message="Note retrieved successfully", trace_id=current_trace_id()
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[NoteResponse],
    responses={400: {"description": "Validation failed", "model": ApiResponse[None]}, **_ERROR_RESPONSES},
    summary="Create new note",
)
async def create_note(
    body: CreateNoteRequest,
    response: Response,
    service: NoteService = Depends(get_note_service),
) -> ApiResponse[NoteResponse]:
    note = await service.create_note(body.title, body.content)
    response.headers["Location"] = f"{router.prefix}/{note.id}"
    return ApiResponse[NoteResponse].ok(
        note, message="Note created successfully", trace_id=current_trace_id()
    )


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    responses={
        400: {"description": "Validation failed", "model": ApiResponse[None]},
        404: {"description": "Note not found", "model": ApiResponse[None]},
        **_ERROR_RESPONSES,
    },
    summary="Update existing note",
)
async def update_note(
    note_id: UUID,
    body: UpdateNoteRequest,
    service: NoteService = Depends(get_note_service),
) -> ApiResponse[NoteResponse]:
    note = await service.update_note(note_id, body.title, body.content)
    if note is None:
        raise NotFoundError(resource="Note", resource_id=str(note_id))
    return ApiResponse[NoteResponse].ok(
        note, message="Note updated successfully", trace_id=current_trace_id()
    )


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[None],
    responses={404: {"description": "Note not found", "model": ApiResponse[None]}, **_ERROR_RESPONSES},
    summary="Delete note",
)
async def delete_note(
    note_id: UUID,
    service: NoteService = Depends(get_note_service),
) -> ApiResponse[None]:
    if not await service.delete_note(note_id):
        raise NotFoundError(resource="Note", resource_id=str(note_id))
    return ApiResponse[None].ok(message="Note deleted successfully", trace_id=current_trace_id())
