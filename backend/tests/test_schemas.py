"""
Notes API - Schema Tests
========================

What:  Tests for the response envelope, the derived page indicators and
       the wire format of notes.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.models.note import Note, as_utc
from app.schemas.common import ApiResponse, PaginatedResponse
from app.schemas.note import NoteResponse


def page_of(total_count: int, page: int, page_size: int = 10) -> dict:
    return PaginatedResponse[int](
        items=[], total_count=total_count, page=page, page_size=page_size
    ).model_dump(by_alias=True)


class TestPaginatedResponse:
    """Tests for the derived page indicators."""

    def test_middle_page(self):
        data = page_of(total_count=25, page=2)

        assert data["totalPages"] == 3
        assert data["hasNextPage"] is True
        assert data["hasPreviousPage"] is True
        assert data["nextPage"] == 3
        assert data["previousPage"] == 1
        assert data["firstItemIndex"] == 11
        assert data["lastItemIndex"] == 20

    def test_last_partial_page(self):
        data = page_of(total_count=25, page=3)

        assert data["hasNextPage"] is False
        assert data["nextPage"] is None
        assert data["firstItemIndex"] == 21
        assert data["lastItemIndex"] == 25

    def test_single_page(self):
        data = page_of(total_count=4, page=1)

        assert data["totalPages"] == 1
        assert data["hasNextPage"] is False
        assert data["hasPreviousPage"] is False

    @pytest.mark.parametrize("page", [1, 3])
    def test_empty_result_has_no_neighbours(self, page):
        data = page_of(total_count=0, page=page)

        assert data["totalPages"] == 0
        assert data["hasNextPage"] is False
        assert data["hasPreviousPage"] is False
        assert data["previousPage"] is None
        assert data["firstItemIndex"] == 0
        assert data["lastItemIndex"] == 0


class TestApiResponse:
    """Tests for the envelope factories."""

    def test_ok_envelope(self):
        data = ApiResponse[int].ok(7, message="done", trace_id="t-1").model_dump(by_alias=True)

        assert data["success"] is True
        assert data["data"] == 7
        assert data["message"] == "done"
        assert data["errors"] is None
        assert data["traceId"] == "t-1"
        assert data["timestamp"].tzinfo is not None

    def test_fail_envelope(self):
        body = ApiResponse[None].fail("Nope", errors=["a", "b"])

        assert body.success is False
        assert body.data is None
        assert body.errors == ["a", "b"]


class TestNoteResponse:
    """Tests for the note wire format."""

    def test_camel_case_keys_and_utc_timestamps(self):
        note = Note.new(title="Groceries", content=None)
        # Naive values are what SQLite returns
        note.created_at_utc = note.created_at_utc.replace(tzinfo=None)

        data = NoteResponse.model_validate(note).model_dump(by_alias=True)

        assert set(data) == {"id", "title", "content", "createdAtUtc", "updatedAtUtc"}
        assert data["createdAtUtc"].tzinfo == timezone.utc
        assert data["createdAtUtc"] == data["updatedAtUtc"]

    def test_as_utc_converts_other_offsets(self):
        plus_two = datetime(2024, 9, 8, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(plus_two) == datetime(2024, 9, 8, 12, 0, tzinfo=timezone.utc)
        assert as_utc(plus_two).tzinfo == timezone.utc
