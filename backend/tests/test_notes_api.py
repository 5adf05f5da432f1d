"""
Notes API - HTTP Endpoint Tests
===============================

What:  Tests the /api/v1/notes endpoints, /health and the error envelope.
How:   HTTPX AsyncClient over ASGITransport against a fresh app per test,
       backed by in-memory SQLite and development authentication.

What we test:
    ✅ Envelope shape on success and failure (success, data, message,
       errors, timestamp, traceId)
    ✅ 201 + Location on create
    ✅ 400 for rule violations, malformed bodies and malformed ids
    ✅ 404 for unknown notes
    ✅ 500 hides internal details
    ✅ Paged listing metadata and clamping
"""

from datetime import datetime
from uuid import uuid4

import pytest

from app.dependencies import get_note_service
from app.exceptions import DatabaseError

NOTES_URL = "/api/v1/notes"


async def create(client, title, content=None):
    response = await client.post(NOTES_URL, json={"title": title, "content": content})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class _ExplodingService:
    def __init__(self, error: Exception):
        self._error = error

    async def list_notes(self):
        raise self._error


class TestCreateNote:
    """Tests for POST /api/v1/notes."""

    @pytest.mark.asyncio
    async def test_create_returns_201_with_location(self, test_client):
        response = await test_client.post(
            NOTES_URL, json={"title": "  Groceries ", "content": "milk"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Note created successfully"
        assert body["errors"] is None
        assert body["data"]["title"] == "Groceries"
        assert body["data"]["createdAtUtc"] == body["data"]["updatedAtUtc"]
        assert response.headers["Location"] == f"{NOTES_URL}/{body['data']['id']}"

    @pytest.mark.asyncio
    async def test_trace_id_matches_request_id_header(self, test_client):
        response = await test_client.post(
            NOTES_URL, json={"title": "Traced"}, headers={"X-Request-ID": "trace-123"}
        )

        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["traceId"] == "trace-123"

    @pytest.mark.asyncio
    async def test_rule_violations_are_all_reported(self, test_client):
        response = await test_client.post(NOTES_URL, json={"title": "", "content": "   "})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["message"] == "One or more validation errors occurred."
        assert body["errors"] == [
            "Title is required.",
            "Content cannot contain only whitespace when provided.",
        ]
        assert body["traceId"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_malformed_body_is_400(self, test_client):
        response = await test_client.post(NOTES_URL, json={"title": ["not", "a", "string"]})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "One or more validation errors occurred."
        assert body["errors"][0].startswith("title:")


class TestReadNotes:
    """Tests for GET /api/v1/notes and GET /api/v1/notes/{id}."""

    @pytest.mark.asyncio
    async def test_list_newest_first(self, test_client):
        await create(test_client, "First")
        await create(test_client, "Second")

        response = await test_client.get(NOTES_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Retrieved 2 notes successfully"
        assert [n["title"] for n in body["data"]] == ["Second", "First"]

    @pytest.mark.asyncio
    async def test_list_populates_cache(self, test_client, note_cache):
        await test_client.get(NOTES_URL)
        assert len(note_cache) == 1

        await create(test_client, "Evicts")
        assert len(note_cache) == 0

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client):
        note = await create(test_client, "Lookup", "body")

        response = await test_client.get(f"{NOTES_URL}/{note['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == note

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        missing = uuid4()

        response = await test_client.get(f"{NOTES_URL}/{missing}")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == f"Note with id '{missing}' was not found."

    @pytest.mark.asyncio
    async def test_malformed_id_is_400(self, test_client):
        response = await test_client.get(f"{NOTES_URL}/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestUpdateAndDelete:
    """Tests for PUT and DELETE /api/v1/notes/{id}."""

    @pytest.mark.asyncio
    async def test_update_replaces_title_and_content(self, test_client):
        note = await create(test_client, "Draft", "first pass")

        response = await test_client.put(
            f"{NOTES_URL}/{note['id']}", json={"title": "Final"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Final"
        assert data["content"] is None
        assert data["createdAtUtc"] == note["createdAtUtc"]
        assert parse_time(data["updatedAtUtc"]) > parse_time(note["updatedAtUtc"])

    @pytest.mark.asyncio
    async def test_update_unknown_note_is_404(self, test_client):
        response = await test_client.put(f"{NOTES_URL}/{uuid4()}", json={"title": "Nope"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_update_leaves_note_untouched(self, test_client):
        note = await create(test_client, "Keep me", "as is")

        response = await test_client.put(f"{NOTES_URL}/{note['id']}", json={"title": ""})
        fetched = await test_client.get(f"{NOTES_URL}/{note['id']}")

        assert response.status_code == 400
        assert fetched.json()["data"] == note

    @pytest.mark.asyncio
    async def test_delete_then_get_is_404(self, test_client):
        note = await create(test_client, "Short lived")

        response = await test_client.delete(f"{NOTES_URL}/{note['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] is None
        assert body["message"] == "Note deleted successfully"
        assert (await test_client.get(f"{NOTES_URL}/{note['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_note_is_404(self, test_client):
        response = await test_client.delete(f"{NOTES_URL}/{uuid4()}")
        assert response.status_code == 404


class TestSearchAndPaging:
    """Tests for /search and /paged."""

    @pytest.mark.asyncio
    async def test_title_search(self, test_client):
        await create(test_client, "Shopping", "milk")
        await create(test_client, "Reading", "shop manuals")

        response = await test_client.get(f"{NOTES_URL}/search", params={"searchTerm": "shop"})

        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Found 1 notes matching 'shop'"
        assert [n["title"] for n in body["data"]] == ["Shopping"]

    @pytest.mark.asyncio
    async def test_search_without_term_is_400(self, test_client):
        response = await test_client.get(f"{NOTES_URL}/search")

        assert response.status_code == 400
        assert response.json()["errors"] == ["Search term is required."]

    @pytest.mark.asyncio
    async def test_paged_metadata(self, test_client):
        for i in range(3):
            await create(test_client, f"Note {i}")

        response = await test_client.get(f"{NOTES_URL}/paged", params={"pageSize": 2})

        assert response.status_code == 200
        page = response.json()["data"]
        assert [n["title"] for n in page["items"]] == ["Note 2", "Note 1"]
        assert page["totalCount"] == 3
        assert page["page"] == 1
        assert page["pageSize"] == 2
        assert page["totalPages"] == 2
        assert page["hasNextPage"] is True
        assert page["hasPreviousPage"] is False
        assert page["nextPage"] == 2
        assert page["previousPage"] is None
        assert page["firstItemIndex"] == 1
        assert page["lastItemIndex"] == 2
        assert page["sortBy"] == "updatedAtUtc"
        assert page["sortDescending"] is True

    @pytest.mark.asyncio
    async def test_paged_clamps_out_of_range_values(self, test_client):
        response = await test_client.get(
            f"{NOTES_URL}/paged", params={"page": 0, "pageSize": 500, "sortBy": "nonsense"}
        )

        page = response.json()["data"]
        assert page["page"] == 1
        assert page["pageSize"] == 100
        assert page["sortBy"] == "updatedAtUtc"

    @pytest.mark.asyncio
    async def test_paged_sort_and_filters(self, test_client):
        await create(test_client, "beta plan", "x")
        await create(test_client, "alpha plan", "y")
        await create(test_client, "gamma log", "z")

        response = await test_client.get(
            f"{NOTES_URL}/paged",
            params={"title": "plan", "sortBy": "title", "sortDescending": "false"},
        )

        page = response.json()["data"]
        assert [n["title"] for n in page["items"]] == ["alpha plan", "beta plan"]
        assert page["sortBy"] == "title"
        assert page["sortDescending"] is False

    @pytest.mark.asyncio
    async def test_page_far_past_the_end_is_empty(self, test_client):
        await create(test_client, "Only note")
        far_page = 10 ** 17

        response = await test_client.get(
            f"{NOTES_URL}/paged", params={"page": far_page, "pageSize": 100}
        )

        assert response.status_code == 200
        page = response.json()["data"]
        assert page["items"] == []
        assert page["totalCount"] == 1
        assert page["page"] == far_page
        assert page["hasNextPage"] is False

    @pytest.mark.asyncio
    async def test_paged_short_search_is_400(self, test_client):
        response = await test_client.get(f"{NOTES_URL}/paged", params={"search": "ab"})

        assert response.status_code == 400
        assert response.json()["errors"] == ["Search term must be at least 3 characters."]


class TestErrorsAndHealth:
    """Tests for server errors and /health."""

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self, test_app, test_client):
        error = DatabaseError("connection refused at 10.0.0.5", context={"dsn": "secret"})
        test_app.dependency_overrides[get_note_service] = lambda: _ExplodingService(error)

        response = await test_client.get(NOTES_URL)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "An internal server error occurred."
        assert "10.0.0.5" not in response.text

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, test_app, test_client):
        test_app.dependency_overrides[get_note_service] = (
            lambda: _ExplodingService(RuntimeError("boom"))
        )

        response = await test_client.get(NOTES_URL, headers={"X-Request-ID": "trace-500"})

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "An internal server error occurred."
        assert body["traceId"] == "trace-500"
        assert "boom" not in response.text

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["authMode"] == "development"
        assert body["cachedEntries"] == 0

    @pytest.mark.asyncio
    async def test_auth_info_in_development_mode(self, test_client):
        response = await test_client.get("/api/auth-info")

        assert response.status_code == 200
        user = response.json()["data"]
        assert user["id"] == "dev-user"
        assert user["name"] == "Development User"
        assert user["email"] == "dev@example.com"
        assert user["authMode"] == "development"
