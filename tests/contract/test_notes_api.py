"""Contract tests for the notes API endpoints.

Exercises NotesApi over a mongomock-backed NoteRepository.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import httpx
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from voxnote.api import DATABASE_WARNING, NotesApi
from voxnote.notes.remote import OWNER_HEADER
from voxnote.storage import NoteRepository

ANA = "ana@example.com"
BO = "bo@example.com"


@pytest.fixture
def http(api: NotesApi) -> httpx.Client:
    """Create an HTTP client bound to the in-process API."""
    return httpx.Client(base_url="http://notes.test", transport=api.transport())


def _as(owner: str) -> dict[str, str]:
    return {OWNER_HEADER: owner}


class TestPing:
    """Contract tests for /api/ping."""

    def test_head(self, http: httpx.Client) -> None:
        """Test HEAD returns an empty, uncached 200."""
        response = http.head("/api/ping")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["Cache-Control"] == "no-store"

    def test_get(self, repository: NoteRepository) -> None:
        """Test GET reports status and server time."""
        api = NotesApi(repository, clock=lambda: datetime(2024, 1, 15, 10, 30, tzinfo=UTC))
        http = httpx.Client(base_url="http://notes.test", transport=api.transport())

        assert http.get("/api/ping").json() == {
            "status": "ok",
            "time": "2024-01-15T10:30:00.000Z",
        }


class TestCreate:
    """Contract tests for POST /api/notes."""

    def test_creates_trimmed_note(self, http: httpx.Client) -> None:
        """Test the stored note has server id, trimmed content and owner."""
        response = http.post("/api/notes", json={"content": "  hello  "}, headers=_as(ANA))

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == "hello"
        assert body["user_id"] == ANA
        assert body["_id"] == body["id"]
        assert not body["id"].startswith("local-")
        assert body["created_at"].endswith("Z")

    def test_missing_content_rejected(self, http: httpx.Client) -> None:
        """Test content is required."""
        response = http.post("/api/notes", json={}, headers=_as(ANA))

        assert response.status_code == 400
        assert "error" in response.json()

    def test_non_string_content_rejected(self, http: httpx.Client) -> None:
        """Test content must be a string."""
        response = http.post("/api/notes", json={"content": 42}, headers=_as(ANA))

        assert response.status_code == 400

    def test_database_failure_returns_local_note(self) -> None:
        """Test a database outage degrades to a local id with a warning."""
        store = MagicMock()
        store.insert.side_effect = ServerSelectionTimeoutError("no servers")
        http = httpx.Client(base_url="http://notes.test", transport=NotesApi(store).transport())

        response = http.post("/api/notes", json={"content": "hello"}, headers=_as(ANA))

        assert response.status_code == 200
        body = response.json()
        assert body["id"].startswith("local-")
        assert body["_warning"] == DATABASE_WARNING

    def test_missing_identity_is_anonymous(self, http: httpx.Client) -> None:
        """Test requests without identity are stored as anonymous."""
        body = http.post("/api/notes", json={"content": "hello"}).json()

        assert body["user_id"] == "anonymous"


class TestList:
    """Contract tests for GET /api/notes."""

    def test_lists_only_own_notes_newest_first(self, repository: NoteRepository) -> None:
        """Test owner filtering and ordering."""
        stamps = iter(
            [
                datetime(2024, 1, 15, 10, 0, tzinfo=UTC),
                datetime(2024, 1, 15, 11, 0, tzinfo=UTC),
                datetime(2024, 1, 15, 12, 0, tzinfo=UTC),
            ]
        )
        api = NotesApi(repository, clock=lambda: next(stamps))
        http = httpx.Client(base_url="http://notes.test", transport=api.transport())
        http.post("/api/notes", json={"content": "older"}, headers=_as(ANA))
        http.post("/api/notes", json={"content": "other"}, headers=_as(BO))
        http.post("/api/notes", json={"content": "newer"}, headers=_as(ANA))

        body = http.get("/api/notes", headers=_as(ANA)).json()

        assert [n["content"] for n in body] == ["newer", "older"]
        assert all(n["user_id"] == ANA for n in body)

    def test_limit(self, http: httpx.Client) -> None:
        """Test the limit parameter caps results."""
        for i in range(3):
            http.post("/api/notes", json={"content": f"note {i}"}, headers=_as(ANA))

        body = http.get("/api/notes", params={"limit": 2}, headers=_as(ANA)).json()

        assert len(body) == 2

    def test_database_failure_is_500(self) -> None:
        """Test listing failures report error details."""
        store = MagicMock()
        store.find_for_owner.side_effect = ServerSelectionTimeoutError("no servers")
        http = httpx.Client(base_url="http://notes.test", transport=NotesApi(store).transport())

        response = http.get("/api/notes", headers=_as(ANA))

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to fetch notes"
        assert "no servers" in response.json()["details"]


class TestDelete:
    """Contract tests for DELETE /api/notes."""

    def test_deletes_own_note(self, http: httpx.Client) -> None:
        """Test the owner can delete a note."""
        note = http.post("/api/notes", json={"content": "x"}, headers=_as(ANA)).json()

        response = http.delete("/api/notes", params={"id": note["id"]}, headers=_as(ANA))

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert http.get("/api/notes", headers=_as(ANA)).json() == []

    def test_cannot_delete_other_owners_note(self, http: httpx.Client) -> None:
        """Test deleting someone else's note is a 404."""
        note = http.post("/api/notes", json={"content": "x"}, headers=_as(ANA)).json()

        response = http.delete("/api/notes", params={"id": note["id"]}, headers=_as(BO))

        assert response.status_code == 404
        assert len(http.get("/api/notes", headers=_as(ANA)).json()) == 1

    def test_unknown_id_is_404(self, http: httpx.Client) -> None:
        """Test unknown or non-ObjectId ids are a 404."""
        response = http.delete("/api/notes", params={"id": "not-an-object-id"}, headers=_as(ANA))

        assert response.status_code == 404
        assert "error" in response.json()

    def test_missing_id_is_400(self, http: httpx.Client) -> None:
        """Test the id parameter is required."""
        assert http.delete("/api/notes", headers=_as(ANA)).status_code == 400


class TestRouting:
    """Contract tests for unknown routes and methods."""

    def test_unknown_path(self, http: httpx.Client) -> None:
        """Test unknown paths are a 404."""
        assert http.get("/api/other").status_code == 404

    def test_unsupported_method(self, http: httpx.Client) -> None:
        """Test unsupported methods are a 405."""
        assert http.put("/api/notes", json={}).status_code == 405
