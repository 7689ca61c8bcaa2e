"""Notes API request handling.

Implements the /api/notes and /api/ping endpoints on top of a note
repository. Requests and responses are httpx objects, so the API can be
mounted in-process with httpx.MockTransport.
"""

import json
import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Protocol

import httpx
from pymongo.errors import PyMongoError

from ..notes.errors import NotFoundOrForbidden
from ..notes.models import ANONYMOUS_OWNER, LOCAL_ID_PREFIX, format_timestamp
from ..notes.remote import DEFAULT_LIST_LIMIT, OWNER_HEADER

logger = logging.getLogger(__name__)

DATABASE_WARNING = "Note saved locally due to database connection issues"


class NoteStore(Protocol):
    """Protocol for the storage behind the API."""

    def find_for_owner(self, owner_id: str, limit: int = 50) -> list[dict[str, Any]]:
        """Get an owner's notes, newest first."""
        ...

    def insert(self, note: dict[str, Any]) -> dict[str, Any]:
        """Insert a note and return it in API form."""
        ...

    def delete_owned(self, note_id: str, owner_id: str) -> None:
        """Delete an owned note or raise NotFoundOrForbidden."""
        ...


def _json_response(status_code: int, body: Any) -> httpx.Response:
    return httpx.Response(status_code, json=body)


def _error(status_code: int, message: str, details: str | None = None) -> httpx.Response:
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return _json_response(status_code, body)


class NotesApi:
    """Server side of the notes HTTP surface."""

    def __init__(
        self,
        store: NoteStore,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        """Initialize the API.

        Args:
            store: Note repository.
            clock: Source of creation timestamps.
        """
        self._store = store
        self._clock = clock

    def transport(self) -> httpx.MockTransport:
        """Get a transport that serves this API in-process."""
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Dispatch a request to the matching endpoint."""
        path = request.url.path.rstrip("/")
        method = request.method.upper()

        if path == "/api/ping":
            if method == "HEAD":
                return httpx.Response(200, headers={"Cache-Control": "no-store"})
            if method == "GET":
                return _json_response(
                    200, {"status": "ok", "time": format_timestamp(self._clock())}
                )
            return _error(405, f"Method {method} not allowed")

        if path == "/api/notes":
            owner = request.headers.get(OWNER_HEADER) or ANONYMOUS_OWNER
            if method == "GET":
                return self._list(request, owner)
            if method == "POST":
                return self._create(request, owner)
            if method == "DELETE":
                return self._delete(request, owner)
            return _error(405, f"Method {method} not allowed")

        return _error(404, f"No route for {path}")

    def _list(self, request: httpx.Request, owner: str) -> httpx.Response:
        try:
            limit = int(request.url.params.get("limit", DEFAULT_LIST_LIMIT))
        except ValueError:
            limit = DEFAULT_LIST_LIMIT

        logger.info("GET /api/notes - User: %s", owner)
        try:
            notes = self._store.find_for_owner(owner, limit=limit)
        except PyMongoError as e:
            logger.error("Error fetching notes: %s", e)
            return _error(500, "Failed to fetch notes", str(e))

        logger.info("Found %d notes for user %s", len(notes), owner)
        return _json_response(200, notes)

    def _create(self, request: httpx.Request, owner: str) -> httpx.Response:
        try:
            body = json.loads(request.content or b"{}")
        except ValueError as e:
            return _error(400, "Request body must be JSON", str(e))

        content = body.get("content") if isinstance(body, dict) else None
        if not content or not isinstance(content, str):
            return _error(400, "Content is required and must be a string")

        note = {
            "content": content.strip(),
            "created_at": format_timestamp(self._clock()),
            "user_id": owner,
        }
        logger.info("POST /api/notes - User: %s, Content length: %d", owner, len(content))

        try:
            return _json_response(200, self._store.insert(note))
        except PyMongoError as e:
            logger.error("Database error creating note: %s", e)

        local_id = f"{LOCAL_ID_PREFIX}{int(time.time() * 1000)}"
        return _json_response(
            200,
            {**note, "_id": local_id, "id": local_id, "_warning": DATABASE_WARNING},
        )

    def _delete(self, request: httpx.Request, owner: str) -> httpx.Response:
        note_id = request.url.params.get("id")
        logger.info("DELETE /api/notes - User: %s, Note ID: %s", owner, note_id)
        if not note_id:
            return _error(400, "ID is required")

        try:
            self._store.delete_owned(note_id, owner)
        except NotFoundOrForbidden as e:
            return _error(404, str(e))
        except PyMongoError as e:
            logger.error("Error deleting note: %s", e)
            return _error(500, "Failed to delete note", str(e))

        return _json_response(200, {"success": True})


__all__ = ["DATABASE_WARNING", "NoteStore", "NotesApi"]
