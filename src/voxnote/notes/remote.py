"""HTTP client for the notes API.

Wraps the /api/notes and /api/ping endpoints. Network and HTTP failures
are reported as RemoteUnavailable so callers can fall back to local state.
"""

import logging
from typing import Any

import httpx

from .errors import RemoteUnavailable, ResponseShapeError
from .models import Note, is_local_id

logger = logging.getLogger(__name__)

# Header carrying the caller identity to the notes API
OWNER_HEADER = "X-Owner-Id"

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_PROBE_TIMEOUT_SECONDS = 2.0
DEFAULT_LIST_LIMIT = 50


class RemoteNoteClient:
    """Client for the notes API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the notes service.
            timeout: Request timeout in seconds.
            transport: Optional transport (e.g. an in-process backend).
            headers: Extra headers sent with every request.
        """
        self._base_url = base_url
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers=headers,
        )

    @property
    def base_url(self) -> str:
        """Get the service base URL."""
        return self._base_url

    def list_notes(self, owner_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[Note]:
        """Fetch the owner's notes, newest first.

        Raises:
            RemoteUnavailable: On network errors or non-success status.
            ResponseShapeError: If the body is not a list of notes.
        """
        response = self._request("GET", "/api/notes", owner_id, params={"limit": limit})
        payload = self._json(response)
        if not isinstance(payload, list):
            raise ResponseShapeError(f"Expected a list of notes, got {type(payload).__name__}")

        notes = []
        for record in payload:
            note = Note.from_dict(record, default_owner=owner_id)
            if note.owner_id != owner_id:
                logger.warning("Dropping note %s owned by another user", note.id)
                continue
            notes.append(note)

        logger.info("Fetched %d notes for %s", len(notes), owner_id)
        return notes

    def create_note(self, owner_id: str, content: str) -> Note:
        """Create a note on the server.

        Returns:
            The created note with server-assigned id and timestamp.

        Raises:
            RemoteUnavailable: On network errors or non-success status.
            ResponseShapeError: If the body is not a note owned by the caller.
        """
        response = self._request("POST", "/api/notes", owner_id, json={"content": content})
        note = Note.from_dict(self._json(response), default_owner=owner_id)
        if note.owner_id != owner_id:
            raise ResponseShapeError(f"Created note {note.id} belongs to another user")

        if note.warning:
            logger.warning("Server saved note %s with warning: %s", note.id, note.warning)
        else:
            logger.info("Note saved to server with ID %s", note.id)
        return note

    def delete_note(self, owner_id: str, note_id: str) -> bool:
        """Delete a server-backed note.

        Returns:
            True if deleted, False if the server reports it missing or not owned.

        Raises:
            ValueError: If note_id is a local identifier.
            RemoteUnavailable: On network errors or other failure statuses.
        """
        if is_local_id(note_id):
            raise ValueError(f"Local note {note_id} cannot be deleted remotely")

        try:
            self._request("DELETE", "/api/notes", owner_id, params={"id": note_id})
        except RemoteUnavailable as e:
            if e.status_code == 404:
                logger.warning("Note %s not found or not owned by %s", note_id, owner_id)
                return False
            raise

        logger.info("Deleted note %s", note_id)
        return True

    def probe_reachability(self, timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS) -> bool:
        """Check whether the notes API answers within the timeout.

        Returns:
            True if the ping endpoint returned a success status.
        """
        try:
            response = self._client.head(
                "/api/ping",
                timeout=timeout,
                headers={"Cache-Control": "no-store"},
            )
        except httpx.HTTPError as e:
            logger.warning("Network check failed, assuming offline: %s", e)
            return False

        if not response.is_success:
            logger.warning("Ping returned status %d, assuming offline", response.status_code)
            return False
        return True

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "RemoteNoteClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()

    def _request(self, method: str, path: str, owner_id: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(
                method,
                path,
                headers={OWNER_HEADER: owner_id},
                **kwargs,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteUnavailable(
                f"{method} {path} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise RemoteUnavailable(f"{method} {path} failed: {e}") from e
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ResponseShapeError(f"Response body is not JSON: {e}") from e


__all__ = [
    "DEFAULT_LIST_LIMIT",
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "DEFAULT_TIMEOUT_SECONDS",
    "OWNER_HEADER",
    "RemoteNoteClient",
]
