"""Data models for voice notes.

Defines the Note entity, owner identity helpers and local identifiers.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .errors import ResponseShapeError

# Prefix marking a note that the server has not confirmed yet
LOCAL_ID_PREFIX = "local-"

# Owner used when no session is present
ANONYMOUS_OWNER = "anonymous"


def resolve_owner(owner_id: str | None) -> str:
    """Map the session identity to a storage owner key.

    Args:
        owner_id: Signed-in identity (email-like string) or None.

    Returns:
        The identity, or the anonymous sentinel when there is no session.
    """
    if owner_id is None or not owner_id.strip():
        return ANONYMOUS_OWNER
    return owner_id.strip()


def is_local_id(note_id: str | None) -> bool:
    """Check whether an identifier was generated on this client."""
    return bool(note_id) and note_id.startswith(LOCAL_ID_PREFIX)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string (or datetime) into an aware datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ResponseShapeError(f"Invalid created_at: {value!r}") from e
    else:
        raise ResponseShapeError(f"Invalid created_at: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class LocalIdFactory:
    """Generates local identifiers from a millisecond clock.

    Two notes created within the same millisecond get distinct ids by
    bumping the timestamp forward.
    """

    def __init__(self, clock_ms: Callable[[], int] | None = None) -> None:
        """Initialize the factory.

        Args:
            clock_ms: Callable returning epoch milliseconds.
        """
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))
        self._last_ms = 0

    def next_id(self) -> str:
        """Return a fresh local identifier."""
        now_ms = int(self._clock_ms())
        if now_ms <= self._last_ms:
            now_ms = self._last_ms + 1
        self._last_ms = now_ms
        return f"{LOCAL_ID_PREFIX}{now_ms}"


@dataclass
class Note:
    """A voice note owned by a single user.

    Attributes:
        id: Server identifier, or a local identifier while unsynced
        content: Trimmed note text
        owner_id: Identity the note is partitioned under
        created_at: When the note was created
        warning: Non-fatal server annotation (server-side degraded save)
    """

    id: str
    content: str
    owner_id: str = ANONYMOUS_OWNER
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    warning: str | None = None

    @property
    def is_local(self) -> bool:
        """Check if the note is still waiting for server confirmation."""
        return is_local_id(self.id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON wire/storage form."""
        return {
            "_id": self.id,
            "id": self.id,
            "content": self.content,
            "created_at": format_timestamp(self.created_at),
            "user_id": self.owner_id,
        }

    @classmethod
    def from_dict(cls, data: Any, default_owner: str = ANONYMOUS_OWNER) -> "Note":
        """Create from a JSON record.

        Raises:
            ResponseShapeError: If the record is not a note object.
        """
        if not isinstance(data, dict):
            raise ResponseShapeError(f"Expected a note object, got {type(data).__name__}")

        note_id = data.get("id") or data.get("_id")
        content = data.get("content")
        if not note_id or not isinstance(content, str):
            raise ResponseShapeError("Note record is missing id or content")

        return cls(
            id=str(note_id),
            content=content,
            owner_id=data.get("user_id") or default_owner,
            created_at=parse_timestamp(data.get("created_at")),
            warning=data.get("_warning"),
        )


__all__ = [
    "ANONYMOUS_OWNER",
    "LOCAL_ID_PREFIX",
    "LocalIdFactory",
    "Note",
    "format_timestamp",
    "is_local_id",
    "parse_timestamp",
    "resolve_owner",
]
