"""In-memory cache for the last successful note listing."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from .models import Note

logger = logging.getLogger(__name__)

# Listings younger than this are served without a remote call
DEFAULT_FRESHNESS_SECONDS = 5 * 60


@dataclass
class _CacheEntry:
    owner_id: str
    notes: list[Note]
    stored_at: float


class NoteCache:
    """Single-entry, owner-scoped cache of a note listing.

    An entry is fresh while its owner matches the caller and its age is
    under the freshness window. Expired entries are kept around so they can
    still be served when the remote service is unreachable.
    """

    def __init__(
        self,
        freshness_seconds: float = DEFAULT_FRESHNESS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            freshness_seconds: Maximum age of a listing served on the happy path.
            clock: Monotonic clock in seconds.
        """
        self._freshness_seconds = freshness_seconds
        self._clock = clock
        self._entry: _CacheEntry | None = None

    @property
    def freshness_seconds(self) -> float:
        """Get the freshness window in seconds."""
        return self._freshness_seconds

    def get(self, owner_id: str) -> list[Note] | None:
        """Get a fresh listing for the owner, or None."""
        entry = self._entry
        if entry is None or entry.owner_id != owner_id:
            return None

        age = self._clock() - entry.stored_at
        if age >= self._freshness_seconds:
            logger.debug("Cached notes for %s expired (%.1fs old)", owner_id, age)
            return None

        return list(entry.notes)

    def get_stale(self, owner_id: str) -> list[Note] | None:
        """Get the owner's listing regardless of age (stale-while-error)."""
        entry = self._entry
        if entry is None or entry.owner_id != owner_id:
            return None
        return list(entry.notes)

    def put(self, owner_id: str, notes: list[Note]) -> None:
        """Store a listing for the owner, replacing any previous entry."""
        self._entry = _CacheEntry(owner_id=owner_id, notes=list(notes), stored_at=self._clock())

    def invalidate(self) -> None:
        """Drop the cached entry unconditionally."""
        self._entry = None


__all__ = ["DEFAULT_FRESHNESS_SECONDS", "NoteCache"]
