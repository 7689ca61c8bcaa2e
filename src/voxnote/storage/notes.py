"""Note repository for MongoDB storage.

Every query is filtered by the owning user's identity.
"""

import logging
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.collection import Collection

from ..notes.errors import NotFoundOrForbidden
from .client import retry_on_connection_failure

logger = logging.getLogger(__name__)


def _as_document_id(note_id: str) -> ObjectId | str:
    """Use an ObjectId when the identifier parses as one, the raw string otherwise."""
    try:
        return ObjectId(note_id)
    except (InvalidId, TypeError):
        return note_id


def _format(doc: dict[str, Any]) -> dict[str, Any]:
    """Convert a stored document to its API form."""
    note_id = str(doc["_id"])
    return {**doc, "_id": note_id, "id": note_id}


class NoteRepository:
    """Repository for note storage operations."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for notes.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("user_id", 1), ("created_at", DESCENDING)])

    @retry_on_connection_failure()
    def find_for_owner(self, owner_id: str, limit: int = 50) -> list[dict[str, Any]]:
        """Get an owner's notes.

        Args:
            owner_id: Owner to filter by.
            limit: Maximum number of results.

        Returns:
            Note documents in API form, most recent first.
        """
        cursor = (
            self._collection.find({"user_id": owner_id})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        return [_format(doc) for doc in cursor]

    @retry_on_connection_failure()
    def insert(self, note: dict[str, Any]) -> dict[str, Any]:
        """Insert a note document.

        Args:
            note: Document with content, created_at and user_id.

        Returns:
            The stored note in API form.
        """
        doc = dict(note)
        result = self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Note saved with ID %s", result.inserted_id)
        return _format(doc)

    @retry_on_connection_failure()
    def delete_owned(self, note_id: str, owner_id: str) -> None:
        """Delete a note only if it belongs to the owner.

        Raises:
            NotFoundOrForbidden: If no matching note was deleted.
        """
        result = self._collection.delete_one(
            {"_id": _as_document_id(note_id), "user_id": owner_id}
        )
        if result.deleted_count == 0:
            raise NotFoundOrForbidden(
                "Note not found or you do not have permission to delete it"
            )
        logger.info("Deleted note %s for %s", note_id, owner_id)


__all__ = ["NoteRepository"]
