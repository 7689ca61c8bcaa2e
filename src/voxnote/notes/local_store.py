"""Persistent local storage for notes.

Keeps one JSON file per owner, holding that owner's notes newest first.
All operations are best-effort: failures are logged and the store degrades
to an empty listing or a no-op instead of raising.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import quote

from .errors import StorageFailure
from .models import Note

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "audio-notes-"

# Characters kept verbatim in file names; everything else is percent-encoded
_SAFE_CHARS = "@._+-"


class LocalNoteStore:
    """Owner-partitioned JSON file store for notes."""

    def __init__(self, storage_dir: Path, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        """Initialize the store.

        Args:
            storage_dir: Directory holding one file per owner.
            key_prefix: Prefix of each owner's storage key.
        """
        self._storage_dir = Path(storage_dir).expanduser()
        self._key_prefix = key_prefix

    @property
    def storage_dir(self) -> Path:
        """Get the storage directory."""
        return self._storage_dir

    def storage_key(self, owner_id: str) -> str:
        """Get the storage key for an owner."""
        return f"{self._key_prefix}{owner_id}"

    def _path_for(self, owner_id: str) -> Path:
        safe_key = quote(self.storage_key(owner_id), safe=_SAFE_CHARS)
        return self._storage_dir / f"{safe_key}.json"

    def list(self, owner_id: str) -> list[Note]:
        """Get all notes stored for an owner, newest first."""
        try:
            return self._read(owner_id)
        except StorageFailure as e:
            logger.warning("Local store read failed for %s: %s", owner_id, e)
            return []

    def pending(self, owner_id: str) -> list[Note]:
        """Get the owner's notes that still carry a local identifier."""
        return [note for note in self.list(owner_id) if note.is_local]

    def append(self, owner_id: str, note: Note) -> None:
        """Store a note at the front of the owner's list.

        An existing copy with the same identifier is replaced.
        """
        try:
            notes = [n for n in self._read(owner_id) if n.id != note.id]
            notes.insert(0, note)
            self._write(owner_id, notes)
        except StorageFailure as e:
            logger.warning("Could not store note %s locally: %s", note.id, e)

    def remove(self, owner_id: str, note_id: str) -> bool:
        """Remove a note from the owner's list.

        Returns:
            True if a stored copy was removed.
        """
        try:
            notes = self._read(owner_id)
            remaining = [n for n in notes if n.id != note_id]
            if len(remaining) == len(notes):
                return False
            self._write(owner_id, remaining)
            return True
        except StorageFailure as e:
            logger.warning("Could not remove note %s locally: %s", note_id, e)
            return False

    def replace_all(self, owner_id: str, notes: list[Note]) -> None:
        """Overwrite the owner's list, dropping duplicate identifiers."""
        seen: set[str] = set()
        unique = []
        for note in notes:
            if note.id not in seen:
                seen.add(note.id)
                unique.append(note)

        try:
            self._write(owner_id, unique)
        except StorageFailure as e:
            logger.warning("Could not back up notes for %s: %s", owner_id, e)

    def _read(self, owner_id: str) -> list[Note]:
        path = self._path_for(owner_id)
        if not path.exists():
            return []

        try:
            with open(path, encoding="utf-8") as f:
                records = json.load(f)
            if not isinstance(records, list):
                raise ValueError(f"expected a JSON array, got {type(records).__name__}")
            notes = [Note.from_dict(record, default_owner=owner_id) for record in records]
        except (OSError, ValueError) as e:
            raise StorageFailure(f"{path}: {e}") from e

        owned = [note for note in notes if note.owner_id == owner_id]
        if len(owned) != len(notes):
            logger.warning(
                "Ignoring %d locally stored note(s) not owned by %s", len(notes) - len(owned), owner_id
            )
        return owned

    def _write(self, owner_id: str, notes: list[Note]) -> None:
        path = self._path_for(owner_id)
        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._storage_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump([note.to_dict() for note in notes], f)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageFailure(f"{path}: {e}") from e


__all__ = ["DEFAULT_KEY_PREFIX", "LocalNoteStore"]
