"""Note facade: the single entry point for reading and writing notes.

Reads go cache -> remote -> stale cache -> local store. Writes go to the
remote service first and land in the local store, tagged as pending,
whenever the service is unreachable or fails.
"""

import logging

from .cache import NoteCache
from .errors import RemoteUnavailable, ResponseShapeError, ValidationError
from .events import NoteEvent, NoteEventBus, NoteEventType
from .local_store import LocalNoteStore
from .models import LocalIdFactory, Note, is_local_id, resolve_owner
from .remote import DEFAULT_LIST_LIMIT, DEFAULT_PROBE_TIMEOUT_SECONDS, RemoteNoteClient

logger = logging.getLogger(__name__)

OFFLINE_SAVE_MESSAGE = "Note saved locally. Will sync when connection is restored."


class NoteFacade:
    """Offline-resilient access to a user's notes.

    Every call takes the caller identity explicitly; None means no session
    and maps to the anonymous owner.
    """

    def __init__(
        self,
        remote: RemoteNoteClient,
        local_store: LocalNoteStore,
        cache: NoteCache | None = None,
        events: NoteEventBus | None = None,
        id_factory: LocalIdFactory | None = None,
        list_limit: int = DEFAULT_LIST_LIMIT,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the facade.

        Args:
            remote: Client for the notes API.
            local_store: Owner-partitioned durable store.
            cache: In-memory listing cache (a new one if omitted).
            events: Event bus for change notifications (a new one if omitted).
            id_factory: Generator for local identifiers.
            list_limit: Maximum number of notes fetched from the server.
            probe_timeout: Reachability probe timeout in seconds.
        """
        self._remote = remote
        self._local_store = local_store
        self._cache = cache or NoteCache()
        self._events = events or NoteEventBus()
        self._id_factory = id_factory or LocalIdFactory()
        self._list_limit = list_limit
        self._probe_timeout = probe_timeout

    @property
    def cache(self) -> NoteCache:
        """Get the listing cache."""
        return self._cache

    @property
    def events(self) -> NoteEventBus:
        """Get the event bus."""
        return self._events

    def get_all(self, owner_id: str | None, force_refresh: bool = False) -> list[Note]:
        """Get the owner's notes from the best available source.

        Args:
            owner_id: Caller identity.
            force_refresh: Skip the fresh-cache check.

        Returns:
            Notes, pending local notes first, then newest first.
        """
        owner = resolve_owner(owner_id)

        if not force_refresh:
            cached = self._cache.get(owner)
            if cached is not None:
                logger.debug("Using cached notes for %s", owner)
                return cached

        try:
            remote_notes = self._remote.list_notes(owner, limit=self._list_limit)
        except RemoteUnavailable as e:
            logger.warning("Error fetching notes, falling back: %s", e)
            stale = self._cache.get_stale(owner)
            if stale is not None:
                logger.info("Using expired cache due to API error")
                return stale
            logger.info("Falling back to local storage for %s", owner)
            return self._local_store.list(owner)

        pending = self._local_store.pending(owner)
        remote_ids = {note.id for note in remote_notes}
        notes = [note for note in pending if note.id not in remote_ids] + remote_notes

        self._cache.put(owner, notes)
        self._local_store.replace_all(owner, notes)
        return notes

    def save(self, owner_id: str | None, content: str) -> Note:
        """Save a new note, remotely if possible, otherwise locally.

        Raises:
            ValidationError: If content is empty after trimming.
        """
        owner = resolve_owner(owner_id)
        text = (content or "").strip()
        if not text:
            raise ValidationError("Note content must not be empty")

        if not self._remote.probe_reachability(timeout=self._probe_timeout):
            logger.info("Service appears to be offline, saving note locally")
            return self._save_locally(owner, text)

        try:
            note = self._remote.create_note(owner, text)
        except (RemoteUnavailable, ResponseShapeError) as e:
            logger.error("Error saving note to server: %s", e)
            return self._save_locally(owner, text)

        if note.is_local:
            # Server could not reach its database and echoed a local id
            self._local_store.append(owner, note)
            self._announce_offline(owner, note, note.warning or OFFLINE_SAVE_MESSAGE)

        self._changed(owner)
        return note

    def delete(self, owner_id: str | None, note_id: str) -> bool:
        """Delete a note.

        Local notes are only removed from the local store. Server notes are
        deleted remotely first; the local copy is scrubbed either way.

        Returns:
            Always True; a missing note counts as already deleted.
        """
        owner = resolve_owner(owner_id)

        if is_local_id(note_id):
            logger.info("Deleting local note %s from storage only", note_id)
        else:
            try:
                if not self._remote.delete_note(owner, note_id):
                    logger.info("Note %s was already gone on the server", note_id)
            except RemoteUnavailable as e:
                logger.error("Error deleting note %s: %s", note_id, e)

        self._local_store.remove(owner, note_id)
        self._changed(owner)
        return True

    def _save_locally(self, owner: str, content: str) -> Note:
        note = Note(id=self._id_factory.next_id(), content=content, owner_id=owner)
        self._local_store.append(owner, note)
        logger.info("Created local fallback note with ID %s", note.id)

        self._announce_offline(owner, note, OFFLINE_SAVE_MESSAGE)
        self._changed(owner)
        return note

    def _announce_offline(self, owner: str, note: Note, message: str) -> None:
        self._events.emit(
            NoteEvent(
                type=NoteEventType.SAVED_OFFLINE,
                owner_id=owner,
                message=message,
                data={"note_id": note.id},
            )
        )

    def _changed(self, owner: str) -> None:
        self._cache.invalidate()
        self._events.emit(NoteEvent(type=NoteEventType.NOTES_CHANGED, owner_id=owner))


__all__ = ["NoteFacade", "OFFLINE_SAVE_MESSAGE"]
