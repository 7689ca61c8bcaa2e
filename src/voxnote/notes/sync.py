"""Background promotion of locally saved notes to the notes API.

Pending notes are pushed one at a time, in order, and each is removed from
the local store only after the server confirmed it. A pass interrupted
midway leaves every note either promoted or still pending.

Known gap: if the server accepted a note but the local removal failed, the
next pass creates it again. There is no de-duplication against server notes.
"""

import logging

from .cache import NoteCache
from .errors import RemoteUnavailable
from .events import NoteEvent, NoteEventBus, NoteEventType, SyncReport
from .local_store import LocalNoteStore
from .models import resolve_owner
from .remote import DEFAULT_PROBE_TIMEOUT_SECONDS, RemoteNoteClient

logger = logging.getLogger(__name__)


class SyncCoordinator:
    """Drains pending local notes into the remote service."""

    def __init__(
        self,
        remote: RemoteNoteClient,
        local_store: LocalNoteStore,
        events: NoteEventBus | None = None,
        cache: NoteCache | None = None,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the coordinator.

        Args:
            remote: Client for the notes API.
            local_store: Store holding pending notes.
            events: Event bus for sync notifications.
            cache: Listing cache to invalidate after promotions.
            probe_timeout: Reachability probe timeout in seconds.
        """
        self._remote = remote
        self._local_store = local_store
        self._events = events or NoteEventBus()
        self._cache = cache
        self._probe_timeout = probe_timeout
        self._last_owner: str | None = None

    def sync(self, owner_id: str | None) -> SyncReport:
        """Push the owner's pending notes to the server.

        Never raises; failures leave the affected notes pending.

        Returns:
            Counts of attempted and promoted notes.
        """
        owner = resolve_owner(owner_id)
        report = SyncReport(owner_id=owner)

        try:
            if not self._remote.probe_reachability(timeout=self._probe_timeout):
                logger.info("Network seems to be down, skipping sync attempt")
                return report

            pending = self._local_store.pending(owner)
            if not pending:
                logger.debug("No local notes to sync for %s", owner)
                return report

            logger.info("Syncing %d local notes for %s", len(pending), owner)
            report.attempted = len(pending)
            self._events.emit(
                NoteEvent(
                    type=NoteEventType.SYNC_STARTED,
                    owner_id=owner,
                    message=f"Syncing {len(pending)} note{'s' if len(pending) > 1 else ''}...",
                    data={"pending": len(pending)},
                )
            )

            for note in pending:
                try:
                    created = self._remote.create_note(owner, note.content)
                except RemoteUnavailable as e:
                    logger.warning("Failed to sync local note %s: %s", note.id, e)
                    continue

                if created.is_local:
                    logger.warning(
                        "Server could not persist local note %s: %s", note.id, created.warning
                    )
                    continue

                self._local_store.remove(owner, note.id)
                report.synced += 1
                logger.debug("Promoted %s to %s", note.id, created.id)
        except Exception:
            logger.exception("Error syncing local notes for %s", owner)

        if report.synced and self._cache is not None:
            self._cache.invalidate()

        if report.attempted:
            logger.info(report.describe())
            self._events.emit(
                NoteEvent(
                    type=NoteEventType.SYNC_COMPLETED,
                    owner_id=owner,
                    message=report.describe(),
                    data={"attempted": report.attempted, "synced": report.synced},
                )
            )
        return report

    def handle_session(self, owner_id: str | None) -> SyncReport | None:
        """React to the session identity reported by the auth provider.

        A sync runs on the first identity seen (app load) and whenever the
        identity changes (sign-in, sign-out, account switch).

        Returns:
            The sync report, or None if the identity did not change.
        """
        owner = resolve_owner(owner_id)
        if owner == self._last_owner:
            return None

        self._last_owner = owner
        return self.sync(owner)


__all__ = ["SyncCoordinator"]
