"""Note change notifications.

Lets views subscribe to note changes, offline saves and sync progress
instead of polling the facade.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class NoteEventType(Enum):
    """Kinds of note notifications."""

    NOTES_CHANGED = "notes_changed"
    SAVED_OFFLINE = "saved_offline"
    SYNC_STARTED = "sync_started"
    SYNC_COMPLETED = "sync_completed"


@dataclass
class SyncReport:
    """Outcome of one sync pass."""

    owner_id: str
    attempted: int = 0
    synced: int = 0

    @property
    def failed(self) -> int:
        """Number of notes left pending."""
        return self.attempted - self.synced

    def describe(self) -> str:
        """Human-readable summary of the pass."""
        plural = "s" if self.attempted != 1 else ""
        return f"Successfully synced {self.synced} of {self.attempted} note{plural}"


@dataclass
class NoteEvent:
    """A single notification."""

    type: NoteEventType
    owner_id: str
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)


NoteListener = Callable[[NoteEvent], None]


class NoteEventBus:
    """Dispatches note events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: list[NoteListener] = []

    def subscribe(self, listener: NoteListener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: NoteEvent) -> None:
        """Deliver an event to every listener.

        A failing listener is logged and does not stop delivery.
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Note listener failed on %s", event.type.value)


__all__ = [
    "NoteEvent",
    "NoteEventBus",
    "NoteEventType",
    "NoteListener",
    "SyncReport",
]
