"""Notes module for voxnote.

Provides offline-resilient note access: listing cache, remote API client,
local fallback store, background sync and the facade tying them together.
"""

from .cache import NoteCache
from .errors import (
    NoteError,
    NotFoundOrForbidden,
    RemoteUnavailable,
    ResponseShapeError,
    StorageFailure,
    ValidationError,
)
from .events import NoteEvent, NoteEventBus, NoteEventType, SyncReport
from .facade import NoteFacade
from .local_store import LocalNoteStore
from .models import ANONYMOUS_OWNER, LOCAL_ID_PREFIX, LocalIdFactory, Note, resolve_owner
from .remote import RemoteNoteClient
from .sync import SyncCoordinator

__all__ = [
    "ANONYMOUS_OWNER",
    "LOCAL_ID_PREFIX",
    "LocalIdFactory",
    "LocalNoteStore",
    "Note",
    "NoteCache",
    "NoteError",
    "NoteEvent",
    "NoteEventBus",
    "NoteEventType",
    "NoteFacade",
    "NotFoundOrForbidden",
    "RemoteNoteClient",
    "RemoteUnavailable",
    "ResponseShapeError",
    "StorageFailure",
    "SyncCoordinator",
    "SyncReport",
    "ValidationError",
    "resolve_owner",
]
