"""Application wiring for voxnote.

Builds the note facade and sync coordinator from configuration. One
NotesApp lives for the duration of an application session and owns the
listing cache, so the cache never outlives the session.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from .config import VoxnoteConfig
from .notes import (
    LocalNoteStore,
    NoteCache,
    NoteEventBus,
    NoteFacade,
    RemoteNoteClient,
    SyncCoordinator,
)

logger = logging.getLogger(__name__)


@dataclass
class NotesApp:
    """The note components of one application session."""

    remote: RemoteNoteClient
    local_store: LocalNoteStore
    cache: NoteCache
    events: NoteEventBus
    facade: NoteFacade
    sync: SyncCoordinator

    def close(self) -> None:
        """Release network resources."""
        self.remote.close()

    def __enter__(self) -> "NotesApp":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()


def create_app(
    config: VoxnoteConfig,
    transport: httpx.BaseTransport | None = None,
) -> NotesApp:
    """Build the note components for a session.

    Args:
        config: Loaded configuration.
        transport: Optional HTTP transport (e.g. an in-process API).

    Returns:
        Wired NotesApp.
    """
    remote = RemoteNoteClient(
        config.remote.base_url,
        timeout=config.remote.timeout_seconds,
        transport=transport,
    )
    local_store = LocalNoteStore(
        Path(config.storage.local_dir),
        key_prefix=config.storage.key_prefix,
    )
    cache = NoteCache(freshness_seconds=config.cache.freshness_seconds)
    events = NoteEventBus()

    facade = NoteFacade(
        remote,
        local_store,
        cache=cache,
        events=events,
        list_limit=config.remote.list_limit,
        probe_timeout=config.remote.probe_timeout_seconds,
    )
    sync = SyncCoordinator(
        remote,
        local_store,
        events=events,
        cache=cache,
        probe_timeout=config.remote.probe_timeout_seconds,
    )

    logger.debug(
        "Notes app ready (remote=%s, local=%s)",
        config.remote.base_url,
        local_store.storage_dir,
    )
    return NotesApp(
        remote=remote,
        local_store=local_store,
        cache=cache,
        events=events,
        facade=facade,
        sync=sync,
    )


__all__ = ["NotesApp", "create_app"]
