"""Shared fixtures for voxnote tests."""

from pathlib import Path

import httpx
import mongomock
import pytest

from voxnote.api import NotesApi
from voxnote.notes import LocalNoteStore
from voxnote.storage import NoteRepository


class SwitchableTransport(httpx.BaseTransport):
    """Transport that forwards to an in-process API or fails like a dead network."""

    def __init__(self, api: NotesApi) -> None:
        self._inner = api.transport()
        self.online = True
        self.requests: list[httpx.Request] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.online:
            raise httpx.ConnectError("Network is unreachable", request=request)
        return self._inner.handle_request(request)

    def count(self, method: str, path: str) -> int:
        """Number of requests seen for a method and path."""
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == path
        )


@pytest.fixture
def mongo_db():
    """Create a mock MongoDB database for testing."""
    client = mongomock.MongoClient()
    return client["voxnote_test"]


@pytest.fixture
def repository(mongo_db) -> NoteRepository:
    """Create a NoteRepository over the mock database."""
    return NoteRepository(mongo_db["notes"])


@pytest.fixture
def api(repository: NoteRepository) -> NotesApi:
    """Create the notes API over the mock repository."""
    return NotesApi(repository)


@pytest.fixture
def transport(api: NotesApi) -> SwitchableTransport:
    """Create a transport that can be taken offline."""
    return SwitchableTransport(api)


@pytest.fixture
def local_store(tmp_path: Path) -> LocalNoteStore:
    """Create a local store in a temporary directory."""
    return LocalNoteStore(tmp_path / "notes")
