"""MongoDB storage module for the voxnote notes API.

Provides persistent, owner-filtered storage for notes.
"""

from .client import MongoStorageClient, retry_on_connection_failure
from .notes import NoteRepository

__all__ = [
    "MongoStorageClient",
    "NoteRepository",
    "retry_on_connection_failure",
]
