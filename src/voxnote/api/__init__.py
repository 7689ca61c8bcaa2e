"""Notes API backend for voxnote.

Serves /api/notes and /api/ping over a MongoDB note repository.
"""

from .server import DATABASE_WARNING, NotesApi, NoteStore

__all__ = ["DATABASE_WARNING", "NoteStore", "NotesApi"]
