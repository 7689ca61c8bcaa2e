"""voxnote - offline-resilient voice notes.

voxnote keeps transcribed voice notes per user:
- Notes are saved to the notes API when it is reachable
- Saves fall back to a local store while offline
- Pending local notes are synced once the API is back

Usage:
    python -m voxnote --profile dev list
    python -m voxnote --owner me@example.com save "call the dentist"
"""

__version__ = "0.1.0"

from .app import NotesApp, create_app
from .config import VoxnoteConfig
from .config.loader import load_config

__all__ = [
    "NotesApp",
    "VoxnoteConfig",
    "__version__",
    "create_app",
    "load_config",
]
