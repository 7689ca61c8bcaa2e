"""Error types for the notes module.

Custom exceptions for note validation, remote access and local persistence.
"""


class NoteError(Exception):
    """Base exception for note-related errors."""

    pass


class ValidationError(NoteError):
    """Raised when note input is rejected (e.g. empty content)."""

    pass


class RemoteUnavailable(NoteError):
    """Raised when the notes API cannot be reached or returns an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize remote error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class StorageFailure(NoteError):
    """Raised inside the local store when persistence fails."""

    pass


class NotFoundOrForbidden(NoteError):
    """Delete or query target is absent or owned by someone else."""

    pass


class ResponseShapeError(NoteError, ValueError):
    """Raised when the notes API returns a payload of the wrong shape."""

    pass


__all__ = [
    "NoteError",
    "NotFoundOrForbidden",
    "RemoteUnavailable",
    "ResponseShapeError",
    "StorageFailure",
    "ValidationError",
]
