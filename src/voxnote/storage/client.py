"""MongoDB connection for the notes API backend.

The backend owns one connection per process; NoteRepository methods are
wrapped with retry_on_connection_failure so a brief server blip does not
surface as a failed save.
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

if TYPE_CHECKING:
    from .notes import NoteRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_URI = "mongodb://localhost:27017"
NOTES_COLLECTION = "notes"

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (ConnectionFailure, ServerSelectionTimeoutError)


def retry_on_connection_failure(
    max_retries: int = 3,
    base_delay: float = 0.2,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry a storage call while MongoDB is unreachable.

    The call is attempted up to max_retries times, sleeping base_delay,
    2 * base_delay, ... between attempts. The last error is re-raised.

    Args:
        max_retries: Total number of attempts.
        base_delay: First backoff delay in seconds.
    """
    delays = [base_delay * 2**n for n in range(max_retries - 1)]

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            for delay in delays:
                try:
                    return func(*args, **kwargs)
                except TRANSIENT_ERRORS as e:
                    logger.warning("%s: MongoDB unreachable, retrying in %.1fs: %s", func.__name__, delay, e)
                    time.sleep(delay)

            try:
                return func(*args, **kwargs)
            except TRANSIENT_ERRORS as e:
                logger.error("%s: giving up after %d attempts: %s", func.__name__, max_retries, e)
                raise

        return wrapper

    return decorator


class MongoStorageClient:
    """Holds the MongoDB connection behind the notes API."""

    def __init__(
        self,
        uri: str = DEFAULT_URI,
        database_name: str = "voxnote",
        server_selection_timeout_ms: int = 5000,
        client_factory: Callable[..., MongoClient[dict[str, Any]]] | None = None,
    ) -> None:
        """Initialize the storage client.

        Args:
            uri: MongoDB connection URI.
            database_name: Database holding the notes collection.
            server_selection_timeout_ms: How long the driver waits for a server.
            client_factory: Builds the driver client; pymongo.MongoClient when omitted.
        """
        self._uri = uri
        self._database_name = database_name
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory or MongoClient
        self._client: MongoClient[dict[str, Any]] | None = None
        self._notes: "NoteRepository | None" = None

    def connect(self) -> None:
        """Open the connection and verify the server answers.

        Raises:
            ConnectionFailure: If the server cannot be reached.
        """
        if self._client is not None:
            return

        from .notes import NoteRepository

        client = self._client_factory(
            self._uri,
            serverSelectionTimeoutMS=self._server_selection_timeout_ms,
        )
        try:
            client.admin.command("ping")
        except TRANSIENT_ERRORS as e:
            logger.error("MongoDB at %s is not answering: %s", self._uri, e)
            client.close()
            raise

        self._client = client
        self._notes = NoteRepository(client[self._database_name][NOTES_COLLECTION])
        logger.info("Using notes collection %s.%s", self._database_name, NOTES_COLLECTION)

    def disconnect(self) -> None:
        """Close the connection if open."""
        if self._client is None:
            return
        self._client.close()
        self._client = None
        self._notes = None
        logger.info("Closed MongoDB connection")

    @property
    def notes(self) -> "NoteRepository":
        """Get the notes repository.

        Raises:
            RuntimeError: If connect() has not succeeded.
        """
        if self._notes is None:
            raise RuntimeError("MongoDB is not connected; call connect() first")
        return self._notes

    def __enter__(self) -> "MongoStorageClient":
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.disconnect()


__all__ = [
    "DEFAULT_URI",
    "MongoStorageClient",
    "retry_on_connection_failure",
]
