"""MongoDB storage client for Mira voice assistant.

Provides connection management, retry logic, and repository access.
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

if TYPE_CHECKING:
    from .repositories import ChatRepository, FactRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_connection_failure(
    max_retries: int = 5,
    base_delay: float = 1.0,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for exponential backoff retry on connection failures.

    Args:
        max_retries: Maximum number of retry attempts.
        base_delay: Base delay in seconds (doubles each retry).

    Returns:
        Decorated function with retry logic.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Exception | None = None

            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                    last_exception = e
                    if attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            "Connection failed (attempt %d/%d), retrying in %.1fs: %s",
                            attempt + 1,
                            max_retries,
                            delay,
                            str(e),
                        )
                        time.sleep(delay)
                    else:
                        logger.error(
                            "Connection failed after %d attempts: %s",
                            max_retries,
                            str(e),
                        )

            if last_exception:
                raise last_exception
            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator


class MongoStorageClient:
    """High-level MongoDB storage client.

    Manages the connection and exposes the chat and fact repositories.
    """

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database_name: str = "mira",
        connect_timeout_ms: int = 5000,
        server_selection_timeout_ms: int = 5000,
        client: MongoClient[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the storage client.

        Args:
            uri: MongoDB connection URI.
            database_name: Name of the database to use.
            connect_timeout_ms: Connection timeout in milliseconds.
            server_selection_timeout_ms: Server selection timeout in milliseconds.
            client: Pre-built client (e.g. mongomock) used instead of dialing uri.
        """
        self._uri = uri
        self._database_name = database_name
        self._connect_timeout_ms = connect_timeout_ms
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client = client
        self._owns_client = client is None
        self._db: Database[dict[str, Any]] | None = None
        self._chat: "ChatRepository | None" = None
        self._facts: "FactRepository | None" = None
        self._connected = False

    def connect(self) -> None:
        """Connect to MongoDB.

        Raises:
            ConnectionFailure: If the server cannot be reached.
        """
        if self._connected:
            return

        from .repositories import ChatRepository, FactRepository

        try:
            if self._client is None:
                self._client = MongoClient(
                    self._uri,
                    connectTimeoutMS=self._connect_timeout_ms,
                    serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                )

            # Verify connection
            self._client.admin.command("ping")

            self._db = self._client[self._database_name]
            self._chat = ChatRepository(self._db["chat_messages"])
            self._facts = FactRepository(self._db["facts"])
            self._connected = True

            logger.info("Connected to MongoDB database %s", self._database_name)

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error("Failed to connect to MongoDB: %s", str(e))
            self._connected = False
            raise

    def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self._client is not None:
            if self._owns_client:
                self._client.close()
                self._client = None
            self._db = None
            self._chat = None
            self._facts = None
            self._connected = False
            logger.info("Disconnected from MongoDB")

    def is_connected(self) -> bool:
        """Check if connected to MongoDB.

        Returns:
            True if connected, False otherwise.
        """
        if not self._connected or self._client is None:
            return False

        try:
            self._client.admin.command("ping")
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError):
            self._connected = False
            return False

    @property
    def chat(self) -> "ChatRepository":
        """Get the chat message repository.

        Raises:
            RuntimeError: If not connected.
        """
        if self._chat is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._chat

    @property
    def facts(self) -> "FactRepository":
        """Get the fact repository.

        Raises:
            RuntimeError: If not connected.
        """
        if self._facts is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._facts

    def __enter__(self) -> "MongoStorageClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.disconnect()


__all__ = [
    "MongoStorageClient",
    "retry_on_connection_failure",
]
