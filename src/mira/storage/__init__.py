"""Storage module for Mira voice assistant.

Persists chat history and personal facts in MongoDB.
"""

from .client import MongoStorageClient, retry_on_connection_failure
from .persistence import (
    InMemoryPersistence,
    MongoPersistence,
    Persistence,
    create_persistence,
)
from .repositories import ChatRepository, FactRepository

__all__ = [
    "ChatRepository",
    "FactRepository",
    "InMemoryPersistence",
    "MongoPersistence",
    "MongoStorageClient",
    "Persistence",
    "create_persistence",
    "retry_on_connection_failure",
]
