"""Chat and fact repositories for MongoDB storage."""

import logging
from datetime import datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection

from ..memory.models import ChatMessage, Fact, FactKey, to_storage_time
from .client import retry_on_connection_failure

logger = logging.getLogger(__name__)

# Fields a caller may patch on a stored fact.
FACT_PATCH_FIELDS = frozenset({"resolved", "reminded", "remind_at", "value"})


class ChatRepository:
    """Repository for chat message storage operations."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for chat messages.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("timestamp", DESCENDING)])

    @retry_on_connection_failure()
    def append(self, message: ChatMessage) -> ChatMessage:
        """Store a chat message.

        Args:
            message: The message to store.

        Returns:
            The message carrying its document ID.
        """
        result = self._collection.insert_one(message.to_dict())
        message.id = str(result.inserted_id)
        return message

    @retry_on_connection_failure()
    def get_recent(self, limit: int = 20) -> list[ChatMessage]:
        """Get the most recent messages in chronological order.

        Args:
            limit: Maximum number to return.

        Returns:
            The latest `limit` messages, oldest first.
        """
        if limit <= 0:
            return []
        cursor = (
            self._collection.find()
            .sort([("timestamp", DESCENDING), ("_id", DESCENDING)])
            .limit(limit)
        )
        messages = [ChatMessage.from_dict(doc) for doc in cursor]
        messages.reverse()
        return messages


class FactRepository:
    """Repository for personal fact storage operations."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for facts.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("created_at", DESCENDING)])
        self._collection.create_index([("key", 1), ("remind_at", ASCENDING)])

    @retry_on_connection_failure()
    def create(self, fact: Fact) -> Fact:
        """Store a fact.

        Args:
            fact: The fact to store.

        Returns:
            The fact carrying its document ID.
        """
        result = self._collection.insert_one(fact.to_dict())
        return fact.with_id(str(result.inserted_id))

    @retry_on_connection_failure()
    def update(self, fact_id: str, patch: dict[str, Any]) -> Fact | None:
        """Apply a partial update to a fact.

        Args:
            fact_id: The fact ID.
            patch: Field values to set; unknown fields are ignored.

        Returns:
            The updated fact, or None if it does not exist.
        """
        try:
            object_id = ObjectId(fact_id)
        except (InvalidId, TypeError):
            logger.warning("Invalid fact id: %s", fact_id)
            return None

        changes = {
            name: to_storage_time(value) if isinstance(value, datetime) else value
            for name, value in patch.items()
            if name in FACT_PATCH_FIELDS
        }
        if not changes:
            doc = self._collection.find_one({"_id": object_id})
        else:
            doc = self._collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        return Fact.from_dict(doc) if doc is not None else None

    @retry_on_connection_failure()
    def get_recent(self, limit: int = 20) -> list[Fact]:
        """Get facts, most recently created first.

        Args:
            limit: Maximum number to return.
        """
        if limit <= 0:
            return []
        cursor = (
            self._collection.find()
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            .limit(limit)
        )
        return [Fact.from_dict(doc) for doc in cursor]

    @retry_on_connection_failure()
    def get_due_reminders(self, now: datetime) -> list[Fact]:
        """Get reminders that are due and not yet delivered.

        Args:
            now: Reference time.

        Returns:
            Due reminders, earliest first.
        """
        cursor = self._collection.find(
            {
                "key": FactKey.REMINDER,
                "remind_at": {"$ne": None, "$lte": to_storage_time(now)},
                "resolved": False,
                "reminded": False,
            }
        ).sort("remind_at", ASCENDING)
        return [Fact.from_dict(doc) for doc in cursor]


__all__ = ["ChatRepository", "FactRepository"]
