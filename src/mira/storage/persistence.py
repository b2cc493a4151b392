"""Persistence seam between the turn pipeline and storage backends.

`MongoPersistence` is the production adapter. `InMemoryPersistence` keeps
everything in process for mock runs and tests.
"""

import itertools
import logging
import os
from dataclasses import replace
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from ..memory.models import ChatMessage, Fact, FactKey
from .client import MongoStorageClient
from .repositories import FACT_PATCH_FIELDS

logger = logging.getLogger(__name__)


@runtime_checkable
class Persistence(Protocol):
    """Protocol for chat and fact storage."""

    def append_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Store a chat message and return it with its ID."""
        ...

    def list_recent_chat(self, limit: int) -> list[ChatMessage]:
        """Return the latest `limit` messages in chronological order."""
        ...

    def create_fact(self, fact: Fact) -> Fact:
        """Store a fact and return it with its ID."""
        ...

    def update_fact(self, fact_id: str, patch: dict[str, Any]) -> Fact | None:
        """Patch a fact; returns None when it does not exist."""
        ...

    def list_facts(self, limit: int) -> list[Fact]:
        """Return facts, most recent first."""
        ...

    def list_due_reminders(self, now: datetime) -> list[Fact]:
        """Return undelivered reminders due at `now`, earliest first."""
        ...


class MongoPersistence:
    """Persistence backed by MongoDB repositories."""

    def __init__(self, client: MongoStorageClient) -> None:
        """Initialize with a storage client.

        Args:
            client: Storage client; connected on first use if needed
        """
        self._client = client

    def _ensure_connected(self) -> MongoStorageClient:
        if not self._client.is_connected():
            self._client.connect()
        return self._client

    def append_chat_message(self, message: ChatMessage) -> ChatMessage:
        return self._ensure_connected().chat.append(message)

    def list_recent_chat(self, limit: int) -> list[ChatMessage]:
        return self._ensure_connected().chat.get_recent(limit)

    def create_fact(self, fact: Fact) -> Fact:
        return self._ensure_connected().facts.create(fact)

    def update_fact(self, fact_id: str, patch: dict[str, Any]) -> Fact | None:
        return self._ensure_connected().facts.update(fact_id, patch)

    def list_facts(self, limit: int) -> list[Fact]:
        return self._ensure_connected().facts.get_recent(limit)

    def list_due_reminders(self, now: datetime) -> list[Fact]:
        return self._ensure_connected().facts.get_due_reminders(now)

    def close(self) -> None:
        """Disconnect the underlying client."""
        self._client.disconnect()


class InMemoryPersistence:
    """Process-local persistence for mock mode and tests."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.messages: list[ChatMessage] = []
        self.facts: list[Fact] = []

    def append_chat_message(self, message: ChatMessage) -> ChatMessage:
        stored = replace(message, id=str(next(self._ids)))
        self.messages.append(stored)
        return stored

    def list_recent_chat(self, limit: int) -> list[ChatMessage]:
        if limit <= 0:
            return []
        return self.messages[-limit:]

    def create_fact(self, fact: Fact) -> Fact:
        stored = fact.with_id(str(next(self._ids)))
        self.facts.append(stored)
        return stored

    def update_fact(self, fact_id: str, patch: dict[str, Any]) -> Fact | None:
        changes = {name: value for name, value in patch.items() if name in FACT_PATCH_FIELDS}
        for index, fact in enumerate(self.facts):
            if fact.id == fact_id:
                updated = replace(fact, **changes)
                self.facts[index] = updated
                return updated
        return None

    def list_facts(self, limit: int) -> list[Fact]:
        if limit <= 0:
            return []
        ordered = sorted(self.facts, key=lambda f: f.created_at, reverse=True)
        return ordered[:limit]

    def list_due_reminders(self, now: datetime) -> list[Fact]:
        due = [
            f
            for f in self.facts
            if f.key == FactKey.REMINDER
            and f.remind_at is not None
            and f.remind_at <= now
            and not f.resolved
            and not f.reminded
        ]
        return sorted(due, key=lambda f: f.remind_at or now)


def create_persistence(config: Any, use_mock: bool = False) -> Persistence:
    """Create the persistence backend named in the storage config.

    Args:
        config: StorageConfig
        use_mock: Force the in-memory backend

    MONGODB_URI overrides the configured connection string.

    Returns:
        Persistence implementation
    """
    if use_mock or config.backend == "memory":
        logger.info("Using in-memory persistence")
        return InMemoryPersistence()

    logger.info(f"Using MongoDB persistence (database={config.database})")
    uri = os.environ.get("MONGODB_URI") or config.uri
    client = MongoStorageClient(uri=uri, database_name=config.database)
    return MongoPersistence(client)


__all__ = [
    "InMemoryPersistence",
    "MongoPersistence",
    "Persistence",
    "create_persistence",
]
