"""Session working set of chat history and facts.

A read-through cache loaded from persistence at session start and
appended to after every successful persist call. Persistence remains the
system of record.
"""

import logging
from typing import TYPE_CHECKING

from .models import ChatMessage, Fact, Role

if TYPE_CHECKING:
    from ..storage.persistence import Persistence

logger = logging.getLogger(__name__)


class SessionMemory:
    """In-memory chat/fact working set for one assistant session."""

    def __init__(
        self,
        persistence: "Persistence",
        chat_limit: int = 20,
        facts_limit: int = 20,
    ) -> None:
        """Initialize the working set.

        Args:
            persistence: Backing store
            chat_limit: Number of chat messages loaded at session start
            facts_limit: Number of facts loaded at session start
        """
        self._persistence = persistence
        self._chat_limit = chat_limit
        self._facts_limit = facts_limit
        self._chat: list[ChatMessage] = []
        self._facts: list[Fact] = []
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """Whether load() has run."""
        return self._loaded

    def load(self) -> None:
        """Read chat history and facts from persistence."""
        self._loaded = True
        try:
            self._chat = list(self._persistence.list_recent_chat(self._chat_limit))
            self._facts = list(self._persistence.list_facts(self._facts_limit))
            logger.info(f"Loaded {len(self._chat)} chat messages and {len(self._facts)} facts")
        except Exception as e:
            logger.warning(f"Failed to load session memory: {e}")

    def append_message(self, role: Role, content: str) -> ChatMessage | None:
        """Persist a chat message and mirror it locally.

        Returns:
            The stored message, or None if persistence failed
        """
        try:
            stored = self._persistence.append_chat_message(ChatMessage(role=role, content=content))
        except Exception as e:
            logger.warning(f"Failed to save chat message: {e}")
            return None
        self._chat.append(stored)
        return stored

    def add_fact(self, fact: Fact) -> Fact | None:
        """Persist a fact and mirror it locally (most recent first).

        Returns:
            The stored fact, or None if persistence failed
        """
        try:
            stored = self._persistence.create_fact(fact)
        except Exception as e:
            logger.warning(f"Failed to save fact {fact.key}: {e}")
            return None
        self._facts.insert(0, stored)
        return stored

    def update_fact(self, fact_id: str, **patch: object) -> Fact | None:
        """Patch a stored fact and refresh the local copy."""
        try:
            updated = self._persistence.update_fact(fact_id, patch)
        except Exception as e:
            logger.warning(f"Failed to update fact {fact_id}: {e}")
            return None
        if updated is not None:
            self._facts = [updated if f.id == fact_id else f for f in self._facts]
        return updated

    def recent_chat(self, window: int) -> list[ChatMessage]:
        """Return the last `window` chat messages in creation order."""
        if window <= 0:
            return []
        return self._chat[-window:]

    @property
    def chat(self) -> list[ChatMessage]:
        """Snapshot of the chat working set."""
        return self._chat.copy()

    @property
    def facts(self) -> list[Fact]:
        """Snapshot of the fact working set, most recent first."""
        return self._facts.copy()

    @property
    def persistence(self) -> "Persistence":
        """Backing store."""
        return self._persistence


__all__ = ["SessionMemory"]
