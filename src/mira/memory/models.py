"""Data models for personal memory.

Defines the Fact and ChatMessage entities persisted for each user.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class Role(Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class FactKey:
    """Fixed fact keys. Any other key is a free-form attribute name."""

    REMINDER = "reminder"
    PROBLEM = "problem"
    NOTE = "note"
    NAME = "name"


def _from_storage_time(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes coming back from storage."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def to_storage_time(value: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive UTC for storage."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


@dataclass
class Fact:
    """A durable piece of personal information.

    Attributes:
        key: Fixed key (reminder, problem, note, name) or attribute name
        value: Fact content
        created_at: When the fact was captured
        remind_at: Trigger time for reminders
        resolved: Whether a problem/reminder has been resolved
        reminded: Whether the user has already been reminded
        id: Storage document ID
    """

    key: str
    value: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    remind_at: datetime | None = None
    resolved: bool = False
    reminded: bool = False
    id: str | None = None

    def with_id(self, fact_id: str) -> "Fact":
        """Return a copy carrying the storage ID."""
        return replace(self, id=fact_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "key": self.key,
            "value": self.value,
            "created_at": to_storage_time(self.created_at),
            "remind_at": to_storage_time(self.remind_at),
            "resolved": self.resolved,
            "reminded": self.reminded,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fact":
        """Create from MongoDB document."""
        return cls(
            id=str(data["_id"]) if data.get("_id") is not None else None,
            key=data.get("key", ""),
            value=data.get("value", ""),
            created_at=_from_storage_time(data.get("created_at")) or datetime.now(UTC),
            remind_at=_from_storage_time(data.get("remind_at")),
            resolved=bool(data.get("resolved", False)),
            reminded=bool(data.get("reminded", False)),
        )


@dataclass
class ChatMessage:
    """A single chat message in the conversation history."""

    role: Role
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": to_storage_time(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        """Create from MongoDB document."""
        return cls(
            id=str(data["_id"]) if data.get("_id") is not None else None,
            role=Role(data.get("role", "user")),
            content=data.get("content", ""),
            timestamp=_from_storage_time(data.get("timestamp")) or datetime.now(UTC),
        )


__all__ = ["ChatMessage", "Fact", "FactKey", "Role", "to_storage_time"]
