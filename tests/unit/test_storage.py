"""Unit tests for MongoDB storage using mongomock."""

from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from mongomock import MongoClient
from pymongo.errors import ConnectionFailure

from mira.memory.models import ChatMessage, Fact, FactKey, Role
from mira.storage.client import MongoStorageClient, retry_on_connection_failure
from mira.storage.persistence import MongoPersistence
from mira.storage.repositories import ChatRepository, FactRepository

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_db():
    """Create a mock MongoDB database for testing."""
    client = MongoClient()
    return client["mira_test"]


@pytest.fixture
def chat_repo(mock_db) -> ChatRepository:
    """Create a ChatRepository over the mock database."""
    return ChatRepository(mock_db["chat_messages"])


@pytest.fixture
def fact_repo(mock_db) -> FactRepository:
    """Create a FactRepository over the mock database."""
    return FactRepository(mock_db["facts"])


class TestModels:
    """Tests for storage serialization of memory models."""

    def test_fact_stores_naive_utc(self) -> None:
        """Test aware datetimes are stored as naive UTC."""
        ist = timezone(timedelta(hours=5, minutes=30))
        remind_at = datetime(2024, 1, 15, 18, 0, tzinfo=ist)
        fact = Fact(key=FactKey.REMINDER, value="call mom", created_at=NOW, remind_at=remind_at)

        data = fact.to_dict()

        assert data["created_at"] == datetime(2024, 1, 15, 12, 0)
        assert data["remind_at"] == datetime(2024, 1, 15, 12, 30)
        assert "_id" not in data

    def test_fact_from_dict_restores_utc(self) -> None:
        """Test naive stored datetimes come back as UTC."""
        fact = Fact.from_dict(
            {
                "_id": "abc",
                "key": "note",
                "value": "keys under mat",
                "created_at": datetime(2024, 1, 15, 12, 0),
                "remind_at": None,
            }
        )

        assert fact.id == "abc"
        assert fact.created_at == NOW
        assert fact.resolved is False
        assert fact.reminded is False

    def test_chat_message_round_trip(self) -> None:
        """Test chat messages survive a storage round trip."""
        message = ChatMessage(role=Role.ASSISTANT, content="Hello", timestamp=NOW)

        restored = ChatMessage.from_dict({**message.to_dict(), "_id": "1"})

        assert restored.role == Role.ASSISTANT
        assert restored.content == "Hello"
        assert restored.timestamp == NOW


class TestChatRepository:
    """Tests for ChatRepository."""

    def test_append_assigns_id(self, chat_repo: ChatRepository) -> None:
        """Test stored messages get a document ID."""
        stored = chat_repo.append(ChatMessage(role=Role.USER, content="hi"))
        assert stored.id is not None

    def test_get_recent_is_chronological(self, chat_repo: ChatRepository) -> None:
        """Test the latest messages come back oldest first."""
        for i in range(5):
            chat_repo.append(
                ChatMessage(role=Role.USER, content=f"m{i}", timestamp=NOW + timedelta(seconds=i))
            )

        recent = chat_repo.get_recent(limit=3)

        assert [m.content for m in recent] == ["m2", "m3", "m4"]

    def test_get_recent_zero(self, chat_repo: ChatRepository) -> None:
        """Test a zero limit returns nothing."""
        chat_repo.append(ChatMessage(role=Role.USER, content="hi"))
        assert chat_repo.get_recent(limit=0) == []


class TestFactRepository:
    """Tests for FactRepository."""

    def test_create_and_list(self, fact_repo: FactRepository) -> None:
        """Test facts list most recent first."""
        fact_repo.create(Fact(key="name", value="Aditya", created_at=NOW))
        fact_repo.create(Fact(key="city", value="Pune", created_at=NOW + timedelta(minutes=1)))

        facts = fact_repo.get_recent(limit=10)

        assert [f.value for f in facts] == ["Pune", "Aditya"]
        assert all(f.id for f in facts)

    def test_update_patch(self, fact_repo: FactRepository) -> None:
        """Test partial updates return the new document."""
        stored = fact_repo.create(Fact(key=FactKey.PROBLEM, value="slow wifi", created_at=NOW))

        updated = fact_repo.update(stored.id, {"reminded": True})

        assert updated is not None
        assert updated.reminded is True
        assert updated.resolved is False
        assert updated.value == "slow wifi"

    def test_update_ignores_unknown_fields(self, fact_repo: FactRepository) -> None:
        """Test only patchable fields are written."""
        stored = fact_repo.create(Fact(key=FactKey.NOTE, value="x", created_at=NOW))

        updated = fact_repo.update(stored.id, {"key": "hacked"})

        assert updated is not None
        assert updated.key == FactKey.NOTE

    def test_update_missing(self, fact_repo: FactRepository) -> None:
        """Test unknown and malformed IDs return None."""
        assert fact_repo.update("not-an-object-id", {"resolved": True}) is None
        assert fact_repo.update("65a4f0c2e4b0a1b2c3d4e5f6", {"resolved": True}) is None

    def test_due_reminders(self, fact_repo: FactRepository) -> None:
        """Test only undelivered due reminders are returned, earliest first."""
        fact_repo.create(
            Fact(key=FactKey.REMINDER, value="later", remind_at=NOW - timedelta(minutes=5))
        )
        fact_repo.create(
            Fact(key=FactKey.REMINDER, value="earlier", remind_at=NOW - timedelta(hours=1))
        )
        fact_repo.create(
            Fact(key=FactKey.REMINDER, value="future", remind_at=NOW + timedelta(hours=1))
        )
        fact_repo.create(
            Fact(
                key=FactKey.REMINDER,
                value="done",
                remind_at=NOW - timedelta(hours=2),
                reminded=True,
            )
        )
        fact_repo.create(Fact(key=FactKey.REMINDER, value="no time"))
        fact_repo.create(Fact(key=FactKey.NOTE, value="not a reminder"))

        due = fact_repo.get_due_reminders(NOW)

        assert [f.value for f in due] == ["earlier", "later"]
        assert due[0].remind_at == NOW - timedelta(hours=1)


class TestRetryDecorator:
    """Tests for retry_on_connection_failure."""

    def test_retries_then_succeeds(self) -> None:
        """Test transient failures are retried."""
        calls = MagicMock(side_effect=[ConnectionFailure("down"), "ok"])

        @retry_on_connection_failure(max_retries=3, base_delay=0.01)
        def query() -> str:
            return calls()

        with patch("mira.storage.client.time.sleep") as sleep:
            assert query() == "ok"

        assert calls.call_count == 2
        sleep.assert_called_once_with(0.01)

    def test_gives_up(self) -> None:
        """Test the last failure is raised."""

        @retry_on_connection_failure(max_retries=2, base_delay=0.01)
        def query() -> str:
            raise ConnectionFailure("still down")

        with patch("mira.storage.client.time.sleep"):
            with pytest.raises(ConnectionFailure):
                query()


class TestMongoPersistence:
    """Tests for MongoPersistence over a mongomock client."""

    @pytest.fixture
    def persistence(self) -> MongoPersistence:
        """Create persistence over an in-process mock client."""
        client = MongoStorageClient(database_name="mira_test", client=MongoClient())
        return MongoPersistence(client)

    def test_connects_on_first_use(self, persistence: MongoPersistence) -> None:
        """Test the client is connected lazily."""
        persistence.append_chat_message(ChatMessage(role=Role.USER, content="hi"))

        assert [m.content for m in persistence.list_recent_chat(10)] == ["hi"]

    def test_fact_lifecycle(self, persistence: MongoPersistence) -> None:
        """Test create, update and due listing through the protocol."""
        stored = persistence.create_fact(
            Fact(key=FactKey.REMINDER, value="stretch", remind_at=NOW - timedelta(minutes=1))
        )

        assert [f.value for f in persistence.list_due_reminders(NOW)] == ["stretch"]

        persistence.update_fact(stored.id, {"reminded": True})

        assert persistence.list_due_reminders(NOW) == []
        assert persistence.list_facts(5)[0].reminded is True

    def test_close(self, persistence: MongoPersistence) -> None:
        """Test close disconnects without dropping the injected client."""
        persistence.list_facts(1)
        persistence.close()

        assert persistence.list_facts(1) == []


class TestMongoStorageClient:
    """Tests for MongoStorageClient."""

    def test_repositories_require_connection(self) -> None:
        """Test repository access before connect fails."""
        client = MongoStorageClient(client=MongoClient())

        with pytest.raises(RuntimeError, match="Not connected"):
            _ = client.facts

    def test_context_manager(self) -> None:
        """Test connect on enter and disconnect on exit."""
        with MongoStorageClient(client=MongoClient()) as client:
            assert client.is_connected() is True
            assert client.chat is not None

        assert client.is_connected() is False
