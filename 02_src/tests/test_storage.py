"""Tests for Storage."""

from datetime import datetime, timedelta, timezone

import pytest

from agenthub.models import AgentConfig, MemoryItem, Message, TraceEvent
from agenthub.storage import Storage


def _message(conversation_id: str, content: str, offset: int = 0, **kwargs) -> Message:
    return Message(
        id="",
        conversation_id=conversation_id,
        content=content,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=offset),
        **kwargs,
    )


class TestStorageInit:
    """Tests for Storage initialization."""

    async def test_init_creates_tables(self, storage):
        """Test that init creates all tables."""
        async with storage._conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ) as cursor:
            tables = [row[0] for row in await cursor.fetchall()]
            assert "agent_configs" in tables
            assert "conversations" in tables
            assert "messages" in tables
            assert "memories" in tables
            assert "trace_events" in tables

    async def test_use_before_init(self):
        """Test that an uninitialized store refuses queries."""
        with pytest.raises(RuntimeError, match="Storage not initialized"):
            await Storage(":memory:").get_all_agent_configs()


class TestStorageAgentConfigs:
    """Tests for agent config storage."""

    async def test_create_and_get_by_name(self, storage):
        """Test a config round-trips through the database."""
        created = await storage.create_agent_config(
            AgentConfig(
                name="Coder",
                system_prompt="You write code.",
                capabilities=["coding"],
                description="Coder agent",
            )
        )

        retrieved = await storage.get_agent_config_by_name("Coder")
        assert retrieved == created
        assert retrieved.capabilities == ["coding"]

    async def test_get_missing(self, storage):
        """Test a missing name returns None."""
        assert await storage.get_agent_config_by_name("Nobody") is None

    async def test_active_filter(self, storage):
        """Test inactive configs are excluded from the active list."""
        await storage.create_agent_config(AgentConfig(name="Coder", system_prompt="p"))
        await storage.create_agent_config(
            AgentConfig(name="Email", system_prompt="p", is_active=False)
        )

        assert [c.name for c in await storage.get_all_agent_configs()] == ["Coder", "Email"]
        assert [c.name for c in await storage.get_active_agent_configs()] == ["Coder"]


class TestStorageConversations:
    """Tests for conversation storage."""

    async def test_create_and_get(self, storage):
        """Test creating and retrieving a conversation."""
        conversation = await storage.create_conversation("user1", "Planning")

        retrieved = await storage.get_conversation_by_id(conversation.id)
        assert retrieved.user_id == "user1"
        assert retrieved.title == "Planning"

    async def test_get_missing(self, storage):
        assert await storage.get_conversation_by_id("missing") is None

    async def test_by_user_most_recent_first(self, storage):
        """Test a new message moves its conversation to the top."""
        first = await storage.create_conversation("user1", "First")
        second = await storage.create_conversation("user1", "Second")
        await storage.create_conversation("user2", "Other")

        await storage.create_message(
            Message(
                id="",
                conversation_id=first.id,
                content="bump",
                created_at=datetime.now(timezone.utc) + timedelta(seconds=5),
            )
        )

        conversations = await storage.get_conversations_by_user_id("user1")
        assert [c.id for c in conversations] == [first.id, second.id]


class TestStorageMessages:
    """Tests for message storage."""

    async def test_create_assigns_id(self, storage):
        message = await storage.create_message(_message("conv1", "hi", user_id="user1"))
        assert message.id

    async def test_chronological_order(self, storage):
        """Test messages come back oldest first."""
        await storage.create_message(_message("conv1", "second", offset=2))
        await storage.create_message(_message("conv1", "first", offset=1))
        await storage.create_message(_message("conv2", "elsewhere", offset=0))

        messages = await storage.get_messages_by_conversation_id("conv1")
        assert [m.content for m in messages] == ["first", "second"]

    async def test_fields_round_trip(self, storage):
        """Test agent fields, token count and metadata are preserved."""
        await storage.create_message(
            _message(
                "conv1",
                "answer",
                agent_type="Coder",
                token_count=42,
                metadata={"model": "qwen"},
            )
        )

        (message,) = await storage.get_messages_by_conversation_id("conv1")
        assert message.agent_type == "Coder"
        assert message.user_id is None
        assert message.token_count == 42
        assert message.metadata == {"model": "qwen"}
        assert message.created_at.tzinfo is not None

    async def test_recent_messages(self, storage):
        """Test the recent tail is returned in chronological order."""
        for i in range(5):
            await storage.create_message(_message("conv1", f"m{i}", offset=i))

        recent = await storage.get_recent_messages_by_conversation_id("conv1", limit=2)
        assert [m.content for m in recent] == ["m3", "m4"]


class TestStorageMemories:
    """Tests for memory storage."""

    async def test_newest_first_with_limit(self, storage):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for i in range(3):
            await storage.create_memory(
                MemoryItem(
                    id="",
                    user_id="user1",
                    content=f"memory {i}",
                    created_at=base + timedelta(minutes=i),
                    metadata={"n": i},
                )
            )

        memories = await storage.get_memories_by_user_id("user1", limit=2)
        assert [m.content for m in memories] == ["memory 2", "memory 1"]
        assert memories[0].metadata == {"n": 2}
        assert await storage.get_memories_by_user_id("user2") == []


class TestStorageTraceEvents:
    """Tests for trace event storage."""

    async def _save(self, storage, event_type, actor="orchestrator", conversation_id=None, at=0):
        await storage.save_trace_event(
            TraceEvent(
                id=f"{event_type}-{at}",
                event_type=event_type,
                actor=actor,
                timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=at),
                data={"at": at},
                conversation_id=conversation_id,
            )
        )

    async def test_filters(self, storage):
        """Test event type, actor, conversation and time filters."""
        await self._save(storage, "agent_request_started", conversation_id="conv1", at=1)
        await self._save(storage, "coordination_planned", conversation_id="conv1", at=2)
        await self._save(storage, "message_received", actor="conversation_service", at=3)

        by_type = await storage.get_trace_events(event_types=["coordination_planned"])
        assert [e.event_type for e in by_type] == ["coordination_planned"]

        by_actor = await storage.get_trace_events(actor="conversation_service")
        assert [e.event_type for e in by_actor] == ["message_received"]

        by_conversation = await storage.get_trace_events(conversation_id="conv1")
        assert len(by_conversation) == 2

        after = await storage.get_trace_events(
            after=datetime(2024, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        )
        assert [e.data["at"] for e in after] == [3, 2]

    async def test_limit(self, storage):
        for i in range(5):
            await self._save(storage, "event", at=i)

        events = await storage.get_trace_events(limit=3)
        assert len(events) == 3


class TestStorageClear:
    """Tests for Storage.clear()."""

    async def test_clear_removes_everything(self, storage):
        await storage.create_agent_config(AgentConfig(name="Coder", system_prompt="p"))
        conversation = await storage.create_conversation("user1", "t")
        await storage.create_message(_message(conversation.id, "hi"))

        await storage.clear()

        assert await storage.get_all_agent_configs() == []
        assert await storage.get_conversation_by_id(conversation.id) is None
        assert await storage.get_messages_by_conversation_id(conversation.id) == []
