"""SQLite storage implementation."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import AgentConfig, Conversation, MemoryItem, Message, TraceEvent


class IStorage(Protocol):
    """Persistent storage for agents, conversations, messages and memories."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    # Agent configs
    async def create_agent_config(self, config: AgentConfig) -> AgentConfig:
        """Insert an agent config. Names are unique."""
        ...

    async def get_agent_config_by_name(self, name: str) -> AgentConfig | None:
        """Get an agent config by its name."""
        ...

    async def get_all_agent_configs(self) -> list[AgentConfig]:
        """Get every agent config ordered by name."""
        ...

    async def get_active_agent_configs(self) -> list[AgentConfig]:
        """Get active agent configs ordered by name."""
        ...

    # Conversations
    async def create_conversation(self, user_id: str, title: str) -> Conversation:
        """Create a conversation."""
        ...

    async def get_conversation_by_id(self, conversation_id: str) -> Conversation | None:
        """Get a conversation by ID."""
        ...

    async def get_conversations_by_user_id(self, user_id: str) -> list[Conversation]:
        """Get a user's conversations, most recently updated first."""
        ...

    # Messages
    async def create_message(self, message: Message) -> Message:
        """Save a message."""
        ...

    async def get_messages_by_conversation_id(self, conversation_id: str) -> list[Message]:
        """Get all messages of a conversation in chronological order."""
        ...

    async def get_recent_messages_by_conversation_id(
        self, conversation_id: str, limit: int = 10
    ) -> list[Message]:
        """Get the last ``limit`` messages in chronological order."""
        ...

    # Memories
    async def create_memory(self, memory: MemoryItem) -> MemoryItem:
        """Save a memory."""
        ...

    async def get_memories_by_user_id(self, user_id: str, limit: int = 20) -> list[MemoryItem]:
        """Get a user's memories, newest first."""
        ...

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        ...

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        conversation_id: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


def _ts(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _parse_ts(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _connection(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    # Agent configs
    async def create_agent_config(self, config: AgentConfig) -> AgentConfig:
        """Insert an agent config. Names are unique."""
        conn = self._connection()
        config_id = config.id or str(uuid.uuid4())

        await conn.execute(
            """
            INSERT INTO agent_configs
            (id, name, description, system_prompt, is_active, capabilities, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                config_id,
                config.name,
                config.description,
                config.system_prompt,
                int(config.is_active),
                json.dumps(list(config.capabilities)),
                _ts(datetime.now(timezone.utc)),
            ),
        )
        await conn.commit()

        return AgentConfig(
            id=config_id,
            name=config.name,
            system_prompt=config.system_prompt,
            is_active=config.is_active,
            capabilities=list(config.capabilities),
            description=config.description,
        )

    async def get_agent_config_by_name(self, name: str) -> AgentConfig | None:
        """Get an agent config by its name."""
        conn = self._connection()
        cursor = await conn.execute(
            """
            SELECT id, name, description, system_prompt, is_active, capabilities
            FROM agent_configs
            WHERE name = ?
            """,
            (name,),
        )
        row = await cursor.fetchone()
        return self._row_to_agent_config(row) if row else None

    async def get_all_agent_configs(self) -> list[AgentConfig]:
        """Get every agent config ordered by name."""
        return await self._select_agent_configs(active_only=False)

    async def get_active_agent_configs(self) -> list[AgentConfig]:
        """Get active agent configs ordered by name."""
        return await self._select_agent_configs(active_only=True)

    async def _select_agent_configs(self, active_only: bool) -> list[AgentConfig]:
        conn = self._connection()
        where_clause = "WHERE is_active = 1" if active_only else ""
        cursor = await conn.execute(
            f"""
            SELECT id, name, description, system_prompt, is_active, capabilities
            FROM agent_configs
            {where_clause}
            ORDER BY name ASC
            """
        )
        rows = await cursor.fetchall()
        return [self._row_to_agent_config(row) for row in rows]

    @staticmethod
    def _row_to_agent_config(row) -> AgentConfig:
        return AgentConfig(
            id=row[0],
            name=row[1],
            description=row[2],
            system_prompt=row[3],
            is_active=bool(row[4]),
            capabilities=json.loads(row[5]),
        )

    # Conversations
    async def create_conversation(self, user_id: str, title: str) -> Conversation:
        """Create a conversation."""
        conn = self._connection()
        now = datetime.now(timezone.utc)
        conversation = Conversation(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            created_at=now,
            updated_at=now,
        )

        await conn.execute(
            """
            INSERT INTO conversations (id, user_id, title, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (conversation.id, user_id, title, _ts(now), _ts(now)),
        )
        await conn.commit()
        return conversation

    async def get_conversation_by_id(self, conversation_id: str) -> Conversation | None:
        """Get a conversation by ID."""
        conn = self._connection()
        cursor = await conn.execute(
            """
            SELECT id, user_id, title, created_at, updated_at
            FROM conversations
            WHERE id = ?
            """,
            (conversation_id,),
        )
        row = await cursor.fetchone()
        return self._row_to_conversation(row) if row else None

    async def get_conversations_by_user_id(self, user_id: str) -> list[Conversation]:
        """Get a user's conversations, most recently updated first."""
        conn = self._connection()
        cursor = await conn.execute(
            """
            SELECT id, user_id, title, created_at, updated_at
            FROM conversations
            WHERE user_id = ?
            ORDER BY updated_at DESC
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_conversation(row) for row in rows]

    @staticmethod
    def _row_to_conversation(row) -> Conversation:
        return Conversation(
            id=row[0],
            user_id=row[1],
            title=row[2],
            created_at=_parse_ts(row[3]),
            updated_at=_parse_ts(row[4]),
        )

    # Messages
    async def create_message(self, message: Message) -> Message:
        """Save a message and touch its conversation's updated_at."""
        conn = self._connection()
        if not message.id:
            message.id = str(uuid.uuid4())

        await conn.execute(
            """
            INSERT INTO messages
            (id, conversation_id, user_id, agent_type, content, metadata, token_count, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                message.id,
                message.conversation_id,
                message.user_id,
                message.agent_type,
                message.content,
                json.dumps(message.metadata),
                message.token_count,
                _ts(message.created_at),
            ),
        )
        await conn.execute(
            "UPDATE conversations SET updated_at = ? WHERE id = ?",
            (_ts(message.created_at), message.conversation_id),
        )
        await conn.commit()
        return message

    async def get_messages_by_conversation_id(self, conversation_id: str) -> list[Message]:
        """Get all messages of a conversation in chronological order."""
        conn = self._connection()
        cursor = await conn.execute(
            """
            SELECT id, conversation_id, user_id, agent_type, content, metadata,
                   token_count, created_at
            FROM messages
            WHERE conversation_id = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (conversation_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_message(row) for row in rows]

    async def get_recent_messages_by_conversation_id(
        self, conversation_id: str, limit: int = 10
    ) -> list[Message]:
        """Get the last ``limit`` messages in chronological order."""
        conn = self._connection()
        cursor = await conn.execute(
            """
            SELECT id, conversation_id, user_id, agent_type, content, metadata,
                   token_count, created_at
            FROM messages
            WHERE conversation_id = ?
            ORDER BY created_at DESC, rowid DESC
            LIMIT ?
            """,
            (conversation_id, limit),
        )
        rows = await cursor.fetchall()
        return [self._row_to_message(row) for row in reversed(rows)]

    @staticmethod
    def _row_to_message(row) -> Message:
        return Message(
            id=row[0],
            conversation_id=row[1],
            user_id=row[2],
            agent_type=row[3],
            content=row[4],
            metadata=json.loads(row[5]),
            token_count=row[6],
            created_at=_parse_ts(row[7]),
        )

    # Memories
    async def create_memory(self, memory: MemoryItem) -> MemoryItem:
        """Save a memory."""
        conn = self._connection()
        if not memory.id:
            memory.id = str(uuid.uuid4())

        await conn.execute(
            """
            INSERT INTO memories (id, user_id, content, metadata, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                memory.id,
                memory.user_id,
                memory.content,
                json.dumps(memory.metadata, default=str),
                _ts(memory.created_at),
            ),
        )
        await conn.commit()
        return memory

    async def get_memories_by_user_id(self, user_id: str, limit: int = 20) -> list[MemoryItem]:
        """Get a user's memories, newest first."""
        conn = self._connection()
        cursor = await conn.execute(
            """
            SELECT id, user_id, content, metadata, created_at
            FROM memories
            WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC
            LIMIT ?
            """,
            (user_id, limit),
        )
        rows = await cursor.fetchall()
        return [
            MemoryItem(
                id=row[0],
                user_id=row[1],
                content=row[2],
                metadata=json.loads(row[3]),
                created_at=_parse_ts(row[4]),
            )
            for row in rows
        ]

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        conn = self._connection()
        await conn.execute(
            """
            INSERT INTO trace_events (id, event_type, actor, conversation_id, data, timestamp)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                event.id or str(uuid.uuid4()),
                event.event_type,
                event.actor,
                event.conversation_id,
                json.dumps(event.data, default=str),
                _ts(event.timestamp),
            ),
        )
        await conn.commit()

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        conversation_id: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters, newest first."""
        conn = self._connection()

        conditions = []
        params: list = []

        if after:
            conditions.append("timestamp > ?")
            params.append(_ts(after))
        if event_types:
            placeholders = ",".join("?" * len(event_types))
            conditions.append(f"event_type IN ({placeholders})")
            params.extend(event_types)
        if actor:
            conditions.append("actor = ?")
            params.append(actor)
        if conversation_id:
            conditions.append("conversation_id = ?")
            params.append(conversation_id)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        query = f"""
            SELECT id, event_type, actor, conversation_id, data, timestamp
            FROM trace_events
            {where_clause}
            ORDER BY timestamp DESC, rowid DESC
            LIMIT ?
        """
        params.append(limit)

        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            TraceEvent(
                id=row[0],
                event_type=row[1],
                actor=row[2],
                conversation_id=row[3],
                data=json.loads(row[4]),
                timestamp=_parse_ts(row[5]),
            )
            for row in rows
        ]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        conn = self._connection()

        tables = [
            "messages",
            "conversations",
            "memories",
            "agent_configs",
            "trace_events",
        ]

        for table in tables:
            await conn.execute(f"DELETE FROM {table}")

        await conn.commit()
