"""ConversationService implementation."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from ..agents import AgentOrchestrator, default_roster
from ..logging_config import get_logger
from ..models import AgentConfig, AgentRequest, Conversation, Message
from ..storage import IStorage
from ..tracker import ITracker
from .cache import MessageCache

logger = get_logger(__name__)

ACTOR = "conversation_service"
DEFAULT_TITLE = "New Conversation"


@dataclass
class SendResult:
    """The two messages written for one exchange."""

    user_message: Message
    agent_message: Message
    token_usage: int


class IConversationService(Protocol):
    """Chat threads, their messages and the agent roster."""

    async def send_message(
        self,
        user_id: str,
        conversation_id: str,
        content: str,
        agent_type: str | None = None,
        model: str | None = None,
    ) -> SendResult:
        """Run the orchestrator and record both sides of the exchange."""
        ...

    async def get_messages(self, conversation_id: str, limit: int = 50) -> list[Message]:
        """Stored messages, or cached ones when storage has none."""
        ...

    async def create_conversation(self, user_id: str, title: str = DEFAULT_TITLE) -> Conversation:
        ...

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        ...

    async def list_agents(self) -> list[AgentConfig]:
        ...

    async def get_token_count(self, conversation_id: str) -> int:
        ...


class ConversationService:
    """Front door for chat: persistence around AgentOrchestrator.

    Messages are written in two phases. The cache always takes the write;
    the database write may fail and is only logged, so a message survives a
    database outage for as long as the process lives.
    """

    def __init__(
        self,
        orchestrator: AgentOrchestrator,
        storage: IStorage,
        tracker: ITracker | None = None,
        cache: MessageCache | None = None,
        default_agent: str = "Communication",
    ):
        self._orchestrator = orchestrator
        self._storage = storage
        self._tracker = tracker
        self._cache = cache or MessageCache()
        self._default_agent = default_agent

    @property
    def cache(self) -> MessageCache:
        return self._cache

    async def _track(self, event_type: str, conversation_id: str, data: dict) -> None:
        if self._tracker:
            await self._tracker.track(event_type, ACTOR, data, conversation_id=conversation_id)

    async def send_message(
        self,
        user_id: str,
        conversation_id: str,
        content: str,
        agent_type: str | None = None,
        model: str | None = None,
    ) -> SendResult:
        """Run the orchestrator and record both sides of the exchange."""
        agent_type = agent_type or self._default_agent
        logger.info(
            "Message received for %s: %s", agent_type, content[:100],
            extra={"conversation_id": conversation_id, "user_id": user_id},
        )
        await self._track(
            "message_received",
            conversation_id,
            {"user_id": user_id, "agent_type": agent_type, "message_text": content},
        )

        user_message = Message(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            user_id=user_id,
            content=content,
            created_at=datetime.now(timezone.utc),
        )

        response = await self._orchestrator.process_agent_request(
            AgentRequest(
                user_id=user_id,
                conversation_id=conversation_id,
                content=content,
                agent_type=agent_type,
                model=model,
            )
        )

        agent_message = Message(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            agent_type=response.agent_type,
            content=response.content,
            token_count=response.token_usage,
            metadata=dict(response.metadata),
            created_at=datetime.now(timezone.utc),
        )

        await self._save(user_message)
        await self._save(agent_message)

        await self._track(
            "message_responded",
            conversation_id,
            {
                "agent_type": response.agent_type,
                "token_usage": response.token_usage,
                "error": bool(response.metadata.get("error")),
            },
        )
        return SendResult(
            user_message=user_message,
            agent_message=agent_message,
            token_usage=response.token_usage,
        )

    async def _save(self, message: Message) -> None:
        self._cache.add_message(message)
        try:
            await self._storage.create_message(message)
        except Exception as e:
            logger.warning(
                "Database write failed, message %s kept in cache only: %s", message.id, e,
                extra={"conversation_id": message.conversation_id},
            )

    async def get_messages(self, conversation_id: str, limit: int = 50) -> list[Message]:
        """Stored messages, or cached ones when storage fails or has none."""
        try:
            messages = await self._storage.get_recent_messages_by_conversation_id(
                conversation_id, limit
            )
            if messages:
                return messages
        except Exception as e:
            logger.warning("Database read failed, serving cached messages: %s", e)
        return self._cache.get_messages(conversation_id, limit)

    async def create_conversation(self, user_id: str, title: str = DEFAULT_TITLE) -> Conversation:
        conversation = await self._storage.create_conversation(user_id, title or DEFAULT_TITLE)
        logger.info("Conversation %s created", conversation.id, extra={"user_id": user_id})
        return conversation

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        return await self._storage.get_conversations_by_user_id(user_id)

    async def list_agents(self) -> list[AgentConfig]:
        """
        Every stored agent config.

        An empty store is seeded with the built-in roster first. If storage
        fails, the built-in roster is returned without persisting it.
        """
        try:
            configs = await self._storage.get_all_agent_configs()
            if configs:
                return configs

            logger.info("No agent configs stored, seeding the built-in roster")
            return [
                await self._storage.create_agent_config(config) for config in default_roster()
            ]
        except Exception as e:
            logger.warning("Agent configs unavailable, using built-in roster: %s", e)
            return default_roster()

    async def get_token_count(self, conversation_id: str) -> int:
        """Sum of token counts over the conversation's stored messages."""
        messages = await self._storage.get_messages_by_conversation_id(conversation_id)
        return sum(message.token_count for message in messages)

    def clear_cache(self) -> None:
        self._cache.clear()
