"""Memory service: stores interaction snippets and finds relevant ones."""

import re
import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger
from ..models import MemoryContext, MemoryItem
from ..storage import IStorage

logger = get_logger(__name__)

_WORD_RE = re.compile(r"\w+")

# Most recent memories considered per search.
CANDIDATE_POOL = 100


class IMemoryService(Protocol):
    """Similarity-searchable store of past interactions."""

    async def store_memory(self, context: MemoryContext) -> MemoryItem:
        """Persist a memory."""
        ...

    async def search_memories(
        self,
        user_id: str,
        query: str,
        similarity_threshold: float = 0.7,
        limit: int = 10,
    ) -> list[MemoryItem]:
        """Return the user's memories most similar to ``query``."""
        ...

    def get_service_status(self) -> dict:
        """Report availability for the health endpoint."""
        ...


def _words(text: str) -> set[str]:
    return {word.lower() for word in _WORD_RE.findall(text)}


def similarity(query: str, content: str) -> float:
    """Share of the query's distinct words that appear in ``content``."""
    query_words = _words(query)
    if not query_words:
        return 0.0
    return len(query_words & _words(content)) / len(query_words)


class MemoryService:
    """Local memory store backed by Storage."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def store_memory(self, context: MemoryContext) -> MemoryItem:
        """Persist a memory. Errors propagate to the caller."""
        now = datetime.now(timezone.utc)
        memory = MemoryItem(
            id=str(uuid.uuid4()),
            user_id=context.user_id,
            content=context.content,
            created_at=now,
            metadata={
                "conversation_id": context.conversation_id,
                "agent_type": context.agent_type,
                "timestamp": now.isoformat(),
                **context.metadata,
            },
        )
        return await self._storage.create_memory(memory)

    async def search_memories(
        self,
        user_id: str,
        query: str,
        similarity_threshold: float = 0.7,
        limit: int = 10,
    ) -> list[MemoryItem]:
        """Score recent memories against ``query``; best matches first."""
        candidates = await self._storage.get_memories_by_user_id(user_id, limit=CANDIDATE_POOL)

        scored = []
        for memory in candidates:
            score = similarity(query, memory.content)
            if score >= similarity_threshold:
                memory.similarity = score
                scored.append(memory)

        # Candidates arrive newest first; a stable sort keeps recency as tiebreak.
        scored.sort(key=lambda m: m.similarity, reverse=True)
        logger.debug(
            "Memory search for %s matched %s of %s candidates",
            user_id,
            len(scored),
            len(candidates),
        )
        return scored[:limit]

    def get_service_status(self) -> dict:
        return {"status": "active", "message": "Local memory storage active"}
