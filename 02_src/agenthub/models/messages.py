"""Conversation and memory data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, TypedDict


class ChatMessage(TypedDict):
    """A message in the format sent to the inference backend."""

    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class Conversation:
    """A chat thread owned by a user."""

    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime


@dataclass
class Message:
    """A stored chat message.

    User messages carry ``user_id``; agent messages carry ``agent_type``.
    """

    id: str
    conversation_id: str
    content: str
    created_at: datetime
    user_id: str | None = None
    agent_type: str | None = None
    token_count: int = 0
    metadata: dict = field(default_factory=dict)


@dataclass
class MemoryItem:
    """A stored snippet retrievable by similarity search."""

    id: str
    user_id: str
    content: str
    created_at: datetime
    metadata: dict = field(default_factory=dict)
    similarity: float | None = None


@dataclass
class MemoryContext:
    """Input to MemoryService.store_memory()."""

    user_id: str
    content: str
    conversation_id: str | None = None
    agent_type: str | None = None
    metadata: dict = field(default_factory=dict)
