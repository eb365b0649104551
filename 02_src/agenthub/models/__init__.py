"""Core data models for Agent Hub."""

from .agents import (
    MULTI_AGENT,
    AgentConfig,
    AgentRequest,
    AgentResponse,
    CollaborationState,
    CollaborationStatus,
    CoordinationPlan,
    Progress,
    Strategy,
)
from .messages import ChatMessage, Conversation, MemoryContext, MemoryItem, Message
from .tracing import TraceEvent

__all__ = [
    # Agents
    "MULTI_AGENT",
    "AgentRequest",
    "AgentConfig",
    "AgentResponse",
    "Strategy",
    "CoordinationPlan",
    "CollaborationState",
    "CollaborationStatus",
    "Progress",
    # Messages
    "ChatMessage",
    "Conversation",
    "Message",
    "MemoryItem",
    "MemoryContext",
    # Tracing
    "TraceEvent",
]
