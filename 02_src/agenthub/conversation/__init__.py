"""Conversation module."""

from .cache import MessageCache
from .service import ConversationService, IConversationService, SendResult

__all__ = ["ConversationService", "IConversationService", "MessageCache", "SendResult"]
