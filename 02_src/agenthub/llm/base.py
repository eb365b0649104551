"""Inference backend abstraction."""

from dataclasses import dataclass
from typing import Protocol

from ..models import ChatMessage

# Hard cap applied by every backend regardless of the caller's request.
MAX_TOKENS_CAP = 4000


@dataclass
class ChatCompletion:
    """Text and token usage of one completion."""

    content: str
    token_usage: int = 0


class IInferenceBackend(Protocol):
    """Model id in, text and token count out."""

    @property
    def is_configured(self) -> bool:
        """Whether credentials are present."""
        ...

    async def chat(
        self,
        messages: list[ChatMessage],
        model: str,
        max_tokens: int = 2000,
    ) -> ChatCompletion:
        """Generate a completion for an ordered message list."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
