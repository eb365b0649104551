"""Inference backend using the Anthropic Claude API."""

import os

import anthropic

from ..exceptions import InferenceError
from ..models import ChatMessage
from .base import MAX_TOKENS_CAP, ChatCompletion

ANTHROPIC_PREFIX = "anthropic/"


class AnthropicBackend:
    """Anthropic Claude API backend.

    Model ids use the ``provider/model`` form of the agent roster; ids
    outside the ``anthropic/`` namespace are served by the configured model.
    """

    def __init__(self, api_key: str | None = None, model: str = "claude-3-5-sonnet-20241022"):
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self._model = model
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)

    @property
    def is_configured(self) -> bool:
        return True

    def _resolve_model(self, model: str) -> str:
        if model.startswith(ANTHROPIC_PREFIX):
            return model[len(ANTHROPIC_PREFIX):]
        return self._model

    async def chat(
        self,
        messages: list[ChatMessage],
        model: str,
        max_tokens: int = 2000,
    ) -> ChatCompletion:
        """Generate completion using Claude API."""
        # Anthropic takes the system prompt as a separate parameter.
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        turns = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] != "system"
        ]
        if not turns:
            raise InferenceError("No messages provided for chat completion")

        kwargs = {
            "model": self._resolve_model(model),
            "messages": turns,
            "max_tokens": min(max_tokens, MAX_TOKENS_CAP),
        }
        if system_parts:
            kwargs["system"] = "\n\n".join(system_parts)

        try:
            response = await self._client.messages.create(**kwargs)
        except Exception as e:
            raise InferenceError(f"LLM API error: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        usage = response.usage
        return ChatCompletion(
            content=text,
            token_usage=int(usage.input_tokens) + int(usage.output_tokens),
        )

    async def close(self) -> None:
        await self._client.close()
