"""OpenRouter inference backend over httpx."""

import os

import httpx

from ..exceptions import InferenceError
from ..logging_config import get_logger
from ..models import ChatMessage
from .base import MAX_TOKENS_CAP, ChatCompletion

logger = get_logger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

FALLBACK_MODELS = [
    "anthropic/claude-3.5-sonnet",
    "openai/gpt-4o",
    "openai/gpt-4o-mini",
    "qwen/qwen-2.5-coder-32b-instruct",
]


class OpenRouterBackend:
    """Chat completions through the OpenRouter HTTP API."""

    def __init__(
        self,
        api_key: str | None = None,
        site_url: str | None = None,
        base_url: str = OPENROUTER_BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ):
        self._api_key = (
            api_key or os.getenv("OPENROUTER_API_KEY") or os.getenv("OPENROUTER_KEY") or ""
        )
        self._site_url = site_url or os.getenv("SITE_URL", "http://localhost:5000")
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

        if not self._api_key:
            logger.warning("OpenRouter API key not configured. Agent responses will fail.")

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self._site_url,
            "X-Title": "Agent Hub",
        }

    async def chat(
        self,
        messages: list[ChatMessage],
        model: str = "anthropic/claude-3.5-sonnet",
        max_tokens: int = 2000,
    ) -> ChatCompletion:
        """Generate a completion using the OpenRouter chat endpoint."""
        if not self._api_key:
            raise InferenceError(
                "OpenRouter API key not configured. Set OPENROUTER_API_KEY."
            )
        if not messages:
            raise InferenceError("No messages provided for chat completion")

        payload = {
            "model": model,
            "messages": list(messages),
            "max_tokens": min(max_tokens, MAX_TOKENS_CAP),
            "temperature": 0.7,
        }

        try:
            response = await self._client.post(
                f"{self._base_url}/chat/completions",
                headers=self._headers(),
                json=payload,
            )
        except httpx.HTTPError as e:
            raise InferenceError(f"OpenRouter request failed: {e}") from e

        if response.status_code >= 400:
            raise InferenceError(
                f"OpenRouter API error: {response.status_code} - {response.text}"
            )

        data = response.json()
        choices = data.get("choices") or []
        if not choices:
            raise InferenceError("No response choices from OpenRouter")

        usage = data.get("usage") or {}
        return ChatCompletion(
            content=choices[0]["message"]["content"] or "",
            token_usage=int(usage.get("total_tokens") or 0),
        )

    async def get_available_models(self) -> list[str]:
        """List model ids offered by OpenRouter, or a curated list on failure."""
        try:
            response = await self._client.get(
                f"{self._base_url}/models",
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
            return [model["id"] for model in response.json().get("data", [])]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.warning("Failed to fetch available models: %s", e)
            return list(FALLBACK_MODELS)

    async def close(self) -> None:
        await self._client.aclose()
