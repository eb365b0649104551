"""Tests for inference backends."""

import json
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from agenthub.exceptions import InferenceError
from agenthub.llm import (
    AnthropicBackend,
    OpenRouterBackend,
    create_inference_backend,
    get_available_providers,
)
from agenthub.llm.openrouter import FALLBACK_MODELS

MESSAGES = [
    {"role": "system", "content": "You are helpful."},
    {"role": "user", "content": "Hello"},
]


def _openrouter(handler, api_key="test_key") -> OpenRouterBackend:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenRouterBackend(api_key=api_key, site_url="http://test", client=client)


class TestOpenRouterBackend:
    """Tests for OpenRouterBackend."""

    @pytest.mark.asyncio
    async def test_chat_returns_completion(self):
        """Test a successful completion and the request it sends."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "choices": [{"message": {"content": "Hi there"}}],
                    "usage": {"total_tokens": 17},
                },
            )

        backend = _openrouter(handler)
        completion = await backend.chat(MESSAGES, "openai/gpt-4o", max_tokens=2000)

        assert completion.content == "Hi there"
        assert completion.token_usage == 17
        assert seen["url"] == "https://openrouter.ai/api/v1/chat/completions"
        assert seen["headers"]["authorization"] == "Bearer test_key"
        assert seen["headers"]["http-referer"] == "http://test"
        assert seen["body"]["model"] == "openai/gpt-4o"
        assert seen["body"]["messages"] == MESSAGES
        assert seen["body"]["temperature"] == 0.7
        await backend.close()

    @pytest.mark.asyncio
    async def test_max_tokens_capped(self):
        """Test max_tokens never exceeds the cap."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "x"}}]})

        backend = _openrouter(handler)
        completion = await backend.chat(MESSAGES, "m", max_tokens=10000)

        assert seen["body"]["max_tokens"] == 4000
        assert completion.token_usage == 0

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        """Test a non-2xx status becomes InferenceError."""
        backend = _openrouter(lambda request: httpx.Response(429, text="rate limited"))

        with pytest.raises(InferenceError, match="429"):
            await backend.chat(MESSAGES, "m")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test a network failure becomes InferenceError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        with pytest.raises(InferenceError, match="request failed"):
            await _openrouter(handler).chat(MESSAGES, "m")

    @pytest.mark.asyncio
    async def test_no_choices(self):
        backend = _openrouter(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(InferenceError, match="No response choices"):
            await backend.chat(MESSAGES, "m")

    @pytest.mark.asyncio
    async def test_missing_key(self, monkeypatch):
        """Test calls fail fast without an API key."""
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
        monkeypatch.delenv("OPENROUTER_KEY", raising=False)
        handler = Mock()
        backend = _openrouter(handler, api_key=None)

        assert backend.is_configured is False
        with pytest.raises(InferenceError, match="not configured"):
            await backend.chat(MESSAGES, "m")
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_messages(self):
        with pytest.raises(InferenceError):
            await _openrouter(Mock()).chat([], "m")

    @pytest.mark.asyncio
    async def test_available_models(self):
        backend = _openrouter(
            lambda request: httpx.Response(200, json={"data": [{"id": "a/b"}, {"id": "c/d"}]})
        )
        assert await backend.get_available_models() == ["a/b", "c/d"]

    @pytest.mark.asyncio
    async def test_available_models_fallback(self):
        backend = _openrouter(lambda request: httpx.Response(500))
        assert await backend.get_available_models() == FALLBACK_MODELS


class TestAnthropicBackend:
    """Tests for AnthropicBackend."""

    def test_init_without_api_key(self, monkeypatch):
        """Test initialization without API key raises error."""
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

        with patch("agenthub.llm.anthropic_provider.anthropic.AsyncAnthropic"):
            with pytest.raises(ValueError):
                AnthropicBackend()

    @pytest.mark.asyncio
    async def test_chat_sends_correct_format(self, monkeypatch):
        """Test system messages move to the system parameter."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test_key")

        mock_client = Mock()
        mock_response = Mock()
        mock_response.content = [Mock(type="text", text="Test response")]
        mock_response.usage = Mock(input_tokens=10, output_tokens=5)
        mock_client.messages.create = AsyncMock(return_value=mock_response)

        with patch(
            "agenthub.llm.anthropic_provider.anthropic.AsyncAnthropic",
            return_value=mock_client,
        ):
            backend = AnthropicBackend()
            completion = await backend.chat(MESSAGES, "anthropic/claude-3.5-sonnet")

        assert completion.content == "Test response"
        assert completion.token_usage == 15
        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["system"] == "You are helpful."
        assert kwargs["messages"] == [{"role": "user", "content": "Hello"}]
        assert kwargs["model"] == "claude-3.5-sonnet"
        assert kwargs["max_tokens"] == 2000

    @pytest.mark.asyncio
    async def test_foreign_model_uses_default(self, monkeypatch):
        """Test a non-Anthropic model id falls back to the configured model."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test_key")

        mock_client = Mock()
        mock_response = Mock()
        mock_response.content = [Mock(type="text", text="ok")]
        mock_response.usage = Mock(input_tokens=1, output_tokens=1)
        mock_client.messages.create = AsyncMock(return_value=mock_response)

        with patch(
            "agenthub.llm.anthropic_provider.anthropic.AsyncAnthropic",
            return_value=mock_client,
        ):
            backend = AnthropicBackend(model="claude-default")
            await backend.chat(MESSAGES, "openai/gpt-4o")

        assert mock_client.messages.create.call_args.kwargs["model"] == "claude-default"

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self, monkeypatch):
        """Test SDK errors surface as InferenceError."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test_key")

        mock_client = Mock()
        mock_client.messages.create = AsyncMock(side_effect=Exception("API Error"))

        with patch(
            "agenthub.llm.anthropic_provider.anthropic.AsyncAnthropic",
            return_value=mock_client,
        ):
            backend = AnthropicBackend()
            with pytest.raises(InferenceError, match="LLM API error"):
                await backend.chat(MESSAGES, "anthropic/claude-3.5-sonnet")


class TestFactory:
    """Tests for create_inference_backend()."""

    def test_providers(self):
        assert get_available_providers() == ["openrouter", "anthropic"]

    @pytest.mark.asyncio
    async def test_openrouter(self):
        backend = create_inference_backend("OpenRouter", api_key="k")
        assert isinstance(backend, OpenRouterBackend)
        await backend.close()

    def test_anthropic(self):
        with patch("agenthub.llm.anthropic_provider.anthropic.AsyncAnthropic"):
            backend = create_inference_backend("anthropic", api_key="k")
        assert isinstance(backend, AnthropicBackend)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            create_inference_backend("nope")
