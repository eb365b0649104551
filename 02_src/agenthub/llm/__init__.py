"""LLM module."""

from .anthropic_provider import AnthropicBackend
from .base import ChatCompletion, IInferenceBackend
from .factory import create_inference_backend, get_available_providers
from .openrouter import OpenRouterBackend

__all__ = [
    "AnthropicBackend",
    "ChatCompletion",
    "IInferenceBackend",
    "OpenRouterBackend",
    "create_inference_backend",
    "get_available_providers",
]
