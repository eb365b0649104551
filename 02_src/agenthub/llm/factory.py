"""Factory for inference backends."""

from .base import IInferenceBackend

_PROVIDERS = ("openrouter", "anthropic")


def get_available_providers() -> list[str]:
    """Names accepted by create_inference_backend()."""
    return list(_PROVIDERS)


def create_inference_backend(
    provider: str = "openrouter",
    api_key: str | None = None,
    site_url: str | None = None,
) -> IInferenceBackend:
    """
    Create the inference backend for a provider name.

    Raises:
        ValueError: If the provider is unknown, or the Anthropic key is missing.
    """
    provider = provider.lower()
    if provider == "openrouter":
        from .openrouter import OpenRouterBackend

        return OpenRouterBackend(api_key=api_key, site_url=site_url)
    if provider == "anthropic":
        from .anthropic_provider import AnthropicBackend

        return AnthropicBackend(api_key=api_key)

    raise ValueError(f"Unknown provider: {provider}. Available: {get_available_providers()}")
