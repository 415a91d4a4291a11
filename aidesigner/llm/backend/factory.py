"""Provider factory for creating completion providers by name.

Provides a unified entry point for creating any supported provider.
"""

from enum import Enum

from ...config import EnvVar, get_environment
from .base import CompletionProvider


class ProviderType(str, Enum):
    """Supported completion providers."""

    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


def create_completion_provider(
    provider: str | ProviderType | None = None,
    *,
    model: str | None = None,
    api_key: str | None = None,
    **kwargs,
) -> CompletionProvider:
    """Create a completion provider.

    Args:
        provider: Provider name. Falls back to LLM_PROVIDER (default "gemini").
        model: Model name. Falls back to LLM_MODEL, then the provider default.
        api_key: API key. Falls back to the provider's environment variable.
        **kwargs: Additional arguments passed to the provider constructor
            (e.g., timeout, base_url).

    Returns:
        Configured CompletionProvider instance.

    Raises:
        ValueError: If the provider name is unknown.
        AuthenticationError: If no API key is available.

    Example:
        >>> provider = create_completion_provider()
        >>> provider = create_completion_provider("openai", model="gpt-4.1")
        >>> provider = create_completion_provider(api_key="stored-key")
    """
    name = provider or get_environment(EnvVar.LLM_PROVIDER)
    try:
        provider_type = ProviderType(str(name).lower())
    except ValueError:
        supported = ", ".join(p.value for p in ProviderType)
        raise ValueError(
            f"Unsupported provider: {name}. Supported: {supported}"
        ) from None

    model = model or get_environment(EnvVar.LLM_MODEL)
    if model:
        kwargs["model"] = model

    if provider_type == ProviderType.GEMINI:
        from .gemini import GeminiProvider

        return GeminiProvider(api_key=api_key, **kwargs)

    if provider_type == ProviderType.OPENAI:
        from .openai import OpenAIProvider

        return OpenAIProvider(api_key=api_key, **kwargs)

    from .anthropic import AnthropicProvider

    return AnthropicProvider(api_key=api_key, **kwargs)


__all__ = ["ProviderType", "create_completion_provider"]
