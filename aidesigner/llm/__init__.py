"""Completion layer for prompt-driven layout generation.

Main components:
- LayoutGenerator: Orchestrates prompt building, completion calls and parsing
- CompletionProvider: Abstract interface for completion providers
- create_completion_provider: Factory function for creating providers

Supported providers:
- Gemini (REST over httpx)
- OpenAI (GPT-4.x)
- Anthropic (Claude)

Example:
    >>> from aidesigner.llm import LayoutGenerator, create_completion_provider
    >>> generator = LayoutGenerator(create_completion_provider("gemini"))
    >>> output = await generator.generate("login screen", catalog)
"""

from .backend import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OPENAI_MODEL,
    AnthropicProvider,
    AuthenticationError,
    CompletionProvider,
    ContentFilteredError,
    GeminiProvider,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    NetworkError,
    OpenAIProvider,
    ProviderError,
    ProviderType,
    RateLimitError,
    ServerError,
    create_completion_provider,
)
from .generator import (
    GenerationOutput,
    GenerationStats,
    GeneratorConfig,
    LayoutGenerator,
    RetryConfig,
    RetryStrategy,
)

__all__ = [
    # Main API
    "LayoutGenerator",
    "create_completion_provider",
    # Generator types
    "GeneratorConfig",
    "GenerationStats",
    "GenerationOutput",
    "RetryConfig",
    "RetryStrategy",
    # Provider types
    "CompletionProvider",
    "GenerationConfig",
    "GenerationResult",
    "ProviderType",
    "GeminiProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    # Defaults
    "DEFAULT_GEMINI_MODEL",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_ANTHROPIC_MODEL",
    # Exceptions
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ContentFilteredError",
    "ServerError",
    "NetworkError",
    "InvalidResponseError",
]
