"""Completion provider backends.

Example:
    >>> from aidesigner.llm.backend import create_completion_provider
    >>> provider = create_completion_provider("gemini", api_key="...")
"""

from .anthropic import DEFAULT_ANTHROPIC_MODEL, AnthropicProvider
from .base import (
    CONNECTION_TEST_PROMPT,
    CONNECTION_TEST_REPLY,
    AuthenticationError,
    CompletionProvider,
    ContentFilteredError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    NetworkError,
    ProviderError,
    RateLimitError,
    ServerError,
)
from .errors import classify_sdk_error
from .factory import ProviderType, create_completion_provider
from .gemini import DEFAULT_GEMINI_MODEL, GeminiProvider
from .openai import DEFAULT_OPENAI_MODEL, OpenAIProvider

__all__ = [
    # Base
    "CompletionProvider",
    "GenerationConfig",
    "GenerationResult",
    "CONNECTION_TEST_PROMPT",
    "CONNECTION_TEST_REPLY",
    # Providers
    "GeminiProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "DEFAULT_GEMINI_MODEL",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_ANTHROPIC_MODEL",
    # Factory
    "ProviderType",
    "create_completion_provider",
    # Exceptions
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ContentFilteredError",
    "ServerError",
    "NetworkError",
    "InvalidResponseError",
    "classify_sdk_error",
]
