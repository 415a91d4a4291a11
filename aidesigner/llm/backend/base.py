"""Abstract base class for completion providers.

Defines the interface that every provider implementation must follow and the
error hierarchy the layout generator uses to decide whether to retry.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

CONNECTION_TEST_PROMPT = 'Say "Hello, API connection successful!" and nothing else.'
CONNECTION_TEST_REPLY = "Hello, API connection successful!"


@dataclass
class GenerationConfig:
    """Configuration for a completion call.

    Attributes:
        temperature: Sampling temperature (0.0-2.0). Lower = more deterministic.
        max_tokens: Maximum tokens to generate in response.
        json_mode: Whether to ask the provider for JSON output.
        stop_sequences: Optional sequences that stop generation.
        top_p: Nucleus sampling parameter (0.0-1.0).
    """

    temperature: float = 0.7
    max_tokens: int = 4000
    json_mode: bool = True
    stop_sequences: list[str] = field(default_factory=list)
    top_p: float = 0.95


@dataclass
class GenerationResult:
    """Result from a completion call.

    Attributes:
        content: Generated text content.
        finish_reason: Why generation stopped ('stop', 'length', 'SAFETY', ...).
        usage: Token usage dict (prompt_tokens, completion_tokens, total_tokens).
        model: Model identifier that was used.
        raw_response: Provider-specific raw response for debugging.
    """

    content: str
    finish_reason: str
    usage: dict[str, int]
    model: str
    raw_response: Any = None


class CompletionProvider(ABC):
    """Abstract interface for text completion providers.

    Implementations call a hosted model (Gemini, OpenAI, Anthropic) and map
    provider failures onto the ``ProviderError`` hierarchy.

    Example:
        >>> provider = GeminiProvider(api_key="...")
        >>> result = await provider.complete("Generate a login screen")
        >>> print(result.content)
    """

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text from a prompt.

        Args:
            prompt: User prompt text.
            system_prompt: Optional system instruction for context.
            config: Generation configuration options.

        Returns:
            GenerationResult with generated content and metadata.

        Raises:
            ProviderError: If the call fails. ``retryable`` tells the caller
                whether trying again can help.
        """

    async def test_connection(self) -> bool:
        """Check that the provider answers with the configured credentials.

        Sends a fixed prompt and expects the fixed reply back. Any provider
        error counts as a failed test.

        Returns:
            True if the reply contains the expected sentence.
        """
        try:
            result = await self.complete(
                CONNECTION_TEST_PROMPT,
                config=GenerationConfig(temperature=0.0, max_tokens=64, json_mode=False),
            )
        except ProviderError:
            return False
        return CONNECTION_TEST_REPLY in result.content

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model identifier.

        Returns:
            String model name (e.g., 'gemini-1.5-flash', 'gpt-4.1-mini').
        """

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get the provider identifier.

        Returns:
            String provider name (e.g., 'gemini', 'openai').
        """

    @property
    def name(self) -> str:
        """Get provider identifier for logging.

        Returns:
            String in format 'provider:model'.
        """
        return f"{self.provider}:{self.model_name}"


class ProviderError(Exception):
    """Base exception for completion provider errors.

    Attributes:
        retryable: Whether repeating the call may succeed.
    """

    retryable: bool = True

    def __init__(self, message: str, retryable: bool | None = None):
        super().__init__(message)
        if retryable is not None:
            self.retryable = retryable


class RateLimitError(ProviderError):
    """Raised when the provider's quota or rate limit is exceeded.

    Attributes:
        retry_after: Suggested wait time in seconds before retry.
    """

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when the API key is missing or rejected."""

    retryable = False


class ContentFilteredError(ProviderError):
    """Raised when the provider blocks the prompt or the answer."""

    retryable = False


class ServerError(ProviderError):
    """Raised on a 5xx response."""


class NetworkError(ProviderError):
    """Raised on timeouts and connection failures."""


class InvalidResponseError(ProviderError):
    """Raised when the response has no usable content."""


__all__ = [
    "CONNECTION_TEST_PROMPT",
    "CONNECTION_TEST_REPLY",
    "CompletionProvider",
    "GenerationConfig",
    "GenerationResult",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ContentFilteredError",
    "ServerError",
    "NetworkError",
    "InvalidResponseError",
]
