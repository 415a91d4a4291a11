"""OpenAI GPT backend implementation.

Supports GPT-4.x and other chat-completion models via the OpenAI API.
"""

import logging
from typing import Any

from ...config import EnvVar, get_environment
from .base import (
    AuthenticationError,
    CompletionProvider,
    ContentFilteredError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
)
from .errors import classify_sdk_error

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4.1-mini"


class OpenAIProvider(CompletionProvider):
    """OpenAI GPT completion provider.

    Environment:
        OPENAI_API_KEY: API key (required if not passed to constructor).

    Example:
        >>> provider = OpenAIProvider(model="gpt-4.1")
        >>> result = await provider.complete("Generate a login screen as JSON")
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            model: Model name (gpt-4.1, gpt-4.1-mini, etc.).
            base_url: Optional custom API endpoint.
            timeout: Request timeout in seconds. Falls back to COMPLETION_TIMEOUT.

        Raises:
            AuthenticationError: If no API key available.
        """
        self._api_key = api_key or get_environment(EnvVar.OPENAI_API_KEY)
        if not self._api_key:
            raise AuthenticationError(
                "OpenAI API key required. Set OPENAI_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self._model = model
        self._base_url = base_url
        self._timeout = timeout or get_environment(EnvVar.COMPLETION_TIMEOUT)
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize the async OpenAI client.

        Returns:
            AsyncOpenAI client instance.

        Raises:
            ImportError: If openai package not installed.
        """
        if self._client is None:
            try:
                from openai import AsyncOpenAI

                # Retries are owned by the layout generator.
                self._client = AsyncOpenAI(
                    api_key=self._api_key,
                    base_url=self._base_url,
                    timeout=self._timeout,
                    max_retries=0,
                )
            except ImportError as e:
                raise ImportError(
                    "openai package required. Install with: pip install openai"
                ) from e
        return self._client

    @property
    def model_name(self) -> str:
        """Get the model identifier."""
        return self._model

    @property
    def provider(self) -> str:
        """Get the provider identifier."""
        return "openai"

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text using the OpenAI chat completions API.

        Args:
            prompt: User prompt text.
            system_prompt: Optional system instruction.
            config: Generation configuration.

        Returns:
            GenerationResult with content and metadata.

        Raises:
            ProviderError: Subclass matching the SDK failure.
        """
        config = config or GenerationConfig()
        client = self._get_client()

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "top_p": config.top_p,
        }
        if config.json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if config.stop_sequences:
            kwargs["stop"] = config.stop_sequences

        try:
            response = await client.chat.completions.create(**kwargs)
        except Exception as e:
            raise classify_sdk_error(e) from e

        if not response.choices:
            raise InvalidResponseError("No choices returned from API")

        choice = response.choices[0]
        if choice.finish_reason == "content_filter":
            raise ContentFilteredError("Content was blocked by safety filters.")

        usage = response.usage
        return GenerationResult(
            content=(choice.message.content or "").strip(),
            finish_reason=choice.finish_reason or "unknown",
            usage={
                "prompt_tokens": usage.prompt_tokens if usage else 0,
                "completion_tokens": usage.completion_tokens if usage else 0,
                "total_tokens": usage.total_tokens if usage else 0,
            },
            model=response.model,
            raw_response=response,
        )


__all__ = ["DEFAULT_OPENAI_MODEL", "OpenAIProvider"]
