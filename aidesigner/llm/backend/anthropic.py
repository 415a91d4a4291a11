"""Anthropic Claude backend implementation.

Note: Anthropic has no native JSON mode. JSON requests are reinforced in the
prompt and the layout generator extracts the object from the reply.
"""

import logging
from typing import Any

from ...config import EnvVar, get_environment
from .base import (
    AuthenticationError,
    CompletionProvider,
    GenerationConfig,
    GenerationResult,
)
from .errors import classify_sdk_error

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5"

JSON_ONLY_SUFFIX = (
    "IMPORTANT: Respond with valid JSON only. "
    "Do not include any text, explanation, or markdown formatting "
    "before or after the JSON object."
)


class AnthropicProvider(CompletionProvider):
    """Anthropic Claude completion provider.

    Environment:
        ANTHROPIC_API_KEY: API key (required if not passed to constructor).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        timeout: float | None = None,
    ):
        """Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key. Falls back to ANTHROPIC_API_KEY env var.
            model: Model name (claude-sonnet-4-5, claude-opus-4-1, etc.).
            timeout: Request timeout in seconds. Falls back to COMPLETION_TIMEOUT.

        Raises:
            AuthenticationError: If no API key available.
        """
        self._api_key = api_key or get_environment(EnvVar.ANTHROPIC_API_KEY)
        if not self._api_key:
            raise AuthenticationError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self._model = model
        self._timeout = timeout or get_environment(EnvVar.COMPLETION_TIMEOUT)
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize the async Anthropic client.

        Returns:
            AsyncAnthropic client instance.

        Raises:
            ImportError: If anthropic package not installed.
        """
        if self._client is None:
            try:
                import anthropic

                self._client = anthropic.AsyncAnthropic(
                    api_key=self._api_key,
                    timeout=self._timeout,
                    max_retries=0,
                )
            except ImportError as e:
                raise ImportError(
                    "anthropic package required. Install with: pip install anthropic"
                ) from e
        return self._client

    @property
    def model_name(self) -> str:
        """Get the model identifier."""
        return self._model

    @property
    def provider(self) -> str:
        """Get the provider identifier."""
        return "anthropic"

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text using the Anthropic messages API.

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

        effective_prompt = f"{prompt}\n\n{JSON_ONLY_SUFFIX}" if config.json_mode else prompt

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": effective_prompt}],
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }
        if system_prompt:
            kwargs["system"] = system_prompt
        if config.stop_sequences:
            kwargs["stop_sequences"] = config.stop_sequences

        try:
            response = await client.messages.create(**kwargs)
        except Exception as e:
            raise classify_sdk_error(e) from e

        content = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )

        return GenerationResult(
            content=content.strip(),
            finish_reason=response.stop_reason or "unknown",
            usage={
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
            },
            model=response.model,
            raw_response=response,
        )


__all__ = ["DEFAULT_ANTHROPIC_MODEL", "AnthropicProvider"]
